# tests/conftest.py
"""Shared test fixtures and helpers.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

import logging
import os
from collections.abc import Iterator

import pytest
import structlog
from hypothesis import Phase, Verbosity, settings

from retention.contracts import Dataset
from tests.fixtures.factories import scenario_dataset

# =============================================================================
# Logging Isolation
# =============================================================================


def _quiet_structlog() -> None:
    structlog.reset_defaults()
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING))


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Undo configure_logging() calls made during a test.

    The CLI callback installs a stderr handler bound to whatever stream
    CliRunner provided. Left in place, later tests would write to a
    closed stream.

    Between tests structlog only emits WARNING and above, so debug lines
    from the code under test never reach captured stdout.
    """
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    _quiet_structlog()
    yield
    root.handlers = handlers
    root.setLevel(level)
    _quiet_structlog()


# =============================================================================
# Shared Datasets
# =============================================================================


@pytest.fixture
def basic_dataset() -> Dataset:
    """One project, two environments, three releases, one bad deployment."""
    return scenario_dataset()


# =============================================================================
# Hypothesis Profiles
# =============================================================================

# CI profile: Fast feedback, default
settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

# Nightly profile: Thorough testing for scheduled runs
settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Debug profile: Minimal examples with verbose output for debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Load profile from environment, default to "ci"
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))
