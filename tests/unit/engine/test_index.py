# tests/unit/engine/test_index.py
"""Tests for the reference index."""

import pytest

from retention.engine.index import build_reference_index
from tests.fixtures.factories import make_environment, make_project, make_release


class TestReferenceIndex:
    def test_lookups_by_id(self) -> None:
        project = make_project("P1")
        environment = make_environment("E1")
        release = make_release("R1", "P1")

        index = build_reference_index([project], [environment], [release])

        assert index.projects_by_id["P1"] is project
        assert index.environments_by_id["E1"] is environment
        assert index.releases_by_id["R1"] is release

    def test_keys_are_case_sensitive(self) -> None:
        index = build_reference_index([make_project("P1")], [], [])

        assert "p1" not in index.projects_by_id

    def test_mappings_are_read_only(self) -> None:
        index = build_reference_index([make_project("P1")], [], [])

        with pytest.raises(TypeError):
            index.projects_by_id["P2"] = make_project("P2")  # type: ignore[index]

    def test_empty_inputs(self) -> None:
        index = build_reference_index([], [], [])

        assert len(index.projects_by_id) == 0
        assert len(index.environments_by_id) == 0
        assert len(index.releases_by_id) == 0
