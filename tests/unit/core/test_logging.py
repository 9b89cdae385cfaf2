# tests/unit/core/test_logging.py
"""Tests for structlog configuration."""

import json
import logging

import pytest
import structlog

from retention.core.logging import configure_logging, get_logger


class TestConfigureLogging:
    def test_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(json_output=True, level="INFO")

        structlog.get_logger("test").info("dataset_loaded", releases=3)

        line = capsys.readouterr().err.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "dataset_loaded"
        assert record["releases"] == 3
        assert record["level"] == "info"
        assert "_record" not in record

    def test_stdlib_loggers_share_format(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(json_output=True, level="INFO")

        logging.getLogger("third.party").warning("plain message")

        record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert record["event"] == "plain message"

    def test_level_filters(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(json_output=True, level="WARNING")

        get_logger("test").info("hidden")

        assert "hidden" not in capsys.readouterr().err

    def test_console_output_goes_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(json_output=False, level="DEBUG")

        get_logger("test").debug("visible_event", key="value")

        captured = capsys.readouterr()
        assert "visible_event" in captured.err
        assert "key=value" in captured.err
        assert captured.out == ""

    def test_noisy_loggers_never_below_warning(self) -> None:
        configure_logging(level="DEBUG")

        assert logging.getLogger("dynaconf").level == logging.WARNING
