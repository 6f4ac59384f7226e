"""Tests for structlog setup."""

from __future__ import annotations

import logging

import pytest
import structlog

from stackscan.core.logging import setup_logging


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


class TestSetupLogging:
    def test_level_from_env(self, monkeypatch):
        monkeypatch.setenv("STACKSCAN_LOG_LEVEL", "warning")
        setup_logging()
        assert logging.getLogger("stackscan").level == logging.WARNING

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("STACKSCAN_LOG_LEVEL", "WARNING")
        setup_logging("debug")
        assert logging.getLogger("stackscan").level == logging.DEBUG

    def test_json_to_stderr(self, monkeypatch, capsys):
        monkeypatch.setenv("STACKSCAN_LOG_FORMAT", "json")
        setup_logging("INFO")
        structlog.get_logger("stackscan.test").info("probe.done", source_files=3)

        captured = capsys.readouterr()
        assert captured.out == ""
        assert '"event": "probe.done"' in captured.err
        assert '"source_files": 3' in captured.err

    def test_third_party_info_suppressed(self, capsys):
        setup_logging("DEBUG")
        logging.getLogger("urllib3.connectionpool").info("starting connection")
        structlog.get_logger("stackscan.test").debug("ecosystem.detected")

        err = capsys.readouterr().err
        assert "starting connection" not in err
        assert "ecosystem.detected" in err

    def test_unknown_format_falls_back_to_console(self, monkeypatch, capsys):
        monkeypatch.setenv("STACKSCAN_LOG_FORMAT", "xml")
        setup_logging("INFO")
        structlog.get_logger("stackscan.test").info("analyzer.done")

        err = capsys.readouterr().err
        assert "analyzer.done" in err
        assert '"event"' not in err
