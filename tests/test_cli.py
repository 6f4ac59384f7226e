"""Tests for CLI commands."""

from __future__ import annotations

import json
import logging

import pytest
import structlog
from click.testing import CliRunner

from stackscan.cli import main

QUIET = {"STACKSCAN_LOG_LEVEL": "WARNING"}


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


@pytest.fixture
def flask_project(make_project):
    return make_project({"requirements.txt": "flask==3.0.0\npytest==8.0.0\nleft-pad==1.0\n"})


class TestDetect:
    def test_detect(self, flask_project):
        result = CliRunner().invoke(main, ["detect", str(flask_project)], env=QUIET)
        assert result.exit_code == 0
        assert "Ecosystem: python" in result.output
        assert "Confidence: medium" in result.output
        assert "Reason: Found requirements.txt" in result.output

    def test_detect_nothing(self, tmp_path):
        result = CliRunner().invoke(main, ["detect", str(tmp_path)], env=QUIET)
        assert result.exit_code == 1
        assert "Could not detect project ecosystem" in result.output

    def test_verbose(self, flask_project):
        result = CliRunner().invoke(main, ["-v", "detect", str(flask_project)])
        assert result.exit_code == 0


class TestAnalyze:
    def test_summary(self, flask_project):
        result = CliRunner().invoke(main, ["analyze", str(flask_project)], env=QUIET)
        assert result.exit_code == 0
        assert "Framework: flask 3.0.0" in result.output
        assert "testing: pytest 8.0.0" in result.output
        assert "Unrecognized (1):" in result.output
        assert "left-pad" in result.output

    def test_json(self, flask_project):
        result = CliRunner().invoke(main, ["analyze", "--json", str(flask_project)], env=QUIET)
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["framework"]["name"] == "flask"
        assert data["detected"]["unrecognized"] == ["left-pad"]

    def test_unsupported(self, make_project):
        root = make_project({"Gemfile": ""})
        result = CliRunner().invoke(main, ["analyze", str(root)], env=QUIET)
        assert result.exit_code == 1
        assert "not yet supported" in result.output


class TestPatterns:
    def test_python(self):
        result = CliRunner().invoke(main, ["patterns", "python"], env=QUIET)
        assert result.exit_code == 0
        assert "Source extensions: py, pyi" in result.output
        assert "__pycache__" in result.output

    def test_unknown(self):
        result = CliRunner().invoke(main, ["patterns", "ruby"], env=QUIET)
        assert result.exit_code == 1
        assert "not yet supported" in result.output
