"""Tests for JSON serialization of reports."""

from __future__ import annotations

import json

from stackscan.analyzer import analyze
from stackscan.models import DetectedStack, RecognizedTech
from stackscan.schemas import dump_detected_stack, dump_report, load_detected_stack


class TestDumpReport:
    def test_report_json(self, make_project):
        root = make_project(
            {
                "composer.json": {"require": {"php": "^8.2", "laravel/framework": "^11.0"}},
                "tests": None,
            }
        )
        data = json.loads(dump_report(analyze(root)))

        assert data["project_path"] == str(root.resolve())
        assert data["detection"]["ecosystem"] == "php"
        assert data["detection"]["manifest_files"] == [
            {"path": "composer.json", "type": "composer.json", "ecosystem": "php"}
        ]
        assert data["manifest"]["engines"] == {"php": "^8.2"}
        assert data["framework"] == {"name": "laravel", "version": "11.0", "variant": None}
        assert data["structure"]["has_tests_dir"] is True
        assert data["structure"]["top_level_dirs"] == ["tests"]
        assert data["detected"] == {"recognized": {}, "unrecognized": []}

    def test_null_framework(self, make_project):
        root = make_project({"requirements.txt": "requests\n"})
        data = json.loads(dump_report(analyze(root), indent=None))
        assert data["framework"] is None


class TestDetectedStackRoundTrip:
    def test_round_trip(self):
        stack = DetectedStack(
            recognized={
                "prisma": RecognizedTech("prisma", "5.8.0", "orm", ("prisma", "@prisma/client")),
                "eslint": RecognizedTech("eslint", None, "linter", ("eslint",)),
            },
            unrecognized=["zeta", "alpha"],
        )
        assert load_detected_stack(dump_detected_stack(stack)) == stack
