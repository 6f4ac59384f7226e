"""Shared pytest fixtures for stackscan tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest


@pytest.fixture
def make_project(tmp_path: Path):
    """Lay out a project tree under ``tmp_path``.

    Values are file contents; a dict value is dumped as JSON and ``None``
    creates an empty directory.
    """

    def _make(files: dict) -> Path:
        for rel, content in files.items():
            path = tmp_path / rel
            if content is None:
                path.mkdir(parents=True, exist_ok=True)
                continue
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, dict):
                content = json.dumps(content)
            path.write_text(content)
        return tmp_path

    return _make
