"""Shared manifest I/O helpers for ecosystem adapters."""

from __future__ import annotations

import json
import re
import sys
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from stackscan.exceptions import ManifestMalformed, ManifestNotFound

# justfile recipe: "build:" / "test arg:"
_JUST_TARGET_RE = re.compile(r"^(\w[\w-]*)(?:\s+[^:=\n]*)?\s*:(?!=)", re.MULTILINE)

# Makefile target: "build:" but not "VAR := value"
_MAKE_TARGET_RE = re.compile(r"^([a-zA-Z][\w-]*)\s*:(?!=)", re.MULTILINE)


def read_manifest(path: Path) -> str:
    """Read a manifest as UTF-8 text.

    Raises :class:`ManifestNotFound` if absent and
    :class:`ManifestMalformed` if it is not valid UTF-8.
    """
    if not path.is_file():
        raise ManifestNotFound(path)
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ManifestMalformed(path, f"not valid UTF-8: {exc}") from exc


def load_json(path: Path) -> dict[str, Any]:
    """Parse a JSON manifest whose top level must be an object."""
    content = read_manifest(path)
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ManifestMalformed(path, f"invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ManifestMalformed(path, "top-level JSON value is not an object")
    return data


def load_toml(path: Path) -> dict[str, Any]:
    """Parse a TOML manifest."""
    content = read_manifest(path)
    try:
        return tomllib.loads(content)
    except tomllib.TOMLDecodeError as exc:
        raise ManifestMalformed(path, f"invalid TOML: {exc}") from exc


def as_table(value: Any) -> dict[str, Any]:
    """Return *value* if it is a table, else an empty dict."""
    return value if isinstance(value, dict) else {}


def section_table(path: Path, data: dict[str, Any], key: str) -> dict[str, Any]:
    """``data[key]`` as a table: missing means empty, any other type is malformed."""
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ManifestMalformed(path, f"{key} must be a table")
    return value


def section_list(path: Path, data: dict[str, Any], key: str) -> list[Any]:
    """``data[key]`` as an array: missing means empty, any other type is malformed."""
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ManifestMalformed(path, f"{key} must be a list")
    return value


def first_existing(root: Path, names: tuple[str, ...]) -> Path | None:
    for name in names:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def parse_task_targets(project_root: Path) -> dict[str, str]:
    """Collect task-runner targets as scripts.

    A justfile wins over a Makefile; targets map to ``just <t>`` / ``make <t>``.
    """
    justfile = first_existing(project_root, ("justfile", "Justfile", ".justfile"))
    if justfile is not None:
        content = justfile.read_text(encoding="utf-8", errors="replace")
        return {m.group(1): f"just {m.group(1)}" for m in _JUST_TARGET_RE.finditer(content)}

    makefile = first_existing(project_root, ("Makefile", "makefile", "GNUmakefile"))
    if makefile is not None:
        content = makefile.read_text(encoding="utf-8", errors="replace")
        return {m.group(1): f"make {m.group(1)}" for m in _MAKE_TARGET_RE.finditer(content)}

    return {}
