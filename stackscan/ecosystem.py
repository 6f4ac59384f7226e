"""Ecosystem detection from manifest marker files."""

from __future__ import annotations

import fnmatch
from pathlib import Path

import structlog

from stackscan.exceptions import NoEcosystemFound
from stackscan.models import EcosystemDetection, ManifestFile

log = structlog.get_logger(__name__)

# Detection rules: (candidate files, ecosystem, confidence)
# Ordered by priority: the first tuple with an existing file wins, even if
# lower tuples would also match (leftovers from a toolchain migration).
MANIFEST_CHECKS: list[tuple[tuple[str, ...], str, str]] = [
    (("package.json",), "javascript", "high"),
    (("pyproject.toml",), "python", "high"),
    (("requirements.txt", "Pipfile", "setup.py"), "python", "medium"),
    (("Cargo.toml",), "rust", "high"),
    (("go.mod",), "go", "high"),
    (("pom.xml", "build.gradle", "build.gradle.kts"), "java", "high"),
    (("composer.json",), "php", "high"),
    (("Gemfile",), "ruby", "high"),
    (("*.gemspec",), "ruby", "medium"),
]


def _is_glob(candidate: str) -> bool:
    return any(ch in candidate for ch in "*?[")


def detect_ecosystem(project_root: str | Path) -> EcosystemDetection:
    """Detect which ecosystem *project_root* belongs to.

    Raises :class:`NoEcosystemFound` when nothing in :data:`MANIFEST_CHECKS`
    exists at the root (or the root is not a directory).
    """
    root = Path(project_root)
    if not root.is_dir():
        raise NoEcosystemFound(root)

    entries: list[str] | None = None

    for candidates, ecosystem, confidence in MANIFEST_CHECKS:
        for candidate in candidates:
            if _is_glob(candidate):
                if entries is None:
                    entries = sorted(p.name for p in root.iterdir() if p.is_file())
                matches = fnmatch.filter(entries, candidate)
                if matches:
                    return _detected(ecosystem, confidence, matches)
            elif (root / candidate).is_file():
                return _detected(ecosystem, confidence, [candidate])

    log.info("ecosystem.not_found", path=str(root))
    raise NoEcosystemFound(root)


def _detected(ecosystem: str, confidence: str, files: list[str]) -> EcosystemDetection:
    log.info("ecosystem.detected", ecosystem=ecosystem, confidence=confidence, files=files)
    return EcosystemDetection(
        ecosystem=ecosystem,
        confidence=confidence,
        manifest_files=[ManifestFile(path=f, type=f, ecosystem=ecosystem) for f in files],
        reason=f"Found {', '.join(files)}",
    )
