"""Analyzer — detect, parse, probe and classify one project root."""

from __future__ import annotations

import asyncio
from pathlib import Path

import structlog

# Ensure adapters are registered before any analysis runs.
import stackscan.adapters  # noqa: F401
from stackscan.ecosystem import detect_ecosystem
from stackscan.models import StackReport, StructureFacts
from stackscan.probe import StructureProbe
from stackscan.registry import resolve

log = structlog.get_logger("stackscan.analyzer")


async def analyze_project(
    project_root: str | Path,
    facts: StructureFacts | None = None,
    probe: StructureProbe | None = None,
) -> StackReport:
    """Full pipeline: detect ecosystem -> resolve adapter -> parse + probe -> classify.

    Manifest parsing and the structure probe run concurrently. Pass *facts*
    to skip probing (e.g. when the caller already holds a fact sheet).
    Every :class:`~stackscan.exceptions.StackScanError` propagates.
    """
    root = Path(project_root)
    detection = detect_ecosystem(root)
    adapter = resolve(detection.ecosystem)
    log.info(
        "analyzer.detected",
        path=str(root),
        ecosystem=detection.ecosystem,
        confidence=detection.confidence,
    )

    if facts is None:
        probe = probe or StructureProbe()
        manifest, facts = await asyncio.gather(
            asyncio.to_thread(adapter.parse_manifest, root),
            probe.probe(root, detection.ecosystem),
        )
    else:
        manifest = await asyncio.to_thread(adapter.parse_manifest, root)

    framework = adapter.detect_framework(manifest.dependencies, manifest.dev_dependencies, facts)
    detected = adapter.classify_stack(manifest.dependencies, manifest.dev_dependencies, facts)

    log.info(
        "analyzer.done",
        path=str(root),
        framework=framework.name if framework else None,
        recognized=len(detected.recognized),
        unrecognized=len(detected.unrecognized),
    )
    return StackReport(
        project_path=str(root.resolve()),
        detection=detection,
        manifest=manifest,
        framework=framework,
        structure=facts,
        detected=detected,
    )


def analyze(project_root: str | Path, facts: StructureFacts | None = None) -> StackReport:
    """Synchronous wrapper around :func:`analyze_project`."""
    return asyncio.run(analyze_project(project_root, facts))
