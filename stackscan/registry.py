"""Adapter registry — map an ecosystem identifier to its adapter."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Protocol, runtime_checkable

from stackscan.exceptions import UnsupportedEcosystem
from stackscan.models import (
    DetectedStack,
    FilePatterns,
    FrameworkInfo,
    ManifestResult,
    StructureFacts,
)


@runtime_checkable
class EcosystemAdapter(Protocol):
    """Interface that every ecosystem adapter must satisfy."""

    ecosystem: str

    def file_patterns(self) -> FilePatterns: ...

    def parse_manifest(self, project_root: Path) -> ManifestResult: ...

    def detect_framework(
        self,
        deps: Mapping[str, str],
        dev_deps: Mapping[str, str],
        facts: StructureFacts,
    ) -> FrameworkInfo | None: ...

    def classify_stack(
        self,
        deps: Mapping[str, str],
        dev_deps: Mapping[str, str],
        facts: StructureFacts | None = None,
    ) -> DetectedStack: ...


ADAPTER_REGISTRY: dict[str, EcosystemAdapter] = {}


def register_adapter(adapter: EcosystemAdapter) -> None:
    """Register an adapter instance by its ecosystem."""
    ADAPTER_REGISTRY[adapter.ecosystem] = adapter


def supported_ecosystems() -> list[str]:
    return sorted(ADAPTER_REGISTRY)


def resolve(ecosystem: str) -> EcosystemAdapter:
    """Return the adapter for *ecosystem*.

    Raises :class:`UnsupportedEcosystem` for ecosystems the detector knows
    about but no adapter implements (e.g. ruby).
    """
    adapter = ADAPTER_REGISTRY.get(ecosystem)
    if adapter is None:
        raise UnsupportedEcosystem(ecosystem, supported_ecosystems())
    return adapter
