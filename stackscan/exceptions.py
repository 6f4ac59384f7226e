"""Custom exceptions for stackscan."""

from __future__ import annotations

from pathlib import Path


class StackScanError(Exception):
    """Base exception for all stack detection errors."""


class NoEcosystemFound(StackScanError):
    """Raised when no recognized manifest file exists at the project root."""

    def __init__(self, project_root: str | Path):
        self.project_root = str(project_root)
        super().__init__(
            f"Could not detect project ecosystem in {self.project_root}. "
            "No recognized manifest files found (package.json, pyproject.toml, "
            "Cargo.toml, go.mod, pom.xml, build.gradle, composer.json, Gemfile)."
        )


class UnsupportedEcosystem(StackScanError):
    """Raised when an ecosystem was detected but no adapter is registered for it."""

    def __init__(self, ecosystem: str, supported: list[str] | None = None):
        self.ecosystem = ecosystem
        self.supported = sorted(supported or [])
        super().__init__(
            f'Ecosystem "{ecosystem}" is not yet supported. '
            f"Currently supported: {', '.join(self.supported) or 'none'}"
        )


class ManifestNotFound(StackScanError):
    """Raised when the manifest an adapter expects is absent."""

    def __init__(self, path: str | Path):
        self.path = str(path)
        super().__init__(f"Manifest not found: {self.path}")


class ManifestMalformed(StackScanError):
    """Raised when a manifest exists but cannot be parsed as its expected format."""

    def __init__(self, path: str | Path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Malformed manifest {self.path}: {reason}")
