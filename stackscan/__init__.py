"""stackscan: multi-ecosystem technology stack detection from dependency manifests."""

__version__ = "0.1.0"

from stackscan.analyzer import analyze, analyze_project
from stackscan.ecosystem import detect_ecosystem
from stackscan.exceptions import (
    ManifestMalformed,
    ManifestNotFound,
    NoEcosystemFound,
    StackScanError,
    UnsupportedEcosystem,
)
from stackscan.models import (
    DetectedStack,
    EcosystemDetection,
    FilePatterns,
    FrameworkInfo,
    ManifestResult,
    RecognizedTech,
    StackReport,
    StructureFacts,
)
from stackscan.probe import StructureProbe
from stackscan.registry import EcosystemAdapter, register_adapter, resolve, supported_ecosystems

__all__ = [
    "DetectedStack",
    "EcosystemAdapter",
    "EcosystemDetection",
    "FilePatterns",
    "FrameworkInfo",
    "ManifestMalformed",
    "ManifestNotFound",
    "ManifestResult",
    "NoEcosystemFound",
    "RecognizedTech",
    "StackReport",
    "StackScanError",
    "StructureFacts",
    "StructureProbe",
    "UnsupportedEcosystem",
    "analyze",
    "analyze_project",
    "detect_ecosystem",
    "register_adapter",
    "resolve",
    "supported_ecosystems",
]
