"""Data models for the stack detection engine."""

from __future__ import annotations

from dataclasses import dataclass, field

# Version sentinels stored in dependency maps
UNSPECIFIED = "unspecified"  # manifest declares no version at all
UNKNOWN = "unknown"  # wildcard or unresolvable placeholder

DependencyMap = dict[str, str]


@dataclass(frozen=True)
class ManifestFile:
    """A manifest file that triggered ecosystem detection."""

    path: str  # relative to project root
    type: str
    ecosystem: str


@dataclass(frozen=True)
class EcosystemDetection:
    """Result of ecosystem sniffing."""

    ecosystem: str  # "javascript" | "python" | "rust" | "go" | "java" | "php" | "ruby"
    confidence: str  # "high" | "medium" | "low"
    manifest_files: list[ManifestFile]
    reason: str


@dataclass(frozen=True)
class FilePatterns:
    """Per-ecosystem filesystem walk configuration."""

    source_extensions: frozenset[str]  # without leading dot, e.g. {"py", "pyi"}
    ignore_dirs: frozenset[str]
    manifest_files: tuple[str, ...]


@dataclass(frozen=True)
class ManifestResult:
    """Uniform output of every manifest parser."""

    project_name: str
    project_version: str
    dependencies: DependencyMap = field(default_factory=dict)
    dev_dependencies: DependencyMap = field(default_factory=dict)
    peer_dependencies: DependencyMap = field(default_factory=dict)  # peer (npm) / build (cargo, maven plugins)
    scripts: dict[str, str] = field(default_factory=dict)
    engines: dict[str, str] = field(default_factory=dict)
    package_manager: str | None = None
    workspaces: list[str] | None = None
    manifest_files: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class FrameworkInfo:
    """The application framework identified for a project."""

    name: str
    version: str  # "unknown" when the declared version cannot be resolved
    variant: str | None = None  # e.g. "app-router", "inertia", "api-platform"


@dataclass(frozen=True)
class RecognizedTech:
    """One canonical technology recognized by a classification rule."""

    name: str
    version: str | None
    category: str  # "orm" | "auth" | "testing" | ...
    packages: tuple[str, ...] = ()  # raw dependency keys claimed by this rule


@dataclass(frozen=True)
class DetectedStack:
    """Recognized technologies plus the residual unrecognized dependency names."""

    recognized: dict[str, RecognizedTech] = field(default_factory=dict)
    unrecognized: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class StructureFacts:
    """Read-only facts about which directories and files exist in a project.

    Consumed by framework variant detection and classifier conditions. An
    empty instance is valid and means "nothing known".
    """

    has_src_dir: bool = False
    has_app_dir: bool = False
    has_pages_dir: bool = False
    has_api_routes: bool = False
    has_components_dir: bool = False
    has_middleware: bool = False
    has_migrations_dir: bool = False
    has_prisma_schema: bool = False
    has_dockerfile: bool = False
    has_env_example: bool = False
    has_tests_dir: bool = False
    top_level_dirs: tuple[str, ...] = ()
    detected_runtime: str | None = None  # "node" | "bun" | "deno" (javascript only)
    source_file_count: int = 0


@dataclass(frozen=True)
class StackReport:
    """Everything one analysis produces, handed to downstream consumers."""

    project_path: str
    detection: EcosystemDetection
    manifest: ManifestResult
    framework: FrameworkInfo | None
    structure: StructureFacts
    detected: DetectedStack
