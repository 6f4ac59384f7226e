"""JSON schemas for stack reports (pydantic v2)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from stackscan.models import DetectedStack, RecognizedTech, StackReport


class RecognizedTechSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    version: str | None
    category: str
    packages: list[str] = []


class DetectedStackSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    recognized: dict[str, RecognizedTechSchema]
    unrecognized: list[str]


class FrameworkSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    version: str
    variant: str | None = None


class ManifestSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    project_name: str
    project_version: str
    dependencies: dict[str, str]
    dev_dependencies: dict[str, str]
    peer_dependencies: dict[str, str]
    scripts: dict[str, str]
    engines: dict[str, str]
    package_manager: str | None
    workspaces: list[str] | None
    manifest_files: list[str]


class ManifestFileSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    path: str
    type: str
    ecosystem: str


class EcosystemDetectionSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    ecosystem: str
    confidence: str
    manifest_files: list[ManifestFileSchema]
    reason: str


class StructureFactsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    has_src_dir: bool
    has_app_dir: bool
    has_pages_dir: bool
    has_api_routes: bool
    has_components_dir: bool
    has_middleware: bool
    has_migrations_dir: bool
    has_prisma_schema: bool
    has_dockerfile: bool
    has_env_example: bool
    has_tests_dir: bool
    top_level_dirs: list[str]
    detected_runtime: str | None
    source_file_count: int


class StackReportSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    project_path: str
    detection: EcosystemDetectionSchema
    manifest: ManifestSchema
    framework: FrameworkSchema | None
    structure: StructureFactsSchema
    detected: DetectedStackSchema


def dump_report(report: StackReport, indent: int | None = 2) -> str:
    """Serialize a :class:`StackReport` to JSON."""
    return StackReportSchema.model_validate(report).model_dump_json(indent=indent)


def dump_detected_stack(stack: DetectedStack) -> str:
    return DetectedStackSchema.model_validate(stack).model_dump_json()


def load_detected_stack(data: str | bytes) -> DetectedStack:
    """Rebuild a :class:`DetectedStack` from its JSON form.

    Version strings and the order of ``unrecognized`` are preserved exactly.
    """
    schema = DetectedStackSchema.model_validate_json(data)
    return DetectedStack(
        recognized={
            key: RecognizedTech(
                name=tech.name,
                version=tech.version,
                category=tech.category,
                packages=tuple(tech.packages),
            )
            for key, tech in schema.recognized.items()
        },
        unrecognized=list(schema.unrecognized),
    )
