"""Structure probe — filesystem facts consumed by variant detection and rule conditions."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

import structlog

from stackscan.models import StructureFacts
from stackscan.patterns import COMMON_IGNORE, ECOSYSTEM_PATTERNS

log = structlog.get_logger(__name__)

_DEFAULT_MAX_DEPTH = 6

# Directories never descended into when no ecosystem is known
_FALLBACK_IGNORE = frozenset(
    COMMON_IGNORE | {"node_modules", "vendor", "target", "build", "dist", ".venv", "__pycache__"}
)

_MIGRATIONS_DIRS = ("migrations", "alembic", "db/migrate", "database/migrations", "prisma/migrations")
_TESTS_DIRS = ("tests", "test", "__tests__", "e2e", "spec")
_MIDDLEWARE_FILES = ("middleware.ts", "middleware.js")
_DOCKER_FILES = ("Dockerfile", "docker-compose.yml", "docker-compose.yaml", "compose.yml", "compose.yaml")
_ENV_EXAMPLE_FILES = (".env.example", ".env.local.example", ".env.sample")


def _max_depth_from_env() -> int:
    raw = os.environ.get("STACKSCAN_MAX_DEPTH")
    if not raw:
        return _DEFAULT_MAX_DEPTH
    try:
        return max(int(raw), 0)
    except ValueError:
        log.warning("probe.invalid_max_depth", value=raw, default=_DEFAULT_MAX_DEPTH)
        return _DEFAULT_MAX_DEPTH


class StructureProbe:
    """Collect :class:`StructureFacts` for a project root.

    Existence checks run concurrently in worker threads; the source-file
    count walks the tree once, pruning the ecosystem's ignore dirs.
    """

    def __init__(self, max_depth: int | None = None) -> None:
        self.max_depth = _max_depth_from_env() if max_depth is None else max_depth

    async def probe(self, project_root: str | Path, ecosystem: str | None = None) -> StructureFacts:
        root = Path(project_root)
        has_src = root.joinpath("src").is_dir()

        def any_dir(*rel: str) -> bool:
            # Resolve with and without src/
            bases = (root / "src", root) if has_src else (root,)
            return any((base / r).is_dir() for base in bases for r in rel)

        def any_file(*rel: str) -> bool:
            return any((root / r).is_file() for r in rel)

        (
            has_app,
            has_pages,
            has_api_routes,
            has_components,
            has_middleware,
            has_migrations,
            has_prisma,
            has_docker,
            has_env_example,
            has_tests,
            top_level,
            source_count,
        ) = await asyncio.gather(
            asyncio.to_thread(any_dir, "app"),
            asyncio.to_thread(any_dir, "pages"),
            asyncio.to_thread(any_dir, "app/api", "pages/api"),
            asyncio.to_thread(any_dir, "components"),
            asyncio.to_thread(any_file, *_MIDDLEWARE_FILES, *(f"src/{f}" for f in _MIDDLEWARE_FILES)),
            asyncio.to_thread(any_dir, *_MIGRATIONS_DIRS),
            asyncio.to_thread(any_file, "prisma/schema.prisma"),
            asyncio.to_thread(any_file, *_DOCKER_FILES),
            asyncio.to_thread(any_file, *_ENV_EXAMPLE_FILES),
            asyncio.to_thread(any_dir, *_TESTS_DIRS),
            asyncio.to_thread(self._top_level_dirs, root, ecosystem),
            asyncio.to_thread(self._count_source_files, root, ecosystem),
        )

        facts = StructureFacts(
            has_src_dir=has_src,
            has_app_dir=has_app,
            has_pages_dir=has_pages,
            has_api_routes=has_api_routes,
            has_components_dir=has_components,
            has_middleware=has_middleware,
            has_migrations_dir=has_migrations,
            has_prisma_schema=has_prisma,
            has_dockerfile=has_docker,
            has_env_example=has_env_example,
            has_tests_dir=has_tests,
            top_level_dirs=top_level,
            detected_runtime=self._detect_runtime(root) if ecosystem == "javascript" else None,
            source_file_count=source_count,
        )
        log.debug("probe.done", path=str(root), source_files=source_count)
        return facts

    @staticmethod
    def _ignore_dirs(ecosystem: str | None) -> frozenset[str]:
        patterns = ECOSYSTEM_PATTERNS.get(ecosystem or "")
        return patterns.ignore_dirs if patterns else _FALLBACK_IGNORE

    def _top_level_dirs(self, root: Path, ecosystem: str | None) -> tuple[str, ...]:
        ignore = self._ignore_dirs(ecosystem)
        return tuple(
            sorted(
                p.name
                for p in root.iterdir()
                if p.is_dir() and p.name not in ignore and not p.name.startswith(".")
            )
        )

    def _count_source_files(self, root: Path, ecosystem: str | None) -> int:
        """Count files with the ecosystem's source extensions, up to ``max_depth``."""
        patterns = ECOSYSTEM_PATTERNS.get(ecosystem or "")
        if patterns is None:
            return 0
        ignore = patterns.ignore_dirs
        extensions = patterns.source_extensions
        root_depth = len(root.parts)

        count = 0
        for dirpath, dirnames, filenames in os.walk(root):
            depth = len(Path(dirpath).parts) - root_depth
            if depth >= self.max_depth:
                dirnames[:] = []
                continue
            # Skip unwanted directories
            dirnames[:] = [d for d in dirnames if d not in ignore and not d.startswith(".")]
            for f in filenames:
                _, _, ext = f.rpartition(".")
                if ext in extensions and f != ext:
                    count += 1
        return count

    @staticmethod
    def _detect_runtime(root: Path) -> str:
        if (root / "bun.lockb").is_file() or (root / "bun.lock").is_file():
            return "bun"
        if (root / "deno.json").is_file() or (root / "deno.jsonc").is_file():
            return "deno"
        return "node"
