"""Tests for StructureProbe — filesystem only."""

from __future__ import annotations

from pathlib import Path

import pytest

from stackscan.models import StructureFacts
from stackscan.probe import StructureProbe


class TestStructureProbe:
    @pytest.mark.asyncio
    async def test_next_project(self, make_project):
        root = make_project(
            {
                "package.json": {"name": "web"},
                "app/page.tsx": "export default function Page() {}",
                "app/api/health/route.ts": "export async function GET() {}",
                "components/button.tsx": "",
                "lib/util.ts": "",
                "middleware.ts": "",
                "prisma/schema.prisma": "",
                "Dockerfile": "FROM node:20",
                ".env.example": "DATABASE_URL=",
                "node_modules/react/index.js": "",
                ".next/server.js": "",
            }
        )
        facts = await StructureProbe().probe(root, "javascript")

        assert facts.has_src_dir is False
        assert facts.has_app_dir is True
        assert facts.has_pages_dir is False
        assert facts.has_api_routes is True
        assert facts.has_components_dir is True
        assert facts.has_middleware is True
        assert facts.has_prisma_schema is True
        assert facts.has_dockerfile is True
        assert facts.has_env_example is True
        assert facts.has_tests_dir is False
        assert facts.top_level_dirs == ("app", "components", "lib", "prisma")
        assert facts.detected_runtime == "node"
        # page.tsx, route.ts, button.tsx, util.ts, middleware.ts
        assert facts.source_file_count == 5

    @pytest.mark.asyncio
    async def test_src_layout(self, make_project):
        root = make_project({"src/app": None, "src/pages/api": None, "src/middleware.js": ""})
        facts = await StructureProbe().probe(root, "javascript")

        assert facts.has_src_dir is True
        assert facts.has_app_dir is True
        assert facts.has_pages_dir is True
        assert facts.has_api_routes is True
        assert facts.has_middleware is True

    @pytest.mark.asyncio
    async def test_bun_runtime(self, make_project):
        root = make_project({"package.json": {}, "bun.lockb": ""})
        facts = await StructureProbe().probe(root, "javascript")
        assert facts.detected_runtime == "bun"

    @pytest.mark.asyncio
    async def test_python_project(self, make_project):
        root = make_project(
            {
                "pyproject.toml": "",
                "svc/__init__.py": "",
                "svc/main.py": "",
                "tests/test_main.py": "",
                "alembic/env.py": "",
                ".venv/lib/site.py": "",
                "docker-compose.yml": "",
            }
        )
        facts = await StructureProbe().probe(root, "python")

        assert facts.has_tests_dir is True
        assert facts.has_migrations_dir is True
        assert facts.has_dockerfile is True
        assert facts.detected_runtime is None
        assert facts.top_level_dirs == ("alembic", "svc", "tests")
        assert facts.source_file_count == 4

    @pytest.mark.asyncio
    async def test_max_depth(self, make_project):
        root = make_project({"x.py": "", "a/y.py": "", "a/b/z.py": "", "a/b/c/w.py": ""})
        facts = await StructureProbe(max_depth=2).probe(root, "python")
        assert facts.source_file_count == 2

    @pytest.mark.asyncio
    async def test_unknown_ecosystem_counts_nothing(self, make_project):
        root = make_project({"main.rb": "", "lib": None, "node_modules": None})
        facts = await StructureProbe().probe(root)

        assert facts.source_file_count == 0
        assert facts.top_level_dirs == ("lib",)

    @pytest.mark.asyncio
    async def test_empty_directory(self, tmp_path: Path):
        facts = await StructureProbe().probe(tmp_path)
        assert facts == StructureFacts()


class TestMaxDepthConfig:
    def test_default(self, monkeypatch):
        monkeypatch.delenv("STACKSCAN_MAX_DEPTH", raising=False)
        assert StructureProbe().max_depth == 6

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("STACKSCAN_MAX_DEPTH", "3")
        assert StructureProbe().max_depth == 3

    def test_invalid_env_falls_back(self, monkeypatch):
        monkeypatch.setenv("STACKSCAN_MAX_DEPTH", "deep")
        assert StructureProbe().max_depth == 6

    def test_explicit_wins(self, monkeypatch):
        monkeypatch.setenv("STACKSCAN_MAX_DEPTH", "3")
        assert StructureProbe(max_depth=10).max_depth == 10
