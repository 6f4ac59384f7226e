"""Tests for the end-to-end analysis pipeline."""

from __future__ import annotations

from pathlib import Path

import pytest

from stackscan.analyzer import analyze, analyze_project
from stackscan.exceptions import ManifestMalformed, NoEcosystemFound, UnsupportedEcosystem
from stackscan.models import StructureFacts

NEXT_APP = {
    "package.json": {
        "name": "web",
        "version": "0.1.0",
        "dependencies": {
            "next": "14.1.0",
            "react": "18.2.0",
            "react-dom": "18.2.0",
            "@prisma/client": "^5.8.0",
            "@radix-ui/react-slot": "^1.0.2",
            "class-variance-authority": "^0.7.0",
            "tailwindcss": "^3.4.0",
        },
        "devDependencies": {"prisma": "^5.8.0", "vitest": "^1.2.0", "@types/react": "^18.2.0"},
    },
    "app/page.tsx": "",
    "components/ui/button.tsx": "",
    "pnpm-lock.yaml": "",
}


class TestAnalyzeProject:
    @pytest.mark.asyncio
    async def test_next_project(self, make_project):
        root = make_project(NEXT_APP)
        report = await analyze_project(root)

        assert report.project_path == str(root.resolve())
        assert report.detection.ecosystem == "javascript"
        assert report.manifest.project_name == "web"
        assert report.manifest.package_manager == "pnpm"
        assert report.framework.name == "next"
        assert report.framework.version == "14.1.0"
        assert report.framework.variant == "app-router"
        assert report.structure.has_components_dir is True
        assert set(report.detected.recognized) == {"prisma", "shadcn", "tailwind", "vitest"}
        assert report.detected.unrecognized == []

    @pytest.mark.asyncio
    async def test_supplied_facts_skip_probe(self, make_project):
        root = make_project(NEXT_APP)
        facts = StructureFacts(has_pages_dir=True)
        report = await analyze_project(root, facts=facts)

        assert report.structure is facts
        assert report.framework.variant == "pages-router"
        # no components dir in the supplied facts
        assert "shadcn" not in report.detected.recognized
        assert "radix" in report.detected.recognized

    @pytest.mark.asyncio
    async def test_python_without_framework(self, make_project):
        root = make_project({"requirements.txt": "sqlalchemy==2.0.25\npytest==8.0.0\n"})
        report = await analyze_project(root)

        assert report.detection.confidence == "medium"
        assert report.framework is None
        assert set(report.detected.recognized) == {"sqlalchemy", "pytest"}

    @pytest.mark.asyncio
    async def test_detected_file_is_the_parsed_file(self, make_project):
        root = make_project(
            {
                "setup.py": 'from setuptools import setup\nsetup(name="svc")\n',
                "Pipfile": '[packages]\nflask = "*"\n',
            }
        )
        report = await analyze_project(root)

        assert [f.path for f in report.detection.manifest_files] == ["Pipfile"]
        assert report.manifest.manifest_files == ["Pipfile"]
        assert report.framework.name == "flask"

    @pytest.mark.asyncio
    async def test_unsupported_ecosystem(self, make_project):
        root = make_project({"Gemfile": "source 'https://rubygems.org'\n"})
        with pytest.raises(UnsupportedEcosystem):
            await analyze_project(root)

    @pytest.mark.asyncio
    async def test_no_ecosystem(self, tmp_path: Path):
        with pytest.raises(NoEcosystemFound):
            await analyze_project(tmp_path)

    @pytest.mark.asyncio
    async def test_malformed_manifest_propagates(self, make_project):
        root = make_project({"package.json": "{"})
        with pytest.raises(ManifestMalformed):
            await analyze_project(root)


class TestAnalyzeSync:
    def test_wrapper(self, make_project):
        root = make_project({"go.mod": "module example.com/svc\n\ngo 1.22\n"})
        report = analyze(root)

        assert report.detection.ecosystem == "go"
        assert report.manifest.project_name == "example.com/svc"
        assert report.framework is None
        assert report.detected.recognized == {}
