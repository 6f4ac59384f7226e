"""Tests for the JavaScript / TypeScript adapter."""

from __future__ import annotations

import pytest

from stackscan.adapters.javascript import JavaScriptAdapter
from stackscan.exceptions import ManifestMalformed, ManifestNotFound
from stackscan.models import StructureFacts


@pytest.fixture
def adapter():
    return JavaScriptAdapter()


class TestParseManifest:
    def test_full_package_json(self, adapter, make_project):
        root = make_project(
            {
                "package.json": {
                    "name": "web",
                    "version": "1.2.0",
                    "packageManager": "pnpm@8.15.0+sha256.abc",
                    "dependencies": {"next": "^14.1.0", "react": "18.2.0"},
                    "devDependencies": {"typescript": "~5.3.3", "@acme/ui": "workspace:*"},
                    "peerDependencies": {"react": ">=18"},
                    "scripts": {"dev": "next dev", "build": "next build"},
                    "engines": {"node": ">=18"},
                    "workspaces": {"packages": ["apps/*", "packages/*"]},
                }
            }
        )
        result = adapter.parse_manifest(root)

        assert result.project_name == "web"
        assert result.project_version == "1.2.0"
        assert result.dependencies == {"next": "14.1.0", "react": "18.2.0"}
        assert result.dev_dependencies == {"typescript": "5.3.3", "@acme/ui": "unknown"}
        assert result.peer_dependencies == {"react": "18"}
        assert result.scripts == {"dev": "next dev", "build": "next build"}
        assert result.engines == {"node": ">=18"}
        assert result.package_manager == "pnpm"
        assert result.workspaces == ["apps/*", "packages/*"]
        assert result.manifest_files == ["package.json"]

    def test_defaults(self, adapter, make_project):
        root = make_project({"package.json": {}})
        result = adapter.parse_manifest(root)

        assert result.project_name == root.name
        assert result.project_version == "0.0.0"
        assert result.dependencies == {}
        assert result.package_manager == "npm"
        assert result.workspaces is None

    def test_workspaces_list(self, adapter, make_project):
        root = make_project({"package.json": {"workspaces": ["packages/*"]}})
        assert adapter.parse_manifest(root).workspaces == ["packages/*"]

    @pytest.mark.parametrize(
        "lockfile, manager",
        [
            ("yarn.lock", "yarn"),
            ("bun.lockb", "bun"),
            ("package-lock.json", "npm"),
            ("pnpm-lock.yaml", "pnpm"),
        ],
    )
    def test_package_manager_from_lockfile(self, adapter, make_project, lockfile, manager):
        root = make_project({"package.json": {}, lockfile: ""})
        assert adapter.parse_manifest(root).package_manager == manager

    def test_lockfile_priority(self, adapter, make_project):
        root = make_project({"package.json": {}, "yarn.lock": "", "pnpm-lock.yaml": ""})
        assert adapter.parse_manifest(root).package_manager == "pnpm"

    def test_invalid_json(self, adapter, make_project):
        root = make_project({"package.json": "{ not json"})
        with pytest.raises(ManifestMalformed):
            adapter.parse_manifest(root)

    def test_top_level_not_object(self, adapter, make_project):
        root = make_project({"package.json": "[1, 2]"})
        with pytest.raises(ManifestMalformed, match="not an object"):
            adapter.parse_manifest(root)

    def test_dependencies_not_a_table(self, adapter, make_project):
        root = make_project({"package.json": {"dependencies": ["react"]}})
        with pytest.raises(ManifestMalformed, match="dependencies must be a table"):
            adapter.parse_manifest(root)

    def test_null_version_is_unspecified(self, adapter, make_project):
        root = make_project({"package.json": {"dependencies": {"react": None}}})
        assert adapter.parse_manifest(root).dependencies == {"react": "unspecified"}

    def test_missing(self, adapter, tmp_path):
        with pytest.raises(ManifestNotFound):
            adapter.parse_manifest(tmp_path)


class TestDetectFramework:
    @pytest.mark.parametrize(
        "deps, name",
        [
            ({"nuxt": "3.9.0", "vue": "3.4.0"}, "nuxt"),
            ({"@remix-run/react": "2.5.0", "react": "18.2.0"}, "remix"),
            ({"@sveltejs/kit": "2.0.0", "svelte": "4.2.0"}, "sveltekit"),
            ({"@nestjs/core": "10.3.0", "express": "4.18.2"}, "nest"),
            ({"hono": "3.12.0"}, "hono"),
            ({"@angular/core": "17.1.0"}, "angular"),
        ],
    )
    def test_frameworks(self, adapter, deps, name):
        assert adapter.detect_framework(deps, {}, StructureFacts()).name == name

    def test_next_app_router(self, adapter):
        fw = adapter.detect_framework({"next": "14.1.0"}, {}, StructureFacts(has_app_dir=True, has_pages_dir=True))
        assert fw.variant == "app-router"


class TestClassifyStack:
    def test_typical_saas(self, adapter):
        deps = {
            "next": "14.1.0",
            "react": "18.2.0",
            "next-auth": "4.24.5",
            "drizzle-orm": "0.29.3",
            "stripe": "14.12.0",
            "zustand": "4.4.7",
        }
        dev = {"drizzle-kit": "0.20.9", "@playwright/test": "1.41.0", "@types/react": "18.2.0"}
        stack = adapter.classify_stack(deps, dev)

        assert set(stack.recognized) == {"next-auth", "drizzle", "stripe", "zustand", "playwright"}
        assert set(stack.recognized["drizzle"].packages) == {"drizzle-orm", "drizzle-kit"}
        assert stack.recognized["drizzle"].version == "0.29.3"
        assert stack.unrecognized == []
