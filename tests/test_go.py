"""Tests for the Go adapter."""

from __future__ import annotations

from pathlib import Path

import pytest

from stackscan.adapters.go import GoAdapter, parse_go_mod, parse_go_work
from stackscan.exceptions import ManifestMalformed
from stackscan.models import StructureFacts

GO_MOD = """\
module github.com/acme/api

go 1.22

toolchain go1.22.1

require github.com/gin-gonic/gin v1.9.1

require (
\tgithub.com/stretchr/testify v1.8.4
\tgolang.org/x/sys v0.15.0 // indirect
)

replace (
\tgithub.com/foo/bar v1.0.0 => ../bar
)

exclude github.com/old/thing v0.1.0
"""


@pytest.fixture
def adapter():
    return GoAdapter()


class TestParseGoMod:
    def test_directives(self):
        module, deps, engines = parse_go_mod(Path("go.mod"), GO_MOD)

        assert module == "github.com/acme/api"
        assert deps == {
            "github.com/gin-gonic/gin": "1.9.1",
            "github.com/stretchr/testify": "1.8.4",
            "golang.org/x/sys": "0.15.0",
        }
        assert engines == {"go": "1.22", "toolchain": "go1.22.1"}

    def test_pseudo_version(self):
        content = "module m\n\nrequire example.com/x v0.0.0-20231010123456-abcdef123456\n"
        _, deps, _ = parse_go_mod(Path("go.mod"), content)
        assert deps == {"example.com/x": "0.0.0"}

    def test_missing_module(self):
        with pytest.raises(ManifestMalformed, match="module"):
            parse_go_mod(Path("go.mod"), "go 1.22\n")


class TestParseGoWork:
    def test_use_directives(self):
        content = "go 1.22\n\nuse (\n\t./api\n\t./worker // jobs\n)\n\nuse ./shared\n"
        assert parse_go_work(content) == ["./api", "./worker", "./shared"]


class TestParseManifest:
    def test_go_mod(self, adapter, make_project):
        root = make_project({"go.mod": GO_MOD})
        result = adapter.parse_manifest(root)

        assert result.project_name == "github.com/acme/api"
        assert result.project_version == "0.0.0"
        assert result.dev_dependencies == {}
        assert result.package_manager == "go"
        assert result.workspaces is None
        assert result.manifest_files == ["go.mod"]

    def test_go_work(self, adapter, make_project):
        root = make_project({"go.mod": GO_MOD, "go.work": "go 1.22\nuse ./api\n"})
        result = adapter.parse_manifest(root)

        assert result.workspaces == ["./api"]
        assert result.manifest_files == ["go.mod", "go.work"]


class TestDetectAndClassify:
    def test_gin_service(self, adapter, make_project):
        root = make_project({"go.mod": GO_MOD})
        result = adapter.parse_manifest(root)

        fw = adapter.detect_framework(result.dependencies, result.dev_dependencies, StructureFacts())
        assert fw.name == "gin"
        assert fw.version == "1.9.1"

        stack = adapter.classify_stack(result.dependencies, result.dev_dependencies)
        assert set(stack.recognized) == {"testify"}
        assert stack.unrecognized == []

    def test_major_version_suffix(self, adapter):
        deps = {"github.com/jackc/pgx/v5": "5.5.1", "github.com/redis/go-redis/v9": "9.4.0"}
        stack = adapter.classify_stack(deps, {})
        assert stack.recognized["pgx"].version == "5.5.1"
        assert stack.recognized["go-redis"].packages == ("github.com/redis/go-redis/v9",)
