"""Tests for the Python adapter."""

from __future__ import annotations

import pytest

from stackscan.adapters.python import (
    PythonAdapter,
    canonicalize_name,
    parse_requirement,
    parse_requirements_text,
)
from stackscan.exceptions import ManifestMalformed, ManifestNotFound
from stackscan.models import StructureFacts

PEP621 = """\
[project]
name = "svc"
version = "0.3.0"
requires-python = ">=3.11"
dependencies = [
    "fastapi>=0.110",
    "SQLAlchemy[asyncio]>=2.0",
    "uvicorn; sys_platform != 'win32'",
]

[project.optional-dependencies]
dev = ["pytest>=8.0"]
postgres = ["asyncpg>=0.29"]

[project.scripts]
svc = "svc.cli:main"

[dependency-groups]
lint = ["ruff>=0.4", {include-group = "dev"}]
"""

POETRY = """\
[tool.poetry]
name = "legacy"
version = "1.0.0"

[tool.poetry.dependencies]
python = "^3.10"
Django = "^4.2"
celery = {version = "^5.3", extras = ["redis"]}

[tool.poetry.group.dev.dependencies]
pytest = "^7.4"
"""


@pytest.fixture
def adapter():
    return PythonAdapter()


class TestParseRequirement:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Django>=4.2", ("django", "4.2")),
            ("zope.interface==6.0", ("zope-interface", "6.0")),
            ("requests[socks] ~= 2.31", ("requests", "2.31")),
            ("gunicorn", ("gunicorn", "unspecified")),
            ("pkg @ https://example.com/pkg.tar.gz", ("pkg", "unspecified")),
            ("typing_extensions; python_version < '3.11'", ("typing-extensions", "unspecified")),
        ],
    )
    def test_valid(self, raw, expected):
        assert parse_requirement(raw) == expected

    @pytest.mark.parametrize("raw", ["", "./local/path", "git+https://github.com/x/y.git", "; os_name == 'nt'"])
    def test_not_a_requirement(self, raw):
        assert parse_requirement(raw) is None

    def test_canonicalize_name(self):
        assert canonicalize_name("Foo_Bar.baz") == "foo-bar-baz"


class TestRequirementsText:
    def test_skips_comments_and_options(self):
        content = (
            "# pinned\n"
            "-r base.txt\n"
            "--index-url https://pypi.example.com/simple\n"
            "Flask==3.0.0\n"
            "requests>=2.31  # http\n"
            "gunicorn\n"
            "-e .\n"
            "git+https://github.com/x/y.git\n"
        )
        assert parse_requirements_text(content) == {
            "flask": "3.0.0",
            "requests": "2.31",
            "gunicorn": "unspecified",
        }


class TestParseManifest:
    def test_pep621(self, adapter, make_project):
        root = make_project({"pyproject.toml": PEP621})
        result = adapter.parse_manifest(root)

        assert result.project_name == "svc"
        assert result.project_version == "0.3.0"
        assert result.dependencies == {
            "fastapi": "0.110",
            "sqlalchemy": "2.0",
            "uvicorn": "unspecified",
            "asyncpg": "0.29",
        }
        assert result.dev_dependencies == {"pytest": "8.0", "ruff": "0.4"}
        assert result.engines == {"python": ">=3.11"}
        assert result.scripts == {"svc": "svc.cli:main"}
        assert result.package_manager == "pip"
        assert result.manifest_files == ["pyproject.toml"]

    def test_uv_lockfile(self, adapter, make_project):
        root = make_project({"pyproject.toml": PEP621, "uv.lock": ""})
        assert adapter.parse_manifest(root).package_manager == "uv"

    def test_poetry(self, adapter, make_project):
        root = make_project({"pyproject.toml": POETRY, "poetry.lock": ""})
        result = adapter.parse_manifest(root)

        assert result.project_name == "legacy"
        assert result.dependencies == {"django": "4.2", "celery": "5.3"}
        assert result.dev_dependencies == {"pytest": "7.4"}
        assert result.engines == {"python": "^3.10"}
        assert result.package_manager == "poetry"

    def test_pyproject_preferred_over_requirements(self, adapter, make_project):
        root = make_project({"pyproject.toml": PEP621, "requirements.txt": "flask\n"})
        result = adapter.parse_manifest(root)
        assert "flask" not in result.dependencies
        assert result.manifest_files == ["pyproject.toml"]

    def test_requirements_with_dev_file(self, adapter, make_project):
        root = make_project(
            {
                "requirements.txt": "Flask==3.0.0\ncelery>=5.3\n",
                "requirements-dev.txt": "pytest==8.0.0\n",
            }
        )
        result = adapter.parse_manifest(root)

        assert result.project_name == root.name
        assert result.project_version == "0.0.0"
        assert result.dependencies == {"flask": "3.0.0", "celery": "5.3"}
        assert result.dev_dependencies == {"pytest": "8.0.0"}
        assert result.manifest_files == ["requirements.txt", "requirements-dev.txt"]

    def test_pipfile(self, adapter, make_project):
        root = make_project(
            {
                "Pipfile": (
                    "[packages]\n"
                    'flask = "*"\n'
                    'requests = {version = ">=2.0"}\n'
                    "\n[dev-packages]\n"
                    'pytest = "*"\n'
                    "\n[requires]\n"
                    'python_version = "3.11"\n'
                )
            }
        )
        result = adapter.parse_manifest(root)

        assert result.dependencies == {"flask": "unknown", "requests": "2.0"}
        assert result.dev_dependencies == {"pytest": "unknown"}
        assert result.engines == {"python": "3.11"}
        assert result.package_manager == "pipenv"

    def test_setup_py(self, adapter, make_project):
        root = make_project(
            {
                "setup.py": (
                    "from setuptools import setup\n\n"
                    "setup(\n"
                    '    name="oldpkg",\n'
                    '    version="0.9",\n'
                    '    install_requires=["click>=8.1", "pyyaml"],\n'
                    ")\n"
                )
            }
        )
        result = adapter.parse_manifest(root)

        assert result.project_name == "oldpkg"
        assert result.project_version == "0.9"
        assert result.dependencies == {"click": "8.1", "pyyaml": "unspecified"}

    def test_setup_py_without_setup_call(self, adapter, make_project):
        root = make_project({"setup.py": "print('hello')\n"})
        with pytest.raises(ManifestMalformed, match="no setup"):
            adapter.parse_manifest(root)

    def test_invalid_toml(self, adapter, make_project):
        root = make_project({"pyproject.toml": "[project\nname = "})
        with pytest.raises(ManifestMalformed):
            adapter.parse_manifest(root)

    def test_pep621_dependencies_not_a_list(self, adapter, make_project):
        root = make_project({"pyproject.toml": '[project]\nname = "svc"\ndependencies = "django>=4.2"\n'})
        with pytest.raises(ManifestMalformed, match="dependencies must be a list"):
            adapter.parse_manifest(root)

    def test_pipfile_packages_not_a_table(self, adapter, make_project):
        root = make_project({"Pipfile": 'packages = ["flask"]\n'})
        with pytest.raises(ManifestMalformed, match="packages must be a table"):
            adapter.parse_manifest(root)

    def test_no_manifest(self, adapter, tmp_path):
        with pytest.raises(ManifestNotFound):
            adapter.parse_manifest(tmp_path)


class TestClassifyStack:
    def test_fastapi_service(self, adapter):
        deps = {
            "fastapi": "0.110",
            "sqlalchemy": "2.0",
            "alembic": "1.13",
            "uvicorn": "0.27",
            "setuptools": "69.0",
            "orjson": "3.9",
        }
        dev = {"pytest": "8.0", "types-requests": "2.31"}

        fw = adapter.detect_framework(deps, dev, StructureFacts())
        assert fw.name == "fastapi"
        assert fw.version == "0.110"

        stack = adapter.classify_stack(deps, dev)
        assert set(stack.recognized) == {"sqlalchemy", "alembic", "uvicorn", "pytest"}
        assert stack.unrecognized == ["orjson"]
