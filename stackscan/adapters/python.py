"""Python adapter — pyproject.toml (PEP 621 / Poetry), requirements.txt, Pipfile, setup.py."""

from __future__ import annotations

import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog

from stackscan.adapters._io import (
    as_table,
    first_existing,
    load_toml,
    read_manifest,
    section_list,
    section_table,
)
from stackscan.exceptions import ManifestMalformed, ManifestNotFound
from stackscan.models import (
    UNSPECIFIED,
    DetectedStack,
    FilePatterns,
    FrameworkInfo,
    ManifestResult,
    StructureFacts,
)
from stackscan.patterns import get_file_patterns
from stackscan.registry import register_adapter
from stackscan.rules import FrameworkRule, Rule, RuleTable, classify, detect_framework
from stackscan.versions import normalize_version

log = structlog.get_logger(__name__)

# PEP 508 simplified: name followed by optional extras and version specifiers
_PEP508_RE = re.compile(
    r"^([A-Za-z0-9]([A-Za-z0-9._-]*[A-Za-z0-9])?)"  # package name
    r"(\[[^\]]*\])?"  # optional extras [extra1,extra2]
    r"\s*"
    r"(.*)?$",  # version specifiers
)

_CANONICAL_RE = re.compile(r"[-_.]+")

_SETUP_CALL_RE = re.compile(r"\bsetup\s*\(")
_INSTALL_REQUIRES_RE = re.compile(r"install_requires\s*=\s*\[([^\]]*)\]", re.DOTALL)
_QUOTED_RE = re.compile(r"""['"]([^'"]+)['"]""")
_SETUP_NAME_RE = re.compile(r"""\bname\s*=\s*['"]([^'"]+)['"]""")
_SETUP_VERSION_RE = re.compile(r"""\bversion\s*=\s*['"]([^'"]+)['"]""")

_DEV_GROUPS = frozenset({"dev", "test", "testing", "lint", "docs", "development"})

_DEV_REQUIREMENTS = ("requirements-dev.txt", "dev-requirements.txt", "requirements_dev.txt")

# Lockfile -> package manager, in priority order
_LOCKFILES: tuple[tuple[str, str], ...] = (
    ("poetry.lock", "poetry"),
    ("uv.lock", "uv"),
    ("Pipfile.lock", "pipenv"),
    ("pdm.lock", "pdm"),
)

FRAMEWORKS: tuple[FrameworkRule, ...] = (
    FrameworkRule(("django",), "django"),
    FrameworkRule(("flask",), "flask"),
    FrameworkRule(("fastapi",), "fastapi"),
    FrameworkRule(("starlette",), "starlette"),
    FrameworkRule(("litestar",), "litestar"),
    FrameworkRule(("sanic",), "sanic"),
    FrameworkRule(("tornado",), "tornado"),
    FrameworkRule(("pyramid",), "pyramid"),
    FrameworkRule(("bottle",), "bottle"),
    FrameworkRule(("aiohttp",), "aiohttp"),
)

FRAMEWORK_PACKAGES = frozenset(pkg for fw in FRAMEWORKS for pkg in fw.packages)

RULES: tuple[Rule, ...] = (
    # ORM
    Rule(("sqlalchemy",), "sqlalchemy", "orm"),
    Rule(("tortoise-orm",), "tortoise", "orm"),
    Rule(("peewee",), "peewee", "orm"),
    Rule(("sqlmodel",), "sqlmodel", "orm"),
    Rule(("mongoengine",), "mongoengine", "orm"),
    Rule(("odmantic",), "odmantic", "orm"),
    # Database drivers
    Rule(("psycopg2", "psycopg2-binary", "psycopg"), "psycopg", "database"),
    Rule(("asyncpg",), "asyncpg", "database"),
    Rule(("pymongo",), "pymongo", "database"),
    Rule(("redis",), "redis", "database"),
    Rule(("motor",), "motor", "database"),
    Rule(("aioredis",), "aioredis", "database"),
    Rule(("aiomysql", "pymysql"), "mysql", "database"),
    # Auth
    Rule(("django-allauth",), "django-allauth", "auth"),
    Rule(("python-jose", "pyjwt", "authlib"), "jwt", "auth"),
    Rule(("passlib",), "passlib", "auth"),
    Rule(("djangorestframework-simplejwt",), "drf-simplejwt", "auth"),
    # Validation
    Rule(("pydantic",), "pydantic", "validation"),
    Rule(("marshmallow",), "marshmallow", "validation"),
    Rule(("cerberus",), "cerberus", "validation"),
    Rule(("attrs",), "attrs", "validation"),
    # Testing
    Rule(("pytest",), "pytest", "testing"),
    Rule(("hypothesis",), "hypothesis", "testing"),
    Rule(("factory-boy",), "factory-boy", "testing"),
    Rule(("faker",), "faker", "testing"),
    Rule(("pytest-cov",), "pytest-cov", "testing"),
    Rule(("tox",), "tox", "testing"),
    Rule(("nox",), "nox", "testing"),
    # API
    Rule(("djangorestframework",), "drf", "api"),
    Rule(("graphene", "strawberry-graphql", "ariadne"), "graphql", "api"),
    Rule(("grpcio",), "grpc", "api"),
    Rule(("django-ninja",), "django-ninja", "api"),
    # Jobs / queues
    Rule(("celery",), "celery", "jobs"),
    Rule(("dramatiq",), "dramatiq", "jobs"),
    Rule(("rq",), "rq", "jobs"),
    Rule(("huey",), "huey", "jobs"),
    # Migration
    Rule(("alembic",), "alembic", "migration"),
    # Linter / formatter
    Rule(("ruff",), "ruff", "linter"),
    Rule(("black",), "black", "formatter"),
    Rule(("flake8",), "flake8", "linter"),
    Rule(("isort",), "isort", "formatter"),
    Rule(("pylint",), "pylint", "linter"),
    # Type checker
    Rule(("mypy",), "mypy", "type-checker"),
    Rule(("pyright",), "pyright", "type-checker"),
    # HTTP client
    Rule(("httpx",), "httpx", "http-client"),
    Rule(("requests",), "requests", "http-client"),
    # Template
    Rule(("jinja2",), "jinja2", "template"),
    Rule(("mako",), "mako", "template"),
    # Email
    Rule(("django-anymail",), "anymail", "email"),
    # Server
    Rule(("uvicorn",), "uvicorn", "server"),
    Rule(("gunicorn",), "gunicorn", "server"),
    Rule(("hypercorn",), "hypercorn", "server"),
    # Config
    Rule(("python-dotenv",), "dotenv", "config"),
    Rule(("pydantic-settings",), "pydantic-settings", "config"),
    Rule(("dynaconf",), "dynaconf", "config"),
    # Django extras
    Rule(("django-admin-interface",), "django-admin-interface", "admin"),
    Rule(("django-cors-headers",), "django-cors-headers", "middleware"),
    Rule(("django-redis",), "django-redis", "caching"),
    # Payments
    Rule(("stripe",), "stripe", "payments"),
)

NOISE_EXACT = frozenset(
    {
        "setuptools",
        "wheel",
        "pip",
        "build",
        "twine",
        "flit",
        "flit-core",
        "hatchling",
        "hatch-vcs",
        "pdm",
        "pdm-backend",
        "pdm-pep517",
        "poetry-core",
        "poetry-plugin-export",
        "typing-extensions",
        "mypy-extensions",
        "importlib-metadata",
        "importlib-resources",
        "six",
        "future",
        "backports",
        "packaging",
        "distlib",
        "filelock",
        "platformdirs",
        "virtualenv",
        "certifi",
        "charset-normalizer",
        "idna",
        "urllib3",
    }
)

NOISE_PREFIXES: tuple[str, ...] = ("types-",)

TABLE = RuleTable(
    rules=RULES,
    frameworks=FRAMEWORKS,
    framework_packages=FRAMEWORK_PACKAGES,
    noise_exact=NOISE_EXACT,
    noise_prefixes=NOISE_PREFIXES,
)


# ── helpers ──────────────────────────────────────────────────────────────


def canonicalize_name(name: str) -> str:
    """PEP 503 normalized project name."""
    return _CANONICAL_RE.sub("-", name).lower()


def parse_requirement(raw: str) -> tuple[str, str] | None:
    """Split a PEP 508 string into ``(canonical name, normalized version)``.

    Extras and environment markers are dropped. Returns None for strings
    that do not start with a project name (URLs, local paths).
    """
    line = raw.strip()
    marker_pos = line.find(";")
    if marker_pos != -1:
        line = line[:marker_pos].strip()
    if not line:
        return None

    m = _PEP508_RE.match(line)
    if not m:
        return None

    constraint = (m.group(4) or "").strip()
    if constraint and constraint[0] not in "<>=!~@(":
        # "git+https://...", "name-1.0.tar.gz" and other non-requirements
        return None
    if constraint.startswith("@"):
        # direct reference: "pkg @ git+https://..."
        constraint = ""
    return canonicalize_name(m.group(1)), normalize_version(constraint)


def parse_requirements_text(content: str) -> dict[str, str]:
    deps: dict[str, str] = {}
    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith(("-r", "-c", "-e", "--")):
            continue
        # inline comment
        line = line.split(" #", 1)[0]
        parsed = parse_requirement(line)
        if parsed is not None:
            deps[parsed[0]] = parsed[1]
    return deps


def _requirement_list(items: list[Any], target: dict[str, str]) -> None:
    for item in items:
        if not isinstance(item, str):
            # PEP 735 {include-group = "..."} entries
            continue
        parsed = parse_requirement(item)
        if parsed is not None:
            target[parsed[0]] = parsed[1]


def _table_version(spec: Any) -> str:
    """Version of a Poetry / Pipfile entry: ``"^1.0"`` or ``{version = "^1.0", ...}``."""
    if isinstance(spec, str):
        return normalize_version(spec)
    if isinstance(spec, dict) and isinstance(spec.get("version"), str):
        return normalize_version(spec["version"])
    return UNSPECIFIED


def _dependency_table(
    table: dict[str, Any], target: dict[str, str], engines: dict[str, str] | None = None
) -> None:
    for name, spec in table.items():
        if name.lower() == "python":
            if engines is not None and isinstance(spec, str):
                engines["python"] = spec
            continue
        target[canonicalize_name(name)] = _table_version(spec)


def _package_manager(project_root: Path, default: str = "pip") -> str:
    for lockfile, manager in _LOCKFILES:
        if (project_root / lockfile).is_file():
            return manager
    return default


# ── parsers ──────────────────────────────────────────────────────────────


def parse_pyproject(project_root: Path) -> ManifestResult:
    path = project_root / "pyproject.toml"
    data = load_toml(path)

    project = section_table(path, data, "project")
    poetry = section_table(path, section_table(path, data, "tool"), "poetry")

    deps: dict[str, str] = {}
    dev_deps: dict[str, str] = {}
    engines: dict[str, str] = {}
    scripts: dict[str, str] = {}

    # PEP 621
    _requirement_list(section_list(path, project, "dependencies"), deps)
    optional = section_table(path, project, "optional-dependencies")
    for group in optional:
        _requirement_list(section_list(path, optional, group), dev_deps if group in _DEV_GROUPS else deps)

    # PEP 735
    groups = section_table(path, data, "dependency-groups")
    for group in groups:
        _requirement_list(section_list(path, groups, group), dev_deps)

    # Poetry
    _dependency_table(section_table(path, poetry, "dependencies"), deps, engines)
    _dependency_table(section_table(path, poetry, "dev-dependencies"), dev_deps)
    poetry_groups = section_table(path, poetry, "group")
    for group in poetry_groups:
        group_table = section_table(path, poetry_groups, group)
        _dependency_table(section_table(path, group_table, "dependencies"), dev_deps)

    requires_python = project.get("requires-python")
    if isinstance(requires_python, str):
        engines["python"] = requires_python

    for source in (project.get("scripts"), poetry.get("scripts")):
        for name, cmd in as_table(source).items():
            if isinstance(cmd, str):
                scripts[name] = cmd

    name = project.get("name") or poetry.get("name")
    version = project.get("version") or poetry.get("version")
    return ManifestResult(
        project_name=name if isinstance(name, str) else project_root.name,
        project_version=version if isinstance(version, str) else "0.0.0",
        dependencies=deps,
        dev_dependencies=dev_deps,
        scripts=scripts,
        engines=engines,
        package_manager=_package_manager(project_root),
        manifest_files=["pyproject.toml"],
    )


def parse_requirements(project_root: Path) -> ManifestResult:
    deps = parse_requirements_text(read_manifest(project_root / "requirements.txt"))
    manifest_files = ["requirements.txt"]

    dev_deps: dict[str, str] = {}
    dev_file = first_existing(project_root, _DEV_REQUIREMENTS)
    if dev_file is not None:
        dev_deps = parse_requirements_text(read_manifest(dev_file))
        manifest_files.append(dev_file.name)

    return ManifestResult(
        project_name=project_root.name,
        project_version="0.0.0",
        dependencies=deps,
        dev_dependencies=dev_deps,
        package_manager=_package_manager(project_root),
        manifest_files=manifest_files,
    )


def parse_pipfile(project_root: Path) -> ManifestResult:
    path = project_root / "Pipfile"
    data = load_toml(path)

    deps: dict[str, str] = {}
    dev_deps: dict[str, str] = {}
    _dependency_table(section_table(path, data, "packages"), deps)
    _dependency_table(section_table(path, data, "dev-packages"), dev_deps)

    engines: dict[str, str] = {}
    python_version = as_table(data.get("requires")).get("python_version")
    if isinstance(python_version, str):
        engines["python"] = python_version

    scripts = {k: v for k, v in as_table(data.get("scripts")).items() if isinstance(v, str)}

    return ManifestResult(
        project_name=project_root.name,
        project_version="0.0.0",
        dependencies=deps,
        dev_dependencies=dev_deps,
        scripts=scripts,
        engines=engines,
        package_manager=_package_manager(project_root, default="pipenv"),
        manifest_files=["Pipfile"],
    )


def parse_setup_py(project_root: Path) -> ManifestResult:
    path = project_root / "setup.py"
    content = read_manifest(path)
    if not _SETUP_CALL_RE.search(content):
        raise ManifestMalformed(path, "no setup() call found")

    log.debug("python.setup_py_regex_scrape", path=str(path))

    deps: dict[str, str] = {}
    m = _INSTALL_REQUIRES_RE.search(content)
    if m:
        for item in _QUOTED_RE.findall(m.group(1)):
            parsed = parse_requirement(item)
            if parsed is not None:
                deps[parsed[0]] = parsed[1]

    name = _SETUP_NAME_RE.search(content)
    version = _SETUP_VERSION_RE.search(content)
    return ManifestResult(
        project_name=name.group(1) if name else project_root.name,
        project_version=version.group(1) if version else "0.0.0",
        dependencies=deps,
        package_manager=_package_manager(project_root),
        manifest_files=["setup.py"],
    )


# Tried in order; the first file that exists is parsed
_MANIFEST_PARSERS = (
    ("pyproject.toml", parse_pyproject),
    ("requirements.txt", parse_requirements),
    ("Pipfile", parse_pipfile),
    ("setup.py", parse_setup_py),
)


class PythonAdapter:
    ecosystem = "python"

    def file_patterns(self) -> FilePatterns:
        return get_file_patterns(self.ecosystem)

    def parse_manifest(self, project_root: Path) -> ManifestResult:
        for filename, parser in _MANIFEST_PARSERS:
            if (project_root / filename).is_file():
                return parser(project_root)
        raise ManifestNotFound(project_root / "pyproject.toml")

    def detect_framework(
        self,
        deps: Mapping[str, str],
        dev_deps: Mapping[str, str],
        facts: StructureFacts,
    ) -> FrameworkInfo | None:
        return detect_framework(TABLE, deps, dev_deps, facts)

    def classify_stack(
        self,
        deps: Mapping[str, str],
        dev_deps: Mapping[str, str],
        facts: StructureFacts | None = None,
    ) -> DetectedStack:
        return classify(TABLE, deps, dev_deps, facts)


register_adapter(PythonAdapter())
