"""Go adapter — go.mod (+ go.work)."""

from __future__ import annotations

import re
from collections.abc import Mapping
from pathlib import Path

from stackscan.adapters._io import parse_task_targets, read_manifest
from stackscan.exceptions import ManifestMalformed
from stackscan.models import (
    DetectedStack,
    FilePatterns,
    FrameworkInfo,
    ManifestResult,
    StructureFacts,
)
from stackscan.patterns import get_file_patterns
from stackscan.registry import register_adapter
from stackscan.rules import (
    FrameworkRule,
    Rule,
    RuleTable,
    classify,
    detect_framework,
    module_match,
)
from stackscan.versions import normalize_version

_MODULE_RE = re.compile(r"^module\s+(\S+)")
_GO_RE = re.compile(r"^go\s+(\S+)")
_TOOLCHAIN_RE = re.compile(r"^toolchain\s+(\S+)")

# Single require: require github.com/foo/bar v1.2.3
_SINGLE_RE = re.compile(r"^require\s+(\S+)\s+(\S+)")

# Inside require block: github.com/foo/bar v1.2.3
_BLOCK_RE = re.compile(r"^(\S+)\s+(v\S+)")

_USE_RE = re.compile(r"^use\s+(\S+)")

FRAMEWORKS: tuple[FrameworkRule, ...] = (
    FrameworkRule(("github.com/gin-gonic/gin",), "gin"),
    FrameworkRule(("github.com/labstack/echo",), "echo"),
    FrameworkRule(("github.com/gofiber/fiber",), "fiber"),
    FrameworkRule(("github.com/go-chi/chi",), "chi"),
    FrameworkRule(("github.com/gorilla/mux",), "gorilla-mux"),
    FrameworkRule(("github.com/julienschmidt/httprouter",), "httprouter"),
)

FRAMEWORK_PACKAGES = frozenset(pkg for fw in FRAMEWORKS for pkg in fw.packages)

RULES: tuple[Rule, ...] = (
    # ORM / database
    Rule(("gorm.io/gorm",), "gorm", "orm"),
    Rule(("entgo.io/ent",), "ent", "orm"),
    Rule(("github.com/jmoiron/sqlx",), "sqlx", "database"),
    Rule(("go.mongodb.org/mongo-driver",), "mongo-driver", "database"),
    Rule(("github.com/redis/go-redis", "github.com/go-redis/redis"), "go-redis", "database"),
    Rule(("github.com/jackc/pgx",), "pgx", "database"),
    # Testing
    Rule(("github.com/stretchr/testify",), "testify", "testing"),
    Rule(("github.com/onsi/ginkgo",), "ginkgo", "testing"),
    Rule(("github.com/onsi/gomega",), "gomega", "testing"),
    Rule(("github.com/golang/mock", "go.uber.org/mock"), "gomock", "testing"),
    # CLI
    Rule(("github.com/spf13/cobra",), "cobra", "cli"),
    Rule(("github.com/urfave/cli",), "urfave-cli", "cli"),
    # Config
    Rule(("github.com/spf13/viper",), "viper", "config"),
    Rule(("github.com/joho/godotenv",), "godotenv", "config"),
    Rule(("github.com/kelseyhightower/envconfig",), "envconfig", "config"),
    # Logging
    Rule(("go.uber.org/zap",), "zap", "logging"),
    Rule(("github.com/sirupsen/logrus",), "logrus", "logging"),
    Rule(("github.com/rs/zerolog",), "zerolog", "logging"),
    # Validation
    Rule(("github.com/go-playground/validator",), "go-validator", "validation"),
    # Auth
    Rule(("github.com/golang-jwt/jwt",), "golang-jwt", "auth"),
    Rule(("github.com/coreos/go-oidc",), "go-oidc", "auth"),
    Rule(("golang.org/x/oauth2",), "oauth2", "auth"),
    # API / gRPC
    Rule(("google.golang.org/grpc",), "grpc-go", "api"),
    Rule(("google.golang.org/protobuf",), "protobuf", "api"),
    Rule(("github.com/99designs/gqlgen",), "gqlgen", "api"),
    # HTTP client
    Rule(("github.com/go-resty/resty",), "resty", "http-client"),
    # Observability
    Rule(("go.opentelemetry.io/otel",), "opentelemetry", "observability"),
    Rule(("github.com/prometheus/client_golang",), "prometheus", "observability"),
    # Migration
    Rule(("github.com/golang-migrate/migrate",), "golang-migrate", "migration"),
    Rule(("github.com/pressly/goose",), "goose", "migration"),
)

NOISE_PREFIXES: tuple[str, ...] = (
    "golang.org/x/sys",
    "golang.org/x/text",
    "golang.org/x/net",
    "golang.org/x/crypto",
    "golang.org/x/sync",
    "golang.org/x/time",
    "golang.org/x/exp",
    "golang.org/x/tools",
    "golang.org/x/mod",
    "golang.org/x/term",
    "golang.org/x/xerrors",
    "github.com/google/go-cmp",
    "github.com/davecgh/go-spew",
    "github.com/pmezard/go-difflib",
    "github.com/stretchr/objx",
    "github.com/kr/pretty",
    "github.com/kr/text",
    "github.com/rogpeppe/go-internal",
    "github.com/cpuguy83/go-md2man",
    "github.com/russross/blackfriday",
    "github.com/inconshreveable/mousetrap",
)

TABLE = RuleTable(
    rules=RULES,
    frameworks=FRAMEWORKS,
    framework_packages=FRAMEWORK_PACKAGES,
    noise_prefixes=NOISE_PREFIXES,
    matcher=module_match,
    noise_matcher=module_match,
)


def _strip_comment(line: str) -> str:
    pos = line.find("//")
    return (line[:pos] if pos != -1 else line).strip()


def parse_go_mod(path: Path, content: str) -> tuple[str, dict[str, str], dict[str, str]]:
    """Return ``(module path, requirements, engines)`` from go.mod text.

    ``// indirect`` requirements are kept; ``replace`` and ``exclude``
    blocks are skipped.
    """
    module: str | None = None
    deps: dict[str, str] = {}
    engines: dict[str, str] = {}
    block: str | None = None

    for raw_line in content.splitlines():
        line = _strip_comment(raw_line)
        if not line:
            continue

        # Block boundaries: require ( / replace ( / exclude ( / retract (
        if line.endswith("(") and block is None:
            block = line[:-1].strip()
            continue
        if line == ")" and block is not None:
            block = None
            continue

        if block is not None:
            if block == "require":
                m = _BLOCK_RE.match(line)
                if m:
                    deps[m.group(1)] = normalize_version(m.group(2))
            continue

        m = _MODULE_RE.match(line)
        if m:
            module = m.group(1).strip('"')
            continue
        m = _GO_RE.match(line)
        if m:
            engines["go"] = m.group(1)
            continue
        m = _TOOLCHAIN_RE.match(line)
        if m:
            engines["toolchain"] = m.group(1)
            continue
        m = _SINGLE_RE.match(line)
        if m:
            deps[m.group(1)] = normalize_version(m.group(2))

    if module is None:
        raise ManifestMalformed(path, "missing module directive")
    return module, deps, engines


def parse_go_work(content: str) -> list[str]:
    members: list[str] = []
    in_use_block = False
    for raw_line in content.splitlines():
        line = _strip_comment(raw_line)
        if not line:
            continue
        if line.startswith("use") and line.endswith("("):
            in_use_block = True
            continue
        if in_use_block:
            if line == ")":
                in_use_block = False
            else:
                members.append(line)
            continue
        m = _USE_RE.match(line)
        if m:
            members.append(m.group(1))
    return members


class GoAdapter:
    ecosystem = "go"

    def file_patterns(self) -> FilePatterns:
        return get_file_patterns(self.ecosystem)

    def parse_manifest(self, project_root: Path) -> ManifestResult:
        path = project_root / "go.mod"
        module, deps, engines = parse_go_mod(path, read_manifest(path))

        manifest_files = ["go.mod"]
        workspaces: list[str] | None = None
        work_path = project_root / "go.work"
        if work_path.is_file():
            workspaces = parse_go_work(read_manifest(work_path)) or None
            manifest_files.append("go.work")

        return ManifestResult(
            project_name=module,
            project_version="0.0.0",
            dependencies=deps,
            scripts=parse_task_targets(project_root),
            engines=engines,
            package_manager="go",
            workspaces=workspaces,
            manifest_files=manifest_files,
        )

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


register_adapter(GoAdapter())
