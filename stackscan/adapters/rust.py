"""Rust adapter — Cargo.toml."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from stackscan.adapters._io import as_table, load_toml, parse_task_targets
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

FRAMEWORKS: tuple[FrameworkRule, ...] = (
    FrameworkRule(("loco-rs",), "loco"),
    FrameworkRule(("actix-web",), "actix-web"),
    FrameworkRule(("axum",), "axum"),
    FrameworkRule(("rocket",), "rocket"),
    FrameworkRule(("warp",), "warp"),
    FrameworkRule(("tide",), "tide"),
    FrameworkRule(("poem",), "poem"),
    FrameworkRule(("hyper",), "hyper"),
)

FRAMEWORK_PACKAGES = frozenset(pkg for fw in FRAMEWORKS for pkg in fw.packages)

RULES: tuple[Rule, ...] = (
    # ORM / database
    Rule(("diesel",), "diesel", "orm"),
    Rule(("sea-orm",), "sea-orm", "orm"),
    Rule(("sqlx",), "sqlx", "database"),
    Rule(("rusqlite",), "rusqlite", "database"),
    Rule(("mongodb",), "mongodb", "database"),
    Rule(("redis",), "redis", "database"),
    Rule(("deadpool-postgres", "deadpool-redis", "deadpool"), "deadpool", "database"),
    # Serialization
    Rule(("serde",), "serde", "serialization"),
    Rule(("serde_json",), "serde-json", "serialization"),
    # Async runtime
    Rule(("tokio",), "tokio", "async-runtime"),
    Rule(("async-std",), "async-std", "async-runtime"),
    # Auth
    Rule(("jsonwebtoken",), "jsonwebtoken", "auth"),
    Rule(("oauth2",), "oauth2", "auth"),
    Rule(("argon2",), "argon2", "auth"),
    # Validation
    Rule(("validator",), "validator", "validation"),
    # Testing
    Rule(("criterion",), "criterion", "testing"),
    Rule(("mockall",), "mockall", "testing"),
    Rule(("wiremock",), "wiremock", "testing"),
    Rule(("proptest",), "proptest", "testing"),
    Rule(("insta",), "insta", "testing"),
    # Error handling
    Rule(("anyhow",), "anyhow", "error-handling"),
    Rule(("thiserror",), "thiserror", "error-handling"),
    Rule(("eyre", "color-eyre"), "eyre", "error-handling"),
    # CLI
    Rule(("clap",), "clap", "cli"),
    Rule(("structopt",), "structopt", "cli"),
    # Logging
    Rule(("tracing",), "tracing", "logging"),
    Rule(("log",), "log", "logging"),
    Rule(("env_logger",), "env_logger", "logging"),
    # Config
    Rule(("config",), "config", "config"),
    Rule(("dotenvy",), "dotenvy", "config"),
    # Template
    Rule(("askama",), "askama", "template"),
    Rule(("tera",), "tera", "template"),
    Rule(("handlebars",), "handlebars", "template"),
    # HTTP client
    Rule(("reqwest",), "reqwest", "http-client"),
    # gRPC / API
    Rule(("tonic",), "tonic", "api"),
    Rule(("prost",), "prost", "api"),
)

NOISE_EXACT = frozenset(
    {
        "proc-macro2", "quote", "syn", "unicode-ident", "unicode-xid",
        "unicode-normalization", "unicode-bidi", "unicode-segmentation",
        "libc", "cc", "autocfg", "memchr", "lazy_static", "once_cell",
        "cfg-if", "bitflags", "num-traits", "num-integer", "num-cpus",
        "parking_lot", "parking_lot_core", "lock_api", "scopeguard",
        "smallvec", "tinyvec", "arrayvec", "bytes", "byteorder",
        "itoa", "ryu", "dtoa", "percent-encoding", "form_urlencoded",
        "url", "http", "http-body", "httparse", "mime",
        "pin-project", "pin-project-lite", "pin-utils",
        "futures", "futures-core", "futures-util", "futures-sink",
        "futures-channel", "futures-io", "futures-task", "futures-macro",
        "mio", "socket2", "signal-hook", "signal-hook-registry",
        "crossbeam", "crossbeam-utils", "crossbeam-channel", "crossbeam-deque",
        "crossbeam-epoch", "crossbeam-queue",
        "rand", "rand_core", "rand_chacha", "getrandom",
        "regex", "regex-syntax", "aho-corasick",
        "base64", "hex", "sha2", "sha1", "md-5", "digest", "generic-array",
        "typenum", "crypto-common", "block-buffer", "subtle",
        "chrono", "time", "humantime",
        "indexmap", "hashbrown", "ahash",
        "strum", "strum_macros", "derive_more", "paste",
        "thiserror-impl", "serde_derive",
    }
)  # fmt: skip

NOISE_PREFIXES: tuple[str, ...] = ("windows-", "winapi-")

TABLE = RuleTable(
    rules=RULES,
    frameworks=FRAMEWORKS,
    framework_packages=FRAMEWORK_PACKAGES,
    noise_exact=NOISE_EXACT,
    noise_prefixes=NOISE_PREFIXES,
)

_SECTIONS = (
    ("dependencies", "deps"),
    ("dev-dependencies", "dev"),
    ("build-dependencies", "build"),
)


def _entry_version(spec: Any, workspace_deps: Mapping[str, str], name: str) -> str:
    """``"1.0"``, ``{version = "1.0", features = [...]}`` or ``{workspace = true}``."""
    if isinstance(spec, str):
        return normalize_version(spec)
    if isinstance(spec, dict):
        if isinstance(spec.get("version"), str):
            return normalize_version(spec["version"])
        if spec.get("workspace") is True:
            return workspace_deps.get(name, UNSPECIFIED)
    return UNSPECIFIED


def _collect(table: Any, target: dict[str, str], workspace_deps: Mapping[str, str]) -> None:
    for name, spec in as_table(table).items():
        target[name] = _entry_version(spec, workspace_deps, name)


class RustAdapter:
    ecosystem = "rust"

    def file_patterns(self) -> FilePatterns:
        return get_file_patterns(self.ecosystem)

    def parse_manifest(self, project_root: Path) -> ManifestResult:
        data = load_toml(project_root / "Cargo.toml")

        package = as_table(data.get("package"))
        workspace = as_table(data.get("workspace"))

        workspace_deps: dict[str, str] = {}
        _collect(workspace.get("dependencies"), workspace_deps, {})

        maps: dict[str, dict[str, str]] = {"deps": {}, "dev": {}, "build": {}}
        for section, bucket in _SECTIONS:
            _collect(data.get(section), maps[bucket], workspace_deps)
        # [target.'cfg(unix)'.dependencies] and friends
        for target_table in as_table(data.get("target")).values():
            for section, bucket in _SECTIONS:
                _collect(as_table(target_table).get(section), maps[bucket], workspace_deps)

        # A virtual workspace root declares its shared deps only here
        for name, version in workspace_deps.items():
            if not any(name in m for m in maps.values()):
                maps["deps"][name] = version

        engines: dict[str, str] = {}
        for key, engine in (("rust-version", "rust"), ("edition", "edition")):
            value = package.get(key)
            if isinstance(value, str):
                engines[engine] = value

        members = workspace.get("members")
        workspaces = [m for m in members if isinstance(m, str)] if isinstance(members, list) else None

        name = package.get("name")
        version = package.get("version")
        return ManifestResult(
            project_name=name if isinstance(name, str) else project_root.name,
            project_version=version if isinstance(version, str) else "0.0.0",
            dependencies=maps["deps"],
            dev_dependencies=maps["dev"],
            peer_dependencies=maps["build"],
            scripts=parse_task_targets(project_root),
            engines=engines,
            package_manager="cargo",
            workspaces=workspaces or None,
            manifest_files=["Cargo.toml"],
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


register_adapter(RustAdapter())
