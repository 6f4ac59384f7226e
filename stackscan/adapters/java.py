"""Java / Kotlin adapter — Maven pom.xml, Gradle build.gradle(.kts).

Maven is parsed as XML. Gradle build scripts are programs, so they are
regex-scraped for the common declaration shapes of both DSLs:

  - implementation "group:artifact:version"          (Groovy)
  - implementation("group:artifact:version")          (Kotlin)
  - implementation group: 'g', name: 'a', version: 'v'
  - implementation(libs.some.alias)                   (version catalog)
  - api(project(":submodule"))                        → skipped (internal)
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from pathlib import Path

import structlog

from stackscan.adapters._io import (
    as_table,
    first_existing,
    load_toml,
    parse_task_targets,
    read_manifest,
)
from stackscan.exceptions import ManifestMalformed, ManifestNotFound
from stackscan.models import (
    UNKNOWN,
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
    coordinate_match,
    detect_framework,
)
from stackscan.versions import normalize_version

log = structlog.get_logger(__name__)

_PROP_RE = re.compile(r"\$\{([^}]+)\}")

_DEFAULT_PLUGIN_GROUP = "org.apache.maven.plugins"

_JAVA_PROPERTIES = ("java.version", "maven.compiler.release", "maven.compiler.source")

# Gradle configuration names (not exhaustive, but covers the common ones)
_CONFIGS = (
    r"(?:implementation|api|compileOnly|compileOnlyApi|runtimeOnly|"
    r"annotationProcessor|kapt|ksp|classpath|"
    r"testImplementation|testCompileOnly|testRuntimeOnly|testAnnotationProcessor|"
    r"androidTestImplementation|debugImplementation|releaseImplementation|"
    r"developmentOnly|optional|provided|compile|runtime|testCompile|testRuntime|"
    r"\w+Implementation|\w+Api|\w+CompileOnly|\w+RuntimeOnly)"
)

# configuration("g:a:v") / configuration 'g:a:v' / configuration(platform("g:a:v"))
_GRADLE_DEP_RE = re.compile(
    rf"\b({_CONFIGS})"
    r"\s*\(?\s*"
    r"(?:(?:enforcedPlatform|platform)\s*\(\s*)?"
    r"""["']"""  # opening quote
    r"([A-Za-z0-9._-]+)"  # group
    r":"
    r"([A-Za-z0-9._-]+)"  # artifact
    r"(?::([A-Za-z0-9._+\-${}]+))?"  # optional version
    r"(?:@\w+)?"  # optional @aar / @jar
    r"""["']"""  # closing quote
)

# configuration group: 'g', name: 'a', version: 'v'   (Groovy map notation)
# configuration(group = "g", name = "a", version = "v")   (Kotlin named args)
_GRADLE_MAP_DEP_RE = re.compile(
    rf"\b({_CONFIGS})"
    r"""\s*\(?\s*group\s*[:=]\s*["']([^"']+)["']"""
    r"""\s*,\s*name\s*[:=]\s*["']([^"']+)["']"""
    r"""(?:\s*,\s*version\s*[:=]\s*["']([^"']+)["'])?"""
)

# configuration(libs.spring.boot.starter.web)
_GRADLE_CATALOG_DEP_RE = re.compile(rf"\b({_CONFIGS})\s*\(?\s*libs\.([\w.]+)")

# Any configuration call at all; used to tell "nothing declared" from "unparseable"
_GRADLE_CALL_RE = re.compile(rf"\b{_CONFIGS}\s*[\s(]")

_GRADLE_DEPS_BLOCK_RE = re.compile(r"^\s*dependencies\s*\{", re.MULTILINE)
_GRADLE_PLUGINS_BLOCK_RE = re.compile(r"^\s*plugins\s*\{", re.MULTILINE)

# id("org.springframework.boot") version "3.2.0" / id 'x' version 'y'
_GRADLE_PLUGIN_RE = re.compile(
    r"""\bid\s*\(?\s*["']([^"']+)["']\s*\)?\s*version\s*\(?\s*["']([^"']+)["']"""
)

_GRADLE_GROUP_RE = re.compile(r"""^\s*group\s*[=:]?\s*["']([^"']+)["']""", re.MULTILINE)
_GRADLE_VERSION_RE = re.compile(r"""^\s*version\s*[=:]?\s*["']([^"']+)["']""", re.MULTILINE)
_ROOT_PROJECT_RE = re.compile(r"""rootProject\.name\s*=\s*["']([^"']+)["']""")
_INCLUDE_RE = re.compile(r"""\binclude\s*\(?\s*((?:["'][^"']+["']\s*,?\s*)+)""")
_QUOTED_RE = re.compile(r"""["']([^"']+)["']""")

# Java level, in order of preference
_GRADLE_JAVA_RES = (
    re.compile(r"""jvmToolchain\s*\(\s*(\d+)\s*\)"""),
    re.compile(r"""JavaLanguageVersion\.of\s*\(\s*(\d+)\s*\)"""),
    re.compile(r"""sourceCompatibility\s*=?\s*["']?(?:JavaVersion\.VERSION_)?([\d_.]+)"""),
    re.compile(r"""JavaVersion\.VERSION_([\d_]+)"""),
)

FRAMEWORKS: tuple[FrameworkRule, ...] = (
    FrameworkRule(
        (
            "org.springframework.boot:spring-boot-starter-web",
            "org.springframework.boot:spring-boot-starter-webflux",
        ),
        "spring-boot",
    ),
    FrameworkRule(("io.quarkus:quarkus-core", "io.quarkus:quarkus-resteasy"), "quarkus"),
    FrameworkRule(("io.micronaut:micronaut-core", "io.micronaut:micronaut-http-server"), "micronaut"),
    FrameworkRule(("io.vertx:vertx-core", "io.vertx:vertx-web"), "vert.x"),
    FrameworkRule(("io.javalin:javalin",), "javalin"),
)

FRAMEWORK_PACKAGES = frozenset(pkg for fw in FRAMEWORKS for pkg in fw.packages)

RULES: tuple[Rule, ...] = (
    # ORM / database
    Rule(("org.hibernate:hibernate-core", "org.hibernate.orm:hibernate-core"), "hibernate", "orm"),
    Rule(
        (
            "org.springframework.data:spring-data-jpa",
            "org.springframework.boot:spring-boot-starter-data-jpa",
        ),
        "spring-data-jpa",
        "orm",
    ),
    Rule(("org.mybatis:mybatis", "org.mybatis.spring.boot:mybatis-spring-boot-starter"), "mybatis", "orm"),
    Rule(("org.jooq:jooq",), "jooq", "orm"),
    Rule(("org.flywaydb:flyway-core",), "flyway", "migration"),
    Rule(("org.liquibase:liquibase-core",), "liquibase", "migration"),
    # Database drivers
    Rule(("org.postgresql:postgresql",), "postgresql", "database"),
    Rule(("com.mysql:mysql-connector-j", "mysql:mysql-connector-java"), "mysql", "database"),
    Rule(("org.mongodb:mongodb-driver-sync", "org.mongodb:mongodb-driver-reactivestreams"), "mongodb", "database"),
    Rule(("redis.clients:jedis",), "jedis", "database"),
    Rule(("io.lettuce:lettuce-core",), "lettuce", "database"),
    # Testing
    Rule(("org.junit.jupiter:junit-jupiter", "org.junit.jupiter:junit-jupiter-api"), "junit5", "testing"),
    Rule(("junit:junit",), "junit4", "testing"),
    Rule(("org.mockito:mockito-core", "org.mockito:mockito-junit-jupiter"), "mockito", "testing"),
    Rule(("org.assertj:assertj-core",), "assertj", "testing"),
    Rule(("io.rest-assured:rest-assured",), "rest-assured", "testing"),
    Rule(("org.testcontainers:testcontainers",), "testcontainers", "testing"),
    Rule(("org.springframework.boot:spring-boot-starter-test",), "spring-boot-test", "testing"),
    # Auth / security
    Rule(
        (
            "org.springframework.boot:spring-boot-starter-security",
            "org.springframework.security:spring-security-core",
        ),
        "spring-security",
        "auth",
    ),
    Rule(("io.jsonwebtoken:jjwt", "io.jsonwebtoken:jjwt-api"), "jjwt", "auth"),
    Rule(("org.keycloak:keycloak-core", "org.keycloak:keycloak-spring-boot-starter"), "keycloak", "auth"),
    # Validation
    Rule(
        (
            "jakarta.validation:jakarta.validation-api",
            "javax.validation:validation-api",
            "org.springframework.boot:spring-boot-starter-validation",
        ),
        "bean-validation",
        "validation",
    ),
    # Serialization
    Rule(("com.fasterxml.jackson.core:jackson-databind",), "jackson", "serialization"),
    Rule(("com.google.code.gson:gson",), "gson", "serialization"),
    # Logging
    Rule(("org.slf4j:slf4j-api",), "slf4j", "logging"),
    Rule(("ch.qos.logback:logback-classic",), "logback", "logging"),
    Rule(("org.apache.logging.log4j:log4j-core",), "log4j2", "logging"),
    # API
    Rule(("io.grpc:grpc-core", "io.grpc:grpc-netty"), "grpc-java", "api"),
    Rule(("io.swagger.core.v3:swagger-core", "io.swagger.core.v3:swagger-annotations"), "swagger", "api"),
    Rule(
        ("org.springdoc:springdoc-openapi-starter-webmvc-ui", "org.springdoc:springdoc-openapi-ui"),
        "springdoc",
        "api",
    ),
    Rule(("com.graphql-java:graphql-java",), "graphql-java", "api"),
    # Build / quality
    Rule(("org.projectlombok:lombok",), "lombok", "bundler"),
    Rule(("org.mapstruct:mapstruct",), "mapstruct", "bundler"),
    Rule(("com.google.errorprone:error_prone_core",), "error-prone", "linter"),
    Rule(("com.google.dagger:dagger",), "dagger", "bundler"),
    # Observability
    Rule(("io.micrometer:micrometer-core",), "micrometer", "observability"),
    Rule(("io.opentelemetry:opentelemetry-api",), "opentelemetry", "observability"),
    Rule(("org.springframework.boot:spring-boot-starter-actuator",), "actuator", "observability"),
    # HTTP client
    Rule(
        ("org.apache.httpcomponents.client5:httpclient5", "org.apache.httpcomponents:httpclient"),
        "httpclient",
        "http-client",
    ),
    Rule(("com.squareup.okhttp3:okhttp",), "okhttp", "http-client"),
    # Template
    Rule(
        ("org.thymeleaf:thymeleaf", "org.springframework.boot:spring-boot-starter-thymeleaf"),
        "thymeleaf",
        "template",
    ),
    Rule(("org.freemarker:freemarker",), "freemarker", "template"),
    # Jobs
    Rule(("org.quartz-scheduler:quartz",), "quartz", "jobs"),
    Rule(("org.springframework.kafka:spring-kafka",), "spring-kafka", "jobs"),
)

NOISE_EXACT = frozenset({"org.springframework.boot:spring-boot-devtools"})

# groupId or groupId:artifactId prefixes
NOISE_PREFIXES: tuple[str, ...] = (
    "org.apache.maven",
    "org.codehaus.mojo",
    "org.sonatype",
    "org.jetbrains.kotlin:kotlin-stdlib",
    "org.jetbrains.kotlin:kotlin-reflect",
    "org.jetbrains:annotations",
    "javax.annotation:javax.annotation-api",
    "jakarta.annotation:jakarta.annotation-api",
    "com.google.guava:guava",
    "commons-io:commons-io",
    "org.apache.commons:commons-lang3",
    "org.apache.commons:commons-collections4",
)

TABLE = RuleTable(
    rules=RULES,
    frameworks=FRAMEWORKS,
    framework_packages=FRAMEWORK_PACKAGES,
    noise_exact=NOISE_EXACT,
    noise_prefixes=NOISE_PREFIXES,
    noise_matcher=coordinate_match,
)


# ── Maven ────────────────────────────────────────────────────────────────


def _resolve_props(value: str, props: dict[str, str]) -> str:
    """Replace ${property} placeholders with values from <properties>."""

    def _replace(m: re.Match) -> str:
        key = m.group(1)
        return props.get(key, m.group(0))  # keep original if not found

    return _PROP_RE.sub(_replace, value)


def _text(element: ET.Element | None) -> str | None:
    if element is None:
        return None
    return element.text.strip() if element.text else None


def _namespace(root: ET.Element) -> str:
    """``{uri}`` prefix of the root tag, or ``""`` for an unqualified POM."""
    if root.tag.startswith("{"):
        return root.tag[: root.tag.index("}") + 1]
    return ""


class _Pom:
    """Accessors over a parsed POM, namespace-agnostic."""

    def __init__(self, root: ET.Element) -> None:
        self.root = root
        self.ns = _namespace(root)
        self.props = self._extract_properties()

    def find(self, path: str, base: ET.Element | None = None) -> ET.Element | None:
        return (self.root if base is None else base).find(self._qualify(path))

    def findall(self, path: str, base: ET.Element | None = None) -> list[ET.Element]:
        return (self.root if base is None else base).findall(self._qualify(path))

    def text(self, path: str, base: ET.Element | None = None) -> str | None:
        value = _text(self.find(path, base))
        return _resolve_props(value, self.props) if value else value

    def _qualify(self, path: str) -> str:
        return "/".join(f"{self.ns}{part}" for part in path.split("/"))

    def _extract_properties(self) -> dict[str, str]:
        """<properties> key-value pairs plus the implicit project.* ones."""
        props: dict[str, str] = {}
        props_el = self.find("properties")
        if props_el is not None:
            for child in props_el:
                # Strip namespace from tag name
                tag = child.tag.split("}")[-1] if "}" in child.tag else child.tag
                if child.text:
                    props[tag] = child.text.strip()

        implicit = {
            "project.version": _text(self.find("version")) or _text(self.find("parent/version")),
            "project.groupId": _text(self.find("groupId")) or _text(self.find("parent/groupId")),
            "project.artifactId": _text(self.find("artifactId")),
            "project.parent.version": _text(self.find("parent/version")),
            "project.parent.groupId": _text(self.find("parent/groupId")),
        }
        for key, value in implicit.items():
            if value:
                props.setdefault(key, value)
        return props


def _coordinate(pom: _Pom, dep_el: ET.Element, default_group: str | None = None) -> str | None:
    group_id = pom.text("groupId", dep_el) or default_group
    artifact_id = pom.text("artifactId", dep_el)
    if not group_id or not artifact_id:
        return None
    return f"{group_id}:{artifact_id}"


def parse_pom(path: Path, content: str) -> dict:
    """Extract coordinates, dependency maps, engines and modules from a POM."""
    try:
        root = ET.fromstring(content)
    except ET.ParseError as exc:
        raise ManifestMalformed(path, f"invalid XML: {exc}") from exc

    ns = _namespace(root)
    if root.tag[len(ns) :] != "project":
        raise ManifestMalformed(path, f"root element is <{root.tag[len(ns) :]}>, expected <project>")

    pom = _Pom(root)
    parent_group = pom.text("parent/groupId")
    parent_version = pom.text("parent/version")

    # <dependencyManagement> versions, used for versionless declarations
    managed: dict[str, tuple[str | None, str | None]] = {}
    for dep_el in pom.findall("dependencyManagement/dependencies/dependency"):
        key = _coordinate(pom, dep_el)
        if key:
            managed[key] = (pom.text("version", dep_el), pom.text("scope", dep_el))

    deps: dict[str, str] = {}
    dev_deps: dict[str, str] = {}
    for dep_el in pom.findall("dependencies/dependency"):
        key = _coordinate(pom, dep_el)
        if not key:
            continue
        version = pom.text("version", dep_el)
        if not version:
            version = managed.get(key, (None, None))[0]
        if not version and parent_group and key.startswith(parent_group + ":"):
            # BOM-style parent (spring-boot-starter-parent) pins its own group
            version = parent_version
        target = dev_deps if pom.text("scope", dep_el) == "test" else deps
        target[key] = normalize_version(version)

    for key, (version, scope) in managed.items():
        if key in deps or key in dev_deps:
            continue
        target = dev_deps if scope == "test" else deps
        target[key] = normalize_version(version)

    plugins: dict[str, str] = {}
    for plugin_el in pom.findall("build/plugins/plugin"):
        key = _coordinate(pom, plugin_el, default_group=_DEFAULT_PLUGIN_GROUP)
        if not key:
            continue
        version = pom.text("version", plugin_el)
        if not version and parent_group and key.startswith(parent_group + ":"):
            version = parent_version
        plugins[key] = normalize_version(version)

    engines: dict[str, str] = {}
    for prop in _JAVA_PROPERTIES:
        if pom.props.get(prop):
            engines["java"] = pom.props[prop]
            break

    modules = [m.text.strip() for m in pom.findall("modules/module") if m.text and m.text.strip()]

    group_id = pom.text("groupId") or parent_group or "unknown"
    artifact_id = pom.text("artifactId") or path.parent.name
    return {
        "project_name": f"{group_id}:{artifact_id}",
        "project_version": pom.text("version") or parent_version or "0.0.0",
        "dependencies": deps,
        "dev_dependencies": dev_deps,
        "peer_dependencies": plugins,
        "engines": engines,
        "workspaces": modules or None,
    }


# ── Gradle ───────────────────────────────────────────────────────────────


def _block_bodies(content: str, opener: re.Pattern) -> list[str]:
    """Bodies of every ``name { ... }`` block, found by brace matching."""
    bodies: list[str] = []
    for m in opener.finditer(content):
        depth = 1
        start = pos = m.end()
        while pos < len(content) and depth:
            if content[pos] == "{":
                depth += 1
            elif content[pos] == "}":
                depth -= 1
            pos += 1
        bodies.append(content[start : pos - 1])
    return bodies


def _strip_gradle_comments(content: str) -> str:
    content = re.sub(r"/\*.*?\*/", "", content, flags=re.DOTALL)
    return re.sub(r"(?m)^\s*//.*$", "", content)


def _bucket(config: str) -> str:
    if config.startswith(("test", "androidTest")):
        return "dev"
    if config in ("annotationProcessor", "kapt", "ksp", "classpath"):
        return "build"
    return "deps"


def _gradle_version(raw: str | None) -> str:
    # "$springVersion" / "${versions.spring}" are resolved by Gradle at build time
    if raw and "$" in raw:
        return UNKNOWN
    return normalize_version(raw)


def load_version_catalog(project_root: Path) -> dict[str, tuple[str, str]]:
    """Map ``libs.<accessor>`` names to ``(group:artifact, version)``.

    Reads ``gradle/libs.versions.toml``; an absent catalog yields ``{}``.
    """
    path = project_root / "gradle" / "libs.versions.toml"
    if not path.is_file():
        return {}

    data = load_toml(path)
    versions = {k: v for k, v in as_table(data.get("versions")).items() if isinstance(v, str)}

    catalog: dict[str, tuple[str, str]] = {}
    for alias, spec in as_table(data.get("libraries")).items():
        if isinstance(spec, str):
            parts = spec.split(":")
            if len(parts) < 2:
                continue
            module, version = f"{parts[0]}:{parts[1]}", parts[2] if len(parts) > 2 else None
        elif isinstance(spec, dict):
            if isinstance(spec.get("module"), str):
                module = spec["module"]
            elif isinstance(spec.get("group"), str) and isinstance(spec.get("name"), str):
                module = f"{spec['group']}:{spec['name']}"
            else:
                continue
            version = spec.get("version")
            if isinstance(version, dict):
                version = versions.get(version.get("ref", "")) or version.get("strictly") or version.get("require")
            elif "version.ref" in spec:
                version = versions.get(spec["version.ref"])
        else:
            continue
        # accessor: "spring-boot-web" -> libs.spring.boot.web
        accessor = re.sub(r"[-_]", ".", alias)
        catalog[accessor] = (module, normalize_version(version if isinstance(version, str) else None))
    return catalog


def parse_gradle(path: Path, content: str, catalog: Mapping[str, tuple[str, str]] | None = None) -> dict:
    """Scrape a Gradle build script into dependency maps, engines and coordinates."""
    catalog = catalog or {}
    text = _strip_gradle_comments(content)
    maps: dict[str, dict[str, str]] = {"deps": {}, "dev": {}, "build": {}}

    blocks = _block_bodies(text, _GRADLE_DEPS_BLOCK_RE)
    for body in blocks:
        found = 0
        for m in _GRADLE_DEP_RE.finditer(body):
            config, group, artifact, version = m.groups()
            maps[_bucket(config)][f"{group}:{artifact}"] = _gradle_version(version)
            found += 1
        for m in _GRADLE_MAP_DEP_RE.finditer(body):
            config, group, artifact, version = m.groups()
            maps[_bucket(config)][f"{group}:{artifact}"] = _gradle_version(version)
            found += 1
        for m in _GRADLE_CATALOG_DEP_RE.finditer(body):
            config, accessor = m.groups()
            entry = catalog.get(accessor)
            if entry is None:
                log.debug("java.catalog_alias_unresolved", alias=accessor)
                found += 1
                continue
            maps[_bucket(config)][entry[0]] = entry[1]
            found += 1

        if not found and body.strip() and not _GRADLE_CALL_RE.search(body):
            raise ManifestMalformed(path, "dependencies block has no recognizable declarations")

    for body in _block_bodies(text, _GRADLE_PLUGINS_BLOCK_RE):
        for m in _GRADLE_PLUGIN_RE.finditer(body):
            maps["build"][m.group(1)] = normalize_version(m.group(2))

    engines: dict[str, str] = {}
    for java_re in _GRADLE_JAVA_RES:
        m = java_re.search(text)
        if m:
            value = m.group(1).replace("_", ".")
            # "1.8" stays, "17" stays, "VERSION_17" -> "17"
            engines["java"] = value.rstrip(".")
            break

    group = _GRADLE_GROUP_RE.search(text)
    version = _GRADLE_VERSION_RE.search(text)
    return {
        "project_name": group.group(1) if group else None,
        "project_version": version.group(1) if version else "0.0.0",
        "dependencies": maps["deps"],
        "dev_dependencies": maps["dev"],
        "peer_dependencies": maps["build"],
        "engines": engines,
    }


def parse_settings_gradle(content: str) -> tuple[str | None, list[str]]:
    """``(rootProject.name, included modules)`` from settings.gradle(.kts)."""
    text = _strip_gradle_comments(content)
    root = _ROOT_PROJECT_RE.search(text)
    modules: list[str] = []
    for m in _INCLUDE_RE.finditer(text):
        for name in _QUOTED_RE.findall(m.group(1)):
            modules.append(name.lstrip(":"))
    return (root.group(1) if root else None), modules


def _wrapper_scripts(project_root: Path, wrapper: str, tool: str, goals: dict[str, str]) -> dict[str, str]:
    runner = f"./{wrapper}" if (project_root / wrapper).is_file() else tool
    scripts = {name: f"{runner} {goal}" for name, goal in goals.items()}
    # Makefile/justfile targets take precedence
    scripts.update(parse_task_targets(project_root))
    return scripts


class JavaAdapter:
    ecosystem = "java"

    def file_patterns(self) -> FilePatterns:
        return get_file_patterns(self.ecosystem)

    def parse_manifest(self, project_root: Path) -> ManifestResult:
        pom_path = project_root / "pom.xml"
        if pom_path.is_file():
            return self._parse_maven(project_root, pom_path)

        gradle_path = first_existing(project_root, ("build.gradle.kts", "build.gradle"))
        if gradle_path is not None:
            return self._parse_gradle(project_root, gradle_path)

        raise ManifestNotFound(pom_path)

    def _parse_maven(self, project_root: Path, pom_path: Path) -> ManifestResult:
        parsed = parse_pom(pom_path, read_manifest(pom_path))
        return ManifestResult(
            scripts=_wrapper_scripts(
                project_root, "mvnw", "mvn", {"build": "package", "test": "test", "clean": "clean"}
            ),
            package_manager="maven",
            manifest_files=["pom.xml"],
            **parsed,
        )

    def _parse_gradle(self, project_root: Path, gradle_path: Path) -> ManifestResult:
        catalog = load_version_catalog(project_root)
        parsed = parse_gradle(gradle_path, read_manifest(gradle_path), catalog)
        manifest_files = [gradle_path.name]
        if catalog:
            manifest_files.append("gradle/libs.versions.toml")

        root_name: str | None = None
        workspaces: list[str] = []
        settings = first_existing(project_root, ("settings.gradle.kts", "settings.gradle"))
        if settings is not None:
            root_name, workspaces = parse_settings_gradle(read_manifest(settings))
            manifest_files.append(settings.name)

        group = parsed.pop("project_name")
        return ManifestResult(
            project_name=root_name or group or project_root.name,
            scripts=_wrapper_scripts(
                project_root, "gradlew", "gradle", {"build": "build", "test": "test", "clean": "clean"}
            ),
            package_manager="gradle",
            workspaces=workspaces or None,
            manifest_files=manifest_files,
            **parsed,
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


register_adapter(JavaAdapter())
