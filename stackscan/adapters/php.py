"""PHP adapter — composer.json."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from stackscan.adapters._io import as_table, load_json, section_table
from stackscan.models import (
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

# Extensions that reveal a backend choice; kept as engines
NOTABLE_EXTENSIONS = frozenset(
    {"ext-redis", "ext-mongodb", "ext-imagick", "ext-gd", "ext-swoole", "ext-grpc", "ext-amqp"}
)

_LARAVEL_COMMANDS = {
    "php artisan serve": "Start development server",
    "php artisan migrate": "Run database migrations",
    "php artisan test": "Run tests",
    "php artisan tinker": "Interactive REPL",
}

_SYMFONY_COMMANDS = {
    "php bin/console server:start": "Start development server",
    "php bin/console cache:clear": "Clear cache",
    "php bin/console doctrine:migrations:migrate": "Run migrations",
    "php bin/console debug:router": "Show routes",
}


def _laravel_variant(all_deps: Mapping[str, str], _facts: StructureFacts) -> str | None:
    if "inertiajs/inertia-laravel" in all_deps:
        return "inertia"
    if "livewire/livewire" in all_deps:
        return "livewire"
    return None


def _symfony_variant(all_deps: Mapping[str, str], _facts: StructureFacts) -> str:
    if "api-platform/core" in all_deps:
        return "api-platform"
    if "twig/twig" in all_deps:
        return "full-stack"
    return "api"


FRAMEWORKS: tuple[FrameworkRule, ...] = (
    FrameworkRule(("laravel/framework",), "laravel", variant=_laravel_variant),
    FrameworkRule(("symfony/framework-bundle", "symfony/symfony"), "symfony", variant=_symfony_variant),
    FrameworkRule(("slim/slim",), "slim"),
    FrameworkRule(("codeigniter4/framework",), "codeigniter"),
    FrameworkRule(("cakephp/cakephp",), "cakephp"),
    FrameworkRule(("yiisoft/yii2",), "yii2"),
)

FRAMEWORK_PACKAGES = frozenset(
    {
        "laravel/framework",
        "symfony/framework-bundle",
        "symfony/symfony",
        "slim/slim",
        "slim/psr7",
        "codeigniter4/framework",
        "cakephp/cakephp",
        "yiisoft/yii2",
    }
)

RULES: tuple[Rule, ...] = (
    # ===== ORM / Database =====
    Rule(("doctrine/orm", "doctrine/dbal"), "doctrine", "orm"),
    Rule(("illuminate/database",), "eloquent", "orm"),
    Rule(("cycle/orm",), "cycle-orm", "orm"),
    Rule(("propel/propel",), "propel", "orm"),
    Rule(("predis/predis",), "predis", "database"),
    Rule(("mongodb/mongodb",), "mongodb", "database"),
    Rule(("phpredis/phpredis",), "phpredis", "database"),
    # ===== Migration =====
    Rule(("doctrine/migrations",), "doctrine-migrations", "migration"),
    Rule(("phinx/phinx", "robmorgan/phinx"), "phinx", "migration"),
    # ===== Testing / quality =====
    Rule(("phpunit/phpunit",), "phpunit", "testing"),
    Rule(("pestphp/pest",), "pest", "testing"),
    Rule(("phpspec/phpspec",), "phpspec", "testing"),
    Rule(("codeception/codeception",), "codeception", "testing"),
    Rule(("mockery/mockery",), "mockery", "testing"),
    Rule(("phpstan/phpstan",), "phpstan", "linter"),
    Rule(("vimeo/psalm",), "psalm", "linter"),
    Rule(("squizlabs/php_codesniffer",), "phpcs", "linter"),
    Rule(("friendsofphp/php-cs-fixer",), "php-cs-fixer", "formatter"),
    Rule(("laravel/pint",), "pint", "formatter"),
    Rule(("rector/rector",), "rector", "linter"),
    Rule(("brianium/paratest",), "paratest", "testing"),
    Rule(("laravel/dusk",), "dusk", "testing"),
    # ===== Auth / Security =====
    Rule(("laravel/sanctum",), "sanctum", "auth"),
    Rule(("laravel/passport",), "passport", "auth"),
    Rule(("tymon/jwt-auth",), "jwt-auth", "auth"),
    Rule(("lcobucci/jwt",), "lcobucci-jwt", "auth"),
    Rule(("laravel/socialite",), "socialite", "auth"),
    Rule(("laravel/fortify",), "fortify", "auth"),
    Rule(("laravel/breeze",), "breeze", "auth"),
    Rule(("laravel/jetstream",), "jetstream", "auth"),
    Rule(("symfony/security-bundle",), "symfony-security", "auth"),
    Rule(("symfony/security-csrf",), "symfony-csrf", "auth"),
    # ===== Validation =====
    Rule(("respect/validation",), "respect-validation", "validation"),
    Rule(("rakit/validation",), "rakit-validation", "validation"),
    Rule(("symfony/validator",), "symfony-validator", "validation"),
    # ===== Template =====
    Rule(("twig/twig",), "twig", "template"),
    # ===== API =====
    Rule(("api-platform/core",), "api-platform", "api"),
    Rule(("league/fractal",), "fractal", "api"),
    Rule(("webonyx/graphql-php",), "graphql-php", "api"),
    Rule(("grpc/grpc",), "grpc-php", "api"),
    Rule(("nelmio/api-doc-bundle",), "nelmio-api-doc", "api"),
    Rule(("knuckleswtf/scribe",), "scribe", "api"),
    Rule(("spatie/laravel-data",), "laravel-data", "api"),
    Rule(("spatie/laravel-query-builder",), "laravel-query-builder", "api"),
    Rule(("laravel/octane",), "octane", "server"),
    # ===== HTTP client =====
    Rule(("guzzlehttp/guzzle",), "guzzle", "http-client"),
    Rule(("symfony/http-client",), "symfony-http-client", "http-client"),
    # ===== Jobs / Queue / Messaging =====
    Rule(("php-amqplib/php-amqplib",), "amqp", "jobs"),
    Rule(("laravel/horizon",), "horizon", "jobs"),
    Rule(("symfony/messenger",), "symfony-messenger", "jobs"),
    Rule(("enqueue/enqueue-bundle",), "enqueue", "jobs"),
    # ===== Logging =====
    Rule(("monolog/monolog",), "monolog", "logging"),
    # ===== Config / Environment =====
    Rule(("vlucas/phpdotenv",), "phpdotenv", "config"),
    Rule(("symfony/dotenv",), "symfony-dotenv", "config"),
    # ===== Admin =====
    Rule(("laravel/nova",), "nova", "admin"),
    Rule(("filament/filament",), "filament", "admin"),
    Rule(("easycorp/easyadmin-bundle",), "easyadmin", "admin"),
    Rule(("sonata-project/admin-bundle",), "sonata-admin", "admin"),
    # ===== Payments =====
    Rule(("stripe/stripe-php",), "stripe", "payments"),
    Rule(("laravel/cashier",), "cashier", "payments"),
    Rule(("laravel/cashier-paddle",), "cashier-paddle", "payments"),
    # ===== Email =====
    Rule(("symfony/mailer",), "symfony-mailer", "email"),
    Rule(("phpmailer/phpmailer",), "phpmailer", "email"),
    Rule(("mailgun/mailgun-php",), "mailgun", "email"),
    # ===== Observability =====
    Rule(("sentry/sentry-laravel", "sentry/sentry-symfony", "sentry/sentry"), "sentry", "observability"),
    Rule(("laravel/telescope",), "telescope", "observability"),
    Rule(("barryvdh/laravel-debugbar",), "debugbar", "observability"),
    Rule(("symfony/web-profiler-bundle",), "symfony-profiler", "observability"),
    # ===== Serialization =====
    Rule(("symfony/serializer",), "symfony-serializer", "serialization"),
    Rule(("jms/serializer",), "jms-serializer", "serialization"),
    # ===== Caching =====
    Rule(("symfony/cache",), "symfony-cache", "caching"),
    # ===== Middleware / CORS =====
    Rule(("laravel/cors", "fruitcake/laravel-cors"), "laravel-cors", "middleware"),
    Rule(("nelmio/cors-bundle",), "nelmio-cors", "middleware"),
    # ===== Frontend integration =====
    Rule(("livewire/livewire",), "livewire", "ui-components"),
    Rule(("inertiajs/inertia-laravel",), "inertia", "ui-components"),
    # ===== Symfony components =====
    Rule(("symfony/console",), "symfony-console", "cli"),
    Rule(("symfony/form",), "symfony-form", "forms"),
    Rule(("symfony/workflow",), "symfony-workflow", "state"),
    Rule(("symfony/event-dispatcher",), "symfony-events", "middleware"),
    Rule(("symfony/notifier",), "symfony-notifier", "email"),
    Rule(("symfony/scheduler",), "symfony-scheduler", "jobs"),
    # ===== Spatie ecosystem =====
    Rule(("spatie/laravel-permission",), "laravel-permission", "auth"),
    Rule(("spatie/laravel-medialibrary",), "laravel-medialibrary", "file-upload"),
    Rule(("spatie/laravel-activitylog",), "laravel-activitylog", "logging"),
    Rule(("spatie/laravel-backup",), "laravel-backup", "deployment"),
    Rule(("spatie/laravel-translatable",), "laravel-translatable", "i18n"),
    Rule(("spatie/laravel-sluggable",), "laravel-sluggable", "orm"),
    Rule(("spatie/laravel-settings",), "laravel-settings", "config"),
    # ===== i18n =====
    Rule(("symfony/translation",), "symfony-translation", "i18n"),
    # ===== File storage =====
    Rule(("league/flysystem",), "flysystem", "file-upload"),
    Rule(("intervention/image",), "intervention-image", "file-upload"),
    # ===== Realtime =====
    Rule(("beyondcode/laravel-websockets", "pusher/pusher-php-server"), "laravel-websockets", "realtime"),
    Rule(("laravel/reverb",), "reverb", "realtime"),
    # ===== CMS =====
    Rule(("statamic/cms",), "statamic", "cms"),
    # ===== Search =====
    Rule(("laravel/scout",), "scout", "database"),
    Rule(("meilisearch/meilisearch-php",), "meilisearch", "database"),
    Rule(("algolia/algoliasearch-client-php",), "algolia", "database"),
    Rule(("elasticsearch/elasticsearch",), "elasticsearch", "database"),
)

NOISE_EXACT = frozenset(
    {
        "php",
        # Composer internals
        "composer/installers", "composer-plugin-api", "composer/semver",
        # PSR interfaces
        "psr/log", "psr/http-message", "psr/container", "psr/cache",
        "psr/event-dispatcher", "psr/simple-cache", "psr/http-client",
        "psr/http-factory", "psr/http-server-handler", "psr/http-server-middleware",
        "psr/clock", "psr/link",
        # Low-level deps that are always pulled transitively
        "symfony/deprecation-contracts", "symfony/service-contracts",
        "symfony/event-dispatcher-contracts", "symfony/http-kernel",
        "symfony/http-foundation", "symfony/routing", "symfony/dependency-injection",
        "symfony/config", "symfony/filesystem", "symfony/finder",
        "symfony/string", "symfony/var-dumper", "symfony/var-exporter",
        "symfony/property-access", "symfony/property-info",
        "symfony/options-resolver", "symfony/mime", "symfony/error-handler",
        "symfony/process", "symfony/yaml", "symfony/expression-language",
        # Doctrine internals
        "doctrine/annotations", "doctrine/cache", "doctrine/collections",
        "doctrine/common", "doctrine/event-manager", "doctrine/inflector",
        "doctrine/instantiator", "doctrine/lexer", "doctrine/persistence",
        # Laravel internals
        "illuminate/support", "illuminate/contracts", "illuminate/collections",
        "illuminate/conditionable", "illuminate/macroable", "illuminate/pipeline",
        "illuminate/container", "illuminate/events", "illuminate/bus",
        # Misc utility packages
        "nesbot/carbon", "ramsey/uuid", "league/commonmark",
        "nikic/php-parser", "phpoption/phpoption", "graham-campbell/result-type",
        "webmozart/assert", "brick/math",
        "dragonmantank/cron-expression",
        "egulias/email-validator",
        "dflydev/dot-access-data",
        "nunomaduro/termwind", "nunomaduro/collision",
        "laravel/serializable-closure", "laravel/prompts",
        "laravel/tinker",
    }
)  # fmt: skip

NOISE_PREFIXES: tuple[str, ...] = ("ext-", "symfony/polyfill-")

TABLE = RuleTable(
    rules=RULES,
    frameworks=FRAMEWORKS,
    framework_packages=FRAMEWORK_PACKAGES,
    noise_exact=NOISE_EXACT,
    noise_prefixes=NOISE_PREFIXES,
)


def _split_requirements(table: dict[str, Any], engines: dict[str, str]) -> dict[str, str]:
    """Normalize a require map, routing ``php`` and ``ext-*`` out of the deps."""
    deps: dict[str, str] = {}
    for name, constraint in table.items():
        constraint = constraint if isinstance(constraint, str) else None
        if name == "php":
            if constraint:
                engines.setdefault("php", constraint)
            continue
        if name.startswith("ext-"):
            if name in NOTABLE_EXTENSIONS and constraint:
                engines.setdefault(name, constraint)
            continue
        deps[name] = normalize_version(constraint)
    return deps


def _composer_scripts(table: Any) -> dict[str, str]:
    scripts: dict[str, str] = {}
    for name, cmd in as_table(table).items():
        # post-install-cmd, pre-update-cmd, ...
        if name.startswith(("post-", "pre-")):
            continue
        if isinstance(cmd, str):
            scripts[f"composer {name}"] = cmd
        elif isinstance(cmd, list):
            # @-references point at other scripts; keep shell commands only
            shell = [c for c in cmd if isinstance(c, str) and not c.startswith("@")]
            if shell:
                scripts[f"composer {name}"] = " && ".join(shell)
    return scripts


class PhpAdapter:
    ecosystem = "php"

    def file_patterns(self) -> FilePatterns:
        return get_file_patterns(self.ecosystem)

    def parse_manifest(self, project_root: Path) -> ManifestResult:
        path = project_root / "composer.json"
        data = load_json(path)

        engines: dict[str, str] = {}
        deps = _split_requirements(section_table(path, data, "require"), engines)
        dev_deps = _split_requirements(section_table(path, data, "require-dev"), engines)

        scripts = _composer_scripts(data.get("scripts"))
        if (project_root / "artisan").is_file():
            scripts.update(_LARAVEL_COMMANDS)
        if (project_root / "bin" / "console").is_file():
            scripts.update(_SYMFONY_COMMANDS)

        name = data.get("name")
        version = data.get("version")
        return ManifestResult(
            project_name=name if isinstance(name, str) else project_root.name,
            project_version=version if isinstance(version, str) else "0.0.0",
            dependencies=deps,
            dev_dependencies=dev_deps,
            scripts=scripts,
            engines=engines,
            package_manager="composer",
            manifest_files=["composer.json"],
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


register_adapter(PhpAdapter())
