"""Per-ecosystem file patterns: which dirs to skip and which files count as code."""

from __future__ import annotations

from stackscan.models import FilePatterns

# Ignored regardless of ecosystem
COMMON_IGNORE = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        ".idea",
        ".vscode",
        ".cache",
        "coverage",
    }
)

ECOSYSTEM_PATTERNS: dict[str, FilePatterns] = {
    "javascript": FilePatterns(
        source_extensions=frozenset({"ts", "tsx", "js", "jsx", "mjs", "cjs", "vue", "svelte", "astro"}),
        ignore_dirs=COMMON_IGNORE
        | {"node_modules", ".next", ".nuxt", ".svelte-kit", ".vercel", ".turbo", ".output", "dist", "build", "out"},
        manifest_files=("package.json",),
    ),
    "python": FilePatterns(
        source_extensions=frozenset({"py", "pyi"}),
        ignore_dirs=COMMON_IGNORE
        | {
            "__pycache__",
            ".venv",
            "venv",
            "env",
            ".tox",
            ".nox",
            ".mypy_cache",
            ".pytest_cache",
            ".ruff_cache",
            ".eggs",
            "build",
            "dist",
            "site-packages",
        },
        manifest_files=("pyproject.toml", "requirements.txt", "setup.py", "Pipfile"),
    ),
    "rust": FilePatterns(
        source_extensions=frozenset({"rs"}),
        ignore_dirs=COMMON_IGNORE | {"target"},
        manifest_files=("Cargo.toml",),
    ),
    "go": FilePatterns(
        source_extensions=frozenset({"go"}),
        ignore_dirs=COMMON_IGNORE | {"vendor", "bin", "testdata"},
        manifest_files=("go.mod",),
    ),
    "java": FilePatterns(
        source_extensions=frozenset({"java", "kt", "kts", "groovy", "scala"}),
        ignore_dirs=COMMON_IGNORE | {"target", "build", "out", ".gradle", ".mvn", "bin"},
        manifest_files=("pom.xml", "build.gradle", "build.gradle.kts"),
    ),
    "php": FilePatterns(
        source_extensions=frozenset({"php", "phtml"}),
        ignore_dirs=COMMON_IGNORE | {"vendor", "storage", "var", "node_modules"},
        manifest_files=("composer.json",),
    ),
}


def get_file_patterns(ecosystem: str) -> FilePatterns:
    """Return the file patterns for *ecosystem* (KeyError if unknown)."""
    return ECOSYSTEM_PATTERNS[ecosystem]
