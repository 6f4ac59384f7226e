"""Ecosystem adapters — auto-registered on import."""

from stackscan.adapters import (
    go,  # noqa: F401
    java,  # noqa: F401
    javascript,  # noqa: F401
    php,  # noqa: F401
    python,  # noqa: F401
    rust,  # noqa: F401
)
