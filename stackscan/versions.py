"""Best-effort version extraction from raw version constraints.

Handles npm semver ranges, PEP 440 specifiers, Cargo requirements, Go module
versions, Maven properties and Composer constraints. The output is an
indicative version, not a resolved one: no parser walks a lockfile graph.
"""

from __future__ import annotations

import re

from stackscan.models import UNKNOWN, UNSPECIFIED

# First MAJOR.MINOR[.PATCH] token anywhere in the string
_VERSION_RE = re.compile(r"\d+\.\d+(?:\.\d+)?")

# Leading range operators: ^ ~ >= <= == != ~= and Go's "v" prefix
_LEADING_OPS_RE = re.compile(r"^(?:[\s^~><=!]|v(?=\d))+")

# Unresolved Maven / Gradle property reference
_PLACEHOLDER_RE = re.compile(r"^\$\{[^}]*\}$")

_PROTOCOL_PREFIXES = ("workspace:", "npm:")

_WILDCARDS = frozenset({"*", "x", "X", "latest"})


def normalize_version(raw: str | None) -> str:
    """Reduce a raw constraint string to an indicative version.

    ``"^2.3.1"`` -> ``"2.3.1"``, ``">=4.2,<5"`` -> ``"4.2"``, ``"v1.9.1"`` ->
    ``"1.9.1"``, ``"*"`` -> ``"unknown"``, ``None`` / ``""`` -> ``"unspecified"``.
    Idempotent on its own output.
    """
    if raw is None:
        return UNSPECIFIED
    value = str(raw).strip()
    if not value:
        return UNSPECIFIED

    # operators may sit on either side of a protocol: "^workspace:1", "workspace:^1"
    value = _LEADING_OPS_RE.sub("", value)
    for prefix in _PROTOCOL_PREFIXES:
        if value.startswith(prefix):
            value = value[len(prefix) :].strip()
            break

    stripped = _LEADING_OPS_RE.sub("", value).strip()
    if stripped in _WILDCARDS or value in _WILDCARDS:
        return UNKNOWN
    if _PLACEHOLDER_RE.match(stripped):
        return UNKNOWN

    match = _VERSION_RE.search(stripped)
    if match:
        return match.group(0)
    return stripped or UNKNOWN


def version_or_none(value: str | None) -> str | None:
    """Map a dependency-map value to the version a recognized tech carries.

    Sentinels become ``None``; anything else is normalized.
    """
    if value is None or value in (UNKNOWN, UNSPECIFIED):
        return None
    normalized = normalize_version(value)
    if normalized in (UNKNOWN, UNSPECIFIED):
        return None
    return normalized
