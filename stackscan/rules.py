"""Table-driven framework detection and stack classification.

Every ecosystem adapter describes its knowledge as data: an ordered tuple of
:class:`FrameworkRule` and an ordered tuple of :class:`Rule`, bundled with its
noise lists in a :class:`RuleTable`. The two functions here interpret those
tables; adding a technology never requires touching control flow.

Classification is sequential by construction: rule ``N`` sees the claim
state left by rules ``1..N-1``. A rule claims every present trigger key at
once, so an umbrella rule (e.g. a design system built on primitives) hides
the narrower rule that would otherwise match the same keys.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass

from stackscan.models import (
    UNKNOWN,
    DependencyMap,
    DetectedStack,
    FrameworkInfo,
    RecognizedTech,
    StructureFacts,
)
from stackscan.versions import version_or_none

# (dependency key, rule key) -> does the dependency satisfy the rule key
Matcher = Callable[[str, str], bool]

# (merged deps, structure facts) -> corroborating evidence present
Condition = Callable[[Mapping[str, str], StructureFacts], bool]

# (merged deps, structure facts) -> variant tag or None
VariantFn = Callable[[Mapping[str, str], StructureFacts], str | None]


def exact_match(key: str, pattern: str) -> bool:
    return key == pattern


def prefix_match(key: str, prefix: str) -> bool:
    return key.startswith(prefix)


def module_match(key: str, pattern: str) -> bool:
    """Hierarchical module path match: ``foo`` matches ``foo`` and ``foo/v5``."""
    return key == pattern or key.startswith(pattern + "/")


def coordinate_match(key: str, pattern: str) -> bool:
    """Maven coordinate prefix: a groupId matches its artifacts and subgroups."""
    return key == pattern or key.startswith(pattern + ":") or key.startswith(pattern + ".")


@dataclass(frozen=True)
class Rule:
    """One recognizable technology.

    ``version_from`` names the trigger key whose version is reported; by
    default the first trigger key present in the manifest is used.
    """

    packages: tuple[str, ...]
    name: str
    category: str
    version_from: str | None = None
    condition: Condition | None = None


@dataclass(frozen=True)
class FrameworkRule:
    """One application framework, in precedence order within its table."""

    packages: tuple[str, ...]
    name: str
    requires_all: bool = False
    variant: VariantFn | None = None


@dataclass(frozen=True)
class RuleTable:
    """All detection knowledge for one ecosystem."""

    rules: tuple[Rule, ...]
    frameworks: tuple[FrameworkRule, ...]
    framework_packages: frozenset[str]
    noise_exact: frozenset[str] = frozenset()
    noise_prefixes: tuple[str, ...] = ()
    matcher: Matcher = exact_match
    noise_matcher: Matcher = prefix_match


def merge_deps(deps: Mapping[str, str], dev_deps: Mapping[str, str]) -> DependencyMap:
    """Runtime deps first; a dev entry never overrides a runtime version."""
    merged = dict(deps)
    for name, version in dev_deps.items():
        merged.setdefault(name, version)
    return merged


def _present(patterns: Iterable[str], keys: list[str], matcher: Matcher) -> list[str]:
    found: list[str] = []
    for pattern in patterns:
        for key in keys:
            if key not in found and matcher(key, pattern):
                found.append(key)
    return found


def _first_key(pattern: str, keys: list[str], matcher: Matcher) -> str | None:
    for key in keys:
        if matcher(key, pattern):
            return key
    return None


def detect_framework(
    table: RuleTable,
    deps: Mapping[str, str],
    dev_deps: Mapping[str, str],
    facts: StructureFacts | None = None,
) -> FrameworkInfo | None:
    """Return the first framework in *table* whose packages are present."""
    facts = facts or StructureFacts()
    all_deps = merge_deps(deps, dev_deps)
    keys = list(all_deps)

    for fw in table.frameworks:
        if fw.requires_all:
            if not all(_first_key(p, keys, table.matcher) for p in fw.packages):
                continue
        present = _present(fw.packages, keys, table.matcher)
        if not present:
            continue
        version = version_or_none(all_deps[present[0]]) or UNKNOWN
        variant = fw.variant(all_deps, facts) if fw.variant else None
        return FrameworkInfo(name=fw.name, version=version, variant=variant)
    return None


def classify(
    table: RuleTable,
    deps: Mapping[str, str],
    dev_deps: Mapping[str, str],
    facts: StructureFacts | None = None,
) -> DetectedStack:
    """Sort every dependency key into recognized, framework, noise or unrecognized.

    Each key lands in exactly one bucket. Recognized entries record the keys
    they claimed in ``RecognizedTech.packages``.
    """
    facts = facts or StructureFacts()
    all_deps = merge_deps(deps, dev_deps)
    keys = list(all_deps)

    claimed: set[str] = set()
    recognized: dict[str, RecognizedTech] = {}

    for rule in table.rules:
        if rule.name in recognized:
            continue
        present = _present(rule.packages, keys, table.matcher)
        if not present:
            continue
        if all(key in claimed for key in present):
            continue
        if rule.condition is not None and not rule.condition(all_deps, facts):
            continue

        version_key = present[0]
        if rule.version_from is not None:
            version_key = _first_key(rule.version_from, keys, table.matcher) or version_key

        recognized[rule.name] = RecognizedTech(
            name=rule.name,
            version=version_or_none(all_deps[version_key]),
            category=rule.category,
            packages=tuple(key for key in present if key not in claimed),
        )
        claimed.update(present)

    for fw_pkg in sorted(table.framework_packages):
        for key in keys:
            if table.matcher(key, fw_pkg):
                claimed.add(key)

    unrecognized: list[str] = []
    for key in keys:
        if key in claimed or key in table.noise_exact:
            continue
        if any(table.noise_matcher(key, prefix) for prefix in table.noise_prefixes):
            continue
        unrecognized.append(key)

    return DetectedStack(recognized=recognized, unrecognized=unrecognized)
