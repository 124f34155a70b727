"""
Rulebook Loader
=================
Loads the compliance rulebook from a YAML file into an immutable
`Rulebook` value. The rulebook is built once per process and passed
explicitly into the engine; nothing mutates it afterwards.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

from signage_compliance.config import get_settings
from signage_compliance.errors import RulebookError
from signage_compliance.utils.log import get_logger

logger = get_logger(__name__)

CATEGORIES = ("required", "recommended", "warning")

CHECK_KINDS = (
    "text_pattern",
    "element_content",
    "element_present",
    "metadata_max",
    "min_font_size",
)

_EMPTY: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True)
class Rule:
    """One rulebook entry. `sign_types` empty means it applies to every sign."""

    id: str
    name: str
    category: str
    check: str
    description: str = ""
    sign_types: frozenset[str] = frozenset()
    patterns: tuple[re.Pattern, ...] = ()
    messages: Mapping[str, str] = field(default_factory=lambda: _EMPTY)
    suggestion: str | None = None
    suggestion_missing: str | None = None
    suggestion_defaults: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)
    options: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)

    def applies_to(self, sign_type: str) -> bool:
        return not self.sign_types or sign_type in self.sign_types

    @property
    def required(self) -> bool:
        return self.category == "required"


@dataclass(frozen=True)
class Rulebook:
    """Ordered, immutable collection of rules plus the constants they refer to."""

    standard: str
    version: str
    rules: tuple[Rule, ...]
    constants: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)
    source: str = ""

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self):
        return iter(self.rules)

    def applicable(self, sign_type: str) -> tuple[Rule, ...]:
        """Rules that apply to a sign type, in rulebook order."""
        return tuple(r for r in self.rules if r.applies_to(sign_type))

    def by_category(self, category: str) -> tuple[Rule, ...]:
        return tuple(r for r in self.rules if r.category == category)

    def get(self, rule_id: str) -> Rule | None:
        for r in self.rules:
            if r.id == rule_id:
                return r
        return None

    def constant(self, name: str, default: Any = None) -> Any:
        return self.constants.get(name, default)


# ── Parsing ───────────────────────────────────────────


def _compile(rule_id: str, pattern: str) -> re.Pattern:
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        raise RulebookError(f"Rule '{rule_id}': invalid pattern {pattern!r}: {e}") from e


_RULE_KEYS = {
    "id", "name", "description", "category", "sign_types", "check", "patterns",
    "messages", "suggestion", "suggestion_missing", "suggestion_defaults",
}


def _parse_rule(raw: dict, index: int) -> Rule:
    if not isinstance(raw, dict):
        raise RulebookError(f"Rule #{index} is not a mapping")

    rule_id = raw.get("id")
    if not rule_id:
        raise RulebookError(f"Rule #{index} has no id")

    category = raw.get("category")
    if category not in CATEGORIES:
        raise RulebookError(f"Rule '{rule_id}': unknown category {category!r}")

    check = raw.get("check")
    if check not in CHECK_KINDS:
        raise RulebookError(f"Rule '{rule_id}': unknown check kind {check!r}")

    patterns = tuple(_compile(rule_id, p) for p in raw.get("patterns") or [])
    if check == "text_pattern" and not patterns:
        raise RulebookError(f"Rule '{rule_id}': text_pattern check needs patterns")

    messages = raw.get("messages") or {}
    for key in ("pass", "fail"):
        if key not in messages:
            raise RulebookError(f"Rule '{rule_id}': missing '{key}' message")

    options = {k: v for k, v in raw.items() if k not in _RULE_KEYS}

    return Rule(
        id=str(rule_id),
        name=raw.get("name", rule_id),
        description=raw.get("description", ""),
        category=category,
        check=check,
        sign_types=frozenset(raw.get("sign_types") or []),
        patterns=patterns,
        messages=MappingProxyType(dict(messages)),
        suggestion=raw.get("suggestion"),
        suggestion_missing=raw.get("suggestion_missing"),
        suggestion_defaults=MappingProxyType(dict(raw.get("suggestion_defaults") or {})),
        options=MappingProxyType(options),
    )


def parse_rulebook(data: dict, source: str = "") -> Rulebook:
    """Build a Rulebook from already-parsed YAML data."""
    if not isinstance(data, dict):
        raise RulebookError(f"Rulebook {source or '<data>'} is not a mapping")

    rules = tuple(_parse_rule(r, i) for i, r in enumerate(data.get("rules") or [], 1))

    seen: set[str] = set()
    for r in rules:
        if r.id in seen:
            raise RulebookError(f"Duplicate rule id '{r.id}'")
        seen.add(r.id)

    return Rulebook(
        standard=str(data.get("standard", source)),
        version=str(data.get("version", "")),
        rules=rules,
        constants=MappingProxyType(dict(data.get("constants") or {})),
        source=source,
    )


def load_rulebook(path: Path) -> Rulebook:
    """Load and validate a rulebook YAML file."""
    if not path.exists():
        raise RulebookError(f"Rulebook file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise RulebookError(f"Rulebook {path.name} is not valid YAML: {e}") from e

    rulebook = parse_rulebook(data, source=path.name)
    logger.info(
        "Loaded %d rules from %s (%s %s)",
        len(rulebook), path.name, rulebook.standard, rulebook.version,
    )
    return rulebook


# ── Process-wide default ──────────────────────────────

_rulebook_cache: dict[Path, Rulebook] = {}


def get_rulebook(path: Path | None = None) -> Rulebook:
    """The rulebook at `path` (default: configured file), loaded once per process."""
    if path is None:
        path = get_settings().compliance.rulebook_file
    path = Path(path).resolve()

    if path not in _rulebook_cache:
        _rulebook_cache[path] = load_rulebook(path)
    return _rulebook_cache[path]


def reload_rulebook() -> Rulebook:
    """Force reload of the default rulebook (clears cache)."""
    _rulebook_cache.clear()
    return get_rulebook()
