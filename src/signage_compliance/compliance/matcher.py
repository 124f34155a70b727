"""
Rule Matcher
==============
Evaluates a single rulebook entry against a sign.

Text checks run against the content of every text element joined with
single spaces, case-insensitively. A rule can therefore be satisfied by
fragments spread across unrelated elements; this matches the behaviour
signs have always been checked with and is kept as-is.

Every check is total over any Sign: missing metadata fails the rule
that needs it, nothing here raises.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from signage_compliance.compliance.rules import Rule, Rulebook
from signage_compliance.signs.models import Sign
from signage_compliance.utils.helpers import as_number, integral
from signage_compliance.utils.log import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class RuleOutcome:
    """Result of one predicate: pass/fail plus human-readable guidance."""

    passed: bool
    message: str
    suggestion: str | None = None


class _FormatFields(dict):
    """Leaves unknown {placeholders} untouched instead of raising."""

    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def sign_text(sign: Sign) -> str:
    """All text element content joined by single spaces."""
    return " ".join(e.content for e in sign.elements if e.kind == "text")


def render(template: str | None, fields: dict) -> str | None:
    """Fill {placeholders} from `fields`; unknown ones are left as written."""
    if template is None:
        return None
    return template.format_map(_FormatFields(fields))


def _fields(rule: Rule, sign: Sign, rulebook: Rulebook, **extra: Any) -> dict:
    fields: dict[str, Any] = dict(rulebook.constants)
    fields.update(sign.metadata.to_dict())
    for key, default in rule.suggestion_defaults.items():
        if not sign.metadata.get(key):
            fields[key] = default
    fields.update({k: integral(v) for k, v in extra.items()})
    return fields


def _outcome(rule: Rule, passed: bool, fields: dict) -> RuleOutcome:
    key = "pass" if passed else "fail"
    return RuleOutcome(
        passed=passed,
        message=render(rule.messages.get(key, ""), fields),
        suggestion=None if passed else render(rule.suggestion, fields),
    )


# ── Check kinds ───────────────────────────────────────


def _check_text_pattern(rule: Rule, sign: Sign, rulebook: Rulebook) -> RuleOutcome:
    fields = _fields(rule, sign, rulebook)

    gate = rule.options.get("only_if_metadata")
    if gate and not sign.metadata.get(gate):
        return RuleOutcome(passed=True, message=render(rule.messages.get("skipped", rule.messages["pass"]), fields))

    text = sign_text(sign)
    passed = any(p.search(text) for p in rule.patterns)

    for key in rule.options.get("requires_metadata") or []:
        if not sign.metadata.get(key):
            passed = False

    return _outcome(rule, passed, fields)


def _check_element_content(rule: Rule, sign: Sign, rulebook: Rulebook) -> RuleOutcome:
    kind = rule.options.get("element_kind")
    contains = str(rule.options.get("contains", "")).lower()
    excludes = rule.options.get("excludes")

    def matches(content: str) -> bool:
        content = content.lower()
        if excludes is not None and str(excludes).lower() in content:
            return False
        return contains in content

    passed = any(e.kind == kind and matches(e.content) for e in sign.elements)
    return _outcome(rule, passed, _fields(rule, sign, rulebook))


def _check_element_present(rule: Rule, sign: Sign, rulebook: Rulebook) -> RuleOutcome:
    kind = rule.options.get("element_kind")
    passed = any(e.kind == kind for e in sign.elements)
    return _outcome(rule, passed, _fields(rule, sign, rulebook))


def _limit(rule: Rule, rulebook: Rulebook, key: str) -> Any:
    """Option value that is either a number or the name of a rulebook constant."""
    raw = rule.options.get(key)
    if isinstance(raw, str):
        return rulebook.constant(raw)
    return raw


def _check_metadata_max(rule: Rule, sign: Sign, rulebook: Rulebook) -> RuleOutcome:
    limit = _limit(rule, rulebook, "max")
    value = as_number(sign.metadata.get(rule.options.get("field", "")))
    fields = _fields(rule, sign, rulebook, value=value, max=limit)

    # zero counts as "not specified", same as an absent field
    if not value or limit is None:
        return RuleOutcome(
            passed=False,
            message=render(rule.messages.get("missing", rule.messages["fail"]), fields),
            suggestion=render(rule.suggestion_missing or rule.suggestion, fields),
        )

    return _outcome(rule, value <= limit, fields)


def _check_min_font_size(rule: Rule, sign: Sign, rulebook: Rulebook) -> RuleOutcome:
    minimum = _limit(rule, rulebook, "min")
    too_small = [
        e for e in sign.text_elements()
        if e.style.font_size and minimum is not None and e.style.font_size < minimum
    ]
    fields = _fields(rule, sign, rulebook, count=len(too_small), min=minimum)
    return _outcome(rule, not too_small, fields)


CHECKS: dict[str, Callable[[Rule, Sign, Rulebook], RuleOutcome]] = {
    "text_pattern": _check_text_pattern,
    "element_content": _check_element_content,
    "element_present": _check_element_present,
    "metadata_max": _check_metadata_max,
    "min_font_size": _check_min_font_size,
}


def match_rule(rule: Rule, sign: Sign, rulebook: Rulebook) -> RuleOutcome:
    """Run one rule's predicate against a sign."""
    outcome = CHECKS[rule.check](rule, sign, rulebook)
    logger.debug("  %s → %s (%s)", rule.id, "PASS" if outcome.passed else "FAIL", outcome.message)
    return outcome
