"""
Compliance Checker — Main Engine
==================================
Evaluates a sign against a rulebook:

1. Filter the rulebook to rules that apply to the sign's type
2. Run each rule's predicate (see matcher.py)
3. Aggregate into a ComplianceReport (see scorer.py)

The engine is a pure function of (rulebook, sign): no I/O, no shared
mutable state, safe to call concurrently. Both the CLI and the RPC
server go through `ComplianceEngine.evaluate`.
"""

from __future__ import annotations

from collections.abc import Mapping

from signage_compliance.compliance.matcher import match_rule, render
from signage_compliance.compliance.rules import Rule, Rulebook, get_rulebook
from signage_compliance.compliance.scorer import ComplianceReport, RuleResult, compute_report
from signage_compliance.signs.models import Sign
from signage_compliance.utils.log import get_logger

logger = get_logger(__name__)


class ComplianceEngine:
    """Checks signs against one immutable rulebook."""

    def __init__(self, rulebook: Rulebook):
        self.rulebook = rulebook

    def applicable_rules(self, sign_type: str) -> tuple[Rule, ...]:
        return self.rulebook.applicable(sign_type)

    def evaluate(self, sign: Sign | Mapping) -> ComplianceReport:
        """Run every applicable rule against `sign` and score the result."""
        if not isinstance(sign, Sign):
            sign = Sign.from_dict(sign)

        rules = self.applicable_rules(sign.type)
        logger.debug(
            "Checking %s (%s) against %d/%d rules",
            sign.reference or "<unsaved sign>", sign.type or "?", len(rules), len(self.rulebook),
        )

        results = []
        for rule in rules:
            outcome = match_rule(rule, sign, self.rulebook)
            results.append(
                RuleResult(
                    rule_id=rule.id,
                    name=rule.name,
                    category=rule.category,
                    passed=outcome.passed,
                    message=outcome.message,
                    suggestion=outcome.suggestion,
                    description=render(rule.description, dict(self.rulebook.constants)),
                )
            )

        return compute_report(
            results,
            sign_reference=sign.reference,
            sign_type=sign.type,
            rulebook_version=f"{self.rulebook.standard} {self.rulebook.version}".strip(),
        )


_default_engine: ComplianceEngine | None = None


def get_engine() -> ComplianceEngine:
    """Engine over the process-wide default rulebook (built once)."""
    global _default_engine
    if _default_engine is None or _default_engine.rulebook is not get_rulebook():
        _default_engine = ComplianceEngine(get_rulebook())
    return _default_engine


def check_compliance(sign: Sign | Mapping, rulebook: Rulebook | None = None) -> ComplianceReport:
    """
    Check a sign for BPA Code of Practice compliance.

    Args:
        sign: A Sign, or its JSON wire form as a mapping.
        rulebook: Rulebook to check against. Defaults to the configured one.

    Returns:
        ComplianceReport with per-rule results, score and summary.
    """
    engine = ComplianceEngine(rulebook) if rulebook is not None else get_engine()
    return engine.evaluate(sign)
