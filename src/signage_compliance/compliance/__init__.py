"""Compliance engine subpackage — rulebook, matching, scoring, checking."""

from signage_compliance.compliance.checker import ComplianceEngine, check_compliance, get_engine
from signage_compliance.compliance.rules import Rule, Rulebook, get_rulebook, load_rulebook
from signage_compliance.compliance.scorer import ComplianceReport, RuleResult

__all__ = [
    "ComplianceEngine",
    "ComplianceReport",
    "Rule",
    "RuleResult",
    "Rulebook",
    "check_compliance",
    "get_engine",
    "get_rulebook",
    "load_rulebook",
]
