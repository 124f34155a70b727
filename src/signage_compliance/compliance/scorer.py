"""
Compliance Scorer
==================
Aggregates per-rule results into a ComplianceReport.

- compliant: every applicable *required* rule passed
- score: round-half-up(100 × passed / applicable)
- summary: passed / failed required / failed non-required (warnings)
"""

from __future__ import annotations

from dataclasses import dataclass, field

from signage_compliance.utils.log import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class RuleResult:
    """Outcome of one applicable rule, as reported back to callers."""

    rule_id: str
    name: str
    category: str
    passed: bool
    message: str
    suggestion: str | None = None
    description: str = ""

    @property
    def required(self) -> bool:
        return self.category == "required"

    def to_dict(self) -> dict:
        return {
            "id": self.rule_id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "required": self.required,
            "passed": self.passed,
            "message": self.message,
            "suggestion": self.suggestion,
        }


@dataclass(frozen=True)
class ComplianceSummary:
    passed: int = 0
    failed: int = 0  # failed required rules
    warnings: int = 0  # failed recommended/warning rules

    @property
    def total(self) -> int:
        return self.passed + self.failed + self.warnings

    def to_dict(self) -> dict:
        return {
            "passed": self.passed,
            "failed": self.failed,
            "warnings": self.warnings,
            "total": self.total,
        }


@dataclass(frozen=True)
class ComplianceReport:
    """Derived, ephemeral result of evaluating one sign snapshot."""

    compliant: bool
    score: int
    results: tuple[RuleResult, ...] = ()
    summary: ComplianceSummary = field(default_factory=ComplianceSummary)
    sign_reference: str = ""
    sign_type: str = ""
    rulebook_version: str = ""

    @property
    def failed_required(self) -> list[RuleResult]:
        return [r for r in self.results if r.required and not r.passed]

    @property
    def failed_advisory(self) -> list[RuleResult]:
        return [r for r in self.results if not r.required and not r.passed]

    def result_for(self, rule_id: str) -> RuleResult | None:
        for r in self.results:
            if r.rule_id == rule_id:
                return r
        return None

    @property
    def rule_ids(self) -> list[str]:
        return [r.rule_id for r in self.results]

    def to_dict(self) -> dict:
        return {
            "reference": self.sign_reference,
            "signType": self.sign_type,
            "rulebookVersion": self.rulebook_version,
            "compliant": self.compliant,
            "score": self.score,
            "results": [r.to_dict() for r in self.results],
            "summary": self.summary.to_dict(),
        }


def compute_score(passed: int, total: int) -> int:
    """Percentage of applicable rules that passed. No applicable rules scores 100."""
    if total <= 0:
        return 100
    # 100 * passed / total rounded half up, in integer arithmetic
    return (200 * passed + total) // (2 * total)


def compute_report(
    results: list[RuleResult],
    sign_reference: str = "",
    sign_type: str = "",
    rulebook_version: str = "",
) -> ComplianceReport:
    """Build the report for a sign from its per-rule results."""
    passed = sum(1 for r in results if r.passed)
    failed = sum(1 for r in results if not r.passed and r.required)
    warnings = sum(1 for r in results if not r.passed and not r.required)

    report = ComplianceReport(
        compliant=failed == 0,
        score=compute_score(passed, len(results)),
        results=tuple(results),
        summary=ComplianceSummary(passed=passed, failed=failed, warnings=warnings),
        sign_reference=sign_reference,
        sign_type=sign_type,
        rulebook_version=rulebook_version,
    )

    logger.info(
        "Score: %s → %s (%d%%) — %d PASS, %d required FAIL, %d warnings",
        sign_reference or "<unsaved sign>",
        "COMPLIANT" if report.compliant else "NON-COMPLIANT",
        report.score, passed, failed, warnings,
    )
    return report
