"""
Report Generator
==================
Generates Markdown and JSON compliance reports for a sign.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

from signage_compliance.compliance.scorer import ComplianceReport
from signage_compliance.config import get_settings
from signage_compliance.signs.models import Sign
from signage_compliance.utils.helpers import safe_filename
from signage_compliance.utils.log import get_logger

logger = get_logger(__name__)


def generate_report(
    report: ComplianceReport,
    sign: Sign,
    output_dir: Path | None = None,
) -> tuple[Path, Path]:
    """
    Generate Markdown + JSON compliance reports for a sign.

    Returns: (markdown_path, json_path)
    """
    if output_dir is None:
        output_dir = get_settings().paths.report_dir
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    safe_name = safe_filename(sign.reference or sign.id or sign.type or "sign") or "sign"
    md_path = output_dir / f"report-{safe_name}.md"
    json_path = output_dir / f"report-{safe_name}.json"

    md_path.write_text(render_markdown(report, sign), encoding="utf-8")
    json_path.write_text(render_json(report), encoding="utf-8")

    logger.info("Reports: %s, %s", md_path.name, json_path.name)
    return md_path, json_path


def render_markdown(report: ComplianceReport, sign: Sign) -> str:
    """Render a detailed Markdown compliance report."""
    lines: list[str] = []
    status = "COMPLIANT" if report.compliant else "NON-COMPLIANT"

    lines.append(f"# Compliance Report: {sign.reference or '(unsaved sign)'}")
    lines.append("")
    lines.append(f"**Generated:** {datetime.now().strftime('%Y-%m-%d %H:%M')}")
    lines.append(f"**Sign type:** {sign.type or '—'}")
    if sign.metadata.site_name:
        lines.append(f"**Site:** {sign.metadata.site_name}")
    lines.append(f"**Rulebook:** {report.rulebook_version}")
    lines.append("")

    lines.append("## Summary")
    lines.append("")
    lines.append("| Metric | Value |")
    lines.append("|--------|-------|")
    lines.append(f"| **Status** | **{status}** |")
    lines.append(f"| Score | {report.score}% |")
    lines.append(f"| Rules checked | {report.summary.total} |")
    lines.append(f"| ✅ Passed | {report.summary.passed} |")
    lines.append(f"| ❌ Failed (required) | {report.summary.failed} |")
    lines.append(f"| ⚠️ Warnings | {report.summary.warnings} |")
    lines.append("")

    lines.append("## Rule-by-Rule Results")
    lines.append("")
    lines.append("| # | Status | Rule | Category | Message |")
    lines.append("|---|--------|------|----------|---------|")
    for i, r in enumerate(report.results, 1):
        lines.append(f"| {i} | {_icon(r.passed, r.required)} | {r.name} | {r.category} | {r.message} |")
    lines.append("")

    gaps = [r for r in report.results if not r.passed]
    if gaps:
        lines.append("## Compliance Gaps")
        lines.append("")
        for r in gaps:
            lines.append(f"### {_icon(r.passed, r.required)} {r.name}")
            lines.append(f"- **Rule ID:** {r.rule_id}")
            lines.append(f"- **Category:** {r.category}")
            if r.description:
                lines.append(f"- **Requirement:** {r.description}")
            lines.append(f"- **Finding:** {r.message}")
            if r.suggestion:
                lines.append(f"- **Action:** {r.suggestion}")
            lines.append("")

    return "\n".join(lines)


def render_json(report: ComplianceReport) -> str:
    """Render the report's wire form as indented JSON."""
    data = report.to_dict()
    data["generated"] = datetime.now().isoformat(timespec="seconds")
    return json.dumps(data, indent=2, ensure_ascii=False)


def _icon(passed: bool, required: bool) -> str:
    if passed:
        return "✅"
    return "❌" if required else "⚠️"
