"""Tests for Markdown / JSON report generation."""

import json


def test_render_markdown(engine, tc_sign):
    from signage_compliance.reporting.report import render_markdown

    md = render_markdown(engine.evaluate(tc_sign), tc_sign)
    assert md.startswith("# Compliance Report: KRS-TCS-001-v1")
    assert "| **Status** | **COMPLIANT** |" in md
    assert "| Score | 76% |" in md
    assert "## Compliance Gaps" in md
    assert "vehicles-at-risk" in md
    assert "**Action:** Add \"Vehicles left at Owners risk.\"" in md


def test_render_markdown_without_gaps(engine, entrance_sign_data):
    from signage_compliance.reporting.report import render_markdown
    from signage_compliance.signs.models import Sign

    sign = Sign.from_dict(entrance_sign_data)
    report = engine.evaluate(sign)
    assert report.score == 100

    md = render_markdown(report, sign)
    assert "## Compliance Gaps" not in md
    assert "**Site:** Kyle Rise" in md


def test_render_json(engine, tc_sign):
    from signage_compliance.reporting.report import render_json

    data = json.loads(render_json(engine.evaluate(tc_sign)))
    assert data["compliant"] is True
    assert data["summary"] == {"passed": 13, "failed": 0, "warnings": 4, "total": 17}
    assert "generated" in data


def test_generate_report_writes_files(engine, tc_sign, tmp_path):
    from signage_compliance.reporting.report import generate_report

    md_path, json_path = generate_report(engine.evaluate(tc_sign), tc_sign, tmp_path / "reports")
    assert md_path.name == "report-KRS-TCS-001-v1.md"
    assert json_path.name == "report-KRS-TCS-001-v1.json"
    assert md_path.read_text(encoding="utf-8").startswith("# Compliance Report")
    assert json.loads(json_path.read_text(encoding="utf-8"))["reference"] == "KRS-TCS-001-v1"


def test_generate_report_default_dir(engine, tc_sign):
    from signage_compliance.config import get_settings
    from signage_compliance.reporting.report import generate_report

    md_path, _ = generate_report(engine.evaluate(tc_sign), tc_sign)
    assert md_path.parent == get_settings().paths.report_dir
