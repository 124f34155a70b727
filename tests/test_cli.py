"""Tests for the click CLI."""

import json

import pytest
from click.testing import CliRunner


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def sign_file(tmp_path, tc_sign_data):
    path = tmp_path / "tc.json"
    path.write_text(json.dumps(tc_sign_data), encoding="utf-8")
    return path


def test_version(runner):
    from signage_compliance.cli import main

    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_check_json(runner, sign_file):
    from signage_compliance.cli import main

    result = runner.invoke(main, ["check", str(sign_file), "--json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["compliant"] is True
    assert data["score"] == 76


def test_check_table(runner, sign_file):
    from signage_compliance.cli import main

    result = runner.invoke(main, ["check", str(sign_file)])
    assert result.exit_code == 0, result.output
    assert "Compliance Summary" in result.output
    assert "76%" in result.output


def test_check_strict_fails_non_compliant(runner, tmp_path):
    from signage_compliance.cli import main

    path = tmp_path / "bare.json"
    path.write_text(json.dumps({"type": "entrance", "elements": []}), encoding="utf-8")

    assert runner.invoke(main, ["check", str(path)]).exit_code == 0
    assert runner.invoke(main, ["check", str(path), "--strict"]).exit_code == 1


def test_check_directory_with_reports(runner, sign_file, tmp_path):
    from signage_compliance.cli import main

    out = tmp_path / "reports"
    result = runner.invoke(main, ["check", str(sign_file.parent), "--report", "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert (out / "report-KRS-TCS-001-v1.md").exists()
    assert (out / "report-KRS-TCS-001-v1.json").exists()


def test_check_unreadable_file(runner, tmp_path):
    from signage_compliance.cli import main

    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    result = runner.invoke(main, ["check", str(path)])
    assert result.exit_code == 1


def test_rules_for_type(runner):
    from signage_compliance.cli import main

    result = runner.invoke(main, ["rules", "--type", "disabled"])
    assert result.exit_code == 0, result.output
    assert "border-visibility" in result.output
    assert "parking-charge-amount" not in result.output
    assert "2 rule(s)" in result.output


def test_templates(runner):
    from signage_compliance.cli import main

    result = runner.invoke(main, ["templates", "--type", "tariff"])
    assert result.exit_code == 0, result.output
    assert "tariff-standard" in result.output


def test_reference(runner):
    from signage_compliance.cli import main

    result = runner.invoke(main, ["reference", "krs", "entrance", "1"])
    assert result.exit_code == 0
    assert result.output.strip() == "KRS-ENT-001-v1"

    result = runner.invoke(main, ["reference", "krs", "unknown_type", "7", "--version", "2"])
    assert result.output.strip() == "KRS-GEN-007-v2"


def test_create_writes_sign(runner, tmp_path):
    from signage_compliance.cli import main

    out = tmp_path / "sign.json"
    result = runner.invoke(main, [
        "create", "terms-conditions-standard", "-s", "KRS", "-n", "Kyle Rise", "-o", str(out),
    ])
    assert result.exit_code == 0, result.output
    sign = json.loads(out.read_text(encoding="utf-8"))
    assert sign["reference"] == "KRS-TCS-001-v1"
    assert sign["metadata"]["hasAnpr"] is True


def test_create_default_location(runner):
    from signage_compliance.cli import main
    from signage_compliance.config import get_settings

    result = runner.invoke(main, ["create", "entrance-standard", "-s", "KRS", "-n", "Kyle Rise", "--no-anpr"])
    assert result.exit_code == 0, result.output
    path = get_settings().paths.sign_dir / "KRS-ENT-001-v1.json"
    assert json.loads(path.read_text(encoding="utf-8"))["metadata"]["hasAnpr"] is False


def test_create_rejects_excess_charge(runner, tmp_path):
    from signage_compliance.cli import main

    result = runner.invoke(main, [
        "create", "terms-conditions-standard", "-s", "KRS", "-n", "Kyle Rise",
        "--parking-charge", "150", "-o", str(tmp_path / "x.json"),
    ])
    assert result.exit_code == 1
    assert "exceeds BPA maximum" in result.output
    assert not (tmp_path / "x.json").exists()


def test_create_rejects_negative_charge(runner, tmp_path):
    from signage_compliance.cli import main

    result = runner.invoke(main, [
        "create", "terms-conditions-standard", "-s", "KRS", "-n", "Kyle Rise",
        "--parking-charge", "-5", "-o", str(tmp_path / "x.json"),
    ])
    assert result.exit_code == 1
    assert "cannot be negative" in result.output
    assert not (tmp_path / "x.json").exists()


def test_serve_over_cli(runner):
    from signage_compliance.cli import main

    request = json.dumps({"jsonrpc": "2.0", "id": 1, "method": "initialize", "params": {}}) + "\n"
    result = runner.invoke(main, ["serve"], input=request)
    assert result.exit_code == 0
    responses = [line for line in result.output.splitlines() if line.startswith('{"jsonrpc"')]
    assert len(responses) == 1
    response = json.loads(responses[0])
    assert response["result"]["serverInfo"]["name"] == "signage-designer"
