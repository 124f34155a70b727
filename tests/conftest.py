"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root and src to path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT / "src"))


TC_TEXT = (
    "PARKING REGULATIONS APPLY. PRIVATE LAND. By entering or remaining on this land you agree... "
    "Company registration no: 14379954. Helpline: 0345 548 1716. Personal data may be collected. "
    "Non-payment will result in debt recovery. Reduced to £60 if paid within 14 days."
)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point outputs at a temp dir and start every test from fresh settings."""
    from signage_compliance.config import reset_settings

    monkeypatch.setenv("SIGNAGE_OUTPUT_DIR", str(tmp_path / "outputs"))
    monkeypatch.delenv("SIGNAGE_RULEBOOK", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def project_root():
    return ROOT


@pytest.fixture
def rulebook():
    from signage_compliance.compliance.rules import get_rulebook

    return get_rulebook()


@pytest.fixture
def engine(rulebook):
    from signage_compliance.compliance.checker import ComplianceEngine

    return ComplianceEngine(rulebook)


@pytest.fixture
def tc_sign_data():
    """Minimal compliant terms & conditions sign, in wire form."""
    return {
        "type": "terms_conditions",
        "reference": "KRS-TCS-001-v1",
        "elements": [
            {"type": "text", "content": TC_TEXT},
            {"type": "logo", "content": "bpa-approved-operator"},
        ],
        "metadata": {
            "parkingCharge": 100,
            "reducedCharge": 60,
            "companyName": "Local Car Park Management Ltd",
            "hasAnpr": False,
        },
    }


@pytest.fixture
def tc_sign(tc_sign_data):
    from signage_compliance.signs.models import Sign

    return Sign.from_dict(tc_sign_data)


@pytest.fixture
def entrance_sign_data():
    """Entrance sign passing every entrance rule."""
    return {
        "type": "entrance",
        "reference": "KRS-ENT-001-v1",
        "elements": [
            {"type": "border", "content": "checkered-orange-blue"},
            {"type": "text", "content": "PARKING REGULATIONS APPLY", "style": {"fontSize": 48}},
            {"type": "text", "content": "This car park is private property. Vehicles left at Owners risk.",
             "style": {"fontSize": 14}},
            {"type": "text", "content": "Company registration no: 14379954. Helpline: 0345 548 1716",
             "style": {"fontSize": 11}},
            {"type": "text", "content": "Monitored by ANPR cameras", "style": {"fontSize": 14}},
            {"type": "logo", "content": "bpa-approved-operator"},
            {"type": "logo", "content": "lcpm-logo"},
        ],
        "metadata": {
            "siteName": "Kyle Rise",
            "siteCode": "KRS",
            "companyName": "Local Car Park Management Ltd",
            "hasAnpr": True,
        },
    }
