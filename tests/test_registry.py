"""Tests for the session sign registry and sign creation."""

import pytest

from signage_compliance.errors import SignNotFoundError, TemplateNotFoundError, ValidationError
from signage_compliance.signs.models import Sign
from signage_compliance.signs.registry import SignRegistry, create_sign


@pytest.fixture
def registry():
    return SignRegistry()


def _stored(registry, reference="KRS-ENT-001-v1", site="KRS", sign_type="entrance"):
    return registry.save(Sign(type=sign_type, reference=reference, site=site, version=1))


def test_save_and_get(registry):
    sign = _stored(registry)
    assert registry.get("KRS-ENT-001-v1") is sign
    assert "KRS-ENT-001-v1" in registry
    assert len(registry) == 1


def test_get_missing(registry):
    with pytest.raises(SignNotFoundError, match="Sign not found: KRS-ENT-009-v1"):
        registry.get("KRS-ENT-009-v1")


def test_list_filters(registry):
    _stored(registry, "KRS-ENT-001-v1")
    _stored(registry, "KRS-TCS-001-v1", sign_type="terms_conditions")
    _stored(registry, "LHR-ENT-001-v1", site="LHR")

    assert len(registry.list()) == 3
    assert [s.reference for s in registry.list(site="KRS")] == ["KRS-ENT-001-v1", "KRS-TCS-001-v1"]
    assert [s.reference for s in registry.list(sign_type="entrance")] == ["KRS-ENT-001-v1", "LHR-ENT-001-v1"]
    assert [s.reference for s in registry.list(site="LHR", sign_type="entrance")] == ["LHR-ENT-001-v1"]


def test_next_sequence(registry):
    assert registry.next_sequence("KRS", "entrance") == 1
    _stored(registry, "KRS-ENT-001-v1")
    _stored(registry, "KRS-ENT-002-v1")
    _stored(registry, "KRS-TCS-001-v1", sign_type="terms_conditions")
    assert registry.next_sequence("KRS", "entrance") == 3
    assert registry.next_sequence("KRS", "terms_conditions") == 2


def test_update_new_version(registry):
    _stored(registry)
    updated = registry.update("KRS-ENT-001-v1", {"metadata": {"siteName": "Kyle Rise"}})

    assert updated.reference == "KRS-ENT-001-v2"
    assert updated.version == 2
    assert updated.previous_version == "KRS-ENT-001-v1"
    assert updated.updated_at
    assert updated.metadata.site_name == "Kyle Rise"
    # the previous version is kept
    assert registry.get("KRS-ENT-001-v1").version == 1
    assert len(registry) == 2


def test_update_in_place(registry):
    _stored(registry)
    updated = registry.update("KRS-ENT-001-v1", {"elements": [{"type": "border"}]}, new_version=False)

    assert updated.reference == "KRS-ENT-001-v1"
    assert updated.version == 1
    assert updated.updated_at
    assert updated.previous_version is None
    assert registry.get("KRS-ENT-001-v1").elements[0].kind == "border"
    assert len(registry) == 1


def test_update_missing(registry):
    with pytest.raises(SignNotFoundError):
        registry.update("NOPE-ENT-001-v1", {})


# ── create_sign ───────────────────────────────────────


def test_create_sign_defaults(registry):
    created = create_sign("terms-conditions-standard", "KRS", "Kyle Rise", registry=registry)
    sign = created.sign

    assert sign.reference == "KRS-TCS-001-v1"
    assert registry.get(sign.reference) is sign
    md = sign.metadata
    assert md.site_name == "Kyle Rise"
    assert md.company_name == "Local Car Park Management Ltd"
    assert md.company_reg_number == "14379954"
    assert (md.parking_charge, md.reduced_charge) == (100, 60)
    assert (md.payment_period, md.reduced_period) == (28, 14)
    assert md.has_anpr is True


def test_create_sign_template_is_compliant(registry):
    created = create_sign("terms-conditions-standard", "KRS", "Kyle Rise", registry=registry)
    assert created.report.compliant
    assert created.message.startswith("Sign KRS-TCS-001-v1 created and is BPA compliant")


def test_create_sign_sequence_increments(registry):
    first = create_sign("entrance-standard", "KRS", "Kyle Rise", registry=registry)
    second = create_sign("entrance-standard", "KRS", "Kyle Rise", registry=registry)
    explicit = create_sign("entrance-standard", "KRS", "Kyle Rise", registry=registry, sequence=9)
    assert first.sign.reference == "KRS-ENT-001-v1"
    assert second.sign.reference == "KRS-ENT-002-v1"
    assert explicit.sign.reference == "KRS-ENT-009-v1"


def test_create_sign_anpr_only_off_when_false(registry):
    off = create_sign("entrance-standard", "KRS", "Kyle Rise", registry=registry, hasAnpr=False)
    on = create_sign("entrance-standard", "KRS", "Kyle Rise", registry=registry, hasAnpr=None)
    assert off.sign.metadata.has_anpr is False
    assert on.sign.metadata.has_anpr is True


def test_create_sign_charge_overrides(registry):
    created = create_sign(
        "terms-conditions-standard", "KRS", "Kyle Rise",
        registry=registry, parkingCharge=85, reducedCharge=50,
    )
    text = " ".join(e.content for e in created.sign.text_elements())
    assert "£85 reduced to £50" in text


def test_create_sign_rejects_high_parking_charge(registry):
    with pytest.raises(ValidationError, match="Parking charge £150 exceeds BPA maximum of £100"):
        create_sign("terms-conditions-standard", "KRS", "Kyle Rise", registry=registry, parkingCharge=150)
    assert len(registry) == 0


def test_create_sign_rejects_high_reduced_charge(registry):
    with pytest.raises(ValidationError, match="Reduced charge £61 exceeds BPA maximum of £60"):
        create_sign("terms-conditions-standard", "KRS", "Kyle Rise", registry=registry, reducedCharge=61)


def test_create_sign_unknown_template(registry):
    with pytest.raises(TemplateNotFoundError):
        create_sign("no-such-template", "KRS", "Kyle Rise", registry=registry)


def test_created_sign_to_dict(registry):
    data = create_sign("disabled-parking", "KRS", "Kyle Rise", registry=registry).to_dict()
    assert set(data) == {"sign", "compliance", "message"}
    assert data["sign"]["reference"] == "KRS-DIS-001-v1"
    assert data["compliance"]["compliant"] is True


def test_update_cannot_change_type(registry):
    _stored(registry)
    with pytest.raises(ValidationError, match="cannot change"):
        registry.update("KRS-ENT-001-v1", {"type": "tariff"})


def test_create_sign_site_code_case_shares_sequence(registry):
    lower = create_sign("entrance-standard", "krs", "Kyle Rise", registry=registry)
    upper = create_sign("entrance-standard", "KRS", "Kyle Rise", registry=registry)

    assert lower.sign.reference == "KRS-ENT-001-v1"
    assert upper.sign.reference == "KRS-ENT-002-v1"
    assert lower.sign.site == "KRS"
    assert lower.sign.metadata.site_code == "KRS"
    assert len(registry) == 2


@pytest.mark.parametrize("overrides, message", [
    ({"parkingCharge": -5}, "Parking charge £-5 cannot be negative"),
    ({"reducedCharge": -1.0}, "Reduced charge £-1 cannot be negative"),
])
def test_create_sign_rejects_negative_charges(registry, overrides, message):
    with pytest.raises(ValidationError, match=message):
        create_sign("terms-conditions-standard", "KRS", "Kyle Rise", registry=registry, **overrides)
    assert len(registry) == 0
