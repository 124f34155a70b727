"""Tests for sign reference numbers."""

import pytest

from signage_compliance.signs.reference import bump_version, make_reference, parse_reference, type_code


def test_make_reference_known_type():
    assert make_reference("krs", "entrance", 1, 1) == "KRS-ENT-001-v1"


def test_make_reference_unknown_type_falls_back():
    assert make_reference("krs", "unknown_type", 7, 2) == "KRS-GEN-007-v2"


def test_make_reference_default_version():
    assert make_reference("LHR", "terms_conditions", 12) == "LHR-TCS-012-v1"


def test_sequence_wider_than_three_digits():
    assert make_reference("krs", "tariff", 1234) == "KRS-TAR-1234-v1"


@pytest.mark.parametrize("sign_type, code", [
    ("entrance", "ENT"),
    ("terms_conditions", "TCS"),
    ("tariff", "TAR"),
    ("disabled", "DIS"),
    ("ev_charging", "EVC"),
    ("internal", "INT"),
    ("wayfinding", "WAY"),
    ("", "GEN"),
])
def test_type_codes(sign_type, code):
    assert type_code(sign_type) == code


def test_bump_version():
    assert bump_version("KRS-ENT-001-v1", 2) == "KRS-ENT-001-v2"
    assert bump_version("KRS-ENT-001-v9", 10) == "KRS-ENT-001-v10"
    assert bump_version("LEGACY-REF", 2) == "LEGACY-REF-v2"


def test_parse_reference():
    parts = parse_reference("KRS-EVC-004-v3")
    assert parts.site == "KRS"
    assert parts.type_code == "EVC"
    assert parts.sequence == 4
    assert parts.version == 3


def test_parse_reference_with_hyphenated_site():
    parts = parse_reference("NORTH-01-ENT-001-v1")
    assert parts.site == "NORTH-01"


@pytest.mark.parametrize("bad", ["", "KRS-ENT-1-v1", "KRS-ENT-001", "not a reference"])
def test_parse_reference_rejects_malformed(bad):
    assert parse_reference(bad) is None
