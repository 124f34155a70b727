"""
Sign Reference Numbers
========================
References look like ``KRS-ENT-001-v1``:
site code, type code, 3-digit sequence per (site, type), version.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

TYPE_CODES = {
    "entrance": "ENT",
    "terms_conditions": "TCS",
    "tariff": "TAR",
    "disabled": "DIS",
    "ev_charging": "EVC",
    "internal": "INT",
    "wayfinding": "WAY",
}

FALLBACK_TYPE_CODE = "GEN"

_REFERENCE_RE = re.compile(r"^(?P<site>.+)-(?P<code>[A-Z]{3})-(?P<seq>\d{3,})-v(?P<version>\d+)$")
_VERSION_SUFFIX_RE = re.compile(r"-v\d+$")


@dataclass(frozen=True)
class ReferenceParts:
    site: str
    type_code: str
    sequence: int
    version: int


def type_code(sign_type: str) -> str:
    """Three-letter code for a sign type; unknown types map to GEN."""
    return TYPE_CODES.get(sign_type, FALLBACK_TYPE_CODE)


def make_reference(site: str, sign_type: str, sequence: int, version: int = 1) -> str:
    """
    Mint a sign reference.

    >>> make_reference("krs", "entrance", 1)
    'KRS-ENT-001-v1'
    """
    return f"{site.upper()}-{type_code(sign_type)}-{int(sequence):03d}-v{version}"


def bump_version(reference: str, version: int) -> str:
    """Replace the trailing ``-vN`` of a reference (or append one)."""
    if _VERSION_SUFFIX_RE.search(reference):
        return _VERSION_SUFFIX_RE.sub(f"-v{version}", reference)
    return f"{reference}-v{version}"


def parse_reference(reference: str) -> ReferenceParts | None:
    """Split a reference into its parts, or None if it is not well formed."""
    m = _REFERENCE_RE.match(reference or "")
    if not m:
        return None
    return ReferenceParts(
        site=m.group("site"),
        type_code=m.group("code"),
        sequence=int(m.group("seq")),
        version=int(m.group("version")),
    )
