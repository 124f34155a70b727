"""
Sign Data Model
=================
Typed, immutable representation of a sign document and its
JSON wire format (camelCase keys, elements keyed by ``type``).

Parsing is total: a malformed document degrades to empty/None
fields rather than raising, so the compliance engine can report
the missing data as failing rules.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from signage_compliance.utils.helpers import as_number

SIGN_TYPES = (
    "entrance",
    "terms_conditions",
    "tariff",
    "disabled",
    "ev_charging",
    "internal",
    "wayfinding",
)

ELEMENT_KINDS = ("text", "image", "qr", "logo", "icon", "border")

# python attribute -> wire key
_METADATA_KEYS = {
    "site_name": "siteName",
    "site_code": "siteCode",
    "company_name": "companyName",
    "company_reg_number": "companyRegNumber",
    "helpline_number": "helplineNumber",
    "parking_charge": "parkingCharge",
    "reduced_charge": "reducedCharge",
    "payment_period": "paymentPeriod",
    "reduced_period": "reducedPeriod",
    "has_anpr": "hasAnpr",
    "website": "website",
}

_STYLE_KEYS = {
    "font_size": "fontSize",
    "font_weight": "fontWeight",
    "color": "color",
    "background_color": "backgroundColor",
    "text_align": "textAlign",
    "font_family": "fontFamily",
}


def _str_or_none(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _mapping(value: Any) -> Mapping:
    return value if isinstance(value, Mapping) else {}


@dataclass(frozen=True)
class ElementStyle:
    font_size: float | None = None
    font_weight: str | None = None
    color: str | None = None
    background_color: str | None = None
    text_align: str | None = None
    font_family: str | None = None

    @classmethod
    def from_dict(cls, raw: Any) -> ElementStyle:
        raw = _mapping(raw)
        return cls(
            font_size=as_number(raw.get("fontSize")),
            font_weight=_str_or_none(raw.get("fontWeight")),
            color=_str_or_none(raw.get("color")),
            background_color=_str_or_none(raw.get("backgroundColor")),
            text_align=_str_or_none(raw.get("textAlign")),
            font_family=_str_or_none(raw.get("fontFamily")),
        )

    def to_dict(self) -> dict:
        return {
            wire: getattr(self, attr)
            for attr, wire in _STYLE_KEYS.items()
            if getattr(self, attr) is not None
        }


@dataclass(frozen=True)
class Position:
    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0

    @classmethod
    def from_dict(cls, raw: Any) -> Position:
        raw = _mapping(raw)
        return cls(
            x=as_number(raw.get("x")) or 0,
            y=as_number(raw.get("y")) or 0,
            width=as_number(raw.get("width")) or 0,
            height=as_number(raw.get("height")) or 0,
        )

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class SignElement:
    """One content item on a sign. Only ``kind`` and ``content`` matter to the rules."""

    kind: str
    content: str = ""
    id: str | None = None
    style: ElementStyle = field(default_factory=ElementStyle)
    position: Position = field(default_factory=Position)

    @classmethod
    def from_dict(cls, raw: Any) -> SignElement:
        raw = _mapping(raw)
        return cls(
            kind=_str_or_none(raw.get("type")) or "",
            content=_str_or_none(raw.get("content")) or "",
            id=_str_or_none(raw.get("id")),
            style=ElementStyle.from_dict(raw.get("style")),
            position=Position.from_dict(raw.get("position")),
        )

    def to_dict(self) -> dict:
        data: dict[str, Any] = {}
        if self.id is not None:
            data["id"] = self.id
        data["type"] = self.kind
        data["content"] = self.content
        data["style"] = self.style.to_dict()
        data["position"] = self.position.to_dict()
        return data


@dataclass(frozen=True)
class SignMetadata:
    site_name: str | None = None
    site_code: str | None = None
    company_name: str | None = None
    company_reg_number: str | None = None
    helpline_number: str | None = None
    parking_charge: float | None = None
    reduced_charge: float | None = None
    payment_period: float | None = None
    reduced_period: float | None = None
    has_anpr: bool = False
    website: str | None = None
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Any) -> SignMetadata:
        raw = _mapping(raw)
        known = set(_METADATA_KEYS.values())
        return cls(
            site_name=_str_or_none(raw.get("siteName")),
            site_code=_str_or_none(raw.get("siteCode")),
            company_name=_str_or_none(raw.get("companyName")),
            company_reg_number=_str_or_none(raw.get("companyRegNumber")),
            helpline_number=_str_or_none(raw.get("helplineNumber")),
            parking_charge=as_number(raw.get("parkingCharge")),
            reduced_charge=as_number(raw.get("reducedCharge")),
            payment_period=as_number(raw.get("paymentPeriod")),
            reduced_period=as_number(raw.get("reducedPeriod")),
            has_anpr=bool(raw.get("hasAnpr", False)),
            website=_str_or_none(raw.get("website")),
            extra={k: v for k, v in raw.items() if k not in known},
        )

    def get(self, wire_key: str, default: Any = None) -> Any:
        """Look up a field by its wire (camelCase) name."""
        for attr, wire in _METADATA_KEYS.items():
            if wire == wire_key:
                value = getattr(self, attr)
                return default if value is None else value
        return self.extra.get(wire_key, default)

    def to_dict(self) -> dict:
        data: dict[str, Any] = {}
        for attr, wire in _METADATA_KEYS.items():
            value = getattr(self, attr)
            if value is not None:
                data[wire] = value
        data.update(self.extra)
        return data


@dataclass(frozen=True)
class Sign:
    """A sign document: the subject of compliance evaluation."""

    type: str
    elements: tuple[SignElement, ...] = ()
    metadata: SignMetadata = field(default_factory=SignMetadata)
    reference: str = ""
    id: str | None = None
    site: str | None = None
    template_id: str | None = None
    version: int = 1
    created_at: str | None = None
    updated_at: str | None = None
    previous_version: str | None = None

    @classmethod
    def from_dict(cls, raw: Any) -> Sign:
        raw = _mapping(raw)
        elements = raw.get("elements")
        if not isinstance(elements, (list, tuple)):
            elements = []
        version = as_number(raw.get("version"))
        return cls(
            type=_str_or_none(raw.get("type")) or "",
            elements=tuple(SignElement.from_dict(e) for e in elements if isinstance(e, Mapping)),
            metadata=SignMetadata.from_dict(raw.get("metadata")),
            reference=_str_or_none(raw.get("reference")) or "",
            id=_str_or_none(raw.get("id")),
            site=_str_or_none(raw.get("site")),
            template_id=_str_or_none(raw.get("templateId")),
            version=int(version) if version else 1,
            created_at=_str_or_none(raw.get("createdAt")),
            updated_at=_str_or_none(raw.get("updatedAt")),
            previous_version=_str_or_none(raw.get("previousVersion")),
        )

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "id": self.id,
            "reference": self.reference,
            "type": self.type,
            "site": self.site,
            "templateId": self.template_id,
            "elements": [e.to_dict() for e in self.elements],
            "metadata": self.metadata.to_dict(),
            "version": self.version,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "previousVersion": self.previous_version,
        }
        return {k: v for k, v in data.items() if v is not None}

    def text_elements(self) -> list[SignElement]:
        return [e for e in self.elements if e.kind == "text"]

    def evolve(self, **changes: Any) -> Sign:
        """Return a copy with some fields replaced."""
        return replace(self, **changes)
