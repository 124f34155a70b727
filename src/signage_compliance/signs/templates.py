"""
Sign Templates
================
Static catalog of house sign designs (data/sign_templates.yaml) and
instantiation of a template into a concrete Sign.

Placeholders are ``{{fieldName}}`` and are filled by literal string
replacement from an explicit table; anything not in the table is left
in the content verbatim.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from signage_compliance.config import get_settings
from signage_compliance.errors import SignageError, TemplateNotFoundError
from signage_compliance.signs.models import Sign, SignElement, SignMetadata
from signage_compliance.signs.reference import make_reference
from signage_compliance.utils.helpers import integral, new_id, utc_now_iso
from signage_compliance.utils.log import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SignTemplate:
    id: str
    name: str
    type: str
    description: str = ""
    elements: tuple[Mapping[str, Any], ...] = ()
    default_metadata: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "type": self.type,
            "defaultMetadata": dict(self.default_metadata),
            "elements": [dict(e) for e in self.elements],
        }


@dataclass(frozen=True)
class TemplateCatalog:
    templates: tuple[SignTemplate, ...]

    def __len__(self) -> int:
        return len(self.templates)

    def __iter__(self):
        return iter(self.templates)

    def get(self, template_id: str) -> SignTemplate:
        for t in self.templates:
            if t.id == template_id:
                return t
        raise TemplateNotFoundError(template_id)

    def by_type(self, sign_type: str) -> list[SignTemplate]:
        return [t for t in self.templates if t.type == sign_type]


# ── Loading ───────────────────────────────────────────


def load_templates(path: Path) -> TemplateCatalog:
    """Load the template catalog YAML."""
    if not path.exists():
        raise SignageError(f"Template catalog not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    templates = []
    for raw in data.get("templates", []):
        templates.append(
            SignTemplate(
                id=raw["id"],
                name=raw.get("name", raw["id"]),
                type=raw["type"],
                description=raw.get("description", ""),
                elements=tuple(MappingProxyType(dict(e)) for e in raw.get("elements") or []),
                default_metadata=MappingProxyType(dict(raw.get("default_metadata") or {})),
            )
        )

    logger.info("Loaded %d sign templates from %s", len(templates), path.name)
    return TemplateCatalog(templates=tuple(templates))


_catalog: TemplateCatalog | None = None


def get_catalog() -> TemplateCatalog:
    """The configured template catalog (lazy-loaded singleton)."""
    global _catalog
    if _catalog is None:
        _catalog = load_templates(get_settings().compliance.templates_file)
    return _catalog


# ── Substitution ──────────────────────────────────────


def _str(value: Any) -> str:
    return str(integral(value))


def substitution_table(metadata: Mapping[str, Any]) -> dict[str, str]:
    """Placeholder → value. A missing or falsy metadata value falls back to the default."""
    d = get_settings().defaults
    return {
        "{{siteName}}": _str(metadata.get("siteName") or ""),
        "{{siteCode}}": _str(metadata.get("siteCode") or ""),
        "{{companyName}}": _str(metadata.get("companyName") or d.company_name),
        "{{companyRegNumber}}": _str(metadata.get("companyRegNumber") or d.company_reg_number),
        "{{helplineNumber}}": _str(metadata.get("helplineNumber") or d.helpline_number),
        "{{parkingCharge}}": _str(metadata.get("parkingCharge") or d.parking_charge),
        "{{reducedCharge}}": _str(metadata.get("reducedCharge") or d.reduced_charge),
        "{{paymentPeriod}}": _str(metadata.get("paymentPeriod") or d.payment_period),
        "{{reducedPeriod}}": _str(metadata.get("reducedPeriod") or d.reduced_period),
        "{{website}}": _str(metadata.get("website") or d.website),
    }


def substitute(content: str, table: Mapping[str, str]) -> str:
    """Literal find/replace of every placeholder in `table`."""
    for placeholder, value in table.items():
        content = content.replace(placeholder, value)
    return content


def instantiate_template(
    template: SignTemplate,
    metadata: Mapping[str, Any] | SignMetadata,
    site_code: str,
    sequence: int,
    version: int = 1,
) -> Sign:
    """
    Build a concrete Sign from a template.

    Args:
        template: Catalog entry to instantiate.
        metadata: Sign metadata in wire (camelCase) form.
        site_code: Operator site code, used for the reference and `site`.
        sequence: Per (site, type) counter for the reference.
        version: Reference version.

    Returns:
        A new Sign with fresh ids, substituted content and its reference.
    """
    if isinstance(metadata, SignMetadata):
        metadata = metadata.to_dict()

    table = substitution_table(metadata)
    elements = []
    for raw in template.elements:
        element = SignElement.from_dict({**raw, "content": substitute(str(raw.get("content", "")), table)})
        elements.append(replace(element, id=new_id()))

    merged = {**template.default_metadata, **metadata}

    sign = Sign(
        type=template.type,
        elements=tuple(elements),
        metadata=SignMetadata.from_dict(merged),
        reference=make_reference(site_code, template.type, sequence, version),
        id=new_id(),
        site=site_code.upper(),
        template_id=template.id,
        version=version,
        created_at=utc_now_iso(),
    )
    logger.debug("Instantiated %s from template %s", sign.reference, template.id)
    return sign
