"""
Sign Registry
===============
Session-scoped, in-memory store of signs keyed by reference, plus the
create-from-template workflow that feeds it.

Nothing here is persisted; the CLI writes sign JSON files itself and the
RPC server keeps one registry for the lifetime of the process.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from signage_compliance.compliance.checker import ComplianceEngine, get_engine
from signage_compliance.compliance.scorer import ComplianceReport
from signage_compliance.config import get_settings
from signage_compliance.errors import SignNotFoundError, ValidationError
from signage_compliance.signs.models import Sign
from signage_compliance.signs.reference import bump_version
from signage_compliance.signs.templates import TemplateCatalog, get_catalog, instantiate_template
from signage_compliance.utils.helpers import as_number, integral, utc_now_iso
from signage_compliance.utils.log import get_logger

logger = get_logger(__name__)


class SignRegistry:
    """Signs by reference, in insertion order."""

    def __init__(self):
        self._signs: dict[str, Sign] = {}

    def __len__(self) -> int:
        return len(self._signs)

    def __contains__(self, reference: str) -> bool:
        return reference in self._signs

    def save(self, sign: Sign) -> Sign:
        """Insert or overwrite the sign stored under its reference."""
        self._signs[sign.reference] = sign
        logger.debug("Saved sign %s", sign.reference)
        return sign

    def get(self, reference: str) -> Sign:
        try:
            return self._signs[reference]
        except KeyError:
            raise SignNotFoundError(reference) from None

    def list(self, site: str | None = None, sign_type: str | None = None) -> list[Sign]:
        signs = list(self._signs.values())
        if site:
            signs = [s for s in signs if s.site == site]
        if sign_type:
            signs = [s for s in signs if s.type == sign_type]
        return signs

    def next_sequence(self, site: str, sign_type: str) -> int:
        """Number of signs already held for (site, type), plus one."""
        return len(self.list(site=site, sign_type=sign_type)) + 1

    def update(self, reference: str, updates: Mapping[str, Any], new_version: bool = True) -> Sign:
        """
        Apply wire-form field updates to a stored sign.

        With `new_version` the result is stored under a re-minted reference
        and the previous version is kept; otherwise the sign is overwritten in place.
        """
        current = self.get(reference)
        if "type" in updates and updates["type"] != current.type:
            raise ValidationError(f"Sign type of {reference} cannot change from {current.type} to {updates['type']}")

        updated = Sign.from_dict({**current.to_dict(), **updates})
        now = utc_now_iso()

        if new_version:
            version = (current.version or 1) + 1
            updated = updated.evolve(
                reference=bump_version(reference, version),
                version=version,
                updated_at=now,
                previous_version=reference,
            )
            logger.info("Created new version %s of %s", updated.reference, reference)
        else:
            updated = updated.evolve(reference=reference, updated_at=now)
            logger.info("Updated %s in place", reference)

        return self.save(updated)


@dataclass(frozen=True)
class CreatedSign:
    sign: Sign
    report: ComplianceReport

    @property
    def message(self) -> str:
        if self.report.compliant:
            return f"Sign {self.sign.reference} created and is BPA compliant (score: {self.report.score}%)"
        return f"Sign {self.sign.reference} created but has compliance issues (score: {self.report.score}%)"

    def to_dict(self) -> dict:
        return {
            "sign": self.sign.to_dict(),
            "compliance": self.report.to_dict(),
            "message": self.message,
        }


def create_sign(
    template_id: str,
    site_code: str,
    site_name: str,
    registry: SignRegistry | None = None,
    catalog: TemplateCatalog | None = None,
    engine: ComplianceEngine | None = None,
    sequence: int | None = None,
    **overrides: Any,
) -> CreatedSign:
    """
    Create a sign from a template, register it and check it.

    Args:
        template_id: Catalog id, e.g. ``entrance-standard``.
        site_code: Operator site code, e.g. ``KRS``.
        site_name: Full site name.
        registry: Registry to save into and take the next sequence from.
        catalog: Template catalog. Defaults to the packaged one.
        engine: Compliance engine. Defaults to the configured rulebook.
        sequence: Explicit sequence number instead of the next free one.
        **overrides: Wire-form metadata (companyName, parkingCharge, hasAnpr, ...).

    Raises:
        TemplateNotFoundError: unknown template id.
        ValidationError: a charge is negative or exceeds the BPA maximum.
    """
    catalog = catalog or get_catalog()
    engine = engine or get_engine()
    d = get_settings().defaults

    template = catalog.get(template_id)
    # site codes are stored upper-case, as they appear in the reference
    site_code = site_code.upper()

    metadata = {
        "siteName": site_name,
        "siteCode": site_code,
        "companyName": overrides.get("companyName") or d.company_name,
        "companyRegNumber": overrides.get("companyRegNumber") or d.company_reg_number,
        "helplineNumber": overrides.get("helplineNumber") or d.helpline_number,
        "parkingCharge": as_number(overrides.get("parkingCharge")) or d.parking_charge,
        "reducedCharge": as_number(overrides.get("reducedCharge")) or d.reduced_charge,
        "paymentPeriod": d.payment_period,
        "reducedPeriod": d.reduced_period,
        "hasAnpr": overrides.get("hasAnpr") is not False,
    }

    if metadata["parkingCharge"] < 0:
        raise ValidationError(f"Parking charge £{integral(metadata['parkingCharge'])} cannot be negative")
    if metadata["reducedCharge"] < 0:
        raise ValidationError(f"Reduced charge £{integral(metadata['reducedCharge'])} cannot be negative")

    max_charge = engine.rulebook.constant("max_parking_charge", 100)
    max_reduced = engine.rulebook.constant("max_reduced_charge", 60)
    if metadata["parkingCharge"] > max_charge:
        raise ValidationError(
            f"Parking charge £{integral(metadata['parkingCharge'])} exceeds BPA maximum of £{max_charge}"
        )
    if metadata["reducedCharge"] > max_reduced:
        raise ValidationError(
            f"Reduced charge £{integral(metadata['reducedCharge'])} exceeds BPA maximum of £{max_reduced}"
        )

    if registry is None:
        registry = SignRegistry()
    if not sequence:
        sequence = registry.next_sequence(site_code, template.type)

    sign = instantiate_template(template, metadata, site_code, sequence)
    registry.save(sign)

    report = engine.evaluate(sign)
    logger.info("Created %s from %s (score %d%%)", sign.reference, template_id, report.score)
    return CreatedSign(sign=sign, report=report)
