"""
RPC Tools
===========
Tool catalog advertised by ``tools/list`` and the handlers behind
``tools/call``. Each handler takes the call's ``arguments`` object and
returns a JSON-serialisable result; failures raise SignageError.
"""

from __future__ import annotations

from typing import Any, Callable

from signage_compliance.compliance.checker import ComplianceEngine, get_engine
from signage_compliance.errors import SignageError, ValidationError
from signage_compliance.signs.models import SIGN_TYPES
from signage_compliance.signs.registry import SignRegistry, create_sign
from signage_compliance.signs.templates import TemplateCatalog, get_catalog
from signage_compliance.utils.log import get_logger

logger = get_logger(__name__)


def tool_definitions(catalog: TemplateCatalog) -> list[dict]:
    """JSON-schema descriptions of every tool, as returned by ``tools/list``."""
    sign_type = {"type": "string", "description": "Sign type", "enum": list(SIGN_TYPES)}
    return [
        {
            "name": "create_sign",
            "description": "Create a new BPA-compliant sign from a template",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "templateId": {
                        "type": "string",
                        "description": "Template ID (e.g., entrance-standard, terms-conditions-standard)",
                        "enum": [t.id for t in catalog],
                    },
                    "siteCode": {"type": "string", "description": "Site code (e.g., KRS for Kyle Rise)"},
                    "siteName": {"type": "string", "description": "Full site name"},
                    "companyName": {"type": "string", "description": "Company name (default: Local Car Park Management Ltd)"},
                    "companyRegNumber": {"type": "string", "description": "Company registration number (default: 14379954)"},
                    "helplineNumber": {"type": "string", "description": "Helpline phone number (default: 0345 548 1716)"},
                    "parkingCharge": {"type": "number", "description": "Parking charge amount in GBP (max £100)"},
                    "reducedCharge": {"type": "number", "description": "Reduced charge if paid within 14 days (max £60)"},
                    "hasAnpr": {"type": "boolean", "description": "Whether site uses ANPR (default: true)"},
                    "sequence": {"type": "number", "description": "Sign sequence number for this site (default: auto-increment)"},
                },
                "required": ["templateId", "siteCode", "siteName"],
            },
        },
        {
            "name": "check_compliance",
            "description": "Check if a sign meets BPA Code of Practice requirements",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "signReference": {"type": "string", "description": "Sign reference number (e.g., KRS-ENT-001-v1)"},
                    "signData": {"type": "object", "description": "Or provide sign data directly"},
                },
            },
        },
        {
            "name": "list_templates",
            "description": "List available sign templates",
            "inputSchema": {
                "type": "object",
                "properties": {"type": {**sign_type, "description": "Filter by sign type"}},
            },
        },
        {
            "name": "get_sign",
            "description": "Retrieve a sign by its reference number",
            "inputSchema": {
                "type": "object",
                "properties": {"signReference": {"type": "string", "description": "Sign reference number"}},
                "required": ["signReference"],
            },
        },
        {
            "name": "list_signs",
            "description": "List all signs, optionally filtered by site",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "siteCode": {"type": "string", "description": "Filter by site code"},
                    "type": {"type": "string", "description": "Filter by sign type"},
                },
            },
        },
        {
            "name": "update_sign",
            "description": "Update an existing sign",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "signReference": {"type": "string", "description": "Sign reference number"},
                    "updates": {"type": "object", "description": "Fields to update (elements, metadata)"},
                    "createNewVersion": {
                        "type": "boolean",
                        "description": "Create a new version instead of overwriting",
                        "default": True,
                    },
                },
                "required": ["signReference", "updates"],
            },
        },
        {
            "name": "get_bpa_rules",
            "description": "Get BPA compliance rules for a sign type",
            "inputSchema": {
                "type": "object",
                "properties": {"signType": sign_type},
                "required": ["signType"],
            },
        },
    ]


def _require(args: dict, *names: str) -> None:
    missing = [n for n in names if args.get(n) in (None, "")]
    if missing:
        raise ValidationError(f"Missing required argument: {', '.join(missing)}")


class SignageTools:
    """Tool handlers bound to one registry, engine and template catalog."""

    def __init__(
        self,
        registry: SignRegistry | None = None,
        engine: ComplianceEngine | None = None,
        catalog: TemplateCatalog | None = None,
    ):
        self.registry = registry if registry is not None else SignRegistry()
        self.engine = engine or get_engine()
        self.catalog = catalog or get_catalog()
        self._handlers: dict[str, Callable[[dict], Any]] = {
            "create_sign": self.create_sign,
            "check_compliance": self.check_compliance,
            "list_templates": self.list_templates,
            "get_sign": self.get_sign,
            "list_signs": self.list_signs,
            "update_sign": self.update_sign,
            "get_bpa_rules": self.get_bpa_rules,
        }

    @property
    def names(self) -> list[str]:
        return list(self._handlers)

    def definitions(self) -> list[dict]:
        return tool_definitions(self.catalog)

    def call(self, name: str, args: dict | None) -> Any:
        handler = self._handlers.get(name)
        if handler is None:
            raise SignageError(f"Unknown tool: {name}")
        logger.debug("tools/call %s", name)
        return handler(dict(args or {}))

    # ── Handlers ──────────────────────────────────────

    def create_sign(self, args: dict) -> dict:
        _require(args, "templateId", "siteCode", "siteName")
        overrides = {
            k: args[k]
            for k in ("companyName", "companyRegNumber", "helplineNumber", "parkingCharge", "reducedCharge", "hasAnpr")
            if k in args
        }
        created = create_sign(
            args["templateId"],
            args["siteCode"],
            args["siteName"],
            registry=self.registry,
            catalog=self.catalog,
            engine=self.engine,
            sequence=args.get("sequence"),
            **overrides,
        )
        return created.to_dict()

    def check_compliance(self, args: dict) -> dict:
        if args.get("signReference"):
            sign = self.registry.get(args["signReference"])
        elif args.get("signData"):
            sign = args["signData"]
        else:
            raise ValidationError("Provide either signReference or signData")
        return self.engine.evaluate(sign).to_dict()

    def list_templates(self, args: dict) -> dict:
        templates = list(self.catalog)
        if args.get("type"):
            templates = self.catalog.by_type(args["type"])
        return {"templates": [t.to_dict() for t in templates], "count": len(templates)}

    def get_sign(self, args: dict) -> dict:
        _require(args, "signReference")
        return self.registry.get(args["signReference"]).to_dict()

    def list_signs(self, args: dict) -> dict:
        signs = self.registry.list(site=args.get("siteCode"), sign_type=args.get("type"))
        return {
            "signs": [
                {
                    "reference": s.reference,
                    "type": s.type,
                    "site": s.site,
                    "siteName": s.metadata.site_name,
                    "createdAt": s.created_at,
                    "version": s.version,
                }
                for s in signs
            ],
            "count": len(signs),
        }

    def update_sign(self, args: dict) -> dict:
        _require(args, "signReference")
        updates = args.get("updates")
        if not isinstance(updates, dict):
            raise ValidationError("updates must be an object")

        reference = args["signReference"]
        new_version = args.get("createNewVersion", True) is not False
        sign = self.registry.update(reference, updates, new_version=new_version)
        message = f"Created new version {sign.reference}" if new_version else f"Updated {reference}"
        return {"sign": sign.to_dict(), "message": message}

    def get_bpa_rules(self, args: dict) -> dict:
        _require(args, "signType")
        rulebook = self.engine.rulebook
        rules = self.engine.applicable_rules(args["signType"])
        return {
            "signType": args["signType"],
            "rules": [
                {"id": r.id, "name": r.name, "category": r.category, "required": r.required}
                for r in rules
            ],
            "maxParkingCharge": rulebook.constant("max_parking_charge"),
            "maxReducedCharge": rulebook.constant("max_reduced_charge"),
            "reducedPeriodDays": rulebook.constant("reduced_period_days"),
            "totalPeriodDays": rulebook.constant("total_period_days"),
        }
