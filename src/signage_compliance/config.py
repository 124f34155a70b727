"""
Configuration loader.

Loads settings from config/settings.yaml and .env,
merges them, and provides a typed Settings object
accessible everywhere via `get_settings()`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from dotenv import load_dotenv

# Project root = 2 levels up from src/signage_compliance/
ROOT = Path(__file__).resolve().parent.parent.parent
PACKAGE_DIR = Path(__file__).resolve().parent
DATA_DIR = PACKAGE_DIR / "data"
CONFIG_DIR = ROOT / "config"
SETTINGS_FILE = CONFIG_DIR / "settings.yaml"


@dataclass
class PathSettings:
    output_dir: Path = field(default_factory=lambda: ROOT / "outputs")
    report_dir: Path = field(default_factory=lambda: ROOT / "outputs" / "reports")
    sign_dir: Path = field(default_factory=lambda: ROOT / "outputs" / "signs")
    log_dir: Path = field(default_factory=lambda: ROOT / "outputs" / "logs")


@dataclass
class ComplianceSettings:
    rulebook_file: Path = field(default_factory=lambda: DATA_DIR / "bpa_code_of_practice.yaml")
    templates_file: Path = field(default_factory=lambda: DATA_DIR / "sign_templates.yaml")


@dataclass
class DefaultsSettings:
    """Operator details used when a sign is created without them."""

    company_name: str = "Local Car Park Management Ltd"
    company_reg_number: str = "14379954"
    helpline_number: str = "0345 548 1716"
    website: str = "www.localcarparkmanagement.com"
    parking_charge: int = 100
    reduced_charge: int = 60
    payment_period: int = 28
    reduced_period: int = 14


@dataclass
class RPCSettings:
    server_name: str = "signage-designer"
    server_version: str = "1.0.0"
    protocol_version: str = "2024-11-05"


@dataclass
class Settings:
    """Top-level settings object."""

    paths: PathSettings = field(default_factory=PathSettings)
    compliance: ComplianceSettings = field(default_factory=ComplianceSettings)
    defaults: DefaultsSettings = field(default_factory=DefaultsSettings)
    rpc: RPCSettings = field(default_factory=RPCSettings)
    log_level: str = "INFO"

    def ensure_dirs(self) -> None:
        """Create all output directories if they don't exist."""
        for p in [
            self.paths.output_dir,
            self.paths.report_dir,
            self.paths.sign_dir,
            self.paths.log_dir,
        ]:
            p.mkdir(parents=True, exist_ok=True)


# ── Singleton ─────────────────────────────────────────

_settings: Settings | None = None


def _load_yaml() -> dict:
    """Load the YAML config file."""
    if SETTINGS_FILE.exists():
        with open(SETTINGS_FILE, "r") as f:
            return yaml.safe_load(f) or {}
    return {}


def _resolve(path: str | Path, base: Path) -> Path:
    p = Path(path)
    return p if p.is_absolute() else base / p


def get_settings() -> Settings:
    """Get the global Settings instance (lazy-loaded singleton)."""
    global _settings
    if _settings is not None:
        return _settings

    # Load .env
    load_dotenv(ROOT / ".env")

    # Load YAML
    raw = _load_yaml()

    # Build settings from YAML with .env overrides
    paths_raw = raw.get("paths", {})
    paths = PathSettings(**{k: ROOT / v for k, v in paths_raw.items()}) if paths_raw else PathSettings()
    if os.getenv("SIGNAGE_OUTPUT_DIR"):
        out = Path(os.environ["SIGNAGE_OUTPUT_DIR"])
        paths = PathSettings(
            output_dir=out,
            report_dir=out / "reports",
            sign_dir=out / "signs",
            log_dir=out / "logs",
        )

    comp_raw = raw.get("compliance", {})
    compliance = ComplianceSettings()
    rulebook = os.getenv("SIGNAGE_RULEBOOK", comp_raw.get("rulebook_file"))
    if rulebook:
        compliance.rulebook_file = _resolve(rulebook, ROOT)
    if comp_raw.get("templates_file"):
        compliance.templates_file = _resolve(comp_raw["templates_file"], ROOT)

    def_raw = raw.get("defaults", {})
    defaults = DefaultsSettings(
        company_name=def_raw.get("company_name", "Local Car Park Management Ltd"),
        company_reg_number=str(def_raw.get("company_reg_number", "14379954")),
        helpline_number=str(def_raw.get("helpline_number", "0345 548 1716")),
        website=def_raw.get("website", "www.localcarparkmanagement.com"),
        parking_charge=int(def_raw.get("parking_charge", 100)),
        reduced_charge=int(def_raw.get("reduced_charge", 60)),
        payment_period=int(def_raw.get("payment_period", 28)),
        reduced_period=int(def_raw.get("reduced_period", 14)),
    )

    rpc_raw = raw.get("rpc", {})
    rpc = RPCSettings(
        server_name=rpc_raw.get("server_name", "signage-designer"),
        server_version=str(rpc_raw.get("server_version", "1.0.0")),
        protocol_version=str(rpc_raw.get("protocol_version", "2024-11-05")),
    )

    log_raw = raw.get("logging", {})

    _settings = Settings(
        paths=paths,
        compliance=compliance,
        defaults=defaults,
        rpc=rpc,
        log_level=os.getenv("LOG_LEVEL", log_raw.get("level", "INFO")),
    )

    return _settings


def reset_settings() -> None:
    """Drop the cached Settings so the next get_settings() reloads."""
    global _settings
    _settings = None
