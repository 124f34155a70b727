"""
Shared helper functions.
"""

from __future__ import annotations

import math
import re
import uuid
from datetime import datetime, timezone


def safe_filename(name: str) -> str:
    """Convert an arbitrary string to a filesystem-safe filename."""
    return re.sub(r"[^\w\-]", "_", name).strip("_")


def new_id() -> str:
    """Fresh random identifier for signs and elements."""
    return str(uuid.uuid4())


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string (the JSON timestamp format)."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def as_number(value) -> float | int | None:
    """Coerce a JSON value to a finite number, or None when it is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            num = float(value.strip())
        except ValueError:
            return None
        if not math.isfinite(num):
            return None
        return int(num) if num.is_integer() else num
    return None


def integral(value):
    """Whole floats as int (100.0 → 100) so they render without a decimal point."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value
