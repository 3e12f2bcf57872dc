from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Any

_INT_PATTERN = re.compile(r"^[+-]?\d+$")


def clean_text(raw: Any) -> str:
    if raw is None:
        return ""
    return str(raw).strip()


def parse_quantity(raw: Any, default: int | None = None) -> int | None:
    """Return ``raw`` as an int, or ``None`` when it is not a whole number.

    Blank input yields ``default``. Booleans are rejected even though they are
    ints. Positivity is left to the caller.
    """
    if raw is None:
        return default

    if isinstance(raw, bool):
        return None

    if isinstance(raw, int):
        return raw

    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else None

    text = str(raw).strip()
    if text == "":
        return default

    if _INT_PATTERN.match(text):
        return int(text)

    try:
        dec = Decimal(text)
    except (InvalidOperation, ValueError):
        return None

    if dec.is_finite() and dec == dec.to_integral():
        return int(dec)
    return None
