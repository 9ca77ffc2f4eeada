"""Money / rounding helpers.

Centralized so the calculator, resolver display and HTTP responses use
identical rounding semantics (ROUND_HALF_UP on the decimal string form).
"""

from __future__ import annotations
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional


def _quantum(places: int) -> Decimal:
    return Decimal(1).scaleb(-places)


def format_fixed(value: float | Decimal, places: int = 2) -> str:
    """Render value with exactly `places` decimals, e.g. 0.011049 -> '0.0110'."""
    dec = value if isinstance(value, Decimal) else Decimal(str(value))
    return f"{dec.quantize(_quantum(places), rounding=ROUND_HALF_UP):f}"


def parse_decimal(text: str | None) -> Optional[Decimal]:
    """Parse user-typed numeric text; None for blank, non-numeric or non-finite."""
    if text is None:
        return None
    try:
        dec = Decimal(str(text).strip())
    except InvalidOperation:
        return None
    if not dec.is_finite():
        return None
    return dec
