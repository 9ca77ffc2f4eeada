from __future__ import annotations

import math
from decimal import Decimal, DecimalException
from typing import Optional

from travelref.models.constants import UNAVAILABLE_MESSAGE
from travelref.models.rates import ConversionPanel
from travelref.services.money import format_fixed, parse_decimal

from .resolver import ResolvedRate

"""Amount conversion for the currency panel.

`convert` is what the live-typing converter calls on every keystroke: it never
raises, and anything it cannot compute renders as "0.00". The panel builder
decides whether a converter is shown at all.
"""

ZERO_DISPLAY = "0.00"


def convert(amount: str | None, resolved_rate: Optional[float]) -> str:
    if resolved_rate is None or not math.isfinite(resolved_rate) or resolved_rate <= 0:
        return ZERO_DISPLAY
    parsed = parse_decimal(amount)
    if parsed is None:
        return ZERO_DISPLAY
    try:
        return format_fixed(parsed * Decimal(str(resolved_rate)), 2)
    except DecimalException:
        # amount too large for the default context (quantize precision or Emax)
        return ZERO_DISPLAY


def build_conversion_panel(
    resolved: Optional[ResolvedRate],
    home_currency: str,
    amount: str | None = None,
    currency: str | None = None,
) -> ConversionPanel:
    if resolved is None:
        return ConversionPanel(
            available=False,
            currency=currency,
            home_currency=home_currency,
            message=UNAVAILABLE_MESSAGE,
        )
    return ConversionPanel(
        available=True,
        currency=resolved.destination,
        home_currency=resolved.home,
        rate=resolved.rate,
        rate_display=resolved.display(),
        provider=resolved.provider,
        amount=amount,
        converted=convert(amount, resolved.rate) if amount is not None else None,
    )


__all__ = ["convert", "build_conversion_panel", "ZERO_DISPLAY"]
