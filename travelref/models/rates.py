from __future__ import annotations

import math
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import CURRENCY_CODE_PATTERN, TRACKED_CURRENCIES


def _is_valid_rate(value: Any) -> bool:
    # bool is an int subclass; JSON true must not pass as 1.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0


class RateSet(BaseModel):
    """Complete set of tracked rates relative to one unit of `base`.

    Construction fails unless every tracked currency has a positive finite
    numeric rate; untracked codes are dropped.
    """

    model_config = ConfigDict(frozen=True)

    base: str
    rates: Dict[str, float]

    @field_validator("base")
    @classmethod
    def valid_base(cls, v: str) -> str:
        if not CURRENCY_CODE_PATTERN.match(v):
            raise ValueError("base must be a 3-letter uppercase currency code")
        return v

    @field_validator("rates", mode="before")
    @classmethod
    def complete_tracked_rates(cls, v: Any) -> Dict[str, float]:
        if not isinstance(v, dict):
            raise ValueError("rates must be a mapping")
        missing = [c for c in TRACKED_CURRENCIES if c not in v]
        if missing:
            raise ValueError(f"missing tracked rates: {', '.join(missing)}")
        invalid = [c for c in TRACKED_CURRENCIES if not _is_valid_rate(v[c])]
        if invalid:
            raise ValueError(f"invalid tracked rates: {', '.join(invalid)}")
        return {c: float(v[c]) for c in TRACKED_CURRENCIES}

    def rate_for(self, currency: str) -> float:
        return self.rates[currency]


class ExchangeRatesRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    currency_code: str = Field(
        ...,
        alias="currencyCode",
        description="3-letter code used as the base currency (e.g. EUR)",
    )

    @field_validator("currency_code")
    @classmethod
    def three_letter_code(cls, v: str) -> str:
        v = v.strip().upper()
        if not CURRENCY_CODE_PATTERN.match(v):
            raise ValueError("currencyCode must be a 3-letter currency code")
        return v


class ExchangeRatesResponse(BaseModel):
    rates: Dict[str, float]
    success: bool = True
    provider: Optional[str] = None


class ExchangeRatesError(BaseModel):
    error: str
    success: bool = False


class ConversionPanel(BaseModel):
    """What the country view shows for the destination currency."""

    available: bool
    currency: Optional[str] = None
    home_currency: str
    message: Optional[str] = None
    rate: Optional[float] = None
    rate_display: Optional[str] = None
    provider: Optional[str] = None
    amount: Optional[str] = None
    converted: Optional[str] = None
