"""Pydantic domain models for travel reference rate lookups."""

from .constants import (
    TRACKED_CURRENCIES,
    CURRENCY_FIELD_PATTERN,
    CURRENCY_CODE_PATTERN,
    UNAVAILABLE_MESSAGE,
)  # re-export
from .rates import (
    RateSet,
    ExchangeRatesRequest,
    ExchangeRatesResponse,
    ExchangeRatesError,
    ConversionPanel,
)

__all__ = [
    "TRACKED_CURRENCIES",
    "CURRENCY_FIELD_PATTERN",
    "CURRENCY_CODE_PATTERN",
    "UNAVAILABLE_MESSAGE",
    "RateSet",
    "ExchangeRatesRequest",
    "ExchangeRatesResponse",
    "ExchangeRatesError",
    "ConversionPanel",
]
