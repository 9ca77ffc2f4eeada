from __future__ import annotations

"""Home-currency rate resolution.

The country record stores its currency as free text ("Euro (EUR)"). The
resolver pulls the code out, asks the provider chain for rates with that
currency as base, and inverts the home slot:

    rates[home] = R   (1 destination unit = R home units)
    resolved    = 1/R (1 home unit = 1/R destination units)

Anything that prevents a trustworthy figure (no code, every provider down,
a zero or non-finite R) yields None, which callers render as "unavailable".
Missing configuration is not swallowed.
"""
import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from travelref.models.constants import CURRENCY_FIELD_PATTERN
from travelref.models.rates import RateSet
from travelref.services.money import format_fixed
from .chain import ProviderChain
from .errors import ChainExhaustedError, UnresolvableInputError

logger = logging.getLogger("travelref.rates.resolver")


@dataclass(frozen=True)
class ResolvedRate:
    home: str
    destination: str
    rate: float
    provider: Optional[str] = None

    def formatted(self, places: int = 4) -> str:
        return format_fixed(self.rate, places)

    def display(self, places: int = 4) -> str:
        return f"1 {self.home} = {self.formatted(places)} {self.destination}"


def extract_currency_code(currency_field: str | None) -> str:
    match = CURRENCY_FIELD_PATTERN.search(currency_field or "")
    if not match:
        raise UnresolvableInputError(f"no currency code in {currency_field!r}")
    return match.group(1)


def parse_currency_code(currency_field: str | None) -> Optional[str]:
    try:
        return extract_currency_code(currency_field)
    except UnresolvableInputError:
        return None


def invert_home_rate(rates: RateSet, home: str) -> float:
    home_per_destination = rates.rates.get(home)
    if (
        isinstance(home_per_destination, bool)
        or not isinstance(home_per_destination, (int, float))
        or not math.isfinite(home_per_destination)
        or home_per_destination <= 0
    ):
        raise UnresolvableInputError(
            f"unusable {home} rate {home_per_destination!r} for base {rates.base}"
        )
    try:
        resolved = 1 / home_per_destination
    except (ZeroDivisionError, OverflowError) as e:
        raise UnresolvableInputError(f"cannot invert {home_per_destination!r}") from e
    if not math.isfinite(resolved) or resolved <= 0:
        raise UnresolvableInputError(f"derived rate {resolved!r} is not usable")
    return resolved


class RateResolver:
    def __init__(self, chain: ProviderChain, home_currency: str = "INR"):
        self._chain = chain
        self.home_currency = home_currency.upper()

    async def fetch_rate_set(self, currency_code: str) -> Tuple[RateSet, Optional[str]]:
        """Raw chain lookup; raises ChainExhaustedError when every provider fails."""
        result = await self._chain.resolve_result(currency_code)
        return result.rates, result.provider  # type: ignore[return-value]

    async def resolve(self, currency_field: str | None) -> Optional[ResolvedRate]:
        try:
            code = extract_currency_code(currency_field)
        except UnresolvableInputError:
            logger.debug("no currency code to resolve", extra={"currency": currency_field})
            return None
        try:
            rates, provider = await self.fetch_rate_set(code)
        except ChainExhaustedError as e:
            logger.warning("exchange rates unavailable: %s", e, extra={"currency": code})
            return None
        try:
            rate = invert_home_rate(rates, self.home_currency)
        except UnresolvableInputError as e:
            logger.warning("discarding rate: %s", e, extra={"currency": code, "provider": provider})
            return None
        return ResolvedRate(
            home=self.home_currency, destination=code, rate=rate, provider=provider
        )

    async def resolve_home_to_destination(self, currency_field: str | None) -> Optional[float]:
        resolved = await self.resolve(currency_field)
        return resolved.rate if resolved else None


__all__ = [
    "ResolvedRate",
    "RateResolver",
    "extract_currency_code",
    "parse_currency_code",
    "invert_home_rate",
]
