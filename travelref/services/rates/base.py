from __future__ import annotations

"""Rate provider abstraction.

Every adapter exposes the same `fetch(base) -> ProviderResult` call so the
chain can treat them interchangeably. Subclasses implement `_fetch_rates`
and raise ProviderError / HttpError; `fetch` turns those into a failed
result and logs them, so nothing provider-specific escapes an adapter.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from pydantic import ValidationError

from travelref.models.rates import RateSet
from travelref.services.http_client import HttpError, JsonHttpClient
from .errors import ConfigurationError, ProviderError

logger = logging.getLogger("travelref.rates.provider")


@dataclass(frozen=True)
class ProviderResult:
    provider: str
    rates: Optional[RateSet] = None
    error: Optional[str] = None
    status: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.rates is not None


class RateProvider(ABC):
    name: str = "provider"

    def __init__(self, api_key: str | None, base_url: str, http: JsonHttpClient):
        if not api_key:
            raise ConfigurationError(f"API key for rate provider '{self.name}' is not configured")
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._http = http

    async def fetch(self, base_currency: str) -> ProviderResult:
        base_currency = base_currency.upper()
        try:
            rates = await self._fetch_rates(base_currency)
        except HttpError as e:
            logger.warning(
                "provider request failed: %s",
                e,
                extra={
                    "provider": self.name,
                    "currency": base_currency,
                    "status": e.status,
                    "body": e.body or None,
                },
            )
            return ProviderResult(self.name, error=str(e), status=e.status)
        except ProviderError as e:
            logger.warning(
                "provider rejected request: %s",
                e.reason,
                extra={"provider": self.name, "currency": base_currency, "status": e.status},
            )
            return ProviderResult(self.name, error=e.reason, status=e.status)
        logger.info(
            "provider returned complete rate set",
            extra={"provider": self.name, "currency": base_currency},
        )
        return ProviderResult(self.name, rates=rates)

    @abstractmethod
    async def _fetch_rates(self, base_currency: str) -> RateSet:
        """Return a validated RateSet for 1 unit of base_currency."""
        raise NotImplementedError

    def _rate_set(self, base_currency: str, rates: object) -> RateSet:
        try:
            return RateSet(base=base_currency, rates=rates)
        except ValidationError as e:
            reasons = "; ".join(str(err.get("msg")) for err in e.errors())
            raise ProviderError(self.name, f"incomplete rate set ({reasons})") from e


__all__ = ["ProviderResult", "RateProvider"]
