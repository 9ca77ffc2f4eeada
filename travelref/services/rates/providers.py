from __future__ import annotations

"""Concrete rate providers and factory.

Three upstream APIs, tried in this order by default:

- exchangerate-api   v6 `latest/<BASE>` endpoint, key in the path.
- exchangerate-host  apilayer-style `{success, error, rates}` body.
- exchangeratesapi   same body shape; free tier rejects non-EUR bases with
                     `base_currency_access_restricted`, in which case the
                     default-base response is fetched and rebased.

Each provider decodes its body with its own pydantic schema before anything
is handed on as a RateSet.
"""
import math
from typing import Any, Dict, Optional, Type

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from travelref.core.config import Settings
from travelref.models.constants import TRACKED_CURRENCIES
from travelref.models.rates import RateSet
from travelref.services.http_client import JsonHttpClient
from .base import RateProvider
from .errors import ConfigurationError, ProviderError

BASE_RESTRICTED = "base_currency_access_restricted"


def _symbols(base_currency: str) -> str:
    # The base is listed again even though it is the base; upstream tolerates it
    return ",".join((*TRACKED_CURRENCIES, base_currency))


# ---- response schemas ---------------------------------------------------


class _ExchangeRateApiBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    result: str
    error_type: Optional[str] = Field(None, alias="error-type")
    conversion_rates: Dict[str, Any] = Field(default_factory=dict)


class _ApiLayerError(BaseModel):
    code: Optional[Any] = None
    type: Optional[str] = None
    info: Optional[str] = None

    def reason(self) -> str:
        return self.info or self.type or str(self.code or "provider reported failure")

    def is_base_restricted(self) -> bool:
        return BASE_RESTRICTED in (self.type, self.code)


class _ApiLayerBody(BaseModel):
    success: Optional[bool] = None
    error: Optional[_ApiLayerError] = None
    base: Optional[str] = None
    rates: Dict[str, Any] = Field(default_factory=dict)

    @property
    def failed(self) -> bool:
        return self.success is False


def _failure_reason(body: _ApiLayerBody) -> str:
    return body.error.reason() if body.error else "provider reported failure"


def _decode(provider: str, model: Type[BaseModel], data: Dict[str, Any]) -> Any:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ProviderError(provider, f"unexpected response shape: {e.error_count()} error(s)") from e


# ---- providers ----------------------------------------------------------


class ExchangeRateApiProvider(RateProvider):
    name = "exchangerate-api"

    async def _fetch_rates(self, base_currency: str) -> RateSet:
        data = await self._http.get_json(
            f"{self._base_url}/{self._api_key}/latest/{base_currency}"
        )
        body: _ExchangeRateApiBody = _decode(self.name, _ExchangeRateApiBody, data)
        if body.result != "success":
            raise ProviderError(
                self.name, body.error_type or "Failed to fetch exchange rates"
            )
        return self._rate_set(base_currency, body.conversion_rates)


class ExchangeRateHostProvider(RateProvider):
    name = "exchangerate-host"

    async def _fetch_rates(self, base_currency: str) -> RateSet:
        data = await self._http.get_json(
            f"{self._base_url}/latest",
            params={
                "access_key": self._api_key,
                "base": base_currency,
                "symbols": _symbols(base_currency),
            },
        )
        body: _ApiLayerBody = _decode(self.name, _ApiLayerBody, data)
        if body.failed:
            raise ProviderError(self.name, _failure_reason(body))
        return self._rate_set(base_currency, body.rates)


class ExchangeRatesApiProvider(RateProvider):
    name = "exchangeratesapi"

    async def _fetch_rates(self, base_currency: str) -> RateSet:
        body = await self._latest(base_currency)
        if not body.failed:
            return self._rate_set(base_currency, body.rates)
        if body.error is None or not body.error.is_base_restricted():
            raise ProviderError(self.name, _failure_reason(body))

        # Free tier: fetch with the provider's default base and rebase locally
        fallback = await self._latest(base_currency, send_base=False)
        if fallback.failed:
            raise ProviderError(self.name, _failure_reason(fallback))
        return self._rate_set(base_currency, self._rebase(base_currency, fallback.rates))

    async def _latest(self, base_currency: str, send_base: bool = True) -> _ApiLayerBody:
        params = {"access_key": self._api_key, "symbols": _symbols(base_currency)}
        if send_base:
            params["base"] = base_currency
        data = await self._http.get_json(f"{self._base_url}/v1/latest", params=params)
        return _decode(self.name, _ApiLayerBody, data)

    def _rebase(self, base_currency: str, base_rates: Dict[str, Any]) -> Dict[str, Any]:
        pivot = base_rates.get(base_currency)
        if (
            isinstance(pivot, bool)
            or not isinstance(pivot, (int, float))
            or not math.isfinite(pivot)
            or pivot <= 0
        ):
            raise ProviderError(self.name, f"No base rate for {base_currency}")
        derived: Dict[str, Any] = {}
        for code in TRACKED_CURRENCIES:
            value = base_rates.get(code)
            # Leave gaps in place; RateSet validation reports them
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                derived[code] = value / pivot
        return derived


_PROVIDER_REGISTRY: Dict[str, Type[RateProvider]] = {
    ExchangeRateApiProvider.name: ExchangeRateApiProvider,
    ExchangeRateHostProvider.name: ExchangeRateHostProvider,
    ExchangeRatesApiProvider.name: ExchangeRatesApiProvider,
}


def make_rate_provider(kind: str, settings: Settings, http: JsonHttpClient) -> RateProvider:
    cls = _PROVIDER_REGISTRY.get(kind)
    if not cls:
        raise ConfigurationError(f"Unknown rate provider kind '{kind}'")
    return cls(settings.api_key(kind), settings.base_url(kind), http)


def make_http_client(
    settings: Settings, transport: httpx.AsyncBaseTransport | None = None
) -> JsonHttpClient:
    return JsonHttpClient(
        timeout=settings.http_timeout_seconds,
        retries=settings.http_retries,
        backoff=settings.http_backoff_seconds,
        transport=transport,
    )


__all__ = [
    "ExchangeRateApiProvider",
    "ExchangeRateHostProvider",
    "ExchangeRatesApiProvider",
    "make_rate_provider",
    "make_http_client",
]
