"""Shared test doubles: canned provider HTTP responses and in-process providers."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from travelref.services.rates.base import RateProvider
from travelref.services.rates.errors import ProviderError

PRIMARY_HOST = "v6.exchangerate-api.com"
SECONDARY_HOST = "api.exchangerate.host"
TERTIARY_HOST = "api.exchangeratesapi.io"

EUR_RATES = {"INR": 90.5, "USD": 1.08, "EUR": 1, "GBP": 0.85, "JPY": 161.3}


def primary_ok(rates: Dict[str, Any] = EUR_RATES) -> tuple:
    return (200, {"result": "success", "base_code": "EUR", "conversion_rates": rates})


def apilayer_ok(rates: Dict[str, Any] = EUR_RATES, base: str = "EUR") -> tuple:
    return (200, {"success": True, "base": base, "rates": rates})


def apilayer_error(code: Any, type_: str, info: str = "") -> tuple:
    return (200, {"success": False, "error": {"code": code, "type": type_, "info": info}})


class ProviderStub:
    """httpx handler routing by host to queued (status, body) pairs.

    A body may be a dict (sent as JSON), a str (sent raw) or an exception
    instance (raised as a transport failure). The last queued entry for a
    host repeats once the queue is down to one.
    """

    def __init__(self) -> None:
        self.routes: Dict[str, List[Any]] = {}
        self.calls: List[httpx.Request] = []

    def on(self, host: str, *responses: Any) -> "ProviderStub":
        self.routes[host] = list(responses)
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        queue = self.routes.get(request.url.host)
        if not queue:
            return httpx.Response(404, json={"error": "unrouted"})
        entry = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(entry, Exception):
            raise entry
        status, body = entry
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    @property
    def hosts(self) -> List[str]:
        return [r.url.host for r in self.calls]


class FakeProvider(RateProvider):
    """Provider that never touches the network; records the bases it was asked for."""

    def __init__(
        self,
        name: str,
        rates: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
        exc: Optional[BaseException] = None,
    ):
        self.name = name
        self._rates = rates
        self._error = error
        self._exc = exc
        self.calls: List[str] = []

    async def _fetch_rates(self, base_currency: str):
        self.calls.append(base_currency)
        if self._exc is not None:
            raise self._exc
        if self._error is not None:
            raise ProviderError(self.name, self._error)
        return self._rate_set(base_currency, self._rates)
