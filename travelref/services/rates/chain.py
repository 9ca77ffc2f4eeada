from __future__ import annotations

"""Sequential provider fallback.

Providers are awaited one at a time in priority order and the first complete
RateSet wins; nothing after it is called. Providers are never raced.
"""
import logging
from typing import Dict, Iterable, List

import httpx

from travelref.core.config import Settings
from travelref.models.rates import RateSet
from .base import ProviderResult, RateProvider
from .errors import ChainExhaustedError, ConfigurationError
from .providers import make_http_client, make_rate_provider

logger = logging.getLogger("travelref.rates.chain")


class ProviderChain:
    def __init__(self, providers: Iterable[RateProvider]):
        self._providers: List[RateProvider] = list(providers)
        if not self._providers:
            raise ConfigurationError("No exchange rate providers configured")

    @property
    def provider_names(self) -> List[str]:
        return [p.name for p in self._providers]

    async def resolve(self, currency_code: str) -> RateSet:
        return (await self.resolve_result(currency_code)).rates  # type: ignore[return-value]

    async def resolve_result(self, currency_code: str) -> ProviderResult:
        """Return the first successful ProviderResult or raise ChainExhaustedError."""
        currency_code = currency_code.upper()
        errors: Dict[str, str] = {}
        last_error = "no provider attempted"
        for provider in self._providers:
            try:
                result = await provider.fetch(currency_code)
            except Exception as e:  # adapter bug; keep falling back
                logger.exception(
                    "provider raised unexpectedly",
                    extra={"provider": provider.name, "currency": currency_code},
                )
                result = ProviderResult(provider.name, error=f"unexpected error: {e}")
            if result.ok:
                return result
            last_error = f"{provider.name}: {result.error}"
            errors[provider.name] = result.error or "unknown error"
            logger.info(
                "falling back to next provider",
                extra={"provider": provider.name, "currency": currency_code},
            )

        logger.error(
            "all providers failed",
            extra={"currency": currency_code},
        )
        raise ChainExhaustedError(
            f"All {len(self._providers)} exchange rate providers failed for "
            f"{currency_code}. Last error: {last_error}",
            errors=errors,
        )


def build_provider_chain(
    settings: Settings, transport: httpx.AsyncBaseTransport | None = None
) -> ProviderChain:
    """Build the configured chain; raises ConfigurationError on missing keys."""
    http = make_http_client(settings, transport)
    return ProviderChain(
        make_rate_provider(kind, settings, http) for kind in settings.rate_provider_order
    )


__all__ = ["ProviderChain", "build_provider_chain"]
