"""Exception taxonomy for exchange-rate resolution.

- ConfigurationError: a required secret or setting is missing. Fatal for the
  whole resolution, raised before any provider is called.
- ProviderError: one provider failed (HTTP, decode or provider-reported).
  Recovered inside the chain by moving to the next provider.
- ChainExhaustedError: every provider failed. Raised once by the chain.
- UnresolvableInputError: no usable currency code, or a derived rate that is
  not a positive finite number. Only used inside the resolver, which turns it
  into an "unavailable" result.
"""

from __future__ import annotations

from typing import Dict, Optional


class RateError(Exception):
    """Base class for rate resolution failures."""


class ConfigurationError(RateError):
    pass


class ProviderError(RateError):
    def __init__(self, provider: str, reason: str, status: Optional[int] = None):
        super().__init__(f"{provider}: {reason}")
        self.provider = provider
        self.reason = reason
        self.status = status


class ChainExhaustedError(RateError):
    def __init__(self, message: str, errors: Dict[str, str] | None = None):
        super().__init__(message)
        self.errors = errors or {}


class UnresolvableInputError(RateError):
    pass


__all__ = [
    "RateError",
    "ConfigurationError",
    "ProviderError",
    "ChainExhaustedError",
    "UnresolvableInputError",
]
