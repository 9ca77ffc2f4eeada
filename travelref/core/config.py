from functools import lru_cache
from typing import List, Optional

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from travelref.models.constants import TRACKED_CURRENCIES

DEFAULT_PROVIDER_ORDER = ["exchangerate-api", "exchangerate-host", "exchangeratesapi"]


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG,
    HOME_CURRENCY, EXCHANGE_RATE_API_KEY, HTTP_TIMEOUT_SECONDS).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "Travel Reference Rates"
    debug: bool = False
    version: str = "0.2.0"

    # Currency the traveller holds; every resolved rate is expressed from it
    home_currency: str = "INR"

    # Provider secrets. None means "not provisioned".
    exchange_rate_api_key: Optional[str] = None
    exchangerate_host_api_key: Optional[str] = None
    exchangerates_api_key: Optional[str] = None

    exchange_rate_api_base_url: AnyHttpUrl = "https://v6.exchangerate-api.com/v6"
    exchangerate_host_base_url: AnyHttpUrl = "https://api.exchangerate.host"
    exchangerates_api_base_url: AnyHttpUrl = "http://api.exchangeratesapi.io"

    # Outbound HTTP
    http_timeout_seconds: float = Field(8.0, gt=0, le=60)
    http_retries: int = Field(0, ge=0, le=5)
    http_backoff_seconds: float = Field(0.5, ge=0)

    # Fixed priority order of the provider chain
    rate_provider_order: List[str] = Field(
        default_factory=lambda: list(DEFAULT_PROVIDER_ORDER)
    )

    @field_validator("home_currency")
    @classmethod
    def tracked_home_currency(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in TRACKED_CURRENCIES:
            raise ValueError(
                f"home_currency must be one of {', '.join(TRACKED_CURRENCIES)}"
            )
        return v

    @field_validator("rate_provider_order")
    @classmethod
    def known_providers(cls, v: List[str]) -> List[str]:
        allowed = set(DEFAULT_PROVIDER_ORDER)
        unknown = [kind for kind in v if kind not in allowed]
        if unknown:
            raise ValueError(
                f"Unsupported rate providers {unknown}. Allowed: {sorted(allowed)}"
            )
        if len(set(v)) != len(v):
            raise ValueError("rate_provider_order must not repeat a provider")
        return v

    def base_url(self, kind: str) -> str:
        urls = {
            "exchangerate-api": self.exchange_rate_api_base_url,
            "exchangerate-host": self.exchangerate_host_base_url,
            "exchangeratesapi": self.exchangerates_api_base_url,
        }
        return str(urls[kind]).rstrip("/")

    def api_key(self, kind: str) -> Optional[str]:
        keys = {
            "exchangerate-api": self.exchange_rate_api_key,
            "exchangerate-host": self.exchangerate_host_api_key,
            "exchangeratesapi": self.exchangerates_api_key,
        }
        return keys[kind]


@lru_cache
def get_settings() -> Settings:
    return Settings()
