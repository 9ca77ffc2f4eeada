import pytest

from travelref.core.config import Settings
from travelref.services.http_client import JsonHttpClient

from tests.stubs import ProviderStub


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        exchange_rate_api_key="key-a",
        exchangerate_host_api_key="key-b",
        exchangerates_api_key="key-c",
        http_timeout_seconds=2.0,
        http_retries=0,
        http_backoff_seconds=0,
    )


@pytest.fixture
def stub() -> ProviderStub:
    return ProviderStub()


@pytest.fixture
def http(stub: ProviderStub) -> JsonHttpClient:
    return JsonHttpClient(timeout=2.0, retries=0, backoff=0, transport=stub.transport)
