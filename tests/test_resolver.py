import math

import pytest

from travelref.models.rates import RateSet
from travelref.services.rates.base import ProviderResult
from travelref.services.rates.chain import ProviderChain, build_provider_chain
from travelref.services.rates.errors import UnresolvableInputError
from travelref.services.rates.resolver import (
    RateResolver,
    extract_currency_code,
    invert_home_rate,
    parse_currency_code,
)

from tests.stubs import PRIMARY_HOST, SECONDARY_HOST, TERTIARY_HOST, FakeProvider


@pytest.mark.parametrize(
    "field,code",
    [
        ("Euro (EUR)", "EUR"),
        ("Pound sterling (GBP)", "GBP"),
        ("CFA franc (XOF) / (XAF)", "XOF"),
    ],
)
def test_extract_currency_code(field, code):
    assert extract_currency_code(field) == code


@pytest.mark.parametrize("field", ["Euro", "Euro (eur)", "Euro (EURO)", "", None])
def test_unparseable_fields_have_no_code(field):
    assert parse_currency_code(field) is None
    with pytest.raises(UnresolvableInputError):
        extract_currency_code(field)


@pytest.mark.asyncio
async def test_euro_round_trip():
    provider = FakeProvider("a", rates={"INR": 90.5, "USD": 1.08, "EUR": 1, "GBP": 0.85})
    resolver = RateResolver(ProviderChain([provider]), home_currency="INR")
    resolved = await resolver.resolve("Euro (EUR)")
    assert provider.calls == ["EUR"]
    assert resolved.rate == pytest.approx(1 / 90.5)
    assert resolved.formatted() == "0.0110"
    assert resolved.display() == "1 INR = 0.0110 EUR"
    assert resolved.provider == "a"


@pytest.mark.asyncio
async def test_resolve_home_to_destination_returns_number():
    provider = FakeProvider("a", rates={"INR": 1.0, "USD": 0.012, "EUR": 0.011, "GBP": 0.0095})
    resolver = RateResolver(ProviderChain([provider]))
    assert await resolver.resolve_home_to_destination("Indian rupee (INR)") == 1.0


@pytest.mark.asyncio
async def test_no_code_means_no_network_call():
    provider = FakeProvider("a", rates={"INR": 90.5, "USD": 1.08, "EUR": 1, "GBP": 0.85})
    resolver = RateResolver(ProviderChain([provider]))
    assert await resolver.resolve_home_to_destination("Local tokens") is None
    assert provider.calls == []


@pytest.mark.asyncio
async def test_total_failure_is_unavailable(settings, stub):
    stub.on(PRIMARY_HOST, (500, {"result": "error"}))
    stub.on(SECONDARY_HOST, (502, "bad gateway"))
    stub.on(TERTIARY_HOST, (503, "unavailable"))
    resolver = RateResolver(build_provider_chain(settings, stub.transport))
    assert await resolver.resolve_home_to_destination("Euro (EUR)") is None
    assert len(stub.calls) == 3


class _ZeroHomeRateChain(ProviderChain):
    """Chain that returns a set bypassing validation, as a misbehaving upstream could."""

    def __init__(self, home_rate):
        self.home_rate = home_rate

    async def resolve_result(self, currency_code):
        rates = RateSet.model_construct(
            base=currency_code,
            rates={"INR": self.home_rate, "USD": 1.08, "EUR": 1.0, "GBP": 0.85},
        )
        return ProviderResult("stub", rates=rates)


@pytest.mark.asyncio
@pytest.mark.parametrize("home_rate", [0, 0.0, -2.0, math.nan, math.inf, None, "90"])
async def test_division_guard_returns_unavailable(home_rate):
    resolver = RateResolver(_ZeroHomeRateChain(home_rate))
    assert await resolver.resolve_home_to_destination("Euro (EUR)") is None


def test_invert_home_rate_rejects_zero():
    rates = RateSet.model_construct(base="EUR", rates={"INR": 0})
    with pytest.raises(UnresolvableInputError):
        invert_home_rate(rates, "INR")

