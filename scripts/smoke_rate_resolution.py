import asyncio
import json
import os
import sys

from fastapi.testclient import TestClient

from travelref.core.config import get_settings
from travelref.main import create_app
from travelref.services.rates.chain import build_provider_chain
from travelref.services.rates.conversion import convert
from travelref.services.rates.resolver import RateResolver

"""Smoke test for live exchange-rate resolution.

Resolves a record currency field against the real providers (needs the three
API keys in the environment or .env) and prints the resolved figure, a sample
conversion, and the raw /get-exchange-rates response for the same code.

Usage: python scripts/smoke_rate_resolution.py "Euro (EUR)" 100
"""


async def resolve(field: str, amount: str) -> dict:
    settings = get_settings()
    resolver = RateResolver(build_provider_chain(settings), settings.home_currency)
    resolved = await resolver.resolve(field)
    if resolved is None:
        return {"field": field, "available": False}
    return {
        "field": field,
        "available": True,
        "provider": resolved.provider,
        "rate": resolved.display(),
        "converted": convert(amount, resolved.rate),
    }


def run(field: str, amount: str) -> None:
    out = {"resolver": asyncio.run(resolve(field, amount))}
    client = TestClient(create_app())
    code = field[field.find("(") + 1 : field.find(")")] if "(" in field else field
    resp = client.post("/get-exchange-rates", json={"currencyCode": code})
    out["endpoint"] = {"status": resp.status_code, "body": resp.json()}
    print(json.dumps(out, indent=2))


if __name__ == "__main__":
    sys.path.append(os.getcwd())
    args = sys.argv[1:]
    run(args[0] if args else "Euro (EUR)", args[1] if len(args) > 1 else "100")
