from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, Response

from travelref.core.config import Settings
from travelref.core.errors import CORS_HEADERS
from travelref.models.rates import (
    ConversionPanel,
    ExchangeRatesError,
    ExchangeRatesRequest,
    ExchangeRatesResponse,
)
from travelref.services.rates.chain import build_provider_chain
from travelref.services.rates.conversion import build_conversion_panel
from travelref.services.rates.errors import RateError
from travelref.services.rates.resolver import RateResolver, parse_currency_code

"""Exchange rate endpoints.

Endpoints:
    - OPTIONS /get-exchange-rates -> CORS preflight, empty body
    - POST /get-exchange-rates    -> {rates, success, provider} or 500 {error, success}
    - GET /conversion-panel       -> resolved home->destination rate + converted amount

A fresh provider chain is built per request from the settings stored on the
app at startup; nothing is cached between requests.
"""

logger = logging.getLogger("travelref.routers.rates")

router = APIRouter(tags=["rates"])


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def build_rate_resolver(request: Request) -> RateResolver:
    settings = get_app_settings(request)
    chain = build_provider_chain(settings, getattr(request.app.state, "http_transport", None))
    return RateResolver(chain, home_currency=settings.home_currency)


@router.options("/get-exchange-rates", include_in_schema=False)
async def exchange_rates_preflight() -> Response:
    return Response(content=None, status_code=200, headers=CORS_HEADERS)


@router.post(
    "/get-exchange-rates",
    response_model=ExchangeRatesResponse,
    responses={500: {"model": ExchangeRatesError}},
    summary="Latest tracked rates for 1 unit of the given currency",
)
async def get_exchange_rates(payload: ExchangeRatesRequest, request: Request):
    logger.info("fetching exchange rates", extra={"currency": payload.currency_code})
    try:
        resolver = build_rate_resolver(request)
        rates, provider = await resolver.fetch_rate_set(payload.currency_code)
    except RateError as e:
        logger.error("exchange rate lookup failed: %s", e, extra={"currency": payload.currency_code})
        body = ExchangeRatesError(error=str(e) or "Unknown error occurred")
        return JSONResponse(status_code=500, content=body.model_dump(), headers=CORS_HEADERS)
    body = ExchangeRatesResponse(rates=rates.rates, provider=provider)
    return JSONResponse(status_code=200, content=body.model_dump(), headers=CORS_HEADERS)


@router.get(
    "/conversion-panel",
    response_model=ConversionPanel,
    summary="Home to destination rate with an optional converted amount",
)
async def conversion_panel(
    currency: str = Query(..., description='Record currency field, e.g. "Euro (EUR)"'),
    amount: Optional[str] = Query(None, description="Amount in home currency"),
    resolver: RateResolver = Depends(build_rate_resolver),
) -> ConversionPanel:
    resolved = await resolver.resolve(currency)
    return build_conversion_panel(
        resolved,
        home_currency=resolver.home_currency,
        amount=amount,
        currency=parse_currency_code(currency),
    )
