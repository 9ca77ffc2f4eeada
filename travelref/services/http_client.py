"""Async JSON HTTP client with bounded retry.

Thin wrapper over httpx.AsyncClient used by every rate provider. One client
per call so each resolution owns its connections; cancelling the awaiting
task closes them. Only transport failures and 5xx responses are retried,
and only `retries` times.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Mapping, Optional

import httpx

logger = logging.getLogger("travelref.http")

_BODY_SNIPPET = 300


class HttpError(Exception):
    def __init__(self, url: str, reason: str, status: Optional[int] = None, body: str = ""):
        super().__init__(f"{reason} for {url}")
        self.url = url
        self.reason = reason
        self.status = status
        self.body = body


class JsonHttpClient:
    def __init__(
        self,
        *,
        timeout: float = 8.0,
        retries: int = 0,
        backoff: float = 0.5,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._timeout = timeout
        self._retries = retries
        self._backoff = backoff
        self._transport = transport

    async def get_json(
        self, url: str, params: Mapping[str, str] | None = None
    ) -> Dict[str, Any]:
        async with httpx.AsyncClient(
            timeout=self._timeout, transport=self._transport
        ) as client:
            for attempt in range(self._retries + 1):
                try:
                    return await self._get_once(client, url, params)
                except HttpError as e:
                    retryable = e.status is None or e.status >= 500
                    if not retryable or attempt == self._retries:
                        raise
                    logger.debug(
                        "retrying %s after %s",
                        _redact(url),
                        e.reason,
                        extra={"attempt": attempt + 1, "status": e.status},
                    )
                    await asyncio.sleep(self._backoff * (2**attempt))
        raise HttpError(_redact(url), "no attempt made")

    async def _get_once(
        self,
        client: httpx.AsyncClient,
        url: str,
        params: Mapping[str, str] | None,
    ) -> Dict[str, Any]:
        try:
            resp = await client.get(url, params=params)
        except httpx.TimeoutException as e:
            raise HttpError(_redact(url), f"timeout after {self._timeout}s") from e
        except httpx.HTTPError as e:
            raise HttpError(_redact(url), f"transport error: {e}") from e
        if not resp.is_success:
            raise HttpError(
                _redact(url),
                f"HTTP {resp.status_code}",
                status=resp.status_code,
                body=resp.text[:_BODY_SNIPPET],
            )
        try:
            data = resp.json()
        except ValueError as e:
            raise HttpError(
                _redact(url),
                "invalid JSON body",
                status=resp.status_code,
                body=resp.text[:_BODY_SNIPPET],
            ) from e
        if not isinstance(data, dict):
            raise HttpError(
                _redact(url), "JSON body is not an object", status=resp.status_code
            )
        return data


def _redact(url: str) -> str:
    # Keys travel in the path for one provider; never log past the host
    parsed = httpx.URL(url)
    return f"{parsed.scheme}://{parsed.host}"


__all__ = ["HttpError", "JsonHttpClient"]
