"""Request executor backed by httpx.

One `httpx.AsyncClient` is created per batch and reused by every request,
so connections are pooled. Each `PreparedRequest` is sent exactly once and
always turned into an outcome: transport and decoding problems become
`RequestFailure` values, never exceptions.
"""

from __future__ import annotations

import logging
import time

import httpx

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.models import (
    FailureKind,
    PreparedRequest,
    RequestFailure,
    RequestOutcome,
    RequestSuccess,
)
from core.interfaces.executor import RequestExecutor

logger = logging.getLogger(__name__)

_UNDECODED = object()


def _elapsed_ms(started_at: float) -> float:
    return (time.perf_counter() - started_at) * 1000


def _decode_json(response: httpx.Response) -> object:
    try:
        return response.json()
    except ValueError:
        # JSONDecodeError and UnicodeDecodeError are both ValueError
        return _UNDECODED


class HttpxExecutor(RequestExecutor):
    """Sends prepared requests through a shared `httpx.AsyncClient`.

    Usable as an async context manager; a client passed in by the caller is
    left open on exit.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "HttpxExecutor":
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = build_async_client(self._settings)
            self._owns_client = True
            logger.debug("httpx client created")
        return self._client

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
            logger.debug("httpx client closed")

    def to_httpx(self, request: PreparedRequest) -> httpx.Request:
        client = self._ensure_client()
        content = request.body.encode("utf-8") if request.body is not None else None
        return client.build_request(
            request.method.value,
            request.url,
            headers=request.header_pairs(),
            content=content,
        )

    async def execute(self, request: PreparedRequest) -> RequestOutcome:
        client = self._ensure_client()
        started_at = time.perf_counter()
        logger.debug("-> %s %s", request.method.value, request.url)

        try:
            response = await client.send(self.to_httpx(request))
        except httpx.DecodingError as exc:
            # the server answered, but its content-encoding is corrupt
            detail = str(exc) or exc.__class__.__name__
            logger.warning("body of %s could not be decoded: %s", request.url, detail)
            return RequestFailure(
                url=request.url,
                error=FailureKind.DECODE,
                detail=detail,
                elapsed_ms=_elapsed_ms(started_at),
            )
        except httpx.RequestError as exc:
            detail = str(exc) or exc.__class__.__name__
            logger.warning("transport error for %s: %s", request.url, detail)
            return RequestFailure(
                url=request.url,
                error=FailureKind.TRANSPORT,
                detail=detail,
                elapsed_ms=_elapsed_ms(started_at),
            )

        logger.debug("<- %s %s", response.status_code, request.url)
        payload = _decode_json(response)
        elapsed = _elapsed_ms(started_at)

        if not response.is_success:
            status_line = f"HTTP {response.status_code} {response.reason_phrase}".strip()
            logger.warning("%s for %s", status_line, request.url)
            return RequestFailure(
                url=request.url,
                error=FailureKind.HTTP_STATUS,
                detail=status_line,
                status_code=response.status_code,
                payload=None if payload is _UNDECODED else payload,
                elapsed_ms=elapsed,
            )

        if payload is _UNDECODED:
            content_type = response.headers.get("content-type", "unknown content type")
            logger.warning("body of %s is not valid JSON (%s)", request.url, content_type)
            return RequestFailure(
                url=request.url,
                error=FailureKind.DECODE,
                detail=f"response body is not valid JSON ({content_type})",
                status_code=response.status_code,
                elapsed_ms=elapsed,
            )

        return RequestSuccess(
            url=request.url,
            status_code=response.status_code,
            payload=payload,
            elapsed_ms=elapsed,
        )
