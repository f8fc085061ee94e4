"""httpx wrapper.

Why a wrapper:
- Standardises timeout, redirects and User-Agent for every request of a batch.
- Makes testing easy: a transport (e.g. `httpx.MockTransport`) can be injected.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings


def build_async_client(
    settings: AppSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the single `httpx.AsyncClient` shared by a batch.

    No default headers are added besides User-Agent, so the server sees only
    what the user asked for. The timeout is only set when configured.
    """

    settings = settings or AppSettings()
    kwargs: dict[str, object] = {}
    if settings.http_timeout_seconds is not None:
        kwargs["timeout"] = httpx.Timeout(settings.http_timeout_seconds)
    if transport is not None:
        kwargs["transport"] = transport
    return httpx.AsyncClient(
        follow_redirects=settings.follow_redirects,
        headers={"User-Agent": settings.user_agent},
        **kwargs,
    )
