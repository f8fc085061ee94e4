"""Concurrent request dispatch.

Fan-out, join-all: every URL of a `RequestSpec` becomes one task, all tasks
start right away (or behind a semaphore when a ceiling is configured) and
the batch ends only when each of them has produced an outcome. Outcomes are
handed to the caller in completion order, not submission order.

Side effects (printing, progress) stay out of this module; UI layers plug
in through `DispatchHooks`.
"""

from __future__ import annotations

import asyncio
import logging
import time
from contextlib import nullcontext
from dataclasses import dataclass
from typing import Callable

from core.domain.models import (
    FailureKind,
    PreparedRequest,
    RequestFailure,
    RequestOutcome,
    RequestSpec,
)
from core.interfaces.executor import RequestExecutor
from core.services.request_builder import build_requests

logger = logging.getLogger(__name__)


@dataclass
class DispatchHooks:
    """Optional callbacks for UI layers."""

    started: Callable[[PreparedRequest], None] | None = None
    outcome: Callable[[RequestOutcome], None] | None = None


async def _safe_execute(
    executor: RequestExecutor,
    request: PreparedRequest,
    limiter: asyncio.Semaphore | None,
    hooks: DispatchHooks,
) -> RequestOutcome:
    async with limiter if limiter is not None else nullcontext():
        if hooks.started:
            hooks.started(request)
        started_at = time.perf_counter()
        try:
            return await executor.execute(request)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            # An executor must report failures itself; anything escaping it
            # still becomes this URL's outcome.
            logger.exception("executor raised for %s %s", request.method.value, request.url)
            return RequestFailure(
                url=request.url,
                error=FailureKind.UNEXPECTED,
                detail=str(exc) or exc.__class__.__name__,
                elapsed_ms=(time.perf_counter() - started_at) * 1000,
            )


async def dispatch(
    spec: RequestSpec,
    executor: RequestExecutor,
    *,
    max_concurrency: int | None = None,
    hooks: DispatchHooks | None = None,
) -> list[RequestOutcome]:
    """Send every request of `spec` concurrently and wait for all of them.

    `max_concurrency=None` means no ceiling. Configuration errors surface
    from `build_requests` before a single task is created. The returned list
    is in completion order and always has `len(spec.urls)` items.
    """

    hooks = hooks or DispatchHooks()
    if max_concurrency is not None and max_concurrency < 1:
        raise ValueError("max_concurrency must be >= 1 or None")

    prepared = build_requests(spec)
    limiter = asyncio.Semaphore(max_concurrency) if max_concurrency else None
    logger.info(
        "dispatching %d %s request(s), concurrency=%s",
        len(prepared),
        spec.method.value,
        max_concurrency or "unbounded",
    )

    tasks = [
        asyncio.ensure_future(_safe_execute(executor, request, limiter, hooks))
        for request in prepared
    ]
    outcomes: list[RequestOutcome] = []
    try:
        for next_done in asyncio.as_completed(tasks):
            outcome = await next_done
            outcomes.append(outcome)
            if hooks.outcome:
                hooks.outcome(outcome)
    finally:
        # Only reached with pending tasks if a hook raised.
        for task in tasks:
            if not task.done():
                task.cancel()

    failed = sum(1 for o in outcomes if not o.ok)
    logger.info("batch complete: %d ok, %d failed", len(outcomes) - failed, failed)
    return outcomes


def run_batch(
    spec: RequestSpec,
    executor: RequestExecutor,
    *,
    max_concurrency: int | None = None,
    hooks: DispatchHooks | None = None,
) -> list[RequestOutcome]:
    """Blocking wrapper around `dispatch` for synchronous callers."""

    return asyncio.run(
        dispatch(spec, executor, max_concurrency=max_concurrency, hooks=hooks)
    )
