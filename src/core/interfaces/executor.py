"""Request executor contract.

Why a Protocol:
- Structural contract (duck typing) without inheritance.
- The dispatcher can run against the httpx adapter or any test double.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import PreparedRequest, RequestOutcome


@runtime_checkable
class RequestExecutor(Protocol):
    """Minimal contract for sending one request.

    Rules:
    - `execute` is async because it performs network I/O.
    - Returns exactly one outcome per request; per-request problems are
      reported as `RequestFailure`, not raised.
    """

    async def execute(self, request: PreparedRequest) -> RequestOutcome:
        """Send `request` once and return its outcome."""

        ...
