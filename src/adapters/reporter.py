"""Outcome rendering for stdout.

Each outcome becomes one JSON document: the response body for a success,
an error object for a failure. Formatting only; no network, no state.
"""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console

from core.domain.models import RequestFailure, RequestOutcome


def outcome_to_json(outcome: RequestOutcome) -> Any:
    """JSON value printed for `outcome`."""

    if isinstance(outcome, RequestFailure):
        data = outcome.model_dump(
            mode="json",
            include={"error", "url", "detail", "status_code", "payload"},
            exclude_none=True,
        )
        # keep "error" and "url" first for readability
        return {"error": data.pop("error"), "url": data.pop("url"), **data}
    return outcome.payload


def render_outcome(outcome: RequestOutcome, *, pretty: bool = True) -> str:
    value = outcome_to_json(outcome)
    if pretty:
        return json.dumps(value, ensure_ascii=False, indent=2)
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


class ConsoleReporter:
    """Sink printing every outcome as soon as it arrives.

    Uses `Console.out` so Rich never wraps, highlights or interprets markup
    in the JSON text.
    """

    def __init__(self, console: Console | None = None, *, pretty: bool = True) -> None:
        self._console = console or Console(soft_wrap=True)
        self._pretty = pretty

    def __call__(self, outcome: RequestOutcome) -> None:
        self._console.out(render_outcome(outcome, pretty=self._pretty), highlight=False)
