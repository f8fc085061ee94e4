"""JSON export of a whole batch.

Why JSON:
- Interoperable with other tools and pipelines.
- Keeps the full outcome (status, timing, error kind), not only the body.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Sequence

from core.domain.models import RequestOutcome


def export_outcomes_json(*, outcomes: Sequence[RequestOutcome], output_path: Path) -> Path:
    """Write `outcomes` as a UTF-8 JSON list with a stable layout."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = [outcome.model_dump(mode="json") for outcome in outcomes]
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
