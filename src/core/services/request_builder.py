"""Request builder.

Pure functions: no network I/O, no shared state. Building the same
(url, spec) twice yields equal `PreparedRequest` values.
"""

from __future__ import annotations

from core.domain.models import HeaderEntry, PreparedRequest, RequestSpec


def build_request(url: str, spec: RequestSpec) -> PreparedRequest:
    """Materialise `spec` for a single URL.

    Headers are applied in order and parsed again here, so a malformed entry
    fails with `MalformedHeaderError` before anything is sent. The body is
    attached verbatim for every method, GET included.
    """

    headers = tuple(HeaderEntry.parse(raw) for raw in spec.headers)
    return PreparedRequest(
        url=url,
        method=spec.method,
        headers=headers,
        body=spec.body,
    )


def build_requests(spec: RequestSpec) -> list[PreparedRequest]:
    """One `PreparedRequest` per URL, in the order of `spec.urls`."""

    return [build_request(url, spec) for url in spec.urls]
