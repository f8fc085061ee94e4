"""Domain models.

Two families live here:
- Request side (`RequestSpec`, `HeaderEntry`, `PreparedRequest`): immutable
  dataclasses validated on construction. Invalid input raises a
  `RequestConfigError` subclass, never a generic validation error.
- Result side (`RequestSuccess`, `RequestFailure`): Pydantic v2 models, so
  every outcome serialises to JSON the same way (reporter, file export).

These models describe *what* a request is, not *how* it is sent.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any, Literal, Sequence, Union
from urllib.parse import urlsplit

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from core.domain.errors import (
    EmptyUrlListError,
    InvalidUrlError,
    MalformedHeaderError,
    UnsupportedMethodError,
)

_ALLOWED_SCHEMES = ("http", "https")


class HttpMethod(str, Enum):
    """Request methods accepted by the client."""

    GET = "GET"
    POST = "POST"
    PATCH = "PATCH"
    PUT = "PUT"
    DELETE = "DELETE"

    @classmethod
    def parse(cls, value: "HttpMethod | str") -> "HttpMethod":
        """Case-insensitive lookup; anything else is a configuration error."""

        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise UnsupportedMethodError(str(value)) from None


@dataclass(frozen=True)
class HeaderEntry:
    name: str
    value: str

    @classmethod
    def parse(cls, raw: str) -> "HeaderEntry":
        """Split a raw `Name:Value` string on its first colon."""

        name, sep, value = raw.partition(":")
        if not sep:
            raise MalformedHeaderError(raw)
        name = name.strip()
        if not name:
            raise MalformedHeaderError(raw, "empty header name")
        value = value.strip()
        if any(ch in raw for ch in "\r\n"):
            raise MalformedHeaderError(raw, "line breaks are not allowed")
        if not (name.isascii() and value.isascii()):
            raise MalformedHeaderError(raw, "only ASCII characters are allowed")
        return cls(name=name, value=value)

    def as_tuple(self) -> tuple[str, str]:
        return (self.name, self.value)


def _validate_url(url: str) -> str:
    candidate = url.strip()
    try:
        parts = urlsplit(candidate)
    except ValueError as exc:
        raise InvalidUrlError(url, str(exc)) from exc
    if parts.scheme.lower() not in _ALLOWED_SCHEMES:
        raise InvalidUrlError(url, "expected an absolute http(s) URL")
    if not parts.netloc or not parts.hostname:
        raise InvalidUrlError(url, "missing host")
    return candidate


@dataclass(frozen=True)
class RequestSpec:
    """One request template plus the URLs it is sent to.

    Immutable and shared by reference between all concurrent tasks. Every
    field is checked here, so a `RequestSpec` that exists is dispatchable.
    Duplicate URLs are kept: each one is sent once.
    """

    urls: tuple[str, ...]
    method: HttpMethod = HttpMethod.GET
    headers: tuple[str, ...] = ()
    body: str | None = None
    header_entries: tuple[HeaderEntry, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        urls = (self.urls,) if isinstance(self.urls, str) else tuple(self.urls)
        if not urls:
            raise EmptyUrlListError()
        headers = (self.headers,) if isinstance(self.headers, str) else tuple(self.headers)

        # frozen: assign through object.__setattr__
        object.__setattr__(self, "urls", tuple(_validate_url(u) for u in urls))
        object.__setattr__(self, "method", HttpMethod.parse(self.method))
        object.__setattr__(self, "headers", headers)
        object.__setattr__(self, "header_entries", tuple(HeaderEntry.parse(h) for h in headers))

    @classmethod
    def create(
        cls,
        urls: Sequence[str],
        *,
        method: HttpMethod | str = HttpMethod.GET,
        headers: Sequence[str] | None = None,
        body: str | None = None,
    ) -> "RequestSpec":
        return cls(
            urls=tuple(urls),
            method=method,  # type: ignore[arg-type]
            headers=tuple(headers or ()),
            body=body,
        )


@dataclass(frozen=True)
class PreparedRequest:
    """A fully configured request for one URL, not yet sent."""

    url: str
    method: HttpMethod
    headers: tuple[HeaderEntry, ...] = ()
    body: str | None = None

    def header_pairs(self) -> list[tuple[str, str]]:
        return [h.as_tuple() for h in self.headers]


class FailureKind(str, Enum):
    TRANSPORT = "transport error"
    DECODE = "body decode error"
    HTTP_STATUS = "http status error"
    UNEXPECTED = "unexpected error"


class RequestSuccess(BaseModel):
    """A request that completed with a 2xx status and a JSON body."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["success"] = "success"
    url: str = Field(
        ...,
        description="URL the request was sent to (as given by the user).",
    )
    status_code: int = Field(
        ...,
        ge=100,
        le=599,
        description="HTTP status code of the response.",
    )
    payload: Any = Field(
        default=None,
        description="Decoded JSON body.",
    )
    elapsed_ms: float | None = Field(
        default=None,
        ge=0,
        description="Wall time from send to decoded body (milliseconds).",
    )

    @property
    def ok(self) -> bool:
        return True


class RequestFailure(BaseModel):
    """A request that could not produce a usable JSON body."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["failure"] = "failure"
    url: str = Field(
        ...,
        description="URL the request was sent to (as given by the user).",
    )
    error: FailureKind = Field(
        ...,
        description="Failure category.",
    )
    detail: str = Field(
        default="",
        description="Human readable description (exception text, status line).",
    )
    status_code: int | None = Field(
        default=None,
        ge=100,
        le=599,
        description="HTTP status code, when a response was received.",
    )
    payload: Any | None = Field(
        default=None,
        description="Decoded JSON body of an error response, if any.",
    )
    elapsed_ms: float | None = Field(
        default=None,
        ge=0,
    )

    @property
    def ok(self) -> bool:
        return False


RequestOutcome = Annotated[
    Union[RequestSuccess, RequestFailure],
    Field(discriminator="kind"),
]
