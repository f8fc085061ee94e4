"""Configuration errors.

Raised while turning user input into a `RequestSpec`, always before any
request is sent. Per-request problems (network, decoding) are never raised:
they are captured as `RequestFailure` outcomes.
"""

from __future__ import annotations


class RequestConfigError(ValueError):
    """Base class for every invalid-input error of a batch."""


class EmptyUrlListError(RequestConfigError):
    def __init__(self) -> None:
        super().__init__("at least one URL is required")


class InvalidUrlError(RequestConfigError):
    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"invalid URL {url!r}: {reason}")


class UnsupportedMethodError(RequestConfigError):
    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"unsupported request method {method!r}")


class MalformedHeaderError(RequestConfigError):
    def __init__(self, raw: str, reason: str = "expected 'Name:Value'") -> None:
        self.raw = raw
        super().__init__(f"malformed header {raw!r}: {reason}")
