from __future__ import annotations

import asyncio

import httpx

from adapters.http_client import build_async_client
from adapters.httpx_executor import HttpxExecutor
from core.config import AppSettings
from core.domain.models import FailureKind, RequestFailure, RequestSpec, RequestSuccess
from core.services.dispatcher import dispatch
from core.services.request_builder import build_request

_CLIENT_DEFAULT_HEADERS = {"host", "user-agent", "accept", "accept-encoding", "connection"}


def _execute(spec: RequestSpec, transport: httpx.MockTransport, url: str | None = None):
    async def scenario():
        settings = AppSettings()
        async with build_async_client(settings, transport=transport) as client:
            executor = HttpxExecutor(settings, client=client)
            return await executor.execute(build_request(url or spec.urls[0], spec))

    return asyncio.run(scenario())


def test_get_without_body_or_extra_headers(recording_transport):
    transport = recording_transport(lambda request: httpx.Response(200, json={"a": 1}))

    outcome = _execute(RequestSpec.create(["http://x/get"]), transport)

    assert outcome == RequestSuccess(
        url="http://x/get",
        status_code=200,
        payload={"a": 1},
        elapsed_ms=outcome.elapsed_ms,
    )
    sent = transport.received[0]
    assert sent.method == "GET"
    assert sent.content == b""
    assert set(sent.headers.keys()) <= _CLIENT_DEFAULT_HEADERS
    assert sent.headers["user-agent"] == AppSettings().user_agent


def test_post_sends_header_and_exact_body(recording_transport):
    transport = recording_transport(lambda request: httpx.Response(200, json={"created": True}))
    spec = RequestSpec.create(
        ["http://x/post"],
        method="POST",
        headers=["Content-Type:application/json"],
        body='{"key1":"value1"}',
    )

    outcome = _execute(spec, transport)

    assert isinstance(outcome, RequestSuccess)
    assert outcome.payload == {"created": True}
    sent = transport.received[0]
    assert sent.method == "POST"
    assert sent.headers["content-type"] == "application/json"
    assert sent.content == b'{"key1":"value1"}'


def test_get_with_body_is_sent(recording_transport):
    transport = recording_transport(lambda request: httpx.Response(200, json=[]))

    _execute(RequestSpec.create(["http://x/get"], body="hello"), transport)

    assert transport.received[0].content == b"hello"


def test_user_header_overrides_client_default(recording_transport):
    transport = recording_transport(lambda request: httpx.Response(200, json={}))

    _execute(RequestSpec.create(["http://x/"], headers=["User-Agent:custom/1"]), transport)

    assert transport.received[0].headers.get_list("user-agent") == ["custom/1"]


def test_transport_error_becomes_failure():
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    outcome = _execute(RequestSpec.create(["http://x/"]), httpx.MockTransport(refuse))

    assert isinstance(outcome, RequestFailure)
    assert outcome.error is FailureKind.TRANSPORT
    assert outcome.url == "http://x/"
    assert "connection refused" in outcome.detail
    assert outcome.status_code is None


def test_timeout_is_a_transport_error():
    def slow(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    outcome = _execute(RequestSpec.create(["http://x/"]), httpx.MockTransport(slow))

    assert outcome.error is FailureKind.TRANSPORT


def test_invalid_json_becomes_decode_failure():
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, text="<html>nope</html>", headers={"content-type": "text/html"})
    )

    outcome = _execute(RequestSpec.create(["http://x/"]), transport)

    assert isinstance(outcome, RequestFailure)
    assert outcome.error is FailureKind.DECODE
    assert outcome.status_code == 200
    assert "text/html" in outcome.detail


def test_empty_body_is_a_decode_failure():
    outcome = _execute(
        RequestSpec.create(["http://x/"], method="DELETE"),
        httpx.MockTransport(lambda request: httpx.Response(204)),
    )
    assert outcome.error is FailureKind.DECODE


def test_non_2xx_status_is_a_failure_with_payload():
    transport = httpx.MockTransport(lambda request: httpx.Response(404, json={"message": "missing"}))

    outcome = _execute(RequestSpec.create(["http://x/"]), transport)

    assert isinstance(outcome, RequestFailure)
    assert outcome.error is FailureKind.HTTP_STATUS
    assert outcome.status_code == 404
    assert outcome.payload == {"message": "missing"}
    assert outcome.detail == "HTTP 404 Not Found"


def test_non_2xx_with_non_json_body_has_no_payload():
    transport = httpx.MockTransport(lambda request: httpx.Response(500, text="oops"))

    outcome = _execute(RequestSpec.create(["http://x/"]), transport)

    assert outcome.error is FailureKind.HTTP_STATUS
    assert outcome.payload is None


def test_failing_url_does_not_affect_sibling(recording_transport):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "b.test":
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json={"ok": True})

    transport = recording_transport(handler)
    spec = RequestSpec.create(["http://a.test/", "http://b.test/"])

    async def scenario():
        settings = AppSettings()
        async with build_async_client(settings, transport=transport) as client:
            return await dispatch(spec, HttpxExecutor(settings, client=client))

    outcomes = asyncio.run(scenario())

    by_url = {o.url: o for o in outcomes}
    assert len(outcomes) == 2
    assert isinstance(by_url["http://a.test/"], RequestSuccess)
    assert by_url["http://a.test/"].payload == {"ok": True}
    assert isinstance(by_url["http://b.test/"], RequestFailure)
    assert by_url["http://b.test/"].error is FailureKind.TRANSPORT
    assert len(transport.received) == 2


def test_executor_owns_and_closes_its_client():
    async def scenario() -> bool:
        async with HttpxExecutor(AppSettings()) as executor:
            client = executor._ensure_client()
        return client.is_closed

    assert asyncio.run(scenario()) is True


def test_prepared_request_maps_to_httpx_request():
    spec = RequestSpec.create(["http://x/put"], method="PUT", headers=["A:1", "A:2"], body="ü")

    async def scenario() -> httpx.Request:
        async with HttpxExecutor(AppSettings()) as executor:
            return executor.to_httpx(build_request("http://x/put", spec))

    request = asyncio.run(scenario())
    assert request.method == "PUT"
    assert request.headers.get_list("a") == ["1", "2"]
    assert request.content == "ü".encode("utf-8")


def test_corrupt_content_encoding_is_a_decode_failure():
    transport = httpx.MockTransport(
        lambda request: httpx.Response(
            200,
            headers={"content-encoding": "gzip", "content-type": "application/json"},
            stream=httpx.ByteStream(b"definitely not gzip"),
        )
    )

    outcome = _execute(RequestSpec.create(["http://x/"]), transport)

    assert isinstance(outcome, RequestFailure)
    assert outcome.error is FailureKind.DECODE
