from __future__ import annotations

import asyncio
import socket
import time

import httpx
import pytest

from meli_sdk.errors import (
    CONNECTION_REFUSED,
    CONNECTION_RESET,
    NAME_NOT_RESOLVED,
    NETWORK_ERROR,
    NetworkError,
    RequestTimeoutError,
)
from meli_sdk.transport import Transport, parse_body


def test_parse_body_degrades_to_raw_text() -> None:
    assert parse_body('{"ok": true}') == {"ok": True}
    assert parse_body("<html>502 Bad Gateway</html>") == "<html>502 Bad Gateway</html>"
    assert parse_body("") is None


@pytest.mark.asyncio
async def test_invalid_json_returned_as_text() -> None:
    transport = Transport(transport=httpx.MockTransport(lambda request: httpx.Response(200, text="not json")))
    envelope = await transport.send("https://api.example.com/x", "GET", {}, timeout=1.0)
    assert envelope.data == "not json"
    assert envelope.status == 200
    await transport.aclose()


@pytest.mark.asyncio
async def test_error_statuses_are_returned_not_raised() -> None:
    transport = Transport(transport=httpx.MockTransport(lambda request: httpx.Response(404, json={"error": "not_found"})))
    envelope = await transport.send("https://api.example.com/x", "GET", {}, timeout=1.0)
    assert envelope.status == 404
    assert not envelope.ok
    assert envelope.data == {"error": "not_found"}


@pytest.mark.asyncio
async def test_timeout_aborts_in_flight_request() -> None:
    cancelled = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        try:
            await asyncio.sleep(5)
        except asyncio.CancelledError:
            cancelled.set()
            raise
        return httpx.Response(200)

    transport = Transport(transport=httpx.MockTransport(handler))
    started = time.perf_counter()
    with pytest.raises(RequestTimeoutError) as exc_info:
        await transport.send("https://api.example.com/slow", "GET", {}, timeout=0.05)
    elapsed = time.perf_counter() - started

    assert elapsed < 1.0
    assert cancelled.is_set()
    assert exc_info.value.code == "timed_out"
    assert exc_info.value.timeout == 0.05


@pytest.mark.asyncio
async def test_httpx_timeout_mapped_to_request_timeout() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("read timed out", request=request)

    transport = Transport(transport=httpx.MockTransport(handler))
    with pytest.raises(RequestTimeoutError):
        await transport.send("https://api.example.com/x", "GET", {}, timeout=1.0)


@pytest.mark.parametrize(
    "exc_factory, expected",
    [
        (lambda request: httpx.ConnectError("refused", request=request), CONNECTION_REFUSED),
        (lambda request: httpx.ReadError("reset", request=request), CONNECTION_RESET),
        (lambda request: httpx.RemoteProtocolError("peer closed", request=request), CONNECTION_RESET),
    ],
)
@pytest.mark.asyncio
async def test_transport_errors_carry_codes(exc_factory, expected) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc_factory(request)

    transport = Transport(transport=httpx.MockTransport(handler))
    with pytest.raises(NetworkError) as exc_info:
        await transport.send("https://api.example.com/x", "GET", {}, timeout=1.0)
    assert exc_info.value.code == expected


@pytest.mark.asyncio
async def test_dns_failure_detected_from_cause() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("lookup failed", request=request) from socket.gaierror(-2, "Name or service not known")

    transport = Transport(transport=httpx.MockTransport(handler))
    with pytest.raises(NetworkError) as exc_info:
        await transport.send("https://nowhere.invalid/x", "GET", {}, timeout=1.0)
    assert exc_info.value.code == NAME_NOT_RESOLVED


@pytest.mark.asyncio
async def test_undecodable_body_mapped_to_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"not gzip", headers={"Content-Encoding": "gzip"})

    transport = Transport(transport=httpx.MockTransport(handler))
    with pytest.raises(NetworkError) as exc_info:
        await transport.send("https://api.example.com/x", "GET", {}, timeout=1.0)
    assert exc_info.value.code == NETWORK_ERROR
    assert isinstance(exc_info.value.__cause__, httpx.DecodingError)
