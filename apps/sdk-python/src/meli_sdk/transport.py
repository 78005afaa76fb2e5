"""Single round-trip HTTP transport built on httpx."""

from __future__ import annotations

import asyncio
import errno
import json
import logging
import socket
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Mapping, Optional

import httpx

from .errors import (
    CONNECTION_REFUSED,
    CONNECTION_RESET,
    NAME_NOT_RESOLVED,
    NETWORK_ERROR,
    NetworkError,
    RequestTimeoutError,
)
from .redact import default_redactor

logger = logging.getLogger(__name__)


@dataclass
class ResponseEnvelope:
    data: Any
    status: int
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def parse_body(text: str) -> Any:
    """Decode a response body, falling back to the raw text when it is not JSON."""
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return text


def _exception_chain(exc: BaseException) -> Iterator[BaseException]:
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def classify_transport_error(exc: httpx.TransportError) -> str:
    for item in _exception_chain(exc):
        if isinstance(item, socket.gaierror):
            return NAME_NOT_RESOLVED
        if isinstance(item, ConnectionRefusedError):
            return CONNECTION_REFUSED
        if isinstance(item, (ConnectionResetError, BrokenPipeError)):
            return CONNECTION_RESET
        if isinstance(item, OSError) and item.errno == errno.ECONNRESET:
            return CONNECTION_RESET
    if isinstance(exc, httpx.ConnectError):
        return CONNECTION_REFUSED
    if isinstance(exc, (httpx.ReadError, httpx.WriteError, httpx.RemoteProtocolError)):
        return CONNECTION_RESET
    return NETWORK_ERROR


class Transport:
    """Performs exactly one request; never retries and never raises on status."""

    def __init__(self, *, client: Optional[httpx.AsyncClient] = None, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(transport=transport)

    async def __aenter__(self) -> "Transport":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def send(
        self,
        url: str,
        method: str,
        headers: Mapping[str, str],
        body: Any = None,
        *,
        timeout: float,
    ) -> ResponseEnvelope:
        content = json.dumps(body) if body is not None else None
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "%s %s headers=%s body=%s",
                method,
                url,
                default_redactor.redact(dict(headers)),
                default_redactor.redact(body),
            )
        try:
            response = await asyncio.wait_for(
                self._client.request(method, url, headers=dict(headers), content=content, timeout=timeout),
                timeout=timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise RequestTimeoutError(f"{method} {url} timed out after {timeout}s", timeout=timeout, url=url) from exc
        except httpx.TransportError as exc:
            code = classify_transport_error(exc)
            raise NetworkError(f"{method} {url} failed: {exc}", code=code, url=url) from exc
        except httpx.RequestError as exc:
            raise NetworkError(f"{method} {url} failed: {exc}", code=NETWORK_ERROR, url=url) from exc

        data = parse_body(response.text)
        logger.debug("%s %s -> %s", method, url, response.status_code)
        return ResponseEnvelope(data=data, status=response.status_code, headers=dict(response.headers))

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


__all__ = ["ResponseEnvelope", "Transport", "classify_transport_error", "parse_body"]
