"""Bounded retry with exponential backoff around a single-shot transport."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from .config import ClientConfig
from .errors import (
    CONNECTION_REFUSED,
    CONNECTION_RESET,
    TIMED_OUT,
    HTTPStatusError,
    MeliSDKError,
    error_for_response,
)
from .metrics import RequestMetrics, default_metrics
from .redact import default_redactor
from .transport import ResponseEnvelope, Transport

logger = logging.getLogger(__name__)

RETRYABLE_STATUSES = frozenset({408, 429, 500, 502, 503, 504})
RETRYABLE_CODES = frozenset({CONNECTION_RESET, TIMED_OUT, CONNECTION_REFUSED})

HeaderSource = Union[Mapping[str, str], Callable[[], Mapping[str, str]]]
SleepFunc = Callable[[float], Awaitable[Any]]


def is_retryable(error: BaseException) -> bool:
    status = getattr(error, "status", None)
    if status in RETRYABLE_STATUSES:
        return True
    return getattr(error, "code", None) in RETRYABLE_CODES


def compute_backoff(retry_delay: float, attempt: int) -> float:
    """Delay before retry number ``attempt`` (1-indexed)."""
    return retry_delay * (2 ** (attempt - 1))


def _reason(error: BaseException) -> str:
    status = getattr(error, "status", None)
    if status is not None:
        return str(status)
    return getattr(error, "code", None) or type(error).__name__


class RetryingClient:
    """Executes requests through a Transport, retrying classified-transient failures.

    Each call keeps its own attempt counter; nothing is shared between calls.
    After the last allowed attempt the final error is raised as-is.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Transport,
        *,
        backend: str = "default",
        sleep: Optional[SleepFunc] = None,
        metrics: Optional[RequestMetrics] = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._backend = backend
        self._sleep = sleep or asyncio.sleep
        self._metrics = metrics or default_metrics

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def _attempt(self, url: str, method: str, headers: Mapping[str, str], body: Any) -> ResponseEnvelope:
        envelope = await self._transport.send(url, method, headers, body, timeout=self._config.timeout)
        if not envelope.ok:
            raise error_for_response(envelope.status, envelope.data, envelope.headers, url)
        return envelope

    async def request(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[HeaderSource] = None,
        body: Any = None,
    ) -> ResponseEnvelope:
        attempt = 0
        started = time.perf_counter()
        safe_url = default_redactor.redact(url)
        while True:
            resolved = headers() if callable(headers) else dict(headers or {})
            try:
                envelope = await self._attempt(url, method, resolved, body)
            except MeliSDKError as exc:
                retryable = is_retryable(exc)
                self._metrics.attempts.labels(
                    backend=self._backend, method=method, outcome="retryable" if retryable else "failed"
                ).inc()
                if not retryable or attempt >= self._config.max_retries:
                    self._metrics.latency.labels(backend=self._backend).observe(time.perf_counter() - started)
                    if retryable:
                        logger.error(
                            "%s %s gave up (%s) after %s attempt(s)", method, safe_url, _reason(exc), attempt + 1
                        )
                    elif isinstance(exc, HTTPStatusError):
                        logger.warning("%s %s failed with status=%s", method, safe_url, exc.status)
                    else:
                        logger.error("%s %s failed (%s)", method, safe_url, _reason(exc))
                    raise
                attempt += 1
                delay = compute_backoff(self._config.retry_delay, attempt)
                self._metrics.retries.labels(backend=self._backend, reason=_reason(exc)).inc()
                logger.warning(
                    "%s %s failed (%s), retrying in %.3fs (retry %s/%s)",
                    method,
                    safe_url,
                    _reason(exc),
                    delay,
                    attempt,
                    self._config.max_retries,
                )
                await self._sleep(delay)
                continue
            self._metrics.attempts.labels(backend=self._backend, method=method, outcome="success").inc()
            self._metrics.latency.labels(backend=self._backend).observe(time.perf_counter() - started)
            return envelope


__all__ = ["RETRYABLE_CODES", "RETRYABLE_STATUSES", "RetryingClient", "compute_backoff", "is_retryable"]
