"""Exception taxonomy for the SDK.

Transport failures carry a ``code``; server responses outside 2xx carry the
status, the parsed-or-raw body and the response headers. A body that is not
valid JSON is never an error by itself.
"""

from __future__ import annotations

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, Mapping, Optional, Type

CONNECTION_REFUSED = "connection_refused"
CONNECTION_RESET = "connection_reset"
TIMED_OUT = "timed_out"
NAME_NOT_RESOLVED = "name_not_resolved"
NETWORK_ERROR = "network_error"


class MeliSDKError(Exception):
    """Base class for every error raised by the SDK."""

    code: Optional[str] = None
    status: Optional[int] = None


class NetworkError(MeliSDKError):
    def __init__(self, message: str, *, code: str = NETWORK_ERROR, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.code = code
        self.url = url


class RequestTimeoutError(MeliSDKError):
    code = TIMED_OUT

    def __init__(self, message: str, *, timeout: float, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.timeout = timeout
        self.url = url


class HTTPStatusError(MeliSDKError):
    def __init__(
        self,
        message: str,
        *,
        status: int,
        data: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        url: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.data = data
        self.headers: Dict[str, str] = dict(headers or {})
        self.url = url

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status}, url={self.url!r})"


class BadRequestError(HTTPStatusError):
    pass


class AuthenticationError(HTTPStatusError):
    pass


class PermissionDeniedError(HTTPStatusError):
    pass


class NotFoundError(HTTPStatusError):
    pass


class ConflictError(HTTPStatusError):
    pass


class RateLimitError(HTTPStatusError):
    def __init__(self, message: str, *, retry_after: Optional[int] = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class ServerError(HTTPStatusError):
    pass


_STATUS_ERRORS: Dict[int, Type[HTTPStatusError]] = {
    400: BadRequestError,
    401: AuthenticationError,
    403: PermissionDeniedError,
    404: NotFoundError,
    409: ConflictError,
}


def parse_retry_after(headers: Optional[Mapping[str, str]]) -> Optional[int]:
    """Parse a Retry-After header (delta-seconds or HTTP date) into seconds."""
    if not headers:
        return None
    value = None
    for key, candidate in headers.items():
        if key.lower() == "retry-after":
            value = candidate
            break
    if not value:
        return None
    value = value.strip()
    if value.isdigit():
        return int(value)
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return max(0, int((when - datetime.now(timezone.utc)).total_seconds()))


def _message_from(data: Any, status: int) -> str:
    if isinstance(data, Mapping):
        for key in ("message", "error_description", "error"):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
    elif isinstance(data, str) and data.strip():
        text = " ".join(data.split())
        return text if len(text) <= 300 else text[:300] + "..."
    return f"HTTP {status}"


def error_for_response(
    status: int,
    data: Any = None,
    headers: Optional[Mapping[str, str]] = None,
    url: Optional[str] = None,
) -> HTTPStatusError:
    """Build the most specific HTTPStatusError subclass for a non-2xx response."""
    message = _message_from(data, status)
    kwargs: Dict[str, Any] = {"status": status, "data": data, "headers": headers, "url": url}
    if status == 429:
        return RateLimitError(message, retry_after=parse_retry_after(headers), **kwargs)
    if status >= 500:
        return ServerError(message, **kwargs)
    error_cls = _STATUS_ERRORS.get(status, HTTPStatusError)
    return error_cls(message, **kwargs)


__all__ = [
    "AuthenticationError",
    "BadRequestError",
    "CONNECTION_REFUSED",
    "CONNECTION_RESET",
    "ConflictError",
    "HTTPStatusError",
    "MeliSDKError",
    "NAME_NOT_RESOLVED",
    "NETWORK_ERROR",
    "NetworkError",
    "NotFoundError",
    "PermissionDeniedError",
    "RateLimitError",
    "RequestTimeoutError",
    "ServerError",
    "TIMED_OUT",
    "error_for_response",
    "parse_retry_after",
]
