"""Platform HTTP client: one class, parameterised per backend."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Protocol
from urllib.parse import quote

from .config import BackendProfile, ClientConfig
from .metrics import RequestMetrics
from .retry import RetryingClient, SleepFunc
from .transport import ResponseEnvelope, Transport

HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")

# Kept literal alongside alphanumerics and "-_.~"
_SAFE_CHARS = "!*'()"


class HeaderProvider(Protocol):
    def get_headers(self) -> Mapping[str, str]: ...


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        # None items render as empty slots: [1, None, 2] -> "1,,2"
        return ",".join(_format_value(item) for item in value)
    return str(value)


def encode_component(value: Any) -> str:
    return quote(_format_value(value), safe=_SAFE_CHARS)


def build_query(params: Optional[Mapping[str, Any]]) -> str:
    if not params:
        return ""
    return "&".join(
        f"{encode_component(key)}={encode_component(value)}"
        for key, value in params.items()
        if value is not None
    )


def build_url(base_url: str, path: str, params: Optional[Mapping[str, Any]] = None) -> str:
    url = f"{base_url}{path}"
    query = build_query(params)
    if query:
        url += f"?{query}"
    return url


class PlatformClient:
    def __init__(
        self,
        profile: BackendProfile,
        config: Optional[ClientConfig] = None,
        *,
        transport: Optional[Transport] = None,
        sleep: Optional[SleepFunc] = None,
        metrics: Optional[RequestMetrics] = None,
    ) -> None:
        self._profile = profile
        self._config = config or ClientConfig.for_backend(profile)
        self._owns_transport = transport is None
        self._transport = transport or Transport()
        self._retrying = RetryingClient(
            self._config, self._transport, backend=profile.name, sleep=sleep, metrics=metrics
        )

    async def __aenter__(self) -> "PlatformClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    @property
    def profile(self) -> BackendProfile:
        return self._profile

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def base_url(self) -> str:
        return self._config.base_url

    def _headers_for(self, auth: Optional[HeaderProvider]) -> Dict[str, str]:
        headers = {"User-Agent": self._config.user_agent}
        headers.update(self._config.headers)
        if auth is not None:
            headers.update(auth.get_headers())
        return headers

    async def request(
        self,
        path: str,
        *,
        method: str = "GET",
        params: Optional[Mapping[str, Any]] = None,
        body: Any = None,
        data: Any = None,
        auth: Optional[HeaderProvider] = None,
        **_ignored: Any,
    ) -> ResponseEnvelope:
        method = method.upper()
        if method not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method {method!r}")
        url = build_url(self._config.base_url, path, params)
        payload = body if body is not None else data
        return await self._retrying.request(
            url,
            method,
            headers=lambda: self._headers_for(auth),
            body=payload,
        )

    async def aclose(self) -> None:
        if self._owns_transport:
            await self._transport.aclose()


__all__ = ["HTTP_METHODS", "HeaderProvider", "PlatformClient", "build_query", "build_url", "encode_component"]
