"""Configuration objects for the Mercado Libre / Mercado Pago SDK."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Optional

MERCADOLIBRE_BASE_URL = "https://api.mercadolibre.com"
MERCADOPAGO_BASE_URL = "https://api.mercadopago.com"

DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY = 1.0
DEFAULT_USER_AGENT = "meli-sdk-python/0.1.0"


@dataclass(frozen=True)
class BackendProfile:
    """Identity of one REST backend: a name for logs/metrics and its default base URL."""

    name: str
    base_url: str


MERCADOLIBRE = BackendProfile(name="mercadolibre", base_url=MERCADOLIBRE_BASE_URL)
MERCADOPAGO = BackendProfile(name="mercadopago", base_url=MERCADOPAGO_BASE_URL)
# Shares the Mercado Libre host but authenticates with its own credential.
GLOBAL_SELLING = BackendProfile(name="global_selling", base_url=MERCADOLIBRE_BASE_URL)


@dataclass(frozen=True)
class ClientConfig:
    base_url: str
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_delay: float = DEFAULT_RETRY_DELAY
    user_agent: str = DEFAULT_USER_AGENT
    headers: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.base_url:
            raise ValueError("base_url must not be empty")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.retry_delay < 0:
            raise ValueError(f"retry_delay must be >= 0, got {self.retry_delay}")

    @classmethod
    def for_backend(cls, profile: BackendProfile, base_url: Optional[str] = None, **overrides) -> "ClientConfig":
        return cls(base_url=base_url or profile.base_url, **overrides)


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _env_str(name: str) -> Optional[str]:
    value = os.environ.get(name, "").strip()
    return value or None


@dataclass(frozen=True)
class SDKSettings:
    ml_base_url: str = MERCADOLIBRE_BASE_URL
    mp_base_url: str = MERCADOPAGO_BASE_URL
    gs_base_url: str = MERCADOLIBRE_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_delay: float = DEFAULT_RETRY_DELAY
    ml_access_token: Optional[str] = None
    ml_refresh_token: Optional[str] = None
    mp_access_token: Optional[str] = None
    gs_access_token: Optional[str] = None
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    redirect_uri: Optional[str] = None

    @classmethod
    def from_env(cls) -> "SDKSettings":
        return cls(
            ml_base_url=_env_str("MELI_ML_BASE_URL") or MERCADOLIBRE_BASE_URL,
            mp_base_url=_env_str("MELI_MP_BASE_URL") or MERCADOPAGO_BASE_URL,
            gs_base_url=_env_str("MELI_GS_BASE_URL") or MERCADOLIBRE_BASE_URL,
            timeout=_env_float("MELI_TIMEOUT", DEFAULT_TIMEOUT),
            max_retries=_env_int("MELI_MAX_RETRIES", DEFAULT_MAX_RETRIES),
            retry_delay=_env_float("MELI_RETRY_DELAY", DEFAULT_RETRY_DELAY),
            ml_access_token=_env_str("MELI_ML_ACCESS_TOKEN"),
            ml_refresh_token=_env_str("MELI_ML_REFRESH_TOKEN"),
            mp_access_token=_env_str("MELI_MP_ACCESS_TOKEN"),
            gs_access_token=_env_str("MELI_GS_ACCESS_TOKEN"),
            client_id=_env_str("MELI_CLIENT_ID"),
            client_secret=_env_str("MELI_CLIENT_SECRET"),
            redirect_uri=_env_str("MELI_REDIRECT_URI"),
        )

    def client_config(self, profile: BackendProfile) -> ClientConfig:
        base_urls = {
            MERCADOLIBRE.name: self.ml_base_url,
            MERCADOPAGO.name: self.mp_base_url,
            GLOBAL_SELLING.name: self.gs_base_url,
        }
        return ClientConfig(
            base_url=base_urls.get(profile.name, profile.base_url),
            timeout=self.timeout,
            max_retries=self.max_retries,
            retry_delay=self.retry_delay,
        )


__all__ = [
    "BackendProfile",
    "ClientConfig",
    "GLOBAL_SELLING",
    "MERCADOLIBRE",
    "MERCADOPAGO",
    "SDKSettings",
]
