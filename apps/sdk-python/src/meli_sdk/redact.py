"""Secret scrubbing for anything the SDK writes to its logs."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable

BEARER_RE = re.compile(r"(Bearer\s+)[A-Za-z0-9._~+/=-]+", re.IGNORECASE)
# Mercado Libre / Mercado Pago tokens look like APP_USR-<digits>-<...>
APP_TOKEN_RE = re.compile(r"\b(?:APP_USR|TEST|TG)-[A-Za-z0-9-]{8,}\b")

PATTERNS = (BEARER_RE, APP_TOKEN_RE)

SECRET_KEYS = (
    "authorization",
    "access_token",
    "refresh_token",
    "client_secret",
    "code_verifier",
    "password",
)


@dataclass(frozen=True)
class RedactConfig:
    enabled: bool = True
    secret_keys: tuple[str, ...] = SECRET_KEYS
    redaction_token: str = "[REDACTED]"


class Redactor:
    def __init__(self, config: RedactConfig) -> None:
        self._config = config

    def redact(self, payload: Any) -> Any:
        if not self._config.enabled:
            return payload
        return self._redact_recursive(payload)

    def _redact_recursive(self, value: Any) -> Any:
        if isinstance(value, str):
            return self._redact_string(value)
        if isinstance(value, dict):
            return {k: self._redact_item(k, v) for k, v in value.items()}
        if isinstance(value, list):
            return [self._redact_recursive(item) for item in value]
        if isinstance(value, tuple):
            return tuple(self._redact_recursive(item) for item in value)
        return value

    def _redact_item(self, key: Any, value: Any) -> Any:
        if isinstance(key, str) and key.lower() in self._config.secret_keys and value:
            return self._config.redaction_token
        return self._redact_recursive(value)

    def _redact_string(self, value: str) -> str:
        scrubbed = BEARER_RE.sub(r"\1" + self._config.redaction_token, value)
        return APP_TOKEN_RE.sub(self._config.redaction_token, scrubbed)


def build_redactor(*, enabled: bool = True, extra_keys: Iterable[str] = (), redaction_token: str = "[REDACTED]") -> Redactor:
    config = RedactConfig(
        enabled=enabled,
        secret_keys=SECRET_KEYS + tuple(key.lower() for key in extra_keys),
        redaction_token=redaction_token,
    )
    return Redactor(config=config)


default_redactor = build_redactor()

__all__ = ["RedactConfig", "Redactor", "build_redactor", "default_redactor"]
