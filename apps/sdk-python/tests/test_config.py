from __future__ import annotations

import pytest

from meli_sdk.config import GLOBAL_SELLING, MERCADOLIBRE, MERCADOPAGO, ClientConfig, SDKSettings


def test_client_config_defaults() -> None:
    config = ClientConfig(base_url="https://api.mercadolibre.com")
    assert config.timeout == 30.0
    assert config.max_retries == 3
    assert config.retry_delay == 1.0


@pytest.mark.parametrize(
    "overrides",
    [{"timeout": 0}, {"max_retries": -1}, {"retry_delay": -0.5}, {"base_url": ""}],
)
def test_client_config_rejects_invalid_values(overrides) -> None:
    kwargs = {"base_url": "https://x"}
    kwargs.update(overrides)
    with pytest.raises(ValueError):
        ClientConfig(**kwargs)


def test_backend_profiles() -> None:
    assert GLOBAL_SELLING.base_url == MERCADOLIBRE.base_url
    assert GLOBAL_SELLING.name != MERCADOLIBRE.name
    assert ClientConfig.for_backend(MERCADOPAGO).base_url == "https://api.mercadopago.com"


def test_settings_from_env(monkeypatch) -> None:
    monkeypatch.setenv("MELI_MP_BASE_URL", "http://localhost:9000")
    monkeypatch.setenv("MELI_MAX_RETRIES", "5")
    monkeypatch.setenv("MELI_RETRY_DELAY", "0.25")
    monkeypatch.setenv("MELI_ML_ACCESS_TOKEN", "APP_USR-1")
    monkeypatch.setenv("MELI_REDIRECT_URI", "https://app.example.com/callback")
    monkeypatch.delenv("MELI_TIMEOUT", raising=False)

    settings = SDKSettings.from_env()

    assert settings.ml_access_token == "APP_USR-1"
    assert settings.redirect_uri == "https://app.example.com/callback"
    assert settings.mp_access_token is None
    mp_config = settings.client_config(MERCADOPAGO)
    assert mp_config.base_url == "http://localhost:9000"
    assert mp_config.max_retries == 5
    assert mp_config.retry_delay == 0.25
    assert mp_config.timeout == 30.0
    assert settings.client_config(GLOBAL_SELLING).base_url == "https://api.mercadolibre.com"


def test_settings_reject_non_numeric(monkeypatch) -> None:
    monkeypatch.setenv("MELI_TIMEOUT", "soon")
    with pytest.raises(ValueError):
        SDKSettings.from_env()
