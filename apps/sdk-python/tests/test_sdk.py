from __future__ import annotations

import httpx
import pytest
from prometheus_client import CollectorRegistry

from meli_sdk import MeliSDK, SDKSettings
from meli_sdk.metrics import RequestMetrics


@pytest.mark.asyncio
async def test_sdk_routes_each_backend_with_its_credential(sleeper) -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.url.host, request.url.path, request.headers.get("Authorization")))
        return httpx.Response(200, json={})

    settings = SDKSettings(ml_access_token="ml", mp_access_token="mp", gs_access_token="gs")
    async with MeliSDK(settings, transport=httpx.MockTransport(handler), sleep=sleeper) as sdk:
        await sdk.users.get_me()
        await sdk.mp_payments.get(42)
        await sdk.global_items.get("CBT1")
        sdk.set_gs_access_token(None)
        await sdk.global_orders.search(params={"seller": 1})

    assert seen == [
        ("api.mercadolibre.com", "/users/me", "Bearer ml"),
        ("api.mercadopago.com", "/v1/payments/42", "Bearer mp"),
        ("api.mercadolibre.com", "/global/items/CBT1", "Bearer gs"),
        ("api.mercadolibre.com", "/global/orders/search", None),
    ]


@pytest.mark.asyncio
async def test_refresh_ml_token_updates_requests(sleeper) -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/oauth/token":
            return httpx.Response(200, json={"access_token": "new", "refresh_token": "r2", "expires_in": 600})
        seen.append(request.headers.get("Authorization"))
        return httpx.Response(200, json={})

    settings = SDKSettings(ml_access_token="old", ml_refresh_token="r1", client_id="id", client_secret="s")
    sdk = MeliSDK(settings, transport=httpx.MockTransport(handler), sleep=sleeper)
    await sdk.refresh_ml_token()
    await sdk.items.get("MLB1")
    await sdk.aclose()

    assert seen == ["Bearer new"]
    assert sdk.ml_auth.refresh_token == "r2"


@pytest.mark.asyncio
async def test_sites_and_mp_oauth_use_their_backends(sleeper) -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.host, request.url.path))
        return httpx.Response(200, json={})

    async with MeliSDK(SDKSettings(), transport=httpx.MockTransport(handler), sleep=sleeper) as sdk:
        await sdk.sites.get_currencies("MLA")
        await sdk.mp_oauth.revoke_token(data={"access_token": "x"})

    assert seen == [
        ("GET", "api.mercadolibre.com", "/sites/MLA/currencies"),
        ("POST", "api.mercadopago.com", "/oauth/revoke"),
    ]


@pytest.mark.asyncio
async def test_sdk_records_metrics_in_injected_registry(sleeper) -> None:
    registry = CollectorRegistry()
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={}))

    async with MeliSDK(SDKSettings(), transport=transport, sleep=sleeper, metrics=RequestMetrics(registry)) as sdk:
        await sdk.mp_payments.get(1)

    assert registry.get_sample_value(
        "meli_sdk_request_attempts_total", {"backend": "mercadopago", "method": "GET", "outcome": "success"}
    ) == 1.0


@pytest.mark.asyncio
async def test_authorization_code_flow_and_revoke(sleeper) -> None:
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append((request.url.path, request.content))
        if request.url.path == "/oauth/token":
            return httpx.Response(200, json={"access_token": "APP_USR-1", "refresh_token": "TG-1", "expires_in": 600})
        return httpx.Response(200, json={})

    settings = SDKSettings(client_id="id", client_secret="s", redirect_uri="https://cb")
    async with MeliSDK(settings, transport=httpx.MockTransport(handler), sleep=sleeper) as sdk:
        assert sdk.authorization_url(state="st").startswith(
            "https://auth.mercadolibre.com.br/authorization?response_type=code&client_id=id"
        )
        await sdk.exchange_ml_code("TG-code")
        assert sdk.ml_auth.refresh_token == "TG-1"
        await sdk.revoke_ml_token()

    assert [path for path, _ in bodies] == ["/oauth/token", "/oauth/revoke"]
    assert sdk.ml_auth.access_token is None
    assert sdk.ml_auth.refresh_token is None
