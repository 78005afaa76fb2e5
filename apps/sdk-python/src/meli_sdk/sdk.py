"""Top-level SDK object wiring credentials, platform clients and resources."""

from __future__ import annotations

from typing import Optional

import httpx

from .auth import Credential
from .client import PlatformClient
from .config import GLOBAL_SELLING, MERCADOLIBRE, MERCADOPAGO, BackendProfile, SDKSettings
from .metrics import RequestMetrics
from .oauth import (
    TokenGrant,
    authorization_url,
    client_credentials_token,
    exchange_code,
    refresh_access_token,
    revoke_token,
)
from .resources import (
    GS_ITEMS,
    GS_ORDERS,
    ML_CATEGORIES,
    ML_ITEMS,
    ML_ORDERS,
    ML_QUESTIONS,
    ML_SHIPMENTS,
    ML_SITES,
    ML_USERS,
    MP_CUSTOMERS,
    MP_OAUTH,
    MP_PAYMENTS,
    MP_PREFERENCES,
    Resource,
)
from .retry import SleepFunc
from .transport import Transport


class MeliSDK:
    def __init__(
        self,
        settings: Optional[SDKSettings] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Optional[SleepFunc] = None,
        metrics: Optional[RequestMetrics] = None,
    ) -> None:
        self._settings = settings or SDKSettings()
        self._metrics = metrics
        self._transport = Transport(transport=transport)

        self.ml_auth = Credential(self._settings.ml_access_token, self._settings.ml_refresh_token)
        self.mp_auth = Credential(self._settings.mp_access_token)
        self.gs_auth = Credential(self._settings.gs_access_token)

        self.ml_http = self._platform(MERCADOLIBRE, sleep)
        self.mp_http = self._platform(MERCADOPAGO, sleep)
        self.gs_http = self._platform(GLOBAL_SELLING, sleep)

        self.users = Resource("users", self.ml_http, ML_USERS, self.ml_auth)
        self.items = Resource("items", self.ml_http, ML_ITEMS, self.ml_auth)
        self.orders = Resource("orders", self.ml_http, ML_ORDERS, self.ml_auth)
        self.questions = Resource("questions", self.ml_http, ML_QUESTIONS, self.ml_auth)
        self.categories = Resource("categories", self.ml_http, ML_CATEGORIES, self.ml_auth)
        self.shipments = Resource("shipments", self.ml_http, ML_SHIPMENTS, self.ml_auth)
        self.sites = Resource("sites", self.ml_http, ML_SITES, self.ml_auth)

        self.mp_payments = Resource("mp_payments", self.mp_http, MP_PAYMENTS, self.mp_auth)
        self.mp_preferences = Resource("mp_preferences", self.mp_http, MP_PREFERENCES, self.mp_auth)
        self.mp_customers = Resource("mp_customers", self.mp_http, MP_CUSTOMERS, self.mp_auth)
        self.mp_oauth = Resource("mp_oauth", self.mp_http, MP_OAUTH, self.mp_auth)

        self.global_items = Resource("global_items", self.gs_http, GS_ITEMS, self.gs_auth)
        self.global_orders = Resource("global_orders", self.gs_http, GS_ORDERS, self.gs_auth)

    @classmethod
    def from_env(cls, **kwargs) -> "MeliSDK":
        return cls(SDKSettings.from_env(), **kwargs)

    def _platform(self, profile: BackendProfile, sleep: Optional[SleepFunc]) -> PlatformClient:
        return PlatformClient(
            profile,
            self._settings.client_config(profile),
            transport=self._transport,
            sleep=sleep,
            metrics=self._metrics,
        )

    async def __aenter__(self) -> "MeliSDK":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def set_ml_access_token(self, access_token: Optional[str]) -> None:
        self.ml_auth.set_access_token(access_token)

    def set_ml_refresh_token(self, refresh_token: Optional[str]) -> None:
        self.ml_auth.set_refresh_token(refresh_token)

    def set_mp_access_token(self, access_token: Optional[str]) -> None:
        self.mp_auth.set_access_token(access_token)

    def set_gs_access_token(self, access_token: Optional[str]) -> None:
        self.gs_auth.set_access_token(access_token)

    async def refresh_ml_token(self) -> TokenGrant:
        return await refresh_access_token(
            self.ml_http,
            self.ml_auth,
            client_id=self._settings.client_id,
            client_secret=self._settings.client_secret,
        )

    def authorization_url(self, state: Optional[str] = None) -> str:
        return authorization_url(self._settings.client_id, self._settings.redirect_uri, state=state)

    async def exchange_ml_code(self, code: str) -> TokenGrant:
        return await exchange_code(
            self.ml_http,
            self.ml_auth,
            code=code,
            client_id=self._settings.client_id,
            client_secret=self._settings.client_secret,
            redirect_uri=self._settings.redirect_uri,
        )

    async def ml_client_credentials_token(self) -> TokenGrant:
        return await client_credentials_token(
            self.ml_http,
            self.ml_auth,
            client_id=self._settings.client_id,
            client_secret=self._settings.client_secret,
        )

    async def revoke_ml_token(self) -> None:
        await revoke_token(
            self.ml_http,
            self.ml_auth,
            client_id=self._settings.client_id,
            client_secret=self._settings.client_secret,
        )

    async def aclose(self) -> None:
        await self._transport.aclose()


__all__ = ["MeliSDK"]
