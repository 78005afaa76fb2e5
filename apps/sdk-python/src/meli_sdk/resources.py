"""Declarative resource facades.

Each endpoint is a row of ``(name, method, path template)`` tagged with its backend; a ``Resource``
binds a group of rows to a platform client and credential and exposes every
row as a coroutine method. Facades never retry or reinterpret errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from string import Formatter
from typing import Any, Awaitable, Callable, Dict, Iterable, Mapping, Optional, Tuple

from .client import HeaderProvider, PlatformClient, encode_component
from .config import GLOBAL_SELLING, MERCADOLIBRE, MERCADOPAGO, BackendProfile
from .transport import ResponseEnvelope


@dataclass(frozen=True)
class Endpoint:
    name: str
    method: str
    path: str
    backend: str

    @property
    def path_fields(self) -> Tuple[str, ...]:
        return tuple(field for _, field, _, _ in Formatter().parse(self.path) if field)

    def render(self, args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> str:
        fields = self.path_fields
        if len(args) > len(fields):
            raise TypeError(f"{self.name}() takes {len(fields)} path argument(s), got {len(args)}")
        values = dict(zip(fields, args))
        for field in fields[len(args):]:
            if field not in kwargs:
                raise TypeError(f"{self.name}() missing path argument {field!r}")
            values[field] = kwargs.pop(field)
        return self.path.format(**{key: encode_component(value) for key, value in values.items()})


def _endpoints(backend: BackendProfile, *rows: Tuple[str, str, str]) -> Tuple[Endpoint, ...]:
    return tuple(Endpoint(name, method, path, backend.name) for name, method, path in rows)


ML_USERS = _endpoints(
    MERCADOLIBRE,
    ("get_me", "GET", "/users/me"),
    ("get_user", "GET", "/users/{user_id}"),
    ("get_addresses", "GET", "/users/{user_id}/addresses"),
    ("search_items", "GET", "/users/{user_id}/items/search"),
    ("search_orders", "GET", "/users/{user_id}/orders/search"),
)

ML_ITEMS = _endpoints(
    MERCADOLIBRE,
    ("get", "GET", "/items/{item_id}"),
    ("get_description", "GET", "/items/{item_id}/description"),
    ("create", "POST", "/items"),
    ("update", "PUT", "/items/{item_id}"),
    ("delete", "DELETE", "/items/{item_id}"),
    ("relist", "POST", "/items/{item_id}/relist"),
    ("validate", "POST", "/items/validate"),
    ("search", "GET", "/sites/{site_id}/search"),
)

ML_ORDERS = _endpoints(
    MERCADOLIBRE,
    ("get", "GET", "/orders/{order_id}"),
    ("search", "GET", "/orders/search"),
    ("get_notes", "GET", "/orders/{order_id}/notes"),
    ("create_note", "POST", "/orders/{order_id}/notes"),
    ("get_pack", "GET", "/packs/{pack_id}"),
)

ML_QUESTIONS = _endpoints(
    MERCADOLIBRE,
    ("get", "GET", "/questions/{question_id}"),
    ("search", "GET", "/questions/search"),
    ("answer", "POST", "/answers"),
    ("delete", "DELETE", "/questions/{question_id}"),
)

ML_CATEGORIES = _endpoints(
    MERCADOLIBRE,
    ("list", "GET", "/sites/{site_id}/categories"),
    ("get", "GET", "/categories/{category_id}"),
    ("get_attributes", "GET", "/categories/{category_id}/attributes"),
    ("predict", "GET", "/sites/{site_id}/domain_discovery/search"),
)

ML_SITES = _endpoints(
    MERCADOLIBRE,
    ("list", "GET", "/sites"),
    ("get", "GET", "/sites/{site_id}"),
    ("get_listing_types", "GET", "/sites/{site_id}/listing_types"),
    ("get_currencies", "GET", "/sites/{site_id}/currencies"),
    ("get_domain_suggestions", "GET", "/sites/{site_id}/domain_suggestions"),
)

ML_SHIPMENTS = _endpoints(
    MERCADOLIBRE,
    ("get", "GET", "/shipments/{shipment_id}"),
    ("get_items", "GET", "/shipments/{shipment_id}/items"),
    ("get_label", "GET", "/shipment_labels"),
)

MP_PAYMENTS = _endpoints(
    MERCADOPAGO,
    ("create", "POST", "/v1/payments"),
    ("get", "GET", "/v1/payments/{payment_id}"),
    ("search", "GET", "/v1/payments/search"),
    ("update", "PUT", "/v1/payments/{payment_id}"),
    ("refund", "POST", "/v1/payments/{payment_id}/refunds"),
)

MP_PREFERENCES = _endpoints(
    MERCADOPAGO,
    ("create", "POST", "/checkout/preferences"),
    ("get", "GET", "/checkout/preferences/{preference_id}"),
    ("update", "PUT", "/checkout/preferences/{preference_id}"),
)

MP_CUSTOMERS = _endpoints(
    MERCADOPAGO,
    ("create", "POST", "/v1/customers"),
    ("get", "GET", "/v1/customers/{customer_id}"),
    ("search", "GET", "/v1/customers/search"),
    ("get_cards", "GET", "/v1/customers/{customer_id}/cards"),
)

MP_OAUTH = _endpoints(
    MERCADOPAGO,
    ("get_access_token", "POST", "/oauth/token"),
    ("refresh_token", "POST", "/oauth/token"),
    ("revoke_token", "POST", "/oauth/revoke"),
    ("get_authorization_url", "GET", "/oauth/authorization"),
)

GS_ITEMS = _endpoints(
    GLOBAL_SELLING,
    ("list", "GET", "/global/items"),
    ("get", "GET", "/global/items/{item_id}"),
    ("sync", "POST", "/global/items/{item_id}/sync"),
    ("publish", "POST", "/global/publish"),
)

GS_ORDERS = _endpoints(
    GLOBAL_SELLING,
    ("get", "GET", "/global/orders/{order_id}"),
    ("search", "GET", "/global/orders/search"),
    ("ship", "POST", "/global/orders/{order_id}/ship"),
)


class Resource:
    def __init__(
        self,
        name: str,
        client: PlatformClient,
        endpoints: Iterable[Endpoint],
        auth: Optional[HeaderProvider] = None,
    ) -> None:
        endpoints = tuple(endpoints)
        mismatched = [endpoint.name for endpoint in endpoints if endpoint.backend != client.profile.name]
        if mismatched:
            raise ValueError(
                f"Endpoints {mismatched} of {name!r} do not belong to backend {client.profile.name!r}"
            )
        self._name = name
        self._client = client
        self._auth = auth
        self._endpoints: Dict[str, Endpoint] = {endpoint.name: endpoint for endpoint in endpoints}

    def __repr__(self) -> str:
        return f"Resource({self._name!r}, backend={self._client.profile.name!r})"

    def __dir__(self) -> Iterable[str]:
        return list(super().__dir__()) + list(self._endpoints)

    @property
    def endpoints(self) -> Mapping[str, Endpoint]:
        return self._endpoints

    def __getattr__(self, name: str) -> Callable[..., Awaitable[ResponseEnvelope]]:
        endpoints = self.__dict__.get("_endpoints", {})
        if name not in endpoints:
            raise AttributeError(f"{type(self).__name__} {self.__dict__.get('_name')!r} has no endpoint {name!r}")
        endpoint = endpoints[name]

        async def call(
            *args: Any,
            params: Optional[Mapping[str, Any]] = None,
            data: Any = None,
            **kwargs: Any,
        ) -> ResponseEnvelope:
            path = endpoint.render(args, kwargs)
            if kwargs:
                raise TypeError(f"{endpoint.name}() got unexpected argument(s) {sorted(kwargs)}")
            return await self._client.request(
                path,
                method=endpoint.method,
                params=params,
                data=data,
                auth=self._auth,
            )

        call.__name__ = endpoint.name
        call.__qualname__ = f"{self._name}.{endpoint.name}"
        return call


__all__ = [
    "Endpoint",
    "GS_ITEMS",
    "GS_ORDERS",
    "ML_CATEGORIES",
    "ML_ITEMS",
    "ML_ORDERS",
    "ML_QUESTIONS",
    "ML_SHIPMENTS",
    "ML_SITES",
    "ML_USERS",
    "MP_CUSTOMERS",
    "MP_OAUTH",
    "MP_PAYMENTS",
    "MP_PREFERENCES",
    "Resource",
]
