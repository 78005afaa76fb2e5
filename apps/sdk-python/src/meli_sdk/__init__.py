"""Async Python SDK for the Mercado Libre, Mercado Pago and Global Selling APIs."""

from .auth import Credential
from .client import PlatformClient
from .config import GLOBAL_SELLING, MERCADOLIBRE, MERCADOPAGO, BackendProfile, ClientConfig, SDKSettings
from .errors import HTTPStatusError, MeliSDKError, NetworkError, RequestTimeoutError
from .retry import RetryingClient
from .sdk import MeliSDK
from .transport import ResponseEnvelope, Transport

__all__ = [
    "BackendProfile",
    "ClientConfig",
    "Credential",
    "GLOBAL_SELLING",
    "HTTPStatusError",
    "MERCADOLIBRE",
    "MERCADOPAGO",
    "MeliSDK",
    "MeliSDKError",
    "NetworkError",
    "PlatformClient",
    "RequestTimeoutError",
    "ResponseEnvelope",
    "RetryingClient",
    "SDKSettings",
    "Transport",
]
