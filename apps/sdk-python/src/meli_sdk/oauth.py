"""OAuth grants for Mercado Libre / Mercado Pago credentials.

Every grant validates the token response into ``TokenGrant`` and rotates the
caller's ``Credential`` in place. HTTP failures from the token endpoint
(``invalid_grant`` arrives as a 400) propagate unchanged.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ValidationError

from .auth import Credential
from .client import PlatformClient, build_url
from .errors import MeliSDKError

logger = logging.getLogger(__name__)

TOKEN_PATH = "/oauth/token"
REVOKE_PATH = "/oauth/revoke"
AUTHORIZATION_BASE_URL = "https://auth.mercadolibre.com.br"


class TokenGrant(BaseModel):
    access_token: str = Field(..., min_length=1)
    refresh_token: Optional[str] = None
    expires_in: int = Field(..., gt=0)
    token_type: str = "Bearer"
    scope: Optional[str] = None
    user_id: Optional[int] = None


class InvalidTokenResponse(MeliSDKError):
    """The token endpoint answered 2xx with a body that is not a usable grant."""


def _require_client(client_id: Optional[str], client_secret: Optional[str]) -> None:
    if not client_id or not client_secret:
        raise ValueError("client_id and client_secret are required")


def authorization_url(
    client_id: Optional[str],
    redirect_uri: Optional[str],
    *,
    state: Optional[str] = None,
    response_type: str = "code",
    base_url: str = AUTHORIZATION_BASE_URL,
) -> str:
    """URL the user is sent to in order to grant the application access."""
    if not client_id or not redirect_uri:
        raise ValueError("client_id and redirect_uri are required to build the authorization URL")
    return build_url(
        base_url,
        "/authorization",
        {
            "response_type": response_type,
            "client_id": client_id,
            "redirect_uri": redirect_uri,
            "state": state,
        },
    )


async def _request_grant(client: PlatformClient, credential: Credential, payload: Dict[str, Any]) -> TokenGrant:
    envelope = await client.request(TOKEN_PATH, method="POST", data=payload, auth=Credential())
    try:
        grant = TokenGrant.model_validate(envelope.data)
    except ValidationError as exc:
        raise InvalidTokenResponse(f"Invalid token response from {client.profile.name}: {exc}") from exc

    credential.update(
        access_token=grant.access_token,
        refresh_token=grant.refresh_token,
        expires_in=grant.expires_in,
    )
    logger.info(
        "Obtained %s access token via %s (expires_in=%ss user_id=%s)",
        client.profile.name,
        payload["grant_type"],
        grant.expires_in,
        grant.user_id,
    )
    return grant


async def exchange_code(
    client: PlatformClient,
    credential: Credential,
    *,
    code: str,
    client_id: Optional[str],
    client_secret: Optional[str],
    redirect_uri: Optional[str],
) -> TokenGrant:
    """Trade the authorization code from the OAuth callback for tokens."""
    if not code:
        raise ValueError("Authorization code must not be empty")
    _require_client(client_id, client_secret)
    if not redirect_uri:
        raise ValueError("redirect_uri is required to exchange an authorization code")
    return await _request_grant(
        client,
        credential,
        {
            "grant_type": "authorization_code",
            "client_id": client_id,
            "client_secret": client_secret,
            "code": code,
            "redirect_uri": redirect_uri,
        },
    )


async def refresh_access_token(
    client: PlatformClient,
    credential: Credential,
    *,
    client_id: Optional[str],
    client_secret: Optional[str],
) -> TokenGrant:
    """Exchange the credential's refresh token and rotate it in place."""
    if not credential.refresh_token:
        raise ValueError("Credential has no refresh token")
    _require_client(client_id, client_secret)
    return await _request_grant(
        client,
        credential,
        {
            "grant_type": "refresh_token",
            "client_id": client_id,
            "client_secret": client_secret,
            "refresh_token": credential.refresh_token,
        },
    )


async def client_credentials_token(
    client: PlatformClient,
    credential: Credential,
    *,
    client_id: Optional[str],
    client_secret: Optional[str],
) -> TokenGrant:
    """Application-only token for endpoints that need no user consent."""
    _require_client(client_id, client_secret)
    return await _request_grant(
        client,
        credential,
        {
            "grant_type": "client_credentials",
            "client_id": client_id,
            "client_secret": client_secret,
        },
    )


async def revoke_token(
    client: PlatformClient,
    credential: Credential,
    *,
    client_id: Optional[str],
    client_secret: Optional[str],
) -> None:
    """Revoke the credential's access token and clear it locally."""
    if not credential.access_token:
        raise ValueError("Credential has no access token to revoke")
    _require_client(client_id, client_secret)
    await client.request(
        REVOKE_PATH,
        method="POST",
        data={
            "client_id": client_id,
            "client_secret": client_secret,
            "access_token": credential.access_token,
        },
        auth=Credential(),
    )
    credential.clear()
    logger.info("Revoked %s access token", client.profile.name)


__all__ = [
    "AUTHORIZATION_BASE_URL",
    "InvalidTokenResponse",
    "REVOKE_PATH",
    "TOKEN_PATH",
    "TokenGrant",
    "authorization_url",
    "client_credentials_token",
    "exchange_code",
    "refresh_access_token",
    "revoke_token",
]
