"""OAuth2 authorization and token refresh for the Imgur API.

Lifecycle:
 - BasicClient: ``authorize_by_code`` / ``authorize_by_pin`` exchange a code
   or PIN for a token pair, ``BasicClient.with_tokens`` (or ``login_with_*``)
   upgrades to an AuthenticatedClient
 - AuthenticatedClient: ``with_fresh_tokens`` is called before user-scoped
   requests; it refreshes the access token when it expires within
   REFRESH_TIMEOUT_MINUTES

Refreshing is split into a network call (``refresh_token``), a pure settings
update (``refreshed_settings``) and an install step on the client, so the
caller decides which client object holds the current token.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional, TypeVar

from yarl import URL

from .client import (
    API_BASE_URL,
    AuthenticatedClient,
    AuthenticationSettings,
    BasicClient,
    Client,
    RegisteredClient,
)
from .exceptions import UrlParseError
from .models import AuthorizationResponse, RefreshResponse, decode_bare_or_envelope
from .response import Response, request
from .types import AuthorizationCode, PINCode

CLIENT_AUTHORIZATION_URL = f"{API_BASE_URL}/oauth2/authorize"
CLIENT_TOKEN_URL = f"{API_BASE_URL}/oauth2/token"
REFRESH_TIMEOUT_MINUTES = 5

log = logging.getLogger(__name__)

R = TypeVar("R", bound=RegisteredClient)


class AuthorizationMethod(Enum):
    """What the authorization page hands back to the application.

    AUTHORIZATION_CODE: a code to exchange immediately for tokens
    PIN: a PIN the user types into the application
    TOKEN: the tokens themselves, as query parameters of the redirect URL
    """
    AUTHORIZATION_CODE = "code"
    PIN = "pin"
    TOKEN = "token"

    def to_url_parameter(self) -> str:
        return self.value


def get_authentication_url(client: Client, method: AuthorizationMethod,
                           state: Optional[str] = None) -> URL:
    """Build the URL the user opens to authorize the application.

    Args:
        client: Any client (only the client id is used)
        method: Kind of grant returned by the authorization page
        state: Opaque value echoed back to the application

    Raises:
        UrlParseError: If the URL cannot be built
    """
    query = {
        "response_type": method.to_url_parameter(),
        "client_id": str(client.get_settings().client_id),
    }
    if state is not None:
        query["state"] = state
    try:
        return URL(CLIENT_AUTHORIZATION_URL).with_query(query)
    except (ValueError, TypeError) as e:
        raise UrlParseError(f"Invalid authorization URL: {e}") from e


async def _token_request(client: Client, grant: dict, decoder) -> Response:
    settings = client.get_settings()
    form = {
        "client_id": str(settings.client_id),
        "client_secret": str(settings.client_secret),
        **grant,
    }
    return await request(
        client,
        "POST",
        CLIENT_TOKEN_URL,
        decoder=decoder,
        data=form,
        body_decoder=decode_bare_or_envelope,
        log_body=False,
    )


async def authorize_by_code(client: Client, code: AuthorizationCode) -> Response:
    """Exchange an authorization code for a token pair.

    Returns:
        Response[AuthorizationResponse]

    Raises:
        RequestError: If the transport fails
        JSONError: If the body cannot be decoded
    """
    log.info("Exchanging authorization code for tokens...")
    return await _token_request(
        client, {"grant_type": "authorization_code", "code": str(code)}, AuthorizationResponse
    )


async def authorize_by_pin(client: Client, pin: PINCode) -> Response:
    """Exchange a PIN for a token pair.

    Returns:
        Response[AuthorizationResponse]
    """
    log.info("Exchanging PIN for tokens...")
    return await _token_request(client, {"grant_type": "pin", "pin": str(pin)}, AuthorizationResponse)


async def refresh_token(client: RegisteredClient) -> Response:
    """Request a new access token with the client's refresh token.

    The client is not modified.

    Returns:
        Response[RefreshResponse]
    """
    log.info("Refreshing access token...")
    refresh = client.get_authentication_settings().refresh_token
    return await _token_request(
        client, {"refresh_token": str(refresh), "grant_type": "refresh_token"}, RefreshResponse
    )


def needs_refresh(settings: AuthenticationSettings, now: Optional[datetime] = None) -> bool:
    """True unless the access token outlives ``now`` by more than the refresh timeout."""
    if now is None:
        now = datetime.now(timezone.utc)
    return not settings.expires_in > now + timedelta(minutes=REFRESH_TIMEOUT_MINUTES)


def refreshed_settings(settings: AuthenticationSettings, refresh: RefreshResponse) -> AuthenticationSettings:
    """Settings carrying the refreshed access token; the refresh token is kept."""
    return settings.with_access_token(refresh.access_token, refresh.expires_in)


async def with_fresh_tokens(client: R) -> R:
    """Return a client whose access token is not about to expire.

    When the token expires more than REFRESH_TIMEOUT_MINUTES from now the
    same client is returned without any I/O. Otherwise a copy is refreshed
    once and returned; the original client keeps its old token.

    Raises:
        ApiError: If the token endpoint reported an error
        RequestError: If the transport fails
        JSONError: If the body cannot be decoded
    """
    settings = client.get_authentication_settings()
    if not needs_refresh(settings):
        return client
    log.info(f"Access token expires at {settings.expires_in.isoformat()}, refreshing")
    fresh = client.copy()
    refresh = (await refresh_token(fresh)).result()
    fresh.install_authentication_settings(refreshed_settings(settings, refresh))
    log.info(f"Access token refreshed, now expires at {refresh.expires_in.isoformat()}")
    return fresh


async def login_with_code(client: BasicClient, code: AuthorizationCode) -> AuthenticatedClient:
    """Exchange an authorization code and upgrade the client with the tokens.

    Raises:
        ApiError: If the token endpoint reported an error
    """
    tokens = (await authorize_by_code(client, code)).result()
    log.info(f"Authorized as {tokens.account_username}")
    return client.with_tokens(tokens.access_token, tokens.refresh_token, tokens.expires_in)


async def login_with_pin(client: BasicClient, pin: PINCode) -> AuthenticatedClient:
    """Exchange a PIN and upgrade the client with the tokens.

    Raises:
        ApiError: If the token endpoint reported an error
    """
    tokens = (await authorize_by_pin(client, pin)).result()
    log.info(f"Authorized as {tokens.account_username}")
    return client.with_tokens(tokens.access_token, tokens.refresh_token, tokens.expires_in)
