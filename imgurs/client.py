"""Imgur client configuration.

This module provides the two client variants used to talk to the API:

 - BasicClient: anonymous access, requests carry ``Authorization: Client-ID <id>``
 - AuthenticatedClient: user access, requests carry ``Authorization: Bearer <token>``

Both share an HttpTransport (one aiohttp session). An AuthenticatedClient is
obtained from a BasicClient through ``with_tokens``; the operations that work
on either variant accept anything implementing the ``Client`` protocol, and
the ones requiring a user token accept a ``RegisteredClient``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Dict, Optional, Protocol, Union, runtime_checkable

import aiohttp

from .exceptions import ConfigError
from .helpers import build_headers, to_utc_datetime
from .types import AccessToken, ClientID, ClientSecret, RefreshToken

API_BASE_URL = "https://api.imgur.com"
ACCEPT_HEADER = "application/vnd.api+json"

log = logging.getLogger(__name__)


# -------------------------
# Settings
# -------------------------
@dataclass(frozen=True)
class ClientSettings:
    """Application credentials."""
    client_id: ClientID
    client_secret: ClientSecret


@dataclass(frozen=True)
class AuthenticationSettings:
    """User tokens and the access token expiration date.

    ``expires_in`` is stored as an aware UTC datetime; unix timestamps and
    naive datetimes (taken as UTC) are converted on construction.
    """
    access_token: AccessToken
    refresh_token: RefreshToken
    expires_in: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "expires_in", to_utc_datetime(self.expires_in))

    def with_access_token(self, access_token: AccessToken, expires_in: Union[datetime, int]) -> "AuthenticationSettings":
        """Return new settings holding a fresh access token; the refresh token is kept."""
        return replace(self, access_token=access_token, expires_in=expires_in)


# -------------------------
# Transport
# -------------------------
class HttpTransport:
    """Lazily created aiohttp session shared by every copy of a client."""

    def __init__(self, *, ssl=None, conn_limit: Optional[int] = None,
                 conn_limit_per_host: Optional[int] = None,
                 keepalive_timeout: Optional[float] = None,
                 timeout: Union[aiohttp.ClientTimeout, float, None] = None):
        """Initialize the transport.

        Args:
            ssl: Passed to the TCP connector (False disables verification,
                 an SSLContext pins certificates); default verification when None
            conn_limit: Total connection pool size
            conn_limit_per_host: Connection pool size per host
            keepalive_timeout: Seconds idle connections are kept open
            timeout: Session timeout (seconds or ClientTimeout); aiohttp default when None
        """
        self._ssl = ssl
        self._conn_limit = conn_limit
        self._conn_limit_per_host = conn_limit_per_host
        self._keepalive_timeout = keepalive_timeout
        self._timeout = timeout
        self.default_headers: Dict[str, str] = {}
        self._session: Optional[aiohttp.ClientSession] = None

    def _make_connector(self) -> aiohttp.TCPConnector:
        kwargs = {}
        if self._ssl is not None:
            kwargs["ssl"] = self._ssl
        if self._conn_limit is not None:
            kwargs["limit"] = self._conn_limit
        if self._conn_limit_per_host is not None:
            kwargs["limit_per_host"] = self._conn_limit_per_host
        if self._keepalive_timeout is not None:
            kwargs["keepalive_timeout"] = self._keepalive_timeout
        return aiohttp.TCPConnector(**kwargs)

    async def get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            log.debug("Creating HTTP session")
            kwargs = {}
            if isinstance(self._timeout, aiohttp.ClientTimeout):
                kwargs["timeout"] = self._timeout
            elif self._timeout is not None:
                kwargs["timeout"] = aiohttp.ClientTimeout(total=self._timeout)
            self._session = aiohttp.ClientSession(
                connector=self._make_connector(),
                headers=self.default_headers,
                **kwargs,
            )
        return self._session

    @property
    def closed(self) -> bool:
        return self._session is None or self._session.closed

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None


# -------------------------
# Capabilities
# -------------------------
@runtime_checkable
class Client(Protocol):
    """Anything able to issue API requests."""

    def get_headers(self) -> Dict[str, str]:
        ...

    def get_transport(self) -> HttpTransport:
        ...

    def get_settings(self) -> ClientSettings:
        ...


@runtime_checkable
class RegisteredClient(Client, Protocol):
    """A client holding user tokens."""

    def get_authentication_settings(self) -> AuthenticationSettings:
        ...

    def update_authentication_token(self, access_token: AccessToken, expires_in: datetime) -> None:
        ...

    def install_authentication_settings(self, authentication: AuthenticationSettings) -> None:
        ...

    def copy(self) -> "RegisteredClient":
        ...


# -------------------------
# Clients
# -------------------------
class BasicClient:
    """Imgur client without user authentication.

    Example:
        client = BasicClient(ClientID("abc"), ClientSecret("xyz"))
        async with client:
            account = await get_account(client, "ghostinspector")
    """

    def __init__(self, client_id: ClientID, client_secret: ClientSecret, *,
                 transport: Optional[HttpTransport] = None, **transport_options):
        """Initialize the client.

        Args:
            client_id: Application client id
            client_secret: Application client secret
            transport: Existing transport to share (a new one when None)
            **transport_options: HttpTransport options for a new transport

        Raises:
            TypeError: If both a transport and transport options are given
            InvalidHeaderValue: If the client id cannot be sent in a header
        """
        if transport is not None and transport_options:
            raise TypeError(f"Transport options {sorted(transport_options)} cannot be combined with an existing transport")
        self._settings = ClientSettings(client_id=client_id, client_secret=client_secret)
        self._headers = build_headers([
            ("Authorization", f"Client-ID {client_id}"),
            ("Accept", ACCEPT_HEADER),
        ])
        self._transport: Optional[HttpTransport] = transport or HttpTransport(**transport_options)
        self._transport.default_headers = dict(self._headers)

    def get_headers(self) -> Dict[str, str]:
        return dict(self._headers)

    def get_transport(self) -> HttpTransport:
        if self._transport is None:
            raise ConfigError("BasicClient was upgraded with with_tokens() and can no longer be used")
        return self._transport

    def get_settings(self) -> ClientSettings:
        return self._settings

    def with_tokens(self, access_token: AccessToken, refresh_token: RefreshToken,
                    expires_in: Union[datetime, int]) -> "AuthenticatedClient":
        """Upgrade to an AuthenticatedClient.

        The transport moves to the new client; this BasicClient cannot be
        used afterwards.

        Args:
            access_token: User access token
            refresh_token: User refresh token
            expires_in: Access token expiration (datetime or unix timestamp)

        Raises:
            InvalidHeaderValue: If the access token cannot be sent in a header
        """
        authentication = AuthenticationSettings(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=to_utc_datetime(expires_in),
        )
        client = AuthenticatedClient(self.get_transport(), self._settings, authentication)
        self._transport = None
        log.debug("BasicClient upgraded to AuthenticatedClient")
        return client

    async def close(self) -> None:
        if self._transport is not None:
            await self._transport.close()

    async def __aenter__(self) -> "BasicClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"BasicClient(client_id={self._settings.client_id!r})"


class AuthenticatedClient:
    """Imgur client holding user tokens, required by user-scoped endpoints.

    Copies made with ``copy()`` share the transport but own their tokens;
    installing a refreshed token on one copy leaves the others untouched.
    """

    def __init__(self, transport: HttpTransport, settings: ClientSettings,
                 authentication: AuthenticationSettings):
        self._transport = transport
        self._settings = settings
        self._authentication = authentication
        self._headers = self._build_headers(authentication)

    @staticmethod
    def _build_headers(authentication: AuthenticationSettings) -> Dict[str, str]:
        return build_headers([
            ("Authorization", f"Bearer {authentication.access_token}"),
            ("Accept", ACCEPT_HEADER),
        ])

    def get_headers(self) -> Dict[str, str]:
        return dict(self._headers)

    def get_transport(self) -> HttpTransport:
        return self._transport

    def get_settings(self) -> ClientSettings:
        return self._settings

    def get_authentication_settings(self) -> AuthenticationSettings:
        return self._authentication

    def install_authentication_settings(self, authentication: AuthenticationSettings) -> None:
        """Replace the user tokens held by this client.

        Raises:
            InvalidHeaderValue: If the new access token cannot be sent in a
                header; the current tokens are kept in that case
        """
        headers = self._build_headers(authentication)
        self._authentication = authentication
        self._headers = headers

    def update_authentication_token(self, access_token: AccessToken, expires_in: Union[datetime, int]) -> None:
        """Install a fresh access token and its expiration date."""
        self.install_authentication_settings(
            self._authentication.with_access_token(access_token, expires_in)
        )

    def copy(self) -> "AuthenticatedClient":
        """Shallow copy sharing the transport."""
        return AuthenticatedClient(self._transport, self._settings, self._authentication)

    @property
    def access_token(self) -> AccessToken:
        return self._authentication.access_token

    @property
    def expires_in(self) -> datetime:
        return self._authentication.expires_in

    async def close(self) -> None:
        """Close the shared transport (affects every copy of this client)."""
        await self._transport.close()

    async def __aenter__(self) -> "AuthenticatedClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def __repr__(self) -> str:
        return (f"AuthenticatedClient(client_id={self._settings.client_id!r}, "
                f"expires_in={self._authentication.expires_in.isoformat()})")
