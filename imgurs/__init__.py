"""Imgur API Client Package.

This package provides an asynchronous Python client for the Imgur REST API
(https://api.imgur.com). It models the API's response envelopes, issues
anonymous (Client-ID) and user (Bearer) requests, and handles the OAuth2
token exchange and refresh lifecycle.

Example Usage:
    from imgurs import BasicClient, ClientID, ClientSecret, PINCode
    from imgurs.auth import login_with_pin, with_fresh_tokens
    from imgurs.endpoints import get_account, get_account_settings

    client = BasicClient(ClientID("client-id"), ClientSecret("client-secret"))

    # Anonymous call
    account = (await get_account(client, "ghostinspector")).result()

    # Upgrade with a PIN typed in by the user
    client = await login_with_pin(client, PINCode("1234567890"))

    # Refresh the token if it is about to expire, then call a user endpoint
    client = await with_fresh_tokens(client)
    settings = (await get_account_settings(client)).result()

    await client.close()
"""

from ._version import __version__, __version_info__
from .exceptions import (
    ImgursException,
    ErrorMessage,
    ConfigError,
    ClientError,
    UrlParseError,
    RequestError,
    JSONError,
    HeaderEncodeError,
    InvalidHeaderName,
    InvalidHeaderValue,
    HeaderToStrError,
    ApiError,
)
from .types import (
    HttpMethod,
    TokenType,
    ClientID,
    ClientSecret,
    AccessToken,
    RefreshToken,
    AuthorizationCode,
    PINCode,
    AccountID,
    Username,
)
from .models import (
    Envelope,
    Content,
    SingleError,
    MultiError,
    ApiErrorEntry,
    AuthorizationResponse,
    RefreshResponse,
    decode_envelope,
)
from .client import (
    BasicClient,
    AuthenticatedClient,
    Client,
    RegisteredClient,
    ClientSettings,
    AuthenticationSettings,
    HttpTransport,
)
from .response import Response
from .auth import AuthorizationMethod, REFRESH_TIMEOUT_MINUTES

__all__ = [
    # Version
    '__version__',
    '__version_info__',

    # Clients
    'BasicClient',
    'AuthenticatedClient',
    'Client',
    'RegisteredClient',
    'ClientSettings',
    'AuthenticationSettings',
    'HttpTransport',

    # Exceptions
    'ImgursException',
    'ErrorMessage',
    'ConfigError',
    'ClientError',
    'UrlParseError',
    'RequestError',
    'JSONError',
    'HeaderEncodeError',
    'InvalidHeaderName',
    'InvalidHeaderValue',
    'HeaderToStrError',
    'ApiError',

    # Types
    'HttpMethod',
    'TokenType',
    'ClientID',
    'ClientSecret',
    'AccessToken',
    'RefreshToken',
    'AuthorizationCode',
    'PINCode',
    'AccountID',
    'Username',

    # Responses
    'Envelope',
    'Content',
    'SingleError',
    'MultiError',
    'ApiErrorEntry',
    'AuthorizationResponse',
    'RefreshResponse',
    'Response',
    'decode_envelope',

    # Authorization
    'AuthorizationMethod',
    'REFRESH_TIMEOUT_MINUTES',
]
