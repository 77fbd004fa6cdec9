"""Environment based configuration.

Credentials are read from the environment variables named by each credential
type (CLIENT_ID, CLIENT_SECRET, ACCESS_TOKEN, REFRESH_TOKEN). Transport
options are passed through as keyword arguments.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional, Union

from .client import AuthenticatedClient, BasicClient, ClientSettings
from .types import AccessToken, ClientID, ClientSecret, RefreshToken

log = logging.getLogger(__name__)


def client_settings_from_env() -> ClientSettings:
    """Read the application credentials.

    Raises:
        ConfigError: If a variable is not set
        ErrorMessage: If a variable is empty
    """
    return ClientSettings(client_id=ClientID.from_env(), client_secret=ClientSecret.from_env())


def basic_client_from_env(**transport_options) -> BasicClient:
    """Build a BasicClient from CLIENT_ID and CLIENT_SECRET."""
    settings = client_settings_from_env()
    log.debug(f"Loaded client settings for client id {settings.client_id}")
    return BasicClient(settings.client_id, settings.client_secret, **transport_options)


def authenticated_client_from_env(expires_in: Optional[Union[datetime, int]] = None,
                                  **transport_options) -> AuthenticatedClient:
    """Build an AuthenticatedClient from the client and token variables.

    Args:
        expires_in: Access token expiration; when unknown it defaults to now,
                    so the first ``with_fresh_tokens`` call refreshes the token
        **transport_options: HttpTransport options
    """
    access_token = AccessToken.from_env()
    refresh_token = RefreshToken.from_env()
    if expires_in is None:
        expires_in = datetime.now(timezone.utc)
    return basic_client_from_env(**transport_options).with_tokens(access_token, refresh_token, expires_in)
