"""Shared typing helpers and value types used across the imgurs package.

This module centralizes the JSON-like typing, the HTTP verbs reported by the
API and the credential/token wrappers handed to the clients.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Dict, List, Optional, Union

from .exceptions import ConfigError, ErrorMessage


# Recursive JSON-ish type used for payloads / returned JSON values
JSONType = Union[Dict[str, "JSONType"], List["JSONType"], str, int, float, bool, None]


class HttpMethod(str, Enum):
    """HTTP methods as reported in API error bodies."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class TokenType(str, Enum):
    """Type of authorization token issued by the token endpoint."""
    BEARER = "bearer"


@dataclass(frozen=True, order=True)
class Credential:
    """A non-empty string identifier or secret.

    Subclasses name the environment variable they are read from by default.
    Construction rejects the empty string with ``ErrorMessage("Invalid length")``;
    no other validation is performed.
    """
    value: str

    default_env: ClassVar[str] = ""

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError(f"{type(self).__name__} expects a str, got {type(self.value).__name__}")
        if len(self.value) == 0:
            raise ErrorMessage("Invalid length")

    @classmethod
    def from_env(cls, variable: Optional[str] = None):
        """Build the value from an environment variable.

        Args:
            variable: Variable name (default: the type's ``default_env``)

        Raises:
            ConfigError: If the variable is not set
            ErrorMessage: If the variable is set but empty
        """
        name = variable or cls.default_env
        raw = os.environ.get(name)
        if raw is None:
            raise ConfigError(f"Variable {name!r} is not set")
        return cls(raw)

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"{type(self).__name__}(<{len(self.value)} chars>)"


class ClientID(Credential):
    """Application client id, sent as ``Client-ID`` on anonymous calls."""
    default_env = "CLIENT_ID"

    def __repr__(self) -> str:
        return f"ClientID({self.value!r})"


class ClientSecret(Credential):
    default_env = "CLIENT_SECRET"


class AccessToken(Credential):
    """User access token.

    Used to access the user's data; it can be thought of as the user's
    username and password combined into one. It expires after a month.
    """
    default_env = "ACCESS_TOKEN"


class RefreshToken(Credential):
    """Token used to request new access tokens without authorizing again."""
    default_env = "REFRESH_TOKEN"


class AuthorizationCode(Credential):
    """Code to be exchanged immediately for an access and refresh token."""
    default_env = "AUTHORIZATION_CODE"


class PINCode(Credential):
    """PIN shown to the user, exchanged for an access and refresh token."""
    default_env = "PIN_CODE"


@dataclass(frozen=True, order=True)
class AccountID:
    """Unique identifier of an Imgur account."""
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, order=True)
class Username:
    value: str

    def __str__(self) -> str:
        return self.value
