"""Exception classes for the imgurs package.

This module defines the error message type reported by the Imgur API and the
client errors raised when a request cannot be completed or decoded.
"""
from __future__ import annotations

from typing import Iterable


class ImgursException(Exception):
    """Base exception for all imgurs errors.

    Catching this exception will catch every imgurs-specific error.
    """
    pass


class ErrorMessage(ImgursException):
    """String based error message.

    Used both as a payload field of decoded API errors and as the error
    raised when a response collapses to a failure. Two messages are equal
    when their strings are equal.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @classmethod
    def join(cls, messages: Iterable["ErrorMessage"]) -> "ErrorMessage":
        """Aggregate several messages into one, separated by ``"; "``.

        Example:
            >>> str(ErrorMessage.join([ErrorMessage("a"), ErrorMessage("b")]))
            'a; b'
        """
        return cls("; ".join(m.message for m in messages))

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"ErrorMessage({self.message!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ErrorMessage):
            return self.message == other.message
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.message)


class ConfigError(ImgursException):
    """Raised when client configuration cannot be loaded.

    This can occur due to:
    - A required environment variable not being set
    - A client being used after it was upgraded with tokens
    """
    pass


class ClientError(ImgursException):
    """Base class for errors raised while talking to the Imgur API."""
    pass


class UrlParseError(ClientError):
    """Raised when a request or authorization URL cannot be built."""
    pass


class RequestError(ClientError):
    """Raised when the HTTP transport fails.

    This can occur due to:
    - DNS, connection or TLS failures
    - Timeouts enforced by the underlying session
    """
    pass


class JSONError(ClientError):
    """Raised when a response body is not JSON or matches no known shape."""
    pass


class HeaderEncodeError(ClientError):
    """Raised when a request header cannot be encoded."""
    pass


class InvalidHeaderName(HeaderEncodeError):
    pass


class InvalidHeaderValue(HeaderEncodeError):
    pass


class HeaderToStrError(ClientError):
    """Raised when a response header value is not visible ASCII."""
    pass


class ApiError(ClientError):
    """Raised when the API reported an error in its response.

    This is an expected outcome (authentication required, rate limited, ...)
    and is kept apart from transport and decode failures. The reported
    message is available as ``error``.
    """

    def __init__(self, error: ErrorMessage, status: int | None = None):
        super().__init__(str(error))
        self.error = error
        self.status = status
