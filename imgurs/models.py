"""Response envelope model for the Imgur API.

Every ordinary API response is wrapped in an envelope::

    {"data": <payload> | {"error": ..., "request": ..., "method": ...},
     "success": bool, "status": int}

Global rejections such as throttling use an unrelated, envelope-less shape::

    {"errors": [{"code": ..., "detail": ..., "id": ..., "status": ...}]}

``decode_envelope`` tries the first shape and falls back to the second. The
data of an envelope is matched structurally, payload first and single error
second, so a payload type must not accept objects made of ``error``,
``request`` and ``method`` fields. When it does, the payload wins and a
warning is logged.

Payload decoders are plain callables taking the decoded JSON value, or
classes exposing a ``from_json`` classmethod. They reject data they cannot
represent by raising ``ValueError``, ``TypeError`` or ``KeyError``.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Generic, Optional, Tuple, TypeVar, Union

from .exceptions import ErrorMessage
from .helpers import to_unix_timestamp, to_utc_datetime
from .types import (
    AccessToken,
    AccountID,
    HttpMethod,
    JSONType,
    RefreshToken,
    TokenType,
    Username,
)

log = logging.getLogger(__name__)

T = TypeVar("T")

Decoder = Callable[[JSONType], Any]

# Errors a decoder raises when the data does not have its shape
DECODE_ERRORS = (ValueError, TypeError, KeyError)

_ENVELOPE_KEYS = ("data", "success", "status")


class EnvelopeDecodeError(ValueError):
    """Raised when a body is not JSON or matches none of the response shapes."""
    pass


def _require_object(data: Any, what: str) -> dict:
    if not isinstance(data, dict):
        raise TypeError(f"{what} must be a JSON object, got {type(data).__name__}")
    return data


def _require_str(data: dict, key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"{key!r} must be a string")
    return value


def _require_int(data: dict, key: str) -> int:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{key!r} must be an integer")
    return value


def _require_credential(data: dict, key: str, cls):
    try:
        return cls(_require_str(data, key))
    except ErrorMessage as e:
        raise ValueError(f"{key!r}: {e}") from e


def _encode_payload(value: Any) -> JSONType:
    to_json = getattr(value, "to_json", None)
    if callable(to_json):
        return to_json()
    return value


def _load_json(raw: Union[str, bytes, dict]) -> JSONType:
    if isinstance(raw, dict):
        return raw
    try:
        return json.loads(raw)
    except ValueError as e:
        raise EnvelopeDecodeError(f"Response is not valid JSON: {e}") from e


# -------------------------
# Body variants
# -------------------------
@dataclass(frozen=True)
class Content(Generic[T]):
    """Successful payload of an envelope."""
    value: T

    def result(self) -> T:
        return self.value

    def to_json(self) -> JSONType:
        return _encode_payload(self.value)


@dataclass(frozen=True)
class SingleError:
    """Error nested in the envelope data, keyed to the request path and verb."""
    error: ErrorMessage
    request: str
    method: HttpMethod

    @classmethod
    def from_json(cls, data: JSONType) -> "SingleError":
        obj = _require_object(data, "Error data")
        return cls(
            error=ErrorMessage(_require_str(obj, "error")),
            request=_require_str(obj, "request"),
            method=HttpMethod(_require_str(obj, "method")),
        )

    def result(self):
        raise ErrorMessage(self.error.message)

    def to_json(self) -> JSONType:
        return {"error": self.error.message, "request": self.request, "method": self.method.value}


@dataclass(frozen=True)
class ApiErrorEntry:
    """One entry of the envelope-less ``errors`` array."""
    code: str
    detail: str
    id: str
    status: ErrorMessage

    @classmethod
    def from_json(cls, data: JSONType) -> "ApiErrorEntry":
        obj = _require_object(data, "Error entry")
        return cls(
            code=_require_str(obj, "code"),
            detail=_require_str(obj, "detail"),
            id=_require_str(obj, "id"),
            status=ErrorMessage(_require_str(obj, "status")),
        )

    def to_json(self) -> JSONType:
        return {"code": self.code, "detail": self.detail, "id": self.id, "status": self.status.message}


@dataclass(frozen=True)
class MultiError:
    """Top-level error array sent on throttling and similar rejections."""
    errors: Tuple[ApiErrorEntry, ...]

    @classmethod
    def from_json(cls, data: JSONType) -> "MultiError":
        obj = _require_object(data, "Response")
        entries = obj["errors"]
        if not isinstance(entries, list):
            raise TypeError("'errors' must be a JSON array")
        return cls(errors=tuple(ApiErrorEntry.from_json(e) for e in entries))

    def result(self):
        raise ErrorMessage.join(e.status for e in self.errors)

    def to_json(self) -> JSONType:
        return {"errors": [e.to_json() for e in self.errors]}


Body = Union[Content[T], SingleError, MultiError]


@dataclass(frozen=True)
class Envelope(Generic[T]):
    """Decoded API response.

    ``status`` is ``None`` only for a multi-error body decoded without an
    HTTP status at hand, since that shape carries none.
    """
    data: Body
    success: bool
    status: Optional[int]

    def result(self) -> T:
        """Collapse to the payload.

        Raises:
            ErrorMessage: The single error, or all multi-error statuses joined
        """
        return self.data.result()

    @property
    def is_error(self) -> bool:
        return not isinstance(self.data, Content)

    def to_dict(self) -> JSONType:
        if isinstance(self.data, MultiError):
            return self.data.to_json()
        return {"data": self.data.to_json(), "success": self.success, "status": self.status}


# -------------------------
# Decoding
# -------------------------
def decode_payload(decoder: Decoder, data: JSONType):
    """Apply a payload decoder (a callable or a class with ``from_json``)."""
    return getattr(decoder, "from_json", decoder)(data)


def _has_single_error_shape(data: JSONType) -> bool:
    try:
        SingleError.from_json(data)
    except DECODE_ERRORS:
        return False
    return True


def _decode_body(data: JSONType, decoder: Decoder) -> Body:
    try:
        value = decode_payload(decoder, data)
    except DECODE_ERRORS as content_error:
        try:
            return SingleError.from_json(data)
        except DECODE_ERRORS:
            raise EnvelopeDecodeError(
                f"Envelope data matches neither the payload type nor the error shape: {content_error}"
            ) from content_error
    if _has_single_error_shape(data):
        log.warning("Envelope data decoded as content but also has the error shape; keeping content")
    return Content(value)


def _decode_basic(document: JSONType, decoder: Decoder) -> Envelope:
    obj = _require_object(document, "Response")
    for key in _ENVELOPE_KEYS:
        if key not in obj:
            raise KeyError(key)
    success = obj["success"]
    if not isinstance(success, bool):
        raise TypeError("'success' must be a boolean")
    status = _require_int(obj, "status")
    if not 0 <= status <= 0xFFFF:
        raise ValueError(f"'status' out of range: {status}")
    return Envelope(data=_decode_body(obj["data"], decoder), success=success, status=status)


def envelope_from_json(document: JSONType, decoder: Decoder, *, status: Optional[int] = None) -> Envelope:
    """Decode an already parsed JSON document into an ``Envelope``.

    Args:
        document: Parsed response body
        decoder: Payload decoder for the content variant
        status: HTTP status to record when the body carries none

    Raises:
        EnvelopeDecodeError: If the document matches neither response shape
    """
    try:
        return _decode_basic(document, decoder)
    except DECODE_ERRORS as basic_error:
        try:
            multi = MultiError.from_json(document)
        except DECODE_ERRORS:
            raise EnvelopeDecodeError(f"Response matches no known shape: {basic_error}") from basic_error
    return Envelope(data=multi, success=False, status=status)


def decode_envelope(raw: Union[str, bytes], decoder: Decoder, *, status: Optional[int] = None) -> Envelope:
    """Decode a response body into an ``Envelope``.

    The ``{data, success, status}`` envelope is tried first, the bare
    ``{errors: [...]}`` shape second.

    Args:
        raw: Response body text
        decoder: Payload decoder for the content variant
        status: HTTP status to record for the multi-error shape

    Returns:
        Decoded envelope

    Raises:
        EnvelopeDecodeError: If the body is not JSON or matches no shape

    Example:
        >>> decode_envelope('{"data": true, "success": true, "status": 200}', boolean).result()
        True
    """
    return envelope_from_json(_load_json(raw), decoder, status=status)


def decode_bare_or_envelope(raw: Union[str, bytes], decoder: Decoder, *,
                            status: Optional[int] = None) -> Envelope:
    """Decode a body that is either a bare payload or a regular response.

    The OAuth token endpoint answers successes with the bare token object and
    failures with the usual envelope or error array.
    """
    document = _load_json(raw)
    try:
        value = decode_payload(decoder, document)
    except DECODE_ERRORS as e:
        log.debug(f"Body is not a bare payload ({e}), decoding as envelope")
        return envelope_from_json(document, decoder, status=status)
    success = status is None or 200 <= status < 300
    return Envelope(data=Content(value), success=success, status=status)


def encode_envelope(envelope: Envelope) -> str:
    """Serialize an envelope back to its wire form."""
    return json.dumps(envelope.to_dict())


# -------------------------
# Payload decoders
# -------------------------
def json_value(data: JSONType) -> JSONType:
    """Decode any JSON value as is.

    A raw JSON payload cannot be told apart from an error structurally, so
    objects holding the single-error fields (``error``, ``request`` and a
    known ``method``) are refused, whatever other keys they carry, and end
    up decoded as ``SingleError``.
    """
    if _has_single_error_shape(data):
        raise ValueError("Object has the single error shape")
    return data


def boolean(data: JSONType) -> bool:
    if not isinstance(data, bool):
        raise TypeError(f"Expected a boolean, got {type(data).__name__}")
    return data


def json_list(data: JSONType) -> list:
    if not isinstance(data, list):
        raise TypeError(f"Expected a JSON array, got {type(data).__name__}")
    return data


# -------------------------
# Token endpoint payloads
# -------------------------
@dataclass(frozen=True)
class AuthorizationResponse:
    """Token pair returned when exchanging an authorization code or PIN."""
    access_token: AccessToken
    refresh_token: RefreshToken
    expires_in: datetime
    account_id: AccountID
    account_username: Username
    token_type: TokenType
    scope: JSONType = field(default=None, compare=False)

    @classmethod
    def from_json(cls, data: JSONType):
        obj = _require_object(data, "Token response")
        return cls(
            access_token=_require_credential(obj, "access_token", AccessToken),
            refresh_token=_require_credential(obj, "refresh_token", RefreshToken),
            expires_in=to_utc_datetime(_require_int(obj, "expires_in")),
            account_id=AccountID(_require_int(obj, "account_id")),
            account_username=Username(_require_str(obj, "account_username")),
            token_type=TokenType(_require_str(obj, "token_type")),
            scope=obj.get("scope"),
        )

    def to_json(self) -> JSONType:
        return {
            "access_token": str(self.access_token),
            "refresh_token": str(self.refresh_token),
            "expires_in": to_unix_timestamp(self.expires_in),
            "account_id": self.account_id.value,
            "account_username": str(self.account_username),
            "token_type": self.token_type.value,
            "scope": self.scope,
        }


class RefreshResponse(AuthorizationResponse):
    """Token response of a refresh; same fields as ``AuthorizationResponse``."""
    pass


__all__ = [
    "ApiErrorEntry",
    "AuthorizationResponse",
    "Body",
    "Content",
    "DECODE_ERRORS",
    "Envelope",
    "EnvelopeDecodeError",
    "MultiError",
    "RefreshResponse",
    "SingleError",
    "boolean",
    "decode_bare_or_envelope",
    "decode_envelope",
    "decode_payload",
    "encode_envelope",
    "envelope_from_json",
    "json_list",
    "json_value",
]
