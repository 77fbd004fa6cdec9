"""API response handling.

Every call to the API goes through ``request``: it sends the client's headers
on the shared transport and hands the HTTP response to ``parse_response``,
which decodes the body into an Envelope and keeps the response headers next
to it (rate limit and paging metadata travel there).
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, Mapping, Optional, TypeVar

import aiohttp
from multidict import CIMultiDict, CIMultiDictProxy
from yarl import URL

from .client import Client
from .exceptions import ApiError, ErrorMessage, JSONError, RequestError, UrlParseError
from .helpers import header_to_str
from .models import Decoder, Envelope, EnvelopeDecodeError, decode_envelope

log = logging.getLogger(__name__)

T = TypeVar("T")

BodyDecoder = Callable[..., Envelope]

RATE_LIMIT_HEADERS = (
    "X-RateLimit-ClientLimit",
    "X-RateLimit-ClientRemaining",
    "X-RateLimit-UserLimit",
    "X-RateLimit-UserRemaining",
    "X-RateLimit-UserReset",
)


@dataclass(frozen=True)
class Response(Generic[T]):
    """Decoded response content and the HTTP headers it came with."""
    content: Envelope
    headers: Mapping[str, str] = field(default_factory=lambda: CIMultiDictProxy(CIMultiDict()))

    def result(self) -> T:
        """Return the payload.

        Raises:
            ApiError: If the API reported an error
        """
        try:
            return self.content.result()
        except ErrorMessage as e:
            raise ApiError(e, status=self.content.status) from e

    def header_str(self, name: str) -> Optional[str]:
        """Return a header value, or None when absent.

        Raises:
            HeaderToStrError: If the value is not visible ASCII
        """
        value = self.headers.get(name)
        if value is None:
            return None
        return header_to_str(name, value)

    def rate_limits(self) -> Dict[str, int]:
        """Return the ``X-RateLimit-*`` headers present in the response as ints."""
        limits = {}
        for name in RATE_LIMIT_HEADERS:
            value = self.header_str(name)
            if value is None:
                continue
            try:
                limits[name] = int(value)
            except ValueError:
                log.debug(f"Ignoring non-numeric {name} header: {value!r}")
        return limits


async def parse_response(resp: aiohttp.ClientResponse, decoder: Decoder,
                         body_decoder: BodyDecoder = decode_envelope,
                         log_body: bool = True) -> Response:
    """Decode an HTTP response into a Response.

    Args:
        resp: Response whose body has not been read yet
        decoder: Payload decoder for the content variant
        body_decoder: Envelope decoding strategy (default: decode_envelope)
        log_body: If False, the body is left out of debug logs (token responses)

    Returns:
        Response holding the decoded envelope and the original headers

    Raises:
        JSONError: If the body is not JSON or matches no response shape
    """
    status = resp.status
    headers = CIMultiDictProxy(CIMultiDict(resp.headers))
    text = await resp.text()
    if log_body:
        log.debug(f"{resp.method} {resp.url} response - status: {status}, body: {text}")
    else:
        log.debug(f"{resp.method} {resp.url} response - status: {status}, body length: {len(text)}")
    try:
        content = body_decoder(text, decoder, status=status)
    except EnvelopeDecodeError as e:
        log.error(f"Failed to decode response for {resp.url}: {e}")
        raise JSONError(f"Failed to decode response for {resp.url}: {e}") from e
    return Response(content=content, headers=headers)


def build_url(base: str, *segments: Any) -> URL:
    """Join quoted path segments onto an absolute base URL.

    Raises:
        UrlParseError: If the base is not an absolute URL or a segment is empty
    """
    try:
        url = URL(base)
        if not url.is_absolute():
            raise ValueError(f"Not an absolute URL: {base!r}")
        for segment in segments:
            segment = str(segment)
            if not segment:
                raise ValueError("Empty path segment")
            url = url / segment
    except (ValueError, TypeError) as e:
        raise UrlParseError(f"Invalid URL {base!r}: {e}") from e
    return url


async def request(client: Client, method: str, url: Any, *, decoder: Decoder,
                  params: Optional[Mapping[str, str]] = None,
                  data: Optional[Mapping[str, str]] = None,
                  body_decoder: BodyDecoder = decode_envelope,
                  log_body: bool = True) -> Response:
    """Send a request with the client's headers and decode the response.

    Args:
        client: Client whose headers and transport are used
        method: HTTP method
        url: Absolute URL (str or yarl.URL)
        decoder: Payload decoder for the content variant
        params: Query string parameters
        data: Form-encoded body
        body_decoder: Envelope decoding strategy
        log_body: If False, the body is left out of debug logs

    Returns:
        Decoded Response

    Raises:
        RequestError: If the transport fails
        JSONError: If the body cannot be decoded
        HeaderEncodeError: If the client headers cannot be encoded
    """
    headers = client.get_headers()
    session = await client.get_transport().get_session()
    log.debug(f"{method} {url}")
    try:
        async with session.request(method, url, headers=headers, params=params, data=data) as resp:
            return await parse_response(resp, decoder, body_decoder, log_body)
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        log.error(f"API request failed for {url}: {e}")
        raise RequestError(f"API request failed for {url}: {e}") from e

