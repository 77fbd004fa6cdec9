import json
from datetime import datetime, timedelta, timezone

import aiohttp
import pytest
from aioresponses import aioresponses
from yarl import URL

from imgurs.client import BasicClient
from imgurs.exceptions import ApiError, ErrorMessage, HeaderToStrError, JSONError, RequestError, UrlParseError
from imgurs.models import Content, Envelope, MultiError, boolean, json_value
from imgurs.response import Response, build_url, request
from imgurs.types import AccessToken, ClientID, ClientSecret, RefreshToken

URL_SETTINGS = "https://api.imgur.com/3/account/me/settings"


def make_basic() -> BasicClient:
    return BasicClient(ClientID("client-id"), ClientSecret("client-secret"))


@pytest.mark.asyncio
async def test_request_decodes_content_and_keeps_headers():
    client = make_basic()
    try:
        with aioresponses() as m:
            m.get(
                "https://api.imgur.com/3/tags",
                payload={"data": {"tags": []}, "success": True, "status": 200},
                headers={"X-RateLimit-ClientRemaining": "12499", "X-Post-Rate-Limit-Limit": "1250"},
            )
            response = await request(client, "GET", "https://api.imgur.com/3/tags", decoder=json_value)

        assert response.content == Envelope(data=Content({"tags": []}), success=True, status=200)
        assert response.result() == {"tags": []}
        assert response.headers["x-ratelimit-clientremaining"] == "12499"
        assert response.rate_limits() == {"X-RateLimit-ClientRemaining": 12499}
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_request_sends_client_headers():
    client = make_basic().with_tokens(
        AccessToken("access"), RefreshToken("refresh"), datetime.now(timezone.utc) + timedelta(hours=1)
    )
    try:
        with aioresponses() as m:
            m.get(URL_SETTINGS, payload={"data": True, "success": True, "status": 200})
            await request(client, "GET", URL_SETTINGS, decoder=boolean)
            (call,) = m.requests[("GET", URL(URL_SETTINGS))]
            assert call.kwargs["headers"] == {
                "Authorization": "Bearer access",
                "Accept": "application/vnd.api+json",
            }
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_request_single_error():
    client = make_basic()
    body = {"data": {"error": "Authentication required", "request": "/3/account/me/settings",
                     "method": "GET"}, "success": False, "status": 401}
    try:
        with aioresponses() as m:
            m.get(URL_SETTINGS, status=401, payload=body)
            response = await request(client, "GET", URL_SETTINGS, decoder=json_value)

        assert response.content.success is False
        assert response.content.status == 401
        with pytest.raises(ApiError) as excinfo:
            response.result()
        assert excinfo.value.error == ErrorMessage("Authentication required")
        assert isinstance(excinfo.value.__cause__, ErrorMessage)
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_request_multi_error_gets_http_status():
    client = make_basic()
    body = {"errors": [{"code": "429", "detail": "", "id": "x", "status": "Too Many Requests"}]}
    try:
        with aioresponses() as m:
            m.get(URL_SETTINGS, status=429, payload=body)
            response = await request(client, "GET", URL_SETTINGS, decoder=json_value)

        assert isinstance(response.content.data, MultiError)
        assert response.content.status == 429
        with pytest.raises(ApiError, match="Too Many Requests"):
            response.result()
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_request_invalid_json():
    client = make_basic()
    try:
        with aioresponses() as m:
            m.get(URL_SETTINGS, status=502, body="Bad Gateway")
            with pytest.raises(JSONError):
                await request(client, "GET", URL_SETTINGS, decoder=json_value)
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_request_transport_error():
    client = make_basic()
    try:
        with aioresponses() as m:
            m.get(URL_SETTINGS, exception=aiohttp.ClientConnectionError("connection reset"))
            with pytest.raises(RequestError) as excinfo:
                await request(client, "GET", URL_SETTINGS, decoder=json_value)
            assert isinstance(excinfo.value.__cause__, aiohttp.ClientError)
    finally:
        await client.close()


def test_response_header_str() -> None:
    envelope = Envelope(data=Content(True), success=True, status=200)
    response = Response(content=envelope, headers={"X-Good": "value", "X-Bad": "café"})
    assert response.header_str("X-Good") == "value"
    assert response.header_str("X-Missing") is None
    with pytest.raises(HeaderToStrError):
        response.header_str("X-Bad")


def test_rate_limits_skip_non_numeric() -> None:
    envelope = Envelope(data=Content(True), success=True, status=200)
    response = Response(content=envelope, headers={
        "X-RateLimit-UserLimit": "2000",
        "X-RateLimit-UserRemaining": "n/a",
    })
    assert response.rate_limits() == {"X-RateLimit-UserLimit": 2000}


def test_build_url_quotes_segments() -> None:
    url = build_url("https://api.imgur.com", "3", "account", "some user")
    assert url.raw_path == "/3/account/some%20user"
    assert url.path == "/3/account/some user"


def test_build_url_rejects_bad_input() -> None:
    with pytest.raises(UrlParseError):
        build_url("not a url", "3")
    with pytest.raises(UrlParseError):
        build_url("https://api.imgur.com", "3", "")


def test_response_default_headers_empty() -> None:
    response = Response(content=Envelope(data=Content(json.loads("1")), success=True, status=200))
    assert len(response.headers) == 0
    assert response.rate_limits() == {}
