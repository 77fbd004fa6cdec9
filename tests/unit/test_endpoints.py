from datetime import datetime, timedelta, timezone

import pytest
from aioresponses import aioresponses
from yarl import URL

from imgurs.client import BasicClient
from imgurs.endpoints import (
    SortPreference,
    create_account_block,
    get_account,
    get_account_block_status,
    get_account_blocks,
    get_account_images,
    get_account_settings,
    get_album,
    get_comment,
    get_gallery_album,
    get_gallery_favorites,
    get_gallery_image,
    get_tags,
    remove_account_block,
)
from imgurs.exceptions import ApiError, JSONError
from imgurs.types import AccessToken, ClientID, ClientSecret, RefreshToken

OK_OBJECT = {"data": {"id": "abc"}, "success": True, "status": 200}
OK_LIST = {"data": [{"id": "abc"}], "success": True, "status": 200}


def make_basic() -> BasicClient:
    return BasicClient(ClientID("client-id"), ClientSecret("client-secret"))


def make_authenticated():
    return make_basic().with_tokens(
        AccessToken("access"), RefreshToken("refresh"), datetime.now(timezone.utc) + timedelta(hours=1)
    )


@pytest.mark.asyncio
@pytest.mark.parametrize("call, args, url", [
    (get_account, ("ghostinspector",), "https://api.imgur.com/3/account/ghostinspector"),
    (get_account_block_status, ("someone",), "https://api.imgur.com/account/v1/someone/block"),
    (get_album, ("z6B0j",), "https://api.imgur.com/3/album/z6B0j"),
    (get_comment, ("1938633683",), "https://api.imgur.com/3/comment/1938633683"),
    (get_gallery_album, ("z6B0j",), "https://api.imgur.com/3/gallery/album/z6B0j"),
    (get_gallery_image, ("hQ9Zs",), "https://api.imgur.com/3/gallery/image/hQ9Zs"),
    (get_tags, (), "https://api.imgur.com/3/tags"),
])
async def test_object_endpoints(call, args, url):
    client = make_basic()
    try:
        with aioresponses() as m:
            m.get(url, payload=OK_OBJECT)
            response = await call(client, *args)
            assert response.result() == {"id": "abc"}
            (request_call,) = m.requests[("GET", URL(url))]
            assert request_call.kwargs["headers"]["Authorization"] == "Client-ID client-id"
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_account_images_is_a_list():
    client = make_basic()
    url = "https://api.imgur.com/3/account/ghostinspector/images"
    try:
        with aioresponses() as m:
            m.get(url, payload=OK_LIST)
            response = await get_account_images(client, "ghostinspector")
            assert response.result() == [{"id": "abc"}]

            m.get(url, payload=OK_OBJECT)
            with pytest.raises(JSONError):
                await get_account_images(client, "ghostinspector")
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_gallery_favorites_page_and_sort():
    client = make_basic()
    url = "https://api.imgur.com/3/account/ghostinspector/gallery_favorites/2/oldest"
    try:
        with aioresponses() as m:
            m.get(url, payload=OK_LIST)
            response = await get_gallery_favorites(client, "ghostinspector", page=2, sort=SortPreference.OLDEST)
            assert response.result() == [{"id": "abc"}]
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_user_endpoints_require_authenticated_client():
    client = make_basic()
    with pytest.raises(TypeError):
        await get_account_settings(client)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        await get_account_blocks(client)  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_account_settings_with_bearer():
    client = make_authenticated()
    url = "https://api.imgur.com/3/account/me/settings"
    try:
        with aioresponses() as m:
            m.get(url, payload={"data": {"email": "user@example.com"}, "success": True, "status": 200})
            response = await get_account_settings(client)
            assert response.result() == {"email": "user@example.com"}
            (request_call,) = m.requests[("GET", URL(url))]
            assert request_call.kwargs["headers"]["Authorization"] == "Bearer access"
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_account_blocks_error():
    client = make_authenticated()
    url = "https://api.imgur.com/3/account/me/block"
    body = {"data": {"error": "Unauthorized", "request": "/3/account/me/block", "method": "GET"},
            "success": False, "status": 403}
    try:
        with aioresponses() as m:
            m.get(url, status=403, payload=body)
            response = await get_account_blocks(client)
            with pytest.raises(ApiError, match="Unauthorized"):
                response.result()
    finally:
        await client.close()


@pytest.mark.asyncio
@pytest.mark.parametrize("call, method", [
    (create_account_block, "PUT"),
    (remove_account_block, "DELETE"),
])
async def test_account_block_changes(call, method):
    client = make_authenticated()
    url = "https://api.imgur.com/account/v1/someone/block"
    try:
        with aioresponses() as m:
            m.add(url, method, payload={"data": {"blocked": method == "PUT"}, "success": True, "status": 200})
            response = await call(client, "someone")
            assert response.result() == {"blocked": method == "PUT"}
            (request_call,) = m.requests[(method, URL(url))]
            assert request_call.kwargs["headers"]["Authorization"] == "Bearer access"
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_account_block_changes_require_authenticated_client():
    client = make_basic()
    with pytest.raises(TypeError):
        await create_account_block(client, "someone")  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        await remove_account_block(client, "someone")  # type: ignore[arg-type]
