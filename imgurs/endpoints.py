"""Imgur resource endpoints.

Thin wrappers over ``request``: each builds the endpoint URL, issues the call
with the client's headers and returns the Response with the payload decoded
as plain JSON. Endpoints acting for the user (``me`` and block changes)
need a RegisteredClient.
"""
from __future__ import annotations

from typing import Optional

from .client import API_BASE_URL, Client, RegisteredClient
from .models import json_list, json_value
from .response import Response, build_url, request
from .types import HttpMethod


class SortPreference:
    """Sort orders accepted by listing endpoints."""
    NEWEST = "newest"
    OLDEST = "oldest"
    BEST = "best"
    WORST = "worst"


def _require_registered(client: Client, endpoint: str) -> None:
    if not isinstance(client, RegisteredClient):
        raise TypeError(f"{endpoint} requires an authenticated client")


async def _call(client: Client, method: HttpMethod, *segments, decoder=json_value,
                base: str = API_BASE_URL) -> Response:
    return await request(client, method.value, build_url(base, *segments), decoder=decoder)


async def _get(client: Client, *segments, decoder=json_value) -> Response:
    return await _call(client, HttpMethod.GET, *segments, decoder=decoder)


async def get_account(client: Client, username: str) -> Response:
    """Account information by username."""
    return await _get(client, "3", "account", username)


async def get_account_block_status(client: Client, username: str) -> Response:
    """Whether the current user has blocked ``username``."""
    return await _get(client, "account", "v1", username, "block")


async def get_account_images(client: Client, username: str) -> Response:
    return await _get(client, "3", "account", username, "images", decoder=json_list)


async def get_gallery_favorites(client: Client, username: str, page: Optional[int] = None,
                                sort: Optional[str] = None) -> Response:
    """Images the user has favorited in the gallery.

    Args:
        client: Any client
        username: Account username
        page: Page number (optional)
        sort: One of SortPreference (optional)
    """
    segments = ["3", "account", username, "gallery_favorites"]
    if page is not None:
        segments.append(page)
    if sort is not None:
        segments.append(sort)
    return await _get(client, *segments, decoder=json_list)


async def get_album(client: Client, album_id: str) -> Response:
    return await _get(client, "3", "album", album_id)


async def get_comment(client: Client, comment_id: str) -> Response:
    return await _get(client, "3", "comment", comment_id)


async def get_gallery_album(client: Client, album_id: str) -> Response:
    """Additional information about an album in the gallery."""
    return await _get(client, "3", "gallery", "album", album_id)


async def get_gallery_image(client: Client, image_id: str) -> Response:
    """Additional information about an image in the gallery."""
    return await _get(client, "3", "gallery", "image", image_id)


async def get_tags(client: Client) -> Response:
    """Default tags in the gallery."""
    return await _get(client, "3", "tags")


async def get_account_settings(client: RegisteredClient) -> Response:
    """Settings of the authenticated account."""
    _require_registered(client, "get_account_settings")
    return await _get(client, "3", "account", "me", "settings")


async def get_account_blocks(client: RegisteredClient) -> Response:
    """Accounts blocked by the authenticated user."""
    _require_registered(client, "get_account_blocks")
    return await _get(client, "3", "account", "me", "block")


async def create_account_block(client: RegisteredClient, username: str) -> Response:
    """Block ``username`` for the authenticated user."""
    _require_registered(client, "create_account_block")
    return await _call(client, HttpMethod.PUT, "account", "v1", username, "block")


async def remove_account_block(client: RegisteredClient, username: str) -> Response:
    """Unblock ``username`` for the authenticated user."""
    _require_registered(client, "remove_account_block")
    return await _call(client, HttpMethod.DELETE, "account", "v1", username, "block")
