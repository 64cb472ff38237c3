"""Chat platform adapter backed by the Mattermost REST API (v4)."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any, Optional

import httpx

from assistant_bridge.core.config import settings
from assistant_bridge.core.exceptions import ChatPlatformError, ChatUserNotFoundError
from assistant_bridge.core.models import (
    Channel,
    ChannelMembership,
    ChatUser,
    Post,
    Team,
    TeamUnread,
)
from assistant_bridge.core.ports import ChatPlatformPort

API_PREFIX = "/api/v4"


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(body, dict) and body.get("message"):
        return f"HTTP {response.status_code}: {body['message']}"
    return f"HTTP {response.status_code}"


class MattermostAdapter(ChatPlatformPort):
    """Async Mattermost client implementing the chat platform port.

    The configured token must belong to a bot or system admin allowed to read
    and update other users' status and post into their direct channels.
    """

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=(base_url or settings.MATTERMOST_URL).rstrip("/") + API_PREFIX,
            headers={"Authorization": f"Bearer {token or settings.MATTERMOST_TOKEN}"},
            timeout=timeout if timeout is not None else settings.MATTERMOST_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._client.aclose()

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise ChatPlatformError(operation, str(exc) or exc.__class__.__name__) from exc
        if response.is_error:
            raise ChatPlatformError(operation, _error_detail(response))
        return response

    async def get_user_status(self, user_id: str) -> str:
        response = await self._request("get_user_status", "GET", f"/users/{user_id}/status")
        return str(response.json().get("status", ""))

    async def update_user_status(self, user_id: str, status: str) -> None:
        await self._request(
            "update_user_status",
            "PUT",
            f"/users/{user_id}/status",
            json={"user_id": user_id, "status": status},
        )

    async def get_user(self, user_id: str) -> ChatUser:
        response = await self._request("get_user", "GET", f"/users/{user_id}")
        return ChatUser.model_validate(response.json())

    async def get_user_by_username(self, username: str) -> ChatUser:
        try:
            response = await self._client.get(f"/users/username/{username}")
        except httpx.HTTPError as exc:
            raise ChatPlatformError("get_user_by_username", str(exc)) from exc
        if response.status_code == HTTPStatus.NOT_FOUND:
            raise ChatUserNotFoundError("get_user_by_username", f"no user named {username!r}")
        if response.is_error:
            raise ChatPlatformError("get_user_by_username", _error_detail(response))
        return ChatUser.model_validate(response.json())

    async def get_direct_channel(self, user_id: str, other_user_id: str) -> Channel:
        response = await self._request(
            "get_direct_channel", "POST", "/channels/direct", json=[user_id, other_user_id]
        )
        return Channel.model_validate(response.json())

    async def create_post(self, channel_id: str, user_id: str, message: str) -> Post:
        response = await self._request(
            "create_post",
            "POST",
            "/posts",
            json={"channel_id": channel_id, "user_id": user_id, "message": message},
        )
        return Post.model_validate(response.json())

    async def get_teams_for_user(self, user_id: str) -> list[Team]:
        response = await self._request("get_teams_for_user", "GET", f"/users/{user_id}/teams")
        return [Team.model_validate(item) for item in response.json() or []]

    async def get_team_unreads(self, user_id: str) -> list[TeamUnread]:
        response = await self._request(
            "get_team_unreads", "GET", f"/users/{user_id}/teams/unread"
        )
        return [TeamUnread.model_validate(item) for item in response.json() or []]

    async def get_team(self, team_id: str) -> Optional[Team]:
        try:
            response = await self._client.get(f"/teams/{team_id}")
        except httpx.HTTPError as exc:
            raise ChatPlatformError("get_team", str(exc)) from exc
        if response.status_code in (HTTPStatus.NOT_FOUND, HTTPStatus.FORBIDDEN):
            return None
        if response.is_error:
            raise ChatPlatformError("get_team", _error_detail(response))
        return Team.model_validate(response.json())

    async def get_channel_memberships(self, user_id: str, team_id: str) -> list[ChannelMembership]:
        response = await self._request(
            "get_channel_memberships",
            "GET",
            f"/users/{user_id}/teams/{team_id}/channels/members",
        )
        return [ChannelMembership.model_validate(item) for item in response.json() or []]

    async def get_channel(self, channel_id: str) -> Channel:
        response = await self._request("get_channel", "GET", f"/channels/{channel_id}")
        return Channel.model_validate(response.json())

    async def get_latest_post(self, channel_id: str) -> Optional[Post]:
        response = await self._request(
            "get_latest_post",
            "GET",
            f"/channels/{channel_id}/posts",
            params={"page": 0, "per_page": 1},
        )
        body = response.json() or {}
        order = body.get("order") or []
        posts = body.get("posts") or {}
        if not order or order[0] not in posts:
            return None
        return Post.model_validate(posts[order[0]])


__all__ = ["MattermostAdapter", "API_PREFIX"]
