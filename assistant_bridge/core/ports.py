"""Protocol definitions for infrastructure adapters."""

# pylint: disable=unnecessary-ellipsis

from __future__ import annotations

from typing import Optional, Protocol

from assistant_bridge.core.models import (
    Channel,
    ChannelMembership,
    ChatUser,
    Post,
    Team,
    TeamUnread,
)


class KeyValueStorePort(Protocol):
    """Port exposing a durable string key-value store with compare-and-set."""

    def get(self, key: str) -> Optional[str]:
        """Return the value stored under ``key`` or ``None``."""
        ...

    def compare_and_set(self, key: str, old_value: Optional[str], new_value: str) -> bool:
        """Write ``new_value`` only if the current value equals ``old_value``.

        ``old_value=None`` means "only if absent". Returns whether the write happened.
        """
        ...

    def delete(self, key: str) -> bool:
        """Remove ``key``; return whether it existed."""
        ...

    def list_keys(self, page: int, per_page: int) -> list[str]:
        """Return one page of keys in insertion order."""
        ...


class ChatPlatformPort(Protocol):
    """Port exposing the chat platform calls the action handlers need."""

    async def get_user_status(self, user_id: str) -> str:
        """Return the presence status (online, away, dnd, offline)."""
        ...

    async def update_user_status(self, user_id: str, status: str) -> None:
        """Set the presence status for ``user_id``."""
        ...

    async def get_user(self, user_id: str) -> ChatUser:
        """Return the directory entry for ``user_id``."""
        ...

    async def get_user_by_username(self, username: str) -> ChatUser:
        """Return the directory entry for ``username``.

        Raises ``ChatUserNotFoundError`` when no such account exists.
        """
        ...

    async def get_direct_channel(self, user_id: str, other_user_id: str) -> Channel:
        """Return (creating if needed) the direct channel between two users."""
        ...

    async def create_post(self, channel_id: str, user_id: str, message: str) -> Post:
        """Post ``message`` to ``channel_id`` on behalf of ``user_id``."""
        ...

    async def get_teams_for_user(self, user_id: str) -> list[Team]:
        """Return the workspaces ``user_id`` belongs to."""
        ...

    async def get_team_unreads(self, user_id: str) -> list[TeamUnread]:
        """Return unread and mention counters per workspace."""
        ...

    async def get_team(self, team_id: str) -> Optional[Team]:
        """Return workspace metadata, or ``None`` when it cannot be resolved."""
        ...

    async def get_channel_memberships(self, user_id: str, team_id: str) -> list[ChannelMembership]:
        """Return the user's channel memberships within a workspace."""
        ...

    async def get_channel(self, channel_id: str) -> Channel:
        """Return channel metadata."""
        ...

    async def get_latest_post(self, channel_id: str) -> Optional[Post]:
        """Return the most recent post in ``channel_id`` if any."""
        ...


__all__ = ["KeyValueStorePort", "ChatPlatformPort"]
