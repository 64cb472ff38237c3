"""Pytest configuration: ensure env vars and import path are set early.

This runs before any tests, so modules can import without local path hacks.
Also load .env before setting defaults so real values are used when present.
"""
from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path
from typing import Iterator, Optional

import pytest
from dotenv import load_dotenv

# Ensure repository root is on sys.path for local package imports
sys.path.append(str(Path(__file__).resolve().parents[1]))

load_dotenv(override=False)

# Ensure required env vars exist for config import in app (fallbacks only)
os.environ.setdefault("MATTERMOST_URL", "http://mattermost.test")
os.environ.setdefault("MATTERMOST_TOKEN", "test-token")
os.environ.setdefault("MATTERMOST_COMMAND_TOKEN", "command-token")
os.environ.setdefault("LOG_PSEUDONYM_SECRET", "test-secret")
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="assistant-bridge-"))

# pylint: disable=wrong-import-position
from fastapi.testclient import TestClient  # noqa: E402

from assistant_bridge.adapters.kv_store import KeyValueStoreAdapter  # noqa: E402
from assistant_bridge.apps.api.app import create_app  # noqa: E402
from assistant_bridge.core.config import Settings  # noqa: E402
from assistant_bridge.core.exceptions import (  # noqa: E402
    ChatPlatformError,
    ChatUserNotFoundError,
)
from assistant_bridge.core.models import (  # noqa: E402
    Channel,
    ChannelMembership,
    ChatUser,
    Post,
    Team,
    TeamUnread,
)
from assistant_bridge.services import ServiceContainer, build_default_services  # noqa: E402
from assistant_bridge.services.identity_store import IdentityStore  # noqa: E402


class FakeChatPlatform:  # pylint: disable=too-many-instance-attributes
    """In-memory chat platform recording every call in ``calls``."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple]] = []
        self.fail_on: set[str] = set()
        self.statuses: dict[str, str] = {}
        self.users: dict[str, ChatUser] = {}
        self.teams: dict[str, Team] = {}
        self.user_teams: dict[str, list[str]] = {}
        self.unreads: dict[str, list[TeamUnread]] = {}
        self.memberships: dict[tuple[str, str], list[ChannelMembership]] = {}
        self.channels: dict[str, Channel] = {}
        self.latest_posts: dict[str, Post] = {}
        self.posts: list[Post] = []

    def _record(self, operation: str, *args) -> None:
        self.calls.append((operation, args))
        if operation in self.fail_on:
            raise ChatPlatformError(operation, "simulated failure")

    def add_user(self, user_id: str, username: str) -> ChatUser:
        user = ChatUser(id=user_id, username=username)
        self.users[user_id] = user
        return user

    async def get_user_status(self, user_id: str) -> str:
        self._record("get_user_status", user_id)
        return self.statuses.get(user_id, "offline")

    async def update_user_status(self, user_id: str, status: str) -> None:
        self._record("update_user_status", user_id, status)
        self.statuses[user_id] = status

    async def get_user(self, user_id: str) -> ChatUser:
        self._record("get_user", user_id)
        return self.users[user_id]

    async def get_user_by_username(self, username: str) -> ChatUser:
        self._record("get_user_by_username", username)
        for user in self.users.values():
            if user.username == username:
                return user
        raise ChatUserNotFoundError("get_user_by_username", f"no user named {username!r}")

    async def get_direct_channel(self, user_id: str, other_user_id: str) -> Channel:
        self._record("get_direct_channel", user_id, other_user_id)
        channel_id = "__".join(sorted([user_id, other_user_id]))
        channel = self.channels.setdefault(channel_id, Channel(id=channel_id, type="D"))
        return channel

    async def create_post(self, channel_id: str, user_id: str, message: str) -> Post:
        self._record("create_post", channel_id, user_id, message)
        post = Post(
            id=f"post{len(self.posts)}", user_id=user_id, channel_id=channel_id, message=message
        )
        self.posts.append(post)
        return post

    async def get_teams_for_user(self, user_id: str) -> list[Team]:
        self._record("get_teams_for_user", user_id)
        return [self.teams[team_id] for team_id in self.user_teams.get(user_id, [])]

    async def get_team_unreads(self, user_id: str) -> list[TeamUnread]:
        self._record("get_team_unreads", user_id)
        return list(self.unreads.get(user_id, []))

    async def get_team(self, team_id: str) -> Optional[Team]:
        self._record("get_team", team_id)
        return self.teams.get(team_id)

    async def get_channel_memberships(self, user_id: str, team_id: str) -> list[ChannelMembership]:
        self._record("get_channel_memberships", user_id, team_id)
        return list(self.memberships.get((user_id, team_id), []))

    async def get_channel(self, channel_id: str) -> Channel:
        self._record("get_channel", channel_id)
        return self.channels[channel_id]

    async def get_latest_post(self, channel_id: str) -> Optional[Post]:
        self._record("get_latest_post", channel_id)
        return self.latest_posts.get(channel_id)

    def operations(self) -> list[str]:
        """Return just the operation names in call order."""
        return [name for name, _ in self.calls]


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Configuration snapshot pointing at a temporary data directory."""
    return Settings(  # type: ignore[call-arg]
        MATTERMOST_URL="http://mattermost.test",
        MATTERMOST_TOKEN="test-token",
        MATTERMOST_COMMAND_TOKEN="command-token",
        LOG_PSEUDONYM_SECRET="test-secret",
        HEALTHCHECK_API_TOKEN="health-token",
        DATA_DIR=tmp_path,
    )


@pytest.fixture
def kv_store(tmp_path: Path) -> Iterator[KeyValueStoreAdapter]:
    """TinyDB key-value store in a temporary file."""
    store = KeyValueStoreAdapter(tmp_path / "links.json")
    yield store
    store.close()


@pytest.fixture
def identity_store(kv_store: KeyValueStoreAdapter) -> IdentityStore:
    """Identity store over the temporary key-value store."""
    return IdentityStore(kv_store, pseudonym_secret="test-secret")


@pytest.fixture
def chat() -> FakeChatPlatform:
    """Fresh in-memory chat platform."""
    return FakeChatPlatform()


@pytest.fixture
def services(
    settings: Settings, identity_store: IdentityStore, chat: FakeChatPlatform
) -> ServiceContainer:
    """Service container wired to the fakes with all handlers registered."""
    return build_default_services(settings, identity_store=identity_store, chat_port=chat)


@pytest.fixture
def client(services: ServiceContainer) -> TestClient:
    """Test client for an app built around ``services``."""
    return TestClient(create_app(services))
