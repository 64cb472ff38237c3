"""Intent handlers for direct messages (send_message, read_direct_messages)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from assistant_bridge.core.exceptions import ChatPlatformError, ChatUserNotFoundError
from assistant_bridge.core.intents import ActionOutcome, Failure, FailureKind, Success
from assistant_bridge.core.logging import get_logger
from assistant_bridge.core.models import DIRECT_CHANNEL_TYPE
from assistant_bridge.core.ports import ChatPlatformPort
from assistant_bridge.services.intent_router import IntentRequest

from .base import require_account, require_chat

if TYPE_CHECKING:  # pragma: no cover - typing only
    from assistant_bridge.services import ServiceContainer

logger = get_logger(__name__)

MESSAGE_SENT = "Message sent!"
MISSING_MESSAGE_PARAMS = "Sorry, I need to know who to write to and what to say."
SEND_FAILED_MESSAGE = "Sorry, I couldn't send your message right now."
NO_UNREAD_DMS = "You have no unread DMs"
UNREAD_DMS_HEADER = "Here are your unread DMs:"
READ_FAILED_MESSAGE = "Sorry, I couldn't read your messages right now."


def unknown_user_message(username: str) -> str:
    """Apology for a recipient that is not in the directory."""
    return f"Sorry, I couldn't find a user named {username}."


def _normalize_username(value: str) -> str:
    return value.strip().lstrip("@").lower()


async def send_message(request: IntentRequest, services: "ServiceContainer") -> ActionOutcome:
    """Post ``message`` into the direct channel with ``other_user``.

    Not idempotent: a retried request posts the message again.
    """
    target = request.param("other_user")
    text = request.param("message")
    if not target or not text:
        return Failure(FailureKind.VALIDATION_ERROR, MISSING_MESSAGE_PARAMS)
    username = _normalize_username(target)
    account_id = require_account(request)
    chat = require_chat(services)
    try:
        other = await chat.get_user_by_username(username)
    except ChatUserNotFoundError:
        logger.warning("send_message: target username did not resolve")
        return Failure(FailureKind.VALIDATION_ERROR, unknown_user_message(username))
    except ChatPlatformError as exc:
        logger.error(
            "send_message: %s failed for account %s: %s", exc.operation, account_id, exc.detail
        )
        return Failure(FailureKind.COLLABORATOR_ERROR, SEND_FAILED_MESSAGE)
    try:
        channel = await chat.get_direct_channel(account_id, other.id)
        await chat.create_post(channel.id, account_id, text)
    except ChatPlatformError as exc:
        logger.error(
            "send_message: %s failed for account %s: %s", exc.operation, account_id, exc.detail
        )
        return Failure(FailureKind.COLLABORATOR_ERROR, SEND_FAILED_MESSAGE)
    return Success(MESSAGE_SENT)


async def _collect_unread_dm_lines(chat: ChatPlatformPort, account_id: str) -> set[str]:
    lines: set[str] = set()
    visited: set[str] = set()
    for team in await chat.get_teams_for_user(account_id):
        # Direct channels are team-less, so each one shows up once per team.
        for membership in await chat.get_channel_memberships(account_id, team.id):
            if membership.mention_count <= 0 or membership.channel_id in visited:
                continue
            visited.add(membership.channel_id)
            channel = await chat.get_channel(membership.channel_id)
            if channel.type != DIRECT_CHANNEL_TYPE:
                continue
            post = await chat.get_latest_post(channel.id)
            if post is None:
                continue
            sender = await chat.get_user(post.user_id)
            lines.add(f"'{sender.username}' wrote '{post.message}'.")
    return lines


async def read_direct_messages(
    request: IntentRequest, services: "ServiceContainer"
) -> ActionOutcome:
    """Read back the latest message of every direct channel with mentions."""
    account_id = require_account(request)
    chat = require_chat(services)
    try:
        lines = await _collect_unread_dm_lines(chat, account_id)
    except ChatPlatformError as exc:
        logger.error(
            "read_direct_messages: %s failed for account %s: %s",
            exc.operation,
            account_id,
            exc.detail,
        )
        return Failure(FailureKind.COLLABORATOR_ERROR, READ_FAILED_MESSAGE)
    if not lines:
        return Success(NO_UNREAD_DMS)
    return Success("\n".join([UNREAD_DMS_HEADER, *sorted(lines)]))


__all__ = ["send_message", "read_direct_messages", "unknown_user_message"]
