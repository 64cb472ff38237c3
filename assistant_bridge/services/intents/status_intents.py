"""Intent handlers for presence status (change_status, get_status)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from assistant_bridge.core.exceptions import ChatPlatformError
from assistant_bridge.core.intents import ActionOutcome, Failure, FailureKind, Success
from assistant_bridge.core.logging import get_logger
from assistant_bridge.services.intent_router import IntentRequest

from .base import require_account, require_chat

if TYPE_CHECKING:  # pragma: no cover - typing only
    from assistant_bridge.services import ServiceContainer

logger = get_logger(__name__)

MISSING_STATUS_MESSAGE = "Sorry, I didn't catch which status you want."
CHANGE_STATUS_FAILED_MESSAGE = "Sorry, I couldn't change your status right now."
GET_STATUS_FAILED_MESSAGE = "Sorry, I couldn't fetch your status right now."


async def change_status(request: IntentRequest, services: "ServiceContainer") -> ActionOutcome:
    """Read the current status, set the requested one, and report the transition."""
    new_status = request.param("status")
    if not new_status:
        return Failure(FailureKind.VALIDATION_ERROR, MISSING_STATUS_MESSAGE)
    account_id = require_account(request)
    chat = require_chat(services)
    try:
        old_status = await chat.get_user_status(account_id)
        await chat.update_user_status(account_id, new_status)
    except ChatPlatformError as exc:
        logger.error(
            "change_status: %s failed for account %s: %s", exc.operation, account_id, exc.detail
        )
        return Failure(FailureKind.COLLABORATOR_ERROR, CHANGE_STATUS_FAILED_MESSAGE)
    return Success(f"Changing status from {old_status} to {new_status}")


async def get_status(request: IntentRequest, services: "ServiceContainer") -> ActionOutcome:
    """Summarize presence plus unread and mention counts for every workspace."""
    account_id = require_account(request)
    chat = require_chat(services)
    try:
        status = await chat.get_user_status(account_id)
        unreads = await chat.get_team_unreads(account_id)
        lines = [f"Your status is {status}."]
        for unread in unreads:
            team = await chat.get_team(unread.team_id)
            name = (team.display_name or team.name) if team is not None else ""
            if not name:
                logger.debug("skipping team %s without metadata", unread.team_id)
                continue
            lines.append(
                f"In {name} you have {unread.msg_count} unread messages "
                f"and {unread.mention_count} mentions."
            )
    except ChatPlatformError as exc:
        logger.error(
            "get_status: %s failed for account %s: %s", exc.operation, account_id, exc.detail
        )
        return Failure(FailureKind.COLLABORATOR_ERROR, GET_STATUS_FAILED_MESSAGE)
    return Success("\n".join(lines))


__all__ = ["change_status", "get_status"]
