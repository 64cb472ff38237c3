"""Intent handler that hands the caller's username back to the assistant."""

from __future__ import annotations

from typing import TYPE_CHECKING

from assistant_bridge.core.intents import ActionOutcome, Failure, FailureKind, Success
from assistant_bridge.services.intent_router import IntentRequest

if TYPE_CHECKING:  # pragma: no cover - typing only
    from assistant_bridge.services import ServiceContainer

USERNAME_PARAM = "username"
MISSING_USERNAME_MESSAGE = "Sorry, I didn't catch your username."


async def set_username(request: IntentRequest, services: "ServiceContainer") -> ActionOutcome:
    """Echo ``username`` into user storage so later turns carry it.

    Runs without an account link and touches neither the chat platform nor
    the identity store.
    """
    _ = services
    username = request.param(USERNAME_PARAM)
    if not username:
        return Failure(FailureKind.VALIDATION_ERROR, MISSING_USERNAME_MESSAGE)
    return Success(
        f"Got it, your username is {username}.",
        side_effects={USERNAME_PARAM: username},
    )


__all__ = ["set_username", "USERNAME_PARAM"]
