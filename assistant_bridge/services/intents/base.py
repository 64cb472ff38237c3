"""Shared guards for intent handlers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from assistant_bridge.core.ports import ChatPlatformPort
from assistant_bridge.services.intent_router import IntentRequest

if TYPE_CHECKING:  # pragma: no cover - typing only
    from assistant_bridge.services import ServiceContainer


def require_account(request: IntentRequest) -> str:
    """Return the authenticated account id; the dispatcher guarantees one."""
    if not request.account_id:
        raise RuntimeError(f"{request.handler.value} invoked without an authenticated account")
    return request.account_id


def require_chat(services: "ServiceContainer") -> ChatPlatformPort:
    """Return the configured chat platform port."""
    chat = services.chat
    if chat is None:
        raise RuntimeError("ChatPlatformPort has not been configured.")
    return chat


__all__ = ["require_account", "require_chat"]
