"""Action handlers keyed by webhook handler name."""

from __future__ import annotations

from typing import Mapping

from assistant_bridge.core.intents import HandlerName
from assistant_bridge.services.intent_router import IntentHandler

from .message_intents import read_direct_messages, send_message
from .session_intents import set_username
from .status_intents import change_status, get_status

DEFAULT_HANDLERS: Mapping[HandlerName, IntentHandler] = {
    HandlerName.CHANGE_STATUS: change_status,
    HandlerName.SEND_MESSAGE: send_message,
    HandlerName.GET_STATUS: get_status,
    HandlerName.READ_DIRECT_MESSAGES: read_direct_messages,
    HandlerName.SET_USERNAME: set_username,
}

__all__ = [
    "DEFAULT_HANDLERS",
    "change_status",
    "get_status",
    "read_direct_messages",
    "send_message",
    "set_username",
]
