"""Intent vocabulary and the value types passed between dispatcher and handlers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Union


class HandlerName(str, Enum):
    """Webhook handler names understood by the dispatcher."""

    CHANGE_STATUS = "change_status"
    SEND_MESSAGE = "send_message"
    GET_STATUS = "get_status"
    READ_DIRECT_MESSAGES = "read_direct_messages"
    SET_USERNAME = "set_username"


# Legacy handler names still sent by older Actions projects.
HANDLER_ALIASES: dict[str, HandlerName] = {
    "send_dm": HandlerName.SEND_MESSAGE,
}

# Handlers that may run before the caller has a linked account.
UNAUTHENTICATED_HANDLERS = frozenset({HandlerName.SET_USERNAME})


class FailureKind(str, Enum):
    """Classes of domain failure a dispatch can end in."""

    UNAUTHENTICATED = "unauthenticated"
    UNKNOWN_HANDLER = "unknown_handler"
    COLLABORATOR_ERROR = "collaborator_error"
    VALIDATION_ERROR = "validation_error"


@dataclass(slots=True, frozen=True)
class ResolvedValue:
    """A parameter as heard (``original``) and as canonicalized (``resolved``)."""

    original: Optional[str] = None
    resolved: Any = None


@dataclass(slots=True, frozen=True)
class IntentEnvelope:
    """Normalized inbound fulfillment request."""

    handler_name: str
    intent_params: Mapping[str, ResolvedValue] = field(default_factory=dict)
    scene_slots: Mapping[str, Any] = field(default_factory=dict)
    caller_external_identity: Optional[str] = None

    def param(self, name: str) -> Optional[str]:
        """Return the resolved value for ``name`` from intent params or scene slots."""
        value = self.intent_params.get(name)
        resolved = value.resolved if value is not None else self.scene_slots.get(name)
        if resolved is None:
            return None
        text = str(resolved).strip()
        return text or None


@dataclass(slots=True, frozen=True)
class Success:
    """Handler completed; ``message`` becomes the spoken reply."""

    message: str
    side_effects: Optional[Mapping[str, Any]] = None


@dataclass(slots=True, frozen=True)
class Failure:
    """Handler or dispatcher ended in a domain failure."""

    kind: FailureKind
    message: str


ActionOutcome = Union[Success, Failure]


@dataclass(slots=True, frozen=True)
class OutgoingEnvelope:
    """Reply assembled for the assistant platform."""

    primary_text: str
    suggestion_chips: tuple[str, ...]
    side_channel_fields: Optional[Mapping[str, Any]] = None


def lookup_handler_name(name: str) -> Optional[HandlerName]:
    """Return the handler for ``name`` by exact match (or legacy alias)."""
    try:
        return HandlerName(name)
    except ValueError:
        return HANDLER_ALIASES.get(name)


__all__ = [
    "HandlerName",
    "HANDLER_ALIASES",
    "UNAUTHENTICATED_HANDLERS",
    "FailureKind",
    "ResolvedValue",
    "IntentEnvelope",
    "Success",
    "Failure",
    "ActionOutcome",
    "OutgoingEnvelope",
    "lookup_handler_name",
]
