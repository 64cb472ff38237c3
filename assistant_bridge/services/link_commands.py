"""The ``/assistant connect|disconnect`` command that manages account links."""

from __future__ import annotations

from dataclasses import dataclass

from assistant_bridge.core.exceptions import (
    AlreadyLinkedError,
    IdentityNotFoundError,
    StorageError,
)
from assistant_bridge.core.logging import get_logger
from assistant_bridge.services.identity_store import IdentityStore

logger = get_logger(__name__)

COMMAND_TRIGGER = "assistant"
EPHEMERAL = "ephemeral"

HELP_TEXT = "Only connect/disconnect commands are supported!"
CONNECT_SYNTAX = "Syntax: /assistant connect <your assistant username>"
CONNECTED = "Connected!"
DISCONNECTED = "Disconnected!"
ALREADY_LINKED = "That username is already connected to another Mattermost account."
NOT_CONNECTED = "You are not connected."
STORAGE_FAILURE = "Sorry, the account link could not be updated. Please try again later."


@dataclass(slots=True, frozen=True)
class CommandResponse:
    """Slash command reply shown only to the invoking user."""

    text: str
    response_type: str = EPHEMERAL

    def to_wire(self) -> dict[str, str]:
        """Return the JSON body Mattermost expects from a slash command."""
        return {"response_type": self.response_type, "text": self.text}


def connect(store: IdentityStore, account_id: str, username: str) -> CommandResponse:
    """Link ``username`` to the invoking account."""
    try:
        store.link(username, account_id)
    except AlreadyLinkedError:
        return CommandResponse(ALREADY_LINKED)
    except StorageError as exc:
        logger.error("connect failed for account %s: %s", account_id, exc)
        return CommandResponse(STORAGE_FAILURE)
    return CommandResponse(CONNECTED)


def disconnect(store: IdentityStore, account_id: str) -> CommandResponse:
    """Remove whichever username is linked to the invoking account."""
    try:
        username = store.resolve_by_account_id(account_id)
        store.unlink(username)
    except IdentityNotFoundError:
        return CommandResponse(NOT_CONNECTED)
    except StorageError as exc:
        logger.error("disconnect failed for account %s: %s", account_id, exc)
        return CommandResponse(STORAGE_FAILURE)
    return CommandResponse(DISCONNECTED)


def execute_command(store: IdentityStore, account_id: str, command_text: str) -> CommandResponse:
    """Run ``/assistant <args>`` for ``account_id``.

    ``command_text`` may include the leading trigger (``/assistant connect x``)
    or just the arguments (``connect x``), matching what Mattermost sends as
    ``command`` and ``text`` respectively.
    """
    parts = command_text.split()
    if parts and parts[0].lstrip("/") == COMMAND_TRIGGER:
        parts = parts[1:]
    if not parts:
        return CommandResponse(HELP_TEXT)
    action, args = parts[0].lower(), parts[1:]
    if action == "connect":
        if len(args) != 1:
            return CommandResponse(CONNECT_SYNTAX)
        return connect(store, account_id, args[0])
    if action == "disconnect":
        return disconnect(store, account_id)
    return CommandResponse(HELP_TEXT)


__all__ = [
    "CommandResponse",
    "COMMAND_TRIGGER",
    "connect",
    "disconnect",
    "execute_command",
]
