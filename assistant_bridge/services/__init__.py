"""Application service layer for fulfillment dispatch and account linking."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from assistant_bridge.core.config import Settings
from assistant_bridge.core.ports import ChatPlatformPort

if TYPE_CHECKING:  # pragma: no cover - type narrowing only
    from .identity_store import IdentityStore
    from .intent_router import IntentRouter


@dataclass(slots=True)
class ServiceContainer:
    """Aggregate of application-level services available to handlers.

    ``settings`` is the configuration snapshot every request runs against.
    """

    settings: Settings
    identity_store: Optional["IdentityStore"] = None
    chat: Optional[ChatPlatformPort] = None
    intent_router: Optional["IntentRouter"] = None


def build_default_services(
    settings: Settings,
    *,
    identity_store: Optional["IdentityStore"] = None,
    chat_port: Optional[ChatPlatformPort] = None,
) -> ServiceContainer:
    """Return a service container with every action handler registered."""

    # pylint: disable=import-outside-toplevel
    from .intent_router import IntentRouter
    from .intents import DEFAULT_HANDLERS

    return ServiceContainer(
        settings=settings,
        identity_store=identity_store,
        chat=chat_port,
        intent_router=IntentRouter(DEFAULT_HANDLERS),
    )


__all__ = ["ServiceContainer", "build_default_services"]
