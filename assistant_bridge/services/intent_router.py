"""Intent router and supporting request models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Callable, Mapping, MutableMapping, Optional

from assistant_bridge.core.intents import ActionOutcome, HandlerName, IntentEnvelope

if TYPE_CHECKING:  # pragma: no cover - import for static analysis only
    from . import ServiceContainer


@dataclass(slots=True, frozen=True)
class IntentRequest:
    """Authenticated handler invocation produced by the dispatcher."""

    handler: HandlerName
    envelope: IntentEnvelope
    account_id: Optional[str] = None

    def param(self, name: str) -> Optional[str]:
        """Shortcut for ``envelope.param``."""
        return self.envelope.param(name)


IntentHandler = Callable[[IntentRequest, "ServiceContainer"], Awaitable[ActionOutcome]]


class IntentRouterError(RuntimeError):
    """Base error for router failures."""


class IntentHandlerNotFoundError(IntentRouterError):
    """Raised when no handler is registered for the requested intent."""


class IntentRouter:
    """Dispatch intents to registered handlers."""

    def __init__(self, handlers: Mapping[HandlerName, IntentHandler] | None = None) -> None:
        self._handlers: MutableMapping[HandlerName, IntentHandler] = dict(handlers or {})

    def register(self, handler_name: HandlerName, handler: IntentHandler) -> None:
        """Register or replace a handler for ``handler_name``."""

        self._handlers[handler_name] = handler

    def unregister(self, handler_name: HandlerName) -> None:
        """Remove a handler if present."""

        self._handlers.pop(handler_name, None)

    def has_handler(self, handler_name: HandlerName) -> bool:
        """Return whether ``handler_name`` has a registered handler."""

        return handler_name in self._handlers

    async def dispatch(self, request: IntentRequest, services: "ServiceContainer") -> ActionOutcome:
        """Invoke the handler for ``request.handler`` with the provided services."""

        try:
            handler = self._handlers[request.handler]
        except KeyError as exc:
            raise IntentHandlerNotFoundError(
                f"No handler registered for {request.handler.value}"
            ) from exc
        return await handler(request, services)

    def handlers(self) -> Mapping[HandlerName, IntentHandler]:
        """Return a shallow copy of the current handler registry."""

        return dict(self._handlers)


__all__ = [
    "IntentRouter",
    "IntentRouterError",
    "IntentHandlerNotFoundError",
    "IntentHandler",
    "IntentRequest",
]
