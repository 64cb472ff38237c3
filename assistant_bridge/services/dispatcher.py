"""Fulfillment dispatcher: validate, authenticate, route, and complete a request.

A request moves through ``RECEIVED -> VALIDATED -> AUTHENTICATED -> ROUTED ->
COMPLETED``. An envelope without a handler name is rejected outright
(``EnvelopeRejectedError``); every other failure is soft and still yields a
speakable reply, because the assistant expects a well-formed conversational
turn on every request.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from assistant_bridge.core.exceptions import (
    EnvelopeRejectedError,
    NotLinkedError,
    StorageError,
)
from assistant_bridge.core.identifiers import get_log_safe_identity
from assistant_bridge.core.intents import (
    UNAUTHENTICATED_HANDLERS,
    ActionOutcome,
    Failure,
    FailureKind,
    IntentEnvelope,
    OutgoingEnvelope,
    lookup_handler_name,
)
from assistant_bridge.core.logging import get_logger, log_identity_context
from assistant_bridge.services import ServiceContainer
from assistant_bridge.services.identity_store import IdentityStore
from assistant_bridge.services.intent_router import IntentRequest, IntentRouter
from assistant_bridge.services.response_builder import build_from_outcome

logger = get_logger(__name__)

USERNAME_NOT_SET_MESSAGE = (
    "Sorry, you didn't set your username. Tell me your Mattermost username first."
)
INTEGRATION_NOT_ENABLED_MESSAGE = (
    "Sorry, you didn't enable the integration. "
    "Run /assistant connect with your username in Mattermost first."
)
UNKNOWN_HANDLER_MESSAGE = "Sorry, don't know what to do!"
IDENTITY_LOOKUP_FAILED_MESSAGE = "Sorry, I couldn't look up your account right now."
HANDLER_CRASHED_MESSAGE = "Sorry, something went wrong. Please try again later."


class DispatchState(str, Enum):
    """Stages of a single dispatch."""

    RECEIVED = "received"
    VALIDATED = "validated"
    AUTHENTICATED = "authenticated"
    ROUTED = "routed"
    COMPLETED = "completed"
    REJECTED = "rejected"


@dataclass(slots=True, frozen=True)
class DispatchResult:
    """Terminal state, handler outcome, and the reply to send back."""

    state: DispatchState
    outcome: ActionOutcome
    response: OutgoingEnvelope


class IntentDispatcher:
    """Route normalized envelopes to action handlers."""

    def __init__(self, services: ServiceContainer) -> None:
        self._services = services

    @property
    def _identity_store(self) -> IdentityStore:
        store = self._services.identity_store
        if store is None:
            raise RuntimeError("IdentityStore has not been configured.")
        return store

    @property
    def _router(self) -> IntentRouter:
        router = self._services.intent_router
        if router is None:
            raise RuntimeError("IntentRouter has not been configured.")
        return router

    async def dispatch(self, envelope: IntentEnvelope) -> DispatchResult:
        """Run ``envelope`` through the state machine and build the reply."""
        if not envelope.handler_name:
            raise EnvelopeRejectedError("request carries no handler name")
        log_identity = get_log_safe_identity(
            envelope.caller_external_identity,
            secret=self._services.settings.LOG_PSEUDONYM_SECRET,
        )
        with log_identity_context(log_identity):
            return await self._dispatch_validated(envelope)

    async def _dispatch_validated(self, envelope: IntentEnvelope) -> DispatchResult:
        handler = lookup_handler_name(envelope.handler_name)
        account_id: Optional[str] = None
        if handler not in UNAUTHENTICATED_HANDLERS:
            authenticated = self._authenticate(envelope.caller_external_identity)
            if isinstance(authenticated, Failure):
                return _finish(DispatchState.REJECTED, authenticated)
            account_id = authenticated

        if handler is None or not self._router.has_handler(handler):
            logger.info("no handler for %r", envelope.handler_name)
            return _finish(
                DispatchState.REJECTED,
                Failure(FailureKind.UNKNOWN_HANDLER, UNKNOWN_HANDLER_MESSAGE),
            )

        request = IntentRequest(handler=handler, envelope=envelope, account_id=account_id)
        logger.info("dispatching %s", handler.value)
        try:
            outcome = await self._router.dispatch(request, self._services)
        except Exception:  # pylint: disable=broad-except
            logger.error("Unhandled error in handler %s", handler.value, exc_info=True)
            outcome = Failure(FailureKind.COLLABORATOR_ERROR, HANDLER_CRASHED_MESSAGE)
        if isinstance(outcome, Failure):
            logger.info("handler %s failed softly: %s", handler.value, outcome.kind.value)
        return _finish(DispatchState.COMPLETED, outcome)

    def _authenticate(self, external_identity: Optional[str]) -> Union[str, Failure]:
        if not external_identity:
            return Failure(FailureKind.UNAUTHENTICATED, USERNAME_NOT_SET_MESSAGE)
        try:
            return self._identity_store.resolve(external_identity)
        except NotLinkedError:
            logger.info("caller has not linked an account")
            return Failure(FailureKind.UNAUTHENTICATED, INTEGRATION_NOT_ENABLED_MESSAGE)
        except StorageError as exc:
            logger.error("identity lookup failed: %s", exc)
            return Failure(FailureKind.COLLABORATOR_ERROR, IDENTITY_LOOKUP_FAILED_MESSAGE)


def _finish(state: DispatchState, outcome: ActionOutcome) -> DispatchResult:
    return DispatchResult(state=state, outcome=outcome, response=build_from_outcome(outcome))


__all__ = [
    "IntentDispatcher",
    "DispatchResult",
    "DispatchState",
    "USERNAME_NOT_SET_MESSAGE",
    "INTEGRATION_NOT_ENABLED_MESSAGE",
    "UNKNOWN_HANDLER_MESSAGE",
    "IDENTITY_LOOKUP_FAILED_MESSAGE",
    "HANDLER_CRASHED_MESSAGE",
]
