"""Assemble outgoing envelopes for the assistant platform."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from assistant_bridge.core.intents import ActionOutcome, OutgoingEnvelope, Success

SUGGESTION_CHIPS: tuple[str, ...] = (
    "Change status to away",
    "Status Report",
    "Read messages",
    "Write message",
)


def build_response(
    primary_text: str,
    side_channel_fields: Optional[Mapping[str, Any]] = None,
) -> OutgoingEnvelope:
    """Return an envelope carrying ``primary_text`` and the fixed suggestion chips."""
    return OutgoingEnvelope(
        primary_text=primary_text,
        suggestion_chips=SUGGESTION_CHIPS,
        side_channel_fields=dict(side_channel_fields) if side_channel_fields else None,
    )


def build_from_outcome(outcome: ActionOutcome) -> OutgoingEnvelope:
    """Map a handler outcome onto an envelope; failures become their apology text."""
    if isinstance(outcome, Success):
        return build_response(outcome.message, outcome.side_effects)
    return build_response(outcome.message)


__all__ = ["SUGGESTION_CHIPS", "build_response", "build_from_outcome"]
