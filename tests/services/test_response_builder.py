"""Tests for outgoing envelope assembly."""

# pylint: disable=missing-function-docstring

from __future__ import annotations

from assistant_bridge.core.intents import Failure, FailureKind, Success
from assistant_bridge.core.models import FulfillmentResponse
from assistant_bridge.services.response_builder import (
    SUGGESTION_CHIPS,
    build_from_outcome,
    build_response,
)


def test_build_response_attaches_fixed_chips() -> None:
    envelope = build_response("Hello")

    assert envelope.primary_text == "Hello"
    assert envelope.suggestion_chips == SUGGESTION_CHIPS
    assert envelope.side_channel_fields is None


def test_empty_side_channel_is_dropped() -> None:
    assert build_response("Hello", {}).side_channel_fields is None


def test_success_side_effects_become_side_channel_fields() -> None:
    envelope = build_from_outcome(Success("Got it.", side_effects={"username": "alice"}))

    assert envelope.side_channel_fields == {"username": "alice"}


def test_failure_message_becomes_primary_text() -> None:
    envelope = build_from_outcome(Failure(FailureKind.VALIDATION_ERROR, "Sorry."))

    assert envelope.primary_text == "Sorry."
    assert envelope.suggestion_chips == SUGGESTION_CHIPS


def test_wire_shape_uses_camel_case_and_omits_user_without_side_channel() -> None:
    wire = FulfillmentResponse.from_envelope(build_response("Status Report")).to_wire()

    assert wire == {
        "prompt": {
            "override": False,
            "lastSimple": {"speech": "Status Report", "text": "Status Report"},
            "suggestions": [{"title": chip} for chip in SUGGESTION_CHIPS],
        }
    }


def test_wire_shape_carries_user_params() -> None:
    wire = FulfillmentResponse.from_envelope(build_response("ok", {"username": "bob"})).to_wire()

    assert wire["user"] == {"params": {"username": "bob"}}
