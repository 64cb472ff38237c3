"""Tests for core data models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from assistant_bridge.core import models
from assistant_bridge.core.intents import HandlerName, lookup_handler_name

# pylint: disable=missing-function-docstring

SAMPLE_REQUEST = {
    "handler": {"name": "send_message"},
    "intent": {
        "name": "WriteMessage",
        "params": {
            "other_user": {"original": "Bob", "resolved": "bob"},
            "message": {"original": "see you soon", "resolved": "see you soon"},
        },
        "query": "tell bob see you soon",
    },
    "scene": {
        "name": "Write",
        "slotFillingStatus": "FINAL",
        "slots": {"message": {"mode": "REQUIRED", "status": "SLOT_UNSPECIFIED", "value": "x"}},
    },
    "session": {"id": "abc", "params": {}, "languageCode": ""},
    "user": {
        "locale": "en-US",
        "params": {"username": "  alice  "},
        "accountLinkingStatus": "ACCOUNT_LINKING_STATUS_UNSPECIFIED",
        "verificationStatus": "VERIFIED",
    },
    "device": {"capabilities": ["SPEECH"]},
}


def test_fulfillment_request_parses_camel_case_and_ignores_extras() -> None:
    request = models.FulfillmentRequest.model_validate(SAMPLE_REQUEST)

    assert request.scene.slot_filling_status == "FINAL"
    assert request.user.verification_status == "VERIFIED"
    assert request.intent.params["other_user"].resolved == "bob"


def test_to_envelope_normalizes_identity_and_params() -> None:
    envelope = models.FulfillmentRequest.model_validate(SAMPLE_REQUEST).to_envelope()

    assert envelope.handler_name == "send_message"
    assert envelope.caller_external_identity == "alice"
    assert envelope.param("other_user") == "bob"
    assert envelope.param("message") == "see you soon"
    assert envelope.intent_params["other_user"].original == "Bob"


def test_intent_param_wins_over_scene_slot() -> None:
    envelope = models.FulfillmentRequest.model_validate(SAMPLE_REQUEST).to_envelope()

    assert envelope.scene_slots["message"] == "x"
    assert envelope.param("message") == "see you soon"


def test_handler_name_falls_back_to_intent_name() -> None:
    payload = {"intent": {"name": "get_status"}}

    envelope = models.FulfillmentRequest.model_validate(payload).to_envelope()

    assert envelope.handler_name == "get_status"
    assert envelope.caller_external_identity is None


def test_empty_request_has_no_handler_name() -> None:
    envelope = models.FulfillmentRequest.model_validate({}).to_envelope()

    assert envelope.handler_name == ""


def test_wrong_shape_is_rejected() -> None:
    with pytest.raises(ValidationError):
        models.FulfillmentRequest.model_validate({"intent": {"params": "nope"}})


@pytest.mark.parametrize(
    "name, expected",
    [
        ("change_status", HandlerName.CHANGE_STATUS),
        ("send_dm", HandlerName.SEND_MESSAGE),
        ("CHANGE_STATUS", None),
        ("nonexistent_handler_xyz", None),
    ],
)
def test_lookup_handler_name_is_exact(name: str, expected: HandlerName | None) -> None:
    assert lookup_handler_name(name) is expected


def test_chat_models_ignore_unknown_fields() -> None:
    post = models.Post.model_validate(
        {"id": "p1", "user_id": "u1", "message": "hi", "props": {}, "create_at": 1}
    )
    channel = models.Channel.model_validate({"id": "c1", "type": "D", "display_name": ""})

    assert post.message == "hi"
    assert channel.type == models.DIRECT_CHANNEL_TYPE


def test_null_intent_param_is_treated_as_missing() -> None:
    payload = {"handler": {"name": "change_status"}, "intent": {"params": {"status": None}}}

    envelope = models.FulfillmentRequest.model_validate(payload).to_envelope()

    assert "status" not in envelope.intent_params
    assert envelope.param("status") is None
