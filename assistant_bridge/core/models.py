"""Core data transfer objects shared across layers.

The fulfillment models mirror the Actions Builder webhook schema closely
enough to round-trip the fields this service reads and writes; everything
else in the payload is ignored.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from assistant_bridge.core.intents import IntentEnvelope, OutgoingEnvelope, ResolvedValue


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class HandlerInfo(_WireModel):
    """Webhook handler selected by the Actions project."""

    name: Optional[str] = None


class IntentParameterValue(_WireModel):
    """Intent parameter value as matched by the assistant."""

    original: Optional[str] = None
    resolved: Any = None


class IntentInfo(_WireModel):
    """Matched intent with its parameters."""

    name: Optional[str] = None
    params: dict[str, Optional[IntentParameterValue]] = Field(default_factory=dict)
    query: Optional[str] = None


class SlotValue(_WireModel):
    """Scene slot state."""

    mode: Optional[str] = None
    status: Optional[str] = None
    updated: Optional[bool] = None
    value: Any = None


class SceneInfo(_WireModel):
    """Current scene and its slot-filling state."""

    name: Optional[str] = None
    slot_filling_status: Optional[str] = None
    slots: dict[str, SlotValue] = Field(default_factory=dict)


class SessionInfo(_WireModel):
    """Conversation session metadata."""

    id: Optional[str] = None
    params: dict[str, Any] = Field(default_factory=dict)
    language_code: Optional[str] = None


class UserInfo(_WireModel):
    """User storage and verification state kept by the assistant platform."""

    locale: Optional[str] = None
    params: dict[str, Any] = Field(default_factory=dict)
    account_linking_status: Optional[str] = None
    verification_status: Optional[str] = None
    last_seen_time: Optional[str] = None


class FulfillmentRequest(_WireModel):
    """Inbound webhook body."""

    handler: HandlerInfo = Field(default_factory=HandlerInfo)
    intent: IntentInfo = Field(default_factory=IntentInfo)
    scene: SceneInfo = Field(default_factory=SceneInfo)
    session: SessionInfo = Field(default_factory=SessionInfo)
    user: UserInfo = Field(default_factory=UserInfo)

    def to_envelope(self) -> IntentEnvelope:
        """Collapse the wire request into the dispatcher's envelope."""
        handler_name = (self.handler.name or self.intent.name or "").strip()
        username = self.user.params.get("username")
        caller = username.strip() if isinstance(username, str) else None
        return IntentEnvelope(
            handler_name=handler_name,
            intent_params={
                name: ResolvedValue(original=value.original, resolved=value.resolved)
                for name, value in self.intent.params.items()
                if value is not None
            },
            scene_slots={name: slot.value for name, slot in self.scene.slots.items()},
            caller_external_identity=caller or None,
        )


class SimplePrompt(_WireModel):
    """Speech plus display text."""

    speech: Optional[str] = None
    text: Optional[str] = None


class Suggestion(_WireModel):
    """Suggestion chip."""

    title: str


class Prompt(_WireModel):
    """Prompt returned to the assistant."""

    override: bool = False
    last_simple: Optional[SimplePrompt] = None
    suggestions: List[Suggestion] = Field(default_factory=list)


class UserUpdate(_WireModel):
    """User storage values to persist on the assistant side."""

    params: dict[str, Any] = Field(default_factory=dict)


class FulfillmentResponse(_WireModel):
    """Outbound webhook body."""

    prompt: Prompt
    user: Optional[UserUpdate] = None

    @classmethod
    def from_envelope(cls, envelope: OutgoingEnvelope) -> "FulfillmentResponse":
        """Map an outgoing envelope onto the assistant wire schema."""
        user = None
        if envelope.side_channel_fields:
            user = UserUpdate(params=dict(envelope.side_channel_fields))
        return cls(
            prompt=Prompt(
                last_simple=SimplePrompt(
                    speech=envelope.primary_text,
                    text=envelope.primary_text,
                ),
                suggestions=[Suggestion(title=chip) for chip in envelope.suggestion_chips],
            ),
            user=user,
        )

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON-ready body using the platform's camelCase keys."""
        return self.model_dump(by_alias=True, exclude_none=True)


class _ChatModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ChatUser(_ChatModel):
    """Account in the chat platform directory."""

    id: str
    username: str = ""


class Team(_ChatModel):
    """Workspace metadata."""

    id: str
    name: str = ""
    display_name: str = ""


class TeamUnread(_ChatModel):
    """Unread counters for one workspace."""

    team_id: str
    msg_count: int = 0
    mention_count: int = 0


class ChannelMembership(_ChatModel):
    """A user's membership and unread counters in one channel."""

    channel_id: str
    user_id: str = ""
    msg_count: int = 0
    mention_count: int = 0


class Channel(_ChatModel):
    """Channel metadata; ``type`` is ``D`` for direct-message channels."""

    id: str
    type: str = ""
    team_id: str = ""


class Post(_ChatModel):
    """Single message in a channel."""

    id: str
    user_id: str = ""
    channel_id: str = ""
    message: str = ""
    create_at: int = 0


DIRECT_CHANNEL_TYPE = "D"


__all__ = [
    "FulfillmentRequest",
    "FulfillmentResponse",
    "HandlerInfo",
    "IntentInfo",
    "IntentParameterValue",
    "SceneInfo",
    "SlotValue",
    "SessionInfo",
    "UserInfo",
    "Prompt",
    "SimplePrompt",
    "Suggestion",
    "UserUpdate",
    "ChatUser",
    "Team",
    "TeamUnread",
    "ChannelMembership",
    "Channel",
    "Post",
    "DIRECT_CHANNEL_TYPE",
]
