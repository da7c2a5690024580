"""WebSocket frame models.

Inbound text is parsed once into ``AuthFrame | ChatFrame | UnknownFrame``.
Outbound frames serialize with the camelCase field names clients expect.
"""
from __future__ import annotations

import json
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from campus_chat.application.exceptions import MalformedFrame

AUTH_SUCCESS_TEXT = "Authentication successful"

# receiver ids are stored in a BIGINT column
MAX_USER_ID = 2**63 - 1


class AuthFrame(BaseModel):
    """Client → Server: bind this connection to the token's user."""

    type: Literal["auth"]
    token: str


class ChatFrame(BaseModel):
    """Client → Server: a direct message for another user."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["message"]
    receiver_id: int = Field(alias="receiverId", gt=0, le=MAX_USER_ID)
    content: str

    @field_validator("receiver_id", mode="before")
    @classmethod
    def _integer_or_numeric_string(cls, value: Any) -> Any:
        # bool is an int subclass and floats would be truncated by lax parsing
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            raise ValueError("receiverId must be an integer or a numeric string")
        return value


class UnknownFrame(BaseModel):
    """Any frame whose type this server does not handle."""

    model_config = ConfigDict(extra="allow")

    type: Any = None


InboundFrame = Union[AuthFrame, ChatFrame, UnknownFrame]

_FRAME_MODELS: dict[str, type[BaseModel]] = {
    "auth": AuthFrame,
    "message": ChatFrame,
}


def parse_frame(raw: str | bytes) -> InboundFrame:
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise MalformedFrame(f"invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise MalformedFrame("frame must be a JSON object")

    kind = data.get("type")
    model = _FRAME_MODELS.get(kind, UnknownFrame) if isinstance(kind, str) else UnknownFrame
    try:
        return model.model_validate(data)  # type: ignore[return-value]
    except PydanticValidationError as exc:
        raise MalformedFrame(str(exc)) from exc


class OutboundFrame(BaseModel):
    """Server → Client."""

    model_config = ConfigDict(populate_by_name=True)

    def to_text(self) -> str:
        return self.model_dump_json(by_alias=True)


class AuthSuccess(OutboundFrame):
    type: Literal["auth_success"] = "auth_success"
    message: str = AUTH_SUCCESS_TEXT


class MessageDelivery(OutboundFrame):
    type: Literal["message"] = "message"
    id: int
    sender_id: int = Field(alias="senderId")
    content: str
    timestamp: int  # epoch millis


class MessageSent(OutboundFrame):
    type: Literal["message_sent"] = "message_sent"
    message_id: int = Field(alias="messageId")
