from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from campus_chat.application.dto.conversation import ConversationSummary
from campus_chat.domain.entities.message import Message
from campus_chat.domain.value_objects.enums import MessageType


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys, as the mobile client does."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SendMessageRequest(CamelModel):
    receiver_id: int = Field(gt=0, le=2**63 - 1)
    content: str | None = None
    type: MessageType = MessageType.TEXT
    media_urls: str | None = None


class MessageResponse(CamelModel):
    id: int
    sender_id: int
    receiver_id: int
    content: str | None
    type: str
    media_urls: str | None
    is_read: bool
    create_time: datetime

    @classmethod
    def from_entity(cls, msg: Message) -> MessageResponse:
        return cls(
            id=msg.id,
            sender_id=msg.sender_id,
            receiver_id=msg.receiver_id,
            content=msg.content,
            type=msg.type,
            media_urls=msg.media_urls,
            is_read=msg.is_read,
            create_time=msg.created_at,
        )


class ConversationResponse(CamelModel):
    user_id: int
    last_message: str | None
    last_message_time: datetime
    unread_count: int

    @classmethod
    def from_summary(cls, summary: ConversationSummary) -> ConversationResponse:
        return cls(
            user_id=summary.peer_id,
            last_message=summary.last_message,
            last_message_time=summary.last_message_time,
            unread_count=summary.unread_count,
        )
