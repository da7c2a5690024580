from __future__ import annotations

from campus_chat.domain.entities.message import Message
from campus_chat.infrastructure.db.models.message import MessageModel


def model_to_entity(model: MessageModel) -> Message:
    return Message(
        id=model.id,
        sender_id=model.sender_id,
        receiver_id=model.receiver_id,
        content=model.content,
        type=model.type,
        media_urls=model.media_urls,
        is_read=model.is_read,
        created_at=model.create_time,
        deleted=bool(model.deleted),
    )
