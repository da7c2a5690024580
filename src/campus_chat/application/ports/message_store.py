from __future__ import annotations

from typing import Protocol

from campus_chat.domain.entities.message import Message
from campus_chat.domain.value_objects.enums import MessageType


class MessageStore(Protocol):
    """Durable sink used by the chat relay before any delivery happens."""

    async def save(
        self,
        sender_id: int,
        receiver_id: int,
        content: str,
        kind: MessageType,
    ) -> Message: ...
