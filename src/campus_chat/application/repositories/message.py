from __future__ import annotations

from datetime import datetime
from typing import Protocol

from campus_chat.domain.entities.message import Message


class MessageReader(Protocol):
    async def list_history(
        self,
        user_id: int,
        other_user_id: int,
        *,
        page: int = 1,
        size: int = 50,
    ) -> list[Message]:
        """Messages exchanged between two users in either direction, newest first."""
        ...

    async def list_for_user(self, user_id: int) -> list[Message]:
        """Every message the user sent or received, newest first."""
        ...

    async def list_unread(self, receiver_id: int) -> list[Message]: ...

    async def count_unread(self, receiver_id: int, *, sender_id: int | None = None) -> int: ...


class MessageWriter(Protocol):
    async def add(
        self,
        *,
        sender_id: int,
        receiver_id: int,
        content: str | None,
        type: str,
        media_urls: str | None,
        created_at: datetime,
    ) -> Message:
        """Insert an unread message and return it with its assigned id."""
        ...

    async def mark_read(self, sender_id: int, receiver_id: int) -> int:
        """Flag unread messages from sender to receiver as read. Returns affected rows."""
        ...
