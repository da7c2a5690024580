from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from campus_chat.application.ports.clock import Clock
from campus_chat.domain.entities.message import Message
from campus_chat.domain.value_objects.enums import MessageType
from campus_chat.infrastructure.db.uow import SqlAlchemyUoW
from campus_chat.services import message_service


class SqlAlchemyMessageStore:
    """Implements application.ports.message_store.MessageStore.

    Every save runs in its own session and commits before returning, so a
    message is durable before the relay attempts delivery.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        clock: Clock | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock

    async def save(
        self,
        sender_id: int,
        receiver_id: int,
        content: str,
        kind: MessageType,
    ) -> Message:
        async with self._session_factory() as session:
            async with SqlAlchemyUoW(session) as uow:
                return await message_service.send_message(
                    sender_id, receiver_id, content, kind, uow, clock=self._clock,
                )
