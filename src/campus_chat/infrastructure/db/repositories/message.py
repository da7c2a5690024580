from __future__ import annotations

from datetime import datetime

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from campus_chat.domain.entities.message import Message
from campus_chat.infrastructure.db.mappers import message as mapper
from campus_chat.infrastructure.db.models.message import MessageModel

_NOT_DELETED = MessageModel.deleted == 0


class MessageReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_history(
        self,
        user_id: int,
        other_user_id: int,
        *,
        page: int = 1,
        size: int = 50,
    ) -> list[Message]:
        stmt = (
            select(MessageModel)
            .where(
                or_(
                    and_(MessageModel.sender_id == user_id, MessageModel.receiver_id == other_user_id),
                    and_(MessageModel.sender_id == other_user_id, MessageModel.receiver_id == user_id),
                ),
                _NOT_DELETED,
            )
            .order_by(MessageModel.create_time.desc(), MessageModel.id.desc())
            .offset((page - 1) * size)
            .limit(size)
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def list_for_user(self, user_id: int) -> list[Message]:
        stmt = (
            select(MessageModel)
            .where(
                or_(MessageModel.sender_id == user_id, MessageModel.receiver_id == user_id),
                _NOT_DELETED,
            )
            .order_by(MessageModel.create_time.desc(), MessageModel.id.desc())
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def list_unread(self, receiver_id: int) -> list[Message]:
        stmt = (
            select(MessageModel)
            .where(
                MessageModel.receiver_id == receiver_id,
                MessageModel.is_read.is_(False),
                _NOT_DELETED,
            )
            .order_by(MessageModel.create_time.desc(), MessageModel.id.desc())
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def count_unread(self, receiver_id: int, *, sender_id: int | None = None) -> int:
        stmt = (
            select(func.count())
            .select_from(MessageModel)
            .where(
                MessageModel.receiver_id == receiver_id,
                MessageModel.is_read.is_(False),
                _NOT_DELETED,
            )
        )
        if sender_id is not None:
            stmt = stmt.where(MessageModel.sender_id == sender_id)
        result = await self._session.execute(stmt)
        return int(result.scalar_one())


class MessageWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

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
        model = MessageModel(
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=content,
            type=type,
            media_urls=media_urls,
            is_read=False,
            create_time=created_at,
            deleted=0,
        )
        self._session.add(model)
        # flush to obtain the autoincrement id
        await self._session.flush()
        return mapper.model_to_entity(model)

    async def mark_read(self, sender_id: int, receiver_id: int) -> int:
        stmt = (
            update(MessageModel)
            .where(
                MessageModel.sender_id == sender_id,
                MessageModel.receiver_id == receiver_id,
                MessageModel.is_read.is_(False),
                _NOT_DELETED,
            )
            .values(is_read=True)
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0
