"""Shared test fixtures."""
from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from campus_chat.application.exceptions import DispatchFailure
from campus_chat.config import settings
from campus_chat.domain.entities.message import Message
from campus_chat.domain.value_objects.enums import MessageType
from campus_chat.infrastructure.auth.hs256_verifier import HS256Verifier
from campus_chat.infrastructure.ws.directory import ConnectionDirectory

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def verifier() -> HS256Verifier:
    return HS256Verifier(settings.JWT_SECRET, settings.JWT_ALGORITHM)


@pytest.fixture
def directory() -> ConnectionDirectory:
    return ConnectionDirectory()


def make_token(user_id: int, username: str | None = None) -> str:
    return HS256Verifier(settings.JWT_SECRET, settings.JWT_ALGORITHM).issue(
        user_id, username or f"user{user_id}",
    )


def make_message(
    *,
    id: int = 1,
    sender_id: int = 1,
    receiver_id: int = 2,
    content: str = "hello",
    is_read: bool = False,
    created_at: datetime | None = None,
) -> Message:
    return Message(
        id=id,
        sender_id=sender_id,
        receiver_id=receiver_id,
        content=content,
        type=MessageType.TEXT,
        media_urls=None,
        is_read=is_read,
        created_at=created_at or FIXED_NOW,
    )


@dataclass
class FixedClock:
    current: datetime = FIXED_NOW

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


@dataclass(eq=False)
class FakeConnection:
    """In-memory connection handle recording every frame written to it."""

    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    user_id: int | None = None
    open: bool = True
    accepted: bool = False
    fail_sends: bool = False
    close_code: int | None = None
    sent: list[str] = field(default_factory=list)

    @property
    def is_open(self) -> bool:
        return self.open

    @property
    def frames(self) -> list[dict[str, Any]]:
        return [json.loads(raw) for raw in self.sent]

    async def accept(self) -> None:
        self.accepted = True

    async def send_text(self, raw: str) -> None:
        if self.fail_sends:
            raise DispatchFailure(f"transport of {self.session_id} is gone")
        self.sent.append(raw)

    async def close(self, code: int = 1000, reason: str | None = None) -> None:
        self.open = False
        self.close_code = code


@dataclass
class FakeMessageStore:
    """MessageStore that keeps rows in a list and can be told to fail."""

    messages: list[Message] = field(default_factory=list)
    fail_with: Exception | None = None
    clock: FixedClock = field(default_factory=FixedClock)

    async def save(
        self,
        sender_id: int,
        receiver_id: int,
        content: str,
        kind: MessageType,
    ) -> Message:
        if self.fail_with is not None:
            raise self.fail_with
        msg = Message(
            id=len(self.messages) + 1,
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=content,
            type=kind.value,
            media_urls=None,
            is_read=False,
            created_at=self.clock.now(),
        )
        self.messages.append(msg)
        return msg


@dataclass
class FakeMessageReader:
    _messages: list[Message] = field(default_factory=list)

    def _live(self) -> list[Message]:
        rows = [m for m in self._messages if not m.deleted]
        return sorted(rows, key=lambda m: (m.created_at, m.id), reverse=True)

    async def list_history(
        self,
        user_id: int,
        other_user_id: int,
        *,
        page: int = 1,
        size: int = 50,
    ) -> list[Message]:
        pair = {(user_id, other_user_id), (other_user_id, user_id)}
        rows = [m for m in self._live() if (m.sender_id, m.receiver_id) in pair]
        start = (page - 1) * size
        return rows[start:start + size]

    async def list_for_user(self, user_id: int) -> list[Message]:
        return [m for m in self._live() if user_id in (m.sender_id, m.receiver_id)]

    async def list_unread(self, receiver_id: int) -> list[Message]:
        return [m for m in self._live() if m.receiver_id == receiver_id and not m.is_read]

    async def count_unread(self, receiver_id: int, *, sender_id: int | None = None) -> int:
        return sum(
            1
            for m in await self.list_unread(receiver_id)
            if sender_id is None or m.sender_id == sender_id
        )


@dataclass
class FakeMessageWriter:
    _reader: FakeMessageReader

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
        msg = Message(
            id=len(self._reader._messages) + 1,
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=content,
            type=type,
            media_urls=media_urls,
            is_read=False,
            created_at=created_at,
        )
        self._reader._messages.append(msg)
        return msg

    async def mark_read(self, sender_id: int, receiver_id: int) -> int:
        updated = 0
        for i, m in enumerate(self._reader._messages):
            if m.sender_id == sender_id and m.receiver_id == receiver_id and not m.is_read:
                self._reader._messages[i] = replace(m, is_read=True)
                updated += 1
        return updated


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests."""
    messages: FakeMessageReader = field(default_factory=FakeMessageReader)
    messages_w: FakeMessageWriter | None = None
    _committed: bool = False

    def __post_init__(self) -> None:
        if self.messages_w is None:
            self.messages_w = FakeMessageWriter(self.messages)

    async def flush(self) -> None:
        pass

    async def commit(self) -> None:
        self._committed = True

    async def rollback(self) -> None:
        pass
