from __future__ import annotations

from datetime import timedelta

import pytest

from campus_chat.domain.value_objects.enums import MessageType
from campus_chat.services import message_service
from tests.conftest import FIXED_NOW, FakeUoW, FixedClock, make_message


@pytest.fixture
def uow() -> FakeUoW:
    return FakeUoW()


def seed(uow: FakeUoW, *messages) -> None:
    uow.messages._messages.extend(messages)


@pytest.mark.asyncio
async def test_send_message_persists_unread_and_commits(uow):
    clock = FixedClock()

    msg = await message_service.send_message(1, 2, "hello", MessageType.TEXT, uow, clock=clock)

    assert msg.id == 1
    assert (msg.sender_id, msg.receiver_id, msg.content) == (1, 2, "hello")
    assert msg.type == "text"
    assert msg.is_read is False
    assert msg.created_at == clock.now()
    assert uow._committed is True


@pytest.mark.asyncio
async def test_send_media_message_keeps_urls(uow):
    msg = await message_service.send_message(
        1, 2, None, MessageType.IMAGE, uow, media_urls='["a.png"]',
    )

    assert msg.type == "image"
    assert msg.media_urls == '["a.png"]'


@pytest.mark.asyncio
async def test_chat_history_both_directions_newest_first(uow):
    seed(
        uow,
        make_message(id=1, sender_id=1, receiver_id=2, created_at=FIXED_NOW),
        make_message(id=2, sender_id=2, receiver_id=1, created_at=FIXED_NOW + timedelta(minutes=1)),
        make_message(id=3, sender_id=1, receiver_id=3, created_at=FIXED_NOW + timedelta(minutes=2)),
    )

    history = await message_service.chat_history(1, 2, 1, 50, uow)

    assert [m.id for m in history] == [2, 1]


@pytest.mark.asyncio
async def test_chat_history_marks_peer_messages_read(uow):
    seed(
        uow,
        make_message(id=1, sender_id=2, receiver_id=1),
        make_message(id=2, sender_id=1, receiver_id=2),
    )

    await message_service.chat_history(1, 2, 1, 50, uow)

    by_id = {m.id: m for m in uow.messages._messages}
    assert by_id[1].is_read is True
    assert by_id[2].is_read is False
    assert uow._committed is True


@pytest.mark.asyncio
async def test_chat_history_paginates(uow):
    seed(
        uow,
        *[
            make_message(id=i, created_at=FIXED_NOW + timedelta(minutes=i))
            for i in range(1, 6)
        ],
    )

    page2 = await message_service.chat_history(1, 2, 2, 2, uow)

    assert [m.id for m in page2] == [3, 2]


@pytest.mark.asyncio
async def test_list_conversations_groups_by_peer(uow):
    seed(
        uow,
        make_message(id=1, sender_id=2, receiver_id=1, content="old", created_at=FIXED_NOW),
        make_message(id=2, sender_id=2, receiver_id=1, content="new", created_at=FIXED_NOW + timedelta(minutes=5)),
        make_message(id=3, sender_id=1, receiver_id=3, content="yo", created_at=FIXED_NOW + timedelta(minutes=1)),
        make_message(id=4, sender_id=3, receiver_id=4, content="not mine"),
    )

    convs = await message_service.list_conversations(1, uow)

    assert [c.peer_id for c in convs] == [2, 3]
    assert convs[0].last_message == "new"
    assert convs[0].unread_count == 2
    assert convs[1].last_message == "yo"
    assert convs[1].unread_count == 0


@pytest.mark.asyncio
async def test_unread_messages_and_count(uow):
    seed(
        uow,
        make_message(id=1, sender_id=2, receiver_id=1),
        make_message(id=2, sender_id=3, receiver_id=1, is_read=True),
        make_message(id=3, sender_id=3, receiver_id=1),
    )

    unread = await message_service.unread_messages(1, uow)

    assert {m.id for m in unread} == {1, 3}
    assert await message_service.unread_count(1, uow) == 2
