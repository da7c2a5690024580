from __future__ import annotations

from campus_chat.application.dto.conversation import ConversationSummary
from campus_chat.application.ports.clock import Clock, SystemClock
from campus_chat.application.uow import UnitOfWork
from campus_chat.domain.entities.message import Message
from campus_chat.domain.value_objects.enums import MessageType

_default_clock = SystemClock()


async def send_message(
    sender_id: int,
    receiver_id: int,
    content: str | None,
    msg_type: MessageType,
    uow: UnitOfWork,
    *,
    media_urls: str | None = None,
    clock: Clock | None = None,
) -> Message:
    """Persist a direct message as unread and commit.

    The creation timestamp is taken here, at persistence time.
    """
    now = (clock or _default_clock).now()
    msg = await uow.messages_w.add(
        sender_id=sender_id,
        receiver_id=receiver_id,
        content=content,
        type=msg_type.value,
        media_urls=media_urls,
        created_at=now,
    )
    await uow.commit()
    return msg


async def chat_history(
    user_id: int,
    other_user_id: int,
    page: int,
    size: int,
    uow: UnitOfWork,
) -> list[Message]:
    """Return one page of the exchange and mark the peer's messages as read."""
    messages = await uow.messages.list_history(user_id, other_user_id, page=page, size=size)
    await uow.messages_w.mark_read(other_user_id, user_id)
    await uow.commit()
    return messages


async def list_conversations(user_id: int, uow: UnitOfWork) -> list[ConversationSummary]:
    messages = await uow.messages.list_for_user(user_id)

    # newest first, so the first message seen per peer is the latest one
    latest: dict[int, Message] = {}
    for msg in messages:
        latest.setdefault(msg.peer_of(user_id), msg)

    summaries: list[ConversationSummary] = []
    for peer_id, msg in latest.items():
        unread = await uow.messages.count_unread(user_id, sender_id=peer_id)
        summaries.append(
            ConversationSummary(
                peer_id=peer_id,
                last_message=msg.content,
                last_message_time=msg.created_at,
                unread_count=unread,
            )
        )
    return summaries


async def unread_messages(user_id: int, uow: UnitOfWork) -> list[Message]:
    return await uow.messages.list_unread(user_id)


async def unread_count(user_id: int, uow: UnitOfWork) -> int:
    return await uow.messages.count_unread(user_id)
