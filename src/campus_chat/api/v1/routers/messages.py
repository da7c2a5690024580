from __future__ import annotations

from fastapi import APIRouter, Query

from campus_chat.api.deps import CurrentPrincipal, UoWDep
from campus_chat.api.v1.schemas.message import (
    ConversationResponse,
    MessageResponse,
    SendMessageRequest,
)
from campus_chat.services import message_service

router = APIRouter(prefix="/api/messages", tags=["messages"])


@router.get("/conversations", response_model=list[ConversationResponse])
async def list_conversations(
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> list[ConversationResponse]:
    summaries = await message_service.list_conversations(principal.user_id, uow)
    return [ConversationResponse.from_summary(s) for s in summaries]


@router.get("/history/{other_user_id}", response_model=list[MessageResponse])
async def chat_history(
    other_user_id: int,
    principal: CurrentPrincipal,
    uow: UoWDep,
    page: int = Query(1, ge=1),
    size: int = Query(50, ge=1, le=200),
) -> list[MessageResponse]:
    messages = await message_service.chat_history(
        principal.user_id, other_user_id, page, size, uow,
    )
    return [MessageResponse.from_entity(m) for m in messages]


@router.post("/send", response_model=MessageResponse, status_code=201)
async def send_message(
    body: SendMessageRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> MessageResponse:
    msg = await message_service.send_message(
        principal.user_id,
        body.receiver_id,
        body.content,
        body.type,
        uow,
        media_urls=body.media_urls,
    )
    return MessageResponse.from_entity(msg)


@router.get("/unread", response_model=list[MessageResponse])
async def unread_messages(
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> list[MessageResponse]:
    messages = await message_service.unread_messages(principal.user_id, uow)
    return [MessageResponse.from_entity(m) for m in messages]


@router.get("/unread/count")
async def unread_count(principal: CurrentPrincipal, uow: UoWDep) -> dict[str, int]:
    count = await message_service.unread_count(principal.user_id, uow)
    return {"count": count}
