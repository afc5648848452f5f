"""Chat widget endpoints."""
from __future__ import annotations

import logging
from typing import Annotated, List, Optional, Union

from fastapi import APIRouter, Depends, Query, status

from ..dependencies import get_chat_service, get_storage
from ..schemas import ChatExchange, ChatMessage, ChatMessageCreate
from ..services.chat import ChatService
from ..services.storage import Storage
from .errors import failure_message

LOGGER = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chat", tags=["chat"])


@router.post(
    "",
    response_model=Union[ChatExchange, ChatMessage],
    status_code=status.HTTP_201_CREATED,
)
async def post_chat_message(
    payload: ChatMessageCreate,
    storage: Storage = Depends(get_storage),
    chat: ChatService = Depends(get_chat_service),
) -> ChatExchange | ChatMessage:
    """Persist a message; user turns also get a persisted assistant reply.

    The stored conversation already contains the new turn when the prompt is
    built, so it is not appended a second time.
    """

    with failure_message("Failed to process chat message"):
        message = storage.create_chat_message(payload)
        if payload.role != "user":
            return message

        history = storage.list_chat_messages(payload.user_id)
        reply = await chat.reply(history)
        assistant = storage.create_chat_message(
            ChatMessageCreate(content=reply, role="assistant", user_id=payload.user_id)
        )
        LOGGER.info("Stored chat exchange %d/%d", message.id, assistant.id)
        return ChatExchange(user_message=message, assistant_message=assistant)


@router.get("/history", response_model=List[ChatMessage])
def get_chat_history(
    user_id: Annotated[Optional[int], Query(alias="userId")] = None,
    storage: Storage = Depends(get_storage),
) -> list[ChatMessage]:
    with failure_message("Failed to fetch chat history"):
        return storage.list_chat_messages(user_id)


__all__ = ["router"]
