"""Controller for the Chat feature."""
import logging

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from api.features.chat.dtos import (
    ChatRequest,
    ChatResponse,
    HistoryResponse,
    MessageDTO,
)
from api.features.chat.exceptions import EmptyMessageError, SessionNotFoundError
from api.features.chat.service import ChatService

logger = logging.getLogger("chat.api")

EMPTY_MESSAGE_DETAIL = "Message cannot be empty"
SESSION_NOT_FOUND_DETAIL = "Session not found"
INTERNAL_ERROR_DETAIL = "Internal Server Error"


class ChatController:
    """Controller mapping chat operations to HTTP outcomes."""

    def __init__(self, chat_service: ChatService):
        self.chat_service = chat_service

    async def send_message(
        self, request: ChatRequest, db_session: AsyncSession
    ) -> ChatResponse:
        try:
            result = await self.chat_service.handle_message(
                message=request.message,
                session_id=request.session_id,
                db_session=db_session,
            )
            return ChatResponse(reply=result.reply, sessionId=result.session_id)

        except EmptyMessageError as e:
            logger.info(f"Rejected chat message: {e.message}")
            raise HTTPException(status_code=400, detail=EMPTY_MESSAGE_DETAIL)
        except SessionNotFoundError as e:
            logger.warning(f"Chat session not found: {e.message}")
            raise HTTPException(status_code=404, detail=SESSION_NOT_FOUND_DETAIL)
        except Exception:
            logger.exception("Chat Error")
            raise HTTPException(status_code=500, detail=INTERNAL_ERROR_DETAIL)

    async def get_history(
        self, session_id: str, db_session: AsyncSession
    ) -> HistoryResponse:
        try:
            messages = await self.chat_service.get_history(
                session_id=session_id, db_session=db_session
            )
            return HistoryResponse(
                messages=[MessageDTO.model_validate(m) for m in messages]
            )

        except SessionNotFoundError as e:
            logger.warning(f"History requested for unknown session: {e.message}")
            raise HTTPException(status_code=404, detail=SESSION_NOT_FOUND_DETAIL)
        except Exception:
            logger.exception("History Error")
            raise HTTPException(status_code=500, detail=INTERNAL_ERROR_DETAIL)
