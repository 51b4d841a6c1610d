"""Chat service: one support turn from visitor message to stored reply."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from api.features.chat.entities.message import Message, Sender
from api.features.chat.exceptions import EmptyMessageError, SessionNotFoundError
from api.features.chat.history import assemble_context
from api.features.chat.repository import ConversationRepository
from api.shared.utils import normalize_uuid
from llm.reply_generator import ReplyGenerator

logger = structlog.get_logger("chat.service")


@dataclass(frozen=True)
class ChatTurnResult:
    reply: str
    session_id: str
    new_session: bool = False


class ChatService:
    """Orchestrates session resolution, persistence and reply generation."""

    def __init__(self, reply_generator: ReplyGenerator):
        self.reply_generator = reply_generator

    async def handle_message(
        self,
        *,
        message: Optional[str],
        session_id: Optional[str],
        db_session: AsyncSession,
    ) -> ChatTurnResult:
        if not message or not message.strip():
            raise EmptyMessageError()

        repository = ConversationRepository(db_session)

        new_session = False
        if not session_id:
            session_id = await repository.create_conversation()
            new_session = True
            logger.info("conversation_created", session_id=session_id)
        else:
            session_id = await self._resolve_session(repository, session_id)

        await repository.append_message(
            conversation_id=session_id, sender=Sender.USER, content=message
        )

        history = await repository.list_messages(session_id)
        context = assemble_context(history, message)

        reply = await self.reply_generator.generate(context.turns, context.prompt)

        await repository.append_message(
            conversation_id=session_id, sender=Sender.ASSISTANT, content=reply
        )
        logger.info(
            "chat_turn_completed",
            session_id=session_id,
            new_session=new_session,
            history_length=len(history) + 1,
        )
        return ChatTurnResult(reply=reply, session_id=session_id, new_session=new_session)

    async def get_history(
        self,
        *,
        session_id: str,
        db_session: AsyncSession,
    ) -> List[Message]:
        repository = ConversationRepository(db_session)
        session_id = await self._resolve_session(repository, session_id)
        return await repository.list_messages(session_id)

    @staticmethod
    async def _resolve_session(
        repository: ConversationRepository, session_id: str
    ) -> str:
        """Map any accepted UUID spelling to the stored id, or raise if unknown."""
        canonical_id = normalize_uuid(session_id)
        if canonical_id is None or not await repository.conversation_exists(canonical_id):
            raise SessionNotFoundError(session_id)
        return canonical_id
