"""Conversation store: conversation headers and their append-only message log.

Every operation commits on its own. A chat turn spans several of them and is
not wrapped in one transaction.
"""
from __future__ import annotations

from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from api.features.chat.entities.conversation import Conversation
from api.features.chat.entities.message import Message, Sender
from api.features.chat.exceptions import ForeignKeyViolation
from api.shared.base import BaseRepository
from api.shared.utils import is_valid_uuid


class ConversationRepository(BaseRepository[Conversation]):
    """Persistence for conversations and their messages."""

    model = Conversation

    async def create_conversation(self) -> str:
        conversation = await self.create(Conversation())
        return conversation.id

    async def conversation_exists(self, conversation_id: str) -> bool:
        # A malformed id cannot be a primary key, and PostgreSQL would reject the cast
        if not is_valid_uuid(conversation_id):
            return False
        return await self.exists(conversation_id)

    async def append_message(
        self,
        *,
        conversation_id: str,
        sender: Sender | str,
        content: str,
    ) -> Message:
        sender = Sender(sender)
        if not is_valid_uuid(conversation_id):
            raise ForeignKeyViolation(conversation_id)
        message = Message(
            conversation_id=conversation_id,
            sender=sender.value,
            content=content,
        )
        self.session.add(message)
        try:
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            raise ForeignKeyViolation(
                conversation_id, {"reason": str(e.orig)}
            ) from e
        await self.session.commit()
        return message

    async def list_messages(self, conversation_id: str) -> List[Message]:
        stmt = (
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at.asc(), Message.id.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
