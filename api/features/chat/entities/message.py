"""Message entity: one immutable turn of a conversation."""
from enum import Enum

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from api.shared.entities.base import BaseEntity, TimestampMixin


class Sender(str, Enum):
    """Who wrote a message. The assistant is stored as ``ai``, which is what the widget renders."""
    USER = "user"
    ASSISTANT = "ai"


class Message(TimestampMixin, BaseEntity):
    """A single user or assistant turn, ordered by ``(created_at, id)``."""

    __tablename__ = "messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    conversation_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("conversations.id", name="fk_messages_conversation_id"),
        nullable=False,
    )
    sender: Mapped[str] = mapped_column(String(10), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (
        CheckConstraint("sender IN ('user', 'ai')", name="ck_messages_sender"),
        Index("ix_messages_conversation_id_created_at", "conversation_id", "created_at"),
    )
