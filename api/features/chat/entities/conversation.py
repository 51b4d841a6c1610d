"""Conversation entity: the header row of a support chat session."""
from uuid import uuid4

from sqlalchemy import Uuid
from sqlalchemy.orm import Mapped, mapped_column

from api.shared.entities.base import BaseEntity, TimestampMixin


class Conversation(TimestampMixin, BaseEntity):
    """A durable, uniquely identified chat session. Never mutated or deleted."""

    __tablename__ = "conversations"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
