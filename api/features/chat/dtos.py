"""DTOs for the Chat feature.

Field aliases keep the widget's camelCase wire format (``sessionId``).
"""
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from api.shared.dtos import BaseDTO


class ChatRequest(BaseDTO):
    """A visitor message, optionally continuing an existing session."""

    # Optional so that a missing message is reported as empty, not as a schema error
    message: Optional[str] = Field(default=None, description="Visitor message text")
    session_id: Optional[str] = Field(
        default=None, alias="sessionId", description="Existing conversation id"
    )


class ChatResponse(BaseDTO):
    """Assistant reply for one turn."""

    reply: str = Field(description="Assistant reply text")
    session_id: str = Field(alias="sessionId", description="Conversation id")


class MessageDTO(BaseDTO):
    """Stored conversation message."""

    id: int = Field(description="Message identifier")
    conversation_id: str = Field(description="Conversation identifier")
    sender: str = Field(description="Message sender: user or ai")
    content: str = Field(description="Message content")
    created_at: datetime = Field(description="Creation timestamp")


class HistoryResponse(BaseDTO):
    """Full conversation history in chronological order."""

    messages: List[MessageDTO] = Field(description="Messages in chronological order")
