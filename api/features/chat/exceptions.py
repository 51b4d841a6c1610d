"""Exceptions for the Chat feature."""
from typing import Any, Dict, Optional

from api.shared.exceptions import (
    DatabaseError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)


class EmptyMessageError(ValidationError):
    """Raised when the visitor's message is missing or whitespace only."""

    def __init__(self):
        super().__init__("Message cannot be empty")


class SessionNotFoundError(NotFoundError):
    """Raised when a client-supplied session id has no conversation."""

    def __init__(self, session_id: str):
        super().__init__("Session", session_id)


class ForeignKeyViolation(DatabaseError):
    """Raised when a message references a conversation that does not exist."""

    def __init__(self, conversation_id: str, details: Optional[Dict[str, Any]] = None):
        error_details = {"conversation_id": conversation_id}
        if details:
            error_details.update(details)
        super().__init__(
            f"Conversation '{conversation_id}' does not exist", error_details
        )


class GenerationFailure(ExternalServiceError):
    """Raised inside the reply generator when Gemini cannot produce a reply."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("Gemini", message, details)
