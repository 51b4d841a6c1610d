"""History assembly: stored message log -> context for the reply generator."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Protocol, Sequence

from api.features.chat.entities.message import Sender

Role = Literal["user", "model"]

ROLE_BY_SENDER: dict[Sender, Role] = {
    Sender.USER: "user",
    Sender.ASSISTANT: "model",
}


class StoredMessage(Protocol):
    sender: str
    content: str


@dataclass(frozen=True)
class ContextTurn:
    role: Role
    text: str


@dataclass(frozen=True)
class ChatContext:
    """Prior turns and the current prompt, kept apart so the prompt is never sent twice."""

    prompt: str
    turns: list[ContextTurn] = field(default_factory=list)


def assemble_context(history: Sequence[StoredMessage], current_message: str) -> ChatContext:
    """Build generator context from a history that already ends with the current message.

    The final stored message is the one just inserted for this turn, so it is
    dropped from ``turns`` and carried as ``prompt`` instead. A history of zero
    or one message yields no prior turns.
    """
    prior = list(history)[:-1]
    turns = [
        ContextTurn(role=ROLE_BY_SENDER[Sender(m.sender)], text=m.content)
        for m in prior
    ]
    return ChatContext(prompt=current_message, turns=turns)
