"""Support chat widget state machine and its HTTP client.

Rendering lives in ``chat_ui.py``; everything here is plain Python so the
widget's behaviour (optimistic sends, busy gating, error bubbles, session id
persistence) does not depend on Streamlit.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, MutableMapping, Optional

import requests
from requests.exceptions import RequestException

logger = logging.getLogger("chat.widget")

BubbleRole = Literal["user", "ai"]

SEND_ERROR_TEXT = "⚠️ Error sending message. Please try again."
GREETING_TEXT = "👋 Hi! Ask me anything about shipping or return policies."


class ChatApiError(Exception):
    """Raised when the chat API cannot be reached or answers with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ChatApiClient:
    """Thin client for the ``/chat`` endpoints."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 60.0,
        http: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = http or requests.Session()

    def send_message(self, message: str, session_id: Optional[str]) -> Dict[str, Any]:
        """POST one message; returns ``{"reply": ..., "sessionId": ...}``."""
        payload: Dict[str, Any] = {"message": message}
        if session_id:
            payload["sessionId"] = session_id
        return self._request("POST", "/chat/message", json=payload)

    def fetch_history(self, session_id: str) -> List[Dict[str, Any]]:
        data = self._request("GET", f"/chat/history/{session_id}")
        return list(data.get("messages") or [])

    def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            resp = self.http.request(method, url, timeout=self.timeout, **kwargs)
        except RequestException as e:
            raise ChatApiError(f"Failed to reach API at {url}: {e}") from e

        try:
            data = resp.json() or {}
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if resp.status_code >= 400 or data.get("error"):
            detail = data.get("error") or f"HTTP {resp.status_code}"
            raise ChatApiError(str(detail), status_code=resp.status_code)
        return data


class SessionIdStore:
    """Keeps the session id under a fixed key in a mapping that outlives page reloads."""

    KEY = "chat_session_id"

    def __init__(self, backend: MutableMapping[str, str]):
        self.backend = backend

    def load(self) -> Optional[str]:
        return self.backend.get(self.KEY) or None

    def save(self, session_id: str) -> None:
        self.backend[self.KEY] = session_id


@dataclass
class ChatBubble:
    role: BubbleRole
    content: str
    is_error: bool = False


@dataclass
class WidgetSession:
    """Client-held chat state, passed explicitly to the widget."""

    session_id: Optional[str] = None
    messages: List[ChatBubble] = field(default_factory=list)
    busy: bool = False
    pending: Optional[str] = None
    loaded: bool = False


class ChatWidget:
    """Idle/sending state machine driving the chat API.

    ``submit`` and ``complete`` are the two halves of a send, so a UI can
    render the optimistic message and typing indicator between them;
    ``send`` runs both.
    """

    def __init__(
        self,
        client: ChatApiClient,
        store: SessionIdStore,
        session: WidgetSession,
    ):
        self.client = client
        self.store = store
        self.session = session
        if self.session.session_id is None:
            self.session.session_id = self.store.load()

    @property
    def is_empty(self) -> bool:
        return not self.session.messages

    def load(self) -> None:
        """Replace the visible messages with server history, once per widget session."""
        if self.session.loaded:
            return
        self.session.loaded = True
        if not self.session.session_id:
            return
        try:
            history = self.client.fetch_history(self.session.session_id)
        except ChatApiError as e:
            logger.error(f"Failed to load history: {e.message}")
            return
        self.session.messages = [
            ChatBubble(role=m.get("sender", "ai"), content=m.get("content", ""))
            for m in history
        ]

    def submit(self, text: str) -> bool:
        """Start a send: optimistic user bubble and busy flag. False when ignored."""
        message = (text or "").strip()
        if not message or self.session.busy:
            return False
        self.session.messages.append(ChatBubble(role="user", content=message))
        self.session.busy = True
        self.session.pending = message
        return True

    def complete(self) -> None:
        """Finish the in-flight send: reply or error bubble, then back to idle."""
        message = self.session.pending
        if not self.session.busy or message is None:
            return
        try:
            data = self.client.send_message(message, self.session.session_id)
            self.session.messages.append(
                ChatBubble(role="ai", content=str(data.get("reply", "")))
            )
            issued = data.get("sessionId")
            if not self.session.session_id and issued:
                self.session.session_id = issued
                self.store.save(issued)
        except ChatApiError as e:
            logger.error(f"Failed to send message: {e.message}")
            self.session.messages.append(
                ChatBubble(role="ai", content=SEND_ERROR_TEXT, is_error=True)
            )
        finally:
            self.session.busy = False
            self.session.pending = None

    def send(self, text: str) -> bool:
        if not self.submit(text):
            return False
        self.complete()
        return True
