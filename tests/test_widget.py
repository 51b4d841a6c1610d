"""Tests for the chat widget state machine and API client."""
from unittest.mock import MagicMock

import pytest
from requests.exceptions import ConnectionError as RequestsConnectionError

from streamlit_ui.widget import (
    SEND_ERROR_TEXT,
    ChatApiClient,
    ChatApiError,
    ChatBubble,
    ChatWidget,
    SessionIdStore,
    WidgetSession,
)


class FakeChatApi:
    def __init__(self, history=None, fail_send=False, fail_history=False):
        self.history = history or []
        self.fail_send = fail_send
        self.fail_history = fail_history
        self.sent = []
        self.history_requests = []

    def send_message(self, message, session_id):
        self.sent.append((message, session_id))
        if self.fail_send:
            raise ChatApiError("Failed to reach API")
        return {"reply": f"Reply to: {message}", "sessionId": session_id or "new-session"}

    def fetch_history(self, session_id):
        self.history_requests.append(session_id)
        if self.fail_history:
            raise ChatApiError("Session not found", status_code=404)
        return self.history


def _widget(api, stored=None):
    backend = {} if stored is None else {SessionIdStore.KEY: stored}
    widget = ChatWidget(api, SessionIdStore(backend), WidgetSession())
    return widget, backend


class TestLoad:
    def test_known_session_history_rendered_on_load(self):
        api = FakeChatApi(history=[
            {"sender": "user", "content": "hi"},
            {"sender": "ai", "content": "hello!"},
        ])
        widget, _ = _widget(api, stored="abc")

        widget.load()

        assert api.history_requests == ["abc"]
        assert widget.session.messages == [
            ChatBubble("user", "hi"),
            ChatBubble("ai", "hello!"),
        ]

    def test_no_session_means_no_fetch(self):
        api = FakeChatApi()
        widget, _ = _widget(api)

        widget.load()

        assert api.history_requests == []
        assert widget.is_empty

    def test_load_runs_once(self):
        api = FakeChatApi(history=[{"sender": "user", "content": "hi"}])
        widget, _ = _widget(api, stored="abc")

        widget.load()
        widget.load()

        assert api.history_requests == ["abc"]

    def test_history_failure_keeps_widget_usable(self):
        api = FakeChatApi(fail_history=True)
        widget, backend = _widget(api, stored="abc")

        widget.load()

        assert widget.is_empty
        assert backend[SessionIdStore.KEY] == "abc"
        assert widget.send("still there?") is True


class TestSend:
    def test_first_send_stores_issued_session_id(self):
        api = FakeChatApi()
        widget, backend = _widget(api)

        assert widget.send("  Where is my order?  ") is True

        assert api.sent == [("Where is my order?", None)]
        assert widget.session.messages == [
            ChatBubble("user", "Where is my order?"),
            ChatBubble("ai", "Reply to: Where is my order?"),
        ]
        assert widget.session.session_id == "new-session"
        assert backend[SessionIdStore.KEY] == "new-session"
        assert widget.session.busy is False

    def test_known_session_id_sent_with_every_message(self):
        api = FakeChatApi()
        widget, backend = _widget(api, stored="abc")

        widget.send("one")
        widget.send("two")

        assert api.sent == [("one", "abc"), ("two", "abc")]
        assert backend[SessionIdStore.KEY] == "abc"

    def test_optimistic_message_shown_while_busy(self):
        api = FakeChatApi()
        widget, _ = _widget(api)

        assert widget.submit("hello") is True

        assert widget.session.busy is True
        assert widget.session.messages == [ChatBubble("user", "hello")]
        assert api.sent == []

        widget.complete()

        assert widget.session.busy is False
        assert widget.session.pending is None
        assert len(widget.session.messages) == 2

    def test_send_ignored_while_busy(self):
        api = FakeChatApi()
        widget, _ = _widget(api)
        widget.submit("first")

        assert widget.submit("second") is False
        assert widget.send("third") is False
        assert widget.session.messages == [ChatBubble("user", "first")]

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_blank_input_ignored(self, text):
        api = FakeChatApi()
        widget, _ = _widget(api)

        assert widget.send(text) is False
        assert widget.is_empty
        assert api.sent == []

    def test_failure_appends_error_bubble_and_keeps_optimistic_message(self):
        api = FakeChatApi(fail_send=True)
        widget, backend = _widget(api)

        widget.send("hello")

        assert widget.session.messages == [
            ChatBubble("user", "hello"),
            ChatBubble("ai", SEND_ERROR_TEXT, is_error=True),
        ]
        assert widget.session.busy is False
        assert widget.session.session_id is None
        assert SessionIdStore.KEY not in backend

    def test_complete_without_submit_is_noop(self):
        api = FakeChatApi()
        widget, _ = _widget(api)

        widget.complete()

        assert api.sent == []
        assert widget.is_empty


def _response(status_code=200, body=None, json_error=False):
    resp = MagicMock(status_code=status_code)
    if json_error:
        resp.json.side_effect = ValueError("not json")
    else:
        resp.json.return_value = body
    return resp


class TestChatApiClient:
    def test_send_message_without_session(self):
        http = MagicMock()
        http.request.return_value = _response(body={"reply": "hi", "sessionId": "s1"})
        client = ChatApiClient("http://api.test/", timeout=5, http=http)

        data = client.send_message("hello", None)

        assert data == {"reply": "hi", "sessionId": "s1"}
        http.request.assert_called_once_with(
            "POST", "http://api.test/chat/message", timeout=5, json={"message": "hello"}
        )

    def test_send_message_with_session(self):
        http = MagicMock()
        http.request.return_value = _response(body={"reply": "hi", "sessionId": "s1"})
        client = ChatApiClient("http://api.test", http=http)

        client.send_message("hello", "s1")

        assert http.request.call_args.kwargs["json"] == {"message": "hello", "sessionId": "s1"}

    def test_fetch_history(self):
        http = MagicMock()
        http.request.return_value = _response(
            body={"messages": [{"sender": "user", "content": "hi"}]}
        )
        client = ChatApiClient("http://api.test", http=http)

        assert client.fetch_history("s1") == [{"sender": "user", "content": "hi"}]
        assert http.request.call_args.args == ("GET", "http://api.test/chat/history/s1")

    def test_error_body_raises(self):
        http = MagicMock()
        http.request.return_value = _response(404, {"error": "Session not found"})
        client = ChatApiClient("http://api.test", http=http)

        with pytest.raises(ChatApiError) as exc_info:
            client.send_message("hello", "missing")

        assert exc_info.value.message == "Session not found"
        assert exc_info.value.status_code == 404

    def test_non_json_error_raises(self):
        http = MagicMock()
        http.request.return_value = _response(502, json_error=True)
        client = ChatApiClient("http://api.test", http=http)

        with pytest.raises(ChatApiError, match="HTTP 502"):
            client.fetch_history("s1")

    def test_network_error_raises(self):
        http = MagicMock()
        http.request.side_effect = RequestsConnectionError("refused")
        client = ChatApiClient("http://api.test", http=http)

        with pytest.raises(ChatApiError, match="Failed to reach API"):
            client.send_message("hello", None)
