import sys
from pathlib import Path

import streamlit as st

try:
    from core.settings import SETTINGS
except ModuleNotFoundError:
    ROOT = Path(__file__).resolve().parents[1]
    if str(ROOT) not in sys.path:
        sys.path.insert(0, str(ROOT))
    from core.settings import SETTINGS

from streamlit_ui.widget import (
    GREETING_TEXT,
    ChatApiClient,
    ChatWidget,
    SessionIdStore,
    WidgetSession,
)


st.set_page_config(page_title="Spur Assistant", layout="centered")
st.title("🤖 Spur Assistant")
st.caption("Online")

API_BASE_URL = SETTINGS.UI.API_BASE_URL

# Chat state survives reruns; the session id also survives reloads via the URL
if "widget_session" not in st.session_state:
    st.session_state.widget_session = WidgetSession()

widget = ChatWidget(
    client=ChatApiClient(API_BASE_URL, timeout=SETTINGS.UI.REQUEST_TIMEOUT),
    store=SessionIdStore(st.query_params),
    session=st.session_state.widget_session,
)
session = widget.session

# History is rendered before any interaction
widget.load()

# Sidebar settings
with st.sidebar:
    st.subheader("Configuration")
    st.text(f"API_BASE_URL = {API_BASE_URL}")
    st.text(f"Session = {session.session_id or '(new)'}")
    st.caption(
        "Values are loaded from environment (.env). Override by setting env vars."
    )

# Display chat history
if widget.is_empty:
    st.info(GREETING_TEXT)

for bubble in session.messages:
    with st.chat_message("user" if bubble.role == "user" else "assistant"):
        if bubble.is_error:
            st.warning(bubble.content)
        else:
            st.markdown(bubble.content)

# Sending: the optimistic message is already on screen, show typing and wait
if session.busy:
    with st.chat_message("assistant"):
        with st.spinner("Typing..."):
            widget.complete()
    st.rerun()

# User input
if prompt := st.chat_input("Type your message...", disabled=session.busy):
    if widget.submit(prompt):
        st.rerun()
