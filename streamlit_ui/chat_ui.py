import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import List

import streamlit as st

from core.settings import SETTINGS
from streamlit_ui.client import (
    ALREADY_RATED,
    ChatApiClient,
    ChatMessage,
    ExchangeResult,
    Stats,
    mark_feedback,
)

st.set_page_config(page_title="RL-Chat", layout="centered")
st.title("RL-Chat")
st.caption("✨ Learning from your feedback")

API_BASE_URL = SETTINGS.UI.API_BASE_URL


@st.cache_resource
def get_client() -> ChatApiClient:
    return ChatApiClient(API_BASE_URL)


@st.cache_resource
def get_executor() -> ThreadPoolExecutor:
    # One worker: a conversation never has two replies in flight.
    return ThreadPoolExecutor(max_workers=1, thread_name_prefix="rlchat-ui-")


client = get_client()

# Keep chat history
if "messages" not in st.session_state:
    st.session_state.messages = []
if "stats" not in st.session_state:
    st.session_state.stats = Stats()


def refresh_stats() -> None:
    try:
        st.session_state.stats = client.fetch_stats()
    except Exception as e:
        st.session_state.stats_error = f"Failed to fetch stats: {e}"
    else:
        st.session_state.pop("stats_error", None)


def give_feedback(message_id: int, rating: int) -> None:
    try:
        recorded = client.record_feedback(message_id, rating)
    except Exception as e:
        st.session_state.feedback_error = f"Feedback error: {e}"
        return
    st.session_state.pop("feedback_error", None)
    mark_feedback(st.session_state.messages, message_id, rating, recorded)
    refresh_stats()


if "stats_loaded" not in st.session_state:
    refresh_stats()
    st.session_state.stats_loaded = True

# Sidebar: training progress
with st.sidebar:
    st.subheader("📊 Training Progress")
    stats: Stats = st.session_state.stats
    st.metric("Total Responses", stats.total_responses)
    st.progress(stats.positive_ratio)
    col_pos, col_neg = st.columns(2)
    col_pos.metric("Positive", stats.positive)
    col_neg.metric("Negative", stats.negative)
    st.caption(
        "* Highly rated responses are used as few-shot examples in future prompts."
    )
    if st.session_state.get("stats_error"):
        st.error(st.session_state.stats_error)
    if st.button("🔄 Clear Chat"):
        st.session_state.messages = []
        st.rerun()
    st.caption(f"API_BASE_URL = {API_BASE_URL}")

if st.session_state.get("feedback_error"):
    st.error(st.session_state.feedback_error)

messages: List[ChatMessage] = st.session_state.messages

if not messages:
    st.info(
        "No messages yet. Start a conversation to begin the RL training loop."
    )

# Display chat history
for msg in messages:
    with st.chat_message("user" if msg.role == "user" else "assistant"):
        st.markdown(msg.content)
        if msg.role == "model" and msg.id is not None:
            rated = msg.rated
            up, down, label = st.columns([1, 1, 6])
            up.button(
                "👍",
                key=f"up-{msg.id}",
                disabled=rated,
                on_click=give_feedback,
                args=(msg.id, 1),
            )
            down.button(
                "👎",
                key=f"down-{msg.id}",
                disabled=rated,
                on_click=give_feedback,
                args=(msg.id, -1),
            )
            if msg.feedback == 1:
                label.caption("Helpful")
            elif msg.feedback == -1:
                label.caption("Not helpful")
            elif msg.feedback == ALREADY_RATED:
                label.caption("Already rated")


# User input; disabled while a reply is pending
pending = st.session_state.get("pending_prompt")
if prompt := st.chat_input("Type your message...", disabled=pending is not None):
    if prompt.strip():
        st.session_state.pending_prompt = prompt
        st.rerun()

if pending is not None:
    history = list(messages)
    with st.chat_message("user"):
        st.markdown(pending)

    with st.chat_message("assistant"):
        status_placeholder = st.empty()
        # The exchange runs as a future so a later abort rule can cancel it.
        future: Future[ExchangeResult] = get_executor().submit(
            client.exchange, history, pending
        )
        spinner_chars = ["⏳", "⌛"]
        idx = 0
        while not future.done():
            status_placeholder.info(f"Thinking... {spinner_chars[idx % 2]}")
            time.sleep(0.3)
            idx += 1
        result = future.result()
        status_placeholder.empty()

    messages.append(result.user)
    messages.append(result.reply)
    if result.ok:
        st.session_state.pop("last_error", None)
        refresh_stats()
    else:
        st.session_state.last_error = result.error
    st.session_state.messages = messages
    st.session_state.pending_prompt = None
    st.rerun()

if st.session_state.get("last_error"):
    with st.expander("Last error"):
        st.code(st.session_state.last_error)
