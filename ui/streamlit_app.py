"""Streamlit preview of the article companion widget."""

from __future__ import annotations

import os
from pathlib import Path

import streamlit as st

from article_companion.app.bootstrap import load_runtime_from_path
from article_companion.chat import MODE_REGISTRY, ChatMode, Role
from article_companion.chat.view import LOADING_LABEL
from article_companion.utils.time import format_clock

CONFIG_PATH = Path(os.environ.get("ARTICLE_COMPANION_CONFIG", "configs/companion_config.yaml"))
ARTICLE_PATH = Path(os.environ.get("ARTICLE_COMPANION_ARTICLE", "data/sample_article.md"))

st.set_page_config(page_title="Article Companion", layout="wide")

if "runtime" not in st.session_state:
    st.session_state.runtime = load_runtime_from_path(CONFIG_PATH, ARTICLE_PATH)

runtime = st.session_state.runtime
controller = runtime.controller

st.title(runtime.article.title)
with st.expander("Article", expanded=False):
    st.markdown(runtime.article.content)

with st.sidebar:
    if not controller.is_open:
        if st.button("Open chat"):
            controller.open()
            st.rerun()
        st.stop()

    view = controller.view()
    header, close = st.columns([4, 1])
    header.subheader(view.title)
    if close.button("Close", key="close"):
        controller.close()
        st.rerun()

    if view.selecting_mode:
        st.markdown("**Choose Your Chat Mode**")
        st.caption("Select how you'd like to interact with the article")
        for mode in ChatMode:
            settings = MODE_REGISTRY[mode]
            if st.button(settings.title, key=f"mode-{mode.value}", help=settings.description):
                controller.select(mode)
                st.rerun()
        st.stop()

    if st.button("← Back to mode selection", key="back"):
        controller.back()
        st.rerun()

    for message in view.history:
        role = "user" if message.role is Role.USER else "assistant"
        with st.chat_message(role):
            st.write(message.content)
            st.caption(format_clock(message.timestamp))

    if view.input_visible:
        prompt = st.chat_input(view.placeholder, disabled=not view.input_enabled)
        if prompt:
            controller.update_draft(prompt)
            turn = controller.submit(controller.draft_input)
            if turn is not None:
                with st.spinner(LOADING_LABEL):
                    controller.dispatch(turn)
            st.rerun()
