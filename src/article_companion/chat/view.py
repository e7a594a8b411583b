"""Read-only widget state handed to the presentation layer."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from article_companion.chat.conversation import Message, Role, Session
from article_companion.chat.modes import UNSET_TITLE, ChatMode, get_mode_settings
from article_companion.utils.time import format_clock

LOADING_LABEL = "Thinking..."


@dataclass(slots=True, frozen=True)
class WidgetView:
    is_open: bool
    mode: ChatMode | None
    title: str
    history: Sequence[Message]
    pending_request: bool
    input_visible: bool
    input_enabled: bool
    send_enabled: bool
    placeholder: str

    @property
    def selecting_mode(self) -> bool:
        return self.mode is None

    def transcript_lines(self) -> list[str]:
        """Render the transcript as plain ``[HH:MM] speaker: text`` lines."""
        lines = []
        for message in self.history:
            speaker = "You" if message.role is Role.USER else "Assistant"
            lines.append(f"[{format_clock(message.timestamp)}] {speaker}: {message.content}")
        if self.pending_request:
            lines.append(LOADING_LABEL)
        return lines


def build_view(session: Session, *, is_open: bool = True) -> WidgetView:
    mode = session.mode
    if mode is None:
        return WidgetView(
            is_open=is_open,
            mode=None,
            title=UNSET_TITLE,
            history=(),
            pending_request=session.pending_request,
            input_visible=False,
            input_enabled=False,
            send_enabled=False,
            placeholder="",
        )

    settings = get_mode_settings(mode)
    history = tuple(session.history)
    # The stub mode keeps its input hidden until something beyond the welcome is shown.
    input_visible = settings.network_backed or len(history) > 1
    stub_shown = not settings.network_backed and any(
        message.role is Role.ASSISTANT and message.content == settings.welcome for message in history
    )
    input_enabled = not session.pending_request and not stub_shown
    return WidgetView(
        is_open=is_open,
        mode=mode,
        title=settings.title,
        history=history,
        pending_request=session.pending_request,
        input_visible=input_visible,
        input_enabled=input_enabled,
        send_enabled=input_enabled and bool(session.draft_input.strip()),
        placeholder=settings.placeholder,
    )
