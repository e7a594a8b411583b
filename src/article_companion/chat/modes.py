"""Conversation mode definitions for the article companion."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

LOGGER = logging.getLogger(__name__)

DIRECT_WELCOME = (
    "Hello! I can help you understand this research article better. "
    "Feel free to ask me any questions about the content, methodology, or findings."
)
REAL_WORLD_WELCOME = (
    "Hello! I'll help you explore real-world phenomena related to this research article. "
    "Ask me about practical applications, real-life examples, or how these findings manifest "
    "in everyday situations."
)
EXPERIMENT_UNAVAILABLE = (
    "This experiment cannot be performed at this time. "
    "When it is completed, I will notify you immediately. Thank you for your understanding."
)

REAL_WORLD_PREFIX = "Relate this to real-world phenomena: "


class ChatMode(str, Enum):
    DIRECT = "direct"
    REAL_WORLD = "real-world"
    EXPERIMENT = "experiment"


@dataclass(slots=True, frozen=True)
class ModeSettings:
    """Behaviour and copy attached to a conversation mode."""

    title: str
    description: str
    welcome: str
    network_backed: bool
    question_prefix: str = ""
    request_mode: str | None = None
    placeholder: str = "Ask about the article..."

    def shape_question(self, text: str) -> str:
        """Return the question as sent to the backend; the transcript keeps ``text``."""
        return f"{self.question_prefix}{text}"


MODE_REGISTRY: dict[ChatMode, ModeSettings] = {
    ChatMode.DIRECT: ModeSettings(
        title="Direct Chat",
        description="Ask questions directly about the article's content, methodology, and findings",
        welcome=DIRECT_WELCOME,
        network_backed=True,
    ),
    ChatMode.REAL_WORLD: ModeSettings(
        title="Real-World Phenomena",
        description="Explore practical applications and real-life examples related to this research",
        welcome=REAL_WORLD_WELCOME,
        network_backed=True,
        question_prefix=REAL_WORLD_PREFIX,
        request_mode="real-world",
    ),
    ChatMode.EXPERIMENT: ModeSettings(
        title="Practical Experiment",
        description="Design and conduct experiments based on the research findings",
        welcome=EXPERIMENT_UNAVAILABLE,
        network_backed=False,
        placeholder="Feature coming soon...",
    ),
}

UNSET_TITLE = "Article Assistant"


def get_mode_settings(mode: ChatMode) -> ModeSettings:
    """Return the settings for the requested conversation mode."""
    return MODE_REGISTRY[mode]


def coerce_mode(value: ChatMode | str) -> ChatMode:
    """Accept either a ``ChatMode`` or its wire value (``"real-world"``)."""
    if isinstance(value, ChatMode):
        return value
    try:
        return ChatMode(str(value).strip().lower())
    except ValueError:
        available = ", ".join(mode.value for mode in ChatMode)
        message = f"Unknown chat mode '{value}'. Available: {available}."
        raise ValueError(message) from None


ModeListener = Callable[[ChatMode], None]


class ModeSelector:
    """Holds the single chosen mode and reports each selection to a listener."""

    def __init__(self, listener: ModeListener | None = None) -> None:
        self._listener = listener
        self._mode: ChatMode | None = None

    @property
    def mode(self) -> ChatMode | None:
        return self._mode

    def bind(self, listener: ModeListener) -> None:
        self._listener = listener

    def select(self, mode: ChatMode | str) -> ChatMode:
        chosen = coerce_mode(mode)
        self._mode = chosen
        LOGGER.info("Selected chat mode %s", chosen.value)
        if self._listener is not None:
            self._listener(chosen)
        return chosen

    def reset(self) -> None:
        self._mode = None
