"""Transcript and per-widget session state."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from article_companion.chat.modes import ChatMode
from article_companion.utils.time import utcnow


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(slots=True, frozen=True)
class Message:
    """Represents a single conversational turn."""

    role: Role
    content: str
    timestamp: datetime = field(default_factory=utcnow)

    @classmethod
    def user(cls, content: str) -> Message:
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> Message:
        return cls(role=Role.ASSISTANT, content=content)


@dataclass(slots=True)
class Session:
    """Mutable state of one open widget.

    ``generation`` changes on every reset so that a completion stamped with an
    older value can be recognised and dropped.
    """

    mode: ChatMode | None = None
    history: list[Message] = field(default_factory=list)
    pending_request: bool = False
    draft_input: str = ""
    generation: int = 0

    def reset(self, mode: ChatMode | None = None) -> None:
        self.mode = mode
        self.history = []
        self.pending_request = False
        self.draft_input = ""
        self.generation += 1

    def append(self, message: Message) -> Message:
        self.history.append(message)
        return message

    @property
    def last_message(self) -> Message | None:
        return self.history[-1] if self.history else None
