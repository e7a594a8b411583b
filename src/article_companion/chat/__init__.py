"""Chat interfaces for the article companion."""

from .client import AnswerClient, ArticleQuestion, BackendSettings, RequestFailure
from .conversation import Message, Role, Session
from .modes import MODE_REGISTRY, ChatMode, ModeSelector, get_mode_settings
from .session import BACKEND_ERROR, FALLBACK_ANSWER, PendingTurn, SessionController
from .view import WidgetView, build_view

__all__ = [
    "BACKEND_ERROR",
    "FALLBACK_ANSWER",
    "MODE_REGISTRY",
    "AnswerClient",
    "ArticleQuestion",
    "BackendSettings",
    "ChatMode",
    "Message",
    "ModeSelector",
    "PendingTurn",
    "RequestFailure",
    "Role",
    "Session",
    "SessionController",
    "WidgetView",
    "build_view",
    "get_mode_settings",
]
