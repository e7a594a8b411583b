"""Conversation session controller.

The controller is the only writer of :class:`Session`. Front-ends drive it
through the named operations below and render whatever :meth:`view` returns.

A network-backed turn is split into two events. :meth:`SessionController.submit`
records the user's message and hands back a :class:`PendingTurn`; the outcome
arrives later through :meth:`~SessionController.complete` or
:meth:`~SessionController.fail` (or :meth:`~SessionController.dispatch`, which
performs the call and routes the result). Each ticket carries the session
generation it was issued under, so completions that outlive a reset are dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

from article_companion.article import Article
from article_companion.chat.client import AnswerClient, ArticleQuestion, RequestFailure
from article_companion.chat.conversation import Message, Session
from article_companion.chat.modes import ChatMode, ModeSelector, get_mode_settings
from article_companion.chat.view import WidgetView, build_view

LOGGER = logging.getLogger(__name__)

FALLBACK_ANSWER = "I apologize, but I couldn't generate a response. Please try again."
BACKEND_ERROR = "Sorry, I encountered an error. Please make sure the backend is running and try again."


class AnswerBackend(Protocol):
    def ask(self, request: ArticleQuestion) -> Any: ...


@dataclass(slots=True, frozen=True)
class PendingTurn:
    """Ticket for a request that has been issued but not yet resolved."""

    generation: int
    request: ArticleQuestion
    user_message: Message


class SessionController:
    """Owns the session for one widget and mediates every transcript change."""

    def __init__(
        self,
        article: Article,
        *,
        client: AnswerBackend | None = None,
        selector: ModeSelector | None = None,
    ) -> None:
        self.article = article
        self._client = client if client is not None else AnswerClient()
        self._session = Session()
        self._is_open = False
        self.selector = selector or ModeSelector()
        self.selector.bind(self.on_mode_chosen)

    @property
    def session(self) -> Session:
        return self._session

    @property
    def mode(self) -> ChatMode | None:
        return self._session.mode

    @property
    def history(self) -> list[Message]:
        return list(self._session.history)

    @property
    def pending_request(self) -> bool:
        return self._session.pending_request

    @property
    def draft_input(self) -> str:
        return self._session.draft_input

    @property
    def is_open(self) -> bool:
        return self._is_open

    # Widget lifecycle

    def open(self) -> None:
        if self._is_open:
            return
        self._is_open = True
        self.selector.reset()
        self._session.reset()

    def close(self) -> None:
        self._is_open = False
        self.selector.reset()
        self._session.reset()

    def update_draft(self, text: str) -> None:
        self._session.draft_input = text

    # Mode state machine

    def select(self, mode: ChatMode | str) -> ChatMode:
        """Choose a mode through the selector, which re-seeds the transcript."""
        return self.selector.select(mode)

    def on_mode_chosen(self, mode: ChatMode) -> None:
        settings = get_mode_settings(mode)
        self._session.reset(mode)
        self._session.append(Message.assistant(settings.welcome))
        LOGGER.info("Session generation %s started in %s mode", self._session.generation, mode.value)

    def back(self) -> None:
        if self._session.pending_request:
            LOGGER.debug("Leaving mode with a request in flight; its result will be discarded")
        self.selector.reset()
        self._session.reset()

    # Turns

    def submit(self, raw_text: str) -> PendingTurn | None:
        """Record a user turn and, for network-backed modes, issue a request ticket."""
        session = self._session
        text = raw_text.strip()
        if not text or session.pending_request or session.mode is None:
            return None

        user_message = session.append(Message.user(text))
        session.draft_input = ""

        settings = get_mode_settings(session.mode)
        if not settings.network_backed:
            session.append(Message.assistant(settings.welcome))
            return None

        session.pending_request = True
        request = ArticleQuestion(
            question=settings.shape_question(text),
            article_title=self.article.title,
            article_context=self.article.content,
            mode=settings.request_mode,
        )
        LOGGER.debug("Dispatching %s question for generation %s", session.mode.value, session.generation)
        return PendingTurn(generation=session.generation, request=request, user_message=user_message)

    def dispatch(self, turn: PendingTurn) -> None:
        """Call the backend for ``turn`` and apply whatever comes back."""
        try:
            payload = self._client.ask(turn.request)
        except RequestFailure as exc:
            self.fail(turn, exc)
        except Exception as exc:
            LOGGER.exception("Unexpected backend client error")
            self.fail(turn, RequestFailure(str(exc)))
        else:
            self.complete(turn, payload)

    def send(self, raw_text: str) -> Message | None:
        """Submit and resolve a turn in one blocking step; return the newest message."""
        baseline = len(self._session.history)
        turn = self.submit(raw_text)
        if turn is not None:
            self.dispatch(turn)
        if len(self._session.history) > baseline:
            return self._session.last_message
        return None

    def complete(self, turn: PendingTurn, payload: Any) -> bool:
        if self._is_stale(turn):
            return False
        answer = payload.get("answer") if isinstance(payload, dict) else None
        if not answer:
            LOGGER.info("Backend response carried no answer; using fallback text")
            answer = FALLBACK_ANSWER
        self._session.append(Message.assistant(str(answer)))
        self._session.pending_request = False
        return True

    def fail(self, turn: PendingTurn, error: BaseException) -> bool:
        if self._is_stale(turn):
            return False
        LOGGER.warning("Chat request failed: %s", error)
        self._session.append(Message.assistant(BACKEND_ERROR))
        self._session.pending_request = False
        return True

    def view(self) -> WidgetView:
        return build_view(self._session, is_open=self._is_open)

    def _is_stale(self, turn: PendingTurn) -> bool:
        if turn.generation != self._session.generation:
            LOGGER.debug(
                "Dropping response to %r from generation %s (current %s)",
                turn.user_message.content,
                turn.generation,
                self._session.generation,
            )
            return True
        return False
