from __future__ import annotations

import logging
from typing import Any

import pytest

from article_companion.article import Article
from article_companion.chat.client import ArticleQuestion, RequestFailure
from article_companion.chat.conversation import Role
from article_companion.chat.modes import (
    DIRECT_WELCOME,
    EXPERIMENT_UNAVAILABLE,
    REAL_WORLD_WELCOME,
    ChatMode,
)
from article_companion.chat.session import BACKEND_ERROR, FALLBACK_ANSWER, SessionController

ARTICLE = Article(title="Sleep and Memory", content="Participants slept five hours per night.")


class ScriptedBackend:
    def __init__(self, responses: list[Any] | None = None) -> None:
        self.responses = list(responses or [{"answer": "Scripted answer."}])
        self.requests: list[ArticleQuestion] = []

    def ask(self, request: ArticleQuestion) -> Any:
        self.requests.append(request)
        index = len(self.requests) - 1
        outcome = self.responses[min(index, len(self.responses) - 1)]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def build_controller(mode: ChatMode | None = None, backend: ScriptedBackend | None = None) -> SessionController:
    controller = SessionController(ARTICLE, client=backend or ScriptedBackend())
    controller.open()
    if mode is not None:
        controller.select(mode)
    return controller


@pytest.mark.parametrize(
    ("mode", "welcome"),
    [
        (ChatMode.DIRECT, DIRECT_WELCOME),
        (ChatMode.REAL_WORLD, REAL_WORLD_WELCOME),
        (ChatMode.EXPERIMENT, EXPERIMENT_UNAVAILABLE),
    ],
)
def test_mode_selection_seeds_welcome_message(mode: ChatMode, welcome: str) -> None:
    controller = build_controller(mode)

    assert controller.mode is mode
    assert len(controller.history) == 1
    assert controller.history[0].role is Role.ASSISTANT
    assert controller.history[0].content == welcome


def test_reselecting_a_mode_replaces_history() -> None:
    controller = build_controller(ChatMode.DIRECT)
    controller.send("What did they measure?")
    assert len(controller.history) == 3

    controller.select(ChatMode.DIRECT)

    assert [message.content for message in controller.history] == [DIRECT_WELCOME]


@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
def test_blank_submit_is_a_noop(text: str) -> None:
    backend = ScriptedBackend()
    controller = build_controller(ChatMode.DIRECT, backend)

    assert controller.submit(text) is None
    assert len(controller.history) == 1
    assert backend.requests == []


def test_submit_without_mode_is_a_noop() -> None:
    controller = build_controller()

    assert controller.submit("Hello") is None
    assert controller.history == []


def test_submit_while_pending_is_a_noop() -> None:
    controller = build_controller(ChatMode.DIRECT)
    turn = controller.submit("First question")
    assert turn is not None
    assert controller.pending_request

    assert controller.submit("Second question") is None
    assert [message.content for message in controller.history] == [DIRECT_WELCOME, "First question"]


def test_submit_records_trimmed_user_message_and_clears_draft() -> None:
    controller = build_controller(ChatMode.DIRECT)
    controller.update_draft("  How many participants?  ")

    turn = controller.submit(controller.draft_input)

    assert turn is not None
    assert controller.history[-1].role is Role.USER
    assert controller.history[-1].content == "How many participants?"
    assert controller.draft_input == ""


def test_experiment_mode_short_circuits() -> None:
    backend = ScriptedBackend()
    controller = build_controller(ChatMode.EXPERIMENT, backend)

    for _ in range(2):
        before = len(controller.history)
        assert controller.submit("Run the n-back task") is None
        added = controller.history[before:]
        assert [(message.role, message.content) for message in added] == [
            (Role.USER, "Run the n-back task"),
            (Role.ASSISTANT, EXPERIMENT_UNAVAILABLE),
        ]
        assert not controller.pending_request

    assert backend.requests == []


def test_direct_mode_success_appends_answer() -> None:
    backend = ScriptedBackend([{"answer": "X"}])
    controller = build_controller(ChatMode.DIRECT, backend)

    reply = controller.send("What is the main finding?")

    assert reply is not None
    assert reply.role is Role.ASSISTANT
    assert reply.content == "X"
    assert not controller.pending_request
    request = backend.requests[0]
    assert request.question == "What is the main finding?"
    assert request.article_title == ARTICLE.title
    assert request.article_context == ARTICLE.content
    assert "mode" not in request.to_payload()


@pytest.mark.parametrize("payload", [{}, {"answer": ""}, {"answer": None}, {"detail": "ok"}, ["a"], "text"])
def test_missing_answer_uses_fallback(payload: Any) -> None:
    controller = build_controller(ChatMode.DIRECT, ScriptedBackend([payload]))

    controller.send("Anything?")

    assert controller.history[-1].content == FALLBACK_ANSWER
    assert not controller.pending_request


@pytest.mark.parametrize(
    ("payload", "shown"),
    [({"answer": "   "}, "   "), ({"answer": 42}, "42"), ({"answer": True}, "True")],
)
def test_truthy_answer_is_shown_as_is(payload: dict[str, Any], shown: str) -> None:
    controller = build_controller(ChatMode.DIRECT, ScriptedBackend([payload]))

    controller.send("Anything?")

    assert controller.history[-1].content == shown
    assert not controller.pending_request


def test_real_world_mode_rewrites_question_only_on_the_wire() -> None:
    backend = ScriptedBackend()
    controller = build_controller(ChatMode.REAL_WORLD, backend)

    controller.send("Why do students cram?")

    request = backend.requests[0]
    assert request.question == "Relate this to real-world phenomena: Why do students cram?"
    assert request.to_payload()["mode"] == "real-world"
    assert controller.history[1].role is Role.USER
    assert controller.history[1].content == "Why do students cram?"


@pytest.mark.parametrize(
    "error",
    [RequestFailure("HTTP 500", status_code=500), RequestFailure("connection refused"), ConnectionError("boom")],
)
def test_backend_failure_appends_error_and_clears_pending(error: BaseException) -> None:
    controller = build_controller(ChatMode.DIRECT, ScriptedBackend([error]))
    baseline = len(controller.history)

    controller.send("Will this fail?")

    assert len(controller.history) == baseline + 2
    assert controller.history[-1].role is Role.ASSISTANT
    assert controller.history[-1].content == BACKEND_ERROR
    assert not controller.pending_request


def test_user_can_retry_after_failure() -> None:
    backend = ScriptedBackend([RequestFailure("down"), {"answer": "Back online."}])
    controller = build_controller(ChatMode.DIRECT, backend)

    controller.send("First try")
    controller.send("Second try")

    assert [message.content for message in controller.history[-2:]] == ["Second try", "Back online."]
    assert len(backend.requests) == 2


def test_back_resets_state_and_is_idempotent() -> None:
    controller = build_controller(ChatMode.DIRECT)
    controller.send("Question")
    controller.update_draft("half-typed")

    controller.back()
    first = (controller.mode, controller.history, controller.draft_input, controller.pending_request)
    controller.back()
    second = (controller.mode, controller.history, controller.draft_input, controller.pending_request)

    assert first == (None, [], "", False)
    assert second == first
    assert controller.selector.mode is None


def test_response_after_back_is_discarded() -> None:
    controller = build_controller(ChatMode.DIRECT)
    turn = controller.submit("Slow question")
    assert turn is not None

    controller.back()
    applied = controller.complete(turn, {"answer": "Late answer"})

    assert not applied
    assert controller.history == []
    assert not controller.pending_request


def test_stale_response_does_not_leak_into_new_session() -> None:
    controller = build_controller(ChatMode.DIRECT)
    turn = controller.submit("Slow question")
    assert turn is not None

    controller.back()
    controller.select(ChatMode.REAL_WORLD)
    assert not controller.fail(turn, RequestFailure("late failure"))
    assert not controller.complete(turn, {"answer": "Late answer"})

    assert [message.content for message in controller.history] == [REAL_WORLD_WELCOME]


def test_stale_drop_logs_the_original_question(caplog: pytest.LogCaptureFixture) -> None:
    controller = build_controller(ChatMode.DIRECT)
    turn = controller.submit("Slow question")
    assert turn is not None
    controller.back()

    with caplog.at_level(logging.DEBUG, logger="article_companion.chat.session"):
        controller.complete(turn, {"answer": "Late answer"})

    assert any("'Slow question'" in record.getMessage() for record in caplog.records)


def test_close_clears_history() -> None:
    controller = build_controller(ChatMode.DIRECT)
    controller.send("Question")

    controller.close()

    assert not controller.is_open
    assert controller.mode is None
    assert controller.history == []


def test_messages_are_appended_in_completion_order() -> None:
    controller = build_controller(ChatMode.DIRECT, ScriptedBackend([{"answer": "A1"}, {"answer": "A2"}]))

    controller.send("Q1")
    controller.send("Q2")

    assert [message.content for message in controller.history[1:]] == ["Q1", "A1", "Q2", "A2"]
    timestamps = [message.timestamp for message in controller.history]
    assert timestamps == sorted(timestamps)
