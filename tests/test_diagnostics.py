from __future__ import annotations

import pytest

from article_companion import diagnostics
from article_companion.config import BACKEND_URL_ENV, CompanionConfig


def test_run_diagnostics_reports_backend_status(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(BACKEND_URL_ENV, raising=False)
    monkeypatch.setattr(diagnostics, "check_backend_connection", lambda settings: False)

    results = diagnostics.run_diagnostics(CompanionConfig.default())

    assert results["python"]["status"] == "ok"
    assert results["backend"]["status"] == "error"
    assert "http://localhost:8000/" in results["backend"]["details"]
    assert "dep:streamlit" in results


def test_backend_ok_when_reachable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(diagnostics, "check_backend_connection", lambda settings: True)

    results = diagnostics.run_diagnostics(CompanionConfig.default())

    assert results["backend"]["status"] == "ok"
    assert "chat_article" in results["backend"]["details"]
