"""HTTP client for the article answering backend."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import requests

LOGGER = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_ENDPOINT = "/chat_article"


class RequestFailure(Exception):
    """Raised when the backend call fails for any reason."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(slots=True, frozen=True)
class ArticleQuestion:
    """Outbound request body for one user turn."""

    question: str
    article_title: str
    article_context: str
    mode: str | None = None

    def to_payload(self) -> dict[str, str]:
        payload = {
            "question": self.question,
            "article_title": self.article_title,
            "article_context": self.article_context,
        }
        if self.mode:
            payload["mode"] = self.mode
        return payload


@dataclass(slots=True)
class BackendSettings:
    base_url: str = DEFAULT_BASE_URL
    endpoint: str = DEFAULT_ENDPOINT
    timeout_seconds: float = 60.0
    health_path: str = "/"

    @property
    def chat_url(self) -> str:
        return _join_url(self.base_url, self.endpoint)

    @property
    def health_url(self) -> str:
        return _join_url(self.base_url, self.health_path)


def _join_url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


class AnswerClient:
    """Posts article questions and returns the decoded JSON reply."""

    def __init__(self, settings: BackendSettings | None = None, *, session: requests.Session | None = None) -> None:
        self.settings = settings or BackendSettings()
        self._http = session or requests.Session()

    def ask(self, request: ArticleQuestion) -> Any:
        url = self.settings.chat_url
        try:
            response = self._http.post(
                url,
                json=request.to_payload(),
                headers={"Content-Type": "application/json"},
                timeout=self.settings.timeout_seconds,
            )
        except requests.exceptions.Timeout as exc:
            message = f"Backend at {url} timed out after {self.settings.timeout_seconds}s"
            raise RequestFailure(message) from exc
        except requests.exceptions.RequestException as exc:
            message = f"Failed to reach backend at {url}: {exc}"
            raise RequestFailure(message) from exc

        if not response.ok:
            message = f"Backend returned HTTP {response.status_code}"
            raise RequestFailure(message, status_code=response.status_code)
        try:
            data = response.json()
        except ValueError as exc:
            message = "Backend returned a body that is not valid JSON"
            raise RequestFailure(message, status_code=response.status_code) from exc
        if data is None:
            message = "Backend returned an empty JSON document"
            raise RequestFailure(message, status_code=response.status_code)
        return data


def check_backend_connection(settings: BackendSettings, timeout: int = 2) -> bool:
    """Check whether anything answers at the backend's health URL."""
    try:
        response = requests.get(settings.health_url, timeout=timeout)
    except (OSError, requests.exceptions.RequestException):
        return False
    return response.status_code < 500
