"""Runtime bootstrap helpers for the CLI and UI front-ends."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from article_companion.article import Article
from article_companion.chat import AnswerClient, SessionController
from article_companion.config import CompanionConfig
from article_companion.logging_config import configure_logging

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class RuntimeComponents:
    """Bundled runtime components for reuse across entry points."""

    config: CompanionConfig
    article: Article
    client: AnswerClient
    controller: SessionController
    ui_settings: dict[str, Any]


def build_runtime_components(config: CompanionConfig, article: Article) -> RuntimeComponents:
    client = AnswerClient(config.backend_settings())
    controller = SessionController(article, client=client)
    LOGGER.debug("Widget bound to article %r, backend %s", article.title, client.settings.chat_url)
    return RuntimeComponents(
        config=config,
        article=article,
        client=client,
        controller=controller,
        ui_settings=config.ui_cli_settings(),
    )


def load_runtime_from_path(
    config_path: Path,
    article_path: Path,
    *,
    title: str | None = None,
    setup_logging: bool = True,
) -> RuntimeComponents:
    """Load configuration and the article, then wire the session controller."""
    companion_config = CompanionConfig.from_file(config_path)
    if setup_logging:
        log_settings = companion_config.logging_settings()
        configure_logging(log_settings.level, log_settings.file)
    article = Article.from_file(article_path, title=title)
    return build_runtime_components(companion_config, article)
