"""Logging setup shared by the CLI and the Streamlit page."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO", log_file: Path | None = None, *, console: Console | None = None) -> None:
    """Route log records to stderr through Rich, plus an optional file.

    Handlers installed by an earlier call are replaced, so calling this twice
    does not duplicate output.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_article_companion", False):
            root.removeHandler(handler)
            handler.close()

    rich_handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    rich_handler._article_companion = True  # type: ignore[attr-defined]
    root.addHandler(rich_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        file_handler._article_companion = True  # type: ignore[attr-defined]
        root.addHandler(file_handler)

    root.setLevel(level.upper())
