"""Configuration helpers for the article companion."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from article_companion.chat.client import DEFAULT_BASE_URL, DEFAULT_ENDPOINT, BackendSettings

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("configs/companion_config.yaml")
BACKEND_URL_ENV = "ARTICLE_COMPANION_BACKEND_URL"
LOG_LEVEL_ENV = "ARTICLE_COMPANION_LOG_LEVEL"

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class ConfigError(ValueError):
    """Raised when the configuration file holds an unusable value."""


@dataclass(slots=True, frozen=True)
class LoggingSettings:
    level: str = "INFO"
    file: Path | None = None


@dataclass(slots=True)
class CompanionConfig:
    source: Path | None
    raw: dict[str, Any]

    @classmethod
    def from_file(cls, path: Path) -> CompanionConfig:
        if not path.exists():
            LOGGER.debug("Config %s not found; using defaults", path)
            instance = cls(source=None, raw={})
        else:
            raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
            if not isinstance(raw, dict):
                message = f"Config {path} must contain a mapping at the top level."
                raise ConfigError(message)
            instance = cls(source=path, raw=raw)
        instance.validate()
        return instance

    @classmethod
    def default(cls) -> CompanionConfig:
        return cls(source=None, raw={})

    def validate(self) -> None:
        """Resolve every section once so bad values fail at load time."""
        self.backend_settings()
        self.logging_settings()
        self.ui_cli_settings()

    def backend_settings(self) -> BackendSettings:
        cfg = self._section("backend")
        base_url = os.environ.get(BACKEND_URL_ENV) or cfg.get("base_url", DEFAULT_BASE_URL)
        try:
            timeout = float(cfg.get("timeout_seconds", 60))
        except (TypeError, ValueError) as exc:
            message = f"backend.timeout_seconds must be a number, got {cfg.get('timeout_seconds')!r}."
            raise ConfigError(message) from exc
        if timeout <= 0:
            message = f"backend.timeout_seconds must be positive, got {timeout}."
            raise ConfigError(message)
        return BackendSettings(
            base_url=str(base_url),
            endpoint=str(cfg.get("endpoint", DEFAULT_ENDPOINT)),
            timeout_seconds=timeout,
            health_path=str(cfg.get("health_path", "/")),
        )

    def logging_settings(self) -> LoggingSettings:
        cfg = self._section("logging")
        level = str(os.environ.get(LOG_LEVEL_ENV) or cfg.get("level", "INFO")).upper()
        if level not in _LOG_LEVELS:
            available = ", ".join(sorted(_LOG_LEVELS))
            message = f"Unsupported log level '{level}'. Available: {available}."
            raise ConfigError(message)
        log_file = cfg.get("file")
        return LoggingSettings(level=level, file=Path(log_file) if log_file else None)

    def ui_cli_settings(self) -> dict[str, Any]:
        defaults = {
            "boxed_answers": True,
            "box_style": "simple",
        }
        cli_cfg = self._section("ui").get("cli") or {}
        if not isinstance(cli_cfg, dict):
            message = f"Config section 'ui.cli' must be a mapping, got {type(cli_cfg).__name__}."
            raise ConfigError(message)
        resolved = dict(defaults)
        resolved.update(cli_cfg)
        return resolved

    def _section(self, name: str) -> dict[str, Any]:
        cfg = self.raw.get(name) or {}
        if not isinstance(cfg, dict):
            message = f"Config section '{name}' must be a mapping, got {type(cfg).__name__}."
            raise ConfigError(message)
        return cfg
