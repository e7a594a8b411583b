"""Diagnostics utilities for the article companion."""

from __future__ import annotations

import importlib
import platform
import sys
from dataclasses import dataclass

from article_companion.chat.client import check_backend_connection
from article_companion.config import CompanionConfig


@dataclass(slots=True)
class DiagnosticResult:
    status: str
    details: str

    def as_dict(self) -> dict[str, str]:
        return {"status": self.status, "details": self.details}


def _check_python_version() -> DiagnosticResult:
    if sys.version_info >= (3, 10):
        return DiagnosticResult("ok", f"Python {platform.python_version()} detected.")
    return DiagnosticResult(
        "warn",
        f"Python {platform.python_version()} detected; project requires 3.10 or newer.",
    )


def _check_optional_dependency(module_name: str, friendly_name: str) -> DiagnosticResult:
    try:
        importlib.import_module(module_name)
    except ImportError as exc:
        return DiagnosticResult("warn", f"{friendly_name} missing: {exc}")
    return DiagnosticResult("ok", f"{friendly_name} available.")


def _check_backend(config: CompanionConfig) -> DiagnosticResult:
    settings = config.backend_settings()
    if not check_backend_connection(settings):
        return DiagnosticResult("error", f"Backend not reachable at {settings.health_url}.")
    return DiagnosticResult("ok", f"Backend reachable; questions go to {settings.chat_url}.")


def run_diagnostics(config: CompanionConfig) -> dict[str, dict[str, str]]:
    """Run a suite of health checks and return structured results."""
    results: dict[str, dict[str, str]] = {}
    results["python"] = _check_python_version().as_dict()
    results["backend"] = _check_backend(config).as_dict()
    results["dep:streamlit"] = _check_optional_dependency("streamlit", "Streamlit preview UI").as_dict()
    return results


__all__ = ["DiagnosticResult", "run_diagnostics"]
