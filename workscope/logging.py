"""Logging utilities for workscope components.

Beyond the usual namespaced loggers and handler setup, this module owns
`filter_sensitive_data`, which redacts secret-like and path-like keys from
context mappings before analysis details reach a log sink.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Mapping

_LOGGER_NAME = "workscope"

_SENSITIVE_KEYS = (
    "password",
    "apikey",
    "api_key",
    "token",
    "secret",
    "credentials",
    "authorization",
    "auth",
)
_PATH_KEYS = ("filepath", "path", "file", "directory", "dir")
_REDACTED = "[REDACTED]"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the workscope hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the workscope logger with console output and optional file sink."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when configured more than once.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[workscope] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


def filter_sensitive_data(context: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``context`` with secret-like and path-like keys redacted."""
    filtered = _filter_value(context)
    return filtered if isinstance(filtered, dict) else {}


def _filter_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        result: Dict[str, Any] = {}
        for key, item in value.items():
            lowered = str(key).lower()
            if any(marker in lowered for marker in _SENSITIVE_KEYS):
                result[key] = _REDACTED
            elif any(marker in lowered for marker in _PATH_KEYS):
                result[key] = _REDACTED
            else:
                result[key] = _filter_value(item)
        return result
    if isinstance(value, (list, tuple)):
        return [_filter_value(item) for item in value]
    return value


__all__ = ["configure_logging", "filter_sensitive_data", "get_logger"]
