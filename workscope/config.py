"""Configuration loading for workscope (.workscope.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigError
from .logging import get_logger

_LOGGER = get_logger("config")

CONFIG_FILENAME = ".workscope.yml"

DEFAULT_INCLUDE = "**/*.{ts,tsx,js,jsx,json,md}"
DEFAULT_EXCLUDE = "{**/node_modules/**,**/.git/**,**/dist/**,**/build/**,**/out/**}"
DEFAULT_MAX_DESCRIPTION_LENGTH = 10000


@dataclass
class WorkscopeConfig:
    """Represents the settings defined in .workscope.yml."""

    root: Path
    include: List[str] = field(default_factory=lambda: [DEFAULT_INCLUDE])
    exclude: List[str] = field(default_factory=list)
    workers: int = 1
    max_description_length: int = DEFAULT_MAX_DESCRIPTION_LENGTH

    @property
    def include_pattern(self) -> str:
        return _join_globs(self.include)

    @property
    def exclude_pattern(self) -> str:
        return _join_globs([DEFAULT_EXCLUDE, *self.exclude])


def load_config(config_path: Path) -> WorkscopeConfig:
    """Load configuration from disk, returning defaults when no file exists."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return WorkscopeConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = WorkscopeConfig(root=root)

    include = _as_str_list(data.get("include"))
    if include:
        config.include = include
    config.exclude = _as_str_list(data.get("exclude"))

    workers = _as_int(data.get("workers"))
    if workers is not None:
        if workers < 1:
            raise ConfigError("workers must be a positive integer")
        config.workers = workers

    max_length = _as_int(data.get("max_description_length"))
    if max_length is not None:
        if max_length < 1:
            raise ConfigError("max_description_length must be a positive integer")
        config.max_description_length = max_length

    return config


def load_workspace_config(root: Path) -> WorkscopeConfig:
    """Load the config used for a workspace scan.

    An invalid file is logged and replaced by defaults so a bad
    `.workscope.yml` never aborts analysis; `load_config` still raises.
    """
    try:
        return load_config(root)
    except ConfigError as exc:
        _LOGGER.warning("Ignoring invalid %s under %s: %s", CONFIG_FILENAME, root, exc)
        return WorkscopeConfig(root=root.expanduser().resolve())


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _join_globs(patterns: Sequence[str]) -> str:
    cleaned = [pattern.strip() for pattern in patterns if pattern and pattern.strip()]
    if len(cleaned) == 1:
        return cleaned[0]
    return "{" + ",".join(cleaned) + "}"


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_EXCLUDE",
    "DEFAULT_INCLUDE",
    "WorkscopeConfig",
    "load_config",
    "load_workspace_config",
]
