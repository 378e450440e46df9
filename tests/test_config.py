"""Tests for workscope.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from workscope.config import (
    DEFAULT_EXCLUDE,
    DEFAULT_INCLUDE,
    WorkscopeConfig,
    load_config,
)
from workscope.errors import ConfigError


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, WorkscopeConfig)
    assert config.root == tmp_path.resolve()
    assert config.include == [DEFAULT_INCLUDE]
    assert config.exclude == []
    assert config.workers == 1
    assert config.max_description_length == 10000
    assert config.include_pattern == DEFAULT_INCLUDE
    assert config.exclude_pattern == DEFAULT_EXCLUDE


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".workscope.yml"
    config_file.write_text(
        """
include:
  - "src/**/*.ts"
  - "docs/**/*.md"
exclude:
  - "**/generated/**"
workers: 4
max_description_length: "500"
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.root == tmp_path.resolve()
    assert config.include == ["src/**/*.ts", "docs/**/*.md"]
    assert config.include_pattern == "{src/**/*.ts,docs/**/*.md}"
    assert config.exclude == ["**/generated/**"]
    assert config.exclude_pattern == "{" + DEFAULT_EXCLUDE + ",**/generated/**}"
    assert config.workers == 4
    assert config.max_description_length == 500


def test_load_config_accepts_single_string_globs(tmp_path: Path) -> None:
    (tmp_path / ".workscope.yml").write_text("include: '**/*.ts'\nexclude: vendor/**\n", encoding="utf-8")

    config = load_config(tmp_path / "settings.yml")

    assert config.include == ["**/*.ts"]
    assert config.exclude == ["vendor/**"]


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / ".workscope.yml").write_text("\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.include == [DEFAULT_INCLUDE]


@pytest.mark.parametrize(
    ("content", "message"),
    [
        ("- just\n- a list\n", "mapping"),
        ("include: [unclosed\n", "Failed to parse"),
        ("workers: 0\n", "workers"),
        ("max_description_length: -1\n", "max_description_length"),
    ],
)
def test_invalid_config_raises(tmp_path: Path, content: str, message: str) -> None:
    (tmp_path / ".workscope.yml").write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError, match=message):
        load_config(tmp_path)
