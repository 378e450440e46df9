"""Tests for workspace file discovery and guarded reads."""

from __future__ import annotations

import warnings
from pathlib import Path

import pytest

from workscope.errors import FileReadError, InvalidFilePathError, OutsideWorkspaceError
from workscope.filesystem import (
    GlobFileDiscovery,
    WorkspaceFileReader,
    expand_braces,
    is_within_workspace,
    validate_file_path,
)
from tests._fixtures.workspace_builder import WorkspaceBuilder


@pytest.mark.parametrize(
    ("pattern", "expected"),
    [
        ("**/*.{ts,tsx}", ["**/*.ts", "**/*.tsx"]),
        ("{a,{b,c}}/x", ["a/x", "b/x", "c/x"]),
        ("src/{lib,app}/*.{js,jsx}", ["src/lib/*.js", "src/lib/*.jsx", "src/app/*.js", "src/app/*.jsx"]),
        ("plain/**", ["plain/**"]),
        ("{a,b", ["{a,b"]),
    ],
)
def test_expand_braces(pattern: str, expected: list[str]) -> None:
    assert expand_braces(pattern) == expected


@pytest.mark.parametrize(
    ("path", "valid"),
    [
        ("/repo/src/app.ts", True),
        ("src/app.ts", True),
        ("../etc/passwd", False),
        ("~/secrets.ts", False),
        ("src/app\x00.ts", False),
    ],
)
def test_validate_file_path(path: str, valid: bool) -> None:
    assert validate_file_path(path) is valid


def test_is_within_workspace(tmp_path: Path) -> None:
    root = tmp_path / "workspace"
    root.mkdir()

    assert is_within_workspace(root / "src" / "a.ts", root) is True
    assert is_within_workspace(root, root) is True
    assert is_within_workspace(tmp_path / "workspace-other" / "a.ts", root) is False


def test_glob_discovery_applies_include_and_exclude(workspace_builder: WorkspaceBuilder) -> None:
    workspace_builder.write(
        {
            "index.ts": "",
            "lib/util.js": "",
            "lib/style.css": "",
            "node_modules/pkg/index.js": "",
            "vendor/node_modules/pkg/index.ts": "",
        }
    )
    discovery = GlobFileDiscovery(workspace_builder.path())

    found = discovery.find_files("**/*.{ts,js}", "{**/node_modules/**}")

    root = workspace_builder.path().resolve()
    assert found == [str(root / "index.ts"), str(root / "lib" / "util.js")]


def test_glob_discovery_without_exclude(workspace_builder: WorkspaceBuilder) -> None:
    workspace_builder.write({"a.md": "", "deep/b.md": ""})

    found = GlobFileDiscovery(workspace_builder.path()).find_files("**/*.md")

    assert [Path(path).name for path in found] == ["a.md", "b.md"]


def test_glob_discovery_requires_directory(tmp_path: Path) -> None:
    with pytest.raises(NotADirectoryError):
        GlobFileDiscovery(tmp_path / "missing").find_files("**/*.ts")


def test_reader_returns_text_within_workspace(workspace_builder: WorkspaceBuilder) -> None:
    workspace_builder.write({"src/a.ts": "export const a = 'ä';\n"})
    reader = WorkspaceFileReader(workspace_builder.path())

    assert reader.read(str(workspace_builder.path("src/a.ts"))) == "export const a = 'ä';\n"


def test_reader_rejects_unsafe_and_outside_paths(workspace_builder: WorkspaceBuilder, tmp_path: Path) -> None:
    reader = WorkspaceFileReader(workspace_builder.path())
    outside = tmp_path / "outside.ts"
    outside.write_text("", encoding="utf-8")

    with pytest.raises(InvalidFilePathError):
        reader.read(str(workspace_builder.path()) + "/../outside.ts")
    with pytest.raises(OutsideWorkspaceError):
        reader.read(str(outside))


def test_reader_distinguishes_missing_and_unreadable_files(workspace_builder: WorkspaceBuilder) -> None:
    binary = workspace_builder.path("blob.ts")
    binary.write_bytes(b"\xff\xfe\x00\x81")
    reader = WorkspaceFileReader(workspace_builder.path())

    with pytest.raises(FileNotFoundError):
        reader.read(str(workspace_builder.path("missing.ts")))
    with pytest.raises(FileReadError) as excinfo:
        reader.read(str(binary))
    assert excinfo.value.path == str(binary)


def test_glob_compilation_emits_no_warnings(workspace_builder: WorkspaceBuilder) -> None:
    workspace_builder.write({"src/a.ts": ""})
    discovery = GlobFileDiscovery(workspace_builder.path())

    with warnings.catch_warnings():
        warnings.simplefilter("error")
        found = discovery.find_files("**/*.{ts,tsx}", "{**/node_modules/**,**/dist/**}")

    assert [Path(path).name for path in found] == ["a.ts"]
