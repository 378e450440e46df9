"""Workspace file discovery and guarded file reading."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterator, List

import pathspec

from .errors import FileReadError, InvalidFilePathError, OutsideWorkspaceError


class FileDiscovery(ABC):
    """Contract for services that enumerate workspace files by glob."""

    @abstractmethod
    def find_files(self, include: str, exclude: str | None = None) -> List[str]:
        """Return absolute paths matching ``include`` and not ``exclude``."""


class FileReader(ABC):
    """Contract for services that return the text of a workspace file."""

    @abstractmethod
    def read(self, path: str) -> str:
        """Return the content of ``path``; raise ``FileNotFoundError`` if absent."""


class GlobFileDiscovery(FileDiscovery):
    """Walks a workspace root matching brace-expanded gitignore-style globs."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).expanduser().resolve()

    def find_files(self, include: str, exclude: str | None = None) -> List[str]:
        if not self.root.is_dir():
            raise NotADirectoryError(f"Workspace path is not a directory: {self.root}")
        include_spec = _compile(include)
        exclude_spec = _compile(exclude) if exclude else None
        return [
            str(path)
            for path in _iter_files(self.root, exclude_spec)
            if include_spec.match_file(path.relative_to(self.root).as_posix())
        ]


class WorkspaceFileReader(FileReader):
    """Reads UTF-8 files, refusing anything outside the workspace root."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).expanduser().resolve()

    def read(self, path: str) -> str:
        if not validate_file_path(path):
            raise InvalidFilePathError(path)
        if not is_within_workspace(path, self.root):
            raise OutsideWorkspaceError(path, str(self.root))
        try:
            return Path(path).read_text(encoding="utf-8")
        except FileNotFoundError:
            raise
        except (OSError, UnicodeDecodeError) as exc:
            raise FileReadError(path, str(exc)) from exc


def validate_file_path(path: str) -> bool:
    """Return False for paths with traversal, home-directory or null-byte sequences."""
    if ".." in path:
        return False
    if "~" in path:
        return False
    if "\x00" in path:
        return False
    return True


def is_within_workspace(path: str | Path, root: str | Path) -> bool:
    """Return True when ``path`` resolves inside ``root``."""
    resolved_root = Path(root).expanduser().resolve()
    resolved = Path(path).expanduser().resolve()
    return resolved == resolved_root or resolved.is_relative_to(resolved_root)


def expand_braces(pattern: str) -> List[str]:
    """Expand ``{a,b}`` alternations (nesting allowed) into plain glob patterns."""
    depth = 0
    start = -1
    for index, char in enumerate(pattern):
        if char == "{":
            if depth == 0:
                start = index
            depth += 1
        elif char == "}" and depth:
            depth -= 1
            if depth == 0:
                prefix = pattern[:start]
                suffix = pattern[index + 1 :]
                expanded: List[str] = []
                for alternative in _split_alternatives(pattern[start + 1 : index]):
                    for candidate in expand_braces(prefix + alternative + suffix):
                        if candidate not in expanded:
                            expanded.append(candidate)
                return expanded
    return [pattern]


def _split_alternatives(body: str) -> List[str]:
    parts: List[str] = []
    depth = 0
    current: List[str] = []
    for char in body:
        if char == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        if char == "{":
            depth += 1
        elif char == "}" and depth:
            depth -= 1
        current.append(char)
    parts.append("".join(current))
    return parts


def _compile(pattern: str) -> pathspec.GitIgnoreSpec:
    return pathspec.GitIgnoreSpec.from_lines(expand_braces(pattern))


def _iter_files(root: Path, exclude: pathspec.GitIgnoreSpec | None) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        kept_dirs = []
        for name in sorted(dirnames):
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if exclude is not None and exclude.match_file(f"{rel_path}/"):
                continue
            kept_dirs.append(name)
        dirnames[:] = kept_dirs

        for filename in sorted(filenames):
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if exclude is not None and exclude.match_file(rel_path):
                continue
            yield current_dir / filename


__all__ = [
    "FileDiscovery",
    "FileReader",
    "GlobFileDiscovery",
    "WorkspaceFileReader",
    "expand_braces",
    "is_within_workspace",
    "validate_file_path",
]
