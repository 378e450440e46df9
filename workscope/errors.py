"""Exception hierarchy surfaced by the workscope engine."""

from __future__ import annotations


class WorkscopeError(RuntimeError):
    """Base class for errors raised to engine callers."""


class NoWorkspaceError(WorkscopeError):
    """Raised when no workspace root can be resolved."""

    def __init__(self, message: str = "No workspace folder open") -> None:
        super().__init__(message)


class InvalidTaskDescriptionError(WorkscopeError, ValueError):
    """Raised when a task description fails validation.

    ``reason`` is one of ``empty``, ``too_long`` or ``no_alphanumeric`` so
    callers can branch on the specific condition without parsing messages.
    """

    def __init__(self, reason: str, message: str) -> None:
        super().__init__(message)
        self.reason = reason


class InvalidFilePathError(WorkscopeError, ValueError):
    """Raised when a path contains traversal or null-byte sequences."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Invalid file path: {path!r}")
        self.path = path


class OutsideWorkspaceError(WorkscopeError):
    """Raised when a path resolves outside the workspace root."""

    def __init__(self, path: str, root: str) -> None:
        super().__init__(f"File path must be within workspace {root}: {path}")
        self.path = path
        self.root = root


class FileReadError(WorkscopeError):
    """Raised when a directly requested file cannot be read."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Failed to read file {path}: {detail}")
        self.path = path


class SourceParseError(WorkscopeError):
    """Raised when a directly requested file cannot be parsed."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Failed to parse {path}: {detail}")
        self.path = path


class ConfigError(WorkscopeError):
    """Raised when the configuration file cannot be parsed."""


__all__ = [
    "ConfigError",
    "FileReadError",
    "InvalidFilePathError",
    "InvalidTaskDescriptionError",
    "NoWorkspaceError",
    "OutsideWorkspaceError",
    "SourceParseError",
    "WorkscopeError",
]
