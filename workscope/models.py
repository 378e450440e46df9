"""Core data models shared across workscope components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Mapping, Optional, Tuple

FileKind = Literal["typescript", "javascript", "json", "markdown", "other"]
TaskIntent = Literal["feature", "bugfix", "refactor", "documentation", "test"]
PatternKind = Literal["component", "function", "class", "module"]
ExportKind = Literal["named", "default"]

SOURCE_KINDS: Tuple[str, ...] = ("typescript", "javascript")


@dataclass(frozen=True)
class FileRecord:
    """Inventory entry for one analyzed workspace file."""

    path: str
    kind: FileKind
    size: int
    imports: Tuple[str, ...] = ()
    exports: Tuple[str, ...] = ()

    @property
    def is_source(self) -> bool:
        return self.kind in SOURCE_KINDS


@dataclass(frozen=True)
class CodePattern:
    """A named function or class discovered in the workspace."""

    kind: PatternKind
    name: str
    location: str


@dataclass(frozen=True)
class WorkspaceAnalysis:
    """Immutable snapshot of a whole-workspace scan."""

    root_path: str
    files: Tuple[FileRecord, ...] = ()
    dependencies: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    patterns: Tuple[CodePattern, ...] = ()


@dataclass(frozen=True)
class FunctionInfo:
    name: str
    parameters: Tuple[str, ...]
    return_type: Optional[str]
    is_exported: bool
    is_async: bool
    line: int


@dataclass(frozen=True)
class ClassInfo:
    name: str
    methods: Tuple[str, ...]
    properties: Tuple[str, ...]
    is_exported: bool
    line: int


@dataclass(frozen=True)
class ImportInfo:
    source: str
    named: Tuple[str, ...]
    default: Optional[str]
    namespace: Optional[str]
    line: int


@dataclass(frozen=True)
class ExportInfo:
    name: str
    kind: ExportKind
    line: int


@dataclass(frozen=True)
class InterfaceInfo:
    name: str
    properties: Tuple[str, ...]
    is_exported: bool
    line: int


@dataclass(frozen=True)
class TypeAliasInfo:
    name: str
    is_exported: bool
    line: int


@dataclass(frozen=True)
class CodeStructure:
    """Normalized structural summary of a single source file."""

    functions: Tuple[FunctionInfo, ...] = ()
    classes: Tuple[ClassInfo, ...] = ()
    imports: Tuple[ImportInfo, ...] = ()
    exports: Tuple[ExportInfo, ...] = ()
    interfaces: Tuple[InterfaceInfo, ...] = ()
    type_aliases: Tuple[TypeAliasInfo, ...] = ()


@dataclass(frozen=True)
class TaskDescription:
    """Structured view of a free-text development task."""

    title: str
    description: str
    intent: TaskIntent
    scope: Tuple[str, ...] = ()
