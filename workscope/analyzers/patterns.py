"""Pattern index extraction across analyzed workspace files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, List, Sequence, Tuple

from .parsing import ParsedSource
from .structure import extract_structure
from ..logging import get_logger
from ..models import CodePattern, FileRecord

_LOGGER = get_logger("patterns")


def extract_patterns(
    files: Sequence[FileRecord],
    workspace_root: str,
    load: Callable[[FileRecord], ParsedSource],
) -> Tuple[CodePattern, ...]:
    """Return function and class patterns for every source file in ``files``.

    ``load`` re-reads and re-parses a file; a failure there drops that file's
    patterns and leaves the ones already collected untouched.
    """
    patterns: List[CodePattern] = []
    for record in files:
        if not record.is_source:
            continue
        try:
            structure = extract_structure(load(record))
        except Exception as exc:
            _LOGGER.warning("Failed to extract patterns from %s: %s", record.path, exc)
            continue
        location = relative_path(record.path, workspace_root)
        patterns.extend(
            CodePattern(kind="function", name=function.name, location=location)
            for function in structure.functions
        )
        patterns.extend(
            CodePattern(kind="class", name=cls.name, location=location)
            for cls in structure.classes
        )
    return tuple(patterns)


def relative_path(absolute_path: str, workspace_root: str) -> str:
    """Return ``absolute_path`` relative to ``workspace_root`` with POSIX separators."""
    return Path(os.path.relpath(absolute_path, workspace_root)).as_posix()


__all__ = ["extract_patterns", "relative_path"]
