"""Keyword-based relevance scoring of workspace files against a task."""

from __future__ import annotations

import os
from typing import List, Sequence

from ..models import FileRecord, TaskDescription

BASENAME_WEIGHT = 10
PATH_WEIGHT = 5
IMPORT_WEIGHT = 3
EXPORT_WEIGHT = 3


def calculate_relevance_score(file: FileRecord, task: TaskDescription) -> int:
    """Return an additive score of how strongly ``file`` matches ``task.scope``."""
    score = 0
    file_path = file.path.lower()
    file_name = os.path.basename(file_path)
    imports = [item.lower() for item in file.imports]
    exports = [item.lower() for item in file.exports]

    for keyword in task.scope:
        lowered = keyword.lower()
        if lowered in file_name:
            score += BASENAME_WEIGHT
        if lowered in file_path:
            score += PATH_WEIGHT
        if any(lowered in item for item in imports):
            score += IMPORT_WEIGHT
        if any(lowered in item for item in exports):
            score += EXPORT_WEIGHT
    return score


def rank_files(files: Sequence[FileRecord], task: TaskDescription) -> List[FileRecord]:
    """Return files with a nonzero score, best first, ties in discovery order.

    A task without scope keywords, or one that matches nothing, yields the
    input list unchanged so callers always have candidates.
    """
    if not task.scope:
        return list(files)

    scored = [(calculate_relevance_score(file, task), file) for file in files]
    relevant = [item for item in scored if item[0] > 0]
    if not relevant:
        return list(files)

    relevant.sort(key=lambda item: item[0], reverse=True)
    return [file for _, file in relevant]


__all__ = ["calculate_relevance_score", "rank_files"]
