"""Source structure extraction, workspace analysis and relevance ranking."""

from __future__ import annotations

from .parsing import ParsedSource, SourceParser, TreeSitterParser
from .patterns import extract_patterns
from .relevance import calculate_relevance_score, rank_files
from .structure import extract_structure
from .workspace import WorkspaceAnalyzer, file_kind

__all__ = [
    "ParsedSource",
    "SourceParser",
    "TreeSitterParser",
    "WorkspaceAnalyzer",
    "calculate_relevance_score",
    "extract_patterns",
    "extract_structure",
    "file_kind",
    "rank_files",
]
