"""Public entry points tying task parsing, workspace analysis and ranking together."""

from __future__ import annotations

from pathlib import Path
from typing import List

from .analyzers.relevance import rank_files
from .analyzers.structure import extract_structure
from .analyzers.workspace import WorkspaceAnalyzer
from .config import DEFAULT_MAX_DESCRIPTION_LENGTH, WorkscopeConfig, load_workspace_config
from .logging import filter_sensitive_data, get_logger
from .models import CodeStructure, FileRecord, TaskDescription, WorkspaceAnalysis
from .stores import AnalysisCache
from .task_parser import parse_task_description


class CodeIntelligenceEngine:
    """Facade used by host applications (editors, planners) to query a workspace."""

    def __init__(
        self,
        workspace_root: str | Path | None = None,
        *,
        analyzer: WorkspaceAnalyzer | None = None,
        cache: AnalysisCache | None = None,
        config: WorkscopeConfig | None = None,
    ) -> None:
        self.logger = get_logger("engine")
        if config is None:
            ambient_root = workspace_root if analyzer is None else analyzer.workspace_root
            if ambient_root is not None and str(ambient_root).strip():
                config = load_workspace_config(Path(ambient_root))
        self.config = config
        self.analyzer = analyzer or WorkspaceAnalyzer(
            workspace_root,
            cache=cache if cache is not None else AnalysisCache(),
            config=config,
        )
        self.cache = self.analyzer.cache
        self._max_description_length = (
            config.max_description_length if config is not None else DEFAULT_MAX_DESCRIPTION_LENGTH
        )

    def analyze_workspace(self, root: str | Path | None = None) -> WorkspaceAnalysis:
        """Return the (cached) structural analysis of the workspace."""
        return self.analyzer.analyze(root)

    def parse_task_description(self, raw: str) -> TaskDescription:
        return parse_task_description(raw, max_length=self._max_description_length)

    def find_relevant_files(
        self, task: TaskDescription | str, root: str | Path | None = None
    ) -> List[FileRecord]:
        """Rank workspace files by relevance to ``task``.

        ``task`` may be a raw description, in which case it is parsed first and
        validation errors propagate to the caller.
        """
        if isinstance(task, str):
            task = self.parse_task_description(task)
        analysis = self.analyze_workspace(root)
        ranked = rank_files(analysis.files, task)
        self.logger.debug(
            "Ranked %d of %d files; task context %s",
            len(ranked),
            len(analysis.files),
            filter_sensitive_data({"intent": task.intent, "scope": list(task.scope)}),
        )
        return ranked

    def clear_cache(self) -> None:
        self.analyzer.invalidate()

    def analyze_file(self, path: str, root: str | Path | None = None) -> FileRecord:
        """Inventory one file; read and parse failures raise with the offending path."""
        return self.analyzer.analyze_file(path, root)

    def parse_file(self, path: str, root: str | Path | None = None) -> CodeStructure:
        """Return the full ``CodeStructure`` of one source file."""
        return extract_structure(self.analyzer.parse_file(path, root))


__all__ = ["CodeIntelligenceEngine"]
