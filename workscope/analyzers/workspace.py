"""Whole-workspace analysis: discovery, per-file inventory, dependencies and patterns."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from types import MappingProxyType
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .parsing import ParsedSource, SourceParser, TreeSitterParser
from .patterns import extract_patterns
from .structure import extract_structure
from ..config import WorkscopeConfig, load_workspace_config
from ..errors import FileReadError, NoWorkspaceError, SourceParseError
from ..filesystem import FileDiscovery, FileReader, GlobFileDiscovery, WorkspaceFileReader
from ..logging import get_logger
from ..models import SOURCE_KINDS, FileKind, FileRecord, WorkspaceAnalysis
from ..stores import AnalysisCache

_KIND_BY_SUFFIX: Dict[str, FileKind] = {
    ".ts": "typescript",
    ".tsx": "typescript",
    ".js": "javascript",
    ".jsx": "javascript",
    ".json": "json",
    ".md": "markdown",
}


def file_kind(file_name: str) -> FileKind:
    """Classify a file purely by its extension."""
    return _KIND_BY_SUFFIX.get(Path(file_name).suffix, "other")


class WorkspaceAnalyzer:
    """Builds and caches a ``WorkspaceAnalysis`` for a workspace root.

    Discovery, reading and parsing are delegated to pluggable collaborators;
    when none are given, filesystem-backed defaults bound to the resolved
    root are used. Per-file failures degrade that file's record and never
    abort the scan.
    """

    def __init__(
        self,
        workspace_root: str | Path | None = None,
        *,
        discovery: FileDiscovery | None = None,
        reader: FileReader | None = None,
        parser: SourceParser | None = None,
        cache: AnalysisCache | None = None,
        config: WorkscopeConfig | None = None,
    ) -> None:
        self.workspace_root = workspace_root
        self.cache = cache if cache is not None else AnalysisCache()
        self.parser = parser or TreeSitterParser()
        self._discovery = discovery
        self._reader = reader
        self._config = config
        self.logger = get_logger("workspace")

    # ------------------------------------------------------------------
    # Whole-workspace analysis

    def analyze(self, root: str | Path | None = None) -> WorkspaceAnalysis:
        """Return the cached analysis for ``root``, scanning on first use."""
        root_path = self.resolve_root(root)
        return self.cache.get_or_compute(root_path, lambda: self._scan(root_path))

    def invalidate(self) -> None:
        """Drop the cached analysis; the next ``analyze`` call rescans."""
        self.cache.invalidate()

    def resolve_root(self, root: str | Path | None = None) -> str:
        candidate = root if root is not None else self.workspace_root
        if candidate is None or str(candidate).strip() == "":
            raise NoWorkspaceError()
        return str(Path(candidate).expanduser().resolve())

    def _scan(self, root_path: str) -> WorkspaceAnalysis:
        config = self._config_for(root_path)
        reader = self._reader_for(root_path)
        self.logger.info("Analyzing workspace %s", root_path)

        paths = self._discover(root_path, config)
        self.logger.debug("Discovery returned %d files", len(paths))

        if config.workers > 1 and len(paths) > 1:
            with ThreadPoolExecutor(
                max_workers=config.workers, thread_name_prefix="workscope-scan"
            ) as executor:
                results = list(executor.map(lambda path: self._inventory(path, reader), paths))
        else:
            results = [self._inventory(path, reader) for path in paths]

        files = tuple(record for record in results if record is not None)
        dependencies = {record.path: record.imports for record in files if record.imports}
        patterns = extract_patterns(
            files,
            root_path,
            lambda record: self.parser.parse(reader.read(record.path), record.path),
        )

        self.logger.info(
            "Analyzed %d files (%d with imports, %d patterns)",
            len(files),
            len(dependencies),
            len(patterns),
        )
        return WorkspaceAnalysis(
            root_path=root_path,
            files=files,
            dependencies=MappingProxyType(dependencies),
            patterns=patterns,
        )

    def _discover(self, root_path: str, config: WorkscopeConfig) -> List[str]:
        discovery = self._discovery or GlobFileDiscovery(root_path)
        try:
            return list(discovery.find_files(config.include_pattern, config.exclude_pattern))
        except Exception as exc:
            self.logger.warning("Failed to find workspace files under %s: %s", root_path, exc)
            return []

    def _inventory(self, path: str, reader: FileReader) -> Optional[FileRecord]:
        kind = file_kind(path)
        try:
            content = reader.read(path)
        except FileNotFoundError:
            self.logger.warning("Skipping %s: file no longer exists", path)
            return None
        except Exception as exc:
            self.logger.warning("Failed to read %s: %s", path, exc)
            return FileRecord(path=path, kind=kind, size=0)

        size = len(content.encode("utf-8"))
        if kind not in SOURCE_KINDS:
            return FileRecord(path=path, kind=kind, size=size)

        try:
            structure = extract_structure(self.parser.parse(content, path))
        except Exception as exc:
            self.logger.warning("Failed to analyze %s: %s", path, exc)
            return FileRecord(path=path, kind=kind, size=size)

        return FileRecord(
            path=path,
            kind=kind,
            size=size,
            imports=tuple(item.source for item in structure.imports),
            exports=tuple(item.name for item in structure.exports),
        )

    # ------------------------------------------------------------------
    # Directed single-file operations

    def read_file(self, path: str, root: str | Path | None = None) -> Tuple[str, str]:
        """Return ``(absolute_path, content)``; failures raise with the offending path."""
        root_path = self.resolve_root(root)
        absolute = self._absolute(path, root_path)
        try:
            return absolute, self._reader_for(root_path).read(absolute)
        except FileNotFoundError as exc:
            raise FileReadError(absolute, "file not found") from exc

    def parse_file(self, path: str, root: str | Path | None = None) -> ParsedSource:
        """Parse one source file, raising ``SourceParseError`` when it cannot be parsed."""
        absolute, content = self.read_file(path, root)
        return self._parse_content(absolute, content)

    def analyze_file(self, path: str, root: str | Path | None = None) -> FileRecord:
        """Build a ``FileRecord`` for one file without absorbing failures."""
        absolute, content = self.read_file(path, root)
        kind = file_kind(absolute)
        size = len(content.encode("utf-8"))
        if kind not in SOURCE_KINDS:
            return FileRecord(path=absolute, kind=kind, size=size)
        structure = extract_structure(self._parse_content(absolute, content))
        return FileRecord(
            path=absolute,
            kind=kind,
            size=size,
            imports=tuple(item.source for item in structure.imports),
            exports=tuple(item.name for item in structure.exports),
        )

    def _parse_content(self, absolute: str, content: str) -> ParsedSource:
        kind = file_kind(absolute)
        if kind not in SOURCE_KINDS:
            raise SourceParseError(absolute, f"unsupported file kind '{kind}'")
        try:
            return self.parser.parse(content, absolute)
        except SourceParseError:
            raise
        except Exception as exc:
            raise SourceParseError(absolute, str(exc)) from exc

    # ------------------------------------------------------------------
    # Internal helpers

    def _config_for(self, root_path: str) -> WorkscopeConfig:
        if self._config is not None:
            return self._config
        return load_workspace_config(Path(root_path))

    def _reader_for(self, root_path: str) -> FileReader:
        return self._reader or WorkspaceFileReader(root_path)

    @staticmethod
    def _absolute(path: str, root_path: str) -> str:
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = Path(root_path) / candidate
        return str(candidate)


__all__ = ["WorkspaceAnalyzer", "file_kind"]
