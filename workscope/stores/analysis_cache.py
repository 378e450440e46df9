"""Single-slot in-memory cache for whole-workspace analysis results."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Optional

from ..models import WorkspaceAnalysis


@dataclass(frozen=True)
class _CacheEntry:
    root: str
    analysis: WorkspaceAnalysis


class AnalysisCache:
    """Holds at most one ``WorkspaceAnalysis`` keyed by its resolved root.

    The cache is owned by whoever constructs it and handed to analyzers by
    reference. ``get_or_compute`` serialises writers so concurrent callers
    share a single computation; ``invalidate`` swaps the slot out without
    touching results that were already returned.
    """

    def __init__(self) -> None:
        self._entry: Optional[_CacheEntry] = None
        self._generation = 0
        self._lock = threading.RLock()

    def get(self, root: str) -> Optional[WorkspaceAnalysis]:
        entry = self._entry
        if entry is None or entry.root != root:
            return None
        return entry.analysis

    def get_or_compute(
        self, root: str, compute: Callable[[], WorkspaceAnalysis]
    ) -> WorkspaceAnalysis:
        cached = self.get(root)
        if cached is not None:
            return cached
        with self._lock:
            cached = self.get(root)
            if cached is not None:
                return cached
            generation = self._generation
            analysis = compute()
            # An invalidate() issued mid-computation wins over this result.
            if generation == self._generation:
                self._entry = _CacheEntry(root=root, analysis=analysis)
            return analysis

    def invalidate(self) -> None:
        self._generation += 1
        self._entry = None

    @property
    def is_populated(self) -> bool:
        return self._entry is not None


__all__ = ["AnalysisCache"]
