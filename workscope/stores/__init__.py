"""In-memory stores for workscope analysis results."""

from .analysis_cache import AnalysisCache

__all__ = ["AnalysisCache"]
