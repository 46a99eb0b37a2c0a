"""Document and style analysis."""

from __future__ import annotations

from blogagent.analysis.document_analyzer import DocumentAnalyzer, analyze_document
from blogagent.analysis.style_profiler import StyleProfiler

__all__ = ["DocumentAnalyzer", "StyleProfiler", "analyze_document"]
