"""Codebase analysis: per-file heuristics, index, search, and reports."""

from sheikh.analysis.file_analyzer import (
    FileAnalysisRecord,
    FileAnalyzer,
    FileContext,
    PythonAstAnalyzer,
    RegexFileAnalyzer,
    analyze_file,
)
from sheikh.analysis.relevance import calculate_relevance
from sheikh.analysis.codebase_index import CodebaseIndex, SearchResult, build_index, search
from sheikh.analysis.report import TestDetection, build_report_data, generate_report

__all__ = [
    "FileAnalysisRecord",
    "FileAnalyzer",
    "FileContext",
    "PythonAstAnalyzer",
    "RegexFileAnalyzer",
    "analyze_file",
    "calculate_relevance",
    "CodebaseIndex",
    "SearchResult",
    "build_index",
    "search",
    "TestDetection",
    "build_report_data",
    "generate_report",
]
