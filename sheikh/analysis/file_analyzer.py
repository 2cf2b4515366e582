"""Per-file metadata extraction: language, complexity, dependencies, context.

The default analyzer is a regex/keyword heuristic layer. Its numbers are
not validated metrics: ``complexity`` is a sub-linear function of line
count plus a few structural keywords and says nothing about cyclomatic
complexity. Reports and search are calibrated against these exact
heuristics, so ``RegexFileAnalyzer`` is the default everywhere.
``PythonAstAnalyzer`` is an alternate with the same output shape.
"""

from __future__ import annotations

import ast
import math
import re
from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass, field
from pathlib import PurePath

from sheikh.config import MAX_KEY_TERMS, SUMMARY_CHARS


LANGUAGE_BY_EXTENSION: dict[str, str] = {
    ".js": "javascript",
    ".ts": "typescript",
    ".py": "python",
    ".java": "java",
    ".go": "go",
    ".rs": "rust",
    ".md": "markdown",
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
}
UNKNOWN_LANGUAGE = "unknown"

# Ordered: first match wins
PURPOSE_RULES: list[tuple[tuple[str, ...], str]] = [
    (("test", "spec"), "testing"),
    (("config",), "configuration"),
    (("api", "endpoint"), "api"),
    (("component", "render"), "ui"),
]
DEFAULT_PURPOSE = "general"

_STRUCTURAL_RE = re.compile(r"function|class|const.*=")
_IMPORT_RE = re.compile(r"""(?:import|require|from)\s+['"]([^'"]+)['"]""")
_REQUIRE_CALL_RE = re.compile(r"""require\s*\(\s*['"]([^'"]+)['"]\s*\)""")
_WORD_RE = re.compile(r"\b\w{4,}\b")

_PATTERN_RES: dict[str, re.Pattern[str]] = {
    "functions": re.compile(r"function\s+\w+"),
    "classes": re.compile(r"class\s+\w+"),
    "async": re.compile(r"async\s+"),
    "promises": re.compile(r"Promise|await"),
}


@dataclass
class FileContext:
    """Semantic summary of a file."""

    summary: str
    key_terms: list[str]
    purpose: str


@dataclass
class FileAnalysisRecord:
    """Analysis of a single file. One per indexed path.

    Only ``dependency_graph`` and ``relationships`` are filled in later,
    by the index's relationship pass.
    """

    path: str
    language: str
    size: int
    line_count: int
    complexity: float
    dependencies: list[str]
    patterns: dict[str, int]
    context: FileContext
    dependency_graph: list[str] = field(default_factory=list)
    relationships: list[str] = field(default_factory=list)


# ── Heuristic primitives ─────────────────────────────────────────────────────


def get_file_type(path: str) -> str:
    """Classify a file by extension alone."""
    return LANGUAGE_BY_EXTENSION.get(PurePath(path).suffix, UNKNOWN_LANGUAGE)


def _round2(value: float) -> float:
    return round(value * 100) / 100


def calculate_complexity(content: str) -> float:
    """``round(log(lines + structural_keywords + 1), 2)``."""
    lines = content.count("\n") + 1
    structural = len(_STRUCTURAL_RE.findall(content))
    return _round2(math.log(lines + structural + 1))


def extract_dependencies(content: str) -> list[str]:
    """Module references in scan order.

    Matches of ``import/require/from '<x>'`` and ``require('<x>')`` are merged by
    position in the text. Repeated references are kept.
    """
    matches = [(m.start(), m.group(1)) for m in _IMPORT_RE.finditer(content)]
    matches.extend((m.start(), m.group(1)) for m in _REQUIRE_CALL_RE.finditer(content))
    matches.sort(key=lambda item: item[0])
    return [name for _, name in matches]


def extract_patterns(content: str) -> dict[str, int]:
    return {name: len(rx.findall(content)) for name, rx in _PATTERN_RES.items()}


def extract_key_terms(content: str, limit: int = MAX_KEY_TERMS) -> list[str]:
    """Most frequent lower-cased words of length >= 4; ties keep first-seen order."""
    counts = Counter(_WORD_RE.findall(content.lower()))
    ranked = sorted(counts.items(), key=lambda item: -item[1])
    return [word for word, _ in ranked[:limit]]


def infer_purpose(content: str) -> str:
    for needles, purpose in PURPOSE_RULES:
        if any(needle in content for needle in needles):
            return purpose
    return DEFAULT_PURPOSE


def generate_context(content: str) -> FileContext:
    return FileContext(
        summary=content[:SUMMARY_CHARS] + "...",
        key_terms=extract_key_terms(content),
        purpose=infer_purpose(content),
    )


# ── Analyzers ────────────────────────────────────────────────────────────────


class FileAnalyzer(ABC):
    """Turns (path, content) into a FileAnalysisRecord without touching disk."""

    @abstractmethod
    def analyze(self, path: str, content: str) -> FileAnalysisRecord:
        ...


class RegexFileAnalyzer(FileAnalyzer):
    """Default keyword/regex analyzer."""

    def analyze(self, path: str, content: str) -> FileAnalysisRecord:
        return FileAnalysisRecord(
            path=path,
            language=get_file_type(path),
            size=len(content),
            line_count=content.count("\n") + 1,
            complexity=calculate_complexity(content),
            dependencies=extract_dependencies(content),
            patterns=extract_patterns(content),
            context=generate_context(content),
        )


class PythonAstAnalyzer(FileAnalyzer):
    """Parses Python sources with ``ast`` for structure and imports.

    Non-Python files, and Python files that fail to parse, go through
    the regex analyzer so the record shape never changes.
    """

    _STRUCTURAL_NODES = (
        ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef,
        ast.If, ast.For, ast.AsyncFor, ast.While, ast.Try, ast.With, ast.AsyncWith,
    )

    def __init__(self, fallback: FileAnalyzer | None = None):
        self.fallback = fallback or RegexFileAnalyzer()

    def analyze(self, path: str, content: str) -> FileAnalysisRecord:
        if get_file_type(path) != "python":
            return self.fallback.analyze(path, content)
        try:
            tree = ast.parse(content, filename=path)
        except (SyntaxError, ValueError):
            return self.fallback.analyze(path, content)

        nodes = list(ast.walk(tree))
        dependencies: list[str] = []
        for node in nodes:
            if isinstance(node, ast.Import):
                dependencies.extend(alias.name for alias in node.names)
            elif isinstance(node, ast.ImportFrom) and node.module:
                dependencies.append("." * node.level + node.module)

        structural = sum(isinstance(n, self._STRUCTURAL_NODES) for n in nodes)
        lines = content.count("\n") + 1

        return FileAnalysisRecord(
            path=path,
            language="python",
            size=len(content),
            line_count=lines,
            complexity=_round2(math.log(lines + structural + 1)),
            dependencies=dependencies,
            patterns={
                "functions": sum(isinstance(n, (ast.FunctionDef, ast.AsyncFunctionDef)) for n in nodes),
                "classes": sum(isinstance(n, ast.ClassDef) for n in nodes),
                "async": sum(isinstance(n, (ast.AsyncFunctionDef, ast.AsyncFor, ast.AsyncWith)) for n in nodes),
                "promises": sum(isinstance(n, ast.Await) for n in nodes),
            },
            context=generate_context(content),
        )


_default_analyzer = RegexFileAnalyzer()


def analyze_file(path: str, content: str) -> FileAnalysisRecord:
    """Analyze one file with the default heuristic analyzer."""
    return _default_analyzer.analyze(path, content)
