"""Indexed, searchable view of a project's source files."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path

from sheikh.analysis.file_analyzer import (
    FileAnalysisRecord,
    FileAnalyzer,
    FileContext,
    RegexFileAnalyzer,
)
from sheikh.analysis.relevance import calculate_relevance
from sheikh.config import DEPENDENCY_CACHE_DIR, INDEXED_EXTENSIONS, RELEVANCE_THRESHOLD
from sheikh.errors import ValidationError

logger = logging.getLogger("sheikh.analysis.index")


@dataclass
class SearchResult:
    """A ranked search match."""

    file: str  # path relative to the index root
    relevance: float
    context: FileContext
    dependencies: list[str]


class CodebaseIndex:
    """Mapping of relative path -> FileAnalysisRecord for one project root.

    ``build()`` always rebuilds from scratch; there is no incremental
    update. The new mapping replaces the old one only once it is complete.
    """

    def __init__(self, root: str | Path, analyzer: FileAnalyzer | None = None):
        self.root = Path(root)
        self.analyzer = analyzer or RegexFileAnalyzer()
        self._records: dict[str, FileAnalysisRecord] = {}
        self.built_at: float = 0.0

    # ── Build ────────────────────────────────────────────────────────────

    def build(self) -> CodebaseIndex:
        """Enumerate, read and analyze every indexable file under root."""
        if not self.root.is_dir():
            raise ValidationError(f"Not a directory: {self.root}")

        started = time.time()
        records: dict[str, FileAnalysisRecord] = {}
        for path in self.list_files():
            relative = path.relative_to(self.root).as_posix()
            try:
                content = path.read_text(encoding="utf-8", errors="replace")
            except OSError as e:
                logger.warning("Skipping unreadable file %s: %s", relative, e)
                continue
            records[relative] = self.analyzer.analyze(relative, content)

        self._link_relationships(records)
        self._records = records
        self.built_at = time.time()
        logger.info(
            "Indexed %d files under %s in %.2fs",
            len(records), self.root, self.built_at - started,
        )
        return self

    def list_files(self) -> list[Path]:
        """Indexable files, depth-first in sorted directory order.

        Hidden directories, the dependency cache directory and symlinks are
        skipped, so a link cycle cannot index the same file twice.
        """
        files: list[Path] = []

        def walk(directory: Path):
            try:
                entries = sorted(directory.iterdir(), key=lambda p: p.name)
            except OSError as e:
                logger.warning("Cannot list %s: %s", directory, e)
                return
            for entry in entries:
                if entry.is_symlink():
                    continue
                if entry.is_dir():
                    if entry.name.startswith(".") or entry.name == DEPENDENCY_CACHE_DIR:
                        continue
                    walk(entry)
                elif entry.is_file() and entry.name.endswith(tuple(INDEXED_EXTENSIONS)):
                    files.append(entry)

        walk(self.root)
        return files

    @staticmethod
    def _link_relationships(records: dict[str, FileAnalysisRecord]):
        """Attach indexed files whose path contains (or ends with) a dependency."""
        paths = list(records)
        for record in records.values():
            graph: list[str] = []
            for dep in record.dependencies:
                graph.extend(p for p in paths if dep in p or p.endswith(dep))
            record.dependency_graph = graph
            record.relationships = list(graph)

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def records(self) -> dict[str, FileAnalysisRecord]:
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self):
        return iter(self._records.values())

    def get(self, path: str) -> FileAnalysisRecord | None:
        return self._records.get(path)

    def search(self, query: str, threshold: float = RELEVANCE_THRESHOLD) -> list[SearchResult]:
        """Records scoring strictly above ``threshold``, best first.

        The sort is stable, so equal scores keep index order.
        """
        if not query or not query.strip():
            raise ValidationError("Search query is required")

        results: list[SearchResult] = []
        for path, record in self._records.items():
            relevance = calculate_relevance(query, record)
            if relevance > threshold:
                results.append(SearchResult(
                    file=path,
                    relevance=relevance,
                    context=record.context,
                    dependencies=record.dependencies,
                ))

        results.sort(key=lambda r: r.relevance, reverse=True)
        logger.debug("Search %r matched %d of %d files", query, len(results), len(self._records))
        return results


def build_index(root: str | Path, analyzer: FileAnalyzer | None = None) -> CodebaseIndex:
    return CodebaseIndex(root, analyzer=analyzer).build()


def search(index: CodebaseIndex, query: str) -> list[SearchResult]:
    return index.search(query)
