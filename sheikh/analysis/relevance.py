"""Query-to-file relevance scoring.

An ad hoc weighted match, not an IR ranking model. Weights sum to 1.0:

    path       0.3  any term is a substring of the path
    key terms  0.4  fraction of terms found in context.key_terms
    purpose    0.2  any term is a substring of context.purpose
    deps       0.1  fraction of terms found inside some dependency
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sheikh.analysis.file_analyzer import FileAnalysisRecord


PATH_WEIGHT = 0.3
KEY_TERM_WEIGHT = 0.4
PURPOSE_WEIGHT = 0.2
DEPENDENCY_WEIGHT = 0.1


def query_terms(query: str) -> list[str]:
    """Lower-case and split on single spaces (empty terms are kept)."""
    return query.lower().split(" ")


def calculate_relevance(query: str, record: FileAnalysisRecord) -> float:
    terms = query_terms(query)
    path = record.path.lower()
    key_terms = record.context.key_terms
    purpose = record.context.purpose

    score = 0.0

    if any(term in path for term in terms):
        score += PATH_WEIGHT

    term_matches = sum(1 for term in terms if term in key_terms)
    score += (term_matches / len(terms)) * KEY_TERM_WEIGHT

    if any(term in purpose for term in terms):
        score += PURPOSE_WEIGHT

    dep_matches = sum(
        1 for term in terms
        if any(term in dep for dep in record.dependencies)
    )
    score += (dep_matches / len(terms)) * DEPENDENCY_WEIGHT

    return min(score, 1.0)
