"""Codebase summary statistics and heuristic recommendations."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sheikh.analysis.codebase_index import CodebaseIndex


COMPLEXITY_THRESHOLD = 5
DEPENDENCY_THRESHOLD = 10
TOP_N = 5


class TestDetection(str, Enum):
    """How the "no tests" recommendation decides whether tests exist.

    FILE_TYPE counts files whose language tag is ``test``. No extension
    maps to that tag, so the recommendation always fires; this is the
    long-standing behavior and stays the default. PURPOSE counts files
    whose inferred purpose is ``testing``.
    """

    __test__ = False

    FILE_TYPE = "file_type"
    PURPOSE = "purpose"


@dataclass
class Recommendation:
    type: str
    message: str
    priority: str  # high | medium | low


@dataclass
class ReportData:
    """Structured form of the analysis report."""

    total_files: int = 0
    total_lines: int = 0
    total_size: int = 0
    average_complexity: float = 0.0
    total_dependencies: int = 0
    file_types: dict[str, int] = field(default_factory=dict)
    purposes: dict[str, int] = field(default_factory=dict)
    most_complex: list[tuple[str, float]] = field(default_factory=list)
    most_dependent: list[tuple[str, int]] = field(default_factory=list)
    recommendations: list[Recommendation] = field(default_factory=list)


def build_report_data(
    index: CodebaseIndex,
    test_detection: TestDetection = TestDetection.FILE_TYPE,
) -> ReportData:
    data = ReportData(total_files=len(index))
    total_complexity = 0.0

    for record in index:
        data.file_types[record.language] = data.file_types.get(record.language, 0) + 1
        purpose = record.context.purpose
        data.purposes[purpose] = data.purposes.get(purpose, 0) + 1
        data.total_lines += record.line_count
        data.total_size += record.size
        data.total_dependencies += len(record.dependencies)
        total_complexity += record.complexity

    if data.total_files:
        data.average_complexity = total_complexity / data.total_files

    records = list(index)
    data.most_complex = [
        (r.path, r.complexity)
        for r in sorted(records, key=lambda r: r.complexity, reverse=True)[:TOP_N]
    ]
    data.most_dependent = [
        (r.path, len(r.dependencies))
        for r in sorted(records, key=lambda r: len(r.dependencies), reverse=True)[:TOP_N]
    ]
    data.recommendations = generate_recommendations(data, test_detection)
    return data


def generate_recommendations(
    data: ReportData,
    test_detection: TestDetection = TestDetection.FILE_TYPE,
) -> list[Recommendation]:
    recommendations: list[Recommendation] = []

    if data.average_complexity > COMPLEXITY_THRESHOLD:
        recommendations.append(Recommendation(
            type="complexity",
            message="High average complexity detected. Consider refactoring complex files.",
            priority="high",
        ))

    if data.most_dependent and data.most_dependent[0][1] > DEPENDENCY_THRESHOLD:
        recommendations.append(Recommendation(
            type="dependencies",
            message="Some files have high dependency counts. Consider breaking them down.",
            priority="medium",
        ))

    if test_detection is TestDetection.PURPOSE:
        test_files = data.purposes.get("testing", 0)
    else:
        test_files = data.file_types.get("test", 0)
    if test_files == 0:
        recommendations.append(Recommendation(
            type="testing",
            message="No test files found. Consider adding comprehensive tests.",
            priority="high",
        ))

    return recommendations


def format_report(data: ReportData) -> str:
    lines = ["# Codebase Analysis Report", ""]

    lines.append("## Summary")
    lines.append(f"- Total Files: {data.total_files}")
    lines.append(f"- Total Lines: {data.total_lines}")
    lines.append(f"- Total Size: {data.total_size} bytes")
    lines.append(f"- Average Complexity: {data.average_complexity:.2f}")
    lines.append(f"- Total Dependencies: {data.total_dependencies}")
    lines.append("")

    lines.append("## File Types")
    for language, count in data.file_types.items():
        lines.append(f"- {language}: {count} files")
    lines.append("")

    lines.append("## Most Complex Files")
    for path, complexity in data.most_complex:
        lines.append(f"- {path}: {complexity:.2f}")
    lines.append("")

    lines.append("## Most Dependent Files")
    for path, count in data.most_dependent:
        lines.append(f"- {path}: {count} dependencies")
    lines.append("")

    lines.append("## Recommendations")
    for rec in data.recommendations:
        lines.append(f"- **{rec.priority.upper()}**: {rec.message}")

    return "\n".join(lines) + "\n"


def generate_report(
    index: CodebaseIndex,
    test_detection: TestDetection = TestDetection.FILE_TYPE,
) -> str:
    """Markdown report for the index. Same index in, same bytes out."""
    return format_report(build_report_data(index, test_detection))
