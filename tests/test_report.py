"""Tests for the codebase analysis report."""

from sheikh.analysis.codebase_index import build_index
from sheikh.analysis.report import (
    ReportData,
    TestDetection,
    build_report_data,
    format_report,
    generate_recommendations,
    generate_report,
)


class TestReportData:
    def test_totals(self, sample_project):
        data = build_report_data(build_index(sample_project))
        assert data.total_files == 4
        assert data.file_types == {"markdown": 1, "python": 1, "javascript": 2}
        assert data.total_dependencies == 2
        assert data.total_lines == sum(r.line_count for r in build_index(sample_project))
        assert data.most_dependent[0] == ("src/api.js", 2)
        assert len(data.most_complex) == 4

    def test_lines_and_size_are_separate_totals(self, tmp_workdir):
        (tmp_workdir / "a.js").write_text("one\ntwo\n")
        (tmp_workdir / "b.py").write_text("x = 1")
        data = build_report_data(build_index(tmp_workdir))
        assert data.total_lines == 3 + 1
        assert data.total_size == 8 + 5
        report = format_report(data)
        assert "- Total Lines: 4" in report
        assert "- Total Size: 13 bytes" in report

    def test_empty_index(self, tmp_workdir):
        data = build_report_data(build_index(tmp_workdir))
        assert data.total_files == 0
        assert data.average_complexity == 0.0
        assert data.most_complex == []


class TestRecommendations:
    def test_no_tests_fires_by_file_type_even_with_test_files(self, tmp_workdir):
        (tmp_workdir / "app.test.js").write_text("test('works', () => {});\n")
        data = build_report_data(build_index(tmp_workdir))
        assert [r.type for r in data.recommendations] == ["testing"]

    def test_purpose_detection_finds_test_files(self, tmp_workdir):
        (tmp_workdir / "app.test.js").write_text("test('works', () => {});\n")
        data = build_report_data(build_index(tmp_workdir), TestDetection.PURPOSE)
        assert data.recommendations == []

    def test_high_complexity(self):
        data = ReportData(total_files=1, average_complexity=5.5, purposes={"testing": 1})
        recs = generate_recommendations(data, TestDetection.PURPOSE)
        assert [(r.type, r.priority) for r in recs] == [("complexity", "high")]

    def test_high_dependency_count(self, tmp_workdir):
        body = "".join(f"require('dep{i}');\n" for i in range(11))
        (tmp_workdir / "hub.js").write_text(body)
        data = build_report_data(build_index(tmp_workdir))
        assert "dependencies" in [r.type for r in data.recommendations]

    def test_ten_dependencies_is_not_high(self):
        data = ReportData(total_files=1, most_dependent=[("a.js", 10)])
        assert "dependencies" not in [r.type for r in generate_recommendations(data)]


class TestFormatReport:
    def test_sections_in_order(self, sample_project):
        report = generate_report(build_index(sample_project))
        headings = [line for line in report.splitlines() if line.startswith("#")]
        assert headings == [
            "# Codebase Analysis Report",
            "## Summary",
            "## File Types",
            "## Most Complex Files",
            "## Most Dependent Files",
            "## Recommendations",
        ]
        assert "- Total Files: 4" in report
        assert "- javascript: 2 files" in report
        assert "- src/api.js: 2 dependencies" in report
        assert "- **HIGH**: No test files found. Consider adding comprehensive tests." in report

    def test_deterministic(self, sample_project):
        index = build_index(sample_project)
        assert generate_report(index) == generate_report(index)
        assert generate_report(build_index(sample_project)) == generate_report(index)

    def test_formats_complexity_with_two_decimals(self):
        data = ReportData(total_files=1, average_complexity=1.0, most_complex=[("a.js", 2.0)])
        report = format_report(data)
        assert "- Average Complexity: 1.00" in report
        assert "- a.js: 2.00" in report
