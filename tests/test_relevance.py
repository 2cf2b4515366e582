"""Tests for query relevance scoring."""

import pytest

from sheikh.analysis.file_analyzer import FileAnalysisRecord, FileContext
from sheikh.analysis.relevance import calculate_relevance, query_terms


def make_record(path="lib/x.js", key_terms=(), purpose="general", dependencies=()):
    return FileAnalysisRecord(
        path=path,
        language="javascript",
        size=0,
        line_count=1,
        complexity=0.69,
        dependencies=list(dependencies),
        patterns={},
        context=FileContext(summary="...", key_terms=list(key_terms), purpose=purpose),
    )


class TestQueryTerms:
    def test_lower_cases_and_splits_on_single_spaces(self):
        assert query_terms("User  Auth") == ["user", "", "auth"]


class TestCalculateRelevance:
    def test_no_match_scores_zero(self):
        assert calculate_relevance("payment", make_record()) == 0.0

    def test_path_match_only(self):
        assert calculate_relevance("auth", make_record(path="src/auth.js")) == pytest.approx(0.3)

    def test_path_match_is_case_insensitive(self):
        assert calculate_relevance("AUTH", make_record(path="src/Auth.js")) == pytest.approx(0.3)

    def test_key_terms_weighted_by_fraction_of_terms(self):
        record = make_record(key_terms=["user"])
        assert calculate_relevance("user auth", record) == pytest.approx(0.2)

    def test_purpose_alone_contributes_its_weight(self):
        record = make_record(purpose="testing")
        assert calculate_relevance("testing", record) == pytest.approx(0.2)

    def test_dependency_fraction(self):
        record = make_record(dependencies=["./user-service"])
        assert calculate_relevance("user auth", record) == pytest.approx(0.05)

    def test_all_signals_sum_to_one(self):
        record = make_record(
            path="src/config.js",
            key_terms=["config"],
            purpose="configuration",
            dependencies=["config"],
        )
        assert calculate_relevance("config", record) == pytest.approx(1.0)
        assert calculate_relevance("config", record) <= 1.0

    def test_empty_term_matches_path_and_purpose(self):
        # A double space yields an empty term, which is a substring of everything
        assert calculate_relevance("zz  qq", make_record()) == pytest.approx(0.5)
