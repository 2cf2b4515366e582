"""Tests for the per-file heuristic analyzers."""

import pytest

from sheikh.analysis.file_analyzer import (
    PythonAstAnalyzer,
    RegexFileAnalyzer,
    analyze_file,
    calculate_complexity,
    extract_dependencies,
    extract_key_terms,
    extract_patterns,
    generate_context,
    get_file_type,
    infer_purpose,
)


class TestFileType:
    @pytest.mark.parametrize("path,expected", [
        ("src/app.js", "javascript"),
        ("lib/mod.ts", "typescript"),
        ("tool.py", "python"),
        ("ci.yml", "yaml"),
        ("ci.yaml", "yaml"),
        ("Makefile", "unknown"),
        ("view.tsx", "unknown"),
    ])
    def test_extension_mapping(self, path, expected):
        assert get_file_type(path) == expected


class TestComplexity:
    def test_counts_lines_and_structural_keywords(self):
        # 3 lines + "function" + "class" -> log(6)
        assert calculate_complexity("function a() {}\nclass B {}\n") == 1.79

    def test_empty_content(self):
        assert calculate_complexity("") == 0.69

    @pytest.mark.parametrize("base", [
        "",
        "const x = 1;",
        "function f() {\n  return 1;\n}\n",
        "class A {}\nclass B {}\nconst y = () => 2;\n" * 20,
    ])
    def test_appending_a_block_never_lowers_complexity(self, base):
        extended = base + "\nif (ready) {\n  start();\n}\n"
        assert calculate_complexity(extended) >= calculate_complexity(base)


class TestDependencies:
    def test_scan_order_across_both_patterns(self):
        deps = extract_dependencies("const x = require('a'); import y from 'b';")
        assert deps == ["a", "b"]

    def test_duplicates_are_kept(self):
        assert extract_dependencies("import 'a';\nimport 'a';\n") == ["a", "a"]

    def test_python_from_import_is_not_a_quoted_reference(self):
        assert extract_dependencies("from os import path\n") == []

    def test_no_references(self):
        assert extract_dependencies("let x = 1;") == []


class TestPatterns:
    def test_counts_each_pattern(self):
        content = "async function load() { await fetch(); }\nclass Store {}\n"
        assert extract_patterns(content) == {
            "functions": 1,
            "classes": 1,
            "async": 1,
            "promises": 1,
        }


class TestContext:
    def test_key_terms_ranked_by_frequency(self):
        assert extract_key_terms("alpha beta beta gamma gamma gamma abc") == ["gamma", "beta", "alpha"]

    def test_key_terms_ties_keep_first_seen_order(self):
        assert extract_key_terms("zeta alpha") == ["zeta", "alpha"]

    def test_key_terms_are_lower_cased_and_capped(self):
        words = " ".join(f"word{i:02d}" for i in range(12))
        terms = extract_key_terms("Hello hello " + words)
        assert terms[0] == "hello"
        assert len(terms) == 10

    @pytest.mark.parametrize("content,purpose", [
        ("describe('x') spec", "testing"),
        ("api config loader", "configuration"),
        ("an endpoint handler", "api"),
        ("render the component", "ui"),
        ("plain code", "general"),
        ("TEST uppercase", "general"),
    ])
    def test_purpose_first_match(self, content, purpose):
        assert infer_purpose(content) == purpose

    def test_summary_truncates_and_always_appends_ellipsis(self):
        assert generate_context("x" * 250).summary == "x" * 200 + "..."
        assert generate_context("hi").summary == "hi..."


class TestRegexAnalyzer:
    def test_record_fields(self):
        content = "import React from 'react';\nfunction App() {}\n"
        record = analyze_file("src/App.js", content)
        assert record.path == "src/App.js"
        assert record.language == "javascript"
        assert record.size == len(content)
        assert record.line_count == 3
        assert record.dependencies == ["react"]
        assert record.patterns["functions"] == 1
        assert record.dependency_graph == []

    def test_deterministic(self):
        content = "const a = require('a');\nclass X {}\n"
        assert analyze_file("x.js", content) == analyze_file("x.js", content)


class TestPythonAstAnalyzer:
    SOURCE = (
        "import os\n"
        "from .util import helper\n"
        "\n"
        "async def run():\n"
        "    await helper()\n"
        "\n"
        "class Runner:\n"
        "    pass\n"
    )

    def test_imports_and_structure(self):
        record = PythonAstAnalyzer().analyze("pkg/run.py", self.SOURCE)
        assert record.language == "python"
        assert record.dependencies == ["os", ".util"]
        assert record.patterns == {"functions": 1, "classes": 1, "async": 1, "promises": 1}
        assert record.line_count == 9

    def test_non_python_uses_fallback(self):
        content = "import x from 'y';\n"
        assert PythonAstAnalyzer().analyze("a.js", content) == RegexFileAnalyzer().analyze("a.js", content)

    def test_syntax_error_uses_fallback(self):
        content = "def broken(:\n"
        record = PythonAstAnalyzer().analyze("bad.py", content)
        assert record == RegexFileAnalyzer().analyze("bad.py", content)
