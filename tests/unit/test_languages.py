"""Tests for the surface language registry and ruleset lookup."""

import pytest

from stepviz.languages import (
    SUPPORTED_LANGUAGES,
    UnsupportedLanguageError,
    get_language,
    is_visualizable,
)
from stepviz.parser import first_error, parse_host
from stepviz.rewrite import TRANSPILABLE_LANGUAGES, get_ruleset


class TestRegistry:
    def test_closed_language_set(self):
        assert set(SUPPORTED_LANGUAGES) == {"javascript", "cpp", "java", "python"}

    def test_display_names_and_versions(self):
        assert get_language("cpp").name == "C++"
        assert get_language("javascript").version == "18.15.0"

    def test_keywords_for_editor(self):
        assert "cout" in get_language("cpp").keywords
        assert "println" in get_language("java").keywords

    def test_unknown_language_raises_value_error(self):
        with pytest.raises(ValueError, match="Unsupported language: cobol"):
            get_language("cobol")

    def test_visualizable(self):
        assert is_visualizable("javascript")
        assert is_visualizable("cpp")
        assert is_visualizable("java")
        assert not is_visualizable("python")
        assert not is_visualizable("cobol")

    def test_every_transpilable_language_has_a_ruleset(self):
        for key in SUPPORTED_LANGUAGES:
            spec = get_language(key)
            assert spec.transpilable == (key in TRANSPILABLE_LANGUAGES), key

    def test_python_has_no_ruleset(self):
        with pytest.raises(UnsupportedLanguageError):
            get_ruleset("python")


class TestHostParser:
    def test_parses_program(self):
        root = parse_host("let a = 1;\n").root_node
        assert not root.has_error
        assert root.named_children[0].type == "lexical_declaration"

    def test_first_error_locates_bad_line(self):
        root = parse_host("let a = 1;\nlet b = (2 + ;\n").root_node
        bad = first_error(root)
        assert bad is not None
        assert bad.start_point[0] == 1

    def test_clean_tree_has_no_error(self):
        assert first_error(parse_host("const x = [1, 2];").root_node) is None
