"""
Unit tests for utils.text_utils module.
"""
from core.constants import INGREDIENT_KEYWORDS, METADATA_KEYWORDS
from utils.text_utils import contains_digit, contains_keyword


class TestContainsKeyword:
    """Tests for contains_keyword function."""

    def test_case_insensitive(self):
        """Test metadata keywords match regardless of case."""
        assert contains_keyword("Serves 4", METADATA_KEYWORDS)
        assert contains_keyword("PREP TIME: 10 min", METADATA_KEYWORDS)

    def test_substring_match(self):
        """Test keywords match inside longer words."""
        assert contains_keyword("2 cups sugar", INGREDIENT_KEYWORDS)
        assert contains_keyword("½ onion", INGREDIENT_KEYWORDS)

    def test_no_match(self):
        assert not contains_keyword("Preheat the oven", METADATA_KEYWORDS)

    def test_empty_text(self):
        assert not contains_keyword("", METADATA_KEYWORDS)
        assert not contains_keyword(None, METADATA_KEYWORDS)


class TestContainsDigit:
    """Tests for contains_digit function."""

    def test_digit(self):
        assert contains_digit("2 eggs")

    def test_no_digit(self):
        assert not contains_digit("butter")
        assert not contains_digit(None)
