"""
Tests for the command tokenizer

Quote-aware splitting of console lines: quoted spans become single
tokens with the quotes stripped, and malformed quoting never raises.
"""

from wmbrowse.core.tokenizer import extract_components, split_keyword


class TestExtractComponents:
    """Tests for extract_components()."""

    def test_double_quoted_span_is_one_token(self):
        """a "b c" d → [a, b c, d]."""
        assert extract_components('a "b c" d') == ["a", "b c", "d"]

    def test_single_quoted_span_is_one_token(self):
        assert extract_components("update 'room 101' 'display name'") == [
            "update", "room 101", "display name"
        ]

    def test_mixed_quotes(self):
        assert extract_components("""cp "it's" 'say "hi"'""") == ["cp", "it's", 'say "hi"']

    def test_empty_input(self):
        """Empty input yields no tokens."""
        assert extract_components("") == []

    def test_whitespace_only_input(self):
        assert extract_components("   \t  ") == []

    def test_none_input(self):
        assert extract_components(None) == []

    def test_collapses_runs_of_whitespace(self):
        assert extract_components("  search \t room.*   sensor.* ") == ["search", "room.*", "sensor.*"]

    def test_empty_quoted_string(self):
        """An empty quoted span is an empty token."""
        assert extract_components('update "" name') == ["update", "", "name"]

    def test_unterminated_quote_is_literal(self):
        """An unmatched quote degrades to a literal character."""
        assert extract_components('rm "broken') == ["rm", '"broken']

    def test_unterminated_single_quote_is_literal(self):
        assert extract_components("rm 'broken id") == ["rm", "'broken", "id"]

    def test_regex_characters_survive(self):
        assert extract_components("search room\\.[0-9]+") == ["search", "room\\.[0-9]+"]


class TestSplitKeyword:
    """Tests for split_keyword()."""

    def test_keyword_is_lowercased(self):
        """Dispatch is case-insensitive."""
        assert split_keyword("SEARCH room.*") == ("search", ["room.*"])

    def test_arguments_keep_case(self):
        assert split_keyword("touch Door.A") == ("touch", ["Door.A"])

    def test_blank_line(self):
        assert split_keyword("   ") == ("", [])

    def test_keyword_only(self):
        assert split_keyword("help") == ("help", [])
