"""Tests for the data path parser."""

import pytest

from json_tables.parsing import (
    AppendSegment,
    IndexSegment,
    KeySegment,
    PathParser,
    format_path,
)
from json_tables.parsing.path_lexer import PathLexer


class TestPathLexer:
    """Tests for the path lexer."""

    def test_tokenize_table_path(self):
        """Test tokenizing a plain table path."""
        lexer = PathLexer()
        lexer.build()

        tokens = lexer.tokenize("/participant")
        assert [t.type for t in tokens] == ["SLASH", "KEY"]
        assert tokens[1].value == "participant"

    def test_tokenize_index(self):
        """Test tokenizing an indexed element."""
        lexer = PathLexer()
        lexer.build()

        tokens = lexer.tokenize("/match[12]")
        assert [t.type for t in tokens] == ["SLASH", "KEY", "LBRACKET", "INTEGER", "RBRACKET"]
        assert tokens[3].value == 12

    def test_tokenize_append(self):
        """Test tokenizing an append slot."""
        lexer = PathLexer()
        lexer.build()

        tokens = lexer.tokenize("/round[]")
        assert [t.type for t in tokens] == ["SLASH", "KEY", "LBRACKET", "RBRACKET"]

    def test_digits_in_keys_stay_keys(self):
        """Digits outside brackets belong to the key."""
        lexer = PathLexer()
        lexer.build()

        tokens = lexer.tokenize("/opponent1/score")
        assert [t.type for t in tokens] == ["SLASH", "KEY", "SLASH", "KEY"]
        assert tokens[1].value == "opponent1"

    def test_non_integer_index_rejected(self):
        """Test that brackets only hold integers."""
        lexer = PathLexer()
        lexer.build()

        with pytest.raises(SyntaxError):
            lexer.tokenize("/match[first]")

    def test_stray_bracket_rejected(self):
        """Test that a closing bracket without an opening one is illegal."""
        lexer = PathLexer()
        lexer.build()

        with pytest.raises(SyntaxError):
            lexer.tokenize("/match]")


class TestPathParser:
    """Tests for the path parser."""

    def test_parse_table(self):
        """Test parsing a table path into a single key."""
        parser = PathParser()
        assert parser.parse("/participant") == (KeySegment("participant"),)

    def test_parse_nested_with_indexes(self):
        """Test parsing nested keys with positive and negative indexes."""
        parser = PathParser()
        assert parser.parse("/a/b[0][-1]/c") == (
            KeySegment("a"),
            KeySegment("b"),
            IndexSegment(0),
            IndexSegment(-1),
            KeySegment("c"),
        )

    def test_parse_append(self):
        """Test parsing an append slot."""
        parser = PathParser()
        assert parser.parse("/stage[]") == (KeySegment("stage"), AppendSegment())

    def test_parse_root(self):
        """Empty path and lone slash both address the root."""
        parser = PathParser()
        assert parser.parse("") == ()
        assert parser.parse("/") == ()

    def test_trailing_slash_ignored(self):
        """Test that a trailing slash adds no segment."""
        parser = PathParser()
        assert parser.parse("/group/") == (KeySegment("group"),)

    def test_missing_leading_slash(self):
        """Test that a path must start with a slash."""
        parser = PathParser()
        with pytest.raises(SyntaxError):
            parser.parse("participant")

    def test_index_without_key(self):
        """Test that an index needs a key before it."""
        parser = PathParser()
        with pytest.raises(SyntaxError):
            parser.parse("/[0]")

    def test_unterminated_index(self):
        """Test that an unclosed bracket is a syntax error."""
        parser = PathParser()
        with pytest.raises(SyntaxError):
            parser.parse("/match[3")

    def test_recovers_after_error(self):
        """A failed parse leaves the parser usable."""
        parser = PathParser()
        with pytest.raises(SyntaxError):
            parser.parse("/match[")
        assert parser.parse("/match[1]") == (KeySegment("match"), IndexSegment(1))

    def test_table_paths_cached(self):
        """Paths without an index are parsed once and reused."""
        parser = PathParser()
        assert parser.parse("/round") is parser.parse("/round")
        assert parser.parse("/round[]") is parser.parse("/round[]")

    def test_indexed_paths_not_cached(self):
        """Indexed paths do not accumulate in the cache."""
        parser = PathParser()
        for index in range(50):
            assert parser.parse(f"/match[{index}]") == (KeySegment("match"), IndexSegment(index))
        parser.parse("/match")

        assert list(parser._cache) == ["/match"]


class TestFormatPath:
    """Tests for rendering segments back to a path."""

    def test_round_trip_shapes(self):
        """Test rendering keys, indexes and append slots."""
        segments = (KeySegment("a"), IndexSegment(2), AppendSegment())
        assert format_path(segments) == "/a[2][]"

    def test_root(self):
        """Test that no segments render as the root."""
        assert format_path(()) == "/"
