from __future__ import annotations

import pytest

from csvrecords.parsing.tokenizer import RowTokenizer, tokenize_row


@pytest.mark.parametrize(
    "line, expected",
    [
        ("a,b,c", ["a", "b", "c"]),
        ("a,,c", ["a", "", "c"]),
        (",", ["", ""]),
        ("a,b,", ["a", "b", ""]),
        ("", [""]),
        ("single", ["single"]),
    ],
)
def test_unquoted_fields_split_on_every_delimiter(line: str, expected: list[str]) -> None:
    """N delimiters -> N+1 fields, each the literal text between them."""
    assert tokenize_row(line) == expected
    assert len(tokenize_row(line)) == line.count(",") + 1


def test_quoted_field_keeps_delimiter() -> None:
    assert tokenize_row('John,"Software Engineer, Senior"') == ["John", "Software Engineer, Senior"]


def test_doubled_quotes_unescape() -> None:
    assert tokenize_row('John,"He said ""Hello"" to me"') == ["John", 'He said "Hello" to me']


def test_closing_quote_before_delimiter_ends_field() -> None:
    """The delimiter after a closing quote is a field boundary, not swallowed."""
    assert tokenize_row('"a,1","b",c') == ["a,1", "b", "c"]
    assert tokenize_row('x,"y",z') == ["x", "y", "z"]


def test_empty_quoted_field() -> None:
    assert tokenize_row('"",x') == ["", "x"]


def test_distinct_escape_char_in_quoted_and_unquoted_text() -> None:
    tok = RowTokenizer(delimiter=",", quote_char='"', escape_char="\\")
    assert tok.tokenize('"say \\"hi\\"",x') == ['say "hi"', "x"]
    assert tok.tokenize('a\\"b,c') == ['a"b', "c"]


def test_escape_not_before_quote_is_kept() -> None:
    tok = RowTokenizer(escape_char="\\")
    assert tok.tokenize("C:\\temp,x") == ["C:\\temp", "x"]
    assert tok.tokenize("trailing\\") == ["trailing\\"]


def test_custom_delimiter_and_quote() -> None:
    tok = RowTokenizer(delimiter=";", quote_char="'", escape_char="'")
    assert tok.tokenize("'a;b';'it''s'") == ["a;b", "it's"]


def test_stray_mid_field_quote_toggles_quoting() -> None:
    """A bare quote mid-field opens a quoted region; the quote itself is dropped."""
    assert tokenize_row('ab"c,d"e,f') == ["abc,de", "f"]


def test_unterminated_quote_keeps_buffer() -> None:
    assert tokenize_row('"Unclosed quote,40,x') == ["Unclosed quote,40,x"]
