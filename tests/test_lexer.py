import pytest
from hypothesis import given
from hypothesis import strategies as st

from askl.askl_errors import (
    AsklSyntaxError,
    InvalidIdentifier,
    UnterminatedComment,
    UnterminatedString,
)
from askl.askl_lexer import (
    CharacterStream,
    Lexer,
    Token,
    is_identifier_continue,
    is_identifier_start,
)


def tokenize(source: str) -> list[Token]:
    return Lexer(CharacterStream(source)).tokenize()


def types(source: str) -> list[str]:
    return [tok.type for tok in tokenize(source)]


def test_single_char_tokens() -> None:
    code = "@ ( ) , = { } ;"
    expected = [
        "AT",
        "LPAREN",
        "RPAREN",
        "COMMA",
        "EQUALS",
        "LBRACE",
        "RBRACE",
        "SEMICOLON",
        "EOF",
    ]
    assert types(code) == expected


def test_string_token() -> None:
    tok = Lexer(CharacterStream('"hello world"')).next_token()
    assert tok.type == "STRING"
    assert tok.value == "hello world"


def test_empty_string_token() -> None:
    tok = Lexer(CharacterStream('""')).next_token()
    assert tok.type == "STRING"
    assert tok.value == ""


def test_backslash_is_not_an_escape() -> None:
    toks = tokenize('"a\\" "b"')
    assert toks[0] == Token("STRING", "a\\", 1, 1, 0)
    assert toks[1] == Token("STRING", "b", 1, 6, 5)


def test_string_may_contain_newlines_and_comment_markers() -> None:
    toks = tokenize('"line1\n/* not a comment */"')
    assert toks[0].type == "STRING"
    assert toks[0].value == "line1\n/* not a comment */"
    assert toks[1].type == "EOF"


def test_identifier_token() -> None:
    tok = Lexer(CharacterStream("my_verb2")).next_token()
    assert tok.type == "IDENT"
    assert tok.value == "my_verb2"


@pytest.mark.parametrize("ident", ["ünïcödé", "名前", "a_private", "Δx", "a1_b2"])  # type: ignore[misc]
def test_unicode_identifiers(ident: str) -> None:
    toks = tokenize(ident)
    assert toks[0] == Token("IDENT", ident, 1, 1, 0)
    assert toks[1].type == "EOF"


def test_no_reserved_words() -> None:
    assert [t.type for t in tokenize("if else return")] == [
        "IDENT",
        "IDENT",
        "IDENT",
        "EOF",
    ]


def test_identifier_character_classes() -> None:
    assert is_identifier_start("a")
    assert not is_identifier_start("_")
    assert is_identifier_continue("_")
    assert not is_identifier_start("1")
    assert not is_identifier_start("")
    assert is_identifier_continue("1")
    assert not is_identifier_continue("-")
    assert not is_identifier_continue("")


def test_digit_is_not_an_identifier() -> None:
    toks = tokenize("1")
    assert toks[0] == Token("ERROR", "1", 1, 1, 0)


def test_scan_identifier_raises_on_invalid_start() -> None:
    lexer = Lexer(CharacterStream("9lives"))
    with pytest.raises(InvalidIdentifier) as excinfo:
        lexer.scan_identifier()
    assert excinfo.value.position == 0
    assert excinfo.value.found == "'9'"


def test_newline_tokens() -> None:
    toks = tokenize("a\nb\r\nc\rd")
    assert [t.type for t in toks] == [
        "IDENT",
        "NEWLINE",
        "IDENT",
        "NEWLINE",
        "IDENT",
        "NEWLINE",
        "IDENT",
        "EOF",
    ]
    assert toks[3].value == "\r\n"
    assert [(t.line, t.col) for t in toks if t.type == "IDENT"] == [
        (1, 1),
        (2, 1),
        (3, 1),
        (4, 1),
    ]


def test_line_column_and_offset_tracking() -> None:
    toks = tokenize('@a\n  "b"')
    string_tok = toks[3]
    assert string_tok.type == "STRING"
    assert (string_tok.line, string_tok.col, string_tok.offset) == (2, 3, 5)


def test_skip_whitespace_and_comments() -> None:
    toks = tokenize(" \t/* a comment */\t@ /* another */ x")
    assert [t.type for t in toks] == ["AT", "IDENT", "EOF"]
    assert toks[0].offset == 18


def test_comment_spanning_lines_swallows_newline() -> None:
    assert types("a /* one\ntwo */ b") == ["IDENT", "IDENT", "EOF"]


def test_comments_do_not_nest() -> None:
    # the first */ closes the comment, leaving "*/" behind as stray characters
    toks = tokenize("/* outer /* inner */ x */")
    assert [t.type for t in toks] == ["IDENT", "ERROR", "ERROR", "EOF"]
    assert toks[0].value == "x"


def test_unterminated_comment_raises() -> None:
    with pytest.raises(UnterminatedComment) as excinfo:
        tokenize("@a /* never closed")
    assert excinfo.value.position == 3
    assert excinfo.value.col == 4


def test_unterminated_string_raises() -> None:
    with pytest.raises(UnterminatedString, match="Quoted string is never closed") as excinfo:
        tokenize('@a "abc')
    assert excinfo.value.position == 3
    assert (excinfo.value.line, excinfo.value.col) == (1, 4)


def test_lone_slash_is_error_token() -> None:
    assert tokenize("/")[0] == Token("ERROR", "/", 1, 1, 0)


def test_unrecognized_character_returns_error() -> None:
    token = Lexer(CharacterStream("~")).next_token()
    assert token.type == "ERROR"
    assert token.value == "~"


def test_empty_input_returns_eof() -> None:
    token = Lexer(CharacterStream("")).next_token()
    assert token == Token("EOF", "EOF", 1, 1, 0)


def test_eof_is_sticky() -> None:
    lexer = Lexer(CharacterStream("  "))
    assert lexer.next_token().type == "EOF"
    assert lexer.next_token().type == "EOF"


def test_character_stream_methods() -> None:
    stream = CharacterStream("abc")
    assert stream.peek() == "a"
    assert stream.next() == "a"
    assert stream.peek() == "b"
    assert stream.startswith("bc")
    assert not stream.end_of_file()
    stream.next()
    stream.next()
    assert stream.end_of_file()
    assert stream.peek() == ""
    assert stream.peek(5) == ""
    assert stream.location() == (3, 1, 4)


def test_character_stream_next_past_eof_raises() -> None:
    with pytest.raises(EOFError, match="Attempted to read past end of source"):
        CharacterStream("").next()


def test_token_repr_and_eq() -> None:
    t1 = Token("IDENT", "a", 1, 2, 1)
    t2 = Token("IDENT", "a", 1, 2, 1)
    t3 = Token("STRING", "a")

    assert repr(t1) == "Token(IDENT, a)"
    assert t1 == t2
    assert t1 != t3
    assert len({t1, t2, t3}) == 2


@given(st.text(alphabet=st.characters(exclude_categories=["Cs"]), max_size=100))  # type: ignore[misc]
def test_lexer_never_crashes(text: str) -> None:
    try:
        toks = tokenize(text)
    except AsklSyntaxError as e:
        assert e.kind in ("UnterminatedString", "UnterminatedComment")
        assert 0 <= e.position <= len(text)
        return
    assert toks[-1].type == "EOF"
    offsets = [t.offset for t in toks]
    assert offsets == sorted(offsets)


@given(st.text(alphabet=st.characters(exclude_characters='"', exclude_categories=["Cs"])))  # type: ignore[misc]
def test_string_body_is_taken_verbatim(body: str) -> None:
    tok = Lexer(CharacterStream(f'"{body}"')).next_token()
    assert tok.type == "STRING"
    assert tok.value == body
