from pathlib import Path

import pytest
from hypothesis import given
from hypothesis import strategies as st

from minexpr.minexpr_errors import (
    IOFailure,
    InvalidNumericLiteral,
    LexerError,
    MismatchedBrackets,
    UnexpectedSymbol,
    UnknownSymbol,
    UnterminatedLiteral,
)
from minexpr.minexpr_lexer import (
    Balance,
    CharacterStream,
    Lexer,
    Token,
    read_source,
    tokenize,
)


def lex(source: str) -> list[Token]:
    """All tokens before EOF."""
    return [tok for tok in tokenize(source) if tok.type != "EOF"]


def scan(source: str) -> tuple[list[Token], LexerError | None]:
    """Tokens produced before the first error, and that error (if any)."""
    tokens: list[Token] = []
    try:
        for tok in tokenize(source):
            tokens.append(tok)
    except LexerError as e:
        return tokens, e
    return tokens, None


def test_brackets_carry_depth() -> None:
    kinds = [tok.kind for tok in lex("({[]})")]
    assert kinds == [
        Balance("OPEN", 0),
        Balance("OPEN", 0),
        Balance("OPEN", 0),
        Balance("CLOSE", 0),
        Balance("CLOSE", 0),
        Balance("CLOSE", 0),
    ]


def test_nested_same_family_depths() -> None:
    kinds = [tok.kind for tok in lex("(())")]
    assert kinds == [
        Balance("OPEN", 0),
        Balance("OPEN", 1),
        Balance("CLOSE", 1),
        Balance("CLOSE", 0),
    ]


def test_separators() -> None:
    tokens = lex(", ;")
    assert [(t.type, t.value) for t in tokens] == [("PUNCT", ","), ("PUNCT", ";")]
    assert all(t.kind == Balance("SEPARATOR") for t in tokens)


def test_operators() -> None:
    code = "== != <= >= && || ++ -- + - * / = < > ! & |"
    assert [t.value for t in lex(code)] == code.split()
    assert all(t.type == "OPERATOR" for t in lex(code))


def test_operator_pairs_are_greedy() -> None:
    assert [t.value for t in lex("a<=b")] == ["a", "<=", "b"]
    assert [t.value for t in lex("x--y")] == ["x", "--", "y"]


def test_unknown_pair_splits() -> None:
    assert [t.value for t in lex("=>")] == ["=", ">"]
    assert [t.value for t in lex("=!")] == ["=", "!"]


def test_boolean_literals() -> None:
    tokens = lex("true false trueish")
    assert [(t.type, t.value) for t in tokens] == [
        ("BOOLEAN", "true"),
        ("BOOLEAN", "false"),
        ("IDENT", "trueish"),
    ]


def test_identifier_token() -> None:
    tok = Lexer(CharacterStream("_my_Var2")).next_token()
    assert tok.type == "IDENT"
    assert tok.value == "_my_Var2"


def test_unicode_identifier_and_whitespace() -> None:
    tokens = lex("größe\u00a0\u2003x")
    assert [t.value for t in tokens] == ["größe", "x"]


@pytest.mark.parametrize(
    "source,hint",
    [
        ("123", "INTEGER"),
        ("0", "INTEGER"),
        ("3.14", "FLOAT"),
        ("1.", "FLOAT"),
        ("1e10", "FLOAT"),
        ("2E-3", "FLOAT"),
        ("6.02e+23", "FLOAT"),
    ],
)
def test_number_token(source: str, hint: str) -> None:
    tok = Lexer(CharacterStream(source)).next_token()
    assert tok.type == "NUMBER"
    assert tok.value == source
    assert tok.kind == hint


def test_number_keeps_raw_text() -> None:
    tok = Lexer(CharacterStream("0.10000000000000000001")).next_token()
    assert tok.value == "0.10000000000000000001"


@pytest.mark.parametrize(
    "source,raw",
    [
        ("12abc", "12a"),
        ("1e", "1e"),
        ("1e+", "1e+"),
        ("1ex", "1ex"),
        ("1e5e2", "1e5e"),
        ("3.5x", "3.5x"),
        ("1e x", "1e"),
        ("1e\n2", "1e"),
        ("2E- 3", "2E-"),
    ],
)
def test_invalid_numeric_literal(source: str, raw: str) -> None:
    with pytest.raises(InvalidNumericLiteral) as exc:
        Lexer(CharacterStream(source)).next_token()
    assert exc.value.raw == raw
    assert (exc.value.line, exc.value.col) == (1, 1)


def test_second_dot_ends_number() -> None:
    lexer = Lexer(CharacterStream("1.2.3"))
    tok = lexer.next_token()
    assert (tok.value, tok.kind) == ("1.2", "FLOAT")
    with pytest.raises(UnknownSymbol) as exc:
        lexer.next_token()
    assert exc.value.symbol == "."


def test_string_token() -> None:
    tok = Lexer(CharacterStream('"hello world"')).next_token()
    assert tok.type == "STRING"
    assert tok.value == "hello world"


@pytest.mark.parametrize(
    "source,decoded",
    [
        ('"a\\"b"', 'a"b'),
        ('"\\n"', "n"),
        ('"a\\\\b"', "a\\b"),
        ('""', ""),
        ('"line\nbreak"', "line\nbreak"),
    ],
)
def test_string_escapes_keep_next_char(source: str, decoded: str) -> None:
    assert Lexer(CharacterStream(source)).next_token().value == decoded


@pytest.mark.parametrize("source", ['"abc', '"abc\\', '"'])
def test_unterminated_string(source: str) -> None:
    with pytest.raises(UnterminatedLiteral):
        Lexer(CharacterStream(source)).next_token()


def test_unknown_symbol_carries_token() -> None:
    lexer = Lexer(CharacterStream("x $ y"))
    assert lexer.next_token().value == "x"
    with pytest.raises(UnknownSymbol) as exc:
        lexer.next_token()
    assert exc.value.symbol == "$"
    assert exc.value.token == Token("UNKNOWN", "$", 1, 3)


def test_extra_closer_fails_at_offending_closer() -> None:
    tokens, error = scan("(()[]]")
    assert [t.value for t in tokens] == ["(", "(", ")", "[", "]"]
    assert isinstance(error, MismatchedBrackets)
    assert (error.closer, error.opener) == ("]", "[")
    assert (error.line, error.col) == (1, 6)


def test_closer_without_any_opener() -> None:
    with pytest.raises(MismatchedBrackets) as exc:
        Lexer(CharacterStream("}")).next_token()
    assert exc.value.opener == "{"


def test_cross_family_order_is_not_checked() -> None:
    # Only per-family counts are tracked, so interleaving passes the lexer.
    tokens, error = scan("([)]")
    assert error is None
    assert [t.kind for t in tokens[:4]] == [
        Balance("OPEN", 0),
        Balance("OPEN", 0),
        Balance("CLOSE", 0),
        Balance("CLOSE", 0),
    ]


def test_depth_reports_open_count() -> None:
    lexer = Lexer(CharacterStream("(([)"))
    list(lexer)
    assert lexer.depth("(") == 1
    assert lexer.depth("[") == 1
    assert lexer.depth("{") == 0


def test_token_eof_is_idempotent() -> None:
    lexer = Lexer(CharacterStream("x"))
    assert lexer.next_token().type == "IDENT"
    for _ in range(3):
        tok = lexer.next_token()
        assert tok.type == "EOF"
        assert tok.value == "EOF"


def test_iteration_ends_with_eof() -> None:
    tokens = list(tokenize("a + 1"))
    assert [t.type for t in tokens] == ["IDENT", "OPERATOR", "NUMBER", "EOF"]


def test_line_and_column_tracking() -> None:
    tokens = lex("x = 1\n  y = 2")
    assert (tokens[0].line, tokens[0].col) == (1, 1)
    assert (tokens[2].line, tokens[2].col) == (1, 5)
    assert (tokens[3].line, tokens[3].col) == (2, 3)


def test_stream_tracks_offset() -> None:
    stream = CharacterStream("ab\ncd")
    lexer = Lexer(stream)
    list(lexer)
    assert stream.position == 5
    assert (stream.line, stream.column) == (2, 3)


def test_character_stream_past_end() -> None:
    stream = CharacterStream("a")
    assert stream.peek() == "a"
    assert stream.next() == "a"
    assert stream.peek() == ""
    assert stream.end_of_file()
    with pytest.raises(EOFError):
        stream.next()


def test_expect_returns_matching_token() -> None:
    lexer = Lexer(CharacterStream("x = 1"))
    assert lexer.expect("IDENT").value == "x"
    assert lexer.expect("OPERATOR", "=").value == "="


def test_expect_raises_unexpected_symbol() -> None:
    lexer = Lexer(CharacterStream("=="))
    with pytest.raises(UnexpectedSymbol) as exc:
        lexer.expect("OPERATOR", "=")
    assert exc.value.found.value == "=="
    assert "OPERATOR '='" in str(exc.value)


def test_token_repr_and_eq() -> None:
    t1 = Token("NUMBER", "42", 1, 2, kind="INTEGER")
    t2 = Token("NUMBER", "42", 1, 2, kind="INTEGER")
    t3 = Token("NUMBER", "42", 1, 2, kind="FLOAT")

    assert repr(Token("IDENT", "x")) == "Token(IDENT, x)"
    assert repr(t1) == "Token(NUMBER, 42, 'INTEGER')"
    assert repr(Token("PUNCT", "(", kind=Balance("OPEN", 0))) == "Token(PUNCT, (, Open(0))"
    assert t1 == t2
    assert t1 != t3
    assert hash(t1) == hash(t2)
    assert t1 != "42"


def test_token_to_dict() -> None:
    tok = lex("[")[0]
    assert tok.to_dict() == {
        "type": "PUNCT",
        "value": "[",
        "kind": {"kind": "OPEN", "depth": 0},
        "line": 1,
        "col": 1,
    }


def test_read_source(tmp_path: Path) -> None:
    path = tmp_path / "prog.mx"
    path.write_text("x = 1", encoding="utf-8")
    assert read_source(str(path)) == "x = 1"


def test_read_source_missing_file(tmp_path: Path) -> None:
    with pytest.raises(IOFailure) as exc:
        read_source(str(tmp_path / "missing.mx"))
    assert exc.value.path.endswith("missing.mx")


@given(st.from_regex(r"[0-9]+(\.[0-9]+)?([eE][+-]?[0-9]+)?", fullmatch=True))  # type: ignore[misc]
def test_numeric_literals_classify(text: str) -> None:
    tokens = list(tokenize(text))
    assert len(tokens) == 2
    assert tokens[0].value == text
    is_float = "." in text or "e" in text or "E" in text
    assert tokens[0].kind == ("FLOAT" if is_float else "INTEGER")
    assert tokens[1].type == "EOF"


balanced = st.recursive(
    st.just(""),
    lambda inner: st.lists(inner, max_size=3).map(
        lambda parts: "".join("(" + p + ")" for p in parts)
    ),
    max_leaves=20,
)


@given(balanced, st.sampled_from(["()", "[]", "{}"]))  # type: ignore[misc]
def test_balanced_family_ends_at_zero(shape: str, family: str) -> None:
    source = shape.replace("(", family[0]).replace(")", family[1])
    lexer = Lexer(CharacterStream(source))
    tokens = list(lexer)
    assert tokens[-1].type == "EOF"
    assert lexer.depth(family[0]) == 0


@given(balanced, st.sampled_from(["()", "[]", "{}"]))  # type: ignore[misc]
def test_extra_closer_raises_at_closer(shape: str, family: str) -> None:
    source = shape.replace("(", family[0]).replace(")", family[1]) + family[1]
    tokens, error = scan(source)
    assert isinstance(error, MismatchedBrackets)
    assert error.col == len(source)
    assert len(tokens) == len(source) - 1


@given(st.text())  # type: ignore[misc]
def test_escaped_strings_round_trip(content: str) -> None:
    escaped = content.replace("\\", "\\\\").replace('"', '\\"')
    tok = Lexer(CharacterStream(f'"{escaped}"')).next_token()
    assert tok.type == "STRING"
    assert tok.value == content


@given(st.text(alphabet="ab019 +-*/=<>!&|()[]{},;\"._eE\\\n"))  # type: ignore[misc]
def test_tokenize_twice_is_identical(source: str) -> None:
    first_tokens, first_error = scan(source)
    second_tokens, second_error = scan(source)
    assert first_tokens == second_tokens
    assert type(first_error) is type(second_error)
    assert str(first_error) == str(second_error)
