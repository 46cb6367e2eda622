"""
Lexical analyzer for the minexpr expression language.

This module provides core components for converting raw source text into tokens:

Classes:
    CharacterStream: Stream abstraction for reading characters with offset/line/column tracking.
    Balance: Bracket-balance payload carried by punctuation tokens.
    Token: Represents a single token with type, value, payload and source location.
    Lexer: Pulls one token at a time out of a CharacterStream.

Features:
    - Skips Unicode whitespace
    - Tracks one open-bracket counter per bracket family: `()`, `[]`, `{}`
    - Recognizes:
        * Identifiers and the boolean literals `true` / `false`
        * Numbers (integer and float, with optional exponent), kept as raw text
        * Strings, where a backslash keeps the next character literally
        * One- and two-character operators
        * Brackets and separators

Bracket balancing only counts unmatched openers per family; it does not keep a
stack of them. A closer is checked against its own family's counter, so
under-closing a family is caught at the offending closer while cross-family
ordering mistakes such as `([)]` pass the lexer unnoticed.

Raises:
    LexerError subclasses (see `minexpr.minexpr_errors`).

Example:
    >>> lexer = Lexer(CharacterStream("x = 42"))
    >>> lexer.next_token()
    Token(IDENT, x)

Exports:
    - CharacterStream
    - Balance
    - Token
    - Lexer
    - tokenize
    - read_source
"""

from collections.abc import Iterator
from typing import Any

from minexpr.minexpr_constants import (
    CLOSE,
    FLOAT,
    INTEGER,
    OPEN,
    SEPARATOR,
    boolean_literals,
    bracket_pairs,
    exponent_markers,
    openers,
    operator_chars,
    separators,
    two_char_operators,
)
from minexpr.minexpr_errors import (
    IOFailure,
    InvalidNumericLiteral,
    MismatchedBrackets,
    UnexpectedSymbol,
    UnknownSymbol,
    UnterminatedLiteral,
)


class CharacterStream:
    """
    A utility for reading characters from a string source with position tracking.

    Attributes:
        source (str): The input source string.
        position (int): Absolute offset of the next character.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            EOFError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise EOFError(
                f"Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character at `offset` without advancing, or "" if out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class Balance:
    """Balance state attached to a punctuation token.

    Attributes:
        kind (str): `OPEN`, `CLOSE` or `SEPARATOR`.
        depth (int | None): For `OPEN`, the family depth before this opener;
            for `CLOSE`, the depth left after popping. `None` for separators.
    """

    def __init__(self, kind: str, depth: int | None = None) -> None:
        self.kind = kind
        self.depth = depth

    def __repr__(self) -> str:
        if self.kind == SEPARATOR:
            return "Separator"
        return f"{self.kind.capitalize()}({self.depth})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Balance)
            and self.kind == other.kind
            and self.depth == other.depth
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.depth))

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "depth": self.depth}


class Token:
    """Represents a single lexical token.

    Attributes:
        type (str): One of `EOF`, `PUNCT`, `OPERATOR`, `IDENT`, `BOOLEAN`,
            `NUMBER`, `STRING`, `UNKNOWN`.
        value (str): Raw text for numbers, decoded text for strings, the
            symbol for punctuation/operators, the name for identifiers.
        line (int): The 1-based line number where the token starts.
        col (int): The 1-based column number where the token starts.
        kind (Balance | str | None): `Balance` for `PUNCT`, `INTEGER`/`FLOAT`
            for `NUMBER`, otherwise None.
    """

    def __init__(
        self,
        type_: str,
        value: str,
        line: int = 0,
        col: int = 0,
        kind: Balance | str | None = None,
    ):
        self.type = type_
        self.value = value
        self.line = line
        self.col = col
        self.kind = kind

    def __repr__(self) -> str:
        if self.kind is None:
            return f"Token({self.type}, {self.value})"
        return f"Token({self.type}, {self.value}, {self.kind!r})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.value == other.value
            and self.kind == other.kind
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.type, self.value, self.kind, self.line, self.col))

    def is_punct(self, raw: str, kind: str | None = None) -> bool:
        """True if this is the punctuation `raw`, optionally of balance `kind`."""
        if self.type != "PUNCT" or self.value != raw:
            return False
        return kind is None or (isinstance(self.kind, Balance) and self.kind.kind == kind)

    def is_operator(self, *symbols: str) -> bool:
        return self.type == "OPERATOR" and self.value in symbols

    def to_dict(self) -> dict[str, Any]:
        """Serializes the token as its type tag plus payload fields."""
        kind = self.kind.to_dict() if isinstance(self.kind, Balance) else self.kind
        return {
            "type": self.type,
            "value": self.value,
            "kind": kind,
            "line": self.line,
            "col": self.col,
        }


class Lexer:
    """Lexical analyzer for the minexpr language.

    Each call to `next_token` consumes exactly one token. Once the stream is
    exhausted every further call returns `EOF`.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
        balance (dict[str, int]): Unmatched opener count per bracket family,
            keyed by the opener character. Families never seen are absent.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream
        self.balance: dict[str, int] = {}

    def __iter__(self) -> Iterator[Token]:
        """Yields tokens up to and including `EOF`."""
        while True:
            tok = self.next_token()
            yield tok
            if tok.type == "EOF":
                return

    def peek(self) -> str:
        return self.stream.peek()

    def advance(self) -> str:
        return self.stream.next()

    def depth(self, opener: str) -> int:
        """Returns the number of unmatched `opener` brackets scanned so far."""
        return self.balance.get(opener, 0)

    def skip_whitespace(self) -> None:
        while not self.stream.end_of_file() and self.peek().isspace():
            self.advance()

    def push_open(self, opener: str) -> int:
        current = self.balance.get(opener, 0)
        self.balance[opener] = current + 1
        return current

    def pop_close(self, closer: str, line: int, col: int) -> int:
        opener = bracket_pairs[closer]
        current = self.balance.get(opener, 0)
        if current <= 0:
            raise MismatchedBrackets(closer, opener, line, col)
        self.balance[opener] = current - 1
        return current - 1

    def match_operator(self, line: int, col: int) -> Token:
        op = self.advance()
        if op + self.peek() in two_char_operators:
            op += self.advance()
        return Token("OPERATOR", op, line, col)

    def scan_number(self, line: int, col: int) -> Token:
        """Scans digits with at most one `.` and one exponent part."""
        num = self.advance()
        has_dot = False
        has_exp = False

        while not self.stream.end_of_file():
            ch = self.peek()
            if ch.isascii() and ch.isdigit():
                num += self.advance()
            elif ch == "." and not has_dot and not has_exp:
                has_dot = True
                num += self.advance()
            elif ch in exponent_markers and not has_exp:
                has_exp = True
                num += self.advance()
                if self.peek() in ("+", "-"):
                    num += self.advance()
                digit = self.peek()
                if not (digit.isascii() and digit.isdigit()):
                    # include the offending character unless it is whitespace
                    bad = "" if digit.isspace() else digit
                    raise InvalidNumericLiteral(num + bad, line, col)
                num += self.advance()
            elif ch.isalpha():
                num += self.advance()
                raise InvalidNumericLiteral(num, line, col)
            else:
                break

        hint = FLOAT if has_dot or has_exp else INTEGER
        return Token("NUMBER", num, line, col, kind=hint)

    def scan_string(self, line: int, col: int) -> Token:
        """Scans a double-quoted literal; `\\` keeps the next character as-is."""
        self.advance()  # opening quote
        val = ""
        while not self.stream.end_of_file():
            ch = self.advance()
            if ch == '"':
                return Token("STRING", val, line, col)
            if ch == "\\":
                if self.stream.end_of_file():
                    break
                val += self.advance()
            else:
                val += ch
        raise UnterminatedLiteral(val, line, col)

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Raises:
            MismatchedBrackets: A closer whose family has no open bracket left.
            InvalidNumericLiteral: A malformed number.
            UnterminatedLiteral: Input ends inside a string.
            UnknownSymbol: A character that starts no token.
        """
        self.skip_whitespace()

        if self.stream.end_of_file():
            return Token("EOF", "EOF", self.stream.line, self.stream.column)

        ch = self.peek()
        line, col = self.stream.line, self.stream.column

        # 1. Brackets and separators
        if ch in openers:
            self.advance()
            return Token("PUNCT", ch, line, col, kind=Balance(OPEN, self.push_open(ch)))

        if ch in bracket_pairs:
            depth = self.pop_close(ch, line, col)
            self.advance()
            return Token("PUNCT", ch, line, col, kind=Balance(CLOSE, depth))

        if ch in separators:
            self.advance()
            return Token("PUNCT", ch, line, col, kind=Balance(SEPARATOR))

        # 2. Number
        if ch.isascii() and ch.isdigit():
            return self.scan_number(line, col)

        # 3. String
        if ch == '"':
            return self.scan_string(line, col)

        # 4. Operator
        if ch in operator_chars:
            return self.match_operator(line, col)

        # 5. Identifier or boolean literal
        if ch.isalpha() or ch == "_":
            ident = ""
            while not self.stream.end_of_file() and (
                self.peek().isalnum() or self.peek() == "_"
            ):
                ident += self.advance()
            if ident in boolean_literals:
                return Token("BOOLEAN", ident, line, col)
            return Token("IDENT", ident, line, col)

        # 6. Unknown character → error
        self.advance()
        raise UnknownSymbol(ch, Token("UNKNOWN", ch, line, col))

    def expect(self, type_: str, value: str | None = None) -> Token:
        """Consumes the next token, requiring its type (and value, if given).

        Raises:
            UnexpectedSymbol: If the token pulled does not match.
        """
        tok = self.next_token()
        if tok.type != type_ or (value is not None and tok.value != value):
            expected = type_ if value is None else f"{type_} {value!r}"
            raise UnexpectedSymbol(expected, tok)
        return tok


def tokenize(source: str) -> Iterator[Token]:
    """Lazily tokenizes `source` with a fresh Lexer, ending with `EOF`.

    Tokens already yielded stay valid if a later one raises.
    """
    return iter(Lexer(CharacterStream(source)))


def read_source(path: str) -> str:
    """Reads a whole source file so scanning never touches I/O.

    Raises:
        IOFailure: If the file cannot be read or decoded.
    """
    try:
        with open(path, encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise IOFailure(path, str(e)) from e


__all__ = ["Balance", "CharacterStream", "Lexer", "Token", "read_source", "tokenize"]
