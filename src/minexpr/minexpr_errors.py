"""
Error taxonomy for the minexpr lexer and parser.

Every error derives from the built-in `SyntaxError`, so callers that only care
about "the input was malformed" can catch that alone. The first error raised
aborts the current scan or parse; no layer recovers.

Scanner errors (`LexerError`):
    IOFailure, UnexpectedSymbol, InvalidNumericLiteral, MismatchedBrackets,
    UnknownSymbol, UnterminatedLiteral

Parser errors (`ParseError`):
    LexerFailure, UnexpectedToken, UnexpectedEndOfInput, InvalidSyntax
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from minexpr.minexpr_lexer import Token


def _where(line: int, col: int) -> str:
    return f" at line {line}, col {col}" if line else ""


class LexerError(SyntaxError):
    """Base class for failures raised while scanning characters into tokens.

    Attributes:
        message (str): Human-readable description without position suffix.
        line (int): 1-based line of the offending character (0 if unknown).
        col (int): 1-based column of the offending character (0 if unknown).
    """

    def __init__(self, message: str, line: int = 0, col: int = 0) -> None:
        super().__init__(message + _where(line, col))
        self.message = message
        self.line = line
        self.col = col


class IOFailure(LexerError):
    """Raised when source text cannot be read before scanning."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot read {path!r}: {reason}")
        self.path = path
        self.reason = reason


class UnexpectedSymbol(LexerError):
    """Raised by `Lexer.expect` when the next token is not the one asked for."""

    def __init__(self, expected: str, found: Token) -> None:
        super().__init__(
            f"Unexpected symbol: expected {expected}, found {found!r}",
            found.line,
            found.col,
        )
        self.expected = expected
        self.found = found


class InvalidNumericLiteral(LexerError):
    """Raised for malformed numbers such as `12abc` or `1e+`."""

    def __init__(self, raw: str, line: int = 0, col: int = 0) -> None:
        super().__init__(f"Invalid numeric literal: {raw!r}", line, col)
        self.raw = raw


class MismatchedBrackets(LexerError):
    """Raised when a closer has no open bracket of its own family left."""

    def __init__(self, closer: str, opener: str, line: int = 0, col: int = 0) -> None:
        super().__init__(
            f"Unmatched closing symbol {closer!r}: no open {opener!r} remaining",
            line,
            col,
        )
        self.closer = closer
        self.opener = opener


class UnknownSymbol(LexerError):
    """Raised for a character that starts no token."""

    def __init__(self, symbol: str, token: Token | None = None) -> None:
        line = token.line if token is not None else 0
        col = token.col if token is not None else 0
        super().__init__(f"Unknown symbol: {symbol!r}", line, col)
        self.symbol = symbol
        self.token = token


class UnterminatedLiteral(LexerError):
    """Raised when input ends inside a string literal."""

    def __init__(self, partial: str, line: int = 0, col: int = 0) -> None:
        super().__init__("Unterminated string literal", line, col)
        self.partial = partial


class ParseError(SyntaxError):
    """Base class for failures raised while building the AST."""

    def __init__(self, message: str, line: int = 0, col: int = 0) -> None:
        super().__init__(message + _where(line, col))
        self.message = message
        self.line = line
        self.col = col


class LexerFailure(ParseError):
    """Wraps a `LexerError` surfaced while the parser pulled a token."""

    def __init__(self, error: LexerError) -> None:
        super().__init__(f"Lexer error: {error.message}", error.line, error.col)
        self.error = error


class UnexpectedToken(ParseError):
    """Raised when the current token cannot continue the grammar rule."""

    def __init__(self, expected: str, found: Token) -> None:
        super().__init__(
            f"Unexpected token: expected {expected}, found {found!r}",
            found.line,
            found.col,
        )
        self.expected = expected
        self.found = found


class UnexpectedEndOfInput(ParseError):
    """Raised when the token stream ends where a token is required."""

    def __init__(self, line: int = 0, col: int = 0) -> None:
        super().__init__("Unexpected end of input", line, col)


class InvalidSyntax(ParseError):
    """Free-text diagnostic for rule violations spanning several tokens."""

    def __init__(self, message: str, line: int = 0, col: int = 0) -> None:
        super().__init__(f"Invalid syntax: {message}", line, col)


__all__ = [
    "IOFailure",
    "InvalidNumericLiteral",
    "InvalidSyntax",
    "LexerError",
    "LexerFailure",
    "MismatchedBrackets",
    "ParseError",
    "UnexpectedEndOfInput",
    "UnexpectedSymbol",
    "UnexpectedToken",
    "UnknownSymbol",
    "UnterminatedLiteral",
]
