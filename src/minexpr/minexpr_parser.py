"""
minexpr Language Parser

Parses minexpr source text into an abstract syntax tree (AST).

The parser owns a `Lexer` and pulls one token at a time from it. There is no
separate tokenization pass: a lexical error surfaces the moment the parser asks
for the offending token, wrapped in `LexerFailure`.

Grammar (loosest to tightest binding)
-------------------------------------
    assignment     := or ('=' assignment)?            right-associative
    or             := and ('||' and)*
    and            := equality ('&&' equality)*
    equality       := comparison (('==' | '!=') comparison)*
    comparison     := addition (('<' | '>' | '<=' | '>=') addition)*
    addition       := multiplication (('+' | '-') multiplication)*
    multiplication := unary (('*' | '/') unary)*
    unary          := ('-' | '!') unary | primary
    primary        := number | string | boolean | identifier
                    | identifier '(' (expression (',' expression)*)? ')'
                    | '(' expression ')'

A program is zero or more expression statements, each optionally followed by
`;`. Every binary level loops, so chains of one level associate to the left.

Parser Behavior
---------------
- Fail-fast: the first error aborts the parse; there is no recovery.
- Parenthesized groups are kept as `paren` nodes.
- The left side of `=` is not checked for assignability (`1 = 2` parses).
- Groups, calls and `=` chains nested past the interpreter's recursion limit
  fail with `InvalidSyntax`; prefix operators and binary chains do not recurse
  per operator and have no such limit.
- A statement is positioned at its first token.

Entry Points
------------
- `parse()`: Parse a full program into a `program` node.
- `parse_expression()`: Parse exactly one expression spanning the whole input.

Raises
------
ParseError
    `UnexpectedToken`, `UnexpectedEndOfInput`, `InvalidSyntax`, or
    `LexerFailure` wrapping a `LexerError`.
"""

from __future__ import annotations

import logging

from minexpr.minexpr_ast import ASTNode
from minexpr.minexpr_constants import ASSIGN_OP, FLOAT, precedence_levels, unary_ops
from minexpr.minexpr_errors import (
    InvalidSyntax,
    LexerError,
    LexerFailure,
    UnexpectedEndOfInput,
    UnexpectedToken,
)
from minexpr.minexpr_lexer import CharacterStream, Lexer, Token

logger = logging.getLogger(__name__)


class Parser:
    """
    minexpr Parser Class

    Builds one `program` node from source text by recursive descent. The six
    binary levels share one precedence-climbing loop driven by
    `precedence_levels`, so a parenthesized group costs a handful of stack
    frames whatever the number of levels.

    Attributes
    ----------
    lexer : Lexer
        Token source, private to this parser.
    token : Token | None
        The current (not yet consumed) token; None until the first pull.
    binary_levels : dict[str, int]
        Binding level of each binary operator, 0 for `||` up to the tightest.
    """

    def __init__(self, source: str) -> None:
        self.lexer: Lexer = Lexer(CharacterStream(source))
        self.token: Token | None = None
        self.binary_levels: dict[str, int] = {
            op: level for level, ops in enumerate(precedence_levels) for op in ops
        }

    def current(self) -> Token:
        if self.token is None:
            return self.advance()
        return self.token

    def advance(self) -> Token:
        """Pulls the next token from the lexer and makes it current."""
        try:
            self.token = self.lexer.next_token()
        except LexerError as e:
            raise LexerFailure(e) from e
        return self.token

    def expect_punct(self, raw: str, expected: str) -> Token:
        tok = self.current()
        if not tok.is_punct(raw):
            raise UnexpectedToken(expected, tok)
        self.advance()
        return tok

    def too_deep(self) -> InvalidSyntax:
        tok = self.token
        line, col = (tok.line, tok.col) if tok is not None else (1, 1)
        return InvalidSyntax("expression nested too deeply", line, col)

    def parse(self) -> ASTNode:
        """Parse a full program and return its `program` node."""
        logger.debug("Parsing program (%d chars)", len(self.lexer.stream.source))
        statements: list[ASTNode] = []
        try:
            while self.current().type != "EOF":
                start = self.current()
                expr = self.parse_assignment()
                statements.append(
                    ASTNode("expr_stmt", children=[expr], line=start.line, col=start.col)
                )
                if self.current().is_punct(";"):
                    self.advance()
        except RecursionError as e:
            raise self.too_deep() from e
        logger.debug("Parsed %d statement(s)", len(statements))
        return ASTNode("program", children=statements, line=1, col=1)

    def parse_expression(self) -> ASTNode:
        """Parse a single expression that must span the entire input."""
        try:
            expr = self.parse_assignment()
        except RecursionError as e:
            raise self.too_deep() from e
        tok = self.current()
        if tok.type != "EOF":
            raise InvalidSyntax(
                f"unexpected {tok.value!r} after complete expression", tok.line, tok.col
            )
        return expr

    def parse_assignment(self) -> ASTNode:
        left = self.parse_binary()
        tok = self.current()
        if tok.is_operator(ASSIGN_OP):
            self.advance()
            right = self.parse_assignment()
            return ASTNode("assign", ASSIGN_OP, [left, right], line=tok.line, col=tok.col)
        return left

    def binary_level(self, tok: Token) -> int | None:
        if tok.type != "OPERATOR":
            return None
        return self.binary_levels.get(tok.value)

    def parse_binary(self, min_level: int = 0) -> ASTNode:
        """Parse binary operators binding at `min_level` or tighter.

        The right operand is parsed one level tighter than its operator, which
        keeps every level left-associative.
        """
        left = self.parse_unary()
        while True:
            op_tok = self.current()
            level = self.binary_level(op_tok)
            if level is None or level < min_level:
                return left
            self.advance()
            right = self.parse_binary(level + 1)
            left = ASTNode(
                "binary", op_tok.value, [left, right], line=op_tok.line, col=op_tok.col
            )

    def parse_unary(self) -> ASTNode:
        prefixes: list[Token] = []
        while self.current().is_operator(*unary_ops):
            prefixes.append(self.current())
            self.advance()
        node = self.parse_primary()
        for tok in reversed(prefixes):
            node = ASTNode("unary", tok.value, [node], line=tok.line, col=tok.col)
        return node

    def parse_primary(self) -> ASTNode:
        """Parse a literal, identifier, function call, or parenthesized group."""
        tok = self.current()

        if tok.type == "NUMBER":
            self.advance()
            type_ = "float" if tok.kind == FLOAT else "int"
            return ASTNode("number", tok.value, line=tok.line, col=tok.col, type_=type_)

        if tok.type in ("STRING", "BOOLEAN"):
            self.advance()
            return ASTNode(tok.type.lower(), tok.value, line=tok.line, col=tok.col)

        if tok.type == "IDENT":
            self.advance()
            if self.current().is_punct("("):
                return self.parse_call(tok)
            return ASTNode("identifier", tok.value, line=tok.line, col=tok.col)

        if tok.is_punct("("):
            self.advance()
            inner = self.parse_assignment()
            self.expect_punct(")", "closing parenthesis")
            return ASTNode("paren", children=[inner], line=tok.line, col=tok.col)

        if tok.type == "EOF":
            raise UnexpectedEndOfInput(tok.line, tok.col)

        raise UnexpectedToken("expression", tok)

    def parse_call(self, name_tok: Token) -> ASTNode:
        """Parse the argument list of `name(...)`; the current token is `(`."""
        self.advance()
        args: list[ASTNode] = []
        while not self.current().is_punct(")") and self.current().type != "EOF":
            args.append(self.parse_assignment())
            if self.current().is_punct(","):
                self.advance()
        self.expect_punct(")", "closing parenthesis")
        return ASTNode("call", name_tok.value, args, line=name_tok.line, col=name_tok.col)



def parse(source: str) -> ASTNode:
    """Parse `source` into a `program` node with a fresh Parser."""
    return Parser(source).parse()


def parse_expression(source: str) -> ASTNode:
    """Parse `source` as exactly one expression."""
    return Parser(source).parse_expression()


__all__ = ["Parser", "parse", "parse_expression"]
