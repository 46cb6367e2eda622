"""
Token and grammar tables shared by the minexpr lexer, parser and renderers.

Tables:
    bracket_pairs: Maps each closing bracket to the opener of its family.
    two_char_operators: Operator pairs the lexer consumes greedily.
    precedence_levels: Binary operator groups, loosest to tightest.
    node_names: Maps AST kind tags to their display names.
"""

openers: frozenset[str] = frozenset("([{")

bracket_pairs: dict[str, str] = {
    ")": "(",
    "]": "[",
    "}": "{",
}

separators: frozenset[str] = frozenset(",;")

operator_chars: frozenset[str] = frozenset("+-*/=<>!&|")

two_char_operators: frozenset[str] = frozenset(
    {"==", "!=", "<=", ">=", "&&", "||", "++", "--"}
)

boolean_literals: frozenset[str] = frozenset({"true", "false"})

exponent_markers: frozenset[str] = frozenset("eE")

# Numeric hints carried by NUMBER tokens
INTEGER = "INTEGER"
FLOAT = "FLOAT"

# Balance kinds carried by PUNCT tokens
OPEN = "OPEN"
CLOSE = "CLOSE"
SEPARATOR = "SEPARATOR"

ASSIGN_OP = "="

precedence_levels: tuple[tuple[str, ...], ...] = (
    ("||",),
    ("&&",),
    ("==", "!="),
    ("<", ">", "<=", ">="),
    ("+", "-"),
    ("*", "/"),
)

unary_ops: frozenset[str] = frozenset({"-", "!"})

node_names: dict[str, str] = {
    "program": "Program",
    "expr_stmt": "ExpressionStatement",
    "assign": "Assignment",
    "binary": "BinaryOp",
    "unary": "UnaryOp",
    "call": "FunctionCall",
    "paren": "Parenthesized",
    "number": "Number",
    "string": "String",
    "boolean": "Boolean",
    "identifier": "Identifier",
}

# Graphviz fill colours per node kind
node_colors: dict[str, str] = {
    "program": "lightgray",
    "expr_stmt": "wheat",
    "assign": "orange",
    "binary": "lightcoral",
    "unary": "lightpink",
    "call": "lightsteelblue",
    "paren": "lavender",
    "number": "lightgreen",
    "string": "lightyellow",
    "boolean": "lightblue",
    "identifier": "lightcyan",
}

source_suffix = ".mx"
