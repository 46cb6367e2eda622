"""
Defines the abstract syntax tree (AST) node structure for the minexpr language.

Classes:
    ASTNode:
        A node in the syntax tree, produced by the parser and consumed by the renderers.
        One class covers every construct; the `kind` tag tells them apart.

    ASTDict:
        TypedDict representation for serializing ASTNode instances to plain Python
        dictionaries, suitable for JSON output.

Node kinds:
    program      children: statements
    expr_stmt    children: [expression]
    assign       value: "=",          children: [left, right]
    binary       value: operator,     children: [left, right]
    unary        value: operator,     children: [operand]
    call         value: name,         children: arguments
    paren        children: [inner]
    number       value: raw text,     type: "int" | "float"
    string       value: decoded text
    boolean      value: "true" | "false"
    identifier   value: name

Number values stay as the exact source text; nothing is converted to `int` or
`float` here. Children are stored as tuples and a node is never shared between
two parents.

Example:
    node = ASTNode("binary", "+", [ASTNode("number", "1", type_="int"), ASTNode("identifier", "x")])
"""

from collections.abc import Iterable, Iterator
from typing import Any, TypedDict

from minexpr.minexpr_constants import node_names


class ASTDict(TypedDict, total=False):
    """
    TypedDict representation of an ASTNode used for serialization.

    Fields:
        kind (str): The node kind tag (e.g., "binary", "call").
        node_type (str): The display name (e.g., "BinaryOp", "FunctionCall").
        value (str | None): Operator, name, or literal payload.
        type (str | None): "int" / "float" for numbers.
        line (int): Line number in the source where the node starts.
        col (int): Column number in the source where the node starts.
        children (list[ASTDict]): Child nodes, in source order.
    """

    kind: str
    node_type: str
    value: str | None
    type: str | None
    line: int
    col: int
    children: list["ASTDict"]


def escape_label(text: str) -> str:
    """Escapes backslash, double quote, newline and tab for quoted diagram labels."""
    return (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
    )


class ASTNode:
    """
    Represents a node in the abstract syntax tree (AST) for the minexpr language.

    Nodes are immutable once built: assigning to any attribute after
    construction raises `AttributeError`. `walk`, `to_dict` and `==` use an
    explicit stack, so trees of any depth can be traversed.

    Args:
        kind (str): The node kind tag (see module docstring).
        value (str, optional): Operator symbol, name, or literal text.
        children (Iterable[ASTNode], optional): Child nodes in source order.
        line (int): Source line number (default is 0).
        col (int): Source column number (default is 0).
        type_ (str, optional): "int" or "float" for number nodes.

    Attributes:
        kind (str): Kind tag of the node.
        value (str | None): Payload.
        children (tuple[ASTNode, ...]): Child nodes.
        type (str | None): Numeric flag.
        line (int): Line number in the source.
        col (int): Column number in the source.
    """

    __slots__ = ("kind", "value", "children", "line", "col", "type", "_frozen")

    def __init__(
        self,
        kind: str,
        value: str | None = None,
        children: Iterable["ASTNode"] | None = None,
        line: int = 0,
        col: int = 0,
        type_: str | None = None,
    ):
        self.kind = kind
        self.value = value
        self.children: tuple["ASTNode", ...] = tuple(children or ())
        self.line = line
        self.col = col
        self.type = type_
        self._frozen = True

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, "_frozen", False):
            raise AttributeError(f"ASTNode is immutable; cannot set {name!r}")
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"ASTNode is immutable; cannot delete {name!r}")

    @property
    def node_type(self) -> str:
        """Display name of the kind, e.g. `BinaryOp` for `binary`."""
        if self.kind not in node_names:
            raise AssertionError(f"Unhandled AST node kind: {self.kind!r}")
        return node_names[self.kind]

    @property
    def is_float(self) -> bool:
        return self.type == "float"

    def label(self, escaped: bool = True) -> str:
        """Returns the node type name plus its literal payload.

        With `escaped` (the default) the text is safe to embed inside a
        double-quoted diagram label.
        """
        name = self.node_type
        if self.kind == "number":
            text = f"{name}\n{self.value} ({self.type or 'int'})"
        elif self.kind == "string":
            text = f'{name}\n"{self.value}"'
        elif self.kind == "paren":
            text = f"{name}\n( )"
        elif self.kind in ("program", "expr_stmt"):
            text = name
        else:
            text = f"{name}\n{self.value}"
        return escape_label(text) if escaped else text

    def walk(self) -> Iterator["ASTNode"]:
        """Yields this node and all descendants in pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def __repr__(self) -> str:
        parts = [f"{self.kind}"]
        if self.value is not None:
            parts.append(f"value={repr(self.value)}")
        if self.type is not None:
            parts.append(f"type_={self.type}")
        if self.children:
            preview = ", ".join(repr(c) for c in self.children[:3])
            if len(self.children) > 3:
                preview += ", ..."
            parts.append(f"children=[{preview}]")
        return f"ASTNode({', '.join(parts)})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ASTNode):
            return False
        pairs = [(self, other)]
        while pairs:
            a, b = pairs.pop()
            if (
                a.kind != b.kind
                or a.value != b.value
                or a.line != b.line
                or a.col != b.col
                or a.type != b.type
                or len(a.children) != len(b.children)
            ):
                return False
            pairs.extend(zip(a.children, b.children))
        return True

    def fields(self) -> ASTDict:
        """This node's own fields as an `ASTDict` with an empty `children` list."""
        return {
            "kind": self.kind,
            "node_type": self.node_type,
            "value": self.value,
            "type": self.type,
            "line": self.line,
            "col": self.col,
            "children": [],
        }

    def to_dict(self) -> ASTDict:
        root = self.fields()
        stack = [(self, root)]
        while stack:
            node, out = stack.pop()
            for child in node.children:
                child_dict = child.fields()
                out["children"].append(child_dict)
                stack.append((child, child_dict))
        return root
