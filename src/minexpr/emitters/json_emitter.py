"""
Serializes minexpr ASTs to JSON as kind tag plus payload fields.

This is the shape a service boundary exchanges: every node becomes an
`ASTDict` with `kind`, `node_type`, `value`, `type`, `line`, `col` and
`children`.
"""

import json

from minexpr.minexpr_ast import ASTDict, ASTNode


class JsonEmitter:
    """Emits a JSON document for one AST.

    Attributes:
        payload (ASTDict | None): Serialized tree, set once a root is emitted.
        indent (int | None): Indentation passed to `json.dumps`.
    """

    def __init__(self, indent: int | None = 2) -> None:
        self.payload: ASTDict | None = None
        self.indent = indent

    def get_output(self) -> str:
        """Returns the JSON text.

        Raises:
            ValueError: If nothing was emitted, or the tree is nested deeper
                than `json` can encode.
        """
        if self.payload is None:
            raise ValueError("Nothing has been emitted yet.")
        try:
            return json.dumps(self.payload, indent=self.indent, ensure_ascii=False)
        except RecursionError as e:
            raise ValueError("AST is nested too deeply to encode as JSON") from e

    def emit_tree(self, node: ASTNode) -> None:
        self.payload = node.to_dict()

    emit_program = emit_tree
    emit_expr_stmt = emit_tree
    emit_assign = emit_tree
    emit_binary = emit_tree
    emit_unary = emit_tree
    emit_call = emit_tree
    emit_paren = emit_tree
    emit_number = emit_tree
    emit_string = emit_tree
    emit_boolean = emit_tree
    emit_identifier = emit_tree
