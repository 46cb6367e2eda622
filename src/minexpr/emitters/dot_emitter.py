"""
Renders minexpr ASTs as Graphviz DOT descriptions.

This module defines the `DotEmitter` class used by the `Renderer` for the
"dot" target. The output can be fed straight to `dot -Tpng`.

Output shape:
    - One `node_<n>` statement per AST node, numbered in pre-order from 0.
    - Node labels come from `ASTNode.label()`, already escaped for quoting.
    - Fill colour depends on the node kind.
    - Edges are labelled with the child's role: `left`/`right`, `operand`,
      `arg<i>`, `expr`, `stmt<i>`.

Raises:
    - `NotImplementedError`: If a node kind has no emitter method.
"""

from typing import Any

from minexpr.minexpr_ast import ASTNode
from minexpr.minexpr_constants import node_colors


class DotEmitter:
    """Emits a Graphviz `digraph` from a minexpr AST.

    The tree is walked with an explicit stack, so depth is unbounded. Edges
    of `binary` and `assign` nodes follow both operand subtrees; every other
    parent writes each edge right after that child's subtree.

    Attributes:
        lines (list[str]): Accumulated node and edge statements.
        counter (int): Next node number to hand out.
    """

    def __init__(self) -> None:
        self.lines: list[str] = []
        self.counter = 0

    def get_output(self) -> str:
        header = [
            "digraph AST {",
            '  node [shape=rectangle, style="rounded,filled", fillcolor=lightblue];',
            "  rankdir=TB;",
            "",
        ]
        return "\n".join(header + self.lines + ["}"]) + "\n"

    def add_node(self, node: ASTNode) -> int:
        node_id = self.counter
        self.counter += 1
        color = node_colors.get(node.kind, "white")
        self.lines.append(
            f'  node_{node_id} [label="{node.label()}", fillcolor="{color}"];'
        )
        return node_id

    def add_edge(self, source: int, target: int, label: str) -> None:
        self.lines.append(f'  node_{source} -> node_{target} [label="{label}"];')

    def edge_labels(self, node: ASTNode) -> list[str]:
        count = len(node.children)
        if node.kind in ("binary", "assign"):
            return ["left", "right"][:count]
        if node.kind == "unary":
            return ["operand"] * count
        if node.kind == "call":
            return [f"arg{i}" for i in range(count)]
        if node.kind == "program":
            return [f"stmt{i}" for i in range(count)]
        return ["expr"] * count

    def emit(self, root: ASTNode) -> int:
        """Emits `root` and its subtree; returns the root's number."""
        root_id = [0]
        # ("node", node, slots, i) fills slots[i]; ("edge", source, slots, i, label)
        stack: list[tuple[Any, ...]] = [("node", root, root_id, 0)]
        while stack:
            item = stack.pop()
            if item[0] == "edge":
                _, source, slots, i, label = item
                self.add_edge(source, slots[i], label)
                continue
            _, node, slots, i = item
            if not hasattr(self, f"emit_{node.kind}"):
                raise NotImplementedError(f"No DOT emitter for node kind '{node.kind}'")
            node_id = self.add_node(node)
            slots[i] = node_id

            child_ids = [0] * len(node.children)
            labels = self.edge_labels(node)
            indices = range(len(node.children) - 1, -1, -1)
            if node.kind in ("binary", "assign"):
                stack.extend(("edge", node_id, child_ids, j, labels[j]) for j in indices)
                stack.extend(("node", node.children[j], child_ids, j) for j in indices)
            else:
                for j in indices:
                    stack.append(("edge", node_id, child_ids, j, labels[j]))
                    stack.append(("node", node.children[j], child_ids, j))
        return root_id[0]

    emit_program = emit
    emit_expr_stmt = emit
    emit_assign = emit
    emit_binary = emit
    emit_unary = emit
    emit_call = emit
    emit_paren = emit
    emit_number = emit
    emit_string = emit
    emit_boolean = emit
    emit_identifier = emit
