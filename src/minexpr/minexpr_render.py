"""
Provides the `Renderer` class and emitter interface for turning finished minexpr ASTs into text.

Classes and Features:
    - Emitter (Protocol): Interface for all backend emitters. Requires `__init__` and `get_output`.
    - DotEmitter: Graphviz DOT description of the tree.
    - JsonEmitter: Tag + payload JSON serialization of the tree.
    - Renderer: Picks an emitter by target name and dispatches the root node
      to the matching `emit_*` method.

Example:
    >>> renderer = Renderer("dot")
    >>> dot_text = renderer.render(program)

Raises:
    ValueError: If the target is not supported.
    TypeError: If the root is not an ASTNode.
    NotImplementedError: If the emitter lacks an `emit_*` method for the root kind.
"""

import logging
from typing import Protocol

from minexpr.emitters.dot_emitter import DotEmitter
from minexpr.emitters.json_emitter import JsonEmitter
from minexpr.minexpr_ast import ASTNode

logger = logging.getLogger(__name__)


class Emitter(Protocol):  # pragma: no cover
    """Protocol for all minexpr emitters.

    Methods:
        __init__(): Initializes the emitter.
        get_output(): Returns the complete rendered text.
    """

    def __init__(self) -> None: ...  # pragma: no cover

    def get_output(self) -> str: ...  # pragma: no cover


EmitterType = type[Emitter]
"""Alias for a concrete Emitter class type."""


class Renderer:
    """Dispatches a minexpr AST to the emitter for the chosen output target.

    Attributes:
        emitter_type (EmitterType): The emitter class for the target.
        emitter (Emitter): The emitter used by the latest `render` call.
    """

    def __init__(self, target: str) -> None:
        """
        Args:
            target: "dot" / "graphviz" or "json".

        Raises:
            ValueError: If the target is not supported.
        """
        emitters: dict[str, EmitterType] = {
            "dot": DotEmitter,
            "graphviz": DotEmitter,
            "json": JsonEmitter,
        }
        target = target.lower()
        if target not in emitters:
            raise ValueError(f"Unknown render target: {target!r}")
        self.target = target
        self.emitter_type: EmitterType = emitters[target]
        self.emitter: Emitter = self.emitter_type()

    def render(self, root: ASTNode) -> str:
        """Renders a tree, normally a `program` node, and returns the text.

        Each call starts from a fresh emitter, so a Renderer can be reused.

        Raises:
            TypeError: If `root` is not an ASTNode.
        """
        if not isinstance(root, ASTNode):
            raise TypeError("Render root must be an ASTNode instance.")
        self.emitter = self.emitter_type()
        logger.debug("Rendering %s tree as %s", root.kind, self.target)
        self._visit(root)
        return self.emitter.get_output()

    def _visit(self, node: ASTNode) -> None:
        method_name = f"emit_{node.kind}"
        if hasattr(self.emitter, method_name):
            getattr(self.emitter, method_name)(node)
        else:
            raise NotImplementedError(
                f"No emitter method for node kind '{node.kind}' "
                f"(line {node.line}, col {node.col})"
            )
