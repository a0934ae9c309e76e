"""
Provides the `Renderer` class and emitter interface for turning syntax trees into text.

Classes and Features:
    - Emitter (Protocol): Interface for all output emitters. Requires `__init__` and `get_output`.
    - TreeEmitter: Indented node dump with ranges and error annotations.
    - TextEmitter: Reconstructs the source text from the leaves.
    - JsonEmitter: The tree as JSON (`SyntaxNode.to_dict`).
    - Renderer: Selects an emitter by target name and walks the tree, passing
      nodes to `emit_node` and leaves to `emit_leaf`.

Example:
    >>> renderer = Renderer("tree")
    >>> output = renderer.render(tree)

Raises:
    ValueError: If the target is not supported.
    TypeError: If the input is not a SyntaxNode.
    NotImplementedError: If the emitter has no `emit_node` method.
"""

import json
from typing import Any, Protocol

from pysyntax.emitters.text_emitter import TextEmitter
from pysyntax.emitters.tree_emitter import TreeEmitter
from pysyntax.pysyntax_tree import SyntaxLeaf, SyntaxNode


class Emitter(Protocol):  # pragma: no cover
    """Protocol for all renderer emitters.

    Methods:
        __init__(): Initializes the emitter.
        get_output(): Returns the complete rendered text.
    """

    def __init__(self) -> None: ...  # pragma: no cover

    def get_output(self) -> str: ...  # pragma: no cover


class JsonEmitter:
    """Serializes the whole tree at the root; children are not visited."""

    def __init__(self, indent: int | None = 2) -> None:
        self.indent = indent
        self.data: dict[str, Any] = {}

    def emit_node(self, node: SyntaxNode, depth: int) -> bool:
        self.data = dict(node.to_dict())
        return False

    def emit_leaf(self, leaf: SyntaxLeaf, depth: int) -> None:
        return None

    def get_output(self) -> str:
        return json.dumps(self.data, indent=self.indent)


EmitterType = type[Emitter]
"""Alias for a concrete Emitter class type."""


class Renderer:
    """Walks a syntax tree with the emitter for the selected output target.

    Attributes:
        emitter (Emitter): The selected emitter instance.
    """

    def __init__(self, target: str, **options: Any) -> None:
        """Initializes the renderer with the desired output target.

        Args:
            target: "tree", "text" or "json" (case-insensitive).
            **options: Passed to the emitter's constructor.

        Raises:
            ValueError: If the target is not supported.
        """
        emitters: dict[str, EmitterType] = {
            "tree": TreeEmitter,
            "text": TextEmitter,
            "json": JsonEmitter,
        }
        target = target.lower()
        if target not in emitters:
            raise ValueError(f"Unknown render target: {target!r}")
        self.emitter: Any = emitters[target](**options)

    def render(self, tree: SyntaxNode) -> str:
        """Renders `tree` with the selected emitter.

        Raises:
            TypeError: If `tree` is not a SyntaxNode.
        """
        if not isinstance(tree, SyntaxNode):
            raise TypeError("Renderer input must be a SyntaxNode instance.")
        self._visit(tree, 0)
        return self.emitter.get_output()

    def _visit(self, node: SyntaxNode, depth: int) -> None:
        emit_method = getattr(self.emitter, "emit_node", None)
        if emit_method is None:
            raise NotImplementedError(
                f"No emitter method for node kind '{node.kind}' "
                f"(offset {node.start})"
            )
        if emit_method(node, depth) is False:
            return
        for child in node.children:
            if isinstance(child, SyntaxNode):
                self._visit(child, depth + 1)
            else:
                self.emitter.emit_leaf(child, depth + 1)


__all__ = ["Emitter", "JsonEmitter", "Renderer"]
