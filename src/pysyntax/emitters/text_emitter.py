"""
Reconstructs source text from a pysyntax tree.

The tree is lossless, so the output of this emitter for a tree parsed from
`source` is `source` itself. Used by the CLI's `--format text` and to check
that error recovery never drops or duplicates input.
"""

from pysyntax.pysyntax_tree import SyntaxLeaf, SyntaxNode


class TextEmitter:
    def __init__(self) -> None:
        self.parts: list[str] = []

    def get_output(self) -> str:
        return "".join(self.parts)

    def emit_node(self, node: SyntaxNode, depth: int) -> None:
        return None

    def emit_leaf(self, leaf: SyntaxLeaf, depth: int) -> None:
        self.parts.append(leaf.text)
