"""
Renders a pysyntax tree as an indented debug dump.

One line per node (`KIND [start, end)`), one line per significant leaf
(`TYPE 'text'`), and one `! message [start, end)` line per error annotation,
directly below the node it was recorded in. Trivia leaves are only shown when
`show_trivia` is set. Error lines come before the node's children.

Example output for "x y\\n":

    FILE [0, 4)
      EXPRESSION_STATEMENT [0, 2)
        ! End of statement expected [2, 2)
        REFERENCE_EXPRESSION [0, 1)
          IDENTIFIER 'x'
      EXPRESSION_STATEMENT [2, 4)
        REFERENCE_EXPRESSION [2, 3)
          IDENTIFIER 'y'
        STATEMENT_BREAK '\\n'
"""

from pysyntax.pysyntax_tree import SyntaxLeaf, SyntaxNode


class TreeEmitter:
    """Emits one line per node, leaf and error.

    Attributes:
        lines (list[str]): Accumulated output lines.
        show_trivia (bool): Whether whitespace, line breaks and comments are listed.
    """

    def __init__(self, show_trivia: bool = False) -> None:
        self.lines: list[str] = []
        self.show_trivia = show_trivia

    def indent_str(self, depth: int) -> str:
        return "  " * depth

    def get_output(self) -> str:
        return "\n".join(self.lines)

    def emit_node(self, node: SyntaxNode, depth: int) -> None:
        self.lines.append(f"{self.indent_str(depth)}{node.kind} [{node.start}, {node.end})")
        for error in node.errors:
            self.lines.append(
                f"{self.indent_str(depth + 1)}! {error.message} [{error.start}, {error.end})"
            )

    def emit_leaf(self, leaf: SyntaxLeaf, depth: int) -> None:
        if leaf.is_trivia and not self.show_trivia:
            return
        self.lines.append(f"{self.indent_str(depth)}{leaf.type} {leaf.text!r}")
