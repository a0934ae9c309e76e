"""
pysyntax Parser

Turns Python-family source text into a lossless concrete syntax tree.

`PythonParser` wires the pieces of one parse unit together: it tokenizes the
source, opens a `TreeBuilder` over the tokens, creates the `ParsingContext`
(and with it the statement, expression and function sub-parsers), installs the
token reclassifier as the builder's remapper and then parses statements until
the input is exhausted.

Parser Behavior
---------------
- Never raises on malformed source: errors are recorded as `ErrorAnnotation`s
  on the tree and parsing resumes at the next statement.
- Nesting deeper than the interpreter stack allows is reported the same way:
  the top-level statement becomes a "Nesting too deep" error region.
- The returned FILE node covers every character of the input, so
  `tree.text == source` for any input.
- A parser instance holds no state between calls; each `parse()` builds its own
  builder and context.

Example
-------
>>> tree = PythonParser("2.7").parse("print 'hi'\\n")
>>> tree.nodes[0].kind is ElementType.PRINT_STATEMENT
True
>>> tree.text
"print 'hi'\\n"

Raises
------
ValueError
    When the language level or future flag given to the constructor is unknown.
"""

from __future__ import annotations

import logging

from pysyntax.pysyntax_constants import ElementType
from pysyntax.pysyntax_context import (
    FutureFeature,
    LanguageLevel,
    ParsingContext,
    ParsingScope,
)
from pysyntax.pysyntax_lexer import tokenize
from pysyntax.pysyntax_tree import SyntaxNode, TreeBuilder, whole_edge_binder

logger = logging.getLogger(__name__)


class PythonParser:
    """
    Entry point for parsing one source text.

    Args:
        level (LanguageLevel | str | None): Target language level, as an enum member
            or a "2.7" style string. Defaults to `LanguageLevel.default()`.
        future_flag (FutureFeature | str | None): A `__future__` feature assumed to be
            imported before the first statement.

    Raises:
        ValueError: On an unknown level or future feature name.
    """

    def __init__(
        self,
        level: LanguageLevel | str | None = None,
        future_flag: FutureFeature | str | None = None,
    ) -> None:
        if level is None:
            level = LanguageLevel.default()
        elif isinstance(level, str):
            level = LanguageLevel.from_string(level)
        if isinstance(future_flag, str):
            try:
                future_flag = FutureFeature(future_flag)
            except ValueError:
                raise ValueError(f"Unknown future feature: {future_flag!r}") from None
        self.level: LanguageLevel = level
        self.future_flag: FutureFeature | None = future_flag

    def parse(self, text: str) -> SyntaxNode:
        """
        Parses `text` into a FILE node.

        Args:
            text (str): Complete source text.

        Returns:
            SyntaxNode: The FILE root. Syntax errors are available through
            `tree.iter_errors()`.

        Raises:
            TypeError: If `text` is not a string.
        """
        if not isinstance(text, str):
            raise TypeError(f"Source must be str, not {type(text).__name__}")

        tokens = tokenize(text)
        builder = TreeBuilder(tokens, text)
        context = ParsingContext(builder, self.level, self.future_flag)
        statements = context.statement_parser
        builder.set_token_type_remapper(statements.reclassifier)

        root = builder.mark()
        root.set_custom_edge_token_binders(whole_edge_binder, whole_edge_binder)
        while not builder.eof():
            statement = builder.mark()
            try:
                statements.parse_statement(ParsingScope())
            except RecursionError:
                statements.recover_from_deep_nesting(statement)
            else:
                statement.drop()
        root.done(ElementType.FILE)

        tree = builder.build_tree()
        logger.debug(
            "parsed %d characters at level %s: %d statements, %d errors",
            len(text),
            self.level,
            len(tree.nodes),
            sum(1 for _ in tree.iter_errors()),
        )
        return tree


def parse(
    text: str,
    level: LanguageLevel | str | None = None,
    future_flag: FutureFeature | str | None = None,
) -> SyntaxNode:
    """Shorthand for `PythonParser(level, future_flag).parse(text)`."""
    return PythonParser(level, future_flag).parse(text)


__all__ = ["PythonParser", "parse"]
