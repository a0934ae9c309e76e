"""
Contextual keyword promotion ("soft keywords").

The lexer emits `as`, `with`, `print`, `None`, `True`, `False`, `__debug__`,
`nonlocal` and `exec` as plain identifiers. Whether the parser sees one of them
as a keyword depends on the language level, on the `__future__` flags collected
so far, and on two pieces of statement-parser state: the expect-as flag and the
future-import phase.

`classify_identifier` makes that decision as a pure function of a
`ReclassifierState` snapshot and the token text. Its only state transition (the
`__future__` module name moving the phase from FROM to FUTURE) is returned to
the caller rather than applied. `TokenReclassifier` is the callback installed on
the tree builder: it snapshots the statement parser, asks `classify_identifier`,
and stores the returned phase back.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from pysyntax.pysyntax_constants import TokenType
from pysyntax.pysyntax_context import FutureFeature, LanguageLevel

if TYPE_CHECKING:
    from pysyntax.pysyntax_statements import StatementParsing

TOK_FUTURE_IMPORT = "__future__"
TOK_AS = "as"
TOK_WITH = "with"
TOK_PRINT = "print"
TOK_EXEC = "exec"

PY3K_KEYWORDS: dict[str, TokenType] = {
    "None": TokenType.NONE_KEYWORD,
    "True": TokenType.TRUE_KEYWORD,
    "False": TokenType.FALSE_KEYWORD,
    "__debug__": TokenType.DEBUG_KEYWORD,
    "nonlocal": TokenType.NONLOCAL_KEYWORD,
}


class Phase(Enum):
    """Progress through a `from __future__ import ...` statement."""

    NONE = "none"
    FROM = "from"
    FUTURE = "future"
    IMPORT = "import"


@dataclass(frozen=True)
class ReclassifierState:
    level: LanguageLevel
    future_flags: frozenset[FutureFeature] = frozenset()
    expect_as: bool = False
    phase: Phase = Phase.NONE

    @property
    def has_with_statement(self) -> bool:
        return (
            self.level.has_with_statement
            or FutureFeature.WITH_STATEMENT in self.future_flags
        )

    @property
    def has_print_statement(self) -> bool:
        return (
            self.level.has_print_statement
            and FutureFeature.PRINT_FUNCTION not in self.future_flags
        )


def classify_identifier(state: ReclassifierState, text: str) -> tuple[TokenType, Phase]:
    """Returns the token type an identifier with `text` has in `state`, and the next phase.

    Rules are tried in order and the first match wins. Matching is on the whole
    token text, so `assert_x` or `printer` never match `as` or `print`.
    """
    if (state.expect_as or state.level.has_with_statement) and text == TOK_AS:
        return TokenType.AS_KEYWORD, state.phase
    if state.phase is Phase.FROM and text == TOK_FUTURE_IMPORT:
        return TokenType.IDENTIFIER, Phase.FUTURE
    if state.has_with_statement and text == TOK_WITH:
        return TokenType.WITH_KEYWORD, state.phase
    if state.has_print_statement and text == TOK_PRINT:
        return TokenType.PRINT_KEYWORD, state.phase
    if state.level.is_py3k:
        if text in PY3K_KEYWORDS:
            return PY3K_KEYWORDS[text], state.phase
    elif text == TOK_EXEC:
        return TokenType.EXEC_KEYWORD, state.phase
    return TokenType.IDENTIFIER, state.phase


class TokenReclassifier:
    """Token-type remapper bound to one statement parser."""

    def __init__(self, statements: "StatementParsing") -> None:
        self.statements = statements

    def snapshot(self) -> ReclassifierState:
        context = self.statements.context
        return ReclassifierState(
            level=context.language_level,
            future_flags=frozenset(context.future_flags),
            expect_as=self.statements.expect_as_keyword,
            phase=self.statements.future_import_phase,
        )

    def __call__(self, source: TokenType, text: str) -> TokenType:
        if source is not TokenType.IDENTIFIER:
            return source
        promoted, phase = classify_identifier(self.snapshot(), text)
        self.statements.future_import_phase = phase
        return promoted


__all__ = ["Phase", "ReclassifierState", "TokenReclassifier", "classify_identifier"]
