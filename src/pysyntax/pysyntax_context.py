"""
Parse-unit configuration shared by the statement, expression and function parsers.

Classes:
    LanguageLevel: Target Python version and the grammar switches it implies.
    FutureFeature: `from __future__ import ...` feature names.
    ParsingScope: Immutable (in_suite, in_class) value threaded through statement parsing.
    ParsingContext: Builder, language level and the growing future-flag set for one parse unit.
    Parsing: Base class of the sub-parsers with the token-matching helpers they share.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING

from pysyntax.pysyntax_constants import ElementType, TokenType
from pysyntax.pysyntax_tree import TreeBuilder

if TYPE_CHECKING:
    from pysyntax.pysyntax_expressions import ExpressionParsing
    from pysyntax.pysyntax_functions import FunctionParsing
    from pysyntax.pysyntax_statements import StatementParsing


class LanguageLevel(Enum):
    PYTHON24 = (2, 4)
    PYTHON25 = (2, 5)
    PYTHON26 = (2, 6)
    PYTHON27 = (2, 7)
    PYTHON30 = (3, 0)
    PYTHON31 = (3, 1)
    PYTHON32 = (3, 2)
    PYTHON33 = (3, 3)

    @property
    def has_with_statement(self) -> bool:
        return self.value >= (2, 6)

    @property
    def has_print_statement(self) -> bool:
        return self.value < (3, 0)

    @property
    def is_py3k(self) -> bool:
        return self.value >= (3, 0)

    @classmethod
    def default(cls) -> "LanguageLevel":
        return cls.PYTHON27

    @classmethod
    def from_string(cls, version: str) -> "LanguageLevel":
        """Parses "2.7" / "3" style version strings.

        Raises:
            ValueError: If the version is not a supported level.
        """
        parts = version.strip().split(".")
        try:
            key = (int(parts[0]), int(parts[1]) if len(parts) > 1 else 0)
        except ValueError:
            raise ValueError(f"Invalid language level: {version!r}") from None
        for level in cls:
            if level.value == key:
                return level
        raise ValueError(f"Unsupported language level: {version!r}")

    def __str__(self) -> str:
        return "%d.%d" % self.value


class FutureFeature(Enum):
    ABSOLUTE_IMPORT = "absolute_import"
    DIVISION = "division"
    GENERATORS = "generators"
    NESTED_SCOPES = "nested_scopes"
    WITH_STATEMENT = "with_statement"
    PRINT_FUNCTION = "print_function"


@dataclass(frozen=True)
class ParsingScope:
    """Where the statement being parsed sits.

    Attributes:
        in_suite: Directly inside a single-line (semicolon-joined) suite.
        in_class: Directly inside a class body.
    """

    in_suite: bool = False
    in_class: bool = False

    def with_suite(self, flag: bool) -> "ParsingScope":
        return replace(self, in_suite=flag)

    def with_class(self, flag: bool) -> "ParsingScope":
        return replace(self, in_class=flag)


class ParsingContext:
    """Per-parse-unit state. Only `future_flags` changes while parsing.

    The sub-parsers are created here so each of them can reach the others
    through the context.
    """

    def __init__(
        self,
        builder: TreeBuilder,
        language_level: LanguageLevel,
        future_flag: FutureFeature | None = None,
    ) -> None:
        from pysyntax import pysyntax_expressions, pysyntax_functions, pysyntax_statements

        self.builder = builder
        self.language_level = language_level
        self.future_flags: set[FutureFeature] = set()
        if future_flag is not None:
            self.future_flags.add(future_flag)
        self.statement_parser = pysyntax_statements.StatementParsing(self)
        self.expression_parser = pysyntax_expressions.ExpressionParsing(self)
        self.function_parser = pysyntax_functions.FunctionParsing(self)

    @property
    def has_with_statement(self) -> bool:
        return (
            self.language_level.has_with_statement
            or FutureFeature.WITH_STATEMENT in self.future_flags
        )

    @property
    def has_print_statement(self) -> bool:
        return (
            self.language_level.has_print_statement
            and FutureFeature.PRINT_FUNCTION not in self.future_flags
        )


IDENTIFIER_EXPECTED = "Identifier expected"
EXPRESSION_EXPECTED = "Expression expected"


class Parsing:
    """Shared helpers for the sub-parsers."""

    def __init__(self, context: ParsingContext) -> None:
        self.context = context
        self.builder = context.builder

    @property
    def statement_parser(self) -> "StatementParsing":
        return self.context.statement_parser

    @property
    def expression_parser(self) -> "ExpressionParsing":
        return self.context.expression_parser

    @property
    def function_parser(self) -> "FunctionParsing":
        return self.context.function_parser

    @property
    def reference_type(self) -> ElementType:
        return ElementType.REFERENCE_EXPRESSION

    def at(self, *types: TokenType) -> bool:
        return self.builder.token_type() in types

    def check_matches(self, token: TokenType, message: str) -> bool:
        if self.builder.token_type() is token:
            self.builder.advance_lexer()
            return True
        self.builder.error(message)
        return False

    def match_token(self, token: TokenType) -> bool:
        if self.builder.token_type() is token:
            self.builder.advance_lexer()
            return True
        return False

    def assert_current_token(self, token: TokenType) -> None:
        current = self.builder.token_type()
        assert current is token, f"Expected {token}, got {current}"

    def parse_identifier(self, kind: ElementType) -> str | None:
        """Commits the current identifier as a `kind` node and returns its text."""
        marker = self.builder.mark()
        if self.builder.token_type() is TokenType.IDENTIFIER:
            text = self.builder.token_text()
            self.builder.advance_lexer()
            marker.done(kind)
            return text
        self.builder.error(IDENTIFIER_EXPECTED)
        marker.drop()
        return None


__all__ = [
    "EXPRESSION_EXPECTED",
    "FutureFeature",
    "IDENTIFIER_EXPECTED",
    "LanguageLevel",
    "Parsing",
    "ParsingContext",
    "ParsingScope",
]
