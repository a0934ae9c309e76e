"""
Statement parsing.

Recursive-descent parser for Python statements on top of the marker-based
`TreeBuilder`. It is the part of pysyntax that decides the shape of the tree
above the expression level:

Supported Constructs
--------------------
- Compound statements: `while`, `if`/`elif`/`else`, `for`, `try`/`except`/`finally`,
  `with`, `class`; `def` and decorators are delegated to the function parser.
- Simple statements: `print` (when the print statement is active), `assert`,
  `break`, `continue`, `del`, `exec`, `global`, `nonlocal`, `import`,
  `from ... import`, `pass`, `return`, `raise`, expression statements and
  plain, chained and augmented assignments.
- Suites: indented blocks and single-line `;`-joined statement lists.

Parser Behavior
---------------
- Never raises on malformed source. Every problem becomes an error annotation
  and the enclosing node is still committed. A statement that matches nothing
  consumes one token, so parsing always terminates.
- A top-level statement nested too deeply for the interpreter stack is rolled
  back and covered by a "Nesting too deep" error region (`recover_from_deep_nesting`).
- Keeps the two pieces of state the token reclassifier reads: the expect-as
  flag (only ever changed through `expecting_as()`, which restores it on exit)
  and the `from __future__ import` phase (reset when the from-import returns).
- Future imports of `with_statement`, `nested_scopes` and `print_function`
  grow the context's future-flag set and affect the statements that follow.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import NamedTuple

from pysyntax.pysyntax_constants import (
    AUG_ASSIGN_OPERATIONS,
    END_OF_STATEMENT,
    ElementType,
    TokenType,
)
from pysyntax.pysyntax_context import (
    EXPRESSION_EXPECTED,
    IDENTIFIER_EXPECTED,
    FutureFeature,
    Parsing,
    ParsingContext,
    ParsingScope,
)
from pysyntax.pysyntax_reclassifier import Phase, TokenReclassifier
from pysyntax.pysyntax_tree import Marker, following_comment_binder

logger = logging.getLogger(__name__)

RECORDED_FUTURE_FEATURES: dict[str, FutureFeature] = {
    "with_statement": FutureFeature.WITH_STATEMENT,
    "nested_scopes": FutureFeature.NESTED_SCOPES,
    "print_function": FutureFeature.PRINT_FUNCTION,
}


class ImportTypes(NamedTuple):
    statement: ElementType
    element: ElementType
    star_element: ElementType


class StatementParsing(Parsing):
    """
    Statement-level parser for one parse unit.

    Attributes
    ----------
    future_import_phase : Phase
        Progress through the current `from __future__ import` statement.
    expect_as_keyword : bool
        While set, an identifier spelled `as` is promoted to AS_KEYWORD.
    reclassifier : TokenReclassifier
        The token-type remapper reading the two fields above; installed on the
        builder by `PythonParser`.
    """

    def __init__(self, context: ParsingContext) -> None:
        super().__init__(context)
        self.future_import_phase = Phase.NONE
        self.expect_as_keyword = False
        self.reclassifier = TokenReclassifier(self)

    @contextmanager
    def expecting_as(self, flag: bool = True) -> Iterator[None]:
        """Sets the expect-as flag for the duration of the block, restoring the previous value."""
        previous = self.expect_as_keyword
        self.expect_as_keyword = flag
        try:
            yield
        finally:
            self.expect_as_keyword = previous

    # DISPATCH

    def parse_statement(self, scope: ParsingScope) -> None:
        """Parse one statement of any kind; a no-op at end of input."""
        builder = self.builder
        while builder.token_type() is TokenType.STATEMENT_BREAK:
            builder.advance_lexer()

        first = builder.token_type()
        if first is None:
            return

        if first is TokenType.WHILE_KEYWORD:
            self.parse_while_statement(scope)
            return
        if first is TokenType.IF_KEYWORD:
            self.parse_if_statement(scope)
            return
        if first is TokenType.FOR_KEYWORD:
            self.parse_for_statement(scope)
            return
        if first is TokenType.TRY_KEYWORD:
            self.parse_try_statement(scope)
            return
        if first is TokenType.DEF_KEYWORD:
            self.function_parser.parse_function_declaration(scope)
            return
        if first is TokenType.AT:
            self.function_parser.parse_decorated_declaration(scope)
            return
        if first is TokenType.CLASS_KEYWORD:
            self.parse_class_declaration(scope)
            return
        if first is TokenType.WITH_KEYWORD:
            self.parse_with_statement(scope)
            return

        self.parse_simple_statement(scope)

    def recover_from_deep_nesting(self, statement: Marker) -> None:
        """Rolls back to `statement` and covers it with a "Nesting too deep" error region.

        Called when the statement exhausted the interpreter stack. The region
        runs to the end of the logical line and over the indented block that
        line opens, if any.
        """
        builder = self.builder
        statement.rollback_to()
        self.expect_as_keyword = False
        self.future_import_phase = Phase.NONE
        while builder.token_type() is TokenType.STATEMENT_BREAK:
            builder.advance_lexer()
        offset = builder.current_offset()
        region = builder.mark()
        depth = 0
        while not builder.eof():
            token = builder.token_type()
            builder.advance_lexer()
            if token is TokenType.INDENT:
                depth += 1
            elif token is TokenType.DEDENT:
                depth -= 1
            if (
                depth <= 0
                and token in (TokenType.STATEMENT_BREAK, TokenType.DEDENT)
                and builder.token_type() is not TokenType.INDENT
            ):
                break
        region.error("Nesting too deep")
        logger.debug("statement at offset %d nested too deeply", offset)

    def parse_simple_statement(self, scope: ParsingScope) -> None:
        builder = self.builder
        first = builder.token_type()
        if first is None:
            return
        if first is TokenType.PRINT_KEYWORD and self.context.has_print_statement:
            self.parse_print_statement(scope)
            return
        if first is TokenType.ASSERT_KEYWORD:
            self.parse_assert_statement(scope)
            return
        if first is TokenType.BREAK_KEYWORD:
            self.parse_keyword_statement(ElementType.BREAK_STATEMENT, scope)
            return
        if first is TokenType.CONTINUE_KEYWORD:
            self.parse_keyword_statement(ElementType.CONTINUE_STATEMENT, scope)
            return
        if first is TokenType.DEL_KEYWORD:
            self.parse_del_statement(scope)
            return
        if first is TokenType.EXEC_KEYWORD:
            self.parse_exec_statement(scope)
            return
        if first is TokenType.GLOBAL_KEYWORD:
            self.parse_name_defining_statement(ElementType.GLOBAL_STATEMENT, scope)
            return
        if first is TokenType.NONLOCAL_KEYWORD:
            self.parse_name_defining_statement(ElementType.NONLOCAL_STATEMENT, scope)
            return
        if first is TokenType.IMPORT_KEYWORD:
            self.parse_import_statement(scope)
            return
        if first is TokenType.FROM_KEYWORD:
            self.parse_from_import_statement(scope)
            return
        if first is TokenType.PASS_KEYWORD:
            self.parse_keyword_statement(ElementType.PASS_STATEMENT, scope)
            return
        if first is TokenType.RETURN_KEYWORD:
            self.parse_return_statement(scope)
            return
        if first is TokenType.RAISE_KEYWORD:
            self.parse_raise_statement(scope)
            return

        if self.parse_expression_statement(scope):
            return

        builder.advance_lexer()
        if first is TokenType.INCONSISTENT_DEDENT:
            builder.error("Unindent does not match any outer indentation level")
        elif first is TokenType.INDENT:
            builder.error("Unexpected indent")
        else:
            builder.error(f"Statement expected, found {first}")

    def check_end_of_statement(self, scope: ParsingScope) -> None:
        """Consume the statement terminator.

        Inside a single-line suite a `;` is left for the suite loop; elsewhere it is
        consumed together with a directly following statement break.
        """
        builder = self.builder
        token = builder.token_type()
        if token is TokenType.STATEMENT_BREAK:
            builder.advance_lexer()
        elif token is TokenType.SEMICOLON:
            if not scope.in_suite:
                builder.advance_lexer()
                if builder.token_type() is TokenType.STATEMENT_BREAK:
                    builder.advance_lexer()
        elif not builder.eof():
            builder.error("End of statement expected")

    def at_end_of_statement(self) -> bool:
        return self.builder.token_type() in END_OF_STATEMENT

    # EXPRESSION STATEMENTS AND ASSIGNMENTS

    def parse_expression_statement(self, scope: ParsingScope) -> bool:
        """Parse an expression statement or an (augmented, chained) assignment.

        Returns False, having consumed nothing, when no expression starts here.
        """
        builder = self.builder
        expressions = self.expression_parser
        statement = builder.mark()

        if builder.token_type() is TokenType.YIELD_KEYWORD:
            expressions.parse_yield_or_tuple_expression(False)
            self.check_end_of_statement(scope)
            statement.done(ElementType.EXPRESSION_STATEMENT)
            return True

        if not expressions.parse_expression_optional():
            statement.drop()
            return False

        statement_type = ElementType.EXPRESSION_STATEMENT
        if builder.token_type() in AUG_ASSIGN_OPERATIONS:
            statement_type = ElementType.AUG_ASSIGNMENT_STATEMENT
            builder.advance_lexer()
            if not expressions.parse_yield_or_tuple_expression(False):
                builder.error(EXPRESSION_EXPECTED)
        elif builder.token_type() is TokenType.EQ:
            statement_type = ElementType.ASSIGNMENT_STATEMENT
            statement.rollback_to()
            statement = builder.mark()
            expressions.parse_expression(False, True)
            self._advance_over_assignment()
            self._parse_assignment_chain()

        self.check_end_of_statement(scope)
        statement.done(statement_type)
        return True

    def _advance_over_assignment(self) -> None:
        if not self.match_token(TokenType.EQ):
            logger.error(
                "assignment target reparse stopped at %s, not at '='",
                self.builder.token_type(),
            )

    def _parse_assignment_chain(self) -> None:
        """After `target =`: parse values, turning each operand followed by `=` into a target."""
        builder = self.builder
        expressions = self.expression_parser
        while True:
            operand = builder.mark()
            is_yield = builder.token_type() is TokenType.YIELD_KEYWORD
            if not expressions.parse_yield_or_tuple_expression(False):
                operand.drop()
                builder.error(EXPRESSION_EXPECTED)
                break
            if builder.token_type() is not TokenType.EQ:
                operand.drop()
                break
            if is_yield:
                operand.drop()
                builder.error("Cannot assign to 'yield' expression")
                builder.advance_lexer()
            else:
                operand.rollback_to()
                expressions.parse_expression(False, True)
                self._advance_over_assignment()

    # SIMPLE STATEMENTS

    def parse_print_statement(self, scope: ParsingScope) -> None:
        """`print [>> target] [, expr]* [,]`"""
        builder = self.builder
        self.assert_current_token(TokenType.PRINT_KEYWORD)
        statement = builder.mark()
        builder.advance_lexer()
        if builder.token_type() is TokenType.GTGT:
            target = builder.mark()
            builder.advance_lexer()
            self.expression_parser.parse_single_expression(False)
            target.done(ElementType.PRINT_TARGET)
        else:
            self.expression_parser.parse_single_expression(False)
        while builder.token_type() is TokenType.COMMA:
            builder.advance_lexer()
            if self.at_end_of_statement():
                break
            self.expression_parser.parse_single_expression(False)
        self.check_end_of_statement(scope)
        statement.done(ElementType.PRINT_STATEMENT)

    def parse_keyword_statement(self, kind: ElementType, scope: ParsingScope) -> None:
        statement = self.builder.mark()
        self.builder.advance_lexer()
        self.check_end_of_statement(scope)
        statement.done(kind)

    def parse_return_statement(self, scope: ParsingScope) -> None:
        builder = self.builder
        self.assert_current_token(TokenType.RETURN_KEYWORD)
        statement = builder.mark()
        builder.advance_lexer()
        if not builder.eof() and not self.at_end_of_statement():
            self.expression_parser.parse_expression()
        self.check_end_of_statement(scope)
        statement.done(ElementType.RETURN_STATEMENT)

    def parse_del_statement(self, scope: ParsingScope) -> None:
        builder = self.builder
        self.assert_current_token(TokenType.DEL_KEYWORD)
        statement = builder.mark()
        builder.advance_lexer()
        if not self.expression_parser.parse_single_expression(False):
            builder.error(EXPRESSION_EXPECTED)
        while builder.token_type() is TokenType.COMMA:
            builder.advance_lexer()
            if not self.at_end_of_statement():
                if not self.expression_parser.parse_single_expression(False):
                    builder.error(EXPRESSION_EXPECTED)
        self.check_end_of_statement(scope)
        statement.done(ElementType.DEL_STATEMENT)

    def parse_raise_statement(self, scope: ParsingScope) -> None:
        """`raise [type [, value [, traceback]]]` or `raise expr from cause`."""
        builder = self.builder
        expressions = self.expression_parser
        self.assert_current_token(TokenType.RAISE_KEYWORD)
        statement = builder.mark()
        builder.advance_lexer()
        if not builder.eof() and not self.at_end_of_statement():
            expressions.parse_single_expression(False)
            if builder.token_type() is TokenType.COMMA:
                builder.advance_lexer()
                expressions.parse_single_expression(False)
                if builder.token_type() is TokenType.COMMA:
                    builder.advance_lexer()
                    expressions.parse_single_expression(False)
            elif builder.token_type() is TokenType.FROM_KEYWORD:
                builder.advance_lexer()
                if not expressions.parse_single_expression(False):
                    builder.error(EXPRESSION_EXPECTED)
        self.check_end_of_statement(scope)
        statement.done(ElementType.RAISE_STATEMENT)

    def parse_assert_statement(self, scope: ParsingScope) -> None:
        builder = self.builder
        self.assert_current_token(TokenType.ASSERT_KEYWORD)
        statement = builder.mark()
        builder.advance_lexer()
        if self.expression_parser.parse_single_expression(False):
            if builder.token_type() is TokenType.COMMA:
                builder.advance_lexer()
                if not self.expression_parser.parse_single_expression(False):
                    builder.error(EXPRESSION_EXPECTED)
            self.check_end_of_statement(scope)
        else:
            builder.error(EXPRESSION_EXPECTED)
        statement.done(ElementType.ASSERT_STATEMENT)

    def parse_name_defining_statement(
        self, kind: ElementType, scope: ParsingScope
    ) -> None:
        """`global a, b` / `nonlocal a, b`"""
        statement = self.builder.mark()
        self.builder.advance_lexer()
        self.parse_identifier(ElementType.TARGET_EXPRESSION)
        while self.builder.token_type() is TokenType.COMMA:
            self.builder.advance_lexer()
            self.parse_identifier(ElementType.TARGET_EXPRESSION)
        self.check_end_of_statement(scope)
        statement.done(kind)

    def parse_exec_statement(self, scope: ParsingScope) -> None:
        """`exec code [in globals [, locals]]` (Python 2)."""
        builder = self.builder
        self.assert_current_token(TokenType.EXEC_KEYWORD)
        statement = builder.mark()
        builder.advance_lexer()
        self.expression_parser.parse_expression(True, False)
        if builder.token_type() is TokenType.IN_KEYWORD:
            builder.advance_lexer()
            self.expression_parser.parse_single_expression(False)
            if builder.token_type() is TokenType.COMMA:
                builder.advance_lexer()
                self.expression_parser.parse_single_expression(False)
        self.check_end_of_statement(scope)
        statement.done(ElementType.EXEC_STATEMENT)

    # IMPORTS

    def parse_import_statement(self, scope: ParsingScope) -> None:
        statement = self.builder.mark()
        self.builder.advance_lexer()
        self.parse_import_elements(
            ElementType.IMPORT_ELEMENT, is_module_import=True, in_parens=False
        )
        self.check_end_of_statement(scope)
        statement.done(ElementType.IMPORT_STATEMENT)

    def parse_from_import_statement(self, scope: ParsingScope) -> None:
        """Parse `from [.]*[module] import (* | names | (names))`.

        Drives the future-import phase: FROM before the module name (so the
        reclassifier can spot `__future__`), IMPORT once the `import` keyword of
        a `from __future__` statement is matched, NONE again on return.
        """
        builder = self.builder
        self.assert_current_token(TokenType.FROM_KEYWORD)
        self.future_import_phase = Phase.FROM
        try:
            statement = builder.mark()
            builder.advance_lexer()
            from_future = False
            had_dots = self.parse_relative_import_dots()
            statement_type = ElementType.FROM_IMPORT_STATEMENT
            if (had_dots and self.parse_optional_dotted_name()) or self.parse_dotted_name():
                types = self.check_from_import_keyword()
                statement_type = types.statement
                if self.future_import_phase is Phase.FUTURE:
                    self.future_import_phase = Phase.IMPORT
                    from_future = True
                if builder.token_type() is TokenType.MULT:
                    star = builder.mark()
                    builder.advance_lexer()
                    star.done(types.star_element)
                elif builder.token_type() is TokenType.LPAR:
                    builder.advance_lexer()
                    self.parse_import_elements(
                        types.element,
                        is_module_import=False,
                        in_parens=True,
                        from_future=from_future,
                    )
                    self.check_matches(TokenType.RPAR, ") expected")
                else:
                    self.parse_import_elements(
                        types.element,
                        is_module_import=False,
                        in_parens=False,
                        from_future=from_future,
                    )
            self.check_end_of_statement(scope)
            statement.done(statement_type)
        finally:
            self.future_import_phase = Phase.NONE

    def check_from_import_keyword(self) -> ImportTypes:
        self.check_matches(TokenType.IMPORT_KEYWORD, "'import' expected")
        return ImportTypes(
            ElementType.FROM_IMPORT_STATEMENT,
            ElementType.IMPORT_ELEMENT,
            ElementType.STAR_IMPORT_ELEMENT,
        )

    def parse_relative_import_dots(self) -> bool:
        had_dots = False
        while self.builder.token_type() is TokenType.DOT:
            had_dots = True
            self.builder.advance_lexer()
        return had_dots

    def parse_import_elements(
        self,
        element_type: ElementType,
        is_module_import: bool,
        in_parens: bool,
        from_future: bool = False,
    ) -> None:
        builder = self.builder
        while True:
            element = builder.mark()
            if is_module_import:
                if not self.parse_dotted_name_as_aware(expect_as=True, optional=False):
                    element.drop()
                    break
            else:
                name = self.parse_identifier(self.reference_type)
                if from_future and name in RECORDED_FUTURE_FEATURES:
                    feature = RECORDED_FUTURE_FEATURES[name]
                    self.context.future_flags.add(feature)
                    logger.debug("future feature enabled: %s", feature.value)
            with self.expecting_as():
                has_alias = self.match_token(TokenType.AS_KEYWORD)
            if has_alias:
                self.parse_identifier(ElementType.TARGET_EXPRESSION)
            element.done(element_type)
            if builder.token_type() is TokenType.COMMA:
                builder.advance_lexer()
                if in_parens and builder.token_type() is TokenType.RPAR:
                    break
            else:
                break

    def parse_optional_dotted_name(self) -> bool:
        return self.parse_dotted_name_as_aware(expect_as=False, optional=True)

    def parse_dotted_name(self) -> bool:
        return self.parse_dotted_name_as_aware(expect_as=False, optional=False)

    def parse_dotted_name_as_aware(self, expect_as: bool, optional: bool) -> bool:
        """Parse `a.b.c` as nested references.

        Returns True if a name was parsed (or skipped in optional mode), False on error.
        """
        builder = self.builder
        if builder.token_type() is not TokenType.IDENTIFIER:
            if optional:
                return True
            builder.error(IDENTIFIER_EXPECTED)
            return False
        marker = builder.mark()
        builder.advance_lexer()
        marker.done(self.reference_type)
        with self.expecting_as(expect_as):
            while builder.token_type() is TokenType.DOT:
                marker = marker.precede()
                builder.advance_lexer()
                self.check_matches(TokenType.IDENTIFIER, IDENTIFIER_EXPECTED)
                marker.done(self.reference_type)
        return True

    # COMPOUND STATEMENTS

    def parse_if_statement(self, scope: ParsingScope) -> None:
        builder = self.builder
        self.assert_current_token(TokenType.IF_KEYWORD)
        statement = builder.mark()
        if_part = builder.mark()
        builder.advance_lexer()
        self.expression_parser.parse_expression()
        self.parse_colon_and_suite(scope)
        if_part.done(ElementType.IF_PART_IF)
        elif_part = builder.mark()
        while builder.token_type() is TokenType.ELIF_KEYWORD:
            builder.advance_lexer()
            self.expression_parser.parse_expression()
            self.parse_colon_and_suite(scope)
            elif_part.done(ElementType.IF_PART_ELIF)
            elif_part = builder.mark()
        elif_part.drop()
        self._parse_else_part(scope)
        statement.done(ElementType.IF_STATEMENT)

    def _parse_else_part(self, scope: ParsingScope) -> None:
        else_part = self.builder.mark()
        if self.builder.token_type() is TokenType.ELSE_KEYWORD:
            self.builder.advance_lexer()
            self.parse_colon_and_suite(scope)
            else_part.done(ElementType.ELSE_PART)
        else:
            else_part.drop()

    def expect_colon(self) -> bool:
        builder = self.builder
        if builder.token_type() is TokenType.COLON:
            builder.advance_lexer()
            return True
        marker = builder.mark()
        if builder.token_type() is TokenType.STATEMENT_BREAK:
            builder.advance_lexer()
        marker.error("Colon expected")
        return False

    def parse_for_statement(self, scope: ParsingScope) -> None:
        self.assert_current_token(TokenType.FOR_KEYWORD)
        statement = self.builder.mark()
        self.parse_for_part(scope)
        self._parse_else_part(scope)
        statement.done(ElementType.FOR_STATEMENT)

    def parse_for_part(self, scope: ParsingScope) -> None:
        for_part = self.builder.mark()
        self.builder.advance_lexer()
        self.expression_parser.parse_expression(True, True)
        self.check_matches(TokenType.IN_KEYWORD, "'in' expected")
        self.expression_parser.parse_expression()
        self.parse_colon_and_suite(scope)
        for_part.done(ElementType.FOR_PART)

    def parse_while_statement(self, scope: ParsingScope) -> None:
        builder = self.builder
        self.assert_current_token(TokenType.WHILE_KEYWORD)
        statement = builder.mark()
        while_part = builder.mark()
        builder.advance_lexer()
        if not self.expression_parser.parse_single_expression(False):
            builder.error(EXPRESSION_EXPECTED)
        self.parse_colon_and_suite(scope)
        while_part.done(ElementType.WHILE_PART)
        self._parse_else_part(scope)
        statement.done(ElementType.WHILE_STATEMENT)

    def parse_try_statement(self, scope: ParsingScope) -> None:
        builder = self.builder
        expressions = self.expression_parser
        self.assert_current_token(TokenType.TRY_KEYWORD)
        statement = builder.mark()
        try_part = builder.mark()
        builder.advance_lexer()
        self.parse_colon_and_suite(scope)
        try_part.done(ElementType.TRY_PART)

        have_except_clause = False
        while builder.token_type() is TokenType.EXCEPT_KEYWORD:
            have_except_clause = True
            except_part = builder.mark()
            builder.advance_lexer()
            if builder.token_type() is not TokenType.COLON:
                if not expressions.parse_single_expression(False):
                    builder.error(EXPRESSION_EXPECTED)
                with self.expecting_as():
                    has_target = builder.token_type() in (
                        TokenType.COMMA,
                        TokenType.AS_KEYWORD,
                    )
                    if has_target:
                        builder.advance_lexer()
                if has_target and not expressions.parse_single_expression(True):
                    builder.error(EXPRESSION_EXPECTED)
            self.parse_colon_and_suite(scope)
            except_part.done(ElementType.EXCEPT_PART)
        if have_except_clause:
            self._parse_else_part(scope)

        finally_part = builder.mark()
        if builder.token_type() is TokenType.FINALLY_KEYWORD:
            builder.advance_lexer()
            self.parse_colon_and_suite(scope)
            finally_part.done(ElementType.FINALLY_PART)
        else:
            finally_part.drop()
            if not have_except_clause:
                # keep the statement: a try node of the wrong shape beats orphan tokens
                builder.error("'except' or 'finally' expected")
        statement.done(ElementType.TRY_EXCEPT_STATEMENT)

    def parse_with_statement(self, scope: ParsingScope) -> None:
        builder = self.builder
        self.assert_current_token(TokenType.WITH_KEYWORD)
        statement = builder.mark()
        builder.advance_lexer()
        while True:
            item = builder.mark()
            if not self.expression_parser.parse_single_expression(False):
                builder.error(EXPRESSION_EXPECTED)
            with self.expecting_as():
                has_target = self.match_token(TokenType.AS_KEYWORD)
            if has_target:
                self.expression_parser.parse_single_expression(True)
            item.done(ElementType.WITH_ITEM)
            if not self.match_token(TokenType.COMMA):
                break
        self.parse_colon_and_suite(scope)
        statement.done(ElementType.WITH_STATEMENT)

    def parse_class_declaration(
        self, scope: ParsingScope, class_marker: Marker | None = None
    ) -> None:
        """Parse `class Name[(bases)]: suite`.

        `class_marker` is passed by the decorator parser so the decorator list
        ends up inside the class node.
        """
        builder = self.builder
        if class_marker is None:
            class_marker = builder.mark()
        self.assert_current_token(TokenType.CLASS_KEYWORD)
        builder.advance_lexer()
        self.check_matches(TokenType.IDENTIFIER, IDENTIFIER_EXPECTED)
        if builder.token_type() is TokenType.LPAR:
            self.expression_parser.parse_argument_list()
        else:
            bases = builder.mark()
            bases.done(ElementType.ARGUMENT_LIST)
        self.parse_colon_and_suite(scope.with_class(True))
        class_marker.done(ElementType.CLASS_DECLARATION)

    # SUITES

    def parse_colon_and_suite(self, scope: ParsingScope) -> None:
        if self.expect_colon():
            self.parse_suite(scope)
        else:
            self.builder.mark().done(ElementType.STATEMENT_LIST)

    def parse_suite(
        self,
        scope: ParsingScope,
        end_marker: Marker | None = None,
        end_kind: ElementType | None = None,
    ) -> None:
        """Parse the body after a colon: an indented block or a single-line suite.

        When `end_marker` is given it is committed as `end_kind` right after the
        statement list, before the closing dedent is consumed.
        """
        builder = self.builder
        if builder.token_type() is TokenType.STATEMENT_BREAK:
            builder.advance_lexer()
            statements = builder.mark()
            if builder.token_type() is not TokenType.INDENT:
                builder.error("Indent expected")
            else:
                builder.advance_lexer()
                if builder.eof():
                    builder.error("Indented block expected")
                else:
                    while not builder.eof() and builder.token_type() is not TokenType.DEDENT:
                        self.parse_statement(scope)
            statements.done(ElementType.STATEMENT_LIST)
            statements.set_custom_edge_token_binders(None, following_comment_binder)
            if end_marker is not None and end_kind is not None:
                end_marker.done(end_kind)
            if not builder.eof():
                self.check_matches(TokenType.DEDENT, "Dedent expected")
        else:
            statements = builder.mark()
            if builder.eof():
                builder.error("Statement expected")
            else:
                inner = scope.with_suite(True)
                self.parse_simple_statement(inner)
                while self.match_token(TokenType.SEMICOLON):
                    if self.match_token(TokenType.STATEMENT_BREAK):
                        break
                    self.parse_simple_statement(inner)
            statements.done(ElementType.STATEMENT_LIST)
            if end_marker is not None and end_kind is not None:
                end_marker.done(end_kind)


__all__ = ["ImportTypes", "StatementParsing"]
