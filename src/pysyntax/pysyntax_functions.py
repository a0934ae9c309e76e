"""
Function, lambda-parameter and decorator parsing.

`def` statements and `@decorator` lines are handed here by the statement
dispatcher; the expression parser borrows the parameter-list parser for
`lambda`. Language-level differences live here too: tuple parameters exist
only below Python 3, while annotations, return annotations and the bare `*`
separator exist only from Python 3 on.
"""

import logging

from pysyntax.pysyntax_constants import ElementType, TokenType
from pysyntax.pysyntax_context import (
    EXPRESSION_EXPECTED,
    IDENTIFIER_EXPECTED,
    Parsing,
    ParsingScope,
)
from pysyntax.pysyntax_tree import Marker

logger = logging.getLogger(__name__)

PARAMETER_LIST_STOPS = frozenset(
    {
        TokenType.STATEMENT_BREAK,
        TokenType.SEMICOLON,
        TokenType.COLON,
        TokenType.RPAR,
        TokenType.RBRACKET,
        TokenType.RBRACE,
    }
)


class FunctionParsing(Parsing):
    def parse_function_declaration(
        self, scope: ParsingScope, function_marker: Marker | None = None
    ) -> None:
        """Parse `def name(params) [-> expr]: suite`.

        The body gets a fresh scope: a method body is not itself a class body.
        `scope` only matters to the caller, which may have opened `function_marker`
        around a decorator list.
        """
        builder = self.builder
        if function_marker is None:
            function_marker = builder.mark()
        self.assert_current_token(TokenType.DEF_KEYWORD)
        builder.advance_lexer()
        self.check_matches(TokenType.IDENTIFIER, IDENTIFIER_EXPECTED)
        self.parse_parameter_list()
        self.parse_return_annotation()
        statements = self.statement_parser
        if statements.expect_colon():
            statements.parse_suite(
                ParsingScope(), function_marker, ElementType.FUNCTION_DECLARATION
            )
        else:
            builder.mark().done(ElementType.STATEMENT_LIST)
            function_marker.done(ElementType.FUNCTION_DECLARATION)
        if scope.in_class:
            logger.debug("parsed method declaration")

    def parse_return_annotation(self) -> None:
        builder = self.builder
        if not self.context.language_level.is_py3k:
            return
        if builder.token_type() is not TokenType.RARROW:
            return
        annotation = builder.mark()
        builder.advance_lexer()
        if not self.expression_parser.parse_single_expression(False):
            builder.error(EXPRESSION_EXPECTED)
        annotation.done(ElementType.ANNOTATION)

    def parse_decorated_declaration(self, scope: ParsingScope) -> None:
        """Parse `@name[(args)]` lines followed by the `def` or `class` they decorate."""
        builder = self.builder
        self.assert_current_token(TokenType.AT)
        declaration = builder.mark()
        decorators = builder.mark()
        while builder.token_type() is TokenType.AT:
            call = builder.mark()
            builder.advance_lexer()
            self.statement_parser.parse_dotted_name()
            if builder.token_type() is TokenType.LPAR:
                self.expression_parser.parse_argument_list()
            call.done(ElementType.DECORATOR_CALL)
            self.check_matches(TokenType.STATEMENT_BREAK, "Statement break expected")
        decorators.done(ElementType.DECORATOR_LIST)

        token = builder.token_type()
        if token is TokenType.DEF_KEYWORD:
            self.parse_function_declaration(scope, declaration)
        elif token is TokenType.CLASS_KEYWORD:
            self.statement_parser.parse_class_declaration(scope, declaration)
        else:
            builder.error("'def' or 'class' expected")
            declaration.drop()

    # PARAMETERS

    def parse_parameter_list(self) -> None:
        """`( params )` of a `def`, committed as PARAMETER_LIST (empty on a missing paren)."""
        builder = self.builder
        parameters = builder.mark()
        if not self.check_matches(TokenType.LPAR, "'(' expected"):
            parameters.done(ElementType.PARAMETER_LIST)
            return
        self._parse_parameters(TokenType.RPAR, is_lambda=False)
        self.check_matches(TokenType.RPAR, ") expected")
        parameters.done(ElementType.PARAMETER_LIST)

    def parse_lambda_parameter_list(self) -> None:
        parameters = self.builder.mark()
        self._parse_parameters(TokenType.COLON, is_lambda=True)
        parameters.done(ElementType.PARAMETER_LIST)

    def _parse_parameters(self, end_token: TokenType, is_lambda: bool) -> None:
        builder = self.builder
        first = True
        while builder.token_type() is not end_token and not builder.eof():
            if not first:
                if builder.token_type() is not TokenType.COMMA:
                    break
                builder.advance_lexer()
                if builder.token_type() is end_token:
                    break
            first = False
            if not self._parse_parameter(end_token, is_lambda):
                break

    def _parse_parameter(self, end_token: TokenType, is_lambda: bool) -> bool:
        builder = self.builder
        level = self.context.language_level
        token = builder.token_type()
        parameter = builder.mark()

        if token in (TokenType.MULT, TokenType.EXP):
            builder.advance_lexer()
            if (
                token is TokenType.MULT
                and level.is_py3k
                and builder.token_type() in (TokenType.COMMA, end_token)
            ):
                parameter.done(ElementType.SINGLE_STAR_PARAMETER)
                return True
            if not self.check_matches(TokenType.IDENTIFIER, IDENTIFIER_EXPECTED):
                parameter.done(ElementType.NAMED_PARAMETER)
                return False
            self._parse_annotation(is_lambda)
            parameter.done(ElementType.NAMED_PARAMETER)
            return True

        if token is TokenType.IDENTIFIER:
            builder.advance_lexer()
            self._parse_annotation(is_lambda)
            self._parse_default_value()
            parameter.done(ElementType.NAMED_PARAMETER)
            return True

        if token is TokenType.LPAR and not level.is_py3k:
            builder.advance_lexer()
            self._parse_parameters(TokenType.RPAR, is_lambda)
            self.check_matches(TokenType.RPAR, ") expected")
            self._parse_default_value()
            parameter.done(ElementType.TUPLE_PARAMETER)
            return True

        parameter.drop()
        if token is None or token is end_token or token in PARAMETER_LIST_STOPS:
            builder.error("Formal parameter name expected")
            return False
        invalid = builder.mark()
        builder.advance_lexer()
        invalid.error("Formal parameter name expected")
        return True

    def _parse_annotation(self, is_lambda: bool) -> None:
        builder = self.builder
        if is_lambda or not self.context.language_level.is_py3k:
            return
        if builder.token_type() is not TokenType.COLON:
            return
        annotation = builder.mark()
        builder.advance_lexer()
        if not self.expression_parser.parse_single_expression(False):
            builder.error(EXPRESSION_EXPECTED)
        annotation.done(ElementType.ANNOTATION)

    def _parse_default_value(self) -> None:
        builder = self.builder
        if builder.token_type() is TokenType.EQ:
            builder.advance_lexer()
            if not self.expression_parser.parse_single_expression(False):
                builder.error(EXPRESSION_EXPECTED)


__all__ = ["FunctionParsing"]
