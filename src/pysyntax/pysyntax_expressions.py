"""
Expression parsing.

Precedence from the loosest construct down to atoms:

    tuple -> lambda / conditional -> or -> and -> not -> comparison
          -> | -> ^ -> & -> shift -> additive -> multiplicative
          -> unary -> power -> trailers (.name, call, subscription) -> atom

Every `parse_*` method returns False without consuming anything when no
expression starts at the current token. Once something has been consumed the
method returns True and records errors for the missing pieces instead.

The `or` through multiplicative levels share one precedence-climbing loop
driven by `BINARY_LEVELS`, so a parenthesized operand costs a few stack frames
rather than one per level. Binary operators are left-associative: the running
left operand's marker is committed and then preceded by a fresh marker for the
next operator.
"""

from pysyntax.pysyntax_constants import (
    ADDITIVE_OPERATIONS,
    COMPARISON_OPERATIONS,
    END_OF_STATEMENT,
    MULTIPLICATIVE_OPERATIONS,
    NUMERIC_LITERALS,
    SHIFT_OPERATIONS,
    UNARY_OPERATIONS,
    ElementType,
    TokenType,
)
from pysyntax.pysyntax_context import EXPRESSION_EXPECTED, IDENTIFIER_EXPECTED, Parsing
from pysyntax.pysyntax_tree import Marker

TRAILER_STARTS = (TokenType.DOT, TokenType.LPAR, TokenType.LBRACKET)

# Binding levels, loosest first. NOT_LEVEL has no binary operator: it marks
# where a prefix `not` may start.
OR_LEVEL = 0
AND_LEVEL = 1
NOT_LEVEL = 2
COMPARISON_LEVEL = 3
BITWISE_OR_LEVEL = 4

BINARY_LEVELS: dict[TokenType, int] = {
    TokenType.OR_KEYWORD: OR_LEVEL,
    TokenType.AND_KEYWORD: AND_LEVEL,
    **dict.fromkeys(COMPARISON_OPERATIONS, COMPARISON_LEVEL),
    TokenType.OR: BITWISE_OR_LEVEL,
    TokenType.XOR: 5,
    TokenType.AND: 6,
    **dict.fromkeys(SHIFT_OPERATIONS, 7),
    **dict.fromkeys(ADDITIVE_OPERATIONS, 8),
    **dict.fromkeys(MULTIPLICATIVE_OPERATIONS, 9),
}

KEYWORD_LITERALS: dict[TokenType, ElementType] = {
    TokenType.NONE_KEYWORD: ElementType.NONE_LITERAL_EXPRESSION,
    TokenType.TRUE_KEYWORD: ElementType.BOOL_LITERAL_EXPRESSION,
    TokenType.FALSE_KEYWORD: ElementType.BOOL_LITERAL_EXPRESSION,
    TokenType.DEBUG_KEYWORD: ElementType.BOOL_LITERAL_EXPRESSION,
}

CLOSING_MESSAGES: dict[TokenType, str] = {
    TokenType.RPAR: ") expected",
    TokenType.RBRACKET: "']' expected",
    TokenType.RBRACE: "'}' expected",
    TokenType.TICK: "'`' expected",
}


class ExpressionParsing(Parsing):
    """Expression sub-parser. Reached through `context.expression_parser`."""

    # ENTRY POINTS

    def parse_single_expression(self, is_target: bool) -> bool:
        return self.parse_test_expression(False, is_target)

    def parse_expression_optional(self) -> bool:
        return self.parse_tuple_expression(False, False, False)

    def parse_expression(self, stop_on_in: bool = False, is_target: bool = False) -> bool:
        """Parse a (possibly tuple) expression, recording "Expression expected" if there is none."""
        if not self.parse_tuple_expression(stop_on_in, is_target, False):
            self.builder.error(EXPRESSION_EXPECTED)
            return False
        return True

    def parse_yield_or_tuple_expression(self, is_target: bool) -> bool:
        if self.builder.token_type() is TokenType.YIELD_KEYWORD:
            self.parse_yield_expression()
            return True
        return self.parse_tuple_expression(False, is_target, False)

    # TUPLES, LAMBDA, CONDITIONAL

    def parse_tuple_expression(
        self, stop_on_in: bool, is_target: bool, old_test: bool
    ) -> bool:
        builder = self.builder
        expr = builder.mark()
        if not self._parse_tuple_item(stop_on_in, is_target, old_test):
            expr.drop()
            return False
        if builder.token_type() is TokenType.COMMA:
            while builder.token_type() is TokenType.COMMA:
                builder.advance_lexer()
                if not self._parse_tuple_item(stop_on_in, is_target, old_test):
                    break
            expr.done(ElementType.TUPLE_EXPRESSION)
        else:
            expr.drop()
        return True

    def _parse_tuple_item(self, stop_on_in: bool, is_target: bool, old_test: bool) -> bool:
        if self.builder.token_type() is TokenType.MULT and self.context.language_level.is_py3k:
            return self.parse_star_expression(is_target)
        if old_test:
            return self.parse_old_test_expression()
        return self.parse_test_expression(stop_on_in, is_target)

    def parse_star_expression(self, is_target: bool) -> bool:
        """`*expr` inside a tuple, list or assignment target (Python 3)."""
        builder = self.builder
        expr = builder.mark()
        builder.advance_lexer()
        if not self.parse_binary_expression(BITWISE_OR_LEVEL, False, is_target):
            builder.error(EXPRESSION_EXPECTED)
        expr.done(ElementType.STAR_EXPRESSION)
        return True

    def parse_test_expression(self, stop_on_in: bool, is_target: bool) -> bool:
        builder = self.builder
        if builder.token_type() is TokenType.LAMBDA_KEYWORD:
            return self.parse_lambda_expression(allow_conditional=True)
        condition = builder.mark()
        if not self.parse_binary_expression(OR_LEVEL, stop_on_in, is_target):
            condition.drop()
            return False
        if builder.token_type() is not TokenType.IF_KEYWORD:
            condition.drop()
            return True
        builder.advance_lexer()
        if not self.parse_binary_expression(OR_LEVEL, stop_on_in, False):
            builder.error(EXPRESSION_EXPECTED)
        elif self.check_matches(TokenType.ELSE_KEYWORD, "'else' expected"):
            if not self.parse_test_expression(stop_on_in, False):
                builder.error(EXPRESSION_EXPECTED)
        condition.done(ElementType.CONDITIONAL_EXPRESSION)
        return True

    def parse_old_test_expression(self) -> bool:
        if self.builder.token_type() is TokenType.LAMBDA_KEYWORD:
            return self.parse_lambda_expression(allow_conditional=False)
        return self.parse_binary_expression(OR_LEVEL, False, False)

    def parse_lambda_expression(self, allow_conditional: bool) -> bool:
        builder = self.builder
        expr = builder.mark()
        builder.advance_lexer()
        self.function_parser.parse_lambda_parameter_list()
        self.check_matches(TokenType.COLON, "':' expected")
        if allow_conditional:
            body = self.parse_single_expression(False)
        else:
            body = self.parse_old_test_expression()
        if not body:
            builder.error(EXPRESSION_EXPECTED)
        expr.done(ElementType.LAMBDA_EXPRESSION)
        return True

    # BINARY OPERATORS

    def parse_binary_expression(self, level: int, stop_on_in: bool, is_target: bool) -> bool:
        """Operators binding at `level` or tighter, by precedence climbing over `BINARY_LEVELS`.

        The right operand of an operator is parsed one level tighter, so chains
        of equal precedence stay left-associative. A prefix `not` is accepted
        while `level` is at most `NOT_LEVEL`; comparisons skip `in` when
        `stop_on_in` is set and `<>` from Python 3 on.
        """
        builder = self.builder
        expr = builder.mark()
        if level <= NOT_LEVEL and builder.token_type() is TokenType.NOT_KEYWORD:
            builder.advance_lexer()
            if not self.parse_binary_expression(NOT_LEVEL, stop_on_in, False):
                builder.error(EXPRESSION_EXPECTED)
            expr.done(ElementType.PREFIX_EXPRESSION)
            expr = expr.precede()
        elif not self.parse_unary_expression(is_target):
            expr.drop()
            return False
        while True:
            operator = builder.token_type()
            operator_level = BINARY_LEVELS.get(operator) if operator is not None else None
            if operator_level is None or operator_level < level:
                break
            if operator_level == COMPARISON_LEVEL:
                if stop_on_in and operator is TokenType.IN_KEYWORD:
                    break
                if operator is TokenType.NE_OLD and self.context.language_level.is_py3k:
                    break
            builder.advance_lexer()
            if operator is TokenType.NOT_KEYWORD:
                self.check_matches(TokenType.IN_KEYWORD, "'in' expected")
            elif operator is TokenType.IS_KEYWORD:
                self.match_token(TokenType.NOT_KEYWORD)
            if not self.parse_binary_expression(operator_level + 1, stop_on_in, False):
                builder.error(EXPRESSION_EXPECTED)
            expr.done(ElementType.BINARY_EXPRESSION)
            expr = expr.precede()
        expr.drop()
        return True

    # UNARY AND POWER

    def parse_unary_expression(self, is_target: bool) -> bool:
        builder = self.builder
        if builder.token_type() in UNARY_OPERATIONS:
            expr = builder.mark()
            builder.advance_lexer()
            if not self.parse_unary_expression(False):
                builder.error(EXPRESSION_EXPECTED)
            expr.done(ElementType.PREFIX_EXPRESSION)
            return True
        return self.parse_power_expression(is_target)

    def parse_power_expression(self, is_target: bool) -> bool:
        builder = self.builder
        expr = builder.mark()
        if not self.parse_member_expression(is_target):
            expr.drop()
            return False
        if builder.token_type() is TokenType.EXP:
            builder.advance_lexer()
            if not self.parse_unary_expression(False):
                builder.error(EXPRESSION_EXPECTED)
            expr.done(ElementType.BINARY_EXPRESSION)
        else:
            expr.drop()
        return True

    # TRAILERS

    def parse_member_expression(self, is_target: bool) -> bool:
        """An atom followed by any number of `.name`, `(args)` and `[index]` trailers."""
        builder = self.builder
        expr = builder.mark()
        if not self.parse_primary_expression(is_target):
            expr.drop()
            return False
        while True:
            token = builder.token_type()
            if token is TokenType.DOT:
                builder.advance_lexer()
                self.check_matches(TokenType.IDENTIFIER, IDENTIFIER_EXPECTED)
                if is_target and builder.token_type() not in TRAILER_STARTS:
                    expr.done(ElementType.TARGET_EXPRESSION)
                else:
                    expr.done(ElementType.REFERENCE_EXPRESSION)
            elif token is TokenType.LPAR:
                self.parse_argument_list()
                expr.done(ElementType.CALL_EXPRESSION)
            elif token is TokenType.LBRACKET:
                self._parse_subscription(expr)
            else:
                expr.drop()
                return True
            expr = expr.precede()

    def _parse_subscription(self, expr: Marker) -> None:
        builder = self.builder
        builder.advance_lexer()
        index = builder.mark()
        items = 0
        has_slice = False
        trailing_comma = False
        while builder.token_type() is not TokenType.RBRACKET:
            parsed, is_slice = self._parse_slice_item()
            if not parsed:
                builder.error(EXPRESSION_EXPECTED)
                break
            items += 1
            has_slice = has_slice or is_slice
            trailing_comma = False
            if builder.token_type() is not TokenType.COMMA:
                break
            builder.advance_lexer()
            trailing_comma = True
        if items == 0 and builder.token_type() is TokenType.RBRACKET:
            builder.error(EXPRESSION_EXPECTED)
        if not has_slice and (items > 1 or trailing_comma):
            index.done(ElementType.TUPLE_EXPRESSION)
        else:
            index.drop()
        self.check_matches(TokenType.RBRACKET, CLOSING_MESSAGES[TokenType.RBRACKET])
        expr.done(
            ElementType.SLICE_EXPRESSION if has_slice else ElementType.SUBSCRIPTION_EXPRESSION
        )

    def _parse_slice_item(self) -> tuple[bool, bool]:
        """One subscript: an expression or `[lower]:[upper][:[step]]`.

        Returns (parsed, is_slice).
        """
        builder = self.builder
        item = builder.mark()
        has_lower = self.parse_single_expression(False)
        if builder.token_type() is not TokenType.COLON:
            item.drop()
            return has_lower, False
        builder.advance_lexer()
        if not self._at_slice_bound_end():
            self.parse_single_expression(False)
        if builder.token_type() is TokenType.COLON:
            builder.advance_lexer()
            if not self._at_slice_bound_end():
                self.parse_single_expression(False)
        item.done(ElementType.SLICE_ITEM)
        return True, True

    def _at_slice_bound_end(self) -> bool:
        return self.builder.token_type() in (
            TokenType.COLON,
            TokenType.COMMA,
            TokenType.RBRACKET,
        )

    def parse_argument_list(self) -> None:
        """`( [arg [, arg]* [,]] )` including keyword, star and bare generator arguments."""
        builder = self.builder
        self.assert_current_token(TokenType.LPAR)
        arguments = builder.mark()
        builder.advance_lexer()
        first = True
        while builder.token_type() is not TokenType.RPAR and not builder.eof():
            if not first:
                if not self.check_matches(TokenType.COMMA, "',' or ')' expected"):
                    break
                if builder.token_type() is TokenType.RPAR:
                    break
            first = False
            token = builder.token_type()
            if token is TokenType.IDENTIFIER and builder.lookahead(1) is TokenType.EQ:
                keyword = builder.mark()
                builder.advance_lexer()
                builder.advance_lexer()
                if not self.parse_single_expression(False):
                    builder.error(EXPRESSION_EXPECTED)
                keyword.done(ElementType.KEYWORD_ARGUMENT_EXPRESSION)
            elif token in (TokenType.MULT, TokenType.EXP):
                star = builder.mark()
                builder.advance_lexer()
                if not self.parse_single_expression(False):
                    builder.error(EXPRESSION_EXPECTED)
                star.done(ElementType.STAR_ARGUMENT_EXPRESSION)
            else:
                argument = builder.mark()
                if not self.parse_single_expression(False):
                    argument.drop()
                    builder.error(EXPRESSION_EXPECTED)
                    break
                if builder.token_type() is TokenType.FOR_KEYWORD:
                    self._parse_comprehension(
                        argument, None, ElementType.GENERATOR_EXPRESSION
                    )
                else:
                    argument.drop()
        self.check_matches(TokenType.RPAR, CLOSING_MESSAGES[TokenType.RPAR])
        arguments.done(ElementType.ARGUMENT_LIST)

    # ATOMS

    def parse_primary_expression(self, is_target: bool) -> bool:
        builder = self.builder
        token = builder.token_type()
        if token is TokenType.IDENTIFIER:
            expr = builder.mark()
            next_token = builder.lookahead(1)
            builder.advance_lexer()
            if is_target and next_token not in TRAILER_STARTS:
                expr.done(ElementType.TARGET_EXPRESSION)
            else:
                expr.done(ElementType.REFERENCE_EXPRESSION)
            return True
        if token in NUMERIC_LITERALS:
            expr = builder.mark()
            builder.advance_lexer()
            expr.done(NUMERIC_LITERALS[token])
            return True
        if token is TokenType.STRING_LITERAL:
            expr = builder.mark()
            while builder.token_type() is TokenType.STRING_LITERAL:
                builder.advance_lexer()
            expr.done(ElementType.STRING_LITERAL_EXPRESSION)
            return True
        if token in KEYWORD_LITERALS:
            expr = builder.mark()
            builder.advance_lexer()
            expr.done(KEYWORD_LITERALS[token])
            return True
        if token is TokenType.LPAR:
            self.parse_parenthesized_expression(is_target)
            return True
        if token is TokenType.LBRACKET:
            self.parse_list_literal_expression(is_target)
            return True
        if token is TokenType.LBRACE:
            self.parse_dict_or_set_display()
            return True
        if token is TokenType.TICK and not self.context.language_level.is_py3k:
            self.parse_repr_expression()
            return True
        return False

    def parse_parenthesized_expression(self, is_target: bool) -> None:
        builder = self.builder
        expr = builder.mark()
        builder.advance_lexer()
        if builder.token_type() is TokenType.RPAR:
            builder.advance_lexer()
            expr.done(ElementType.TUPLE_EXPRESSION)
            return
        if not self.parse_yield_or_tuple_expression(is_target):
            builder.error(EXPRESSION_EXPECTED)
        if builder.token_type() is TokenType.FOR_KEYWORD:
            self._parse_comprehension(expr, TokenType.RPAR, ElementType.GENERATOR_EXPRESSION)
            return
        self.check_matches(TokenType.RPAR, CLOSING_MESSAGES[TokenType.RPAR])
        expr.done(ElementType.PARENTHESIZED_EXPRESSION)

    def parse_list_literal_expression(self, is_target: bool) -> None:
        builder = self.builder
        expr = builder.mark()
        builder.advance_lexer()
        if builder.token_type() is TokenType.RBRACKET:
            builder.advance_lexer()
            expr.done(ElementType.LIST_LITERAL_EXPRESSION)
            return
        if not self._parse_tuple_item(False, is_target, False):
            builder.error(EXPRESSION_EXPECTED)
        if builder.token_type() is TokenType.FOR_KEYWORD:
            self._parse_comprehension(expr, TokenType.RBRACKET, ElementType.LIST_COMP_EXPRESSION)
            return
        while builder.token_type() is TokenType.COMMA:
            builder.advance_lexer()
            if builder.token_type() is TokenType.RBRACKET:
                break
            if not self._parse_tuple_item(False, is_target, False):
                builder.error(EXPRESSION_EXPECTED)
                break
        self.check_matches(TokenType.RBRACKET, CLOSING_MESSAGES[TokenType.RBRACKET])
        expr.done(ElementType.LIST_LITERAL_EXPRESSION)

    def parse_dict_or_set_display(self) -> None:
        builder = self.builder
        expr = builder.mark()
        builder.advance_lexer()
        if builder.token_type() is TokenType.RBRACE:
            builder.advance_lexer()
            expr.done(ElementType.DICT_LITERAL_EXPRESSION)
            return

        first = builder.mark()
        if not self.parse_single_expression(False):
            first.drop()
            builder.error(EXPRESSION_EXPECTED)
            self.check_matches(TokenType.RBRACE, CLOSING_MESSAGES[TokenType.RBRACE])
            expr.done(ElementType.DICT_LITERAL_EXPRESSION)
            return

        if builder.token_type() is TokenType.COLON:
            builder.advance_lexer()
            if not self.parse_single_expression(False):
                builder.error(EXPRESSION_EXPECTED)
            first.done(ElementType.KEY_VALUE_EXPRESSION)
            if builder.token_type() is TokenType.FOR_KEYWORD:
                self._parse_comprehension(expr, TokenType.RBRACE, ElementType.DICT_COMP_EXPRESSION)
                return
            while builder.token_type() is TokenType.COMMA:
                builder.advance_lexer()
                if builder.token_type() is TokenType.RBRACE:
                    break
                if not self._parse_key_value():
                    break
            self.check_matches(TokenType.RBRACE, CLOSING_MESSAGES[TokenType.RBRACE])
            expr.done(ElementType.DICT_LITERAL_EXPRESSION)
            return

        first.drop()
        if builder.token_type() is TokenType.FOR_KEYWORD:
            self._parse_comprehension(expr, TokenType.RBRACE, ElementType.SET_COMP_EXPRESSION)
            return
        while builder.token_type() is TokenType.COMMA:
            builder.advance_lexer()
            if builder.token_type() is TokenType.RBRACE:
                break
            if not self.parse_single_expression(False):
                builder.error(EXPRESSION_EXPECTED)
                break
        self.check_matches(TokenType.RBRACE, CLOSING_MESSAGES[TokenType.RBRACE])
        expr.done(ElementType.SET_LITERAL_EXPRESSION)

    def _parse_key_value(self) -> bool:
        builder = self.builder
        pair = builder.mark()
        if not self.parse_single_expression(False):
            pair.drop()
            builder.error(EXPRESSION_EXPECTED)
            return False
        self.check_matches(TokenType.COLON, "':' expected")
        if not self.parse_single_expression(False):
            builder.error(EXPRESSION_EXPECTED)
        pair.done(ElementType.KEY_VALUE_EXPRESSION)
        return True

    def _parse_comprehension(
        self, expr: Marker, end_token: TokenType | None, kind: ElementType
    ) -> None:
        """`for targets in iterable [if cond]* [for ...]*`, closing `expr` as `kind`."""
        builder = self.builder
        while builder.token_type() is TokenType.FOR_KEYWORD:
            builder.advance_lexer()
            self.parse_expression(True, True)
            self.check_matches(TokenType.IN_KEYWORD, "'in' expected")
            if not self.parse_binary_expression(OR_LEVEL, False, False):
                builder.error(EXPRESSION_EXPECTED)
            while builder.token_type() is TokenType.IF_KEYWORD:
                builder.advance_lexer()
                if not self.parse_old_test_expression():
                    builder.error(EXPRESSION_EXPECTED)
        if end_token is not None:
            self.check_matches(end_token, CLOSING_MESSAGES[end_token])
        expr.done(kind)

    def parse_repr_expression(self) -> None:
        """Python 2 backquotes: `` `expr` ``."""
        builder = self.builder
        expr = builder.mark()
        builder.advance_lexer()
        self.parse_expression()
        self.check_matches(TokenType.TICK, CLOSING_MESSAGES[TokenType.TICK])
        expr.done(ElementType.REPR_EXPRESSION)

    def parse_yield_expression(self) -> None:
        """`yield [expr]` or `yield from expr` (Python 3.3)."""
        builder = self.builder
        self.assert_current_token(TokenType.YIELD_KEYWORD)
        expr = builder.mark()
        builder.advance_lexer()
        if (
            builder.token_type() is TokenType.FROM_KEYWORD
            and self.context.language_level.value >= (3, 3)
        ):
            builder.advance_lexer()
            if not self.parse_single_expression(False):
                builder.error(EXPRESSION_EXPECTED)
        elif builder.token_type() not in END_OF_STATEMENT:
            self.parse_tuple_expression(False, False, False)
        expr.done(ElementType.YIELD_EXPRESSION)


__all__ = ["ExpressionParsing"]
