"""
Token and node kinds for the pysyntax parser.

Defines the two closed enumerations every other module agrees on, together with
the text maps the lexer uses to recognize keywords and operators and the token
sets the statement and expression parsers dispatch on.

Exports:
    - TokenType: lexical categories produced by the lexer (and by keyword promotion).
    - ElementType: syntax-tree node categories committed by the parsers.
    - keyword_hashmap: hard keyword text -> TokenType.
    - operator_hashmap: operator/delimiter text -> TokenType.
    - Token sets: TRIVIA, END_OF_STATEMENT, AUG_ASSIGN_OPERATIONS, ...
"""

from enum import Enum, auto


class TokenType(Enum):
    """Lexical category of a token.

    The words ``as``, ``with``, ``print``, ``None``, ``True``, ``False``,
    ``__debug__``, ``nonlocal`` and ``exec`` are always lexed as IDENTIFIER;
    their keyword kinds only appear through contextual promotion.
    """

    # Names and literals
    IDENTIFIER = auto()
    INTEGER_LITERAL = auto()
    FLOAT_LITERAL = auto()
    IMAGINARY_LITERAL = auto()
    STRING_LITERAL = auto()

    # Hard keywords
    AND_KEYWORD = auto()
    ASSERT_KEYWORD = auto()
    BREAK_KEYWORD = auto()
    CLASS_KEYWORD = auto()
    CONTINUE_KEYWORD = auto()
    DEF_KEYWORD = auto()
    DEL_KEYWORD = auto()
    ELIF_KEYWORD = auto()
    ELSE_KEYWORD = auto()
    EXCEPT_KEYWORD = auto()
    FINALLY_KEYWORD = auto()
    FOR_KEYWORD = auto()
    FROM_KEYWORD = auto()
    GLOBAL_KEYWORD = auto()
    IF_KEYWORD = auto()
    IMPORT_KEYWORD = auto()
    IN_KEYWORD = auto()
    IS_KEYWORD = auto()
    LAMBDA_KEYWORD = auto()
    NOT_KEYWORD = auto()
    OR_KEYWORD = auto()
    PASS_KEYWORD = auto()
    RAISE_KEYWORD = auto()
    RETURN_KEYWORD = auto()
    TRY_KEYWORD = auto()
    WHILE_KEYWORD = auto()
    YIELD_KEYWORD = auto()

    # Soft keywords (promoted from IDENTIFIER)
    AS_KEYWORD = auto()
    WITH_KEYWORD = auto()
    PRINT_KEYWORD = auto()
    NONE_KEYWORD = auto()
    TRUE_KEYWORD = auto()
    FALSE_KEYWORD = auto()
    DEBUG_KEYWORD = auto()
    NONLOCAL_KEYWORD = auto()
    EXEC_KEYWORD = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    MULT = auto()
    EXP = auto()
    DIV = auto()
    FLOORDIV = auto()
    PERC = auto()
    LTLT = auto()
    GTGT = auto()
    AND = auto()
    OR = auto()
    XOR = auto()
    TILDE = auto()
    LT = auto()
    GT = auto()
    LE = auto()
    GE = auto()
    EQEQ = auto()
    NE = auto()
    NE_OLD = auto()
    AT = auto()
    RARROW = auto()
    EQ = auto()

    # Augmented assignment
    PLUSEQ = auto()
    MINUSEQ = auto()
    MULTEQ = auto()
    DIVEQ = auto()
    FLOORDIVEQ = auto()
    PERCEQ = auto()
    ANDEQ = auto()
    OREQ = auto()
    XOREQ = auto()
    LTLTEQ = auto()
    GTGTEQ = auto()
    EXPEQ = auto()
    ATEQ = auto()

    # Delimiters
    LPAR = auto()
    RPAR = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    LBRACE = auto()
    RBRACE = auto()
    COMMA = auto()
    COLON = auto()
    DOT = auto()
    SEMICOLON = auto()
    TICK = auto()

    # Structure
    STATEMENT_BREAK = auto()
    INDENT = auto()
    DEDENT = auto()
    INCONSISTENT_DEDENT = auto()

    # Trivia
    SPACE = auto()
    LINE_BREAK = auto()
    END_OF_LINE_COMMENT = auto()

    BAD_CHARACTER = auto()

    def __str__(self) -> str:
        return self.name


class ElementType(Enum):
    """Kind of a committed syntax-tree node."""

    FILE = auto()

    # Statements
    EXPRESSION_STATEMENT = auto()
    ASSIGNMENT_STATEMENT = auto()
    AUG_ASSIGNMENT_STATEMENT = auto()
    PRINT_STATEMENT = auto()
    PRINT_TARGET = auto()
    ASSERT_STATEMENT = auto()
    BREAK_STATEMENT = auto()
    CONTINUE_STATEMENT = auto()
    DEL_STATEMENT = auto()
    EXEC_STATEMENT = auto()
    GLOBAL_STATEMENT = auto()
    NONLOCAL_STATEMENT = auto()
    IMPORT_STATEMENT = auto()
    FROM_IMPORT_STATEMENT = auto()
    IMPORT_ELEMENT = auto()
    STAR_IMPORT_ELEMENT = auto()
    PASS_STATEMENT = auto()
    RETURN_STATEMENT = auto()
    RAISE_STATEMENT = auto()
    IF_STATEMENT = auto()
    IF_PART_IF = auto()
    IF_PART_ELIF = auto()
    ELSE_PART = auto()
    FOR_STATEMENT = auto()
    FOR_PART = auto()
    WHILE_STATEMENT = auto()
    WHILE_PART = auto()
    TRY_EXCEPT_STATEMENT = auto()
    TRY_PART = auto()
    EXCEPT_PART = auto()
    FINALLY_PART = auto()
    WITH_STATEMENT = auto()
    WITH_ITEM = auto()
    CLASS_DECLARATION = auto()
    STATEMENT_LIST = auto()

    # Functions
    FUNCTION_DECLARATION = auto()
    PARAMETER_LIST = auto()
    NAMED_PARAMETER = auto()
    TUPLE_PARAMETER = auto()
    SINGLE_STAR_PARAMETER = auto()
    ANNOTATION = auto()
    DECORATOR_LIST = auto()
    DECORATOR_CALL = auto()

    # Expressions
    REFERENCE_EXPRESSION = auto()
    TARGET_EXPRESSION = auto()
    INTEGER_LITERAL_EXPRESSION = auto()
    FLOAT_LITERAL_EXPRESSION = auto()
    IMAGINARY_LITERAL_EXPRESSION = auto()
    STRING_LITERAL_EXPRESSION = auto()
    NONE_LITERAL_EXPRESSION = auto()
    BOOL_LITERAL_EXPRESSION = auto()
    PARENTHESIZED_EXPRESSION = auto()
    TUPLE_EXPRESSION = auto()
    LIST_LITERAL_EXPRESSION = auto()
    DICT_LITERAL_EXPRESSION = auto()
    SET_LITERAL_EXPRESSION = auto()
    KEY_VALUE_EXPRESSION = auto()
    LIST_COMP_EXPRESSION = auto()
    GENERATOR_EXPRESSION = auto()
    DICT_COMP_EXPRESSION = auto()
    SET_COMP_EXPRESSION = auto()
    BINARY_EXPRESSION = auto()
    PREFIX_EXPRESSION = auto()
    CONDITIONAL_EXPRESSION = auto()
    LAMBDA_EXPRESSION = auto()
    CALL_EXPRESSION = auto()
    ARGUMENT_LIST = auto()
    KEYWORD_ARGUMENT_EXPRESSION = auto()
    STAR_ARGUMENT_EXPRESSION = auto()
    STAR_EXPRESSION = auto()
    SUBSCRIPTION_EXPRESSION = auto()
    SLICE_EXPRESSION = auto()
    SLICE_ITEM = auto()
    YIELD_EXPRESSION = auto()
    REPR_EXPRESSION = auto()

    def __str__(self) -> str:
        return self.name


keyword_hashmap: dict[str, TokenType] = {
    "and": TokenType.AND_KEYWORD,
    "assert": TokenType.ASSERT_KEYWORD,
    "break": TokenType.BREAK_KEYWORD,
    "class": TokenType.CLASS_KEYWORD,
    "continue": TokenType.CONTINUE_KEYWORD,
    "def": TokenType.DEF_KEYWORD,
    "del": TokenType.DEL_KEYWORD,
    "elif": TokenType.ELIF_KEYWORD,
    "else": TokenType.ELSE_KEYWORD,
    "except": TokenType.EXCEPT_KEYWORD,
    "finally": TokenType.FINALLY_KEYWORD,
    "for": TokenType.FOR_KEYWORD,
    "from": TokenType.FROM_KEYWORD,
    "global": TokenType.GLOBAL_KEYWORD,
    "if": TokenType.IF_KEYWORD,
    "import": TokenType.IMPORT_KEYWORD,
    "in": TokenType.IN_KEYWORD,
    "is": TokenType.IS_KEYWORD,
    "lambda": TokenType.LAMBDA_KEYWORD,
    "not": TokenType.NOT_KEYWORD,
    "or": TokenType.OR_KEYWORD,
    "pass": TokenType.PASS_KEYWORD,
    "raise": TokenType.RAISE_KEYWORD,
    "return": TokenType.RETURN_KEYWORD,
    "try": TokenType.TRY_KEYWORD,
    "while": TokenType.WHILE_KEYWORD,
    "yield": TokenType.YIELD_KEYWORD,
}

operator_hashmap: dict[str, TokenType] = {
    # 3 chars
    "**=": TokenType.EXPEQ,
    "//=": TokenType.FLOORDIVEQ,
    "<<=": TokenType.LTLTEQ,
    ">>=": TokenType.GTGTEQ,
    # 2 chars
    "**": TokenType.EXP,
    "//": TokenType.FLOORDIV,
    "<<": TokenType.LTLT,
    ">>": TokenType.GTGT,
    "<=": TokenType.LE,
    ">=": TokenType.GE,
    "==": TokenType.EQEQ,
    "!=": TokenType.NE,
    "<>": TokenType.NE_OLD,
    "->": TokenType.RARROW,
    "+=": TokenType.PLUSEQ,
    "-=": TokenType.MINUSEQ,
    "*=": TokenType.MULTEQ,
    "/=": TokenType.DIVEQ,
    "%=": TokenType.PERCEQ,
    "&=": TokenType.ANDEQ,
    "|=": TokenType.OREQ,
    "^=": TokenType.XOREQ,
    "@=": TokenType.ATEQ,
    # 1 char
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.MULT,
    "/": TokenType.DIV,
    "%": TokenType.PERC,
    "&": TokenType.AND,
    "|": TokenType.OR,
    "^": TokenType.XOR,
    "~": TokenType.TILDE,
    "<": TokenType.LT,
    ">": TokenType.GT,
    "@": TokenType.AT,
    "=": TokenType.EQ,
    "(": TokenType.LPAR,
    ")": TokenType.RPAR,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    ",": TokenType.COMMA,
    ":": TokenType.COLON,
    ".": TokenType.DOT,
    ";": TokenType.SEMICOLON,
    "`": TokenType.TICK,
}

MAX_OPERATOR_LENGTH = max(len(op) for op in operator_hashmap)

# TOKEN SETS

TRIVIA: frozenset[TokenType] = frozenset(
    {TokenType.SPACE, TokenType.LINE_BREAK, TokenType.END_OF_LINE_COMMENT}
)

END_OF_STATEMENT: frozenset[TokenType] = frozenset(
    {TokenType.STATEMENT_BREAK, TokenType.SEMICOLON}
)

AUG_ASSIGN_OPERATIONS: frozenset[TokenType] = frozenset(
    {
        TokenType.PLUSEQ,
        TokenType.MINUSEQ,
        TokenType.MULTEQ,
        TokenType.DIVEQ,
        TokenType.FLOORDIVEQ,
        TokenType.PERCEQ,
        TokenType.ANDEQ,
        TokenType.OREQ,
        TokenType.XOREQ,
        TokenType.LTLTEQ,
        TokenType.GTGTEQ,
        TokenType.EXPEQ,
        TokenType.ATEQ,
    }
)

COMPARISON_OPERATIONS: frozenset[TokenType] = frozenset(
    {
        TokenType.LT,
        TokenType.GT,
        TokenType.LE,
        TokenType.GE,
        TokenType.EQEQ,
        TokenType.NE,
        TokenType.NE_OLD,
        TokenType.IN_KEYWORD,
        TokenType.IS_KEYWORD,
        TokenType.NOT_KEYWORD,
    }
)

SHIFT_OPERATIONS: frozenset[TokenType] = frozenset({TokenType.LTLT, TokenType.GTGT})

ADDITIVE_OPERATIONS: frozenset[TokenType] = frozenset(
    {TokenType.PLUS, TokenType.MINUS}
)

MULTIPLICATIVE_OPERATIONS: frozenset[TokenType] = frozenset(
    {
        TokenType.MULT,
        TokenType.DIV,
        TokenType.FLOORDIV,
        TokenType.PERC,
        TokenType.AT,
    }
)

UNARY_OPERATIONS: frozenset[TokenType] = frozenset(
    {TokenType.PLUS, TokenType.MINUS, TokenType.TILDE}
)

NUMERIC_LITERALS: dict[TokenType, ElementType] = {
    TokenType.INTEGER_LITERAL: ElementType.INTEGER_LITERAL_EXPRESSION,
    TokenType.FLOAT_LITERAL: ElementType.FLOAT_LITERAL_EXPRESSION,
    TokenType.IMAGINARY_LITERAL: ElementType.IMAGINARY_LITERAL_EXPRESSION,
}

__all__ = [
    "ADDITIVE_OPERATIONS",
    "AUG_ASSIGN_OPERATIONS",
    "COMPARISON_OPERATIONS",
    "END_OF_STATEMENT",
    "ElementType",
    "MAX_OPERATOR_LENGTH",
    "MULTIPLICATIVE_OPERATIONS",
    "NUMERIC_LITERALS",
    "SHIFT_OPERATIONS",
    "TRIVIA",
    "TokenType",
    "UNARY_OPERATIONS",
    "keyword_hashmap",
    "operator_hashmap",
]
