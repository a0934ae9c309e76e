import pytest
from hypothesis import given
from hypothesis import strategies as st

from conftest import ParseFn
from pysyntax.pysyntax_constants import ElementType
from pysyntax.pysyntax_parser import PythonParser
from pysyntax.pysyntax_tree import SyntaxNode

E = ElementType
REF = E.REFERENCE_EXPRESSION
INT = E.INTEGER_LITERAL_EXPRESSION


def kinds(node: SyntaxNode) -> list[ElementType]:
    return [n.kind for n in node.nodes]


def messages(tree: SyntaxNode) -> list[str]:
    return [e.message for e in tree.iter_errors()]


def expression_of(tree: SyntaxNode) -> SyntaxNode:
    statement = tree.nodes[0]
    assert statement.kind is E.EXPRESSION_STATEMENT
    return statement.nodes[0]


@pytest.mark.parametrize(  # type: ignore[misc]
    "source, kind, children",
    [
        ("a or b and not c", E.BINARY_EXPRESSION, [REF, E.BINARY_EXPRESSION]),
        ("not c", E.PREFIX_EXPRESSION, [REF]),
        ("a + b * c", E.BINARY_EXPRESSION, [REF, E.BINARY_EXPRESSION]),
        ("a - b - c", E.BINARY_EXPRESSION, [E.BINARY_EXPRESSION, REF]),
        ("a < b < c", E.BINARY_EXPRESSION, [E.BINARY_EXPRESSION, REF]),
        ("a * b + c", E.BINARY_EXPRESSION, [E.BINARY_EXPRESSION, REF]),
        ("a + b < c", E.BINARY_EXPRESSION, [E.BINARY_EXPRESSION, REF]),
        ("a and b or c", E.BINARY_EXPRESSION, [E.BINARY_EXPRESSION, REF]),
        ("not a or b", E.BINARY_EXPRESSION, [E.PREFIX_EXPRESSION, REF]),
        ("not a == b", E.PREFIX_EXPRESSION, [E.BINARY_EXPRESSION]),
        ("not not a", E.PREFIX_EXPRESSION, [E.PREFIX_EXPRESSION]),
        ("a ** -b", E.BINARY_EXPRESSION, [REF, E.PREFIX_EXPRESSION]),
        ("~x", E.PREFIX_EXPRESSION, [REF]),
        ("a | b ^ c & d << 1", E.BINARY_EXPRESSION, [REF, E.BINARY_EXPRESSION]),
        ("a // b % c", E.BINARY_EXPRESSION, [E.BINARY_EXPRESSION, REF]),
        ("a not in b", E.BINARY_EXPRESSION, [REF, REF]),
        ("a is not b", E.BINARY_EXPRESSION, [REF, REF]),
        ("a <> b", E.BINARY_EXPRESSION, [REF, REF]),
        ("x if c else y", E.CONDITIONAL_EXPRESSION, [REF, REF, REF]),
        ("lambda x, y=1: x + y", E.LAMBDA_EXPRESSION, [E.PARAMETER_LIST, E.BINARY_EXPRESSION]),
        ("lambda: 0", E.LAMBDA_EXPRESSION, [E.PARAMETER_LIST, INT]),
        ("a.b.c", REF, [REF]),
        ("a.b(c)[d]", E.SUBSCRIPTION_EXPRESSION, [E.CALL_EXPRESSION, REF]),
        ("f(a, b=1, *args, **kw)", E.CALL_EXPRESSION, [REF, E.ARGUMENT_LIST]),
        ("x[1]", E.SUBSCRIPTION_EXPRESSION, [REF, INT]),
        ("x[1, 2]", E.SUBSCRIPTION_EXPRESSION, [REF, E.TUPLE_EXPRESSION]),
        ("x[1,]", E.SUBSCRIPTION_EXPRESSION, [REF, E.TUPLE_EXPRESSION]),
        ("x[1:2, ::3]", E.SLICE_EXPRESSION, [REF, E.SLICE_ITEM, E.SLICE_ITEM]),
        ("x[:]", E.SLICE_EXPRESSION, [REF, E.SLICE_ITEM]),
        ("()", E.TUPLE_EXPRESSION, []),
        ("(a,)", E.PARENTHESIZED_EXPRESSION, [E.TUPLE_EXPRESSION]),
        ("(a)", E.PARENTHESIZED_EXPRESSION, [REF]),
        ("(x for x in y)", E.GENERATOR_EXPRESSION, [REF, E.TARGET_EXPRESSION, REF]),
        ("[]", E.LIST_LITERAL_EXPRESSION, []),
        ("[1, 2, 3,]", E.LIST_LITERAL_EXPRESSION, [INT, INT, INT]),
        ("[x for x in y if x]", E.LIST_COMP_EXPRESSION, [REF, E.TARGET_EXPRESSION, REF, REF]),
        ("{}", E.DICT_LITERAL_EXPRESSION, []),
        ("{1: 2, 3: 4}", E.DICT_LITERAL_EXPRESSION, [E.KEY_VALUE_EXPRESSION] * 2),
        ("{1, 2}", E.SET_LITERAL_EXPRESSION, [INT, INT]),
        ("{k: v for k, v in items}", E.DICT_COMP_EXPRESSION, [E.KEY_VALUE_EXPRESSION, E.TUPLE_EXPRESSION, REF]),
        ("{x for x in y}", E.SET_COMP_EXPRESSION, [REF, E.TARGET_EXPRESSION, REF]),
        ("`x`", E.REPR_EXPRESSION, [REF]),
        ("'a' 'b'", E.STRING_LITERAL_EXPRESSION, []),
        ("1.5", E.FLOAT_LITERAL_EXPRESSION, []),
        ("2j", E.IMAGINARY_LITERAL_EXPRESSION, []),
        ("None", REF, []),
    ],
)
def test_expression_shapes(
    parse: ParseFn, source: str, kind: ElementType, children: list[ElementType]
) -> None:
    tree = parse(source + "\n")
    expr = expression_of(tree)
    assert expr.kind is kind
    assert kinds(expr) == children
    assert not tree.has_errors


def test_call_arguments(parse: ParseFn) -> None:
    call = expression_of(parse("f(a, b=1, *args, **kw)\n"))
    arguments = call.nodes[1]
    assert kinds(arguments) == [
        REF,
        E.KEYWORD_ARGUMENT_EXPRESSION,
        E.STAR_ARGUMENT_EXPRESSION,
        E.STAR_ARGUMENT_EXPRESSION,
    ]
    assert arguments.text == "(a, b=1, *args, **kw)"


def test_bare_generator_argument(parse: ParseFn) -> None:
    call = expression_of(parse("sum(x for x in y)\n"))
    assert kinds(call.nodes[1]) == [E.GENERATOR_EXPRESSION]


def test_string_concatenation_is_one_node(parse: ParseFn) -> None:
    expr = expression_of(parse("'a' 'b'\n"))
    assert expr.text == "'a' 'b'"


def test_power_binds_tighter_than_unary_minus(parse: ParseFn) -> None:
    expr = expression_of(parse("-a ** b\n"))
    assert expr.kind is E.PREFIX_EXPRESSION
    assert kinds(expr) == [E.BINARY_EXPRESSION]


@pytest.mark.parametrize(  # type: ignore[misc]
    "source, kind, children",
    [
        ("None", E.NONE_LITERAL_EXPRESSION, []),
        ("True", E.BOOL_LITERAL_EXPRESSION, []),
        ("False", E.BOOL_LITERAL_EXPRESSION, []),
        ("__debug__", E.BOOL_LITERAL_EXPRESSION, []),
        ("[*a, b]", E.LIST_LITERAL_EXPRESSION, [E.STAR_EXPRESSION, REF]),
        ("yield from x", E.YIELD_EXPRESSION, [REF]),
    ],
)
def test_python3_expressions(
    parse: ParseFn, source: str, kind: ElementType, children: list[ElementType]
) -> None:
    tree = parse(source + "\n", level="3.3")
    expr = expression_of(tree)
    assert expr.kind is kind
    assert kinds(expr) == children
    assert not tree.has_errors


def test_yield_from_needs_3_3(parse: ParseFn) -> None:
    tree = parse("yield from x\n", level="3.2")
    assert expression_of(tree).kind is E.YIELD_EXPRESSION
    assert "End of statement expected" in messages(tree)


def test_old_inequality_rejected_in_python3(parse: ParseFn) -> None:
    tree = parse("a <> b\n", level="3.0")
    assert expression_of(tree).kind is REF
    assert "End of statement expected" in messages(tree)


def test_backquotes_rejected_in_python3(parse: ParseFn) -> None:
    tree = parse("`x`\n", level="3.0")
    assert "Statement expected, found TICK" in messages(tree)


def test_star_expression_needs_python3(parse: ParseFn) -> None:
    tree = parse("*a\n")
    assert "Statement expected, found MULT" in messages(tree)


@pytest.mark.parametrize(  # type: ignore[misc]
    "source, message",
    [
        ("a +\n", "Expression expected"),
        ("not\n", "Expression expected"),
        ("x if c\n", "'else' expected"),
        ("f(a b)\n", "',' or ')' expected"),
        ("f(a\n", ") expected"),
        ("x[]\n", "Expression expected"),
        ("x[1\n", "']' expected"),
        ("{1: 2\n", "'}' expected"),
        ("{1: 2, 3}\n", "':' expected"),
        ("a not b\n", "'in' expected"),
        ("lambda x 1\n", "':' expected"),
        ("a.\n", "Identifier expected"),
        ("`x\n", "'`' expected"),
        ("[x for x y]\n", "'in' expected"),
    ],
)
def test_expression_errors(parse: ParseFn, source: str, message: str) -> None:
    tree = parse(source)
    assert message in messages(tree)
    assert tree.text == source


def arithmetic() -> st.SearchStrategy[str]:
    atoms = st.sampled_from(["a", "b", "1", "2.5", "'s'", "f(x)", "y[0]"])
    return st.recursive(
        atoms,
        lambda inner: st.one_of(
            st.tuples(inner, st.sampled_from(["+", "-", "*", "/", "%", "**", "<", "and", "or"]), inner).map(
                lambda t: f"{t[0]} {t[1]} {t[2]}"
            ),
            inner.map(lambda e: f"({e})"),
            inner.map(lambda e: f"-{e}"),
            inner.map(lambda e: f"[{e}]"),
            st.tuples(inner, inner, inner).map(lambda t: f"({t[0]} if {t[1]} else {t[2]})"),
        ),
        max_leaves=12,
    )


@given(arithmetic())  # type: ignore[misc]
def test_generated_expressions_parse_cleanly(source: str) -> None:
    tree = PythonParser("2.7").parse(f"x = {source}\n")
    assert not tree.has_errors
    assert tree.nodes[0].kind is E.ASSIGNMENT_STATEMENT
    assert tree.nodes[0].nodes[1].text == source
