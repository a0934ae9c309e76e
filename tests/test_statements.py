import pytest

from conftest import ParseFn
from pysyntax.pysyntax_constants import ElementType
from pysyntax.pysyntax_context import FutureFeature, LanguageLevel, ParsingContext, ParsingScope
from pysyntax.pysyntax_lexer import tokenize
from pysyntax.pysyntax_reclassifier import Phase
from pysyntax.pysyntax_tree import SyntaxNode, TreeBuilder

E = ElementType


def kinds(node: SyntaxNode) -> list[ElementType]:
    return [n.kind for n in node.nodes]


def messages(tree: SyntaxNode) -> list[str]:
    return [e.message for e in tree.iter_errors()]


def only_statement(tree: SyntaxNode) -> SyntaxNode:
    assert len(tree.nodes) == 1, tree.nodes
    return tree.nodes[0]


# STATEMENT SHAPES


@pytest.mark.parametrize(  # type: ignore[misc]
    "source, kind, children",
    [
        ("print >>f, x, y\n", E.PRINT_STATEMENT, [E.PRINT_TARGET, E.REFERENCE_EXPRESSION, E.REFERENCE_EXPRESSION]),
        ("print x,\n", E.PRINT_STATEMENT, [E.REFERENCE_EXPRESSION]),
        ("print\n", E.PRINT_STATEMENT, []),
        ("a = b = c\n", E.ASSIGNMENT_STATEMENT, [E.TARGET_EXPRESSION, E.TARGET_EXPRESSION, E.REFERENCE_EXPRESSION]),
        ("a = b = c = 1\n", E.ASSIGNMENT_STATEMENT, [E.TARGET_EXPRESSION] * 3 + [E.INTEGER_LITERAL_EXPRESSION]),
        ("a, b = b, a\n", E.ASSIGNMENT_STATEMENT, [E.TUPLE_EXPRESSION, E.TUPLE_EXPRESSION]),
        ("a = yield x\n", E.ASSIGNMENT_STATEMENT, [E.TARGET_EXPRESSION, E.YIELD_EXPRESSION]),
        ("a.b = 1\n", E.ASSIGNMENT_STATEMENT, [E.TARGET_EXPRESSION, E.INTEGER_LITERAL_EXPRESSION]),
        ("x += 1\n", E.AUG_ASSIGNMENT_STATEMENT, [E.REFERENCE_EXPRESSION, E.INTEGER_LITERAL_EXPRESSION]),
        ("f(x)\n", E.EXPRESSION_STATEMENT, [E.CALL_EXPRESSION]),
        ("yield\n", E.EXPRESSION_STATEMENT, [E.YIELD_EXPRESSION]),
        ("del a, b[0]\n", E.DEL_STATEMENT, [E.REFERENCE_EXPRESSION, E.SUBSCRIPTION_EXPRESSION]),
        ("global a, b\n", E.GLOBAL_STATEMENT, [E.TARGET_EXPRESSION, E.TARGET_EXPRESSION]),
        ("assert x, 'msg'\n", E.ASSERT_STATEMENT, [E.REFERENCE_EXPRESSION, E.STRING_LITERAL_EXPRESSION]),
        ("raise E, 'm', tb\n", E.RAISE_STATEMENT, [E.REFERENCE_EXPRESSION, E.STRING_LITERAL_EXPRESSION, E.REFERENCE_EXPRESSION]),
        ("raise\n", E.RAISE_STATEMENT, []),
        ("exec code in g, l\n", E.EXEC_STATEMENT, [E.REFERENCE_EXPRESSION] * 3),
        ("return a, b\n", E.RETURN_STATEMENT, [E.TUPLE_EXPRESSION]),
        ("return\n", E.RETURN_STATEMENT, []),
        ("pass\n", E.PASS_STATEMENT, []),
        ("break\n", E.BREAK_STATEMENT, []),
        ("continue\n", E.CONTINUE_STATEMENT, []),
        ("import os.path as p, sys\n", E.IMPORT_STATEMENT, [E.IMPORT_ELEMENT, E.IMPORT_ELEMENT]),
        ("from os import *\n", E.FROM_IMPORT_STATEMENT, [E.REFERENCE_EXPRESSION, E.STAR_IMPORT_ELEMENT]),
        ("from . import x, y as z\n", E.FROM_IMPORT_STATEMENT, [E.IMPORT_ELEMENT, E.IMPORT_ELEMENT]),
        ("from os import (a, b,)\n", E.FROM_IMPORT_STATEMENT, [E.REFERENCE_EXPRESSION, E.IMPORT_ELEMENT, E.IMPORT_ELEMENT]),
        ("from ..pkg.mod import name\n", E.FROM_IMPORT_STATEMENT, [E.REFERENCE_EXPRESSION, E.IMPORT_ELEMENT]),
    ],
)
def test_simple_statement_shapes(
    parse: ParseFn, source: str, kind: ElementType, children: list[ElementType]
) -> None:
    tree = parse(source)
    statement = only_statement(tree)
    assert statement.kind is kind
    assert kinds(statement) == children
    assert not tree.has_errors
    assert tree.text == source


def test_import_alias_and_dotted_module(parse: ParseFn) -> None:
    statement = only_statement(parse("import os.path as p\n"))
    element = statement.nodes[0]
    assert kinds(element) == [E.REFERENCE_EXPRESSION, E.TARGET_EXPRESSION]
    module = element.nodes[0]
    assert module.text == "os.path"
    assert kinds(module) == [E.REFERENCE_EXPRESSION]
    assert element.nodes[1].text == "p"


def test_from_import_alias(parse: ParseFn) -> None:
    statement = only_statement(parse("from . import x, y as z\n"))
    second = statement.nodes[1]
    assert kinds(second) == [E.REFERENCE_EXPRESSION, E.TARGET_EXPRESSION]
    assert [n.text for n in second.nodes] == ["y", "z"]


def test_semicolon_separated_statements(parse: ParseFn) -> None:
    tree = parse("x = 1; y = 2\n")
    assert kinds(tree) == [E.ASSIGNMENT_STATEMENT, E.ASSIGNMENT_STATEMENT]
    assert not tree.has_errors


# COMPOUND STATEMENTS


def test_if_elif_else(parse: ParseFn) -> None:
    source = "if a:\n    pass\nelif b:\n    pass\nelif c:\n    pass\nelse:\n    pass\n"
    tree = parse(source)
    statement = only_statement(tree)
    assert statement.kind is E.IF_STATEMENT
    assert kinds(statement) == [E.IF_PART_IF, E.IF_PART_ELIF, E.IF_PART_ELIF, E.ELSE_PART]
    assert kinds(statement.nodes[0]) == [E.REFERENCE_EXPRESSION, E.STATEMENT_LIST]
    assert not tree.has_errors


def test_single_line_suite(parse: ParseFn) -> None:
    tree = parse("if x: a; b\n")
    body = tree.nodes[0].nodes[0].nodes[1]
    assert body.kind is E.STATEMENT_LIST
    assert kinds(body) == [E.EXPRESSION_STATEMENT, E.EXPRESSION_STATEMENT]
    assert not tree.has_errors


def test_single_line_suite_trailing_semicolon(parse: ParseFn) -> None:
    tree = parse("if x: a;\ny\n")
    assert kinds(tree) == [E.IF_STATEMENT, E.EXPRESSION_STATEMENT]
    assert not tree.has_errors


def test_while_else(parse: ParseFn) -> None:
    tree = parse("while x:\n    x -= 1\nelse:\n    done()\n")
    statement = only_statement(tree)
    assert kinds(statement) == [E.WHILE_PART, E.ELSE_PART]
    assert not tree.has_errors


def test_for_with_tuple_target(parse: ParseFn) -> None:
    tree = parse("for i, j in items:\n    pass\nelse:\n    pass\n")
    statement = only_statement(tree)
    assert statement.kind is E.FOR_STATEMENT
    assert kinds(statement) == [E.FOR_PART, E.ELSE_PART]
    for_part = statement.nodes[0]
    assert kinds(for_part) == [E.TUPLE_EXPRESSION, E.REFERENCE_EXPRESSION, E.STATEMENT_LIST]
    assert kinds(for_part.nodes[0]) == [E.TARGET_EXPRESSION, E.TARGET_EXPRESSION]
    assert not tree.has_errors


def test_try_except_else_finally(parse: ParseFn) -> None:
    source = (
        "try:\n    a\nexcept ValueError as e:\n    b\nexcept:\n    c\n"
        "else:\n    d\nfinally:\n    f\n"
    )
    tree = parse(source)
    statement = only_statement(tree)
    assert statement.kind is E.TRY_EXCEPT_STATEMENT
    assert kinds(statement) == [
        E.TRY_PART,
        E.EXCEPT_PART,
        E.EXCEPT_PART,
        E.ELSE_PART,
        E.FINALLY_PART,
    ]
    assert kinds(statement.nodes[1]) == [
        E.REFERENCE_EXPRESSION,
        E.TARGET_EXPRESSION,
        E.STATEMENT_LIST,
    ]
    assert not tree.has_errors


def test_try_finally_without_except(parse: ParseFn) -> None:
    tree = parse("try:\n    a\nfinally:\n    b\n")
    assert kinds(only_statement(tree)) == [E.TRY_PART, E.FINALLY_PART]
    assert not tree.has_errors


def test_try_without_handlers_keeps_statement(parse: ParseFn) -> None:
    tree = parse("try:\n    pass\n")
    statement = only_statement(tree)
    assert statement.kind is E.TRY_EXCEPT_STATEMENT
    assert kinds(statement) == [E.TRY_PART]
    assert messages(tree) == ["'except' or 'finally' expected"]


@pytest.mark.parametrize("source", ["except E, e:\n", "except E as e:\n"])  # type: ignore[misc]
def test_old_and_new_except_targets_at_2_5(parse: ParseFn, source: str) -> None:
    tree = parse("try:\n    a\n" + source + "    b\n", level="2.5")
    except_part = only_statement(tree).nodes[1]
    assert kinds(except_part) == [
        E.REFERENCE_EXPRESSION,
        E.TARGET_EXPRESSION,
        E.STATEMENT_LIST,
    ]
    assert not tree.has_errors


def test_with_statement_items(parse: ParseFn) -> None:
    tree = parse("with open(a) as f, lock:\n    pass\n")
    statement = only_statement(tree)
    assert statement.kind is E.WITH_STATEMENT
    assert kinds(statement) == [E.WITH_ITEM, E.WITH_ITEM, E.STATEMENT_LIST]
    assert kinds(statement.nodes[0]) == [E.CALL_EXPRESSION, E.TARGET_EXPRESSION]
    assert not tree.has_errors


def test_class_with_method(parse: ParseFn) -> None:
    tree = parse("class A(B):\n    def f(self):\n        return 1\n")
    statement = only_statement(tree)
    assert statement.kind is E.CLASS_DECLARATION
    assert kinds(statement) == [E.ARGUMENT_LIST, E.STATEMENT_LIST]
    assert kinds(statement.nodes[1]) == [E.FUNCTION_DECLARATION]
    assert not tree.has_errors


def test_class_without_bases_gets_empty_argument_list(parse: ParseFn) -> None:
    statement = only_statement(parse("class A:\n    pass\n"))
    bases = statement.nodes[0]
    assert bases.kind is E.ARGUMENT_LIST
    assert bases.text == ""


def test_nested_blocks_dedent_back_to_top(parse: ParseFn) -> None:
    source = "if a:\n    if b:\n        c\n    d\ne\n"
    tree = parse(source)
    assert kinds(tree) == [E.IF_STATEMENT, E.EXPRESSION_STATEMENT]
    assert not tree.has_errors
    assert tree.text == source


def test_block_comment_stays_with_suite(parse: ParseFn) -> None:
    tree = parse("if a:\n    b\n    # note\nc\n")
    body = tree.nodes[0].nodes[0].nodes[1]
    assert body.kind is E.STATEMENT_LIST
    assert body.text.endswith("# note")


# LANGUAGE LEVELS AND FUTURE IMPORTS


def test_with_is_a_name_at_2_5(parse: ParseFn) -> None:
    tree = parse("with f as g: pass\n", level="2.5")
    assert tree.nodes[0].kind is E.EXPRESSION_STATEMENT
    assert tree.has_errors


def test_future_with_statement_enables_with(parse: ParseFn) -> None:
    source = "from __future__ import with_statement\nwith f as g: pass\n"
    tree = parse(source, level="2.5")
    assert kinds(tree) == [E.FROM_IMPORT_STATEMENT, E.WITH_STATEMENT]
    assert not tree.has_errors


def test_future_import_only_affects_later_statements(parse: ParseFn) -> None:
    source = "with f as g: pass\nfrom __future__ import with_statement\n"
    tree = parse(source, level="2.5")
    assert tree.nodes[0].kind is E.EXPRESSION_STATEMENT
    assert tree.has_errors


def test_future_print_function_via_import(parse: ParseFn) -> None:
    source = "from __future__ import print_function\nprint(x, end='')\n"
    tree = parse(source)
    assert kinds(tree) == [E.FROM_IMPORT_STATEMENT, E.EXPRESSION_STATEMENT]
    assert kinds(tree.nodes[1]) == [E.CALL_EXPRESSION]
    assert not tree.has_errors


def test_future_print_function_from_parser_option(parse: ParseFn) -> None:
    tree = parse("print(x)\n", future="print_function")
    assert tree.nodes[0].kind is E.EXPRESSION_STATEMENT
    assert kinds(tree.nodes[0]) == [E.CALL_EXPRESSION]


def test_print_statement_with_parentheses_at_2_7(parse: ParseFn) -> None:
    tree = parse("print(x)\n")
    assert tree.nodes[0].kind is E.PRINT_STATEMENT
    assert kinds(tree.nodes[0]) == [E.PARENTHESIZED_EXPRESSION]


@pytest.mark.parametrize(  # type: ignore[misc]
    "source, kind",
    [
        ("nonlocal x, y\n", E.NONLOCAL_STATEMENT),
        ("raise E from cause\n", E.RAISE_STATEMENT),
        ("exec(code)\n", E.EXPRESSION_STATEMENT),
        ("print(x, end='')\n", E.EXPRESSION_STATEMENT),
        ("a, *rest = items\n", E.ASSIGNMENT_STATEMENT),
    ],
)
def test_python3_statements(parse: ParseFn, source: str, kind: ElementType) -> None:
    tree = parse(source, level="3.3")
    assert only_statement(tree).kind is kind
    assert not tree.has_errors


def test_nonlocal_is_a_name_before_python3(parse: ParseFn) -> None:
    tree = parse("nonlocal x\n")
    assert tree.nodes[0].kind is E.EXPRESSION_STATEMENT
    assert "End of statement expected" in messages(tree)


def run_statements(source: str, level: LanguageLevel) -> tuple[ParsingContext, SyntaxNode]:
    builder = TreeBuilder(tokenize(source), source)
    context = ParsingContext(builder, level)
    builder.set_token_type_remapper(context.statement_parser.reclassifier)
    root = builder.mark()
    while not builder.eof():
        context.statement_parser.parse_statement(ParsingScope())
    root.done(E.FILE)
    return context, builder.build_tree()


def test_future_import_records_flags_and_resets_state() -> None:
    context, _ = run_statements(
        "from __future__ import with_statement, division\n", LanguageLevel.PYTHON25
    )
    assert context.future_flags == {FutureFeature.WITH_STATEMENT}
    assert context.statement_parser.future_import_phase is Phase.NONE
    assert context.statement_parser.expect_as_keyword is False


def test_future_names_outside_future_import_are_ignored() -> None:
    context, _ = run_statements("from os import with_statement\n", LanguageLevel.PYTHON25)
    assert context.future_flags == set()


def test_broken_from_import_still_resets_phase() -> None:
    context, _ = run_statements("from __future__ imp\nwith = 1\n", LanguageLevel.PYTHON25)
    assert context.statement_parser.future_import_phase is Phase.NONE
    assert context.future_flags == set()


@pytest.mark.parametrize(  # type: ignore[misc]
    "source, message",
    [
        ("from __future__ import with_statement\nwith f as\nas = 1\n", "Colon expected"),
        ("try:\n    a\nexcept E as :\n    b\nas = 1\n", "Expression expected"),
        ("import a.\nas = 1\n", "Identifier expected"),
    ],
)
def test_as_is_a_name_again_after_broken_statement(source: str, message: str) -> None:
    context, tree = run_statements(source, LanguageLevel.PYTHON25)
    assert context.statement_parser.expect_as_keyword is False
    assert message in messages(tree)
    (assignment,) = tree.find_all(E.ASSIGNMENT_STATEMENT)
    assert assignment.text.strip() == "as = 1"
    assert kinds(assignment) == [E.TARGET_EXPRESSION, E.INTEGER_LITERAL_EXPRESSION]


# ERROR RECOVERY


@pytest.mark.parametrize(  # type: ignore[misc]
    "source, message",
    [
        ("if x\n    pass\n", "Colon expected"),
        ("x = \n", "Expression expected"),
        ("from x imp y\n", "'import' expected"),
        ("for x y: pass\n", "'in' expected"),
        ("  x\n", "Unexpected indent"),
        ("if x:\n    a\n  b\n", "Unindent does not match any outer indentation level"),
        ("if x:\npass\n", "Indent expected"),
        ("@dec\nx = 1\n", "'def' or 'class' expected"),
        ("x y\n", "End of statement expected"),
        ("$\n", "Statement expected, found BAD_CHARACTER"),
        ("else:\n    pass\n", "Statement expected, found ELSE_KEYWORD"),
        ("x = yield = 1\n", "Cannot assign to 'yield' expression"),
        ("class :\n    pass\n", "Identifier expected"),
        ("global\n", "Identifier expected"),
        ("assert\n", "Expression expected"),
        ("while :\n    pass\n", "Expression expected"),
        ("import\n", "Identifier expected"),
        ("from os import (a, b\n", ") expected"),
    ],
)
def test_error_messages(parse: ParseFn, source: str, message: str) -> None:
    tree = parse(source)
    assert message in messages(tree)
    assert tree.text == source


def test_missing_block_at_end_of_input(parse: ParseFn) -> None:
    tree = parse("if x:")
    assert messages(tree) == ["Indent expected"]
    assert tree.nodes[0].kind is E.IF_STATEMENT


def test_parsing_resumes_after_bad_statement(parse: ParseFn) -> None:
    tree = parse("x = (\ny = 2\nz = 3\n")
    assert tree.has_errors
    assert tree.nodes[-1].kind is E.ASSIGNMENT_STATEMENT
    assert tree.nodes[-1].text.startswith("z = 3")
