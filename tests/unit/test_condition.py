import pytest

from gha_mermaid.condition import (
    ConditionAST,
    find_matching_paren,
    format_condition,
    parse_condition,
    split_top_level,
    strip_outer_parens,
)

atom = ConditionAST.atom


def test_single_atom_is_trimmed():
    assert parse_condition("  success()  ") == atom("success()")


def test_or_binds_looser_than_and():
    ast = parse_condition("a || b && c")
    assert ast == ConditionAST.any_of([atom("a"), ConditionAST.all_of([atom("b"), atom("c")])])


def test_parentheses_group_tighter_than_operators():
    ast = parse_condition("(a || b) && c")
    assert ast == ConditionAST.all_of([ConditionAST.any_of([atom("a"), atom("b")]), atom("c")])


def test_flat_chains_have_all_children():
    ast = parse_condition("a && b && c")
    assert ast.kind == "and"
    assert [c.value for c in ast.children] == ["a", "b", "c"]


def test_nested_outer_parens_are_stripped():
    assert parse_condition("((a || b))") == ConditionAST.any_of([atom("a"), atom("b")])
    assert parse_condition("((success()))") == atom("success()")


def test_function_call_parens_are_kept():
    assert parse_condition("always()") == atom("always()")
    assert parse_condition("(a) && (b)") == ConditionAST.all_of([atom("a"), atom("b")])


def test_operators_inside_call_arguments_do_not_split():
    ast = parse_condition("contains(fromJSON('[1 || 2]'), x) && y")
    assert ast.kind == "and"
    assert ast.children[0] == atom("contains(fromJSON('[1 || 2]'), x)")


def test_negation_stays_in_atom_text():
    assert parse_condition("!cancelled() && a").children[0] == atom("!cancelled()")


@pytest.mark.parametrize(
    "text, expected",
    [
        ("(a || b", "(a || b"),
        ("a && ", "a &&"),
        ("|| a", "|| a"),
        ("()", "()"),
        ("a)) || ((b", "a)) || ((b"),
    ],
)
def test_malformed_input_degrades_to_atom(text, expected):
    assert parse_condition(text) == atom(expected)


def test_stray_operator_between_operands_is_dropped():
    assert parse_condition("a && && b") == ConditionAST.all_of([atom("a"), atom("b")])


def test_strip_outer_parens():
    assert strip_outer_parens(" ((a)) ") == "a"
    assert strip_outer_parens("(a) || (b)") == "(a) || (b)"
    assert strip_outer_parens("( )") == "( )"


def test_find_matching_paren():
    assert find_matching_paren("(a(b))", 0) == 5
    assert find_matching_paren("(a(b))", 2) == 4
    assert find_matching_paren("(a", 0) == -1


def test_split_top_level_ignores_nested_operators():
    assert split_top_level("a && (b && c)", "&&") == ["a", "(b && c)"]
    assert split_top_level("a", "&&") == ["a"]
    assert split_top_level("a&&b", "&&") == ["a", "b"]


@pytest.mark.parametrize(
    "text",
    [
        "success()",
        "a || b && c",
        "(a || b) && c",
        "((a || b) || c) && !d",
        "a && (b || (c && d)) && e",
        "(failure() || cancelled()) && github.ref == 'refs/heads/main'",
        "github.event_name == 'push' && contains(github.ref, 'refs/tags')",
        "(a || b",
    ],
)
def test_parse_is_stable_under_canonical_reprint(text):
    ast = parse_condition(text)
    assert parse_condition(format_condition(ast)) == ast


def test_format_condition_parenthesizes_only_where_needed():
    assert format_condition(parse_condition("(a || b) && c")) == "(a || b) && c"
    assert format_condition(parse_condition("a || (b && c)")) == "a || b && c"
    assert format_condition(parse_condition("a && (b && c)")) == "a && (b && c)"
    assert format_condition(parse_condition("(a || b) || c")) == "(a || b) || c"


@pytest.mark.parametrize(
    "text",
    [
        "b||f() &&(ab",
        "x || (y && (z",
        "(a || b) && (c",
    ],
)
def test_reprint_is_stable_for_unbalanced_atoms(text):
    ast = parse_condition(text)
    assert parse_condition(format_condition(ast)) == ast
