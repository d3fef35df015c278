import pytest

from gha_mermaid.badges import (
    CONDITION_STYLES,
    classify,
    condition_class_defs,
    format_condition_node,
    is_always_condition,
    parse_negation,
)


def test_parse_negation():
    assert parse_negation("!failure()") == (True, "failure()")
    assert parse_negation("  !  failure() ") == (True, "failure()")
    assert parse_negation("failure()") == (False, "failure()")


@pytest.mark.parametrize("guard", ["always()", "success()", "failure()", "cancelled()"])
def test_recognized_guards(guard):
    style, negated = classify(guard)
    assert style is CONDITION_STYLES[guard]
    assert negated is False

    style, negated = classify(f"!{guard}")
    assert style is CONDITION_STYLES[guard]
    assert negated is True


def test_lookup_is_case_sensitive_and_exact():
    assert classify("Failure()") == (None, False)
    assert classify("failure() ") == (CONDITION_STYLES["failure()"], False)
    assert classify("failure ()") == (None, False)


def test_custom_guard_ignores_negation():
    style, _ = classify("!github.event.pull_request.draft")
    assert style is None


def test_is_always_condition():
    assert is_always_condition("always()")
    assert is_always_condition("  always() ")
    assert not is_always_condition("!always()")
    assert not is_always_condition("success()")


def test_format_recognized_node():
    assert (
        format_condition_node("c", "success()")
        == '  c(["✅ Success Only"]):::condSuccess'
    )


def test_format_negated_node_uses_outline_class():
    assert (
        format_condition_node("c", "!cancelled()", indent="    ")
        == '    c(["⛔ NOT Cancelled"]):::condCancelledNeg'
    )


def test_format_custom_node_is_escaped_diamond():
    assert (
        format_condition_node("c", 'github.ref == "x"')
        == '  c{"🔧 github.ref == #quot;x#quot;"}:::condCustom'
    )
    assert (
        format_condition_node("c", "!github.event.pull_request.draft")
        == '  c{"🔧 !github.event.pull_request.draft"}:::condCustom'
    )


def test_class_defs_cover_every_badge_class():
    lines = condition_class_defs()
    assert len(lines) == 9
    assert lines[0] == "  classDef condAlways fill:#4A90D9,stroke:#2E6EB5,color:#fff"
    assert (
        "  classDef condFailureNeg fill:#fff,stroke:#BD2130,color:#DC3545,"
        "stroke-dasharray:5 5,stroke-width:2px"
    ) in lines
    assert lines[-1] == "  classDef condCustom fill:#6C757D,stroke:#545B62,color:#fff"
