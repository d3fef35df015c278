"""Parser for GitHub Actions `if:` guard expressions.

Only the boolean structure is parsed: `||` binds loosest, `&&` tighter, and
parentheses group. Everything between operators is kept verbatim as an atom
(`github.ref == 'refs/heads/main'`, `!cancelled()`, ...). The parser never
rejects input; unbalanced parentheses or stray operators simply end up inside
atom text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ConditionKind = Literal["atom", "and", "or"]

OR_OPERATOR = "||"
AND_OPERATOR = "&&"


@dataclass(frozen=True)
class ConditionAST:
    kind: ConditionKind
    # Set for atoms only.
    value: str = ""
    # Set for "and"/"or" only; always two or more entries.
    children: tuple["ConditionAST", ...] = ()

    @classmethod
    def atom(cls, value: str) -> "ConditionAST":
        return cls(kind="atom", value=value)

    @classmethod
    def all_of(cls, children: list["ConditionAST"]) -> "ConditionAST":
        return cls(kind="and", children=tuple(children))

    @classmethod
    def any_of(cls, children: list["ConditionAST"]) -> "ConditionAST":
        return cls(kind="or", children=tuple(children))

    @property
    def is_atom(self) -> bool:
        return self.kind == "atom"


def parse_condition(expr: str) -> ConditionAST:
    """Parse guard text into a ConditionAST."""
    expr = strip_outer_parens(expr.strip())

    or_parts = split_top_level(expr, OR_OPERATOR)
    if len(or_parts) > 1:
        return ConditionAST.any_of([parse_condition(p) for p in or_parts])

    and_parts = split_top_level(expr, AND_OPERATOR)
    if len(and_parts) > 1:
        return ConditionAST.all_of([parse_condition(p) for p in and_parts])

    return ConditionAST.atom(expr.strip())


def strip_outer_parens(expr: str) -> str:
    """Remove grouping parentheses that wrap the whole expression.

    "((a || b))" -> "a || b". Call parentheses are left alone: in "always()"
    the first "(" is not at the start, and in "(a) && (b)" the first ")" is not
    the last character.
    """
    while True:
        trimmed = expr.strip()
        if not trimmed.startswith("("):
            break

        close_idx = find_matching_paren(trimmed, 0)
        if close_idx != len(trimmed) - 1:
            break

        inner = trimmed[1:-1].strip()
        if not inner:
            break

        expr = inner
    return expr.strip()


def find_matching_paren(expr: str, open_idx: int) -> int:
    """Index of the ")" closing the "(" at `open_idx`, or -1 if unbalanced."""
    depth = 0
    for i in range(open_idx, len(expr)):
        ch = expr[i]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i
    return -1


def split_top_level(expr: str, operator: str) -> list[str]:
    """Split `expr` on `operator` outside any parentheses.

    Parts are stripped and empty parts are dropped, so "a &&" yields ["a"].
    """
    parts: list[str] = []
    depth = 0
    start = 0
    op_len = len(operator)

    i = 0
    while i < len(expr):
        ch = expr[i]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        elif depth == 0 and expr.startswith(operator, i):
            parts.append(expr[start:i])
            start = i + op_len
            i += op_len
            continue
        i += 1
    parts.append(expr[start:])

    return [p.strip() for p in parts if p.strip()]


def format_condition(ast: ConditionAST) -> str:
    """Print an AST back to guard text.

    Parentheses are added only where the parser needs them: an OR group inside
    an AND, and a group nested in a group of the same kind. `&&` binds tighter
    than `||`, so an AND group inside an OR is printed bare.
    """
    if ast.is_atom:
        return ast.value

    operator = AND_OPERATOR if ast.kind == "and" else OR_OPERATOR
    rendered: list[str] = []
    for child in ast.children:
        text = format_condition(child)
        bare = child.is_atom or (child.kind == "and" and ast.kind == "or")
        rendered.append(text if bare else f"({text})")
    return f" {operator} ".join(rendered)
