"""Compile a guard expression into a chain of badge nodes.

A chain is a small graph fragment sitting in front of a job or step:

- AND children are lined up one after another; each child's success edges
  lead (labelled "AND") to the next child, and any child failing skips.
- OR children are lined up along their failure edges (dashed "OR"); every
  child's success edges lead to the target, and only the last child failing
  skips.

Callers wire `to_target_edges` into the guarded element and
`skip_source_ids` past it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .badges import format_condition_node, is_always_condition
from .condition import ConditionAST, parse_condition
from .mermaid_fmt import mm_flow_edge


@dataclass(frozen=True)
class TargetEdge:
    from_id: str
    label: Optional[str] = None


@dataclass
class ChainResult:
    node_lines: list[str]
    internal_edges: list[str]
    entry_id: str
    to_target_edges: list[TargetEdge]
    skip_source_ids: list[str]
    # True when no guard in the chain can fail (only plain `always()` atoms).
    is_fully_always: bool

    def target_edge_lines(self, target_id: str, indent: str = "  ") -> list[str]:
        """Edges from the chain's success exits into `target_id`."""
        return [
            mm_flow_edge(edge.from_id, target_id, edge.label, indent=indent)
            for edge in self.to_target_edges
        ]


@dataclass
class PartCounter:
    """Running part number shared by every atom of one compilation."""

    value: int = 0

    def next_id(self, base_id: str) -> str:
        node_id = f"{base_id}_p{self.value}"
        self.value += 1
        return node_id


def compile_chain(base_id: str, cond_text: str, indent: str = "  ") -> ChainResult:
    """Parse `cond_text` and compile it into a chain rooted at `base_id`.

    A lone atom keeps `base_id` as its node id; compound expressions number
    their atoms `<base_id>_p0`, `<base_id>_p1`, ...
    """
    ast = parse_condition(cond_text.strip())

    if ast.is_atom:
        return _compile_atom(base_id, ast.value, indent)

    return compile_ast(base_id, ast, indent, PartCounter())


def compile_ast(
    base_id: str, ast: ConditionAST, indent: str, counter: PartCounter
) -> ChainResult:
    if ast.is_atom:
        return _compile_atom(counter.next_id(base_id), ast.value, indent)

    children = [compile_ast(base_id, child, indent, counter) for child in ast.children]

    if ast.kind == "and":
        return merge_and_chains(children, indent)
    return merge_or_chains(children, indent)


def _compile_atom(node_id: str, cond_text: str, indent: str) -> ChainResult:
    always = is_always_condition(cond_text)
    return ChainResult(
        node_lines=[format_condition_node(node_id, cond_text, indent)],
        internal_edges=[],
        entry_id=node_id,
        to_target_edges=[TargetEdge(node_id, None if always else "Yes")],
        skip_source_ids=[] if always else [node_id],
        is_fully_always=always,
    )


def merge_and_chains(children: list[ChainResult], indent: str) -> ChainResult:
    """Connect children in series: every one must pass."""
    node_lines = [line for c in children for line in c.node_lines]
    internal_edges = [line for c in children for line in c.internal_edges]

    for current, following in zip(children, children[1:]):
        for edge in current.to_target_edges:
            internal_edges.append(
                mm_flow_edge(edge.from_id, following.entry_id, "AND", indent=indent)
            )

    skip_source_ids = [sid for c in children for sid in c.skip_source_ids]

    return ChainResult(
        node_lines=node_lines,
        internal_edges=internal_edges,
        entry_id=children[0].entry_id,
        to_target_edges=list(children[-1].to_target_edges),
        skip_source_ids=skip_source_ids,
        is_fully_always=not skip_source_ids,
    )


def merge_or_chains(children: list[ChainResult], indent: str) -> ChainResult:
    """Connect children as fallbacks: the first one to pass wins."""
    node_lines = [line for c in children for line in c.node_lines]
    internal_edges = [line for c in children for line in c.internal_edges]

    for current, following in zip(children, children[1:]):
        for skip_id in current.skip_source_ids:
            internal_edges.append(
                mm_flow_edge(skip_id, following.entry_id, "OR", "-.->", indent=indent)
            )

    return ChainResult(
        node_lines=node_lines,
        internal_edges=internal_edges,
        entry_id=children[0].entry_id,
        to_target_edges=[edge for c in children for edge in c.to_target_edges],
        skip_source_ids=list(children[-1].skip_source_ids),
        is_fully_always=all(c.is_fully_always for c in children),
    )
