from __future__ import annotations

import re

from .constants import LABEL_MAX_LEN

_UNSAFE_ID_CHARS_RE = re.compile(r"[^A-Za-z0-9_]")


def mermaid_block(code: str) -> str:
    """Wrap Mermaid source in a Markdown Mermaid code fence."""
    return "```mermaid\n" + code.rstrip() + "\n```\n"


def sanitize_id(name: str) -> str:
    """Turn an arbitrary name into a Mermaid-safe node id.

    Every character outside [A-Za-z0-9_] becomes "_". This is not injective:
    "build-app" and "build.app" both map to "build_app".
    """
    return _UNSAFE_ID_CHARS_RE.sub("_", str(name))


def escape_label(text: str) -> str:
    """Escape text for use inside a quoted Mermaid label, then cut it to size."""
    escaped = str(text).replace('"', "#quot;").replace("\n", "<br/>")
    return escaped[:LABEL_MAX_LEN]


def mm_flow_edge(
    src: str,
    dst: str,
    label: str | None = None,
    arrow: str = "-->",
    *,
    indent: str = "  ",
) -> str:
    if label:
        return f"{indent}{src} {arrow}|{label}| {dst}"
    return f"{indent}{src} {arrow} {dst}"


def mm_flow_node(node_id: str, label: str, *, indent: str = "    ") -> str:
    """Rectangle node; `label` must already be escaped."""
    return f'{indent}{node_id}["{label}"]'


def mm_subgraph_open(subgraph_id: str, title: str, *, indent: str = "  ") -> str:
    """Open a subgraph; `title` must already be escaped."""
    return f'{indent}subgraph {subgraph_id} ["{title}"]'


def mm_subgraph_close(*, indent: str = "  ") -> str:
    return f"{indent}end"


def mm_class_def(class_name: str, **props: str) -> str:
    """Format a `classDef` line; property order follows the keyword order."""
    body = ",".join(f"{k.replace('_', '-')}:{v}" for k, v in props.items())
    return f"  classDef {class_name} {body}"
