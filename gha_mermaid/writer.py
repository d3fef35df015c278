from __future__ import annotations

from pathlib import Path

from .mermaid_fmt import mermaid_block


def render_md(title: str, diagram_code: str) -> str:
    """A titled Markdown document containing a Mermaid diagram block."""
    return f"# {title}\n\n{mermaid_block(diagram_code)}"


def write_md(path: Path, title: str, diagram_code: str) -> None:
    """Write a titled Markdown file containing a Mermaid diagram block."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_md(title, diagram_code), encoding="utf-8")


def write_mermaid(path: Path, diagram_code: str) -> None:
    """Write raw Mermaid source (e.g. a .mmd file)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(diagram_code.rstrip() + "\n", encoding="utf-8")
