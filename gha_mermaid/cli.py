from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from .config import RenderConfig
from .constants import DIRECTION_DEFAULT, DIRECTIONS, OUTPUT_FORMAT_DEFAULT, OUTPUT_FORMATS
from .convert import convert_workflow, error_message
from .errors import WorkflowError
from .io import STDIN_PATH, parse_yaml, read_workflow_text
from .validate import ValidateConfig, validate_workflow_issues
from .writer import render_md, write_md, write_mermaid


def _diagram_title(data: Any, workflow_arg: str) -> str:
    """Workflow `name:` if set, else the file stem."""
    if isinstance(data, dict):
        name = data.get("name")
        if isinstance(name, str) and name.strip():
            return name.strip()
    if workflow_arg == STDIN_PATH:
        return "Workflow"
    return Path(workflow_arg).stem


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gha-mermaid",
        description="Generate a Mermaid flowchart from a GitHub Actions workflow YAML file.",
    )
    parser.add_argument(
        "workflow",
        type=str,
        help=f"Path to the workflow YAML file ({STDIN_PATH!r} reads stdin)",
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Output file (default: write to stdout)",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=OUTPUT_FORMATS,
        default=OUTPUT_FORMAT_DEFAULT,
        help="mermaid = raw flowchart source; markdown = titled page with a mermaid block",
    )
    parser.add_argument(
        "--direction",
        type=str,
        choices=DIRECTIONS,
        default=DIRECTION_DEFAULT,
        help="Flowchart direction",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help=(
            "Fail on validation warnings (e.g., needs on unknown jobs, unbalanced "
            "parentheses in conditions). Errors always fail."
        ),
    )
    parser.add_argument(
        "--escalate",
        type=str,
        default="",
        help="Comma-separated warning codes to treat as errors (e.g. W_NEEDS_UNKNOWN_JOB)",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entrypoint."""
    args = _build_parser().parse_args(argv)

    try:
        raw = read_workflow_text(args.workflow)
    except OSError as e:
        print(f"error: cannot read workflow: {e}", file=sys.stderr)
        raise SystemExit(1)
    except WorkflowError as e:
        print(f"error: {error_message(e)}", file=sys.stderr)
        raise SystemExit(1)

    try:
        data = parse_yaml(raw)
    except WorkflowError as e:
        print(f"error: {error_message(e)}", file=sys.stderr)
        raise SystemExit(1)

    cfg = RenderConfig(direction=args.direction)
    result = convert_workflow(data, cfg)
    if not result.ok:
        print(f"error: {result.error}", file=sys.stderr)
        raise SystemExit(1)

    escalate = {c.strip() for c in args.escalate.split(",") if c.strip()}
    issues = validate_workflow_issues(data, ValidateConfig(escalate=escalate))
    errors = [iss for iss in issues if iss.severity == "error"]
    warnings = [iss for iss in issues if iss.severity == "warning"]

    for warning in warnings:
        print(f"warning: [{warning.code}] {warning.message}", file=sys.stderr)

    if errors or (args.strict and warnings):
        for error in errors:
            print(f"error: [{error.code}] {error.message}", file=sys.stderr)
        raise SystemExit(2)

    title = _diagram_title(data, args.workflow)
    out: Optional[Path] = args.out

    if out is None:
        if args.format == "markdown":
            sys.stdout.write(render_md(title, result.mermaid_code))
        else:
            sys.stdout.write(result.mermaid_code + "\n")
        return

    if args.format == "markdown":
        write_md(out, title, result.mermaid_code)
    else:
        write_mermaid(out, result.mermaid_code)


if __name__ == "__main__":
    main()
