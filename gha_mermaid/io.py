from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import yaml

from .errors import WorkflowParseError

STDIN_PATH = "-"


def parse_yaml(raw: str) -> Any:
    """Deserialize workflow YAML; raises WorkflowParseError on syntax errors."""
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise WorkflowParseError(_yaml_error_message(e)) from e


def _yaml_error_message(error: yaml.YAMLError) -> str:
    # MarkedYAMLError carries "problem" plus a line/column mark; keep it to one line.
    problem = getattr(error, "problem", None)
    mark = getattr(error, "problem_mark", None)
    if problem and mark is not None:
        return f"{problem} (line {mark.line + 1}, column {mark.column + 1})"
    return " ".join(str(error).split())


def read_workflow_text(path: Path | str) -> str:
    """Read workflow text from a file, or from stdin when `path` is "-".

    Raises WorkflowParseError when the bytes are not valid UTF-8.
    """
    try:
        if str(path) == STDIN_PATH:
            return sys.stdin.read()

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(str(path))
        if path.is_dir():
            raise IsADirectoryError(str(path))
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise WorkflowParseError(
            f"workflow is not valid UTF-8: {e.reason} at byte {e.start}"
        ) from e
