from __future__ import annotations

import re
from typing import Any, Optional, Literal
from dataclasses import dataclass, field

from .mermaid_fmt import sanitize_id
from .model_view import as_guard, as_str_list

Severity = Literal["error", "warning"]


@dataclass(frozen=True)
class ValidationIssue:
    """Structured validation issue for callers that want more than strings."""

    severity: Severity
    code: str
    message: str
    path: str = ""
    hint: Optional[str] = None


@dataclass(frozen=True)
class ValidateConfig:
    """Validation configuration.

    The converter itself accepts anything with a non-empty `jobs` mapping;
    these checks are a stricter layer on top, used by the CLI.
    """

    # Rule controls
    ignore: set[str] = field(default_factory=set)
    escalate: set[str] = field(default_factory=set)


def _unquoted(text: str) -> str:
    """Blank out '...' string literals so their contents are not scanned."""
    out: list[str] = []
    in_string = False
    for ch in text:
        if ch == "'":
            in_string = not in_string
            out.append(ch)
        else:
            out.append(" " if in_string else ch)
    return "".join(out)


def _paren_balance_ok(text: str) -> bool:
    depth = 0
    for ch in _unquoted(text):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


# An operator at either end of the text or a group, or two operators in a row.
_EMPTY_OPERAND_RE = re.compile(
    r"^\s*(?:&&|\|\|)|(?:&&|\|\|)\s*$|\(\s*(?:&&|\|\|)|(?:&&|\|\|)\s*\)|(?:&&|\|\|)\s*(?:&&|\|\|)"
)


def _has_empty_operand(text: str) -> bool:
    """True for guard text like "a &&" or "a && || b" that leaves an operand empty."""
    return _EMPTY_OPERAND_RE.search(_unquoted(text)) is not None


def validate_workflow_issues(
    data: Any, cfg: Optional[ValidateConfig] = None
) -> list[ValidationIssue]:
    """Return structured validation issues for a deserialized workflow document.

    The CLI splits these by severity after applying `--escalate`.
    """

    cfg = cfg or ValidateConfig()
    issues: list[ValidationIssue] = []

    def emit(
        severity: Severity,
        code: str,
        message: str,
        path: str = "",
        hint: Optional[str] = None,
    ) -> None:
        if code in cfg.ignore:
            return
        final_severity: Severity = (
            "error" if (severity == "warning" and code in cfg.escalate) else severity
        )
        issues.append(
            ValidationIssue(
                severity=final_severity,
                code=code,
                message=message,
                path=path,
                hint=hint,
            )
        )

    def check_guard(raw: Any, path: str, owner: str) -> None:
        text = as_guard(raw)
        if text is None:
            return
        if not _paren_balance_ok(text):
            emit(
                "warning",
                "W_CONDITION_UNBALANCED_PARENS",
                f"{owner} condition {text!r} has unbalanced parentheses; "
                "it will be drawn as a single custom badge",
                path=path,
            )
        elif _has_empty_operand(text):
            emit(
                "warning",
                "W_CONDITION_EMPTY_OPERAND",
                f"{owner} condition {text!r} has an operator with a missing operand",
                path=path,
            )

    if not isinstance(data, dict):
        emit("error", "E_WORKFLOW_NOT_MAPPING", "workflow must be a YAML mapping")
        return issues

    jobs = data.get("jobs")
    if not isinstance(jobs, dict) or not jobs:
        emit(
            "error",
            "E_JOBS_MISSING",
            "workflow has no jobs",
            path="/jobs",
            hint="Add a `jobs:` mapping with at least one job",
        )
        return issues

    job_names = {str(name) for name in jobs}
    seen_ids: dict[str, str] = {}

    for name, job in jobs.items():
        job_name = str(name)
        job_path = f"/jobs/{job_name}"

        node_id = sanitize_id(job_name)
        if node_id in seen_ids:
            emit(
                "warning",
                "W_JOB_ID_COLLISION",
                f"jobs {seen_ids[node_id]!r} and {job_name!r} both map to node id "
                f"{node_id!r}; their nodes will be merged in the diagram",
                path=job_path,
                hint="Rename one of the jobs",
            )
        else:
            seen_ids[node_id] = job_name

        if not isinstance(job, dict):
            emit(
                "warning",
                "W_JOB_NOT_MAPPING",
                f"job {job_name!r} is not a mapping; it will be drawn without steps",
                path=job_path,
            )
            continue

        for dep in as_str_list(job.get("needs")):
            if dep not in job_names:
                emit(
                    "warning",
                    "W_NEEDS_UNKNOWN_JOB",
                    f"job {job_name!r} needs unknown job {dep!r}",
                    path=f"{job_path}/needs",
                )

        check_guard(job.get("if"), f"{job_path}/if", f"job {job_name!r}")

        steps = job.get("steps") or []
        if not isinstance(steps, list):
            emit(
                "warning",
                "W_STEPS_NOT_LIST",
                f"job {job_name!r} steps must be a list; ignoring",
                path=f"{job_path}/steps",
            )
            continue

        for step_i, step in enumerate(steps):
            step_path = f"{job_path}/steps/{step_i}"
            if not isinstance(step, dict):
                emit(
                    "warning",
                    "W_STEP_NOT_MAPPING",
                    f"job {job_name!r} contains a non-mapping step; "
                    "it will be drawn as an unnamed step",
                    path=step_path,
                )
                continue
            check_guard(step.get("if"), f"{step_path}/if", f"job {job_name!r} step {step_i}")

    return issues

