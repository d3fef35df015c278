from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .constants import STEP_LABEL_MAX_LEN, TRIGGER_FILTER_KEYS
from .errors import InvalidWorkflowError, MissingJobsError

Trigger = Any  # str | list[str] | dict[str, Any]


def as_str_list(value: Any) -> list[str]:
    """Normalize a scalar-or-list field (`needs`, `branches`, ...) to a list."""
    if value is None or value == "":
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v is not None]
    return [str(value)]


def as_guard(value: Any) -> Optional[str]:
    """Return `if:` text, or None when the field is absent or blank.

    YAML may hand back a bool or number (`if: false`); it is kept as text.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        text = "true" if value else "false"
    else:
        text = str(value)
    return text if text.strip() else None


def _as_opt_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


@dataclass(frozen=True)
class StepDefinition:
    name: Optional[str] = None
    uses: Optional[str] = None
    run: Optional[str] = None
    if_: Optional[str] = None

    @classmethod
    def from_mapping(cls, raw: Any) -> "StepDefinition":
        if not isinstance(raw, dict):
            return cls()
        return cls(
            name=_as_opt_str(raw.get("name")),
            uses=_as_opt_str(raw.get("uses")),
            run=_as_opt_str(raw.get("run")),
            if_=as_guard(raw.get("if")),
        )


@dataclass(frozen=True)
class JobDefinition:
    name: Optional[str] = None
    runs_on: Any = None
    needs: list[str] = field(default_factory=list)
    if_: Optional[str] = None
    steps: list[StepDefinition] = field(default_factory=list)
    uses: Optional[str] = None

    @classmethod
    def from_mapping(cls, raw: Any) -> "JobDefinition":
        if not isinstance(raw, dict):
            return cls()
        steps_raw = raw.get("steps") or []
        if not isinstance(steps_raw, list):
            steps_raw = []
        return cls(
            name=_as_opt_str(raw.get("name")),
            runs_on=raw.get("runs-on"),
            needs=as_str_list(raw.get("needs")),
            if_=as_guard(raw.get("if")),
            steps=[StepDefinition.from_mapping(s) for s in steps_raw],
            uses=_as_opt_str(raw.get("uses")),
        )


@dataclass(frozen=True)
class WorkflowDefinition:
    # Insertion order of `jobs` drives emission order and the topological walk.
    jobs: dict[str, JobDefinition]
    name: Optional[str] = None
    on: Trigger = None

    @property
    def has_triggers(self) -> bool:
        return self.on is not None and self.on != ""


@dataclass(frozen=True)
class TriggerInfo:
    name: str
    detail: Optional[str] = None


def workflow_from_mapping(data: Any) -> WorkflowDefinition:
    """Build a typed workflow from a deserialized YAML document.

    Raises InvalidWorkflowError when the document is not a mapping and
    MissingJobsError when it has no jobs.
    """
    if not isinstance(data, dict):
        raise InvalidWorkflowError()

    jobs_raw = data.get("jobs")
    if not isinstance(jobs_raw, dict) or not jobs_raw:
        raise MissingJobsError()

    # YAML 1.1 reads a bare `on:` key as boolean True.
    on = data["on"] if "on" in data else data.get(True)

    return WorkflowDefinition(
        jobs={str(k): JobDefinition.from_mapping(v) for k, v in jobs_raw.items()},
        name=_as_opt_str(data.get("name")),
        on=on,
    )


def parse_triggers(on: Trigger) -> list[TriggerInfo]:
    """Flatten the scalar, list and mapping forms of `on:` into trigger infos."""
    if isinstance(on, str):
        return [TriggerInfo(on)]

    if isinstance(on, list):
        return [TriggerInfo(str(name)) for name in on]

    if isinstance(on, dict):
        return [_trigger_from_config(str(name), config) for name, config in on.items()]

    return [TriggerInfo("unknown")]


def _trigger_from_config(name: str, config: Any) -> TriggerInfo:
    if name == "schedule" and isinstance(config, list):
        crons = [
            str(entry["cron"])
            for entry in config
            if isinstance(entry, dict) and entry.get("cron")
        ]
        return TriggerInfo(name, ", ".join(crons) or None)

    if not isinstance(config, dict) or not config:
        return TriggerInfo(name)

    details: list[str] = []
    for key in TRIGGER_FILTER_KEYS:
        values = as_str_list(config.get(key))
        if values:
            details.append(f"{key}: {', '.join(values)}")

    return TriggerInfo(name, ", ".join(details) or None)


def format_runs_on(runs_on: Any) -> str:
    """Runner label(s) as shown next to the job title; "" when absent."""
    if not runs_on:
        return ""
    if isinstance(runs_on, dict):
        # runs-on: {group: ..., labels: [...]}
        parts = as_str_list(runs_on.get("group")) + as_str_list(runs_on.get("labels"))
        return ", ".join(parts)
    return ", ".join(as_str_list(runs_on))


def step_label(step: StepDefinition) -> str:
    """Display text for a step: name, then action, then first line of `run`."""
    if step.name:
        return step.name
    if step.uses:
        return step.uses
    if step.run:
        first_line = step.run.split("\n")[0].strip()
        if len(first_line) > STEP_LABEL_MAX_LEN:
            return first_line[: STEP_LABEL_MAX_LEN - 3] + "..."
        return first_line
    return "(unnamed step)"
