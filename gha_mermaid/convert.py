"""Entry point: workflow YAML text in, Mermaid flowchart text out.

`convert_yaml_to_mermaid` never raises. Every failure is reported through
`ConversionResult.error` with an empty `mermaid_code`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .config import RenderConfig
from .diagrams.workflow_flow import gen_workflow_flow
from .errors import InvalidWorkflowError, MissingJobsError
from .io import parse_yaml
from .model_view import workflow_from_mapping


@dataclass(frozen=True)
class ConversionResult:
    mermaid_code: str
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def error_message(error: Exception) -> str:
    """User-facing text for a failed conversion."""
    if isinstance(error, (InvalidWorkflowError, MissingJobsError)):
        return str(error)
    return f"Parse error: {error}"


def convert_workflow(data: Any, cfg: Optional[RenderConfig] = None) -> ConversionResult:
    """Convert an already deserialized workflow document."""
    try:
        workflow = workflow_from_mapping(data)
        return ConversionResult(gen_workflow_flow(workflow, cfg))
    except Exception as e:
        return ConversionResult("", error_message(e))


def convert_yaml_to_mermaid(
    yaml_string: str, cfg: Optional[RenderConfig] = None
) -> ConversionResult:
    """Convert GitHub Actions workflow YAML into Mermaid flowchart code."""
    try:
        data = parse_yaml(yaml_string)
    except Exception as e:
        return ConversionResult("", error_message(e))
    return convert_workflow(data, cfg)
