from __future__ import annotations

PARSE_FAILED_MESSAGE = "Failed to parse YAML. Please enter valid YAML."
MISSING_JOBS_MESSAGE = (
    "No jobs section found. Please enter a GitHub Actions workflow YAML."
)


class WorkflowError(Exception):
    """Base class for errors raised while loading a workflow."""


class WorkflowParseError(WorkflowError):
    """The YAML deserializer rejected the input text."""


class InvalidWorkflowError(WorkflowError):
    """The document parsed, but its top level is not a mapping."""

    def __init__(self, message: str = PARSE_FAILED_MESSAGE) -> None:
        super().__init__(message)


class MissingJobsError(WorkflowError):
    """The workflow has no (or an empty) `jobs` mapping."""

    def __init__(self, message: str = MISSING_JOBS_MESSAGE) -> None:
        super().__init__(message)
