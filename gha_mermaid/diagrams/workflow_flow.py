from __future__ import annotations

from typing import Optional

from ..badges import condition_class_defs
from ..chain import ChainResult, compile_chain
from ..config import RenderConfig
from ..constants import TRIGGERS_SUBGRAPH_ID
from ..mermaid_fmt import (
    escape_label,
    mm_flow_edge,
    mm_flow_node,
    mm_subgraph_close,
    mm_subgraph_open,
    sanitize_id,
)
from ..model_view import (
    JobDefinition,
    Trigger,
    WorkflowDefinition,
    format_runs_on,
    parse_triggers,
    step_label,
)

STEP_INDENT = "    "


def job_node_id(job_name: str) -> str:
    return f"job_{sanitize_id(job_name)}"


def job_condition_id(job_name: str) -> str:
    return f"cond_job_{sanitize_id(job_name)}"


def step_node_id(job_name: str, index: int) -> str:
    return f"{sanitize_id(job_name)}_s{index}"


def gen_workflow_flow(workflow: WorkflowDefinition, cfg: Optional[RenderConfig] = None) -> str:
    """Generate the flowchart for a whole workflow.

    Layout, top to bottom: trigger subgraph, job-level condition chains, one
    subgraph per job (dependency order), trigger/dependency edges, classDefs.
    """
    cfg = cfg or RenderConfig()
    jobs = workflow.jobs

    lines: list[str] = [f"flowchart {cfg.direction}"]

    if workflow.has_triggers:
        lines.extend(gen_triggers(workflow.on))

    # Job chains are compiled once; the trigger edge and every dependency edge
    # reuse the same nodes.
    job_chains: dict[str, ChainResult] = {
        name: compile_chain(job_condition_id(name), job.if_)
        for name, job in jobs.items()
        if job.if_
    }
    lines.extend(gen_job_condition_nodes(job_chains))

    for job_name in topological_sort(jobs):
        lines.extend(gen_job(job_name, jobs[job_name]))

    if workflow.has_triggers:
        lines.extend(gen_root_job_edges(jobs, job_chains))

    lines.extend(gen_job_edges(jobs, job_chains))
    lines.extend(condition_class_defs())

    return "\n".join(lines)


def gen_triggers(on: Trigger) -> list[str]:
    lines = [mm_subgraph_open(TRIGGERS_SUBGRAPH_ID, "Triggers")]
    for trigger in parse_triggers(on):
        trigger_id = f"trigger_{sanitize_id(trigger.name)}"
        label = trigger.name
        if trigger.detail:
            label = f"{trigger.name}<br/>{escape_label(trigger.detail)}"
        lines.append(mm_flow_node(trigger_id, label))
    lines.append(mm_subgraph_close())
    return lines


def gen_job_condition_nodes(job_chains: dict[str, ChainResult]) -> list[str]:
    lines: list[str] = []
    for chain in job_chains.values():
        lines.extend(chain.node_lines)
        lines.extend(chain.internal_edges)
    return lines


def gen_job(job_name: str, job: JobDefinition) -> list[str]:
    """Generate one job subgraph, including step-level condition chains."""
    job_id = job_node_id(job_name)

    runs_on = format_runs_on(job.runs_on)
    title = escape_label(job.name or job_name)
    if runs_on:
        title = f"{title} ({runs_on})"

    lines = [mm_subgraph_open(job_id, title)]

    if job.uses:
        lines.append(mm_flow_node(f"{job_id}_uses", f"uses: {escape_label(job.uses)}"))
        lines.append(mm_subgraph_close())
        return lines

    steps = job.steps
    if not steps:
        lines.append(mm_flow_node(f"{job_id}_empty", "(no steps)"))
        lines.append(mm_subgraph_close())
        return lines

    step_ids = [step_node_id(job_name, i) for i in range(len(steps))]
    chains: list[Optional[ChainResult]] = [
        compile_chain(f"cond_{step_id}", step.if_, STEP_INDENT) if step.if_ else None
        for step_id, step in zip(step_ids, steps)
    ]

    for step, step_id, chain in zip(steps, step_ids, chains):
        if chain:
            lines.extend(chain.node_lines)
            lines.extend(chain.internal_edges)
        lines.append(mm_flow_node(step_id, escape_label(step_label(step))))

    for i, (step_id, chain) in enumerate(zip(step_ids, chains)):
        if chain:
            lines.extend(chain.target_edge_lines(step_id, STEP_INDENT))

        if i > 0:
            entry_id = chain.entry_id if chain else step_id
            lines.append(mm_flow_edge(step_ids[i - 1], entry_id, indent=STEP_INDENT))

        # A failed guard skips straight to whatever comes next.
        if chain and not chain.is_fully_always and i < len(steps) - 1:
            next_chain = chains[i + 1]
            next_entry = next_chain.entry_id if next_chain else step_ids[i + 1]
            for skip_id in chain.skip_source_ids:
                lines.append(
                    mm_flow_edge(skip_id, next_entry, "Skip", "-.->", indent=STEP_INDENT)
                )

    lines.append(mm_subgraph_close())
    return lines


def root_jobs(jobs: dict[str, JobDefinition]) -> list[str]:
    """Jobs without `needs`, in declared order."""
    return [name for name, job in jobs.items() if not job.needs]


def gen_root_job_edges(
    jobs: dict[str, JobDefinition], job_chains: dict[str, ChainResult]
) -> list[str]:
    lines: list[str] = []
    for job_name in root_jobs(jobs):
        chain = job_chains.get(job_name)
        if chain:
            lines.append(mm_flow_edge(TRIGGERS_SUBGRAPH_ID, chain.entry_id))
            lines.extend(chain.target_edge_lines(job_node_id(job_name)))
        else:
            lines.append(mm_flow_edge(TRIGGERS_SUBGRAPH_ID, job_node_id(job_name)))
    return lines


def gen_job_edges(
    jobs: dict[str, JobDefinition], job_chains: dict[str, ChainResult]
) -> list[str]:
    """Dependency edges `needs -> job`, routed through the job's chain if any.

    Every dependency gets its own edge into the chain entry, but the chain's
    exits into the job are written once per job.
    """
    lines: list[str] = []
    wired: set[str] = set()

    for job_name, job in jobs.items():
        chain = job_chains.get(job_name)
        for dep in job.needs:
            if chain is None:
                lines.append(mm_flow_edge(job_node_id(dep), job_node_id(job_name)))
                continue

            lines.append(mm_flow_edge(job_node_id(dep), chain.entry_id))
            if job_name not in wired:
                lines.extend(chain.target_edge_lines(job_node_id(job_name)))
                wired.add(job_name)

    return lines


def topological_sort(jobs: dict[str, JobDefinition]) -> list[str]:
    """Order jobs so each comes after the jobs it needs.

    Depth-first from each job in declared order; unknown dependencies are
    ignored. Cycles are not reported: the visited set stops the recursion and
    the back edge is simply dropped.
    """
    visited: set[str] = set()
    result: list[str] = []

    def visit(name: str) -> None:
        if name in visited:
            return
        visited.add(name)

        for dep in jobs[name].needs:
            if dep in jobs:
                visit(dep)

        result.append(name)

    for name in jobs:
        visit(name)

    return result
