"""Formatting utilities for engine output."""

import json

from taskgraph_mcp.enums import ResponseFormat
from taskgraph_mcp.errors import TaskGraphError
from taskgraph_mcp.models.results import (
    ComplexityAssessment,
    ComplexityReport,
    GraphExport,
    Issue,
    RankedTask,
    RemovedEdge,
)
from taskgraph_mcp.models.task import TaskModel

_ERROR_TIPS = {
    "TASK_NOT_FOUND": "Use taskgraph_ready or taskgraph_dependency_graph to find valid task ids.",
    "SELF_DEPENDENCY": "A task cannot wait on itself; choose a different dependency.",
    "DEPENDENCY_EXISTS": "The dependency is already in place. Nothing to change.",
    "DEPENDENCY_NOT_FOUND": "Use taskgraph_dependency_graph to list the existing edges.",
    "CIRCULAR_DEPENDENCY": "Remove one edge of the cycle first, or run taskgraph_validate_dependencies.",
    "STORE_ERROR": "Check that TASKGRAPH_MCP_TASKS_FILE points at a readable tasks.json.",
}


def _format_error(error: TaskGraphError, response_format: ResponseFormat = ResponseFormat.MARKDOWN) -> str:
    """
    Render an engine error for a tool response.

    Output: "Error: <message>\\nTip: <hint>" or a JSON failure envelope.
    """
    if response_format == ResponseFormat.JSON:
        return json.dumps({"success": False, "error": error.to_dict()}, indent=2)
    tip = _ERROR_TIPS.get(error.code)
    if tip:
        return f"Error: {error.message}\nTip: {tip}"
    return f"Error: {error.message}"


def _format_task_concise(task: TaskModel) -> str:
    """
    Format a single task in concise format for token efficiency.

    Output: "#5: Title (high, pending, deps:1,2)"
    """
    title = task.title[:50] if task.title else "Untitled"
    meta = [task.priority.value, task.status.value]
    if task.dependencies:
        meta.append("deps:" + ",".join(str(d) for d in task.dependencies))
    return f"#{task.id}: {title} ({', '.join(meta)})"


def _format_task_markdown(task: TaskModel) -> str:
    """Format a single task as markdown."""
    lines = [f"### [{task.id}] {task.title or 'Untitled'}"]

    details = [
        f"**Status**: {task.status.value}",
        f"**Priority**: {task.priority.value.capitalize()}",
    ]
    if task.project:
        details.append(f"**Project**: {task.project}")
    if task.subtasks:
        details.append(f"**Subtasks**: {task.subtask_count}")
    lines.append(" | ".join(details))

    if task.dependencies:
        lines.append(f"**Depends on**: {', '.join(f'#{d}' for d in task.dependencies)}")
    else:
        lines.append("**Depends on**: (none)")

    return "\n".join(lines)


def _format_issue(issue: Issue) -> str:
    return f"[{issue.type.value}] {issue.message}"


def _format_issues_markdown(issues: list[Issue], title: str = "Dependency Issues") -> str:
    if not issues:
        return f"### {title}\n(None)"
    lines = [f"### {title} ({len(issues)})"]
    for issue in issues:
        lines.append(f"- {_format_issue(issue)}")
    return "\n".join(lines)


def _format_removed_edges_markdown(removed: list[RemovedEdge]) -> str:
    if not removed:
        return "### Removed Edges\n(None)"
    lines = [
        f"### Removed Edges ({len(removed)})",
        "| Task | Depended On | Issue | Reason |",
        "|------|-------------|-------|--------|",
    ]
    for edge in removed:
        lines.append(f"| {edge.task_id} | {edge.depends_on} | {edge.issue_type.value} | {edge.reason} |")
    return "\n".join(lines)


def _format_ranked_concise(ranked: list[RankedTask]) -> str:
    """
    Concise ranked list.

    Output:
    2 ready task(s)
    1. #4: Title (high, pending) [Unblocks 2 task(s)]
    """
    if not ranked:
        return "0 ready tasks"
    lines = [f"{len(ranked)} ready task(s)"]
    for r in ranked:
        reason = r.reasons[-1] if len(r.reasons) > 1 else r.reasons[0]
        lines.append(f"{r.rank}. {_format_task_concise(r.task)} [{reason}]")
    return "\n".join(lines)


def _format_assessment_markdown(assessment: ComplexityAssessment) -> str:
    """Format one complexity assessment as markdown."""
    header = f"# Complexity: Task #{assessment.task_id}"
    if assessment.title:
        header += f" {assessment.title}"
    f = assessment.factors

    lines = [header, ""]
    lines.append(f"- **Score**: {assessment.score} / 5.0")
    lines.append(f"- **Recommended subtasks**: {assessment.recommended_subtasks}")
    lines.append(f"- **Estimated hours**: {assessment.estimated_hours}")
    lines.append("")
    lines.append("### Factors")
    lines.append(f"- Subtasks: {f.subtask_count}")
    lines.append(f"- Dependencies: {f.dependency_count}")
    lines.append(f"- Description length: {f.description_length}")
    lines.append(f"- Priority: {f.priority.value}")
    lines.append("")

    for heading, items in (("Risk Factors", assessment.risk_factors), ("Suggestions", assessment.suggestions)):
        lines.append(f"### {heading}")
        if items:
            lines.extend(f"- {item}" for item in items)
        else:
            lines.append("(None)")
        lines.append("")

    return "\n".join(lines).rstrip()


def _format_report_markdown(report: ComplexityReport) -> str:
    """Format a complexity report as markdown."""
    summary = report.summary
    if summary.total_tasks == 0:
        return "# Complexity Report\n\nNo tasks found."

    dist = summary.complexity_distribution
    lines = [f"# Complexity Report ({summary.total_tasks} tasks)", ""]
    lines.append(f"**Average complexity**: {summary.average_complexity}")
    lines.append("")
    lines.append("### Distribution")
    lines.append("| Low (<=2.0) | Medium (<=3.5) | High (<=4.5) | Very High |")
    lines.append("|-------------|----------------|--------------|-----------|")
    lines.append(f"| {dist.low} | {dist.medium} | {dist.high} | {dist.very_high} |")
    lines.append("")

    lines.append("### Tasks")
    lines.append("| ID | Task | Score | Subtasks | Hours |")
    lines.append("|----|------|-------|----------|-------|")
    for a in report.tasks:
        title = a.title[:40] if a.title else ""
        lines.append(f"| {a.task_id} | {title} | {a.score} | {a.recommended_subtasks} | {a.estimated_hours} |")
    lines.append("")

    if report.high_complexity_tasks:
        lines.append(f"### High Complexity: {', '.join(f'#{t}' for t in report.high_complexity_tasks)}")
        lines.append("")

    if report.recommendations:
        lines.append("### Recommendations")
        lines.extend(f"- {r}" for r in report.recommendations)

    return "\n".join(lines).rstrip()


def _format_graph_markdown(export: GraphExport) -> str:
    """Format a graph export as an adjacency listing."""
    if not export.nodes:
        return "# Dependency Graph\n\nNo tasks found."

    depends_on: dict[int, list[int]] = {}
    for edge in export.edges:
        depends_on.setdefault(edge.to_id, []).append(edge.from_id)

    lines = [f"# Dependency Graph ({len(export.nodes)} tasks, {len(export.edges)} edges)", ""]
    for node in export.nodes:
        deps = depends_on.get(node.id, [])
        dep_text = ", ".join(f"#{d}" for d in deps) if deps else "-"
        lines.append(f"- #{node.id} {node.title or 'Untitled'} [{node.status.value}] <- {dep_text}")
    lines.append("")
    lines.append(_format_issues_markdown(export.issues))
    return "\n".join(lines)
