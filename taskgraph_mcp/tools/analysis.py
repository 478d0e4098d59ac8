"""Task selection and complexity MCP tools for TaskGraph."""

import json

from mcp.types import ToolAnnotations

from taskgraph_mcp import operations
from taskgraph_mcp.enums import ResponseFormat
from taskgraph_mcp.errors import TaskGraphError
from taskgraph_mcp.models.inputs import (
    AnalyzeComplexityInput,
    ComplexityReportInput,
    NextTaskInput,
    ReadyInput,
)
from taskgraph_mcp.server import mcp
from taskgraph_mcp.utils.formatters import (
    _format_assessment_markdown,
    _format_error,
    _format_ranked_concise,
    _format_report_markdown,
    _format_task_concise,
    _format_task_markdown,
)
from taskgraph_mcp.utils.store import get_store


@mcp.tool(
    name="taskgraph_next_task",
    annotations=ToolAnnotations(
        title="Next Task",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskgraph_next_task(params: NextTaskInput) -> str:
    """
    Pick the single task to work on next.

    Only pending tasks whose dependencies are all done are eligible. Among them the
    highest priority wins; ties go to the task that more unfinished tasks wait on,
    then to the lowest id.

    USE THIS WHEN:
    - User asks "what should I do next?"
    - Starting a work session and need one concrete task

    DO NOT USE WHEN:
    - You want several candidates → use taskgraph_ready
    - You want to know why tasks are stuck → use taskgraph_validate_dependencies

    Args:
        params: NextTaskInput with optional project scope

    Returns:
        The chosen task with reasoning, or an explanation of why nothing is eligible
    """
    try:
        result = operations.next_task(get_store(), project=params.project)
    except TaskGraphError as e:
        return _format_error(e, params.response_format)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(result.model_dump(by_alias=True), indent=2)

    if result.task is None:
        return f"# Next Task\n\n{result.reasoning}\n\n**Recommendation**: {result.recommendation}"

    if params.response_format == ResponseFormat.CONCISE:
        return f"{_format_task_concise(result.task)}\n{result.reasoning}"

    lines = ["# Next Task", "", _format_task_markdown(result.task), ""]
    lines.append(f"**Why**: {result.reasoning}")
    if result.unblocks:
        lines.append(f"**Unblocks**: {', '.join(f'#{t}' for t in result.unblocks)}")
    lines.append(f"**Recommendation**: {result.recommendation}")
    lines.append(f"_{result.eligible_count} eligible task(s) in scope_")
    return "\n".join(lines)


@mcp.tool(
    name="taskgraph_ready",
    annotations=ToolAnnotations(
        title="Ready Tasks",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskgraph_ready(params: ReadyInput) -> str:
    """
    List every task that can be started now, in the order taskgraph_next_task would pick them.

    Args:
        params: ReadyInput with limit, optional project scope, and format

    Returns:
        Ranked eligible tasks with the reasons behind each rank

    Examples:
        - Top 3 candidates: params with limit=3
    """
    try:
        ranked = operations.ready_tasks(get_store(), project=params.project, limit=params.limit)
    except TaskGraphError as e:
        return _format_error(e, params.response_format)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {"count": len(ranked), "tasks": [r.model_dump(by_alias=True) for r in ranked]},
            indent=2,
        )

    if params.response_format == ResponseFormat.CONCISE:
        return _format_ranked_concise(ranked)

    if not ranked:
        return "# Ready Tasks\n\nNo tasks are ready. Every pending task waits on unfinished or invalid dependencies."

    lines = [f"# Ready Tasks ({len(ranked)})", ""]
    for r in ranked:
        lines.append(f"{r.rank}. **[#{r.task.id}] {r.task.title or 'Untitled'}**")
        lines.append(f"   {' | '.join(r.reasons)}")
    return "\n".join(lines)


@mcp.tool(
    name="taskgraph_analyze_complexity",
    annotations=ToolAnnotations(
        title="Analyze Task Complexity",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskgraph_analyze_complexity(params: AnalyzeComplexityInput) -> str:
    """
    Score one task's complexity from its structure.

    The score starts at 2.5 and grows with subtask count, dependency count,
    description length, and high priority, capped at 5.0.

    USE THIS WHEN:
    - Deciding whether a task should be broken into subtasks
    - Estimating effort for a single task

    DO NOT USE WHEN:
    - Reviewing many tasks at once → use taskgraph_complexity_report

    Args:
        params: AnalyzeComplexityInput with task_id and optional project scope

    Returns:
        Score, recommended subtask count, hour estimate, risk factors, and suggestions
    """
    try:
        assessment = operations.analyze_complexity(get_store(), params.task_id, project=params.project)
    except TaskGraphError as e:
        return _format_error(e, params.response_format)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(assessment.model_dump(), indent=2)

    if params.response_format == ResponseFormat.CONCISE:
        return (
            f"#{assessment.task_id}: score {assessment.score}, "
            f"{assessment.recommended_subtasks} subtasks, ~{assessment.estimated_hours}h"
        )

    return _format_assessment_markdown(assessment)


@mcp.tool(
    name="taskgraph_complexity_report",
    annotations=ToolAnnotations(
        title="Complexity Report",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskgraph_complexity_report(params: ComplexityReportInput) -> str:
    """
    Score every task in scope and summarise the distribution.

    USE THIS WHEN:
    - Planning a sprint and looking for tasks that need breaking down
    - Reviewing how much of a project is high complexity

    Args:
        params: ComplexityReportInput with optional project, statuses, and task_ids filters

    Returns:
        Per-task scores, bucket counts, average, high-complexity ids, and recommendations

    Examples:
        - Whole store: params with default values
        - Pending work only: params with statuses=["pending"]
    """
    try:
        report = operations.complexity_report(
            get_store(),
            project=params.project,
            statuses=params.statuses,
            task_ids=params.task_ids,
        )
    except TaskGraphError as e:
        return _format_error(e, params.response_format)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(report.model_dump(), indent=2)

    if params.response_format == ResponseFormat.CONCISE:
        summary = report.summary
        dist = summary.complexity_distribution
        lines = [
            f"{summary.total_tasks} task(s), average {summary.average_complexity}",
            f"low:{dist.low} medium:{dist.medium} high:{dist.high} very_high:{dist.very_high}",
        ]
        if report.high_complexity_tasks:
            lines.append("high complexity: " + ",".join(str(t) for t in report.high_complexity_tasks))
        return "\n".join(lines)

    return _format_report_markdown(report)
