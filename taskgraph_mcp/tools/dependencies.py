"""Dependency graph MCP tools for TaskGraph."""

import json

from mcp.types import ToolAnnotations

from taskgraph_mcp import operations
from taskgraph_mcp.enums import ResponseFormat
from taskgraph_mcp.errors import TaskGraphError
from taskgraph_mcp.models.inputs import (
    AddDependencyInput,
    DependencyGraphInput,
    FixDependenciesInput,
    RemoveDependencyInput,
    ValidateDependenciesInput,
)
from taskgraph_mcp.server import mcp
from taskgraph_mcp.utils.formatters import (
    _format_error,
    _format_graph_markdown,
    _format_issues_markdown,
    _format_removed_edges_markdown,
    _format_task_markdown,
)
from taskgraph_mcp.utils.store import get_store


@mcp.tool(
    name="taskgraph_add_dependency",
    annotations=ToolAnnotations(
        title="Add Dependency",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def taskgraph_add_dependency(params: AddDependencyInput) -> str:
    """
    Make one task wait on another.

    The edge is rejected, and nothing is written, when either task is missing,
    the two ids are equal, the edge already exists, or the edge would close a cycle.

    USE THIS WHEN:
    - A task cannot start until another task is finished
    - Ordering work so that taskgraph_next_task respects prerequisites

    DO NOT USE WHEN:
    - Removing an ordering constraint → use taskgraph_remove_dependency
    - Checking existing edges → use taskgraph_dependency_graph

    Args:
        params: AddDependencyInput with task_id, depends_on, optional project scope

    Returns:
        The updated task, or an error naming the rejected edge (cycle path included)

    Examples:
        - Task 3 needs task 1 first: params with task_id=3, depends_on=1
    """
    try:
        task = operations.add_dependency(get_store(), params.task_id, params.depends_on, params.project)
    except TaskGraphError as e:
        return _format_error(e, params.response_format)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps({"success": True, "task": task.model_dump(by_alias=True)}, indent=2)

    return f"Task {params.task_id} now depends on task {params.depends_on}.\n\n{_format_task_markdown(task)}"


@mcp.tool(
    name="taskgraph_remove_dependency",
    annotations=ToolAnnotations(
        title="Remove Dependency",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def taskgraph_remove_dependency(params: RemoveDependencyInput) -> str:
    """
    Remove a dependency edge between two tasks.

    USE THIS WHEN:
    - A prerequisite is no longer required
    - Breaking a cycle by hand instead of running taskgraph_fix_dependencies

    Args:
        params: RemoveDependencyInput with task_id, depends_on, optional project scope

    Returns:
        The updated task, or an error when the task or the edge does not exist
    """
    try:
        task = operations.remove_dependency(get_store(), params.task_id, params.depends_on, params.project)
    except TaskGraphError as e:
        return _format_error(e, params.response_format)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps({"success": True, "task": task.model_dump(by_alias=True)}, indent=2)

    return f"Task {params.task_id} no longer depends on task {params.depends_on}.\n\n{_format_task_markdown(task)}"


@mcp.tool(
    name="taskgraph_validate_dependencies",
    annotations=ToolAnnotations(
        title="Validate Dependencies",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskgraph_validate_dependencies(params: ValidateDependenciesInput) -> str:
    """
    Check the whole dependency graph for invalid edges.

    Reports dangling references, self-dependencies, duplicate edges, and cycles.
    Read-only unless auto_fix is set.

    USE THIS WHEN:
    - Tasks were edited outside this server and may reference removed tasks
    - taskgraph_next_task skips a task you expected to be eligible

    DO NOT USE WHEN:
    - You already know you want repairs → use taskgraph_fix_dependencies

    Args:
        params: ValidateDependenciesInput with auto_fix flag and optional project scope

    Returns:
        Validity flag and issue list; removed edges when auto_fix ran

    Examples:
        - Check only: params with default values
        - Check and repair: params with auto_fix=True
    """
    try:
        result = operations.validate_dependencies(get_store(), auto_fix=params.auto_fix, project=params.project)
    except TaskGraphError as e:
        return _format_error(e, params.response_format)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(result.model_dump(), indent=2)

    if result.valid:
        return f"# Dependency Validation\n\n{result.message}"

    lines = ["# Dependency Validation", "", result.message, "", _format_issues_markdown(result.issues)]
    if result.fixed_issues is not None:
        lines.extend(["", _format_removed_edges_markdown(result.fixed_issues)])
    if result.remaining_issues:
        lines.extend(["", _format_issues_markdown(result.remaining_issues, "Remaining Issues")])
    return "\n".join(lines)


@mcp.tool(
    name="taskgraph_fix_dependencies",
    annotations=ToolAnnotations(
        title="Fix Dependencies",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskgraph_fix_dependencies(params: FixDependenciesInput) -> str:
    """
    Remove every invalid dependency edge and report what was removed.

    Duplicates, dangling references, and self-dependencies are dropped first.
    Each remaining cycle then loses one edge chosen by the configured policy.
    Running it twice removes nothing the second time.

    Args:
        params: FixDependenciesInput with optional project scope

    Returns:
        Removed edges tagged by issue kind, plus any issues left over
    """
    try:
        result = operations.fix_dependencies(get_store(), project=params.project)
    except TaskGraphError as e:
        return _format_error(e, params.response_format)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(result.model_dump(), indent=2)

    lines = ["# Dependency Repair", "", result.message, "", _format_removed_edges_markdown(result.fixed_issues)]
    if result.remaining_issues:
        lines.extend(["", _format_issues_markdown(result.remaining_issues, "Remaining Issues")])
    return "\n".join(lines)


@mcp.tool(
    name="taskgraph_dependency_graph",
    annotations=ToolAnnotations(
        title="Dependency Graph",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskgraph_dependency_graph(params: DependencyGraphInput) -> str:
    """
    Export the dependency graph as nodes and edges.

    Edges point from the dependency to the task waiting on it.

    USE THIS WHEN:
    - Visualizing or explaining how work is ordered
    - Looking up which edges exist before adding or removing one

    Args:
        params: DependencyGraphInput with optional project scope

    Returns:
        Node list with dependent counts, edge list, and outstanding issues
    """
    try:
        export = operations.dependency_graph(get_store(), project=params.project)
    except TaskGraphError as e:
        return _format_error(e, params.response_format)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(export.model_dump(by_alias=True), indent=2)

    return _format_graph_markdown(export)
