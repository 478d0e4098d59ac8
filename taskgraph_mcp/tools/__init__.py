"""MCP tool definitions for TaskGraph."""

# Import all tools to register them with the MCP server
from taskgraph_mcp.tools.analysis import (
    taskgraph_analyze_complexity,
    taskgraph_complexity_report,
    taskgraph_next_task,
    taskgraph_ready,
)
from taskgraph_mcp.tools.dependencies import (
    taskgraph_add_dependency,
    taskgraph_dependency_graph,
    taskgraph_fix_dependencies,
    taskgraph_remove_dependency,
    taskgraph_validate_dependencies,
)

__all__ = [
    # Dependency tools
    "taskgraph_add_dependency",
    "taskgraph_remove_dependency",
    "taskgraph_validate_dependencies",
    "taskgraph_fix_dependencies",
    "taskgraph_dependency_graph",
    # Analysis tools
    "taskgraph_next_task",
    "taskgraph_ready",
    "taskgraph_analyze_complexity",
    "taskgraph_complexity_report",
]
