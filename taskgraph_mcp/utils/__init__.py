"""Utility functions for TaskGraph MCP."""

from taskgraph_mcp.utils.formatters import (
    _format_assessment_markdown,
    _format_error,
    _format_graph_markdown,
    _format_issues_markdown,
    _format_ranked_concise,
    _format_removed_edges_markdown,
    _format_report_markdown,
    _format_task_concise,
    _format_task_markdown,
)
from taskgraph_mcp.utils.parsers import _parse_task, _parse_tasks
from taskgraph_mcp.utils.store import InMemoryTaskStore, JsonTaskStore, TaskStore, get_store, set_store

__all__ = [
    "TaskStore",
    "InMemoryTaskStore",
    "JsonTaskStore",
    "get_store",
    "set_store",
    "_parse_task",
    "_parse_tasks",
    "_format_error",
    "_format_task_concise",
    "_format_task_markdown",
    "_format_issues_markdown",
    "_format_removed_edges_markdown",
    "_format_ranked_concise",
    "_format_assessment_markdown",
    "_format_report_markdown",
    "_format_graph_markdown",
]
