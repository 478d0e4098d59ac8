"""
MCP Server for task dependency graphs.

This server keeps a task list's dependency edges valid, picks the next task to
work on, and scores task complexity. Tasks are read from a pluggable store
(a tasks.json file by default).
"""

# Re-export enums
from taskgraph_mcp.enums import IssueType, Priority, ResponseFormat, TaskStatus

# Re-export errors
from taskgraph_mcp.errors import (
    CircularDependency,
    DependencyExists,
    DependencyNotFound,
    SelfDependency,
    StoreError,
    TaskGraphError,
    TaskNotFound,
)

# Re-export engine
from taskgraph_mcp.engine import ComplexityReportAggregator, DependencyGraph, NextTaskSelector

# Re-export models
from taskgraph_mcp.models import (
    AddDependencyInput,
    AnalyzeComplexityInput,
    ComplexityAssessment,
    ComplexityReport,
    ComplexityReportInput,
    DependencyEdge,
    DependencyGraphInput,
    FixDependenciesInput,
    FixResult,
    GraphExport,
    Issue,
    NextTaskInput,
    NextTaskResult,
    RankedTask,
    ReadyInput,
    RemovedEdge,
    RemoveDependencyInput,
    SubtaskModel,
    TaskModel,
    ValidateDependenciesInput,
    ValidationResult,
)

# Re-export MCP server instance
from taskgraph_mcp.server import mcp

# Re-export tools
from taskgraph_mcp.tools import (
    taskgraph_add_dependency,
    taskgraph_analyze_complexity,
    taskgraph_complexity_report,
    taskgraph_dependency_graph,
    taskgraph_fix_dependencies,
    taskgraph_next_task,
    taskgraph_ready,
    taskgraph_remove_dependency,
    taskgraph_validate_dependencies,
)

# Re-export stores
from taskgraph_mcp.utils import InMemoryTaskStore, JsonTaskStore, TaskStore, get_store, set_store

__all__ = [
    # Enums
    "ResponseFormat",
    "TaskStatus",
    "Priority",
    "IssueType",
    # Errors
    "TaskGraphError",
    "TaskNotFound",
    "SelfDependency",
    "DependencyExists",
    "DependencyNotFound",
    "CircularDependency",
    "StoreError",
    # Engine
    "DependencyGraph",
    "NextTaskSelector",
    "ComplexityReportAggregator",
    # Task models
    "TaskModel",
    "SubtaskModel",
    # Input models
    "AddDependencyInput",
    "RemoveDependencyInput",
    "ValidateDependenciesInput",
    "FixDependenciesInput",
    "DependencyGraphInput",
    "NextTaskInput",
    "ReadyInput",
    "AnalyzeComplexityInput",
    "ComplexityReportInput",
    # Result models
    "DependencyEdge",
    "Issue",
    "RemovedEdge",
    "ValidationResult",
    "FixResult",
    "GraphExport",
    "RankedTask",
    "NextTaskResult",
    "ComplexityAssessment",
    "ComplexityReport",
    # Stores
    "TaskStore",
    "InMemoryTaskStore",
    "JsonTaskStore",
    "get_store",
    "set_store",
    # Tools
    "taskgraph_add_dependency",
    "taskgraph_remove_dependency",
    "taskgraph_validate_dependencies",
    "taskgraph_fix_dependencies",
    "taskgraph_dependency_graph",
    "taskgraph_next_task",
    "taskgraph_ready",
    "taskgraph_analyze_complexity",
    "taskgraph_complexity_report",
    # MCP server instance
    "mcp",
]
