"""Pydantic models for TaskGraph MCP."""

from taskgraph_mcp.models.inputs import (
    AddDependencyInput,
    AnalyzeComplexityInput,
    ComplexityReportInput,
    DependencyGraphInput,
    FixDependenciesInput,
    NextTaskInput,
    ReadyInput,
    RemoveDependencyInput,
    ValidateDependenciesInput,
)
from taskgraph_mcp.models.results import (
    ComplexityAssessment,
    ComplexityDistribution,
    ComplexityFactors,
    ComplexityReport,
    ComplexitySummary,
    DependencyEdge,
    FixResult,
    GraphEdge,
    GraphExport,
    GraphNode,
    Issue,
    NextTaskResult,
    RankedTask,
    RemovedEdge,
    ValidationResult,
)
from taskgraph_mcp.models.task import SubtaskModel, TaskModel

__all__ = [
    # Task models
    "TaskModel",
    "SubtaskModel",
    # Tool input models
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
    "GraphNode",
    "GraphEdge",
    "GraphExport",
    "RankedTask",
    "NextTaskResult",
    "ComplexityFactors",
    "ComplexityAssessment",
    "ComplexityDistribution",
    "ComplexitySummary",
    "ComplexityReport",
]
