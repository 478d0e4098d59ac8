"""Output models produced by the dependency engine."""

from pydantic import BaseModel, ConfigDict, Field

from taskgraph_mcp.enums import IssueType, Priority, TaskStatus
from taskgraph_mcp.models.task import TaskModel

# ============================================================================
# Dependency Graph Results
# ============================================================================


class DependencyEdge(BaseModel):
    """An ordered pair: ``task_id`` cannot start until ``depends_on`` is complete."""

    model_config = ConfigDict(frozen=True)

    task_id: int
    depends_on: int


class Issue(BaseModel):
    """A graph-wide invariant violation found by validation."""

    type: IssueType
    task_id: int
    depends_on: int | None = None
    cycle: list[int] = Field(default_factory=list)
    message: str = ""


class RemovedEdge(BaseModel):
    """An edge dropped by a repair pass, tagged with the issue that caused it."""

    task_id: int
    depends_on: int
    issue_type: IssueType
    reason: str = ""


class ValidationResult(BaseModel):
    valid: bool
    issues: list[Issue] = Field(default_factory=list)
    fixed_issues: list[RemovedEdge] | None = None
    remaining_issues: list[Issue] | None = None
    message: str = ""


class FixResult(BaseModel):
    fixed_issues: list[RemovedEdge] = Field(default_factory=list)
    remaining_issues: list[Issue] = Field(default_factory=list)
    message: str = ""


class GraphNode(BaseModel):
    id: int
    title: str
    status: TaskStatus
    priority: Priority
    dependents: int = 0


class GraphEdge(BaseModel):
    """An edge drawn from the dependency to its dependent task."""

    model_config = ConfigDict(populate_by_name=True)

    from_id: int = Field(alias="from")
    to_id: int = Field(alias="to")
    type: str = "dependency"


class GraphExport(BaseModel):
    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)
    issues: list[Issue] = Field(default_factory=list)


# ============================================================================
# Next Task Results
# ============================================================================


class RankedTask(BaseModel):
    """An eligible task with the facts used to rank it."""

    task: TaskModel
    rank: int
    waiting_dependents: int
    unblocks: list[int] = Field(default_factory=list)
    reasons: list[str] = Field(default_factory=list)


class NextTaskResult(BaseModel):
    task: TaskModel | None = None
    reasoning: str
    recommendation: str = ""
    unblocks: list[int] = Field(default_factory=list)
    eligible_count: int = 0


# ============================================================================
# Complexity Results
# ============================================================================


class ComplexityFactors(BaseModel):
    subtask_count: int
    dependency_count: int
    description_length: int
    priority: Priority


class ComplexityAssessment(BaseModel):
    task_id: int | None = None
    title: str = ""
    status: TaskStatus | None = None
    score: float
    recommended_subtasks: int
    estimated_hours: int
    risk_factors: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    factors: ComplexityFactors


class ComplexityDistribution(BaseModel):
    low: int = 0
    medium: int = 0
    high: int = 0
    very_high: int = 0


class ComplexitySummary(BaseModel):
    total_tasks: int = 0
    average_complexity: float = 0.0
    complexity_distribution: ComplexityDistribution = Field(default_factory=ComplexityDistribution)


class ComplexityReport(BaseModel):
    tasks: list[ComplexityAssessment] = Field(default_factory=list)
    summary: ComplexitySummary = Field(default_factory=ComplexitySummary)
    high_complexity_tasks: list[int] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
