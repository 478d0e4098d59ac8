"""Input models for TaskGraph MCP tools."""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from taskgraph_mcp.enums import ResponseFormat, TaskStatus

# ============================================================================
# Dependency Tool Input Models
# ============================================================================


class AddDependencyInput(BaseModel):
    """Input model for adding a dependency edge."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: int = Field(..., description="Task that will wait on the dependency", gt=0)
    depends_on: int = Field(..., description="Task that must be completed first", gt=0)
    project: str | None = Field(default=None, description="Limit the scope to one project")
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable or 'json' for machine-readable",
    )


class RemoveDependencyInput(BaseModel):
    """Input model for removing a dependency edge."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: int = Field(..., description="Task that currently waits on the dependency", gt=0)
    depends_on: int = Field(..., description="Dependency to remove", gt=0)
    project: str | None = Field(default=None, description="Limit the scope to one project")
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable or 'json' for machine-readable",
    )


class ValidateDependenciesInput(BaseModel):
    """Input model for validating the dependency graph."""

    model_config = ConfigDict(str_strip_whitespace=True)

    auto_fix: bool = Field(default=False, description="Remove invalid edges when issues are found")
    project: str | None = Field(default=None, description="Limit the scope to one project")
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown' or 'json'"
    )


class FixDependenciesInput(BaseModel):
    """Input model for repairing the dependency graph."""

    model_config = ConfigDict(str_strip_whitespace=True)

    project: str | None = Field(default=None, description="Limit the scope to one project")
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown' or 'json'"
    )


class DependencyGraphInput(BaseModel):
    """Input model for exporting the dependency graph."""

    model_config = ConfigDict(str_strip_whitespace=True)

    project: str | None = Field(default=None, description="Limit the scope to one project")
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown' or 'json'"
    )


# ============================================================================
# Analysis Tool Input Models
# ============================================================================


class NextTaskInput(BaseModel):
    """Input model for next-task selection."""

    model_config = ConfigDict(str_strip_whitespace=True)

    project: str | None = Field(default=None, description="Limit the scope to one project")
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown' or 'json'"
    )


class ReadyInput(BaseModel):
    """Input model for listing eligible tasks in selection order."""

    model_config = ConfigDict(str_strip_whitespace=True)

    limit: int = Field(default=10, description="Maximum number of tasks to return", ge=1, le=100)
    project: str | None = Field(default=None, description="Limit the scope to one project")
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown' or 'json'"
    )


class AnalyzeComplexityInput(BaseModel):
    """Input model for scoring a single task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: int = Field(..., description="Task to analyze", gt=0)
    project: str | None = Field(default=None, description="Limit the scope to one project")
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown' or 'json'"
    )


class ComplexityReportInput(BaseModel):
    """Input model for the complexity report."""

    model_config = ConfigDict(str_strip_whitespace=True)

    project: str | None = Field(default=None, description="Limit the scope to one project")
    statuses: list[TaskStatus] | None = Field(default=None, description="Only include tasks in these statuses")
    task_ids: list[int] | None = Field(default=None, description="Only include these task ids", max_length=500)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown' or 'json'"
    )

    @field_validator("task_ids")
    @classmethod
    def validate_task_ids(cls, v: list[int] | None) -> list[int] | None:
        if v is not None and any(tid <= 0 for tid in v):
            raise ValueError("Task ids must be positive integers")
        return v

    @model_validator(mode="after")
    def drop_empty_filters(self) -> "ComplexityReportInput":
        # An empty filter list means "no filter", not "match nothing"
        if self.statuses == []:
            self.statuses = None
        if self.task_ids == []:
            self.task_ids = None
        return self
