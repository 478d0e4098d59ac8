"""Core task models for TaskGraph MCP."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from taskgraph_mcp.enums import COMPLETED_STATUSES, Priority, TaskStatus


def coerce_dependency_ids(value: Any) -> list[int]:
    """
    Normalize a raw dependency list to integer ids.

    Accepts plain ids, numeric strings, a comma-separated string, and
    ``{"depends_on_task_id": n}`` rows. Raises ValueError on anything else.
    """
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    elif isinstance(value, int):
        value = [value]

    ids: list[int] = []
    for dep in value:
        if isinstance(dep, dict):
            dep = dep.get("depends_on_task_id", dep.get("id"))
        if isinstance(dep, str):
            dep = dep.strip()
            if not dep:
                continue
        if isinstance(dep, bool) or dep is None:
            raise ValueError(f"Invalid dependency id: {dep!r}")
        ids.append(int(dep))
    return ids


class SubtaskModel(BaseModel):
    """A subtask owned by a task. Only its presence is inspected by the engine."""

    model_config = ConfigDict(extra="allow")

    id: int | str | None = None
    title: str = ""
    description: str = ""
    status: str = "pending"


class TaskModel(BaseModel):
    """A task record as supplied by the task store."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: int
    title: str = ""
    description: str = ""
    details: str = ""
    test_strategy: str | None = Field(default=None, alias="testStrategy")
    status: TaskStatus = TaskStatus.PENDING
    priority: Priority = Priority.MEDIUM
    dependencies: list[int] = Field(default_factory=list)
    subtasks: list[SubtaskModel] = Field(default_factory=list)
    project: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v: Any) -> Any:
        if v is None:
            return TaskStatus.PENDING
        if isinstance(v, str):
            return v.strip().lower().replace("_", "-")
        return v

    @field_validator("priority", mode="before")
    @classmethod
    def normalize_priority(cls, v: Any) -> Any:
        if v is None or v == "":
            return Priority.MEDIUM
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("description", "details", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("dependencies", mode="before")
    @classmethod
    def normalize_dependencies(cls, v: Any) -> list[int]:
        return coerce_dependency_ids(v)

    @property
    def subtask_count(self) -> int:
        return len(self.subtasks)

    @property
    def dependency_count(self) -> int:
        return len(self.dependencies)

    @property
    def description_length(self) -> int:
        """Combined length of the description and details text."""
        return len(self.description) + len(self.details)

    @property
    def is_completed(self) -> bool:
        return self.status in COMPLETED_STATUSES
