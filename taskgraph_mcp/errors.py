"""Error types raised by the dependency engine and its store."""

from typing import Any


class TaskGraphError(Exception):
    """Base class for all recoverable engine errors."""

    code = "TASKGRAPH_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


class TaskNotFound(TaskGraphError):
    """A referenced task id does not exist in the current scope."""

    code = "TASK_NOT_FOUND"

    def __init__(self, task_id: int):
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "task_id": self.task_id}


class SelfDependency(TaskGraphError):
    code = "SELF_DEPENDENCY"

    def __init__(self, task_id: int):
        super().__init__(f"Task {task_id} cannot depend on itself")
        self.task_id = task_id

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "task_id": self.task_id}


class DependencyExists(TaskGraphError):
    code = "DEPENDENCY_EXISTS"

    def __init__(self, task_id: int, depends_on: int):
        super().__init__(f"Task {task_id} already depends on task {depends_on}")
        self.task_id = task_id
        self.depends_on = depends_on

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "task_id": self.task_id, "depends_on": self.depends_on}


class DependencyNotFound(TaskGraphError):
    code = "DEPENDENCY_NOT_FOUND"

    def __init__(self, task_id: int, depends_on: int):
        super().__init__(f"Task {task_id} does not depend on task {depends_on}")
        self.task_id = task_id
        self.depends_on = depends_on

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "task_id": self.task_id, "depends_on": self.depends_on}


class CircularDependency(TaskGraphError):
    """Adding the edge would close a directed cycle.

    ``cycle`` starts and ends with ``task_id``: ``[task_id, depends_on, ..., task_id]``.
    """

    code = "CIRCULAR_DEPENDENCY"

    def __init__(self, task_id: int, depends_on: int, cycle: list[int]):
        path = " -> ".join(str(t) for t in cycle)
        super().__init__(f"Adding dependency {task_id} -> {depends_on} would create a cycle: {path}")
        self.task_id = task_id
        self.depends_on = depends_on
        self.cycle = cycle

    def to_dict(self) -> dict[str, Any]:
        return {
            **super().to_dict(),
            "task_id": self.task_id,
            "depends_on": self.depends_on,
            "cycle": self.cycle,
        }


class StoreError(TaskGraphError):
    """The task store could not be read or written."""

    code = "STORE_ERROR"
