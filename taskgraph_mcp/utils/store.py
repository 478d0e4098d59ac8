"""Task store backends: the collaborator the engine reads tasks from and writes edges to."""

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError

from taskgraph_mcp.config import get_config
from taskgraph_mcp.errors import DependencyNotFound, StoreError, TaskNotFound
from taskgraph_mcp.models.results import DependencyEdge
from taskgraph_mcp.models.task import TaskModel, coerce_dependency_ids
from taskgraph_mcp.utils.parsers import _parse_tasks

logger = logging.getLogger(__name__)


class TaskStore(Protocol):
    """Anything that can supply a scope's tasks and apply edge mutations."""

    def load_tasks(self, project: str | None = None) -> list[TaskModel]: ...

    def add_dependency(self, task_id: int, depends_on: int) -> None: ...

    def remove_dependency(self, task_id: int, depends_on: int) -> None: ...

    def remove_dependencies(self, edges: Iterable[DependencyEdge]) -> None: ...


def _in_scope(task: TaskModel, project: str | None) -> bool:
    return project is None or task.project == project


def _drop_last(deps: list[int], depends_on: int) -> None:
    # Repeated entries keep their first occurrence
    del deps[len(deps) - 1 - deps[::-1].index(depends_on)]


class InMemoryTaskStore:
    """List-backed store for tests and embedding."""

    def __init__(self, tasks: Iterable[TaskModel | dict[str, Any]] = ()) -> None:
        self._tasks: dict[int, TaskModel] = {}
        for task in tasks:
            model = task if isinstance(task, TaskModel) else TaskModel.model_validate(task)
            self._tasks.setdefault(model.id, model)

    def load_tasks(self, project: str | None = None) -> list[TaskModel]:
        return [t.model_copy(deep=True) for t in self._tasks.values() if _in_scope(t, project)]

    def get(self, task_id: int) -> TaskModel:
        if task_id not in self._tasks:
            raise TaskNotFound(task_id)
        return self._tasks[task_id]

    def add_dependency(self, task_id: int, depends_on: int) -> None:
        self.get(task_id).dependencies.append(depends_on)

    def remove_dependency(self, task_id: int, depends_on: int) -> None:
        deps = self.get(task_id).dependencies
        if depends_on not in deps:
            raise DependencyNotFound(task_id, depends_on)
        _drop_last(deps, depends_on)

    def remove_dependencies(self, edges: Iterable[DependencyEdge]) -> None:
        for edge in edges:
            self.remove_dependency(edge.task_id, edge.depends_on)


class JsonTaskStore:
    """
    Store backed by a tasks.json file.

    Accepts either ``{"tasks": [...]}`` or a bare list of task records. Each write
    reads the file again and rewrites it whole, so edits made by other writers
    between operations are kept.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def _read(self) -> tuple[dict[str, Any] | None, list[dict[str, Any]]]:
        if not self.path.exists():
            return None, []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "[]")
        except json.JSONDecodeError as e:
            raise StoreError(f"Failed to parse {self.path}: {e}") from e
        except OSError as e:
            raise StoreError(f"Failed to read {self.path}: {e}") from e

        if isinstance(data, list):
            return None, data
        if isinstance(data, dict) and isinstance(data.get("tasks"), list):
            return data, data["tasks"]
        raise StoreError(f"{self.path} does not contain a task list")

    def _write(self, envelope: dict[str, Any] | None, records: list[dict[str, Any]]) -> None:
        payload: Any = records
        if envelope is not None:
            payload = {**envelope, "tasks": records}
        try:
            self.path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        except OSError as e:
            raise StoreError(f"Failed to write {self.path}: {e}") from e

    def load_tasks(self, project: str | None = None) -> list[TaskModel]:
        _, records = self._read()
        try:
            tasks = _parse_tasks(records)
        except ValidationError as e:
            raise StoreError(f"Invalid task record in {self.path}: {e.error_count()} error(s)") from e
        return [t for t in tasks if _in_scope(t, project)]

    def _mutate(self, edits: list[tuple[int, int, bool]]) -> None:
        """Apply ``(task_id, depends_on, add)`` edits to the raw records and save once."""
        envelope, records = self._read()
        by_id: dict[int, dict[str, Any]] = {}
        for record in records:
            try:
                by_id.setdefault(int(record["id"]), record)
            except (KeyError, TypeError, ValueError):
                continue

        for task_id, depends_on, add in edits:
            record = by_id.get(task_id)
            if record is None:
                raise TaskNotFound(task_id)
            try:
                deps = coerce_dependency_ids(record.get("dependencies"))
            except (TypeError, ValueError) as e:
                raise StoreError(f"Task {task_id} has malformed dependencies: {e}") from e
            if add:
                deps.append(depends_on)
            elif depends_on in deps:
                _drop_last(deps, depends_on)
            else:
                raise DependencyNotFound(task_id, depends_on)
            record["dependencies"] = deps

        self._write(envelope, records)

    def add_dependency(self, task_id: int, depends_on: int) -> None:
        self._mutate([(task_id, depends_on, True)])
        logger.info("Saved dependency %d -> %d to %s", task_id, depends_on, self.path)

    def remove_dependency(self, task_id: int, depends_on: int) -> None:
        self._mutate([(task_id, depends_on, False)])
        logger.info("Removed dependency %d -> %d from %s", task_id, depends_on, self.path)

    def remove_dependencies(self, edges: Iterable[DependencyEdge]) -> None:
        edits = [(e.task_id, e.depends_on, False) for e in edges]
        if not edits:
            return
        self._mutate(edits)
        logger.info("Removed %d dependency edge(s) from %s", len(edits), self.path)


# Global store instance
_store: TaskStore | None = None


def get_store() -> TaskStore:
    """Get the global store, building a JsonTaskStore from config on first use."""
    global _store
    if _store is None:
        _store = JsonTaskStore(get_config().tasks_file)
    return _store


def set_store(store: TaskStore | None) -> None:
    """Replace the global store. ``None`` rebuilds it from config on next access."""
    global _store
    _store = store
