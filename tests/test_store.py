"""Tests for task models, parsers, and store backends."""

import json

import pytest
from pydantic import ValidationError

from taskgraph_mcp import (
    DependencyEdge,
    DependencyNotFound,
    InMemoryTaskStore,
    JsonTaskStore,
    Priority,
    StoreError,
    TaskModel,
    TaskNotFound,
    TaskStatus,
)
from taskgraph_mcp.models.task import coerce_dependency_ids
from taskgraph_mcp.utils import _parse_task, _parse_tasks


class TestTaskModel:
    """Tests for TaskModel normalization."""

    def test_defaults(self):
        task = TaskModel(id=1)
        assert task.status == TaskStatus.PENDING
        assert task.priority == Priority.MEDIUM
        assert task.dependencies == []
        assert task.subtask_count == 0

    def test_status_normalized(self):
        assert TaskModel(id=1, status="In_Progress").status == TaskStatus.IN_PROGRESS
        assert TaskModel(id=1, status=None).status == TaskStatus.PENDING

    def test_priority_normalized(self):
        assert TaskModel(id=1, priority="HIGH").priority == Priority.HIGH
        assert TaskModel(id=1, priority="").priority == Priority.MEDIUM

    def test_invalid_status_rejected(self):
        with pytest.raises(ValidationError):
            TaskModel(id=1, status="archived")

    def test_test_strategy_alias(self):
        task = _parse_task({"id": 1, "testStrategy": "unit tests", "extraField": True})
        assert task.test_strategy == "unit tests"
        assert task.model_dump(by_alias=True)["testStrategy"] == "unit tests"

    def test_null_text_fields(self):
        task = _parse_task({"id": 1, "description": None, "details": None})
        assert task.description_length == 0

    def test_is_completed(self):
        assert TaskModel(id=1, status="done").is_completed
        assert TaskModel(id=1, status="completed").is_completed
        assert not TaskModel(id=1, status="cancelled").is_completed

    def test_parse_tasks(self, chain_tasks):
        tasks = _parse_tasks(chain_tasks)
        assert [t.id for t in tasks] == [1, 2, 3]
        assert tasks[2].dependencies == [2]


class TestCoerceDependencyIds:
    """Tests for dependency list coercion."""

    def test_shapes(self):
        assert coerce_dependency_ids(None) == []
        assert coerce_dependency_ids(3) == [3]
        assert coerce_dependency_ids("1, 2,3") == [1, 2, 3]
        assert coerce_dependency_ids(["4", 5]) == [4, 5]
        assert coerce_dependency_ids([{"depends_on_task_id": 9}]) == [9]

    def test_duplicates_preserved(self):
        assert coerce_dependency_ids([1, 1]) == [1, 1]

    def test_blank_entries_skipped(self):
        assert coerce_dependency_ids("1,,2,") == [1, 2]

    def test_rejects_garbage(self):
        with pytest.raises(ValueError):
            coerce_dependency_ids(["abc"])
        with pytest.raises(ValueError):
            coerce_dependency_ids([True])


class TestInMemoryTaskStore:
    """Tests for the list-backed store."""

    def test_load_returns_copies(self, chain_tasks):
        store = InMemoryTaskStore(chain_tasks)
        loaded = store.load_tasks()
        loaded[0].dependencies.append(3)
        assert store.get(1).dependencies == []

    def test_project_scope(self):
        store = InMemoryTaskStore([{"id": 1, "project": "web"}, {"id": 2, "project": "api"}, {"id": 3}])
        assert [t.id for t in store.load_tasks("web")] == [1]
        assert len(store.load_tasks()) == 3

    def test_remove_drops_last_occurrence(self):
        store = InMemoryTaskStore([{"id": 1}, {"id": 2}, {"id": 3, "dependencies": [1, 2, 1]}])
        store.remove_dependency(3, 1)
        assert store.get(3).dependencies == [1, 2]

    def test_remove_missing(self, chain_tasks):
        store = InMemoryTaskStore(chain_tasks)
        with pytest.raises(DependencyNotFound):
            store.remove_dependency(1, 2)
        with pytest.raises(TaskNotFound):
            store.add_dependency(9, 1)


class TestJsonTaskStore:
    """Tests for the tasks.json store."""

    def test_load_envelope(self, json_store):
        tasks = json_store.load_tasks()
        assert [t.id for t in tasks] == [1, 2, 3]

    def test_load_bare_list(self, tmp_path, chain_tasks):
        path = tmp_path / "tasks.json"
        path.write_text(json.dumps(chain_tasks), encoding="utf-8")
        assert len(JsonTaskStore(path).load_tasks()) == 3

    def test_missing_file_is_empty(self, tmp_path):
        assert JsonTaskStore(tmp_path / "absent.json").load_tasks() == []

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "tasks.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(StoreError):
            JsonTaskStore(path).load_tasks()

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "tasks.json"
        path.write_text(json.dumps({"items": []}), encoding="utf-8")
        with pytest.raises(StoreError):
            JsonTaskStore(path).load_tasks()

    def test_invalid_record(self, tmp_path):
        path = tmp_path / "tasks.json"
        path.write_text(json.dumps([{"id": 1, "status": "archived"}]), encoding="utf-8")
        with pytest.raises(StoreError) as exc_info:
            JsonTaskStore(path).load_tasks()
        assert exc_info.value.code == "STORE_ERROR"

    def test_add_dependency_persists(self, json_store, tasks_file):
        json_store.add_dependency(3, 1)
        data = json.loads(tasks_file.read_text(encoding="utf-8"))
        assert data["tasks"][2]["dependencies"] == [2, 1]
        # Unrelated keys survive the rewrite
        assert data["metadata"] == {"version": 1}

    def test_remove_dependencies_batch(self, json_store, tasks_file):
        json_store.remove_dependencies(
            [DependencyEdge(task_id=2, depends_on=1), DependencyEdge(task_id=3, depends_on=2)]
        )
        assert all(t.dependencies == [] for t in json_store.load_tasks())

    def test_remove_missing_edge(self, json_store):
        with pytest.raises(DependencyNotFound):
            json_store.remove_dependency(1, 3)

    def test_mutate_missing_task(self, json_store):
        with pytest.raises(TaskNotFound):
            json_store.add_dependency(42, 1)
