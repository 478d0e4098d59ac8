"""Tests for the MCP tool functions."""

import json

import pytest

from taskgraph_mcp import (
    AddDependencyInput,
    AnalyzeComplexityInput,
    ComplexityReportInput,
    DependencyGraphInput,
    FixDependenciesInput,
    InMemoryTaskStore,
    NextTaskInput,
    ReadyInput,
    RemoveDependencyInput,
    ResponseFormat,
    ValidateDependenciesInput,
    set_store,
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
from taskgraph_mcp.utils import _format_task_concise
from taskgraph_mcp.utils.store import get_store


@pytest.fixture
def corrupted_store(corrupted_tasks):
    store = InMemoryTaskStore(corrupted_tasks)
    set_store(store)
    return store


# ============================================================================
# Input Model Tests
# ============================================================================


class TestInputModels:
    def test_ids_must_be_positive(self):
        with pytest.raises(ValueError):
            AddDependencyInput(task_id=0, depends_on=1)

    def test_ready_limit_bounds(self):
        assert ReadyInput().limit == 10
        with pytest.raises(ValueError):
            ReadyInput(limit=0)

    def test_report_empty_filters_mean_all(self):
        params = ComplexityReportInput(statuses=[], task_ids=[])
        assert params.statuses is None
        assert params.task_ids is None

    def test_report_rejects_negative_ids(self):
        with pytest.raises(ValueError):
            ComplexityReportInput(task_ids=[1, -2])


# ============================================================================
# Dependency Tools
# ============================================================================


class TestAddDependencyTool:
    @pytest.mark.asyncio
    async def test_add(self, memory_store):
        result = await taskgraph_add_dependency(AddDependencyInput(task_id=3, depends_on=1))
        assert "Task 3 now depends on task 1" in result
        assert memory_store.get(3).dependencies == [2, 1]

    @pytest.mark.asyncio
    async def test_cycle_error_markdown(self, memory_store):
        result = await taskgraph_add_dependency(AddDependencyInput(task_id=1, depends_on=3))
        assert result.startswith("Error: Adding dependency 1 -> 3 would create a cycle: 1 -> 3 -> 2 -> 1")
        assert "Tip:" in result

    @pytest.mark.asyncio
    async def test_cycle_error_json(self, memory_store):
        params = AddDependencyInput(task_id=1, depends_on=3, response_format=ResponseFormat.JSON)
        data = json.loads(await taskgraph_add_dependency(params))
        assert data["success"] is False
        assert data["error"]["code"] == "CIRCULAR_DEPENDENCY"
        assert data["error"]["cycle"] == [1, 3, 2, 1]

    @pytest.mark.asyncio
    async def test_add_json(self, memory_store):
        params = AddDependencyInput(task_id=3, depends_on=1, response_format=ResponseFormat.JSON)
        data = json.loads(await taskgraph_add_dependency(params))
        assert data["success"] is True
        assert data["task"]["dependencies"] == [2, 1]

    @pytest.mark.asyncio
    async def test_self_dependency(self, memory_store):
        result = await taskgraph_add_dependency(AddDependencyInput(task_id=2, depends_on=2))
        assert "cannot depend on itself" in result


class TestRemoveDependencyTool:
    @pytest.mark.asyncio
    async def test_remove(self, memory_store):
        result = await taskgraph_remove_dependency(RemoveDependencyInput(task_id=3, depends_on=2))
        assert "no longer depends on task 2" in result

    @pytest.mark.asyncio
    async def test_remove_missing(self, memory_store):
        params = RemoveDependencyInput(task_id=1, depends_on=3, response_format=ResponseFormat.JSON)
        data = json.loads(await taskgraph_remove_dependency(params))
        assert data["error"]["code"] == "DEPENDENCY_NOT_FOUND"


class TestValidateTool:
    @pytest.mark.asyncio
    async def test_valid(self, memory_store):
        result = await taskgraph_validate_dependencies(ValidateDependenciesInput())
        assert "All dependencies are valid" in result

    @pytest.mark.asyncio
    async def test_issues_markdown(self, corrupted_store):
        result = await taskgraph_validate_dependencies(ValidateDependenciesInput())
        assert "[dangling_reference]" in result
        assert "Circular dependency: 1 -> 2 -> 3 -> 1" in result
        assert "Removed Edges" not in result

    @pytest.mark.asyncio
    async def test_auto_fix_json(self, corrupted_store):
        params = ValidateDependenciesInput(auto_fix=True, response_format=ResponseFormat.JSON)
        data = json.loads(await taskgraph_validate_dependencies(params))
        assert data["valid"] is False
        assert len(data["issues"]) == 2
        assert len(data["fixed_issues"]) == 2
        assert data["remaining_issues"] == []

        params = ValidateDependenciesInput(response_format=ResponseFormat.JSON)
        again = json.loads(await taskgraph_validate_dependencies(params))
        assert again["valid"] is True
        assert again["fixed_issues"] is None


class TestFixTool:
    @pytest.mark.asyncio
    async def test_fix_markdown(self, corrupted_store):
        result = await taskgraph_fix_dependencies(FixDependenciesInput())
        assert "# Dependency Repair" in result
        assert "| 4 | 99 | dangling_reference |" in result
        assert "Remaining Issues" not in result


class TestDependencyGraphTool:
    @pytest.mark.asyncio
    async def test_json_uses_from_to(self, memory_store):
        params = DependencyGraphInput(response_format=ResponseFormat.JSON)
        data = json.loads(await taskgraph_dependency_graph(params))
        assert {"from": 1, "to": 2, "type": "dependency"} in data["edges"]
        assert len(data["nodes"]) == 3

    @pytest.mark.asyncio
    async def test_markdown(self, memory_store):
        result = await taskgraph_dependency_graph(DependencyGraphInput())
        assert "# Dependency Graph (3 tasks, 2 edges)" in result
        assert "#3 Build API [pending] <- #2" in result


# ============================================================================
# Analysis Tools
# ============================================================================


class TestNextTaskTool:
    @pytest.mark.asyncio
    async def test_markdown(self, memory_store):
        result = await taskgraph_next_task(NextTaskInput())
        assert "[1] Set up repository" in result
        assert "**Unblocks**: #2" in result

    @pytest.mark.asyncio
    async def test_concise(self, memory_store):
        result = await taskgraph_next_task(NextTaskInput(response_format=ResponseFormat.CONCISE))
        assert result.startswith(_format_task_concise(memory_store.get(1)))

    @pytest.mark.asyncio
    async def test_nothing_eligible_is_not_an_error(self):
        set_store(InMemoryTaskStore([{"id": 1, "status": "done"}]))
        params = NextTaskInput(response_format=ResponseFormat.JSON)
        data = json.loads(await taskgraph_next_task(params))
        assert data["task"] is None
        assert data["reasoning"].startswith("No eligible tasks")


class TestReadyTool:
    @pytest.mark.asyncio
    async def test_concise(self, selection_tasks):
        set_store(InMemoryTaskStore(selection_tasks))
        result = await taskgraph_ready(ReadyInput(limit=2, response_format=ResponseFormat.CONCISE))
        lines = result.splitlines()
        assert lines[0] == "2 ready task(s)"
        assert lines[1].startswith("1. #1: Task A")

    @pytest.mark.asyncio
    async def test_empty_markdown(self):
        set_store(InMemoryTaskStore([{"id": 1, "status": "pending", "dependencies": [7]}]))
        result = await taskgraph_ready(ReadyInput())
        assert "No tasks are ready" in result


class TestComplexityTools:
    @pytest.mark.asyncio
    async def test_analyze_markdown(self, memory_store):
        result = await taskgraph_analyze_complexity(AnalyzeComplexityInput(task_id=1))
        assert "**Score**: 2.5 / 5.0" in result
        assert "recommend decomposing into subtasks" in result

    @pytest.mark.asyncio
    async def test_analyze_missing(self, memory_store):
        result = await taskgraph_analyze_complexity(AnalyzeComplexityInput(task_id=50))
        assert result.startswith("Error: Task 50 not found")

    @pytest.mark.asyncio
    async def test_report_json(self, memory_store):
        params = ComplexityReportInput(response_format=ResponseFormat.JSON)
        data = json.loads(await taskgraph_complexity_report(params))
        assert data["summary"]["total_tasks"] == 3
        assert data["summary"]["average_complexity"] == 2.5
        assert data["summary"]["complexity_distribution"]["medium"] == 3

    @pytest.mark.asyncio
    async def test_report_empty(self):
        set_store(InMemoryTaskStore())
        result = await taskgraph_complexity_report(ComplexityReportInput())
        assert "No tasks found" in result


class TestJsonStoreTools:
    @pytest.mark.asyncio
    async def test_store_built_from_config(self, default_config, tasks_file):
        default_config.tasks_file = tasks_file
        set_store(None)
        await taskgraph_add_dependency(AddDependencyInput(task_id=3, depends_on=1))
        data = json.loads(tasks_file.read_text(encoding="utf-8"))
        assert data["tasks"][2]["dependencies"] == [2, 1]
        assert get_store().load_tasks()[2].dependencies == [2, 1]

    @pytest.mark.asyncio
    async def test_store_error(self, default_config, tmp_path):
        broken = tmp_path / "tasks.json"
        broken.write_text("[", encoding="utf-8")
        default_config.tasks_file = broken
        set_store(None)
        result = await taskgraph_next_task(NextTaskInput())
        assert result.startswith("Error: Failed to parse")
        assert "TASKGRAPH_MCP_TASKS_FILE" in result
