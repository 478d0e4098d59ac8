"""
Engine operations over a task store.

Each call loads the scope's tasks, builds a fresh DependencyGraph, runs one algorithm,
and writes back only the edge mutations it made. Errors are raised as
``TaskGraphError`` subclasses; an empty next-task result is not an error.
"""

import logging
from collections.abc import Iterable

from taskgraph_mcp.config import ServerConfig, get_config
from taskgraph_mcp.engine.complexity import ComplexityReportAggregator, score_complexity
from taskgraph_mcp.engine.graph import DependencyGraph
from taskgraph_mcp.engine.selector import NextTaskSelector
from taskgraph_mcp.enums import TaskStatus
from taskgraph_mcp.errors import TaskGraphError, TaskNotFound
from taskgraph_mcp.models.results import (
    ComplexityAssessment,
    ComplexityReport,
    DependencyEdge,
    FixResult,
    GraphExport,
    NextTaskResult,
    RankedTask,
    RemovedEdge,
    ValidationResult,
)
from taskgraph_mcp.models.task import TaskModel
from taskgraph_mcp.utils.store import TaskStore

logger = logging.getLogger(__name__)


def _build_graph(store: TaskStore, project: str | None) -> DependencyGraph:
    return DependencyGraph(store.load_tasks(project))


def _summarize_removals(removed: list[RemovedEdge]) -> str:
    if not removed:
        return "No dependency edges needed removal"
    counts: dict[str, int] = {}
    for edge in removed:
        counts[edge.issue_type.value] = counts.get(edge.issue_type.value, 0) + 1
    detail = ", ".join(f"{n} {kind}" for kind, n in counts.items())
    return f"Removed {len(removed)} dependency edge(s) ({detail})"


def _persist_removals(store: TaskStore, removed: list[RemovedEdge]) -> None:
    if removed:
        store.remove_dependencies(DependencyEdge(task_id=r.task_id, depends_on=r.depends_on) for r in removed)


# ============================================================================
# Dependency Operations
# ============================================================================


def add_dependency(store: TaskStore, task_id: int, depends_on: int, project: str | None = None) -> TaskModel:
    """
    Make ``task_id`` wait on ``depends_on``.

    Raises:
        TaskNotFound, SelfDependency, DependencyExists, CircularDependency
    """
    graph = _build_graph(store, project)
    try:
        graph.add_edge(task_id, depends_on)
    except TaskGraphError as e:
        logger.warning("Rejected dependency %d -> %d: %s", task_id, depends_on, e.message)
        raise

    store.add_dependency(task_id, depends_on)
    logger.info("Added dependency %d -> %d", task_id, depends_on)
    return graph.get_task(task_id)


def remove_dependency(store: TaskStore, task_id: int, depends_on: int, project: str | None = None) -> TaskModel:
    """
    Drop the ``task_id -> depends_on`` edge.

    Raises:
        TaskNotFound, DependencyNotFound
    """
    graph = _build_graph(store, project)
    try:
        graph.remove_edge(task_id, depends_on)
    except TaskGraphError as e:
        logger.warning("Could not remove dependency %d -> %d: %s", task_id, depends_on, e.message)
        raise

    store.remove_dependency(task_id, depends_on)
    logger.info("Removed dependency %d -> %d", task_id, depends_on)
    return graph.get_task(task_id)


def validate_dependencies(
    store: TaskStore,
    auto_fix: bool = False,
    project: str | None = None,
    config: ServerConfig | None = None,
) -> ValidationResult:
    """Report every dependency issue in scope, repairing them when ``auto_fix`` is set."""
    config = config or get_config()
    graph = _build_graph(store, project)
    issues = graph.validate()

    if not issues:
        return ValidationResult(valid=True, issues=[], message="All dependencies are valid")

    logger.warning("Found %d dependency issue(s)", len(issues))
    if not auto_fix:
        return ValidationResult(valid=False, issues=issues, message=f"Found {len(issues)} dependency issue(s)")

    removed = graph.fix(config.cycle_breaker)
    _persist_removals(store, removed)
    remaining = graph.validate()
    if remaining:
        logger.warning("%d dependency issue(s) remain after repair", len(remaining))
    return ValidationResult(
        valid=False,
        issues=issues,
        fixed_issues=removed,
        remaining_issues=remaining,
        message=f"Found {len(issues)} dependency issue(s). {_summarize_removals(removed)}",
    )


def fix_dependencies(
    store: TaskStore,
    project: str | None = None,
    config: ServerConfig | None = None,
) -> FixResult:
    """Repair the scope's dependency graph and report the removed edges."""
    config = config or get_config()
    graph = _build_graph(store, project)
    removed = graph.fix(config.cycle_breaker)
    _persist_removals(store, removed)
    return FixResult(
        fixed_issues=removed,
        remaining_issues=graph.validate(),
        message=_summarize_removals(removed),
    )


def dependency_graph(store: TaskStore, project: str | None = None) -> GraphExport:
    """Nodes, edges, and outstanding issues of the scope's graph."""
    return _build_graph(store, project).export()


# ============================================================================
# Analysis Operations
# ============================================================================


def next_task(
    store: TaskStore,
    project: str | None = None,
    config: ServerConfig | None = None,
) -> NextTaskResult:
    """Select the single task to work on next."""
    config = config or get_config()
    selector = NextTaskSelector(_build_graph(store, project), tiebreak=config.tiebreaker)
    return selector.select()


def ready_tasks(
    store: TaskStore,
    project: str | None = None,
    limit: int | None = None,
    config: ServerConfig | None = None,
) -> list[RankedTask]:
    """Every eligible task in selection order."""
    config = config or get_config()
    ranked = NextTaskSelector(_build_graph(store, project), tiebreak=config.tiebreaker).rank()
    return ranked[:limit] if limit else ranked


def analyze_complexity(store: TaskStore, task_id: int, project: str | None = None) -> ComplexityAssessment:
    """
    Score one task.

    Raises:
        TaskNotFound
    """
    for task in store.load_tasks(project):
        if task.id == task_id:
            return score_complexity(task)
    raise TaskNotFound(task_id)


def complexity_report(
    store: TaskStore,
    project: str | None = None,
    statuses: Iterable[TaskStatus] | None = None,
    task_ids: Iterable[int] | None = None,
    config: ServerConfig | None = None,
) -> ComplexityReport:
    """Score every task matching the filters and summarise the distribution."""
    config = config or get_config()
    tasks = store.load_tasks(project)
    if statuses:
        wanted_statuses = set(statuses)
        tasks = [t for t in tasks if t.status in wanted_statuses]
    if task_ids:
        wanted_ids = set(task_ids)
        tasks = [t for t in tasks if t.id in wanted_ids]

    aggregator = ComplexityReportAggregator(high_complexity_threshold=config.high_complexity_threshold)
    return aggregator.build(tasks)
