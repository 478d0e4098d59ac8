"""Swappable policies for cycle repair and next-task tie-breaking."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from taskgraph_mcp.models.results import DependencyEdge
from taskgraph_mcp.models.task import TaskModel

if TYPE_CHECKING:
    from taskgraph_mcp.engine.graph import DependencyGraph

# Given the live graph and a closed cycle path [a, b, ..., a], pick the edge to drop.
CycleBreakPolicy = Callable[["DependencyGraph", list[int]], DependencyEdge]

# Given an eligible task and how many unfinished tasks wait on it, return a sort key
# component where lower sorts first.
TieBreakPolicy = Callable[[TaskModel, int], int]


def cycle_edges(cycle: list[int]) -> list[DependencyEdge]:
    """Edges of a closed cycle path, in path order."""
    return [DependencyEdge(task_id=a, depends_on=b) for a, b in zip(cycle, cycle[1:])]


# ============================================================================
# Cycle Break Policies
# ============================================================================


def break_at_most_depended_upon(graph: DependencyGraph, cycle: list[int]) -> DependencyEdge:
    """
    Drop the edge whose target has the highest in-degree.

    Ties go to the lowest target id, then the lowest source id.
    """
    return min(
        cycle_edges(cycle),
        key=lambda e: (-graph.in_degree(e.depends_on), e.depends_on, e.task_id),
    )


def break_at_closing_edge(graph: DependencyGraph, cycle: list[int]) -> DependencyEdge:
    """Drop the back-edge that closed the cycle during traversal."""
    return DependencyEdge(task_id=cycle[-2], depends_on=cycle[-1])


CYCLE_BREAK_POLICIES: dict[str, CycleBreakPolicy] = {
    "max-in-degree": break_at_most_depended_upon,
    "closing-edge": break_at_closing_edge,
}

DEFAULT_CYCLE_BREAK_POLICY = "max-in-degree"


# ============================================================================
# Next Task Tie-Break Policies
# ============================================================================


def prefer_more_dependents(task: TaskModel, waiting_dependents: int) -> int:
    return -waiting_dependents


def prefer_fewer_dependencies(task: TaskModel, waiting_dependents: int) -> int:
    return task.dependency_count


TIEBREAK_POLICIES: dict[str, TieBreakPolicy] = {
    "dependents": prefer_more_dependents,
    "dependencies": prefer_fewer_dependencies,
}

DEFAULT_TIEBREAK_POLICY = "dependents"


def get_cycle_break_policy(name: str) -> CycleBreakPolicy:
    try:
        return CYCLE_BREAK_POLICIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown cycle break policy '{name}'. Valid options: {', '.join(sorted(CYCLE_BREAK_POLICIES))}"
        ) from None


def get_tiebreak_policy(name: str) -> TieBreakPolicy:
    try:
        return TIEBREAK_POLICIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown tie-break policy '{name}'. Valid options: {', '.join(sorted(TIEBREAK_POLICIES))}"
        ) from None
