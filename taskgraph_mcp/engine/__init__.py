"""Dependency graph, next-task selection, and complexity scoring."""

from taskgraph_mcp.engine.complexity import (
    ComplexityReportAggregator,
    score_complexity,
    score_factors,
)
from taskgraph_mcp.engine.graph import DependencyGraph
from taskgraph_mcp.engine.policies import (
    CYCLE_BREAK_POLICIES,
    TIEBREAK_POLICIES,
    break_at_closing_edge,
    break_at_most_depended_upon,
    get_cycle_break_policy,
    get_tiebreak_policy,
    prefer_fewer_dependencies,
    prefer_more_dependents,
)
from taskgraph_mcp.engine.selector import NextTaskSelector

__all__ = [
    "DependencyGraph",
    "NextTaskSelector",
    "ComplexityReportAggregator",
    "score_complexity",
    "score_factors",
    "CYCLE_BREAK_POLICIES",
    "TIEBREAK_POLICIES",
    "break_at_most_depended_upon",
    "break_at_closing_edge",
    "prefer_more_dependents",
    "prefer_fewer_dependencies",
    "get_cycle_break_policy",
    "get_tiebreak_policy",
]
