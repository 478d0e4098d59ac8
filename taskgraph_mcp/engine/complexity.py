"""Deterministic complexity scoring and reporting."""

import logging
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from taskgraph_mcp.enums import Priority
from taskgraph_mcp.models.results import (
    ComplexityAssessment,
    ComplexityDistribution,
    ComplexityFactors,
    ComplexityReport,
    ComplexitySummary,
)
from taskgraph_mcp.models.task import TaskModel

logger = logging.getLogger(__name__)

BASE_SCORE = 2.5
MAX_SCORE = 5.0
DEFAULT_HIGH_COMPLEXITY_THRESHOLD = 4.0

RISK_MANY_DEPENDENCIES = "many dependencies"
RISK_NO_BREAKDOWN = "complex task with no breakdown"
RISK_HIGH_PRIORITY_WITH_DEPENDENCIES = "high priority with dependencies"

SUGGEST_DECOMPOSE = "recommend decomposing into subtasks"
SUGGEST_SIMPLIFY_DEPENDENCIES = "simplify dependency set"
SUGGEST_STAGED = "use a staged implementation approach"


def round_half_up(value: float, places: int = 1) -> float:
    """Round halves away from zero, independent of binary float representation."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _raw_score(subtask_count: int, dependency_count: int, description_length: int, priority: Priority) -> float:
    score = BASE_SCORE
    if subtask_count > 5:
        score += 1.0
    if subtask_count > 10:
        score += 1.0
    if dependency_count > 2:
        score += 0.5
    if dependency_count > 5:
        score += 0.5
    if description_length > 500:
        score += 0.5
    if description_length > 1000:
        score += 0.5
    if priority in (Priority.HIGH, Priority.CRITICAL):
        score += 0.5
    return round_half_up(min(score, MAX_SCORE))


def recommended_subtasks(score: float) -> int:
    if score <= 3:
        return 3
    if score <= 4:
        return 5
    return 8


def score_factors(factors: ComplexityFactors) -> ComplexityAssessment:
    """
    Score a task from its structural attributes.

    Total over every input; increasing any factor never lowers the score.

    Args:
        factors: Subtask count, dependency count, text length, and priority

    Returns:
        ComplexityAssessment without task identity fields
    """
    score = _raw_score(
        factors.subtask_count,
        factors.dependency_count,
        factors.description_length,
        factors.priority,
    )

    risk_factors: list[str] = []
    if factors.dependency_count > 3:
        risk_factors.append(RISK_MANY_DEPENDENCIES)
    if factors.subtask_count == 0 and score > 3:
        risk_factors.append(RISK_NO_BREAKDOWN)
    if factors.priority == Priority.HIGH and factors.dependency_count > 0:
        risk_factors.append(RISK_HIGH_PRIORITY_WITH_DEPENDENCIES)

    suggestions: list[str] = []
    if factors.subtask_count == 0 and score > 2:
        suggestions.append(SUGGEST_DECOMPOSE)
    if factors.dependency_count > 5:
        suggestions.append(SUGGEST_SIMPLIFY_DEPENDENCIES)
    if score > 4:
        suggestions.append(SUGGEST_STAGED)

    return ComplexityAssessment(
        score=score,
        recommended_subtasks=recommended_subtasks(score),
        estimated_hours=int(round_half_up(score * 4, 0)),
        risk_factors=risk_factors,
        suggestions=suggestions,
        factors=factors,
    )


def score_complexity(task: TaskModel) -> ComplexityAssessment:
    """Score one task record."""
    factors = ComplexityFactors(
        subtask_count=task.subtask_count,
        dependency_count=task.dependency_count,
        description_length=task.description_length,
        priority=task.priority,
    )
    assessment = score_factors(factors)
    assessment.task_id = task.id
    assessment.title = task.title
    assessment.status = task.status
    logger.debug("Task %d scored %.1f", task.id, assessment.score)
    return assessment


def bucket(score: float) -> str:
    """Distribution bucket name for a score."""
    if score <= 2.0:
        return "low"
    if score <= 3.5:
        return "medium"
    if score <= 4.5:
        return "high"
    return "very_high"


class ComplexityReportAggregator:
    """Score every task in scope and summarise the distribution."""

    def __init__(self, high_complexity_threshold: float = DEFAULT_HIGH_COMPLEXITY_THRESHOLD) -> None:
        self.high_complexity_threshold = high_complexity_threshold

    def build(self, tasks: Iterable[TaskModel]) -> ComplexityReport:
        assessments = [score_complexity(t) for t in sorted(tasks, key=lambda t: t.id)]

        distribution = ComplexityDistribution()
        for a in assessments:
            name = bucket(a.score)
            setattr(distribution, name, getattr(distribution, name) + 1)

        average = 0.0
        if assessments:
            average = round_half_up(sum(a.score for a in assessments) / len(assessments))

        high = sorted(
            (a for a in assessments if a.score >= self.high_complexity_threshold),
            key=lambda a: (-a.score, a.task_id),
        )

        return ComplexityReport(
            tasks=assessments,
            summary=ComplexitySummary(
                total_tasks=len(assessments),
                average_complexity=average,
                complexity_distribution=distribution,
            ),
            high_complexity_tasks=[a.task_id for a in high],
            recommendations=self._recommend(assessments, high, average),
        )

    def _recommend(
        self,
        assessments: list[ComplexityAssessment],
        high: list[ComplexityAssessment],
        average: float,
    ) -> list[str]:
        recommendations = []
        for a in high:
            if a.factors.subtask_count == 0:
                recommendations.append(
                    f"Expand task {a.task_id} into {a.recommended_subtasks} subtasks (score {a.score})"
                )
        for a in assessments:
            if RISK_MANY_DEPENDENCIES in a.risk_factors:
                recommendations.append(f"Review the dependency set of task {a.task_id}")
        if average > 3.5:
            recommendations.append("Average complexity is high; consider splitting work into smaller tasks")
        return recommendations
