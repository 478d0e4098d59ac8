"""Tests for complexity scoring and the complexity report."""

import pytest

from taskgraph_mcp import ComplexityReportAggregator, Priority, TaskModel
from taskgraph_mcp.engine.complexity import (
    RISK_HIGH_PRIORITY_WITH_DEPENDENCIES,
    RISK_MANY_DEPENDENCIES,
    RISK_NO_BREAKDOWN,
    SUGGEST_DECOMPOSE,
    SUGGEST_SIMPLIFY_DEPENDENCIES,
    SUGGEST_STAGED,
    bucket,
    recommended_subtasks,
    round_half_up,
    score_complexity,
    score_factors,
)
from taskgraph_mcp.models.results import ComplexityFactors


def _factors(subtasks=0, deps=0, length=0, priority=Priority.MEDIUM) -> ComplexityFactors:
    return ComplexityFactors(
        subtask_count=subtasks,
        dependency_count=deps,
        description_length=length,
        priority=priority,
    )


def _task(task_id=1, subtasks=0, deps=(), description="", details="", priority="medium") -> TaskModel:
    return TaskModel(
        id=task_id,
        title=f"Task {task_id}",
        description=description,
        details=details,
        priority=priority,
        dependencies=list(deps),
        subtasks=[{"id": i, "title": f"Sub {i}"} for i in range(subtasks)],
    )


class TestScoreFactors:
    """Tests for the scoring formula."""

    def test_plain_medium_task(self):
        result = score_factors(_factors(length=50))
        assert result.score == 2.5
        assert result.recommended_subtasks == 3
        assert result.estimated_hours == 10
        assert result.risk_factors == []
        # 2.5 already clears the "> 2" decomposition threshold
        assert result.suggestions == [SUGGEST_DECOMPOSE]

    def test_heavy_high_priority_task_is_capped(self):
        result = score_factors(_factors(subtasks=12, deps=6, length=1200, priority=Priority.HIGH))
        assert result.score == 5.0
        assert result.recommended_subtasks == 8
        assert result.estimated_hours == 20
        assert RISK_MANY_DEPENDENCIES in result.risk_factors
        assert RISK_HIGH_PRIORITY_WITH_DEPENDENCIES in result.risk_factors
        assert RISK_NO_BREAKDOWN not in result.risk_factors
        assert result.suggestions == [SUGGEST_SIMPLIFY_DEPENDENCIES, SUGGEST_STAGED]

    @pytest.mark.parametrize(
        "factors,expected",
        [
            (dict(subtasks=5), 2.5),
            (dict(subtasks=6), 3.5),
            (dict(subtasks=11), 4.5),
            (dict(deps=3), 3.0),
            (dict(deps=6), 3.5),
            (dict(length=501), 3.0),
            (dict(length=1001), 3.5),
            (dict(priority=Priority.CRITICAL), 3.0),
            (dict(priority=Priority.LOW), 2.5),
        ],
    )
    def test_thresholds(self, factors, expected):
        assert score_factors(_factors(**factors)).score == expected

    def test_critical_priority_not_flagged_as_high_risk(self):
        result = score_factors(_factors(deps=1, priority=Priority.CRITICAL))
        assert RISK_HIGH_PRIORITY_WITH_DEPENDENCIES not in result.risk_factors

    def test_no_breakdown_risk(self):
        result = score_factors(_factors(length=1001))
        assert result.score == 3.5
        assert result.risk_factors == [RISK_NO_BREAKDOWN]

    def test_estimated_hours_rounds_half_up(self):
        # 3.5 * 4 == 14, 4.5 * 4 == 18
        assert score_factors(_factors(subtasks=6)).estimated_hours == 14
        assert score_factors(_factors(subtasks=11)).estimated_hours == 18

    def test_recommended_subtasks_boundaries(self):
        assert recommended_subtasks(3.0) == 3
        assert recommended_subtasks(3.5) == 5
        assert recommended_subtasks(4.0) == 5
        assert recommended_subtasks(4.5) == 8

    def test_round_half_up(self):
        assert round_half_up(2.25) == 2.3
        assert round_half_up(2.35) == 2.4
        assert round_half_up(10.5, 0) == 11.0


class TestScoreComplexity:
    """Tests for scoring task records."""

    def test_uses_description_and_details(self):
        assessment = score_complexity(_task(description="x" * 300, details="y" * 300))
        assert assessment.factors.description_length == 600
        assert assessment.score == 3.0

    def test_identity_fields(self):
        assessment = score_complexity(_task(task_id=7, subtasks=2))
        assert assessment.task_id == 7
        assert assessment.title == "Task 7"
        assert assessment.factors.subtask_count == 2
        assert SUGGEST_DECOMPOSE not in assessment.suggestions

    def test_counts_raw_dependencies(self):
        assessment = score_complexity(_task(deps=[2, 3, 4]))
        assert assessment.factors.dependency_count == 3
        assert assessment.score == 3.0


class TestBucket:
    @pytest.mark.parametrize(
        "score,name",
        [
            (1.0, "low"),
            (2.0, "low"),
            (2.5, "medium"),
            (3.5, "medium"),
            (4.0, "high"),
            (4.5, "high"),
            (5.0, "very_high"),
        ],
    )
    def test_bucket(self, score, name):
        assert bucket(score) == name


class TestComplexityReportAggregator:
    """Tests for the aggregated report."""

    def test_empty_report(self):
        report = ComplexityReportAggregator().build([])
        assert report.tasks == []
        assert report.summary.total_tasks == 0
        assert report.summary.average_complexity == 0.0
        dist = report.summary.complexity_distribution
        assert (dist.low, dist.medium, dist.high, dist.very_high) == (0, 0, 0, 0)
        assert report.high_complexity_tasks == []
        assert report.recommendations == []

    def test_distribution_and_average(self):
        tasks = [
            _task(task_id=3),
            _task(task_id=1, subtasks=11, priority="high", deps=[5, 6, 7, 8, 9, 10]),
            _task(task_id=2, subtasks=6, description="z" * 600),
        ]
        report = ComplexityReportAggregator().build(tasks)
        assert [a.task_id for a in report.tasks] == [1, 2, 3]
        assert [a.score for a in report.tasks] == [5.0, 4.0, 2.5]
        dist = report.summary.complexity_distribution
        assert (dist.low, dist.medium, dist.high, dist.very_high) == (0, 1, 1, 1)
        # (5.0 + 4.0 + 2.5) / 3 = 3.8333
        assert report.summary.average_complexity == 3.8
        assert report.high_complexity_tasks == [1, 2]

    def test_recommendations(self):
        tasks = [
            _task(task_id=1, deps=[2, 3, 4, 5], description="a" * 1200, priority="high"),
            _task(task_id=2),
        ]
        report = ComplexityReportAggregator().build(tasks)
        assert report.tasks[0].score == 4.5
        assert report.recommendations[0] == "Expand task 1 into 8 subtasks (score 4.5)"
        assert "Review the dependency set of task 1" in report.recommendations

    def test_threshold_is_configurable(self):
        tasks = [_task(task_id=1, deps=[2, 3, 4])]
        assert ComplexityReportAggregator().build(tasks).high_complexity_tasks == []
        assert ComplexityReportAggregator(high_complexity_threshold=3.0).build(tasks).high_complexity_tasks == [1]
