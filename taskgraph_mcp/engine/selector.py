"""Next-task selection over a dependency graph."""

from __future__ import annotations

import logging

from taskgraph_mcp.engine.graph import DependencyGraph
from taskgraph_mcp.engine.policies import TieBreakPolicy, prefer_more_dependents
from taskgraph_mcp.enums import COMPLETED_STATUSES, TaskStatus
from taskgraph_mcp.models.results import NextTaskResult, RankedTask
from taskgraph_mcp.models.task import TaskModel

logger = logging.getLogger(__name__)

# Dependents in these states are not waiting on anything
_SETTLED_STATUSES = COMPLETED_STATUSES | {TaskStatus.CANCELLED}


class NextTaskSelector:
    """
    Pick the task to work on next.

    A task is eligible when it is pending, owns no invalid dependency edge, and every
    dependency resolves to a completed task. Eligible tasks are ordered by priority
    (critical first), then by ``tiebreak``, then by lowest id.
    """

    def __init__(self, graph: DependencyGraph, tiebreak: TieBreakPolicy = prefer_more_dependents) -> None:
        self.graph = graph
        self.tiebreak = tiebreak
        self._invalid = graph.invalid_tasks()
        self._completed = {t.id for t in graph.tasks() if t.status in COMPLETED_STATUSES}

    def is_eligible(self, task: TaskModel) -> bool:
        if task.status != TaskStatus.PENDING or task.id in self._invalid:
            return False
        return all(dep in self._completed for dep in self.graph.dependencies_of(task.id))

    def waiting_dependents(self, task_id: int) -> list[int]:
        """Unfinished tasks that list ``task_id`` as a dependency."""
        return [
            tid for tid in self.graph.dependents_of(task_id) if self.graph.get_task(tid).status not in _SETTLED_STATUSES
        ]

    def unblocked_by(self, task_id: int) -> list[int]:
        """Waiting dependents whose only unfinished dependency is ``task_id``."""
        unblocked = []
        for tid in self.waiting_dependents(task_id):
            others = [d for d in self.graph.dependencies_of(tid) if d != task_id]
            if all(d in self._completed for d in others):
                unblocked.append(tid)
        return unblocked

    def rank(self) -> list[RankedTask]:
        """All eligible tasks in selection order."""
        candidates = []
        for task in self.graph.tasks():
            if not self.is_eligible(task):
                continue
            waiting = len(self.waiting_dependents(task.id))
            key = (-task.priority.rank, self.tiebreak(task, waiting), task.id)
            candidates.append((key, task, waiting))

        candidates.sort(key=lambda c: c[0])

        ranked: list[RankedTask] = []
        for position, (_, task, waiting) in enumerate(candidates, 1):
            unblocks = self.unblocked_by(task.id)
            reasons = [f"Priority: {task.priority.value}"]
            if waiting:
                reasons.append(f"{waiting} task(s) waiting on it")
            if unblocks:
                reasons.append(f"Unblocks {len(unblocks)} task(s)")
            if task.dependencies:
                reasons.append(f"All {len(task.dependencies)} dependencies complete")
            ranked.append(
                RankedTask(task=task, rank=position, waiting_dependents=waiting, unblocks=unblocks, reasons=reasons)
            )
        return ranked

    def select(self) -> NextTaskResult:
        """Return the single best task, or an explained empty result."""
        total = len(self.graph)
        if total == 0:
            return NextTaskResult(
                task=None,
                reasoning="No tasks found in this scope.",
                recommendation="Create tasks or parse a PRD to get started.",
            )

        ranked = self.rank()
        if not ranked:
            return NextTaskResult(
                task=None,
                reasoning=self._explain_empty(),
                recommendation="Complete in-progress work or resolve blocked dependencies.",
            )

        best = ranked[0]
        recommendation = f"Start task {best.task.id}"
        if best.task.title:
            recommendation += f": {best.task.title}"
        logger.debug("Selected task %d out of %d eligible", best.task.id, len(ranked))
        reasoning = (
            f"Task {best.task.id} has {best.task.priority.value} priority and its dependencies are satisfied; "
            f"completing it unblocks {len(best.unblocks)} dependent task(s)."
        )
        return NextTaskResult(
            task=best.task,
            reasoning=reasoning,
            recommendation=recommendation,
            unblocks=best.unblocks,
            eligible_count=len(ranked),
        )

    def _explain_empty(self) -> str:
        tasks = self.graph.tasks()
        done = sum(1 for t in tasks if t.status in COMPLETED_STATUSES)
        cancelled = sum(1 for t in tasks if t.status == TaskStatus.CANCELLED)
        waiting = sum(1 for t in tasks if t.status == TaskStatus.PENDING)
        other = len(tasks) - done - cancelled - waiting
        parts = [f"{done} done", f"{cancelled} cancelled", f"{waiting} pending but blocked"]
        if other:
            parts.append(f"{other} in progress, in review, blocked, or deferred")
        return f"No eligible tasks: all {len(tasks)} task(s) are blocked, done, or cancelled ({', '.join(parts)})."
