"""
Dependency graph over the tasks of one scope.

Built from a snapshot of task records on every operation and discarded afterwards.
Nodes are task ids; an edge ``A -> B`` means task A cannot start until task B is
complete. Construction never fails: pre-existing problems (missing targets, self
references, repeated entries, cycles) are kept as loaded and surface through
``validate()`` until ``fix()`` repairs them.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable

from taskgraph_mcp.engine.policies import CycleBreakPolicy, break_at_most_depended_upon
from taskgraph_mcp.enums import IssueType
from taskgraph_mcp.errors import (
    CircularDependency,
    DependencyExists,
    DependencyNotFound,
    SelfDependency,
    TaskNotFound,
)
from taskgraph_mcp.models.results import (
    DependencyEdge,
    GraphEdge,
    GraphExport,
    GraphNode,
    Issue,
    RemovedEdge,
)
from taskgraph_mcp.models.task import TaskModel

logger = logging.getLogger(__name__)

_WHITE, _GRAY, _BLACK = 0, 1, 2


def _format_path(path: list[int]) -> str:
    return " -> ".join(str(t) for t in path)


class DependencyGraph:
    """Index-based adjacency view of a task set.

    Three structures are kept per task id:

    * ``_raw[A]``: the dependency list exactly as loaded, duplicates and all.
    * ``_forward[A]``: the distinct dependencies of A that exist in scope and are
      not A itself. Only these take part in traversal.
    * ``_reverse[B]``: the tasks whose forward list contains B (its dependents).
    """

    __slots__ = ("_tasks", "_raw", "_forward", "_reverse")

    def __init__(self, tasks: Iterable[TaskModel]) -> None:
        self._tasks: dict[int, TaskModel] = {}
        for task in tasks:
            # Ids are unique within a scope; keep the first record if a store repeats one
            self._tasks.setdefault(task.id, task)

        self._raw: dict[int, list[int]] = {tid: list(t.dependencies) for tid, t in self._tasks.items()}
        self._forward: dict[int, list[int]] = {}
        self._reverse: dict[int, set[int]] = {}

        for tid, deps in self._raw.items():
            forward: list[int] = []
            for dep in deps:
                if dep == tid or dep not in self._tasks or dep in forward:
                    continue
                forward.append(dep)
                self._reverse.setdefault(dep, set()).add(tid)
            self._forward[tid] = forward

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    @property
    def task_ids(self) -> list[int]:
        return sorted(self._tasks)

    def get_task(self, task_id: int) -> TaskModel:
        """Return the task with its current dependency list, or raise TaskNotFound."""
        if task_id not in self._tasks:
            raise TaskNotFound(task_id)
        task = self._tasks[task_id]
        return task.model_copy(update={"dependencies": list(self._raw[task_id])})

    def tasks(self) -> list[TaskModel]:
        return [self.get_task(tid) for tid in self.task_ids]

    def dependencies_of(self, task_id: int) -> list[int]:
        """Dependency ids as loaded, including invalid entries."""
        return list(self._raw.get(task_id, []))

    def dependents_of(self, task_id: int) -> list[int]:
        return sorted(self._reverse.get(task_id, set()))

    def in_degree(self, task_id: int) -> int:
        """Number of tasks that depend on ``task_id``."""
        return len(self._reverse.get(task_id, set()))

    def has_edge(self, task_id: int, depends_on: int) -> bool:
        return depends_on in self._raw.get(task_id, [])

    def edges(self) -> list[DependencyEdge]:
        """Every edge as loaded, in task-id order, repeats included."""
        return [DependencyEdge(task_id=tid, depends_on=dep) for tid in self.task_ids for dep in self._raw[tid]]

    def _successors(self, task_id: int) -> list[int]:
        return sorted(self._forward.get(task_id, []))

    def find_path(self, start: int, goal: int) -> list[int] | None:
        """
        Depth-first search along dependency edges from ``start`` to ``goal``.

        Returns the visited path ``[start, ..., goal]`` or None when ``goal`` is
        unreachable.
        """
        if start == goal:
            return [start]

        visited = {start}
        path = [start]
        pending = [iter(self._successors(start))]
        while pending:
            for dep in pending[-1]:
                if dep == goal:
                    return path + [dep]
                if dep not in visited:
                    visited.add(dep)
                    path.append(dep)
                    pending.append(iter(self._successors(dep)))
                    break
            else:
                pending.pop()
                path.pop()
        return None

    def find_cycles(self) -> list[list[int]]:
        """
        Detect cycles with white/gray/black depth-first coloring.

        Every back-edge into a gray node yields a cycle, read off the active stack
        from the back-edge target to the current node. Each cycle is returned once as
        a closed path ``[v, ..., u, v]`` where ``u -> v`` is the back-edge.
        """
        color = dict.fromkeys(self._tasks, _WHITE)
        cycles: list[list[int]] = []
        seen: set[frozenset[tuple[int, int]]] = set()

        for root in self.task_ids:
            if color[root] != _WHITE:
                continue
            color[root] = _GRAY
            stack = [root]
            pending = [iter(self._successors(root))]
            while pending:
                for dep in pending[-1]:
                    if color[dep] == _GRAY:
                        cycle = stack[stack.index(dep) :] + [dep]
                        key = frozenset(zip(cycle, cycle[1:]))
                        if key not in seen:
                            seen.add(key)
                            cycles.append(cycle)
                    elif color[dep] == _WHITE:
                        color[dep] = _GRAY
                        stack.append(dep)
                        pending.append(iter(self._successors(dep)))
                        break
                else:
                    color[stack.pop()] = _BLACK
                    pending.pop()

        if cycles:
            logger.debug("Found %d cycle(s): %s", len(cycles), [_format_path(c) for c in cycles])
        return cycles

    def is_acyclic(self) -> bool:
        return not self.find_cycles()

    def cyclic_task_ids(self) -> set[int]:
        """
        Ids of every task that sits on some cycle.

        ``find_cycles`` reports one cycle per back-edge and can miss cycles that pass
        through an already finished node, so membership comes from the strongly
        connected components (iterative Tarjan). Any component with more than one
        node is cyclic; self references never enter ``_forward``.
        """
        index: dict[int, int] = {}
        lowlink: dict[int, int] = {}
        on_stack: set[int] = set()
        stack: list[int] = []
        cyclic: set[int] = set()

        for root in self.task_ids:
            if root in index:
                continue
            index[root] = lowlink[root] = len(index)
            stack.append(root)
            on_stack.add(root)
            work = [(root, iter(self._successors(root)))]
            while work:
                node, successors = work[-1]
                for dep in successors:
                    if dep not in index:
                        index[dep] = lowlink[dep] = len(index)
                        stack.append(dep)
                        on_stack.add(dep)
                        work.append((dep, iter(self._successors(dep))))
                        break
                    if dep in on_stack:
                        lowlink[node] = min(lowlink[node], index[dep])
                else:
                    work.pop()
                    if work:
                        parent = work[-1][0]
                        lowlink[parent] = min(lowlink[parent], lowlink[node])
                    if lowlink[node] == index[node]:
                        component = []
                        while True:
                            member = stack.pop()
                            on_stack.discard(member)
                            component.append(member)
                            if member == node:
                                break
                        if len(component) > 1:
                            cyclic.update(component)
        return cyclic

    def validate(self) -> list[Issue]:
        """Scan every edge and report all invariant violations. Read-only."""
        issues: list[Issue] = []

        for tid in self.task_ids:
            counts = Counter(self._raw[tid])
            for dep in counts:
                if dep == tid:
                    issues.append(
                        Issue(
                            type=IssueType.SELF_DEPENDENCY,
                            task_id=tid,
                            depends_on=dep,
                            message=f"Task {tid} depends on itself",
                        )
                    )
                elif dep not in self._tasks:
                    issues.append(
                        Issue(
                            type=IssueType.DANGLING_REFERENCE,
                            task_id=tid,
                            depends_on=dep,
                            message=f"Task {tid} depends on missing task {dep}",
                        )
                    )
                if counts[dep] > 1:
                    issues.append(
                        Issue(
                            type=IssueType.DUPLICATE_EDGE,
                            task_id=tid,
                            depends_on=dep,
                            message=f"Task {tid} lists dependency {dep} {counts[dep]} times",
                        )
                    )

        for cycle in self.find_cycles():
            issues.append(
                Issue(
                    type=IssueType.CYCLIC_DEPENDENCY,
                    task_id=cycle[0],
                    depends_on=cycle[1],
                    cycle=cycle,
                    message=f"Circular dependency: {_format_path(cycle)}",
                )
            )

        return issues

    def invalid_tasks(self, issues: list[Issue] | None = None) -> set[int]:
        """Ids of tasks that own at least one invalid outgoing edge, cycle members included."""
        if issues is None:
            issues = self.validate()
        invalid: set[int] = set()
        has_cycle = False
        for issue in issues:
            if issue.type == IssueType.CYCLIC_DEPENDENCY:
                has_cycle = True
                invalid.update(issue.cycle)
            else:
                invalid.add(issue.task_id)
        if has_cycle:
            invalid |= self.cyclic_task_ids()
        return invalid

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _link(self, task_id: int, depends_on: int) -> None:
        self._raw[task_id].append(depends_on)
        if depends_on != task_id and depends_on in self._tasks and depends_on not in self._forward[task_id]:
            self._forward[task_id].append(depends_on)
            self._reverse.setdefault(depends_on, set()).add(task_id)

    def _unlink(self, task_id: int, depends_on: int) -> None:
        """Drop the last occurrence of the edge, keeping adjacency in step with what remains."""
        raw = self._raw[task_id]
        del raw[len(raw) - 1 - raw[::-1].index(depends_on)]
        if depends_on not in self._raw[task_id] and depends_on in self._forward[task_id]:
            self._forward[task_id].remove(depends_on)
            self._reverse[depends_on].discard(task_id)

    def add_edge(self, task_id: int, depends_on: int) -> DependencyEdge:
        """
        Add ``task_id -> depends_on`` after checking every edge invariant.

        Raises:
            TaskNotFound: either id is not in scope
            SelfDependency: the ids are equal
            DependencyExists: the edge is already present
            CircularDependency: ``task_id`` is reachable from ``depends_on``
        """
        for tid in (task_id, depends_on):
            if tid not in self._tasks:
                raise TaskNotFound(tid)
        if task_id == depends_on:
            raise SelfDependency(task_id)
        if self.has_edge(task_id, depends_on):
            raise DependencyExists(task_id, depends_on)

        path = self.find_path(depends_on, task_id)
        if path is not None:
            raise CircularDependency(task_id, depends_on, [task_id] + path)

        self._link(task_id, depends_on)
        return DependencyEdge(task_id=task_id, depends_on=depends_on)

    def remove_edge(self, task_id: int, depends_on: int) -> DependencyEdge:
        """
        Remove ``task_id -> depends_on``. Dangling and self edges may be removed too.

        Raises:
            TaskNotFound: ``task_id`` is not in scope
            DependencyNotFound: the edge is absent
        """
        if task_id not in self._tasks:
            raise TaskNotFound(task_id)
        if not self.has_edge(task_id, depends_on):
            raise DependencyNotFound(task_id, depends_on)

        self._unlink(task_id, depends_on)
        return DependencyEdge(task_id=task_id, depends_on=depends_on)

    def fix(self, policy: CycleBreakPolicy = break_at_most_depended_upon) -> list[RemovedEdge]:
        """
        Repair the graph in place so that ``validate()`` returns no issues.

        Steps run in a fixed order: repeated entries (first occurrence kept),
        references to missing tasks, self references, then cycles. Each cycle pass
        breaks every cycle found by removing the single edge chosen by ``policy``
        and stops once a pass finds none; every pass removes at least one edge.

        Returns:
            The removed edges in removal order, each tagged with its issue type
        """
        removed: list[RemovedEdge] = []

        def drop(task_id: int, depends_on: int, issue_type: IssueType, reason: str) -> None:
            self._unlink(task_id, depends_on)
            removed.append(RemovedEdge(task_id=task_id, depends_on=depends_on, issue_type=issue_type, reason=reason))

        for tid in self.task_ids:
            seen: set[int] = set()
            for dep in list(self._raw[tid]):
                if dep in seen:
                    drop(tid, dep, IssueType.DUPLICATE_EDGE, f"Duplicate dependency {tid} -> {dep}")
                seen.add(dep)

        for tid in self.task_ids:
            for dep in list(self._raw[tid]):
                if dep != tid and dep not in self._tasks:
                    drop(tid, dep, IssueType.DANGLING_REFERENCE, f"Task {dep} does not exist")

        for tid in self.task_ids:
            if tid in self._raw[tid]:
                drop(tid, tid, IssueType.SELF_DEPENDENCY, f"Task {tid} depends on itself")

        while cycles := self.find_cycles():
            for cycle in cycles:
                # An earlier removal in this pass may already have broken it
                if not all(b in self._forward[a] for a, b in zip(cycle, cycle[1:])):
                    continue
                edge = policy(self, cycle)
                drop(
                    edge.task_id,
                    edge.depends_on,
                    IssueType.CYCLIC_DEPENDENCY,
                    f"Breaks cycle {_format_path(cycle)}",
                )

        if removed:
            logger.info("Repair removed %d dependency edge(s)", len(removed))
        return removed

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export(self) -> GraphExport:
        """Nodes and valid edges for rendering, plus any outstanding issues."""
        nodes = [
            GraphNode(
                id=tid,
                title=self._tasks[tid].title,
                status=self._tasks[tid].status,
                priority=self._tasks[tid].priority,
                dependents=self.in_degree(tid),
            )
            for tid in self.task_ids
        ]
        edges = [GraphEdge(from_id=dep, to_id=tid) for tid in self.task_ids for dep in self._successors(tid)]
        return GraphExport(nodes=nodes, edges=edges, issues=self.validate())
