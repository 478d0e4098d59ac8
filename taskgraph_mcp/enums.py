"""Enums for TaskGraph MCP."""

from enum import Enum


class ResponseFormat(str, Enum):
    """Output format for tool responses."""

    CONCISE = "concise"  # Minimal output for chaining
    MARKDOWN = "markdown"  # Human-readable (default)
    JSON = "json"  # Machine-readable with all fields


class TaskStatus(str, Enum):
    """Task lifecycle states."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    DONE = "done"
    COMPLETED = "completed"
    BLOCKED = "blocked"
    REVIEW = "review"
    DEFERRED = "deferred"
    CANCELLED = "cancelled"


# Statuses that satisfy a dependency
COMPLETED_STATUSES = frozenset({TaskStatus.DONE, TaskStatus.COMPLETED})


class Priority(str, Enum):
    """Task priority levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        """Numeric level, higher is more urgent."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    Priority.LOW: 0,
    Priority.MEDIUM: 1,
    Priority.HIGH: 2,
    Priority.CRITICAL: 3,
}


class IssueType(str, Enum):
    """Kinds of graph-wide dependency problems."""

    DANGLING_REFERENCE = "dangling_reference"
    SELF_DEPENDENCY = "self_dependency"
    DUPLICATE_EDGE = "duplicate_edge"
    CYCLIC_DEPENDENCY = "cyclic_dependency"
