"""Dependency-driven calendar scheduling for project tasks."""

from .errors import (
    CyclicDependencyError,
    DuplicateTaskError,
    InvalidInputError,
    SchedulingError,
    UnknownTaskError,
)
from .task_graph import Task, TaskGraph
from .scheduling import critical_chain, effective_duration, schedule

__all__ = [
    "CyclicDependencyError",
    "DuplicateTaskError",
    "InvalidInputError",
    "SchedulingError",
    "UnknownTaskError",
    "Task",
    "TaskGraph",
    "critical_chain",
    "effective_duration",
    "schedule",
]
