from __future__ import annotations

from typing import Optional, Sequence

__all__ = [
    "SchedulingError",
    "DuplicateTaskError",
    "UnknownTaskError",
    "CyclicDependencyError",
    "InvalidInputError",
    "SelfDependencyError",
]


class SchedulingError(Exception):
    """Base class for errors raised while building or scheduling tasks."""

    def __init__(self, code: str, hint: str):
        self.code = code
        self.hint = hint
        super().__init__(f"{code}: {hint}")


class DuplicateTaskError(SchedulingError):
    """Raised when a task id appears more than once."""

    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__("TASK/DUPLICATE", f"duplicate task id {task_id}")


class UnknownTaskError(SchedulingError):
    """Raised when a task id does not resolve within a graph."""

    def __init__(self, task_id: int, referenced_by: Optional[int] = None):
        self.task_id = task_id
        self.referenced_by = referenced_by
        if referenced_by is None:
            hint = f"unknown task id {task_id}"
        else:
            hint = f"unknown dependency {task_id} of task {referenced_by}"
        super().__init__("TASK/UNKNOWN", hint)


class CyclicDependencyError(SchedulingError):
    """Raised when the dependencies of a task loop back onto themselves.

    ``cycle`` holds the offending ids, each depending on the next, with the first id
    repeated at the end, e.g. ``[1, 2, 1]``.
    """

    def __init__(self, cycle: Sequence[int]):
        self.cycle = list(cycle)
        path = " -> ".join(str(tid) for tid in self.cycle)
        super().__init__("TASK/CYCLE", f"dependency cycle {path}")


class InvalidInputError(SchedulingError, ValueError):
    """Raised for malformed task input (unparsable numbers, self-dependency)."""

    def __init__(self, hint: str, task_id: Optional[int] = None):
        self.task_id = task_id
        super().__init__("INPUT/INVALID", hint)


class SelfDependencyError(InvalidInputError):
    """Raised when a task lists its own id among its dependencies."""

    def __init__(self, task_id: int):
        super().__init__(f"task {task_id} cannot depend on itself", task_id=task_id)
