from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

import networkx as nx

from .errors import (
    CyclicDependencyError,
    DuplicateTaskError,
    InvalidInputError,
    SelfDependencyError,
    UnknownTaskError,
)
from .logging_setup import get_logger

__all__ = ["Task", "TaskGraph"]

logger = get_logger()


def _is_whole(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class Task:
    """A unit of work with a duration in days and optional dependencies.

    ``dependencies`` may be given as ``None`` or any iterable of ids and is
    stored as a tuple.  ``schedule_start`` and ``schedule_end`` stay ``None``
    until the task has been through :func:`projsched.scheduling.schedule`.
    """

    id: int
    dependencies: Tuple[int, ...] = ()
    duration: int = 0
    schedule_start: Optional[datetime] = None
    schedule_end: Optional[datetime] = None

    def __post_init__(self) -> None:
        deps = tuple(self.dependencies) if self.dependencies is not None else ()
        object.__setattr__(self, "dependencies", deps)
        if not _is_whole(self.id):
            raise InvalidInputError(f"task id must be a whole number, got {self.id!r}")
        for dep in deps:
            if not _is_whole(dep):
                raise InvalidInputError(
                    f"task {self.id}: dependency ids must be whole numbers, got {dep!r}",
                    task_id=self.id,
                )
        if not _is_whole(self.duration) or self.duration < 0:
            raise InvalidInputError(
                f"task {self.id}: duration must be a non-negative whole number of days",
                task_id=self.id,
            )
        if self.id in deps:
            raise SelfDependencyError(self.id)

    @property
    def is_scheduled(self) -> bool:
        return self.schedule_start is not None and self.schedule_end is not None


class TaskGraph:
    """Tasks of one scheduling run indexed by id.

    A graph is built fresh from a task list for every run and never mutated
    afterwards.  Use :meth:`build` rather than the constructor so duplicate ids
    are rejected.
    """

    def __init__(self, tasks: Dict[int, Task]):
        self._tasks = tasks

    @classmethod
    def build(cls, tasks: Iterable[Task]) -> "TaskGraph":
        """Index ``tasks`` by id, failing on the first repeated id."""

        lookup: Dict[int, Task] = {}
        for task in tasks:
            if task.id in lookup:
                exc = DuplicateTaskError(task.id)
                logger.bind(task=task.id).rejected(exc)
                raise exc
            lookup[task.id] = task
        logger.debug("built task graph with %d tasks", len(lookup))
        return cls(lookup)

    def lookup(self, task_id: int) -> Task:
        try:
            return self._tasks[task_id]
        except KeyError:
            raise UnknownTaskError(task_id) from None

    def ids(self) -> List[int]:
        return list(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks.values())

    def to_networkx(self) -> nx.DiGraph:
        """Return a directed graph with an edge ``dependency -> task``.

        Dependencies that do not resolve are added as bare nodes without a
        ``duration`` attribute.
        """

        g = nx.DiGraph()
        for task in self._tasks.values():
            g.add_node(task.id, duration=task.duration)
        for task in self._tasks.values():
            for dep in task.dependencies:
                g.add_edge(dep, task.id)
        return g

    def validate(self) -> None:
        """Check that every dependency resolves and that there are no cycles."""

        for task in self._tasks.values():
            for dep in task.dependencies:
                if dep not in self._tasks:
                    raise UnknownTaskError(dep, referenced_by=task.id)

        try:
            edges = nx.find_cycle(self.to_networkx())
        except nx.NetworkXNoCycle:
            return
        cycle = [u for u, _ in reversed(edges)]
        cycle.append(cycle[0])
        raise CyclicDependencyError(cycle)

    def toposort(self) -> List[Task]:
        """Return tasks in a stable topological order, lowest id first."""

        self.validate()
        order = nx.lexicographical_topological_sort(self.to_networkx())
        return [self._tasks[tid] for tid in order]
