from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .errors import (
    DuplicateTaskError,
    InvalidInputError,
    SchedulingError,
    SelfDependencyError,
    UnknownTaskError,
)
from .logging_setup import get_logger
from .scheduling.dates import Anchor, schedule
from .task_graph import Task, TaskGraph

__all__ = [
    "TaskList",
    "as_datetime",
    "parse_dependencies",
    "parse_id",
    "render",
    "sample_tasks",
]

DEFAULT_DATE_FORMAT = "%d-%b-%Y"

logger = get_logger()

IdInput = Union[int, str]
DependencyInput = Union[None, str, Sequence[int]]


def parse_id(value: IdInput) -> int:
    """Parse a whole number from user input."""

    if isinstance(value, bool):
        raise InvalidInputError(f"not a whole number: {value!r}")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        raise InvalidInputError(f"not a whole number: {value!r}") from None


def parse_dependencies(value: DependencyInput) -> Tuple[int, ...]:
    """Parse dependency ids from ``None``, a sequence or ``"1,3,7"`` text.

    Blank text means no dependencies.
    """

    if value is None:
        return ()
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return ()
        return tuple(parse_id(part) for part in text.split(","))
    return tuple(parse_id(v) for v in value)


def render(task: Task, date_format: str = DEFAULT_DATE_FORMAT) -> str:
    """Return the one line summary printed for a scheduled task."""

    if not task.is_scheduled:
        raise ValueError(f"task {task.id} has not been scheduled")
    start = task.schedule_start.strftime(date_format)
    end = task.schedule_end.strftime(date_format)
    return f"Task {task.id}: duration:{task.duration} start:{start} end:{end}"


def sample_tasks() -> List[Task]:
    """Return a small demonstration plan of seven tasks."""

    return [
        Task(1, None, 5),
        Task(2, (1,), 4),
        Task(3, (1,), 5),
        Task(4, (3,), 5),
        Task(5, (3,), 5),
        Task(6, (5,), 4),
        Task(7, (1, 2), 5),
    ]


class TaskList:
    """Caller-held list of tasks fed to the scheduler.

    Every check runs against a :class:`TaskGraph` built for that call, so
    nothing is cached between :meth:`add_task` and :meth:`schedule_all`.
    """

    def __init__(self, tasks: Optional[Iterable[Task]] = None) -> None:
        self.tasks: List[Task] = []
        for task in tasks or ():
            self.add_task(task.id, task.dependencies, task.duration)

    def __len__(self) -> int:
        return len(self.tasks)

    def add_task(
        self,
        task_id: IdInput,
        dependency_ids: DependencyInput,
        duration: IdInput,
    ) -> Task:
        """Validate and append a new task, returning it.

        Raises
        ------
        InvalidInputError
            If a number does not parse, the duration is negative or the task
            lists itself as a dependency.
        DuplicateTaskError
            If ``task_id`` is already present.
        UnknownTaskError
            If a dependency id is not a known task.

        The list is unchanged whenever an error is raised.
        """

        tid = self.check_id(task_id)
        deps = self.check_dependencies(tid, dependency_ids)
        task = Task(tid, deps, parse_id(duration))
        self.tasks.append(task)
        logger.bind(task=tid).debug("added task")
        return task

    def check_id(self, task_id: IdInput) -> int:
        """Parse ``task_id`` and make sure it is not already taken."""

        tid = parse_id(task_id)
        if tid in TaskGraph.build(self.tasks):
            exc = DuplicateTaskError(tid)
            logger.bind(task=tid).rejected(exc)
            raise exc
        return tid

    def check_dependencies(self, task_id: int, dependency_ids: DependencyInput) -> Tuple[int, ...]:
        """Parse ``dependency_ids`` for a new task and make sure each one exists."""

        log = logger.bind(task=task_id)
        deps = parse_dependencies(dependency_ids)
        if task_id in deps:
            exc: SchedulingError = SelfDependencyError(task_id)
            log.rejected(exc)
            raise exc
        graph = TaskGraph.build(self.tasks)
        for dep in deps:
            if dep not in graph:
                exc = UnknownTaskError(dep, referenced_by=task_id)
                log.rejected(exc)
                raise exc
        return deps

    def schedule_all(self, anchor: Optional[Anchor] = None) -> List[Task]:
        return schedule(self.tasks, anchor)

    def reset_all(self) -> None:
        self.tasks = []
        logger.debug("task list reset")

    def render_all(
        self,
        anchor: Optional[Anchor] = None,
        date_format: str = DEFAULT_DATE_FORMAT,
    ) -> List[str]:
        return [render(t, date_format) for t in self.schedule_all(anchor)]


def as_datetime(text: str) -> datetime:
    """Parse an ISO ``YYYY-MM-DD`` date used as a schedule anchor."""

    try:
        return datetime.fromisoformat(text.strip())
    except ValueError:
        raise InvalidInputError(f"not an ISO date: {text!r}") from None
