from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Union
import uuid

from ..logging_setup import get_logger
from ..task_graph import Task, TaskGraph
from .critical_path import effective_duration

__all__ = ["schedule", "resolve_anchor", "project_end"]

Anchor = Union[date, datetime]


def resolve_anchor(anchor: Optional[Anchor] = None) -> datetime:
    """Return ``anchor`` as a ``datetime``, capturing *now* when ``None``.

    Plain dates are promoted to midnight.
    """

    if anchor is None:
        return datetime.now()
    if isinstance(anchor, datetime):
        return anchor
    if isinstance(anchor, date):
        return datetime(anchor.year, anchor.month, anchor.day)
    raise TypeError(f"anchor must be a date or datetime, got {type(anchor).__name__}")


def _place(graph: TaskGraph, task: Task, anchor: datetime, memo: Dict[int, int]) -> Task:
    if not task.dependencies:
        start = anchor
    else:
        total = effective_duration(graph, task, memo)
        start = anchor + timedelta(days=total - task.duration)
    end = start + timedelta(days=task.duration)
    return replace(task, schedule_start=start, schedule_end=end)


def schedule(tasks: Iterable[Task], anchor: Optional[Anchor] = None) -> List[Task]:
    """Assign the earliest start and end dates to every task.

    Tasks without dependencies start on ``anchor``.  Every other task is
    placed so that it ends exactly its effective duration after ``anchor``
    (see :func:`~projsched.scheduling.critical_path.effective_duration`).

    Parameters
    ----------
    tasks:
        Tasks to schedule.  They are not modified.
    anchor:
        Earliest start of the run.  Captured once from the clock when
        ``None`` so every task shares the same reference instant.

    Returns
    -------
    list[Task]
        Copies of ``tasks``, in input order, with ``schedule_start`` and
        ``schedule_end`` filled in.  An empty input gives an empty list.
    """

    snapshot = list(tasks)
    start = resolve_anchor(anchor)
    log = get_logger(run=uuid.uuid4().hex[:8], anchor=start.isoformat())

    graph = TaskGraph.build(snapshot)
    memo: Dict[int, int] = {}
    scheduled = [_place(graph, task, start, memo) for task in snapshot]

    log.info("scheduled %d tasks", len(scheduled))
    return scheduled


def project_end(scheduled: Iterable[Task]) -> Optional[datetime]:
    """Return the latest end date of ``scheduled`` or ``None`` if empty."""

    ends = [t.schedule_end for t in scheduled if t.schedule_end is not None]
    return max(ends) if ends else None
