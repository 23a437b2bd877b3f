from __future__ import annotations

from typing import Dict, List, Optional

from ..errors import CyclicDependencyError, UnknownTaskError
from ..task_graph import Task, TaskGraph

__all__ = ["effective_duration", "critical_chain"]


def _resolve(graph: TaskGraph, dep_id: int, task: Task) -> Task:
    try:
        return graph.lookup(dep_id)
    except UnknownTaskError:
        raise UnknownTaskError(dep_id, referenced_by=task.id) from None


def _longest(
    graph: TaskGraph,
    task: Task,
    memo: Dict[int, int],
    path: List[int],
) -> int:
    if task.id in memo:
        return memo[task.id]
    if not task.dependencies:
        memo[task.id] = task.duration
        return task.duration

    if task.id in path:
        start = path.index(task.id)
        raise CyclicDependencyError(path[start:] + [task.id])
    # A simple path never visits more nodes than the graph holds.
    if len(path) > len(graph):
        raise CyclicDependencyError(path)

    path.append(task.id)
    try:
        best = max(
            task.duration + _longest(graph, _resolve(graph, dep, task), memo, path)
            for dep in task.dependencies
        )
    finally:
        path.pop()

    memo[task.id] = best
    return best


def effective_duration(
    graph: TaskGraph,
    task: Task,
    memo: Optional[Dict[int, int]] = None,
) -> int:
    """Return the days from the anchor until ``task`` can complete.

    This is the longest path through the dependency graph ending at
    ``task``: its own duration plus the largest effective duration among its
    dependencies, or just its duration when it has none.

    Parameters
    ----------
    graph:
        Graph the dependencies of ``task`` are resolved against.
    task:
        Task to evaluate.
    memo:
        Optional mapping of task id to an already computed effective
        duration.  Pass the same dict for every task of one run to avoid
        recomputing shared dependency chains; it is filled in place.

    Raises
    ------
    CyclicDependencyError
        If the dependency chain of ``task`` loops back onto itself.
    UnknownTaskError
        If a dependency does not resolve within ``graph``.
    """

    return _longest(graph, task, {} if memo is None else memo, [])


def critical_chain(graph: TaskGraph, task_id: int) -> List[int]:
    """Return the ids on the longest dependency chain ending at ``task_id``.

    The chain runs from a task without dependencies to ``task_id`` itself.
    Ties between equally long branches go to the dependency listed first.
    """

    memo: Dict[int, int] = {}
    task = graph.lookup(task_id)
    effective_duration(graph, task, memo)

    chain = [task.id]
    while task.dependencies:
        deps = [_resolve(graph, dep, task) for dep in task.dependencies]
        task = max(deps, key=lambda d: memo[d.id])
        chain.append(task.id)
    chain.reverse()
    return chain
