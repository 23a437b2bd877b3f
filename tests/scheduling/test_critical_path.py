import pytest

from projsched.driver import sample_tasks
from projsched.errors import CyclicDependencyError, UnknownTaskError
from projsched.scheduling.critical_path import critical_chain, effective_duration
from projsched.task_graph import Task, TaskGraph


def _sample_graph() -> TaskGraph:
    return TaskGraph.build(sample_tasks())


def test_no_dependencies_is_own_duration() -> None:
    graph = _sample_graph()
    assert effective_duration(graph, graph.lookup(1)) == 5


def test_scenario_a() -> None:
    graph = TaskGraph.build([Task(1, None, 5), Task(2, (1,), 4)])
    assert effective_duration(graph, graph.lookup(2)) == 9


def test_scenario_b_takes_longest_branch() -> None:
    graph = _sample_graph()
    # via 1: 5 + 5 = 10, via 2: 5 + 9 = 14
    assert effective_duration(graph, graph.lookup(7)) == 14


@pytest.mark.parametrize("task_id, expected", [(2, 9), (3, 10), (4, 15), (5, 15), (6, 19)])
def test_sample_durations(task_id: int, expected: int) -> None:
    graph = _sample_graph()
    assert effective_duration(graph, graph.lookup(task_id)) == expected


def test_memo_does_not_change_results() -> None:
    graph = _sample_graph()
    memo: dict[int, int] = {}
    shared = [effective_duration(graph, t, memo) for t in graph]
    fresh = [effective_duration(graph, t) for t in graph]
    assert shared == fresh
    assert memo == dict(zip(graph.ids(), fresh))


def test_monotonic_along_dependencies() -> None:
    graph = _sample_graph()
    for task in graph:
        total = effective_duration(graph, task)
        branches = [
            task.duration + effective_duration(graph, graph.lookup(d))
            for d in task.dependencies
        ]
        for branch in branches:
            assert total >= branch
        if branches:
            assert total == max(branches)


def test_zero_duration_task() -> None:
    graph = TaskGraph.build([Task(1, None, 3), Task(2, (1,), 0)])
    assert effective_duration(graph, graph.lookup(2)) == 3


def test_direct_cycle_raises() -> None:
    graph = TaskGraph.build([Task(1, (2,), 1), Task(2, (1,), 1)])
    with pytest.raises(CyclicDependencyError) as info:
        effective_duration(graph, graph.lookup(1))
    assert info.value.cycle == [1, 2, 1]


def test_indirect_cycle_behind_acyclic_prefix() -> None:
    tasks = [Task(1, (2,), 1), Task(2, (3,), 1), Task(3, (4,), 1), Task(4, (2,), 1)]
    graph = TaskGraph.build(tasks)
    with pytest.raises(CyclicDependencyError) as info:
        effective_duration(graph, graph.lookup(1))
    assert info.value.cycle == [2, 3, 4, 2]


def test_unknown_dependency_is_not_skipped() -> None:
    graph = TaskGraph.build([Task(1, None, 1), Task(2, (1, 8), 1)])
    with pytest.raises(UnknownTaskError) as info:
        effective_duration(graph, graph.lookup(2))
    assert info.value.task_id == 8
    assert info.value.referenced_by == 2


def test_critical_chain() -> None:
    graph = _sample_graph()
    assert critical_chain(graph, 7) == [1, 2, 7]
    assert critical_chain(graph, 6) == [1, 3, 5, 6]
    assert critical_chain(graph, 1) == [1]


def test_critical_chain_tie_prefers_first_listed() -> None:
    graph = TaskGraph.build(
        [Task(1, None, 2), Task(2, None, 2), Task(3, (2, 1), 1)]
    )
    assert critical_chain(graph, 3) == [2, 3]
