"""Tests for TaskGraph storage and validation."""

import pytest

from dag_executor.errors import CycleDetected, TaskNotFound, UnknownDependency
from dag_executor.graph import TaskGraph, build_graph
from dag_executor.parser import TaskDefinition

from conftest import make_graph

VALIDATED = "DAG validated successfully. No missing dependencies or cycles found."


def test_add_and_get_task() -> None:
    graph = TaskGraph()
    task = TaskDefinition(id="build", command="make")
    graph.add_task(task)

    assert graph.get_task("build") is task
    assert "build" in graph
    assert len(graph) == 1


def test_get_unknown_task_raises() -> None:
    graph = make_graph({"a": []})
    with pytest.raises(TaskNotFound) as exc_info:
        graph.get_task("missing")
    assert exc_info.value.task_id == "missing"
    assert "missing" in str(exc_info.value)


def test_duplicate_id_last_write_wins_with_warning(reporter) -> None:
    graph = TaskGraph(reporter)
    graph.add_task(TaskDefinition(id="a", command="first"))
    graph.add_task(TaskDefinition(id="a", command="second"))

    assert graph.get_task("a").command == "second"
    assert len(graph) == 1
    assert reporter.messages("warn") == [
        "Task 'a' is defined more than once; the last definition wins."
    ]


def test_get_all_tasks_is_read_only() -> None:
    graph = make_graph({"a": [], "b": ["a"]})
    tasks = graph.get_all_tasks()

    assert list(tasks) == ["a", "b"]
    with pytest.raises(TypeError):
        tasks["c"] = TaskDefinition(id="c", command="c")


def test_add_task_does_not_validate() -> None:
    graph = make_graph({"a": ["ghost"], "b": ["b"]})
    assert len(graph) == 2


def test_valid_graph_passes_and_reports(reporter) -> None:
    graph = make_graph({"a": [], "b": ["a"], "c": ["a", "b"], "d": []}, reporter)
    graph.validate()
    assert reporter.messages("info") == [VALIDATED]


def test_validate_is_idempotent(reporter) -> None:
    graph = make_graph({"a": [], "b": ["a"]}, reporter)
    graph.validate()
    graph.validate()
    assert reporter.messages("info") == [VALIDATED, VALIDATED]


def test_empty_graph_is_valid() -> None:
    TaskGraph().validate()


def test_unknown_dependency_names_task_and_dependency(reporter) -> None:
    graph = make_graph({"t1": ["ghost"]}, reporter)

    with pytest.raises(UnknownDependency) as exc_info:
        graph.validate()

    assert exc_info.value.task_id == "t1"
    assert exc_info.value.dependency == "ghost"
    assert "'t1'" in str(exc_info.value) and "'ghost'" in str(exc_info.value)
    assert reporter.messages("info") == []


def test_self_reference_is_a_cycle() -> None:
    graph = make_graph({"t1": ["t1"]})
    with pytest.raises(CycleDetected) as exc_info:
        graph.validate()
    assert exc_info.value.task_id == "t1"


def test_mutual_reference_is_a_cycle(reporter) -> None:
    graph = make_graph({"t1": ["t2"], "t2": ["t1"]}, reporter)

    with pytest.raises(CycleDetected) as exc_info:
        graph.validate()

    assert exc_info.value.task_id in {"t1", "t2"}
    assert reporter.messages("info") == []


def test_cycle_not_reachable_from_first_root_is_found() -> None:
    graph = make_graph({
        "a": [],
        "b": ["a"],
        "x": ["z"],
        "y": ["x"],
        "z": ["y"],
    })

    with pytest.raises(CycleDetected) as exc_info:
        graph.validate()

    cycle = exc_info.value.path
    assert cycle[0] == cycle[-1]
    assert set(cycle) == {"x", "y", "z"}


def test_diamond_is_not_a_cycle() -> None:
    graph = make_graph({
        "root": [],
        "left": ["root"],
        "right": ["root"],
        "join": ["left", "right"],
    })
    graph.validate()


def test_duplicate_dependency_entries_are_not_a_cycle() -> None:
    make_graph({"a": [], "b": ["a", "a"]}).validate()


def test_deep_chain_does_not_hit_recursion_limit() -> None:
    size = 5000
    edges = {"t0": []}
    for i in range(1, size):
        edges[f"t{i}"] = [f"t{i - 1}"]

    make_graph(edges).validate()


def test_deep_chain_closing_cycle_is_detected() -> None:
    size = 5000
    edges = {"t0": [f"t{size - 1}"]}
    for i in range(1, size):
        edges[f"t{i}"] = [f"t{i - 1}"]

    with pytest.raises(CycleDetected):
        make_graph(edges).validate()


def test_build_graph_inserts_every_task() -> None:
    tasks = [TaskDefinition(id="a", command="x"), TaskDefinition(id="b", command="y", dependencies=["a"])]
    graph = build_graph(tasks)
    assert list(graph) == ["a", "b"]
