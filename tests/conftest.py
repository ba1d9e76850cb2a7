import threading
import time

import pytest

from dag_executor.commands import CommandOutcome
from dag_executor.graph import TaskGraph
from dag_executor.parser import TaskDefinition


class RecordingReporter:
    def __init__(self):
        self.lines: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def _record(self, level: str, message: str) -> None:
        with self._lock:
            self.lines.append((level, message))

    def info(self, message: str) -> None:
        self._record("info", message)

    def success(self, message: str) -> None:
        self._record("success", message)

    def warn(self, message: str) -> None:
        self._record("warn", message)

    def error(self, message: str) -> None:
        self._record("error", message)

    def plan(self, message: str) -> None:
        self._record("plan", message)

    def messages(self, level: str) -> list[str]:
        return [message for lvl, message in self.lines if lvl == level]


class FakeExecutor:
    """Scripted command runner that records start/end events.

    `behaviours` maps a command string to a callable returning a
    CommandOutcome; unknown commands succeed immediately.
    """

    def __init__(self, behaviours=None, delay: float = 0.0):
        self.behaviours = behaviours or {}
        self.delay = delay
        self.events: list[tuple[str, str]] = []
        self.active = 0
        self.peak = 0
        self._lock = threading.Lock()

    def run(self, command: str) -> CommandOutcome:
        with self._lock:
            self.events.append(("start", command))
            self.active += 1
            self.peak = max(self.peak, self.active)
        try:
            if self.delay:
                time.sleep(self.delay)
            behaviour = self.behaviours.get(command)
            return behaviour() if behaviour else CommandOutcome.success()
        finally:
            with self._lock:
                self.active -= 1
                self.events.append(("end", command))

    @property
    def started(self) -> list[str]:
        return [command for kind, command in self.events if kind == "start"]

    def index(self, kind: str, command: str) -> int:
        return self.events.index((kind, command))


def make_graph(edges: dict[str, list[str]], reporter=None) -> TaskGraph:
    """Build a graph where each task's command is its own id."""
    graph = TaskGraph(reporter)
    for task_id, deps in edges.items():
        graph.add_task(TaskDefinition(id=task_id, command=task_id, dependencies=deps))
    return graph


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def fake_executor() -> FakeExecutor:
    return FakeExecutor()
