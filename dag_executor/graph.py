from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Iterator, Mapping

from .errors import CycleDetected, TaskNotFound, UnknownDependency
from .reporter import NullReporter

if TYPE_CHECKING:
    from .parser import TaskDefinition
    from .reporter import Reporter


class Color(Enum):
    WHITE = 0  # unvisited
    GREY = 1  # on the current path
    BLACK = 2  # fully explored


class TaskGraph:
    """Tasks keyed by id, plus structural validation.

    Insertion never validates; a malformed graph is legal until validate()
    is called. After validation the graph is treated as read-only.
    """

    def __init__(self, reporter: "Reporter | None" = None):
        self.reporter = reporter or NullReporter()
        self._tasks: dict[str, "TaskDefinition"] = {}

    def add_task(self, task: "TaskDefinition") -> None:
        if task.id in self._tasks:
            self.reporter.warn(
                f"Task '{task.id}' is defined more than once; the last definition wins."
            )
        self._tasks[task.id] = task

    def get_task(self, task_id: str) -> "TaskDefinition":
        try:
            return self._tasks[task_id]
        except KeyError:
            raise TaskNotFound(task_id) from None

    def get_all_tasks(self) -> Mapping[str, "TaskDefinition"]:
        return MappingProxyType(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    def __iter__(self) -> Iterator[str]:
        return iter(self._tasks)

    def validate(self) -> None:
        """Check that every dependency exists and that there are no cycles.

        Raises UnknownDependency or CycleDetected; reports success otherwise.
        """
        self.check_dependencies()
        self.check_acyclic()
        self.reporter.info(
            "DAG validated successfully. No missing dependencies or cycles found."
        )

    def check_dependencies(self) -> None:
        for task_id, task in self._tasks.items():
            for dep in task.dependencies:
                if dep not in self._tasks:
                    raise UnknownDependency(task_id, dep)

    def check_acyclic(self) -> None:
        """Iterative three-colour DFS, restarted from every unvisited task.

        Each stack frame is (task_id, iterator over its dependencies). Reaching
        a GREY node means the current path loops back on itself.
        """
        color = {task_id: Color.WHITE for task_id in self._tasks}

        for root in self._tasks:
            if color[root] is not Color.WHITE:
                continue

            color[root] = Color.GREY
            path = [root]
            stack = [(root, iter(self._tasks[root].dependencies))]

            while stack:
                task_id, deps = stack[-1]
                dep = next(deps, None)

                if dep is None:
                    color[task_id] = Color.BLACK
                    stack.pop()
                    path.pop()
                    continue

                # Unknown ids are check_dependencies' job
                dep_color = color.get(dep)
                if dep_color is Color.GREY:
                    cycle = path[path.index(dep):] + [dep]
                    raise CycleDetected(dep, cycle)
                if dep_color is Color.WHITE:
                    color[dep] = Color.GREY
                    path.append(dep)
                    stack.append((dep, iter(self._tasks[dep].dependencies)))


def build_graph(tasks: list["TaskDefinition"], reporter: "Reporter | None" = None) -> TaskGraph:
    graph = TaskGraph(reporter)
    for task in tasks:
        graph.add_task(task)
    return graph
