from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Awaitable, Callable

from .commands import CommandExecutor
from .errors import CommandFailure, DeadlockError
from .reporter import NullReporter

if TYPE_CHECKING:
    from .commands import CommandRunner
    from .graph import TaskGraph
    from .pool import PoolStatus, TaskResult
    from .reporter import Reporter


@dataclass
class ExecutionPlan:
    levels: list[list[str]] = field(default_factory=list)  # Ready batches, parallel within a batch
    task_order: list[str] = field(default_factory=list)  # Flat order, batch by batch
    dependency_map: dict[str, list[str]] = field(default_factory=dict)  # task_id -> [dependency_ids]
    deadlocked: list[str] = field(default_factory=list)  # Tasks left undone when no batch was ready


class Mode(Enum):
    PLAN = "plan"
    EXECUTE = "execute"


def build_dependents(graph: "TaskGraph") -> dict[str, list[str]]:
    """Build adjacency list: task_id -> [tasks that depend on it]"""
    dependents = defaultdict(list)
    for task_id, task in graph.get_all_tasks().items():
        for dep_id in dict.fromkeys(task.dependencies):
            dependents[dep_id].append(task_id)
    return dict(dependents)


def build_in_degree(graph: "TaskGraph") -> dict[str, int]:
    """Count distinct dependencies for each task."""
    return {
        task_id: len(set(task.dependencies))
        for task_id, task in graph.get_all_tasks().items()
    }


def get_ready_tasks(
    graph: "TaskGraph",
    completed: set[str],
    in_progress: set[str] = frozenset(),
) -> list[str]:
    """Get tasks ready to execute (dependencies met, not started).

    Order among the returned ids follows insertion order but callers must not
    rely on it: any permutation of a ready batch is a valid schedule.
    """
    ready = []
    for task_id, task in graph.get_all_tasks().items():
        if task_id in completed or task_id in in_progress:
            continue
        if all(dep in completed for dep in task.dependencies):
            ready.append(task_id)
    return ready


def create_execution_plan(
    graph: "TaskGraph",
    reporter: "Reporter | None" = None,
) -> ExecutionPlan:
    """Simulate a run batch by batch without starting any command.

    Does not assume the graph was validated: if no batch can be formed while
    tasks remain, the remaining tasks are reported and recorded as deadlocked.
    """
    reporter = reporter or NullReporter()
    tasks = graph.get_all_tasks()

    if not tasks:
        reporter.info("No tasks to execute.")
        return ExecutionPlan()

    reporter.plan("Starting dry run. Tasks will be listed in a possible execution order.")

    plan = ExecutionPlan(
        dependency_map={task_id: list(task.dependencies) for task_id, task in tasks.items()}
    )
    done: set[str] = set()

    while len(done) < len(tasks):
        ready = get_ready_tasks(graph, done)

        if not ready:
            plan.deadlocked = [task_id for task_id in tasks if task_id not in done]
            reporter.error(
                "Deadlock detected in dry run. The following tasks form a cycle "
                "or have missing dependencies:"
            )
            for task_id in plan.deadlocked:
                reporter.error(f" - Task: {task_id}")
            break

        for task_id in ready:
            reporter.plan(f"Execute Task '{task_id}' (Command: {tasks[task_id].command})")

        # The whole batch is marked done at once, so members never unlock each other
        done.update(ready)
        plan.levels.append(ready)
        plan.task_order.extend(ready)

    reporter.plan("Dry run finished.")
    return plan


class Scheduler:
    """Runs a task graph in plan (dry run) or execute mode."""

    def __init__(
        self,
        reporter: "Reporter | None" = None,
        command_executor: "CommandRunner | None" = None,
        max_workers: int = 4,
        on_task_complete: "Callable[[TaskResult], Awaitable[None]] | None" = None,
    ):
        self.reporter = reporter or NullReporter()
        self.command_executor = command_executor or CommandExecutor()
        self.max_workers = max_workers
        self.on_task_complete = on_task_complete

    def plan(self, graph: "TaskGraph") -> ExecutionPlan:
        plan = create_execution_plan(graph, self.reporter)
        if plan.deadlocked:
            raise DeadlockError(plan.deadlocked)
        return plan

    async def execute(self, graph: "TaskGraph") -> "PoolStatus":
        from .pool import run_pool

        status = await run_pool(
            graph,
            self.command_executor,
            reporter=self.reporter,
            max_workers=self.max_workers,
            on_task_complete=self.on_task_complete,
        )

        if status.failed:
            raise CommandFailure(status.failed_tasks())
        if status.deadlocked:
            raise DeadlockError(status.pending_tasks(graph))
        return status

    async def run(self, graph: "TaskGraph", mode: Mode = Mode.EXECUTE):
        if mode is Mode.PLAN:
            return self.plan(graph)
        return await self.execute(graph)
