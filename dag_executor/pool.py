import asyncio
import time
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Awaitable, Callable

from .commands import CommandOutcome
from .reporter import NullReporter
from .scheduler import build_dependents, build_in_degree

if TYPE_CHECKING:
    from .commands import CommandRunner
    from .graph import TaskGraph
    from .reporter import Reporter


class RunState(Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMPLETED = "completed"
    HALTED_ERROR = "halted_error"
    HALTED_DEADLOCK = "halted_deadlock"


@dataclass
class TaskResult:
    task_id: str
    outcome: CommandOutcome
    duration: float = 0.0

    @property
    def success(self) -> bool:
        return self.outcome.ok


@dataclass
class PoolStatus:
    total: int = 0
    started: bool = False
    completed: set[str] = field(default_factory=set)
    running: set[str] = field(default_factory=set)
    failed: bool = False  # sticky for the whole run
    halted: bool = False  # dispatch closed, set when the control loop exits for any reason
    deadlocked: bool = False
    results: dict[str, TaskResult] = field(default_factory=dict)

    @property
    def state(self) -> RunState:
        if self.failed:
            return RunState.HALTED_ERROR
        if self.deadlocked:
            return RunState.HALTED_DEADLOCK
        if not self.started:
            return RunState.NOT_STARTED
        if len(self.completed) == self.total:
            return RunState.COMPLETED
        return RunState.RUNNING

    def failed_tasks(self) -> list[str]:
        return [task_id for task_id, result in self.results.items() if not result.success]

    def pending_tasks(self, graph: "TaskGraph") -> list[str]:
        return [
            task_id for task_id in graph
            if task_id not in self.completed and task_id not in self.running
        ]


class ReadinessTracker:
    """Kahn-style readiness: a task becomes ready when its last dependency completes.

    Tasks that depend on an unknown id, or sit on a cycle, never become ready.
    """

    def __init__(self, graph: "TaskGraph"):
        self.dependents = build_dependents(graph)
        self.remaining = build_in_degree(graph)
        self.ready = deque(task_id for task_id, count in self.remaining.items() if count == 0)

    def mark_completed(self, task_id: str) -> None:
        for dependent in self.dependents.get(task_id, []):
            self.remaining[dependent] -= 1
            if self.remaining[dependent] == 0:
                self.ready.append(dependent)

    def take_ready(self) -> list[str]:
        batch = list(self.ready)
        self.ready.clear()
        return batch


async def execute_task(
    task_id: str,
    command: str,
    command_executor: "CommandRunner",
    threads: ThreadPoolExecutor,
) -> TaskResult:
    """Run one command on a pool thread so the event loop keeps scheduling."""
    loop = asyncio.get_running_loop()
    started = time.monotonic()
    try:
        outcome = await loop.run_in_executor(threads, command_executor.run, command)
    except Exception as e:
        outcome = CommandOutcome.spawn_error(f"{type(e).__name__}: {e}")
    return TaskResult(task_id=task_id, outcome=outcome, duration=time.monotonic() - started)


async def run_pool(
    graph: "TaskGraph",
    command_executor: "CommandRunner",
    reporter: "Reporter | None" = None,
    max_workers: int = 4,
    on_task_complete: Callable[[TaskResult], Awaitable[None]] | None = None,
) -> PoolStatus:
    """Run tasks respecting dependencies with at most max_workers at once.

    The control loop and the workers share `status` under one condition. The
    loop moves newly ready tasks into `running` and onto the queue, then waits
    for a worker to report back. After the first failure nothing new starts;
    commands already in flight finish before this returns. Order among tasks
    that are ready at the same time is not deterministic.
    """
    if max_workers < 1:
        raise ValueError(f"max_workers must be at least 1, got {max_workers}")

    reporter = reporter or NullReporter()
    tasks = graph.get_all_tasks()
    status = PoolStatus(total=len(tasks), started=True)

    if not tasks:
        reporter.info("No tasks to execute.")
        return status

    tracker = ReadinessTracker(graph)
    condition = asyncio.Condition()
    queue: asyncio.Queue[str | None] = asyncio.Queue()

    async def consume(threads: ThreadPoolExecutor) -> None:
        while True:
            task_id = await queue.get()
            if task_id is None:
                return

            command = tasks[task_id].command
            async with condition:
                if status.failed or status.halted:
                    # Dispatched before the run halted but never started
                    status.running.discard(task_id)
                    continue
                reporter.info(f"Running: [{task_id}] -> {command}")

            result = await execute_task(task_id, command, command_executor, threads)

            async with condition:
                status.running.discard(task_id)
                status.results[task_id] = result
                if result.success:
                    status.completed.add(task_id)
                    tracker.mark_completed(task_id)
                    reporter.success(f"Success: [{task_id}]")
                else:
                    status.failed = True
                    reporter.error(f"Failed: [{task_id}] ({result.outcome.describe()})")
                condition.notify()

            if on_task_complete:
                await on_task_complete(result)

    async def worker(threads: ThreadPoolExecutor) -> None:
        try:
            await consume(threads)
        except Exception:
            # Wake the control loop so the run halts instead of hanging
            async with condition:
                status.failed = True
                condition.notify()
            raise

    worker_count = min(max_workers, len(tasks))
    with ThreadPoolExecutor(max_workers=worker_count, thread_name_prefix="dag-task") as threads:
        workers = [asyncio.create_task(worker(threads)) for _ in range(worker_count)]
        try:
            async with condition:
                while True:
                    if status.failed:
                        break

                    for task_id in tracker.take_ready():
                        status.running.add(task_id)
                        queue.put_nowait(task_id)

                    if len(status.completed) == len(tasks):
                        break

                    if not status.running:
                        status.deadlocked = True
                        reporter.error("Deadlock detected! No tasks can be started.")
                        break

                    await condition.wait()
        finally:
            # Also reached on cancellation (Ctrl-C): queued ids must not start
            async with condition:
                status.halted = True
            for _ in workers:
                queue.put_nowait(None)
            # Drain every worker so in-flight results are recorded before raising
            outcomes = await asyncio.gather(*workers, return_exceptions=True)
            errors = [e for e in outcomes if isinstance(e, BaseException)]
            if errors:
                raise errors[0]

    return status
