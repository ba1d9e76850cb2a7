"""Main pipeline - load, build, validate, then plan or execute."""

from typing import TYPE_CHECKING, Awaitable, Callable

from .commands import CommandExecutor
from .graph import TaskGraph, build_graph
from .parser import load_tasks
from .reporter import NullReporter
from .scheduler import ExecutionPlan, Mode, Scheduler

if TYPE_CHECKING:
    from .commands import CommandRunner
    from .pool import PoolStatus, TaskResult
    from .reporter import Reporter


def load_graph(config_path: str, reporter: "Reporter") -> TaskGraph:
    """Parse the task file into a validated graph.

    Validation always finishes before anything is executed.
    """
    reporter.info(f"Target config: {config_path}")
    reporter.info("Parsing configuration file...")
    tasks = load_tasks(config_path)
    reporter.info(f"Found {len(tasks)} tasks")

    reporter.info("Building dependency graph...")
    graph = build_graph(tasks, reporter)

    reporter.info("Validating dependency graph...")
    graph.validate()
    return graph


async def execute_config(
    config_path: str,
    max_workers: int = 4,
    reporter: "Reporter | None" = None,
    command_executor: "CommandRunner | None" = None,
    on_task_complete: "Callable[[TaskResult], Awaitable[None]] | None" = None,
) -> "PoolStatus":
    """Execute every task in a config file.

    Args:
        config_path: Path to the YAML task file
        max_workers: Maximum number of commands running at once
        reporter: Where status lines go (silent when omitted)
        command_executor: Runs each command (shell by default)
        on_task_complete: Optional async callback invoked with each TaskResult

    Returns:
        PoolStatus for the finished run

    Raises:
        ConfigParseError, ValidationError, CommandFailure or DeadlockError.
    """
    reporter = reporter or NullReporter()
    graph = load_graph(config_path, reporter)

    reporter.info(f"Initializing execution engine with {max_workers} workers...")
    scheduler = Scheduler(
        reporter=reporter,
        command_executor=command_executor or CommandExecutor(),
        max_workers=max_workers,
        on_task_complete=on_task_complete,
    )
    status = await scheduler.run(graph, Mode.EXECUTE)

    reporter.success("All tasks completed successfully.")
    return status


async def dry_run(config_path: str, reporter: "Reporter | None" = None) -> ExecutionPlan:
    """Parse and plan without executing - useful for preview."""
    reporter = reporter or NullReporter()
    graph = load_graph(config_path, reporter)

    reporter.info("Initializing execution engine...")
    return await Scheduler(reporter=reporter).run(graph, Mode.PLAN)
