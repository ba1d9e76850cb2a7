"""DAG executor - run shell tasks concurrently in dependency order."""

from .parser import TaskDefinition, load_tasks, parse_tasks
from .graph import TaskGraph, build_graph
from .scheduler import create_execution_plan, ExecutionPlan, get_ready_tasks, Mode, Scheduler
from .pool import run_pool, PoolStatus, RunState, TaskResult
from .commands import CommandExecutor, CommandOutcome, OutcomeKind
from .reporter import ConsoleReporter, NullReporter, Reporter
from .executor import execute_config, dry_run
from .errors import (
    DagExecutorError,
    ConfigError,
    ConfigMissing,
    ConfigParseError,
    ValidationError,
    UnknownDependency,
    CycleDetected,
    TaskNotFound,
    ExecutionError,
    CommandFailure,
    DeadlockError,
)

__all__ = [
    "TaskDefinition",
    "load_tasks",
    "parse_tasks",
    "TaskGraph",
    "build_graph",
    "create_execution_plan",
    "ExecutionPlan",
    "get_ready_tasks",
    "Mode",
    "Scheduler",
    "run_pool",
    "PoolStatus",
    "RunState",
    "TaskResult",
    "CommandExecutor",
    "CommandOutcome",
    "OutcomeKind",
    "ConsoleReporter",
    "NullReporter",
    "Reporter",
    "execute_config",
    "dry_run",
    "DagExecutorError",
    "ConfigError",
    "ConfigMissing",
    "ConfigParseError",
    "ValidationError",
    "UnknownDependency",
    "CycleDetected",
    "TaskNotFound",
    "ExecutionError",
    "CommandFailure",
    "DeadlockError",
]
