"""Exception hierarchy for the DAG executor."""


class DagExecutorError(Exception):
    """Base class for every error the executor raises."""


class ConfigError(DagExecutorError):
    pass


class ConfigMissing(ConfigError):
    def __init__(self, message: str = "Configuration file path is missing."):
        super().__init__(message)


class ConfigParseError(ConfigError):
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to parse config file '{path}': {reason}")


class ValidationError(DagExecutorError):
    pass


class UnknownDependency(ValidationError):
    def __init__(self, task_id: str, dependency: str):
        self.task_id = task_id
        self.dependency = dependency
        super().__init__(
            f"Validation failed: Task '{task_id}' has an unknown dependency '{dependency}'."
        )


class CycleDetected(ValidationError):
    def __init__(self, task_id: str, path: list[str] | None = None):
        self.task_id = task_id
        self.path = list(path or [])
        message = f"Cycle detected in dependency graph involving task '{task_id}'."
        if self.path:
            message += f" Path: {' -> '.join(self.path)}"
        super().__init__(message)


class TaskNotFound(DagExecutorError, KeyError):
    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task with ID '{task_id}' not found in the DAG.")

    def __str__(self) -> str:
        # KeyError would repr() the message otherwise
        return self.args[0]


class ExecutionError(DagExecutorError):
    pass


class CommandFailure(ExecutionError):
    def __init__(self, task_ids: list[str]):
        self.task_ids = list(task_ids)
        super().__init__(
            f"Execution halted due to task failure: {', '.join(self.task_ids)}"
        )


class DeadlockError(ExecutionError):
    def __init__(self, pending: list[str]):
        self.pending = list(pending)
        super().__init__(
            "Execution halted due to deadlock. Tasks that could not be started: "
            + ", ".join(self.pending)
        )
