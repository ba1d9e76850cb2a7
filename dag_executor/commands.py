import subprocess
from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class OutcomeKind(Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    SPAWN_ERROR = "spawn_error"


@dataclass(frozen=True)
class CommandOutcome:
    kind: OutcomeKind
    exit_code: int | None = None
    error: str = ""

    @classmethod
    def success(cls) -> "CommandOutcome":
        return cls(OutcomeKind.SUCCESS, exit_code=0)

    @classmethod
    def failure(cls, exit_code: int) -> "CommandOutcome":
        return cls(OutcomeKind.FAILURE, exit_code=exit_code)

    @classmethod
    def spawn_error(cls, error: str) -> "CommandOutcome":
        return cls(OutcomeKind.SPAWN_ERROR, error=error)

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS

    def describe(self) -> str:
        if self.kind is OutcomeKind.FAILURE:
            return f"Exit code: {self.exit_code}"
        if self.kind is OutcomeKind.SPAWN_ERROR:
            return f"could not start: {self.error}"
        return "ok"


class CommandRunner(Protocol):
    def run(self, command: str) -> CommandOutcome: ...


class CommandExecutor:
    """Runs a task command through the shell and blocks until it exits.

    The child inherits stdout/stderr, so task output goes straight to the
    terminal. A negative exit code means the process was killed by a signal.
    """

    def __init__(self, cwd: str | None = None, env: dict[str, str] | None = None):
        self.cwd = cwd
        self.env = env

    def run(self, command: str) -> CommandOutcome:
        try:
            result = subprocess.run(command, shell=True, cwd=self.cwd, env=self.env)
        except (OSError, subprocess.SubprocessError) as e:
            return CommandOutcome.spawn_error(f"{type(e).__name__}: {e}")

        if result.returncode == 0:
            return CommandOutcome.success()
        return CommandOutcome.failure(result.returncode)
