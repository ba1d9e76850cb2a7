"""Runtime settings read from the environment (and a local .env file)."""

import os
from dataclasses import dataclass, field

from dotenv import find_dotenv, load_dotenv

from .errors import ConfigError

ENV_PREFIX = "DAG_EXECUTOR_"
TRUTHY = {"1", "true", "yes", "on"}


def default_max_workers() -> int:
    return os.cpu_count() or 4


@dataclass
class Settings:
    max_workers: int = field(default_factory=default_max_workers)
    color: bool = True
    workdir: str | None = None

    @classmethod
    def from_env(cls, environ=None, dotenv: bool = True) -> "Settings":
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True))
        env = os.environ if environ is None else environ

        settings = cls()

        raw_workers = env.get(f"{ENV_PREFIX}MAX_WORKERS")
        if raw_workers:
            settings.max_workers = parse_max_workers(raw_workers)

        no_color = env.get(f"{ENV_PREFIX}NO_COLOR") or env.get("NO_COLOR")
        if no_color and no_color.strip().lower() in TRUTHY:
            settings.color = False

        workdir = env.get(f"{ENV_PREFIX}WORKDIR")
        if workdir:
            settings.workdir = workdir

        return settings


def parse_max_workers(value) -> int:
    try:
        workers = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"max workers must be an integer, got {value!r}")
    if workers < 1:
        raise ConfigError(f"max workers must be at least 1, got {workers}")
    return workers
