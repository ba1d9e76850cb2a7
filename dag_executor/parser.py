from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .errors import ConfigParseError


@dataclass
class TaskDefinition:
    id: str
    command: str
    dependencies: list[str] = field(default_factory=list)


def parse_task_entry(entry, index: int, path: str) -> TaskDefinition:
    if not isinstance(entry, dict):
        raise ConfigParseError(path, f"task #{index} is not a mapping")

    if entry.get("id") is None or entry.get("command") is None:
        raise ConfigParseError(
            path, f"task #{index} is missing the required 'id' or 'command' field"
        )

    task_id = _as_scalar(entry["id"], "id", index, path)
    command = _as_scalar(entry["command"], "command", index, path)
    dependencies = extract_dependencies(entry, index, path)

    return TaskDefinition(id=task_id, command=command, dependencies=dependencies)


def extract_dependencies(entry: dict, index: int, path: str) -> list[str]:
    """Read the optional depends_on sequence, keeping declaration order.

    Duplicates are left in place; the graph treats them as a single edge.
    """
    depends_on = entry.get("depends_on")
    if depends_on is None:
        return []
    if not isinstance(depends_on, list):
        raise ConfigParseError(path, f"task #{index} 'depends_on' must be a sequence")

    return [_as_scalar(dep, "depends_on", index, path) for dep in depends_on]


def _as_scalar(value, name: str, index: int, path: str) -> str:
    if isinstance(value, (dict, list)) or value is None:
        raise ConfigParseError(path, f"task #{index} field '{name}' must be a scalar")
    return str(value)


def parse_tasks(content: str, path: str = "<string>") -> list[TaskDefinition]:
    try:
        config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigParseError(path, str(e)) from e

    if not isinstance(config, dict) or not isinstance(config.get("tasks"), list):
        raise ConfigParseError(
            path, "the 'tasks' sequence is missing or not a sequence"
        )

    return [
        parse_task_entry(entry, index, path)
        for index, entry in enumerate(config["tasks"], 1)
    ]


def load_tasks(path: str) -> list[TaskDefinition]:
    """Load task definitions from a YAML file, in file order."""
    config_path = Path(path)
    try:
        content = config_path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigParseError(path, "file not found") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigParseError(path, str(e)) from e

    return parse_tasks(content, path)
