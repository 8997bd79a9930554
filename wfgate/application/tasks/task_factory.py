from typing import Any

from wfgate.domain.errors import ConfigurationError

from .base import DownstreamTask
from .builtin import CopyFilesTask, ListFilesTask


class TaskFactory:
    """Factory for creating downstream task instances (Factory pattern)."""

    _registry: dict[str, type[DownstreamTask]] = {
        "list_files": ListFilesTask,
        "copy_files": CopyFilesTask,
    }

    @classmethod
    def register(cls, key: str, task_class: type[DownstreamTask]) -> None:
        """
        Register a task implementation.

        Args:
            key: Task type identifier (e.g., "copy_files")
            task_class: The task class to register
        """
        cls._registry[key] = task_class

    @classmethod
    def create(cls, task_type: str, task_id: int, settings: dict[str, Any] | None = None) -> DownstreamTask:
        """
        Create a task instance.

        Raises:
            ConfigurationError: If task_type is not registered or settings are invalid
        """
        if task_type not in cls._registry:
            available = ", ".join(cls._registry.keys())
            raise ConfigurationError(
                f"Task type '{task_type}' not found. Available task types: {available}"
            )

        task_class = cls._registry[task_type]
        try:
            return task_class(task_id, **(settings or {}))
        except TypeError as e:
            raise ConfigurationError(f"Invalid settings for task {task_id} ({task_type}): {e}") from e

    @classmethod
    def list_tasks(cls) -> list[str]:
        return list(cls._registry.keys())
