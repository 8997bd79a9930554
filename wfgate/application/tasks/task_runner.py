"""Sequential runner for downstream task sets."""

import logging
from typing import Iterable

from wfgate.domain.errors import ConfigurationError
from wfgate.domain.models.file_context import SharedFileContext
from wfgate.domain.models.outcome import TaskStatus

from .base import DownstreamTask

logger = logging.getLogger(__name__)


def parse_task_ids(value: str | Iterable[int | str] | None) -> list[int]:
    """Parse a task id list such as ``"3, 4"`` or ``[3, "4"]``.

    Empty entries are ignored.

    Raises:
        ValueError: If an entry is not an integer
    """
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")

    ids: list[int] = []
    for item in value:
        text = str(item).strip()
        if not text:
            continue
        try:
            ids.append(int(text))
        except ValueError:
            raise ValueError(f"Invalid task id '{text}': expected an integer") from None
    return ids


class TaskRunner:
    """Runs downstream tasks of one workflow by id."""

    def __init__(self, tasks: Iterable[DownstreamTask] = ()) -> None:
        self._tasks: dict[int, DownstreamTask] = {}
        for task in tasks:
            self.add(task)

    def add(self, task: DownstreamTask) -> None:
        if task.task_id in self._tasks:
            raise ConfigurationError(f"Duplicate task id {task.task_id}")
        self._tasks[task.task_id] = task

    def resolve(self, task_ids: Iterable[int]) -> list[DownstreamTask]:
        """Map ids to tasks, preserving order.

        Raises:
            ConfigurationError: If an id is not a task of this workflow
        """
        resolved = []
        for task_id in task_ids:
            if task_id not in self._tasks:
                raise ConfigurationError(f"Task {task_id} is not defined in this workflow")
            resolved.append(self._tasks[task_id])
        return resolved

    def run(self, task_ids: Iterable[int], files: SharedFileContext) -> list[TaskStatus]:
        """Run each task in order with the shared file context."""
        statuses = []
        for task in self.resolve(task_ids):
            logger.debug(f"Running {task}")
            status = task.run(files)
            if status != TaskStatus.SUCCESS:
                logger.warning(f"{task} finished with status {status.value}")
            statuses.append(status)
        return statuses
