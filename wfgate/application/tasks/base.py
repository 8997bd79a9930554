"""Base class for downstream tasks dispatched by the approval gate."""

from abc import ABC, abstractmethod
from typing import Any

from wfgate.domain.models.file_context import SharedFileContext
from wfgate.domain.models.outcome import TaskStatus


class DownstreamTask(ABC):
    """A workflow task the gate can hand files to.

    Tasks read their input from the shared file context and may add the
    files they produce under their own ``task_id``.
    """

    def __init__(self, task_id: int, **settings: Any) -> None:
        self.task_id = task_id
        self.settings = settings

    @classmethod
    @abstractmethod
    def get_metadata(cls) -> dict[str, Any]:
        """Return task metadata.

        Returns:
            Dict with keys:
            - name: str - Task type key
            - description: str - Human-readable description
            - settings: list[str] - Accepted setting keys
        """
        ...

    @abstractmethod
    def run(self, files: SharedFileContext) -> TaskStatus:
        """Execute the task against the shared file context."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(task_id={self.task_id})"
