"""Workflow-scoped shared file context.

Downstream tasks pass files to one another through this structure. Each
task id owns a list of FileArtifacts; consumers usually read all of them.
"""

import logging
import threading
from collections import defaultdict
from contextlib import contextmanager
from typing import Iterator

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class FileArtifact(BaseModel):
    """A file path plus the id of the task that produced it."""

    model_config = ConfigDict(frozen=True)

    path: str
    task_id: int


class SharedFileContext:
    """Mutable file lists shared by every task of one workflow run."""

    def __init__(self) -> None:
        self._files: dict[int, list[FileArtifact]] = defaultdict(list)
        self._lock = threading.RLock()

    def add(self, artifact: FileArtifact) -> None:
        self._files[artifact.task_id].append(artifact)

    def files_for(self, task_id: int) -> list[FileArtifact]:
        return list(self._files.get(task_id, []))

    def all_files(self) -> list[FileArtifact]:
        return [f for files in self._files.values() for f in files]

    def remove_path(self, path: str) -> int:
        """Remove every artifact with this path from all task lists.

        Returns:
            Number of artifacts removed
        """
        removed = 0
        for task_id, files in self._files.items():
            kept = [f for f in files if f.path != path]
            removed += len(files) - len(kept)
            self._files[task_id] = kept
        return removed

    def clear_all(self) -> None:
        """Clear the file lists of all tasks, not just one."""
        self._files.clear()

    def is_empty(self) -> bool:
        return not any(self._files.values())

    @contextmanager
    def acquire(self, artifact: FileArtifact | None = None) -> Iterator["SharedFileContext"]:
        """Hold the context for one dispatch window.

        Clears stale files, attaches ``artifact`` (if any), yields, then
        detaches the artifact and leaves the context empty on every exit path.
        Concurrent holders in the same run are serialized.
        """
        with self._lock:
            self.clear_all()
            if artifact is not None:
                self.add(artifact)
            try:
                yield self
            finally:
                if artifact is not None:
                    self.remove_path(artifact.path)
                if not self.is_empty():
                    leftover = len(self.all_files())
                    logger.debug(f"Discarding {leftover} file(s) left by downstream tasks")
                    self.clear_all()
