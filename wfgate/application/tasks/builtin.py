"""Built-in downstream tasks."""

import logging
import shutil
from pathlib import Path
from typing import Any

from wfgate.domain.errors import ConfigurationError
from wfgate.domain.models.file_context import FileArtifact, SharedFileContext
from wfgate.domain.models.outcome import TaskStatus

from .base import DownstreamTask

logger = logging.getLogger(__name__)


class ListFilesTask(DownstreamTask):
    """Logs every file currently in the shared context."""

    @classmethod
    def get_metadata(cls) -> dict[str, Any]:
        return {
            "name": "list_files",
            "description": "Log the files handed to the task",
            "settings": [],
        }

    def run(self, files: SharedFileContext) -> TaskStatus:
        artifacts = files.all_files()
        logger.info(f"Task {self.task_id}: {len(artifacts)} file(s) in context")
        for artifact in artifacts:
            logger.info(f"{artifact.path} (from task {artifact.task_id})")
        return TaskStatus.SUCCESS


class CopyFilesTask(DownstreamTask):
    """Copies every file in the shared context into ``dest_dir``.

    Copies are added to the context under this task's id.
    """

    def __init__(self, task_id: int, dest_dir: str | None = None, overwrite: bool = True) -> None:
        if not dest_dir:
            raise ConfigurationError(f"Task {task_id}: copy_files requires 'dest_dir'")
        super().__init__(task_id, dest_dir=dest_dir, overwrite=overwrite)
        self.dest_dir = Path(dest_dir)
        self.overwrite = overwrite

    @classmethod
    def get_metadata(cls) -> dict[str, Any]:
        return {
            "name": "copy_files",
            "description": "Copy the files handed to the task into a directory",
            "settings": ["dest_dir", "overwrite"],
        }

    def run(self, files: SharedFileContext) -> TaskStatus:
        self.dest_dir.mkdir(parents=True, exist_ok=True)
        status = TaskStatus.SUCCESS

        for artifact in files.all_files():
            source = Path(artifact.path)
            target = self.dest_dir / source.name
            if target.exists() and not self.overwrite:
                logger.warning(f"Task {self.task_id}: {target} exists, skipping")
                continue
            try:
                shutil.copy2(source, target)
            except OSError as e:
                logger.error(f"Task {self.task_id}: failed to copy {source}: {e}")
                status = TaskStatus.ERROR
                continue
            files.add(FileArtifact(path=str(target), task_id=self.task_id))
            logger.info(f"Task {self.task_id}: copied {source} -> {target}")

        return status
