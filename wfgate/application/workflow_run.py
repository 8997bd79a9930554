"""State of the enclosing workflow run, as seen by the approval gate."""

import threading
from dataclasses import dataclass, field
from pathlib import Path

from wfgate.domain.constants import DEFAULT_APPROVAL_ROOT, TRIGGER_FILENAME
from wfgate.domain.models.file_context import SharedFileContext


def trigger_path(approval_root: Path, workflow_id: str, run_id: str, task_id: int) -> Path:
    """Per-instance approval trigger file for a gate task."""
    return approval_root / workflow_id / run_id / str(task_id) / TRIGGER_FILENAME


@dataclass
class WorkflowRun:
    """One running instance of a workflow.

    The engine (or CLI) owns this object. Rejection and stop requests may
    arrive from other threads; they are plain flags read once per tick.
    """

    workflow_id: str
    run_id: str
    started_by: str
    is_approval: bool = False
    approval_root: Path = DEFAULT_APPROVAL_ROOT
    files: SharedFileContext = field(default_factory=SharedFileContext)

    # Who resolved the approval, for notification text
    approved_by: str | None = None
    rejected_by: str | None = None
    stopped_by: str | None = None

    is_rejected: bool = False
    is_waiting_for_approval: bool = False

    _stopped_tasks: set[int] = field(default_factory=set, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def reject(self, by: str) -> None:
        with self._lock:
            self.rejected_by = by
            self.is_rejected = True

    def stop_task(self, task_id: int, by: str) -> None:
        with self._lock:
            self.stopped_by = by
            self._stopped_tasks.add(task_id)

    def is_task_stopped(self, task_id: int) -> bool:
        with self._lock:
            return task_id in self._stopped_tasks

    def trigger_path(self, task_id: int) -> Path:
        return trigger_path(self.approval_root, self.workflow_id, self.run_id, task_id)
