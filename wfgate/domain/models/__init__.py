from wfgate.domain.models.file_context import FileArtifact, SharedFileContext
from wfgate.domain.models.notification import Notification
from wfgate.domain.models.outcome import GateResult, Outcome, TaskStatus
from wfgate.domain.models.record import Record, User, Version

__all__ = [
    "FileArtifact",
    "GateResult",
    "Notification",
    "Outcome",
    "Record",
    "SharedFileContext",
    "TaskStatus",
    "User",
    "Version",
]
