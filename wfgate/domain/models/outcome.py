"""Gate outcome and status models."""

from enum import Enum

from pydantic import BaseModel


class Outcome(str, Enum):
    """Terminal classification of a gate invocation.

    Enum order is the detection priority: a deleted record trumps
    everything, approval trumps rejection, rejection trumps stop.
    """

    DELETED = "deleted"
    APPROVED = "approved"
    REJECTED = "rejected"
    STOPPED = "stopped"


class TaskStatus(str, Enum):
    SUCCESS = "success"    # Gate reached a terminal outcome
    ERROR = "error"        # Setup or polling failed


class GateResult(BaseModel):
    """What a gate invocation reports back to the enclosing workflow."""

    status: TaskStatus
    outcome: Outcome | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == TaskStatus.SUCCESS
