"""Gate event types for observer pattern notifications."""

from enum import Enum


class GateEventType(str, Enum):
    """Typed gate lifecycle events for status reporting."""

    # Setup
    APPROVAL_STARTED = "approval_started"
    RECORD_ASSIGNED = "record_assigned"

    # Waiting
    WAITING_CHANGED = "waiting_changed"

    # Resolution
    OUTCOME_REACHED = "outcome_reached"
    TASKS_DISPATCHED = "tasks_dispatched"

    # Abnormal termination
    GATE_FAILED = "gate_failed"
    GATE_CANCELLED = "gate_cancelled"
