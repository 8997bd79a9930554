"""Gate event payload model."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from wfgate.domain.events.event_types import GateEventType
from wfgate.domain.models.outcome import Outcome


class GateEvent(BaseModel):
    """Immutable event payload for gate notifications."""

    model_config = {"frozen": True}

    event_type: GateEventType
    workflow_id: str
    run_id: str
    task_id: int
    record_id: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    outcome: Outcome | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
