"""Notification model persisted for every gate transition."""

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class Notification(BaseModel):
    """Write-once message from the workflow starter to the assignee."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    message: str
    assigned_by: str     # Sender user id
    assigned_to: str     # Recipient user id
    assigned_on: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    is_read: bool = False
