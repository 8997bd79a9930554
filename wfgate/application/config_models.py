"""Configuration models for the engine and for individual approval gates.

Workflow file structure:
    workflow_id: invoice-review
    started_by: u-admin
    is_approval: true
    task_id: 1
    gate:
      record: r-42
      assigned_to: u-reviewer
      on_approved: "2, 3"
      on_rejected: [4]
      on_deleted: ""
      on_stopped: "4"
      timeout: 86400
    tasks:
      - id: 2
        type: copy_files
        settings:
          dest_dir: out/approved
"""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from wfgate.application.tasks.task_runner import parse_task_ids
from wfgate.domain.constants import (
    DEFAULT_APPROVAL_ROOT,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_STORE_ROOT,
)
from wfgate.domain.models.outcome import Outcome
from wfgate.domain.notifications.mailer import EmailSettings


class GateSettings(BaseModel):
    """Settings of one approval gate task.

    Attributes:
        record: Id of the record under review
        assigned_to: Id of the reviewing user
        on_approved: Task ids run when the record is approved
        on_rejected: Task ids run when the record is rejected
        on_deleted: Task ids run when the record is deleted while waiting
        on_stopped: Task ids run when the gate is stopped or cancelled
        poll_interval: Seconds between polls of the record store
        timeout: Seconds to wait before resolving as stopped (None = forever)
    """

    model_config = ConfigDict(extra="forbid")

    # Empty ids are rejected by the gate itself, with a ConfigurationError
    record: str = ""
    assigned_to: str = ""
    on_approved: list[int] = Field(default_factory=list)
    on_rejected: list[int] = Field(default_factory=list)
    on_deleted: list[int] = Field(default_factory=list)
    on_stopped: list[int] = Field(default_factory=list)
    poll_interval: float = DEFAULT_POLL_INTERVAL
    timeout: float | None = None

    @field_validator("record", "assigned_to", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("on_approved", "on_rejected", "on_deleted", "on_stopped", mode="before")
    @classmethod
    def _parse_task_ids(cls, v: Any) -> list[int]:
        return parse_task_ids(v)

    @field_validator("poll_interval")
    @classmethod
    def _poll_interval_ge_0(cls, v: float) -> float:
        if v < 0:
            raise ValueError("poll_interval must be >= 0")
        return v

    @field_validator("timeout")
    @classmethod
    def _timeout_gt_0(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError("timeout must be > 0")
        return v

    def task_ids_for(self, outcome: Outcome) -> list[int]:
        """Task ids configured for an outcome."""
        outcome_map: dict[Outcome, list[int]] = {
            Outcome.APPROVED: self.on_approved,
            Outcome.REJECTED: self.on_rejected,
            Outcome.DELETED: self.on_deleted,
            Outcome.STOPPED: self.on_stopped,
        }
        return outcome_map[outcome]


class TaskConfig(BaseModel):
    """Declaration of a downstream task in a workflow file."""

    model_config = ConfigDict(extra="forbid")

    id: int
    type: str
    settings: dict[str, Any] = Field(default_factory=dict)


class WorkflowDefinition(BaseModel):
    """A workflow holding one approval gate and its downstream tasks."""

    model_config = ConfigDict(extra="forbid")

    workflow_id: str
    started_by: str
    is_approval: bool = True
    task_id: int = 1
    gate: GateSettings = Field(default_factory=GateSettings)
    tasks: list[TaskConfig] = Field(default_factory=list)

    @field_validator("workflow_id", "started_by", mode="before")
    @classmethod
    def _coerce_str(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v


class EngineConfig(BaseModel):
    """Engine-wide settings (store location, polling, e-mail)."""

    model_config = ConfigDict(extra="forbid")

    store_root: Path = DEFAULT_STORE_ROOT
    approval_root: Path = DEFAULT_APPROVAL_ROOT
    poll_interval: float = DEFAULT_POLL_INTERVAL
    email: EmailSettings = Field(default_factory=EmailSettings)
