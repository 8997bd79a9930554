from typing import Literal

from pydantic import BaseModel, Field


class BaseOutput(BaseModel):
    schema_version: int = 1
    command: Literal["run", "approve", "status"]
    exit_code: int
    error: str | None = None


class RunOutput(BaseOutput):
    command: Literal["run"] = "run"
    workflow_id: str | None = None
    run_id: str | None = None
    status: str | None = None
    outcome: str | None = None
    cancelled: bool = False


class ApproveOutput(BaseOutput):
    command: Literal["approve"] = "approve"
    trigger_path: str | None = None


class StatusOutput(BaseOutput):
    command: Literal["status"] = "status"
    record_id: str
    name: str | None = None
    approved: bool | None = None
    assigned_to: str | None = None
    assigned_on: str | None = None
    latest_version: str | None = None
    notifications: list[str] = Field(default_factory=list)
