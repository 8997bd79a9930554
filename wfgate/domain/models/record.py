"""Record, user and version models owned by the record store."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Record(BaseModel):
    """A reviewable record.

    ``approved`` is tri-state: None until a reviewer decides, then True/False.
    """

    id: str
    name: str
    approved: bool | None = None
    assigned_to: str | None = None
    assigned_on: datetime | None = None
    modified_by: str | None = None
    created_by: str | None = None
    created_on: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("id")
    @classmethod
    def _id_non_empty(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("id must be non-empty")
        return v2


class User(BaseModel):
    """A user who can start, be assigned or review approvals."""

    model_config = ConfigDict(frozen=True)

    id: str
    username: str
    email: str | None = None


class Version(BaseModel):
    """A content revision of a record, backed by a file on disk."""

    model_config = ConfigDict(frozen=True)

    id: str
    record_id: str
    file_path: str
    created_on: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
