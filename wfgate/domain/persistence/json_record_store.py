from pathlib import Path
import json
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from wfgate.domain.constants import DEFAULT_STORE_ROOT, JSON_TEMP_SUFFIX
from wfgate.domain.errors import RecordStoreError
from wfgate.domain.models.notification import Notification
from wfgate.domain.models.record import Record, User, Version
from wfgate.domain.persistence.record_store import RecordStore

ModelT = TypeVar("ModelT", bound=BaseModel)


class JsonRecordStore(RecordStore):
    """Record store backed by one JSON file per entity.

    Layout under ``store_root``::

        records/<record_id>.json
        users/<user_id>.json
        versions/<record_id>/<version_id>.json
        notifications/<notification_id>.json
    """

    def __init__(self, store_root: Path | None = None):
        """
        Initialize the store.

        Args:
            store_root: Root directory for all entities (default: .wfgate/store)
        """
        self.store_root = store_root or DEFAULT_STORE_ROOT
        for sub in ("records", "users", "versions", "notifications"):
            (self.store_root / sub).mkdir(parents=True, exist_ok=True)

    # ========================================================================
    # Records
    # ========================================================================

    def get_record(self, record_id: str) -> Record | None:
        return self._read(self._record_file(record_id), Record)

    def insert_record(self, record: Record) -> Path:
        return self._write(self._record_file(record.id), record)

    def update_record(self, record_id: str, record: Record) -> None:
        """
        Persist the record under ``record_id``.

        Raises:
            RecordStoreError: If the record no longer exists
        """
        path = self._record_file(record_id)
        if not path.exists():
            raise RecordStoreError(f"Record '{record_id}' not found at {path}")
        self._write(path, record)

    def delete_record(self, record_id: str) -> None:
        """
        Delete a record and its versions.

        Raises:
            FileNotFoundError: If the record doesn't exist
        """
        path = self._record_file(record_id)
        if not path.exists():
            raise FileNotFoundError(f"Record '{record_id}' not found")
        path.unlink()
        versions_dir = self.store_root / "versions" / record_id
        if versions_dir.exists():
            for version_file in versions_dir.glob("*.json"):
                version_file.unlink()
            versions_dir.rmdir()

    def list_records(self) -> list[str]:
        return sorted(p.stem for p in (self.store_root / "records").glob("*.json"))

    # ========================================================================
    # Users
    # ========================================================================

    def get_user(self, user_id: str) -> User | None:
        return self._read(self.store_root / "users" / f"{user_id}.json", User)

    def insert_user(self, user: User) -> Path:
        return self._write(self.store_root / "users" / f"{user.id}.json", user)

    # ========================================================================
    # Versions
    # ========================================================================

    def insert_version(self, version: Version) -> Path:
        path = self.store_root / "versions" / version.record_id / f"{version.id}.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        return self._write(path, version)

    def get_latest_version(self, record_id: str) -> Version | None:
        versions_dir = self.store_root / "versions" / record_id
        if not versions_dir.exists():
            return None

        versions = []
        for version_file in versions_dir.glob("*.json"):
            version = self._read(version_file, Version)
            if version is not None:
                versions.append(version)

        if not versions:
            return None
        return max(versions, key=lambda v: v.created_on)

    # ========================================================================
    # Notifications
    # ========================================================================

    def insert_notification(self, notification: Notification) -> None:
        self._write(self.store_root / "notifications" / f"{notification.id}.json", notification)

    def list_notifications(self, assigned_to: str | None = None) -> list[Notification]:
        """
        List persisted notifications, oldest first.

        Args:
            assigned_to: Only return notifications for this recipient
        """
        notifications = []
        for path in (self.store_root / "notifications").glob("*.json"):
            notification = self._read(path, Notification)
            if notification is None:
                continue
            if assigned_to is not None and notification.assigned_to != assigned_to:
                continue
            notifications.append(notification)
        return sorted(notifications, key=lambda n: n.assigned_on)

    # ========================================================================
    # Internal
    # ========================================================================

    def _record_file(self, record_id: str) -> Path:
        return self.store_root / "records" / f"{record_id}.json"

    def _write(self, path: Path, model: BaseModel) -> Path:
        temp_file = path.with_suffix(JSON_TEMP_SUFFIX)
        data = self._serialize(model)

        # Write atomically - write to temp, then rename
        with open(temp_file, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        temp_file.replace(path)
        return path

    def _read(self, path: Path, model_type: type[ModelT]) -> ModelT | None:
        # Entities may be deleted between polls; treat a vanished file as absent.
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            return None
        except json.JSONDecodeError as e:
            raise RecordStoreError(f"Invalid JSON in {path}: {e}") from e

        try:
            return model_type(**data)
        except ValidationError as e:
            raise RecordStoreError(f"Invalid {model_type.__name__} data in {path}: {e}") from e

    def _serialize(self, model: BaseModel) -> dict[str, Any]:
        return model.model_dump(mode='json')
