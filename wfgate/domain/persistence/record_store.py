"""Abstract record store consumed by the approval gate.

The gate has no push channel into the store; it polls these methods.
"""

from abc import ABC, abstractmethod

from wfgate.domain.models.notification import Notification
from wfgate.domain.models.record import Record, User, Version


class RecordStore(ABC):
    """Persistence boundary for records, users, versions and notifications."""

    @abstractmethod
    def get_record(self, record_id: str) -> Record | None:
        """Return a fresh snapshot of the record, or None if it does not exist."""
        ...

    @abstractmethod
    def get_user(self, user_id: str) -> User | None:
        ...

    @abstractmethod
    def update_record(self, record_id: str, record: Record) -> None:
        ...

    @abstractmethod
    def get_latest_version(self, record_id: str) -> Version | None:
        """Return the most recent version of the record, or None if it has none."""
        ...

    @abstractmethod
    def insert_notification(self, notification: Notification) -> None:
        ...
