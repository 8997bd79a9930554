"""Notification sink: persists notifications and optionally e-mails them."""

import logging

from wfgate.domain.errors import TransientIOError
from wfgate.domain.models.notification import Notification
from wfgate.domain.models.record import User
from wfgate.domain.notifications.mailer import Mailer
from wfgate.domain.persistence.record_store import RecordStore

logger = logging.getLogger(__name__)


class NotificationSink:
    """Persists every notification; e-mails it when a mailer is configured.

    E-mail delivery is best-effort: failures are logged and never raised,
    so a broken SMTP server cannot stall the approval state machine.
    Persistence failures do propagate.
    """

    def __init__(self, store: RecordStore, mailer: Mailer | None = None) -> None:
        self.store = store
        self.mailer = mailer

    @property
    def email_enabled(self) -> bool:
        return self.mailer is not None

    def notify(self, message: str, sender: User, recipient: User) -> Notification:
        """Record a notification from ``sender`` to ``recipient``.

        Returns:
            The persisted Notification (always unread)
        """
        notification = Notification(
            message=message,
            assigned_by=sender.id,
            assigned_to=recipient.id,
        )
        self.store.insert_notification(notification)

        if self.mailer is not None:
            self._deliver(notification, sender, recipient)

        return notification

    def _deliver(self, notification: Notification, sender: User, recipient: User) -> None:
        if not recipient.email:
            logger.warning(f"User {recipient.username} has no e-mail address; notification not mailed")
            return

        subject = f"Workflow notification from {sender.username}"
        try:
            self.mailer.send(recipient.email, subject, notification.message)
        except TransientIOError as e:
            logger.warning(f"Notification {notification.id} not delivered: {e}")
