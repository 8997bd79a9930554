"""Notification persistence and e-mail delivery."""

from wfgate.domain.notifications.mailer import EmailSettings, Mailer, SmtpMailer
from wfgate.domain.notifications.sink import NotificationSink

__all__ = ["EmailSettings", "Mailer", "NotificationSink", "SmtpMailer"]
