"""E-mail transport for gate notifications."""

import smtplib
from email.message import EmailMessage
from typing import Protocol

from pydantic import BaseModel, ConfigDict, model_validator

from wfgate.domain.errors import TransientIOError


class EmailSettings(BaseModel):
    """SMTP connection settings.

    Attributes:
        enabled: Whether notifications are also e-mailed
        host: SMTP server host
        port: SMTP server port
        enable_ssl: Upgrade the connection with STARTTLS
        user: Login user (no login when empty)
        password: Login password
        from_address: Envelope and header sender
    """

    model_config = ConfigDict(extra="forbid")

    enabled: bool = False
    host: str = "localhost"
    port: int = 25
    enable_ssl: bool = False
    user: str | None = None
    password: str | None = None
    from_address: str | None = None
    timeout: float = 30.0

    @model_validator(mode="after")
    def _enabled_requires_sender(self) -> "EmailSettings":
        if self.enabled and not self.from_address:
            raise ValueError("from_address is required when e-mail notifications are enabled")
        return self


class Mailer(Protocol):
    """Anything that can deliver a plain-text message."""

    def send(self, to: str, subject: str, body: str) -> None:
        """Deliver the message. Raises TransientIOError on failure."""
        ...


class SmtpMailer:
    """Delivers plain-text messages through an SMTP server."""

    def __init__(self, settings: EmailSettings) -> None:
        self.settings = settings

    def build_message(self, to: str, subject: str, body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.settings.from_address or ""
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content(body)
        return msg

    def send(self, to: str, subject: str, body: str) -> None:
        msg = self.build_message(to, subject, body)
        try:
            with smtplib.SMTP(self.settings.host, self.settings.port, timeout=self.settings.timeout) as smtp:
                if self.settings.enable_ssl:
                    smtp.starttls()
                if self.settings.user:
                    smtp.login(self.settings.user, self.settings.password or "")
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise TransientIOError(f"Failed to send e-mail to {to}: {e}") from e
