"""Domain-level exceptions for the approval gate."""


class ApprovalGateError(Exception):
    """Base class for approval gate failures."""

    pass


class ConfigurationError(ApprovalGateError):
    """Raised when gate settings are missing or invalid."""

    pass


class NotFoundError(ApprovalGateError):
    """Raised when a record or user does not resolve in the record store."""

    def __init__(self, kind: str, identifier: str) -> None:
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind.capitalize()} '{identifier}' does not exist in the record store")


class TransientIOError(ApprovalGateError):
    """Raised when a notification could not be delivered (SMTP, network)."""

    pass


class RecordStoreError(ApprovalGateError):
    """Raised when persisted store data cannot be read back."""

    pass


class CancellationSignal(BaseException):
    """Forced interruption of a waiting gate.

    Derives from BaseException so ``except Exception`` never swallows it.
    """

    pass
