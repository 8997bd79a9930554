"""Cooperative cancellation for waiting gates."""

import threading

from wfgate.domain.errors import CancellationSignal


class CancellationToken:
    """Thread-safe cancellation flag checked at every wait boundary.

    Any thread (signal handler, engine teardown) may call ``cancel()``;
    the waiting gate observes it at its next tick or immediately if it is
    blocked in ``wait()``.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self.reason: str | None = None

    def cancel(self, reason: str | None = None) -> None:
        self.reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise CancellationSignal(self.reason or "cancelled")

    def wait(self, timeout: float) -> None:
        """Block up to ``timeout`` seconds.

        Raises:
            CancellationSignal: If the token is (or becomes) cancelled
        """
        if self._event.wait(timeout):
            raise CancellationSignal(self.reason or "cancelled")
