"""Gate event emitter for dispatching events to observers."""

import logging
from collections import defaultdict

from wfgate.domain.events.event import GateEvent
from wfgate.domain.events.event_types import GateEventType
from wfgate.domain.events.observer import GateObserver

logger = logging.getLogger(__name__)


class GateEventEmitter:
    """Central event dispatcher for gate events."""

    def __init__(self) -> None:
        self._observers: dict[GateEventType, list[GateObserver]] = defaultdict(list)
        self._global_observers: list[GateObserver] = []

    def subscribe(
        self,
        observer: GateObserver,
        event_types: list[GateEventType] | None = None,
    ) -> None:
        """Subscribe to specific event types, or all events if None."""
        if event_types is None:
            self._global_observers.append(observer)
        else:
            for event_type in event_types:
                self._observers[event_type].append(observer)

    def emit(self, event: GateEvent) -> None:
        """Dispatch event to all relevant observers."""
        for observer in self._global_observers:
            self._safe_notify(observer, event)
        for observer in self._observers.get(event.event_type, []):
            self._safe_notify(observer, event)

    def _safe_notify(self, observer: GateObserver, event: GateEvent) -> None:
        """Notify observer, catching and logging any exceptions."""
        try:
            observer.on_event(event)
        except Exception as e:
            logger.warning(f"Observer {observer} failed on {event.event_type}: {e}")
