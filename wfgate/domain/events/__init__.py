"""Gate event system for observer pattern notifications."""

from wfgate.domain.events.event_types import GateEventType
from wfgate.domain.events.event import GateEvent
from wfgate.domain.events.observer import GateObserver
from wfgate.domain.events.emitter import GateEventEmitter
from wfgate.domain.events.stderr_observer import StderrEventObserver

__all__ = [
    "GateEventType",
    "GateEvent",
    "GateObserver",
    "GateEventEmitter",
    "StderrEventObserver",
]
