"""Stderr event observer for CLI integration."""

import click

from wfgate.domain.events.event import GateEvent


class StderrEventObserver:
    """Emits events as structured lines to stderr."""

    def on_event(self, event: GateEvent) -> None:
        """Emit event as structured line to stderr."""
        parts = [f"[EVENT] {event.event_type.value}", f"record={event.record_id}"]
        if event.outcome:
            parts.append(f"outcome={event.outcome.name}")
        if "waiting" in event.metadata:
            parts.append(f"waiting={str(event.metadata['waiting']).lower()}")
        if "task_ids" in event.metadata:
            ids = ",".join(str(i) for i in event.metadata["task_ids"])
            parts.append(f"tasks=[{ids}]")
        click.echo(" ".join(parts), err=True)
