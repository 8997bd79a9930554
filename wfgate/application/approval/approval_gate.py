"""ApprovalGate - pauses a workflow until a record is approved, rejected,
deleted or the gate is stopped.

The gate polls the record store, it is never pushed to. Per tick the
outcome is detected first, then notified, then the record is mutated, then
the shared file context is prepared and the outcome's task set dispatched.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from wfgate.application.cancellation import CancellationToken
from wfgate.application.config_models import GateSettings
from wfgate.application.tasks.task_runner import TaskRunner
from wfgate.application.workflow_run import WorkflowRun
from wfgate.domain.errors import CancellationSignal, ConfigurationError, NotFoundError
from wfgate.domain.events.emitter import GateEventEmitter
from wfgate.domain.events.event import GateEvent
from wfgate.domain.events.event_types import GateEventType
from wfgate.domain.models.file_context import FileArtifact
from wfgate.domain.models.outcome import GateResult, Outcome, TaskStatus
from wfgate.domain.models.record import Record, User
from wfgate.domain.notifications.sink import NotificationSink
from wfgate.domain.persistence.record_store import RecordStore

logger = logging.getLogger(__name__)


@dataclass
class GateContext:
    """Collaborators of an approval gate.

    Bundles the external boundaries so the gate can be tested in isolation
    with fakes.
    """

    store: RecordStore
    notifications: NotificationSink
    runner: TaskRunner
    workflow: WorkflowRun
    emitter: GateEventEmitter = field(default_factory=GateEventEmitter)


@dataclass
class _Participants:
    record_name: str
    starter: User
    assignee: User


class ApprovalGate:
    """Approval state machine for a single record.

    One invocation of ``run()`` resolves to exactly one Outcome. Detection
    priority per tick is Deleted > Approved > Rejected > Stopped.
    """

    def __init__(
        self,
        task_id: int,
        settings: GateSettings,
        context: GateContext,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.task_id = task_id
        self.settings = settings
        self.context = context
        self._clock = clock

    @property
    def store(self) -> RecordStore:
        return self.context.store

    @property
    def workflow(self) -> WorkflowRun:
        return self.context.workflow

    @property
    def trigger(self) -> Path:
        return self.workflow.trigger_path(self.task_id)

    # ========================================================================
    # Entry point
    # ========================================================================

    def run(self, token: CancellationToken | None = None) -> GateResult:
        """Run the gate until a terminal outcome.

        Returns:
            GateResult with SUCCESS and the outcome, or ERROR for any failure

        Raises:
            CancellationSignal: If ``token`` was cancelled. Compensation runs
                only when no outcome had been reached yet
        """
        token = token or CancellationToken()
        logger.info(f"Approval process starting on the record {self.settings.record} ...")

        resolved = False
        try:
            outcome = self._run(token)
            resolved = True
            # A cancel that lands while the outcome's tasks run is still delivered
            token.raise_if_cancelled()
        except CancellationSignal:
            logger.warning(f"Approval process on the record {self.settings.record} was interrupted")
            self._emit(GateEventType.GATE_CANCELLED)
            if not resolved:
                self._compensate_cancellation()
            raise
        except Exception as e:
            logger.exception(f"An error occurred during approval process on the record {self.settings.record}")
            self._emit(GateEventType.GATE_FAILED, metadata={"error": str(e)})
            return GateResult(status=TaskStatus.ERROR, error=str(e))
        finally:
            self._set_waiting(False)
            self._remove_trigger()

        if outcome == Outcome.APPROVED:
            logger.info(f"Task approved: {self.trigger}")
        elif outcome == Outcome.REJECTED:
            logger.info("This workflow has been rejected.")

        logger.info("Approval process finished.")
        return GateResult(status=TaskStatus.SUCCESS, outcome=outcome)

    def _run(self, token: CancellationToken) -> Outcome:
        self._validate()
        record, participants = self._resolve_participants()
        self._start(record, participants)
        return self._wait_for_outcome(participants, token)

    # ========================================================================
    # Setup
    # ========================================================================

    def _validate(self) -> None:
        if not self.workflow.is_approval:
            raise ConfigurationError(
                "This workflow is not an approval workflow. "
                "Mark this workflow as an approval workflow to use this task."
            )
        if not self.settings.record:
            raise ConfigurationError("The record id setting is empty.")
        if not self.settings.assigned_to:
            raise ConfigurationError("The assignedTo id setting is empty.")

        # Unknown downstream ids must fail before anything is mutated
        for outcome in Outcome:
            self.context.runner.resolve(self.settings.task_ids_for(outcome))

    def _resolve_participants(self) -> tuple[Record, _Participants]:
        record = self.store.get_record(self.settings.record)
        if record is None:
            raise NotFoundError("record", self.settings.record)

        assignee = self.store.get_user(self.settings.assigned_to)
        if assignee is None:
            raise NotFoundError("user", self.settings.assigned_to)

        starter = self.store.get_user(self.workflow.started_by)
        if starter is None:
            raise NotFoundError("user", self.workflow.started_by)

        return record, _Participants(record_name=record.name, starter=starter, assignee=assignee)

    def _start(self, record: Record, participants: _Participants) -> None:
        assignee = participants.assignee
        self.context.notifications.notify(
            f"An approval process on the record {record.name} has started. "
            "You must update that record by adding new file versions. "
            "You can also add comments on that record.",
            participants.starter,
            assignee,
        )
        logger.info(
            f"ApprovalGate.on_start: User {assignee.username} notified for the start "
            f"of approval process on the record {record.id} - {record.name}."
        )
        self._emit(GateEventType.APPROVAL_STARTED)

        assigned = record.model_copy(
            update={
                "modified_by": participants.starter.id,
                "assigned_to": assignee.id,
                "assigned_on": datetime.now(timezone.utc),
            }
        )
        self.store.update_record(assigned.id, assigned)
        logger.info(f"Record {assigned.id} - {assigned.name} assigned to {assignee.username}.")
        self._emit(GateEventType.RECORD_ASSIGNED, metadata={"assigned_to": assignee.id})

        self._set_waiting(True)

    # ========================================================================
    # Polling
    # ========================================================================

    def _wait_for_outcome(self, participants: _Participants, token: CancellationToken) -> Outcome:
        started = self._clock()

        while True:
            token.raise_if_cancelled()

            outcome, record = self._detect_outcome()
            timed_out = False
            if outcome is None and self._timed_out(started):
                outcome, timed_out = Outcome.STOPPED, True

            if outcome is not None:
                self._resolve(outcome, record, participants, timed_out=timed_out)
                return outcome

            token.wait(self.settings.poll_interval)

    def _detect_outcome(self) -> tuple[Outcome | None, Record | None]:
        """Evaluate terminal conditions in priority order; first match wins."""
        record = self.store.get_record(self.settings.record)
        if record is None:
            return Outcome.DELETED, None
        if self.trigger.exists():
            return Outcome.APPROVED, record
        if self.workflow.is_rejected:
            return Outcome.REJECTED, record
        if self.workflow.is_task_stopped(self.task_id):
            return Outcome.STOPPED, record
        return None, record

    def _timed_out(self, started: float) -> bool:
        if self.settings.timeout is None:
            return False
        return self._clock() - started >= self.settings.timeout

    # ========================================================================
    # Resolution
    # ========================================================================

    def _resolve(
        self,
        outcome: Outcome,
        record: Record | None,
        participants: _Participants,
        *,
        timed_out: bool = False,
    ) -> None:
        """Notify, mutate the record, then dispatch the outcome's tasks."""
        name = record.name if record is not None else participants.record_name
        message = self._outcome_message(outcome, name, participants, timed_out=timed_out)
        self.context.notifications.notify(message, participants.starter, participants.assignee)
        logger.info(
            f"ApprovalGate.on_{outcome.value}: User {participants.assignee.username} "
            f"notified for record {self.settings.record} - {name}."
        )
        self._emit(GateEventType.OUTCOME_REACHED, outcome=outcome, metadata={"timed_out": timed_out})

        if record is not None and outcome in (Outcome.APPROVED, Outcome.REJECTED):
            updated = record.model_copy(update={"approved": outcome == Outcome.APPROVED})
            self.store.update_record(updated.id, updated)
            logger.info(f"Record {updated.id} - {updated.name} updated.")

        artifact = None if outcome == Outcome.DELETED else self._latest_artifact()
        self._dispatch(outcome, artifact)

    def _outcome_message(
        self,
        outcome: Outcome,
        record_name: str,
        participants: _Participants,
        *,
        timed_out: bool = False,
    ) -> str:
        if outcome == Outcome.DELETED:
            return (
                f"The approval process on the record {record_name} was stopped "
                "because the record was deleted."
            )
        if outcome == Outcome.APPROVED:
            approver = self.workflow.approved_by or self._read_trigger() or participants.assignee.username
            return f"The record {record_name} was approved by the user {approver}."
        if outcome == Outcome.REJECTED:
            rejecter = self.workflow.rejected_by or participants.assignee.username
            return f"The record {record_name} was rejected by the user {rejecter}."
        if timed_out:
            return (
                f"The approval process on the record {record_name} was stopped "
                f"after waiting {self.settings.timeout:g} seconds."
            )
        return self._stopped_message(record_name, participants.starter)

    def _stopped_message(self, record_name: str, starter: User) -> str:
        stopper = self.workflow.stopped_by or starter.username
        return f"The approval process on the record {record_name} was stopped by the user {stopper}."

    def _latest_artifact(self) -> FileArtifact | None:
        version = self.store.get_latest_version(self.settings.record)
        if version is None:
            return None
        return FileArtifact(path=version.file_path, task_id=self.task_id)

    def _dispatch(self, outcome: Outcome, artifact: FileArtifact | None) -> None:
        """Run the outcome's task set inside a scoped file context."""
        task_ids = self.settings.task_ids_for(outcome)
        with self.workflow.files.acquire(artifact) as files:
            self.context.runner.run(task_ids, files)
        self._emit(GateEventType.TASKS_DISPATCHED, outcome=outcome, metadata={"task_ids": task_ids})

    # ========================================================================
    # Cancellation
    # ========================================================================

    def _compensate_cancellation(self) -> None:
        """Notify and run the stopped task set after a forced interruption.

        Best-effort: anything that no longer resolves skips the rest, and
        failures are logged, never raised over the cancellation signal.
        """
        try:
            record = self.store.get_record(self.settings.record)
            if record is None:
                return

            starter = self.store.get_user(self.workflow.started_by)
            assignee = self.store.get_user(self.settings.assigned_to)
            if starter is None or assignee is None:
                return

            self.context.notifications.notify(self._stopped_message(record.name, starter), starter, assignee)
            logger.info(
                f"ApprovalGate.on_stopped: User {assignee.username} notified for the stop "
                f"of the approval process of the record {record.id} - {record.name}."
            )
            self._dispatch(Outcome.STOPPED, self._latest_artifact())
        except Exception:
            logger.exception(f"Cleanup after interruption failed for record {self.settings.record}")

    # ========================================================================
    # Helpers
    # ========================================================================

    def _set_waiting(self, waiting: bool) -> None:
        if self.workflow.is_waiting_for_approval == waiting:
            return
        self.workflow.is_waiting_for_approval = waiting
        self._emit(GateEventType.WAITING_CHANGED, metadata={"waiting": waiting})

    def _read_trigger(self) -> str:
        try:
            return self.trigger.read_text(encoding="utf-8").strip()
        except OSError:
            return ""

    def _remove_trigger(self) -> None:
        try:
            self.trigger.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove approval trigger {self.trigger}: {e}")

    def _emit(
        self,
        event_type: GateEventType,
        *,
        outcome: Outcome | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        self.context.emitter.emit(
            GateEvent(
                event_type=event_type,
                workflow_id=self.workflow.workflow_id,
                run_id=self.workflow.run_id,
                task_id=self.task_id,
                record_id=self.settings.record,
                outcome=outcome,
                metadata=metadata or {},
            )
        )
