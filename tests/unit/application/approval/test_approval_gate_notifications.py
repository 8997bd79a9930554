"""Tests for notification delivery and event reporting of ApprovalGate."""

from unittest.mock import MagicMock

from tests.fakes import FakeMailer, FakeRecordStore
from wfgate.domain.events.emitter import GateEventEmitter
from wfgate.domain.events.event_types import GateEventType
from wfgate.domain.models.outcome import Outcome, TaskStatus


class TestGateEmail:

    def test_email_disabled_persists_without_transport(
        self, make_gate, store: FakeRecordStore, approve
    ) -> None:
        store.at_tick(1, approve)

        result = make_gate(mailer=None).run()

        assert result.status == TaskStatus.SUCCESS
        assert len(store.notifications) == 2

    def test_email_enabled_mails_every_notification(
        self, make_gate, store: FakeRecordStore, approve
    ) -> None:
        mailer = FakeMailer()
        store.at_tick(1, approve)

        make_gate(mailer=mailer).run()

        assert [to for to, _, _ in mailer.sent] == ["bob@example.com", "bob@example.com"]
        assert all(subject == "Workflow notification from alice" for _, subject, _ in mailer.sent)
        assert [body for _, _, body in mailer.sent] == store.messages

    def test_delivery_failure_does_not_block_gate(
        self, make_gate, store: FakeRecordStore, approve
    ) -> None:
        store.at_tick(1, approve)

        result = make_gate(mailer=FakeMailer(fail=True)).run()

        assert result.status == TaskStatus.SUCCESS
        assert result.outcome == Outcome.APPROVED
        assert len(store.notifications) == 2


class TestGateEvents:

    def test_approved_run_event_sequence(
        self, make_gate, store: FakeRecordStore, approve
    ) -> None:
        emitter = GateEventEmitter()
        observer = MagicMock()
        emitter.subscribe(observer)
        store.at_tick(1, approve)

        make_gate(emitter=emitter).run()

        events = [call[0][0] for call in observer.on_event.call_args_list]
        assert [e.event_type for e in events] == [
            GateEventType.APPROVAL_STARTED,
            GateEventType.RECORD_ASSIGNED,
            GateEventType.WAITING_CHANGED,
            GateEventType.OUTCOME_REACHED,
            GateEventType.TASKS_DISPATCHED,
            GateEventType.WAITING_CHANGED,
        ]
        assert events[2].metadata == {"waiting": True}
        assert events[3].outcome == Outcome.APPROVED
        assert events[5].metadata == {"waiting": False}
        assert {(e.workflow_id, e.run_id, e.task_id) for e in events} == {("wf-42", "run-1", 1)}

    def test_failure_emits_gate_failed(self, make_gate, store: FakeRecordStore) -> None:
        emitter = GateEventEmitter()
        observer = MagicMock()
        emitter.subscribe(observer, event_types=[GateEventType.GATE_FAILED])

        make_gate(emitter=emitter, record="R9").run()

        observer.on_event.assert_called_once()
        assert "R9" in observer.on_event.call_args[0][0].metadata["error"]
