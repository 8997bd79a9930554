"""Tests for ApprovalGate setup: validation, resolution and assignment."""

from tests.fakes import GATE_TASK, FakeRecordStore
from wfgate.application.workflow_run import WorkflowRun
from wfgate.domain.models.outcome import Outcome, TaskStatus


class TestApprovalGateValidation:
    """Invalid settings fail before anything is read or written."""

    def test_not_an_approval_workflow_is_error(
        self, make_gate, store: FakeRecordStore, workflow: WorkflowRun
    ) -> None:
        workflow.is_approval = False

        result = make_gate().run()

        assert result.status == TaskStatus.ERROR
        assert result.outcome is None
        assert "not an approval workflow" in result.error
        assert store.get_record_calls == 0
        assert store.notifications == []

    def test_empty_record_id_is_error(self, make_gate, store: FakeRecordStore) -> None:
        result = make_gate(record="").run()

        assert result.status == TaskStatus.ERROR
        assert "record id setting is empty" in result.error
        assert store.notifications == []

    def test_empty_assignee_sends_nothing_and_never_polls(
        self, make_gate, store: FakeRecordStore, workflow: WorkflowRun
    ) -> None:
        """An empty assignee id fails immediately with zero notifications."""
        result = make_gate(assigned_to="   ").run()

        assert result.status == TaskStatus.ERROR
        assert "assignedTo id setting is empty" in result.error
        assert store.notifications == []
        assert store.get_record_calls == 0
        assert store.records["R1"].assigned_to is None
        assert workflow.is_waiting_for_approval is False

    def test_unknown_downstream_task_fails_before_mutation(
        self, make_gate, store: FakeRecordStore
    ) -> None:
        result = make_gate(on_rejected="3, 99").run()

        assert result.status == TaskStatus.ERROR
        assert "Task 99" in result.error
        assert store.notifications == []
        assert store.updates == []


class TestApprovalGateResolution:
    """Records and users must resolve before the gate starts."""

    def test_missing_record_is_error(self, make_gate, store: FakeRecordStore) -> None:
        result = make_gate(record="R9").run()

        assert result.status == TaskStatus.ERROR
        assert "Record 'R9'" in result.error
        assert store.notifications == []

    def test_missing_assignee_is_error(self, make_gate, store: FakeRecordStore) -> None:
        result = make_gate(assigned_to="U9").run()

        assert result.status == TaskStatus.ERROR
        assert "User 'U9'" in result.error
        assert store.notifications == []
        assert store.updates == []

    def test_missing_starter_is_error(
        self, make_gate, store: FakeRecordStore, workflow: WorkflowRun
    ) -> None:
        workflow.started_by = "U404"

        result = make_gate().run()

        assert result.status == TaskStatus.ERROR
        assert "U404" in result.error
        assert store.updates == []


class TestApprovalGateStart:
    """Successful setup notifies, assigns and flags waiting before polling."""

    def test_start_notification_and_assignment_precede_first_poll(
        self, make_gate, store: FakeRecordStore, workflow: WorkflowRun, approve
    ) -> None:
        seen = {}

        def first_tick() -> None:
            seen["notifications"] = list(store.messages)
            seen["record"] = store.records["R1"].model_copy()
            seen["waiting"] = workflow.is_waiting_for_approval
            approve()

        store.at_tick(1, first_tick)

        result = make_gate().run()

        assert result.outcome == Outcome.APPROVED
        assert len(seen["notifications"]) == 1
        assert "An approval process on the record Invoice 2024-001 has started" in seen["notifications"][0]
        assert seen["record"].assigned_to == "U2"
        assert seen["record"].modified_by == "U1"
        assert seen["record"].assigned_on is not None
        assert seen["record"].approved is None
        assert seen["waiting"] is True

    def test_start_notification_is_unread_from_starter_to_assignee(
        self, make_gate, store: FakeRecordStore, approve
    ) -> None:
        store.at_tick(1, approve)

        make_gate().run()

        start = store.notifications[0]
        assert start.assigned_by == "U1"
        assert start.assigned_to == "U2"
        assert start.is_read is False

    def test_waiting_flag_cleared_after_run(
        self, make_gate, store: FakeRecordStore, workflow: WorkflowRun
    ) -> None:
        store.at_tick(1, lambda: workflow.stop_task(GATE_TASK, by="erin"))

        make_gate().run()

        assert workflow.is_waiting_for_approval is False
