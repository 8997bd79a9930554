from pathlib import Path
from typing import Any, Callable

import pytest

from tests.fakes import (
    APPROVED_TASK,
    DELETED_TASK,
    GATE_TASK,
    REJECTED_TASK,
    STOPPED_TASK,
    FakeRecordStore,
    RecordingTask,
)
from wfgate.application.approval.approval_gate import ApprovalGate, GateContext
from wfgate.application.config_models import GateSettings
from wfgate.application.tasks.task_runner import TaskRunner
from wfgate.application.workflow_run import WorkflowRun
from wfgate.domain.events.emitter import GateEventEmitter
from wfgate.domain.models.record import Record, User, Version
from wfgate.domain.notifications.sink import NotificationSink


@pytest.fixture
def version_file(tmp_path: Path) -> Path:
    path = tmp_path / "versions" / "R1-v2.pdf"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"%PDF-1.4 latest")
    return path


@pytest.fixture
def store(version_file: Path) -> FakeRecordStore:
    """Store seeded with record R1, starter U1, assignee U2 and two versions of R1."""
    s = FakeRecordStore()
    s.records["R1"] = Record(id="R1", name="Invoice 2024-001", created_by="U1")
    s.users["U1"] = User(id="U1", username="alice", email="alice@example.com")
    s.users["U2"] = User(id="U2", username="bob", email="bob@example.com")
    s.versions["R1"] = [
        Version(id="v1", record_id="R1", file_path=str(version_file.with_name("R1-v1.pdf")),
                created_on="2024-01-01T00:00:00+00:00"),
        Version(id="v2", record_id="R1", file_path=str(version_file),
                created_on="2024-02-01T00:00:00+00:00"),
    ]
    return s


@pytest.fixture
def journal() -> list[tuple[int, list[str]]]:
    return []


@pytest.fixture
def runner(journal: list[tuple[int, list[str]]]) -> TaskRunner:
    return TaskRunner(
        RecordingTask(task_id, journal)
        for task_id in (APPROVED_TASK, REJECTED_TASK, DELETED_TASK, STOPPED_TASK)
    )


@pytest.fixture
def workflow(tmp_path: Path) -> WorkflowRun:
    return WorkflowRun(
        workflow_id="wf-42",
        run_id="run-1",
        started_by="U1",
        is_approval=True,
        approval_root=tmp_path / "approval",
    )


@pytest.fixture
def make_gate(store: FakeRecordStore, runner: TaskRunner, workflow: WorkflowRun):
    """Factory for gates over the shared fakes.

    Keyword arguments override GateSettings; ``mailer``, ``emitter`` and
    ``clock`` are passed through to the collaborators.
    """

    def _make(mailer=None, emitter: GateEventEmitter | None = None, clock=None, **overrides: Any) -> ApprovalGate:
        values: dict[str, Any] = {
            "record": "R1",
            "assigned_to": "U2",
            "on_approved": str(APPROVED_TASK),
            "on_rejected": str(REJECTED_TASK),
            "on_deleted": str(DELETED_TASK),
            "on_stopped": str(STOPPED_TASK),
            "poll_interval": 0,
        }
        values.update(overrides)
        context = GateContext(
            store=store,
            notifications=NotificationSink(store, mailer),
            runner=runner,
            workflow=workflow,
            emitter=emitter or GateEventEmitter(),
        )
        kwargs = {"clock": clock} if clock is not None else {}
        return ApprovalGate(GATE_TASK, GateSettings(**values), context, **kwargs)

    return _make


@pytest.fixture
def approve(workflow: WorkflowRun) -> Callable[[], None]:
    """Create the approval trigger file of the gate task."""

    def _approve(by: str = "carol") -> None:
        trigger = workflow.trigger_path(GATE_TASK)
        trigger.parent.mkdir(parents=True, exist_ok=True)
        trigger.write_text(by, encoding="utf-8")

    return _approve
