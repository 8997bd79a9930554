"""Assemble an ApprovalGate from configuration."""

from wfgate.application.approval.approval_gate import ApprovalGate, GateContext
from wfgate.application.config_models import EngineConfig, WorkflowDefinition
from wfgate.application.tasks.task_factory import TaskFactory
from wfgate.application.tasks.task_runner import TaskRunner
from wfgate.application.workflow_run import WorkflowRun
from wfgate.domain.events.emitter import GateEventEmitter
from wfgate.domain.notifications.mailer import SmtpMailer
from wfgate.domain.notifications.sink import NotificationSink
from wfgate.domain.persistence.json_record_store import JsonRecordStore
from wfgate.domain.persistence.record_store import RecordStore


def build_gate(
    definition: WorkflowDefinition,
    config: EngineConfig,
    *,
    run_id: str,
    store: RecordStore | None = None,
    emitter: GateEventEmitter | None = None,
) -> ApprovalGate:
    """Wire store, notifications, tasks and workflow run into a gate.

    Args:
        definition: Workflow file contents
        config: Engine configuration
        run_id: Id of this workflow run
        store: Record store (default: JsonRecordStore at config.store_root)
        emitter: Event emitter to report gate events on
    """
    store = store or JsonRecordStore(store_root=config.store_root)
    mailer = SmtpMailer(config.email) if config.email.enabled else None

    runner = TaskRunner(
        TaskFactory.create(task.type, task.id, task.settings) for task in definition.tasks
    )
    workflow = WorkflowRun(
        workflow_id=definition.workflow_id,
        run_id=run_id,
        started_by=definition.started_by,
        is_approval=definition.is_approval,
        approval_root=config.approval_root,
    )

    # Engine-wide poll interval unless the gate sets its own
    settings = definition.gate
    if "poll_interval" not in settings.model_fields_set:
        settings = settings.model_copy(update={"poll_interval": config.poll_interval})

    context = GateContext(
        store=store,
        notifications=NotificationSink(store, mailer),
        runner=runner,
        workflow=workflow,
        emitter=emitter or GateEventEmitter(),
    )
    return ApprovalGate(definition.task_id, settings, context)
