import getpass
import logging
import signal
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import click
from pydantic import BaseModel

from wfgate.application.config_loader import load_config, load_engine_config
from wfgate.application.config_models import EngineConfig
from wfgate.interface.cli.output_models import ApproveOutput, RunOutput, StatusOutput

logger = logging.getLogger(__name__)

# Exit code for a run interrupted by SIGINT, as shells report it.
EXIT_CANCELLED = 130


def _json_emit(model: BaseModel) -> None:
    # Single-line JSON, omit None fields.
    click.echo(model.model_dump_json(exclude_none=True), nl=True)


def _get_json_mode(ctx: click.Context) -> bool:
    obj = ctx.obj or {}
    return bool(obj.get("json", False))


def _engine_config() -> EngineConfig:
    return load_engine_config(load_config(project_root=Path.cwd(), user_home=Path.home()))


@contextmanager
def _gate_signals(token, workflow, task_id: int) -> Iterator[None]:
    """SIGINT cancels the wait; SIGTERM stops the gate task gracefully."""
    user = getpass.getuser()

    def _on_sigint(signum, frame) -> None:
        token.cancel("interrupted by SIGINT")

    def _on_sigterm(signum, frame) -> None:
        workflow.stop_task(task_id, by=user)

    previous_int = signal.signal(signal.SIGINT, _on_sigint)
    previous_term = signal.signal(signal.SIGTERM, _on_sigterm)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous_int)
        signal.signal(signal.SIGTERM, previous_term)


@click.group(help="Record approval gate CLI.")
@click.option("--json", "json_output", is_flag=True, help="Emit machine-readable JSON on stdout.")
@click.option("-v", "--verbose", is_flag=True, help="Log gate activity to stderr.")
@click.pass_context
def cli(ctx: click.Context, json_output: bool, verbose: bool) -> None:
    ctx.ensure_object(dict)
    ctx.obj["json"] = bool(json_output)
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


@cli.command("run")
@click.argument("workflow_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--run-id", "run_id", required=False, type=str, help="Workflow run id (default: random).")
@click.option("--events", is_flag=True, help="Emit gate events to stderr.")
@click.pass_context
def run_cmd(ctx: click.Context, workflow_file: Path, run_id: str | None, events: bool) -> None:
    """Run the approval gate of WORKFLOW_FILE until it resolves."""
    run_id = run_id or uuid.uuid4().hex[:12]
    workflow_id = None
    try:
        from wfgate.application.approval import build_gate
        from wfgate.application.cancellation import CancellationToken
        from wfgate.application.config_loader import load_workflow
        from wfgate.domain.errors import CancellationSignal
        from wfgate.domain.events.emitter import GateEventEmitter

        definition = load_workflow(workflow_file)
        workflow_id = definition.workflow_id

        event_emitter = GateEventEmitter()
        if events:
            from wfgate.domain.events.stderr_observer import StderrEventObserver
            event_emitter.subscribe(StderrEventObserver())

        gate = build_gate(definition, _engine_config(), run_id=run_id, emitter=event_emitter)
        click.echo(f"Waiting for approval, trigger: {gate.trigger}", err=True)

        token = CancellationToken()
        try:
            with _gate_signals(token, gate.workflow, gate.task_id):
                result = gate.run(token)
        except CancellationSignal as e:
            if _get_json_mode(ctx):
                _json_emit(
                    RunOutput(
                        exit_code=EXIT_CANCELLED,
                        workflow_id=workflow_id,
                        run_id=run_id,
                        cancelled=True,
                        error=str(e),
                    )
                )
                raise click.exceptions.Exit(EXIT_CANCELLED)
            click.echo(f"cancelled: {e}", err=True)
            raise click.exceptions.Exit(EXIT_CANCELLED)

        exit_code = 0 if result.succeeded else 1
        outcome = result.outcome.value if result.outcome else None

        if _get_json_mode(ctx):
            _json_emit(
                RunOutput(
                    exit_code=exit_code,
                    workflow_id=workflow_id,
                    run_id=run_id,
                    status=result.status.value,
                    outcome=outcome,
                    error=result.error,
                )
            )
            raise click.exceptions.Exit(exit_code)

        click.echo(f"status={result.status.value} outcome={outcome or ''}")
        if result.error:
            click.echo(f"error: {result.error}")
        if exit_code:
            raise click.exceptions.Exit(exit_code)

    except click.exceptions.Exit:
        raise
    except Exception as e:
        if _get_json_mode(ctx):
            _json_emit(
                RunOutput(
                    exit_code=1,
                    workflow_id=workflow_id,
                    run_id=run_id,
                    error=str(e),
                )
            )
            raise click.exceptions.Exit(1)
        raise click.ClickException(str(e)) from e


@cli.command("approve")
@click.argument("workflow_id", type=str)
@click.argument("run_id", type=str)
@click.argument("task_id", type=int)
@click.option("--by", "approved_by", required=False, type=str, help="Approver name (default: current user).")
@click.pass_context
def approve_cmd(ctx: click.Context, workflow_id: str, run_id: str, task_id: int, approved_by: str | None) -> None:
    """Approve the gate TASK_ID of a running workflow."""
    try:
        from wfgate.application.workflow_run import trigger_path

        trigger = trigger_path(_engine_config().approval_root, workflow_id, run_id, task_id)
        trigger.parent.mkdir(parents=True, exist_ok=True)
        trigger.write_text(approved_by or getpass.getuser(), encoding="utf-8")

        if _get_json_mode(ctx):
            _json_emit(ApproveOutput(exit_code=0, trigger_path=str(trigger)))
            raise click.exceptions.Exit(0)

        click.echo(str(trigger))

    except click.exceptions.Exit:
        raise
    except Exception as e:
        if _get_json_mode(ctx):
            _json_emit(ApproveOutput(exit_code=1, error=str(e)))
            raise click.exceptions.Exit(1)
        raise click.ClickException(str(e)) from e


@cli.command("status")
@click.argument("record_id", type=str)
@click.pass_context
def status_cmd(ctx: click.Context, record_id: str) -> None:
    """Show a record's approval state."""
    try:
        from wfgate.domain.errors import NotFoundError
        from wfgate.domain.persistence.json_record_store import JsonRecordStore

        store = JsonRecordStore(store_root=_engine_config().store_root)
        record = store.get_record(record_id)
        if record is None:
            raise NotFoundError("record", record_id)

        version = store.get_latest_version(record_id)
        notifications = []
        if record.assigned_to:
            notifications = [n.message for n in store.list_notifications(assigned_to=record.assigned_to)]

        output = StatusOutput(
            exit_code=0,
            record_id=record.id,
            name=record.name,
            approved=record.approved,
            assigned_to=record.assigned_to,
            assigned_on=record.assigned_on.isoformat() if record.assigned_on else None,
            latest_version=version.file_path if version else None,
            notifications=notifications,
        )

        if _get_json_mode(ctx):
            _json_emit(output)
            raise click.exceptions.Exit(0)

        approved = {None: "pending", True: "approved", False: "rejected"}[record.approved]
        click.echo(f"record={record.id} name={record.name}")
        click.echo(f"approved={approved}")
        click.echo(f"assigned_to={record.assigned_to or ''}")
        if version:
            click.echo(f"latest_version={version.file_path}")

    except click.exceptions.Exit:
        raise
    except Exception as e:
        if _get_json_mode(ctx):
            _json_emit(StatusOutput(exit_code=1, record_id=record_id, error=str(e)))
            raise click.exceptions.Exit(1)
        raise click.ClickException(str(e)) from e


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
