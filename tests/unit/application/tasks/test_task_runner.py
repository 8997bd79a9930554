import pytest

from tests.fakes import RecordingTask
from wfgate.application.tasks.task_runner import TaskRunner, parse_task_ids
from wfgate.domain.errors import ConfigurationError
from wfgate.domain.models.file_context import FileArtifact, SharedFileContext
from wfgate.domain.models.outcome import TaskStatus


class TestParseTaskIds:

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, []),
            ("", []),
            ("3", [3]),
            ("3, 4", [3, 4]),
            ("3,,4,", [3, 4]),
            ([2, "5"], [2, 5]),
            ((), []),
        ],
    )
    def test_parses(self, value, expected) -> None:
        assert parse_task_ids(value) == expected

    def test_non_integer_raises(self) -> None:
        with pytest.raises(ValueError, match="'x'"):
            parse_task_ids("3, x")


class TestTaskRunner:

    def test_duplicate_id_rejected(self) -> None:
        journal: list = []
        with pytest.raises(ConfigurationError, match="Duplicate task id 2"):
            TaskRunner([RecordingTask(2, journal), RecordingTask(2, journal)])

    def test_resolve_unknown_id(self) -> None:
        runner = TaskRunner([RecordingTask(2, [])])

        with pytest.raises(ConfigurationError, match="Task 9 is not defined"):
            runner.resolve([2, 9])

    def test_run_in_configured_order(self) -> None:
        journal: list = []
        runner = TaskRunner(RecordingTask(i, journal) for i in (2, 3, 4))
        files = SharedFileContext()
        files.add(FileArtifact(path="/a.pdf", task_id=1))

        statuses = runner.run([4, 2], files)

        assert statuses == [TaskStatus.SUCCESS, TaskStatus.SUCCESS]
        assert journal == [(4, ["/a.pdf"]), (2, ["/a.pdf"])]

    def test_run_empty_set_is_noop(self) -> None:
        journal: list = []
        runner = TaskRunner([RecordingTask(2, journal)])

        assert runner.run([], SharedFileContext()) == []
        assert journal == []

    def test_task_exception_propagates(self) -> None:
        journal: list = []
        runner = TaskRunner([RecordingTask(2, journal, error=RuntimeError("boom")), RecordingTask(3, journal)])

        with pytest.raises(RuntimeError, match="boom"):
            runner.run([2, 3], SharedFileContext())
        assert [task_id for task_id, _ in journal] == [2]
