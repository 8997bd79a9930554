"""Tests for SharedFileContext."""

import pytest

from wfgate.domain.models.file_context import FileArtifact, SharedFileContext


def _artifact(path: str, task_id: int = 1) -> FileArtifact:
    return FileArtifact(path=path, task_id=task_id)


class TestSharedFileContext:

    def test_new_context_is_empty(self) -> None:
        assert SharedFileContext().is_empty()

    def test_add_groups_by_task(self) -> None:
        files = SharedFileContext()
        files.add(_artifact("/a", 1))
        files.add(_artifact("/b", 2))

        assert [f.path for f in files.files_for(1)] == ["/a"]
        assert [f.path for f in files.all_files()] == ["/a", "/b"]

    def test_remove_path_across_tasks(self) -> None:
        files = SharedFileContext()
        files.add(_artifact("/a", 1))
        files.add(_artifact("/a", 2))
        files.add(_artifact("/b", 2))

        assert files.remove_path("/a") == 2
        assert [f.path for f in files.all_files()] == ["/b"]

    def test_clear_all_empties_every_task(self) -> None:
        files = SharedFileContext()
        files.add(_artifact("/a", 1))
        files.add(_artifact("/b", 2))

        files.clear_all()

        assert files.is_empty()


class TestSharedFileContextAcquire:

    def test_acquire_clears_attaches_and_releases(self) -> None:
        files = SharedFileContext()
        files.add(_artifact("/stale", 9))

        with files.acquire(_artifact("/latest", 1)) as held:
            assert [f.path for f in held.all_files()] == ["/latest"]

        assert files.is_empty()

    def test_acquire_without_artifact(self) -> None:
        files = SharedFileContext()
        files.add(_artifact("/stale", 9))

        with files.acquire() as held:
            assert held.is_empty()

        assert files.is_empty()

    def test_acquire_discards_files_added_by_tasks(self) -> None:
        files = SharedFileContext()

        with files.acquire(_artifact("/latest", 1)) as held:
            held.add(_artifact("/copy", 2))

        assert files.is_empty()

    def test_acquire_releases_on_error(self) -> None:
        files = SharedFileContext()

        with pytest.raises(RuntimeError):
            with files.acquire(_artifact("/latest", 1)):
                raise RuntimeError("task failed")

        assert files.is_empty()
