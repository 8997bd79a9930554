"""Downstream task dispatch."""

from .base import DownstreamTask
from .builtin import CopyFilesTask, ListFilesTask
from .task_factory import TaskFactory
from .task_runner import TaskRunner, parse_task_ids

__all__ = [
    "CopyFilesTask",
    "DownstreamTask",
    "ListFilesTask",
    "TaskFactory",
    "TaskRunner",
    "parse_task_ids",
]
