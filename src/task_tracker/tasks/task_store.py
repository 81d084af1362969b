# src/task_tracker/tasks/task_store.py

from __future__ import annotations

import logging
from datetime import timedelta
from pathlib import Path

from ..errors import StorageError, TaskNotFoundError, UsageError
from ..storage.json_file import read_json_array, write_json_array
from .task_models import Task, TaskStatus, utc_now

logger = logging.getLogger(__name__)

_TICK = timedelta(microseconds=1)


class TaskStore:
    """
    JSON-file task store.

    Every public operation is a full read -> mutate -> write cycle:
    - load() parses the whole file
    - mutations change the in-memory list
    - save() rewrites the whole file atomically

    A mutation either saves its complete result or raises before writing.
    There is no locking; concurrent CLI invocations are last-write-wins.
    """

    def __init__(self, path: str | Path = "tasks.json") -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    # ---- low-level helpers ----

    def initialize(self) -> bool:
        """Create an empty store on first run. Returns True if the file was created."""
        if self._path.exists():
            return False
        write_json_array(self._path, [])
        logger.info("Initialized %s", self._path.name)
        return True

    def load(self) -> list[Task]:
        records = read_json_array(self._path)
        if records is None:
            return []
        tasks = [Task.from_dict(r) for r in records]
        seen: set[int] = set()
        for t in tasks:
            if t.id in seen:
                raise StorageError(f"{self._path} contains duplicate task id {t.id}.")
            seen.add(t.id)
        return tasks

    def save(self, tasks: list[Task]) -> None:
        write_json_array(self._path, [t.to_dict() for t in tasks])

    @staticmethod
    def next_id(tasks: list[Task]) -> int:
        """max(existing ids) + 1, or 1 for an empty store. Stable under deletion."""
        return max((t.id for t in tasks), default=0) + 1

    @staticmethod
    def _find(tasks: list[Task], task_id: int) -> Task:
        for t in tasks:
            if t.id == task_id:
                return t
        logger.info("Task id=%s not found", task_id)
        raise TaskNotFoundError(task_id)

    @staticmethod
    def _touch(task: Task) -> None:
        task.updated_at = max(utc_now(), task.updated_at + _TICK)

    # ---- public API ----

    def add_task(self, description: str) -> Task:
        description = (description or "").strip()
        if not description:
            raise UsageError("Please provide a task description.")

        tasks = self.load()
        now = utc_now()
        task = Task(
            id=self.next_id(tasks),
            description=description,
            status=TaskStatus.TODO,
            created_at=now,
            updated_at=now,
        )
        tasks.append(task)
        self.save(tasks)
        logger.debug("Task added id=%s", task.id)
        return task

    def list_tasks(self, status: TaskStatus | None = None) -> list[Task]:
        """All tasks ascending by id, optionally only those with `status`."""
        tasks = sorted(self.load(), key=lambda t: t.id)
        if status is not None:
            tasks = [t for t in tasks if t.status == status]
        return tasks

    def update_task_status(self, task_id: int, new_status: TaskStatus) -> Task:
        tasks = self.load()
        task = self._find(tasks, task_id)
        task.status = new_status
        self._touch(task)
        self.save(tasks)
        logger.debug("Task id=%s status -> %s", task_id, new_status.value)
        return task

    def update_task_description(self, task_id: int, description: str) -> Task:
        description = (description or "").strip()
        if not description:
            raise UsageError("Please provide a task description.")

        tasks = self.load()
        task = self._find(tasks, task_id)
        task.description = description
        self._touch(task)
        self.save(tasks)
        logger.debug("Task id=%s description updated", task_id)
        return task

    def delete_task(self, task_id: int) -> Task:
        tasks = self.load()
        task = self._find(tasks, task_id)
        tasks.remove(task)
        self.save(tasks)
        logger.debug("Task deleted id=%s", task_id)
        return task

    def clear(self) -> int:
        """Remove every task. Returns how many were removed."""
        removed = len(self.load())
        self.save([])
        logger.warning("Cleared all tasks (%d removed)", removed)
        return removed
