# src/task_tracker/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any

from ..errors import StorageError


class TaskStatus(StrEnum):
    """Task lifecycle status. Values are the strings stored on disk."""

    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"

    @classmethod
    def parse(cls, raw: str) -> TaskStatus | None:
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_ts(raw: Any, field_name: str, task_id: Any) -> datetime:
    if not isinstance(raw, str):
        raise StorageError(f"Task {task_id}: {field_name} must be an ISO-8601 string.")
    try:
        ts = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError as exc:
        raise StorageError(f"Task {task_id}: invalid {field_name} {raw!r}.") from exc
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


@dataclass(slots=True)
class Task:
    id: int
    description: str
    status: TaskStatus
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "status": self.status.value,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Task:
        task_id = raw.get("id")
        if not isinstance(task_id, int) or isinstance(task_id, bool) or task_id <= 0:
            raise StorageError(f"Invalid task id {task_id!r}.")

        description = raw.get("description")
        if not isinstance(description, str) or not description.strip():
            raise StorageError(f"Task {task_id}: description must be non-empty text.")

        status = TaskStatus.parse(str(raw.get("status", "")))
        if status is None:
            raise StorageError(f"Task {task_id}: unknown status {raw.get('status')!r}.")

        created_at = _parse_ts(raw.get("createdAt"), "createdAt", task_id)
        updated_at = _parse_ts(raw.get("updatedAt", raw.get("createdAt")), "updatedAt", task_id)

        return cls(
            id=task_id,
            description=description,
            status=status,
            created_at=created_at,
            updated_at=max(updated_at, created_at),
        )
