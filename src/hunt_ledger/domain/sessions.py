"""Domain models for started hunt sessions."""

from dataclasses import dataclass, field
from enum import Enum
from uuid import UUID


class SessionStatus(str, Enum):
    """Lifecycle of a hunt session; transitions only move forward."""

    NOT_STARTED = "NotStarted"
    ACTIVE = "Active"
    COMPLETED = "Completed"

    @property
    def rank(self) -> int:
        return _STATUS_ORDER.index(self)


_STATUS_ORDER = [
    SessionStatus.NOT_STARTED,
    SessionStatus.ACTIVE,
    SessionStatus.COMPLETED,
]


@dataclass(frozen=True)
class TaskSnapshot:
    """A task as it was defined when the hunt was started."""

    id: str
    name: str


@dataclass(frozen=True)
class TemplateSnapshot:
    """Immutable copy of a hunt template frozen at session start."""

    hunt_id: str | None
    title: str
    description: str
    tasks: tuple[TaskSnapshot, ...] = field(default_factory=tuple)

    def task_ids(self) -> set[str]:
        return {task.id for task in self.tasks}

    def to_dict(self) -> dict[str, object]:
        return {
            "huntId": self.hunt_id,
            "title": self.title,
            "description": self.description,
            "tasks": [{"id": task.id, "name": task.name} for task in self.tasks],
        }

    @classmethod
    def from_dict(cls, payload: dict[str, object]) -> "TemplateSnapshot":
        raw_tasks = payload.get("tasks") or []
        tasks = tuple(
            TaskSnapshot(id=str(task["id"]), name=str(task.get("name", "")))
            for task in raw_tasks
            if isinstance(task, dict)
        )
        hunt_id = payload.get("huntId")
        return cls(
            hunt_id=str(hunt_id) if hunt_id is not None else None,
            title=str(payload.get("title", "")),
            description=str(payload.get("description", "")),
            tasks=tasks,
        )


@dataclass(frozen=True)
class HuntSession:
    """Represents a persisted started hunt."""

    id: UUID
    access_code: str
    status: SessionStatus
    template: TemplateSnapshot
