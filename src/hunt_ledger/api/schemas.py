"""Pydantic models for the REST payloads."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from hunt_ledger.domain.sessions import (
    HuntSession,
    SessionStatus,
    TaskSnapshot,
    TemplateSnapshot,
)
from hunt_ledger.domain.submissions import Submission
from hunt_ledger.domain.teams import Team


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class TaskPayload(_CamelModel):
    """A task inside a hunt template."""

    id: str
    name: str = ""


class TemplatePayload(_CamelModel):
    """Hunt template contents to snapshot at session start."""

    hunt_id: str | None = Field(default=None, alias="huntId")
    title: str
    description: str = ""
    tasks: list[TaskPayload] = Field(default_factory=list)

    def to_snapshot(self) -> TemplateSnapshot:
        return TemplateSnapshot(
            hunt_id=self.hunt_id,
            title=self.title,
            description=self.description,
            tasks=tuple(
                TaskSnapshot(id=task.id, name=task.name) for task in self.tasks
            ),
        )

    @classmethod
    def from_snapshot(cls, snapshot: TemplateSnapshot) -> "TemplatePayload":
        return cls(
            hunt_id=snapshot.hunt_id,
            title=snapshot.title,
            description=snapshot.description,
            tasks=[TaskPayload(id=task.id, name=task.name) for task in snapshot.tasks],
        )


class BeginHuntRequest(_CamelModel):
    """Request body for starting a hunt."""

    template: TemplatePayload
    num_teams: int = Field(default=1, alias="numTeams")


class BeginHuntResponse(_CamelModel):
    """Identifiers of a newly started hunt."""

    id: UUID
    access_code: str = Field(alias="accessCode")


class StatusUpdateRequest(_CamelModel):
    """Request body for a status change."""

    status: SessionStatus


class SessionResponse(_CamelModel):
    """A started hunt with its derived submission ids."""

    id: UUID
    access_code: str = Field(alias="accessCode")
    status: SessionStatus
    template_snapshot: TemplatePayload = Field(alias="templateSnapshot")
    submission_ids: list[UUID] = Field(default_factory=list, alias="submissionIds")

    @classmethod
    def from_domain(
        cls, session: HuntSession, submission_ids: list[UUID]
    ) -> "SessionResponse":
        return cls(
            id=session.id,
            access_code=session.access_code,
            status=session.status,
            template_snapshot=TemplatePayload.from_snapshot(session.template),
            submission_ids=submission_ids,
        )


class TeamCreateRequest(_CamelModel):
    """Request body for creating a single team."""

    team_name: str | None = Field(default=None, alias="teamName")
    started_hunt_id: str | None = Field(default=None, alias="startedHuntId")


class TeamResponse(_CamelModel):
    """A team bound to a started hunt."""

    id: UUID
    team_name: str = Field(alias="teamName")
    started_hunt_id: UUID = Field(alias="startedHuntId")

    @classmethod
    def from_domain(cls, team: Team) -> "TeamResponse":
        return cls(id=team.id, team_name=team.name, started_hunt_id=team.session_id)


class SubmissionResponse(_CamelModel):
    """Current evidence for one team on one task."""

    id: UUID
    task_id: str = Field(alias="taskId")
    team_id: UUID = Field(alias="teamId")
    photo_ref: str | None = Field(alias="photoRef")
    submitted_at: datetime = Field(alias="submittedAt")

    @classmethod
    def from_domain(cls, submission: Submission) -> "SubmissionResponse":
        return cls(
            id=submission.id,
            task_id=submission.task_id,
            team_id=submission.team_id,
            photo_ref=submission.photo_ref,
            submitted_at=submission.submitted_at,
        )


class CreatedResponse(_CamelModel):
    """Identifier of a created record."""

    id: UUID
