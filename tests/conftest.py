"""Shared test fixtures."""

from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from hunt_ledger.config import Settings
from hunt_ledger.containers import AppContainer
from hunt_ledger.domain.sessions import (
    HuntSession,
    SessionStatus,
    TaskSnapshot,
    TemplateSnapshot,
)
from hunt_ledger.domain.submissions import BlobInfo, Submission
from hunt_ledger.domain.teams import Team
from hunt_ledger.errors import NotFound, StorageError
from hunt_ledger.services.blobs import BlobStore, new_blob_ref
from hunt_ledger.services.coordinator import SessionCoordinator
from hunt_ledger.services.session_store import SessionRepository
from hunt_ledger.services.submissions import SubmissionLedger, SubmissionRepository
from hunt_ledger.services.teams import TeamRegistry, TeamRepository


@dataclass
class InMemorySessionRepository(SessionRepository):
    """In-memory session repository for tests."""

    sessions: dict[UUID, HuntSession] = field(default_factory=dict)

    def create_session(
        self, access_code: str, status: SessionStatus, template: TemplateSnapshot
    ) -> HuntSession | None:
        if self.get_by_access_code(access_code) is not None:
            return None
        session = HuntSession(
            id=uuid4(), access_code=access_code, status=status, template=template
        )
        self.sessions[session.id] = session
        return session

    def get_session(self, session_id: UUID) -> HuntSession | None:
        return self.sessions.get(session_id)

    def get_by_access_code(self, access_code: str) -> HuntSession | None:
        for session in self.sessions.values():
            if (
                session.access_code == access_code
                and session.status is not SessionStatus.COMPLETED
            ):
                return session
        return None

    def list_sessions(self) -> list[HuntSession]:
        return list(self.sessions.values())

    def update_status(self, session_id: UUID, status: SessionStatus) -> bool:
        session = self.sessions.get(session_id)
        if session is None:
            return False
        self.sessions[session_id] = replace(session, status=status)
        return True

    def delete_session(self, session_id: UUID) -> bool:
        return self.sessions.pop(session_id, None) is not None


@dataclass
class InMemoryTeamRepository(TeamRepository):
    """In-memory team repository for tests."""

    teams: dict[UUID, Team] = field(default_factory=dict)
    fail_creates: bool = False

    def count_for_session(self, session_id: UUID) -> int:
        return len(self.list_for_session(session_id))

    def create_teams(self, session_id: UUID, names: list[str]) -> list[Team]:
        if self.fail_creates:
            raise StorageError("Failed to create teams")
        created = [Team(id=uuid4(), name=name, session_id=session_id) for name in names]
        for team in created:
            self.teams[team.id] = team
        return created

    def get_team(self, team_id: UUID) -> Team | None:
        return self.teams.get(team_id)

    def list_teams(self) -> list[Team]:
        return list(self.teams.values())

    def list_for_session(self, session_id: UUID) -> list[Team]:
        return [team for team in self.teams.values() if team.session_id == session_id]

    def delete_team(self, team_id: UUID) -> bool:
        return self.teams.pop(team_id, None) is not None

    def delete_all_for_session(self, session_id: UUID) -> int:
        doomed = [team.id for team in self.list_for_session(session_id)]
        for team_id in doomed:
            del self.teams[team_id]
        return len(doomed)


@dataclass
class InMemorySubmissionRepository(SubmissionRepository):
    """In-memory submission repository enforcing (team, task) uniqueness."""

    submissions: dict[UUID, Submission] = field(default_factory=dict)
    fail_writes: bool = False

    def get_submission(self, submission_id: UUID) -> Submission | None:
        return self.submissions.get(submission_id)

    def list_by_team(self, team_id: UUID) -> list[Submission]:
        return [item for item in self.submissions.values() if item.team_id == team_id]

    def list_by_task(self, task_id: str) -> list[Submission]:
        return [item for item in self.submissions.values() if item.task_id == task_id]

    def get_by_team_and_task(self, team_id: UUID, task_id: str) -> Submission | None:
        for item in self.submissions.values():
            if item.team_id == team_id and item.task_id == task_id:
                return item
        return None

    def list_by_team_ids(self, team_ids: list[UUID]) -> list[Submission]:
        wanted = set(team_ids)
        return [item for item in self.submissions.values() if item.team_id in wanted]

    def insert_submission(
        self, team_id: UUID, task_id: str, photo_ref: str, submitted_at: datetime
    ) -> Submission | None:
        if self.fail_writes:
            raise StorageError("Failed to create submission")
        if self.get_by_team_and_task(team_id, task_id) is not None:
            return None
        submission = Submission(
            id=uuid4(),
            task_id=task_id,
            team_id=team_id,
            photo_ref=photo_ref,
            submitted_at=submitted_at,
        )
        self.submissions[submission.id] = submission
        return submission

    def swap_photo(
        self,
        submission_id: UUID,
        expected_ref: str | None,
        new_ref: str,
        submitted_at: datetime,
    ) -> Submission | None:
        if self.fail_writes:
            raise StorageError("Failed to update submission")
        current = self.submissions.get(submission_id)
        if current is None or current.photo_ref != expected_ref:
            return None
        updated = replace(current, photo_ref=new_ref, submitted_at=submitted_at)
        self.submissions[submission_id] = updated
        return updated

    def delete_submission(self, submission_id: UUID) -> Submission | None:
        return self.submissions.pop(submission_id, None)

    def delete_by_team_ids(self, team_ids: list[UUID]) -> list[Submission]:
        removed = self.list_by_team_ids(team_ids)
        for item in removed:
            del self.submissions[item.id]
        return removed

    def list_photo_refs(self) -> set[str]:
        return {item.photo_ref for item in self.submissions.values() if item.photo_ref}


@dataclass
class InMemoryBlobStore(BlobStore):
    """In-memory blob store for tests."""

    blobs: dict[str, bytes] = field(default_factory=dict)
    created: dict[str, datetime] = field(default_factory=dict)
    fail_deletes: bool = False
    deleted: list[str] = field(default_factory=list)

    def store(self, data: bytes, original_filename: str) -> str:
        blob_ref = new_blob_ref(original_filename)
        self.blobs[blob_ref] = bytes(data)
        self.created[blob_ref] = datetime.now(tz=UTC)
        return blob_ref

    def retrieve(self, blob_ref: str) -> Iterator[bytes]:
        if blob_ref not in self.blobs:
            raise NotFound("Photo not found")
        return iter([self.blobs[blob_ref]])

    def delete(self, blob_ref: str) -> None:
        if self.fail_deletes:
            raise StorageError("Error deleting the photo: disk unavailable")
        self.blobs.pop(blob_ref, None)
        self.created.pop(blob_ref, None)
        self.deleted.append(blob_ref)

    def list_blobs(self) -> list[BlobInfo]:
        return [
            BlobInfo(ref=ref, created_at=self.created[ref]) for ref in self.blobs
        ]

    def read(self, blob_ref: str) -> bytes:
        return b"".join(self.retrieve(blob_ref))


@dataclass
class LedgerFixture:
    """Bundle of services wired over in-memory stores."""

    sessions: InMemorySessionRepository
    teams: InMemoryTeamRepository
    submissions: InMemorySubmissionRepository
    blobs: InMemoryBlobStore
    team_registry: TeamRegistry
    ledger: SubmissionLedger
    coordinator: SessionCoordinator


def sample_template(task_ids: tuple[str, ...] = ("K1", "K2")) -> TemplateSnapshot:
    return TemplateSnapshot(
        hunt_id="hunt-1",
        title="Campus Hunt",
        description="Find things around campus",
        tasks=tuple(
            TaskSnapshot(id=task_id, name=f"Task {task_id}") for task_id in task_ids
        ),
    )


def build_ledger_fixture() -> LedgerFixture:
    sessions = InMemorySessionRepository()
    teams = InMemoryTeamRepository()
    submissions = InMemorySubmissionRepository()
    blobs = InMemoryBlobStore()
    team_registry = TeamRegistry(teams)
    ledger = SubmissionLedger(
        repository=submissions,
        blob_store=blobs,
        team_repository=teams,
        session_repository=sessions,
    )
    coordinator = SessionCoordinator(
        session_repository=sessions,
        team_registry=team_registry,
        submission_ledger=ledger,
    )
    return LedgerFixture(
        sessions=sessions,
        teams=teams,
        submissions=submissions,
        blobs=blobs,
        team_registry=team_registry,
        ledger=ledger,
        coordinator=coordinator,
    )


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        photos_dir=str(tmp_path / "photos"),
    )


@pytest.fixture
def services() -> LedgerFixture:
    return build_ledger_fixture()


@pytest.fixture
def container(settings: Settings, services: LedgerFixture) -> AppContainer:
    return AppContainer(
        settings=settings,
        team_registry=services.team_registry,
        submission_ledger=services.ledger,
        session_coordinator=services.coordinator,
    )
