"""Session coordinator: begins and ends started hunts."""

import logging
import secrets
from dataclasses import dataclass
from uuid import UUID

from hunt_ledger.domain.sessions import HuntSession, SessionStatus, TemplateSnapshot
from hunt_ledger.domain.teams import Team
from hunt_ledger.errors import NotFound, StorageError, ValidationError
from hunt_ledger.identifiers import parse_id, require_text, validate_team_count
from hunt_ledger.services.session_store import SessionRepository
from hunt_ledger.services.submissions import SubmissionLedger
from hunt_ledger.services.teams import TeamRegistry

logger = logging.getLogger(__name__)


@dataclass
class SessionCoordinator:
    """Orchestrates session creation, team batches and cascading deletes."""

    session_repository: SessionRepository
    team_registry: TeamRegistry
    submission_ledger: SubmissionLedger
    initial_status: SessionStatus = SessionStatus.NOT_STARTED
    access_code_length: int = 6
    access_code_attempts: int = 10

    def begin_hunt(self, template: TemplateSnapshot, num_teams: int) -> HuntSession:
        """Start a session from a template snapshot and create its teams.

        The session is persisted before its teams; if team creation fails the
        session stays reachable and add_teams can be retried.
        """
        validate_team_count(num_teams)
        require_text(template.title, "A hunt title is required")
        session = self._create_session(template)
        logger.info(
            "Began hunt",
            extra={"session_id": str(session.id), "access_code": session.access_code},
        )
        self.team_registry.create_teams(session.id, num_teams)
        return session

    def get_session(self, session_id: str | UUID) -> HuntSession:
        """Return a session or raise NotFound."""
        parsed_id = parse_id(session_id, "session id")
        session = self.session_repository.get_session(parsed_id)
        if session is None:
            raise NotFound("The requested started hunt was not found")
        return session

    def get_by_access_code(self, access_code: str) -> HuntSession:
        """Return the running session for an access code or raise NotFound."""
        session = self.session_repository.get_by_access_code(access_code.strip())
        if session is None:
            raise NotFound("No running hunt uses that access code")
        return session

    def list_sessions(self) -> list[HuntSession]:
        """Return every session."""
        return self.session_repository.list_sessions()

    def update_status(
        self, session_id: str | UUID, status: SessionStatus
    ) -> HuntSession:
        """Persist a status supplied by session play; only moves forward."""
        session = self.get_session(session_id)
        if status.rank < session.status.rank:
            raise ValidationError(
                f"Cannot move a hunt from {session.status.value} to {status.value}"
            )
        if status is not session.status:
            if not self.session_repository.update_status(session.id, status):
                raise NotFound("The requested started hunt was not found")
        return HuntSession(
            id=session.id,
            access_code=session.access_code,
            status=status,
            template=session.template,
        )

    def add_teams(self, session_id: str | UUID, num_teams: int) -> list[Team]:
        """Create another batch of teams for an existing session."""
        validate_team_count(num_teams)
        session = self.get_session(session_id)
        return self.team_registry.create_teams(session.id, num_teams)

    def add_team(self, session_id: str | UUID, name: str | None) -> Team:
        """Create one named team for an existing session."""
        require_text(name, "A valid team name was not provided")
        session = self.get_session(session_id)
        return self.team_registry.create_team(session.id, name)

    def remove_team(self, team_id: str | UUID) -> None:
        """Delete a team together with its submissions and photos."""
        team = self.team_registry.get_team(team_id)
        self.submission_ledger.delete_for_teams([team.id])
        self.team_registry.delete_team(team.id)

    def submission_ids(self, session_id: UUID) -> list[UUID]:
        """Return the ids of the submissions made in a session."""
        return self.submission_ledger.submission_ids_for_session(session_id)

    def end_session(self, session_id: str | UUID) -> None:
        """Delete a session after its submissions, photos and teams."""
        session = self.get_session(session_id)
        removed = self.submission_ledger.delete_all_for_session(session.id)
        team_count = self.team_registry.delete_all_for_session(session.id)
        if not self.session_repository.delete_session(session.id):
            raise NotFound("The requested started hunt was not found")
        logger.info(
            "Ended hunt",
            extra={
                "session_id": str(session.id),
                "teams": team_count,
                "submissions": len(removed),
            },
        )

    def _create_session(self, template: TemplateSnapshot) -> HuntSession:
        for _ in range(self.access_code_attempts):
            code = _generate_access_code(self.access_code_length)
            if self.session_repository.get_by_access_code(code) is not None:
                continue
            session = self.session_repository.create_session(
                access_code=code,
                status=self.initial_status,
                template=template,
            )
            if session is not None:
                return session
        raise StorageError("Could not allocate a unique access code")


def _generate_access_code(length: int) -> str:
    return "".join(str(secrets.randbelow(10)) for _ in range(length))
