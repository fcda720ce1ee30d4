"""Team registry for started hunt sessions."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from hunt_ledger.domain.teams import Team
from hunt_ledger.errors import NotFound
from hunt_ledger.identifiers import parse_id, require_text, validate_team_count

logger = logging.getLogger(__name__)


class TeamRepository(Protocol):
    """Persistence interface for teams."""

    def count_for_session(self, session_id: UUID) -> int:
        """Return how many teams belong to a session."""

    def create_teams(self, session_id: UUID, names: list[str]) -> list[Team]:
        """Insert a batch of teams for a session in a single write."""

    def get_team(self, team_id: UUID) -> Team | None:
        """Return a team by id, if present."""

    def list_teams(self) -> list[Team]:
        """Return every team."""

    def list_for_session(self, session_id: UUID) -> list[Team]:
        """Return the teams of a session."""

    def delete_team(self, team_id: UUID) -> bool:
        """Delete a team and return whether a row was removed."""

    def delete_all_for_session(self, session_id: UUID) -> int:
        """Delete all teams of a session and return how many were removed."""


@dataclass
class TeamRegistry:
    """Application service for team lifecycle actions."""

    repository: TeamRepository

    def count_for_session(self, session_id: str | UUID) -> int:
        """Return the number of teams bound to a session."""
        return self.repository.count_for_session(parse_id(session_id, "session id"))

    def create_teams(self, session_id: str | UUID, requested_count: int) -> list[Team]:
        """Create a batch of sequentially named teams for a session.

        Numbering continues from the teams already present, so repeated calls
        never reuse a name.
        """
        validate_team_count(requested_count)
        parsed_session_id = parse_id(session_id, "session id")
        existing = self.repository.count_for_session(parsed_session_id)
        names = [
            f"Team {number}"
            for number in range(existing + 1, existing + requested_count + 1)
        ]
        teams = self.repository.create_teams(parsed_session_id, names)
        logger.info(
            "Created teams",
            extra={"session_id": str(parsed_session_id), "count": len(teams)},
        )
        return teams

    def create_team(self, session_id: str | UUID, name: str | None) -> Team:
        """Create a single named team."""
        cleaned = require_text(name, "A valid team name was not provided")
        parsed_session_id = parse_id(session_id, "session id")
        return self.repository.create_teams(parsed_session_id, [cleaned])[0]

    def get_team(self, team_id: str | UUID) -> Team:
        """Return a team or raise NotFound."""
        team = self.repository.get_team(parse_id(team_id, "team id"))
        if team is None:
            raise NotFound("The requested team was not found")
        return team

    def list_teams(self) -> list[Team]:
        """Return every team."""
        return self.repository.list_teams()

    def list_for_session(self, session_id: str | UUID) -> list[Team]:
        """Return the teams of a session."""
        return self.repository.list_for_session(parse_id(session_id, "session id"))

    def delete_team(self, team_id: UUID) -> None:
        """Delete a single team record."""
        if not self.repository.delete_team(team_id):
            raise NotFound("The requested team was not found")

    def delete_all_for_session(self, session_id: UUID) -> int:
        """Delete all teams of a session."""
        return self.repository.delete_all_for_session(session_id)
