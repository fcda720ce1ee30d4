"""Supabase-backed team repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from hunt_ledger.adapters.supabase_query import execute, fetch_all
from hunt_ledger.domain.teams import Team
from hunt_ledger.errors import StorageError
from hunt_ledger.services.teams import TeamRepository

_COLUMNS = "id, name, session_id"


@dataclass
class SupabaseTeamRepository(TeamRepository):
    """Supabase implementation for teams."""

    client: Client

    def count_for_session(self, session_id: UUID) -> int:
        """Count the teams of a session."""
        response = execute(
            self.client.table("teams")
            .select("id", count="exact")
            .eq("session_id", str(session_id)),
            "Failed to count teams",
        )
        if response.count is not None:
            return response.count
        return len(response.data or [])

    def create_teams(self, session_id: UUID, names: list[str]) -> list[Team]:
        """Insert all teams in one request so the batch lands together."""
        response = execute(
            self.client.table("teams").insert(
                [{"name": name, "session_id": str(session_id)} for name in names]
            ),
            "Failed to create teams",
        )
        if not response.data or len(response.data) != len(names):
            raise StorageError("Failed to create teams")
        return [_to_team(row) for row in response.data]

    def get_team(self, team_id: UUID) -> Team | None:
        """Return a team by id, if present."""
        response = execute(
            self.client.table("teams").select(_COLUMNS).eq("id", str(team_id)).limit(1),
            "Failed to load team",
        )
        if not response.data:
            return None
        return _to_team(response.data[0])

    def list_teams(self) -> list[Team]:
        """Return every team."""
        rows = fetch_all(
            lambda: self.client.table("teams").select(_COLUMNS).order("id"),
            "Failed to list teams",
        )
        return [_to_team(row) for row in rows]

    def list_for_session(self, session_id: UUID) -> list[Team]:
        """Return the teams of a session in creation order."""
        rows = fetch_all(
            lambda: self.client.table("teams")
            .select(_COLUMNS)
            .eq("session_id", str(session_id))
            .order("created_at")
            .order("id"),
            "Failed to list teams",
        )
        return [_to_team(row) for row in rows]

    def delete_team(self, team_id: UUID) -> bool:
        """Delete a team row."""
        response = execute(
            self.client.table("teams").delete().eq("id", str(team_id)),
            "Failed to delete team",
        )
        return bool(response.data)

    def delete_all_for_session(self, session_id: UUID) -> int:
        """Delete the teams of a session."""
        response = execute(
            self.client.table("teams").delete().eq("session_id", str(session_id)),
            "Failed to delete teams",
        )
        return len(response.data or [])


def _to_team(row: dict[str, object]) -> Team:
    return Team(
        id=UUID(str(row["id"])),
        name=str(row["name"]),
        session_id=UUID(str(row["session_id"])),
    )
