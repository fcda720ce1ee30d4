"""Supabase-backed hunt session repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from hunt_ledger.adapters.supabase_query import execute, fetch_all, insert_unique
from hunt_ledger.domain.sessions import HuntSession, SessionStatus, TemplateSnapshot
from hunt_ledger.services.session_store import SessionRepository

_COLUMNS = "id, access_code, status, template_snapshot"


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for started hunts."""

    client: Client

    def create_session(
        self, access_code: str, status: SessionStatus, template: TemplateSnapshot
    ) -> HuntSession | None:
        """Create a session row; an access code conflict returns None."""
        row = insert_unique(
            self.client.table("hunt_sessions").insert(
                {
                    "access_code": access_code,
                    "status": status.value,
                    "template_snapshot": template.to_dict(),
                }
            ),
            "Failed to create started hunt",
        )
        return _to_session(row) if row is not None else None

    def get_session(self, session_id: UUID) -> HuntSession | None:
        """Return a session by id, if present."""
        response = execute(
            self.client.table("hunt_sessions")
            .select(_COLUMNS)
            .eq("id", str(session_id))
            .limit(1),
            "Failed to load started hunt",
        )
        if not response.data:
            return None
        return _to_session(response.data[0])

    def get_by_access_code(self, access_code: str) -> HuntSession | None:
        """Return the non-completed session holding an access code."""
        response = execute(
            self.client.table("hunt_sessions")
            .select(_COLUMNS)
            .eq("access_code", access_code)
            .neq("status", SessionStatus.COMPLETED.value)
            .limit(1),
            "Failed to look up access code",
        )
        if not response.data:
            return None
        return _to_session(response.data[0])

    def list_sessions(self) -> list[HuntSession]:
        """Return every session, newest first."""
        rows = fetch_all(
            lambda: self.client.table("hunt_sessions")
            .select(_COLUMNS)
            .order("created_at", desc=True)
            .order("id"),
            "Failed to list started hunts",
        )
        return [_to_session(row) for row in rows]

    def update_status(self, session_id: UUID, status: SessionStatus) -> bool:
        """Persist a session status."""
        response = execute(
            self.client.table("hunt_sessions")
            .update({"status": status.value})
            .eq("id", str(session_id)),
            "Failed to update started hunt",
        )
        return bool(response.data)

    def delete_session(self, session_id: UUID) -> bool:
        """Delete a session row."""
        response = execute(
            self.client.table("hunt_sessions").delete().eq("id", str(session_id)),
            "Failed to delete started hunt",
        )
        return bool(response.data)


def _to_session(row: dict[str, object]) -> HuntSession:
    snapshot = row.get("template_snapshot")
    if not isinstance(snapshot, dict):
        snapshot = {}
    return HuntSession(
        id=UUID(str(row["id"])),
        access_code=str(row["access_code"]),
        status=SessionStatus(row["status"]),
        template=TemplateSnapshot.from_dict(snapshot),
    )
