"""Persistence interface for started hunt sessions."""

from typing import Protocol
from uuid import UUID

from hunt_ledger.domain.sessions import HuntSession, SessionStatus, TemplateSnapshot


class SessionRepository(Protocol):
    """Persistence interface for hunt sessions."""

    def create_session(
        self, access_code: str, status: SessionStatus, template: TemplateSnapshot
    ) -> HuntSession | None:
        """Create a session, returning None if the access code is taken."""

    def get_session(self, session_id: UUID) -> HuntSession | None:
        """Return a session by id, if present."""

    def get_by_access_code(self, access_code: str) -> HuntSession | None:
        """Return the non-completed session holding an access code, if any."""

    def list_sessions(self) -> list[HuntSession]:
        """Return every session."""

    def update_status(self, session_id: UUID, status: SessionStatus) -> bool:
        """Persist a new status and return whether the session existed."""

    def delete_session(self, session_id: UUID) -> bool:
        """Delete a session and return whether a row was removed."""
