"""Domain models for teams."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class Team:
    """A participant group bound to exactly one session."""

    id: UUID
    name: str
    session_id: UUID
