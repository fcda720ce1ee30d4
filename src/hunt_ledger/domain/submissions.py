"""Domain models for evidence submissions and photo blobs."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class Submission:
    """Current evidence for one team on one task."""

    id: UUID
    task_id: str
    team_id: UUID
    photo_ref: str | None
    submitted_at: datetime


@dataclass(frozen=True)
class BlobInfo:
    """A stored blob reference and when it was written."""

    ref: str
    created_at: datetime
