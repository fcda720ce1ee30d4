"""Supabase-backed submission repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from hunt_ledger.adapters.supabase_query import execute, fetch_all, insert_unique
from hunt_ledger.domain.submissions import Submission
from hunt_ledger.services.submissions import SubmissionRepository

_COLUMNS = "id, task_id, team_id, photo_ref, submitted_at"


@dataclass
class SupabaseSubmissionRepository(SubmissionRepository):
    """Supabase implementation for submissions.

    The submissions table carries a unique (team_id, task_id) constraint.
    """

    client: Client

    def get_submission(self, submission_id: UUID) -> Submission | None:
        """Return a submission by id, if present."""
        response = execute(
            self.client.table("submissions")
            .select(_COLUMNS)
            .eq("id", str(submission_id))
            .limit(1),
            "Failed to load submission",
        )
        if not response.data:
            return None
        return _to_submission(response.data[0])

    def list_by_team(self, team_id: UUID) -> list[Submission]:
        """Return the submissions of a team."""
        rows = fetch_all(
            lambda: self.client.table("submissions")
            .select(_COLUMNS)
            .eq("team_id", str(team_id))
            .order("id"),
            "Failed to list submissions",
        )
        return [_to_submission(row) for row in rows]

    def list_by_task(self, task_id: str) -> list[Submission]:
        """Return the submissions for a task."""
        rows = fetch_all(
            lambda: self.client.table("submissions")
            .select(_COLUMNS)
            .eq("task_id", task_id)
            .order("id"),
            "Failed to list submissions",
        )
        return [_to_submission(row) for row in rows]

    def get_by_team_and_task(self, team_id: UUID, task_id: str) -> Submission | None:
        """Return the submission for a (team, task) pair, if present."""
        response = execute(
            self.client.table("submissions")
            .select(_COLUMNS)
            .eq("team_id", str(team_id))
            .eq("task_id", task_id)
            .limit(1),
            "Failed to load submission",
        )
        if not response.data:
            return None
        return _to_submission(response.data[0])

    def list_by_team_ids(self, team_ids: list[UUID]) -> list[Submission]:
        """Return the submissions of any of the given teams."""
        rows = fetch_all(
            lambda: self.client.table("submissions")
            .select(_COLUMNS)
            .in_("team_id", [str(team_id) for team_id in team_ids])
            .order("id"),
            "Failed to list submissions",
        )
        return [_to_submission(row) for row in rows]

    def insert_submission(
        self, team_id: UUID, task_id: str, photo_ref: str, submitted_at: datetime
    ) -> Submission | None:
        """Insert a submission; a unique-key conflict returns None."""
        row = insert_unique(
            self.client.table("submissions").insert(
                {
                    "team_id": str(team_id),
                    "task_id": task_id,
                    "photo_ref": photo_ref,
                    "submitted_at": submitted_at.isoformat(),
                }
            ),
            "Failed to create submission",
        )
        return _to_submission(row) if row is not None else None

    def swap_photo(
        self,
        submission_id: UUID,
        expected_ref: str | None,
        new_ref: str,
        submitted_at: datetime,
    ) -> Submission | None:
        """Conditionally replace the photo reference of a submission."""
        query = (
            self.client.table("submissions")
            .update({"photo_ref": new_ref, "submitted_at": submitted_at.isoformat()})
            .eq("id", str(submission_id))
        )
        if expected_ref is None:
            query = query.is_("photo_ref", "null")
        else:
            query = query.eq("photo_ref", expected_ref)
        response = execute(query, "Failed to update submission")
        if not response.data:
            return None
        return _to_submission(response.data[0])

    def delete_submission(self, submission_id: UUID) -> Submission | None:
        """Delete a submission row and return it."""
        response = execute(
            self.client.table("submissions").delete().eq("id", str(submission_id)),
            "Failed to delete submission",
        )
        if not response.data:
            return None
        return _to_submission(response.data[0])

    def delete_by_team_ids(self, team_ids: list[UUID]) -> list[Submission]:
        """Delete the submissions of the given teams."""
        response = execute(
            self.client.table("submissions")
            .delete()
            .in_("team_id", [str(team_id) for team_id in team_ids]),
            "Failed to delete submissions",
        )
        return [_to_submission(row) for row in response.data or []]

    def list_photo_refs(self) -> set[str]:
        """Return all referenced photo paths."""
        rows = fetch_all(
            lambda: self.client.table("submissions")
            .select("id, photo_ref")
            .order("id"),
            "Failed to list photo references",
        )
        return {row["photo_ref"] for row in rows if row.get("photo_ref")}


def _to_submission(row: dict[str, object]) -> Submission:
    photo_ref = row.get("photo_ref")
    return Submission(
        id=UUID(str(row["id"])),
        task_id=str(row["task_id"]),
        team_id=UUID(str(row["team_id"])),
        photo_ref=str(photo_ref) if photo_ref else None,
        submitted_at=datetime.fromisoformat(str(row["submitted_at"])),
    )
