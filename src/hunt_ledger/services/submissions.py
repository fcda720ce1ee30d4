"""Evidence ledger: one current photo per (team, task) pair."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID

from hunt_ledger.domain.submissions import Submission
from hunt_ledger.errors import NotFound, StorageError, ValidationError
from hunt_ledger.identifiers import parse_id, require_text, validate_blob_ref
from hunt_ledger.services.blobs import BlobStore
from hunt_ledger.services.session_store import SessionRepository
from hunt_ledger.services.teams import TeamRepository

logger = logging.getLogger(__name__)

_MAX_ATTACH_ATTEMPTS = 5


class SubmissionRepository(Protocol):
    """Persistence interface for submissions.

    The store keeps (team_id, task_id) unique.
    """

    def get_submission(self, submission_id: UUID) -> Submission | None:
        """Return a submission by id, if present."""

    def list_by_team(self, team_id: UUID) -> list[Submission]:
        """Return the submissions of a team."""

    def list_by_task(self, task_id: str) -> list[Submission]:
        """Return the submissions for a task."""

    def get_by_team_and_task(self, team_id: UUID, task_id: str) -> Submission | None:
        """Return the submission for a (team, task) pair, if present."""

    def list_by_team_ids(self, team_ids: list[UUID]) -> list[Submission]:
        """Return the submissions of any of the given teams."""

    def insert_submission(
        self, team_id: UUID, task_id: str, photo_ref: str, submitted_at: datetime
    ) -> Submission | None:
        """Insert a submission, returning None if the pair already exists."""

    def swap_photo(
        self,
        submission_id: UUID,
        expected_ref: str | None,
        new_ref: str,
        submitted_at: datetime,
    ) -> Submission | None:
        """Replace the photo reference if it still equals expected_ref.

        Returns None when the record is gone or holds a different reference.
        """

    def delete_submission(self, submission_id: UUID) -> Submission | None:
        """Delete a submission and return the removed record, if any."""

    def delete_by_team_ids(self, team_ids: list[UUID]) -> list[Submission]:
        """Delete the submissions of the given teams and return them."""

    def list_photo_refs(self) -> set[str]:
        """Return every photo reference currently held by a submission."""


@dataclass
class SubmissionLedger:
    """Keeps submissions and their photo blobs consistent."""

    repository: SubmissionRepository
    blob_store: BlobStore
    team_repository: TeamRepository
    session_repository: SessionRepository
    orphan_grace: timedelta = timedelta(hours=1)

    def get_by_id(self, submission_id: str | UUID) -> Submission:
        """Return a submission or raise NotFound."""
        submission = self.repository.get_submission(
            parse_id(submission_id, "submission id")
        )
        if submission is None:
            raise NotFound("The requested submission was not found")
        return submission

    def list_by_team(self, team_id: str | UUID) -> list[Submission]:
        """Return the submissions of a team."""
        return self.repository.list_by_team(parse_id(team_id, "team id"))

    def list_by_task(self, task_id: str) -> list[Submission]:
        """Return the submissions for a task."""
        return self.repository.list_by_task(task_id)

    def get_by_team_and_task(self, team_id: str | UUID, task_id: str) -> Submission:
        """Return the current submission for a pair or raise NotFound."""
        submission = self.repository.get_by_team_and_task(
            parse_id(team_id, "team id"), task_id
        )
        if submission is None:
            raise NotFound("No submission found for the given team and task")
        return submission

    def list_by_session(self, session_id: str | UUID) -> list[Submission]:
        """Return the submissions of every team in a session.

        An unknown session yields an empty list.
        """
        parsed_session_id = parse_id(session_id, "session id")
        if self.session_repository.get_session(parsed_session_id) is None:
            return []
        team_ids = [
            team.id for team in self.team_repository.list_for_session(parsed_session_id)
        ]
        if not team_ids:
            return []
        return self.repository.list_by_team_ids(team_ids)

    def submission_ids_for_session(self, session_id: UUID) -> list[UUID]:
        """Return the ids of the submissions belonging to a session."""
        return [submission.id for submission in self.list_by_session(session_id)]

    def record_evidence(
        self,
        team_id: str | UUID,
        task_id: str | None,
        photo: bytes,
        original_filename: str | None,
    ) -> Submission:
        """Store a photo and make it the current evidence for (team, task).

        The blob is written before the ledger changes; the displaced blob is
        only deleted once the ledger no longer references it.
        """
        parsed_team_id = parse_id(team_id, "team id")
        cleaned_task_id = require_text(task_id, "A task id is required")
        filename = _require_photo(photo, original_filename)
        self._require_team_and_task(parsed_team_id, cleaned_task_id)

        new_ref = self.blob_store.store(photo, filename)
        try:
            submission, displaced = self._attach(
                parsed_team_id, cleaned_task_id, new_ref
            )
        except Exception:
            self._discard_blob(new_ref)
            raise
        if displaced and displaced != new_ref:
            self._discard_blob(displaced)
        logger.info(
            "Recorded evidence",
            extra={"submission_id": str(submission.id), "photo_ref": new_ref},
        )
        return submission

    def replace_evidence(
        self,
        submission_id: str | UUID,
        photo: bytes,
        original_filename: str | None,
    ) -> Submission:
        """Swap the photo of an existing submission."""
        parsed_id = parse_id(submission_id, "submission id")
        filename = _require_photo(photo, original_filename)
        if self.repository.get_submission(parsed_id) is None:
            raise NotFound("The requested submission was not found")

        new_ref = self.blob_store.store(photo, filename)
        try:
            submission, displaced = self._swap_by_id(parsed_id, new_ref)
        except Exception:
            self._discard_blob(new_ref)
            raise
        if displaced and displaced != new_ref:
            self._discard_blob(displaced)
        return submission

    def open_photo(self, submission_id: str | UUID) -> tuple[str, Iterator[bytes]]:
        """Return the reference and byte stream of a submission's photo."""
        submission = self.get_by_id(submission_id)
        if not submission.photo_ref:
            raise NotFound("No photo found for the requested submission")
        return submission.photo_ref, self.blob_store.retrieve(submission.photo_ref)

    def open_blob(self, blob_ref: str) -> Iterator[bytes]:
        """Return the byte stream stored at a raw reference."""
        return self.blob_store.retrieve(validate_blob_ref(blob_ref))

    def delete_submission(self, submission_id: str | UUID) -> None:
        """Remove a submission record, then its blob.

        A blob deletion failure is raised after the record is already gone.
        """
        removed = self.repository.delete_submission(
            parse_id(submission_id, "submission id")
        )
        if removed is None:
            raise NotFound("The requested submission was not found")
        if removed.photo_ref:
            try:
                self.blob_store.delete(removed.photo_ref)
            except StorageError:
                logger.exception(
                    "Submission removed but its photo could not be deleted",
                    extra={"submission_id": str(removed.id)},
                )
                raise

    def delete_for_teams(self, team_ids: list[UUID]) -> list[Submission]:
        """Delete the submissions of the given teams and their blobs."""
        if not team_ids:
            return []
        removed = self.repository.delete_by_team_ids(team_ids)
        for submission in removed:
            if submission.photo_ref:
                self._discard_blob(submission.photo_ref)
        return removed

    def delete_all_for_session(self, session_id: str | UUID) -> list[Submission]:
        """Delete every submission of a session's teams and their blobs."""
        parsed_session_id = parse_id(session_id, "session id")
        team_ids = [
            team.id for team in self.team_repository.list_for_session(parsed_session_id)
        ]
        return self.delete_for_teams(team_ids)

    def reclaim_orphans(self, now: datetime | None = None) -> list[str]:
        """Delete old blobs that no submission references."""
        current = now or datetime.now(tz=UTC)
        referenced = self.repository.list_photo_refs()
        reclaimed = []
        for blob in self.blob_store.list_blobs():
            if blob.ref in referenced:
                continue
            if current - blob.created_at < self.orphan_grace:
                continue
            self._discard_blob(blob.ref)
            reclaimed.append(blob.ref)
        if reclaimed:
            logger.info("Reclaimed orphaned photos", extra={"count": len(reclaimed)})
        return reclaimed

    def _require_team_and_task(self, team_id: UUID, task_id: str) -> None:
        team = self.team_repository.get_team(team_id)
        if team is None:
            raise NotFound("The requested team was not found")
        session = self.session_repository.get_session(team.session_id)
        if session is None:
            raise NotFound("The team's session was not found")
        task_ids = session.template.task_ids()
        if task_ids and task_id not in task_ids:
            raise ValidationError(f"Task {task_id!r} is not part of this hunt")

    def _attach(
        self, team_id: UUID, task_id: str, new_ref: str
    ) -> tuple[Submission, str | None]:
        for _ in range(_MAX_ATTACH_ATTEMPTS):
            submitted_at = datetime.now(tz=UTC)
            existing = self.repository.get_by_team_and_task(team_id, task_id)
            if existing is None:
                created = self.repository.insert_submission(
                    team_id, task_id, new_ref, submitted_at
                )
                if created is not None:
                    return created, None
                continue
            updated = self.repository.swap_photo(
                existing.id, existing.photo_ref, new_ref, submitted_at
            )
            if updated is not None:
                return updated, existing.photo_ref
        raise StorageError("Evidence changed concurrently, please retry the upload")

    def _swap_by_id(
        self, submission_id: UUID, new_ref: str
    ) -> tuple[Submission, str | None]:
        for _ in range(_MAX_ATTACH_ATTEMPTS):
            existing = self.repository.get_submission(submission_id)
            if existing is None:
                raise NotFound("The requested submission was not found")
            updated = self.repository.swap_photo(
                existing.id, existing.photo_ref, new_ref, datetime.now(tz=UTC)
            )
            if updated is not None:
                return updated, existing.photo_ref
        raise StorageError("Evidence changed concurrently, please retry the upload")

    def _discard_blob(self, blob_ref: str) -> None:
        try:
            self.blob_store.delete(blob_ref)
        except StorageError:
            logger.exception(
                "Failed to delete photo; left for orphan reclamation",
                extra={"photo_ref": blob_ref},
            )


def _require_photo(photo: bytes, original_filename: str | None) -> str:
    if not photo:
        raise ValidationError("No photo uploaded")
    return require_text(original_filename, "The uploaded photo has no file name")
