"""Submission and photo endpoints."""

from __future__ import annotations

import mimetypes
from collections.abc import Iterator
from typing import TYPE_CHECKING, Annotated

from fastapi import APIRouter, File, Form, Request, Response, UploadFile, status
from fastapi.responses import StreamingResponse

from hunt_ledger.api.schemas import CreatedResponse, SubmissionResponse

if TYPE_CHECKING:
    from hunt_ledger.containers import AppContainer

router = APIRouter(tags=["submissions"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _stream(blob_ref: str, chunks: Iterator[bytes]) -> StreamingResponse:
    media_type, _ = mimetypes.guess_type(blob_ref)
    return StreamingResponse(
        chunks, media_type=media_type or "application/octet-stream"
    )


@router.get("/api/submissions/team/{team_id}/task/{task_id}")
def get_submission_by_team_and_task(
    team_id: str, task_id: str, request: Request
) -> SubmissionResponse:
    """Return the current submission for a team and task."""
    ledger = _container(request).submission_ledger
    submission = ledger.get_by_team_and_task(team_id, task_id)
    return SubmissionResponse.from_domain(submission)


@router.get("/api/submissions/team/{team_id}")
def list_submissions_by_team(
    team_id: str, request: Request
) -> list[SubmissionResponse]:
    """Return the submissions of a team."""
    ledger = _container(request).submission_ledger
    return [
        SubmissionResponse.from_domain(item) for item in ledger.list_by_team(team_id)
    ]


@router.get("/api/submissions/task/{task_id}")
def list_submissions_by_task(
    task_id: str, request: Request
) -> list[SubmissionResponse]:
    """Return the submissions for a task."""
    ledger = _container(request).submission_ledger
    return [
        SubmissionResponse.from_domain(item) for item in ledger.list_by_task(task_id)
    ]


@router.get("/api/submissions/startedHunt/{started_hunt_id}")
def list_submissions_by_session(
    started_hunt_id: str, request: Request
) -> list[SubmissionResponse]:
    """Return every submission made in a started hunt."""
    ledger = _container(request).submission_ledger
    return [
        SubmissionResponse.from_domain(item)
        for item in ledger.list_by_session(started_hunt_id)
    ]


@router.get("/api/submissions/{submission_id}/photo")
def get_submission_photo(submission_id: str, request: Request) -> StreamingResponse:
    """Stream the photo attached to a submission."""
    blob_ref, chunks = _container(request).submission_ledger.open_photo(submission_id)
    return _stream(blob_ref, chunks)


@router.get("/api/submissions/{submission_id}")
def get_submission(submission_id: str, request: Request) -> SubmissionResponse:
    """Return one submission."""
    ledger = _container(request).submission_ledger
    return SubmissionResponse.from_domain(ledger.get_by_id(submission_id))


@router.post("/api/submissions/{team_id}", status_code=status.HTTP_201_CREATED)
def add_evidence(
    team_id: str,
    request: Request,
    photo: Annotated[UploadFile, File(description="Evidence photo")],
    task_id: Annotated[str | None, Form(alias="taskId")] = None,
) -> CreatedResponse:
    """Attach a photo as the team's current evidence for a task."""
    submission = _container(request).submission_ledger.record_evidence(
        team_id=team_id,
        task_id=task_id,
        photo=photo.file.read(),
        original_filename=photo.filename,
    )
    return CreatedResponse(id=submission.id)


@router.put("/api/submissions/{submission_id}")
def replace_evidence(
    submission_id: str,
    request: Request,
    photo: Annotated[UploadFile, File(description="Replacement photo")],
) -> SubmissionResponse:
    """Replace the photo of an existing submission."""
    submission = _container(request).submission_ledger.replace_evidence(
        submission_id,
        photo=photo.file.read(),
        original_filename=photo.filename,
    )
    return SubmissionResponse.from_domain(submission)


@router.delete("/api/submissions/{submission_id}")
def delete_submission(submission_id: str, request: Request) -> Response:
    """Delete a submission and its photo."""
    _container(request).submission_ledger.delete_submission(submission_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/photos/{photo_path}")
def get_photo(photo_path: str, request: Request) -> StreamingResponse:
    """Stream a stored photo by its reference."""
    chunks = _container(request).submission_ledger.open_blob(photo_path)
    return _stream(photo_path, chunks)


@router.post("/photos/reclaim")
def reclaim_orphaned_photos(request: Request) -> dict[str, int]:
    """Delete unreferenced photos past the grace period; meant for a scheduler."""
    reclaimed = _container(request).submission_ledger.reclaim_orphans()
    return {"reclaimed": len(reclaimed)}
