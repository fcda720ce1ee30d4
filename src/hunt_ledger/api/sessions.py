"""Started hunt endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, Response, status

from hunt_ledger.api.schemas import (
    BeginHuntRequest,
    BeginHuntResponse,
    SessionResponse,
    StatusUpdateRequest,
)

if TYPE_CHECKING:
    from hunt_ledger.containers import AppContainer
    from hunt_ledger.domain.sessions import HuntSession

router = APIRouter(prefix="/api/startedHunts", tags=["startedHunts"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _present(container: AppContainer, session: HuntSession) -> SessionResponse:
    submission_ids = container.session_coordinator.submission_ids(session.id)
    return SessionResponse.from_domain(session, submission_ids)


@router.post("", status_code=status.HTTP_201_CREATED)
def begin_hunt(payload: BeginHuntRequest, request: Request) -> BeginHuntResponse:
    """Start a hunt from a template and create its teams."""
    session = _container(request).session_coordinator.begin_hunt(
        payload.template.to_snapshot(), payload.num_teams
    )
    return BeginHuntResponse(id=session.id, access_code=session.access_code)


@router.get("")
def list_sessions(request: Request) -> list[SessionResponse]:
    """Return every started hunt."""
    container = _container(request)
    return [
        _present(container, session)
        for session in container.session_coordinator.list_sessions()
    ]


@router.get("/accessCode/{access_code}")
def get_by_access_code(access_code: str, request: Request) -> SessionResponse:
    """Return the running hunt for an access code."""
    container = _container(request)
    session = container.session_coordinator.get_by_access_code(access_code)
    return _present(container, session)


@router.get("/{started_hunt_id}")
def get_session(started_hunt_id: str, request: Request) -> SessionResponse:
    """Return one started hunt."""
    container = _container(request)
    session = container.session_coordinator.get_session(started_hunt_id)
    return _present(container, session)


@router.put("/{started_hunt_id}/status")
def update_status(
    started_hunt_id: str, payload: StatusUpdateRequest, request: Request
) -> SessionResponse:
    """Persist a status change reported by session play."""
    container = _container(request)
    session = container.session_coordinator.update_status(
        started_hunt_id, payload.status
    )
    return _present(container, session)


@router.delete("/{started_hunt_id}")
def end_session(started_hunt_id: str, request: Request) -> Response:
    """Delete a started hunt with its teams, submissions and photos."""
    _container(request).session_coordinator.end_session(started_hunt_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
