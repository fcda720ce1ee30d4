"""Team endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, Response, status

from hunt_ledger.api.schemas import CreatedResponse, TeamCreateRequest, TeamResponse
from hunt_ledger.errors import ValidationError

if TYPE_CHECKING:
    from hunt_ledger.containers import AppContainer

router = APIRouter(prefix="/api/teams", tags=["teams"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.post(
    "/addTeams/{started_hunt_id}/{num_teams}", status_code=status.HTTP_201_CREATED
)
def add_teams(started_hunt_id: str, num_teams: str, request: Request) -> dict[str, int]:
    """Create a batch of sequentially numbered teams."""
    try:
        requested = int(num_teams)
    except ValueError as exc:
        raise ValidationError("Invalid number of teams requested") from exc
    coordinator = _container(request).session_coordinator
    teams = coordinator.add_teams(started_hunt_id, requested)
    return {"numTeamsCreated": len(teams)}


@router.get("/startedHunt/{started_hunt_id}")
def list_session_teams(started_hunt_id: str, request: Request) -> list[TeamResponse]:
    """Return the teams of a started hunt."""
    registry = _container(request).team_registry
    return [
        TeamResponse.from_domain(team)
        for team in registry.list_for_session(started_hunt_id)
    ]


@router.get("")
def list_teams(request: Request) -> list[TeamResponse]:
    """Return every team."""
    registry = _container(request).team_registry
    return [TeamResponse.from_domain(team) for team in registry.list_teams()]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_team(payload: TeamCreateRequest, request: Request) -> CreatedResponse:
    """Create a single team in a started hunt."""
    if payload.started_hunt_id is None:
        raise ValidationError("Started hunt id cannot be null")
    team = _container(request).session_coordinator.add_team(
        payload.started_hunt_id, payload.team_name
    )
    return CreatedResponse(id=team.id)


@router.get("/{team_id}")
def get_team(team_id: str, request: Request) -> TeamResponse:
    """Return one team."""
    return TeamResponse.from_domain(_container(request).team_registry.get_team(team_id))


@router.delete("/{team_id}")
def delete_team(team_id: str, request: Request) -> Response:
    """Delete a team with its submissions."""
    _container(request).session_coordinator.remove_team(team_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
