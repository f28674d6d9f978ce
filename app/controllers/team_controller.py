# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Team CRUD and rotation order endpoints.
Thin HTTP layer. Delegates ALL logic to TeamService.
"""

from fastapi import APIRouter, Depends, HTTPException

from app.schemas.rota import (
    TeamCreateRequest,
    TeamOrderRequest,
    TeamResponse,
    TeamUpdateRequest,
)
from app.services.team_service import TeamService
from app.core.dependencies import get_team_service

router = APIRouter(prefix="/api/v1", tags=["Teams"])


@router.get("/teams", response_model=list[TeamResponse])
def list_teams(
    service: TeamService = Depends(get_team_service),
):
    """List teams in rotation order."""
    return service.list_teams()


@router.post("/teams", status_code=201, response_model=TeamResponse)
def create_team(
    payload: TeamCreateRequest,
    service: TeamService = Depends(get_team_service),
):
    """Append a team to the end of the rotation."""
    try:
        return service.create_team(
            leader=payload.leader,
            members=payload.members,
            team_id=payload.id,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/teams/order", response_model=list[TeamResponse])
def reorder_teams(
    payload: TeamOrderRequest,
    service: TeamService = Depends(get_team_service),
):
    """Replace the rotation order."""
    try:
        return service.reorder(payload.team_ids)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/teams/{team_id}", response_model=TeamResponse)
def get_team(
    team_id: int,
    service: TeamService = Depends(get_team_service),
):
    try:
        return service.get_team(team_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/teams/{team_id}", response_model=TeamResponse)
def update_team(
    team_id: int,
    payload: TeamUpdateRequest,
    service: TeamService = Depends(get_team_service),
):
    """Partially update a team's leader or members."""
    try:
        return service.update_team(
            team_id=team_id,
            leader=payload.leader,
            members=payload.members,
        )
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/teams/{team_id}")
def delete_team(
    team_id: int,
    service: TeamService = Depends(get_team_service),
):
    """Remove a team from the rotation."""
    try:
        return service.delete_team(team_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
