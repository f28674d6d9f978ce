# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Swap request endpoints.
Thin HTTP layer. Delegates ALL logic to SwapService.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.schemas.rota import SwapCreateRequest, SwapResponse
from app.services.swap_service import SwapService, SwapTransitionError
from app.core.dependencies import get_swap_service

router = APIRouter(prefix="/api/v1", tags=["Swaps"])


@router.get("/swaps", response_model=list[SwapResponse])
def list_swaps(
    status: Optional[str] = Query(default=None, pattern="^(pending|approved|rejected)$"),
    service: SwapService = Depends(get_swap_service),
):
    """Swap requests in creation order, optionally filtered by status."""
    return service.list_swaps(status=status)


@router.post("/swaps", status_code=201, response_model=SwapResponse)
def create_swap(
    payload: SwapCreateRequest,
    service: SwapService = Depends(get_swap_service),
):
    """Request a swap of two dates between two teams (starts pending)."""
    try:
        return service.create_swap(
            from_team_id=payload.from_team_id,
            to_team_id=payload.to_team_id,
            from_date=payload.from_date,
            to_date=payload.to_date,
        )
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/swaps/{swap_id}", response_model=SwapResponse)
def get_swap(
    swap_id: int,
    service: SwapService = Depends(get_swap_service),
):
    try:
        return service.get_swap(swap_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))


def _transition(service: SwapService, swap_id: int, status: str):
    try:
        return service.set_status(swap_id, status)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SwapTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.post("/swaps/{swap_id}/approve", response_model=SwapResponse)
def approve_swap(
    swap_id: int,
    service: SwapService = Depends(get_swap_service),
):
    """Approve a pending swap; the schedule reflects it immediately."""
    return _transition(service, swap_id, "approved")


@router.post("/swaps/{swap_id}/reject", response_model=SwapResponse)
def reject_swap(
    swap_id: int,
    service: SwapService = Depends(get_swap_service),
):
    """Reject a pending swap."""
    return _transition(service, swap_id, "rejected")
