# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Schedule, overrides and history endpoints.
Thin HTTP layer. Delegates ALL logic to RotaService.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from starlette.responses import Response

from app.schemas.rota import (
    OverrideSetRequest,
    ScheduleSummaryResponse,
    WeekResponse,
)
from app.services.rota_service import RotaService
from app.core.dependencies import get_history_repo, get_rota_service
from app.repositories.history_repository import HistoryRepository

router = APIRouter(prefix="/api/v1", tags=["Schedule"])


# ── Schedule ──

@router.get("/schedule", response_model=list[WeekResponse])
def get_schedule(
    today: Optional[date] = Query(default=None, description="Local date to start from"),
    limit: Optional[int] = Query(default=None, ge=1, description="Max dates"),
    service: RotaService = Depends(get_rota_service),
):
    """Resolved schedule from the next Sunday through the horizon."""
    try:
        return service.get_schedule(today=today, limit=limit)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/schedule/summary", response_model=ScheduleSummaryResponse)
def get_schedule_summary(
    today: Optional[date] = None,
    service: RotaService = Depends(get_rota_service),
):
    """Counts for the schedule overview."""
    return service.get_summary(today=today)


@router.get("/schedule/export")
def export_schedule(
    format: str = Query("csv", pattern="^(csv|md|ics)$"),
    today: Optional[date] = None,
    service: RotaService = Depends(get_rota_service),
):
    """Download the schedule as CSV, Markdown or iCalendar."""
    body, media_type = service.export_schedule(format, today=today)
    extension = "md" if format == "md" else format
    return Response(
        content=body,
        media_type=media_type,
        headers={
            "Content-Disposition": f"attachment; filename=worship_rota.{extension}"
        },
    )


@router.get("/schedule/{iso_date}", response_model=WeekResponse)
def get_scheduled_date(
    iso_date: str,
    today: Optional[date] = None,
    service: RotaService = Depends(get_rota_service),
):
    """One scheduled date with its resolved team."""
    try:
        return service.get_week(iso_date, today=today)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


# ── Overrides ──

@router.get("/overrides")
def list_overrides(
    service: RotaService = Depends(get_rota_service),
):
    """All manual overrides, by date."""
    return service.list_overrides()


@router.put("/overrides/{iso_date}")
def set_override(
    iso_date: str,
    payload: OverrideSetRequest,
    service: RotaService = Depends(get_rota_service),
):
    """Force a team onto a date, bypassing rotation and swaps."""
    try:
        return service.set_override(iso_date, payload.team_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/overrides/{iso_date}")
def clear_override(
    iso_date: str,
    service: RotaService = Depends(get_rota_service),
):
    """Remove a manual override."""
    try:
        return service.clear_override(iso_date)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))


# ── History ──

@router.get("/history")
def get_history(
    event_type: Optional[str] = None,
    subject: Optional[str] = None,
    limit: int = Query(default=None, ge=1, description="Max results"),
    history_repo: HistoryRepository = Depends(get_history_repo),
):
    """Audit log for all rota mutations."""
    return history_repo.get_all(event_type=event_type, subject=subject, limit=limit)
