# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Liveness, readiness and Prometheus scrape endpoints.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from app.core.config import settings
from app.core.dependencies import (
    get_history_repo,
    get_override_repo,
    get_store,
    get_swap_repo,
    get_team_repo,
)
from app.repositories.document_store import FallbackDocumentStore
from app.repositories.history_repository import HistoryRepository
from app.repositories.override_repository import OverrideRepository
from app.repositories.swap_repository import SwapRepository
from app.repositories.team_repository import TeamRepository

router = APIRouter(tags=["System"])


@router.get("/health")
def health_check(
    team_repo: TeamRepository = Depends(get_team_repo),
    override_repo: OverrideRepository = Depends(get_override_repo),
    swap_repo: SwapRepository = Depends(get_swap_repo),
    history_repo: HistoryRepository = Depends(get_history_repo),
):
    return {
        "status": "ok",
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "teams_count": team_repo.count(),
        "overrides_count": override_repo.count(),
        "swaps_count": swap_repo.count(),
        "events_by_type": history_repo.count_by_type(),
    }


@router.get("/health/ready")
def readiness_check(
    team_repo: TeamRepository = Depends(get_team_repo),
    store: FallbackDocumentStore = Depends(get_store),
):
    """Ready once at least one team exists; the schedule is empty otherwise."""
    return {
        "status": "ready",
        "service": settings.SERVICE_NAME,
        "teams_loaded": team_repo.count() > 0,
        "remote_store": store.remote_enabled,
        "dwell_weeks": settings.DWELL_WEEKS,
    }


@router.get("/metrics")
def prometheus_metrics():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
