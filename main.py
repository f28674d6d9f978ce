# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Worship Rota Service
====================
Rotates worship teams across Sundays, applies approved swaps and manual
overrides, marks Good Friday / Easter / Christmas, and keeps a small song
library alongside the rota.

Layered layout:
    controllers ─► services ─► repositories ─► document store

Port: 8010
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.controllers import (
    auth_controller,
    schedule_controller,
    song_controller,
    swap_controller,
    system_controller,
    team_controller,
)
from app.core.config import settings
from app.core.dependencies import (
    get_override_repo,
    get_rota_service,
    get_song_repo,
    get_team_repo,
    get_team_service,
)
from app.core.logging import get_logger
from app.metrics.prometheus import OVERRIDES_ACTIVE, SONGS_TOTAL, TEAMS_TOTAL
from app.middleware import AccessGateMiddleware, MetricsMiddleware, RequestIDMiddleware

logger = get_logger(settings.SERVICE_NAME)


# ── Lifespan ──────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    if settings.SEED_DEFAULT_TEAMS:
        get_team_service().seed_defaults()
    TEAMS_TOTAL.set(get_team_repo().count())
    OVERRIDES_ACTIVE.set(get_override_repo().count())
    SONGS_TOTAL.set(get_song_repo().count())
    if not get_rota_service().special_dates_in_window():
        logger.warning(
            "No configured special dates fall inside the schedule horizon; "
            "set SPECIAL_DATES to mark the coming holidays"
        )
    logger.info(
        "Service started: dwell_weeks=%d, horizon_years_ahead=%d",
        settings.DWELL_WEEKS,
        settings.HORIZON_YEARS_AHEAD,
    )
    yield
    logger.info("Shutting down")


# ── FastAPI App ───────────────────────────────────────────────────────────
app = FastAPI(
    title="Worship Rota Service",
    description="Sunday worship team rotation with swaps, overrides and special dates.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

app.add_middleware(MetricsMiddleware)
app.add_middleware(AccessGateMiddleware)
app.add_middleware(RequestIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception", extra={"request_id": getattr(request.state, "request_id", None)})
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "detail": str(exc),
            "request_id": getattr(request.state, "request_id", None),
        },
    )


# ── Routers ───────────────────────────────────────────────────────────────
app.include_router(system_controller.router)
app.include_router(auth_controller.router)
app.include_router(team_controller.router)
app.include_router(schedule_controller.router)
app.include_router(swap_controller.router)
app.include_router(song_controller.router)


@app.get("/", tags=["System"])
def root():
    return {
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "docs": "/docs",
    }


# ── Entrypoint ────────────────────────────────────────────────────────────
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.SERVICE_PORT, log_level="info")
