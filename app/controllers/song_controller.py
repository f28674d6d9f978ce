# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Song library endpoints.
Thin HTTP layer. Delegates ALL logic to SongService.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from app.schemas.rota import (
    SongCreateRequest,
    SongImportItem,
    SongResponse,
    SongUpdateRequest,
)
from app.services.song_service import SongService
from app.core.dependencies import get_song_service

router = APIRouter(prefix="/api/v1", tags=["Songs"])


@router.get("/songs", response_model=list[SongResponse])
def list_songs(
    q: Optional[str] = None,
    service: SongService = Depends(get_song_service),
):
    """Song library, optionally searched by title or link."""
    return service.list_songs(q=q)


@router.post("/songs", status_code=201, response_model=SongResponse)
def create_song(
    payload: SongCreateRequest,
    service: SongService = Depends(get_song_service),
):
    try:
        return service.create_song(**payload.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/songs/export")
def export_songs(
    service: SongService = Depends(get_song_service),
):
    """Whole library as a JSON list (the import format)."""
    return service.export_songs()


@router.post("/songs/import")
def import_songs(
    payload: list[SongImportItem],
    service: SongService = Depends(get_song_service),
):
    """Replace the library with the uploaded list."""
    return service.import_songs([item.model_dump() for item in payload])


@router.get("/songs/{title}", response_model=SongResponse)
def get_song(
    title: str,
    service: SongService = Depends(get_song_service),
):
    """Look a song up by slug or (approximate) title."""
    try:
        return service.get_song(title)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/songs/{slug}", response_model=SongResponse)
def update_song(
    slug: str,
    payload: SongUpdateRequest,
    service: SongService = Depends(get_song_service),
):
    try:
        return service.update_song(slug, **payload.model_dump(exclude_none=True))
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/songs/{slug}")
def delete_song(
    slug: str,
    service: SongService = Depends(get_song_service),
):
    try:
        return service.delete_song(slug)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
