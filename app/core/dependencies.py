# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
FastAPI dependency injection. Wire the document store, repositories and services.
"""

from app.repositories.document_store import FallbackDocumentStore, build_document_store
from app.repositories.history_repository import HistoryRepository
from app.repositories.override_repository import OverrideRepository
from app.repositories.song_repository import SongRepository
from app.repositories.swap_repository import SwapRepository
from app.repositories.team_repository import TeamRepository
from app.services.access_service import AccessService
from app.services.rota_service import RotaService
from app.services.song_service import SongService
from app.services.swap_service import SwapService
from app.services.team_service import TeamService

# ── Singleton store + repository instances ──
_store = build_document_store()
_team_repo = TeamRepository(_store)
_override_repo = OverrideRepository(_store)
_swap_repo = SwapRepository(_store)
_song_repo = SongRepository(_store)
_history_repo = HistoryRepository()

# ── Service instances (with injected dependencies) ──
_team_service = TeamService(team_repo=_team_repo, history_repo=_history_repo)
_rota_service = RotaService(
    team_service=_team_service,
    override_repo=_override_repo,
    swap_repo=_swap_repo,
    history_repo=_history_repo,
)
_swap_service = SwapService(
    swap_repo=_swap_repo,
    team_service=_team_service,
    history_repo=_history_repo,
)
_song_service = SongService(song_repo=_song_repo, history_repo=_history_repo)
_access_service = AccessService()


# ── FastAPI dependency functions ──
def get_team_service() -> TeamService:
    return _team_service


def get_rota_service() -> RotaService:
    return _rota_service


def get_swap_service() -> SwapService:
    return _swap_service


def get_song_service() -> SongService:
    return _song_service


def get_access_service() -> AccessService:
    return _access_service


def get_store() -> FallbackDocumentStore:
    return _store


def get_team_repo() -> TeamRepository:
    return _team_repo


def get_override_repo() -> OverrideRepository:
    return _override_repo


def get_swap_repo() -> SwapRepository:
    return _swap_repo


def get_song_repo() -> SongRepository:
    return _song_repo


def get_history_repo() -> HistoryRepository:
    return _history_repo
