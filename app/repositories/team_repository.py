# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Team data access.
Teams are persisted as one ordered list under the ``teams`` path.
NO business rules here. Pure CRUD.
"""

from typing import Any, Optional

from app.repositories.document_store import TEAMS_PATH, FallbackDocumentStore


def as_record_list(value: Any) -> list[dict[str, Any]]:
    """Normalise a stored list (the remote store may return an index-keyed object)."""
    if not value:
        return []
    if isinstance(value, dict):
        items = sorted(value.items(), key=lambda kv: int(kv[0]) if str(kv[0]).isdigit() else 0)
        value = [v for _, v in items]
    return [v for v in value if isinstance(v, dict)]


class TeamRepository:
    """Ordered team storage. Order is the rotation order."""

    def __init__(self, store: FallbackDocumentStore) -> None:
        self._store = store

    # ── Read ──

    def get_all(self) -> list[dict[str, Any]]:
        return as_record_list(self._store.get(TEAMS_PATH))

    def get_by_id(self, team_id: int) -> Optional[dict[str, Any]]:
        for team in self.get_all():
            if team.get("id") == team_id:
                return team
        return None

    def exists(self, team_id: int) -> bool:
        return self.get_by_id(team_id) is not None

    def count(self) -> int:
        return len(self.get_all())

    # ── Write ──

    def save_all(self, teams: list[dict[str, Any]]) -> None:
        self._store.set(TEAMS_PATH, teams)

    @property
    def write_lock(self):
        return self._store.write_lock

    def save(self, team: dict[str, Any]) -> None:
        """Insert or replace by id, keeping the existing position."""
        with self.write_lock:
            teams = self.get_all()
            for i, existing in enumerate(teams):
                if existing.get("id") == team["id"]:
                    teams[i] = team
                    break
            else:
                teams.append(team)
            self.save_all(teams)

    def delete(self, team_id: int) -> Optional[dict[str, Any]]:
        with self.write_lock:
            teams = self.get_all()
            removed = None
            kept: list[dict[str, Any]] = []
            for team in teams:
                if removed is None and team.get("id") == team_id:
                    removed = team
                else:
                    kept.append(team)
            if removed is not None:
                self.save_all(kept)
        return removed

    # ── Bulk / internal ──

    def clear(self) -> None:
        self._store.delete(TEAMS_PATH)
