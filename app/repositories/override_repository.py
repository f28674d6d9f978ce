# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Override data access.
Manual overrides are one ``date -> team id`` object under ``manualOverrides``.
"""

from typing import Any, Optional

from app.repositories.document_store import MANUAL_OVERRIDES_PATH, FallbackDocumentStore


class OverrideRepository:
    """Date-keyed override storage."""

    def __init__(self, store: FallbackDocumentStore) -> None:
        self._store = store

    # ── Read ──

    def get_all(self) -> dict[str, Any]:
        value = self._store.get(MANUAL_OVERRIDES_PATH)
        return dict(value) if isinstance(value, dict) else {}

    def get_by_date(self, iso_date: str) -> Optional[Any]:
        return self.get_all().get(iso_date)

    def exists(self, iso_date: str) -> bool:
        return iso_date in self.get_all()

    def count(self) -> int:
        return len(self.get_all())

    # ── Write ──

    def save(self, iso_date: str, team_id: int) -> None:
        with self._store.write_lock:
            overrides = self.get_all()
            overrides[iso_date] = team_id
            self._store.set(MANUAL_OVERRIDES_PATH, overrides)

    def delete(self, iso_date: str) -> Optional[Any]:
        with self._store.write_lock:
            overrides = self.get_all()
            removed = overrides.pop(iso_date, None)
            if removed is not None:
                self._store.set(MANUAL_OVERRIDES_PATH, overrides)
        return removed

    # ── Bulk / internal ──

    def clear(self) -> None:
        self._store.delete(MANUAL_OVERRIDES_PATH)
