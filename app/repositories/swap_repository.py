# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Swap request data access.
Append-only list under ``swapRequests``; records are stored as received so
malformed legacy entries survive and are filtered by the resolver.
"""

from typing import Any, Optional

from app.repositories.document_store import SWAPS_PATH, FallbackDocumentStore
from app.repositories.team_repository import as_record_list


class SwapRepository:
    """Swap request storage in creation order."""

    def __init__(self, store: FallbackDocumentStore) -> None:
        self._store = store

    # ── Read ──

    def get_all(self, status: Optional[str] = None) -> list[dict[str, Any]]:
        records = as_record_list(self._store.get(SWAPS_PATH))
        if status:
            records = [r for r in records if r.get("status") == status]
        return records

    def get_by_id(self, swap_id: int) -> Optional[dict[str, Any]]:
        for record in self.get_all():
            if record.get("id") == swap_id:
                return record
        return None

    def max_id(self) -> int:
        ids = [r["id"] for r in self.get_all() if isinstance(r.get("id"), int)]
        return max(ids, default=0)

    def count(self) -> int:
        return len(self.get_all())

    # ── Write ──

    @property
    def write_lock(self):
        return self._store.write_lock

    def append(self, record: dict[str, Any]) -> None:
        with self._store.write_lock:
            records = self.get_all()
            records.append(record)
            self._store.set(SWAPS_PATH, records)

    def update(self, swap_id: int, changes: dict[str, Any]) -> Optional[dict[str, Any]]:
        with self._store.write_lock:
            records = self.get_all()
            for record in records:
                if record.get("id") == swap_id:
                    record.update(changes)
                    self._store.set(SWAPS_PATH, records)
                    return record
        return None

    # ── Bulk / internal ──

    def clear(self) -> None:
        self._store.delete(SWAPS_PATH)
