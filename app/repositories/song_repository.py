# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Song library data access.
Songs are one ``slug -> song`` object under ``uniqueSongs``.
"""

from typing import Any, Optional

from app.repositories.document_store import SONGS_PATH, FallbackDocumentStore


class SongRepository:
    """Slug-keyed song storage."""

    def __init__(self, store: FallbackDocumentStore) -> None:
        self._store = store

    # ── Read ──

    def get_all(self) -> dict[str, dict[str, Any]]:
        value = self._store.get(SONGS_PATH)
        if not isinstance(value, dict):
            return {}
        return {k: v for k, v in value.items() if isinstance(v, dict)}

    def get_by_slug(self, slug: str) -> Optional[dict[str, Any]]:
        return self.get_all().get(slug)

    def exists(self, slug: str) -> bool:
        return slug in self.get_all()

    def count(self) -> int:
        return len(self.get_all())

    # ── Write ──

    def save(self, slug: str, song: dict[str, Any]) -> None:
        with self._store.write_lock:
            songs = self.get_all()
            songs[slug] = song
            self._store.set(SONGS_PATH, songs)

    def delete(self, slug: str) -> Optional[dict[str, Any]]:
        with self._store.write_lock:
            songs = self.get_all()
            removed = songs.pop(slug, None)
            if removed is not None:
                self._store.set(SONGS_PATH, songs)
        return removed

    def replace_all(self, songs: dict[str, dict[str, Any]]) -> None:
        self._store.set(SONGS_PATH, songs)

    # ── Bulk / internal ──

    def clear(self) -> None:
        self._store.delete(SONGS_PATH)
