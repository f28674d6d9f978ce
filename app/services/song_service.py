# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Song library. Keyed CRUD over the ``uniqueSongs`` document.
Songs are stored lower-case under a slug of their title and shown in title case.
"""

import difflib
import re
from typing import Any, Optional

from app.core.logging import get_logger
from app.metrics.prometheus import SONGS_TOTAL
from app.repositories.history_repository import HistoryRepository
from app.repositories.song_repository import SongRepository

logger = get_logger(__name__)

SONG_FIELDS = ("title", "artist", "link1", "link2", "spotify")

MINOR_WORDS = {
    "a", "an", "and", "as", "at", "but", "by", "for", "in", "nor",
    "of", "on", "or", "so", "the", "to", "up", "yet",
}

FALLBACK_SONGS = [
    "a mighty fortress is our god",
    "all creatures of our god and king",
    "all hail the power of jesus' name",
    "ancient of days",
    "before the throne of god above",
]


def slugify(title: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")


def to_title_case(text: str) -> str:
    words = text.lower().split(" ")
    last = len(words) - 1
    return " ".join(
        w if (w in MINOR_WORDS and 0 < i < last) else w[:1].upper() + w[1:]
        for i, w in enumerate(words)
    )


def _normalise(song: dict[str, Any]) -> dict[str, str]:
    return {field: str(song.get(field) or "").strip() for field in SONG_FIELDS}


class SongService:
    """Business logic for the song library."""

    def __init__(
        self,
        song_repo: SongRepository,
        history_repo: HistoryRepository,
    ) -> None:
        self._songs = song_repo
        self._history = history_repo

    # ── Queries ──

    def list_songs(self, q: Optional[str] = None) -> list[dict[str, Any]]:
        """All songs sorted by title, filtered by ``q`` over title and links."""
        stored = self._songs.get_all()
        if stored:
            songs = [dict(_normalise(s), title=s.get("title") or slug) for slug, s in stored.items()]
        else:
            songs = [_normalise({"title": t}) for t in FALLBACK_SONGS]

        if q:
            needle = q.lower()
            songs = [
                s for s in songs
                if needle in s["title"].lower()
                or needle in s["link1"].lower()
                or needle in s["link2"].lower()
            ]
        songs.sort(key=lambda s: s["title"].lower())
        return [self._describe(s) for s in songs]

    def get_song(self, title_or_slug: str) -> dict[str, Any]:
        """Exact slug match first, then the closest title. Raises KeyError."""
        songs = self._songs.get_all()
        slug = slugify(title_or_slug)
        if slug in songs:
            return self._describe(songs[slug])
        close = difflib.get_close_matches(slug, list(songs), n=1, cutoff=0.8)
        if close:
            return self._describe(songs[close[0]])
        raise KeyError(f"No song matching '{title_or_slug}'")

    def export_songs(self) -> list[dict[str, str]]:
        return [_normalise(s) for _, s in sorted(self._songs.get_all().items())]

    # ── Commands ──

    def create_song(self, **fields: Any) -> dict[str, Any]:
        """Add a song. Raises ValueError on empty or duplicate title."""
        song = _normalise(fields)
        song["title"] = song["title"].lower()
        if not song["title"]:
            raise ValueError("Song title is required")
        slug = slugify(song["title"])
        if not slug:
            raise ValueError("Song title must contain letters or digits")
        if self._songs.exists(slug):
            raise ValueError(f"A song titled '{song['title']}' already exists")

        self._songs.save(slug, song)
        SONGS_TOTAL.set(self._songs.count())
        self._history.record_event("song_created", f"song:{slug}", {"title": song["title"]})
        logger.info("Song created: slug=%s", slug)
        return self._describe(song)

    def update_song(self, slug: str, **changes: Any) -> dict[str, Any]:
        """Edit a song; a title change re-keys it. Raises KeyError / ValueError."""
        current = self._songs.get_by_slug(slug)
        if current is None:
            raise KeyError(f"No song with slug '{slug}'")

        song = _normalise(current)
        for field, value in changes.items():
            if field in SONG_FIELDS and value is not None:
                song[field] = str(value).strip()
        song["title"] = song["title"].lower()
        new_slug = slugify(song["title"])
        if not new_slug:
            raise ValueError("Song title must contain letters or digits")
        if new_slug != slug and self._songs.exists(new_slug):
            raise ValueError(f"A song titled '{song['title']}' already exists")

        if new_slug != slug:
            self._songs.delete(slug)
        self._songs.save(new_slug, song)
        self._history.record_event(
            "song_updated", f"song:{new_slug}", {"previous_slug": slug}
        )
        logger.info("Song updated: slug=%s -> %s", slug, new_slug)
        return self._describe(song)

    def delete_song(self, slug: str) -> dict[str, str]:
        if self._songs.delete(slug) is None:
            raise KeyError(f"No song with slug '{slug}'")
        SONGS_TOTAL.set(self._songs.count())
        self._history.record_event("song_deleted", f"song:{slug}", {})
        logger.info("Song deleted: slug=%s", slug)
        return {"status": "deleted", "slug": slug}

    def import_songs(self, songs: list[dict[str, Any]]) -> dict[str, Any]:
        """Replace the library. Later entries win on slug collisions."""
        library: dict[str, dict[str, str]] = {}
        skipped = 0
        for entry in songs:
            song = _normalise(entry)
            song["title"] = song["title"].lower()
            slug = slugify(song["title"])
            if not slug:
                skipped += 1
                continue
            library[slug] = song
        self._songs.replace_all(library)
        SONGS_TOTAL.set(len(library))
        self._history.record_event(
            "songs_imported", "songs", {"imported": len(library), "skipped": skipped}
        )
        logger.info("Songs imported: %d (skipped %d)", len(library), skipped)
        return {"status": "imported", "imported": len(library), "skipped": skipped}

    # ── Internal ──

    @staticmethod
    def _describe(song: dict[str, Any]) -> dict[str, Any]:
        record = _normalise(song)
        record["slug"] = slugify(record["title"])
        record["display_title"] = to_title_case(record["title"])
        return record
