# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Audit history of rota mutations.

Each event names a ``subject``: an ISO date for overrides, ``team:<id>``,
``swap:<id>``, ``song:<slug>``, or a collection name for bulk changes.
Kept in memory; the oldest events fall off once MAX_HISTORY_SIZE is reached.
"""

import uuid
from collections import Counter, deque
from datetime import datetime, timezone
from typing import Any, Optional

from app.core.config import settings


class HistoryRepository:
    def __init__(self, max_size: Optional[int] = None) -> None:
        self._events: deque[dict[str, Any]] = deque(
            maxlen=max_size or settings.MAX_HISTORY_SIZE
        )

    # ── Read ──

    def get_all(
        self,
        event_type: Optional[str] = None,
        subject: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        """Oldest-first events matching the filters, newest ``limit`` kept.

        A ``subject`` ending in ``:`` matches by prefix (``swap:`` gives
        every swap event).
        """
        def matches(event: dict[str, Any]) -> bool:
            if event_type and event["event_type"] != event_type:
                return False
            if subject:
                if subject.endswith(":"):
                    return event["subject"].startswith(subject)
                return event["subject"] == subject
            return True

        selected = [e for e in self._events if matches(e)]
        return selected[-(limit or settings.DEFAULT_HISTORY_LIMIT):]

    def count(self) -> int:
        return len(self._events)

    def count_by_type(self) -> dict[str, int]:
        return dict(Counter(e["event_type"] for e in self._events))

    # ── Write ──

    def record_event(
        self, event_type: str, subject: str, details: dict[str, Any]
    ) -> dict[str, Any]:
        event = {
            "event_id": str(uuid.uuid4()),
            "event_type": event_type,
            "subject": subject,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "details": details,
        }
        self._events.append(event)
        return event

    def clear(self) -> None:
        self._events.clear()
