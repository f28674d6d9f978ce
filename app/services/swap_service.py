# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Swap request lifecycle.

    pending ─► approved
    pending ─► rejected

Both outcomes are terminal. Only approved swaps change the schedule.
"""

import time
from typing import Any

from app.core.logging import get_logger
from app.metrics.prometheus import SWAP_REQUESTS
from app.models.domain import SwapRequest, parse_iso_date
from app.repositories.history_repository import HistoryRepository
from app.repositories.swap_repository import SwapRepository
from app.services.team_service import TeamService

logger = get_logger(__name__)

TERMINAL_STATUSES = ("approved", "rejected")


class SwapTransitionError(ValueError):
    """Status change not allowed from the request's current status."""


class SwapService:
    """Business logic for peer-to-peer swap requests."""

    def __init__(
        self,
        swap_repo: SwapRepository,
        team_service: TeamService,
        history_repo: HistoryRepository,
    ) -> None:
        self._swaps = swap_repo
        self._teams = team_service
        self._history = history_repo

    def _next_id(self) -> int:
        # Millisecond clock, bumped past the newest stored id so ids keep creation order.
        return max(int(time.time() * 1000), self._swaps.max_id() + 1)

    # ── Commands ──

    def create_swap(
        self,
        from_team_id: int,
        to_team_id: int,
        from_date: str,
        to_date: str,
    ) -> dict[str, Any]:
        """Record a pending swap. Raises KeyError (unknown team) / ValueError."""
        parse_iso_date(from_date)
        parse_iso_date(to_date)
        if from_team_id == to_team_id:
            raise ValueError("A team cannot swap with itself")
        if from_date == to_date:
            raise ValueError("fromDate and toDate must differ")
        self._teams.get_team(from_team_id)
        self._teams.get_team(to_team_id)

        with self._swaps.write_lock:
            swap = SwapRequest(
                id=self._next_id(),
                from_team_id=from_team_id,
                to_team_id=to_team_id,
                from_date=from_date,
                to_date=to_date,
                status="pending",
            )
            self._swaps.append(swap.model_dump(by_alias=True))

        SWAP_REQUESTS.labels(status="pending").inc()
        self._history.record_event(
            "swap_requested",
            f"swap:{swap.id}",
            {
                "from_team_id": from_team_id,
                "to_team_id": to_team_id,
                "from_date": from_date,
                "to_date": to_date,
            },
        )
        logger.info(
            "Swap requested: id=%d, %d@%s <-> %d@%s",
            swap.id, from_team_id, from_date, to_team_id, to_date,
        )
        return swap.model_dump()

    def set_status(self, swap_id: int, status: str) -> dict[str, Any]:
        """Approve or reject a pending swap. Raises KeyError / SwapTransitionError."""
        if status not in TERMINAL_STATUSES:
            raise ValueError(f"status must be one of {TERMINAL_STATUSES}")

        with self._swaps.write_lock:
            record = self._swaps.get_by_id(swap_id)
            if record is None:
                raise KeyError(f"No swap request with id {swap_id}")
            current = record.get("status")
            if current != "pending":
                raise SwapTransitionError(
                    f"Swap {swap_id} is '{current}' and can no longer change status"
                )
            updated = self._swaps.update(swap_id, {"status": status})

        SWAP_REQUESTS.labels(status=status).inc()
        self._history.record_event(
            f"swap_{status}", f"swap:{swap_id}", {"previous_status": current}
        )
        logger.info("Swap %s: id=%d", status, swap_id)
        return SwapRequest.model_validate(updated).model_dump()

    # ── Queries ──

    def list_swaps(self, status: str | None = None) -> list[dict[str, Any]]:
        """Well-formed swap requests in creation order; malformed records are hidden."""
        result: list[dict[str, Any]] = []
        for record in self._swaps.get_all(status=status):
            try:
                result.append(SwapRequest.model_validate(record).model_dump())
            except ValueError:
                logger.warning("Skipping malformed swap record id=%s", record.get("id"))
        return result

    def get_swap(self, swap_id: int) -> dict[str, Any]:
        record = self._swaps.get_by_id(swap_id)
        if record is None:
            raise KeyError(f"No swap request with id {swap_id}")
        return SwapRequest.model_validate(record).model_dump()
