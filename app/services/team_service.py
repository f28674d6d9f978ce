# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Team management. Business logic for CRUD and rotation order.
Coordinates repository writes with metrics, history, and validation.
"""

from typing import Any

from app.core.logging import get_logger
from app.metrics.prometheus import TEAMS_TOTAL
from app.models.domain import Team
from app.repositories.history_repository import HistoryRepository
from app.repositories.team_repository import TeamRepository

logger = get_logger(__name__)

DEFAULT_TEAMS: list[dict[str, Any]] = [
    {"id": 1, "leader": "John Smith", "members": ["Anna Lee", "Mark Brown", "Ruth Green"]},
    {"id": 2, "leader": "Sarah Johnson", "members": ["David Kim", "Grace Hall"]},
    {"id": 3, "leader": "Mike Wilson", "members": ["Paul Adams", "Esther Young", "Tim Clark"]},
    {"id": 4, "leader": "Emily Davis", "members": ["Naomi King", "Peter Scott"]},
]


class TeamService:
    """Business logic for the ordered team list."""

    def __init__(
        self,
        team_repo: TeamRepository,
        history_repo: HistoryRepository,
    ) -> None:
        self._teams = team_repo
        self._history = history_repo

    # ── Commands ──

    def create_team(
        self,
        leader: str,
        members: list[str] | None = None,
        team_id: int | None = None,
    ) -> dict[str, Any]:
        """Append a team to the rotation. Raises ValueError on duplicate id."""
        with self._teams.write_lock:
            existing = self._teams.get_all()
            if team_id is None:
                team_id = max((t.get("id", 0) for t in existing), default=0) + 1
            elif any(t.get("id") == team_id for t in existing):
                raise ValueError(f"Team id {team_id} already exists")

            team = Team(id=team_id, leader=leader, members=members or []).model_dump()
            self._teams.save(team)

        TEAMS_TOTAL.set(self._teams.count())
        self._history.record_event(
            "team_created",
            f"team:{team_id}",
            {"leader": leader, "members_count": len(team["members"])},
        )
        logger.info("Team created: id=%d, leader=%s", team_id, leader)
        return team

    def update_team(
        self,
        team_id: int,
        leader: str | None = None,
        members: list[str] | None = None,
    ) -> dict[str, Any]:
        """Partially update a team. Raises KeyError."""
        team = self._teams.get_by_id(team_id)
        if team is None:
            raise KeyError(f"No team found with id {team_id}")

        changes: dict[str, Any] = {}
        if leader is not None and leader != team.get("leader"):
            changes["leader"] = {"old": team.get("leader"), "new": leader}
            team["leader"] = leader
        if members is not None and members != team.get("members"):
            changes["members"] = {"old": team.get("members", []), "new": members}
            team["members"] = members

        if changes:
            self._teams.save(team)
            self._history.record_event("team_updated", f"team:{team_id}", changes)
            logger.info("Team updated: id=%d, changes=%s", team_id, list(changes.keys()))
        return Team.model_validate(team).model_dump()

    def delete_team(self, team_id: int) -> dict[str, Any]:
        """Remove a team from the rotation. Raises KeyError."""
        removed = self._teams.delete(team_id)
        if removed is None:
            raise KeyError(f"No team found with id {team_id}")

        TEAMS_TOTAL.set(self._teams.count())
        self._history.record_event("team_deleted", f"team:{team_id}", {"leader": removed.get("leader")})
        logger.info("Team deleted: id=%d", team_id)
        return {"status": "deleted", "team_id": team_id}

    def reorder(self, team_ids: list[int]) -> list[dict[str, Any]]:
        """Set the rotation order. ``team_ids`` must be a permutation of the current ids."""
        with self._teams.write_lock:
            teams = self._teams.get_all()
            by_id = {t.get("id"): t for t in teams}
            if len(team_ids) != len(set(team_ids)) or set(team_ids) != set(by_id):
                raise ValueError("Team order must list every existing team id exactly once")

            ordered = [by_id[tid] for tid in team_ids]
            self._teams.save_all(ordered)
        self._history.record_event("teams_reordered", "teams", {"order": team_ids})
        logger.info("Teams reordered: %s", team_ids)
        return self.list_teams()

    # ── Queries ──

    def list_teams(self) -> list[dict[str, Any]]:
        return [t.model_dump() for t in self.load_teams()]

    def get_team(self, team_id: int) -> dict[str, Any]:
        team = self._teams.get_by_id(team_id)
        if team is None:
            raise KeyError(f"No team found with id {team_id}")
        return Team.model_validate(team).model_dump()

    def load_teams(self) -> list[Team]:
        """Teams in rotation order; unreadable records are skipped."""
        teams: list[Team] = []
        for record in self._teams.get_all():
            try:
                teams.append(Team.model_validate(record))
            except ValueError as exc:
                logger.warning("Ignoring malformed team record: %s", exc)
        return teams

    # ── Seed ──

    def seed_defaults(self) -> None:
        """Create the default teams so the rota is usable immediately."""
        if self._teams.count() > 0:
            logger.info("Seed skipped: teams already exist")
            return
        self._teams.save_all([dict(t, members=list(t["members"])) for t in DEFAULT_TEAMS])
        self._history.record_event(
            "teams_seeded", "teams", {"count": len(DEFAULT_TEAMS), "source": "seed"}
        )
        TEAMS_TOTAL.set(self._teams.count())
        logger.info("Seeded %d default teams", len(DEFAULT_TEAMS))
