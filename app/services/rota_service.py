# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Rota lookups and manual overrides.

Reads a full snapshot (teams, overrides, swap requests) from the
repositories on every call and hands it to the pure calendar builder; the
schedule is never cached, so every mutation is visible on the next read.
"""

import csv
from datetime import date, datetime, timezone
from io import StringIO
from typing import Any, Optional

from app.core.config import settings
from app.core.logging import get_logger
from app.metrics.prometheus import (
    OVERRIDES_ACTIVE,
    OVERRIDES_SET,
    SCHEDULE_BUILD_SECONDS,
    SCHEDULE_BUILDS,
)
from app.models.domain import (
    UNASSIGNED_LABEL,
    SpecialDate,
    Team,
    WeekData,
    parse_iso_date,
)
from app.repositories.history_repository import HistoryRepository
from app.repositories.override_repository import OverrideRepository
from app.repositories.swap_repository import SwapRepository
from app.services.calendar import build_schedule
from app.services.team_service import TeamService

logger = get_logger(__name__)

SPECIAL_LABELS = {
    "is_christmas": "Christmas",
    "is_easter": "Easter",
    "is_good_friday": "Good Friday",
}


def load_special_dates(entries: list[dict[str, Any]]) -> list[SpecialDate]:
    """Validate configured special dates. Raises ValueError on bad entries."""
    return [SpecialDate.model_validate(e) for e in entries]


class RotaService:
    """Business logic for the materialized schedule and overrides."""

    def __init__(
        self,
        team_service: TeamService,
        override_repo: OverrideRepository,
        swap_repo: SwapRepository,
        history_repo: HistoryRepository,
        dwell_weeks: int | None = None,
        special_dates: list[SpecialDate] | None = None,
    ) -> None:
        self._teams = team_service
        self._overrides = override_repo
        self._swaps = swap_repo
        self._history = history_repo
        self.dwell_weeks = dwell_weeks or settings.DWELL_WEEKS
        self.special_dates = (
            special_dates
            if special_dates is not None
            else load_special_dates(settings.SPECIAL_DATES)
        )

    # ── Schedule ──

    @staticmethod
    def horizon_end(today: date) -> date:
        return date(today.year + settings.HORIZON_YEARS_AHEAD, 12, 31)

    def special_dates_in_window(self, today: Optional[date] = None) -> list[SpecialDate]:
        """Configured special dates the schedule built on ``today`` would show."""
        today = today or date.today()
        horizon_year = self.horizon_end(today).year
        return [s for s in self.special_dates if today <= s.as_date and s.year <= horizon_year]

    def build(self, today: Optional[date] = None) -> tuple[list[WeekData], list[Team]]:
        """Materialize the schedule from the current snapshot."""
        today = today or date.today()
        teams = self._teams.load_teams()
        with SCHEDULE_BUILD_SECONDS.time():
            weeks = build_schedule(
                teams=teams,
                overrides=self._overrides.get_all(),
                swaps=self._swaps.get_all(),
                dwell_weeks=self.dwell_weeks,
                horizon_end=self.horizon_end(today),
                special_dates=self.special_dates,
                today=today,
            )
        SCHEDULE_BUILDS.inc()
        return weeks, teams

    def get_schedule(
        self,
        today: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        weeks, teams = self.build(today)
        if limit:
            weeks = weeks[:limit]
        by_id = {t.id: t for t in teams}
        return [self._describe(w, by_id) for w in weeks]

    def get_week(self, iso_date: str, today: Optional[date] = None) -> dict[str, Any]:
        """One scheduled date. Raises ValueError (bad date) or KeyError."""
        parse_iso_date(iso_date)
        weeks, teams = self.build(today)
        by_id = {t.id: t for t in teams}
        for week in weeks:
            if week.date == iso_date:
                return self._describe(week, by_id)
        raise KeyError(f"{iso_date} is not a scheduled service date")

    def get_summary(self, today: Optional[date] = None) -> dict[str, Any]:
        """Counts shown on the schedule overview."""
        weeks, teams = self.build(today)
        return {
            "total_dates": len(weeks),
            "special_dates": sum(1 for w in weeks if w.is_special),
            "teams_active": len({w.team_id for w in weeks if w.team_id is not None}),
            "unassigned_dates": sum(1 for w in weeks if w.team_id is None),
            "overridden_dates": sum(1 for w in weeks if w.source == "override"),
            "swapped_dates": sum(1 for w in weeks if w.source == "swap"),
            "first_date": weeks[0].date if weeks else None,
            "last_date": weeks[-1].date if weeks else None,
            "dwell_weeks": self.dwell_weeks,
            "teams_configured": len(teams),
        }

    # ── Overrides ──

    def set_override(self, iso_date: str, team_id: int) -> dict[str, Any]:
        """Force ``team_id`` onto ``iso_date``. Raises ValueError / KeyError."""
        parse_iso_date(iso_date)
        self._teams.get_team(team_id)

        previous = self._overrides.get_by_date(iso_date)
        self._overrides.save(iso_date, team_id)
        OVERRIDES_SET.inc()
        OVERRIDES_ACTIVE.set(self._overrides.count())
        self._history.record_event(
            "override_set",
            iso_date,
            {"team_id": team_id, "previous_team_id": previous},
        )
        logger.info("Override set: date=%s, team=%d", iso_date, team_id)
        return {"status": "override_set", "date": iso_date, "team_id": team_id}

    def clear_override(self, iso_date: str) -> dict[str, Any]:
        """Remove the override for ``iso_date``. Raises KeyError if absent."""
        if not self._overrides.exists(iso_date):
            raise KeyError(f"No override for {iso_date}")

        removed = self._overrides.delete(iso_date)
        OVERRIDES_ACTIVE.set(self._overrides.count())
        self._history.record_event("override_cleared", iso_date, {"team_id": removed})
        logger.info("Override cleared: date=%s", iso_date)
        return {"status": "override_cleared", "date": iso_date}

    def list_overrides(self) -> list[dict[str, Any]]:
        by_id = {t.id: t for t in self._teams.load_teams()}
        return [
            {
                "date": iso_date,
                "team_id": team_id,
                "label": self.team_label(team_id, by_id),
            }
            for iso_date, team_id in sorted(self._overrides.get_all().items())
        ]

    # ── Export ──

    def export_schedule(self, fmt: str, today: Optional[date] = None) -> tuple[str, str]:
        """Render the schedule as ``csv``, ``md`` or ``ics``. Returns (body, media type)."""
        rows = self.get_schedule(today)
        if fmt == "csv":
            buf = StringIO()
            writer = csv.writer(buf)
            writer.writerow(["date", "team_id", "leader", "members", "occasion", "source"])
            for r in rows:
                writer.writerow([
                    r["date"],
                    r["team_id"] if r["team_id"] is not None else "",
                    r["label"],
                    "; ".join(r["members"]),
                    r["occasion"] or "",
                    r["source"],
                ])
            return buf.getvalue(), "text/csv"

        if fmt == "md":
            lines = [
                "# Worship Rota",
                "",
                "| Date | Leader | Members | Occasion |",
                "|------|--------|---------|----------|",
            ]
            for r in rows:
                lines.append(
                    f"| {r['date']} | {r['label']} | {', '.join(r['members'])} | {r['occasion'] or ''} |"
                )
            return "\n".join(lines), "text/markdown"

        if fmt == "ics":
            stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
            lines = [
                "BEGIN:VCALENDAR",
                "VERSION:2.0",
                "PRODID:-//WorshipRota//EN",
            ]
            for r in rows:
                day = parse_iso_date(r["date"])
                summary = f"Worship: {r['label']}"
                if r["occasion"]:
                    summary = f"{summary} ({r['occasion']})"
                lines.extend([
                    "BEGIN:VEVENT",
                    f"UID:{r['date']}@worship-rota",
                    f"DTSTAMP:{stamp}",
                    f"DTSTART;VALUE=DATE:{day.strftime('%Y%m%d')}",
                    f"DTEND;VALUE=DATE:{(day + date.resolution).strftime('%Y%m%d')}",
                    f"SUMMARY:{summary}",
                    "END:VEVENT",
                ])
            lines.append("END:VCALENDAR")
            return "\r\n".join(lines), "text/calendar"

        raise ValueError(f"Unsupported export format '{fmt}'")

    # ── Internal ──

    @staticmethod
    def team_label(team_id: Optional[int], by_id: dict[int, Team]) -> str:
        team = by_id.get(team_id) if team_id is not None else None
        return team.leader if team and team.leader else UNASSIGNED_LABEL

    def _describe(self, week: WeekData, by_id: dict[int, Team]) -> dict[str, Any]:
        team = by_id.get(week.team_id) if week.team_id is not None else None
        occasions = [label for flag, label in SPECIAL_LABELS.items() if getattr(week, flag)]
        record = week.model_dump()
        record.update({
            "label": self.team_label(week.team_id, by_id),
            "leader": team.leader if team else None,
            "members": list(team.members) if team else [],
            "occasion": ", ".join(occasions) or None,
        })
        return record
