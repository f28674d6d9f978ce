# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Calendar materialization. Pure computation over one snapshot.

Walks Sundays from the first Sunday on or after ``today`` to the end of the
horizon year, resolves every date, folds in special dates and returns the
records sorted by ISO date with each date present once. Stateless: the same
snapshot always yields the same sequence.
"""

from bisect import bisect_left
from datetime import date, timedelta
from typing import Iterable, Mapping, Optional, Sequence

from app.models.domain import SpecialDate, Team, WeekData
from app.services.resolver import (
    ResolutionContext,
    SwapRecord,
    approved_swaps,
    resolve,
    valid_overrides,
)

SUNDAY = 6
WEEK = timedelta(days=7)

SPECIAL_FLAGS = {
    "christmas": "is_christmas",
    "easter": "is_easter",
    "good_friday": "is_good_friday",
}


def first_sunday_on_or_after(day: date) -> date:
    """``day`` itself when it is a Sunday, otherwise the next Sunday."""
    return day + timedelta(days=(SUNDAY - day.weekday()) % 7)


def sunday_dates(start: date, horizon_year: int) -> list[date]:
    """Consecutive Sundays from ``start`` through the end of ``horizon_year``."""
    current = first_sunday_on_or_after(start)
    dates: list[date] = []
    while current.year <= horizon_year:
        dates.append(current)
        current += WEEK
    return dates


def build_schedule(
    teams: Sequence[Team],
    overrides: Mapping[str, int],
    swaps: Sequence[SwapRecord],
    dwell_weeks: int,
    horizon_end: date,
    special_dates: Iterable[SpecialDate] = (),
    today: Optional[date] = None,
) -> list[WeekData]:
    """
    Materialize the resolved schedule.

    ``today`` defaults to the local calendar date. Raises ValueError for
    ``dwell_weeks <= 0`` or a horizon before today; every data problem
    degrades to an unassigned record instead.
    """
    if dwell_weeks <= 0:
        raise ValueError("dwell_weeks must be a positive integer")
    today = today or date.today()
    if horizon_end < today:
        raise ValueError(
            f"Horizon {horizon_end.isoformat()} is before today {today.isoformat()}"
        )

    overrides = valid_overrides(overrides)
    swaps_in_order = approved_swaps(swaps, teams)

    def resolve_at(iso: str, index: int) -> WeekData:
        resolution = resolve(
            ResolutionContext(
                date=iso,
                index=index,
                teams=teams,
                dwell_weeks=dwell_weeks,
                overrides=overrides,
                approved_swaps=swaps_in_order,
            )
        )
        return WeekData(
            date=iso,
            team_id=resolution.team_id,
            index=index,
            source=resolution.source,
        )

    sundays = sunday_dates(today, horizon_end.year)
    weeks: dict[str, WeekData] = {}
    for index, sunday in enumerate(sundays):
        iso = sunday.isoformat()
        weeks[iso] = resolve_at(iso, index)

    for special in special_dates:
        day = special.as_date
        if day < today or day.year > horizon_end.year:
            continue
        iso = day.isoformat()
        record = weeks.get(iso)
        if record is None:
            # Not a generated Sunday: take the slot of the next Sunday in line.
            record = resolve_at(iso, bisect_left(sundays, day))
            weeks[iso] = record
        setattr(record, SPECIAL_FLAGS[special.kind], True)

    return [weeks[iso] for iso in sorted(weeks)]
