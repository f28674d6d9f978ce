# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Rotation logic. Pure computation, no side effects.
"""

from typing import Optional, Sequence

from app.models.domain import UNASSIGNED, Team


def rotation_position(index: int, team_count: int, dwell_weeks: int) -> int:
    """Position in the team sequence serving the ``index``-th Sunday."""
    if dwell_weeks <= 0:
        raise ValueError("dwell_weeks must be a positive integer")
    if index < 0:
        raise ValueError("rotation index must not be negative")
    return (index // dwell_weeks) % team_count


def default_team_id(
    index: int,
    teams: Sequence[Team],
    dwell_weeks: int,
) -> Optional[int]:
    """
    Return the team id the plain rotation assigns to the ``index``-th Sunday,
    counted from the first generated date. Each team serves ``dwell_weeks``
    consecutive Sundays, in team-sequence order.
    Pure function with no I/O.
    """
    if not teams:
        if dwell_weeks <= 0:
            raise ValueError("dwell_weeks must be a positive integer")
        return UNASSIGNED
    return teams[rotation_position(index, len(teams), dwell_weeks)].id
