# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Override / swap resolution. Pure computation over one snapshot.

Precedence is an explicit ordered rule list (RULES): the first rule that
produces a resolution wins.

    1. manual override   date -> team id, returned verbatim
    2. approved swap     earliest-created approved swap naming the date
    3. default rotation  position-based rotation of the team sequence
"""

from typing import Any, Callable, Mapping, NamedTuple, Optional, Sequence, Union

from pydantic import TypeAdapter, ValidationError

from app.core.logging import get_logger
from app.metrics.prometheus import MALFORMED_RECORDS
from app.models.domain import SwapRequest, Team
from app.services.rotation import default_team_id

logger = get_logger(__name__)

SwapRecord = Union[SwapRequest, Mapping[str, Any]]

_TEAM_ID = TypeAdapter(int)

_REQUIRED_SWAP_FIELDS = (
    ("fromDate", "from_date"),
    ("toDate", "to_date"),
    ("status",),
)


class Resolution(NamedTuple):
    team_id: Optional[int]
    source: str


class ResolutionContext(NamedTuple):
    date: str
    index: int
    teams: Sequence[Team]
    dwell_weeks: int
    overrides: Mapping[str, int]
    approved_swaps: Sequence[SwapRequest]


# ── Swap eligibility ──

def _has_required_fields(record: Mapping[str, Any]) -> bool:
    return all(
        any(record.get(key) not in (None, "") for key in spellings)
        for spellings in _REQUIRED_SWAP_FIELDS
    )


def _coerce_swap(record: SwapRecord) -> Optional[SwapRequest]:
    if isinstance(record, SwapRequest):
        return record
    if not isinstance(record, Mapping) or not _has_required_fields(record):
        return None
    try:
        return SwapRequest.model_validate(record)
    except ValidationError:
        return None


def valid_overrides(overrides: Mapping[str, Any]) -> dict[str, int]:
    """
    Overrides whose value reads as a team id (``3`` or ``"3"``). Other
    entries are dropped and logged so the date falls through to swaps and
    rotation. Ids that name no team are kept.
    """
    valid: dict[str, int] = {}
    dropped: list[str] = []
    for iso_date, value in overrides.items():
        try:
            if isinstance(value, bool):
                raise ValueError("boolean is not a team id")
            valid[iso_date] = _TEAM_ID.validate_python(value)
        except ValueError:
            dropped.append(iso_date)
    MALFORMED_RECORDS.labels(kind="override").set(len(dropped))
    if dropped:
        logger.warning("Ignoring malformed overrides for %s", ", ".join(sorted(dropped)))
    return valid


def approved_swaps(
    swaps: Sequence[SwapRecord],
    teams: Sequence[Team],
) -> list[SwapRequest]:
    """
    Eligible approved swaps in creation order (id, then input position).
    Malformed records and swaps naming unknown teams are skipped and logged.
    """
    known_ids = {t.id for t in teams}
    eligible: list[tuple[int, int, SwapRequest]] = []
    malformed: list[int] = []
    for position, record in enumerate(swaps):
        swap = _coerce_swap(record)
        if swap is None:
            malformed.append(position)
            continue
        if swap.status != "approved":
            continue
        if swap.from_team_id not in known_ids or swap.to_team_id not in known_ids:
            logger.warning(
                "Ignoring swap %d: unknown team (from=%s, to=%s)",
                swap.id, swap.from_team_id, swap.to_team_id,
                extra={"swap_id": swap.id},
            )
            continue
        eligible.append((swap.id, position, swap))

    MALFORMED_RECORDS.labels(kind="swap").set(len(malformed))
    if malformed:
        logger.warning("Ignoring %d malformed swap records at positions %s", len(malformed), malformed)
    eligible.sort(key=lambda item: (item[0], item[1]))
    return [swap for _, _, swap in eligible]


# ── Rules ──

def _override_rule(ctx: ResolutionContext) -> Optional[Resolution]:
    if ctx.date in ctx.overrides:
        return Resolution(ctx.overrides[ctx.date], "override")
    return None


def _swap_rule(ctx: ResolutionContext) -> Optional[Resolution]:
    for swap in ctx.approved_swaps:
        if swap.from_date == ctx.date:
            return Resolution(swap.to_team_id, "swap")
        if swap.to_date == ctx.date:
            return Resolution(swap.from_team_id, "swap")
    return None


def _rotation_rule(ctx: ResolutionContext) -> Optional[Resolution]:
    team_id = default_team_id(ctx.index, ctx.teams, ctx.dwell_weeks)
    return Resolution(team_id, "rotation" if team_id is not None else "unassigned")


RULES: tuple[Callable[[ResolutionContext], Optional[Resolution]], ...] = (
    _override_rule,
    _swap_rule,
    _rotation_rule,
)


def resolve(ctx: ResolutionContext) -> Resolution:
    """Apply RULES in order and return the first resolution."""
    for rule in RULES:
        resolution = rule(ctx)
        if resolution is not None:
            return resolution
    return Resolution(None, "unassigned")


def effective_team_id(
    date: str,
    index: int,
    teams: Sequence[Team],
    dwell_weeks: int,
    overrides: Mapping[str, int],
    swaps: Sequence[SwapRecord],
) -> Optional[int]:
    """Effective team id for ``date`` after override / swap / rotation."""
    ctx = ResolutionContext(
        date=date,
        index=index,
        teams=teams,
        dwell_weeks=dwell_weeks,
        overrides=valid_overrides(overrides),
        approved_swaps=approved_swaps(swaps, teams),
    )
    return resolve(ctx).team_id
