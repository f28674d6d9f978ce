# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain models. Pure data structures, NO FastAPI dependency.

Persisted records use the camelCase keys of the document store
(``fromTeamId``, ``manualOverrides`` ...); the aliases below map them onto
snake_case attributes. Either spelling is accepted on input.
"""

import re
from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

SwapStatus = Literal["pending", "approved", "rejected"]
SpecialKind = Literal["christmas", "easter", "good_friday"]

# Team id used for dates that cannot be assigned (no teams configured).
UNASSIGNED: Optional[int] = None
UNASSIGNED_LABEL = "Unassigned"


def parse_iso_date(value: str) -> date:
    """Parse a canonical ``YYYY-MM-DD`` string. Raises ValueError."""
    if not isinstance(value, str) or not re.fullmatch(r"\d{4}-\d{2}-\d{2}", value):
        raise ValueError(f"Invalid ISO date '{value}', expected YYYY-MM-DD")
    return date.fromisoformat(value)


class Team(BaseModel):
    """A worship team. Position in the team sequence drives the rotation."""
    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., ge=0, description="Stable team id")
    leader: str = Field(default="", max_length=255)
    members: list[str] = Field(default_factory=list)


class SwapRequest(BaseModel):
    """Request to exchange the teams assigned to two dates."""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    from_team_id: int = Field(..., alias="fromTeamId")
    to_team_id: int = Field(..., alias="toTeamId")
    from_date: str = Field(..., alias="fromDate")
    to_date: str = Field(..., alias="toDate")
    status: SwapStatus = "pending"

    @field_validator("from_date", "to_date")
    @classmethod
    def validate_iso(cls, v: str) -> str:
        parse_iso_date(v)
        return v


class SpecialDate(BaseModel):
    """A fixed calendar holiday that must appear in the schedule."""

    year: int = Field(..., ge=1900, le=9999)
    month: int = Field(..., ge=1, le=12)
    day: int = Field(..., ge=1, le=31)
    kind: SpecialKind

    @model_validator(mode="after")
    def validate_calendar_day(self) -> "SpecialDate":
        date(self.year, self.month, self.day)
        return self

    @property
    def as_date(self) -> date:
        return date(self.year, self.month, self.day)


class WeekData(BaseModel):
    """Resolved assignment for one calendar date."""

    date: str
    team_id: Optional[int] = None
    index: int = 0
    source: str = "rotation"
    is_christmas: bool = False
    is_easter: bool = False
    is_good_friday: bool = False

    @property
    def is_special(self) -> bool:
        return self.is_christmas or self.is_easter or self.is_good_friday
