# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Request / Response schemas. API contract definitions.
These are Pydantic models used ONLY at the controller (HTTP) boundary.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.domain import parse_iso_date

ISO_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


# ── Team Schemas ──

class TeamCreateRequest(BaseModel):
    id: Optional[int] = Field(default=None, ge=0, description="Explicit team id")
    leader: str = Field(..., min_length=1, max_length=255, description="Team leader")
    members: list[str] = Field(default_factory=list, description="Team members in order")


class TeamUpdateRequest(BaseModel):
    """Partial update model for PATCH /api/v1/teams/{team_id}."""
    leader: Optional[str] = Field(default=None, min_length=1, max_length=255)
    members: Optional[list[str]] = None


class TeamOrderRequest(BaseModel):
    team_ids: list[int] = Field(..., description="Every team id in rotation order")


class TeamResponse(BaseModel):
    id: int
    leader: str
    members: list[str]


# ── Schedule Schemas ──

class WeekResponse(BaseModel):
    date: str
    team_id: Optional[int] = None
    index: int
    source: str
    is_christmas: bool = False
    is_easter: bool = False
    is_good_friday: bool = False
    label: str
    leader: Optional[str] = None
    members: list[str] = Field(default_factory=list)
    occasion: Optional[str] = None


class ScheduleSummaryResponse(BaseModel):
    total_dates: int
    special_dates: int
    teams_active: int
    unassigned_dates: int
    overridden_dates: int
    swapped_dates: int
    first_date: Optional[str] = None
    last_date: Optional[str] = None
    dwell_weeks: int
    teams_configured: int


# ── Override Schemas ──

class OverrideSetRequest(BaseModel):
    team_id: int = Field(..., ge=0, description="Team to force onto the date")


# ── Swap Schemas ──

class SwapCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_team_id: int = Field(..., alias="fromTeamId")
    to_team_id: int = Field(..., alias="toTeamId")
    from_date: str = Field(..., alias="fromDate", pattern=ISO_DATE_PATTERN)
    to_date: str = Field(..., alias="toDate", pattern=ISO_DATE_PATTERN)

    @field_validator("from_date", "to_date")
    @classmethod
    def validate_calendar_date(cls, v: str) -> str:
        parse_iso_date(v)
        return v


class SwapResponse(BaseModel):
    id: int
    from_team_id: int
    to_team_id: int
    from_date: str
    to_date: str
    status: str


# ── Song Schemas ──

class SongCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    artist: str = ""
    link1: str = Field(default="", description="Lyrics link")
    link2: str = Field(default="", description="Chords link")
    spotify: str = ""


class SongUpdateRequest(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    artist: Optional[str] = None
    link1: Optional[str] = None
    link2: Optional[str] = None
    spotify: Optional[str] = None


class SongImportItem(BaseModel):
    title: str
    artist: Optional[str] = ""
    link1: Optional[str] = ""
    link2: Optional[str] = ""
    spotify: Optional[str] = ""


class SongResponse(BaseModel):
    title: str
    artist: str
    link1: str
    link2: str
    spotify: str
    slug: str
    display_title: str


# ── Access Schemas ──

class AccessVerifyRequest(BaseModel):
    token: str = ""
