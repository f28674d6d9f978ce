# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Core configuration. All env-driven, zero hardcode.
Single source of truth for every tunable parameter.
"""

import json
import os
from typing import Any

# Fixed-date holidays injected into the Sunday calendar. Easter and Good Friday
# move every year, so each entry carries its own year.
DEFAULT_SPECIAL_DATES: list[dict[str, Any]] = [
    {"year": 2026, "month": 4, "day": 3, "kind": "good_friday"},
    {"year": 2026, "month": 4, "day": 5, "kind": "easter"},
    {"year": 2026, "month": 12, "day": 25, "kind": "christmas"},
    {"year": 2027, "month": 3, "day": 26, "kind": "good_friday"},
    {"year": 2027, "month": 3, "day": 28, "kind": "easter"},
    {"year": 2027, "month": 12, "day": 25, "kind": "christmas"},
    {"year": 2028, "month": 4, "day": 14, "kind": "good_friday"},
    {"year": 2028, "month": 4, "day": 16, "kind": "easter"},
    {"year": 2028, "month": 12, "day": 25, "kind": "christmas"},
]


def _load_special_dates(raw: str) -> list[dict[str, Any]]:
    if not raw.strip():
        return DEFAULT_SPECIAL_DATES
    entries = json.loads(raw)
    if not isinstance(entries, list):
        raise ValueError("SPECIAL_DATES must be a JSON list")
    return entries


class Settings:
    """Application settings loaded from environment variables."""

    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "worship-rota")
    SERVICE_VERSION: str = os.getenv("SERVICE_VERSION", "1.0.0")
    SERVICE_PORT: int = int(os.getenv("SERVICE_PORT", "8010"))

    # Rotation
    DWELL_WEEKS: int = int(os.getenv("DWELL_WEEKS", "2"))
    HORIZON_YEARS_AHEAD: int = int(os.getenv("HORIZON_YEARS_AHEAD", "1"))
    SPECIAL_DATES: list[dict[str, Any]] = _load_special_dates(
        os.getenv("SPECIAL_DATES", "")
    )

    # Document store
    REMOTE_STORE_URL: str = os.getenv("REMOTE_STORE_URL", "").rstrip("/")
    REMOTE_STORE_AUTH: str = os.getenv("REMOTE_STORE_AUTH", "")
    REMOTE_STORE_TIMEOUT: float = float(os.getenv("REMOTE_STORE_TIMEOUT", "3.0"))
    LOCAL_STORE_PATH: str = os.getenv("LOCAL_STORE_PATH", "")

    # Access gating
    _raw_tokens: str = os.getenv("ACCESS_TOKENS", "")
    ACCESS_TOKENS: set = {t.strip() for t in _raw_tokens.split(",") if t.strip()}
    ACCESS_BYPASS_PATHS: set = {
        "/", "/health", "/health/ready", "/metrics", "/docs", "/redoc",
        "/openapi.json", "/api/v1/auth/verify",
    }

    DEFAULT_HISTORY_LIMIT: int = int(os.getenv("DEFAULT_HISTORY_LIMIT", "100"))
    MAX_HISTORY_SIZE: int = int(os.getenv("MAX_HISTORY_SIZE", "10000"))

    CORS_ORIGINS: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    SEED_DEFAULT_TEAMS: bool = (
        os.getenv("SEED_DEFAULT_TEAMS", "true").lower() == "true"
    )

    def __init__(self) -> None:
        if self.DWELL_WEEKS <= 0:
            raise ValueError("DWELL_WEEKS must be a positive integer")
        if self.HORIZON_YEARS_AHEAD < 0:
            raise ValueError("HORIZON_YEARS_AHEAD must not be negative")


settings = Settings()
