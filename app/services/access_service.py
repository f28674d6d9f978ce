# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Access service. Shared access-token validation."""
import hmac
from typing import Iterable, Optional

from app.core.config import settings


class AccessService:
    def __init__(self, tokens: Optional[Iterable[str]] = None) -> None:
        self._tokens = set(tokens) if tokens is not None else set(settings.ACCESS_TOKENS)

    @property
    def enabled(self) -> bool:
        return len(self._tokens) > 0

    def validate_token(self, token: Optional[str]) -> bool:
        if not self.enabled:
            return True
        if not token:
            return False
        return any(hmac.compare_digest(token, t) for t in self._tokens)
