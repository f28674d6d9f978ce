# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Document store access.

Keyed JSON documents under fixed top-level paths (``teams``, ``swapRequests``,
``manualOverrides``, ``uniqueSongs``). The remote realtime store is reached
over its REST interface; when it is unreachable reads and writes are served
by a local JSON file (or memory) so the rota keeps working offline.
"""

import copy
import json
import os
import threading
from typing import Any, Optional

import httpx

from app.core.config import settings
from app.core.logging import get_logger
from app.metrics.prometheus import STORE_FALLBACKS

logger = get_logger(__name__)

TEAMS_PATH = "teams"
SWAPS_PATH = "swapRequests"
MANUAL_OVERRIDES_PATH = "manualOverrides"
SONGS_PATH = "uniqueSongs"


class StoreUnavailableError(Exception):
    """The remote document store could not serve the request."""


class LocalDocumentStore:
    """JSON file store; keeps everything in memory when no path is given."""

    def __init__(self, path: Optional[str] = None) -> None:
        self._path = path or None
        self._lock = threading.Lock()
        self._data: dict[str, Any] = self._load()

    def _load(self) -> dict[str, Any]:
        if not self._path or not os.path.exists(self._path):
            return {}
        try:
            with open(self._path, encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Local store unreadable, starting empty: %s", exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _flush(self) -> None:
        if not self._path:
            return
        tmp_path = f"{self._path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as fh:
            json.dump(self._data, fh, indent=2, sort_keys=True)
        os.replace(tmp_path, self._path)

    # ── Read ──

    def get(self, path: str) -> Any:
        with self._lock:
            return copy.deepcopy(self._data.get(path))

    # ── Write ──

    def set(self, path: str, value: Any) -> None:
        with self._lock:
            if value is None:
                self._data.pop(path, None)
            else:
                self._data[path] = copy.deepcopy(value)
            self._flush()

    # ── Bulk / internal ──

    def clear(self) -> None:
        with self._lock:
            self._data.clear()
            self._flush()


class RemoteDocumentStore:
    """REST client for a realtime JSON document store (``{base}/{path}.json``)."""

    def __init__(
        self,
        base_url: str,
        auth: str = "",
        timeout: float = 3.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._auth = auth
        self._timeout = timeout

    def _url(self, path: str) -> str:
        return f"{self._base_url}/{path}.json"

    def _params(self) -> dict[str, str]:
        return {"auth": self._auth} if self._auth else {}

    def _request(self, method: str, path: str, payload: Any = None) -> httpx.Response:
        try:
            with httpx.Client(timeout=self._timeout) as client:
                resp = client.request(
                    method,
                    self._url(path),
                    params=self._params(),
                    json=payload,
                )
            resp.raise_for_status()
            return resp
        except httpx.HTTPError as exc:
            raise StoreUnavailableError(f"{method} {path} failed: {exc}") from exc

    def get(self, path: str) -> Any:
        return self._request("GET", path).json()

    def set(self, path: str, value: Any) -> None:
        if value is None:
            self._request("DELETE", path)
        else:
            self._request("PUT", path, value)


class FallbackDocumentStore:
    """Remote-first store that degrades to the local store on failure."""

    def __init__(
        self,
        local: LocalDocumentStore,
        remote: Optional[RemoteDocumentStore] = None,
    ) -> None:
        self._local = local
        self._remote = remote
        self._write_lock = threading.RLock()

    @property
    def write_lock(self) -> threading.RLock:
        """Held by repositories across a read-modify-write of one document."""
        return self._write_lock

    @property
    def remote_enabled(self) -> bool:
        return self._remote is not None

    def get(self, path: str) -> Any:
        if self._remote is None:
            return self._local.get(path)
        try:
            value = self._remote.get(path)
        except StoreUnavailableError as exc:
            STORE_FALLBACKS.labels(operation="read").inc()
            logger.warning(
                "Remote store read failed, using local copy: %s",
                exc,
                extra={"store_path": path, "operation": "read"},
            )
            return self._local.get(path)
        self._local.set(path, value)
        return value

    def set(self, path: str, value: Any) -> None:
        if self._remote is not None:
            try:
                self._remote.set(path, value)
            except StoreUnavailableError as exc:
                STORE_FALLBACKS.labels(operation="write").inc()
                logger.warning(
                    "Remote store write failed, saved locally: %s",
                    exc,
                    extra={"store_path": path, "operation": "write"},
                )
        self._local.set(path, value)

    def delete(self, path: str) -> None:
        self.set(path, None)


def build_document_store() -> FallbackDocumentStore:
    """Wire the store from settings."""
    remote = None
    if settings.REMOTE_STORE_URL:
        remote = RemoteDocumentStore(
            settings.REMOTE_STORE_URL,
            auth=settings.REMOTE_STORE_AUTH,
            timeout=settings.REMOTE_STORE_TIMEOUT,
        )
    return FallbackDocumentStore(
        local=LocalDocumentStore(settings.LOCAL_STORE_PATH or None),
        remote=remote,
    )
