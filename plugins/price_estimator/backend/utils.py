"""Utility helpers for the Price Estimator plugin backend."""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

from common.tasks import DeferredRunner

from ..core import MIN_CLEAN_ROWS, EstimatorSession, RawDataset

_SESSION_TTL = timedelta(minutes=30)
DEFAULT_TRAINING_DELAY = 0.5


@dataclass(slots=True)
class SessionData:
    """In-memory representation for an active estimator session."""

    estimator: EstimatorSession
    session_id: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    last_accessed: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def touch(self) -> None:
        self.last_accessed = datetime.now(timezone.utc)


class SessionStore:
    """Thread-safe in-memory session registry with TTL purging and a size cap."""

    def __init__(self, max_sessions: int = 64) -> None:
        self.max_sessions = max_sessions
        self._items: dict[str, SessionData] = {}
        self._lock = threading.Lock()

    def _purge_locked(self) -> None:
        now = datetime.now(timezone.utc)
        expired = [
            session_id
            for session_id, session in self._items.items()
            if now - session.last_accessed > _SESSION_TTL
        ]
        for session_id in expired:
            self._items.pop(session_id).estimator.close()

    def create(self, estimator: EstimatorSession) -> tuple[str, SessionData]:
        session_id = uuid.uuid4().hex
        with self._lock:
            self._purge_locked()
            if len(self._items) >= self.max_sessions:
                raise ValueError("Too many active sessions. Try again later.")
            data = SessionData(estimator=estimator, session_id=session_id)
            self._items[session_id] = data
        return session_id, data

    def get(self, session_id: str) -> SessionData:
        with self._lock:
            self._purge_locked()
            try:
                data = self._items[session_id]
            except KeyError as exc:
                raise KeyError("Session expired or not found") from exc
            data.touch()
            return data

    def delete(self, session_id: str) -> None:
        with self._lock:
            data = self._items.pop(session_id, None)
        if data is not None:
            data.estimator.close()

    def clear(self) -> None:
        with self._lock:
            items = list(self._items.values())
            self._items.clear()
        for data in items:
            data.estimator.close()


_SESSION_STORE = SessionStore()


def configure_session_store(max_sessions: int) -> None:
    _SESSION_STORE.max_sessions = max(int(max_sessions), 1)


def reset_session_store() -> None:
    _SESSION_STORE.clear()
    _SESSION_STORE.max_sessions = 64


def new_session(dataset: RawDataset, *, delay: float = DEFAULT_TRAINING_DELAY) -> tuple[str, SessionData]:
    """Register a session with its own training runner, so queues never cross sessions."""

    runner = DeferredRunner(delay, name="price-estimator-train")
    estimator = EstimatorSession(dataset, runner=runner)
    try:
        return _SESSION_STORE.create(estimator)
    except ValueError:
        estimator.close()
        raise


def get_session(session_id: str) -> SessionData:
    return _SESSION_STORE.get(session_id)


def clear_session(session_id: str) -> None:
    _SESSION_STORE.delete(session_id)


def enforce_dataset_limits(dataset: RawDataset, *, max_rows: int, max_columns: int) -> None:
    if not dataset.rows:
        raise ValueError("CSV file must contain at least one row")
    if len(dataset.headers) > max_columns:
        raise ValueError(
            f"Dataset has {len(dataset.headers)} columns; the limit is {max_columns} columns"
        )
    if len(dataset.rows) > max_rows:
        raise ValueError(f"Dataset has {len(dataset.rows)} rows; the limit is {max_rows} rows")


def session_config(app_config: Mapping[str, Any]) -> dict[str, Any]:
    plugin_settings = app_config.get("PLUGIN_SETTINGS", {}).get("price_estimator", {})
    upload = plugin_settings.get("upload", {})
    limits = {
        "max_mb": upload.get("max_mb", 5),
        "max_files": upload.get("max_files", 1),
        "max_columns": plugin_settings.get("max_columns", 200),
        "max_rows": plugin_settings.get("max_rows", 100000),
    }
    return {
        "upload": limits,
        "min_rows": MIN_CLEAN_ROWS,
        "training_delay_seconds": plugin_settings.get(
            "training_delay_seconds", DEFAULT_TRAINING_DELAY
        ),
    }


__all__ = [
    "DEFAULT_TRAINING_DELAY",
    "SessionData",
    "SessionStore",
    "clear_session",
    "configure_session_store",
    "enforce_dataset_limits",
    "get_session",
    "new_session",
    "reset_session_store",
    "session_config",
]
