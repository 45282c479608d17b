"""Service layer orchestrating Price Estimator operations."""

from __future__ import annotations

from typing import Any, Mapping

from ..core import detect_numeric_columns, parse_csv
from .schemas import PredictRequest, ReportQuery, TrainRequest
from .utils import (
    DEFAULT_TRAINING_DELAY,
    clear_session,
    configure_session_store,
    enforce_dataset_limits,
    get_session,
    new_session,
)


def _limits_from_settings(settings: Mapping[str, Any] | None) -> dict[str, Any]:
    settings = settings or {}
    try:
        max_rows = int(settings.get("max_rows", 100_000))
    except (TypeError, ValueError):
        max_rows = 100_000
    try:
        max_columns = int(settings.get("max_columns", 200))
    except (TypeError, ValueError):
        max_columns = 200
    try:
        max_sessions = int(settings.get("max_sessions", 64))
    except (TypeError, ValueError):
        max_sessions = 64
    try:
        delay = float(settings.get("training_delay_seconds", DEFAULT_TRAINING_DELAY))
    except (TypeError, ValueError):
        delay = DEFAULT_TRAINING_DELAY
    return {
        "max_rows": max_rows,
        "max_columns": max_columns,
        "max_sessions": max_sessions,
        "training_delay": max(delay, 0.0),
    }


def dataset_load_from_bytes(data: bytes, settings: Mapping[str, Any] | None = None) -> dict[str, Any]:
    limits = _limits_from_settings(settings)
    configure_session_store(limits["max_sessions"])
    dataset = parse_csv(data)
    enforce_dataset_limits(
        dataset,
        max_rows=limits["max_rows"],
        max_columns=limits["max_columns"],
    )
    session_id, _ = new_session(dataset, delay=limits["training_delay"])
    numeric = set(detect_numeric_columns(dataset.rows, dataset.headers))
    return {
        "session_id": session_id,
        "rows": len(dataset.rows),
        "headers": dataset.headers,
        "columns": [{"name": name, "is_numeric": name in numeric} for name in dataset.headers],
        "head": dataset.preview(),
    }


def drop_session(session_id: str) -> dict[str, Any]:
    get_session(session_id)
    clear_session(session_id)
    return {"session_id": session_id, "deleted": True}


def run_train(request: TrainRequest) -> dict[str, Any] | tuple[dict[str, Any], int]:
    session = get_session(request.session_id)
    estimator = session.estimator
    if request.wait:
        outcome = estimator.train()
        return {"session_id": request.session_id, "state": "ready", **outcome.to_dict()}
    estimator.train_async()
    status = estimator.status()
    return {"session_id": request.session_id, **status}, 202


def training_status(session_id: str) -> dict[str, Any]:
    session = get_session(session_id)
    return {"session_id": session_id, **session.estimator.status()}


def insights(session_id: str) -> dict[str, Any]:
    session = get_session(session_id)
    return session.estimator.insights()


def run_predict(request: PredictRequest) -> dict[str, Any]:
    session = get_session(request.session_id)
    prediction = session.estimator.predict(request.inputs)
    return prediction.to_dict()


def prediction_history(session_id: str) -> dict[str, Any]:
    session = get_session(session_id)
    records = [record.to_dict() for record in session.estimator.predictions]
    return {"session_id": session_id, "count": len(records), "predictions": records}


def prediction_report(query: ReportQuery) -> dict[str, Any] | bytes:
    session = get_session(query.session_id)
    if query.format == "csv":
        return session.estimator.report_csv()
    return session.estimator.report()


__all__ = [
    "dataset_load_from_bytes",
    "drop_session",
    "insights",
    "prediction_history",
    "prediction_report",
    "run_predict",
    "run_train",
    "training_status",
]
