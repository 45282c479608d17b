"""Flask routes for the Price Estimator plugin."""

from __future__ import annotations

from typing import Any, Callable

from flask import Blueprint, Response, current_app, request

from common.errors import (
    AppError,
    ConflictAppError,
    NotFoundAppError,
    ValidationAppError,
    ensure_app_error,
)
from common.logging import get_logger
from common.responses import csv_attachment, fail, ok
from common.validation import FileLimit, ValidationError, enforce_limits, parse_model, validate_mime

from ..core import ModelNotTrainedError, NoPredictionError, PriceEstimatorError
from .schemas import PredictRequest, ReportQuery, SessionQuery, TrainRequest
from .services import (
    dataset_load_from_bytes,
    drop_session,
    insights,
    prediction_history,
    prediction_report,
    run_predict,
    run_train,
    training_status,
)
from .utils import session_config

bp = Blueprint("price_estimator", __name__, url_prefix="/api/price_estimator")
logger = get_logger("price_estimator.routes")


def _plugin_settings() -> dict[str, Any]:
    return current_app.config.get("PLUGIN_SETTINGS", {}).get("price_estimator", {}) or {}


def _upload_limits() -> FileLimit:
    upload = _plugin_settings().get("upload")
    return FileLimit.from_settings(upload, default_max_files=1, default_max_mb=5)


def _handle(callable_: Callable[[], Response | tuple[Any, int] | Any]) -> Response:
    try:
        result = callable_()
        if isinstance(result, tuple):
            payload, status = result
            return ok(payload, status=status)
        if isinstance(result, Response):
            return result
        return ok(result)
    except AppError as exc:
        return fail(exc)
    except ValidationError as exc:
        return fail(
            ValidationAppError(message=str(exc), code="price_estimator.invalid_request", details=exc.details)
        )
    except (ModelNotTrainedError, NoPredictionError) as exc:
        return fail(ConflictAppError(message=str(exc), code="price_estimator.model_not_ready"))
    except PriceEstimatorError as exc:
        code = f"price_estimator.{type(exc).__name__.removesuffix('Error').lower()}"
        return fail(ValidationAppError(message=str(exc), code=code))
    except KeyError as exc:
        message = exc.args[0] if exc.args else "Not found"
        return fail(NotFoundAppError(message=str(message), code="price_estimator.session.missing"))
    except ValueError as exc:
        return fail(ValidationAppError(message=str(exc), code="price_estimator.invalid_request"))
    except Exception as exc:  # pragma: no cover - defensive path
        logger.exception("unhandled price estimator error")
        error = ensure_app_error(exc, fallback_code="price_estimator.internal")
        return fail(error, status=error.status_code)


def _session_query(model: type[SessionQuery] = SessionQuery) -> Any:
    return parse_model(model, request.args.to_dict())


@bp.get("/")
def index() -> Response:
    return _handle(lambda: {"plugin": "price_estimator", "config": session_config(current_app.config)})


@bp.post("/datasets/load")
def datasets_load() -> Response:
    def _load() -> dict[str, Any]:
        file = request.files.get("csv")
        if not file:
            raise ValidationAppError(message="CSV upload required", code="price_estimator.dataset.missing")
        try:
            enforce_limits([file], _upload_limits())
            validate_mime([file])
        except ValidationError as exc:
            raise ValidationAppError(
                message=str(exc), code="price_estimator.upload.invalid", details=exc.details
            ) from exc
        return dataset_load_from_bytes(file.read(), _plugin_settings())

    return _handle(_load)


@bp.delete("/sessions/<session_id>")
def sessions_delete(session_id: str) -> Response:
    return _handle(lambda: drop_session(session_id))


@bp.post("/model/train")
def model_train() -> Response:
    def _call() -> Any:
        payload = parse_model(TrainRequest, request.get_json(silent=True))
        return run_train(payload)

    return _handle(_call)


@bp.get("/model/status")
def model_status() -> Response:
    return _handle(lambda: training_status(_session_query().session_id))


@bp.get("/model/insights")
def model_insights() -> Response:
    return _handle(lambda: insights(_session_query().session_id))


@bp.post("/model/predict")
def model_predict() -> Response:
    def _call() -> dict[str, Any]:
        payload = parse_model(PredictRequest, request.get_json(silent=True))
        return run_predict(payload)

    return _handle(_call)


@bp.get("/predictions")
def predictions_list() -> Response:
    return _handle(lambda: prediction_history(_session_query().session_id))


@bp.get("/report")
def report() -> Response:
    def _call() -> Any:
        query = _session_query(ReportQuery)
        result = prediction_report(query)
        if isinstance(result, bytes):
            return csv_attachment(result, "prediction-report.csv")
        return result

    return _handle(_call)


@bp.get("/system/config")
def system_config() -> Response:
    return _handle(lambda: session_config(current_app.config))


__all__ = ["bp"]
