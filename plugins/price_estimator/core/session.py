"""Per-user estimator state: uploaded rows, current model and prediction log."""

from __future__ import annotations

import csv
import enum
import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from datetime import datetime, timezone
from io import StringIO
from typing import Any, Dict, List, Optional, Tuple

from common.logging import get_logger
from common.tasks import DeferredRunner

from .dataset import MIN_CLEAN_ROWS, prepare_dataset
from .errors import ModelNotTrainedError, NoDatasetError, NoPredictionError
from .evaluate import Evaluation, dataset_insights, evaluate_model
from .ingest import RawDataset
from .model import FittedModel, feature_weights, fit_model
from .predictor import InputVector, Prediction, predict

logger = get_logger("price_estimator.session")


class TrainingState(str, enum.Enum):
    IDLE = "idle"
    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class TrainingOutcome:
    generation: int
    model: FittedModel
    evaluation: Evaluation
    insights: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generation": self.generation,
            "model": self.model.summary(),
            "metrics": self.evaluation.metrics(),
            "insights": self.insights,
            "feature_ranking": [
                {"name": name, "weight": weight}
                for name, weight in feature_weights(self.model)
            ],
        }


@dataclass(frozen=True)
class PredictionRecord:
    inputs: Tuple[float, ...]
    prediction: float
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inputs": list(self.inputs),
            "prediction": self.prediction,
            "timestamp": self.timestamp.isoformat(),
        }


REPORT_FIELDS = [
    "target",
    "predicted",
    "deviation_percent",
    "segment",
    "confidence",
    "feature_count",
]


class EstimatorSession:
    """Hold one dataset and the model trained on it.

    Training replaces the outcome in a single assignment under the lock, so
    readers see either the previous model or the new one. Deferred requests
    run in submission order and the last one to finish wins. A failed run
    leaves the previous outcome in place.
    """

    def __init__(
        self,
        dataset: Optional[RawDataset] = None,
        *,
        runner: Optional[DeferredRunner] = None,
        min_rows: int = MIN_CLEAN_ROWS,
    ) -> None:
        self.dataset = dataset or RawDataset()
        self.min_rows = min_rows
        self._runner = runner
        self._lock = threading.Lock()
        self._outcome: Optional[TrainingOutcome] = None
        self._generation = 0
        self._outstanding = 0
        self._state = TrainingState.IDLE
        self._error: Optional[str] = None
        self._predictions: List[PredictionRecord] = []
        self._last_prediction: Optional[Prediction] = None

    # dataset -----------------------------------------------------------------

    def load(self, dataset: RawDataset) -> None:
        self.dataset = dataset
        logger.info(
            "dataset loaded: %d rows, %d columns", len(dataset.rows), len(dataset.headers)
        )

    # training ----------------------------------------------------------------

    @property
    def outcome(self) -> Optional[TrainingOutcome]:
        with self._lock:
            return self._outcome

    @property
    def model(self) -> Optional[FittedModel]:
        outcome = self.outcome
        return outcome.model if outcome is not None else None

    @property
    def runner(self) -> Optional[DeferredRunner]:
        return self._runner

    def _next_generation(self) -> int:
        with self._lock:
            self._generation += 1
            self._outstanding += 1
            return self._generation

    def _run(self, generation: int) -> TrainingOutcome:
        rows = list(self.dataset.rows)
        headers = list(self.dataset.headers)
        try:
            if not rows:
                raise NoDatasetError()
            prepared = prepare_dataset(rows, headers, min_rows=self.min_rows)
            model = fit_model(prepared)
            evaluation = evaluate_model(model, prepared.X, prepared.y)
            outcome = TrainingOutcome(
                generation=generation,
                model=model,
                evaluation=evaluation,
                insights=dataset_insights(prepared),
            )
        except Exception as exc:
            with self._lock:
                self._outstanding -= 1
                self._state = TrainingState.FAILED
                self._error = str(exc)
            logger.warning("training run %d failed: %s", generation, exc)
            raise
        with self._lock:
            self._outstanding -= 1
            self._outcome = outcome
            self._state = TrainingState.READY
            self._error = None
        logger.info(
            "training run %d complete: target=%s features=%d n=%d r2=%.4f rmse=%.4f",
            generation,
            model.target,
            len(model.features),
            model.n,
            evaluation.r2,
            evaluation.rmse,
        )
        return outcome

    def train(self) -> TrainingOutcome:
        """Run the full pipeline on the calling thread."""

        return self._run(self._next_generation())

    def train_async(self) -> "Future[TrainingOutcome]":
        """Schedule training on the session runner and return its future."""

        if self._runner is None:
            raise RuntimeError("Session has no runner for deferred training")
        generation = self._next_generation()
        return self._runner.submit(lambda: self._run(generation))

    def close(self) -> None:
        """Stop the session runner; queued trainings still finish."""

        if self._runner is not None:
            self._runner.shutdown(wait=False)

    def status(self) -> Dict[str, Any]:
        with self._lock:
            state = TrainingState.PENDING if self._outstanding else self._state
            outcome = self._outcome
            payload: Dict[str, Any] = {
                "state": state.value,
                "generation": self._generation,
                "error": self._error,
                "trained": outcome is not None,
            }
        if outcome is not None:
            payload["metrics"] = outcome.evaluation.metrics()
            payload["model_generation"] = outcome.generation
        return payload

    def insights(self) -> Dict[str, Any]:
        outcome = self.outcome
        if outcome is None:
            raise ModelNotTrainedError()
        return outcome.insights

    # prediction --------------------------------------------------------------

    def predict(self, inputs: InputVector) -> Prediction:
        prediction = predict(self.model, inputs)
        self._last_prediction = prediction
        try:
            self._predictions.append(
                PredictionRecord(inputs=tuple(prediction.inputs), prediction=prediction.value)
            )
        except Exception:  # pragma: no cover - log bookkeeping only
            logger.warning("could not record prediction", exc_info=True)
        return prediction

    @property
    def predictions(self) -> List[PredictionRecord]:
        return list(self._predictions)

    def report(self) -> Dict[str, Any]:
        model = self.model
        if model is None:
            raise ModelNotTrainedError("No model available to export")
        if self._last_prediction is None:
            raise NoPredictionError()
        report = self._last_prediction.to_dict()
        report["generated_at"] = datetime.now(timezone.utc).isoformat()
        return report

    def report_csv(self) -> bytes:
        report = self.report()
        buffer = StringIO()
        writer = csv.writer(buffer)
        writer.writerow(["field", "value"])
        for name in REPORT_FIELDS:
            value = report.get(name)
            writer.writerow([name, "" if value is None else value])
        for feature, value in report["features"].items():
            writer.writerow([f"input:{feature}", value])
        return buffer.getvalue().encode("utf-8")


__all__ = [
    "EstimatorSession",
    "PredictionRecord",
    "REPORT_FIELDS",
    "TrainingOutcome",
    "TrainingState",
]
