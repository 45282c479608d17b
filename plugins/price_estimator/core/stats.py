"""Small numeric helpers shared by the fitter, evaluator and predictor."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

import numpy as np
from sklearn.metrics import mean_squared_error

from .errors import DegenerateTargetError


@dataclass(frozen=True, slots=True)
class ColumnStats:
    """Population mean and standard deviation of one numeric column."""

    mean: float
    std: float

    def standardize(self, value):
        return (value - self.mean) / self.std

    def destandardize(self, value):
        return value * self.std + self.mean

    def to_dict(self) -> dict[str, float]:
        return {"mean": self.mean, "std": self.std}


def _as_array(values: Iterable[float]) -> np.ndarray:
    if isinstance(values, np.ndarray):
        return values.astype(float, copy=False)
    return np.asarray(list(values), dtype=float)


def mean_std(values: Iterable[float]) -> ColumnStats:
    """Return population statistics with ``std`` floored to ``1.0``.

    A zero (or non-finite) deviation would make standardization divide by
    zero, so constant columns are scaled by one instead. A constant column
    keeps its value as the mean, since summing it can drift by an ulp.
    """

    array = _as_array(values)
    if array.size == 0:
        raise ValueError("mean_std requires at least one value")
    if np.ptp(array) == 0:
        return ColumnStats(mean=float(array[0]), std=1.0)
    mean = float(array.mean())
    std = float(np.sqrt(np.mean((array - mean) ** 2)))
    if std == 0 or not math.isfinite(std):
        std = 1.0
    return ColumnStats(mean=mean, std=std)


def _paired(y_true: Iterable[float], y_pred: Iterable[float]) -> tuple[np.ndarray, np.ndarray]:
    actual = _as_array(y_true)
    predicted = _as_array(y_pred)
    if actual.size == 0:
        raise ValueError("Metrics require at least one observation")
    if actual.shape != predicted.shape:
        raise ValueError(
            f"Length mismatch: {actual.size} actual vs {predicted.size} predicted values"
        )
    return actual, predicted


def r_squared(y_true: Iterable[float], y_pred: Iterable[float]) -> float:
    """Coefficient of determination ``1 - SS_res / SS_tot``.

    A constant ``y_true`` has ``SS_tot == 0``: an exact fit scores ``1.0``,
    anything else raises :class:`DegenerateTargetError`. Residuals within
    rounding of the target's magnitude count as exact.
    """

    actual, predicted = _paired(y_true, y_pred)
    ss_tot = float(np.sum((actual - actual.mean()) ** 2))
    ss_res = float(np.sum((actual - predicted) ** 2))
    if ss_tot == 0 or np.ptp(actual) == 0:
        scale = max(1.0, float(np.max(np.abs(actual))) ** 2)
        if ss_res <= np.finfo(float).eps * actual.size * scale:
            return 1.0
        raise DegenerateTargetError(
            "Target column has no variance; R² is undefined for this fit"
        )
    return 1.0 - ss_res / ss_tot


def rmse(y_true: Iterable[float], y_pred: Iterable[float]) -> float:
    actual, predicted = _paired(y_true, y_pred)
    return float(np.sqrt(mean_squared_error(actual, predicted)))


__all__ = ["ColumnStats", "mean_std", "r_squared", "rmse"]
