"""Standardized per-feature linear model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

import numpy as np
from sklearn.base import BaseEstimator, RegressorMixin

from .dataset import PreparedDataset
from .stats import ColumnStats, mean_std

MIN_CONFIDENCE = 0.5
MAX_CONFIDENCE = 0.95


def confidence_for(n: int) -> float:
    """Sample-size heuristic clamped to ``[0.5, 0.95]``; not a statistical interval."""

    return min(MAX_CONFIDENCE, max(MIN_CONFIDENCE, MIN_CONFIDENCE + n / 1000))


class PerFeatureRegressor(RegressorMixin, BaseEstimator):
    """Regress the standardized target on each standardized feature separately.

    Every weight is the closed-form slope ``sum(xs * ys) / sum(xs ** 2)`` of a
    single-feature fit. Correlation between features is ignored, so this is
    not ordinary least squares on the full design matrix.
    """

    def fit(self, X, y):
        X = np.asarray(X, dtype=float)
        y = np.asarray(y, dtype=float).ravel()
        if X.ndim != 2:
            raise ValueError("X must be a two dimensional array")
        if X.shape[0] != y.shape[0]:
            raise ValueError("X and y must contain the same number of rows")
        if X.shape[0] == 0:
            raise ValueError("Cannot fit on an empty dataset")

        self.feature_stats_ = [mean_std(X[:, j]) for j in range(X.shape[1])]
        self.target_stats_ = mean_std(y)

        Xs = self._standardize(X)
        ys = self.target_stats_.standardize(y)
        numerators = Xs.T @ ys
        denominators = np.sum(Xs * Xs, axis=0)
        denominators[denominators == 0] = 1.0
        self.coef_ = numerators / denominators
        self.n_samples_ = int(X.shape[0])
        self.n_features_in_ = int(X.shape[1])
        return self

    def _standardize(self, X: np.ndarray) -> np.ndarray:
        means = np.array([stats.mean for stats in self.feature_stats_])
        stds = np.array([stats.std for stats in self.feature_stats_])
        return (X - means) / stds

    def predict(self, X):
        X = np.asarray(X, dtype=float)
        if X.ndim == 1:
            X = X.reshape(1, -1)
        return self.target_stats_.destandardize(self._standardize(X) @ self.coef_)


@dataclass(frozen=True)
class FittedModel:
    features: Tuple[str, ...]
    target: str
    weights: Tuple[float, ...]
    feature_stats: Tuple[ColumnStats, ...]
    target_stats: ColumnStats
    n: int
    confidence: float

    def standardize(self, X) -> np.ndarray:
        X = np.asarray(X, dtype=float)
        means = np.array([stats.mean for stats in self.feature_stats])
        stds = np.array([stats.std for stats in self.feature_stats])
        return (X - means) / stds

    def summary(self) -> Dict[str, Any]:
        return {
            "target": self.target,
            "features": list(self.features),
            "weights": {name: weight for name, weight in zip(self.features, self.weights)},
            "feature_stats": {
                name: stats.to_dict() for name, stats in zip(self.features, self.feature_stats)
            },
            "target_stats": self.target_stats.to_dict(),
            "n": self.n,
            "confidence": self.confidence,
        }

    @classmethod
    def from_regressor(
        cls, regressor: PerFeatureRegressor, features: Sequence[str], target: str
    ) -> "FittedModel":
        if len(features) != regressor.n_features_in_:
            raise ValueError("Feature names do not match the fitted regressor")
        n = regressor.n_samples_
        return cls(
            features=tuple(features),
            target=target,
            weights=tuple(float(weight) for weight in regressor.coef_),
            feature_stats=tuple(regressor.feature_stats_),
            target_stats=regressor.target_stats_,
            n=n,
            confidence=confidence_for(n),
        )


def fit_model(prepared: PreparedDataset) -> FittedModel:
    regressor = PerFeatureRegressor().fit(prepared.X, prepared.y)
    return FittedModel.from_regressor(regressor, prepared.features, prepared.target)


def feature_weights(model: FittedModel) -> List[Tuple[str, float]]:
    """Features ordered by absolute weight, largest first."""

    pairs = list(zip(model.features, model.weights))
    return sorted(pairs, key=lambda item: abs(item[1]), reverse=True)


__all__ = [
    "FittedModel",
    "MAX_CONFIDENCE",
    "MIN_CONFIDENCE",
    "PerFeatureRegressor",
    "confidence_for",
    "feature_weights",
    "fit_model",
]
