"""Fit quality metrics and dataset insight statistics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

import numpy as np

from .dataset import PreparedDataset
from .model import FittedModel
from .stats import mean_std, r_squared, rmse


@dataclass(frozen=True)
class Evaluation:
    r2: float
    rmse: float
    n: int
    predictions: List[float]

    def metrics(self) -> Dict[str, float]:
        return {"r2": self.r2, "rmse": self.rmse, "n": self.n}


def predict_matrix(model: FittedModel, X) -> np.ndarray:
    X = np.asarray(X, dtype=float)
    if X.ndim != 2 or X.shape[1] != len(model.features):
        raise ValueError(
            f"Expected a matrix with {len(model.features)} feature columns"
        )
    standardized = model.standardize(X) @ np.asarray(model.weights, dtype=float)
    return model.target_stats.destandardize(standardized)


def evaluate_model(model: FittedModel, X, y) -> Evaluation:
    actual = np.asarray(y, dtype=float)
    predicted = predict_matrix(model, X)
    return Evaluation(
        r2=r_squared(actual, predicted),
        rmse=rmse(actual, predicted),
        n=int(actual.size),
        predictions=[float(value) for value in predicted],
    )


def dataset_insights(prepared: PreparedDataset, *, limit: int = 2) -> Dict[str, object]:
    """Target mean/std plus the mean of the first ``limit`` features."""

    target_stats = mean_std(prepared.clean[prepared.target])
    features: List[Dict[str, object]] = []
    for name in prepared.features[:limit]:
        stats = mean_std(prepared.clean[name])
        features.append({"name": name, "mean": stats.mean, "std": stats.std})
    return {
        "target": {
            "name": prepared.target,
            "mean": target_stats.mean,
            "std": target_stats.std,
        },
        "features": features,
        "rows": prepared.n_rows,
    }


__all__ = ["Evaluation", "dataset_insights", "evaluate_model", "predict_matrix"]
