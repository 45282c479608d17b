"""Single-input price estimation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import numpy as np

from .dataset import coerce_number
from .errors import ModelNotTrainedError
from .model import FittedModel

SEGMENT_THRESHOLD = 10.0
SEGMENT_LOW = "Budget"
SEGMENT_MID = "Mid-Range"
SEGMENT_HIGH = "Luxury"

InputVector = Union[Sequence[object], Mapping[str, object]]


@dataclass(frozen=True)
class Prediction:
    value: float
    deviation_percent: Optional[float]
    segment: str
    confidence: float
    feature_count: int
    target: str
    features: List[str]
    inputs: List[float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "predicted": self.value,
            "deviation_percent": self.deviation_percent,
            "segment": self.segment,
            "confidence": self.confidence,
            "feature_count": self.feature_count,
            "target": self.target,
            "inputs": list(self.inputs),
            "features": dict(zip(self.features, self.inputs)),
        }


def market_segment(deviation: Optional[float]) -> str:
    # Both bounds are strict, [-10, 10] stays mid-range.
    if deviation is None:
        return SEGMENT_MID
    if deviation < -SEGMENT_THRESHOLD:
        return SEGMENT_LOW
    if deviation > SEGMENT_THRESHOLD:
        return SEGMENT_HIGH
    return SEGMENT_MID


def deviation_percent(value: float, mean: float) -> Optional[float]:
    """Percent difference from the dataset mean, ``None`` when the mean is zero."""

    if mean == 0:
        return None
    return (value - mean) / mean * 100


def align_inputs(model: FittedModel, inputs: InputVector) -> List[float]:
    """Order raw inputs like ``model.features``; gaps and junk become ``0.0``."""

    if isinstance(inputs, Mapping):
        return [coerce_number(inputs.get(name)) for name in model.features]
    values = list(inputs)
    return [
        coerce_number(values[index]) if index < len(values) else 0.0
        for index in range(len(model.features))
    ]


def predict(model: Optional[FittedModel], inputs: InputVector) -> Prediction:
    if model is None:
        raise ModelNotTrainedError()
    raw = align_inputs(model, inputs)
    standardized = model.standardize(np.asarray(raw, dtype=float))
    estimate = float(
        model.target_stats.destandardize(
            float(np.dot(np.asarray(model.weights, dtype=float), standardized))
        )
    )
    deviation = deviation_percent(estimate, model.target_stats.mean)
    return Prediction(
        value=estimate,
        deviation_percent=deviation,
        segment=market_segment(deviation),
        confidence=model.confidence,
        feature_count=len(model.features),
        target=model.target,
        features=list(model.features),
        inputs=raw,
    )


__all__ = [
    "InputVector",
    "Prediction",
    "SEGMENT_HIGH",
    "SEGMENT_LOW",
    "SEGMENT_MID",
    "align_inputs",
    "deviation_percent",
    "market_segment",
    "predict",
]
