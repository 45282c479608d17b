"""Error kinds raised by the price estimation pipeline."""

from __future__ import annotations


class PriceEstimatorError(ValueError):
    """Raised when the dataset or the session state does not allow an operation."""


class IngestionError(PriceEstimatorError):
    """Raised when uploaded data cannot be parsed into rows."""


class NoDatasetError(PriceEstimatorError):
    """Raised when training is requested before any rows were uploaded."""

    def __init__(self, message: str = "Upload a CSV file before training") -> None:
        super().__init__(message)


class NoNumericColumnsError(PriceEstimatorError):
    """Raised when no column holds a single parseable number."""

    def __init__(self, message: str = "No numeric columns found") -> None:
        super().__init__(message)


class InsufficientFeaturesError(PriceEstimatorError):
    """Raised when nothing is left to train on once the target is removed."""

    def __init__(self, message: str = "Not enough features for training") -> None:
        super().__init__(message)


class InsufficientDataError(PriceEstimatorError):
    """Raised when fewer clean rows than required survive coercion."""

    def __init__(self, found: int, required: int) -> None:
        super().__init__(
            f"Not enough valid data points (need >= {required}, found {found})"
        )
        self.found = found
        self.required = required


class DegenerateTargetError(PriceEstimatorError):
    """Raised when the target has zero variance but the fit still has residuals."""

    def __init__(self, message: str = "Target column has no variance") -> None:
        super().__init__(message)


class ModelNotTrainedError(PriceEstimatorError):
    """Raised when inference or export is requested before a model exists."""

    def __init__(self, message: str = "Train the model before running predictions") -> None:
        super().__init__(message)


class NoPredictionError(PriceEstimatorError):
    """Raised when a report is requested before any prediction was made."""

    def __init__(self, message: str = "Make a prediction before exporting a report") -> None:
        super().__init__(message)


__all__ = [
    "DegenerateTargetError",
    "IngestionError",
    "InsufficientDataError",
    "InsufficientFeaturesError",
    "ModelNotTrainedError",
    "NoDatasetError",
    "NoNumericColumnsError",
    "NoPredictionError",
    "PriceEstimatorError",
]
