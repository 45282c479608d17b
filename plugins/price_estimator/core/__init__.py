"""Statistical core of the price estimator: preparation, fitting, evaluation, prediction."""

from .dataset import (
    Cell,
    CellKind,
    MIN_CLEAN_ROWS,
    PreparedDataset,
    clean_rows,
    coerce_number,
    detect_numeric_columns,
    header_set,
    prepare_dataset,
    read_cell,
    select_features,
    select_target,
)
from .errors import (
    DegenerateTargetError,
    IngestionError,
    InsufficientDataError,
    InsufficientFeaturesError,
    ModelNotTrainedError,
    NoDatasetError,
    NoNumericColumnsError,
    NoPredictionError,
    PriceEstimatorError,
)
from .evaluate import Evaluation, dataset_insights, evaluate_model, predict_matrix
from .ingest import RawDataset, from_records, parse_csv
from .model import FittedModel, PerFeatureRegressor, confidence_for, feature_weights, fit_model
from .predictor import Prediction, align_inputs, deviation_percent, market_segment, predict
from .session import EstimatorSession, PredictionRecord, TrainingOutcome, TrainingState
from .stats import ColumnStats, mean_std, r_squared, rmse

__all__ = [
    "Cell",
    "CellKind",
    "ColumnStats",
    "DegenerateTargetError",
    "EstimatorSession",
    "Evaluation",
    "FittedModel",
    "IngestionError",
    "InsufficientDataError",
    "InsufficientFeaturesError",
    "MIN_CLEAN_ROWS",
    "ModelNotTrainedError",
    "NoDatasetError",
    "NoNumericColumnsError",
    "NoPredictionError",
    "PerFeatureRegressor",
    "Prediction",
    "PredictionRecord",
    "PreparedDataset",
    "PriceEstimatorError",
    "RawDataset",
    "TrainingOutcome",
    "TrainingState",
    "align_inputs",
    "clean_rows",
    "coerce_number",
    "confidence_for",
    "dataset_insights",
    "detect_numeric_columns",
    "deviation_percent",
    "evaluate_model",
    "feature_weights",
    "fit_model",
    "from_records",
    "header_set",
    "market_segment",
    "mean_std",
    "parse_csv",
    "predict",
    "predict_matrix",
    "prepare_dataset",
    "r_squared",
    "read_cell",
    "rmse",
    "select_features",
    "select_target",
]
