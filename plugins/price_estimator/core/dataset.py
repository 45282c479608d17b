"""Turn parsed rows into the numeric frame the fitter consumes."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from .errors import InsufficientDataError, InsufficientFeaturesError, NoNumericColumnsError

MIN_CLEAN_ROWS = 5
TARGET_HINTS = ("price", "target")

RawRow = Mapping[str, Any]


class CellKind(enum.Enum):
    ABSENT = "absent"
    NUMERIC = "numeric"
    TEXT = "text"


@dataclass(frozen=True, slots=True)
class Cell:
    kind: CellKind
    number: Optional[float] = None
    text: Optional[str] = None


_ABSENT = Cell(CellKind.ABSENT)


def read_cell(value: object) -> Cell:
    """Classify a raw cell.

    Missing values (``None``, NaN, blank strings) are absent. Booleans are
    treated as text so ``True`` never becomes ``1.0``. Strings count as
    numeric only when the whole stripped string parses to a finite float.
    """

    if value is None:
        return _ABSENT
    if isinstance(value, (bool, np.bool_)):
        return Cell(CellKind.TEXT, text=str(value))
    if isinstance(value, (int, float, np.integer, np.floating)):
        number = float(value)
        if math.isnan(number):
            return _ABSENT
        if not math.isfinite(number):
            return Cell(CellKind.TEXT, text=str(value))
        return Cell(CellKind.NUMERIC, number=number)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return _ABSENT
        try:
            number = float(stripped)
        except ValueError:
            return Cell(CellKind.TEXT, text=value)
        if not math.isfinite(number):
            return Cell(CellKind.TEXT, text=value)
        return Cell(CellKind.NUMERIC, number=number)
    return Cell(CellKind.TEXT, text=str(value))


def coerce_number(value: object, default: float = 0.0) -> float:
    cell = read_cell(value)
    if cell.kind is CellKind.NUMERIC:
        return float(cell.number)
    return default


def header_set(rows: Iterable[RawRow]) -> List[str]:
    """Collect column names in first-seen order."""

    seen: dict[str, None] = {}
    for row in rows:
        for key in row.keys():
            seen.setdefault(str(key), None)
    return list(seen)


def detect_numeric_columns(rows: Sequence[RawRow], headers: Sequence[str]) -> List[str]:
    """A column is numeric when at least one row holds a finite number in it."""

    return [
        header
        for header in headers
        if any(read_cell(row.get(header)).kind is CellKind.NUMERIC for row in rows)
    ]


def select_target(numeric_columns: Sequence[str]) -> str:
    if not numeric_columns:
        raise NoNumericColumnsError()
    for column in numeric_columns:
        lowered = column.lower()
        if any(hint in lowered for hint in TARGET_HINTS):
            return column
    return numeric_columns[-1]


def select_features(numeric_columns: Sequence[str], target: str) -> List[str]:
    features = [column for column in numeric_columns if column != target]
    if not features:
        raise InsufficientFeaturesError()
    return features


def clean_rows(rows: Sequence[RawRow], numeric_columns: Sequence[str]) -> pd.DataFrame:
    """Coerce every numeric cell (failures become ``0.0``) and drop all-zero rows."""

    columns = list(numeric_columns)
    records = [[coerce_number(row.get(column)) for column in columns] for row in rows]
    frame = pd.DataFrame(records, columns=columns, dtype=float)
    if frame.empty:
        return frame
    keep = (frame != 0).any(axis=1)
    return frame.loc[keep].reset_index(drop=True)


@dataclass(frozen=True)
class PreparedDataset:
    numeric_columns: List[str]
    target: str
    features: List[str]
    clean: pd.DataFrame

    @property
    def X(self) -> np.ndarray:
        return self.clean[self.features].to_numpy(dtype=float)

    @property
    def y(self) -> np.ndarray:
        return self.clean[self.target].to_numpy(dtype=float)

    @property
    def n_rows(self) -> int:
        return int(len(self.clean))


def prepare_dataset(
    rows: Sequence[RawRow],
    headers: Optional[Sequence[str]] = None,
    *,
    min_rows: int = MIN_CLEAN_ROWS,
) -> PreparedDataset:
    rows = list(rows)
    if headers is None:
        headers = header_set(rows)
    numeric_columns = detect_numeric_columns(rows, headers)
    if not numeric_columns:
        raise NoNumericColumnsError()
    target = select_target(numeric_columns)
    features = select_features(numeric_columns, target)
    clean = clean_rows(rows, numeric_columns)
    if len(clean) < min_rows:
        raise InsufficientDataError(found=int(len(clean)), required=min_rows)
    return PreparedDataset(
        numeric_columns=numeric_columns,
        target=target,
        features=features,
        clean=clean,
    )


__all__ = [
    "Cell",
    "CellKind",
    "MIN_CLEAN_ROWS",
    "PreparedDataset",
    "RawRow",
    "TARGET_HINTS",
    "clean_rows",
    "coerce_number",
    "detect_numeric_columns",
    "header_set",
    "prepare_dataset",
    "read_cell",
    "select_features",
    "select_target",
]
