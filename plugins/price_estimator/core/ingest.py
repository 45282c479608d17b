"""CSV ingestion into raw rows and an ordered header set."""

from __future__ import annotations

from dataclasses import dataclass, field
from io import BytesIO
from typing import Any, Dict, List

import pandas as pd

from .dataset import CellKind, read_cell
from .errors import IngestionError


@dataclass
class RawDataset:
    rows: List[Dict[str, Any]] = field(default_factory=list)
    headers: List[str] = field(default_factory=list)

    def preview(self, head: int = 5) -> List[Dict[str, Any]]:
        return [dict(row) for row in self.rows[:head]]


def _to_python(value: object) -> object:
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    return value.item() if hasattr(value, "item") else value


def from_records(records: List[Dict[str, Any]]) -> RawDataset:
    """Build a dataset from already parsed mappings, dropping rows with no values."""

    headers: Dict[str, None] = {}
    rows: List[Dict[str, Any]] = []
    for record in records:
        for key in record:
            headers.setdefault(str(key), None)
        row = {str(key): _to_python(value) for key, value in record.items()}
        if any(read_cell(value).kind is not CellKind.ABSENT for value in row.values()):
            rows.append(row)
    return RawDataset(rows=rows, headers=list(headers))


def parse_csv(data: bytes) -> RawDataset:
    try:
        frame = pd.read_csv(BytesIO(data), skip_blank_lines=True)
    except Exception as exc:  # pragma: no cover - pandas error messages vary
        raise IngestionError("Invalid CSV data") from exc
    if frame.columns.empty:
        raise IngestionError("CSV file must contain a header row")
    headers = [str(column) for column in frame.columns]
    frame.columns = headers
    dataset = from_records(frame.to_dict(orient="records"))
    dataset.headers = headers
    return dataset


__all__ = ["RawDataset", "from_records", "parse_csv"]
