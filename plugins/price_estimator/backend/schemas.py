"""Request schema definitions for the Price Estimator backend."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from common.validation import SchemaModel

# Booleans stay booleans so they zero-fill like any other non-numeric cell.
InputValue = bool | float | str | None


class SessionQuery(SchemaModel):
    session_id: str = Field(min_length=1)


class TrainRequest(SchemaModel):
    session_id: str = Field(min_length=1)
    wait: bool = False


class PredictRequest(SchemaModel):
    session_id: str = Field(min_length=1)
    inputs: list[InputValue] | dict[str, InputValue] = Field(default_factory=list)


class ReportQuery(SessionQuery):
    format: Literal["json", "csv"] = "json"


__all__ = ["PredictRequest", "ReportQuery", "SessionQuery", "TrainRequest"]
