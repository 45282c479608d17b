"""Validation primitives for plugin APIs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, TypeVar

import pydantic
from pydantic import BaseModel
from werkzeug.datastructures import FileStorage

CSV_MIMETYPES = frozenset({"text/csv", "application/vnd.ms-excel"})
_DELIMITERS = (",", ";", "\t")


class ValidationError(ValueError):
    """Raised when validation fails."""

    def __init__(self, message: str, *, details: Any | None = None):
        super().__init__(message)
        self.details = details


class SchemaModel(BaseModel):
    """Strict base model for request validation."""

    model_config = pydantic.ConfigDict(extra="forbid", str_strip_whitespace=True)


TModel = TypeVar("TModel", bound=SchemaModel)


def parse_model(model: type[TModel], payload: Mapping[str, Any] | None) -> TModel:
    payload = payload or {}
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as exc:
        details = [
            {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
            for error in exc.errors()
        ]
        raise ValidationError("Invalid request payload", details=details) from exc


@dataclass(slots=True)
class FileLimit:
    max_files: int
    max_size: int

    @classmethod
    def from_settings(
        cls,
        settings: Mapping[str, Any] | None,
        *,
        default_max_files: int,
        default_max_mb: int,
    ) -> "FileLimit":
        max_files = default_max_files
        max_mb = default_max_mb

        if settings:
            try:
                max_files = int(settings.get("max_files", default_max_files))
            except (TypeError, ValueError):
                max_files = default_max_files

            try:
                max_mb = int(float(settings.get("max_mb", default_max_mb)))
            except (TypeError, ValueError):
                max_mb = default_max_mb

        max_files = max(max_files, 1)
        max_mb = max(max_mb, 1)
        return cls(max_files=max_files, max_size=max_mb * 1024 * 1024)


def enforce_limits(files: Iterable[FileStorage], limit: FileLimit) -> None:
    files = list(files)
    if not files:
        raise ValidationError("At least one file is required")
    if len(files) > limit.max_files:
        raise ValidationError("Too many files uploaded")
    for file in files:
        file.seek(0, 2)
        size = file.tell()
        file.seek(0)
        if size == 0:
            raise ValidationError("Uploaded file is empty")
        if size > limit.max_size:
            raise ValidationError("File exceeds allowed size")


def looks_like_csv(sample: bytes) -> bool:
    """Heuristic check that a byte sample is delimited text with a header line."""

    if not sample:
        return False
    try:
        text = sample.decode("utf-8")
    except UnicodeDecodeError:
        text = sample.decode("latin-1")
    if "\x00" in text:
        return False
    first_line = text.splitlines()[0] if text.splitlines() else ""
    # A single-column file has no delimiter but still needs a header and a row.
    return any(delim in first_line for delim in _DELIMITERS) or "\n" in text


def validate_mime(files: Iterable[FileStorage], allowed: set[str] | frozenset[str] = CSV_MIMETYPES) -> None:
    for file in files:
        stream = file.stream
        try:
            current = stream.tell()
        except (AttributeError, OSError):
            current = None

        try:
            stream.seek(0)
        except (AttributeError, OSError):
            pass

        sample = stream.read(1024)
        if isinstance(sample, str):  # pragma: no cover - defensive
            sample = sample.encode("utf-8", "ignore")

        if current is not None:
            stream.seek(current)
        else:
            try:
                stream.seek(0)
            except (AttributeError, OSError):
                pass

        if not (set(allowed) & CSV_MIMETYPES) or not looks_like_csv(sample or b""):
            raise ValidationError("Upload must be a CSV file")


__all__ = [
    "CSV_MIMETYPES",
    "ValidationError",
    "SchemaModel",
    "parse_model",
    "FileLimit",
    "enforce_limits",
    "looks_like_csv",
    "validate_mime",
]
