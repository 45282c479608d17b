"""Standardized response helpers."""

from __future__ import annotations

from io import BytesIO
from typing import Any, Mapping

from flask import Response, jsonify, send_file

from .errors import AppError


def ok(data: Any, *, status: int = 200) -> Response:
    """Return a success envelope."""

    payload = {"success": True, "data": data}
    response = jsonify(payload)
    response.status_code = status
    return response


def fail(error: AppError | Mapping[str, Any], *, status: int | None = None) -> Response:
    """Return a standardized failure envelope."""

    if isinstance(error, AppError):
        payload = {"success": False, "error": error.to_dict()}
        response = jsonify(payload)
        response.status_code = status or error.status_code
        return response

    payload = {"success": False, "error": dict(error)}
    response = jsonify(payload)
    response.status_code = status or 400
    return response


def csv_attachment(data: bytes, filename: str) -> Response:
    """Return CSV bytes as a download."""

    buffer = BytesIO(data)
    buffer.seek(0)
    return send_file(
        buffer,
        mimetype="text/csv",
        as_attachment=True,
        download_name=filename,
        max_age=0,
    )


__all__ = ["ok", "fail", "csv_attachment"]
