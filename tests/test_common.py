import io
import threading

import pytest
from werkzeug.datastructures import FileStorage

from common.errors import AppError, InternalAppError, ValidationAppError, ensure_app_error
from common.tasks import DeferredRunner
from common.validation import (
    FileLimit,
    SchemaModel,
    ValidationError,
    enforce_limits,
    looks_like_csv,
    parse_model,
    validate_mime,
)


class _Payload(SchemaModel):
    name: str


def _file(data: bytes, filename: str = "data.csv") -> FileStorage:
    return FileStorage(stream=io.BytesIO(data), filename=filename, content_type="text/csv")


def test_parse_model_reports_locations():
    with pytest.raises(ValidationError) as excinfo:
        parse_model(_Payload, {"name": "a", "unexpected": 1})
    locations = [detail["loc"] for detail in excinfo.value.details]
    assert ["unexpected"] in locations


def test_parse_model_strips_whitespace():
    assert parse_model(_Payload, {"name": "  house  "}).name == "house"


def test_file_limit_from_settings_falls_back_on_junk():
    limit = FileLimit.from_settings({"max_files": "many", "max_mb": 2}, default_max_files=1, default_max_mb=5)
    assert limit.max_files == 1
    assert limit.max_size == 2 * 1024 * 1024


def test_enforce_limits_rejects_empty_and_oversized():
    limit = FileLimit(max_files=1, max_size=4)
    with pytest.raises(ValidationError, match="empty"):
        enforce_limits([_file(b"")], limit)
    with pytest.raises(ValidationError, match="size"):
        enforce_limits([_file(b"a,b\n1,2\n")], limit)
    with pytest.raises(ValidationError, match="Too many"):
        enforce_limits([_file(b"a"), _file(b"b")], limit)


def test_csv_sniffing():
    assert looks_like_csv(b"a,b\n1,2\n")
    assert looks_like_csv(b"price\n10\n")
    assert not looks_like_csv(b"")
    assert not looks_like_csv(b"\x00\x01\x02")


def test_validate_mime_restores_stream_position():
    upload = _file(b"a;b\n1;2\n")
    validate_mime([upload])
    assert upload.stream.read() == b"a;b\n1;2\n"


def test_app_error_serialises_list_details():
    error = ValidationAppError(message="bad", details=[{"loc": ["x"], "msg": "missing"}])
    assert error.to_dict()["details"] == {"errors": [{"loc": ["x"], "msg": "missing"}]}
    assert str(error) == "bad"


def test_ensure_app_error_wraps_unknown_exceptions():
    wrapped = ensure_app_error(RuntimeError("boom"), fallback_code="test.internal")
    assert isinstance(wrapped, InternalAppError)
    original = AppError(message="kept")
    assert ensure_app_error(original, fallback_code="test.internal") is original


def test_deferred_runner_runs_in_submission_order():
    runner = DeferredRunner(0.01, name="test-runner")
    seen: list[int] = []
    lock = threading.Lock()

    def _record(value: int):
        def _inner() -> int:
            with lock:
                seen.append(value)
            return value

        return _inner

    futures = [runner.submit(_record(value)) for value in range(3)]
    assert [future.result(timeout=5) for future in futures] == [0, 1, 2]
    assert seen == [0, 1, 2]
    runner.shutdown()
