"""Smoke tests for the Price Estimator CLI."""

from __future__ import annotations

import json
from contextlib import redirect_stdout
from io import StringIO

import pytest

from plugins.price_estimator import cli


def _run_cli(args: list[str]) -> dict[str, object]:
    buffer = StringIO()
    with redirect_stdout(buffer):
        cli.main(args)
    output = buffer.getvalue().strip()
    return json.loads(output)


@pytest.fixture
def housing_csv(tmp_path):
    path = tmp_path / "housing.csv"
    lines = ["sqft,rooms,city,price"]
    for index in range(1, 9):
        lines.append(f"{index * 100},{index % 3 + 1},Town{index},{index * 1000}")
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def test_cli_inspect_detects_columns(housing_csv):
    result = _run_cli(["inspect", "--csv", str(housing_csv)])
    assert result["rows"] == 8
    assert result["numeric_columns"] == ["sqft", "rooms", "price"]
    assert result["target"] == "price"
    assert result["features"] == ["sqft", "rooms"]


def test_cli_train_and_predict(housing_csv):
    trained = _run_cli(["train", "--csv", str(housing_csv)])
    assert trained["model"]["target"] == "price"
    assert trained["metrics"]["n"] == 8

    predicted = _run_cli(["predict", "--csv", str(housing_csv), "--input", "sqft=900", "--input", "rooms=2"])
    assert predicted["prediction"]["feature_count"] == 2
    assert predicted["prediction"]["segment"] in {"Budget", "Mid-Range", "Luxury"}


def test_cli_predict_single_feature(tmp_path):
    path = tmp_path / "linear.csv"
    path.write_text("x,price\n" + "\n".join(f"{n},{n * 10}" for n in range(1, 6)), encoding="utf-8")
    result = _run_cli(["predict", "--csv", str(path), "--value", "6"])
    assert result["prediction"]["predicted"] == pytest.approx(60.0)
    assert result["prediction"]["segment"] == "Luxury"
    assert result["metrics"]["r2"] == pytest.approx(1.0)


def test_cli_reports_pipeline_errors(tmp_path):
    path = tmp_path / "short.csv"
    path.write_text("x,price\n1,10\n2,20\n", encoding="utf-8")
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["train", "--csv", str(path)])
    assert "need >= 5" in str(excinfo.value)
