"""Command line interface for the Price Estimator plugin."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any

from .core import (
    EstimatorSession,
    InsufficientFeaturesError,
    PriceEstimatorError,
    detect_numeric_columns,
    parse_csv,
    select_features,
    select_target,
)


def _print(payload: dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2, sort_keys=True))


def _session(path: str) -> EstimatorSession:
    session = EstimatorSession()
    session.load(parse_csv(Path(path).read_bytes()))
    return session


def _parse_named_inputs(pairs: list[str]) -> dict[str, str]:
    inputs: dict[str, str] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name.strip():
            raise SystemExit(f"Invalid --input '{pair}', expected name=value")
        inputs[name.strip()] = value.strip()
    return inputs


def command_inspect(args: argparse.Namespace) -> None:
    dataset = parse_csv(Path(args.csv).read_bytes())
    numeric = detect_numeric_columns(dataset.rows, dataset.headers)
    payload: dict[str, Any] = {
        "rows": len(dataset.rows),
        "headers": dataset.headers,
        "numeric_columns": numeric,
    }
    if numeric:
        target = select_target(numeric)
        payload["target"] = target
        try:
            payload["features"] = select_features(numeric, target)
        except InsufficientFeaturesError:
            payload["features"] = []
    _print(payload)


def command_train(args: argparse.Namespace) -> None:
    outcome = _session(args.csv).train()
    _print(outcome.to_dict())


def command_predict(args: argparse.Namespace) -> None:
    session = _session(args.csv)
    outcome = session.train()
    inputs: Any = _parse_named_inputs(args.inputs) if args.inputs else list(args.values or [])
    prediction = session.predict(inputs)
    _print(
        {
            "metrics": outcome.evaluation.metrics(),
            "prediction": prediction.to_dict(),
        }
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Price Estimator CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    inspect_parser = subparsers.add_parser("inspect", help="Show detected target and feature columns")
    inspect_parser.add_argument("--csv", required=True, help="Path to a CSV file")
    inspect_parser.set_defaults(func=command_inspect)

    train_parser = subparsers.add_parser("train", help="Fit a model and print its metrics")
    train_parser.add_argument("--csv", required=True, help="Path to a CSV file")
    train_parser.set_defaults(func=command_train)

    predict_parser = subparsers.add_parser("predict", help="Fit a model and estimate one input")
    predict_parser.add_argument("--csv", required=True, help="Path to a CSV file")
    group = predict_parser.add_mutually_exclusive_group(required=True)
    group.add_argument(
        "--value",
        dest="values",
        action="append",
        help="Feature value in model feature order (repeatable)",
    )
    group.add_argument(
        "--input",
        dest="inputs",
        action="append",
        help="Named feature value as name=value (repeatable)",
    )
    predict_parser.set_defaults(func=command_predict)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        args.func(args)
    except PriceEstimatorError as exc:
        raise SystemExit(f"error: {exc}") from exc


if __name__ == "__main__":
    main()
