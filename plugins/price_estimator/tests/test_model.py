import math

import numpy as np
import pytest

from plugins.price_estimator.core import (
    PerFeatureRegressor,
    confidence_for,
    dataset_insights,
    evaluate_model,
    feature_weights,
    fit_model,
    predict_matrix,
    prepare_dataset,
)


def test_fit_recovers_linear_relation(linear_rows):
    prepared = prepare_dataset(linear_rows)
    model = fit_model(prepared)
    assert model.features == ("x",)
    assert model.target == "price"
    assert model.weights == pytest.approx((1.0,))
    assert model.n == 5
    assert model.feature_stats[0].mean == pytest.approx(3.0)
    assert model.feature_stats[0].std == pytest.approx(math.sqrt(2))
    assert model.target_stats.mean == pytest.approx(30.0)


def test_weights_align_with_features(housing_rows):
    prepared = prepare_dataset(housing_rows, ["sqft", "city", "price", "year"])
    model = fit_model(prepared)
    assert len(model.weights) == len(model.features) == 2
    assert len(model.feature_stats) == 2


def test_weights_ignore_correlation_between_features():
    # Two copies of the same signal each get the full single-feature slope.
    x = np.arange(1, 8, dtype=float)
    X = np.column_stack([x, 2 * x])
    regressor = PerFeatureRegressor().fit(X, 5 * x + 3)
    assert regressor.coef_ == pytest.approx([1.0, 1.0])


def test_constant_feature_gets_zero_weight():
    rows = [{"x": value, "flat": 7, "price": 3 * value} for value in range(1, 7)]
    model = fit_model(prepare_dataset(rows))
    weights = dict(zip(model.features, model.weights))
    assert weights["flat"] == 0.0
    assert weights["x"] == pytest.approx(1.0)


def test_regressor_predict_matches_manual_reconstruction(linear_rows):
    prepared = prepare_dataset(linear_rows)
    regressor = PerFeatureRegressor().fit(prepared.X, prepared.y)
    assert regressor.predict([[6.0]]) == pytest.approx([60.0])
    assert regressor.predict(np.array([7.0])) == pytest.approx([70.0])


def test_regressor_rejects_mismatched_shapes():
    with pytest.raises(ValueError):
        PerFeatureRegressor().fit(np.ones((3, 2)), np.ones(4))


@pytest.mark.parametrize(
    "n, expected",
    [(0, 0.5), (5, 0.505), (200, 0.7), (449, 0.949), (2000, 0.95)],
)
def test_confidence_for_sample_sizes(n, expected):
    assert confidence_for(n) == pytest.approx(expected)


def test_confidence_is_monotonic_and_clamped():
    values = [confidence_for(n) for n in range(0, 1500, 7)]
    assert values == sorted(values)
    assert all(0.5 <= value <= 0.95 for value in values)


def test_model_confidence_is_set_at_fit_time(linear_rows):
    model = fit_model(prepare_dataset(linear_rows))
    assert model.confidence == pytest.approx(0.505)


def test_evaluate_model_on_perfect_line(linear_rows):
    prepared = prepare_dataset(linear_rows)
    model = fit_model(prepared)
    evaluation = evaluate_model(model, prepared.X, prepared.y)
    assert evaluation.r2 == pytest.approx(1.0)
    assert evaluation.rmse == pytest.approx(0.0, abs=1e-9)
    assert evaluation.n == 5
    assert evaluation.predictions == pytest.approx([10, 20, 30, 40, 50])
    assert set(evaluation.metrics()) == {"r2", "rmse", "n"}


def test_evaluate_model_constant_target_is_perfect():
    rows = [{"x": value, "price": 250} for value in range(1, 7)]
    prepared = prepare_dataset(rows)
    model = fit_model(prepared)
    evaluation = evaluate_model(model, prepared.X, prepared.y)
    assert model.weights == (0.0,)
    assert evaluation.r2 == 1.0
    assert evaluation.rmse == 0.0


def test_predict_matrix_checks_feature_count(linear_rows):
    model = fit_model(prepare_dataset(linear_rows))
    with pytest.raises(ValueError):
        predict_matrix(model, np.ones((2, 3)))


def test_feature_weights_sorted_by_magnitude():
    rows = [
        {"a": value, "b": (value * 7) % 5, "price": 2 * value}
        for value in range(1, 11)
    ]
    model = fit_model(prepare_dataset(rows))
    ranked = feature_weights(model)
    assert [name for name, _ in ranked][0] == "a"
    assert abs(ranked[0][1]) >= abs(ranked[1][1])


def test_dataset_insights_reports_target_and_leading_features(housing_rows):
    prepared = prepare_dataset(housing_rows, ["sqft", "city", "price", "year"])
    insights = dataset_insights(prepared)
    assert insights["target"]["name"] == "price"
    assert insights["target"]["mean"] == pytest.approx(np.mean([150000, 210000, 260000, 330000, 170000, 295000]))
    assert [item["name"] for item in insights["features"]] == ["sqft", "year"]
    assert insights["rows"] == 6


def test_model_summary_is_serialisable(linear_rows):
    summary = fit_model(prepare_dataset(linear_rows)).summary()
    assert summary["features"] == ["x"]
    assert summary["weights"]["x"] == pytest.approx(1.0)
    assert summary["target_stats"]["mean"] == pytest.approx(30.0)
