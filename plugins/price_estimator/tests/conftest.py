import pytest

from plugins.price_estimator.core import RawDataset


@pytest.fixture
def linear_rows() -> list[dict[str, object]]:
    return [{"x": value, "price": value * 10} for value in range(1, 6)]


@pytest.fixture
def linear_dataset(linear_rows) -> RawDataset:
    return RawDataset(rows=linear_rows, headers=["x", "price"])


@pytest.fixture
def housing_rows() -> list[dict[str, object]]:
    return [
        {"sqft": 850, "city": "Leeds", "price": 150000, "year": 1990},
        {"sqft": 1200, "city": "York", "price": 210000, "year": 2001},
        {"sqft": 1500, "city": "Leeds", "price": 260000, "year": 2010},
        {"sqft": 2100, "city": "Hull", "price": 330000, "year": 2015},
        {"sqft": 950, "city": "York", "price": 170000, "year": 1985},
        {"sqft": "", "city": "", "price": None, "year": None},
        {"sqft": 1800, "city": "Hull", "price": 295000, "year": 2020},
    ]
