import pytest

from plugins.price_estimator.core import IngestionError, from_records, parse_csv, prepare_dataset


def test_parse_csv_keeps_header_order_and_types():
    data = b"sqft,city,price\n850,Leeds,150000\n1200,York,210000\n"
    dataset = parse_csv(data)
    assert dataset.headers == ["sqft", "city", "price"]
    assert dataset.rows[0] == {"sqft": 850, "city": "Leeds", "price": 150000}


def test_parse_csv_drops_rows_without_values():
    data = b"x,price\n1,10\n,\n\n2,20\n"
    dataset = parse_csv(data)
    assert len(dataset.rows) == 2
    assert dataset.rows[1]["x"] == 2.0


def test_parse_csv_maps_missing_cells_to_none():
    dataset = parse_csv(b"x,label\n1,\n2,b\n")
    assert dataset.rows[0]["label"] is None


def test_parse_csv_rejects_empty_input():
    with pytest.raises(IngestionError):
        parse_csv(b"")


def test_from_records_collects_headers():
    dataset = from_records([{"a": 1}, {"b": 2, "a": None}, {"a": None, "b": None}])
    assert dataset.headers == ["a", "b"]
    assert len(dataset.rows) == 2


def test_parsed_csv_feeds_preparation():
    lines = ["rooms,notes,price"] + [f"{n},ok,{n * 1000}" for n in range(1, 7)]
    dataset = parse_csv("\n".join(lines).encode())
    prepared = prepare_dataset(dataset.rows, dataset.headers)
    assert prepared.features == ["rooms"]
    assert prepared.target == "price"
    assert prepared.n_rows == 6
