from app import create_app


def test_home_lists_plugins(tmp_path):
    app = create_app("TestingConfig", config_path=tmp_path / "missing.yml")
    client = app.test_client()
    response = client.get("/")
    assert response.status_code == 200
    payload = response.get_json()
    assert payload["success"] is True
    plugins = payload["data"]["plugins"]
    titles = [item["title"] for item in plugins]
    assert "Price Estimator" in titles
    entry = next(item for item in plugins if item["title"] == "Price Estimator")
    assert entry["href"] == "/api/price_estimator/"
    assert response.headers.get("Content-Security-Policy")


def test_unknown_route_uses_json_envelope(tmp_path):
    app = create_app("TestingConfig", config_path=tmp_path / "missing.yml")
    response = app.test_client().get("/no/such/page")
    assert response.status_code == 404
    assert response.get_json()["success"] is False


def test_unknown_config_name_is_rejected():
    try:
        create_app("NoSuchConfig")
    except ValueError as exc:
        assert "NoSuchConfig" in str(exc)
    else:  # pragma: no cover
        raise AssertionError("expected ValueError")
