import pytest

from racesense.app import create_app


@pytest.fixture
def client():
    app = create_app()
    app.config["TESTING"] = True
    return app.test_client()


def test_sample_csv_download(client):
    response = client.get("/api/sample")
    assert response.status_code == 200
    assert response.mimetype == "text/csv"
    assert response.get_data(as_text=True).startswith("meta_time,ecu_time,lap")


def test_sample_info(client):
    info = client.get("/api/sample/info").get_json()
    assert info["laps"] == 35
    assert info["chassis_number"] == 7


def test_process_sample(client):
    response = client.post("/api/process", json={"sample": True})
    assert response.status_code == 200

    body = response.get_json()
    assert body["car_number"] == 42
    assert body["total_laps"] == 35
    assert len(body["laps"]) == 35
    assert "telemetry_points" not in body["laps"][0]
    assert body["tire_degradation"]
    assert body["health_report"]["lap_integrity"]["lap_detection_method"] == "telemetry"


def test_process_raw_csv_body(client, sample_csv):
    response = client.post("/api/process", data=sample_csv, content_type="text/csv")
    assert response.status_code == 200
    assert response.get_json()["chassis_number"] == 7


def test_empty_upload_is_rejected(client):
    response = client.post("/api/process", json={"csv": ""})
    assert response.status_code == 422
    assert "error" in response.get_json()


def test_recommendation(client):
    response = client.post(
        "/api/recommendation",
        json={"sample": True, "current_lap": 20, "total_laps": 35},
    )
    assert response.status_code == 200

    rec = response.get_json()
    assert rec["current_lap"] == 20
    assert rec["urgency"] in ("low", "medium", "high")
    assert 21 <= rec["recommended_lap"] <= 30
    assert rec["scenarios"]


@pytest.mark.parametrize("fields", [
    {"current_lap": "twenty"},
    {"total_laps": [35]},
    {"current_lap": 0},
    {"seed": "x"},
])
def test_unusable_recommendation_fields_are_rejected(client, fields):
    response = client.post("/api/recommendation", json={"sample": True, **fields})
    assert response.status_code == 422
    assert "error" in response.get_json()


def test_numeric_strings_are_accepted(client):
    response = client.post(
        "/api/recommendation",
        json={"sample": True, "current_lap": "20", "total_laps": "35"},
    )
    assert response.status_code == 200
    assert response.get_json()["current_lap"] == 20
