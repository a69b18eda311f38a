import re
import runpy
import sys
import time

from fastapi.testclient import TestClient

from conftest import SequenceRandom, TickingClock
from smart_toilets.config import Settings
from smart_toilets.main import create_app


# ── GET / and /health ───────────────────────────────


def test_root_lists_endpoints(client):
    resp = client.get("/")
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "NHAI Smart Toilet Management System API"
    assert body["version"] == "1.0"
    assert "GET /api/facility/:id" in body["endpoints"]
    assert "POST /api/analyze-image" in body["endpoints"]


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


# ── GET /api/facilities ─────────────────────────────


def test_list_facilities(client):
    resp = client.get("/api/facilities")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["count"] == len(body["data"]) == 20
    assert [f["id"] for f in body["data"]] == [f"NH{i}" for i in range(1, 21)]


def test_facility_json_uses_camel_case(client):
    facility = client.get("/api/facilities").json()["data"][0]
    assert set(facility) == {
        "id", "name", "location", "coordinates", "status", "sensors",
        "alerts", "userRating", "dailyUsers", "lastUpdated",
    }
    assert set(facility["sensors"]) == {
        "airQuality", "usage", "waterLevel", "cleanlinessScore",
        "temperature", "lastCleaned",
    }
    assert set(facility["coordinates"]) == {"lat", "lng"}
    assert isinstance(facility["userRating"], str)


# ── GET /api/facility/{id} ──────────────────────────


def test_get_facility_refreshes_on_every_read(client):
    first = client.get("/api/facility/NH5")
    second = client.get("/api/facility/NH5")

    assert first.status_code == second.status_code == 200
    assert first.json()["success"] is True
    assert first.json()["data"]["id"] == second.json()["data"]["id"] == "NH5"
    assert first.json()["data"]["lastUpdated"] != second.json()["data"]["lastUpdated"]

    score = second.json()["data"]["sensors"]["cleanlinessScore"]
    assert 1 <= score <= 10
    assert 0 <= second.json()["data"]["sensors"]["usage"] <= 499


def test_refresh_is_visible_in_listing(client):
    refreshed = client.get("/api/facility/NH3").json()["data"]
    listed = client.get("/api/facilities").json()["data"][2]
    assert listed == refreshed


def test_exact_refresh_with_injected_randomness():
    app = create_app(
        settings=Settings(ANALYSIS_DELAY_SECONDS=0),
        rng=SequenceRandom([0.5]),
        clock=TickingClock(),
    )
    with TestClient(app) as client:
        data = client.get("/api/facility/NH1").json()["data"]
    assert data["sensors"]["cleanlinessScore"] == 6
    assert data["sensors"]["usage"] == 250


def test_unknown_facility_is_404(client):
    before = client.get("/api/facilities").json()

    resp = client.get("/api/facility/NH999")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Facility not found"}

    assert client.get("/api/facilities").json() == before


# ── POST /api/feedback ──────────────────────────────


def test_feedback_echoes_fields(client):
    resp = client.post(
        "/api/feedback",
        json={"facilityId": "NH1", "rating": 5, "comment": "clean"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Feedback submitted successfully"
    assert set(body["data"]) == {"facilityId", "rating", "comment", "timestamp"}
    assert body["data"]["facilityId"] == "NH1"
    assert body["data"]["rating"] == 5
    assert body["data"]["comment"] == "clean"


def test_feedback_is_not_validated(client):
    resp = client.post(
        "/api/feedback",
        json={"facilityId": "NH999", "rating": "great", "extra": True},
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["facilityId"] == "NH999"
    assert data["rating"] == "great"
    assert "comment" not in data
    assert "extra" not in data


def test_feedback_without_body(client):
    resp = client.post("/api/feedback")
    assert resp.status_code == 200
    assert set(resp.json()["data"]) == {"timestamp"}


# ── GET /api/analytics ──────────────────────────────


def test_analytics(client):
    resp = client.get("/api/analytics")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True

    data = body["data"]
    assert data["totalFacilities"] == 20
    assert 0 <= data["activeFacilities"] <= 20
    assert re.fullmatch(r"\d+\.\d", data["averageRating"])
    assert 20 * 100 <= data["totalDailyUsers"] <= 20 * 1099
    assert data["alertCount"] % 2 == 0
    assert data["costSavings"] == {"monthly": "₹4,32,000", "annual": "₹51,84,000"}
    assert data["maintenanceStats"] == {"scheduled": 15, "completed": 12, "pending": 3}


def test_analytics_matches_listing(client):
    facilities = client.get("/api/facilities").json()["data"]
    data = client.get("/api/analytics").json()["data"]

    assert data["activeFacilities"] == sum(f["status"] == "active" for f in facilities)
    assert data["totalDailyUsers"] == sum(f["dailyUsers"] for f in facilities)
    assert data["alertCount"] == sum(len(f["alerts"]) for f in facilities)


# ── POST /api/analyze-image ─────────────────────────


def test_analyze_image(client):
    for _ in range(10):
        resp = client.post("/api/analyze-image", content=b"\x89PNG not really")
        assert resp.status_code == 200
        data = resp.json()["data"]
        score = data["cleanlinessScore"]
        assert isinstance(score, int) and 1 <= score <= 10
        expected = "Immediate cleaning required" if score < 5 else "Maintain current standards"
        assert data["recommendation"] == expected
        assert data["confidence"] == "94%"
        assert data["analysisTime"] == "2.3 seconds"


def test_analyze_image_waits_for_configured_delay():
    app = create_app(settings=Settings(ANALYSIS_DELAY_SECONDS=0.3))
    with TestClient(app) as client:
        started = time.monotonic()
        resp = client.post("/api/analyze-image")
        elapsed = time.monotonic() - started
    assert resp.status_code == 200
    assert elapsed >= 0.3


def test_default_analysis_delay_is_two_seconds():
    assert Settings.model_fields["ANALYSIS_DELAY_SECONDS"].default == 2.0


# ── Framework behaviour ─────────────────────────────


def test_cors_allows_any_origin(client):
    resp = client.get("/api/facilities", headers={"Origin": "https://example.org"})
    assert resp.headers["access-control-allow-origin"] in ("*", "https://example.org")


def test_unknown_route_uses_error_envelope(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.json()["success"] is False


def test_unparseable_feedback_uses_error_envelope(client):
    resp = client.post(
        "/api/feedback",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Invalid request body"}


def test_module_entry_point_runs_server(monkeypatch):
    calls = []
    monkeypatch.setattr("smart_toilets.main.run", lambda: calls.append(True))
    monkeypatch.delitem(sys.modules, "smart_toilets.__main__", raising=False)

    runpy.run_module("smart_toilets", run_name="__main__")

    assert calls == [True]
