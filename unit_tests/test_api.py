# unit_tests/test_api.py
"""
Unit Tests for the FastAPI Backend
==================================
Run with: python -m pytest unit_tests/test_api.py -v

Storage dependencies are overridden with temporary files.
"""

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from api.app import app, get_session_state, get_store
from memory.record_store import JsonRecordStore
from memory.session_manager import AppSessionState


@pytest.fixture
def client(tmp_path):
    store = JsonRecordStore(str(tmp_path / "records.json"))
    state = AppSessionState(str(tmp_path / "session_state.json"))
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_session_state] = lambda: state
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    body = client.get("/api/v1/health").json()

    assert body["status"] == "online"
    assert body["tiers"] == {"local": True, "gemini": False, "groq": False}


# =============================================================================
# AI parsing endpoints
# =============================================================================
def test_parse_food(client):
    print("\n" + "=" * 60)
    print("TEST 1: POST /api/ai/parse-food")
    print("=" * 60)

    response = client.post("/api/ai/parse-food", json={"text": "2 rotis, dal fry, glass of milk"})
    body = response.json()
    print(f"Body: {body}")

    assert response.status_code == 200
    assert body["source"] == "local"
    assert body["confidence"] == "medium"
    assert body["data"]["total_calories"] == 539
    assert [item["name"] for item in body["data"]["items"]] == ["roti", "dal fry", "milk"]
    print("✅ Local parse served over HTTP")


def test_parse_workout(client):
    text = "Monday: Push\n- Bench Press 4x8\n\nThursday: Pull\n- Barbell Row 4x8"
    body = client.post("/api/ai/parse-workout", json={"text": text}).json()

    assert body["confidence"] == "high"
    assert [day["day_name"] for day in body["data"]["days"]] == ["Monday", "Thursday"]
    assert body["data"]["days"][1]["exercises"][0]["muscle_group"] == "back"


@pytest.mark.parametrize("path", ["/api/ai/parse-food", "/api/ai/parse-workout"])
@pytest.mark.parametrize("payload", [{"text": ""}, {"text": "   "}, {}])
def test_parse_rejects_empty_text(client, path, payload):
    response = client.post(path, json=payload)
    assert response.status_code == 400


def test_parse_unparseable_text_falls_back_to_local(client):
    body = client.post("/api/ai/parse-food", json={"text": "qwerty zxcv"}).json()

    assert body["source"] == "local"
    assert body["confidence"] == "low"
    assert body["data"]["items"] == []


# =============================================================================
# Foods, nutrition & programs
# =============================================================================
def test_food_search(client):
    foods = client.get("/api/v1/foods/search", params={"q": "dal"}).json()["foods"]

    assert foods
    assert all("dal" in food["key"] for food in foods)


def test_nutrition_log_and_summary(client):
    print("\n" + "=" * 60)
    print("TEST 2: Nutrition log + summary")
    print("=" * 60)

    logged = client.post("/api/v1/nutrition/log", json={
        "meal_description": "2 rotis, dal fry, glass of milk",
        "meal_type": "lunch",
        "date": "2025-01-06",
    })
    assert logged.status_code == 200
    assert logged.json()["totals"]["calories"] == 539

    summary = client.get("/api/v1/nutrition/summary", params={"date": "2025-01-06"}).json()
    assert summary["totals"]["calories"] == 539
    assert summary["remaining_calories"] == 2000 - 539

    bad = client.post("/api/v1/nutrition/log", json={"meal_description": ""})
    assert bad.status_code == 400
    print("✅ Logged, summarised, rejected empty")


def test_program_import_detail_activate(client):
    imported = client.post("/api/v1/program/import", json={
        "text": "Day A: Upper\nBench Press 3x5\nBarbell Row 3x5",
        "name": "Starter",
    }).json()
    program_id = imported["program_id"]

    detail = client.get(f"/api/v1/program/{program_id}").json()
    assert detail["name"] == "Starter"
    assert len(detail["days"][0]["exercises"]) == 2

    activated = client.post(f"/api/v1/program/{program_id}/activate")
    assert activated.status_code == 200
    assert client.get(f"/api/v1/program/{program_id}").json()["is_active"] is True

    assert client.get("/api/v1/program/missing").status_code == 404
    assert client.post("/api/v1/program/missing/activate").status_code == 404
    assert client.post("/api/v1/program/import", json={"text": "nothing"}).status_code == 400


# =============================================================================
# Calculators
# =============================================================================
def test_recovery_score_endpoint(client):
    body = client.post("/api/v1/recovery/score", json={
        "sleep_hours": 8, "sleep_quality": 5, "stress_level": 1,
        "mood": 5, "soreness": 1, "energy_level": 5,
    }).json()
    assert body == {"score": 100, "label": "Excellent"}

    invalid = client.post("/api/v1/recovery/score", json={
        "sleep_hours": 8, "sleep_quality": 6, "stress_level": 1,
        "mood": 5, "soreness": 1, "energy_level": 5,
    })
    assert invalid.status_code == 422


def test_one_rep_max_endpoint(client):
    body = client.post("/api/v1/strength/one-rep-max", json={"weight": 100, "reps": 5}).json()
    assert body["estimated_1rm"] == 116.7


def test_overload_endpoint(client):
    body = client.post("/api/v1/progress/overload", json={
        "recent_sets": [{"weight": 60, "reps": 12, "target_reps_min": 8, "target_reps_max": 12, "rpe": 8}],
        "weekly_strength_trend": [80, 81, 82],
    }).json()
    assert body["type"] == "increase_weight"


def test_alerts_and_plateau_endpoints(client):
    assert client.get("/api/v1/progress/alerts").json() == {"alerts": []}

    weights = [{"date": f"2025-01-{day:02d}", "weight_kg": 80.0} for day in range(1, 15)]
    body = client.post("/api/v1/body/plateau", json={"weights": weights}).json()
    assert body["detected"] is True


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
