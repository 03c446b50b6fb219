# unit_tests/test_agent_nutrition.py
"""
Unit Tests for Nutrition Agent
==============================
Run with: python -m pytest unit_tests/test_agent_nutrition.py -v
"""

import json
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from agents.nutrition_agent import MEAL_TABLE, get_daily_nutrition_summary, log_meal

DAY = "2025-01-06"


def test_log_meal_stores_one_row_per_item(store):
    print("\n" + "=" * 60)
    print("TEST 1: Log a meal")
    print("=" * 60)

    result = log_meal(store, "2 rotis, dal fry, glass of milk", "lunch", date=DAY)
    print(f"Result: {result['message']}")

    assert result["status"] == "success"
    assert result["source"] == "local"
    assert result["confidence"] == "medium"
    assert result["totals"]["calories"] == 539

    rows = store.select(MEAL_TABLE, date=DAY)
    assert [r["food_name"] for r in rows] == ["roti", "dal fry", "milk"]
    assert all(r["meal_type"] == "lunch" for r in rows)
    assert rows[0]["quantity_g"] == 60
    assert all("id" in r and "created_at" in r for r in rows)
    print("✅ 3 meal_entries rows stored")


def test_meal_type_guessed_when_missing(store):
    result = log_meal(store, "banana", date=DAY)
    assert result["meal_type"] in ("breakfast", "lunch", "snack", "dinner")


@pytest.mark.parametrize("description, meal_type", [
    ("", "lunch"),
    ("   ", "lunch"),
    (None, "lunch"),
    ("qwerty zxcv", "lunch"),
    ("banana", "brunch"),
])
def test_log_meal_errors(store, description, meal_type):
    result = log_meal(store, description, meal_type, date=DAY)

    assert result["status"] == "error"
    assert result["error_message"]
    assert store.select(MEAL_TABLE) == []


def test_log_meal_with_provider(store, stub_provider):
    reply = json.dumps({
        "items": [{"name": "Masala Dosa", "quantity_g": 180, "calories": 320,
                   "protein": 7, "carbs": 45, "fat": 12}],
        "total_calories": 320,
    })
    gemini = stub_provider("gemini", reply=reply)

    result = log_meal(store, "vada pav", "snack", date=DAY, providers=[gemini])

    assert result["status"] == "success"
    assert result["source"] == "gemini"
    assert store.select(MEAL_TABLE)[0]["food_name"] == "Masala Dosa"


def test_daily_summary(store):
    print("\n" + "=" * 60)
    print("TEST 2: Daily summary")
    print("=" * 60)

    log_meal(store, "2 rotis, dal fry, glass of milk", "lunch", date=DAY)
    log_meal(store, "banana", "snack", date=DAY)
    log_meal(store, "3 eggs", "breakfast", date="2025-01-07")

    summary = get_daily_nutrition_summary(store, date=DAY)
    print(f"Summary: {summary['summary']}")

    banana_cal = round(89 * 1.18)
    assert summary["status"] == "success"
    assert summary["totals"]["calories"] == 539 + banana_cal
    assert summary["meal_breakdown"] == {"lunch": 539, "snack": banana_cal}
    assert summary["progress"]["calories"] == round((539 + banana_cal) / 2000 * 100)
    assert summary["remaining_calories"] == 2000 - 539 - banana_cal
    assert summary["meal_count"] == 2
    assert sum(summary["macro_breakdown"].values()) == pytest.approx(100, abs=0.5)
    print("✅ Totals against default goal")


def test_daily_summary_custom_goal_and_no_data(store):
    log_meal(store, "2 rotis", "dinner", date=DAY)

    summary = get_daily_nutrition_summary(store, date=DAY, goal={"calories": 178, "protein": 0, "carbs": 0, "fat": 0})
    assert summary["progress"]["calories"] == 100
    assert summary["progress"]["protein"] == 0

    assert get_daily_nutrition_summary(store, date="1999-01-01")["status"] == "no_data"


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
