# unit_tests/test_agent_planner.py
"""
Unit Tests for Planner Agent
============================
Run with: python -m pytest unit_tests/test_agent_planner.py -v
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from agents.planner_agent import (
    DAYS_TABLE,
    EXERCISES_TABLE,
    PROGRAMS_TABLE,
    activate_program,
    delete_program,
    get_program,
    import_program,
    list_programs,
)
from memory.session_manager import AppSessionState

PROGRAM_TEXT = """Monday: Chest + Triceps
- Bench Press 4x8
- Skull Crushers 3x10-12

Thursday: Legs
Squat 5x5
Leg Curl 3x12
Standing Calf Raise 4x15
"""


def test_import_program_creates_rows(store):
    print("\n" + "=" * 60)
    print("TEST 1: Import a program")
    print("=" * 60)

    result = import_program(store, PROGRAM_TEXT, "PPL Block 1")
    print(f"Result: {result}")

    assert result["status"] == "success"
    assert result["days"] == 2
    assert result["exercises"] == 5
    assert result["confidence"] == "high"

    program = store.get(PROGRAMS_TABLE, result["program_id"])
    assert program["name"] == "PPL Block 1"
    assert program["mode"] == "fixed"
    assert program["is_active"] is False

    days = store.select(DAYS_TABLE, program_id=result["program_id"])
    assert [(d["day_name"], d["order_index"]) for d in days] == [("Monday", 0), ("Thursday", 1)]
    assert len(store.select(EXERCISES_TABLE)) == 5
    print("✅ programs / program_days / program_exercises written")


def test_get_program_nests_in_order(store):
    program_id = import_program(store, PROGRAM_TEXT, "PPL")["program_id"]

    program = get_program(store, program_id)
    legs = program["days"][1]

    assert legs["focus"] == "Legs"
    assert [e["name"] for e in legs["exercises"]] == ["Squat", "Leg Curl", "Standing Calf Raise"]
    assert [e["muscle_group"] for e in legs["exercises"]] == ["legs", "hamstrings", "calves"]
    assert legs["exercises"][1]["muscle_label"] == "Hamstrings"
    assert program["days"][0]["exercises"][1]["reps"] == "10-12"

    assert get_program(store, "missing") is None


def test_import_program_default_name(store):
    result = import_program(store, "Day A:\nBench Press 3x5")
    assert result["name"] == "Imported Program"
    assert result["confidence"] == "medium"


@pytest.mark.parametrize("text", ["", None, "no program here", "Monday: Rest"])
def test_import_program_errors(store, text):
    result = import_program(store, text, "Nope")

    assert result["status"] == "error"
    assert store.select(PROGRAMS_TABLE) == []


def test_activate_program_is_exclusive(store, tmp_path):
    print("\n" + "=" * 60)
    print("TEST 2: Activate program")
    print("=" * 60)

    first = import_program(store, PROGRAM_TEXT, "First")["program_id"]
    second = import_program(store, PROGRAM_TEXT, "Second")["program_id"]
    state = AppSessionState(str(tmp_path / "state.json"))

    activate_program(store, first)
    result = activate_program(store, second, session_state=state)

    assert result["status"] == "success"
    assert store.get(PROGRAMS_TABLE, first)["is_active"] is False
    assert store.get(PROGRAMS_TABLE, second)["is_active"] is True
    assert state.active_program_id == second
    assert activate_program(store, "missing")["status"] == "error"
    assert {p["name"] for p in list_programs(store)} == {"First", "Second"}
    print("✅ Only one active program")


def test_delete_program_cascades(store):
    keep = import_program(store, "Day A:\nBench Press 3x5", "Keep")["program_id"]
    drop = import_program(store, PROGRAM_TEXT, "Drop")["program_id"]

    assert delete_program(store, drop)["status"] == "success"

    assert store.get(PROGRAMS_TABLE, drop) is None
    assert len(store.select(DAYS_TABLE)) == 1
    assert len(store.select(EXERCISES_TABLE)) == 1
    assert get_program(store, keep) is not None
    assert delete_program(store, drop)["status"] == "error"


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
