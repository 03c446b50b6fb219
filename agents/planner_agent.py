"""
IronLog — Program Planner Agent
===============================
Imports a training program written as plain text and manages stored programs.

Storage layout (record store tables):
    programs          name, mode, is_active
    program_days      program_id, day_name, focus, order_index
    program_exercises program_day_id, name, muscle_group, sets, reps, order_index
"""

from typing import Any, Dict, List, Optional

from agents.extraction_agent import parse_workout_text
from tools.muscle_classifier import muscle_label
from tools.schemas import EmptyInputError

# =============================================================================
# CONFIGURATION
# =============================================================================
PROGRAMS_TABLE = "programs"
DAYS_TABLE = "program_days"
EXERCISES_TABLE = "program_exercises"

DEFAULT_PROGRAM_NAME = "Imported Program"


# =============================================================================
# MAIN TOOL: import_program
# =============================================================================
def import_program(
    store: Any,
    text: str,
    name: Optional[str] = None,
    providers: Optional[List[Any]] = None,
) -> Dict[str, Any]:
    """
    Parse a program and save it as programs / program_days / program_exercises rows.

    Args:
        store: Record store
        text: e.g. "Monday: Push\\n- Bench Press 4x8\\n- OHP 3x10"
        name: Program name
        providers: Provider override passed through to the parser

    Returns:
        status, program_id, day/exercise counts, parse source/confidence
    """
    try:
        parsed = parse_workout_text(text, providers=providers)
    except EmptyInputError:
        return {"status": "error", "error_message": "No program text provided."}

    program = parsed.data
    if not program.days:
        return {
            "status": "error",
            "error_message": "No days with exercises found. Use lines like 'Bench Press 4x8' under a 'Day:' header.",
            "source": parsed.source.value,
            "confidence": parsed.confidence.value,
            "diagnostics": parsed.diagnostics,
        }

    program_row = store.insert(PROGRAMS_TABLE, {
        "name": (name or "").strip() or DEFAULT_PROGRAM_NAME,
        "mode": "fixed",
        "is_active": False,
    })

    exercise_count = 0
    for day_index, day in enumerate(program.days):
        day_row = store.insert(DAYS_TABLE, {
            "program_id": program_row["id"],
            "day_name": day.day_name,
            "focus": day.focus,
            "order_index": day_index,
        })
        for ex_index, exercise in enumerate(day.exercises):
            store.insert(EXERCISES_TABLE, {
                "program_day_id": day_row["id"],
                "name": exercise.name,
                "muscle_group": exercise.muscle_group.value,
                "sets": exercise.sets,
                "reps": exercise.reps,
                "order_index": ex_index,
            })
            exercise_count += 1

    print(f"📋 Program '{program_row['name']}' imported: {len(program.days)} days, {exercise_count} exercises")

    return {
        "status": "success",
        "program_id": program_row["id"],
        "name": program_row["name"],
        "days": len(program.days),
        "exercises": exercise_count,
        "source": parsed.source.value,
        "confidence": parsed.confidence.value,
        "diagnostics": parsed.diagnostics,
        "message": f"✅ \"{program_row['name']}\" saved!",
    }


# =============================================================================
# READ / MANAGE
# =============================================================================
def get_program(store: Any, program_id: str) -> Optional[Dict[str, Any]]:
    """A program with its days and exercises nested, both in order_index order."""
    program = store.get(PROGRAMS_TABLE, program_id)
    if program is None:
        return None

    days = sorted(store.select(DAYS_TABLE, program_id=program_id), key=lambda d: d["order_index"])
    for day in days:
        exercises = sorted(
            store.select(EXERCISES_TABLE, program_day_id=day["id"]),
            key=lambda e: e["order_index"],
        )
        for exercise in exercises:
            exercise["muscle_label"] = muscle_label(exercise["muscle_group"])
        day["exercises"] = exercises

    program["days"] = days
    return program


def list_programs(store: Any) -> List[Dict[str, Any]]:
    """Newest first."""
    return sorted(store.select(PROGRAMS_TABLE), key=lambda p: p["created_at"], reverse=True)


def activate_program(store: Any, program_id: str, session_state: Any = None) -> Dict[str, Any]:
    """Mark one program active and every other program inactive."""
    if store.get(PROGRAMS_TABLE, program_id) is None:
        return {"status": "error", "error_message": f"Program not found: {program_id}"}

    for program in store.select(PROGRAMS_TABLE):
        store.update(PROGRAMS_TABLE, program["id"], {"is_active": program["id"] == program_id})

    if session_state is not None:
        session_state.set_active_program(program_id)

    return {"status": "success", "program_id": program_id}


def delete_program(store: Any, program_id: str) -> Dict[str, Any]:
    """Delete a program with its days and exercises."""
    if store.get(PROGRAMS_TABLE, program_id) is None:
        return {"status": "error", "error_message": f"Program not found: {program_id}"}

    for day in store.select(DAYS_TABLE, program_id=program_id):
        for exercise in store.select(EXERCISES_TABLE, program_day_id=day["id"]):
            store.delete(EXERCISES_TABLE, exercise["id"])
        store.delete(DAYS_TABLE, day["id"])
    store.delete(PROGRAMS_TABLE, program_id)

    return {"status": "success", "program_id": program_id}


__all__ = [
    "import_program",
    "get_program",
    "list_programs",
    "activate_program",
    "delete_program",
]
