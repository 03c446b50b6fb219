"""
IronLog — Progress Analyzer Agent
=================================
Reads logged workouts and body weights from the record store and turns them
into progress data for charts and alerts:

- save_workout_log: persist a finished ActiveWorkoutSession
- get_exercise_progress: best estimated 1RM per training date
- get_weekly_strength_trend: best estimated 1RM per ISO week
- get_progress_alerts: body-weight plateau + overload suggestions
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from tools.training_calculator import (
    analyze_progressive_overload,
    detect_plateau,
    epley_1rm,
)

# =============================================================================
# CONFIGURATION
# =============================================================================
WORKOUT_LOGS_TABLE = "workout_logs"
WORKOUT_SETS_TABLE = "workout_sets"
BODY_WEIGHTS_TABLE = "body_weights"

ANALYZER_CONFIG = {
    "trend_weeks": 4,
    "default_target_reps": (8, 12),
}


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================
def get_iso_week_key(date_str: str) -> str:
    """Convert date string to ISO week key (e.g., '2025-W01')."""
    return datetime.fromisoformat(date_str[:10]).strftime("%G-W%V")


def _sets_for_exercise(store: Any, exercise_name: str) -> List[Tuple[str, Dict[str, Any]]]:
    """(date, set) pairs for completed sets of one exercise, oldest first."""
    name = exercise_name.strip().lower()
    dates = {log["id"]: log["date"] for log in store.select(WORKOUT_LOGS_TABLE)}

    pairs = []
    for s in store.select(WORKOUT_SETS_TABLE):
        if s.get("exercise_name", "").strip().lower() != name:
            continue
        if not s.get("completed", True) or s.get("workout_log_id") not in dates:
            continue
        if s.get("weight", 0) <= 0 or s.get("reps", 0) <= 0:
            continue
        pairs.append((dates[s["workout_log_id"]], s))

    pairs.sort(key=lambda pair: pair[0])
    return pairs


# =============================================================================
# WRITE
# =============================================================================
def save_workout_log(store: Any, workout_log: Dict[str, Any]) -> Dict[str, Any]:
    """
    Persist a finished workout (as returned by ActiveWorkoutSession.finish()).

    Sets are stored as workout_sets rows linked by workout_log_id.
    """
    if not workout_log or not workout_log.get("sets"):
        return {"status": "error", "error_message": "Workout has no sets."}

    log_row = store.insert(WORKOUT_LOGS_TABLE, {
        "date": workout_log["date"],
        "program_day_id": workout_log.get("program_day_id"),
        "day_name": workout_log.get("day_name"),
        "duration_minutes": workout_log.get("duration_minutes", 0),
    })

    for number, workout_set in enumerate(workout_log["sets"], start=1):
        row = dict(workout_set)
        row["workout_log_id"] = log_row["id"]
        row.setdefault("set_number", number)
        row.setdefault("completed", True)
        store.insert(WORKOUT_SETS_TABLE, row)

    return {
        "status": "success",
        "workout_log_id": log_row["id"],
        "sets_saved": len(workout_log["sets"]),
    }


# =============================================================================
# CORE ANALYSIS FUNCTIONS
# =============================================================================
def get_exercise_progress(store: Any, exercise_name: str) -> List[Dict[str, Any]]:
    """
    Best estimated 1RM for each date an exercise was trained.

    Returns:
        [{"date", "estimated_1rm", "weight", "reps"}, ...] oldest first
    """
    best: Dict[str, Dict[str, Any]] = {}
    for date, s in _sets_for_exercise(store, exercise_name):
        estimate = epley_1rm(s["weight"], s["reps"])
        if date not in best or estimate > best[date]["estimated_1rm"]:
            best[date] = {
                "date": date,
                "estimated_1rm": estimate,
                "weight": s["weight"],
                "reps": s["reps"],
            }
    return [best[date] for date in sorted(best)]


def get_weekly_strength_trend(
    store: Any,
    exercise_name: str,
    weeks: Optional[int] = None,
) -> List[float]:
    """Best estimated 1RM per ISO week for the most recent `weeks` weeks, oldest first."""
    weeks = weeks or ANALYZER_CONFIG["trend_weeks"]
    weekly: Dict[str, float] = {}
    for point in get_exercise_progress(store, exercise_name):
        key = get_iso_week_key(point["date"])
        weekly[key] = max(weekly.get(key, 0), point["estimated_1rm"])
    return [weekly[key] for key in sorted(weekly)][-weeks:]


def get_overload_suggestion(store: Any, exercise_name: str) -> Dict[str, Any]:
    """Overload suggestion from the latest session's sets and the weekly trend."""
    pairs = _sets_for_exercise(store, exercise_name)
    if not pairs:
        return analyze_progressive_overload([], [])

    last_date = pairs[-1][0]
    low, high = ANALYZER_CONFIG["default_target_reps"]
    recent_sets = [
        {
            "weight": s["weight"],
            "reps": s["reps"],
            "target_reps_min": s.get("target_reps_min", low),
            "target_reps_max": s.get("target_reps_max", high),
            "rpe": s.get("rpe"),
        }
        for date, s in pairs if date == last_date
    ]
    return analyze_progressive_overload(
        recent_sets, get_weekly_strength_trend(store, exercise_name)
    )


def get_progress_alerts(store: Any) -> List[Dict[str, Any]]:
    """
    Alerts worth showing on the dashboard.

    - a body-weight plateau over the last 14 weigh-ins
    - any trained exercise whose suggestion is not "maintain"
    """
    alerts: List[Dict[str, Any]] = []

    weights = sorted(store.select(BODY_WEIGHTS_TABLE), key=lambda w: w["date"])
    plateau = detect_plateau(weights)
    if plateau["detected"]:
        alerts.append({
            "type": "plateau",
            "message": "⚖️ Weight Plateau",
            "detail": plateau["message"],
        })

    exercise_names = sorted({
        s["exercise_name"] for s in store.select(WORKOUT_SETS_TABLE) if s.get("exercise_name")
    })
    for name in exercise_names:
        suggestion = get_overload_suggestion(store, name)
        if suggestion["type"] != "maintain":
            alerts.append({**suggestion, "exercise": name})

    return alerts


__all__ = [
    "save_workout_log",
    "get_exercise_progress",
    "get_weekly_strength_trend",
    "get_overload_suggestion",
    "get_progress_alerts",
]
