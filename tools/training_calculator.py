# tools/training_calculator.py
"""
IronLog — Training Calculator Tool
==================================
Small, pure calculations consumed by the display layer and the analyzer:

  - Estimated one-rep max (Epley)
  - Daily recovery score from a wellness check-in
  - Body-weight plateau detection
  - Progressive-overload suggestion
  - Moving average, training volume, BMR / TDEE
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Union


# =============================================================================
# CONSTANTS
# =============================================================================
# Recovery score weights. Must sum to 1.0.
RECOVERY_WEIGHTS = {
    "sleep_hours": 0.25,
    "sleep_quality": 0.15,
    "stress_level": 0.20,
    "mood": 0.15,
    "soreness": 0.10,
    "energy_level": 0.15,
}

SLEEP_TARGET_HOURS = 8

RECOVERY_LABELS = [
    (80, "Excellent"),
    (65, "Good"),
    (50, "Moderate"),
    (35, "Poor"),
]

PLATEAU_WINDOW_DAYS = 14
PLATEAU_RANGE_KG = 0.5

DEFAULT_RPE = 7

# Mifflin-St Jeor activity multipliers
ACTIVITY_LEVELS = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very_active": 1.9,
}


# =============================================================================
# TOOL 1: One-Rep Max
# =============================================================================
def epley_1rm(weight: float, reps: int) -> float:
    """Epley estimate, one decimal. A single rep is already a 1RM."""
    if reps == 1:
        return weight
    return round(weight * (1 + reps / 30), 1)


def calculate_one_rep_max(weight: float, reps: int, unit: str = "kg") -> Dict[str, Any]:
    """
    Estimate a one-rep max from a submaximal set.

    Args:
        weight: Weight lifted in the set
        reps: Repetitions completed
        unit: "kg" or "lb", echoed back

    Returns:
        Dictionary with:
        - status: "success" or "error"
        - estimated_1rm: Epley estimate
        - training_percentages: Loads at 60-100% of the estimate
        - rep_maxes: Estimated load for 3/5/8/10/12 reps

    Example:
        >>> calculate_one_rep_max(100, 10)["estimated_1rm"]
        133.3
    """
    if weight <= 0:
        return {"status": "error", "error_message": "Weight must be positive"}
    if reps < 1:
        return {"status": "error", "error_message": "Reps must be at least 1"}

    estimated = epley_1rm(weight, reps)

    training_percentages = {
        f"{pct}%": round(estimated * pct / 100, 1)
        for pct in (100, 95, 90, 85, 80, 75, 70, 65, 60)
    }

    rep_maxes = {"1RM": estimated}
    for target_reps in (3, 5, 8, 10, 12):
        rep_maxes[f"{target_reps}RM"] = round(estimated / (1 + target_reps / 30), 1)

    return {
        "status": "success",
        "estimated_1rm": estimated,
        "weight_used": weight,
        "reps_completed": reps,
        "unit": unit,
        "formula_used": "actual" if reps == 1 else "epley",
        "training_percentages": training_percentages,
        "rep_maxes": rep_maxes,
        "calculated_at": datetime.now().isoformat(),
    }


# =============================================================================
# TOOL 2: Recovery Score
# =============================================================================
def _scale(value: float) -> float:
    """Map a 1-5 rating onto 0-1 (higher rating -> 1)."""
    value = min(max(value, 1), 5)
    return (value - 1) / 4


def calculate_recovery_score(
    sleep_hours: float,
    sleep_quality: float,
    stress_level: float,
    mood: float,
    soreness: float,
    energy_level: float,
) -> int:
    """
    Weighted 0-100 recovery score from a daily check-in.

    Ratings are 1-5. Stress and soreness are inverted (5 is worst); the others
    treat 5 as best. Sleep is measured against an 8 hour target.
    """
    sub_scores = {
        "sleep_hours": min(max(sleep_hours, 0) / SLEEP_TARGET_HOURS, 1),
        "sleep_quality": _scale(sleep_quality),
        "stress_level": 1 - _scale(stress_level),
        "mood": _scale(mood),
        "soreness": 1 - _scale(soreness),
        "energy_level": _scale(energy_level),
    }

    score = sum(sub_scores[key] * 100 * weight for key, weight in RECOVERY_WEIGHTS.items())
    return int(min(max(round(score), 0), 100))


def recovery_label(score: float) -> str:
    for threshold, label in RECOVERY_LABELS:
        if score >= threshold:
            return label
    return "Very Poor"


# =============================================================================
# TOOL 3: Plateau Detection
# =============================================================================
def _weight_of(sample: Union[float, Dict[str, Any]]) -> float:
    if isinstance(sample, dict):
        return float(sample["weight_kg"])
    return float(sample)


def detect_plateau(weights: Sequence[Union[float, Dict[str, Any]]]) -> Dict[str, Any]:
    """
    Detect a body-weight plateau over the last 14 chronological samples.

    A plateau is a spread (max - min) strictly below 0.5 kg.

    Args:
        weights: Oldest-first samples, plain numbers or {"date", "weight_kg"} dicts

    Returns:
        {"detected", "days", "range_kg", "message"}
    """
    if len(weights) < PLATEAU_WINDOW_DAYS:
        return {"detected": False, "days": 0, "range_kg": None, "message": None}

    recent = [_weight_of(w) for w in weights[-PLATEAU_WINDOW_DAYS:]]
    spread = round(max(recent) - min(recent), 2)

    if spread < PLATEAU_RANGE_KG:
        return {
            "detected": True,
            "days": PLATEAU_WINDOW_DAYS,
            "range_kg": spread,
            "message": (
                f"Weight has been within {spread:.1f}kg range for "
                f"{PLATEAU_WINDOW_DAYS} days. Consider adjusting calories."
            ),
        }

    return {"detected": False, "days": 0, "range_kg": spread, "message": None}


# =============================================================================
# TOOL 4: Progressive Overload
# =============================================================================
def is_strength_declining(weekly_strength_trend: Sequence[float]) -> bool:
    """True when the last three weekly values are strictly decreasing."""
    if len(weekly_strength_trend) < 3:
        return False
    a, b, c = weekly_strength_trend[-3:]
    return c < b < a


def analyze_progressive_overload(
    recent_sets: List[Dict[str, Any]],
    weekly_strength_trend: Optional[Sequence[float]] = None,
) -> Dict[str, str]:
    """
    Suggest the next step for a lift.

    Args:
        recent_sets: Dicts with weight, reps, target_reps_min, target_reps_max
                     and optional rpe (missing RPE counts as 7)
        weekly_strength_trend: Weekly estimated 1RMs, oldest first

    Returns:
        {"type": increase_weight | deload | reduce_volume | maintain,
         "message": short headline, "detail": rationale}
    """
    if not recent_sets:
        return {
            "type": "maintain",
            "message": "No data yet",
            "detail": "Log more sessions to get suggestions.",
        }

    all_hit_max = all(s["reps"] >= s["target_reps_max"] for s in recent_sets)
    rpes = [s.get("rpe") if s.get("rpe") is not None else DEFAULT_RPE for s in recent_sets]
    avg_rpe = sum(rpes) / len(rpes)
    declining = is_strength_declining(weekly_strength_trend or [])

    if avg_rpe > 9 and declining:
        return {
            "type": "deload",
            "message": "⚠️ Deload Recommended",
            "detail": "RPE consistently >9 with declining strength. "
                      "Take a deload week at 50-60% volume.",
        }

    if declining:
        return {
            "type": "reduce_volume",
            "message": "📉 Reduce Volume",
            "detail": "Strength has been declining 3 weeks. "
                      "Consider reducing volume by 20% and focusing on quality.",
        }

    if all_hit_max and avg_rpe <= 8:
        return {
            "type": "increase_weight",
            "message": "💪 Add Weight",
            "detail": "All sets hit top of rep range at manageable RPE. Add 2.5kg next session.",
        }

    return {
        "type": "maintain",
        "message": "✅ Keep Going",
        "detail": "Progress is solid. Keep current load and aim to hit the top of your rep range.",
    }


# =============================================================================
# TOOL 5: Trend & Volume helpers
# =============================================================================
def moving_average(values: Sequence[float], window: int = 7) -> List[float]:
    """Trailing moving average; early points average over what is available."""
    result = []
    for i in range(len(values)):
        chunk = values[max(0, i - window + 1):i + 1]
        result.append(round(sum(chunk) / len(chunk), 2))
    return result


def calculate_volume(weight: float, reps: int, sets: int) -> float:
    return weight * reps * sets


# =============================================================================
# TOOL 6: Energy expenditure
# =============================================================================
def calculate_bmr(weight_kg: float, height_cm: float, age: int, gender: str) -> float:
    """Basal metabolic rate, Mifflin-St Jeor."""
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    if gender.lower() == "male":
        return base + 5
    return base - 161


def calculate_tdee(bmr: float, activity_level: Union[str, float]) -> int:
    """
    Total daily energy expenditure.

    `activity_level` is a multiplier (1.2-1.9) or one of ACTIVITY_LEVELS' keys.
    """
    if isinstance(activity_level, str):
        if activity_level.lower() not in ACTIVITY_LEVELS:
            raise ValueError(
                f"Unknown activity level: {activity_level}. Use: {list(ACTIVITY_LEVELS)}"
            )
        multiplier = ACTIVITY_LEVELS[activity_level.lower()]
    else:
        multiplier = activity_level
    return int(round(bmr * multiplier))


# =============================================================================
# EXPORTS
# =============================================================================
__all__ = [
    "epley_1rm",
    "calculate_one_rep_max",
    "calculate_recovery_score",
    "recovery_label",
    "detect_plateau",
    "is_strength_declining",
    "analyze_progressive_overload",
    "moving_average",
    "calculate_volume",
    "calculate_bmr",
    "calculate_tdee",
    "RECOVERY_WEIGHTS",
    "ACTIVITY_LEVELS",
]
