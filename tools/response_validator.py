# tools/response_validator.py
"""
IronLog — Provider Response Validator
=====================================
Turns the raw text an LLM provider sends back into typed results.

Provider output is treated as untrusted "any shape" JSON: it is parsed into a
plain Python value first, then every field is checked and re-rounded before a
ParsedFoodResult / ParsedWorkoutProgram is built from it.
"""

import json
import math
import re
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from tools.muscle_classifier import MuscleGroup, infer_muscle_group
from tools.nutrition_parser import ParsedFoodItem, ParsedFoodResult
from tools.workout_parser import (
    ParsedExercise,
    ParsedProgramDay,
    ParsedWorkoutProgram,
    program_confidence,
)


class ResponseValidationError(ValueError):
    """Provider JSON parsed, but does not have the required shape."""


# =============================================================================
# JSON EXTRACTION
# =============================================================================
_FENCE_OPEN = re.compile(r"```(?:json)?", re.IGNORECASE)
_JSON_SPAN = re.compile(r"[\[{][\s\S]*[\]}]")


def safe_json_parse(raw: Optional[str]) -> Any:
    """
    Parse JSON out of an LLM completion.

    Strips markdown code fences, tries a literal parse, then falls back to the
    span from the first "{" or "[" to the last "}" or "]". Returns None if
    nothing parses.
    """
    if not raw:
        return None

    cleaned = _FENCE_OPEN.sub("", raw).replace("```", "").strip()
    try:
        return json.loads(cleaned)
    except (json.JSONDecodeError, RecursionError):
        pass

    match = _JSON_SPAN.search(cleaned)
    if not match:
        return None
    try:
        return json.loads(match.group(0))
    except (json.JSONDecodeError, RecursionError):
        return None


# =============================================================================
# FIELD HELPERS
# =============================================================================
def _is_number(value: Any) -> bool:
    # bool is an int subclass; "true" is not a calorie count. NaN and
    # Infinity are valid JSON to the stdlib parser but never a quantity.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # int too large for a float
        return False


def _require_number(obj: Dict[str, Any], field: str, positive: bool = False) -> float:
    value = obj.get(field)
    if not _is_number(value):
        raise ResponseValidationError(f"'{field}' must be a number, got {value!r}")
    if positive and value <= 0:
        raise ResponseValidationError(f"'{field}' must be positive, got {value!r}")
    if value < 0:
        raise ResponseValidationError(f"'{field}' must not be negative, got {value!r}")
    return float(value)


def _optional_number(obj: Dict[str, Any], field: str) -> float:
    if obj.get(field) is None:
        return 0.0
    return _require_number(obj, field)


def _require_name(obj: Dict[str, Any], field: str) -> str:
    value = obj.get(field)
    if not isinstance(value, str) or not value.strip():
        raise ResponseValidationError(f"'{field}' must be a non-empty string")
    return value.strip()


# =============================================================================
# FOOD
# =============================================================================
def validate_food_item(raw_item: Any) -> ParsedFoodItem:
    if not isinstance(raw_item, dict):
        raise ResponseValidationError("food item is not an object")

    return ParsedFoodItem(
        name=_require_name(raw_item, "name"),
        quantity_g=round(_require_number(raw_item, "quantity_g", positive=True), 1),
        calories=int(round(_require_number(raw_item, "calories", positive=True))),
        protein=round(_optional_number(raw_item, "protein"), 1),
        carbs=round(_optional_number(raw_item, "carbs"), 1),
        fat=round(_optional_number(raw_item, "fat"), 1),
    )


def validate_food_payload(payload: Any) -> ParsedFoodResult:
    """
    Validate a provider's food JSON.

    Requires a non-empty `items` list where every item has a string name and a
    positive calorie value, plus a positive `total_calories`. Totals on the
    returned result are recomputed from the normalised items.

    Raises:
        ResponseValidationError: on any shape or type problem
    """
    if not isinstance(payload, dict):
        raise ResponseValidationError("food payload must be a JSON object")

    raw_items = payload.get("items")
    if not isinstance(raw_items, list) or not raw_items:
        raise ResponseValidationError("'items' must be a non-empty list")

    _require_number(payload, "total_calories", positive=True)

    try:
        items = [validate_food_item(raw) for raw in raw_items]
    except ValidationError as e:
        raise ResponseValidationError(f"invalid food item: {e.errors()[0]['msg']}") from e

    return ParsedFoodResult(
        items=items,
        total_calories=sum(item.calories for item in items),
        total_protein=round(sum(item.protein for item in items), 1),
        total_carbs=round(sum(item.carbs for item in items), 1),
        total_fat=round(sum(item.fat for item in items), 1),
    )


# =============================================================================
# WORKOUT
# =============================================================================
def _muscle_group_for(raw_exercise: Dict[str, Any], name: str) -> MuscleGroup:
    value = raw_exercise.get("muscle_group")
    if isinstance(value, str):
        try:
            return MuscleGroup(value.strip().lower())
        except ValueError:
            pass
    return infer_muscle_group(name)


def validate_exercise(raw_exercise: Any) -> Optional[ParsedExercise]:
    """Normalise one provider exercise; None if it is unusable."""
    if not isinstance(raw_exercise, dict):
        return None

    name = raw_exercise.get("name")
    sets = raw_exercise.get("sets")
    reps = raw_exercise.get("reps")

    if not isinstance(name, str) or not name.strip():
        return None
    if not _is_number(sets) or int(round(sets)) <= 0:
        return None
    if _is_number(reps):
        reps = str(int(round(reps)))
    elif isinstance(reps, str) and reps.strip():
        reps = reps.strip()
    else:
        return None

    name = name.strip()
    return ParsedExercise(
        name=name,
        sets=int(round(sets)),
        reps=reps,
        muscle_group=_muscle_group_for(raw_exercise, name),
    )


def validate_workout_payload(payload: Any) -> ParsedWorkoutProgram:
    """
    Validate a provider's workout JSON ({"days": [...]} or a bare list of days).

    Bad exercises are dropped, days left empty are dropped, and the payload
    is rejected if no day survives.

    Raises:
        ResponseValidationError: when nothing usable is left
    """
    if isinstance(payload, list):
        raw_days = payload
    elif isinstance(payload, dict) and isinstance(payload.get("days"), list):
        raw_days = payload["days"]
    else:
        raise ResponseValidationError("workout payload must contain a 'days' list")

    days: List[ParsedProgramDay] = []
    for raw_day in raw_days:
        if not isinstance(raw_day, dict):
            continue
        day_name = raw_day.get("day_name")
        if not isinstance(day_name, str) or not day_name.strip():
            continue

        raw_exercises = raw_day.get("exercises")
        if not isinstance(raw_exercises, list):
            continue
        exercises = [ex for ex in (validate_exercise(raw) for raw in raw_exercises) if ex]
        if not exercises:
            continue

        focus = raw_day.get("focus")
        days.append(ParsedProgramDay(
            day_name=day_name.strip(),
            focus=(focus.strip() or None) if isinstance(focus, str) else None,
            exercises=exercises,
        ))

    if not days:
        raise ResponseValidationError("no day with at least one valid exercise")

    return ParsedWorkoutProgram(days=days, confidence=program_confidence(len(days)))


__all__ = [
    "safe_json_parse",
    "validate_food_payload",
    "validate_workout_payload",
    "validate_food_item",
    "validate_exercise",
    "ResponseValidationError",
]
