"""
IronLog — Nutrition Agent
=========================
Meal logging on top of the food parsing pipeline.

- log_meal: parse a description, store one meal_entries row per food item
- get_daily_nutrition_summary: totals for a day against the nutrition goal
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from agents.extraction_agent import parse_food_text
from memory.session_manager import DEFAULT_NUTRITION_GOAL
from tools.nutrition_parser import calculate_daily_nutrition
from tools.schemas import EmptyInputError

# =============================================================================
# CONFIGURATION
# =============================================================================
MEAL_TABLE = "meal_entries"

MEAL_TYPES = ["breakfast", "lunch", "dinner", "snack", "pre_workout", "post_workout"]


# =============================================================================
# HELPERS
# =============================================================================
def _get_meal_type_from_time() -> str:
    """Get meal type based on current time."""
    hour = datetime.now().hour
    if hour < 10:
        return "breakfast"
    elif hour < 14:
        return "lunch"
    elif hour < 17:
        return "snack"
    else:
        return "dinner"


def format_macro_summary(totals: Dict[str, Any]) -> str:
    return (
        f"🔥 {totals['calories']} kcal | 🥩 {totals['protein']}g P | "
        f"🍚 {totals['carbs']}g C | 🥑 {totals['fat']}g F"
    )


def _as_meal(entries: List[Dict[str, Any]]) -> Dict[str, Any]:
    """meal_entries rows -> the {"items": [...]} shape calculate_daily_nutrition reads."""
    return {
        "items": [
            {
                "name": e["food_name"],
                "quantity_g": e["quantity_g"],
                "calories": e["calories"],
                "protein": e["protein"],
                "carbs": e["carbs"],
                "fat": e["fat"],
            }
            for e in entries
        ]
    }


def _totals(daily: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "calories": daily["total_calories"],
        "protein": daily["total_protein_g"],
        "carbs": daily["total_carbs_g"],
        "fat": daily["total_fat_g"],
    }


# =============================================================================
# MAIN TOOL FUNCTIONS
# =============================================================================
def log_meal(
    store: Any,
    meal_description: str,
    meal_type: Optional[str] = None,
    date: Optional[str] = None,
    providers: Optional[List[Any]] = None,
) -> Dict[str, Any]:
    """
    Log a meal by parsing its description.

    Args:
        store: Record store (insert/select/update/delete)
        meal_description: e.g. "2 rotis, dal fry, glass of milk"
        meal_type: breakfast, lunch, dinner, snack, pre_workout, post_workout;
                   guessed from the clock when omitted
        date: ISO date, defaults to today
        providers: Provider override passed through to the parser

    Returns:
        status, stored entries, meal totals, parse source/confidence
    """
    try:
        parsed = parse_food_text(meal_description, providers=providers)
    except EmptyInputError:
        return {"status": "error", "error_message": "No meal description provided."}

    final_meal_type = (meal_type or _get_meal_type_from_time()).lower()
    if final_meal_type not in MEAL_TYPES:
        return {
            "status": "error",
            "error_message": f"Unknown meal type: {meal_type}. Use: {MEAL_TYPES}",
        }

    result = parsed.data
    if not result.items:
        return {
            "status": "error",
            "error_message": "Could not recognise any food in the description.",
            "source": parsed.source.value,
            "confidence": parsed.confidence.value,
            "diagnostics": parsed.diagnostics,
        }

    entry_date = date or datetime.now().date().isoformat()
    entries = [
        store.insert(MEAL_TABLE, {
            "date": entry_date,
            "meal_type": final_meal_type,
            "food_name": item.name,
            "quantity_g": item.quantity_g,
            "calories": item.calories,
            "protein": item.protein,
            "carbs": item.carbs,
            "fat": item.fat,
        })
        for item in result.items
    ]

    totals = _totals(calculate_daily_nutrition([_as_meal(entries)]))
    print(f"🥗 Logged {len(entries)} item(s) for {final_meal_type} ({parsed.source.value})")

    return {
        "status": "success",
        "meal_type": final_meal_type,
        "date": entry_date,
        "entries": entries,
        "totals": totals,
        "source": parsed.source.value,
        "confidence": parsed.confidence.value,
        "diagnostics": parsed.diagnostics,
        "message": f"✅ {final_meal_type.replace('_', ' ').title()} logged! {format_macro_summary(totals)}",
    }


def get_daily_nutrition_summary(
    store: Any,
    date: Optional[str] = None,
    goal: Optional[Dict[str, float]] = None,
) -> Dict[str, Any]:
    """
    Summarise one day's meal entries against a nutrition goal.

    Returns:
        status ("success" or "no_data"), totals, goal, progress percentages,
        a per-meal-type calorie breakdown and the protein/carbs/fat
        calorie split
    """
    day = date or datetime.now().date().isoformat()
    entries = store.select(MEAL_TABLE, date=day)

    if not entries:
        return {
            "status": "no_data",
            "date": day,
            "message": "No meals logged today yet.",
        }

    goal = goal or DEFAULT_NUTRITION_GOAL

    by_meal: Dict[str, List[Dict[str, Any]]] = {}
    for entry in entries:
        by_meal.setdefault(entry["meal_type"], []).append(entry)

    daily = calculate_daily_nutrition([_as_meal(rows) for rows in by_meal.values()])
    totals = _totals(daily)

    progress = {
        macro: round(totals[macro] / goal[macro] * 100) if goal.get(macro) else 0
        for macro in ("calories", "protein", "carbs", "fat")
    }

    meal_breakdown = {
        meal_type: sum(row["calories"] for row in rows)
        for meal_type, rows in by_meal.items()
    }

    return {
        "status": "success",
        "date": day,
        "entries": entries,
        "totals": totals,
        "goal": goal,
        "progress": progress,
        "remaining_calories": goal["calories"] - totals["calories"],
        "meal_breakdown": meal_breakdown,
        "meal_count": daily["meal_count"],
        "macro_breakdown": daily["macro_breakdown"],
        "summary": format_macro_summary(totals),
    }


__all__ = [
    "log_meal",
    "get_daily_nutrition_summary",
    "MEAL_TABLE",
    "MEAL_TYPES",
]
