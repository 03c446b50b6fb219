# tools/nutrition_parser.py
"""
IronLog — Local Nutrition Parser Tool
=====================================
Parses natural language meal descriptions into itemized macro data using
a curated reference table. Pure, deterministic, no network.

Examples:
    "2 rotis, dal fry, glass of milk"  -> roti x2, dal fry x1, milk x1
    "half a banana and 200g paneer"    -> banana x0.5, paneer 200 g
"""

import re
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from tools.schemas import Confidence, Source


# =============================================================================
# VALIDATION SCHEMA
# =============================================================================
class FoodReference(BaseModel):
    """One row of the reference table. Macros are per 100 g."""
    model_config = ConfigDict(frozen=True)

    key: str
    calories_per_100g: float
    protein_per_100g: float
    carbs_per_100g: float
    fat_per_100g: float
    serving_g: float
    unit_label: str


class ParsedFoodItem(BaseModel):
    """A single food found in the text, scaled to the eaten quantity."""
    name: str
    quantity_g: float = Field(..., gt=0)
    calories: int = Field(..., ge=0)
    protein: float = Field(..., ge=0)
    carbs: float = Field(..., ge=0)
    fat: float = Field(..., ge=0)
    servings: Optional[float] = Field(None, ge=0)


class ParsedFoodResult(BaseModel):
    """Itemized breakdown of a meal. Totals are the sum of the item fields."""
    items: List[ParsedFoodItem] = Field(default_factory=list)
    total_calories: int = 0
    total_protein: float = 0.0
    total_carbs: float = 0.0
    total_fat: float = 0.0
    confidence: Confidence = Confidence.LOW
    source: Source = Source.LOCAL


# =============================================================================
# FOOD REFERENCE TABLE: India-focused, most specific keys first
# =============================================================================
def _ref(key, cal, protein, carbs, fat, serving_g, unit_label) -> FoodReference:
    return FoodReference(
        key=key,
        calories_per_100g=cal,
        protein_per_100g=protein,
        carbs_per_100g=carbs,
        fat_per_100g=fat,
        serving_g=serving_g,
        unit_label=unit_label,
    )


# Order is load-bearing: a multi-word key must precede any key it contains.
FOOD_REFERENCE: Tuple[FoodReference, ...] = (
    # Breads & grains
    _ref("aloo paratha", 296, 7.1, 43.9, 10.4, 120, "piece"),
    _ref("paratha", 326, 8.3, 52.8, 9.8, 60, "piece"),
    _ref("roti", 297, 9.9, 60.8, 3.7, 30, "piece"),
    _ref("chapati", 297, 9.9, 60.8, 3.7, 30, "piece"),
    _ref("brown rice", 112, 2.6, 23.5, 0.9, 150, "cup"),
    _ref("rice", 130, 2.7, 28, 0.3, 150, "cup"),
    _ref("oats", 389, 17, 66, 7, 80, "cup"),
    _ref("poha", 110, 2.4, 23, 0.9, 150, "plate"),
    _ref("upma", 135, 3, 22, 4, 200, "plate"),
    _ref("idli", 39, 2, 7.9, 0.2, 50, "piece"),
    _ref("dosa", 168, 3.7, 25, 5.9, 100, "piece"),
    _ref("bread", 265, 9, 49, 3.2, 30, "slice"),

    # Lentils & legumes
    _ref("dal fry", 130, 7, 18, 3.5, 200, "bowl"),
    _ref("toor dal", 116, 7, 20, 0.4, 150, "bowl"),
    _ref("moong dal", 104, 7.5, 17, 0.4, 150, "bowl"),
    _ref("chana dal", 127, 8.7, 20, 1, 150, "bowl"),
    _ref("masoor dal", 116, 9, 20, 0.4, 150, "bowl"),
    _ref("dal", 116, 7, 20, 0.4, 150, "bowl"),
    _ref("rajma", 127, 8.7, 22.8, 0.5, 150, "bowl"),
    _ref("chole", 164, 8.9, 27, 2.6, 150, "bowl"),
    _ref("chickpea", 164, 8.9, 27, 2.6, 150, "bowl"),
    _ref("sambar", 44, 2.5, 7, 1.2, 200, "bowl"),

    # Vegetables & paneer
    _ref("palak paneer", 155, 10, 8, 10, 200, "bowl"),
    _ref("palak", 23, 2.9, 3.6, 0.4, 100, "bowl"),
    _ref("paneer", 265, 18, 3.4, 20, 100, "serving"),
    _ref("aloo", 87, 1.9, 20, 0.1, 100, "piece"),

    # Dairy & eggs
    _ref("egg white", 52, 11, 0.7, 0.2, 33, "piece"),
    _ref("egg", 155, 13, 1.1, 11, 50, "piece"),
    _ref("milk", 42, 3.4, 5, 1, 240, "glass"),
    _ref("curd", 98, 11, 3.4, 4.3, 200, "bowl"),
    _ref("dahi", 98, 11, 3.4, 4.3, 200, "bowl"),
    _ref("whey", 400, 80, 7, 5, 30, "scoop"),

    # Non-veg
    _ref("chicken breast", 165, 31, 0, 3.6, 150, "piece"),
    _ref("chicken", 239, 27, 0, 14, 150, "piece"),
    _ref("fish", 97, 16, 0, 3.4, 150, "piece"),
    _ref("tuna", 109, 25, 0, 1, 100, "serving"),

    # Nuts & fats
    _ref("peanut butter", 588, 25, 20, 50, 32, "tbsp"),
    _ref("almonds", 579, 21, 22, 50, 28, "handful"),
    _ref("walnuts", 654, 15, 14, 65, 28, "handful"),
    _ref("ghee", 900, 0.3, 0, 99.5, 10, "tsp"),
    _ref("olive oil", 884, 0, 0, 100, 14, "tbsp"),

    # Fruits
    _ref("banana", 89, 1.1, 23, 0.3, 118, "piece"),
    _ref("apple", 52, 0.3, 14, 0.2, 182, "piece"),
    _ref("mango", 60, 0.8, 15, 0.4, 200, "piece"),
    _ref("guava", 68, 2.6, 14, 1, 100, "piece"),
)

UNIT_TOKENS = (
    "pieces", "piece", "cups", "cup", "bowls", "bowl", "glasses", "glass",
    "plates", "plate", "scoops", "scoop", "slices", "slice", "tbsp", "tsp",
    "kg", "g",
)

NUMBER_WORDS: Dict[str, float] = {
    "half a": 0.5,
    "half an": 0.5,
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "half": 0.5,
    "a": 1,
    "an": 1,
}

QUANTITY_WINDOW_CHARS = 20

_NUMBER_WORD_PATTERN = re.compile(
    r"\b(half an?|one|two|three|four|five|half|an|a)\b"
)

# Matched keys are blanked with this character in the working text
MASK_CHAR = "\x00"

# A number word never reaches across one of these to the next food
_ITEM_BOUNDARY = re.compile(r"[,;&+\n\x00]|\band\b|\bwith\b")

# "2", "1.5" or "1/2"; never starts inside another number
_AMOUNT = r"(?<![\d./])(\d+/[1-9]\d*|\d+(?:\.\d+)?)"


# =============================================================================
# HELPER: Extract quantity from text
# =============================================================================
def _key_pattern(key: str) -> str:
    """Regex for a food key, tolerant of extra whitespace inside multi-word keys."""
    return r"\s+".join(re.escape(word) for word in key.split())


def _to_amount(token: str) -> float:
    if "/" in token:
        numerator, denominator = token.split("/")
        return int(numerator) / int(denominator)
    return float(token)


def extract_quantity(text: str, key: str, position: int) -> Tuple[float, Optional[str]]:
    """
    Find how much of `key` the text describes.

    Returns (amount, unit). An explicit number ("2", "1.5", "1/2") directly
    before the key wins; otherwise the last number word in the window before
    `position`, cut at the previous separator or matched food; otherwise
    (1, None).
    """
    units = "|".join(UNIT_TOKENS)
    pattern = (
        rf"{_AMOUNT}\s*(?:({units})\b\s*)?(?:of\s+)?{_key_pattern(key)}"
    )
    match = re.search(pattern, text)
    if match:
        return _to_amount(match.group(1)), match.group(2)

    window = text[max(0, position - QUANTITY_WINDOW_CHARS):position]
    boundaries = list(_ITEM_BOUNDARY.finditer(window))
    if boundaries:
        window = window[boundaries[-1].end():]
    words = _NUMBER_WORD_PATTERN.findall(window)
    if words:
        return float(NUMBER_WORDS[words[-1]]), None

    return 1.0, None


def _grams_for(ref: FoodReference, amount: float, unit: Optional[str]) -> float:
    if unit == "g":
        return amount
    if unit == "kg":
        return amount * 1000
    return ref.serving_g * amount


def scale_food(ref: FoodReference, grams: float) -> ParsedFoodItem:
    """Scale a reference food to `grams`, rounding per display rules."""
    factor = grams / 100
    return ParsedFoodItem(
        name=ref.key,
        quantity_g=round(grams, 1),
        calories=int(round(ref.calories_per_100g * factor)),
        protein=round(ref.protein_per_100g * factor, 1),
        carbs=round(ref.carbs_per_100g * factor, 1),
        fat=round(ref.fat_per_100g * factor, 1),
        servings=round(grams / ref.serving_g, 2),
    )


# =============================================================================
# MAIN TOOL: parse_food_locally
# =============================================================================
def parse_food_locally(text: str) -> ParsedFoodResult:
    """
    Parse a meal description against the reference table.

    Never raises. Each reference key is matched at most once (first
    occurrence); once matched, its span is blanked so shorter keys inside it
    ("dal" in "dal fry") are not counted again.

    Args:
        text: Free-text meal description, e.g. "2 rotis, dal fry, glass of milk"

    Returns:
        ParsedFoodResult with confidence "medium" if any food matched, else "low".
    """
    working = (text or "").lower()
    items: List[ParsedFoodItem] = []
    total_calories = 0
    total_protein = total_carbs = total_fat = 0.0

    for ref in FOOD_REFERENCE:
        position = working.find(ref.key)
        if position < 0:
            continue

        amount, unit = extract_quantity(working, ref.key, position)
        working = working[:position] + MASK_CHAR * len(ref.key) + working[position + len(ref.key):]

        grams = _grams_for(ref, amount, unit)
        if round(grams, 1) <= 0:
            continue

        item = scale_food(ref, grams)
        items.append(item)

        total_calories += item.calories
        total_protein += item.protein
        total_carbs += item.carbs
        total_fat += item.fat

    return ParsedFoodResult(
        items=items,
        total_calories=total_calories,
        total_protein=round(total_protein, 1),
        total_carbs=round(total_carbs, 1),
        total_fat=round(total_fat, 1),
        confidence=Confidence.MEDIUM if items else Confidence.LOW,
        source=Source.LOCAL,
    )


# =============================================================================
# ADDITIONAL TOOLS: Reference lookups
# =============================================================================
def search_foods(query: str, limit: int = 10) -> List[FoodReference]:
    """Reference foods whose key contains `query` (all foods if query is blank)."""
    q = (query or "").lower().strip()
    if not q:
        return list(FOOD_REFERENCE[:limit])
    return [ref for ref in FOOD_REFERENCE if q in ref.key][:limit]


def get_food(key: str) -> Optional[FoodReference]:
    for ref in FOOD_REFERENCE:
        if ref.key == key:
            return ref
    return None


# =============================================================================
# ADDITIONAL TOOL: Calculate Daily Totals
# =============================================================================
def calculate_daily_nutrition(
    meals: List[Union[ParsedFoodResult, Dict[str, Any]]]
) -> Dict[str, Any]:
    """
    Calculate total daily nutrition from multiple parsed meals.

    Args:
        meals: ParsedFoodResult objects or dicts with an "items" list;
               totals are summed from the items

    Returns:
        Dictionary with daily totals and macro breakdown:
        - status: "success" or "error"
        - total_calories / total_protein_g / total_carbs_g / total_fat_g
        - meal_count: Number of meals with at least one item
        - macro_breakdown: Percentage of macro calories (protein/carbs/fat)
    """
    if not meals:
        return {
            "status": "error",
            "error_message": "No meals provided"
        }

    totals = {"calories": 0, "protein_g": 0.0, "carbs_g": 0.0, "fat_g": 0.0}
    valid_meals = 0

    for meal in meals:
        if isinstance(meal, dict):
            meal = ParsedFoodResult.model_validate(meal)
        if not meal.items:
            continue
        for item in meal.items:
            totals["calories"] += item.calories
            totals["protein_g"] += item.protein
            totals["carbs_g"] += item.carbs
            totals["fat_g"] += item.fat
        valid_meals += 1

    if valid_meals == 0:
        return {
            "status": "error",
            "error_message": "No valid meals to calculate"
        }

    # 4/4/9 kcal per gram
    total_macro_cals = (
        totals["protein_g"] * 4 +
        totals["carbs_g"] * 4 +
        totals["fat_g"] * 9
    )

    if total_macro_cals > 0:
        macro_breakdown = {
            "protein_percent": round((totals["protein_g"] * 4 / total_macro_cals) * 100, 1),
            "carbs_percent": round((totals["carbs_g"] * 4 / total_macro_cals) * 100, 1),
            "fat_percent": round((totals["fat_g"] * 9 / total_macro_cals) * 100, 1)
        }
    else:
        macro_breakdown = {"protein_percent": 0, "carbs_percent": 0, "fat_percent": 0}

    return {
        "status": "success",
        "total_calories": totals["calories"],
        "total_protein_g": round(totals["protein_g"], 1),
        "total_carbs_g": round(totals["carbs_g"], 1),
        "total_fat_g": round(totals["fat_g"], 1),
        "meal_count": valid_meals,
        "macro_breakdown": macro_breakdown,
    }


# =============================================================================
# EXPORTS
# =============================================================================
__all__ = [
    "parse_food_locally",
    "extract_quantity",
    "scale_food",
    "search_foods",
    "get_food",
    "calculate_daily_nutrition",
    "FoodReference",
    "ParsedFoodItem",
    "ParsedFoodResult",
    "FOOD_REFERENCE",
]
