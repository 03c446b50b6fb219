# unit_tests/test_tool_nutrition_parser.py
"""
Unit Tests for the Local Nutrition Parser
=========================================
Run with: python -m pytest unit_tests/test_tool_nutrition_parser.py -v
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from tools.nutrition_parser import (
    FOOD_REFERENCE,
    calculate_daily_nutrition,
    extract_quantity,
    get_food,
    parse_food_locally,
    scale_food,
    search_foods,
)
from tools.schemas import Confidence, Source


def _item(result, name):
    return next(item for item in result.items if item.name == name)


# =============================================================================
# TESTS
# =============================================================================
def test_indian_meal_end_to_end():
    print("\n" + "=" * 60)
    print("TEST 1: '2 rotis, dal fry, glass of milk'")
    print("=" * 60)

    result = parse_food_locally("2 rotis, dal fry, glass of milk")
    print(f"Output: {result.model_dump()}")

    assert [item.name for item in result.items] == ["roti", "dal fry", "milk"]
    assert result.confidence == Confidence.MEDIUM
    assert result.source == Source.LOCAL

    roti = _item(result, "roti")
    assert roti.quantity_g == 60
    assert roti.servings == 2
    assert roti.calories == 178
    assert roti.protein == 5.9
    assert roti.carbs == 36.5
    assert roti.fat == 2.2

    assert _item(result, "dal fry").quantity_g == 200
    assert _item(result, "milk").quantity_g == 240
    assert _item(result, "milk").calories == 101
    print("✅ Three items, no double-counted dal")


def test_totals_equal_item_sums():
    print("\n" + "=" * 60)
    print("TEST 2: Totals match items")
    print("=" * 60)

    result = parse_food_locally("2 rotis, dal fry, glass of milk")

    assert result.total_calories == sum(i.calories for i in result.items) == 539
    assert result.total_protein == pytest.approx(28.1)
    assert result.total_carbs == pytest.approx(84.5)
    assert result.total_fat == pytest.approx(11.6)
    print("✅ Totals consistent")


def test_every_reference_key_parses_to_one_serving():
    print("\n" + "=" * 60)
    print("TEST 3: Bare key -> one reference serving")
    print("=" * 60)

    for ref in FOOD_REFERENCE:
        result = parse_food_locally(ref.key)
        assert len(result.items) == 1, ref.key
        item = result.items[0]
        expected = scale_food(ref, ref.serving_g)
        assert item.name == ref.key
        assert item.quantity_g == ref.serving_g
        assert item.calories == expected.calories
        assert item.protein == expected.protein
    print(f"✅ {len(FOOD_REFERENCE)} foods checked")


@pytest.mark.parametrize("quantity", [1, 2, 3, 5])
def test_numeric_quantity_scales_linearly(quantity):
    ref = get_food("idli")
    result = parse_food_locally(f"{quantity} idli")

    item = result.items[0]
    assert item.quantity_g == ref.serving_g * quantity
    assert item.calories == round(ref.calories_per_100g * ref.serving_g * quantity / 100)


def test_number_words_and_half():
    print("\n" + "=" * 60)
    print("TEST 4: Number words")
    print("=" * 60)

    three = parse_food_locally("three eggs for breakfast")
    assert _item(three, "egg").quantity_g == 150

    half = parse_food_locally("half a banana")
    banana = _item(half, "banana")
    assert banana.servings == 0.5
    assert banana.quantity_g == 59
    print("✅ 'three' and 'half a' understood")


def test_article_inside_word_is_not_a_quantity():
    # the "a" in "glass" must not be read as a number word
    amount, unit = extract_quantity("glass of milk", "milk", 9)
    assert amount == 1.0
    assert unit is None


@pytest.mark.parametrize("text", [
    "two eggs and banana",
    "two eggs, banana",
    "two eggs with banana",
    "two eggs banana",
])
def test_number_word_belongs_to_one_food(text):
    result = parse_food_locally(text)

    assert _item(result, "egg").servings == 2
    assert _item(result, "banana").servings == 1


def test_fractions():
    rice = get_food("rice")

    half_cup = _item(parse_food_locally("1/2 cup rice"), "rice")
    assert half_cup.servings == 0.5
    assert half_cup.quantity_g == round(rice.serving_g / 2, 1)

    assert _item(parse_food_locally("1.5 cups rice"), "rice").servings == 1.5
    assert _item(parse_food_locally("12 idli"), "idli").servings == 12


def test_units_and_grams():
    print("\n" + "=" * 60)
    print("TEST 5: Units")
    print("=" * 60)

    glasses = parse_food_locally("2 glasses of milk")
    assert _item(glasses, "milk").quantity_g == 480

    grams = parse_food_locally("200g paneer and rice")
    paneer = _item(grams, "paneer")
    assert paneer.quantity_g == 200
    assert paneer.calories == 530
    assert paneer.protein == 36
    assert _item(grams, "rice").quantity_g == 150
    print("✅ glasses and grams handled")


def test_specific_keys_win_over_prefixes():
    result = parse_food_locally("brown rice with egg white")
    assert [item.name for item in result.items] == ["brown rice", "egg white"]


def test_gibberish_returns_low_confidence():
    result = parse_food_locally("qwerty zxcv lorem")

    assert result.items == []
    assert result.total_calories == 0
    assert result.confidence == Confidence.LOW
    assert result.source == Source.LOCAL


def test_parser_is_pure():
    text = "1 bowl dal, 2 roti, curd"
    assert parse_food_locally(text).model_dump() == parse_food_locally(text).model_dump()


def test_search_foods():
    names = [f.key for f in search_foods("dal")]
    assert names == ["dal fry", "toor dal", "moong dal", "chana dal", "masoor dal", "dal"]
    assert len(search_foods("", limit=5)) == 5
    assert search_foods("pizza") == []
    assert get_food("pizza") is None


def test_calculate_daily_nutrition():
    print("\n" + "=" * 60)
    print("TEST 6: Daily totals")
    print("=" * 60)

    breakfast = parse_food_locally("2 egg")
    lunch = parse_food_locally("rice and dal")
    empty = parse_food_locally("nothing here")

    daily = calculate_daily_nutrition([breakfast, lunch.model_dump(), empty])
    print(f"Daily: {daily}")

    assert daily["status"] == "success"
    assert daily["meal_count"] == 2
    assert daily["total_calories"] == breakfast.total_calories + lunch.total_calories
    breakdown = daily["macro_breakdown"]
    assert sum(breakdown.values()) == pytest.approx(100, abs=0.5)

    assert calculate_daily_nutrition([])["status"] == "error"
    assert calculate_daily_nutrition([empty])["status"] == "error"
    print("✅ Daily totals calculated")


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
