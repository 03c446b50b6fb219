# agents/extraction_agent.py
"""
IronLog — Text Extraction Agent
===============================
Public entry points that turn free text into structured records:

  - parse_food_text("2 rotis, dal fry, glass of milk")
  - parse_workout_text("Monday: Push\\nBench Press 4x8")

Local parsers run first; remote providers are only consulted when the local
result is "low" confidence. The async variants run the same call in a worker
thread so an event loop (FastAPI, etc.) is never blocked by a provider.
"""

import asyncio
from typing import Any, List, Optional

from agents.ai_resolver import TieredResolver
from tools.muscle_classifier import MuscleGroup
from tools.nutrition_parser import ParsedFoodResult, parse_food_locally
from tools.response_validator import validate_food_payload, validate_workout_payload
from tools.schemas import AIResponse, EmptyInputError
from tools.workout_parser import ParsedWorkoutProgram, parse_workout_locally


# =============================================================================
# PROMPTS
# =============================================================================
def build_food_prompt(text: str) -> str:
    return f"""You are a nutrition expert for Indian food. Parse this meal description into macros.

Meal: "{text}"

Return ONLY valid JSON:
{{
  "items": [
    {{
      "name": "food name",
      "quantity_g": 150,
      "calories": 200,
      "protein": 10,
      "carbs": 30,
      "fat": 5
    }}
  ],
  "total_calories": 200,
  "total_protein": 10,
  "total_carbs": 30,
  "total_fat": 5
}}

Use standard Indian food nutrition values. Be precise."""


def build_workout_prompt(text: str) -> str:
    groups = ", ".join(group.value for group in MuscleGroup)
    return f"""Parse this gym workout program text into a structured JSON format.

Text:
{text}

Return ONLY valid JSON with this exact structure:
{{
  "days": [
    {{
      "day_name": "Monday",
      "focus": "Chest + Triceps",
      "exercises": [
        {{
          "name": "Bench Press",
          "sets": 4,
          "reps": "8",
          "muscle_group": "chest"
        }}
      ]
    }}
  ]
}}

muscle_group must be one of: {groups}"""


# =============================================================================
# HELPERS
# =============================================================================
def _require_text(text: Optional[str]) -> str:
    if text is None or not text.strip():
        raise EmptyInputError("Text is empty")
    return text


def food_resolver(providers: Optional[List[Any]] = None) -> TieredResolver:
    return TieredResolver("food", build_food_prompt, validate_food_payload, providers)


def workout_resolver(providers: Optional[List[Any]] = None) -> TieredResolver:
    return TieredResolver("workout", build_workout_prompt, validate_workout_payload, providers)


# =============================================================================
# TOOL: PARSE FOOD TEXT
# =============================================================================
def parse_food_text(text: str, providers: Optional[List[Any]] = None) -> AIResponse:
    """
    Parse a meal description into an itemized macro breakdown.

    Args:
        text: e.g. "2 rotis, dal fry, glass of milk"
        providers: Override the configured provider list (tests, batch jobs)

    Returns:
        AIResponse whose `data` is a ParsedFoodResult

    Raises:
        EmptyInputError: if text is empty or whitespace
    """
    text = _require_text(text)
    local: ParsedFoodResult = parse_food_locally(text)
    return food_resolver(providers).resolve(text, local)


async def parse_food_text_async(text: str, providers: Optional[List[Any]] = None) -> AIResponse:
    _require_text(text)
    return await asyncio.to_thread(parse_food_text, text, providers)


# =============================================================================
# TOOL: PARSE WORKOUT TEXT
# =============================================================================
def parse_workout_text(text: str, providers: Optional[List[Any]] = None) -> AIResponse:
    """
    Parse a multi-day program into days, exercises and muscle groups.

    Returns:
        AIResponse whose `data` is a ParsedWorkoutProgram

    Raises:
        EmptyInputError: if text is empty or whitespace
    """
    text = _require_text(text)
    local: ParsedWorkoutProgram = parse_workout_locally(text)
    return workout_resolver(providers).resolve(text, local)


async def parse_workout_text_async(text: str, providers: Optional[List[Any]] = None) -> AIResponse:
    _require_text(text)
    return await asyncio.to_thread(parse_workout_text, text, providers)


__all__ = [
    "parse_food_text",
    "parse_food_text_async",
    "parse_workout_text",
    "parse_workout_text_async",
    "build_food_prompt",
    "build_workout_prompt",
]
