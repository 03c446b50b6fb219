# tools/workout_parser.py
"""
IronLog — Local Workout Program Parser
======================================
Parses a multi-day program written as plain text:

    Monday: Chest + Triceps
    - Bench Press 4x8
    - Incline DB Press 3x8-12

    Push Day:
    Overhead Press 3x10

Lines that are not "NAME SETSxREPS" are dropped silently; days without a
single parsed exercise are dropped too.
"""

import re
from typing import List, Optional

from pydantic import BaseModel, Field

from tools.muscle_classifier import MuscleGroup, infer_muscle_group
from tools.schemas import Confidence, Source


# =============================================================================
# VALIDATION SCHEMA
# =============================================================================
class ParsedExercise(BaseModel):
    name: str = Field(..., min_length=1)
    sets: int = Field(..., gt=0)
    reps: str = Field(..., description="e.g. '10' or '8-12'")
    muscle_group: MuscleGroup


class ParsedProgramDay(BaseModel):
    day_name: str
    focus: Optional[str] = None
    exercises: List[ParsedExercise] = Field(default_factory=list)


class ParsedWorkoutProgram(BaseModel):
    days: List[ParsedProgramDay] = Field(default_factory=list)
    confidence: Confidence = Confidence.LOW
    source: Source = Source.LOCAL


# =============================================================================
# PATTERNS
# =============================================================================
# Split before any line that looks like "<label>: ..." so the header stays with its body
DAY_SPLIT = re.compile(r"\n(?=\w.*:)")
DAY_HEADER = re.compile(r"^(.+?):\s*(.*)$")
BULLET = re.compile(r"^[-•*]\s*")
EXERCISE_LINE = re.compile(r"^(.+?)\s+(\d+)\s*[xX×]\s*([\d-]+)\s*$")


def program_confidence(day_count: int) -> Confidence:
    if day_count >= 2:
        return Confidence.HIGH
    if day_count == 1:
        return Confidence.MEDIUM
    return Confidence.LOW


def parse_exercise_line(line: str) -> Optional[ParsedExercise]:
    """Parse "- Bench Press 4x8" into an exercise, or None if it doesn't fit."""
    line = BULLET.sub("", line.strip())
    match = EXERCISE_LINE.match(line)
    if not match:
        return None

    name = match.group(1).strip()
    sets = int(match.group(2))
    if not name or sets <= 0:
        return None

    return ParsedExercise(
        name=name,
        sets=sets,
        reps=match.group(3),
        muscle_group=infer_muscle_group(name),
    )


# =============================================================================
# MAIN TOOL: parse_workout_locally
# =============================================================================
def parse_workout_locally(text: str) -> ParsedWorkoutProgram:
    """
    Parse a plain-text training program into days and exercises.

    Never raises. Confidence is "high" for two or more days, "medium" for one
    and "low" when nothing could be parsed.
    """
    days: List[ParsedProgramDay] = []
    normalized = (text or "").replace("\r\n", "\n")

    for block in DAY_SPLIT.split(normalized):
        lines = [line.strip() for line in block.strip().split("\n") if line.strip()]
        if not lines:
            continue

        header = DAY_HEADER.match(lines[0])
        if not header:
            continue

        exercises = []
        for line in lines[1:]:
            exercise = parse_exercise_line(line)
            if exercise is not None:
                exercises.append(exercise)

        if exercises:
            days.append(ParsedProgramDay(
                day_name=header.group(1).strip(),
                focus=header.group(2).strip() or None,
                exercises=exercises,
            ))

    return ParsedWorkoutProgram(
        days=days,
        confidence=program_confidence(len(days)),
        source=Source.LOCAL,
    )


__all__ = [
    "parse_workout_locally",
    "parse_exercise_line",
    "program_confidence",
    "ParsedExercise",
    "ParsedProgramDay",
    "ParsedWorkoutProgram",
]
