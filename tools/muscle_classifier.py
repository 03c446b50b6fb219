# tools/muscle_classifier.py
"""
IronLog — Muscle Group Classifier
=================================
Keyword inference from an exercise name to one muscle group.

The keyword table is an ordered list, first match wins. Specific groups are
declared before the broad ones they overlap with (hamstrings/quads/glutes/
calves before the "legs" catch-all, traps/lats before "back").
"""

from enum import Enum
from typing import List, Tuple


class MuscleGroup(str, Enum):
    CHEST = "chest"
    BACK = "back"
    SHOULDERS = "shoulders"
    BICEPS = "biceps"
    TRICEPS = "triceps"
    LEGS = "legs"
    QUADS = "quads"
    HAMSTRINGS = "hamstrings"
    GLUTES = "glutes"
    CALVES = "calves"
    CORE = "core"
    FOREARMS = "forearms"
    TRAPS = "traps"
    LATS = "lats"
    FULL_BODY = "full_body"


# =============================================================================
# KEYWORD TABLE (declaration order == match priority)
# =============================================================================
MUSCLE_KEYWORDS: List[Tuple[MuscleGroup, Tuple[str, ...]]] = [
    (MuscleGroup.FULL_BODY, ("clean", "snatch", "thruster", "burpee", "full body", "turkish get")),
    (MuscleGroup.FOREARMS, ("forearm", "wrist", "reverse curl", "farmer", "plate pinch")),
    (MuscleGroup.HAMSTRINGS, ("hamstring", "leg curl", "rdl", "romanian", "stiff leg", "good morning", "nordic")),
    (MuscleGroup.CALVES, ("calf", "calves")),
    (MuscleGroup.GLUTES, ("glute", "hip thrust", "bridge", "sumo", "abductor")),
    (MuscleGroup.QUADS, ("quad", "leg extension", "front squat", "hack squat", "back squat", "bulgarian", "sissy")),
    (MuscleGroup.TRAPS, ("shrug", "trap", "face pull", "upright row")),
    (MuscleGroup.LATS, ("lat pull", "lats", "pulldown", "pull down", "pull-up", "pullup", "pull up",
                        "chin-up", "chinup", "chin up", "straight arm")),
    (MuscleGroup.TRICEPS, ("tricep", "pushdown", "push down", "skull", "dip", "close grip",
                           "overhead extension", "kickback", "french press")),
    (MuscleGroup.BICEPS, ("bicep", "curl", "hammer", "preacher")),
    (MuscleGroup.CORE, ("plank", "crunch", "abs", "sit-up", "sit up", "situp", "russian twist", "core",
                        "hollow", "leg raise", "ab wheel", "rollout", "mountain climber", "dead bug")),
    (MuscleGroup.SHOULDERS, ("shoulder", "overhead press", "military", "ohp", "lateral raise",
                             "front raise", "rear delt", "reverse fly", "delt", "arnold")),
    (MuscleGroup.CHEST, ("bench", "chest", "pec", "fly", "flye", "push-up", "push up", "pushup",
                         "incline", "decline", "crossover")),
    (MuscleGroup.BACK, ("row", "deadlift", "back", "rhomboid", "hyperextension", "pullover", "t-bar")),
    (MuscleGroup.LEGS, ("squat", "lunge", "leg press", "step-up", "step up", "wall sit", "leg")),
]

MUSCLE_LABELS = {
    MuscleGroup.CHEST: "Chest",
    MuscleGroup.BACK: "Back",
    MuscleGroup.SHOULDERS: "Shoulders",
    MuscleGroup.BICEPS: "Biceps",
    MuscleGroup.TRICEPS: "Triceps",
    MuscleGroup.LEGS: "Legs",
    MuscleGroup.QUADS: "Quads",
    MuscleGroup.HAMSTRINGS: "Hamstrings",
    MuscleGroup.GLUTES: "Glutes",
    MuscleGroup.CALVES: "Calves",
    MuscleGroup.CORE: "Core",
    MuscleGroup.FOREARMS: "Forearms",
    MuscleGroup.TRAPS: "Traps",
    MuscleGroup.LATS: "Lats",
    MuscleGroup.FULL_BODY: "Full Body",
}


def infer_muscle_group(exercise_name: str) -> MuscleGroup:
    """Return the first muscle group whose keyword appears in the name, else full_body."""
    lower = (exercise_name or "").lower()
    for group, keywords in MUSCLE_KEYWORDS:
        if any(kw in lower for kw in keywords):
            return group
    return MuscleGroup.FULL_BODY


def muscle_label(group: str) -> str:
    try:
        return MUSCLE_LABELS[MuscleGroup(group)]
    except ValueError:
        return group


__all__ = [
    "MuscleGroup",
    "MUSCLE_KEYWORDS",
    "infer_muscle_group",
    "muscle_label",
]
