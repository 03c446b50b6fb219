"""
IronLog — Session State Manager
===============================
- ActiveWorkoutSession: the workout being logged right now
- AppSessionState: app-wide state with an explicit whitelist of what is
  written to disk and survives a restart
"""

import json
import os
from datetime import datetime
from typing import Any, Dict, List, Optional

from memory.record_store import DATA_DIR

# =============================================================================
# CONFIGURATION
# =============================================================================
STATE_FILE = os.path.join(DATA_DIR, "session_state.json")

MAX_ALERTS = 10

DEFAULT_NUTRITION_GOAL = {
    "calories": 2000,
    "protein": 150,
    "carbs": 200,
    "fat": 65,
    "fiber": 30,
}


# =============================================================================
# ACTIVE WORKOUT
# =============================================================================
class ActiveWorkoutSession:
    """Sets logged during one gym session, before they are saved as a workout log."""

    def __init__(self):
        self.reset()

    def reset(self):
        self.is_active = False
        self.log: Dict[str, Any] = {}
        self.sets: List[Dict[str, Any]] = []
        self.start_time: Optional[str] = None

    def start(self, program_day_id: Optional[str] = None, day_name: Optional[str] = None):
        now = datetime.now()
        self.is_active = True
        self.log = {
            "program_day_id": program_day_id,
            "day_name": day_name,
            "date": now.date().isoformat(),
        }
        self.sets = []
        self.start_time = now.isoformat()

    def add_set(self, workout_set: Dict[str, Any]):
        self.sets.append(dict(workout_set))

    def update_set(self, index: int, changes: Dict[str, Any]):
        if 0 <= index < len(self.sets):
            self.sets[index] = {**self.sets[index], **changes}

    def remove_set(self, index: int):
        self.sets = [s for i, s in enumerate(self.sets) if i != index]

    def finish(self) -> Optional[Dict[str, Any]]:
        """
        Close the session and return the workout log.

        Returns None (and keeps the session open) when nothing was logged.
        """
        if not self.is_active or not self.sets:
            return None

        started = datetime.fromisoformat(self.start_time) if self.start_time else datetime.now()
        duration = round((datetime.now() - started).total_seconds() / 60)

        workout_log = {
            "date": self.log.get("date") or datetime.now().date().isoformat(),
            "program_day_id": self.log.get("program_day_id"),
            "day_name": self.log.get("day_name"),
            "duration_minutes": duration,
            "sets": list(self.sets),
        }
        self.reset()
        return workout_log

    def discard(self):
        self.reset()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_active": self.is_active,
            "log": self.log,
            "sets": self.sets,
            "start_time": self.start_time,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ActiveWorkoutSession":
        session = cls()
        if data:
            session.is_active = bool(data.get("is_active"))
            session.log = dict(data.get("log") or {})
            session.sets = list(data.get("sets") or [])
            session.start_time = data.get("start_time")
        return session


# =============================================================================
# APP STATE
# =============================================================================
class AppSessionState:
    """App-wide state. Only PERSISTED_FIELDS are written to disk."""

    PERSISTED_FIELDS = ("nutrition_goal", "active_program_id", "alerts", "active_workout")

    def __init__(self, filepath: Optional[str] = None):
        self.filepath = filepath or STATE_FILE
        self.nutrition_goal: Dict[str, float] = dict(DEFAULT_NUTRITION_GOAL)
        self.active_program_id: Optional[str] = None
        self.alerts: List[Dict[str, Any]] = []
        self.active_workout = ActiveWorkoutSession()
        # Not persisted: rebuilt from the record store on demand
        self.today_nutrition: Dict[str, Any] = {}
        self._load()

    def _load(self):
        if not os.path.exists(self.filepath):
            return
        try:
            with open(self.filepath, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            print(f"⚠️ Session state unreadable, using defaults: {e}")
            return
        if not isinstance(data, dict):
            return

        self.nutrition_goal = data.get("nutrition_goal") or dict(DEFAULT_NUTRITION_GOAL)
        self.active_program_id = data.get("active_program_id")
        self.alerts = list(data.get("alerts") or [])[:MAX_ALERTS]
        self.active_workout = ActiveWorkoutSession.from_dict(data.get("active_workout"))

    def to_persisted(self) -> Dict[str, Any]:
        data = {}
        for field in self.PERSISTED_FIELDS:
            value = getattr(self, field)
            if isinstance(value, ActiveWorkoutSession):
                value = value.to_dict()
            data[field] = value
        return data

    def save(self):
        """Write the persisted fields to disk."""
        directory = os.path.dirname(self.filepath)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.filepath, "w", encoding="utf-8") as f:
            json.dump(self.to_persisted(), f, indent=2, default=str)

    def set_nutrition_goal(self, goal: Dict[str, float]):
        self.nutrition_goal = dict(goal)

    def set_active_program(self, program_id: Optional[str]):
        self.active_program_id = program_id

    def add_alert(self, alert: Dict[str, Any]):
        """Newest first, capped at MAX_ALERTS."""
        self.alerts = [alert, *self.alerts][:MAX_ALERTS]

    def dismiss_alert(self, index: int):
        self.alerts = [a for i, a in enumerate(self.alerts) if i != index]


__all__ = [
    "ActiveWorkoutSession",
    "AppSessionState",
    "DEFAULT_NUTRITION_GOAL",
    "MAX_ALERTS",
]
