"""
IronLog — FastAPI Backend
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
import uvicorn

from agents.analyzer_agent import get_progress_alerts
from agents.extraction_agent import parse_food_text_async, parse_workout_text_async
from agents.nutrition_agent import get_daily_nutrition_summary, log_meal
from agents.planner_agent import activate_program, get_program, import_program
from agents.providers import provider_status
from memory.record_store import JsonRecordStore
from memory.session_manager import AppSessionState
from tools.nutrition_parser import search_foods
from tools.schemas import EmptyInputError
from tools.training_calculator import (
    analyze_progressive_overload,
    calculate_one_rep_max,
    calculate_recovery_score,
    detect_plateau,
    recovery_label,
)

API_VERSION = "1.0.0"


# =============================================================================
# PYDANTIC MODELS
# =============================================================================
class ParseTextRequest(BaseModel):
    text: Optional[str] = None


class NutritionLogRequest(BaseModel):
    meal_description: Optional[str] = None
    meal_type: Optional[str] = None
    date: Optional[str] = None


class ProgramImportRequest(BaseModel):
    text: Optional[str] = None
    name: Optional[str] = None


class RecoveryRequest(BaseModel):
    sleep_hours: float = Field(..., ge=0, le=24)
    sleep_quality: int = Field(..., ge=1, le=5)
    stress_level: int = Field(..., ge=1, le=5, description="5 = most stressed")
    mood: int = Field(..., ge=1, le=5)
    soreness: int = Field(..., ge=1, le=5, description="5 = most sore")
    energy_level: int = Field(..., ge=1, le=5)


class OneRepMaxRequest(BaseModel):
    weight: float = Field(..., gt=0)
    reps: int = Field(..., ge=1)
    unit: str = "kg"


class SetInput(BaseModel):
    weight: float = Field(..., ge=0)
    reps: int = Field(..., ge=0)
    target_reps_min: int = Field(..., ge=1)
    target_reps_max: int = Field(..., ge=1)
    rpe: Optional[float] = Field(None, ge=1, le=10)


class OverloadRequest(BaseModel):
    recent_sets: List[SetInput] = []
    weekly_strength_trend: List[float] = []


class BodyWeightSample(BaseModel):
    date: str
    weight_kg: float = Field(..., gt=0)


class PlateauRequest(BaseModel):
    weights: List[BodyWeightSample]


# =============================================================================
# APP SETUP
# =============================================================================
app = FastAPI(
    title="IronLog API",
    version=API_VERSION,
    description="Fitness text parsing and tracking backend",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# DEPENDENCIES
# =============================================================================
_STORE: Optional[JsonRecordStore] = None
_SESSION_STATE: Optional[AppSessionState] = None


def get_store() -> JsonRecordStore:
    global _STORE
    if _STORE is None:
        _STORE = JsonRecordStore()
    return _STORE


def get_session_state() -> AppSessionState:
    global _SESSION_STATE
    if _SESSION_STATE is None:
        _SESSION_STATE = AppSessionState()
    return _SESSION_STATE


def _raise_on_error(result: Dict[str, Any]) -> Dict[str, Any]:
    if result.get("status") == "error":
        raise HTTPException(status_code=400, detail=result["error_message"])
    return result


# =============================================================================
# ENDPOINTS
# =============================================================================

# -----------------------------------------------------------------------------
# Health
# -----------------------------------------------------------------------------
@app.get("/api/v1/health")
async def api_health():
    """Which parsing tiers are available."""
    return {
        "status": "online",
        "version": API_VERSION,
        "tiers": {"local": True, **provider_status()},
        "timestamp": datetime.now().isoformat(),
    }


# -----------------------------------------------------------------------------
# AI parsing
# -----------------------------------------------------------------------------
@app.post("/api/ai/parse-food")
async def parse_food(request: ParseTextRequest):
    try:
        result = await parse_food_text_async(request.text)
    except EmptyInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return result.model_dump(mode="json")


@app.post("/api/ai/parse-workout")
async def parse_workout(request: ParseTextRequest):
    try:
        result = await parse_workout_text_async(request.text)
    except EmptyInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return result.model_dump(mode="json")


# -----------------------------------------------------------------------------
# Foods & Nutrition
# -----------------------------------------------------------------------------
@app.get("/api/v1/foods/search")
async def foods_search(q: str = Query(""), limit: int = Query(10, ge=1, le=50)):
    return {"foods": [food.model_dump() for food in search_foods(q, limit)]}


@app.post("/api/v1/nutrition/log")
def log_nutrition(request: NutritionLogRequest, store: JsonRecordStore = Depends(get_store)):
    """Log a meal."""
    return _raise_on_error(
        log_meal(store, request.meal_description, request.meal_type, request.date)
    )


@app.get("/api/v1/nutrition/summary")
def nutrition_summary(
    date: Optional[str] = Query(None),
    store: JsonRecordStore = Depends(get_store),
    state: AppSessionState = Depends(get_session_state),
):
    """Get daily nutrition summary."""
    return get_daily_nutrition_summary(store, date=date, goal=state.nutrition_goal)


# -----------------------------------------------------------------------------
# Programs
# -----------------------------------------------------------------------------
@app.post("/api/v1/program/import")
def program_import(request: ProgramImportRequest, store: JsonRecordStore = Depends(get_store)):
    return _raise_on_error(import_program(store, request.text, request.name))


@app.get("/api/v1/program/{program_id}")
def program_detail(program_id: str, store: JsonRecordStore = Depends(get_store)):
    program = get_program(store, program_id)
    if program is None:
        raise HTTPException(status_code=404, detail="Program not found")
    return program


@app.post("/api/v1/program/{program_id}/activate")
def program_activate(
    program_id: str,
    store: JsonRecordStore = Depends(get_store),
    state: AppSessionState = Depends(get_session_state),
):
    result = activate_program(store, program_id, session_state=state)
    if result["status"] == "error":
        raise HTTPException(status_code=404, detail=result["error_message"])
    state.save()
    return result


# -----------------------------------------------------------------------------
# Calculators
# -----------------------------------------------------------------------------
@app.post("/api/v1/recovery/score")
async def recovery_score(request: RecoveryRequest):
    score = calculate_recovery_score(**request.model_dump())
    return {"score": score, "label": recovery_label(score)}


@app.post("/api/v1/strength/one-rep-max")
async def one_rep_max(request: OneRepMaxRequest):
    return _raise_on_error(calculate_one_rep_max(request.weight, request.reps, request.unit))


@app.post("/api/v1/progress/overload")
async def progress_overload(request: OverloadRequest):
    return analyze_progressive_overload(
        [s.model_dump() for s in request.recent_sets],
        request.weekly_strength_trend,
    )


@app.get("/api/v1/progress/alerts")
def progress_alerts(store: JsonRecordStore = Depends(get_store)):
    return {"alerts": get_progress_alerts(store)}


@app.post("/api/v1/body/plateau")
async def body_plateau(request: PlateauRequest):
    return detect_plateau([w.model_dump() for w in request.weights])


# =============================================================================
# MAIN
# =============================================================================
if __name__ == "__main__":
    status = provider_status()
    print("\n" + "=" * 50)
    print(f"🚀 IRONLOG API v{API_VERSION}")
    print("=" * 50)
    print("📊 Parsing tiers:")
    print("   • Local:  ✅")
    print(f"   • Gemini: {'✅' if status['gemini'] else '❌'}")
    print(f"   • Groq:   {'✅' if status['groq'] else '❌'}")
    print("=" * 50)
    print("🔗 API Docs: http://localhost:8000/docs")
    print("=" * 50 + "\n")
    uvicorn.run(app, host="0.0.0.0", port=8000)
