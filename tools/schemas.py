# tools/schemas.py
"""
IronLog — Shared Result Schemas
===============================
Labels and envelopes shared by the food and workout parsing pipelines.
"""

from enum import Enum
from typing import Generic, List, TypeVar

from pydantic import BaseModel, Field


class Confidence(str, Enum):
    """Coarse reliability label attached to every parse result."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Source(str, Enum):
    """Tier that produced a parse result."""
    LOCAL = "local"
    GEMINI = "gemini"
    GROQ = "groq"


DataT = TypeVar("DataT")


class AIResponse(BaseModel, Generic[DataT]):
    """Tagged result handed back to callers of the parsing entry points."""
    data: DataT
    source: Source
    confidence: Confidence
    diagnostics: List[str] = Field(default_factory=list)


class EmptyInputError(ValueError):
    """Raised when a parse entry point receives empty or whitespace-only text."""


__all__ = [
    "Confidence",
    "Source",
    "AIResponse",
    "EmptyInputError",
]
