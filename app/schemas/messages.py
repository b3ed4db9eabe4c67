from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from app.core.errors import ErrorInfo

RequestType = Literal["CALCULATE_SCORE", "GENERATE_FEEDBACK", "EXTRACT_KEYWORDS", "GET_PERFORMANCE", "CLEAR_CACHE"]
ResponseType = Literal[
    "SCORE_CALCULATED",
    "FEEDBACK_GENERATED",
    "KEYWORDS_EXTRACTED",
    "PERFORMANCE_METRICS",
    "CACHE_CLEARED",
    "ERROR",
]
RESPONSE_TYPES: dict[str, str] = {
    "CALCULATE_SCORE": "SCORE_CALCULATED",
    "GENERATE_FEEDBACK": "FEEDBACK_GENERATED",
    "EXTRACT_KEYWORDS": "KEYWORDS_EXTRACTED",
    "GET_PERFORMANCE": "PERFORMANCE_METRICS",
    "CLEAR_CACHE": "CACHE_CLEARED",
}


class ScoringMessage(BaseModel):
    type: str = Field(min_length=1, max_length=64)
    request_id: str = Field(min_length=1, max_length=128)
    payload: dict[str, Any] = Field(default_factory=dict)

    @field_validator("type")
    @classmethod
    def _normalize_type(cls, value: str) -> str:
        return value.strip().upper()


class PerformanceInfo(BaseModel):
    duration_ms: float = Field(default=0.0, ge=0.0)
    cached: bool = False


class ScoringMessageResult(BaseModel):
    type: ResponseType
    request_id: str
    payload: dict[str, Any] = Field(default_factory=dict)
    error: ErrorInfo | None = None
    performance: PerformanceInfo = Field(default_factory=PerformanceInfo)
