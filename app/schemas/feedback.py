from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from .scoring import CandidateMetadata

FeedbackSeverity = Literal["critical", "warning", "improvement"]
FeedbackCategory = Literal["missing_keywords", "action_verbs", "quantification", "word_usage", "formatting"]
SEVERITY_LEVELS: tuple[str, ...] = ("critical", "warning", "improvement")


class Suggestion(BaseModel):
    category: FeedbackCategory
    severity: FeedbackSeverity
    title: str = Field(min_length=1, max_length=200)
    message: str
    actionable_advice: str
    metadata: dict[str, Any] = Field(default_factory=dict)


class FeedbackStatistics(BaseModel):
    total: int = Field(default=0, ge=0)
    critical: int = Field(default=0, ge=0)
    warning: int = Field(default=0, ge=0)
    improvement: int = Field(default=0, ge=0)


class FeedbackResult(BaseModel):
    suggestions: list[Suggestion] = Field(default_factory=list)
    by_severity: dict[str, list[Suggestion]] = Field(
        default_factory=lambda: {level: [] for level in SEVERITY_LEVELS}
    )
    summary: str
    statistics: FeedbackStatistics = Field(default_factory=FeedbackStatistics)
    details: dict[str, Any] = Field(default_factory=dict)


class FeedbackRequest(BaseModel):
    resume_text: str = Field(default="", max_length=100000)
    job_description: str = Field(default="", max_length=100000)
    metadata: CandidateMetadata | None = None
    category: FeedbackCategory | None = None
