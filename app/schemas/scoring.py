from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

CategoryName = Literal["keyword_match", "skill_alignment", "formatting", "impact_metrics", "readability"]
Tier = Literal["excellent", "good", "moderate", "low"]
CATEGORY_NAMES: tuple[str, ...] = ("keyword_match", "skill_alignment", "formatting", "impact_metrics", "readability")


class CandidateMetadata(BaseModel):
    format: str | None = Field(default=None, max_length=20)
    filename: str | None = Field(default=None, max_length=255)

    @field_validator("format")
    @classmethod
    def _normalize_format(cls, value: str | None) -> str | None:
        if value is None:
            return None
        normalized = value.strip().lower().lstrip(".")
        return normalized or None


class ScoreRequest(BaseModel):
    resume_text: str = Field(default="", max_length=100000)
    job_description: str = Field(default="", max_length=100000)
    metadata: CandidateMetadata | None = None


class IssueItem(BaseModel):
    type: str
    severity: str
    message: str
    penalty: float = 0.0


class WarningItem(BaseModel):
    type: str
    message: str


class CategoryScore(BaseModel):
    raw_score: float = Field(ge=0.0, le=1.0)
    weight_percent: float = Field(ge=0.0, le=100.0)
    weighted_points: float = Field(ge=0.0, le=100.0)
    details: dict[str, Any] = Field(default_factory=dict)
    issues: list[IssueItem] = Field(default_factory=list)
    warnings: list[WarningItem] = Field(default_factory=list)


class ScoreBreakdown(BaseModel):
    overall_score: float = Field(ge=0.0, le=100.0)
    tier: Tier
    categories: dict[str, CategoryScore]
    explanation: str
    recommendations: list[str] = Field(default_factory=list)
    rule_errors: dict[str, str] = Field(default_factory=dict)
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    cached: bool = False

    def raw_scores(self) -> dict[str, float]:
        return {name: category.raw_score for name, category in self.categories.items()}


class WeightItem(BaseModel):
    weight: float = Field(ge=0.0, le=1.0)
    percentage: float = Field(ge=0.0, le=100.0)
    justification: str


class KeywordsRequest(BaseModel):
    text: str = Field(default="", max_length=100000, description="Candidate text to extract terms from.")
    compare_to: str | None = Field(
        default=None,
        max_length=100000,
        description="Requirement text; missing lists its terms absent from text.",
    )
    max_keywords: int = Field(default=50, ge=1, le=100)
    include_proximity: bool = False


class KeywordItem(BaseModel):
    term: str
    frequency: int = Field(ge=1)
    category: str


class KeywordsResponse(BaseModel):
    keywords: list[KeywordItem] = Field(default_factory=list)
    by_category: dict[str, list[str]] = Field(default_factory=dict)
    total_words: int = 0
    unique_terms: int = 0
    top_weighted: list[tuple[str, float]] = Field(default_factory=list)
    matched: list[str] | None = None
    missing: list[str] | None = None
    match_ratio: float | None = None
    proximity: dict[str, dict[str, dict[str, int]]] | None = None
