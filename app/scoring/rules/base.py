from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol

from app.features.extractor import ExtractionOptions, ExtractionResult, TermExtractor


@dataclass(frozen=True, slots=True)
class Issue:
    type: str
    severity: str
    message: str
    penalty: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "severity": self.severity, "message": self.message, "penalty": self.penalty}


@dataclass(frozen=True, slots=True)
class RuleWarning:
    type: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "message": self.message}


@dataclass(frozen=True, slots=True)
class SubScoreResult:
    score: float
    details: dict[str, Any] = field(default_factory=dict)
    issues: tuple[Issue, ...] = ()
    warnings: tuple[RuleWarning, ...] = ()

    def __post_init__(self) -> None:
        if not 0.0 <= self.score <= 1.0:
            raise ValueError(f"sub-score must be within [0, 1], got {self.score}")


@dataclass(slots=True)
class ScoringContext:
    """Inputs shared by every rule for one scoring call."""

    candidate: str
    requirement: str
    metadata: Mapping[str, Any]
    candidate_terms: ExtractionResult
    requirement_terms: ExtractionResult
    candidate_stream: list[str]
    requirement_stream: list[str]

    @classmethod
    def build(
        cls,
        candidate: str,
        requirement: str,
        metadata: Mapping[str, Any] | None = None,
        extractor: TermExtractor | None = None,
    ) -> "ScoringContext":
        extractor = extractor or TermExtractor()
        options = ExtractionOptions.from_config()
        return cls(
            candidate=candidate or "",
            requirement=requirement or "",
            metadata=dict(metadata or {}),
            candidate_terms=extractor.extract(candidate, options),
            requirement_terms=extractor.extract(requirement, options),
            candidate_stream=extractor.normalized_stream(candidate, options),
            requirement_stream=extractor.normalized_stream(requirement, options),
        )


class ScoringRule(Protocol):
    name: str

    def evaluate(self, context: ScoringContext) -> SubScoreResult:
        """Score one aspect of the candidate text in [0, 1]."""


def clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, value))


def evaluate_texts(
    rule: ScoringRule,
    candidate: str,
    requirement: str = "",
    metadata: Mapping[str, Any] | None = None,
) -> SubScoreResult:
    return rule.evaluate(ScoringContext.build(candidate, requirement, metadata))
