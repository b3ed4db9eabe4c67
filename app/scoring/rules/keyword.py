from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from app.core.config.scoring import get_scoring_value
from app.features.extractor import Term
from app.semantic.tfidf import document_similarity

from .base import Issue, RuleWarning, ScoringContext, SubScoreResult, clamp_unit


@dataclass(frozen=True, slots=True)
class StuffingReport:
    is_stuffing: bool = False
    score: float = 0.0
    threshold: float = 0.0
    total_words: int = 0
    terms: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_stuffing": self.is_stuffing,
            "score": round(self.score, 4),
            "threshold": round(self.threshold, 2),
            "total_words": self.total_words,
            "terms": self.terms,
        }


def detect_stuffing(text: str, terms: Sequence[Term]) -> StuffingReport:
    """Flag terms repeated far beyond natural usage.

    A term is stuffed when its frequency exceeds ``max(ratio * words,
    min_occurrences)``; the floor keeps short documents from tripping it.
    """
    total_words = len((text or "").split())
    if total_words == 0 or not terms:
        return StuffingReport(total_words=total_words)

    ratio = float(get_scoring_value("keyword.stuffing.ratio", 0.05))
    min_occurrences = float(get_scoring_value("keyword.stuffing.min_occurrences", 3))
    threshold = max(ratio * total_words, min_occurrences)

    flagged: list[dict[str, Any]] = []
    for term in terms:
        if term.frequency > threshold:
            flagged.append(
                {
                    "term": term.text,
                    "occurrences": term.frequency,
                    "ratio": round(term.frequency / total_words, 4),
                }
            )
    score = min(1.0, sum(term["occurrences"] for term in flagged) / total_words)
    return StuffingReport(
        is_stuffing=bool(flagged),
        score=score,
        threshold=threshold,
        total_words=total_words,
        terms=flagged,
    )


class KeywordMatchRule:
    name = "keyword_match"

    def evaluate(self, context: ScoringContext) -> SubScoreResult:
        requirement_terms = context.requirement_terms.terms
        candidate_keys = set(context.candidate_terms.keys())

        matched = [term for term in requirement_terms if term.key in candidate_keys]
        missing = [term for term in requirement_terms if term.key not in candidate_keys]
        missing.sort(key=lambda term: -term.frequency)

        similarity = document_similarity(context.candidate_stream, context.requirement_stream)
        base_match = len(matched) / len(requirement_terms) if requirement_terms else 0.0
        base_weight = float(get_scoring_value("keyword.base_weight", 0.7))
        similarity_weight = float(get_scoring_value("keyword.similarity_weight", 0.3))
        combined = base_weight * base_match + similarity_weight * similarity

        stuffing = detect_stuffing(context.candidate, context.candidate_terms.terms)
        max_penalty = float(get_scoring_value("keyword.stuffing.max_penalty", 0.2))
        stuffing_penalty = max_penalty * stuffing.score
        score = clamp_unit(combined * (1 - stuffing_penalty))

        issues: list[Issue] = []
        warnings: list[RuleWarning] = []
        if stuffing.is_stuffing:
            stuffed = ", ".join(item["term"] for item in stuffing.terms[:5])
            issues.append(
                Issue(
                    type="keyword_stuffing",
                    severity="high",
                    message=f"Keyword stuffing detected: {stuffed}",
                    penalty=round(stuffing_penalty * 100, 2),
                )
            )
        if missing:
            top_missing = int(get_scoring_value("keyword.top_missing", 5))
            warnings.append(
                RuleWarning(
                    type="missing_keywords",
                    message="Missing keywords from the job description: "
                    + ", ".join(term.text for term in missing[:top_missing]),
                )
            )

        return SubScoreResult(
            score=score,
            details={
                "matched_terms": [term.text for term in matched],
                "missing_terms": [
                    {"term": term.text, "frequency": term.frequency, "category": term.category}
                    for term in missing
                ],
                "total_requirement_terms": len(requirement_terms),
                "matched_count": len(matched),
                "missing_count": len(missing),
                "base_match": round(base_match, 4),
                "similarity": round(similarity, 4),
                "combined_score": round(combined, 4),
                "stuffing": stuffing.to_dict(),
                "stuffing_penalty": round(stuffing_penalty, 4),
            },
            issues=tuple(issues),
            warnings=tuple(warnings),
        )
