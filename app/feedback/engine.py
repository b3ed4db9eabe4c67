from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Mapping, Sequence

from app.core.config.scoring import get_scoring_value
from app.core.errors import sanitize_error_message
from app.features.extractor import TermExtractor
from app.schemas.feedback import SEVERITY_LEVELS, FeedbackResult, FeedbackStatistics, Suggestion

from .detectors import DETECTOR_REGISTRY, FeedbackContext, FeedbackDetector

logger = logging.getLogger(__name__)

EMPTY_INPUT_SUMMARY = "Unable to generate feedback: missing resume or job description"
_SEVERITY_ORDER = {"critical": 3, "warning": 2, "improvement": 1}
_DEFAULT_CATEGORY_IMPORTANCE = {
    "missing_keywords": 5,
    "formatting": 4,
    "action_verbs": 3,
    "quantification": 2,
    "word_usage": 1,
}


def prioritize(suggestions: Sequence[Suggestion]) -> list[Suggestion]:
    importance = get_scoring_value("feedback.category_importance", None) or _DEFAULT_CATEGORY_IMPORTANCE
    return sorted(
        suggestions,
        key=lambda item: (
            -_SEVERITY_ORDER.get(item.severity, 0),
            -int(importance.get(item.category, 0)),
            item.title,
        ),
    )


def _summary(by_severity: Mapping[str, list[Suggestion]], details: Mapping[str, dict[str, Any]]) -> str:
    parts: list[str] = []
    if by_severity["critical"]:
        parts.append(f"Found {len(by_severity['critical'])} critical issue(s) that need immediate attention.")
    if by_severity["warning"]:
        parts.append(f"{len(by_severity['warning'])} warning(s) that should be addressed.")
    if by_severity["improvement"]:
        parts.append(f"{len(by_severity['improvement'])} improvement suggestion(s) to enhance your resume.")

    critical_keywords = details.get("missing_keywords", {}).get("critical") or []
    if critical_keywords:
        parts.append(f"Missing {len(critical_keywords)} critical keyword(s) from the job description.")
    weak_verbs = details.get("action_verbs", {}).get("weak") or []
    if weak_verbs:
        parts.append(f"Found {len(weak_verbs)} weak action verb(s) that could be strengthened.")
    quantification = details.get("quantification", {})
    if quantification.get("unquantified_count"):
        rate = float(quantification.get("quantification_rate") or 0.0)
        parts.append(f"Only {rate * 100:.0f}% of bullet points include quantifiable metrics.")
    violations = details.get("formatting", {}).get("total_violations") or 0
    if violations:
        parts.append(f"Found {violations} formatting issue(s).")

    if not parts:
        return "Your resume looks good! No major issues detected."
    return " ".join(parts)


class FeedbackEngine:
    def __init__(
        self,
        detectors: Sequence[FeedbackDetector] | None = None,
        extractor: TermExtractor | None = None,
    ) -> None:
        self.detectors = list(detectors if detectors is not None else DETECTOR_REGISTRY)
        self.extractor = extractor or TermExtractor()

    def generate(
        self,
        candidate_text: str | None,
        requirement_text: str | None,
        candidate_metadata: Mapping[str, Any] | None = None,
    ) -> FeedbackResult:
        candidate = candidate_text or ""
        requirement = requirement_text or ""
        if not candidate.strip() or not requirement.strip():
            return FeedbackResult(summary=EMPTY_INPUT_SUMMARY)

        context = FeedbackContext(
            candidate=candidate,
            requirement=requirement,
            metadata=dict(candidate_metadata or {}),
            extractor=self.extractor,
            taxonomy=self.extractor.taxonomy,
        )
        details: dict[str, dict[str, Any]] = {}
        suggestions: list[Suggestion] = []
        for detector in self.detectors:
            try:
                findings = detector.detect(context)
                produced = detector.suggest(findings)
            except Exception as exc:
                logger.exception("feedback_detector_failed category=%s", detector.category)
                details[detector.category] = {"error": sanitize_error_message(str(exc)) or exc.__class__.__name__}
                continue
            details[detector.category] = findings
            suggestions.extend(produced)

        by_severity = {level: [item for item in suggestions if item.severity == level] for level in SEVERITY_LEVELS}
        result = FeedbackResult(
            suggestions=prioritize(suggestions),
            by_severity=by_severity,
            summary=_summary(by_severity, details),
            statistics=FeedbackStatistics(
                total=len(suggestions),
                critical=len(by_severity["critical"]),
                warning=len(by_severity["warning"]),
                improvement=len(by_severity["improvement"]),
            ),
            details=details,
        )
        logger.info(
            "feedback_generated total=%d critical=%d warning=%d improvement=%d",
            result.statistics.total,
            result.statistics.critical,
            result.statistics.warning,
            result.statistics.improvement,
        )
        return result


def by_category(result: FeedbackResult, category: str) -> list[Suggestion]:
    return [item for item in result.suggestions if item.category == category]


def by_severity(result: FeedbackResult, severity: str) -> list[Suggestion]:
    return list(result.by_severity.get(severity, []))


@lru_cache(maxsize=1)
def get_default_feedback_engine() -> FeedbackEngine:
    return FeedbackEngine()


def feedback(
    candidate_text: str | None,
    requirement_text: str | None,
    candidate_metadata: Mapping[str, Any] | None = None,
) -> FeedbackResult:
    return get_default_feedback_engine().generate(candidate_text, requirement_text, candidate_metadata)
