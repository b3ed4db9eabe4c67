from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable

from pydantic import ValidationError

from app.core.errors import InvalidMessageError, error_info_from_exception
from app.features.extractor import ExtractionOptions, TermExtractor
from app.feedback.engine import get_default_feedback_engine
from app.schemas.feedback import FeedbackRequest, FeedbackResult
from app.schemas.messages import RESPONSE_TYPES, PerformanceInfo, ScoringMessage, ScoringMessageResult
from app.schemas.scoring import KeywordItem, KeywordsRequest, KeywordsResponse, ScoreBreakdown, ScoreRequest
from app.scoring.engine import get_default_engine
from app.semantic.tfidf import top_terms

logger = logging.getLogger(__name__)

TOP_WEIGHTED_LIMIT = 10


class PerformanceTracker:
    """Running duration statistics for score calculations."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.reset()

    def reset(self) -> None:
        with self._lock:
            self.total_calculations = 0
            self.total_duration_ms = 0.0
            self.min_duration_ms: float | None = None
            self.max_duration_ms = 0.0

    def record(self, duration_ms: float) -> None:
        with self._lock:
            self.total_calculations += 1
            self.total_duration_ms += duration_ms
            self.min_duration_ms = duration_ms if self.min_duration_ms is None else min(self.min_duration_ms, duration_ms)
            self.max_duration_ms = max(self.max_duration_ms, duration_ms)

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            average = self.total_duration_ms / self.total_calculations if self.total_calculations else 0.0
            return {
                "total_calculations": self.total_calculations,
                "total_duration_ms": round(self.total_duration_ms, 3),
                "average_duration_ms": round(average, 3),
                "min_duration_ms": round(self.min_duration_ms or 0.0, 3),
                "max_duration_ms": round(self.max_duration_ms, 3),
            }


performance_tracker = PerformanceTracker()


def calculate_score(request: ScoreRequest) -> ScoreBreakdown:
    metadata = request.metadata.model_dump(exclude_none=True) if request.metadata else None
    started = time.perf_counter()
    result = get_default_engine().score(request.resume_text, request.job_description, metadata)
    if not result.cached:
        performance_tracker.record((time.perf_counter() - started) * 1000)
    return result


def generate_feedback(request: FeedbackRequest) -> FeedbackResult:
    metadata = request.metadata.model_dump(exclude_none=True) if request.metadata else None
    result = get_default_feedback_engine().generate(request.resume_text, request.job_description, metadata)
    if request.category:
        suggestions = [item for item in result.suggestions if item.category == request.category]
        by_severity = {
            level: [item for item in items if item.category == request.category]
            for level, items in result.by_severity.items()
        }
        result = result.model_copy(update={"suggestions": suggestions, "by_severity": by_severity})
    return result


def extract_keywords(request: KeywordsRequest, extractor: TermExtractor | None = None) -> KeywordsResponse:
    active = extractor or get_default_engine().extractor
    options = ExtractionOptions.from_config(
        max_keywords=request.max_keywords,
        include_proximity=request.include_proximity,
    )
    extraction = active.extract(request.text, options)

    by_category: dict[str, list[str]] = {}
    for term in extraction.terms:
        by_category.setdefault(term.category, []).append(term.text)

    other_stream = active.normalized_stream(request.compare_to, options) if request.compare_to else []
    response = KeywordsResponse(
        keywords=[KeywordItem(term=term.text, frequency=term.frequency, category=term.category) for term in extraction.terms],
        by_category=by_category,
        total_words=extraction.total_words,
        unique_terms=extraction.unique_terms,
        top_weighted=top_terms(active.normalized_stream(request.text, options), other_stream, TOP_WEIGHTED_LIMIT),
    )
    if request.compare_to is not None:
        comparison = active.compare_terms(request.text, request.compare_to, options)
        response.matched = [term.text for term in comparison.matched]
        response.missing = [term.text for term in comparison.missing]
        response.match_ratio = comparison.match_ratio
    if extraction.proximity is not None:
        response.proximity = {
            left: {right: {"distance": item.distance, "occurrences": item.occurrences} for right, item in neighbours.items()}
            for left, neighbours in extraction.proximity.items()
        }
    return response


def performance_metrics() -> dict[str, Any]:
    metrics = performance_tracker.snapshot()
    cache = get_default_engine().cache
    stats = cache.stats() if cache is not None else {"size": 0, "capacity": 0, "hits": 0, "misses": 0}
    metrics["cache_enabled"] = cache is not None
    metrics["cache_size"] = stats["size"]
    metrics["cache_capacity"] = stats["capacity"]
    metrics["cache_hits"] = stats["hits"]
    metrics["cache_misses"] = stats["misses"]
    return metrics


def clear_cache() -> dict[str, Any]:
    cache = get_default_engine().cache
    removed = cache.clear() if cache is not None else 0
    return {"cleared_entries": removed}


def _handle_calculate_score(payload: dict[str, Any]) -> tuple[dict[str, Any], bool]:
    result = calculate_score(ScoreRequest.model_validate(payload))
    return result.model_dump(mode="json"), result.cached


def _handle_generate_feedback(payload: dict[str, Any]) -> tuple[dict[str, Any], bool]:
    return generate_feedback(FeedbackRequest.model_validate(payload)).model_dump(mode="json"), False


def _handle_extract_keywords(payload: dict[str, Any]) -> tuple[dict[str, Any], bool]:
    return extract_keywords(KeywordsRequest.model_validate(payload)).model_dump(mode="json"), False


def _handle_get_performance(payload: dict[str, Any]) -> tuple[dict[str, Any], bool]:
    return performance_metrics(), False


def _handle_clear_cache(payload: dict[str, Any]) -> tuple[dict[str, Any], bool]:
    return clear_cache(), False


MESSAGE_HANDLERS: dict[str, Callable[[dict[str, Any]], tuple[dict[str, Any], bool]]] = {
    "CALCULATE_SCORE": _handle_calculate_score,
    "GENERATE_FEEDBACK": _handle_generate_feedback,
    "EXTRACT_KEYWORDS": _handle_extract_keywords,
    "GET_PERFORMANCE": _handle_get_performance,
    "CLEAR_CACHE": _handle_clear_cache,
}


def handle_message(message: ScoringMessage) -> ScoringMessageResult:
    """Dispatch one request envelope and always answer with an envelope carrying its request_id."""
    started = time.perf_counter()
    handler = MESSAGE_HANDLERS.get(message.type)
    try:
        if handler is None:
            raise InvalidMessageError(f"Unknown message type: {message.type}")
        payload, cached = handler(message.payload)
    except (InvalidMessageError, ValidationError, ValueError) as exc:
        logger.warning("message_rejected type=%s request_id=%s: %s", message.type, message.request_id, exc)
        return _error_result(message, exc, started)
    except Exception as exc:
        logger.exception("message_failed type=%s request_id=%s", message.type, message.request_id)
        return _error_result(message, exc, started)

    duration_ms = (time.perf_counter() - started) * 1000
    logger.info("message_handled type=%s request_id=%s duration_ms=%.1f", message.type, message.request_id, duration_ms)
    return ScoringMessageResult(
        type=RESPONSE_TYPES[message.type],
        request_id=message.request_id,
        payload=payload,
        performance=PerformanceInfo(duration_ms=round(duration_ms, 3), cached=cached),
    )


def _error_result(message: ScoringMessage, exc: Exception, started: float) -> ScoringMessageResult:
    if isinstance(exc, ValidationError):
        error = InvalidMessageError(f"Invalid payload for {message.type}: {exc.error_count()} validation error(s)")
        info = error_info_from_exception(error)
    else:
        info = error_info_from_exception(exc)
    return ScoringMessageResult(
        type="ERROR",
        request_id=message.request_id,
        error=info,
        performance=PerformanceInfo(duration_ms=round((time.perf_counter() - started) * 1000, 3)),
    )
