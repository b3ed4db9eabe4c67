from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from functools import lru_cache
from typing import Any, Mapping, Sequence

from app.core.config import settings
from app.core.errors import sanitize_error_message
from app.features.extractor import TermExtractor
from app.schemas.scoring import CATEGORY_NAMES, CategoryScore, IssueItem, ScoreBreakdown, WarningItem

from .cache import BoundedScoreCache
from .explain import EMPTY_INPUT_EXPLANATION, build_explanation, build_recommendations, tier_for
from .rules import RULE_REGISTRY
from .rules.base import Issue, ScoringContext, ScoringRule, SubScoreResult
from .weights import ScoringWeights, weight_justification

logger = logging.getLogger(__name__)


def _category_score(result: SubScoreResult, weight: float) -> CategoryScore:
    return CategoryScore(
        raw_score=round(result.score, 4),
        weight_percent=round(weight * 100, 2),
        weighted_points=round(result.score * weight * 100, 2),
        details=result.details,
        issues=[IssueItem(**issue.to_dict()) for issue in result.issues],
        warnings=[WarningItem(**warning.to_dict()) for warning in result.warnings],
    )


def empty_breakdown(weights: ScoringWeights) -> ScoreBreakdown:
    return ScoreBreakdown(
        overall_score=0.0,
        tier="low",
        categories={
            name: CategoryScore(raw_score=0.0, weight_percent=round(weight * 100, 2), weighted_points=0.0)
            for name, weight in weights.as_dict().items()
        },
        explanation=EMPTY_INPUT_EXPLANATION,
        recommendations=[],
    )


class ScoringEngine:
    """Weighted aggregation of the matching rules into one explainable score."""

    def __init__(
        self,
        weights: ScoringWeights | None = None,
        rules: Sequence[ScoringRule] | None = None,
        cache: BoundedScoreCache | None = None,
        parallel: bool = False,
        extractor: TermExtractor | None = None,
    ) -> None:
        self.weights = weights or ScoringWeights.from_config()
        self.rules = list(rules if rules is not None else RULE_REGISTRY)
        names = [rule.name for rule in self.rules]
        if sorted(names) != sorted(CATEGORY_NAMES):
            raise ValueError(f"Rules must cover exactly {', '.join(CATEGORY_NAMES)}; got {', '.join(names)}")
        self.cache = cache
        self.parallel = parallel
        self.extractor = extractor or TermExtractor()

    def score(
        self,
        candidate_text: str | None,
        requirement_text: str | None,
        candidate_metadata: Mapping[str, Any] | None = None,
    ) -> ScoreBreakdown:
        candidate = candidate_text or ""
        requirement = requirement_text or ""
        if not candidate.strip() or not requirement.strip():
            logger.info("score_skipped reason=missing_input")
            return empty_breakdown(self.weights)

        metadata = dict(candidate_metadata or {})
        file_format = str(metadata.get("format") or "").lower()
        if self.cache is not None:
            cached = self.cache.get(candidate, requirement, file_format)
            if cached is not None:
                return cached.model_copy(deep=True, update={"cached": True})

        started = time.perf_counter()
        context = ScoringContext.build(candidate, requirement, metadata, extractor=self.extractor)
        results, rule_errors = self._run_rules(context)

        weights = self.weights.as_dict()
        total = sum(results[name].score * weights[name] for name in CATEGORY_NAMES)
        overall = round(max(0.0, min(100.0, total * 100)), 2)

        breakdown = ScoreBreakdown(
            overall_score=overall,
            tier=tier_for(overall),
            categories={name: _category_score(results[name], weights[name]) for name in CATEGORY_NAMES},
            explanation=build_explanation(results, overall),
            recommendations=build_recommendations(results, overall),
            rule_errors=rule_errors,
        )
        logger.info(
            "score_calculated overall=%.2f tier=%s duration_ms=%.1f rule_errors=%d",
            overall,
            breakdown.tier,
            (time.perf_counter() - started) * 1000,
            len(rule_errors),
        )
        if self.cache is not None:
            self.cache.put(candidate, requirement, file_format, breakdown.model_copy(deep=True))
        return breakdown

    def _run_rules(self, context: ScoringContext) -> tuple[dict[str, SubScoreResult], dict[str, str]]:
        if self.parallel and len(self.rules) > 1:
            with ThreadPoolExecutor(max_workers=len(self.rules), thread_name_prefix="scoring-rule") as pool:
                outcomes = list(pool.map(lambda rule: self._evaluate(rule, context), self.rules))
        else:
            outcomes = [self._evaluate(rule, context) for rule in self.rules]

        results: dict[str, SubScoreResult] = {}
        rule_errors: dict[str, str] = {}
        for rule, (result, error) in zip(self.rules, outcomes):
            results[rule.name] = result
            if error is not None:
                rule_errors[rule.name] = error
        return results, rule_errors

    @staticmethod
    def _evaluate(rule: ScoringRule, context: ScoringContext) -> tuple[SubScoreResult, str | None]:
        try:
            return rule.evaluate(context), None
        except Exception as exc:
            logger.exception("rule_failed rule=%s", rule.name)
            message = sanitize_error_message(str(exc)) or exc.__class__.__name__
            fallback = SubScoreResult(
                score=0.0,
                details={"error": message},
                issues=(
                    Issue(
                        type="rule_error",
                        severity="high",
                        message=f"The {rule.name} check could not be completed",
                    ),
                ),
            )
            return fallback, message

    def weight_justification(self) -> dict[str, dict[str, float | str]]:
        return weight_justification(self.weights)


@lru_cache(maxsize=1)
def get_default_engine() -> ScoringEngine:
    cache = BoundedScoreCache(settings.scoring_cache_size) if settings.scoring_cache_enabled else None
    return ScoringEngine(cache=cache, parallel=settings.scoring_parallel_rules)


def score(
    candidate_text: str | None,
    requirement_text: str | None,
    candidate_metadata: Mapping[str, Any] | None = None,
) -> ScoreBreakdown:
    return get_default_engine().score(candidate_text, requirement_text, candidate_metadata)
