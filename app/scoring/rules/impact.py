from __future__ import annotations

import re
from typing import Any

from app.core.config.scoring import get_scoring_value

from .base import Issue, RuleWarning, ScoringContext, SubScoreResult, clamp_unit

_SCALE_NOUNS = r"(?:users|customers|clients|team members|employees|developers|engineers|people)"
METRIC_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("percentage", re.compile(r"\d+(?:\.\d+)?\s?%")),
    ("currency", re.compile(r"\$\d[\d,]*(?:\.\d+)?[kKmMbB]?\b")),
    (
        "scale",
        re.compile(
            rf"\bteam of\s+\d[\d,]*(?:\s+{_SCALE_NOUNS})?\b|\b\d[\d,]*(?:\.\d+)?[kKmM]?\+?\s+{_SCALE_NOUNS}\b",
            re.IGNORECASE,
        ),
    ),
    (
        "time",
        re.compile(
            r"\b(?:reduced|cut|shortened|decreased|saved|accelerated)\b[^.\n]{0,40}?"
            r"\b\d+(?:\.\d+)?\s*(?:seconds?|minutes?|hours?|days?|weeks?|months?|years?)\b",
            re.IGNORECASE,
        ),
    ),
)
IMPACT_STATEMENT_RE = re.compile(
    r"\b(?:led (?:a )?team of|achieved|resulted in|led to|contributed to|delivered|spearheaded)\b",
    re.IGNORECASE,
)
_DEFAULT_STEPS = ((0, 0), (2, 30), (5, 60), (10, 85))


def find_metrics(text: str) -> list[dict[str, str]]:
    """Distinct quantified results, keyed by (type, lowercased match)."""
    seen: set[tuple[str, str]] = set()
    metrics: list[dict[str, str]] = []
    for metric_type, pattern in METRIC_PATTERNS:
        for match in pattern.finditer(text or ""):
            value = match.group(0).strip()
            key = (metric_type, value.lower())
            if key in seen:
                continue
            seen.add(key)
            metrics.append({"type": metric_type, "text": value})
    return metrics


def find_impact_statements(text: str) -> list[str]:
    return [match.group(0) for match in IMPACT_STATEMENT_RE.finditer(text or "")]


def step_score(metric_count: int) -> float:
    steps = get_scoring_value("impact.steps", None) or _DEFAULT_STEPS
    for upper, points in steps:
        if metric_count <= int(upper):
            return float(points)
    return float(get_scoring_value("impact.max_step_score", 100))


class ImpactMetricsRule:
    name = "impact_metrics"

    def evaluate(self, context: ScoringContext) -> SubScoreResult:
        metrics = find_metrics(context.candidate)
        statements = find_impact_statements(context.candidate)

        if not metrics and not statements:
            return SubScoreResult(
                score=0.0,
                details={"metric_count": 0, "metrics": [], "statement_count": 0, "impact_statements": []},
                issues=(
                    Issue(
                        type="no_metrics",
                        severity="medium",
                        message="No quantifiable achievements or impact statements detected",
                    ),
                ),
            )

        base = step_score(len(metrics))
        statement_points = float(get_scoring_value("impact.statement_points", 2))
        bonus_cap = float(get_scoring_value("impact.statement_bonus_cap", 10))
        bonus = min(bonus_cap, statement_points * len(statements))
        total = base + bonus

        warnings: list[RuleWarning] = []
        if len(metrics) < 3:
            warnings.append(
                RuleWarning(
                    type="few_metrics",
                    message=f"Only {len(metrics)} quantified result(s) detected. Add numbers, percentages or amounts.",
                )
            )

        details: dict[str, Any] = {
            "metric_count": len(metrics),
            "metric_types": sorted({metric["type"] for metric in metrics}),
            "metrics": metrics[:10],
            "statement_count": len(statements),
            "impact_statements": statements[:10],
            "step_score": base,
            "statement_bonus": bonus,
            "raw_score": total,
        }
        return SubScoreResult(score=clamp_unit(total / 100), details=details, warnings=tuple(warnings))
