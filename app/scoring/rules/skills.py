from __future__ import annotations

from typing import Any

from app.core.config.scoring import get_scoring_value
from app.features.extractor import ExtractionResult

from .base import Issue, RuleWarning, ScoringContext, SubScoreResult, clamp_unit

SKILL_CATEGORIES = ("hard", "tool", "soft")
_DEFAULT_CATEGORY_WEIGHTS = {"hard": 0.60, "tool": 0.30, "soft": 0.10}


def _category_terms(result: ExtractionResult, category: str) -> dict[str, str]:
    return {term.key: term.text for term in result.terms if term.category == category}


def align_category(candidate: dict[str, str], requirement: dict[str, str]) -> dict[str, Any]:
    """Jaccard overlap for one skill category; an empty union scores 0."""
    common = [text for key, text in requirement.items() if key in candidate]
    missing = [text for key, text in requirement.items() if key not in candidate]
    extra = [text for key, text in candidate.items() if key not in requirement]
    union = set(candidate) | set(requirement)
    ratio = len(common) / len(union) if union else 0.0
    return {"common": common, "missing": missing, "extra": extra, "ratio": round(ratio, 4)}


def category_weights() -> dict[str, float]:
    configured = get_scoring_value("skills.category_weights", None) or _DEFAULT_CATEGORY_WEIGHTS
    return {category: float(configured.get(category, 0.0)) for category in SKILL_CATEGORIES}


class SkillAlignmentRule:
    name = "skill_alignment"

    def evaluate(self, context: ScoringContext) -> SubScoreResult:
        weights = category_weights()
        categories: dict[str, dict[str, Any]] = {}
        required_core: dict[str, str] = {}
        candidate_core: dict[str, str] = {}
        for category in SKILL_CATEGORIES:
            candidate = _category_terms(context.candidate_terms, category)
            requirement = _category_terms(context.requirement_terms, category)
            categories[category] = align_category(candidate, requirement)
            if category in ("hard", "tool"):
                required_core.update(requirement)
                candidate_core.update(candidate)

        weighted = 100 * sum(weights[category] * categories[category]["ratio"] for category in SKILL_CATEGORIES)

        covered = sum(1 for key in required_core if key in candidate_core)
        coverage = covered / len(required_core) if required_core else 0.0
        bonus = 0.0
        if coverage >= 1.0:
            bonus = float(get_scoring_value("skills.completeness_bonus.full", 5))
        elif coverage >= float(get_scoring_value("skills.completeness_bonus.near_ratio", 0.9)):
            bonus = float(get_scoring_value("skills.completeness_bonus.near", 3))
        score = clamp_unit(min(100.0, weighted + bonus) / 100)

        issues: list[Issue] = []
        warnings: list[RuleWarning] = []
        missing_hard = categories["hard"]["missing"]
        if missing_hard:
            issues.append(
                Issue(
                    type="missing_hard_skills",
                    severity="high" if categories["hard"]["ratio"] < 0.5 else "medium",
                    message="Missing required technical skills: " + ", ".join(missing_hard[:5]),
                )
            )
        if categories["tool"]["missing"]:
            warnings.append(
                RuleWarning(
                    type="missing_tools",
                    message="Missing tools from the job description: " + ", ".join(categories["tool"]["missing"][:5]),
                )
            )
        if categories["soft"]["missing"]:
            warnings.append(
                RuleWarning(
                    type="missing_soft_skills",
                    message="Consider emphasizing these soft skills: " + ", ".join(categories["soft"]["missing"][:3]),
                )
            )

        return SubScoreResult(
            score=score,
            details={
                **categories,
                "weights": weights,
                "weighted_score": round(weighted, 2),
                "core_coverage": round(coverage, 4),
                "completeness_bonus": bonus,
            },
            issues=tuple(issues),
            warnings=tuple(warnings),
        )
