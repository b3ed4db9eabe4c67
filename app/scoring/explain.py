from __future__ import annotations

from typing import Mapping

from app.core.config.scoring import get_scoring_value

from .rules.base import SubScoreResult

EMPTY_INPUT_EXPLANATION = "Missing resume or job description text"

_TIER_SENTENCES = {
    "excellent": "Excellent ATS compatibility. Your resume is well-optimized for ATS systems.",
    "good": "Good ATS compatibility. Some improvements could enhance your score.",
    "moderate": "Moderate ATS compatibility. Several areas need improvement.",
    "low": "Low ATS compatibility. Significant improvements needed.",
}


def tier_for(overall_score: float) -> str:
    if overall_score >= float(get_scoring_value("tiers.excellent", 80)):
        return "excellent"
    if overall_score >= float(get_scoring_value("tiers.good", 60)):
        return "good"
    if overall_score >= float(get_scoring_value("tiers.moderate", 40)):
        return "moderate"
    return "low"


def build_explanation(results: Mapping[str, SubScoreResult], overall_score: float) -> str:
    parts = [_TIER_SENTENCES[tier_for(overall_score)]]

    keyword = results["keyword_match"].score * 100
    if keyword >= 70:
        parts.append("Strong keyword alignment with the job description.")
    elif keyword < 50:
        parts.append(
            "Keyword matching needs improvement. Consider adding more relevant keywords from the job description."
        )

    skills = results["skill_alignment"].score * 100
    if skills >= 70:
        parts.append("Good skills alignment with job requirements.")
    elif skills < 50:
        parts.append(
            "Skills alignment could be improved. Highlight more required skills from the job description."
        )

    if results["formatting"].score * 100 < 70:
        parts.append("Formatting issues detected that may affect ATS parsing.")
    if results["impact_metrics"].score * 100 < 50:
        parts.append("Consider adding more quantifiable achievements and metrics.")
    if results["readability"].score * 100 < 70:
        parts.append("Length or readability could be improved for easier review.")
    return " ".join(parts)


def build_recommendations(results: Mapping[str, SubScoreResult], overall_score: float) -> list[str]:
    """Ordered, deduplicated advice: missing terms first, then formatting,
    quantification and readability."""
    recommendations: list[str] = []

    keyword = results["keyword_match"]
    if keyword.score < float(get_scoring_value("keyword.recommend_below", 0.7)):
        top_missing = int(get_scoring_value("keyword.top_missing", 5))
        missing = [item["term"] for item in keyword.details.get("missing_terms", [])[:top_missing]]
        if missing:
            recommendations.append(f"Add these keywords from the job description: {', '.join(missing)}")
    if keyword.details.get("stuffing", {}).get("is_stuffing"):
        recommendations.append(
            "Reduce keyword repetition (keyword stuffing detected). Use keywords naturally throughout your resume."
        )

    skills = results["skill_alignment"]
    if skills.score < float(get_scoring_value("skills.recommend_below", 0.7)):
        missing_hard = skills.details.get("hard", {}).get("missing", [])
        if missing_hard:
            recommendations.append(f"Highlight these required technical skills: {', '.join(missing_hard[:3])}")
        missing_soft = skills.details.get("soft", {}).get("missing", [])
        if missing_soft:
            recommendations.append(f"Consider emphasizing these soft skills: {', '.join(missing_soft[:3])}")

    for issue in results["formatting"].issues:
        recommendations.append(f"Fix formatting issue: {issue.message}")

    if results["impact_metrics"].score < float(get_scoring_value("impact.recommend_below", 0.5)):
        recommendations.append("Add quantifiable achievements with numbers, percentages, and metrics.")
        recommendations.append('Use action verbs like "increased", "improved", "reduced" with specific results.')

    for issue in results["readability"].issues:
        recommendations.append(f"Improve readability: {issue.message}")

    if overall_score < float(get_scoring_value("tiers.good", 60)):
        recommendations.append(
            "Review the job description carefully and align your resume more closely with the requirements."
        )

    return list(dict.fromkeys(recommendations))
