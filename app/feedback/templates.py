from __future__ import annotations

from typing import Any

from app.schemas.feedback import Suggestion


def _suggestion(
    category: str,
    severity: str,
    title: str,
    message: str,
    advice: str,
    **metadata: Any,
) -> Suggestion:
    return Suggestion(
        category=category,  # type: ignore[arg-type]
        severity=severity,  # type: ignore[arg-type]
        title=title,
        message=message,
        actionable_advice=advice,
        metadata=metadata,
    )


def _titled(value: str) -> str:
    return " ".join(part.capitalize() for part in value.split("_"))


def missing_keyword_suggestions(findings: dict[str, Any]) -> list[Suggestion]:
    suggestions: list[Suggestion] = []
    critical = findings.get("critical") or []
    important = findings.get("important") or []
    suggested = findings.get("suggested") or []
    if critical:
        terms = [item["term"] for item in critical]
        suggestions.append(
            _suggestion(
                "missing_keywords",
                "critical",
                "Critical Keywords Missing",
                f"These high-frequency keywords from the job description are missing: {', '.join(terms[:5])}",
                "Add these keywords naturally throughout your resume, especially in the Skills and Experience sections.",
                keywords=terms,
            )
        )
    if important:
        terms = [item["term"] for item in important]
        suggestions.append(
            _suggestion(
                "missing_keywords",
                "warning",
                "Important Keywords Missing",
                f"These keywords appear multiple times in the job description: {', '.join(terms[:5])}",
                "Consider adding these keywords where relevant in your resume to improve ATS matching.",
                keywords=terms,
            )
        )
    if suggested:
        terms = [item["term"] for item in suggested]
        suggestions.append(
            _suggestion(
                "missing_keywords",
                "improvement",
                "Additional Keywords To Consider",
                f"The job description also mentions: {', '.join(terms[:5])}",
                "Mention these terms where they genuinely reflect your experience.",
                keywords=terms,
            )
        )
    return suggestions


def action_verb_suggestions(findings: dict[str, Any]) -> list[Suggestion]:
    suggestions: list[Suggestion] = []
    weak = findings.get("weak") or []
    medium = findings.get("medium") or []
    if weak:
        examples = weak[:3]
        examples_text = ", ".join(f'"{item["verb"]}"' for item in examples)
        suggestions.append(
            _suggestion(
                "action_verbs",
                "warning",
                "Weak Action Verbs Detected",
                f"Found {len(weak)} instances of weak action verbs (e.g., {examples_text})",
                'Replace weak verbs with stronger alternatives. For example: "worked" to "developed", '
                '"helped" to "collaborated", "did" to "executed". Use action verbs that demonstrate impact.',
                weak_verbs=[item["verb"] for item in weak],
                examples=examples,
            )
        )
    if medium:
        suggestions.append(
            _suggestion(
                "action_verbs",
                "improvement",
                "Action Verbs Could Be Stronger",
                f"Found {len(medium)} instances of medium-strength verbs that could be improved",
                'Consider replacing with more impactful verbs. For example: "maintained" to "optimized", '
                '"updated" to "enhanced", "used" to "leveraged".',
                medium_verbs=[item["verb"] for item in medium],
            )
        )
    return suggestions


def quantification_suggestions(findings: dict[str, Any]) -> list[Suggestion]:
    unquantified = findings.get("unquantified") or []
    if not unquantified:
        return []
    rate = float(findings.get("quantification_rate") or 0.0)
    action_bullets = [item for item in unquantified if item.get("is_action_bullet")]
    if action_bullets:
        return [
            _suggestion(
                "quantification",
                "warning",
                "Unquantified Achievement Bullets",
                f"Found {len(action_bullets)} action-oriented bullet points without quantifiable metrics. "
                f"Only {rate * 100:.0f}% of your bullets include metrics.",
                'Add specific numbers, percentages, or metrics to your achievements. For example: '
                '"Increased performance by 40%", "Managed team of 5 engineers", "Reduced costs by $50K".',
                unquantified_count=len(action_bullets),
                quantification_rate=rate,
            )
        ]
    return [
        _suggestion(
            "quantification",
            "improvement",
            "Add More Quantifiable Metrics",
            f"Only {rate * 100:.0f}% of your bullet points include quantifiable metrics.",
            "Consider adding numbers, percentages, dollar amounts, or scale metrics to more of your "
            "achievements to demonstrate concrete impact.",
            quantification_rate=rate,
        )
    ]


def word_usage_suggestions(findings: dict[str, Any]) -> list[Suggestion]:
    overused = findings.get("overused") or []
    if not overused:
        return []
    high = [item for item in overused if item["severity"] == "high"]
    if high:
        examples = ", ".join(f'"{item["word"]}" ({item["count"]}x)' for item in high[:3])
        return [
            _suggestion(
                "word_usage",
                "warning",
                "Overused Words Detected",
                f"These words appear too frequently: {examples}",
                "Replace overused words with alternatives to improve readability and avoid repetition.",
                overused_words=high,
            )
        ]
    examples = ", ".join(f'"{item["word"]}" ({item["count"]}x)' for item in overused[:3])
    return [
        _suggestion(
            "word_usage",
            "improvement",
            "Consider Varying Word Choice",
            f"These words appear frequently: {examples}",
            "Vary your word choice to improve readability. Consider using synonyms or alternative phrasing.",
            overused_words=overused,
        )
    ]


def formatting_suggestions(findings: dict[str, Any]) -> list[Suggestion]:
    suggestions: list[Suggestion] = []
    for violation in findings.get("violations") or []:
        suggestions.append(
            _suggestion(
                "formatting",
                "critical",
                _titled(violation["type"]),
                violation["message"],
                violation["advice"],
                violation_type=violation["type"],
            )
        )
    warnings = findings.get("warnings") or []
    for warning in warnings:
        if warning["severity"] != "warning":
            continue
        suggestions.append(
            _suggestion(
                "formatting",
                "warning",
                _titled(warning["type"]),
                warning["message"],
                warning["advice"],
                violation_type=warning["type"],
            )
        )
    improvements = [warning for warning in warnings if warning["severity"] == "improvement"]
    if improvements:
        suggestions.append(
            _suggestion(
                "formatting",
                "improvement",
                "Formatting Improvements",
                f"Found {len(improvements)} formatting areas that could be improved",
                " ".join(item["advice"] for item in improvements),
                improvements=[item["type"] for item in improvements],
            )
        )
    return suggestions
