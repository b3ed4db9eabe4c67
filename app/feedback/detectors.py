from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol

from app.core.config.scoring import get_scoring_value
from app.features.extractor import TermExtractor
from app.normalize import patterns
from app.schemas.feedback import Suggestion
from app.scoring.rules.formatting import supported_formats
from app.taxonomy import TaxonomyProvider, get_default_taxonomy_provider

from . import templates

_WORD_STRIP_RE = re.compile(r"[^\w]")
_SEVERITY_RANK = {"high": 3, "medium": 2, "low": 1}


@dataclass(slots=True)
class FeedbackContext:
    candidate: str
    requirement: str
    metadata: Mapping[str, Any] = field(default_factory=dict)
    extractor: TermExtractor = field(default_factory=TermExtractor)
    taxonomy: TaxonomyProvider = field(default_factory=get_default_taxonomy_provider)


class FeedbackDetector(Protocol):
    category: str

    def detect(self, context: FeedbackContext) -> dict[str, Any]:
        """Collect raw findings for one feedback category."""

    def suggest(self, findings: dict[str, Any]) -> list[Suggestion]:
        ...


def _first_word_hit(words: list[str], vocabulary: set[str], window: int) -> str | None:
    for word in words[:window]:
        cleaned = _WORD_STRIP_RE.sub("", word)
        if cleaned in vocabulary:
            return cleaned
    return None


class MissingKeywordsDetector:
    category = "missing_keywords"

    def detect(self, context: FeedbackContext) -> dict[str, Any]:
        comparison = context.extractor.compare_terms(context.candidate, context.requirement)
        limit = int(get_scoring_value("feedback.missing_keywords_limit", 10))
        missing = sorted(comparison.missing, key=lambda term: -term.frequency)[:limit]

        critical: list[dict[str, Any]] = []
        important: list[dict[str, Any]] = []
        suggested: list[dict[str, Any]] = []
        for term in missing:
            item = {"term": term.text, "frequency": term.frequency, "category": term.category}
            if term.frequency >= 3 or term.category == "hard":
                critical.append(item)
            elif term.frequency >= 2:
                important.append(item)
            else:
                suggested.append(item)
        return {
            "missing": critical + important + suggested,
            "critical": critical,
            "important": important,
            "suggested": suggested,
            "total_missing": len(missing),
        }

    def suggest(self, findings: dict[str, Any]) -> list[Suggestion]:
        return templates.missing_keyword_suggestions(findings)


class ActionVerbsDetector:
    category = "action_verbs"

    def detect(self, context: FeedbackContext) -> dict[str, Any]:
        verbs = context.taxonomy.action_verbs()
        weak_verbs = {str(verb).lower() for verb in verbs.get("weak", [])}
        medium_verbs = {str(verb).lower() for verb in verbs.get("medium", [])}
        alternatives: Mapping[str, list[str]] = verbs.get("alternatives", {})  # type: ignore[assignment]
        default_alternatives = list(verbs.get("default_alternatives", []))  # type: ignore[arg-type]
        weak_window = int(get_scoring_value("feedback.weak_verb_window", 5))
        medium_window = int(get_scoring_value("feedback.medium_verb_window", 2))

        units: list[str] = []
        seen: set[str] = set()
        for _, content in patterns.bullet_lines(context.candidate):
            units.append(content)
            seen.add(patterns.normalize_line(content).lower())
        for sentence in patterns.split_sentences(context.candidate):
            key = patterns.normalize_line(patterns.strip_bullet_prefix(sentence)).lower()
            if key and key not in seen:
                seen.add(key)
                units.append(sentence)

        weak: list[dict[str, Any]] = []
        medium: list[dict[str, Any]] = []
        for position, unit in enumerate(units):
            words = unit.lower().split()
            verb = _first_word_hit(words, weak_verbs, weak_window)
            bucket = weak
            if verb is None:
                verb = _first_word_hit(words, medium_verbs, medium_window)
                bucket = medium
            if verb is None:
                continue
            bucket.append(
                {
                    "verb": verb,
                    "context": patterns.normalize_line(unit),
                    "position": position,
                    "alternatives": list(alternatives.get(verb, default_alternatives)),
                }
            )
        return {"weak": weak, "medium": medium, "total_weak": len(weak), "total_medium": len(medium)}

    def suggest(self, findings: dict[str, Any]) -> list[Suggestion]:
        return templates.action_verb_suggestions(findings)


class QuantificationDetector:
    category = "quantification"

    def detect(self, context: FeedbackContext) -> dict[str, Any]:
        starters = {str(verb).lower() for verb in context.taxonomy.action_verbs().get("achievement_starters", [])}
        quantified: list[dict[str, Any]] = []
        unquantified: list[dict[str, Any]] = []
        for line_number, content in patterns.bullet_lines(context.candidate):
            if patterns.has_numeric_content(content):
                quantified.append({"line": line_number, "text": content})
                continue
            words = content.lower().split()
            first = _WORD_STRIP_RE.sub("", words[0]) if words else ""
            unquantified.append({"line": line_number, "text": content, "is_action_bullet": first in starters})
        total = len(quantified) + len(unquantified)
        return {
            "quantified": quantified,
            "unquantified": unquantified,
            "quantified_count": len(quantified),
            "unquantified_count": len(unquantified),
            "quantification_rate": round(len(quantified) / total, 4) if total else 0.0,
        }

    def suggest(self, findings: dict[str, Any]) -> list[Suggestion]:
        return templates.quantification_suggestions(findings)


class WordUsageDetector:
    category = "word_usage"

    def detect(self, context: FeedbackContext) -> dict[str, Any]:
        lowered = context.candidate.lower()
        words = [cleaned for cleaned in (_WORD_STRIP_RE.sub("", word) for word in lowered.split()) if cleaned]
        total = len(words)
        if not total:
            return {"overused": [], "total_overused": 0}

        counts: dict[str, int] = {}
        for word in words:
            counts[word] = counts.get(word, 0) + 1
        ratio = float(get_scoring_value("feedback.overuse_ratio", 0.02))
        min_count = int(get_scoring_value("feedback.overuse_min_count", 3))

        overused: list[dict[str, Any]] = []
        for word, data in context.taxonomy.overused_words().items():
            key = word.lower()
            if " " in key or not key.isalnum():
                count = len(re.findall(rf"\b{re.escape(key)}(?!\w)", lowered))
            else:
                count = counts.get(key, 0)
            if count == 0:
                continue
            frequency = count / total
            if frequency >= ratio or count >= min_count:
                alternatives = list(data.get("alternatives", []))  # type: ignore[arg-type]
                overused.append(
                    {
                        "word": word,
                        "count": count,
                        "frequency": round(frequency, 4),
                        "severity": str(data.get("severity", "low")),
                        "alternatives": alternatives,
                    }
                )
        overused.sort(key=lambda item: (-_SEVERITY_RANK.get(item["severity"], 0), -item["count"]))
        return {"overused": overused, "total_overused": len(overused)}

    def suggest(self, findings: dict[str, Any]) -> list[Suggestion]:
        return templates.word_usage_suggestions(findings)


class FormattingViolationsDetector:
    category = "formatting"

    def detect(self, context: FeedbackContext) -> dict[str, Any]:
        text = context.candidate
        violations: list[dict[str, Any]] = []
        warnings: list[dict[str, Any]] = []

        def limit(name: str, default: float) -> float:
            return float(get_scoring_value(f"formatting.limits.{name}", default))

        special = patterns.special_characters(text)
        if len(special) > limit("special_characters", 5):
            violations.append(
                {
                    "type": "special_characters",
                    "message": f"Problematic special characters detected: {', '.join(special[:5])}",
                    "advice": "Remove or replace special characters with standard punctuation. "
                    "Use standard fonts and avoid decorative characters.",
                }
            )
        elif special:
            warnings.append(
                {
                    "type": "special_characters",
                    "severity": "warning",
                    "message": f"Some special characters detected: {', '.join(special)}",
                    "advice": "Ensure these characters are ATS-compatible or replace with standard alternatives.",
                }
            )

        tables = patterns.table_row_count(text)
        if tables > limit("tables", 3):
            violations.append(
                {
                    "type": "tables",
                    "message": "Table formatting detected (may not parse correctly in ATS)",
                    "advice": "Convert tables to bullet points or simple text format.",
                }
            )

        header_footer = patterns.header_footer_count(text)
        if header_footer > limit("headers_footers", 5):
            warnings.append(
                {
                    "type": "headers_footers",
                    "severity": "warning",
                    "message": f"Excessive headers/footers detected ({header_footer} instances)",
                    "advice": "Remove page numbers, headers, and footers. They may confuse ATS systems.",
                }
            )

        email = patterns.has_email(text)
        phone = patterns.has_phone(text)
        if not email and not phone:
            violations.append(
                {
                    "type": "contact_info",
                    "message": "No email address or phone number detected",
                    "advice": "Add a professional email address and phone number at the top of your resume.",
                }
            )
        elif not email:
            warnings.append(
                {
                    "type": "contact_info",
                    "severity": "warning",
                    "message": "No email address detected",
                    "advice": "Add a professional email address. Most ATS systems expect an email for contact.",
                }
            )

        if patterns.has_mixed_bullets(text):
            warnings.append(
                {
                    "type": "inconsistent_bullets",
                    "severity": "warning",
                    "message": "Multiple bullet point styles detected",
                    "advice": "Use a consistent bullet point style throughout your resume.",
                }
            )

        long_count, line_count = patterns.long_lines(text, int(limit("long_line_chars", 150)))
        if line_count and long_count > line_count * limit("long_line_ratio", 0.3):
            warnings.append(
                {
                    "type": "line_length",
                    "severity": "improvement",
                    "message": f"Many long lines detected ({long_count} lines over {int(limit('long_line_chars', 150))} characters)",
                    "advice": "Break long lines into shorter sentences or bullet points.",
                }
            )

        if patterns.repeated_space_runs(text) > limit("repeated_spaces", 20):
            warnings.append(
                {
                    "type": "whitespace",
                    "severity": "improvement",
                    "message": "Excessive whitespace detected",
                    "advice": "Remove extra spaces. Use single spaces between words.",
                }
            )

        file_format = str(context.metadata.get("format") or "").lower()
        if file_format and file_format not in supported_formats():
            violations.append(
                {
                    "type": "file_format",
                    "message": f'File format "{file_format}" may not be ATS-compatible',
                    "advice": "Convert your resume to PDF, DOCX, or plain text format.",
                }
            )

        if len(patterns.section_headers(text)) < 2:
            warnings.append(
                {
                    "type": "section_structure",
                    "severity": "warning",
                    "message": "Limited section headers detected",
                    "advice": "Use clear section headers (Experience, Education, Skills, etc.) "
                    "to help ATS systems parse your resume correctly.",
                }
            )

        if len(patterns.all_caps_words(text)) > limit("all_caps_words", 10):
            warnings.append(
                {
                    "type": "all_caps",
                    "severity": "improvement",
                    "message": "Many all-caps words detected",
                    "advice": "Avoid excessive capitalization. Use title case for headings and normal case for body text.",
                }
            )

        return {
            "violations": violations,
            "warnings": warnings,
            "total_violations": len(violations),
            "total_warnings": len(warnings),
        }

    def suggest(self, findings: dict[str, Any]) -> list[Suggestion]:
        return templates.formatting_suggestions(findings)


DETECTOR_REGISTRY: list[FeedbackDetector] = [
    MissingKeywordsDetector(),
    ActionVerbsDetector(),
    QuantificationDetector(),
    WordUsageDetector(),
    FormattingViolationsDetector(),
]

