from __future__ import annotations

from app.core.config.scoring import get_scoring_value
from app.normalize import patterns

from .base import Issue, RuleWarning, ScoringContext, SubScoreResult, clamp_unit


def reading_ease(words_per_sentence: float, chars_per_word: float) -> float:
    """Simplified Flesch score; syllables are approximated from word length."""
    value = 206.835 - 1.015 * words_per_sentence - 84.6 * (chars_per_word / 2.5)
    return max(0.0, min(100.0, value))


def _value(path: str, default: float) -> float:
    return float(get_scoring_value(f"readability.{path}", default))


class ReadabilityRule:
    name = "readability"

    def evaluate(self, context: ScoringContext) -> SubScoreResult:
        text = context.candidate
        words = text.split()
        word_count = len(words)
        sentences = patterns.split_sentences(text)
        chars = sum(len(word) for word in words)
        words_per_sentence = word_count / len(sentences) if sentences else 0.0
        chars_per_word = chars / word_count if word_count else 0.0
        ease = reading_ease(words_per_sentence, chars_per_word) if word_count else 0.0
        sections = patterns.section_headers(text)

        score = 100.0
        issues: list[Issue] = []
        warnings: list[RuleWarning] = []

        def deduct(issue_type: str, severity: str, message: str, penalty: float) -> None:
            nonlocal score
            issues.append(Issue(type=issue_type, severity=severity, message=message, penalty=penalty))
            score -= penalty

        if word_count < _value("word_count.too_short", 200):
            deduct(
                "too_short",
                "high",
                f"Resume is too short ({word_count} words). Recommended: 400-800 words.",
                _value("penalties.too_short", 20),
            )
        elif word_count < _value("word_count.short", 400):
            warnings.append(
                RuleWarning(
                    type="short",
                    message=f"Resume is on the shorter side ({word_count} words). Consider adding more detail.",
                )
            )
        elif word_count > _value("word_count.too_long", 1200):
            deduct(
                "too_long",
                "medium",
                f"Resume is quite long ({word_count} words). Recommended: 400-800 words for most roles.",
                _value("penalties.too_long", 10),
            )
        elif word_count > _value("word_count.long", 800):
            warnings.append(
                RuleWarning(
                    type="long",
                    message=f"Resume is on the longer side ({word_count} words). Consider condensing.",
                )
            )

        if words_per_sentence > _value("sentence_length.max", 25):
            deduct(
                "long_sentences",
                "medium",
                f"Average sentence length is {words_per_sentence:.1f} words. Recommended: 15-20 words.",
                _value("penalties.long_sentences", 5),
            )
        elif words_per_sentence > _value("sentence_length.warn", 20):
            warnings.append(
                RuleWarning(
                    type="sentence_length",
                    message=f"Average sentence length is {words_per_sentence:.1f} words. Consider shorter sentences.",
                )
            )

        if word_count and ease < _value("reading_ease.min", 50):
            deduct(
                "low_reading_ease",
                "medium",
                f"Reading ease is {ease:.1f}. Use shorter sentences and simpler words.",
                _value("penalties.low_reading_ease", 10),
            )
        elif word_count and ease < _value("reading_ease.warn", 60):
            warnings.append(
                RuleWarning(
                    type="readability",
                    message="Resume may be difficult to read (consider shorter sentences and simpler words)",
                )
            )

        if len(sections) < _value("min_sections", 2):
            deduct(
                "section_structure",
                "medium",
                f"Only {len(sections)} section(s) detected. Recommended: 4-6 sections.",
                _value("penalties.section_structure", 10),
            )

        score = max(0.0, score)
        return SubScoreResult(
            score=clamp_unit(score / 100),
            details={
                "word_count": word_count,
                "sentence_count": len(sentences),
                "avg_sentence_length": round(words_per_sentence, 1),
                "avg_chars_per_word": round(chars_per_word, 2),
                "reading_ease": round(ease, 1),
                "section_count": len(sections),
                "raw_score": score,
            },
            issues=tuple(issues),
            warnings=tuple(warnings),
        )
