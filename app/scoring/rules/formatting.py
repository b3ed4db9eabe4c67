from __future__ import annotations

from typing import Any

from app.core.config.scoring import get_scoring_value
from app.normalize import patterns

from .base import Issue, RuleWarning, ScoringContext, SubScoreResult, clamp_unit

_DEFAULT_SUPPORTED_FORMATS = ("pdf", "docx", "text", "txt")


def _penalty(name: str, default: float) -> float:
    return float(get_scoring_value(f"formatting.penalties.{name}", default))


def _limit(name: str, default: float) -> float:
    return float(get_scoring_value(f"formatting.limits.{name}", default))


def supported_formats() -> tuple[str, ...]:
    configured = get_scoring_value("formatting.supported_formats", None) or _DEFAULT_SUPPORTED_FORMATS
    return tuple(str(item).lower() for item in configured)


class FormattingComplianceRule:
    name = "formatting"

    def evaluate(self, context: ScoringContext) -> SubScoreResult:
        text = context.candidate
        score = 100.0
        issues: list[Issue] = []
        warnings: list[RuleWarning] = []

        def deduct(issue_type: str, severity: str, message: str, penalty: float) -> None:
            nonlocal score
            issues.append(Issue(type=issue_type, severity=severity, message=message, penalty=penalty))
            score -= penalty

        special = patterns.special_characters(text)
        if len(special) > _limit("special_characters", 5):
            deduct(
                "special_characters",
                "high",
                f"Too many special characters detected: {', '.join(special[:5])}",
                _penalty("special_characters", 10),
            )
        elif special:
            warnings.append(
                RuleWarning(type="special_characters", message=f"Some special characters detected: {', '.join(special)}")
            )

        tables = patterns.table_row_count(text)
        if tables > _limit("tables", 3):
            deduct("tables", "medium", "Table formatting detected (may not parse correctly in ATS)", _penalty("tables", 5))

        header_footer = patterns.header_footer_count(text)
        if header_footer > _limit("headers_footers", 5):
            deduct("headers_footers", "low", "Excessive headers/footers detected", _penalty("headers_footers", 3))

        email = patterns.has_email(text)
        phone = patterns.has_phone(text)
        if not email and not phone:
            deduct("contact_info", "high", "No email or phone number detected", _penalty("contact_info", 15))
        elif not email:
            warnings.append(RuleWarning(type="contact_info", message="No email address detected"))
        elif not phone:
            warnings.append(RuleWarning(type="contact_info", message="No phone number detected"))

        bullet_styles = patterns.bullet_style_counts(text)
        if len(bullet_styles) >= 2:
            deduct(
                "inconsistent_bullets",
                "low",
                "Mixed bullet styles detected (should use consistent formatting)",
                _penalty("mixed_bullets", 3),
            )

        file_format = str(context.metadata.get("format") or "").lower()
        if file_format and file_format not in supported_formats():
            deduct(
                "file_format",
                "high",
                f"File format {file_format} may not be ATS-compatible",
                _penalty("file_format", 20),
            )

        headers = patterns.section_headers(text)
        if len(headers) < 2:
            warnings.append(
                RuleWarning(type="section_structure", message="Limited section headers detected (may affect ATS parsing)")
            )

        long_count, line_count = patterns.long_lines(text, int(_limit("long_line_chars", 150)))
        if line_count and long_count > line_count * _limit("long_line_ratio", 0.3):
            warnings.append(
                RuleWarning(type="line_length", message="Many long lines detected (may indicate formatting issues)")
            )

        if patterns.repeated_space_runs(text) > _limit("repeated_spaces", 20):
            warnings.append(RuleWarning(type="whitespace", message="Excessive whitespace detected"))

        if len(patterns.all_caps_words(text)) > _limit("all_caps_words", 10):
            warnings.append(
                RuleWarning(type="all_caps", message="Many all-caps words detected (may indicate formatting issues)")
            )

        score = max(0.0, score)
        details: dict[str, Any] = {
            "raw_score": score,
            "special_characters": special,
            "table_rows": tables,
            "header_footer_markers": header_footer,
            "has_email": email,
            "has_phone": phone,
            "bullet_styles": bullet_styles,
            "section_headers": headers,
            "format": file_format or None,
            "total_issues": len(issues),
            "total_warnings": len(warnings),
        }
        return SubScoreResult(score=clamp_unit(score / 100), details=details, issues=tuple(issues), warnings=tuple(warnings))
