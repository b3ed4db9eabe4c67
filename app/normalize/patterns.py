from __future__ import annotations

import re

SPECIAL_CHARACTER_RE = re.compile(r"[^\w\s\-.,;:!?()\[\]{}'\"]")
TABLE_ROW_RE = re.compile(r"\|\s*\w+\s*\|")
HEADER_FOOTER_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"page\s+\d+", re.IGNORECASE),
    re.compile(r"^\d+\s*$", re.MULTILINE),
    re.compile(r"confidential", re.IGNORECASE),
    re.compile(r"proprietary", re.IGNORECASE),
)
EMAIL_RE = re.compile(r"[\w.+-]+@[\w.-]+\.\w+")
PHONE_RE = re.compile(r"\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}")
ALL_CAPS_RE = re.compile(r"\b[A-Z]{4,}\b")
REPEATED_SPACES_RE = re.compile(r" {2,}")
SECTION_HEADER_RE = re.compile(
    r"^\s*(?:professional |work |technical |core )?"
    r"(experience|education|skills|summary|objective|projects|certifications|awards|profile|employment history)"
    r"\s*:?\s*$",
    re.IGNORECASE | re.MULTILINE,
)
BULLET_STYLE_PATTERNS: dict[str, re.Pattern[str]] = {
    "bullet": re.compile(r"^\s*[•●▪◦‣]\s+", re.MULTILINE),
    "dash": re.compile(r"^\s*[-–—]\s+", re.MULTILINE),
    "asterisk": re.compile(r"^\s*\*\s+", re.MULTILINE),
    "numbered": re.compile(r"^\s*\d+[.)]\s+", re.MULTILINE),
}
_BULLET_PREFIX_RE = re.compile(r"^\s*(?:[•●▪◦‣\-–—*·]|\d+[.)])\s+")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_NUMERIC_RE = re.compile(r"\d|%|[$€£]")


def enumerate_lines(text: str) -> list[tuple[int, str]]:
    return [(index + 1, line) for index, line in enumerate(text.splitlines())]


def normalize_line(line: str) -> str:
    return re.sub(r"\s+", " ", line).strip()


def special_characters(text: str) -> list[str]:
    """Distinct non-standard punctuation characters in first-seen order."""
    seen: dict[str, None] = {}
    for char in SPECIAL_CHARACTER_RE.findall(text or ""):
        seen.setdefault(char, None)
    return list(seen)


def table_row_count(text: str) -> int:
    return len(TABLE_ROW_RE.findall(text or ""))


def header_footer_count(text: str) -> int:
    return sum(len(pattern.findall(text or "")) for pattern in HEADER_FOOTER_PATTERNS)


def has_email(text: str) -> bool:
    return bool(EMAIL_RE.search(text or ""))


def has_phone(text: str) -> bool:
    return bool(PHONE_RE.search(text or ""))


def bullet_style_counts(text: str) -> dict[str, int]:
    counts: dict[str, int] = {}
    for style, pattern in BULLET_STYLE_PATTERNS.items():
        found = len(pattern.findall(text or ""))
        if found:
            counts[style] = found
    return counts


def has_mixed_bullets(text: str) -> bool:
    return len(bullet_style_counts(text)) >= 2


def section_headers(text: str) -> list[str]:
    return [match.group(0).strip() for match in SECTION_HEADER_RE.finditer(text or "")]


def all_caps_words(text: str) -> list[str]:
    return ALL_CAPS_RE.findall(text or "")


def long_lines(text: str, max_chars: int = 150) -> tuple[int, int]:
    """Return (long line count, total line count)."""
    lines = (text or "").split("\n")
    return sum(1 for line in lines if len(line) > max_chars), len(lines)


def repeated_space_runs(text: str) -> int:
    return len(REPEATED_SPACES_RE.findall(text or ""))


def is_bullet_line(line: str) -> bool:
    return bool(_BULLET_PREFIX_RE.match(line))


def strip_bullet_prefix(line: str) -> str:
    return _BULLET_PREFIX_RE.sub("", line).strip()


def bullet_lines(text: str) -> list[tuple[int, str]]:
    """Bullet lines with their 1-based line numbers, prefix removed."""
    found: list[tuple[int, str]] = []
    for number, line in enumerate_lines(text or ""):
        if is_bullet_line(line):
            content = strip_bullet_prefix(line)
            if content:
                found.append((number, content))
    return found


def split_sentences(text: str) -> list[str]:
    return [part.strip() for part in _SENTENCE_SPLIT_RE.split(text or "") if part.strip()]


def has_numeric_content(text: str) -> bool:
    return bool(_NUMERIC_RE.search(text or ""))
