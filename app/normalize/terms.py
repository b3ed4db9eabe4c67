from __future__ import annotations

import re
from typing import Iterable

from app.taxonomy import TaxonomyProvider, get_default_taxonomy_provider

_WHITESPACE_RE = re.compile(r"\s+")
_VERSION_SUFFIX_RE = re.compile(r"^(.+?)\s+v?(?:\d+(?:\.\d+)*|\d+\.x)$")
_FILE_SUFFIX_RE = re.compile(r"^(.+?)\.(?:js|jsx|ts|tsx)$")
_KEEP_JS_SUFFIX = frozenset({"node", "next", "nuxt"})


def _lookup_key(raw: str) -> str:
    return _WHITESPACE_RE.sub(" ", raw).strip().lower()


def _strip_version(key: str) -> str:
    match = _VERSION_SUFFIX_RE.match(key)
    return match.group(1).strip() if match else key


def _strip_file_suffix(key: str) -> str:
    match = _FILE_SUFFIX_RE.match(key)
    if not match:
        return key
    base = match.group(1)
    if base in _KEEP_JS_SUFFIX:
        return f"{base}.js"
    return base


def _title_word(word: str) -> str:
    head = word[:1]
    upper = head.upper()
    # Only capitalize when lowercasing the result gives the original back.
    if len(upper) != 1 or upper.lower() != head:
        return word
    return upper + word[1:]


def _default_case(key: str) -> str:
    words = key.split(" ")
    if len(words) == 1:
        return key
    return " ".join(_title_word(word) for word in words)


def normalize_term(raw: str | None, taxonomy: TaxonomyProvider | None = None) -> str:
    """Map a token or phrase to its single canonical spelling.

    Never raises: unknown terms fall through to default casing (single words
    lowercase, phrases title case), and empty input yields "".
    """
    if not raw:
        return ""
    key = _lookup_key(str(raw))
    if not key:
        return ""
    provider = taxonomy or get_default_taxonomy_provider()

    # Rewrites only shorten the key or settle on a fixed point.
    while True:
        canonical = provider.canonical_for(key)
        if canonical is not None:
            return canonical
        rewritten = _strip_file_suffix(_strip_version(key))
        if rewritten == key or not rewritten:
            break
        key = rewritten

    return _default_case(key)


def normalize_terms(values: Iterable[str], taxonomy: TaxonomyProvider | None = None) -> list[str]:
    normalized: list[str] = []
    for value in values:
        term = normalize_term(value, taxonomy=taxonomy)
        if term:
            normalized.append(term)
    return normalized


def term_key(term: str) -> str:
    """Case-insensitive identity used for deduplication and matching."""
    return term.lower()
