from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, Literal

from app.normalize.terms import term_key
from app.taxonomy import TaxonomyProvider, get_default_taxonomy_provider

Category = Literal["hard", "soft", "tool", "role", "other"]
CATEGORIES: tuple[str, ...] = ("hard", "soft", "tool", "role", "other")
_STRUCTURAL_MIN_LENGTH = 4


@lru_cache(maxsize=8)
def _compiled_patterns(provider: TaxonomyProvider) -> tuple[tuple[str, re.Pattern[str]], ...]:
    return tuple(
        (category, re.compile(pattern, re.IGNORECASE))
        for category, pattern in provider.category_patterns()
    )


def classify_term(term: str, taxonomy: TaxonomyProvider | None = None) -> Category:
    """Assign a term to hard, soft, tool, role or other.

    Curated dictionaries win, then the ordered regex fallbacks; a single
    alphabetic word of four or more letters is treated as a hard skill.
    """
    key = term_key(term or "").strip()
    if not key:
        return "other"
    provider = taxonomy or get_default_taxonomy_provider()

    category = provider.category_for(key)
    if category is not None:
        return category  # type: ignore[return-value]

    for category, pattern in _compiled_patterns(provider):
        if pattern.search(key):
            return category  # type: ignore[return-value]

    if " " not in key and key.isalpha() and len(key) >= _STRUCTURAL_MIN_LENGTH:
        return "hard"
    return "other"


def categorize_terms(terms: Iterable[str], taxonomy: TaxonomyProvider | None = None) -> dict[str, list[str]]:
    buckets: dict[str, list[str]] = {category: [] for category in CATEGORIES}
    seen: set[str] = set()
    for term in terms:
        key = term_key(term or "")
        if not key or key in seen:
            continue
        seen.add(key)
        buckets[classify_term(term, taxonomy=taxonomy)].append(term)
    return buckets
