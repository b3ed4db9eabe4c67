from __future__ import annotations

from typing import Mapping, Protocol


class TaxonomyProvider(Protocol):
    def canonical_for(self, key: str) -> str | None:
        """Return the canonical term for a lowercase lookup key, if one is known."""

    def category_for(self, term: str) -> str | None:
        """Return the curated category for a term, or None when no dictionary lists it."""

    def category_patterns(self) -> tuple[tuple[str, str], ...]:
        """Ordered (category, regex) fallbacks applied after dictionary lookup."""

    def stopwords(self, include_technical: bool = True) -> frozenset[str]:
        ...

    def action_verbs(self) -> Mapping[str, object]:
        ...

    def overused_words(self) -> Mapping[str, Mapping[str, object]]:
        ...
