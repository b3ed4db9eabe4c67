from __future__ import annotations

import logging
from dataclasses import dataclass, field

from app.core.config.scoring import get_scoring_value
from app.normalize.terms import normalize_term, term_key
from app.normalize.tokenizer import filter_stopwords, generate_ngrams, tokenize
from app.taxonomy import TaxonomyProvider, get_default_taxonomy_provider

from .classifier import CATEGORIES, Category, classify_term

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Term:
    text: str
    frequency: int
    category: Category

    @property
    def key(self) -> str:
        return term_key(self.text)


@dataclass(frozen=True, slots=True)
class ExtractionOptions:
    min_frequency: int = 1
    max_keywords: int = 100
    include_ngrams: bool = True
    remove_stopwords: bool = True
    include_proximity: bool = False
    proximity_window: int = 10

    @classmethod
    def from_config(cls, **overrides: object) -> "ExtractionOptions":
        values = {
            "min_frequency": int(get_scoring_value("extraction.min_frequency", 1)),
            "max_keywords": int(get_scoring_value("extraction.max_keywords", 100)),
            "proximity_window": int(get_scoring_value("extraction.proximity_window", 10)),
        }
        values.update(overrides)
        return cls(**values)  # type: ignore[arg-type]


@dataclass(frozen=True, slots=True)
class Proximity:
    distance: int
    occurrences: int


@dataclass(slots=True)
class ExtractionResult:
    terms: list[Term] = field(default_factory=list)
    total_words: int = 0
    proximity: dict[str, dict[str, Proximity]] | None = None
    positions: dict[str, list[int]] | None = None

    @property
    def unique_terms(self) -> int:
        return len(self.terms)

    def keys(self) -> list[str]:
        return [term.key for term in self.terms]

    def frequencies(self) -> dict[str, int]:
        return {term.key: term.frequency for term in self.terms}

    def get(self, text: str) -> Term | None:
        key = term_key(text)
        for term in self.terms:
            if term.key == key:
                return term
        return None


@dataclass(frozen=True, slots=True)
class TermComparison:
    matched: list[Term]
    missing: list[Term]
    extra: list[Term]
    match_ratio: float


class TermExtractor:
    """Ranked, deduplicated term lists for a single document."""

    def __init__(self, taxonomy: TaxonomyProvider | None = None) -> None:
        self.taxonomy = taxonomy or get_default_taxonomy_provider()

    def _tokens(self, text: str | None, options: ExtractionOptions) -> list[str]:
        tokens = tokenize(text)
        if options.remove_stopwords:
            tokens = filter_stopwords(tokens, taxonomy=self.taxonomy)
        return tokens

    def normalized_stream(self, text: str | None, options: ExtractionOptions | None = None) -> list[str]:
        """Normalized candidate terms in text order, duplicates kept."""
        opts = options or ExtractionOptions.from_config()
        tokens = self._tokens(text, opts)
        candidates = list(tokens)
        if opts.include_ngrams:
            sizes = tuple(int(size) for size in get_scoring_value("extraction.ngram_sizes", [2, 3]))
            candidates.extend(generate_ngrams(tokens, sizes))
        stream: list[str] = []
        for candidate in candidates:
            normalized = normalize_term(candidate, taxonomy=self.taxonomy)
            if normalized:
                stream.append(normalized)
        return stream

    def extract(self, text: str | None, options: ExtractionOptions | None = None) -> ExtractionResult:
        opts = options or ExtractionOptions.from_config()
        if not text or not text.strip():
            return ExtractionResult()

        tokens = self._tokens(text, opts)
        counts: dict[str, int] = {}
        display: dict[str, str] = {}
        for normalized in self.normalized_stream(text, opts):
            key = term_key(normalized)
            display.setdefault(key, normalized)
            counts[key] = counts.get(key, 0) + 1

        ranked = [(key, count) for key, count in counts.items() if count >= opts.min_frequency]
        # Stable sort keeps first-occurrence order among equal frequencies.
        ranked.sort(key=lambda item: -item[1])
        ranked = ranked[: max(0, opts.max_keywords)]

        terms = [
            Term(text=display[key], frequency=count, category=classify_term(display[key], taxonomy=self.taxonomy))
            for key, count in ranked
        ]
        result = ExtractionResult(terms=terms, total_words=len(tokens))
        if opts.include_proximity:
            result.positions, result.proximity = self._proximity(tokens, terms, opts.proximity_window)
        logger.debug("terms_extracted tokens=%d unique=%d", len(tokens), len(terms))
        return result

    def _proximity(
        self,
        tokens: list[str],
        terms: list[Term],
        window: int,
    ) -> tuple[dict[str, list[int]], dict[str, dict[str, Proximity]]]:
        surviving = {term.key for term in terms}
        positions: dict[str, list[int]] = {}
        for index, token in enumerate(tokens):
            key = term_key(normalize_term(token, taxonomy=self.taxonomy))
            if key in surviving:
                positions.setdefault(key, []).append(index)

        proximity: dict[str, dict[str, Proximity]] = {}
        for left, left_positions in positions.items():
            neighbours: dict[str, Proximity] = {}
            for right, right_positions in positions.items():
                if left == right:
                    continue
                distances = [abs(a - b) for a in left_positions for b in right_positions]
                neighbours[right] = Proximity(
                    distance=min(distances),
                    occurrences=sum(1 for distance in distances if distance <= window),
                )
            if neighbours:
                proximity[left] = neighbours
        return positions, proximity

    def extract_by_category(
        self,
        text: str | None,
        options: ExtractionOptions | None = None,
    ) -> dict[str, list[Term]]:
        buckets: dict[str, list[Term]] = {category: [] for category in CATEGORIES}
        for term in self.extract(text, options).terms:
            buckets[term.category].append(term)
        return buckets

    def compare_terms(
        self,
        candidate_text: str | None,
        requirement_text: str | None,
        options: ExtractionOptions | None = None,
    ) -> TermComparison:
        candidate = self.extract(candidate_text, options)
        requirement = self.extract(requirement_text, options)
        candidate_keys = set(candidate.keys())
        requirement_keys = set(requirement.keys())

        matched = [term for term in requirement.terms if term.key in candidate_keys]
        missing = [term for term in requirement.terms if term.key not in candidate_keys]
        extra = [term for term in candidate.terms if term.key not in requirement_keys]
        ratio = len(matched) / len(requirement.terms) if requirement.terms else 0.0
        return TermComparison(matched=matched, missing=missing, extra=extra, match_ratio=round(ratio, 4))


def extract_terms(text: str | None, options: ExtractionOptions | None = None) -> ExtractionResult:
    return TermExtractor().extract(text, options)
