from __future__ import annotations

import re
from typing import Iterable, Sequence

from app.core.config.scoring import get_scoring_value
from app.taxonomy import TaxonomyProvider, get_default_taxonomy_provider

_SPLIT_RE = re.compile(r"[\s,;]+")
_LEADING_RE = re.compile(r"^[^\w.]+")
_TRAILING_RE = re.compile(r"[^\w+#]+$")
_STOPWORD_STRIP_RE = re.compile(r"[^\w]")


def _min_token_length() -> int:
    return int(get_scoring_value("extraction.min_token_length", 3))


def _clean_token(raw: str) -> str:
    token = _LEADING_RE.sub("", raw)
    if token.startswith(".") and not token[1:2].isalnum():
        token = token.lstrip(".")
    return _TRAILING_RE.sub("", token)


def tokenize(text: str | None, *, min_length: int | None = None) -> list[str]:
    """Split raw text into lowercase word tokens.

    Technical punctuation inside a token is preserved ("node.js", "ci/cd",
    "c++", "c#", ".net"); tokens shorter than ``min_length`` are dropped.
    """
    if not text:
        return []
    limit = _min_token_length() if min_length is None else min_length
    tokens: list[str] = []
    for raw in _SPLIT_RE.split(text.lower()):
        if not raw:
            continue
        token = _clean_token(raw)
        if len(token) < limit:
            continue
        if not any(char.isalpha() for char in token):
            continue
        tokens.append(token)
    return tokens


def is_stopword(
    word: str,
    *,
    include_technical: bool = True,
    extra: Iterable[str] = (),
    taxonomy: TaxonomyProvider | None = None,
) -> bool:
    if not word:
        return True
    provider = taxonomy or get_default_taxonomy_provider()
    lowered = word.lower()
    stopwords = provider.stopwords(include_technical)
    if lowered in stopwords:
        return True
    stripped = _STOPWORD_STRIP_RE.sub("", lowered)
    if stripped in stopwords:
        return True
    extra_words = {item.lower() for item in extra}
    return lowered in extra_words or stripped in extra_words


def filter_stopwords(
    tokens: Sequence[str],
    *,
    include_technical: bool = True,
    extra: Iterable[str] = (),
    taxonomy: TaxonomyProvider | None = None,
) -> list[str]:
    provider = taxonomy or get_default_taxonomy_provider()
    extra_words = frozenset(item.lower() for item in extra)
    return [
        token
        for token in tokens
        if not is_stopword(token, include_technical=include_technical, extra=extra_words, taxonomy=provider)
    ]


def generate_ngrams(tokens: Sequence[str], sizes: Sequence[int] = (2, 3)) -> list[str]:
    """Contiguous windows over the token stream, shortest size first."""
    ngrams: list[str] = []
    for size in sizes:
        if size < 2 or size > len(tokens):
            continue
        for start in range(len(tokens) - size + 1):
            ngrams.append(" ".join(tokens[start:start + size]))
    return ngrams


def candidate_terms(
    text: str | None,
    *,
    remove_stopwords: bool = True,
    include_ngrams: bool = True,
    taxonomy: TaxonomyProvider | None = None,
) -> list[str]:
    """Unigrams followed by n-gram windows, ready for normalization."""
    tokens = tokenize(text)
    if remove_stopwords:
        tokens = filter_stopwords(tokens, taxonomy=taxonomy)
    if not include_ngrams:
        return tokens
    sizes = tuple(int(size) for size in get_scoring_value("extraction.ngram_sizes", [2, 3]))
    return tokens + generate_ngrams(tokens, sizes)
