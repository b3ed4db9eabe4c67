from __future__ import annotations

import math
from collections import Counter
from typing import Sequence

# Smoothed IDF over a two-document corpus: a term shared by both documents
# keeps weight 1 instead of collapsing to 0.
_CORPUS_SIZE = 2


def build_vocabulary(*documents: Sequence[str]) -> list[str]:
    vocabulary: dict[str, None] = {}
    for tokens in documents:
        for token in tokens:
            vocabulary.setdefault(token, None)
    return list(vocabulary)


def term_frequencies(tokens: Sequence[str]) -> dict[str, float]:
    if not tokens:
        return {}
    total = len(tokens)
    return {token: count / total for token, count in Counter(tokens).items()}


def inverse_document_frequencies(
    documents: Sequence[Sequence[str]],
    vocabulary: Sequence[str],
) -> dict[str, float]:
    corpus_size = len(documents) or _CORPUS_SIZE
    presence = [set(tokens) for tokens in documents]
    idf: dict[str, float] = {}
    for term in vocabulary:
        df = sum(1 for tokens in presence if term in tokens)
        idf[term] = math.log((1 + corpus_size) / (1 + df)) + 1
    return idf


def tfidf_vectors(
    tokens_a: Sequence[str],
    tokens_b: Sequence[str],
) -> tuple[dict[str, float], dict[str, float]]:
    """TF-IDF vectors for both documents over their shared vocabulary."""
    vocabulary = build_vocabulary(tokens_a, tokens_b)
    idf = inverse_document_frequencies([tokens_a, tokens_b], vocabulary)
    tf_a = term_frequencies(tokens_a)
    tf_b = term_frequencies(tokens_b)
    vector_a = {term: tf_a.get(term, 0.0) * idf[term] for term in vocabulary}
    vector_b = {term: tf_b.get(term, 0.0) * idf[term] for term in vocabulary}
    return vector_a, vector_b


def cosine_similarity(left: dict[str, float], right: dict[str, float]) -> float:
    dot = sum(value * right.get(term, 0.0) for term, value in left.items())
    left_norm = math.sqrt(sum(value * value for value in left.values()))
    right_norm = math.sqrt(sum(value * value for value in right.values()))
    if left_norm <= 0 or right_norm <= 0:
        return 0.0
    return max(0.0, min(1.0, dot / (left_norm * right_norm)))


def document_similarity(tokens_a: Sequence[str], tokens_b: Sequence[str]) -> float:
    vector_a, vector_b = tfidf_vectors(tokens_a, tokens_b)
    return cosine_similarity(vector_a, vector_b)


def top_terms(
    tokens: Sequence[str],
    other_tokens: Sequence[str] = (),
    limit: int = 10,
) -> list[tuple[str, float]]:
    """Rank a document's own terms by TF-IDF weight against a second document."""
    if limit <= 0 or not tokens:
        return []
    vector, _ = tfidf_vectors(tokens, other_tokens)
    ranked = [(term, weight) for term, weight in vector.items() if weight > 0]
    ranked.sort(key=lambda item: -item[1])
    return [(term, round(weight, 6)) for term, weight in ranked[:limit]]
