from .classifier import CATEGORIES, Category, categorize_terms, classify_term
from .extractor import (
    ExtractionOptions,
    ExtractionResult,
    Proximity,
    Term,
    TermComparison,
    TermExtractor,
    extract_terms,
)

__all__ = [
    "CATEGORIES",
    "Category",
    "classify_term",
    "categorize_terms",
    "Term",
    "ExtractionOptions",
    "ExtractionResult",
    "Proximity",
    "TermComparison",
    "TermExtractor",
    "extract_terms",
]
