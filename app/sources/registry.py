from __future__ import annotations

import logging
from typing import Sequence

from app.core.errors import ExtractionError
from app.schemas.extraction import ExtractedSource

from .base import PageContext, SourceExtractor
from .generic import GenericExtractor
from .sites import GreenhouseExtractor, IndeedExtractor, LeverExtractor, LinkedInExtractor, NaukriExtractor

logger = logging.getLogger(__name__)

SOURCE_REGISTRY: tuple[SourceExtractor, ...] = (
    LinkedInExtractor(),
    IndeedExtractor(),
    NaukriExtractor(),
    GreenhouseExtractor(),
    LeverExtractor(),
)
FALLBACK_EXTRACTOR: SourceExtractor = GenericExtractor()


def detect_portal(page: PageContext, extractors: Sequence[SourceExtractor] = SOURCE_REGISTRY) -> SourceExtractor | None:
    for extractor in extractors:
        if extractor.detect(page):
            return extractor
    return None


def portal_name(page: PageContext) -> str:
    extractor = detect_portal(page)
    return extractor.portal if extractor is not None else FALLBACK_EXTRACTOR.portal


def extract_from_page(
    page: PageContext,
    extractors: Sequence[SourceExtractor] = SOURCE_REGISTRY,
    fallback: SourceExtractor = FALLBACK_EXTRACTOR,
) -> ExtractedSource:
    """Pull requirement text from a page with its portal extractor, else the generic one.

    Raises ExtractionError when neither yields a usable job description.
    """
    extractor = detect_portal(page, extractors)
    if extractor is not None:
        try:
            return extractor.extract(page)
        except ExtractionError as exc:
            logger.warning("source_extractor_failed portal=%s: %s", extractor.portal, exc)
    result = fallback.extract(page)
    if extractor is not None:
        result.metadata["detected_portal"] = extractor.portal
    return result
