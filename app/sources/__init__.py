from .base import PageContext, SourceExtractor, clean_text, is_valid_job_description
from .fetch import fetch_page
from .generic import GenericExtractor
from .registry import SOURCE_REGISTRY, detect_portal, extract_from_page, portal_name

__all__ = [
    "PageContext",
    "SourceExtractor",
    "GenericExtractor",
    "SOURCE_REGISTRY",
    "clean_text",
    "detect_portal",
    "extract_from_page",
    "fetch_page",
    "is_valid_job_description",
    "portal_name",
]
