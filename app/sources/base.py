from __future__ import annotations

import copy
import logging
import re
from dataclasses import dataclass, field
from typing import Protocol, Sequence
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Tag

from app.core.errors import ExtractionError
from app.schemas.extraction import ExtractedSource

logger = logging.getLogger(__name__)

MIN_DESCRIPTION_CHARS = 100
MIN_SECTION_CHARS = 50

NOISE_SELECTORS = (
    "script",
    "style",
    "noscript",
    "button",
    "nav",
    "header",
    "footer",
    ".header",
    ".footer",
    ".navigation",
    ".nav",
    ".menu",
    ".sidebar",
    ".ad",
    ".advertisement",
    ".share",
    ".social",
    '[role="navigation"]',
    '[role="banner"]',
    '[role="contentinfo"]',
    '[aria-label*="share" i]',
    '[aria-label*="save" i]',
    '[aria-label*="apply" i]',
)

_NOISE_LINE_PATTERNS = (
    re.compile(r"share\s+on\s+.*", re.IGNORECASE),
    re.compile(r"save\s+(?:job|this|for)\b.*", re.IGNORECASE),
    re.compile(r"apply\s+now.*", re.IGNORECASE),
    re.compile(r"view\s+all\s+.*", re.IGNORECASE),
    re.compile(r"cookie\s+.*", re.IGNORECASE),
    re.compile(r"privacy\s+(?:policy|notice).*", re.IGNORECASE),
    re.compile(r"terms\s+(?:of|and)\s+.*", re.IGNORECASE),
    re.compile(r"©\s*\d{4}.*"),
    re.compile(r"all\s+rights\s+reserved.*", re.IGNORECASE),
)
_ZERO_WIDTH_RE = re.compile("[\u200b-\u200d\ufeff]")

JOB_INDICATORS = (
    re.compile(r"requirements?", re.IGNORECASE),
    re.compile(r"qualifications?", re.IGNORECASE),
    re.compile(r"responsibilit(?:y|ies)", re.IGNORECASE),
    re.compile(r"experience", re.IGNORECASE),
    re.compile(r"skills?", re.IGNORECASE),
    re.compile(r"description", re.IGNORECASE),
    re.compile(r"position", re.IGNORECASE),
    re.compile(r"role", re.IGNORECASE),
)
PAGE_NOISE_PATTERNS = (
    re.compile(r"\b(?:home|about|contact|privacy|terms|cookie)\b", re.IGNORECASE),
    re.compile(r"©\s*\d{4}"),
    re.compile(r"all\s+rights\s+reserved", re.IGNORECASE),
)
MAX_PAGE_NOISE = 5


@dataclass(slots=True)
class PageContext:
    """A fetched or pasted page: its address and raw markup."""

    url: str
    html: str
    _soup: BeautifulSoup | None = field(default=None, init=False, repr=False)

    @property
    def soup(self) -> BeautifulSoup:
        if self._soup is None:
            self._soup = BeautifulSoup(self.html or "", "html.parser")
        return self._soup

    @property
    def hostname(self) -> str:
        return (urlparse(self.url or "").hostname or "").lower()


class SourceExtractor(Protocol):
    portal: str

    def detect(self, page: PageContext) -> bool:
        ...

    def extract(self, page: PageContext) -> ExtractedSource:
        ...


def clean_text(text: str | None) -> str:
    if not text:
        return ""
    cleaned = _ZERO_WIDTH_RE.sub("", text).replace("\r\n", "\n").replace("\r", "\n")
    lines: list[str] = []
    for raw_line in cleaned.split("\n"):
        line = re.sub(r"[ \t\xa0]+", " ", raw_line).strip()
        for pattern in _NOISE_LINE_PATTERNS:
            line = pattern.sub("", line).strip()
        lines.append(line)
    joined = "\n".join(lines)
    joined = re.sub(r"\n{3,}", "\n\n", joined)
    return joined.strip()


def element_text(element: Tag | None) -> str:
    """Visible text of an element with scripts, chrome and action buttons removed."""
    if element is None:
        return ""
    clone = copy.copy(element)
    for selector in NOISE_SELECTORS:
        for node in clone.select(selector):
            node.decompose()
    return clean_text(clone.get_text("\n", strip=True))


def select_first(root: BeautifulSoup | Tag, selectors: Sequence[str]) -> Tag | None:
    for selector in selectors:
        element = root.select_one(selector)
        if element is not None:
            return element
    return None


def text_with_fallback(root: BeautifulSoup | Tag, selectors: Sequence[str], *, min_chars: int = MIN_SECTION_CHARS) -> str:
    """Text of the first selector whose element carries enough content."""
    for selector in selectors:
        element = root.select_one(selector)
        if element is None:
            continue
        text = element_text(element)
        if len(text) > min_chars:
            return text
    return ""


def short_text_with_fallback(root: BeautifulSoup | Tag, selectors: Sequence[str], *, max_chars: int = 180) -> str:
    for selector in selectors:
        element = root.select_one(selector)
        if element is None:
            continue
        text = clean_text(element.get_text(" ", strip=True))
        if text and len(text) <= max_chars:
            return text
    return ""


def is_valid_job_description(text: str | None, min_length: int = MIN_DESCRIPTION_CHARS) -> bool:
    cleaned = clean_text(text)
    if len(cleaned) < min_length:
        return False
    noise_count = sum(len(pattern.findall(cleaned)) for pattern in PAGE_NOISE_PATTERNS)
    if noise_count > MAX_PAGE_NOISE:
        return False
    return any(pattern.search(cleaned) for pattern in JOB_INDICATORS)


@dataclass(frozen=True, slots=True)
class SiteSelectors:
    description: tuple[str, ...]
    title: tuple[str, ...] = ("h1",)
    company: tuple[str, ...] = ()
    location: tuple[str, ...] = ()


class SiteExtractor:
    """Selector-driven extractor for a job portal with a known page layout."""

    portal = "generic"
    url_markers: tuple[str, ...] = ()
    host_marker = ""
    page_marker = ""
    selectors = SiteSelectors(description=())

    def detect(self, page: PageContext) -> bool:
        url = (page.url or "").lower()
        if any(marker in url for marker in self.url_markers):
            return True
        if self.host_marker and self.host_marker in page.hostname and self.page_marker:
            return page.soup.select_one(self.page_marker) is not None
        return False

    def description(self, page: PageContext) -> str:
        return text_with_fallback(page.soup, self.selectors.description)

    def extract(self, page: PageContext) -> ExtractedSource:
        text = self.description(page)
        if not is_valid_job_description(text):
            raise ExtractionError(
                f"No valid job description found on {self.portal.title()} page. "
                "The page may not be a job posting, or the structure has changed."
            )
        soup = page.soup
        result = ExtractedSource(
            text=text,
            title=short_text_with_fallback(soup, self.selectors.title),
            company=short_text_with_fallback(soup, self.selectors.company),
            location=short_text_with_fallback(soup, self.selectors.location),
            portal=self.portal,
            url=page.url,
            metadata={"extraction_mode": "site_selectors", "characters": len(text)},
        )
        logger.info("source_extracted portal=%s chars=%d", self.portal, len(text))
        return result


class ContainerSiteExtractor(SiteExtractor):
    """Site whose description lives in one container with its own header chrome."""

    containers: tuple[str, ...] = ()
    stripped: tuple[str, ...] = ()

    def description(self, page: PageContext) -> str:
        container = select_first(page.soup, self.containers)
        if container is None:
            return super().description(page)
        clone = copy.copy(container)
        for selector in self.stripped:
            for node in clone.select(selector):
                node.decompose()
        return element_text(clone)
