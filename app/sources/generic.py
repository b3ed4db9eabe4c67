from __future__ import annotations

import copy
import json
import logging
import re
from typing import Any

from bs4 import BeautifulSoup, Tag
from readability import Document

from app.core.errors import ExtractionError
from app.schemas.extraction import ExtractedSource

from .base import (
    MIN_DESCRIPTION_CHARS,
    NOISE_SELECTORS,
    PageContext,
    clean_text,
    element_text,
    is_valid_job_description,
)

logger = logging.getLogger(__name__)

JOB_CONTAINER_HINTS = (
    "job-description",
    "job-description-text",
    "job-details",
    "job-detail",
    "description",
    "job-content",
    "job-info",
    "position-description",
    "role-description",
)
_NOISE_ANCESTORS = {"nav", "header", "footer"}
_NOISE_ANCESTOR_CLASSES = {"nav", "header", "footer", "sidebar"}
_COMPANY_SELECTORS = ('[class*="company"]', '[id*="company"]', 'a[href*="/company/"]', ".organization")
_LOCATION_SELECTORS = ('[class*="location"]', '[id*="location"]', '[class*="city"]')


def _html_fragment_text(fragment: str) -> str:
    if not fragment:
        return ""
    return clean_text(BeautifulSoup(fragment, "html.parser").get_text("\n", strip=True))


def _iter_json_nodes(payload: Any) -> list[dict[str, Any]]:
    nodes: list[dict[str, Any]] = []
    if isinstance(payload, dict):
        nodes.append(payload)
        graph = payload.get("@graph")
        if isinstance(graph, list):
            nodes.extend(item for item in graph if isinstance(item, dict))
    elif isinstance(payload, list):
        for item in payload:
            if isinstance(item, dict):
                nodes.extend(_iter_json_nodes(item))
    return nodes


def _location_text(value: Any) -> str:
    if isinstance(value, list):
        parts = [_location_text(item) for item in value]
        return ", ".join(part for part in parts if part)
    if isinstance(value, dict):
        address = value.get("address")
        if isinstance(address, dict):
            parts = [str(address.get(key) or "").strip() for key in ("addressLocality", "addressRegion", "addressCountry")]
            merged = ", ".join(part for part in parts if part)
            if merged:
                return merged
        return str(value.get("name") or "").strip()
    if isinstance(value, str):
        return value.strip()
    return ""


def job_posting_json_ld(soup: BeautifulSoup) -> dict[str, str]:
    """Title, company, location and description from a schema.org JobPosting block."""
    for script in soup.find_all("script", attrs={"type": re.compile(r"ld\+json", re.IGNORECASE)}):
        raw_json = (script.string or script.get_text() or "").strip()
        try:
            parsed = json.loads(raw_json)
        except ValueError:
            continue
        for node in _iter_json_nodes(parsed):
            type_value = node.get("@type")
            if isinstance(type_value, str):
                types = {type_value.lower().replace(" ", "")}
            elif isinstance(type_value, list):
                types = {str(item).lower().replace(" ", "") for item in type_value}
            else:
                continue
            if "jobposting" not in types:
                continue
            description = node.get("description")
            description_text = _html_fragment_text(description if isinstance(description, str) else "")
            if not description_text:
                continue
            hiring = node.get("hiringOrganization")
            return {
                "title": str(node.get("title") or "").strip(),
                "company": str(hiring.get("name") or "").strip() if isinstance(hiring, dict) else "",
                "location": _location_text(node.get("jobLocation") or node.get("jobLocationType")),
                "description": description_text,
            }
    return {}


def _in_noise_region(element: Tag) -> bool:
    for parent in element.parents:
        if not isinstance(parent, Tag):
            continue
        if parent.name in _NOISE_ANCESTORS:
            return True
        classes = {str(item).lower() for item in parent.get("class") or []}
        if classes & _NOISE_ANCESTOR_CLASSES:
            return True
    return False


def candidate_score(element: Tag, text: str) -> int:
    """Heuristic weight of an element as the job description container."""
    score = 0
    if 500 <= len(text) <= 10_000:
        score += 10
    elif MIN_DESCRIPTION_CHARS < len(text) < 500:
        score += 5

    if element.name in {"main", "article"}:
        score += 5
    elif element.name in {"section", "div"}:
        score += 3

    markers = " ".join(str(item) for item in element.get("class") or [])
    markers = f"{markers} {element.get('id') or ''}".lower()
    if "description" in markers or "details" in markers:
        score += 5
    if "job" in markers or "position" in markers or "role" in markers:
        score += 3
    if _in_noise_region(element):
        score -= 10
    return score


def _container_candidates(soup: BeautifulSoup) -> list[Tag]:
    seen: set[int] = set()
    candidates: list[Tag] = []
    for hint in JOB_CONTAINER_HINTS:
        for element in soup.select(f'#{hint}, .{hint}, [class*="{hint}"], [id*="{hint}"]'):
            if element.name in {"script", "style"} or id(element) in seen:
                continue
            seen.add(id(element))
            candidates.append(element)
    return candidates


def _readability_text(html: str) -> tuple[str, str]:
    if not html.strip():
        return "", ""
    try:
        document = Document(html)
        return document.short_title() or "", _html_fragment_text(document.summary(html_partial=True))
    except ValueError as exc:
        logger.warning("readability_failed reason=%s", exc.__class__.__name__)
        return "", ""


def _first_short_text(soup: BeautifulSoup, selectors: tuple[str, ...]) -> str:
    for selector in selectors:
        element = soup.select_one(selector)
        if element is None:
            continue
        text = clean_text(element.get_text(" ", strip=True))
        if 0 < len(text) < 100:
            return text
    return ""


def _page_title(soup: BeautifulSoup) -> str:
    heading = soup.select_one("h1")
    if heading is not None:
        text = clean_text(heading.get_text(" ", strip=True))
        if text:
            return text
    raw_title = soup.title.get_text(" ", strip=True) if soup.title else ""
    return re.split(r"\s[|\-]\s", raw_title, maxsplit=1)[0].strip()


class GenericExtractor:
    """Fallback for any page: structured data, container heuristics, then readability."""

    portal = "generic"

    def detect(self, page: PageContext) -> bool:
        return True

    def _best_container(self, soup: BeautifulSoup) -> str:
        best_text = ""
        best_score = 0
        for element in _container_candidates(soup):
            text = element_text(element)
            if len(text) < MIN_DESCRIPTION_CHARS:
                continue
            score = candidate_score(element, text)
            if score > best_score:
                best_score = score
                best_text = text
        if best_text and best_score >= 5:
            return best_text
        for element in soup.select('main, article, [role="main"]'):
            text = element_text(element)
            if len(text) > 500 and is_valid_job_description(text):
                return text
        return best_text

    def _body_text(self, soup: BeautifulSoup) -> str:
        body = soup.body or soup
        clone = copy.copy(body)
        for selector in NOISE_SELECTORS:
            for node in clone.select(selector):
                node.decompose()
        return clean_text(clone.get_text("\n", strip=True))

    def extract(self, page: PageContext) -> ExtractedSource:
        soup = page.soup
        title = ""
        company = ""
        location = ""
        mode = "container"

        structured = job_posting_json_ld(soup)
        if structured:
            mode = "json_ld"
            text = structured["description"]
            title = structured["title"]
            company = structured["company"]
            location = structured["location"]
        else:
            text = self._best_container(soup)

        if not is_valid_job_description(text):
            readable_title, readable_text = _readability_text(page.html or "")
            if is_valid_job_description(readable_text) and len(readable_text) > len(text):
                mode = "readability"
                text = readable_text
                title = title or readable_title

        if not is_valid_job_description(text):
            body_text = self._body_text(soup)
            if is_valid_job_description(body_text) and len(body_text) > len(text):
                mode = "body"
                text = body_text

        if not is_valid_job_description(text):
            raise ExtractionError(
                "No valid job description found. This page may not be a job posting, or uses an unsupported format."
            )

        result = ExtractedSource(
            text=text,
            title=title or _page_title(soup),
            company=company or _first_short_text(soup, _COMPANY_SELECTORS),
            location=location or _first_short_text(soup, _LOCATION_SELECTORS),
            portal=self.portal,
            url=page.url,
            metadata={"extraction_mode": mode, "characters": len(text)},
        )
        logger.info("source_extracted portal=%s mode=%s chars=%d", self.portal, mode, len(text))
        return result
