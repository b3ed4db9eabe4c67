from __future__ import annotations

import ipaddress
import logging
import re
import socket
from urllib.parse import urlparse, urlunparse

import httpx

from app.core.config import settings
from app.core.errors import ExtractionError

from .base import PageContext

logger = logging.getLogger(__name__)

JOB_AUTH_WALL_MARKERS = {
    "sign in to continue",
    "log in to continue",
    "captcha",
    "verify you are human",
    "access denied",
    "enable javascript",
    "authentication required",
}
BLOCKED_STATUS_CODES = {401, 403, 429}
REQUEST_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/122.0.0.0 Safari/537.36"
    ),
    "Accept-Language": "en-US,en;q=0.9",
}


def normalize_public_url(raw_url: str) -> tuple[str, str]:
    value = (raw_url or "").strip()
    if not value:
        raise ExtractionError("Job URL is required.")
    if not re.match(r"^https?://", value, flags=re.IGNORECASE):
        value = f"https://{value}"
    parsed = urlparse(value)
    if parsed.scheme not in {"http", "https"}:
        raise ExtractionError("Only http/https job URLs are supported.")
    hostname = (parsed.hostname or "").lower().strip()
    if not parsed.netloc or not hostname:
        raise ExtractionError("Invalid job URL.")
    normalized = urlunparse((parsed.scheme.lower(), parsed.netloc.lower(), parsed.path or "/", "", parsed.query, ""))
    return normalized, hostname


def host_is_private_or_local(hostname: str) -> bool:
    host = (hostname or "").strip().lower()
    if host in {"localhost", "127.0.0.1", "::1"} or host.endswith(".local"):
        return True
    try:
        ip = ipaddress.ip_address(host)
        return bool(ip.is_private or ip.is_loopback or ip.is_link_local or ip.is_reserved)
    except ValueError:
        pass
    try:
        addresses = socket.getaddrinfo(host, None)
    except OSError:
        return False
    for _family, _socktype, _proto, _canon, sockaddr in addresses:
        try:
            resolved = ipaddress.ip_address(sockaddr[0])
        except (ValueError, IndexError):
            continue
        if resolved.is_private or resolved.is_loopback or resolved.is_link_local or resolved.is_reserved:
            return True
    return False


def auth_wall_marker(html: str) -> str | None:
    lowered = (html or "").lower()
    for marker in sorted(JOB_AUTH_WALL_MARKERS):
        if marker in lowered:
            return marker
    return None


def fetch_page(url: str, *, client: httpx.Client | None = None, timeout: float | None = None) -> PageContext:
    """Download a public job page.

    Raises ExtractionError for private hosts, transport failures, error
    statuses and pages that sit behind a sign-in or captcha wall.
    """
    normalized_url, hostname = normalize_public_url(url)
    if host_is_private_or_local(hostname):
        raise ExtractionError("Private or local URLs are not allowed for job extraction.")

    owns_client = client is None
    http = client or httpx.Client(
        timeout=timeout or settings.fetch_timeout_seconds,
        follow_redirects=True,
        headers=REQUEST_HEADERS,
    )
    try:
        response = http.get(normalized_url)
    except httpx.HTTPError as exc:
        logger.warning("page_fetch_failed host=%s reason=%s", hostname, exc.__class__.__name__)
        raise ExtractionError("Unable to download the job page.") from exc
    finally:
        if owns_client:
            http.close()

    if response.status_code in BLOCKED_STATUS_CODES:
        raise ExtractionError(f"Job page returned HTTP {response.status_code}. Paste the job description manually.")
    if response.status_code >= 400:
        raise ExtractionError(f"Job page returned HTTP {response.status_code}.")

    html = response.text or ""
    marker = auth_wall_marker(html)
    if marker is not None:
        logger.info("page_fetch_blocked host=%s marker=%s", hostname, marker)
        raise ExtractionError("Page appears protected (auth wall, captcha, or JS-only rendering). Paste the job description manually.")

    logger.info("page_fetched host=%s status=%d chars=%d", hostname, response.status_code, len(html))
    return PageContext(url=str(response.url), html=html)
