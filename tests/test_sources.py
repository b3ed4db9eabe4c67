import json
import sys
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

import httpx

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.core.errors import ExtractionError  # noqa: E402
from app.sources import (  # noqa: E402
    PageContext,
    clean_text,
    detect_portal,
    extract_from_page,
    fetch_page,
    is_valid_job_description,
    portal_name,
)
from app.sources.fetch import host_is_private_or_local, normalize_public_url  # noqa: E402
from app.sources.generic import candidate_score, job_posting_json_ld  # noqa: E402

DESCRIPTION_HTML = (
    "<p>We are hiring a backend engineer to build and operate our payment APIs.</p>"
    "<h3>Requirements</h3>"
    "<ul><li>5+ years of Python experience</li><li>Strong skills in PostgreSQL and Docker</li></ul>"
)

DESCRIPTION_TEXT = (
    "We are hiring a backend engineer to build and operate our payment APIs.\n"
    "Requirements\n5+ years of Python experience\nStrong skills in PostgreSQL and Docker"
)

LINKEDIN_HTML = (
    "<html><body>"
    '<h1 class="jobs-unified-top-card__job-title">Backend Engineer</h1>'
    '<a class="jobs-unified-top-card__company-name">Acme Payments</a>'
    f'<div data-test-id="job-details">{DESCRIPTION_HTML}<button>Apply now</button></div>'
    "</body></html>"
)

GREENHOUSE_HTML = (
    "<html><body>"
    '<h1 class="app-title">Platform Engineer</h1>'
    '<div class="location">Remote</div>'
    f'<div id="content"><div class="header">Acme Careers Portal</div>{DESCRIPTION_HTML}</div>'
    "</body></html>"
)

GENERIC_HTML = (
    "<html><head><title>Backend Engineer | Acme</title></head><body>"
    "<nav><a>Home</a><a>About</a></nav>"
    f'<div class="job-description">{DESCRIPTION_HTML}</div>'
    "</body></html>"
)


def json_ld_html() -> str:
    posting = {
        "@context": "https://schema.org",
        "@type": "JobPosting",
        "title": "Data Engineer",
        "hiringOrganization": {"@type": "Organization", "name": "Acme Analytics"},
        "jobLocation": {"@type": "Place", "address": {"addressLocality": "Berlin", "addressCountry": "DE"}},
        "description": DESCRIPTION_HTML,
    }
    return (
        "<html><head>"
        f'<script type="application/ld+json">{json.dumps(posting)}</script>'
        "</head><body><p>Loading...</p></body></html>"
    )


class JobDescriptionValidationTests(unittest.TestCase):
    def test_valid_description(self):
        self.assertTrue(is_valid_job_description(DESCRIPTION_TEXT))

    def test_short_or_indicatorless_text_is_rejected(self):
        self.assertFalse(is_valid_job_description("Requirements: Python"))
        self.assertFalse(is_valid_job_description("lorem ipsum dolor sit amet " * 10))

    def test_navigation_heavy_text_is_rejected(self):
        noisy = "Home About Contact Privacy Terms Cookie policy. " * 3 + "Requirements: Python experience."
        self.assertFalse(is_valid_job_description(noisy))

    def test_clean_text_drops_noise_lines(self):
        cleaned = clean_text("Backend\u200b Engineer\r\nApply now\r\n\r\n\r\n\r\nBuild   APIs")
        self.assertEqual(cleaned, "Backend Engineer\n\nBuild APIs")


class SiteExtractorTests(unittest.TestCase):
    def test_linkedin_detected_by_url(self):
        page = PageContext(url="https://www.linkedin.com/jobs/view/12345", html=LINKEDIN_HTML)
        self.assertEqual(portal_name(page), "linkedin")
        result = extract_from_page(page)
        self.assertEqual(result.portal, "linkedin")
        self.assertEqual(result.title, "Backend Engineer")
        self.assertEqual(result.company, "Acme Payments")
        self.assertIn("5+ years of Python experience", result.text)
        self.assertNotIn("Apply now", result.text)
        self.assertEqual(result.metadata["extraction_mode"], "site_selectors")

    def test_indeed_detected_by_host_and_marker(self):
        html = f'<html><body><h1>Data Analyst</h1><div id="jobDescriptionText">{DESCRIPTION_HTML}</div></body></html>'
        page = PageContext(url="https://uk.indeed.com/m/basecamp/viewjob?jk=1", html=html)
        self.assertEqual(detect_portal(page).portal, "indeed")
        self.assertIsNone(detect_portal(PageContext(url="https://uk.indeed.com/about", html="<html></html>")))

    def test_greenhouse_strips_container_header(self):
        page = PageContext(url="https://boards.greenhouse.io/acme/jobs/42", html=GREENHOUSE_HTML)
        result = extract_from_page(page)
        self.assertEqual(result.portal, "greenhouse")
        self.assertEqual(result.title, "Platform Engineer")
        self.assertEqual(result.location, "Remote")
        self.assertNotIn("Acme Careers Portal", result.text)
        self.assertIn("Requirements", result.text)

    def test_lever_detected_by_url(self):
        page = PageContext(url="https://jobs.lever.co/acme/7f3c", html="<html></html>")
        self.assertEqual(portal_name(page), "lever")

    def test_failed_site_extraction_falls_back_to_generic(self):
        page = PageContext(url="https://www.linkedin.com/jobs/view/999", html=json_ld_html())
        with self.assertLogs("app.sources.registry", level="WARNING"):
            result = extract_from_page(page)
        self.assertEqual(result.portal, "generic")
        self.assertEqual(result.metadata["detected_portal"], "linkedin")
        self.assertEqual(result.metadata["extraction_mode"], "json_ld")


class GenericExtractorTests(unittest.TestCase):
    def test_json_ld_job_posting(self):
        page = PageContext(url="https://careers.example.com/jobs/7", html=json_ld_html())
        self.assertEqual(portal_name(page), "generic")
        result = extract_from_page(page)
        self.assertEqual(result.title, "Data Engineer")
        self.assertEqual(result.company, "Acme Analytics")
        self.assertEqual(result.location, "Berlin, DE")
        self.assertIn("PostgreSQL and Docker", result.text)

    def test_json_ld_without_job_posting_is_ignored(self):
        page = PageContext(url="", html='<script type="application/ld+json">{"@type": "Organization"}</script>')
        self.assertEqual(job_posting_json_ld(page.soup), {})

    def test_container_heuristic(self):
        page = PageContext(url="https://careers.example.com/jobs/8", html=GENERIC_HTML)
        result = extract_from_page(page)
        self.assertEqual(result.metadata["extraction_mode"], "container")
        self.assertEqual(result.title, "Backend Engineer")
        self.assertNotIn("About", result.text)

    def test_candidate_score_prefers_description_containers(self):
        page = PageContext(url="", html=GENERIC_HTML)
        element = page.soup.select_one(".job-description")
        self.assertEqual(candidate_score(element, "x" * 200), 16)

    def test_non_job_page_raises(self):
        page = PageContext(url="https://example.com/", html="<html><body><p>Welcome to our homepage.</p></body></html>")
        with self.assertRaisesRegex(ExtractionError, "No valid job description found"):
            extract_from_page(page)


class FetchPageTests(unittest.TestCase):
    def test_local_hosts_are_rejected(self):
        self.assertTrue(host_is_private_or_local("localhost"))
        self.assertTrue(host_is_private_or_local("10.0.0.5"))
        with self.assertRaisesRegex(ExtractionError, "Private or local"):
            fetch_page("http://127.0.0.1:8000/jobs")

    def test_normalize_public_url(self):
        self.assertEqual(
            normalize_public_url("Jobs.Example.com/positions/1?ref=x"),
            ("https://jobs.example.com/positions/1?ref=x", "jobs.example.com"),
        )
        with self.assertRaisesRegex(ExtractionError, "required"):
            normalize_public_url("   ")

    def test_successful_fetch(self):
        fake_response = SimpleNamespace(status_code=200, text=GENERIC_HTML, url="https://jobs.example.com/positions/1")
        with patch("app.sources.fetch.host_is_private_or_local", return_value=False), patch(
            "httpx.Client.get", return_value=fake_response
        ):
            page = fetch_page("https://jobs.example.com/positions/1")
        self.assertEqual(page.url, "https://jobs.example.com/positions/1")
        self.assertEqual(page.hostname, "jobs.example.com")

    def test_blocked_status(self):
        fake_response = SimpleNamespace(status_code=403, text="", url="https://jobs.example.com/protected")
        with patch("app.sources.fetch.host_is_private_or_local", return_value=False), patch(
            "httpx.Client.get", return_value=fake_response
        ):
            with self.assertRaisesRegex(ExtractionError, "HTTP 403"):
                fetch_page("https://jobs.example.com/protected")

    def test_auth_wall(self):
        fake_response = SimpleNamespace(
            status_code=200,
            text="<html><body>Please verify you are human.</body></html>",
            url="https://jobs.example.com/positions/2",
        )
        with patch("app.sources.fetch.host_is_private_or_local", return_value=False), patch(
            "httpx.Client.get", return_value=fake_response
        ):
            with self.assertRaisesRegex(ExtractionError, "protected"):
                fetch_page("https://jobs.example.com/positions/2")

    def test_transport_error(self):
        with patch("app.sources.fetch.host_is_private_or_local", return_value=False), patch(
            "httpx.Client.get", side_effect=httpx.ConnectError("connection refused")
        ):
            with self.assertRaisesRegex(ExtractionError, "Unable to download"):
                fetch_page("https://jobs.example.com/positions/3")


if __name__ == "__main__":
    unittest.main()
