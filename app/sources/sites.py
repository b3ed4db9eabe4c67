from __future__ import annotations

from .base import (
    MIN_DESCRIPTION_CHARS,
    MIN_SECTION_CHARS,
    ContainerSiteExtractor,
    PageContext,
    SiteExtractor,
    SiteSelectors,
    element_text,
    select_first,
    text_with_fallback,
)


class LinkedInExtractor(SiteExtractor):
    portal = "linkedin"
    url_markers = ("linkedin.com/jobs/view/", "linkedin.com/jobs/search/")
    host_marker = "linkedin.com"
    page_marker = '[data-test-id="job-details"]'
    primary = ('div[data-test-id="job-details"]', "div.description__text", ".description__text")
    selectors = SiteSelectors(
        description=(
            'div[data-test-id="job-details"]',
            "div.description__text",
            ".description__text",
            ".show-more-less-html__markup",
            ".jobs-description-content__text",
            ".jobs-box__html-content",
            ".jobs-description__text",
            '[class*="description"]',
            '[class*="job-details"]',
            '[data-test-id*="description"]',
            "article section",
            "main .jobs-box",
        ),
        title=(
            "h1.jobs-unified-top-card__job-title",
            "h1.job-details-jobs-unified-top-card__job-title",
            'h1[data-test-id="job-details-title"]',
            ".jobs-unified-top-card__job-title",
            "h1",
            '[data-test-id*="title"]',
        ),
        company=(
            "a.jobs-unified-top-card__company-name",
            ".jobs-unified-top-card__company-name",
            ".jobs-unified-top-card__primary-description a",
            '[data-test-id="job-details-company-name"]',
            '[class*="company-name"]',
        ),
        location=(
            ".jobs-unified-top-card__primary-description-without-tagline",
            ".jobs-unified-top-card__bullet",
            '[data-test-id="job-details-location"]',
            '[class*="location"]',
            ".jobs-unified-top-card__workplace-type",
        ),
    )

    def description(self, page: PageContext) -> str:
        element = select_first(page.soup, self.primary)
        if element is None:
            return super().description(page)
        text = element_text(element)
        # Collapsed "show more" markup can hold the longer copy.
        expanded = element.select_one(".show-more-less-html__markup")
        if expanded is not None:
            expanded_text = element_text(expanded)
            if len(expanded_text) > len(text):
                text = expanded_text
        return text


class IndeedExtractor(SiteExtractor):
    portal = "indeed"
    url_markers = ("indeed.com/viewjob", "indeed.com/jobs")
    host_marker = "indeed.com"
    page_marker = "#jobDescriptionText"
    selectors = SiteSelectors(
        description=(
            "#jobDescriptionText",
            "#job-description-container",
            ".jobsearch-jobDescriptionText",
            ".jobsearch-JobComponent-description",
            '[data-testid="job-description"]',
            ".jobsearch-jobDescription",
            ".job-description",
            '[class*="jobDescription"]',
            ".jobsearch-jobDescriptionText section",
            '.jobsearch-jobDescriptionText div[data-testid*="job-description"]',
            "main #jobDescriptionText",
            '[id*="description"]',
        ),
        title=(
            "h1.jobsearch-JobInfoHeader-title",
            ".jobsearch-JobInfoHeader-title",
            'h2[class*="jobTitle"]',
            "h1",
            '[data-testid="job-title"]',
        ),
        company=(
            '[data-testid="job-header-company-name"]',
            ".jobsearch-InlineCompanyRating",
            ".jobsearch-CompanyReview--heading",
            '[data-testid="inlineHeader-companyName"]',
            '[class*="companyName"]',
            'a[data-testid="company-name"]',
        ),
        location=(
            '[data-testid="job-location"]',
            ".jobsearch-JobInfoHeader-subtitle",
            '[data-testid="job-location-banner"]',
            '[class*="location"]',
        ),
    )


class NaukriExtractor(SiteExtractor):
    portal = "naukri"
    url_markers = ("naukri.com/job-listings", "naukri.com/job-detail")
    host_marker = "naukri.com"
    page_marker = ".jd-container"
    sections = ".jd-sec, .job-detail-sec, [class*='jd-sec']"
    selectors = SiteSelectors(
        description=(
            ".jd-container",
            ".job-description",
            ".jd-details",
            '[class*="jobDescription"]',
            '[class*="jd-container"]',
            ".jd-wrap",
            ".jd-content",
            '[class*="description"]',
            ".detail",
            "main .job-details",
        ),
        title=(
            "h1.job-title",
            ".job-title",
            'h1[class*="jobTitle"]',
            ".jd-header-title",
            "h1",
            '[class*="title"]',
        ),
        company=(
            ".jd-header-comp-name",
            ".company-name",
            '[class*="companyName"]',
            ".cmp-name",
            'a[href*="/company/"]',
        ),
        location=(".loc", ".location", '[class*="location"]', ".jd-header-loc", ".loc-sec"),
    )

    def description(self, page: PageContext) -> str:
        text = text_with_fallback(page.soup, self.selectors.description)
        if len(text) >= MIN_DESCRIPTION_CHARS:
            return text
        # Some listings split the description across detail sections.
        sections = [element_text(node) for node in page.soup.select(self.sections)]
        sections = [section for section in sections if len(section) > MIN_SECTION_CHARS]
        return "\n\n".join(sections) if sections else text


class GreenhouseExtractor(ContainerSiteExtractor):
    portal = "greenhouse"
    url_markers = ("greenhouse.io",)
    host_marker = "greenhouse"
    page_marker = "#content"
    containers = ("#content", ".content")
    stripped = ("header", ".header", ".page-header", "footer", ".footer", ".page-footer")
    selectors = SiteSelectors(
        description=(
            "#content",
            ".content",
            ".page",
            '[class*="job-description"]',
            ".section",
            ".section-page",
            "#main",
            "main .content",
            '[id*="description"]',
        ),
        title=(".app-title", "h1", ".page-header h1", '[class*="job-title"]', ".header h1"),
        company=(
            ".company-name",
            ".company-name a",
            '[class*="company"]',
            'header a[href*="/company/"]',
            ".page-header a",
        ),
        location=(".location", '[class*="location"]', ".job-meta .location", ".page-header .location"),
    )


class LeverExtractor(ContainerSiteExtractor):
    portal = "lever"
    url_markers = ("lever.co",)
    host_marker = "lever"
    page_marker = ".posting"
    containers = (".posting-content", ".posting")
    stripped = (".posting-header", ".posting-actions", ".posting-apply")
    selectors = SiteSelectors(
        description=(
            ".posting",
            ".posting-header + .posting-content",
            ".posting-content",
            '[class*="posting"]',
            ".posting-description",
            ".content",
            "main .posting",
            '[class*="description"]',
        ),
        title=(".posting-headline", ".posting-title", "h2.posting-headline", "h2", '[class*="headline"]'),
        company=(".posting-category-title", ".company-name", "header a", '[class*="company"]'),
        location=(".posting-categories", ".posting-category", '[class*="location"]', ".posting-header .posting-category"),
    )
