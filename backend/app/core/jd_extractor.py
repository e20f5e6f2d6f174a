"""
Best-effort job description scraping from an arbitrary posting URL.
"""
from __future__ import annotations

import logging
import re
from typing import Optional
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

MIN_DESCRIPTION_CHARS = 100
MIN_BLOCK_CHARS = 50
MAX_DESCRIPTION_CHARS = 50_000
TRUNCATION_MARKER = "\n\n[Content truncated due to length]"

NOISE_SELECTOR = "script, style, nav, footer, header, aside, .ad, .advertisement, .social, .share"

DESCRIPTION_SELECTORS = [
    # LinkedIn
    '[data-automation-id="jobPostingDescription"]',
    ".description__text",
    ".show-more-less-html__markup",
    ".jobs-description-content__text",
    # Indeed
    "#jobDescriptionText",
    ".jobsearch-jobDescriptionText",
    # Generic job boards
    ".job-description",
    ".job-description-text",
    ".job-details",
    ".job-content",
    '[class*="job"][class*="description"]',
    '[class*="job"][class*="detail"]',
    '[id*="job"][id*="description"]',
    '[id*="job"][id*="detail"]',
    # Generic content areas
    "main article",
    "main .content",
    '[role="main"] article',
    '[role="main"] .content',
]

MAIN_CONTENT_SELECTOR = 'main, [role="main"], .main-content, #main-content'

UNEXTRACTABLE_MESSAGE = (
    "Could not extract a valid job description from this page. Please try pasting "
    "the text directly, or check if the URL is correct."
)


class JobDescriptionError(Exception):
    """Extraction failed; ``status_code`` is what the API should answer with."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def validate_url(url: Optional[str]) -> str:
    if not url or not isinstance(url, str):
        raise JobDescriptionError("URL is required")

    parsed = urlparse(url.strip())
    if not parsed.scheme or not parsed.netloc:
        raise JobDescriptionError("Invalid URL format")
    if parsed.scheme not in ("http", "https"):
        raise JobDescriptionError("Only HTTP and HTTPS URLs are supported")
    return url.strip()


def clean_text(text: str) -> str:
    text = re.sub(r"\n{3,}", "\n\n", text)
    text = re.sub(r"\s{2,}", " ", text)
    return text.strip()


def extract_from_html(html: str) -> str:
    """Apply the selector heuristics to a page; returns "" when nothing fits."""
    soup = BeautifulSoup(html, "html.parser")
    for el in soup.select(NOISE_SELECTOR):
        el.decompose()

    description = ""
    for selector in DESCRIPTION_SELECTORS:
        el = soup.select_one(selector)
        if el is None:
            continue
        text = el.get_text().strip()
        if len(text) > MIN_DESCRIPTION_CHARS:
            logger.debug(f"Matched job description selector {selector!r}")
            description = text
            break

    if len(description) < MIN_DESCRIPTION_CHARS:
        main = soup.select_one(MAIN_CONTENT_SELECTOR)
        if main is not None:
            blocks = [el.get_text().strip() for el in main.select("p, li, div")]
            long_blocks = [b for b in blocks if len(b) > MIN_BLOCK_CHARS]
            if long_blocks:
                description = "\n\n".join(long_blocks)
            else:
                description = main.get_text().strip()

    return clean_text(description)


def finalize_description(text: str) -> str:
    if not text or len(text) < MIN_DESCRIPTION_CHARS:
        raise JobDescriptionError(UNEXTRACTABLE_MESSAGE)
    if len(text) > MAX_DESCRIPTION_CHARS:
        text = text[:MAX_DESCRIPTION_CHARS] + TRUNCATION_MARKER
    return text


def fetch_job_description(url: Optional[str], client: httpx.Client, timeout: float = 20.0) -> str:
    url = validate_url(url)

    resp = client.get(url, headers={"User-Agent": USER_AGENT}, follow_redirects=True, timeout=timeout)
    if not resp.is_success:
        logger.info(f"Fetching {url} returned {resp.status_code}")
        raise JobDescriptionError(
            f"Failed to fetch webpage: {resp.status_code} {resp.reason_phrase}",
            status_code=resp.status_code,
        )

    return finalize_description(extract_from_html(resp.text))
