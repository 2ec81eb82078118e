"""Scrape a public LinkedIn profile page with a headless browser.

Each profile field is read on its own; a selector that matches nothing only
empties that field. Only failing to start the browser or load the page aborts
the scrape.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generic, TypeVar

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, async_playwright

from resume_builder.errors import ScrapeFailed
from resume_builder.models.profile import ExtractedProfile
from resume_builder.utils.url_validator import validate_profile_url

logger = logging.getLogger(__name__)

PAGE_TIMEOUT_MS = 30000
SETTLE_MS = 2000

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

NAME_SELECTOR = "h1.text-heading-xlarge, h1.top-card-layout__title"
HEADLINE_SELECTOR = ".text-body-medium.break-words, .top-card-layout__headline"
EXPERIENCE_SELECTOR = (
    'section[data-section="experience"] .experience-item, '
    "#experience-section .pv-entity__summary-info"
)
EDUCATION_SELECTOR = (
    'section[data-section="education"] .education-item, '
    "#education-section .pv-entity__degree-name"
)
SKILLS_SELECTOR = (
    'section[data-section="skills"] .skill-category-entity__name, '
    ".pv-skill-category-entity__name span"
)

_TEXT_JS = "el => (el.textContent || '').trim()"
_TEXT_LIST_JS = "els => els.map(el => (el.textContent || '').trim()).filter(Boolean)"

T = TypeVar("T")


@dataclass
class FieldOutcome(Generic[T]):
    """Value of one guarded field read, plus why it failed if it did."""

    field: str
    value: T
    failure: str | None = None


async def _read_text(page: Page, field: str, selector: str) -> FieldOutcome[str]:
    try:
        value = await page.eval_on_selector(selector, _TEXT_JS)
    except PlaywrightError as exc:
        return FieldOutcome(field, "", f"selector not found: {exc.message}")
    return FieldOutcome(field, value or "")


async def _read_list(page: Page, field: str, selector: str) -> FieldOutcome[list[str]]:
    try:
        values = await page.eval_on_selector_all(selector, _TEXT_LIST_JS)
    except PlaywrightError as exc:
        return FieldOutcome(field, [], f"selector failed: {exc.message}")
    return FieldOutcome(field, list(values or []))


async def _read_fields(page: Page) -> ExtractedProfile:
    outcomes = [
        await _read_text(page, "name", NAME_SELECTOR),
        await _read_text(page, "headline", HEADLINE_SELECTOR),
        await _read_list(page, "experience", EXPERIENCE_SELECTOR),
        await _read_list(page, "education", EDUCATION_SELECTOR),
        await _read_list(page, "skills", SKILLS_SELECTOR),
    ]
    for outcome in outcomes:
        if outcome.failure:
            logger.debug("Profile field %s left empty: %s", outcome.field, outcome.failure)
    return ExtractedProfile(**{o.field: o.value for o in outcomes})


async def scrape_profile(
    url: str,
    *,
    timeout_ms: int = PAGE_TIMEOUT_MS,
    settle_ms: int = SETTLE_MS,
) -> ExtractedProfile:
    """Render ``url`` in headless Chromium and read the profile fields.

    Raises InvalidSource for non-LinkedIn URLs (before a browser is started)
    and ScrapeFailed when the browser cannot start or the page cannot load.
    """
    url = validate_profile_url(url)

    try:
        async with async_playwright() as p:
            browser = await p.chromium.launch(
                headless=True,
                args=["--no-sandbox", "--disable-setuid-sandbox"],
                timeout=timeout_ms,
            )
            try:
                page = await browser.new_page(user_agent=USER_AGENT)
                await page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
                # Give client-side rendering a moment to fill the top card
                await page.wait_for_timeout(settle_ms)
                return await _read_fields(page)
            finally:
                await browser.close()
    except PlaywrightError as exc:
        logger.error("LinkedIn scraping error for %s: %s", url, exc)
        raise ScrapeFailed("Failed to scrape LinkedIn profile") from exc
