from collections.abc import AsyncIterator

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, async_playwright

from bitvcheck.core.config import AuditConfig
from bitvcheck.core.runner import RunResult, run_checks

VIEWPORT = {"width": 1280, "height": 720}


@pytest.fixture
async def live_page() -> AsyncIterator[Page]:
    """A blank Chromium page; skips the test when no browser is installed."""
    async with async_playwright() as pw:
        try:
            browser = await pw.chromium.launch(headless=True)
        except PlaywrightError as exc:
            pytest.skip(f"Chromium is not available: {exc.message}")
        try:
            yield await browser.new_page(viewport=VIEWPORT)
        finally:
            await browser.close()


async def audit_html(page: Page, html: str, *rule_ids: str) -> RunResult:
    """Load *html* into *page* and run the checks, optionally only *rule_ids*."""
    await page.set_content(html)
    config = AuditConfig(capture_evidence=False, include_rules=frozenset(rule_ids))
    return await run_checks(page, config=config)
