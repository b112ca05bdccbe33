"""Open the page under audit in a headless browser and run the audit on it."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, async_playwright

from bitvcheck.checks.extractor import extract_colors, summarize_palette
from bitvcheck.core.config import AuditConfig
from bitvcheck.core.record import PageLoadError
from bitvcheck.core.runner import RunResult, run_checks

if TYPE_CHECKING:
    from bitvcheck.checks.base import CheckRegistry
    from bitvcheck.core.evidence import EvidenceSink

logger = logging.getLogger("bitvcheck.browser")


@dataclass(frozen=True, slots=True)
class PageAudit:
    """A finished audit of one URL."""

    url: str
    result: RunResult
    palette: list[dict[str, Any]] = field(default_factory=list)


@asynccontextmanager
async def open_page(url: str, config: AuditConfig | None = None) -> AsyncIterator[Page]:
    """Launch Chromium, load *url* and yield the page once the network is idle.

    Raises:
        :class:`PageLoadError`: If the browser cannot be started, navigation
            fails or times out, or the server answers with an error status.

    """
    cfg = config or AuditConfig()
    async with async_playwright() as pw:
        try:
            browser = await pw.chromium.launch(headless=True)
        except PlaywrightError as exc:
            raise PageLoadError(url, f"browser did not start: {exc.message}") from exc
        try:
            page = await browser.new_page(
                viewport={"width": cfg.viewport_width, "height": cfg.viewport_height},
            )
            logger.info("Loading %s", url)
            try:
                response = await page.goto(
                    url,
                    wait_until="networkidle",
                    timeout=cfg.navigation_timeout * 1000,
                )
            except PlaywrightError as exc:
                raise PageLoadError(url, exc.message) from exc
            if response is not None and not response.ok:
                raise PageLoadError(url, f"HTTP {response.status}")
            yield page
        finally:
            await browser.close()


async def audit_url(
    url: str,
    config: AuditConfig | None = None,
    *,
    registry: CheckRegistry | None = None,
    evidence: EvidenceSink | None = None,
) -> PageAudit:
    """Load *url* and run every enabled check against it.

    The color palette is sampled before any check runs, while the page is
    still in its loaded state.  :class:`PageLoadError` is the only exception
    that escapes.
    """
    cfg = config or AuditConfig()
    async with open_page(url, cfg) as page:
        try:
            palette = summarize_palette(await extract_colors(page))
        except PlaywrightError as exc:
            logger.warning("Color palette could not be sampled: %s", exc.message)
            palette = []
        result = await run_checks(page, config=cfg, registry=registry, evidence=evidence)
    return PageAudit(url=url, result=result, palette=palette)
