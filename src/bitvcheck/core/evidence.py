"""Screenshot evidence for error records.

Capture is best-effort: every failure is logged and results in a record
without ``evidence_path``, never in an exception.
"""

from __future__ import annotations

import dataclasses
import logging
import math
import secrets
import time
from pathlib import Path
from typing import TYPE_CHECKING

from bitvcheck.core._types import EvidenceMode

if TYPE_CHECKING:
    from bitvcheck.core.page import LivePage
    from bitvcheck.core.record import ErrorRecord

logger = logging.getLogger("bitvcheck.evidence")

_REVEAL = """/* bitvcheck:evidence-reveal */
(sel) => {
  const el = document.querySelector(sel);
  if (el) el.scrollIntoView({ block: 'center' });
}"""

_BOUNDING_BOX = """/* bitvcheck:evidence-box */
(sel) => {
  const el = document.querySelector(sel);
  if (!el) return null;
  const style = window.getComputedStyle(el);
  if (style.display === 'none' || style.visibility === 'hidden') return null;
  const rect = el.getBoundingClientRect();
  return { x: rect.x, y: rect.y, width: rect.width, height: rect.height };
}"""


def _valid_box(box: object) -> bool:
    if not isinstance(box, dict):
        return False
    try:
        x, y, w, h = (float(box[k]) for k in ("x", "y", "width", "height"))
    except (KeyError, TypeError, ValueError):
        return False
    if any(math.isnan(v) for v in (x, y, w, h)):
        return False
    return w > 0 and h > 0 and x >= 0 and y >= 0


class EvidenceSink:
    """Directory-backed store for screenshot evidence.

    Filenames are ``error_<rule>_<ms>_<hex>.png`` (``_fallback_`` is inserted
    for full-page substitutes of element shots).  The sink never deletes
    files; retention is owned by whoever owns the directory.
    """

    def __init__(self, directory: Path | str = "screenshots", *, wait_timeout: float = 5.0) -> None:
        self.directory = Path(directory)
        self.wait_timeout = wait_timeout

    def filename(self, rule_id: str, *, fallback: bool = False) -> Path:
        stamp = int(time.time() * 1000)
        kind = "fallback_" if fallback else ""
        return self.directory / f"error_{rule_id}_{kind}{stamp}_{secrets.token_hex(3)}.png"

    async def capture_page(self, page: LivePage, rule_id: str, *, fallback: bool = False) -> str | None:
        """Take a full-page screenshot. Returns its path, or ``None`` on failure."""
        path = self.filename(rule_id, fallback=fallback)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            await page.screenshot(path=str(path), full_page=True)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Full-page screenshot for %s failed: %s", rule_id, exc)
            return None
        return str(path)

    async def capture_element(self, page: LivePage, rule_id: str, selector: str) -> str | None:
        """Screenshot the element matching *selector*, clipped to its box.

        Waits up to ``wait_timeout`` seconds for the element to become
        visible; a timeout is not fatal.  Falls back to a full-page shot when
        the element has no usable bounding box.
        """
        if not selector:
            return await self.capture_page(page, rule_id, fallback=True)
        try:
            await page.wait_for_selector(
                selector, state="visible", timeout=self.wait_timeout * 1000
            )
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Element %s not visible within %.1fs: %s", selector, self.wait_timeout, exc
            )
        try:
            await page.evaluate(_REVEAL, selector)
            box = await page.evaluate(_BOUNDING_BOX, selector)
            if not _valid_box(box):
                logger.info("No usable bounding box for %s, using full page", selector)
                return await self.capture_page(page, rule_id, fallback=True)
            path = self.filename(rule_id)
            path.parent.mkdir(parents=True, exist_ok=True)
            await page.screenshot(path=str(path), clip=box)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Screenshot for %s failed: %s", selector, exc)
            return await self.capture_page(page, rule_id, fallback=True)
        return str(path)

    async def attach(
        self,
        page: LivePage,
        rule_id: str,
        records: list[ErrorRecord],
        mode: EvidenceMode,
    ) -> list[ErrorRecord]:
        """Return *records* with ``evidence_path`` filled in according to *mode*."""
        if mode is EvidenceMode.NONE or not records:
            return records

        if mode is EvidenceMode.FIRST_PAGE:
            path = await self.capture_page(page, rule_id)
            return [dataclasses.replace(records[0], evidence_path=path), *records[1:]]

        attached: list[ErrorRecord] = []
        for record in records:
            if mode is EvidenceMode.ELEMENT:
                path = await self.capture_element(page, rule_id, record.selector)
            else:
                path = await self.capture_page(page, rule_id)
            attached.append(dataclasses.replace(record, evidence_path=path))
        return attached
