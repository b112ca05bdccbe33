"""Live page interface and restore points for checks that mutate the page."""

from __future__ import annotations

import logging
import secrets
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Protocol, TypedDict

logger = logging.getLogger("bitvcheck.page")


class ViewportSize(TypedDict):
    width: int
    height: int


class LivePage(Protocol):
    """The subset of a browser page the checks rely on.

    ``playwright.async_api.Page`` satisfies this protocol as-is.
    """

    @property
    def viewport_size(self) -> ViewportSize | None: ...

    async def evaluate(self, expression: str, arg: Any = None) -> Any: ...

    async def set_viewport_size(self, viewport_size: ViewportSize) -> None: ...

    async def screenshot(
        self,
        *,
        path: str | None = None,
        clip: Any = None,
        full_page: bool | None = None,
    ) -> bytes: ...

    async def wait_for_selector(
        self,
        selector: str,
        *,
        state: Any = None,
        timeout: float | None = None,
    ) -> Any: ...


@asynccontextmanager
async def viewport_restore(page: LivePage) -> AsyncIterator[ViewportSize | None]:
    """Restore the page's viewport size on exit, whatever the body did to it.

    Yields the viewport size that was active on entry.
    """
    original = page.viewport_size
    saved: ViewportSize | None = (
        {"width": original["width"], "height": original["height"]} if original else None
    )
    try:
        yield saved
    finally:
        if saved is not None:
            await page.set_viewport_size(saved)
        else:
            logger.debug("No viewport size recorded; nothing to restore")


_ADD_STYLE = """/* bitvcheck:add-style */
(arg) => {
  const style = document.createElement('style');
  style.id = arg.id;
  style.textContent = arg.css;
  document.head.appendChild(style);
}"""

_REMOVE_STYLE = """/* bitvcheck:remove-style */
(id) => {
  const style = document.getElementById(id);
  if (style) style.remove();
}"""


@asynccontextmanager
async def injected_stylesheet(page: LivePage, css: str) -> AsyncIterator[str]:
    """Inject *css* as a ``<style>`` element for the duration of the block.

    Yields the id of the injected element.
    """
    style_id = f"bitvcheck-{secrets.token_hex(4)}"
    await page.evaluate(_ADD_STYLE, {"id": style_id, "css": css})
    try:
        yield style_id
    finally:
        await page.evaluate(_REMOVE_STYLE, style_id)
