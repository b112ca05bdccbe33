import copy
from collections.abc import Callable
from typing import Any, TypeAlias

from bitvcheck.checks._dom import script_name
from bitvcheck.core.config import AuditConfig
from bitvcheck.core.context import CheckContext
from bitvcheck.core.record import ErrorRecord
from bitvcheck.core.rule import Rule

Facts: TypeAlias = dict[str, Any]


def element(selector: str, tag: str | None = None, **facts: Any) -> dict[str, Any]:
    """An element description as the in-page ``describe()`` helper returns it."""
    tag = tag or selector.split("[")[0].lstrip("#") or "div"
    return {"selector": selector, "snippet": f"<{tag}>", "tag": tag, **facts}


def clean_facts() -> Facts:
    """Answers for every in-page script on a page without any violation."""
    return {
        "images": [],
        "videos": [],
        "description-tracks": [],
        "form-fields": [],
        "headings": [element("h1", level=1, text="Willkommen")],
        "positioned-elements": [],
        "text-colors": [],
        "body-box": {"width": 1920, "height": 3000},
        "clipped-text": [],
        "reflow": {"viewportWidth": 320, "scrollWidth": 320, "overflowing": []},
        "control-colors": [],
        "interactive-elements": [],
        "moving-content": [],
        "page-outline": {
            "html": element("html"),
            "head": element("head"),
            "body": element("body"),
            "lang": "de",
            "title": "Startseite der Beispiel GmbH",
            "anchorLinks": ["Springe zum Inhalt"],
            "main": True,
            "nav": True,
            "search": True,
            "sitemap": False,
            "glossary": True,
        },
        "links": [],
        "labels": [],
        "focus-styles": [],
        "aria-labelled": [],
        "document-structure": {"duplicateIds": [], "buttons": []},
        "roles": [],
        "evidence-reveal": None,
        "evidence-box": {"x": 10, "y": 20, "width": 100, "height": 40},
    }


class FakePage:
    """In-memory stand-in for a Playwright page.

    ``evaluate`` answers from canned facts keyed by the name each in-page
    script carries.  A fact may be a callable ``(page, arg) -> value`` for
    answers that depend on page state (injected styles, viewport).
    """

    def __init__(
        self,
        facts: Facts | None = None,
        *,
        viewport: dict[str, int] | None = None,
    ) -> None:
        self.facts: Facts = {**clean_facts(), **(facts or {})}
        self.viewport_size: dict[str, int] | None = viewport or {"width": 1920, "height": 1080}
        self.styles: dict[str, str] = {}
        self.evaluated: list[str | None] = []
        self.viewport_history: list[dict[str, int]] = []
        self.screenshots: list[dict[str, Any]] = []
        self.waited: list[str] = []
        self.fail_wait = False
        self.fail_screenshot = False

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        name = script_name(expression)
        self.evaluated.append(name)
        if name == "add-style":
            self.styles[arg["id"]] = arg["css"]
            return None
        if name == "remove-style":
            self.styles.pop(arg, None)
            return None
        if name not in self.facts:
            msg = f"No canned facts for script {name!r}"
            raise KeyError(msg)
        value = self.facts[name]
        if callable(value):
            value = value(self, arg)
        return copy.deepcopy(value)

    async def set_viewport_size(self, viewport_size: dict[str, int]) -> None:
        self.viewport_size = dict(viewport_size)
        self.viewport_history.append(dict(viewport_size))

    async def screenshot(
        self,
        *,
        path: str | None = None,
        clip: Any = None,
        full_page: bool | None = None,
    ) -> bytes:
        if self.fail_screenshot:
            msg = "screenshot failed"
            raise RuntimeError(msg)
        self.screenshots.append({"path": path, "clip": clip, "full_page": full_page})
        return b""

    async def wait_for_selector(
        self,
        selector: str,
        *,
        state: Any = None,
        timeout: float | None = None,
    ) -> None:
        self.waited.append(selector)
        if self.fail_wait:
            msg = f"Timeout {timeout}ms exceeded waiting for {selector}"
            raise TimeoutError(msg)


def make_ctx(
    page: FakePage,
    rule: Rule,
    *,
    config: AuditConfig | None = None,
) -> CheckContext:
    return CheckContext(page=page, rule=rule, config=config or AuditConfig())


async def run_check(
    inspect: Callable[[CheckContext], Any],
    rule: Rule,
    facts: Facts | None = None,
    *,
    config: AuditConfig | None = None,
) -> list[ErrorRecord]:
    page = FakePage(facts)
    return await inspect(make_ctx(page, rule, config=config))


def messages(errors: list[ErrorRecord]) -> list[str]:
    return [e.message for e in errors]
