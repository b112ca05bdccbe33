"""Checks for the *understandable* principle (3.x)."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from bitvcheck.checks.operable import LINKS, PAGE_OUTLINE
from bitvcheck.checks.perceivable import FORM_FIELDS
from bitvcheck.core._types import EvidenceMode
from bitvcheck.rules import understandable as rules

if TYPE_CHECKING:
    from bitvcheck.checks.base import CheckRegistry
    from bitvcheck.core.context import CheckContext
    from bitvcheck.core.record import ErrorRecord

LANG_RE = re.compile(r"^[a-z]{2}(-[A-Z]{2})?$")

_NON_INPUT_TYPES = frozenset({"hidden", "submit", "button"})
_IMPORTANT_TYPES = frozenset({"email", "tel"})


async def check_page_language(ctx: CheckContext) -> list[ErrorRecord]:
    outline = await ctx.page.evaluate(PAGE_OUTLINE)
    lang = outline.get("lang")
    if not lang:
        message = "No page language (lang attribute) defined"
    elif not LANG_RE.match(lang):
        message = f"Invalid language code: {lang}"
    else:
        return []
    return [ctx.error(message, element=outline.get("html"), selector="html")]


async def check_unusual_words(ctx: CheckContext) -> list[ErrorRecord]:
    outline = await ctx.page.evaluate(PAGE_OUTLINE)
    if outline.get("glossary"):
        return []
    return [ctx.error("No glossary or explanation of unusual words found", selector="body")]


def ambiguous_links(links: list[dict[str, Any]]) -> dict[str, list[str]]:
    """Map each link text to its distinct targets, keeping texts with more than one."""
    targets: dict[str, list[str]] = {}
    for link in links:
        text = link.get("text", "")
        if not text:
            continue
        hrefs = targets.setdefault(text, [])
        if link.get("href") not in hrefs:
            hrefs.append(link.get("href"))
    return {text: hrefs for text, hrefs in targets.items() if len(hrefs) > 1}


async def check_consistent_identification(ctx: CheckContext) -> list[ErrorRecord]:
    links = await ctx.page.evaluate(LINKS)
    return [
        ctx.error(
            f'Inconsistent naming: "{text}" leads to multiple targets ({", ".join(hrefs)})',
            text=text,
            hrefs=hrefs,
        )
        for text, hrefs in ambiguous_links(links).items()
    ]


def _is_text_input(field: dict[str, Any]) -> bool:
    return field.get("type") not in _NON_INPUT_TYPES


async def check_error_identification(ctx: CheckContext) -> list[ErrorRecord]:
    return [
        ctx.error("Required field without validation attributes", element=field)
        for field in await ctx.page.evaluate(FORM_FIELDS)
        if field.get("inForm")
        and not field.get("excluded")
        and _is_text_input(field)
        and field.get("required")
        and not field.get("validation")
        and not field.get("ariaInvalid")
    ]


async def check_labels_or_instructions(ctx: CheckContext) -> list[ErrorRecord]:
    errors = []
    for field in await ctx.page.evaluate(FORM_FIELDS):
        if field.get("excluded") or not _is_text_input(field):
            continue
        labelled = bool(field.get("hasLabel") or field.get("ariaLabel") or field.get("ariaLabelledby"))
        important = field.get("required") or field.get("type") in _IMPORTANT_TYPES
        if important and not labelled and not field.get("title"):
            errors.append(ctx.error("Important form field without label", element=field))
        if field.get("required") and not labelled and field.get("placeholder"):
            errors.append(ctx.error("Required field uses only a placeholder as label", element=field))
    return errors


def register(registry: CheckRegistry) -> None:
    registry.register(rules.R_3_1_1, check_page_language, evidence=EvidenceMode.FIRST_PAGE)
    registry.register(rules.R_3_1_3, check_unusual_words)
    registry.register(rules.R_3_2_4, check_consistent_identification)
    registry.register(rules.R_3_3_1, check_error_identification, evidence=EvidenceMode.ELEMENT)
    registry.register(rules.R_3_3_2, check_labels_or_instructions, evidence=EvidenceMode.ELEMENT)
