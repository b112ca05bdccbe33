"""Checks for the *robust* principle (4.x)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from bitvcheck.checks._dom import script
from bitvcheck.core._types import EvidenceMode
from bitvcheck.rules import robust as rules

if TYPE_CHECKING:
    from bitvcheck.checks.base import CheckRegistry
    from bitvcheck.core.context import CheckContext
    from bitvcheck.core.record import ErrorRecord

DOCUMENT_STRUCTURE = script(
    "document-structure",
    """
  const ids = new Map();
  for (const el of document.querySelectorAll('[id]')) {
    const id = el.getAttribute('id');
    if (!id) continue;
    const entry = ids.get(id);
    if (entry) entry.count += 1;
    else ids.set(id, { id, count: 1, element: describe(el) });
  }
  const buttons = [];
  for (const button of document.querySelectorAll('button')) {
    const children = Array.from(button.querySelectorAll('div, p, ul, ol'), (c) => c.tagName.toLowerCase());
    buttons.push({ ...describe(button), blockChildren: [...new Set(children)] });
  }
  return {
    duplicateIds: Array.from(ids.values()).filter((entry) => entry.count > 1),
    buttons,
  };
""",
)

ROLES = script(
    "roles",
    """
  return Array.from(document.querySelectorAll('[role]'), (el) => ({
    ...describe(el),
    role: el.getAttribute('role'),
    ariaLabel: el.hasAttribute('aria-label'),
    ariaLabelledby: el.hasAttribute('aria-labelledby'),
    text: textOf(el),
  }));
""",
)


async def check_parsing(ctx: CheckContext) -> list[ErrorRecord]:
    structure = await ctx.page.evaluate(DOCUMENT_STRUCTURE)
    errors = []
    # one record per duplicated value, not per element carrying it
    for entry in structure.get("duplicateIds", []):
        if entry.get("count", 0) < 2:
            continue
        errors.append(
            ctx.error(
                f"Duplicate id attribute: {entry['id']} ({entry['count']} elements)",
                element=entry.get("element"),
                id=entry["id"],
                count=entry["count"],
            ),
        )
    for button in structure.get("buttons", []):
        children = button.get("blockChildren") or []
        if children:
            errors.append(
                ctx.error(
                    f"Invalid child elements in button: {', '.join(children)}",
                    element=button,
                ),
            )
    return errors


async def check_name_role_value(ctx: CheckContext) -> list[ErrorRecord]:
    return [
        ctx.error(f'Custom control without accessible name (role="{el["role"]}")', element=el)
        for el in await ctx.page.evaluate(ROLES)
        if not (el.get("ariaLabel") or el.get("ariaLabelledby") or el.get("text"))
    ]


def register(registry: CheckRegistry) -> None:
    registry.register(rules.R_4_1_1, check_parsing, evidence=EvidenceMode.ELEMENT)
    registry.register(rules.R_4_1_2, check_name_role_value, evidence=EvidenceMode.PAGE)
