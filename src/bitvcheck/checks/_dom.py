"""In-page JavaScript shared by the checks.

Every script is an arrow function taking one argument and returning plain
JSON data.  Scripts gather facts; the policy decisions are made in Python.
Each script starts with a ``/* bitvcheck:<name> */`` marker naming it.
"""

import re

_HELPERS = r"""
  const selectorFor = (el) => {
    const id = el.getAttribute('id');
    if (id) return '#' + CSS.escape(id);
    const tag = el.tagName.toLowerCase();
    for (const attr of ['src', 'href', 'name']) {
      const value = el.getAttribute(attr);
      if (value) return `${tag}[${attr}="${value.replace(/"/g, '')}"]`;
    }
    return tag;
  };
  const describe = (el) => ({
    selector: selectorFor(el),
    snippet: el.outerHTML.slice(0, 100),
    tag: el.tagName.toLowerCase(),
  });
  const isVisible = (el) => {
    const style = window.getComputedStyle(el);
    return style.display !== 'none' && style.visibility !== 'hidden';
  };
  const textOf = (el) => {
    if (el instanceof HTMLInputElement && ['submit', 'button', 'reset'].includes(el.type)) {
      return (el.value || '').trim();
    }
    return (el.textContent || '').trim();
  };
"""

_MARKER_RE = re.compile(r"^/\* bitvcheck:([\w.-]+) \*/")


def script(name: str, body: str, *, is_async: bool = False) -> str:
    """Wrap *body* into a named arrow function with the shared helpers in scope."""
    prefix = "async (arg) =>" if is_async else "(arg) =>"
    return f"/* bitvcheck:{name} */\n{prefix} {{{_HELPERS}\n{body}\n}}"


def script_name(expression: str) -> str | None:
    """Return the name embedded by :func:`script`, or ``None``."""
    match = _MARKER_RE.match(expression)
    return match.group(1) if match else None
