"""Plain HTML rendering of an audit record."""

from __future__ import annotations

from html import escape
from typing import Any

from bitvcheck.core._types import JSON

_STYLE = """
body { font-family: system-ui, sans-serif; margin: 2rem auto; max-width: 60rem; color: #1a1a1a; }
h1, h2, h3 { line-height: 1.25; }
.score { font-size: 2.5rem; font-weight: 700; }
.muted { color: #555; }
table { border-collapse: collapse; width: 100%; margin: 1rem 0; }
th, td { border: 1px solid #999; padding: 0.4rem 0.6rem; text-align: left; vertical-align: top; }
.severity-critical { color: #8b0000; }
.severity-high { color: #a33a00; }
.severity-medium { color: #6b5200; }
.severity-low { color: #245a8c; }
code { background: #f2f2f2; padding: 0 0.2rem; }
figure img { max-width: 100%; border: 1px solid #999; }
"""


def _summary_rows(summary: dict[str, Any]) -> str:
    labels = (
        ("critical", "Critical"),
        ("high", "High"),
        ("medium", "Medium"),
        ("low", "Low"),
        ("total", "Total"),
        ("deductions", "Deductions"),
    )
    return "".join(
        f"<tr><th scope='row'>{escape(label)}</th><td>{escape(str(summary.get(key, '')))}</td></tr>"
        for key, label in labels
    )


def _error_item(error: dict[str, Any]) -> str:
    parts = [f"<strong>{escape(error.get('message', ''))}</strong>"]
    if error.get("selector"):
        parts.append(f"<div>Selector: <code>{escape(error['selector'])}</code></div>")
    if error.get("elementSnippet"):
        parts.append(f"<div>Element: <code>{escape(error['elementSnippet'])}</code></div>")
    if error.get("foregroundColor") and error.get("backgroundColor"):
        parts.append(
            f"<div class='muted'>Colors: {escape(error['foregroundColor'])} on "
            f"{escape(error['backgroundColor'])}</div>",
        )
    if error.get("manualCheckRequired"):
        parts.append(f"<div class='muted'>Manual check: {escape(error['manualCheckRequired'])}</div>")
    if error.get("evidencePath"):
        path = escape(error["evidencePath"])
        parts.append(f"<figure><img src='{path}' alt='Screenshot of the affected area'></figure>")
    return f"<li>{''.join(parts)}</li>"


def _rule_section(rule_id: str, rule: dict[str, Any]) -> str:
    severity = str(rule.get("severity", ""))
    errors = rule.get("errors", [])
    if errors:
        body = f"<ul>{''.join(_error_item(e) for e in errors)}</ul>"
    else:
        body = "<p>No errors found.</p>"
    return (
        f"<section><h3>{escape(rule_id)} {escape(rule.get('description', ''))}</h3>"
        f"<p class='severity-{escape(severity)}'>Severity: {escape(severity)}, "
        f"category: {escape(str(rule.get('category', '')))}, errors: {len(errors)}</p>"
        f"{body}</section>"
    )


def render_html(record: JSON) -> str:
    """Render *record* (as built by ``build_audit_record``) to an HTML document.

    Pure function: the output depends on *record* alone.
    """
    categories = "".join(
        f"<tr><th scope='row'>{escape(c['name'])}</th><td>{escape(str(c['errors']))}</td></tr>"
        for c in record.get("categories", [])
    )
    conformity = ", ".join(escape(item) for item in record.get("conformityWith", []))
    palette = "".join(
        f"<tr><td>{escape(p['foreground'])}</td><td>{escape(p['background'])}</td>"
        f"<td>{escape(str(p['count']))}</td></tr>"
        for p in record.get("colorPalette", [])
    )
    details = "".join(
        _rule_section(rule_id, rule) for rule_id, rule in record.get("detailedResults", {}).items()
    )
    palette_section = (
        "<h2>Color palette</h2><table><thead><tr><th>Foreground</th><th>Background</th>"
        f"<th>Elements</th></tr></thead><tbody>{palette}</tbody></table>"
        if palette
        else ""
    )
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>Accessibility report: {escape(record.get("url", ""))}</title>
<style>{_STYLE}</style>
</head>
<body>
<header>
<h1>Accessibility report</h1>
<p>{escape(record.get("url", ""))}</p>
<p class="muted">Tested against {escape(record.get("testStandard", ""))} ({conformity}),
last updated {escape(record.get("lastUpdated", ""))}</p>
</header>
<main>
<h2>Result</h2>
<p class="score">{escape(record.get("accessibilityScore", ""))}</p>
<p>{escape(record.get("complianceStatus", ""))}</p>
<h2>Error summary</h2>
<table><tbody>{_summary_rows(record.get("errorSummary", {}))}</tbody></table>
<h2>Errors by principle</h2>
<table><tbody>{categories}</tbody></table>
{palette_section}
<h2>Detailed results</h2>
{details}
</main>
</body>
</html>
"""
