from __future__ import annotations

import json
import os
from typing import TYPE_CHECKING

from bitvcheck import __version__
from bitvcheck.core._types import CATEGORY_TITLES, Category, Severity
from bitvcheck.report.record import build_audit_record
from bitvcheck.rules import RULES

if TYPE_CHECKING:
    from datetime import datetime

    from bitvcheck.browser import PageAudit
    from bitvcheck.core.record import ErrorRecord
    from bitvcheck.core.rule import Rule

_SEVERITY_COLORS: dict[Severity, str] = {
    Severity.CRITICAL: "\033[1;31m",  # bold red
    Severity.HIGH: "\033[31m",  # red
    Severity.MEDIUM: "\033[33m",  # yellow
    Severity.LOW: "\033[36m",  # cyan
}
_GREEN = "\033[32m"
_BOLD = "\033[1m"
_DIM = "\033[2m"
_RESET = "\033[0m"

_LINE_WIDTH = 66

# Highest first, for summaries.
_SEVERITY_ORDER = (Severity.CRITICAL, Severity.HIGH, Severity.MEDIUM, Severity.LOW)


def _use_color(no_color_flag: bool) -> bool:
    if no_color_flag:
        return False
    return not os.environ.get("NO_COLOR", "")


def _c(text: str, code: str, *, color: bool) -> str:
    if not color:
        return text
    return f"{code}{text}{_RESET}"


def _header(title: str, *, color: bool) -> str:
    header = f"── {title} "
    fill = "─" * max(0, _LINE_WIDTH - len(header))
    return _c(header + fill, _BOLD, color=color)


def _error_lines(error: ErrorRecord, *, color: bool) -> list[str]:
    lines = [f"  - {error.message}"]
    if error.selector:
        lines.append(_c(f"    at {error.selector}", _DIM, color=color))
    if error.manual_check_required:
        lines.append(f"    manual check: {error.manual_check_required}")
    if error.evidence_path:
        lines.append(_c(f"    screenshot: {error.evidence_path}", _DIM, color=color))
    return lines


def format_text(audit: PageAudit, *, no_color: bool = False) -> str:
    color = _use_color(no_color)
    result = audit.result
    lines: list[str] = []
    w = lines.append

    w(f"bitvcheck {__version__}")
    w("")
    w(f"Auditing {audit.url} ...")

    for rule_id, rule_result in result.per_rule.items():
        w("")
        w(_header(f"{rule_id} {rule_result.description}", color=color))
        if not rule_result.errors:
            w(f"  {_c('OK', _GREEN, color=color)}")
            continue
        sev = _c(str(rule_result.severity), _SEVERITY_COLORS[rule_result.severity], color=color)
        noun = "error" if len(rule_result.errors) == 1 else "errors"
        w(f"  {sev}: {len(rule_result.errors)} {noun}")
        for error in rule_result.errors:
            lines.extend(_error_lines(error, color=color))
        rule = RULES.get(rule_id)
        if rule is not None and rule.fix_suggestion:
            w(f"  fix: {rule.fix_suggestion}")

    w("")
    w(_summary_line(audit, color=color))
    return "\n".join(lines)


def _summary_line(audit: PageAudit, *, color: bool) -> str:
    result = audit.result
    score = _c(f"{result.score:.1f}%", _BOLD, color=color)
    head = f"Score {score} ({result.compliance_label})"
    if result.total_errors == 0:
        return f"{head}: {_c('no errors found.', _GREEN, color=color)}"
    by_sev = result.error_counts_by_severity
    parts = [
        _c(f"{by_sev[s]} {s}", _SEVERITY_COLORS[s], color=color) for s in _SEVERITY_ORDER if by_sev[s]
    ]
    noun = "error" if result.total_errors == 1 else "errors"
    return f"{head}: {result.total_errors} {noun} ({', '.join(parts)})"


def format_json(audit: PageAudit, *, generated_at: datetime | None = None) -> str:
    record = build_audit_record(
        audit.result, url=audit.url, generated_at=generated_at, palette=audit.palette
    )
    return json.dumps(record, indent=2, ensure_ascii=False)


def format_rules_text(
    rules: list[Rule],
    *,
    no_color: bool = False,
    total: int | None = None,
) -> str:
    color = _use_color(no_color)
    lines: list[str] = []
    w = lines.append

    id_w = max((len(r.id) for r in rules), default=0)
    sev_w = max((len(str(r.severity)) for r in rules), default=0)

    groups: dict[Category, list[Rule]] = {}
    for r in rules:
        groups.setdefault(r.category, []).append(r)

    count = len(rules)
    header = f"bitvcheck {__version__} - {count} rules"
    if total is not None and total != count:
        header += f" (filtered from {total})"
    w(header)

    for category in Category:
        group = groups.get(category)
        if not group:
            continue

        w("")
        w(_header(f"{CATEGORY_TITLES[category]} ({len(group)})", color=color))
        w("")
        for r in group:
            rule_id = _c(r.id.ljust(id_w), _BOLD, color=color)
            severity = _c(str(r.severity).ljust(sev_w), _SEVERITY_COLORS[r.severity], color=color)
            w(f"  {rule_id}  {severity}  {r.description}")

    return "\n".join(lines)


def format_rules_json(rules: list[Rule]) -> str:
    data = {
        "version": __version__,
        "rules": [
            {
                "id": r.id,
                "description": r.description,
                "severity": str(r.severity),
                "category": str(r.category),
                "fix_suggestion": r.fix_suggestion,
                "fixable_by_automation": r.fixable_by_automation,
            }
            for r in rules
        ],
        "total": len(rules),
    }
    return json.dumps(data, indent=2)
