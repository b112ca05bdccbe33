from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from bitvcheck.core._types import Category, Severity
from bitvcheck.core.config import AuditConfig
from bitvcheck.core.context import CheckContext
from bitvcheck.core.evidence import EvidenceSink
from bitvcheck.core.record import ErrorRecord
from bitvcheck.core.scoring import compliance_label, compute_score, deductions

if TYPE_CHECKING:
    from bitvcheck.checks.base import Check, CheckRegistry
    from bitvcheck.core.page import LivePage

logger = logging.getLogger("bitvcheck")


@dataclass(frozen=True, slots=True)
class RuleResult:
    """Errors found by one rule, tagged with that rule's metadata."""

    description: str
    severity: Severity
    category: Category
    errors: tuple[ErrorRecord, ...] = ()


@dataclass(frozen=True)
class RunResult:
    """Outcome of one audit pass over one page.

    Build it with :meth:`from_rule_results`; the aggregates are derived from
    ``per_rule`` and never set independently.
    """

    per_rule: Mapping[str, RuleResult]
    error_counts_by_severity: Mapping[Severity, int]
    error_counts_by_category: Mapping[Category, int]
    total_errors: int
    score: float
    compliance_label: str
    deductions: float = field(default=0.0)

    @classmethod
    def from_rule_results(cls, results: Mapping[str, RuleResult]) -> RunResult:
        by_severity: dict[Severity, int] = dict.fromkeys(Severity, 0)
        by_category: dict[Category, int] = dict.fromkeys(Category, 0)
        for result in results.values():
            by_severity[result.severity] += len(result.errors)
            by_category[result.category] += len(result.errors)

        score = compute_score(by_severity)
        return cls(
            per_rule=MappingProxyType(dict(results)),
            error_counts_by_severity=MappingProxyType(by_severity),
            error_counts_by_category=MappingProxyType(by_category),
            total_errors=sum(len(r.errors) for r in results.values()),
            score=score,
            compliance_label=compliance_label(score),
            deductions=deductions(by_severity),
        )

    @property
    def all_errors(self) -> list[tuple[str, ErrorRecord]]:
        return [(rule_id, e) for rule_id, r in self.per_rule.items() for e in r.errors]


async def _run_one(check: Check, ctx: CheckContext) -> list[ErrorRecord]:
    """Run one check, converting any exception into a single synthetic record."""
    rule = check.rule
    try:
        records = await check.inspect(ctx)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Check %s (%s) raised", rule.id, rule.description)
        return [ErrorRecord(message=f"Check failed: {exc}", details={"exception": type(exc).__name__})]

    if ctx.evidence is not None:
        records = await ctx.evidence.attach(ctx.page, rule.id, records, check.evidence)
    return records


async def run_checks(
    page: LivePage,
    *,
    config: AuditConfig | None = None,
    registry: CheckRegistry | None = None,
    evidence: EvidenceSink | None = None,
) -> RunResult:
    """Run every registered check against *page*, one after another.

    Checks run in registration order and never concurrently: some of them
    resize the viewport or inject styles, and later checks expect the page
    back in its original state.

    Args:
        page: Loaded page; must not be shared with anything else during the run.
        config: Rule filters and thresholds. Defaults to ``AuditConfig()``.
        registry: Checks to run. Uses the built-in registry if None.
        evidence: Screenshot sink. When None, one is created from ``config``
            unless ``config.capture_evidence`` is false.

    Returns:
        A new :class:`RunResult`.

    """
    _config = config or AuditConfig()

    if registry is None:
        from bitvcheck.checks.base import create_default_registry

        registry = create_default_registry()

    if evidence is None and _config.capture_evidence:
        evidence = EvidenceSink(_config.evidence_dir, wait_timeout=_config.visibility_timeout)

    results: dict[str, RuleResult] = {}
    for check in registry.checks():
        rule = check.rule
        if not _config.allows(rule):
            logger.debug("Skipping %s (filtered by config)", rule.id)
            continue

        logger.info("Running %s", rule)
        ctx = CheckContext(page=page, rule=rule, config=_config, evidence=evidence)
        records = await _run_one(check, ctx)
        for record in records:
            logger.debug("[%s] %s: %s", rule.id, record.selector or "-", record.message)

        results[rule.id] = RuleResult(
            description=rule.description,
            severity=rule.severity,
            category=rule.category,
            errors=tuple(records),
        )

    result = RunResult.from_rule_results(results)
    logger.info(
        "Audit finished: %d errors, score %.1f (%s)",
        result.total_errors,
        result.score,
        result.compliance_label,
    )
    return result
