"""CLI entry point - Click commands for bitvcheck."""

from __future__ import annotations

import dataclasses
import sys

import click

from bitvcheck import __version__
from bitvcheck.cli._output import (
    format_json,
    format_rules_json,
    format_rules_text,
    format_text,
)
from bitvcheck.cli._runner import configure_logging, run_audit
from bitvcheck.core._types import Category, Severity
from bitvcheck.core.config import BUILTIN_PROFILES, AuditConfig, ConfigError, load_config
from bitvcheck.core.record import PageLoadError
from bitvcheck.report.record import build_audit_record
from bitvcheck.report.writer import write_report
from bitvcheck.rules import ALL_RULES

_SEVERITIES = [str(s) for s in Severity]
_CATEGORIES = [str(c) for c in Category]


def _rule_list(value: str) -> frozenset[str]:
    return frozenset(r.strip() for r in value.split(",") if r.strip())


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "-V", "--version", message="bitvcheck %(version)s")
def cli() -> None:
    """bitvcheck - BITV 2.0 / EN 301 549 accessibility audit."""


@cli.command()
@click.argument("url", envvar="TARGET_URL")
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(exists=False),
    help="Path to .bitvcheck.toml or pyproject.toml config file.",
)
@click.option(
    "--profile",
    type=click.Choice(list(BUILTIN_PROFILES)),
    default=None,
    help="Rule filter profile (overrides config file profile).",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format.",
)
@click.option(
    "--output-dir",
    default=None,
    type=click.Path(file_okay=False),
    help="Write data.json and report.html into this directory.",
)
@click.option("--no-evidence", is_flag=True, help="Do not take screenshots.")
@click.option(
    "--include-rules",
    default="",
    help="Comma-separated rule IDs or globs; only these rules run.",
)
@click.option("--exclude-rules", default="", help="Comma-separated rule IDs or globs to exclude.")
@click.option(
    "--min-severity",
    type=click.Choice(_SEVERITIES),
    default=None,
    help="Minimum severity of rules to run.",
)
@click.option("--no-color", is_flag=True, envvar="NO_COLOR", help="Disable ANSI colors.")
@click.option(
    "--fail-under",
    type=click.FloatRange(0, 100),
    default=None,
    help="Exit 1 if the score is below this value.",
)
@click.option("-v", "--verbose", count=True, help="Log progress (-vv for every error found).")
def audit(
    url: str,
    config_path: str | None,
    profile: str | None,
    fmt: str,
    output_dir: str | None,
    no_evidence: bool,
    include_rules: str,
    exclude_rules: str,
    min_severity: str | None,
    no_color: bool,
    fail_under: float | None,
    verbose: int,
) -> None:
    """Audit the page at URL for accessibility errors."""
    configure_logging(verbose)

    try:
        config: AuditConfig = load_config(config_path)
    except ConfigError as exc:
        click.echo(f"Error: invalid config: {exc}", err=True)
        sys.exit(2)

    if profile is not None:
        base = BUILTIN_PROFILES[profile]
        # CLI --profile overrides filter settings; preserve thresholds and
        # merge exclude_rules (config file exclusions are additive).
        config = dataclasses.replace(
            config,
            min_severity=base.min_severity,
            include_rules=base.include_rules,
            categories=base.categories,
            exclude_rules=base.exclude_rules | config.exclude_rules,
        )

    overrides: dict[str, object] = {}
    if include_rules:
        overrides["include_rules"] = _rule_list(include_rules)
    if exclude_rules:
        overrides["exclude_rules"] = config.exclude_rules | _rule_list(exclude_rules)
    if min_severity is not None:
        overrides["min_severity"] = Severity(min_severity)
    if no_evidence:
        overrides["capture_evidence"] = False
    if overrides:
        config = dataclasses.replace(config, **overrides)

    try:
        page_audit = run_audit(url, config=config)
    except PageLoadError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    if fmt == "json":
        click.echo(format_json(page_audit))
    else:
        click.echo(format_text(page_audit, no_color=no_color))

    if output_dir is not None:
        record = build_audit_record(page_audit.result, url=url, palette=page_audit.palette)
        data_path, html_path = write_report(record, output_dir)
        click.echo(f"Report written to {data_path} and {html_path}", err=True)

    if fail_under is not None and page_audit.result.score < fail_under:
        sys.exit(1)


@cli.command()
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format.",
)
@click.option("--no-color", is_flag=True, envvar="NO_COLOR", help="Disable ANSI colors.")
@click.option(
    "--category",
    default=None,
    type=click.Choice(_CATEGORIES),
    help="Filter by WCAG principle.",
)
@click.option(
    "--severity",
    "sev",
    default=None,
    type=click.Choice(_SEVERITIES),
    help="Filter by severity.",
)
def rules(fmt: str, no_color: bool, category: str | None, sev: str | None) -> None:
    """List all audit rules."""
    filtered = list(ALL_RULES)
    if category is not None:
        filtered = [r for r in filtered if r.category == Category(category)]
    if sev is not None:
        severity = Severity(sev)
        filtered = [r for r in filtered if r.severity == severity]

    total = len(ALL_RULES) if (category is not None or sev is not None) else None

    if fmt == "json":
        click.echo(format_rules_json(filtered))
    else:
        click.echo(format_rules_text(filtered, no_color=no_color, total=total))
