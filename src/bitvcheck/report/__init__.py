from bitvcheck.report.html import render_html
from bitvcheck.report.record import build_audit_record
from bitvcheck.report.writer import write_report

__all__ = ["build_audit_record", "render_html", "write_report"]
