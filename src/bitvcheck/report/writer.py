from __future__ import annotations

import json
import logging
from pathlib import Path

from bitvcheck.core._types import JSON
from bitvcheck.report.html import render_html

logger = logging.getLogger("bitvcheck.report")

DATA_FILE = "data.json"
HTML_FILE = "report.html"


def write_report(record: JSON, output_dir: Path | str) -> tuple[Path, Path]:
    """Write ``data.json`` and ``report.html`` into *output_dir*.

    Returns the paths of both files.
    """
    directory = Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)

    data_path = directory / DATA_FILE
    data_path.write_text(json.dumps(record, indent=2, ensure_ascii=False), encoding="utf-8")

    html_path = directory / HTML_FILE
    html_path.write_text(render_html(record), encoding="utf-8")

    logger.info("Report written to %s", directory)
    return data_path, html_path
