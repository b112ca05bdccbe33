from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from bitvcheck.browser import audit_url

if TYPE_CHECKING:
    from bitvcheck.browser import PageAudit
    from bitvcheck.core.config import AuditConfig

_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(verbosity: int) -> None:
    """``-v`` shows progress, ``-vv`` shows every error record as it is found."""
    if verbosity <= 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG
    logging.basicConfig(level=level, format=_LOG_FORMAT)


def run_audit(url: str, *, config: AuditConfig) -> PageAudit:
    """Audit *url* in a fresh event loop.

    Raises:
        :class:`~bitvcheck.core.record.PageLoadError`: If the page cannot be loaded.

    """
    return asyncio.run(audit_url(url, config))
