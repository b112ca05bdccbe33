from importlib.metadata import version

from bitvcheck.browser import audit_url, open_page
from bitvcheck.checks.base import Check, CheckRegistry, create_default_registry
from bitvcheck.core._types import Category, Severity
from bitvcheck.core.config import BUILTIN_PROFILES, AuditConfig, ConfigError
from bitvcheck.core.context import CheckContext
from bitvcheck.core.record import ErrorRecord, PageLoadError, RuleRegistrationError
from bitvcheck.core.rule import Rule
from bitvcheck.core.runner import RuleResult, RunResult, run_checks

__version__ = version("bitvcheck")


__all__ = [
    "BUILTIN_PROFILES",
    "AuditConfig",
    "Category",
    "Check",
    "CheckContext",
    "CheckRegistry",
    "ConfigError",
    "ErrorRecord",
    "PageLoadError",
    "Rule",
    "RuleRegistrationError",
    "RuleResult",
    "RunResult",
    "Severity",
    "__version__",
    "audit_url",
    "create_default_registry",
    "open_page",
    "run_checks",
]
