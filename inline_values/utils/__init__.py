"""
Utility modules for the expression wrapping transform.
"""

from inline_values.utils.logging import (
    get_logger,
    setup_logging,
    LogContext,
    log_rewrite,
    log_error_with_context,
)
from inline_values.utils.guard import (
    GuardConfigurationError,
    HardCoreEnsure,
    run_guarded,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "LogContext",
    "log_rewrite",
    "log_error_with_context",
    "GuardConfigurationError",
    "HardCoreEnsure",
    "run_guarded",
]
