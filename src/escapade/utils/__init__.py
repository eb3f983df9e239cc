"""Utility modules for Escapade.

Provides:
- logger: get_logger for namespaced loggers, log_pass_result for pass tracing
"""

from escapade.utils.logger import get_logger, log_pass_result

__all__ = [
    "get_logger",
    "log_pass_result",
]
