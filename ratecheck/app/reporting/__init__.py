"""
Run summary output and exit status.
"""

from .reporter import EXIT_ASSERTION_FAILED, EXIT_FATAL, EXIT_OK, OutcomeReporter, build_summary

__all__ = [
    "EXIT_ASSERTION_FAILED",
    "EXIT_FATAL",
    "EXIT_OK",
    "OutcomeReporter",
    "build_summary",
]
