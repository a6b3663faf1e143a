"""
Outcome reporting for a scenario run.

The summary field names are consumed by CI dashboards and must stay stable.
"""

import json
import sys
from typing import Any, Dict, Optional, TextIO

from shared.errors import AssertionFailure
from shared.logging import get_logger

from ..domain.models import RunOutcome

EXIT_OK = 0
EXIT_ASSERTION_FAILED = 1
EXIT_FATAL = 2


def build_summary(outcome: RunOutcome) -> Dict[str, Any]:
    """Serialise every result of a run into one JSON-compatible record."""
    return {
        "run_id": outcome.run_id,
        "users_burst": outcome.users_burst.to_dict(),
        "orders_after_users_burst_status": outcome.orders_probe.status,
        "token_a_users_burst": outcome.token_a_burst.to_dict(),
        "token_b_users_probe_status": outcome.token_b_probe.status,
        "alignment_wait_ms": [alignment.wait_ms for alignment in outcome.alignments],
        "checks": {check.label: check.passed for check in outcome.checks},
        "passed": outcome.passed,
    }


class OutcomeReporter:
    """Writes the run summary and turns the check results into an exit status."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout
        self.logger = get_logger("ratecheck.reporter")

    def report(self, outcome: RunOutcome) -> Dict[str, Any]:
        summary = build_summary(outcome)

        self.stream.write(json.dumps(summary, indent=2) + "\n")
        self.stream.flush()

        self.logger.info("rate_limit_summary", **summary)
        return summary

    @staticmethod
    def exit_code(outcome: RunOutcome) -> int:
        return EXIT_OK if outcome.passed else EXIT_ASSERTION_FAILED

    @staticmethod
    def raise_for_outcome(outcome: RunOutcome) -> None:
        """Raise ``AssertionFailure`` when any check failed."""
        if not outcome.passed:
            raise AssertionFailure(outcome.failed_checks, build_summary(outcome))
