"""
The five isolation checks evaluated after both sub-experiments.

Experiment A exhausts the users quota of identity A and probes orders with
the same identity. Experiment B exhausts the users quota of identity A
again and probes users with identity B.
"""

from typing import List, Tuple

from ..domain.models import BurstResult, CheckResult, ProbeResult

A1 = "A1: users burst has at least one 429"
A2 = "A2: users burst still has successful requests"
A3 = "A3: orders call is not rate limited by users burst"
B1 = "B1: token A burst has at least one 429"
B2 = "B2: token B still allowed in same window"

CHECK_LABELS: Tuple[str, ...] = (A1, A2, A3, B1, B2)


def evaluate_checks(
    users_burst: BurstResult,
    orders_probe: ProbeResult,
    token_a_burst: BurstResult,
    token_b_probe: ProbeResult,
) -> List[CheckResult]:
    """Evaluate every check; never short-circuits so all failures are reported."""
    return [
        CheckResult(A1, users_burst.throttled > 0),
        CheckResult(A2, users_burst.allowed > 0),
        # A transport failure (status None) is not a 429
        CheckResult(A3, orders_probe.status != 429),
        CheckResult(B1, token_a_burst.throttled > 0),
        CheckResult(B2, token_b_probe.status == 200),
    ]
