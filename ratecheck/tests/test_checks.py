"""
Unit tests for the isolation checks.
"""

import pytest

from ratecheck.app.domain.models import BurstResult, ProbeResult
from ratecheck.app.scenario.checks import A1, A2, A3, B1, B2, CHECK_LABELS, evaluate_checks


def _failed(checks):
    return [check.label for check in checks if not check.passed]


class TestEvaluateChecks:
    """Test cases for evaluate_checks."""

    @pytest.fixture
    def passing(self):
        return dict(
            users_burst=BurstResult(5, 3, 0),
            orders_probe=ProbeResult("orders", 200),
            token_a_burst=BurstResult(5, 3, 0),
            token_b_probe=ProbeResult("users", 200),
        )

    def test_all_checks_in_order(self, passing):
        checks = evaluate_checks(**passing)
        assert [check.label for check in checks] == list(CHECK_LABELS)
        assert _failed(checks) == []

    def test_no_throttling_fails_a1_and_b1(self, passing):
        """A quota at or above the burst size never throttles."""
        passing["users_burst"] = BurstResult(8, 0, 0)
        passing["token_a_burst"] = BurstResult(8, 0, 0)
        assert _failed(evaluate_checks(**passing)) == [A1, B1]

    def test_fully_rejected_burst_fails_a2(self, passing):
        passing["users_burst"] = BurstResult(0, 8, 0)
        assert _failed(evaluate_checks(**passing)) == [A2]

    def test_orders_throttled_fails_a3(self, passing):
        passing["orders_probe"] = ProbeResult("orders", 429)
        assert _failed(evaluate_checks(**passing)) == [A3]

    @pytest.mark.parametrize("status", [500, 404, None])
    def test_orders_non_429_still_passes_a3(self, passing, status):
        """A3 only looks for leakage of throttling."""
        passing["orders_probe"] = ProbeResult("orders", status)
        assert A3 not in _failed(evaluate_checks(**passing))

    @pytest.mark.parametrize("status", [429, 500, 401, None])
    def test_token_b_must_get_exactly_200(self, passing, status):
        passing["token_b_probe"] = ProbeResult("users", status)
        assert _failed(evaluate_checks(**passing)) == [B2]

    def test_all_failures_reported_together(self):
        checks = evaluate_checks(
            BurstResult(0, 0, 8),
            ProbeResult("orders", 429),
            BurstResult(0, 0, 8),
            ProbeResult("users", None),
        )
        assert _failed(checks) == [A1, A2, A3, B1, B2]
