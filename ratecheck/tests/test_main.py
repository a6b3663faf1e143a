"""
Unit tests for the command-line entry point.
"""

import json

import pytest
from unittest.mock import AsyncMock, patch

from ratecheck.app import main as cli
from ratecheck.app.domain.models import BurstResult, ProbeResult, RunOutcome
from ratecheck.app.reporting.reporter import EXIT_ASSERTION_FAILED, EXIT_FATAL, EXIT_OK
from ratecheck.app.scenario.checks import B2, evaluate_checks
from shared.errors import AuthenticationError
from shared.logging import run_id_var
from shared.test_helpers import HARNESS_ENV_NAMES


def _outcome(token_b_status=200):
    users_burst = BurstResult(5, 3, 0)
    orders_probe = ProbeResult("orders", 200)
    token_a_burst = BurstResult(5, 3, 0)
    token_b_probe = ProbeResult("users", token_b_status)
    return RunOutcome(
        users_burst=users_burst,
        orders_probe=orders_probe,
        token_a_burst=token_a_burst,
        token_b_probe=token_b_probe,
        checks=evaluate_checks(users_burst, orders_probe, token_a_burst, token_b_probe),
    )


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in HARNESS_ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


class TestMain:
    """Test cases for main()."""

    def test_passing_run(self, tmp_path):
        output = tmp_path / "summary.json"
        with patch.object(cli, "run", new=AsyncMock(return_value=_outcome())) as mock_run:
            code = cli.main(["--output", str(output), "--api-url", "http://gw:1"])

        assert code == EXIT_OK
        summary = json.loads(output.read_text())
        assert summary["passed"] is True
        assert summary["users_burst"] == {"ok": 5, "tooMany": 3, "other": 0}
        config = mock_run.await_args.args[0]
        assert config.api_base_url == "http://gw:1"

    def test_failing_check_exit_code(self):
        with patch.object(cli, "run", new=AsyncMock(return_value=_outcome(token_b_status=429))):
            assert cli.main([]) == EXIT_ASSERTION_FAILED

    def test_authentication_error_is_fatal(self, tmp_path):
        output = tmp_path / "summary.json"
        with patch.object(cli, "run", new=AsyncMock(side_effect=AuthenticationError("login failed: status=401"))):
            code = cli.main(["--output", str(output)])

        assert code == EXIT_FATAL
        # no partial report after a fatal error
        assert not output.exists()

    def test_invalid_configuration(self):
        with patch.object(cli, "run", new=AsyncMock()) as mock_run:
            assert cli.main(["--burst", "1"]) == EXIT_FATAL
        mock_run.assert_not_called()

    def test_metrics_file_written(self, tmp_path):
        metrics_file = tmp_path / "ratecheck.prom"
        with patch.object(cli, "run", new=AsyncMock(return_value=_outcome())):
            cli.main(["--metrics-file", str(metrics_file)])

        assert "ratecheck_service_info" in metrics_file.read_text()

    def test_burst_override_reaches_config(self):
        with patch.object(cli, "run", new=AsyncMock(return_value=_outcome())) as mock_run:
            cli.main(["--burst", "12"])

        assert mock_run.await_args.args[0].burst_requests == 12

    def test_failing_check_raises_assertion_failure(self):
        with patch.object(cli, "run", new=AsyncMock(return_value=_outcome(token_b_status=429))), \
                patch.object(cli, "get_logger") as mock_get_logger:
            code = cli.main([])

        assert code == EXIT_ASSERTION_FAILED
        logger = mock_get_logger.return_value
        logger.error.assert_called_once()
        record = logger.error.call_args.kwargs
        assert record["code"] == "ASSERTION_FAILURE"
        assert record["details"]["failed"] == [B2]
        assert record["details"]["summary"]["token_b_users_probe_status"] == 429
        assert record["run_id"]

    def test_failure_message_on_stderr(self, capsys):
        with patch.object(cli, "run", new=AsyncMock(return_value=_outcome(token_b_status=429))):
            cli.main([])

        err = capsys.readouterr().err
        assert "rate-limit assertions failed: " + B2 in err

    def test_run_id_cleared_after_main(self):
        with patch.object(cli, "run", new=AsyncMock(return_value=_outcome())) as mock_run:
            cli.main([])

        assert mock_run.await_args.kwargs["run_id"]
        assert run_id_var.get() is None

    def test_run_id_cleared_after_fatal_error(self):
        with patch.object(cli, "run", new=AsyncMock(side_effect=AuthenticationError("login failed: status=401"))):
            cli.main([])

        assert run_id_var.get() is None
