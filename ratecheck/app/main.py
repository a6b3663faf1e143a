"""
Command-line entry point for the rate-limit isolation harness.

Usage:
    ratecheck
    ratecheck --api-url http://gateway:8085 --auth-url http://auth:8084 --burst 10
    ratecheck --output summary.json --metrics-file ratecheck.prom

Every option falls back to its environment variable (see shared.config).
Exit status: 0 all checks passed, 1 a check failed, 2 fatal error
(login or configuration), 130 interrupted.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from shared.config import HarnessConfig, get_config
from shared.errors import AssertionFailure, HarnessException
from shared.logging import clear_context, configure_logging, get_logger, set_run_id
from shared.metrics import HarnessMetrics

from .reporting.reporter import EXIT_ASSERTION_FAILED, EXIT_FATAL, EXIT_OK, OutcomeReporter
from .scenario.orchestrator import run


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="ratecheck",
        description="Check that gateway rate limits are isolated per service and per identity.",
    )
    parser.add_argument("--api-url", default=None, help="Gateway base URL (API_GW_BASE_URL)")
    parser.add_argument("--auth-url", default=None, help="Auth service base URL (AUTH_GW_BASE_URL)")
    parser.add_argument("--burst", type=int, default=None, help="Requests per burst (BURST_REQUESTS)")
    parser.add_argument("--log-level", default=None, help="Log level (LOG_LEVEL)")
    parser.add_argument("--output", type=Path, default=None, help="Optional path to write the JSON summary")
    parser.add_argument("--metrics-file", type=Path, default=None, help="Optional path to write Prometheus metrics")
    return parser.parse_args(argv)


def load_config(args: argparse.Namespace) -> HarnessConfig:
    return get_config(
        api_base_url=args.api_url,
        auth_base_url=args.auth_url,
        burst_requests=args.burst,
        log_level=args.log_level,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    try:
        config = load_config(args)
    except PydanticValidationError as exc:
        print(f"[ratecheck] invalid configuration: {exc}", file=sys.stderr)
        return EXIT_FATAL

    configure_logging("ratecheck", config.log_level)
    logger = get_logger("ratecheck.main")
    metrics = HarnessMetrics()
    reporter = OutcomeReporter()
    run_id = set_run_id()

    try:
        try:
            outcome = asyncio.run(run(config, metrics=metrics, run_id=run_id))
        except KeyboardInterrupt:
            return 130
        except HarnessException as exc:
            logger.error("Run failed", **exc.to_response(run_id=run_id).model_dump())
            print(f"[ratecheck] {exc.message}", file=sys.stderr)
            return EXIT_FATAL
        finally:
            if args.metrics_file:
                metrics.write_textfile(str(args.metrics_file))

        summary = reporter.report(outcome)
        if args.output:
            args.output.write_text(json.dumps(summary, indent=2))

        try:
            reporter.raise_for_outcome(outcome)
        except AssertionFailure as exc:
            logger.error("Run failed", **exc.to_response(run_id=run_id).model_dump())
            print(f"[ratecheck] {exc.message}", file=sys.stderr)
            return EXIT_ASSERTION_FAILED

        logger.info("Run finished", passed=summary["passed"], exit_code=EXIT_OK)
        return EXIT_OK
    finally:
        clear_context()


if __name__ == "__main__":
    raise SystemExit(main())
