"""
Scenario orchestration.

One run is strictly linear:

    login A -> login B -> align -> burst users(A) -> probe orders(A)
            -> align -> burst users(A) -> probe users(B) -> checks

A fatal error (authentication) propagates immediately, so no later step
sends a request. Nothing is retried.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

from shared.config import HarnessConfig
from shared.errors import HarnessException
from shared.logging import get_logger, set_phase, set_run_id
from shared.metrics import HarnessMetrics

from ..adapters.auth_client import AuthClient
from ..adapters.gateway_client import GatewayClient
from ..domain.models import Identity, RunOutcome, Target
from ..timing.window import Clock, Sleeper, WindowAligner
from .checks import evaluate_checks


class IsolationScenario:
    """Cross-service and cross-identity isolation experiment."""

    def __init__(
        self,
        config: HarnessConfig,
        auth_client: AuthClient,
        gateway_client: GatewayClient,
        aligner: WindowAligner,
        metrics: Optional[HarnessMetrics] = None,
    ):
        self.config = config
        self.auth_client = auth_client
        self.gateway_client = gateway_client
        self.aligner = aligner
        self.metrics = metrics
        self.logger = get_logger("ratecheck.scenario")

        self.identity_a = Identity(config.username, config.password, label="a")
        self.identity_b = Identity(config.identity_b_username, config.identity_b_password, label="b")
        self.users = Target("users", config.api_base_url, config.users_path)
        self.orders = Target("orders", config.api_base_url, config.orders_path)

    async def run(self, run_id: Optional[str] = None) -> RunOutcome:
        run_id = set_run_id(run_id)
        count = self.config.burst_requests
        self.logger.info(
            "Scenario started",
            burst_requests=count,
            window_ms=self.aligner.window_ms,
            api_base_url=self.config.api_base_url,
        )

        try:
            set_phase("login")
            token_a = await self.auth_client.acquire(self.identity_a)
            token_b = await self.auth_client.acquire(self.identity_b)

            # Experiment A: same identity, different services, same window
            set_phase("experiment_a")
            alignment_a = await self._align()
            users_burst = await self.gateway_client.burst(self.users, token_a, count)
            orders_probe = await self.gateway_client.probe(self.orders, token_a)

            # Experiment B: same service, different identities, same window
            set_phase("experiment_b")
            alignment_b = await self._align()
            token_a_burst = await self.gateway_client.burst(self.users, token_a, count)
            token_b_probe = await self.gateway_client.probe(self.users, token_b)
        except HarnessException as e:
            self.logger.error("Scenario aborted", error_code=e.code, error=e.message)
            if self.metrics is not None:
                self.metrics.record_error(e.code)
            raise
        finally:
            set_phase(None)

        set_phase("checks")
        checks = evaluate_checks(users_burst, orders_probe, token_a_burst, token_b_probe)
        for check in checks:
            if self.metrics is not None:
                self.metrics.record_check(check.label, check.passed)
            log = self.logger.info if check.passed else self.logger.warning
            log("Check evaluated", check=check.label, passed=check.passed)
        set_phase(None)

        return RunOutcome(
            users_burst=users_burst,
            orders_probe=orders_probe,
            token_a_burst=token_a_burst,
            token_b_probe=token_b_probe,
            checks=checks,
            alignments=[alignment_a, alignment_b],
            run_id=run_id,
        )

    async def _align(self):
        alignment = await self.aligner.align()
        if self.metrics is not None:
            self.metrics.record_alignment(alignment.wait_seconds)
        self.logger.info("Aligned to window start", wait_ms=alignment.wait_ms)
        return alignment


@asynccontextmanager
async def _http_client(config: HarnessConfig, client: Optional[httpx.AsyncClient]) -> AsyncIterator[httpx.AsyncClient]:
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=httpx.Timeout(config.request_timeout)) as owned:
        yield owned


async def run(
    config: HarnessConfig,
    *,
    client: Optional[httpx.AsyncClient] = None,
    metrics: Optional[HarnessMetrics] = None,
    clock: Optional[Clock] = None,
    sleep: Optional[Sleeper] = None,
    run_id: Optional[str] = None,
) -> RunOutcome:
    """Run the scenario once with the given configuration.

    ``client`` lets callers supply a preconfigured transport (tests use an
    in-process gateway); otherwise one client is opened for the run and
    closed afterwards. Raises ``AuthenticationError`` on login failure.
    """
    aligner = WindowAligner(config.window_ms, config.align_margin_ms, clock=clock, sleep=sleep)
    async with _http_client(config, client) as http:
        scenario = IsolationScenario(
            config,
            AuthClient(config.auth_base_url, client=http, timeout=config.request_timeout),
            GatewayClient(http, metrics=metrics, timeout=config.request_timeout),
            aligner,
            metrics=metrics,
        )
        return await scenario.run(run_id=run_id)
