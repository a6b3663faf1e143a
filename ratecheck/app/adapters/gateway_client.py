"""
Gateway client for the harness: bursts and probes against protected routes.
"""

import uuid
from typing import List, Optional

import httpx

from shared.errors import ValidationError
from shared.logging import get_logger
from shared.metrics import HarnessMetrics

from ..domain.models import BurstResult, ClassifiedOutcome, Credential, ProbeResult, Target, classify_status


class GatewayClient:
    """Sends sequential GETs to the gateway and classifies each response."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        metrics: Optional[HarnessMetrics] = None,
        timeout: float = 10.0,
    ):
        self._client = client
        self.metrics = metrics
        self.timeout = timeout
        self.logger = get_logger("ratecheck.gateway_client")

    async def _get_status(self, target: Target, credential: Credential) -> Optional[int]:
        """Issue one GET; return its status, or None when no response arrived."""
        request_id = str(uuid.uuid4())
        try:
            response = await self._client.get(
                target.url,
                headers={
                    "Authorization": credential.authorization,
                    "X-Request-Id": request_id,
                },
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            self.logger.warning(
                "Gateway request failed",
                target=target.name,
                request_id=request_id,
                error_type=type(e).__name__,
                error=str(e),
            )
            return None
        return response.status_code

    def _record(self, target: Target, credential: Credential, outcome: ClassifiedOutcome) -> None:
        if self.metrics is not None:
            self.metrics.record_request(target.name, credential.name, outcome.value)

    async def burst(self, target: Target, credential: Credential, count: int) -> BurstResult:
        """Send ``count`` requests one after another and tally the outcomes."""
        if count < 1:
            raise ValidationError("burst count must be at least 1", details={"count": count})

        outcomes: List[ClassifiedOutcome] = []
        for _ in range(count):
            outcome = classify_status(await self._get_status(target, credential))
            self._record(target, credential, outcome)
            outcomes.append(outcome)

        result = BurstResult.from_outcomes(outcomes)
        self.logger.info(
            "Burst complete",
            target=target.name,
            identity=credential.name,
            count=count,
            **result.to_dict(),
        )
        return result

    async def probe(self, target: Target, credential: Credential) -> ProbeResult:
        """Send a single request and keep its raw status."""
        status = await self._get_status(target, credential)
        result = ProbeResult(target=target.name, status=status)
        self._record(target, credential, result.outcome)
        self.logger.info(
            "Probe complete",
            target=target.name,
            identity=credential.name,
            status_code=status,
        )
        return result
