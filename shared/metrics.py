"""
Shared metrics configuration for the rate-limit isolation harness.
"""

from typing import Any, Dict, Optional
import threading

from prometheus_client import CollectorRegistry, Counter, Gauge, Info, write_to_textfile


class HarnessMetrics:
    """Prometheus collectors for one harness run.

    Each instance owns its registry so repeated runs in the same process
    (tests, CI matrices) never share counters.
    """

    def __init__(self, service_name: str = "ratecheck", registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry or CollectorRegistry()
        self._metrics: Dict[str, Any] = {}
        self._lock = threading.Lock()
        self._setup_metrics()

    def _setup_metrics(self):
        self._metrics["service_info"] = Info(
            "ratecheck_service",
            "Harness information",
            registry=self.registry
        )
        self._metrics["service_info"].info({
            "service": self.service_name,
            "version": "1.0.0"
        })

        self._metrics["requests_total"] = Counter(
            "ratecheck_requests_total",
            "Requests sent to the gateway, by classified outcome",
            ["target", "identity", "outcome"],
            registry=self.registry
        )

        self._metrics["checks_total"] = Counter(
            "ratecheck_checks_total",
            "Isolation check evaluations",
            ["check", "result"],
            registry=self.registry
        )

        self._metrics["alignment_wait_seconds"] = Gauge(
            "ratecheck_alignment_wait_seconds",
            "Most recent wait before a window boundary",
            registry=self.registry
        )

        self._metrics["errors_total"] = Counter(
            "ratecheck_errors_total",
            "Fatal harness errors",
            ["error_type"],
            registry=self.registry
        )

    def record_request(self, target: str, identity: str, outcome: str):
        with self._lock:
            self._metrics["requests_total"].labels(
                target=target,
                identity=identity,
                outcome=outcome
            ).inc()

    def record_check(self, check: str, passed: bool):
        with self._lock:
            self._metrics["checks_total"].labels(
                check=check,
                result="pass" if passed else "fail"
            ).inc()

    def record_alignment(self, wait_seconds: float):
        self._metrics["alignment_wait_seconds"].set(wait_seconds)

    def record_error(self, error_type: str):
        with self._lock:
            self._metrics["errors_total"].labels(error_type=error_type).inc()

    def sample(self, name: str, labels: Optional[Dict[str, str]] = None) -> Optional[float]:
        """Read back a single sample value from the registry."""
        return self.registry.get_sample_value(name, labels or {})

    def write_textfile(self, path: str) -> None:
        """Write the registry in Prometheus text format (textfile collector style)."""
        write_to_textfile(path, self.registry)
