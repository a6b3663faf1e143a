"""
Value types for the rate-limit isolation harness.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ClassifiedOutcome(str, Enum):
    """Bucket a gateway response falls into."""

    ALLOWED = "allowed"
    THROTTLED = "throttled"
    OTHER = "other"


def classify_status(status: Optional[int]) -> ClassifiedOutcome:
    """Map an HTTP status to its bucket: 200 allowed, 429 throttled, anything else other.

    ``None`` stands for a request that never produced a response.
    """
    if status == 200:
        return ClassifiedOutcome.ALLOWED
    if status == 429:
        return ClassifiedOutcome.THROTTLED
    return ClassifiedOutcome.OTHER


@dataclass(frozen=True)
class Identity:
    username: str
    password: str = field(repr=False)
    label: str = ""

    @property
    def name(self) -> str:
        return self.label or self.username


@dataclass(frozen=True)
class Credential:
    """Bearer token acquired for one identity."""

    username: str
    token: str = field(repr=False)
    label: str = ""

    @property
    def name(self) -> str:
        return self.label or self.username

    @property
    def authorization(self) -> str:
        return f"Bearer {self.token}"


@dataclass(frozen=True)
class Target:
    name: str
    base_url: str
    path: str

    @property
    def url(self) -> str:
        return f"{self.base_url.rstrip('/')}{self.path}"


@dataclass(frozen=True)
class BurstResult:
    """Classification counts for one burst."""

    allowed: int = 0
    throttled: int = 0
    other: int = 0

    @property
    def total(self) -> int:
        return self.allowed + self.throttled + self.other

    @classmethod
    def from_outcomes(cls, outcomes: Iterable[ClassifiedOutcome]) -> "BurstResult":
        counts = {outcome: 0 for outcome in ClassifiedOutcome}
        for outcome in outcomes:
            counts[outcome] += 1
        return cls(
            allowed=counts[ClassifiedOutcome.ALLOWED],
            throttled=counts[ClassifiedOutcome.THROTTLED],
            other=counts[ClassifiedOutcome.OTHER],
        )

    def to_dict(self) -> Dict[str, int]:
        return {"ok": self.allowed, "tooMany": self.throttled, "other": self.other}


@dataclass(frozen=True)
class ProbeResult:
    """Raw status of a single isolated request; ``None`` when the transport failed."""

    target: str
    status: Optional[int]

    @property
    def outcome(self) -> ClassifiedOutcome:
        return classify_status(self.status)


@dataclass(frozen=True)
class WindowAlignment:
    now_ms: int
    window_ms: int
    margin_ms: int
    wait_ms: int

    @property
    def wait_seconds(self) -> float:
        return self.wait_ms / 1000.0


@dataclass(frozen=True)
class CheckResult:
    label: str
    passed: bool


@dataclass
class RunOutcome:
    """Everything one scenario run produced."""

    users_burst: BurstResult
    orders_probe: ProbeResult
    token_a_burst: BurstResult
    token_b_probe: ProbeResult
    checks: List[CheckResult] = field(default_factory=list)
    alignments: List[WindowAlignment] = field(default_factory=list)
    run_id: Optional[str] = None

    @property
    def passed(self) -> bool:
        return bool(self.checks) and all(check.passed for check in self.checks)

    @property
    def failed_checks(self) -> List[str]:
        return [check.label for check in self.checks if not check.passed]


class LoginResponse(BaseModel):
    """Body of a successful ``POST /auth/login``."""

    model_config = ConfigDict(extra="ignore")

    token: str = Field(min_length=1)

    @classmethod
    def decode(cls, payload: Any) -> "LoginResponse":
        return cls.model_validate(payload)
