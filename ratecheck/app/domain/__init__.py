"""
Domain types for the harness.
"""

from .models import (
    BurstResult,
    CheckResult,
    ClassifiedOutcome,
    Credential,
    Identity,
    LoginResponse,
    ProbeResult,
    RunOutcome,
    Target,
    WindowAlignment,
    classify_status,
)

__all__ = [
    "BurstResult",
    "CheckResult",
    "ClassifiedOutcome",
    "Credential",
    "Identity",
    "LoginResponse",
    "ProbeResult",
    "RunOutcome",
    "Target",
    "WindowAlignment",
    "classify_status",
]
