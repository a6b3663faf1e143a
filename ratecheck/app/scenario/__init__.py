"""
Scenario orchestration and isolation checks.
"""

from .checks import CHECK_LABELS, evaluate_checks
from .orchestrator import IsolationScenario, run

__all__ = [
    "CHECK_LABELS",
    "IsolationScenario",
    "evaluate_checks",
    "run",
]
