"""
Shared logging configuration for the rate-limit isolation harness.
"""

import sys
import structlog
import logging
import uuid
from typing import Any, Dict, Optional
from contextvars import ContextVar

# Context variables for run correlation
run_id_var: ContextVar[Optional[str]] = ContextVar('run_id', default=None)
phase_var: ContextVar[Optional[str]] = ContextVar('phase', default=None)


def configure_logging(service_name: str, log_level: str = "info") -> None:
    """Configure structured logging for the harness.

    Records are rendered as JSON on stderr; stdout is reserved for the run
    summary so it can be piped into other tools.
    """

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            add_service_context,
            add_run_context,
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper()),
    )
    logging.getLogger(service_name).setLevel(getattr(logging, log_level.upper()))
    # httpx logs every request at INFO; bursts would drown the harness records
    logging.getLogger("httpx").setLevel(logging.WARNING)


def add_service_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add service context to log events."""
    logger_name = event_dict.get("logger", "")
    if "." in logger_name:
        event_dict["service"] = logger_name.split(".")[0]
    return event_dict


def add_run_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add run and phase correlation to log events."""
    run_id = run_id_var.get()
    if run_id:
        event_dict["run_id"] = run_id

    phase = phase_var.get()
    if phase:
        event_dict["phase"] = phase

    return event_dict


def set_run_id(run_id: Optional[str] = None) -> str:
    """Set run ID in context."""
    if run_id is None:
        run_id = str(uuid.uuid4())
    run_id_var.set(run_id)
    return run_id


def set_phase(phase: Optional[str]) -> None:
    """Set the scenario phase (login, experiment_a, ...) in context."""
    phase_var.set(phase)


def clear_context():
    """Clear all context variables."""
    run_id_var.set(None)
    phase_var.set(None)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
