"""
Observability Package

This package provides observability infrastructure including:
- Structured JSON logging with run ID context
- Prometheus metrics for runs, model calls and tools
- Observers turning agent lifecycle events into logs and metrics
"""

from clever_agent.observability.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    run_id_context,
    set_run_id,
)
from clever_agent.observability.metrics import (
    generate_metrics,
    record_model_call,
    record_run,
    record_tool_call,
)
from clever_agent.observability.observers import LoggingObserver, MetricsObserver

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    "set_run_id",
    "get_run_id",
    "clear_run_id",
    "run_id_context",
    # Metrics
    "generate_metrics",
    "record_run",
    "record_model_call",
    "record_tool_call",
    # Observers
    "LoggingObserver",
    "MetricsObserver",
]
