"""
Prometheus Metrics Module

This module provides Prometheus metrics for agent runs, model calls and
tool executions. The helpers are called by MetricsObserver, which turns
agent lifecycle events into metric updates.

Pattern: Metrics collection for observability
"""

from typing import Optional

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram, generate_latest

# =============================================================================
# Agent Run Metrics
# =============================================================================

RUNS_TOTAL = Counter(
    name="clever_agent_runs_total",
    documentation="Total number of agent runs by outcome",
    labelnames=["agent", "outcome"],
)

RUN_DURATION_SECONDS = Histogram(
    name="clever_agent_run_duration_seconds",
    documentation="Agent run duration in seconds",
    labelnames=["agent"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0),
)

MODEL_CALLS_TOTAL = Counter(
    name="clever_agent_model_calls_total",
    documentation="Total number of model invocations",
    labelnames=["agent"],
)

# =============================================================================
# Tool Metrics
# =============================================================================

TOOL_CALLS_TOTAL = Counter(
    name="clever_agent_tool_calls_total",
    documentation="Total number of tool executions by status",
    labelnames=["tool", "status"],
)

TOOL_DURATION_SECONDS = Histogram(
    name="clever_agent_tool_duration_seconds",
    documentation="Tool execution duration in seconds",
    labelnames=["tool"],
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0, 30.0),
)


# =============================================================================
# Helper Functions
# =============================================================================


def record_run(agent: str, outcome: str, duration_seconds: Optional[float] = None) -> None:
    """
    Record a finished agent run.

    Args:
        agent: Agent name
        outcome: "completed", "max_iterations" or "failed"
        duration_seconds: Wall-clock duration of the run, if known
    """
    RUNS_TOTAL.labels(agent=agent, outcome=outcome).inc()
    if duration_seconds is not None:
        RUN_DURATION_SECONDS.labels(agent=agent).observe(duration_seconds)


def record_model_call(agent: str) -> None:
    """Record one model invocation."""
    MODEL_CALLS_TOTAL.labels(agent=agent).inc()


def record_tool_call(tool: str, success: bool, duration_seconds: float) -> None:
    """
    Record one tool execution.

    Args:
        tool: Tool name
        success: Whether the tool succeeded
        duration_seconds: Execution time in seconds
    """
    status = "success" if success else "error"
    TOOL_CALLS_TOTAL.labels(tool=tool, status=status).inc()
    TOOL_DURATION_SECONDS.labels(tool=tool).observe(duration_seconds)


def generate_metrics(registry: Optional[CollectorRegistry] = None) -> bytes:
    """
    Generate Prometheus metrics output.

    Returns:
        Metrics in Prometheus text exposition format
    """
    return generate_latest(registry or REGISTRY)
