"""
Observability Observers - lifecycle events to logs and metrics.

Attach these to an Agent to get structured logs and Prometheus metrics for
every run without touching the loop:

    agent = Agent(model, tools, observers=[LoggingObserver(), MetricsObserver()])
"""

from typing import Optional

from clever_agent.agent.events import (
    AgentCompleted,
    AgentEvent,
    AgentFailed,
    AgentObserver,
    AgentResponding,
    AgentStarted,
    AgentThinking,
    ToolExecuted,
    ToolExecuting,
)
from clever_agent.observability.logging import get_logger
from clever_agent.observability.metrics import (
    record_model_call,
    record_run,
    record_tool_call,
)


class LoggingObserver(AgentObserver):
    """
    Emit one structured log line per lifecycle event.

    Tool arguments and results are logged at DEBUG; run boundaries at INFO;
    failures at ERROR. The run id is added by the logging processor.
    """

    def __init__(self, logger_name: str = "clever_agent.agent") -> None:
        self._logger = get_logger(logger_name)

    def handle(self, event: AgentEvent) -> None:
        log = self._logger.bind(agent=event.agent_name)

        if isinstance(event, AgentStarted):
            log.info(event.event_name, input=event.input)
        elif isinstance(event, AgentThinking):
            log.debug(
                event.event_name,
                iteration=event.iteration,
                message_count=event.message_count,
                has_tools=event.has_tools,
            )
        elif isinstance(event, ToolExecuting):
            log.debug(
                event.event_name,
                tool=event.tool_name,
                tool_call_id=event.tool_call_id,
                arguments=event.arguments,
            )
        elif isinstance(event, ToolExecuted):
            log.info(
                event.event_name,
                tool=event.tool_name,
                success=event.success,
                execution_time=round(event.execution_time, 6),
            )
        elif isinstance(event, AgentResponding):
            log.debug(event.event_name, content_length=len(event.content))
        elif isinstance(event, AgentCompleted):
            log.info(
                event.event_name,
                iterations=event.iterations,
                tools_executed=event.tools_executed,
                execution_time=round(event.execution_time, 6),
                stopped_reason=event.response.stopped_reason,
            )
        elif isinstance(event, AgentFailed):
            log.error(event.event_name, error=event.error, error_type=event.error_type)


class MetricsObserver(AgentObserver):
    """
    Record Prometheus metrics from lifecycle events.

    Run outcomes are ``completed``, ``max_iterations`` or ``failed``.
    """

    def handle(self, event: AgentEvent) -> None:
        if isinstance(event, AgentThinking):
            record_model_call(event.agent_name)
        elif isinstance(event, ToolExecuted):
            record_tool_call(event.tool_name, event.success, event.execution_time)
        elif isinstance(event, AgentCompleted):
            outcome: Optional[str] = event.response.stopped_reason
            record_run(event.agent_name, outcome or "completed", event.execution_time)
        elif isinstance(event, AgentFailed):
            record_run(event.agent_name, "failed")
