"""
Agent - the tool-calling conversation loop.

One ``execute()`` call drives the model until it answers without requesting
tools or the iteration cap is reached:

    IDLE -> THINKING -> (DISPATCHING <-> THINKING) -> RESPONDING -> DONE
                                   \\-> CAPPED (iteration cap, normal result)
                                   \\-> FAILED (exception propagated)

Each THINKING step sends the full history plus all tool definitions to the
model. Tool calls in one response run sequentially in model order; their
results are appended to the history as a single batch after one assistant
message that records the calls.

Tool failure policy:
- strict (default): the run aborts with ToolExecutionError chained to the cause
- lenient: ``Error: <message>`` is fed back to the model as the tool result

The Agent never retries the model; transport retry belongs to the adapter.

Pattern: Explicit state machine (no recursion)
Pattern: Dependency Injection (model, registry, history, observers)
"""

import inspect
import json
import logging
import sys
import time
import uuid
from enum import Enum
from typing import Any, Optional, Sequence, TextIO, Union

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
from clever_agent.core.exceptions import CleverAgentException, ToolExecutionError
from clever_agent.messages.manager import MessageManager
from clever_agent.models.domain import (
    MAX_ITERATIONS_MESSAGE,
    AgentConfig,
    AgentResponse,
    Message,
    ToolCall,
    ToolFailureMode,
    ToolResult,
    to_pretty_json,
)
from clever_agent.observability.logging import run_id_context
from clever_agent.providers.base import ModelAdapter
from clever_agent.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


class AgentState(str, Enum):
    """Lifecycle state of an Agent."""

    IDLE = "idle"
    THINKING = "thinking"
    DISPATCHING = "dispatching"
    RESPONDING = "responding"
    DONE = "done"
    CAPPED = "capped"
    FAILED = "failed"


def format_tool_result(result: Any) -> str:
    """
    Convert whatever a tool returned into the text fed back to the model.

    ToolResult uses its own to_string(), strings pass through and anything
    else is pretty-printed JSON.
    """
    if isinstance(result, ToolResult):
        return result.to_string()
    if isinstance(result, str):
        return result
    return to_pretty_json(result)


class Agent:
    """
    Tool-calling agent bound to one model, one tool registry and one history.

    The history persists across execute() calls; the iteration counter and
    tool call log are reset at the start of each call. An Agent must not be
    driven by two concurrent execute() calls.

    Args:
        model: Model adapter used for every THINKING step.
        tools: Registry of tools the model may call.
        messages: Conversation history (defaults to an unbounded one).
        config: Loop configuration (max_iterations, verbose, failure mode).
        name: Agent name carried on events, logs and metrics.
        observers: Lifecycle event observers.
        output: Stream for verbose progress lines (default: sys.stdout).

    Example:
        >>> agent = Agent(model, ToolRegistry().register(GetWeatherTool()))
        >>> response = await agent.execute("What's the weather in Paris?")
        >>> response.iterations
        2
    """

    def __init__(
        self,
        model: ModelAdapter,
        tools: Optional[ToolRegistry] = None,
        messages: Optional[MessageManager] = None,
        config: Optional[AgentConfig] = None,
        name: str = "default",
        observers: Sequence[AgentObserver] = (),
        output: Optional[TextIO] = None,
    ) -> None:
        self.model = model
        self.tools = tools if tools is not None else ToolRegistry()
        self.messages = messages if messages is not None else MessageManager()
        self.config = config if config is not None else AgentConfig()
        self.name = name
        self._observers: list[AgentObserver] = list(observers)
        self._output = output

        self._state = AgentState.IDLE
        self._iteration = 0
        self._tool_call_log: list[dict[str, Any]] = []
        self._run_id: Optional[str] = None
        self._running = False

    # =========================================================================
    # Introspection
    # =========================================================================

    @property
    def state(self) -> AgentState:
        """Current lifecycle state."""
        return self._state

    @property
    def iteration(self) -> int:
        """Iteration counter of the current (or last) run."""
        return self._iteration

    @property
    def tool_call_log(self) -> list[dict[str, Any]]:
        """``{iteration, tool, arguments}`` entries of the current (or last) run."""
        return list(self._tool_call_log)

    def add_observer(self, observer: AgentObserver) -> "Agent":
        """Attach a lifecycle observer."""
        self._observers.append(observer)
        return self

    # =========================================================================
    # Execution
    # =========================================================================

    async def execute(self, input: Union[str, Message]) -> AgentResponse:
        """
        Run the loop for one user input.

        Args:
            input: User text, or a Message whose content is used as user text.

        Returns:
            AgentResponse with the final content, or the max-iterations
            message when the cap is reached.

        Raises:
            ToolExecutionError: A tool failed in strict mode.
            ModelTransportError: The model call failed.
        """
        if self._running:
            raise CleverAgentException(f"Agent '{self.name}' is already executing")

        text = input.content if isinstance(input, Message) else input
        run_id = uuid.uuid4().hex
        started_at = time.perf_counter()

        self._running = True
        self._run_id = run_id
        self._iteration = 0
        self._tool_call_log = []

        try:
            with run_id_context(run_id):
                await self._emit(AgentStarted, input=text)
                try:
                    self.messages.add_user_message(text)
                    response = await self._run_loop()
                except Exception as e:
                    self._state = AgentState.FAILED
                    logger.error("Agent %s failed: %s", self.name, e)
                    await self._emit(AgentFailed, error=str(e), error_type=type(e).__name__)
                    raise

                await self._emit(
                    AgentCompleted,
                    execution_time=time.perf_counter() - started_at,
                    tools_executed=len(self._tool_call_log),
                    iterations=self._iteration,
                    response=response,
                )
                return response
        finally:
            self._running = False

    async def _run_loop(self) -> AgentResponse:
        while True:
            self._iteration += 1
            if self._iteration > self.config.max_iterations:
                self._state = AgentState.CAPPED
                logger.warning(
                    "Agent %s stopped after %d iterations",
                    self.name,
                    self.config.max_iterations,
                )
                return AgentResponse(
                    content=MAX_ITERATIONS_MESSAGE,
                    metadata={
                        "iterations": self._iteration,
                        "tool_calls": list(self._tool_call_log),
                        "stopped_reason": "max_iterations",
                    },
                )

            self._state = AgentState.THINKING
            definitions = self.tools.get_definitions()
            await self._emit(
                AgentThinking,
                iteration=self._iteration,
                message_count=len(self.messages),
                has_tools=bool(definitions),
            )
            model_response = await self.model.generate(
                self.messages.get_messages_array(), definitions
            )

            if model_response.has_tool_calls():
                self._state = AgentState.DISPATCHING
                results = []
                for tool_call in model_response.tool_calls:
                    results.append(await self._dispatch(tool_call))

                self.messages.add_assistant_message(
                    model_response.content or "",
                    {"tool_calls": [tc.to_dict() for tc in model_response.tool_calls]},
                )
                self.messages.add_tool_results(results)
                continue

            self._state = AgentState.RESPONDING
            content = model_response.content or ""
            await self._emit(AgentResponding, content=content)
            self.messages.add_assistant_message(content)
            self._state = AgentState.DONE
            return AgentResponse(
                content=content,
                metadata={
                    "iterations": self._iteration,
                    "tool_calls": list(self._tool_call_log),
                    "model_metadata": dict(model_response.metadata),
                },
            )

    async def _dispatch(self, tool_call: ToolCall) -> dict[str, str]:
        """Execute one tool call and return its ``{tool_call_id, name, content}`` record."""
        self._tool_call_log.append(
            {
                "iteration": self._iteration,
                "tool": tool_call.name,
                "arguments": dict(tool_call.arguments),
            }
        )
        await self._emit(
            ToolExecuting,
            tool_name=tool_call.name,
            arguments=dict(tool_call.arguments),
            tool_call_id=tool_call.id,
        )
        self._print(
            f"Calling tool: {tool_call.name} with arguments: "
            f"{json.dumps(tool_call.arguments, default=str)}"
        )

        started_at = time.perf_counter()
        try:
            result = await self.tools.execute(tool_call.name, dict(tool_call.arguments))
        except Exception as e:
            content = f"Error: {e}"
            await self._emit(
                ToolExecuted,
                tool_name=tool_call.name,
                result=content,
                execution_time=time.perf_counter() - started_at,
                success=False,
            )
            if self.config.tool_failure_mode == ToolFailureMode.STRICT:
                if isinstance(e, ToolExecutionError):
                    raise
                raise ToolExecutionError(
                    f"Error executing tool '{tool_call.name}': {e}",
                    tool_name=tool_call.name,
                    arguments=dict(tool_call.arguments),
                    tool_call_id=tool_call.id,
                ) from e
            logger.warning("Tool %s failed, continuing: %s", tool_call.name, e)
        else:
            content = format_tool_result(result)
            await self._emit(
                ToolExecuted,
                tool_name=tool_call.name,
                result=content,
                execution_time=time.perf_counter() - started_at,
                success=not (isinstance(result, ToolResult) and not result.success),
            )

        self._print(f"Tool result: {content}")
        return {"tool_call_id": tool_call.id, "name": tool_call.name, "content": content}

    # =========================================================================
    # Helpers
    # =========================================================================

    def _print(self, line: str) -> None:
        if self.config.verbose:
            print(line, file=self._output or sys.stdout)

    async def _emit(self, event_type: type[AgentEvent], **fields: Any) -> None:
        if not self._observers:
            return
        event = event_type(agent_name=self.name, run_id=self._run_id or "", **fields)
        for observer in self._observers:
            try:
                outcome = observer.handle(event)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception:
                logger.exception(
                    "Observer %s failed handling %s",
                    type(observer).__name__,
                    event.event_name,
                )
