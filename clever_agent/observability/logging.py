"""
Structured Logging Module

Every log line of the package is rendered as one JSON object, whether it
comes from a structlog logger (LoggingObserver, get_logger()) or from a
module-level ``logging.getLogger(__name__)`` in the agent, providers,
registry or history.

The bridge is a single ``structlog.stdlib.ProcessorFormatter`` handler on
the ``clever_agent`` logger. Native structlog events and foreign stdlib
records run through the same shared processors, so the run id of the
active ``Agent.execute()`` call is stamped on both.

Pattern: Structured logging for observability
Pattern: Singleton configuration (configure once, adjust level later)
"""

import contextvars
import logging
import sys
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Generator, Optional, TextIO

import structlog
from structlog.types import EventDict, Processor

ROOT_LOGGER_NAME = "clever_agent"
DEFAULT_LEVEL = "INFO"

# =============================================================================
# Configuration State
# =============================================================================

_configured: bool = False
_handler: Optional[logging.Handler] = None

# =============================================================================
# Run ID Context
# =============================================================================

_run_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "run_id", default=None
)


def set_run_id(run_id: str) -> None:
    """Set the run ID for the current context."""
    _run_id_var.set(run_id)


def get_run_id() -> Optional[str]:
    """Get the current run ID, or None outside a run."""
    return _run_id_var.get()


def clear_run_id() -> None:
    """Clear the run ID for the current context."""
    _run_id_var.set(None)


@contextmanager
def run_id_context(run_id: str) -> Generator[None, None, None]:
    """
    Scope a run ID to a block.

    The previous value is restored on exit, so nested runs (an agent used
    as a tool of another agent) log their own id.

    Example:
        >>> with run_id_context("run-12345"):
        ...     logger.info("calling model")
    """
    token = _run_id_var.set(run_id)
    try:
        yield
    finally:
        _run_id_var.reset(token)


# =============================================================================
# Processors
# =============================================================================


def add_run_id(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Stamp the active run ID, keeping one bound explicitly."""
    run_id = get_run_id()
    if run_id is not None:
        event_dict.setdefault("run_id", run_id)
    return event_dict


def add_timestamp(
    logger: logging.Logger, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add ISO 8601 UTC timestamp."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _shared_processors() -> list[Processor]:
    # Applied to structlog events and to foreign stdlib records alike
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_timestamp,
        add_run_id,
    ]


def _build_handler(stream: TextIO) -> logging.Handler:
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            *_shared_processors(),
            structlog.stdlib.ExtraAdder(),
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
    )
    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)
    return handler


# =============================================================================
# Configuration
# =============================================================================


def configure_logging(
    level: Optional[str] = None,
    stream: Optional[TextIO] = None,
    force: bool = False,
) -> None:
    """
    Configure JSON logging for the ``clever_agent`` logger tree.

    The first call installs the handler. Later calls only apply ``level``
    (when given) unless ``force=True``, which replaces the handler.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Defaults to INFO on first configuration.
        stream: Output stream (default: sys.stdout).
        force: Reinstall the handler, e.g. to redirect output in tests.

    Example:
        >>> configure_logging(level=get_settings().log_level)
    """
    global _configured, _handler

    if _configured and not force:
        if level is not None:
            set_log_level(level)
        return

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_shared_processors(),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    if _handler is not None:
        package_logger.removeHandler(_handler)
    _handler = _build_handler(stream or sys.stdout)
    package_logger.addHandler(_handler)
    set_log_level(level or DEFAULT_LEVEL)
    _configured = True


def set_log_level(level: str) -> None:
    """Set the level of the whole ``clever_agent`` logger tree."""
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(_level_to_int(level))


def reset_logging() -> None:
    """
    Remove the handler and forget the configuration.

    WARNING: This should only be used in tests.
    """
    global _configured, _handler
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    if _handler is not None:
        package_logger.removeHandler(_handler)
    package_logger.setLevel(logging.NOTSET)
    _handler = None
    _configured = False


# =============================================================================
# Logger Factory
# =============================================================================


def get_logger(name: str = ROOT_LOGGER_NAME) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger, configuring logging on first use.

    Use a name under ``clever_agent`` so output goes through the package
    handler.

    Example:
        >>> logger = get_logger("clever_agent.agent")
        >>> logger.info("agent_completed", iterations=2)
    """
    configure_logging()
    return structlog.get_logger(name)


def _level_to_int(level: str) -> int:
    levels = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return levels.get(level.upper(), logging.INFO)
