"""
Logging configuration and utilities for Project Pulse.

Agents log with their ``agent_id`` bound; everything logged while a project is
being analysed carries the ``project_id`` through structlog context variables,
including log lines emitted from inside the concurrently running agents.
"""

import logging
import sys
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Union

import structlog


def configure_logging(level: str = "INFO", json_format: bool = False) -> None:
    """
    Configure structured logging for Project Pulse.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Whether to use JSON formatting for logs
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper()),
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str, **initial_values: Any) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name
        **initial_values: Context bound to every event from this logger

    Returns:
        structlog.BoundLogger: Configured logger instance
    """
    return structlog.get_logger(name, **initial_values)


@contextmanager
def project_log_context(project_id: Union[int, str]) -> Iterator[None]:
    """Tag every log event emitted inside the block with the project id."""
    with structlog.contextvars.bound_contextvars(project_id=project_id):
        yield


class LoggerMixin:
    """
    Mixin adding a per-instance logger and operation logging.

    Values passed to ``bind_log_context`` (an agent id, for instance) are
    attached to every event the instance logs.
    """

    @property
    def log_context(self) -> Dict[str, Any]:
        return dict(getattr(self, "_log_context", {}))

    def bind_log_context(self, **values: Any) -> None:
        self._log_context = {**self.log_context, **values}
        self._logger = None

    @property
    def logger(self) -> structlog.BoundLogger:
        """Get logger for this instance."""
        if getattr(self, "_logger", None) is None:
            class_name = self.__class__.__name__
            module_name = self.__class__.__module__
            self._logger = get_logger(f"{module_name}.{class_name}", **self.log_context)
        return self._logger

    def log_operation_start(self, operation: str, **context: Any) -> None:
        self.logger.info("Operation started", operation=operation, **context)

    def log_operation_success(self, operation: str, duration_ms: int, **context: Any) -> None:
        self.logger.info(
            "Operation completed successfully",
            operation=operation,
            duration_ms=duration_ms,
            **context
        )

    def log_operation_error(self, operation: str, error: BaseException, **context: Any) -> None:
        self.logger.error(
            "Operation failed",
            operation=operation,
            error=str(error),
            error_type=type(error).__name__,
            **context
        )
