"""
Structured logging utilities with JSON formatting and context injection.

This module provides structured logging capabilities with:
- JSON formatted log output the CI runner can keep as machine-readable logs
- Context injection (pr_number, phase, database) via LoggerAdapter
- Helpers for phase transitions, API calls and external commands
- Integration with Python's standard logging module
"""

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from logging import LogRecord
from typing import Any, Dict, List, MutableMapping, Optional, Sequence


CONTEXT_FIELDS = ("pr_number", "phase", "database", "engine")

_RESERVED_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName", "relativeCreated",
    "thread", "threadName", "exc_info", "exc_text", "stack_info",
    "taskName",
}


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs log records as JSON with standard fields:
    - timestamp: ISO 8601 formatted timestamp
    - level: Log level (INFO, WARNING, ERROR, etc.)
    - logger: Logger name
    - message: Log message
    - pr_number, phase, database, engine: top-level context fields
    - context: any other extra fields
    - error: Error details when exc_info is attached
    """

    def format(self, record: LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and key not in CONTEXT_FIELDS
        }
        if extra_fields:
            log_data["context"] = extra_fields

        if record.exc_info:
            log_data["error"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "stack_trace": "".join(traceback.format_exception(*record.exc_info))
            }

        log_data["source"] = {
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName
        }

        return json.dumps(log_data, default=str)


class ContextLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that injects context fields into all log records.

    The reaper binds pr_number and database once they are known so every
    later line of the run carries them.
    """

    def __init__(self, logger: logging.Logger, extra: Optional[Dict[str, Any]] = None):
        super().__init__(logger, extra or {})

    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> tuple[str, MutableMapping[str, Any]]:
        extra = kwargs.get("extra", {})
        extra.update(self.extra)
        kwargs["extra"] = extra
        return msg, kwargs

    def with_context(self, **context: Any) -> "ContextLoggerAdapter":
        """
        Create a new logger adapter with additional context.

        Args:
            **context: Additional context fields

        Returns:
            New logger adapter with merged context
        """
        new_extra = dict(self.extra)
        new_extra.update(context)
        return ContextLoggerAdapter(self.logger, new_extra)


def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure structured logging for the reaper.

    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    formatter = JSONFormatter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str, **context: Any) -> ContextLoggerAdapter:
    """
    Get a context-aware logger for a module.

    Example:
        logger = get_logger(__name__, pr_number=42)
        logger.info("Resolving secrets")  # Will include pr_number
    """
    return ContextLoggerAdapter(logging.getLogger(name), context)


def log_phase_transition(logger: logging.LoggerAdapter, phase: str, status: str) -> None:
    """
    Log a reaper phase transition (start or completion).

    Args:
        logger: Logger to use
        phase: Phase name (e.g., 'resolve_pull_request', 'safety_check', 'drop')
        status: Status ('started' or 'completed')
    """
    logger.info(
        f"Phase {status}: {phase}",
        extra={
            "phase": phase,
            "status": status,
        }
    )


def log_api_call(
    logger: logging.LoggerAdapter,
    service: str,
    endpoint: str,
    method: str,
    status_code: Optional[int] = None,
    duration_ms: Optional[float] = None,
    error: Optional[str] = None
) -> None:
    """
    Log an HTTP API call with request/response details.

    Args:
        logger: Logger to use
        service: Service name (e.g., 'github', 'doppler')
        endpoint: API endpoint
        method: HTTP method
        status_code: Response status code (if available)
        duration_ms: Request duration in milliseconds (if available)
        error: Error message (if request failed)
    """
    extra: Dict[str, Any] = {
        "service": service,
        "endpoint": endpoint,
        "method": method,
    }

    if status_code is not None:
        extra["status_code"] = status_code
    if duration_ms is not None:
        extra["duration_ms"] = round(duration_ms, 2)
    if error is not None:
        extra["error"] = error

    if error:
        logger.error(f"API call failed: {method} {endpoint}", extra=extra)
    else:
        logger.info(f"API call: {method} {endpoint}", extra=extra)


def mask_argv(argv: Sequence[str], secrets: Sequence[str] = ()) -> List[str]:
    """Return a copy of argv with every occurrence of a secret replaced by ***."""
    masked = []
    for arg in argv:
        for secret in secrets:
            if secret:
                arg = arg.replace(secret, "***")
        masked.append(arg)
    return masked


def log_command(
    logger: logging.LoggerAdapter,
    argv: Sequence[str],
    secrets: Sequence[str] = (),
    exit_code: Optional[int] = None,
) -> None:
    """
    Log an external command invocation with secret arguments masked.

    Args:
        logger: Logger to use
        argv: Argument vector passed to the child process
        secrets: Values that must never appear in the log line
        exit_code: Exit status once the command has finished
    """
    extra: Dict[str, Any] = {"command": mask_argv(argv, secrets)}
    if exit_code is not None:
        extra["exit_code"] = exit_code
    if exit_code:
        logger.error(f"Command failed: {argv[0]}", extra=extra)
    else:
        logger.info(f"Command: {argv[0]}", extra=extra)
