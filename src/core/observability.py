"""Observability for the post-game summary pipeline.

Structured logging via structlog, a stdlib bridge so ``logging.getLogger``
calls in the core render the same way, per-match correlation ids, and the
``trace_stage`` decorator for timing and tracing pipeline stages.
"""

import asyncio
import functools
import json
import logging
import re
import sys
import time
import traceback
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, TypeVar, cast

import structlog
from pydantic import BaseModel, ConfigDict, Field
from structlog.contextvars import bind_contextvars, get_contextvars, unbind_contextvars

# Processors shared by structlog loggers and bridged stdlib records
_SHARED_PROCESSORS: list[Any] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
    structlog.processors.CallsiteParameterAdder(
        parameters=[
            structlog.processors.CallsiteParameter.FILENAME,
            structlog.processors.CallsiteParameter.FUNC_NAME,
            structlog.processors.CallsiteParameter.LINENO,
        ],
    ),
]


def _renderer() -> Any:
    if sys.stderr.isatty():
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        *_SHARED_PROCESSORS,
        structlog.processors.format_exc_info,
        structlog.processors.dict_tracebacks,
        _renderer(),
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

F = TypeVar("F", bound=Callable[..., Any])

_SENSITIVE_KEY_RE = re.compile(
    r"(token|key|secret|password|pass|authorization|auth)", re.IGNORECASE
)


def configure_stdlib_json_logging(
    level: str = "INFO", file_target: str | None = None, stream: Any = None
) -> None:
    """Route stdlib and structlog records through one JSON formatter.

    Args:
        level: Root log level name (e.g. ``"INFO"``).
        file_target: Optional path; when given, records are also appended there.
        stream: Console stream (stdout when omitted).
    """
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[*_SHARED_PROCESSORS, structlog.stdlib.ExtraAdder()],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stdout)]
    if file_target:
        handlers.append(logging.FileHandler(file_target, encoding="utf-8"))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))


def set_correlation_id(correlation_id: str) -> None:
    """Bind a per-match correlation id (normally the game id) to the context."""
    bind_contextvars(correlation_id=correlation_id)


def clear_correlation_id() -> None:
    unbind_contextvars("correlation_id")


def _mask_scalar(value: Any) -> Any:
    if value is None:
        return None
    s = str(value)
    if len(s) <= 8:
        return "***"
    return f"{s[:4]}…{s[-3:]}"


def _redact_obj(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {
            k: (_mask_scalar(v) if _SENSITIVE_KEY_RE.search(str(k)) else _redact_obj(v))
            for k, v in obj.items()
        }
    if isinstance(obj, list):
        return [_redact_obj(i) for i in obj]
    return obj


def _serialize_value(value: Any, max_length: int = 1000) -> Any:
    """Best-effort JSON-safe view of ``value``, truncated to ``max_length``."""
    try:
        if isinstance(value, BaseModel):
            value = value.model_dump(mode="json")
        json_str = json.dumps(value, default=str)
        if len(json_str) > max_length:
            return json_str[:max_length] + "..."
        return json.loads(json_str)
    except (TypeError, ValueError):
        str_repr = str(value)
        if len(str_repr) > max_length:
            return str_repr[:max_length] + "..."
        return str_repr


class FunctionTrace(BaseModel):
    """Execution record for one traced call."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    function_name: str = Field(description="Fully qualified function name")
    execution_id: str = Field(description="Unique execution ID")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    duration_ms: float | None = Field(default=None)

    args: list[Any] = Field(default_factory=list)
    kwargs: dict[str, Any] = Field(default_factory=dict)
    result: Any | None = Field(default=None)

    is_success: bool = Field(default=True)
    error_type: str | None = Field(default=None)
    error_message: str | None = Field(default=None)

    is_async: bool = Field(default=False)
    correlation_id: str | None = Field(default=None)
    metadata: dict[str, Any] = Field(default_factory=dict)


class _StageRecorder:
    """Shared bookkeeping for the sync and async wrappers."""

    def __init__(
        self,
        func: Callable[..., Any],
        *,
        is_async: bool,
        capture_args: bool,
        capture_result: bool,
        max_arg_length: int,
        log_level: str,
        metadata: dict[str, Any],
    ) -> None:
        self.func_name = f"{func.__module__}.{func.__name__}"
        self.is_async = is_async
        self.capture_args = capture_args
        self.capture_result = capture_result
        self.max_arg_length = max_arg_length
        self.log_level = getattr(logging, log_level.upper(), logging.INFO)
        self.metadata = metadata

    def start(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> FunctionTrace:
        trace = FunctionTrace(
            function_name=self.func_name,
            execution_id=f"{self.func_name}_{time.time_ns() // 1000}",
            is_async=self.is_async,
            correlation_id=get_contextvars().get("correlation_id"),
            metadata=self.metadata,
        )
        if self.capture_args:
            trace.args = [_serialize_value(a, self.max_arg_length) for a in args]
            trace.kwargs = {
                k: _redact_obj(_serialize_value(v, self.max_arg_length))
                if not _SENSITIVE_KEY_RE.search(k)
                else _mask_scalar(v)
                for k, v in kwargs.items()
            }
        bind_contextvars(execution_id=trace.execution_id)
        logger.log(
            self.log_level,
            "stage_started",
            function_name=self.func_name,
            execution_id=trace.execution_id,
            metadata=self.metadata or None,
            args=trace.args if self.capture_args else None,
            kwargs=trace.kwargs if self.capture_args else None,
        )
        return trace

    def succeeded(self, trace: FunctionTrace, started: float, result: Any) -> None:
        trace.duration_ms = (time.perf_counter() - started) * 1000
        if self.capture_result:
            trace.result = _redact_obj(_serialize_value(result, self.max_arg_length))
        logger.log(
            self.log_level,
            "stage_completed",
            function_name=self.func_name,
            execution_id=trace.execution_id,
            duration_ms=trace.duration_ms,
            result=trace.result if self.capture_result else None,
        )

    def failed(self, trace: FunctionTrace, started: float, error: Exception) -> None:
        trace.duration_ms = (time.perf_counter() - started) * 1000
        trace.is_success = False
        trace.error_type = type(error).__name__
        trace.error_message = str(error)
        logger.error(
            "stage_failed",
            function_name=self.func_name,
            execution_id=trace.execution_id,
            duration_ms=trace.duration_ms,
            error_type=trace.error_type,
            error_message=trace.error_message,
            traceback=traceback.format_exc(),
        )

    @staticmethod
    def finish() -> None:
        unbind_contextvars("execution_id")


def trace_stage(
    *,
    capture_result: bool = True,
    capture_args: bool = True,
    max_arg_length: int = 1000,
    log_level: str = "INFO",
    add_metadata: dict[str, Any] | None = None,
) -> Callable[[F], F]:
    """Trace a pipeline stage: arguments, result, duration and failures.

    Works for both sync and async callables. Exceptions are logged as
    ``stage_failed`` and re-raised unchanged.

    Example:
        >>> @trace_stage(capture_result=False)
        ... def normalize_payload(payload: dict) -> dict:
        ...     return payload
    """

    def decorator(func: F) -> F:
        is_async = asyncio.iscoroutinefunction(func)
        recorder = _StageRecorder(
            func,
            is_async=is_async,
            capture_args=capture_args,
            capture_result=capture_result,
            max_arg_length=max_arg_length,
            log_level=log_level,
            metadata=add_metadata or {},
        )

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            trace = recorder.start(args, kwargs)
            started = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                recorder.failed(trace, started, e)
                raise
            else:
                recorder.succeeded(trace, started, result)
                return result
            finally:
                recorder.finish()

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            trace = recorder.start(args, kwargs)
            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                recorder.failed(trace, started, e)
                raise
            else:
                recorder.succeeded(trace, started, result)
                return result
            finally:
                recorder.finish()

        if is_async:
            return cast(F, async_wrapper)
        return cast(F, sync_wrapper)

    return decorator


def trace_performance(func: F) -> F:
    """Timing-only tracing (no arguments or results captured)."""
    return trace_stage(
        capture_result=False,
        capture_args=False,
        log_level="DEBUG",
    )(func)


def trace_collaborator(func: F) -> F:
    """Full tracing for calls that cross into external collaborators."""
    return trace_stage(
        capture_result=True,
        capture_args=True,
        log_level="INFO",
        add_metadata={"layer": "collaborator"},
    )(func)
