import inspect
from functools import wraps
from typing import Any, Callable, Optional

from opentelemetry import trace

_tracer_instance: Optional[trace.Tracer] = None


def get_tracer() -> trace.Tracer:
    """Lazily initializes and returns the tracer instance."""
    global _tracer_instance
    if _tracer_instance is None:
        _tracer_instance = trace.get_tracer("tinynetworking")
    return _tracer_instance


def set_span_attributes(**attributes: Any) -> None:
    """Set attributes on the current span, skipping ``None`` values."""
    span = trace.get_current_span()
    for key, value in attributes.items():
        if value is not None:
            span.set_attribute(key, value)


def traced(name: Optional[str] = None, span_type: Optional[str] = None):
    """Wrap a function or coroutine function in an OpenTelemetry span.

    Exceptions are recorded on the span and re-raised. Without a configured
    OpenTelemetry SDK the spans are no-ops.

    Args:
        name (Optional[str]): The span name. Defaults to the function name.
        span_type (Optional[str]): Stored as the ``span_type`` attribute.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        trace_name = name if name is not None else func.__name__

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            with get_tracer().start_as_current_span(trace_name) as span:
                span.set_attribute("span_type", span_type or "function_call_sync")
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    span.record_exception(e)
                    span.set_status(
                        trace.status.Status(trace.status.StatusCode.ERROR, str(e))
                    )
                    raise

        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            with get_tracer().start_as_current_span(trace_name) as span:
                span.set_attribute("span_type", span_type or "function_call_async")
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    span.record_exception(e)
                    span.set_status(
                        trace.status.Status(trace.status.StatusCode.ERROR, str(e))
                    )
                    raise

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator
