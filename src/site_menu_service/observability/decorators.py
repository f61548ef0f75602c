"""OpenTelemetry tracing decorators."""

import asyncio
import functools
import inspect
from collections.abc import Callable
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Span

F = TypeVar("F", bound=Callable[..., Any])


def _bound_argument(
    signature: inspect.Signature, name: str, args: tuple[Any, ...], kwargs: dict[str, Any]
) -> Any:
    try:
        return signature.bind_partial(*args, **kwargs).arguments.get(name)
    except TypeError:
        return None


def _record_failure(span: Span, error: Exception) -> None:
    span.set_attribute("success", False)
    span.set_attribute("error.type", type(error).__name__)
    span.set_attribute("error.message", str(error))
    span.record_exception(error)


def traced(
    span_name: str | None = None,
    service_name: str = "menu-svc",
    location_arg: str | None = None,
) -> Callable[[F], F]:
    """Decorator wrapping a function call in an OpenTelemetry span.

    When ``location_arg`` names a parameter of the decorated function, its
    value (positional or keyword) is recorded as ``menu.location``.

    Args:
        span_name: Name for the span (defaults to the function name)
        service_name: Service name recorded on the span
        location_arg: Parameter holding the menu location, if any

    Returns:
        Decorated function with tracing

    Example:
        @traced("get_menu_items_for_location", location_arg="location")
        async def get_menu_items_for_location(self, location: str) -> list[DisplayMenuItem]:
            ...
    """

    def decorator(func: F) -> F:
        name = span_name or func.__name__
        tracer = trace.get_tracer(service_name)
        signature = inspect.signature(func)

        def annotate(span: Span, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
            span.set_attribute("service.name", service_name)
            if span_name:
                span.set_attribute("function.name", func.__name__)
            if location_arg is None:
                return
            location = _bound_argument(signature, location_arg, args, kwargs)
            if location is not None:
                span.set_attribute("menu.location", str(location))

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(name) as span:
                annotate(span, args, kwargs)
                try:
                    result = await func(*args, **kwargs)
                    span.set_attribute("success", True)
                    return result
                except Exception as e:
                    _record_failure(span, e)
                    raise

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(name) as span:
                annotate(span, args, kwargs)
                try:
                    result = func(*args, **kwargs)
                    span.set_attribute("success", True)
                    return result
                except Exception as e:
                    _record_failure(span, e)
                    raise

        if asyncio.iscoroutinefunction(func):
            return async_wrapper  # type: ignore
        return sync_wrapper  # type: ignore

    return decorator
