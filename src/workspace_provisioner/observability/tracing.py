"""
OpenTelemetry distributed tracing for the workspace provisioner.

This module provides:
- Automatic instrumentation of the httpx client used for Keycloak calls
- A span per provisioning stage (traced_stage)
- A decorator creating a span around command handlers (traced_handler)

Usage:
    from workspace_provisioner.observability.tracing import (
        setup_tracing,
        traced_stage,
    )

    # Initialize at startup
    setup_tracing(enabled=True)

    async with traced_stage("realm", realm_name="acme"):
        ...
"""

import contextlib
import functools
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import ParamSpec, TypeVar

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from opentelemetry.trace import Span, SpanKind, Status, StatusCode, Tracer

logger = logging.getLogger(__name__)

# Module-level state
_tracer_provider: TracerProvider | None = None
_initialized: bool = False

# Type variables for decorator
P = ParamSpec("P")
R = TypeVar("R")


def setup_tracing(
    enabled: bool = False,
    endpoint: str = "http://localhost:4317",
    service_name: str = "workspace-provisioner",
    sample_rate: float = 1.0,
    insecure: bool = True,
    use_simple_processor: bool = False,
) -> TracerProvider | None:
    """
    Initialize OpenTelemetry tracing.

    Args:
        enabled: Enable tracing (if False, returns None and does nothing)
        endpoint: OTLP collector endpoint (gRPC)
        service_name: Service name for traces
        sample_rate: Sampling rate (0.0-1.0, 1.0 = 100% of traces)
        insecure: Use insecure connection (no TLS)
        use_simple_processor: Use SimpleSpanProcessor instead of BatchSpanProcessor
                              (short-lived CLI runs export before exiting)

    Returns:
        TracerProvider if enabled, None otherwise
    """
    global _tracer_provider, _initialized

    if _initialized:
        logger.debug("Tracing already initialized, skipping")
        return _tracer_provider

    if not enabled:
        logger.debug("OpenTelemetry tracing is disabled")
        _initialized = True
        return None

    logger.info(
        f"Initializing OpenTelemetry tracing: endpoint={endpoint}, "
        f"service={service_name}, sample_rate={sample_rate}"
    )

    resource = Resource.create({"service.name": service_name})

    # ParentBased respects parent sampling decisions
    # and applies the TraceIdRatioBased sampling for root spans
    sampler = ParentBased(root=TraceIdRatioBased(sample_rate))

    _tracer_provider = TracerProvider(resource=resource, sampler=sampler)

    exporter = OTLPSpanExporter(endpoint=endpoint, insecure=insecure)

    if use_simple_processor:
        processor = SimpleSpanProcessor(exporter)
    else:
        processor = BatchSpanProcessor(exporter)
    _tracer_provider.add_span_processor(processor)

    trace.set_tracer_provider(_tracer_provider)

    # Adds W3C traceparent headers to every Keycloak request
    _instrument_http_clients()

    _initialized = True
    logger.info("OpenTelemetry tracing initialized successfully")

    return _tracer_provider


def _instrument_http_clients() -> None:
    """Instrument httpx for automatic trace context propagation."""
    try:
        HTTPXClientInstrumentor().instrument()
        logger.debug("Instrumented httpx client")
    except Exception as e:
        logger.warning(f"Failed to instrument httpx: {e}")


def shutdown_tracing() -> None:
    """Shutdown tracing and flush any pending spans."""
    global _tracer_provider, _initialized

    if _tracer_provider is not None:
        logger.info("Shutting down OpenTelemetry tracing")
        _tracer_provider.shutdown()
        _tracer_provider = None

    with contextlib.suppress(Exception):
        HTTPXClientInstrumentor().uninstrument()

    _initialized = False


def get_tracer(name: str = __name__) -> Tracer:
    """
    Get a tracer instance for creating spans.

    Returns:
        Tracer instance (no-op if tracing is disabled)
    """
    return trace.get_tracer(name)


@contextlib.asynccontextmanager
async def traced_stage(
    stage: str,
    realm_name: str,
    tracer: Tracer | None = None,
) -> AsyncIterator[Span]:
    """
    Wrap one provisioning stage in a span.

    The span is marked as an error and the exception recorded when the
    stage raises; the exception is always re-raised.
    """
    tracer = tracer or get_tracer(__name__)
    attributes = {
        "workspace.stage": stage,
        "workspace.realm": realm_name,
    }

    with tracer.start_as_current_span(
        f"provision.{stage}",
        kind=SpanKind.INTERNAL,
        attributes=attributes,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        try:
            yield span
        except Exception as e:
            span.set_status(Status(StatusCode.ERROR, str(e)))
            span.record_exception(e)
            span.set_attribute("error.type", type(e).__name__)
            status_code = getattr(e, "status_code", None)
            if status_code is not None:
                span.set_attribute("http.response.status_code", status_code)
            raise
        span.set_status(Status(StatusCode.OK))


def traced_handler(
    operation_name: str,
    span_kind: SpanKind = SpanKind.INTERNAL,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """
    Decorator for async command handlers to automatically create spans.

    Records exceptions as span events and sets the span status based on
    success or failure.

    Example:
        @traced_handler("create_workspace")
        async def handle_create_workspace(command, ...):
            ...
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            tracer = get_tracer(func.__module__ or __name__)
            attributes = {
                "handler": getattr(func, "__name__", "unknown"),
            }

            with tracer.start_as_current_span(
                operation_name,
                kind=span_kind,
                attributes=attributes,
            ) as span:
                try:
                    result = await func(*args, **kwargs)
                    span.set_status(Status(StatusCode.OK))
                    return result
                except Exception as e:
                    span.set_status(Status(StatusCode.ERROR, str(e)))
                    span.record_exception(e)
                    raise

        return wrapper

    return decorator


def is_tracing_enabled() -> bool:
    """Check if tracing is currently enabled and initialized."""
    return _initialized and _tracer_provider is not None
