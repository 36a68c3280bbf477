"""Composable instrumentation helpers for public API methods.

Every public service method is wrapped by ``public_api_instrumented`` so that
logging, tracing and metrics share one callsite contract. Instrumentation
never changes call outcomes: return values pass through untouched and raised
exceptions are re-raised unchanged after completion hooks run.
"""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, field
from functools import lru_cache, wraps
from time import perf_counter
from typing import Any, Callable, Mapping, Protocol, Sequence

from opentelemetry import metrics as otel_metrics
from opentelemetry import trace as otel_trace
from opentelemetry.trace import Span, Status, StatusCode

from packages.recall_shared.config.models import PublicApiOtelSettings
from packages.recall_shared.errors import ErrorDetail, exception_to_error

from . import fields
from .context import log_context


@dataclass(frozen=True)
class InvocationContext:
    """Structured metadata describing one public API invocation."""

    component_id: str
    api_name: str
    references: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class CompletionContext:
    """Structured metadata describing one completed public API invocation."""

    invocation: InvocationContext
    success: bool
    duration_ms: float
    error: ErrorDetail | None = None


class PublicApiInstrumentationConcern(Protocol):
    """Hook contract for one public API instrumentation concern."""

    def on_invocation(self, context: InvocationContext) -> None:
        """Handle invocation-start event for one method call."""

    def on_completion(self, context: CompletionContext) -> None:
        """Handle completion event for one method call."""


class PublicApiLoggingConcern:
    """Logging concern implementation for invocation/completion events."""

    def __init__(self, *, logger: Any) -> None:
        self._logger = logger

    def on_invocation(self, context: InvocationContext) -> None:
        """Emit standardized structured invocation-start log at debug level."""
        with log_context(_invocation_log_context(context)):
            self._logger.debug("Public API invocation")

    def on_completion(self, context: CompletionContext) -> None:
        """Emit standardized structured completion log."""
        payload = _invocation_log_context(context.invocation)
        payload.update(
            {
                fields.EVENT: fields.PUBLIC_API_COMPLETION_EVENT,
                fields.SUCCESS: context.success,
                fields.DURATION_MS: context.duration_ms,
            }
        )
        if context.error is not None:
            payload.update(
                {
                    fields.ERROR_CODE: context.error.code,
                    fields.ERROR_CATEGORY: context.error.category.value,
                    fields.ERROR_MESSAGE: context.error.message,
                }
            )
        with log_context(payload):
            if context.success:
                self._logger.info("Public API completion")
            else:
                self._logger.warning("Public API completion")


@dataclass(frozen=True)
class _TraceScope:
    """One in-flight trace scope for a decorated API invocation."""

    manager: Any
    span: Span


class PublicApiTracingConcern:
    """Tracing concern that opens one OTel span per public API invocation."""

    def __init__(self, *, tracer: otel_trace.Tracer) -> None:
        self._tracer = tracer
        self._active_scopes: ContextVar[tuple[_TraceScope, ...]] = ContextVar(
            "public_api_tracing_scopes", default=()
        )

    def on_invocation(self, context: InvocationContext) -> None:
        """Start one span for the current invocation and attach references."""
        manager = self._tracer.start_as_current_span(
            f"public_api.{context.component_id}.{context.api_name}"
        )
        span = manager.__enter__()
        span.set_attribute(fields.COMPONENT_ID, context.component_id)
        span.set_attribute(fields.API_NAME, context.api_name)
        for key, value in context.references.items():
            span.set_attribute(f"reference.{key}", value)
        self._active_scopes.set(
            (*self._active_scopes.get(), _TraceScope(manager=manager, span=span))
        )

    def on_completion(self, context: CompletionContext) -> None:
        """Finalize the innermost invocation span with outcome attributes."""
        current = self._active_scopes.get()
        if len(current) == 0:
            return
        scope = current[-1]
        self._active_scopes.set(current[:-1])

        scope.span.set_attribute(fields.SUCCESS, context.success)
        scope.span.set_attribute(fields.DURATION_MS, context.duration_ms)
        scope.span.set_attribute(fields.OUTCOME, _outcome(context.success))
        if context.error is not None:
            scope.span.set_attribute(fields.ERROR_CODE, context.error.code)
            scope.span.set_attribute(
                fields.ERROR_CATEGORY, context.error.category.value
            )
            scope.span.set_status(Status(StatusCode.ERROR, context.error.message))
        scope.manager.__exit__(None, None, None)


class PublicApiMetricsConcern:
    """Metrics concern emitting call, latency and error instruments."""

    def __init__(
        self,
        *,
        calls_total: otel_metrics.Counter,
        duration_ms: otel_metrics.Histogram,
        errors_total: otel_metrics.Counter,
    ) -> None:
        self._calls_total = calls_total
        self._duration_ms = duration_ms
        self._errors_total = errors_total

    def on_invocation(self, context: InvocationContext) -> None:
        """No-op at invocation; metrics are emitted on completion."""
        del context

    def on_completion(self, context: CompletionContext) -> None:
        """Record counters and latency for one completed invocation."""
        attrs = {
            fields.COMPONENT_ID: context.invocation.component_id,
            fields.API_NAME: context.invocation.api_name,
            fields.OUTCOME: _outcome(context.success),
        }
        self._calls_total.add(1, attributes=attrs)
        self._duration_ms.record(context.duration_ms, attributes=attrs)
        if context.error is None:
            return
        self._errors_total.add(
            1,
            attributes={
                fields.COMPONENT_ID: context.invocation.component_id,
                fields.API_NAME: context.invocation.api_name,
                fields.ERROR_CATEGORY: context.error.category.value,
            },
        )


def public_api_instrumented(
    *,
    component_id: str,
    api_name: str | None = None,
    id_fields: tuple[str, ...] = (),
    concerns: Sequence[PublicApiInstrumentationConcern] | None = None,
    logger: Any | None = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorate one public API method with composable instrumentation concerns.

    ``id_fields`` names keyword arguments whose non-empty values are attached
    to logs and spans as correlation references. Default OTel tracing and
    metrics concerns are appended lazily on first call.
    """
    explicit_concerns: tuple[PublicApiInstrumentationConcern, ...] = tuple(
        concerns or ()
    )
    if logger is not None:
        explicit_concerns = (PublicApiLoggingConcern(logger=logger), *explicit_concerns)

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        method_name = api_name or func.__name__

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            resolved_concerns = (*explicit_concerns, *_default_otel_concerns())
            invocation = InvocationContext(
                component_id=component_id,
                api_name=method_name,
                references={
                    name: str(kwargs[name])
                    for name in id_fields
                    if kwargs.get(name) not in (None, "")
                },
            )
            _emit_invocation(
                concerns=resolved_concerns, context=invocation, logger=logger
            )

            started = perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                _emit_completion(
                    concerns=resolved_concerns,
                    context=CompletionContext(
                        invocation=invocation,
                        success=False,
                        duration_ms=_elapsed_ms(started),
                        error=exception_to_error(exc),
                    ),
                    logger=logger,
                )
                raise

            _emit_completion(
                concerns=resolved_concerns,
                context=CompletionContext(
                    invocation=invocation,
                    success=True,
                    duration_ms=_elapsed_ms(started),
                ),
                logger=logger,
            )
            return result

        return wrapper

    return decorator


def _elapsed_ms(started: float) -> float:
    """Return elapsed milliseconds since ``started`` rounded to microseconds."""
    return round((perf_counter() - started) * 1000.0, 3)


def _outcome(success: bool) -> str:
    return "success" if success else "failure"


def _invocation_log_context(context: InvocationContext) -> dict[str, object]:
    """Build common structured fields for one invocation event."""
    return {
        fields.EVENT: fields.PUBLIC_API_INVOCATION_EVENT,
        fields.COMPONENT_ID: context.component_id,
        fields.API_NAME: context.api_name,
        **context.references,
    }


def _emit_invocation(
    *,
    concerns: Sequence[PublicApiInstrumentationConcern],
    context: InvocationContext,
    logger: Any | None,
) -> None:
    """Dispatch invocation event to concerns with failure isolation."""
    for concern in concerns:
        try:
            concern.on_invocation(context)
        except Exception as exc:  # noqa: BLE001
            _log_concern_failure(
                logger=logger,
                stage="invocation",
                concern=type(concern).__name__,
                exc=exc,
                invocation=context,
            )


def _emit_completion(
    *,
    concerns: Sequence[PublicApiInstrumentationConcern],
    context: CompletionContext,
    logger: Any | None,
) -> None:
    """Dispatch completion event to concerns with failure isolation."""
    for concern in concerns:
        try:
            concern.on_completion(context)
        except Exception as exc:  # noqa: BLE001
            _log_concern_failure(
                logger=logger,
                stage="completion",
                concern=type(concern).__name__,
                exc=exc,
                invocation=context.invocation,
            )


def _log_concern_failure(
    *,
    logger: Any | None,
    stage: str,
    concern: str,
    exc: Exception,
    invocation: InvocationContext,
) -> None:
    """Best-effort warning log for instrumentation concern hook failures."""
    if logger is None:
        return
    with log_context(
        {
            fields.EVENT: fields.PUBLIC_API_INSTRUMENTATION_FAILURE_EVENT,
            fields.COMPONENT_ID: invocation.component_id,
            fields.API_NAME: invocation.api_name,
            fields.STAGE: stage,
            fields.CONCERN: concern,
        }
    ):
        logger.warning("Public API instrumentation concern failed", exc_info=exc)


_otel_names = PublicApiOtelSettings()


def configure_public_api_otel(settings: PublicApiOtelSettings) -> None:
    """Apply configured OTel names to concerns built after this call."""
    global _otel_names
    _otel_names = settings
    _default_otel_concerns.cache_clear()


@lru_cache(maxsize=1)
def _default_otel_concerns() -> tuple[PublicApiInstrumentationConcern, ...]:
    """Build OTel-backed tracing and metrics concerns from configured names."""
    names = _otel_names
    meter = otel_metrics.get_meter(names.meter_name)
    return (
        PublicApiTracingConcern(tracer=otel_trace.get_tracer(names.tracer_name)),
        PublicApiMetricsConcern(
            calls_total=meter.create_counter(
                name=names.metric_public_api_calls_total,
                description="Count of public API invocations by component/method/outcome.",
                unit="1",
            ),
            duration_ms=meter.create_histogram(
                name=names.metric_public_api_duration_ms,
                description="Public API invocation latency in milliseconds.",
                unit="ms",
            ),
            errors_total=meter.create_counter(
                name=names.metric_public_api_errors_total,
                description="Count of public API failures by error category.",
                unit="1",
            ),
        ),
    )
