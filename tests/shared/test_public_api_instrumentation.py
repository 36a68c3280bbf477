"""Unit tests for public API instrumentation concerns and the decorator."""

from __future__ import annotations

import ast
import logging
from pathlib import Path

import pytest

from packages.recall_shared.config.models import PublicApiOtelSettings
from packages.recall_shared.errors import RecallNotFoundError
from packages.recall_shared.logging import public_api as public_api_module
from packages.recall_shared.logging.public_api import (
    CompletionContext,
    InvocationContext,
    PublicApiLoggingConcern,
    PublicApiMetricsConcern,
    PublicApiTracingConcern,
    configure_public_api_otel,
    public_api_instrumented,
)

_REPO_ROOT = Path(__file__).resolve().parents[2]


class _RecordingConcern:
    """Concern capturing every invocation and completion context."""

    def __init__(self) -> None:
        self.invocations: list[InvocationContext] = []
        self.completions: list[CompletionContext] = []

    def on_invocation(self, context: InvocationContext) -> None:
        self.invocations.append(context)

    def on_completion(self, context: CompletionContext) -> None:
        self.completions.append(context)


class _BrokenConcern:
    """Concern whose hooks always fail."""

    def on_invocation(self, context: InvocationContext) -> None:
        raise RuntimeError("invocation hook broke")

    def on_completion(self, context: CompletionContext) -> None:
        raise RuntimeError("completion hook broke")


class _FakeSpan:
    def __init__(self) -> None:
        self.attributes: dict[str, object] = {}
        self.statuses: list[object] = []

    def set_attribute(self, key: str, value: object) -> None:
        self.attributes[key] = value

    def set_status(self, status: object) -> None:
        self.statuses.append(status)


class _FakeSpanManager:
    def __init__(self) -> None:
        self.span = _FakeSpan()
        self.exited = False

    def __enter__(self) -> _FakeSpan:
        return self.span

    def __exit__(self, *_: object) -> None:
        self.exited = True


class _FakeTracer:
    def __init__(self) -> None:
        self.names: list[str] = []
        self.managers: list[_FakeSpanManager] = []

    def start_as_current_span(self, name: str) -> _FakeSpanManager:
        self.names.append(name)
        manager = _FakeSpanManager()
        self.managers.append(manager)
        return manager


class _FakeCounter:
    def __init__(self) -> None:
        self.calls: list[tuple[int, dict[str, object]]] = []

    def add(self, amount: int, attributes: dict[str, object]) -> None:
        self.calls.append((amount, attributes))


class _FakeHistogram:
    def __init__(self) -> None:
        self.samples: list[tuple[float, dict[str, object]]] = []

    def record(self, amount: float, attributes: dict[str, object]) -> None:
        self.samples.append((amount, attributes))


@pytest.fixture(autouse=True)
def _no_default_otel_concerns(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep decorator tests focused on explicit concerns."""
    monkeypatch.setattr(public_api_module, "_default_otel_concerns", lambda: ())


def _invocation(**references: str) -> InvocationContext:
    return InvocationContext(
        component_id="service_embedding_authority",
        api_name="get",
        references=references,
    )


def test_decorator_reports_success_and_passes_result_through() -> None:
    """Successful calls complete with ``success=True`` and the id references."""
    concern = _RecordingConcern()

    @public_api_instrumented(
        component_id="service_embedding_authority",
        id_fields=("record_id", "category"),
        concerns=(concern,),
    )
    def get(*, record_id: str, category: str | None = None) -> str:
        return f"record:{record_id}"

    assert get(record_id="01ABC", category=None) == "record:01ABC"

    invocation = concern.invocations[0]
    assert invocation.api_name == "get"
    assert invocation.references == {"record_id": "01ABC"}
    completion = concern.completions[0]
    assert completion.success is True
    assert completion.error is None
    assert completion.duration_ms >= 0.0


def test_decorator_reraises_unchanged_with_error_detail() -> None:
    """Failures are re-raised as-is after completion hooks see the error."""
    concern = _RecordingConcern()
    raised = RecallNotFoundError("record not found")

    @public_api_instrumented(component_id="service_x", concerns=(concern,))
    def update() -> None:
        raise raised

    with pytest.raises(RecallNotFoundError) as exc_info:
        update()

    assert exc_info.value is raised
    completion = concern.completions[0]
    assert completion.success is False
    assert completion.error is raised.detail


def test_concern_failures_never_change_call_outcome(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Broken concerns are logged and the wrapped call still returns."""

    @public_api_instrumented(
        component_id="service_x",
        concerns=(_BrokenConcern(),),
        logger=logging.getLogger("recall.test.public_api"),
    )
    def count() -> int:
        return 3

    with caplog.at_level(logging.WARNING, logger="recall.test.public_api"):
        assert count() == 3

    failures = [
        record
        for record in caplog.records
        if record.getMessage() == "Public API instrumentation concern failed"
    ]
    assert len(failures) == 2


def test_logging_concern_logs_completion_level_by_outcome(
    caplog: pytest.LogCaptureFixture,
) -> None:
    logger = logging.getLogger("recall.test.completion")
    concern = PublicApiLoggingConcern(logger=logger)

    with caplog.at_level(logging.DEBUG, logger="recall.test.completion"):
        concern.on_completion(
            CompletionContext(invocation=_invocation(), success=True, duration_ms=1.0)
        )
        concern.on_completion(
            CompletionContext(
                invocation=_invocation(),
                success=False,
                duration_ms=1.0,
                error=RecallNotFoundError("gone").detail,
            )
        )

    assert [record.levelno for record in caplog.records] == [
        logging.INFO,
        logging.WARNING,
    ]


def test_tracing_concern_opens_and_closes_one_span() -> None:
    tracer = _FakeTracer()
    concern = PublicApiTracingConcern(tracer=tracer)
    invocation = _invocation(record_id="01ABC")

    concern.on_invocation(invocation)
    concern.on_completion(
        CompletionContext(
            invocation=invocation,
            success=False,
            duration_ms=4.0,
            error=RecallNotFoundError("gone").detail,
        )
    )

    assert tracer.names == ["public_api.service_embedding_authority.get"]
    manager = tracer.managers[0]
    assert manager.exited is True
    assert manager.span.attributes["reference.record_id"] == "01ABC"
    assert manager.span.attributes["outcome"] == "failure"
    assert manager.span.attributes["error_category"] == "not_found"
    assert len(manager.span.statuses) == 1


def test_tracing_completion_without_open_span_is_ignored() -> None:
    tracer = _FakeTracer()
    concern = PublicApiTracingConcern(tracer=tracer)

    concern.on_completion(
        CompletionContext(invocation=_invocation(), success=True, duration_ms=1.0)
    )

    assert tracer.managers == []


def test_metrics_concern_records_calls_latency_and_errors() -> None:
    calls, durations, errors = _FakeCounter(), _FakeHistogram(), _FakeCounter()
    concern = PublicApiMetricsConcern(
        calls_total=calls, duration_ms=durations, errors_total=errors
    )
    base = {
        "component_id": "service_embedding_authority",
        "api_name": "get",
    }

    concern.on_completion(
        CompletionContext(invocation=_invocation(), success=True, duration_ms=2.0)
    )
    concern.on_completion(
        CompletionContext(
            invocation=_invocation(),
            success=False,
            duration_ms=3.0,
            error=RecallNotFoundError("gone").detail,
        )
    )

    assert calls.calls == [
        (1, {**base, "outcome": "success"}),
        (1, {**base, "outcome": "failure"}),
    ]
    assert durations.samples == [
        (2.0, {**base, "outcome": "success"}),
        (3.0, {**base, "outcome": "failure"}),
    ]
    assert errors.calls == [(1, {**base, "error_category": "not_found"})]


def test_configure_public_api_otel_rebuilds_default_concerns(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Configured meter and tracer names apply to concerns built afterwards."""
    monkeypatch.undo()
    requested: list[str] = []
    monkeypatch.setattr(
        public_api_module.otel_trace,
        "get_tracer",
        lambda name: requested.append(f"tracer:{name}") or _FakeTracer(),
    )
    monkeypatch.setattr(
        public_api_module.otel_metrics,
        "get_meter",
        lambda name: requested.append(f"meter:{name}") or _FakeMeter(),
    )

    configure_public_api_otel(
        PublicApiOtelSettings(meter_name="m.custom", tracer_name="t.custom")
    )
    try:
        concerns = public_api_module._default_otel_concerns()
    finally:
        configure_public_api_otel(PublicApiOtelSettings())

    assert requested == ["meter:m.custom", "tracer:t.custom"]
    assert [type(concern) for concern in concerns] == [
        PublicApiTracingConcern,
        PublicApiMetricsConcern,
    ]


class _FakeMeter:
    def create_counter(self, **_: object) -> _FakeCounter:
        return _FakeCounter()

    def create_histogram(self, **_: object) -> _FakeHistogram:
        return _FakeHistogram()


_SERVICE_PACKAGES = (
    "services/state/cache_authority",
    "services/state/embedding_authority",
    "services/action/language_model",
    "services/action/semantic_memory",
)


@pytest.mark.parametrize("package", _SERVICE_PACKAGES)
def test_service_implementations_instrument_every_public_method(package: str) -> None:
    """Every abstract method on a service API is decorated in its implementation."""
    contract = _public_methods(_REPO_ROOT / package / "service.py", decorated=False)
    implemented = _public_methods(
        _REPO_ROOT / package / "implementation.py", decorated=True
    )

    assert contract, f"no public API found for {package}"
    assert sorted(contract - implemented) == []


def _public_methods(path: Path, *, decorated: bool) -> set[str]:
    module = ast.parse(path.read_text(encoding="utf-8"))
    names: set[str] = set()
    for node in module.body:
        if not isinstance(node, ast.ClassDef):
            continue
        for child in node.body:
            if not isinstance(child, ast.FunctionDef) or child.name.startswith("_"):
                continue
            if decorated and not _has_decorator(child, "public_api_instrumented"):
                continue
            if not decorated and not _has_decorator(child, "abstractmethod"):
                continue
            names.add(child.name)
    return names


def _has_decorator(node: ast.FunctionDef, name: str) -> bool:
    for decorator in node.decorator_list:
        target = decorator.func if isinstance(decorator, ast.Call) else decorator
        if isinstance(target, ast.Name) and target.id == name:
            return True
        if isinstance(target, ast.Attribute) and target.attr == name:
            return True
    return False
