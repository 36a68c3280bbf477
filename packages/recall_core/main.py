"""Process entrypoint for the Recall runtime, implemented with Typer."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

import typer

from packages.recall_core.runtime import RecallRuntime
from packages.recall_shared.config import RecallSettings, load_settings
from packages.recall_shared.errors import ErrorCategory, RecallError
from packages.recall_shared.logging import (
    configure_logging_from_settings,
    configure_public_api_otel,
    get_logger,
)

_LOGGER = get_logger(__name__)

SUCCESS_EXIT_CODE = 0
NOT_READY_EXIT_CODE = 1
DOMAIN_ERROR_EXIT_CODE = 3
DEPENDENCY_ERROR_EXIT_CODE = 4

SEMANTIC_MEMORY_COMPONENT_ID = "service_semantic_memory"


@dataclass(frozen=True)
class CliConfig:
    """Global CLI options shared by every command."""

    settings: RecallSettings
    as_json: bool


def build_runtime(settings: RecallSettings) -> RecallRuntime:
    """Return one unstarted runtime; replaced in tests."""
    return RecallRuntime(settings=settings)


def _emit(data: Any, *, as_json: bool, render: Callable[[Any], str]) -> None:
    if as_json:
        typer.echo(json.dumps(data, sort_keys=True, separators=(",", ":")))
        return
    typer.echo(render(data))


def _emit_error(exc: RecallError, as_json: bool) -> None:
    if as_json:
        typer.echo(
            json.dumps({"error": {"code": exc.code, "message": exc.message}}),
            err=True,
        )
        return
    typer.echo(f"error: {exc.code}: {exc.message}", err=True)


def _exit_code_for(exc: RecallError) -> int:
    if exc.detail.category in (ErrorCategory.DEPENDENCY, ErrorCategory.INTERNAL):
        return DEPENDENCY_ERROR_EXIT_CODE
    return DOMAIN_ERROR_EXIT_CODE


def _run_with_runtime(cfg: CliConfig, invoke: Callable[[RecallRuntime], Any]) -> Any:
    """Start a runtime, run one call against it, and always stop it."""
    runtime = build_runtime(cfg.settings)
    try:
        with runtime:
            return invoke(runtime)
    except RecallError as exc:
        _LOGGER.warning(
            "command failed",
            extra={
                "error_code": exc.code,
                "error_category": exc.detail.category.value,
            },
        )
        _emit_error(exc, cfg.as_json)
        raise typer.Exit(code=_exit_code_for(exc)) from exc


def _require_config(ctx: typer.Context) -> CliConfig:
    config = ctx.obj
    if not isinstance(config, CliConfig):
        raise RuntimeError("CLI configuration not initialized")
    return config


def _render_health(data: dict[str, Any]) -> str:
    ready = bool(data.get("ready", False))
    lines = [f"Recall: {_status_label(ready)}"]
    components = data.get("components", {})
    for component_id in sorted(components):
        entry = components[component_id]
        line = f"  {component_id}: {_status_label(bool(entry.get('ready')))}"
        detail = str(entry.get("detail", "")).strip()
        if detail != "":
            line = f"{line} ({detail})"
        lines.append(line)
    return "\n".join(lines)


def _render_record(data: dict[str, Any]) -> str:
    category = data.get("category")
    suffix = f" [{category}]" if category else ""
    return f"{data['id']}{suffix} {data['text']}"


def _render_matches(items: list[dict[str, Any]]) -> str:
    if len(items) == 0:
        return "No matches found."
    return "\n".join(
        f"- {item['record']['id']} (score: {item['score']:.3f}) {item['record']['text']}"
        for item in items
    )


def _status_label(ready: bool) -> str:
    return "healthy" if ready else "degraded"


app = typer.Typer(no_args_is_help=True, help="Recall semantic memory runtime")


@app.callback()
def cli(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None,
        "--config",
        envvar="RECALL_CONFIG_FILE",
        help="YAML settings file; defaults to ~/.config/recall/recall.yaml.",
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON output."),
) -> None:
    """Load settings and configure logging before any command runs."""
    settings = load_settings(config_path=config)
    configure_logging_from_settings(settings.logging)
    configure_public_api_otel(settings.observability.public_api)
    ctx.obj = CliConfig(settings=settings, as_json=as_json)


@app.command("health")
def health_command(ctx: typer.Context) -> None:
    """Start every component, report aggregate readiness, and stop."""
    cfg = _require_config(ctx)
    result = _run_with_runtime(cfg, lambda runtime: runtime.health())
    _LOGGER.info("runtime health evaluated", extra={"ready": result.ready})
    _emit(result.model_dump(mode="json"), as_json=cfg.as_json, render=_render_health)
    raise typer.Exit(code=SUCCESS_EXIT_CODE if result.ready else NOT_READY_EXIT_CODE)


@app.command("save")
def save_command(
    ctx: typer.Context,
    text: str = typer.Argument(..., help="Text to embed and store."),
    category: str | None = typer.Option(None, "--category", help="Record label."),
) -> None:
    """Embed and store one text."""
    cfg = _require_config(ctx)
    record = _run_with_runtime(
        cfg,
        lambda runtime: runtime.component(SEMANTIC_MEMORY_COMPONENT_ID).save_text(
            text=text, category=category
        ),
    )
    _emit(
        record.model_dump(mode="json", exclude={"vector"}),
        as_json=cfg.as_json,
        render=_render_record,
    )


@app.command("search")
def search_command(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Query text to embed."),
    limit: int | None = typer.Option(None, "--limit", min=0),
    threshold: float | None = typer.Option(None, "--threshold"),
) -> None:
    """Return stored texts most similar to ``query``."""
    cfg = _require_config(ctx)
    matches = _run_with_runtime(
        cfg,
        lambda runtime: runtime.component(SEMANTIC_MEMORY_COMPONENT_ID).search_by_text(
            query_text=query, limit=limit, threshold=threshold
        ),
    )
    _emit(
        [
            match.model_dump(mode="json", exclude={"record": {"vector"}})
            for match in matches
        ],
        as_json=cfg.as_json,
        render=_render_matches,
    )


@app.command("complete")
def complete_command(
    ctx: typer.Context,
    prompt: str = typer.Argument(..., help="Prompt sent as one user message."),
) -> None:
    """Complete one prompt with the configured chat model."""
    cfg = _require_config(ctx)
    text = _run_with_runtime(
        cfg,
        lambda runtime: runtime.component(
            SEMANTIC_MEMORY_COMPONENT_ID
        ).generate_completion(prompt=prompt),
    )
    _emit({"text": text}, as_json=cfg.as_json, render=lambda data: data["text"])


def main() -> None:
    """Run the Recall command-line interface."""
    app()


if __name__ == "__main__":
    main()
