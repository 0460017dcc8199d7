"""
CLI Main - Typer-based command-line interface.

Usage:
    taskforge run "Summarize the Q3 board minutes" --type summarization
    taskforge models --type analysis
    taskforge report
    taskforge serve
"""

from __future__ import annotations

import asyncio
import json

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from taskforge.domains.registry import ModelRegistry
from taskforge.domains.tasks import CostConstraint, Priority, TaskType

app = typer.Typer(
    name="taskforge",
    help="TaskForge - AI Task Orchestration",
    add_completion=False,
)
console = Console()


@app.command()
def run(
    text: str = typer.Argument(..., help="Task input"),
    task_type: TaskType = typer.Option(TaskType.GENERATION, "--type", "-t", help="Task type"),
    priority: Priority = typer.Option(Priority.NORMAL, "--priority", "-p", help="Queue priority"),
    max_latency: int = typer.Option(5000, "--max-latency", help="Deadline in milliseconds"),
    min_quality: float = typer.Option(0.8, "--min-quality", help="Minimum model quality (0-1)"),
    cost: CostConstraint = typer.Option(CostConstraint.MEDIUM, "--cost", "-c", help="Cost constraint"),
    repeat: int = typer.Option(1, "--repeat", "-r", help="Submit the task N times"),
    as_json: bool = typer.Option(False, "--json", help="Print raw result envelopes"),
) -> None:
    """Process a task through the orchestrator."""
    payload = {
        "type": task_type.value,
        "input": text,
        "priority": priority.value,
        "max_latency_ms": max_latency,
        "min_quality": min_quality,
        "cost_constraint": cost.value,
    }
    asyncio.run(_run_async(payload, repeat, as_json))


async def _run_async(payload: dict, repeat: int, as_json: bool) -> None:
    """Async task processing implementation."""
    from taskforge.config import TaskForgeError, configure_logging, get_settings
    from taskforge.domains.orchestration import create_orchestrator

    settings = get_settings()
    configure_logging("WARNING" if as_json else settings.log_level)

    async with await create_orchestrator(settings) as orchestrator:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task("Processing...", total=None)

            try:
                envelopes = [await orchestrator.process(payload) for _ in range(repeat)]
            except TaskForgeError as e:
                console.print(f"[red]Error:[/red] {escape(f'[{e.code.value}]')} {escape(e.message)}")
                raise typer.Exit(1)

        if as_json:
            console.print_json(json.dumps([e.model_dump(mode="json") for e in envelopes]))
            return

        for i, envelope in enumerate(envelopes, 1):
            meta = envelope.metadata
            source = "[yellow]cache[/yellow]" if meta.from_cache else "[green]model[/green]"
            console.print(
                Panel(
                    f"{_render_data(envelope.data)}\n\n"
                    f"[dim]Model:[/dim] {meta.model_used} [dim]| Source:[/dim] {source} "
                    f"[dim]| Confidence: {meta.confidence:.0%} | "
                    f"Time: {meta.processing_time_ms:.1f}ms[/dim]",
                    title=f"Result {i}/{len(envelopes)}",
                )
            )


def _render_data(data: object) -> str:
    if isinstance(data, dict) and "data" in data:
        return str(data["data"])
    return str(data)


@app.command()
def models(
    task_type: TaskType | None = typer.Option(None, "--type", "-t", help="Rank models for a task type"),
) -> None:
    """List registered models, or rank them for a task type."""
    asyncio.run(_models_async(task_type))


async def _models_async(task_type: TaskType | None) -> None:
    from taskforge.config import get_settings
    from taskforge.domains.orchestration import create_orchestrator

    async with await create_orchestrator(get_settings()) as orchestrator:
        _print_models(orchestrator.context.registry, task_type)


def _print_models(registry: ModelRegistry, task_type: TaskType | None) -> None:
    from taskforge.domains.orchestration import analyze_complexity
    from taskforge.domains.registry import SelectionCriteria
    from taskforge.domains.tasks import Task

    if task_type is None:
        table = Table(title="Registered Models")
        table.add_column("Name", style="cyan")
        table.add_column("Type")
        table.add_column("Capabilities")
        table.add_column("Quality", justify="right")
        table.add_column("Latency (ms)", justify="right")
        table.add_column("Cost/token", justify="right")

        for model in registry.get_available():
            spec = model.spec
            table.add_row(
                spec.name,
                spec.type.value,
                ", ".join(spec.capabilities),
                f"{spec.quality_score:.2f}",
                f"{spec.avg_latency_ms:.0f}",
                f"{spec.cost_per_token:.5f}",
            )
        console.print(table)
        return

    task = Task(type=task_type, input=task_type.value)
    ranked = registry.rank(SelectionCriteria.from_task(task, analyze_complexity(task)))

    table = Table(title=f"Model Ranking: {task_type.value}")
    table.add_column("#", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Score", style="green", justify="right")
    table.add_column("Quality", justify="right")
    table.add_column("Latency", justify="right")
    table.add_column("Cost", justify="right")
    table.add_column("Specialization", justify="right")

    for i, scored in enumerate(ranked, 1):
        table.add_row(
            str(i),
            scored.name,
            f"{scored.score:.1f}",
            f"{scored.quality:.2f}",
            f"{scored.latency:.2f}",
            f"{scored.cost:.2f}",
            f"{scored.specialization:.1f}",
        )

    if not ranked:
        console.print(f"[yellow]No model meets the default constraints for {task_type.value}[/yellow]")
    else:
        console.print(table)


@app.command()
def report(
    tasks: list[str] = typer.Option(
        [],
        "--task",
        help="Process these summarization tasks first (repeatable)",
    ),
) -> None:
    """Show health and the performance report."""
    asyncio.run(_report_async(tasks))


async def _report_async(inputs: list[str]) -> None:
    from taskforge.config import get_settings
    from taskforge.domains.orchestration import create_orchestrator

    async with await create_orchestrator(get_settings()) as orchestrator:
        for text in inputs:
            await orchestrator.process({"type": TaskType.SUMMARIZATION.value, "input": text})

        health = orchestrator.get_health()
        performance = orchestrator.get_performance_report()

    stats = performance.stats
    table = Table(title="Performance")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_row("Requests (1h)", str(stats.total_requests))
    table.add_row("Avg response time", f"{stats.average_response_time:.1f}ms")
    table.add_row("Error rate", f"{stats.error_rate:.1%}")
    table.add_row("Cache hit rate", f"{stats.cache_hit_rate:.1%}")
    table.add_row("Models available", f"{health.models['available']}/{health.models['total']}")
    table.add_row("Cache entries", f"{health.cache.size}/{health.cache.max_size}")
    table.add_row("Queue", f"{health.queue.queue_length} waiting, {health.queue.processing} running")
    console.print(table)

    if stats.model_usage:
        usage = Table(title="Model Usage")
        usage.add_column("Model", style="cyan")
        usage.add_column("Selections", justify="right")
        for name, count in sorted(stats.model_usage.items(), key=lambda kv: -kv[1]):
            usage.add_row(name, str(count))
        console.print(usage)

    if performance.recommendations:
        console.print("\n[bold]Recommendations:[/bold]")
        for recommendation in performance.recommendations:
            console.print(f"  [yellow]![/yellow] {recommendation}")


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", "-h", help="Host to bind"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to bind"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
) -> None:
    """Start the API server."""
    import uvicorn

    from taskforge.config import configure_logging, get_settings

    configure_logging(get_settings().log_level)

    console.print("\n[green]Starting TaskForge API server[/green]")
    console.print(f"[dim]http://{host}:{port}[/dim]\n")

    uvicorn.run(
        "taskforge.interfaces.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


@app.command()
def version() -> None:
    """Show version information."""
    from taskforge import __version__

    console.print(f"TaskForge v{__version__}")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
