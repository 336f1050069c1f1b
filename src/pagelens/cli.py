"""Command-line interface for PageLens."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import click
import structlog
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from . import __version__
from .config import Config, find_config_file
from .container import PageLensContainer
from .errors import PageLensError
from .observability import configure_logging
from .protocols import ScrapeResult

console = Console(stderr=True)
logger = structlog.get_logger(__name__)

ContainerFactory = Callable[[Config], PageLensContainer]


def load_config(config_path: Optional[Path], log_level: Optional[str] = None) -> Config:
    path = config_path or find_config_file()
    config = Config.from_yaml(path) if path else Config()
    if log_level:
        config.monitoring.log_level = log_level
    return config


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", type=click.Path(exists=True), help="Configuration file path")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level (overrides configuration)",
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], log_level: Optional[str]) -> None:
    """PageLens - web page content extraction and analysis."""
    ctx.ensure_object(dict)
    ctx.obj["config"] = load_config(Path(config) if config else None, log_level)
    ctx.obj.setdefault("container_factory", PageLensContainer)
    configure_logging(ctx.obj["config"].monitoring)


@cli.command()
@click.argument("url")
@click.option("--no-ai", is_flag=True, help="Skip generated insights and paragraph summaries")
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON")
@click.option("--timeout", "timeout_ms", type=click.IntRange(1000, 120000), help="Navigation timeout in ms")
@click.option("--wait-for", "wait_for_selector", help="CSS selector to wait for before extracting")
@click.pass_context
def analyze(
    ctx: click.Context,
    url: str,
    no_ai: bool,
    as_json: bool,
    timeout_ms: Optional[int],
    wait_for_selector: Optional[str],
) -> None:
    """Analyse a single page."""
    config: Config = ctx.obj["config"]
    factory: ContainerFactory = ctx.obj["container_factory"]

    options: Dict[str, Any] = {"includeAIAnalysis": not no_ai, "useCache": False}
    if timeout_ms is not None:
        options["timeout"] = timeout_ms
    if wait_for_selector:
        options["waitForSelector"] = wait_for_selector

    async def run_analysis() -> ScrapeResult:
        async with factory(config).lifecycle() as container:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
                TimeElapsedColumn(),
                console=console,
                transient=True,
            ) as progress:
                task = progress.add_task(f"Analysing {url}", total=100)

                def on_progress(stage: str, message: str, percent: int) -> None:
                    progress.update(task, description=message, completed=percent)

                outcome = await container.pipeline.run({"url": url, "options": options}, progress=on_progress)
                return outcome.result

    try:
        result = asyncio.run(run_analysis())
    except PageLensError as e:
        console.print(f"[red]Analysis failed ({e.status_code}): {e.message}[/red]")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        render_result(result)


def render_result(result: ScrapeResult) -> None:
    """Print a human-readable summary of a result."""
    out = Console()
    data, analytics, ai = result.data, result.analytics, result.ai_analysis

    out.print(
        Panel(
            f"[bold]{data.title or '(untitled)'}[/bold]\n{data.url}\n\n{ai.content_summary}",
            title=f"Result {result.id}",
            border_style="green",
        )
    )

    table = Table(title="Analytics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="magenta")
    table.add_row("SEO score", str(analytics.seo_score))
    table.add_row("Words", str(analytics.total_words))
    table.add_row("Reading time (min)", str(analytics.reading_time))
    table.add_row(
        "Links (internal / external / broken)",
        f"{analytics.link_analysis.internal_links} / {analytics.link_analysis.external_links}"
        f" / {analytics.link_analysis.broken_links}",
    )
    table.add_row(
        "Images (alt coverage)",
        f"{analytics.image_analysis.total_images} ({analytics.image_analysis.alt_text_coverage}%)",
    )
    hierarchy = "yes" if analytics.heading_analysis.has_proper_hierarchy else "no"
    table.add_row("Headings (proper hierarchy)", f"{analytics.heading_analysis.total_headings} ({hierarchy})")
    if ai.readability_score is not None:
        table.add_row("Readability", str(ai.readability_score))
    if ai.content_quality_score is not None:
        table.add_row("Content quality", str(ai.content_quality_score))
    if ai.sentiment is not None:
        table.add_row("Sentiment", f"{ai.sentiment.value} ({ai.sentiment_confidence}%)")
    out.print(table)

    if ai.key_topics:
        out.print("[bold]Topics:[/bold] " + ", ".join(ai.key_topics))
    if ai.content_categories:
        out.print("[bold]Categories:[/bold] " + ", ".join(ai.content_categories))
    if ai.seo_insights.recommendations:
        out.print("[bold]Recommendations:[/bold]")
        for recommendation in ai.seo_insights.recommendations:
            out.print(f"  - {recommendation}")


@cli.command()
@click.option("--host", default=None, help="Host to bind to (defaults to configuration)")
@click.option("--port", default=None, type=int, help="Port to bind to (defaults to configuration)")
@click.pass_context
def serve(ctx: click.Context, host: Optional[str], port: Optional[int]) -> None:
    """Start the HTTP API."""
    from .web import run_web_server

    config: Config = ctx.obj["config"]
    factory: ContainerFactory = ctx.obj["container_factory"]
    host = host or config.web.host
    port = port or config.web.port

    console.print(f"[green]Starting PageLens API at http://{host}:{port}[/green]")
    run_web_server(factory(config), host=host, port=port)


@cli.command()
@click.pass_context
def validate_config(ctx: click.Context) -> None:
    """Validate the current configuration."""
    config: Config = ctx.obj["config"]

    table = Table(title="Configuration Status")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")
    table.add_row("renderer", config.renderer.backend)
    table.add_row("timeout_ms", str(config.renderer.timeout_ms))
    table.add_row("model", config.insights.model)
    table.add_row("api key", "set" if config.insights.api_key else "missing (AI analysis disabled)")
    table.add_row("max_results", str(config.storage.max_results))
    table.add_row("cache_ttl_seconds", str(config.storage.cache_ttl_seconds))
    Console().print(table)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
