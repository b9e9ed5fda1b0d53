"""Command-line interface for WebScribe."""

from __future__ import annotations

import asyncio
import sys
from dataclasses import replace
from pathlib import Path
from typing import NoReturn, Optional

import click
import structlog
from rich.console import Console
from rich.table import Table

from webscribe import __version__
from webscribe.config.config import Config, load_config
from webscribe.exceptions import WebScribeError
from webscribe.export import EXPORTERS, RenderOptions
from webscribe.observability.logging import configure_logging
from webscribe.pipeline import ScribePipeline

console = Console(stderr=True)
logger = structlog.get_logger(__name__)

config_option = click.option(
    "--config", "-c", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Configuration file path"
)


def _load(ctx: click.Context, config_path: Optional[Path]) -> Config:
    """Load configuration and set up logging for a command."""
    config = load_config(config_path)
    log_level = ctx.obj.get("log_level") if ctx.obj else None
    monitoring = config.monitoring.model_copy(update={"log_level": log_level}) if log_level else config.monitoring
    configure_logging(monitoring)
    return config


def _fail(message: str) -> NoReturn:
    console.print(f"[red]Error: {message}[/red]")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level (overrides the configuration file)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: Optional[str]) -> None:
    """WebScribe - turn web pages into clean study notes."""
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level


@cli.command()
@click.argument("source")
@click.option("--format", "-f", "output_format", type=click.Choice(sorted(EXPORTERS)), help="Output format")
@click.option("--output", "-o", type=click.Path(path_type=Path), help="Output file or directory")
@click.option("--no-toc", is_flag=True, help="Omit the table of contents")
@click.option("--no-images", is_flag=True, help="Omit images")
@click.option("--notes", is_flag=True, help="Add study notes (summary, key points, terms)")
@click.option("--print", "print_after", is_flag=True, help="Open the HTML in a browser and show the print dialog")
@config_option
@click.pass_context
def extract(
    ctx: click.Context,
    source: str,
    output_format: Optional[str],
    output: Optional[Path],
    no_toc: bool,
    no_images: bool,
    notes: bool,
    print_after: bool,
    config_path: Optional[Path],
) -> None:
    """Extract SOURCE (an http(s) URL or a local HTML file) to Markdown or HTML."""
    try:
        config = _load(ctx, config_path)
    except WebScribeError as e:
        _fail(str(e))

    output_format = output_format or config.export.default_format
    if print_after and output_format != "html":
        output_format = "html"
        console.print("[yellow]--print implies --format html[/yellow]")

    options = RenderOptions.from_settings(config.export)
    options = replace(
        options,
        include_toc=options.include_toc and not no_toc,
        include_images=options.include_images and not no_images,
        include_notes=options.include_notes or notes,
        auto_print=print_after,
    )

    pipeline = ScribePipeline(config)
    try:
        with console.status(f"Extracting {source}..."):
            result = asyncio.run(pipeline.extract(source))
        path = pipeline.export(result, output_format, output, options)
    except WebScribeError as e:
        _fail(str(e))
    except OSError as e:
        _fail(f"Could not write output: {e}")

    console.print(
        f"[green]Saved[/green] {result.node_count} blocks from frame {result.origin_frame_id} "
        f"to [bold]{path}[/bold]"
    )
    if print_after:
        click.launch(str(path))


@cli.command()
@click.argument("source")
@config_option
@click.pass_context
def inspect(ctx: click.Context, source: str, config_path: Optional[Path]) -> None:
    """Show per-frame extraction results for SOURCE and the frame that would be chosen."""
    try:
        config = _load(ctx, config_path)
        reports, chosen = asyncio.run(ScribePipeline(config).inspect(source))
    except WebScribeError as e:
        _fail(str(e))

    table = Table(title=f"Frames of {source}")
    table.add_column("Frame", style="cyan", justify="right")
    table.add_column("URL", overflow="fold")
    table.add_column("Title")
    table.add_column("Nodes", style="magenta", justify="right")
    table.add_column("Chosen", justify="center")

    for report in reports:
        title = report.result.metadata.title if report.result is not None else "-"
        is_chosen = chosen is not None and chosen.origin_frame_id == report.frame_id
        table.add_row(str(report.frame_id), report.url, title, str(report.node_count), "✓" if is_chosen else "")

    Console().print(table)
    if chosen is None:
        console.print("[yellow]No frame produced readable content.[/yellow]")
    else:
        console.print(f"Selected frame [bold]{chosen.origin_frame_id}[/bold] ({chosen.node_count} nodes)")


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
