"""CLI entry point for CAPES Research Exporter.

Runs exports against a live CAPES search listing and manages the pending
export checkpoint.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from . import APP_NAME, __version__
from .core.config import ExporterConfig, get_config
from .extractors import get_extractor, is_listing_url, list_extractors, read_pagination_signals
from .host.http_host import HttpPageHost
from .orchestration import BrowsingSession, MessageHandler, SessionResult
from .state.checkpoint_store import CheckpointStore, get_checkpoint_path
from .types.records import ExportFormat

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# CLI app
app = typer.Typer(
    name=APP_NAME,
    help="CAPES Research Exporter - Export CAPES search results to RIS or BibTeX",
    add_completion=False,
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"{APP_NAME} version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        help="Show version and exit",
    ),
) -> None:
    """CAPES Research Exporter - Export CAPES search results."""
    pass


def _load_config(output_dir: Optional[Path] = None) -> ExporterConfig:
    """Load and validate configuration, exiting on errors."""
    config = get_config()
    if output_dir is not None:
        config.output_dir = output_dir

    errors = config.validate()
    if errors:
        console.print("[red]Configuration errors:[/red]")
        for error in errors:
            console.print(f"  - {error}")
        raise typer.Exit(1)
    return config


def _get_store(config: ExporterConfig) -> CheckpointStore:
    return CheckpointStore(get_checkpoint_path(config.state_dir))


def _check_url(url: str) -> None:
    if not is_listing_url(url):
        console.print(f"[red]Not a CAPES search results page:[/red] {url}")
        console.print("Open a search on periodicos.capes.gov.br and copy its URL.")
        raise typer.Exit(1)


def _print_result(result: SessionResult) -> None:
    """Print the session outcome and exit non-zero on failure."""
    console.print()
    if result.success:
        console.print(f"[green]Exported {result.record_count} records[/green]")
        console.print(f"[bold]Page loads:[/bold] {result.page_loads}")
        console.print(f"[bold]Output:[/bold] {result.output_path}")
    elif result.suspended:
        console.print(
            f"[yellow]Paused after {result.page_loads} page loads "
            f"with {result.record_count} records.[/yellow]"
        )
        console.print(f"Continue with: capes-export resume '{result.next_location}'")
    elif result.error:
        console.print(f"[red]Export failed:[/red] {result.error}")
        raise typer.Exit(1)
    else:
        console.print("[yellow]No pending export to resume.[/yellow]")


async def _run_session(
    url: str,
    config: ExporterConfig,
    site: str,
    export_format: Optional[ExportFormat],
) -> SessionResult:
    """Run an export (or a resume when export_format is None) with progress display."""
    extractor_class = get_extractor(site)
    store = _get_store(config)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.percentage:>3.0f}%"),
        console=console,
    ) as progress:
        task = progress.add_task("Loading page...", total=100)

        def progress_callback(message: str, percent: int) -> None:
            progress.update(task, description=message, completed=percent)

        async with HttpPageHost(url, read_pagination_signals, config=config) as host:
            session = BrowsingSession(
                host,
                extractor_class,
                store,
                config=config,
                progress_callback=progress_callback,
            )

            if export_format is None:
                return await session.on_page_load()

            handler = MessageHandler(session)
            response = handler.handle({"action": "export", "format": export_format.value})
            if not response.get("success"):
                raise RuntimeError("Export request was rejected")
            return await handler.wait()


@app.command()
def export(
    url: str = typer.Argument(..., help="URL of a CAPES search results page"),
    output_format: ExportFormat = typer.Option(
        ExportFormat.RIS,
        "--format",
        "-f",
        case_sensitive=False,
        help="Output format: ris or bibtex",
    ),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Output directory (default: CAPES_EXPORT_OUTPUT_DIR or ./exports)",
    ),
    site: str = typer.Option(
        "capes",
        "--site",
        help=f"Listing site extractor ({', '.join(list_extractors())})",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable verbose logging",
    ),
) -> None:
    """Export every result of a search, following pagination to the end."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    config = _load_config(output_dir)
    _check_url(url)

    console.print(f"\n[bold]CAPES Export[/bold] ({output_format.value})")
    console.print(f"Listing: {url}")
    console.print(f"Output: {config.output_dir}")
    console.print()

    result = asyncio.run(_run_session(url, config, site, output_format))
    _print_result(result)


@app.command()
def resume(
    url: str = typer.Argument(..., help="URL of the listing page to continue from"),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Output directory (default: CAPES_EXPORT_OUTPUT_DIR or ./exports)",
    ),
    site: str = typer.Option("capes", "--site", help="Listing site extractor"),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable verbose logging",
    ),
) -> None:
    """Continue a pending export from the given page."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    config = _load_config(output_dir)
    _check_url(url)

    result = asyncio.run(_run_session(url, config, site, None))
    _print_result(result)


@app.command()
def status() -> None:
    """Show the pending export checkpoint, if any."""
    config = _load_config()
    store = _get_store(config)
    run = store.load()

    if run is None:
        console.print("No export in progress.")
        return

    table = Table(title="Pending Export")
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("Format", run.format.value)
    table.add_row("Records", str(run.record_count))
    table.add_row("Pages harvested", ", ".join(str(p) for p in sorted(run.visited_pages)) or "-")
    table.add_row("Estimated total", str(run.estimated_total) if run.estimated_total else "unknown")
    table.add_row("Started", run.started_at.isoformat(timespec="seconds"))
    table.add_row("Checkpoint", str(store.path))

    console.print(table)


@app.command()
def clear() -> None:
    """Discard the pending export checkpoint."""
    config = _load_config()
    store = _get_store(config)

    if not store.exists():
        console.print("No export in progress.")
        return

    store.clear()
    console.print("[green]Pending export discarded.[/green]")


@app.command()
def check(
    url: str = typer.Argument(..., help="URL of a CAPES search results page"),
) -> None:
    """Check a listing URL and show its pagination signals."""
    config = _load_config()
    _check_url(url)

    async def fetch():
        async with HttpPageHost(url, read_pagination_signals, config=config) as host:
            return await host.snapshot()

    try:
        with console.status("Loading page..."):
            snapshot = asyncio.run(fetch())
    except Exception as e:
        console.print(f"[red]Failed to load page:[/red] {e}")
        raise typer.Exit(1)

    sequencer = snapshot.sequencer()
    total = sequencer.estimate_total_records()

    console.print(f"[green]Page:[/green] {sequencer.current_page_index()}")
    console.print(f"[green]Results:[/green] {total if total else 'unknown'}")
    console.print(f"[green]More pages:[/green] {'yes' if sequencer.has_more_pages() else 'no'}")
    if sequencer.has_more_pages():
        console.print(f"[green]Next:[/green] {sequencer.next_page_address()}")


if __name__ == "__main__":
    app()
