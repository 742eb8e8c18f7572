"""
Demo Recorder - CLI Entry Point.

Configuration Priority:
    1. CLI arguments (--url, --headless/--visible)
    2. Config file (--config, $DEMO_RECORDER_CONFIG or ./config.yaml)
    3. Environment variables (DEMO_RECORDER__RECORDING__TARGET_URL, etc.)

Usage:
    demo-recorder record --url http://localhost:5173
    demo-recorder composite
    demo-recorder all
"""

import asyncio
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from demo_recorder import __version__
from demo_recorder.browsers.playwright_browser import PlaywrightSession
from demo_recorder.composite.compositor import CompositeResult, Compositor
from demo_recorder.config import load_config
from demo_recorder.config.settings import Settings
from demo_recorder.engine.sequencer import Sequencer, SequenceResult
from demo_recorder.exceptions import DemoRecorderError
from demo_recorder.reporting.timing_record import TimingStore
from demo_recorder.scenarios import editor_tour
from demo_recorder.utils.logging import setup_logging

# Create the CLI app
app = typer.Typer(
    name="demo-recorder",
    help="Record a scripted web app demo and trim it to the timed narrative",
    add_completion=False,
)

console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"demo-recorder {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
) -> None:
    """Record a scripted web app demo and trim it to the timed narrative."""


def _load_settings(
    config: Optional[Path],
    url: Optional[str] = None,
    headless: Optional[bool] = None,
    verbose: bool = False,
) -> Settings:
    overrides: Dict[str, Any] = {}
    if url:
        overrides["recording"] = {"target_url": url}
    if headless is not None:
        overrides["browser"] = {"headless": headless}
    settings = load_config(config_path=config, **overrides)
    level = "DEBUG" if verbose else settings.logging.level
    setup_logging(level, settings.logging.file, console=Console(stderr=True))
    return settings


def _fail(error: DemoRecorderError) -> None:
    console.print(f"[red]Error:[/red] {escape(str(error))}")
    raise typer.Exit(1)


async def _record_async(settings: Settings) -> SequenceResult:
    sequencer = Sequencer(settings, lambda: PlaywrightSession(settings))
    script = editor_tour.build_script(settings)
    return await sequencer.run(script, editor_tour.asset_paths(settings))


def _print_record_summary(result: SequenceResult) -> None:
    record = result.record
    table = Table(title="Timing record", show_header=True)
    table.add_column("Anchor / beat")
    table.add_column("Instant (ms)", justify="right")
    table.add_column("In trimmed video (s)", justify="right")
    table.add_row("start", str(record.start_time), "-")
    table.add_row("loaded", str(record.loaded_time), "0.000")
    for i, (instant, offset) in enumerate(zip(record.event_times, record.relative_event_seconds()), 1):
        table.add_row(f"beat {i}", str(instant), f"{offset:.3f}")
    console.print(table)
    console.print(f"[green]✓[/green] Steps executed: {result.steps_executed}")
    console.print(f"[green]✓[/green] Timings: {result.timings_path}")


def _print_composite_summary(result: CompositeResult) -> None:
    console.print(f"[green]✓[/green] Trimmed {result.offset_seconds}s of setup")
    console.print(f"[green]✓[/green] Output: {result.output_path}")


@app.command()
def record(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config file"),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Target application URL (default: from config)"),
    headless: Optional[bool] = typer.Option(None, "--headless/--visible", help="Browser visibility (default: from config)"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose output"),
):
    """
    Drive the target application and record the session.

    Writes the raw video and the timing record used by 'composite'.
    """
    try:
        settings = _load_settings(config, url, headless, verbose)
        console.print(Panel.fit(
            f"[bold blue]🎬 Demo Recorder[/bold blue]\n"
            f"[dim]Target:[/dim] {settings.recording.target_url}\n"
            f"[dim]Browser:[/dim] {settings.browser.browser_type}"
            f" ({'headless' if settings.browser.headless else 'visible'})\n"
            f"[dim]Videos:[/dim] {settings.recording.videos_dir}",
            border_style="blue",
        ))
        result = asyncio.run(_record_async(settings))
    except DemoRecorderError as e:
        _fail(e)
    _print_record_summary(result)


@app.command()
def composite(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config file"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose output"),
):
    """
    Trim the recorded video so it starts at the loaded anchor.
    """
    try:
        settings = _load_settings(config, verbose=verbose)
        result = Compositor(settings).composite()
    except DemoRecorderError as e:
        _fail(e)
    _print_composite_summary(result)


@app.command(name="all")
def record_and_composite(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config file"),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Target application URL (default: from config)"),
    headless: Optional[bool] = typer.Option(None, "--headless/--visible", help="Browser visibility (default: from config)"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose output"),
):
    """
    Record the session, then trim the video.
    """
    try:
        settings = _load_settings(config, url, headless, verbose)
        recorded = asyncio.run(_record_async(settings))
        _print_record_summary(recorded)
        result = Compositor(settings).composite()
    except DemoRecorderError as e:
        _fail(e)
    _print_composite_summary(result)


@app.command(name="show-timings")
def show_timings(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config file"),
):
    """
    Print the timing record of the last recording.
    """
    try:
        settings = load_config(config_path=config)
        record_ = TimingStore(settings.recording.timings_path).load()
    except DemoRecorderError as e:
        _fail(e)

    table = Table(title=str(settings.recording.timings_path), show_header=True)
    table.add_column("Field")
    table.add_column("Value", justify="right")
    table.add_row("startTime", str(record_.start_time))
    table.add_row("loadedTime", str(record_.loaded_time))
    table.add_row("setup (s)", f"{record_.setup_duration_ms / 1000:.3f}")
    for i, offset in enumerate(record_.relative_event_seconds(), 1):
        table.add_row(f"beat {i} (s)", f"{offset:.3f}")
    console.print(table)


if __name__ == "__main__":
    app()
