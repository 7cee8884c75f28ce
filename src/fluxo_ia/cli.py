"""
Fluxo-IA CLI

Command-line interface for running natural-language test flows.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from fluxo_ia import __version__
from fluxo_ia.core.config import settings
from fluxo_ia.core.state import ReportFormat

app = typer.Typer(
    name="fluxo-ia",
    help="Natural-language browser test flows",
    add_completion=False,
)
console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _read_flow(flow_file: Path) -> str:
    return flow_file.read_text(encoding="utf-8")


@app.command()
def version() -> None:
    """Show Fluxo-IA version."""
    console.print(f"Fluxo-IA v{__version__}")


@app.command()
def config() -> None:
    """Show current configuration."""
    console.print(
        Panel(
            f"""[bold]Fluxo-IA Configuration[/bold]

Headless: {settings.headless}
Slow Motion: {settings.slow_mo}ms
Viewport: {settings.viewport_width}x{settings.viewport_height}
Default Timeout: {settings.default_timeout}s
Record Video: {settings.record_video} ({settings.video_dir})
Screenshot Dir: {settings.screenshot_dir}
Report Dir: {settings.report_dir}
Report Format: {settings.report_format.value}
Log Level: {settings.log_level}
""",
            title="[bold blue]Fluxo-IA[/bold blue]",
        )
    )


@app.command()
def check(
    flow_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Flow file"),
) -> None:
    """Parse and classify a flow without opening a browser."""
    from fluxo_ia.core.classifier import CommandClassifier
    from fluxo_ia.core.exceptions import FlowError
    from fluxo_ia.core.parser import FlowParser

    classifier = CommandClassifier()
    groups = FlowParser().parse(_read_flow(flow_file))

    if not groups:
        console.print("[yellow]No steps found in flow.[/yellow]")
        raise typer.Exit(1)

    problems = 0
    for group in groups:
        lines = []
        for step in group.steps:
            try:
                action = classifier.classify(step.sentence)
                lines.append(f"  [green]{action.kind.value:<13}[/green] {escape(step.sentence)}")
            except FlowError as e:
                problems += 1
                lines.append(f"  [red]{'error':<13}[/red] {escape(step.sentence)}")
                lines.append(f"       [dim]{escape(e.message)}[/dim]")
        console.print(Panel("\n".join(lines), title=f"[bold blue]{escape(group.name)}[/bold blue]"))

    if problems:
        console.print(f"[red]{problems} step(s) could not be interpreted[/red]")
        raise typer.Exit(1)
    console.print("[green]All steps recognized[/green]")


@app.command()
def run(
    flow_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Flow file"),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Page to open before the flow"),
    report_format: ReportFormat = typer.Option(
        settings.report_format, "--format", "-f", help="Report format"
    ),
    report_dir: Path = typer.Option(Path(settings.report_dir), "--report-dir", help="Report directory"),
    tempo_espera: int = typer.Option(0, "--tempo-espera", min=0, help="Delay between steps (ms)"),
    parar_na_falha: bool = typer.Option(
        False, "--parar-na-falha", help="Skip the rest of a group after a failed step"
    ),
    headless: Optional[bool] = typer.Option(None, "--headless/--headed", help="Browser visibility"),
    capture_network: bool = typer.Option(False, "--capture-network", help="Record page requests"),
    no_screenshots: bool = typer.Option(False, "--no-screenshots", help="Skip screenshot steps"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
) -> None:
    """Run a flow in a browser and write a report."""
    from fluxo_ia.core.config import RunOptions
    from fluxo_ia.core.runner import run_flow
    from fluxo_ia.tools.browser import PlaywrightDriver

    _configure_logging(verbose)

    console.print(
        Panel(
            f"[bold]Flow:[/bold] {flow_file}\n[bold]URL:[/bold] {url or '-'}",
            title="[bold blue]Fluxo-IA Run[/bold blue]",
        )
    )

    options = RunOptions(
        capture_screenshots=not no_screenshots,
        capture_network=capture_network,
        report_format=report_format,
        report_dir=report_dir,
        tempo_espera=tempo_espera,
        parar_na_falha=parar_na_falha,
    )
    driver = PlaywrightDriver(headless=headless)

    try:
        results, runner = asyncio.run(run_flow(driver, _read_flow(flow_file), url, options))
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        if verbose:
            import traceback
            console.print(traceback.format_exc())
        raise typer.Exit(1)

    status_color = "green" if results.failure_count == 0 else "red"
    result_lines = []
    for record in results.steps:
        icon = "[green]PASS[/green]" if record.succeeded else "[red]FAIL[/red]"
        result_lines.append(f"  {icon} {escape(f'[{record.group}]')} {escape(record.description)}")
        if record.error:
            result_lines.append(f"       [dim]{escape(record.error)}[/dim]")

    console.print(
        Panel(
            f"""[bold]Total:[/bold] {len(results.steps)} steps
[bold]Passed:[/bold] [{status_color}]{results.success_count}[/{status_color}]
[bold]Failed:[/bold] [{status_color}]{results.failure_count}[/{status_color}]
[bold]Duration:[/bold] {results.total_duration_ms}ms
[bold]Report:[/bold] {runner.report_path}

[bold]Details:[/bold]
{chr(10).join(result_lines)}""",
            title=f"[bold {status_color}]Test Results[/bold {status_color}]",
        )
    )

    if results.failure_count:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
