#!/usr/bin/env python3
"""MPP Parser CLI - Entry point for parsing project plans and serving the API.

Usage:
    # Parse a plan and print the JSON record
    python main.py parse ./Plan.mpp

    # Write the record to a file instead
    python main.py parse ./Plan.xml --output plan.json

    # Run the HTTP service
    python main.py serve --port 8080
"""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from adapters import EXTENSION_ADAPTERS, list_adapters as get_available_adapters
from config import configure_logging, settings
from contracts import PlanImportError, ProjectRecord
from ingestion import build_task_tree, flatten_task_tree, parse_plan


# Status output goes to stderr so stdout stays pure JSON.
console = Console(stderr=True)


def print_summary(record: ProjectRecord) -> None:
    """Render the parsed project as an indented task table."""
    console.print(Panel.fit(
        f"[bold blue]{record.name}[/bold blue]\n"
        f"[dim]Start:[/dim] {record.start or '-'}   [dim]Finish:[/dim] {record.finish or '-'}",
        border_style="blue"
    ))

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Task")
    table.add_column("Status")
    table.add_column("Priority")
    table.add_column("Progress", justify="right")
    table.add_column("Days", justify="right")

    for depth, task in flatten_task_tree(build_task_tree(record.tasks)):
        days = f"{task.duration_days:.1f}" if task.duration_days is not None else "-"
        table.add_row(
            str(task.order),
            "  " * depth + task.name,
            task.status.value,
            task.priority.value,
            f"{task.progress}%",
            days,
        )
    console.print(table)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Verbose (DEBUG) logging")
def cli(verbose: bool):
    """MPP Parser: turn MS Project plans into flat, ordered task records."""
    configure_logging("DEBUG" if verbose else None)


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output", "-o", "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write JSON here instead of stdout"
)
@click.option("--indent", type=int, default=2, help="JSON indent (default: 2)")
@click.option("--quiet", "-q", is_flag=True, help="Skip the summary table")
def parse(input_path: Path, output_path: Optional[Path], indent: int, quiet: bool):
    """Parse a plan file and emit its ProjectRecord as JSON."""
    try:
        record = parse_plan(input_path.read_bytes(), input_path.name)
    except PlanImportError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        sys.exit(1)

    payload = record.to_json(indent=indent)
    if output_path:
        output_path.write_text(payload + "\n", encoding="utf-8")
        console.print(f"[bold]Output saved to:[/bold] {output_path}")
    else:
        click.echo(payload)

    if not quiet:
        print_summary(record)


@cli.command()
@click.option("--host", default=None, help=f"Bind address (default: {settings.host})")
@click.option("--port", type=int, default=None, help=f"Bind port (default: {settings.port})")
@click.option("--reload", is_flag=True, help="Reload on code changes (development)")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the HTTP service."""
    import uvicorn

    uvicorn.run(
        "service.app:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_config=None,
    )


@cli.command()
def adapters():
    """List source adapters and whether they can run here."""
    console.print("[bold]Available source adapters:[/bold]\n")
    for name, available in get_available_adapters().items():
        suffixes = ", ".join(ext for ext, adapter in EXTENSION_ADAPTERS.items() if adapter == name)
        status = "[green]✓ Ready[/green]" if available else "[red]✗ Missing dependency[/red]"
        console.print(f"  {name:8} {suffixes:20} {status}")
    console.print("\n[dim]Binary .mpp support: pip install '.[mpp]' (needs a Java runtime)[/dim]")


if __name__ == "__main__":
    cli()
