"""CLI interface for flowpath.

Typer-based command-line interface with Rich output formatting.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from flowpath import __version__
from flowpath.config import CONFIG_FILE, FlowpathConfig, load_config, save_config
from flowpath.exceptions import EvalError, FlowpathError
from flowpath.flow import FileSource, MemorySink
from flowpath.flow.files import FILENAME_ATTRIBUTE
from flowpath.query import get_evaluator
from flowpath.registry import QueryRegistry
from flowpath.router import BatchRouter
from flowpath.types import Outcome, OutputMode

__all__ = ["app"]

app = typer.Typer(
    name="flowpath",
    help="Evaluate JSONPath queries against records and route them by outcome.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()

_OUTCOME_STYLE = {
    Outcome.MATCHED: "green",
    Outcome.UNMATCHED: "yellow",
    Outcome.FAILED: "red",
}

ConfigOption = Annotated[
    Path,
    typer.Option("--config", "-c", help="Path to the flowpath TOML config"),
]


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load(config_path: Path) -> FlowpathConfig:
    try:
        return load_config(config_path)
    except FlowpathError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        raise typer.Exit(code=1) from e


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """flowpath — JSONPath extraction and routing."""
    _setup_logging(verbose)


@app.command()
def version() -> None:
    """Show flowpath version."""
    console.print(f"flowpath {__version__}")


@app.command()
def init(
    destination: Annotated[
        OutputMode,
        typer.Option("--destination", "-d", help="Write results to content or attributes"),
    ] = OutputMode.CONTENT,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config"),
    ] = False,
) -> None:
    """Write a starter flowpath.toml in the current directory."""
    path = Path.cwd() / CONFIG_FILE
    if path.exists() and not force:
        console.print(f"[yellow]{CONFIG_FILE} already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(code=0)

    config = FlowpathConfig()
    config.router.destination = destination.value
    config.queries = {"value": "$.value"}

    try:
        save_config(config, path)
    except FlowpathError as e:
        console.print(f"[red]Failed to write config:[/red] {e}")
        raise typer.Exit(code=1) from e

    console.print(f"[green]Created[/green] {path}")
    console.print("\nNext steps:")
    console.print(f"  Edit the [bold]\\[queries][/bold] table in {CONFIG_FILE}")
    console.print("  flowpath check          Validate the queries")
    console.print("  flowpath run <file>     Route JSON files")


@app.command()
def check(config_path: ConfigOption = Path(CONFIG_FILE)) -> None:
    """Validate the configuration and compile every query."""
    config = _load(config_path)
    try:
        registry = QueryRegistry.from_config(config)
    except FlowpathError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        raise typer.Exit(code=1) from e

    try:
        evaluator = get_evaluator(config.router.query_language)
    except FlowpathError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        raise typer.Exit(code=1) from e

    table = Table(title=f"destination: {registry.mode.value}")
    table.add_column("Name", style="bold")
    table.add_column("Expression")
    table.add_column("Status")

    invalid = 0
    for binding in registry:
        try:
            evaluator.check(binding.expression)
            status = "[green]ok[/green]"
        except EvalError as e:
            status = f"[red]{escape(str(e))}[/red]"
            invalid += 1
        table.add_row(escape(binding.name), escape(binding.expression), status)

    console.print(table)

    if invalid:
        console.print(f"\n[red]{invalid} invalid quer{'y' if invalid == 1 else 'ies'}[/red]")
        raise typer.Exit(code=1)


@app.command()
def run(
    files: Annotated[
        list[Path],
        typer.Argument(help="JSON file(s) to route"),
    ],
    config_path: ConfigOption = Path(CONFIG_FILE),
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print one JSON object per record"),
    ] = False,
) -> None:
    """Route JSON files through the configured queries."""
    config = _load(config_path)
    try:
        router = BatchRouter.from_config(config)
    except FlowpathError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        raise typer.Exit(code=1) from e

    existing: list[Path] = []
    for path in files:
        if not path.is_file():
            console.print(f"  [red]File not found:[/red] {path}")
            continue
        existing.append(path)

    if not existing:
        raise typer.Exit(code=1)

    sink = MemorySink()
    try:
        report = router.run_until_empty(FileSource(existing), sink)
    except FlowpathError as e:
        console.print(f"[red]Routing stopped:[/red] {e}")
        raise typer.Exit(code=1) from e

    names = router.registry.names()

    if as_json:
        for outcome, record in sink.all():
            entry: dict[str, object] = {
                "file": record.attributes.get(FILENAME_ATTRIBUTE, ""),
                "outcome": outcome.value,
            }
            if outcome is Outcome.FAILED:
                entry["error"] = str(sink.cause(record))
            elif outcome is Outcome.MATCHED and router.mode is OutputMode.CONTENT:
                entry["content"] = record.content.decode("utf-8")
            else:
                entry["attributes"] = {
                    k: record.attributes[k] for k in names if k in record.attributes
                }
            typer.echo(json.dumps(entry, ensure_ascii=False))
        return

    table = Table()
    table.add_column("File", style="bold")
    table.add_column("Outcome")
    table.add_column("Result")

    for outcome, record in sink.all():
        if outcome is Outcome.FAILED:
            result = str(sink.cause(record))
        elif outcome is Outcome.MATCHED and router.mode is OutputMode.CONTENT:
            result = record.content.decode("utf-8")
        else:
            result = ", ".join(
                f"{k}={record.attributes[k]}" for k in names if k in record.attributes
            )
        style = _OUTCOME_STYLE[outcome]
        table.add_row(
            escape(record.attributes.get(FILENAME_ATTRIBUTE, record.record_id)),
            f"[{style}]{outcome.value}[/{style}]",
            escape(result),
        )

    console.print(table)
    console.print(
        f"\n{report.pulled} record(s): [green]{report.matched} matched[/green], "
        f"[yellow]{report.unmatched} unmatched[/yellow], [red]{report.failed} failed[/red]"
    )
