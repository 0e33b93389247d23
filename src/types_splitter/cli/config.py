"""Configuration commands."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from types_splitter.config import DEFAULT_CONFIG_NAME, find_config, load_config
from types_splitter.core.routing import RoutingTable
from types_splitter.errors import ConfigurationError

config_app = typer.Typer(help="Inspect the split configuration.")
console = Console()


@config_app.command("check")
def check(
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help=f"Config file. Defaults to the closest {DEFAULT_CONFIG_NAME}."),
    ] = None,
) -> None:
    """Validate the config file and list its rules."""
    try:
        splitter_config = load_config(config)
        RoutingTable.from_config(splitter_config)
    except ConfigurationError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc

    console.print(f"[green]Valid[/green] config {find_config(str(config or DEFAULT_CONFIG_NAME))}")

    if splitter_config.queries:
        queries = Table(title="queries", show_lines=False)
        queries.add_column("prefix")
        queries.add_column("matches")
        for rule in splitter_config.queries:
            queries.add_row(rule.prefix, ", ".join(rule.matches))
        console.print(queries)

    if splitter_config.types:
        types = Table(title="types", show_lines=False)
        types.add_column("name")
        types.add_column("prefix")
        for type_rule in splitter_config.types:
            types.add_row(type_rule.name, type_rule.prefix)
        console.print(types)
