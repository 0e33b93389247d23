from collections.abc import Sequence

import typer
from rich.console import Console
from rich.table import Table

from types_splitter.cli.split import ConfigOption, PathsArgument, RootOption, load_inputs
from types_splitter.core.relocate import PlannedMove, plan_relocations
from types_splitter.core.routing import RoutingTable
from types_splitter.core.schema import load_document
from types_splitter.errors import ConfigurationError, SchemaLoadError

console = Console()


def _render_moves(moves: Sequence[PlannedMove], title: str) -> None:
    table = Table(title=title, show_lines=False)
    for header in ("source", "name", "kind", "destination"):
        table.add_column(header)
    for move in moves:
        table.add_row(move.source, move.name, move.kind, move.destination)
    console.print(table)


def plan(
    paths: PathsArgument,
    config: ConfigOption = None,
    root: RootOption = None,
) -> None:
    """Show which root fields and types would be moved, without writing anything."""
    sources, _, splitter_config = load_inputs(paths, config, root)
    try:
        routing = RoutingTable.from_config(splitter_config)
        relocation_plan = plan_relocations(load_document(sources), routing)
    except (ConfigurationError, SchemaLoadError) as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc

    if not relocation_plan.moves and not relocation_plan.skipped:
        console.print("Nothing to move.")
        return

    _render_moves(relocation_plan.moves, "moves")
    if relocation_plan.skipped:
        _render_moves(relocation_plan.skipped, "already in place")
    console.print(f"({len(relocation_plan.moves)} moves)")
