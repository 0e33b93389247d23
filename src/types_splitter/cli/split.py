from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from types_splitter.config import DEFAULT_CONFIG_NAME, SplitterConfig, load_config
from types_splitter.core.relocate import RelocationResult, split_schemas
from types_splitter.core.sources import read_sources, remove_sources, write_outputs
from types_splitter.errors import ConfigurationError, SchemaLoadError

console = Console()

PathsArgument = Annotated[list[Path], typer.Argument(help="Schema files or directories to split.")]
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help=f"Config file. Defaults to the closest {DEFAULT_CONFIG_NAME}."),
]
RootOption = Annotated[
    Path | None,
    typer.Option(help="Directory the schema file names are relative to. Defaults to their common parent."),
]


def load_inputs(
    paths: list[Path], config: Path | None, root: Path | None
) -> tuple[dict[str, str], Path, SplitterConfig]:
    """Read the config and the schema files, exiting with a red message when either is broken."""
    try:
        splitter_config = load_config(config)
        sources, resolved_root = read_sources(paths, root)
    except (ConfigurationError, SchemaLoadError) as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc
    return sources, resolved_root, splitter_config


def _print_summary(result: RelocationResult, sources: dict[str, str]) -> None:
    table = Table(show_lines=False)
    table.add_column("file")
    table.add_column("status")
    for name in sorted({*result.outputs, *result.removed}):
        if name in result.removed:
            status = "[red]removed[/red]"
        elif name in result.created:
            status = "[green]created[/green]"
        elif result.outputs[name] != sources.get(name):
            status = "[yellow]modified[/yellow]"
        else:
            status = "unchanged"
        table.add_row(name, status)
    console.print(table)
    console.print(f"({len(result.moves)} moved, {len(result.skipped)} already in place)")


def split(
    paths: PathsArgument,
    config: ConfigOption = None,
    root: RootOption = None,
    out: Annotated[Path | None, typer.Option(help="Write every resulting file below this directory.")] = None,
    in_place: Annotated[
        bool, typer.Option("--in-place", help="Rewrite the schema files and delete the ones left empty.")
    ] = False,
) -> None:
    """Move configured root fields and types into their own schema files."""
    if out is not None and in_place:
        console.print("[red]--out and --in-place cannot be combined.[/red]")
        raise typer.Exit(1)

    sources, resolved_root, splitter_config = load_inputs(paths, config, root)
    try:
        result = split_schemas(sources, splitter_config)
    except (ConfigurationError, SchemaLoadError) as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc

    if in_place:
        write_outputs(result.outputs, resolved_root)
        remove_sources(result.removed, resolved_root)
        console.print(f"[green]Rewrote[/green] schema files in {resolved_root}")
    elif out is not None:
        write_outputs(result.outputs, out)
        console.print(f"[green]Wrote[/green] {len(result.outputs)} schema files to {out}")

    _print_summary(result, sources)
