import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from types_splitter.cli.config import config_app
from types_splitter.cli.plan import plan
from types_splitter.cli.split import split

app = typer.Typer(
    name="types-splitter",
    help="Types Splitter CLI: move GraphQL root fields and types into their own schema files.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log every move and excision.")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


app.add_typer(config_app, name="config")
app.command("split")(split)
app.command("plan")(plan)


def main() -> None:
    app()
