"""CLI entrypoint: Typer app definition and command registration"""

import logging
from typing import Annotated

import typer

from wellington.cli.commands import convert_cmd, init_cmd, list_cmd, sync_cmd


app = typer.Typer(name="wellington", no_args_is_help=True, help="Markdown with sidenotes -> HTML blog")


@app.callback()
def main(
    verbose: Annotated[int, typer.Option("--verbose", "-v", count=True, help="Increase log verbosity")] = 0,
    ):
    """Convert annotated markdown and keep a blog directory in sync."""
    if verbose:
        level = logging.INFO if verbose == 1 else logging.DEBUG
        logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


app.command(name="convert")(convert_cmd)
app.command(name="init")(init_cmd)
app.command(name="sync")(sync_cmd)
app.command(name="list")(list_cmd)
