"""Command: show the template chain a document inherits."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from fmchain.commands._base import FmCommand

if TYPE_CHECKING:
    from fmchain.commands._context import AppContext


@click.command(
    cls=FmCommand,
    examples="""\
  fmchain chain Projects/Web/index.md
  fmchain chain Projects/Web/index.md --no-load
  fmchain --json chain Daily/2024-01-01.md""",
)
@click.argument("path")
@click.option("--no-load", is_flag=True, help="Resolve only; do not check template files.")
@click.pass_obj
def chain(app: AppContext, path: str, no_load: bool) -> None:
    """Print the templates PATH inherits, root first."""
    from fmchain.services.chain import ChainService

    svc = ChainService(app.vault, app.mappings, app.plugins)
    document = app.to_vault_path(path)
    if no_load:
        app.emit(svc.resolve(document))
    else:
        app.emit(svc.load(document))
