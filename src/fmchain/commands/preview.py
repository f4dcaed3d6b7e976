"""Command: print a document as it would look after applying templates."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from fmchain.commands._base import FmCommand

if TYPE_CHECKING:
    from fmchain.commands._context import AppContext


@click.command(
    cls=FmCommand,
    examples="""\
  fmchain preview Projects/Web/index.md
  fmchain preview Projects/Web/index.md > merged.md
  fmchain --json preview Daily/today.md""",
)
@click.argument("path")
@click.pass_obj
def preview(app: AppContext, path: str) -> None:
    """Print the would-be content of PATH without writing it."""
    from fmchain.services.apply import ApplyService

    result = ApplyService(app.vault, app.mappings, app.plugins).preview(app.to_vault_path(path))
    settings = app.output_settings
    if result.ok and not (settings.json_output or settings.quiet):
        click.echo(result.data["content"], nl=False)
        app.emit_warnings(result)
        return
    app.emit(result)
