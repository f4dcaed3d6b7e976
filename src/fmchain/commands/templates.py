"""Command: list configured folder mappings."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from fmchain.commands._base import FmCommand

if TYPE_CHECKING:
    from fmchain.commands._context import AppContext


@click.command(
    cls=FmCommand,
    examples="""\
  fmchain templates
  fmchain --json templates""",
)
@click.pass_obj
def templates(app: AppContext) -> None:
    """List folder mappings and whether each template exists."""
    from fmchain.services.chain import ChainService

    app.emit(ChainService(app.vault, app.mappings).list_templates(app.settings.templates.folder))
