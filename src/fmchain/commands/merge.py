"""Command: merge two frontmatter files."""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

import click

from fmchain.commands._base import FmCommand

if TYPE_CHECKING:
    from fmchain.commands._context import AppContext


@click.command(
    cls=FmCommand,
    examples="""\
  fmchain merge Templates/base.md Templates/project.md
  fmchain --json merge defaults.yml overrides.yml""",
)
@click.argument("base", type=click.File("r", encoding="utf-8"))
@click.argument("incoming", type=click.File("r", encoding="utf-8"))
@click.pass_obj
def merge(app: AppContext, base: TextIO, incoming: TextIO) -> None:
    """Merge INCOMING's frontmatter over BASE's.

    Either file may be a full document or bare frontmatter.  INCOMING
    wins scalar conflicts; lists are concatenated BASE first.
    """
    from fmchain.services.merge import merge_texts

    app.emit(merge_texts(base.read(), incoming.read()))
