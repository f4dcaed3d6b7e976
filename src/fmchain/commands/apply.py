"""Command: apply inherited templates to a document or folder."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from fmchain.commands._base import FmCommand

if TYPE_CHECKING:
    from fmchain.commands._context import AppContext


@click.command(
    cls=FmCommand,
    examples="""\
  fmchain apply Projects/Web/index.md
  fmchain apply Projects --dry-run
  fmchain apply Projects --no-recursive
  fmchain --json apply .""",
)
@click.argument("path")
@click.option("--dry-run", is_flag=True, help="Compute changes without writing files.")
@click.option(
    "--recursive/--no-recursive",
    default=None,
    help="Descend into subfolders when PATH is a folder (default from config).",
)
@click.pass_obj
def apply(app: AppContext, path: str, dry_run: bool, recursive: bool | None) -> None:
    """Apply the template chain to PATH, or to every document under a folder."""
    from fmchain.infrastructure.filesystem import PathEscapesVaultError
    from fmchain.services.apply import ApplyService

    svc = ApplyService(
        app.vault,
        app.mappings,
        app.plugins,
        extensions=tuple(app.settings.apply.extensions),
    )
    target = app.to_vault_path(path)
    try:
        is_folder = target == "" or app.vault.is_folder(target)
    except PathEscapesVaultError:
        is_folder = False
    if is_folder:
        if recursive is None:
            recursive = app.settings.apply.recursive
        app.emit(svc.apply_to_folder(target, recursive=recursive, dry_run=dry_run))
    else:
        app.emit(svc.apply_to_file(target, dry_run=dry_run))
