"""Subcommand modules for fmchain.

Provides register_commands() which uses deferred imports to keep
``fmchain --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from fmchain.commands.apply import apply
    from fmchain.commands.chain import chain
    from fmchain.commands.merge import merge
    from fmchain.commands.preview import preview
    from fmchain.commands.templates import templates

    cli.add_command(chain)
    cli.add_command(apply)
    cli.add_command(preview)
    cli.add_command(merge)
    cli.add_command(templates)
