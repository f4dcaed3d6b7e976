"""Click base classes carrying on-demand usage examples.

``--help`` stays short; ``fmchain <command> --examples`` prints worked
invocations instead.  The flag is eager, so it works without the
command's required arguments (``fmchain merge --examples``).
"""

from __future__ import annotations

import inspect
from typing import Any

import click

EXAMPLES_INDENT = "  "


def _show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    click.echo(ctx.command.format_examples(ctx))  # type: ignore[attr-defined]
    ctx.exit(0)


class ExamplesMixin:
    """Adds an eager ``--examples`` flag to commands that define examples.

    Example text may be written indented inside a triple-quoted string;
    it is dedented once here and re-indented on output.
    """

    params: list[click.Parameter]

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = inspect.cleandoc(examples) if examples else None
        if self.examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=_show_examples,
                    help="Show usage examples.",
                )
            )

    def format_examples(self, ctx: click.Context) -> str:
        lines = [f"Examples for '{ctx.command_path}':", ""]
        lines.extend(f"{EXAMPLES_INDENT}{line}" if line else "" for line in (self.examples or "").splitlines())
        return "\n".join(lines)


class FmCommand(ExamplesMixin, click.Command):
    """A command that accepts ``examples=``."""


class FmGroup(ExamplesMixin, click.Group):
    """A group whose subcommands default to :class:`FmCommand`.

    The group's own examples end with a pointer to per-command examples.
    """

    command_class = FmCommand

    def format_examples(self, ctx: click.Context) -> str:
        hint = f"Run '{ctx.command_path} COMMAND --examples' for command-specific examples."
        return f"{super().format_examples(ctx)}\n\n{hint}"
