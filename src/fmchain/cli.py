"""Root CLI group for fmchain with global flags and command registration."""

from __future__ import annotations

from pathlib import Path

import click
from pydantic import ValidationError

from fmchain import __version__
from fmchain.commands import register_commands
from fmchain.commands._base import FmGroup
from fmchain.commands._context import AppContext
from fmchain.config.settings import FmchainSettings


@click.group(
    cls=FmGroup,
    invoke_without_command=True,
    examples="""\
  fmchain templates
  fmchain chain Projects/Web/index.md
  fmchain apply Projects --dry-run
  fmchain --vault ~/notes preview Daily/today.md""",
)
@click.version_option(version=__version__, prog_name="fmchain")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--vault",
    "vault_root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Vault root directory (default: directory of fmchain.toml, else cwd).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    vault_root: Path | None,
) -> None:
    """fmchain — inherited frontmatter templates for Markdown vaults."""
    ctx.ensure_object(dict)
    try:
        settings = FmchainSettings.from_cli(
            config_path=config_path,
            vault_root=vault_root,
            json_output=json_output,
            quiet=quiet,
            verbose=verbose,
            log_json=log_json,
        )
    except ValidationError as exc:
        msg = f"Invalid configuration: {exc}"
        raise click.ClickException(msg) from exc
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
