"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy Vault, mapping and plugin
initialization plus centralized result emission (stdout/stderr routing
and exit codes).
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

import click

from fmchain.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from fmchain.config.settings import FmchainSettings
    from fmchain.domain.chain import TemplateMapping
    from fmchain.infrastructure.vault import Vault
    from fmchain.plugins.manager import PluginManager
    from fmchain.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The vault, mappings and plugins are initialized lazily so ``--help``
    and ``--version`` never touch the filesystem or entry points.
    """

    def __init__(self, settings: FmchainSettings) -> None:
        self.settings = settings
        self._vault: Vault | None = None
        self._mappings: dict[str, TemplateMapping] | None = None
        self._plugins: PluginManager | None = None

        from fmchain.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            log_json=settings.log_json,
            levels=settings.logging.levels,
        )

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    @property
    def vault(self) -> Vault:
        """The vault instance (created lazily on first access)."""
        if self._vault is None:
            from fmchain.infrastructure.vault import Vault

            self._vault = Vault.from_settings(self.settings)
        return self._vault

    @property
    def mappings(self) -> dict[str, TemplateMapping]:
        """Folder mappings from configuration, normalized once."""
        if self._mappings is None:
            from fmchain.domain.chain import MappingError

            try:
                self._mappings = self.settings.template_mappings()
            except MappingError as exc:
                msg = f"Invalid [mappings] configuration: {exc}"
                raise click.ClickException(msg) from exc
        return self._mappings

    @property
    def plugins(self) -> PluginManager | None:
        """Loaded plugin manager, or None when plugins are disabled."""
        if not self.settings.plugins.enabled:
            return None
        if self._plugins is None:
            from fmchain.plugins.manager import PluginManager

            self._plugins = PluginManager()
            self._plugins.discover_and_load(local_dir=self.settings.vault_root / self.settings.plugins.local_dir)
        return self._plugins

    def to_vault_path(self, raw: str) -> str:
        """Turn a CLI path argument into a vault-relative path.

        Paths that exist relative to the working directory are taken as
        filesystem paths; anything else is read as vault-relative already.
        Paths outside the vault keep their ``..`` parts so the service
        reports them.
        """
        candidate = Path(raw)
        if not candidate.is_absolute():
            if not candidate.exists():
                return raw.replace(os.sep, "/").strip("/")
            candidate = Path.cwd() / candidate
        root = self.settings.vault_root.resolve()
        resolved = candidate.resolve()
        if resolved.is_relative_to(root):
            return self.vault.relative(resolved)
        return Path(os.path.relpath(resolved, root)).as_posix()

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = self.output_settings
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                self.emit_warnings(result)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def emit_warnings(self, result: ServiceResult) -> None:
        for warning in result.warnings:
            click.echo(f"WARNING: {warning}", err=True)
