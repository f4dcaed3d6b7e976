"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``FMCHAIN_*`` prefix
  3. TOML file    — ``fmchain.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the ``find_config`` walk-up discovery from
:mod:`fmchain.config.discovery`.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from fmchain.config.discovery import find_config, read_toml
from fmchain.config.models import (
    ApplyConfig,
    LoggingConfig,
    MappingConfig,
    PluginsConfig,
    TemplatesConfig,
    check_mapping_paths,
    to_template_mappings,
)
from fmchain.domain.chain import TemplateMapping


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``fmchain.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            self._data = read_toml(toml_path)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class FmchainSettings(BaseSettings):
    """Unified settings for the fmchain CLI.

    Attributes:
        vault_root: Resolved vault directory (``--vault``, else the parent
            of ``fmchain.toml``, else CWD).
        config_path: The TOML file in effect, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "FMCHAIN_",
        "env_nested_delimiter": "__",
    }

    # --- Resolved paths (derived from config location, not read from TOML) ---
    vault_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    templates: TemplatesConfig = Field(default_factory=TemplatesConfig)
    mappings: dict[str, str | MappingConfig] = Field(default_factory=dict)
    apply: ApplyConfig = Field(default_factory=ApplyConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("mappings")
    @classmethod
    def _check_mappings(cls, value: dict[str, str | MappingConfig]) -> dict[str, str | MappingConfig]:
        return check_mapping_paths(value)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        vault_root: Path | None = None,
        **cli_flags: Any,
    ) -> FmchainSettings:
        """Construct settings from CLI invocation.

        Discovers ``fmchain.toml`` via walk-up from *vault_root* (or uses
        an explicit *config_path*), resolves the vault root from the config
        file's parent directory, and merges CLI flags as highest-priority
        overrides.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(vault_root)

        resolved_root = vault_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(
                vault_root=resolved_root,
                config_path=toml_path,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None

    def template_mappings(self) -> dict[str, TemplateMapping]:
        """The [mappings] table as domain objects, keyed by folder."""
        return to_template_mappings(self.mappings)
