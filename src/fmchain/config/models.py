"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, fmchain.toml only contains
overrides.  A fresh vault usually needs only a [mappings] table.
"""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, Field, field_validator

from fmchain.config.logging import parse_level
from fmchain.domain.chain import TemplateMapping, normalize_mappings
from fmchain.domain.patterns import (
    is_valid_template_path,
    normalize_template_path,
    process_exclusion_patterns,
)

# --- fmchain.toml sections ---


class TemplatesConfig(BaseModel):
    """[templates] section."""

    model_config = {"frozen": True}

    folder: str = "Templates"


class MappingConfig(BaseModel):
    """One table-valued entry of the [mappings] section.

    Accepts both ``template_path``/``exclude_patterns`` and the camelCase
    ``templatePath``/``excludePatterns`` spellings.
    """

    model_config = {"frozen": True}

    template_path: str = Field(validation_alias=AliasChoices("template_path", "templatePath"))
    exclude_patterns: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("exclude_patterns", "excludePatterns"),
    )

    @field_validator("template_path")
    @classmethod
    def _check_template_path(cls, value: str) -> str:
        normalized = normalize_template_path(value)
        if not is_valid_template_path(normalized):
            msg = f"Invalid template path: {value!r}"
            raise ValueError(msg)
        return normalized

    @field_validator("exclude_patterns")
    @classmethod
    def _check_patterns(cls, value: list[str]) -> list[str]:
        parsed = process_exclusion_patterns("\n".join(value))
        if not parsed.is_valid:
            raise ValueError("; ".join(parsed.errors))
        return parsed.patterns


class ApplyConfig(BaseModel):
    """[apply] section."""

    model_config = {"frozen": True}

    recursive: bool = True
    extensions: list[str] = Field(default_factory=lambda: [".md"])


class LoggingConfig(BaseModel):
    """[logging] section.

    ``levels`` maps logger names to level names, e.g.
    ``"fmchain.domain.codec" = "DEBUG"``.
    """

    model_config = {"frozen": True}

    levels: dict[str, str] = Field(default_factory=dict)

    @field_validator("levels")
    @classmethod
    def _check_levels(cls, value: dict[str, str]) -> dict[str, str]:
        for level in value.values():
            parse_level(level)
        return value


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    local_dir: str = ".fmchain/plugins"


class FmchainConfig(BaseModel):
    """The complete fmchain.toml document."""

    model_config = {"frozen": True}

    templates: TemplatesConfig = Field(default_factory=TemplatesConfig)
    mappings: dict[str, str | MappingConfig] = Field(default_factory=dict)
    apply: ApplyConfig = Field(default_factory=ApplyConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("mappings")
    @classmethod
    def _check_mappings(cls, value: dict[str, str | MappingConfig]) -> dict[str, str | MappingConfig]:
        return check_mapping_paths(value)


def check_mapping_paths(mappings: dict[str, str | MappingConfig]) -> dict[str, str | MappingConfig]:
    """Normalize and validate bare-string mapping values."""
    checked: dict[str, str | MappingConfig] = {}
    for folder, entry in mappings.items():
        if isinstance(entry, str):
            normalized = normalize_template_path(entry)
            if not is_valid_template_path(normalized):
                msg = f"Invalid template path for folder {folder!r}: {entry!r}"
                raise ValueError(msg)
            entry = normalized
        checked[folder] = entry
    return checked


def to_template_mappings(mappings: dict[str, str | MappingConfig]) -> dict[str, TemplateMapping]:
    """Convert configured mappings into domain :class:`TemplateMapping` objects."""
    raw: dict[str, str | TemplateMapping] = {}
    for folder, entry in mappings.items():
        if isinstance(entry, MappingConfig):
            raw[folder] = TemplateMapping(
                template_path=entry.template_path,
                exclude_patterns=tuple(entry.exclude_patterns),
            )
        else:
            raw[folder] = entry
    return normalize_mappings(raw)
