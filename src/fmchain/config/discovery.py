"""Locate and read ``fmchain.toml``.

Lookup order:

1. ``FMCHAIN_CONFIG`` (``~`` expanded); a missing file disables config.
2. Walk up from the start directory.  The walk never leaves a vault:
   a directory holding one of :data:`VAULT_MARKERS` is the last one
   searched, so a stray ``fmchain.toml`` above a vault is ignored.

The ``--config`` flag bypasses discovery entirely (see
:meth:`fmchain.config.settings.FmchainSettings.from_cli`).
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

import click

from fmchain.config.models import FmchainConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "fmchain.toml"
CONFIG_ENV_VAR = "FMCHAIN_CONFIG"
VAULT_MARKERS = (".obsidian", ".git")


def _is_vault_boundary(directory: Path) -> bool:
    return any((directory / marker).is_dir() for marker in VAULT_MARKERS)


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file in effect for *start* (default: cwd), or None."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = Path(env_path).expanduser()
        if path.is_file():
            return path
        logger.warning("%s points to a missing file: %s", CONFIG_ENV_VAR, path)
        return None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if _is_vault_boundary(current) or current.parent == current:
            return None
        current = current.parent


def read_toml(path: Path) -> dict[str, Any]:
    """Parse *path* as TOML; syntax errors become a ``ClickException``."""
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise click.ClickException(msg) from exc


def load_config(path: Path | None = None, cwd: Path | None = None) -> FmchainConfig:
    """Load and validate the config without the env/CLI layers.

    Uses :func:`find_config` when *path* is None; no file yields the
    defaults.
    """
    if path is None:
        path = find_config(cwd)
    if path is None:
        return FmchainConfig()
    return FmchainConfig.model_validate(read_toml(path))
