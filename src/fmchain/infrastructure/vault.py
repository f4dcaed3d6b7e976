"""Vault — the filesystem collaborator injected into every service.

A vault is a directory of Markdown documents.  Everything above this
layer addresses documents by vault-relative ``/`` paths; the Vault turns
those into real files and refuses paths that would leave the root.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from fmchain.infrastructure.filesystem import (
    find_documents,
    read_text,
    resolve_vault_path,
    to_relative,
    write_text,
)

if TYPE_CHECKING:
    from fmchain.config.settings import FmchainSettings

logger = logging.getLogger(__name__)


class Vault:
    """Read and write access to the documents under one root directory."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    @classmethod
    def from_settings(cls, settings: FmchainSettings) -> Vault:
        return cls(settings.vault_root)

    # -- paths --------------------------------------------------------------

    def path(self, relative: str) -> Path:
        return resolve_vault_path(self.root, relative)

    def relative(self, path: Path) -> str:
        """Vault-relative form of *path* (absolute or cwd-relative)."""
        return to_relative(self.root, path)

    def exists(self, relative: str) -> bool:
        return self.path(relative).is_file()

    def is_folder(self, relative: str) -> bool:
        return self.path(relative).is_dir()

    # -- I/O ----------------------------------------------------------------

    def read(self, relative: str) -> str:
        return read_text(self.path(relative))

    def write(self, relative: str, content: str) -> None:
        logger.debug("Writing %s", relative)
        write_text(self.path(relative), content)

    # -- traversal ----------------------------------------------------------

    def documents(
        self,
        folder: str = "",
        *,
        recursive: bool = True,
        extensions: tuple[str, ...] = (".md",),
    ) -> list[str]:
        return find_documents(self.root, folder, recursive=recursive, extensions=extensions)
