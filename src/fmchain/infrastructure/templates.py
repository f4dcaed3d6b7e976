"""Template loading — fill chain items with their template text."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from fmchain.domain.chain import TemplateChain, TemplateChainItem, with_content
from fmchain.infrastructure.filesystem import PathEscapesVaultError

if TYPE_CHECKING:
    from fmchain.infrastructure.vault import Vault

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedChain:
    """A chain whose items all carry content, plus what was dropped."""

    chain: TemplateChain
    missing: list[TemplateChainItem] = field(default_factory=list)


class TemplateLoader:
    def __init__(self, vault: Vault) -> None:
        self._vault = vault

    def load_template(self, path: str) -> str | None:
        """Read one template, or None when it cannot be read."""
        try:
            if not self._vault.exists(path):
                return None
            return self._vault.read(path)
        except (OSError, UnicodeDecodeError, PathEscapesVaultError):
            logger.debug("Failed to read template %s", path, exc_info=True)
            return None

    def load_chain(self, chain: TemplateChain) -> LoadedChain:
        """Load every item; unreadable templates are dropped with a warning."""
        loaded: list[TemplateChainItem] = []
        missing: list[TemplateChainItem] = []
        for item in chain.templates:
            content = self.load_template(item.path)
            if content is None:
                logger.warning("Skipping missing template in chain: %s", item.path)
                missing.append(item)
                continue
            loaded.append(with_content(item, content))
        return LoadedChain(chain=TemplateChain(templates=tuple(loaded)), missing=missing)
