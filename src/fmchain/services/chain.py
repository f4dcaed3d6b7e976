"""ChainService — resolve and load the template chain of a document."""

from __future__ import annotations

import logging
from typing import Any

from fmchain.domain.chain import TemplateChain, TemplateChainItem, get_template_chain
from fmchain.infrastructure.filesystem import PathEscapesVaultError
from fmchain.services.base import BaseService
from fmchain.services.result import ServiceResult

logger = logging.getLogger(__name__)


def item_data(item: TemplateChainItem) -> dict[str, Any]:
    return {"path": item.path, "folder_path": item.folder_path, "depth": item.depth}


def chain_data(path: str, chain: TemplateChain) -> dict[str, Any]:
    return {
        "path": path,
        "templates": [item_data(item) for item in chain.templates],
        "has_inheritance": chain.has_inheritance,
    }


class ChainService(BaseService):
    """Inspects which templates a document inherits."""

    def resolve(self, path: str) -> ServiceResult:
        """Resolve the chain without touching template files."""
        chain = get_template_chain(path, self._mappings)
        return ServiceResult(ok=True, op="resolve_chain", data=chain_data(path, chain))

    def load(self, path: str) -> ServiceResult:
        """Resolve and load the chain; unreadable templates become warnings."""
        op = "load_chain"
        warnings: list[str] = []

        chain = get_template_chain(path, self._mappings)
        loaded = self._loader.load_chain(chain)
        for item in loaded.missing:
            warnings.append(f"Skipping missing template in chain: {item.path}")
            self._notify("template_missing", warnings, path=path, template=item.path)

        data = chain_data(path, loaded.chain)
        data["missing"] = [item_data(item) for item in loaded.missing]
        data["configured"] = len(chain)
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    def list_templates(self, templates_folder: str | None = None) -> ServiceResult:
        """List every folder mapping and whether its template exists.

        When *templates_folder* exists, the documents inside it are
        reported as ``available`` templates.
        """
        available: list[str] = []
        if templates_folder:
            try:
                if self._vault.is_folder(templates_folder):
                    available = self._vault.documents(templates_folder)
            except (OSError, PathEscapesVaultError):
                logger.debug("Cannot list templates folder %s", templates_folder, exc_info=True)

        items: list[dict[str, Any]] = []
        for folder, mapping in sorted(self._mappings.items()):
            try:
                exists = self._vault.exists(mapping.template_path)
            except PathEscapesVaultError:
                exists = False
            items.append(
                {
                    "folder": folder,
                    "template_path": mapping.template_path,
                    "exclude_patterns": list(mapping.exclude_patterns),
                    "exists": exists,
                }
            )
        missing = [item["template_path"] for item in items if not item["exists"]]
        return ServiceResult(
            ok=True,
            op="list_templates",
            data={"items": items, "count": len(items), "available": available},
            warnings=[f"Template not found: {path}" for path in missing],
        )
