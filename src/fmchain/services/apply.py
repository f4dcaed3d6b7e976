"""ApplyService — apply a document's template chain to the document.

Pipeline: RESOLVE → LOAD → FOLD → MERGE → WRITE → NOTIFY

The document's own frontmatter always wins scalar conflicts; templates
fill gaps and contribute list items.  The folded template body is
appended after the document's existing body.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fmchain.domain.chain import fold_chain, get_template_chain
from fmchain.domain.codec import serialize
from fmchain.domain.delete_list import DELETE_KEY
from fmchain.domain.merge import apply_to_file, merge_with_file
from fmchain.infrastructure.filesystem import PathEscapesVaultError
from fmchain.services.base import BaseService, io_error
from fmchain.services.result import MergeSummary, ServiceResult

if TYPE_CHECKING:
    from fmchain.domain.chain import TemplateMapping
    from fmchain.infrastructure.vault import Vault
    from fmchain.plugins.manager import PluginManager

logger = logging.getLogger(__name__)

NO_TEMPLATE_CONFIGURED = "NO_TEMPLATE_CONFIGURED"
NO_TEMPLATES_LOADED = "NO_TEMPLATES_LOADED"


def append_body(content: str, body: str) -> str:
    """Append *body* after *content*, separated by one blank line."""
    if not body:
        return content
    if not content.strip():
        return body + "\n"
    return content.rstrip() + "\n\n" + body + "\n"


class ApplyService(BaseService):
    """Applies inherited templates to documents in the vault."""

    def __init__(
        self,
        vault: Vault,
        mappings: dict[str, TemplateMapping],
        plugin_manager: PluginManager | None = None,
        *,
        extensions: tuple[str, ...] = (".md",),
    ) -> None:
        super().__init__(vault, mappings, plugin_manager)
        self._extensions = extensions

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def apply_to_file(self, path: str, *, dry_run: bool = False) -> ServiceResult:
        """Apply the chain resolved for *path* to that document."""
        op = "apply_template"
        warnings: list[str] = []

        # ── RESOLVE ──────────────────────────────────────────
        chain = get_template_chain(path, self._mappings)
        if not chain.templates:
            return ServiceResult.failure(
                op,
                NO_TEMPLATE_CONFIGURED,
                f"No template configured for {path}",
                detail={"path": path},
            )

        try:
            original = self._vault.read(path)
        except (OSError, UnicodeDecodeError, PathEscapesVaultError) as exc:
            return io_error(op, path, exc)

        # ── LOAD ─────────────────────────────────────────────
        loaded = self._loader.load_chain(chain)
        for item in loaded.missing:
            warnings.append(f"Template not found: {item.path}")
            self._notify("template_missing", warnings, path=path, template=item.path)
        if not loaded.chain.templates:
            return ServiceResult.failure(
                op,
                NO_TEMPLATES_LOADED,
                f"No templates could be loaded for {path}",
                detail={"path": path, "templates": [item.path for item in chain.templates]},
                warnings=warnings,
            )

        # ── FOLD + MERGE ─────────────────────────────────────
        outcome = fold_chain(loaded.chain)
        summary = MergeSummary()
        content = original
        if outcome.frontmatter:
            result = merge_with_file(original, outcome.frontmatter_text)
            merged = {key: value for key, value in result.merged.items() if key != DELETE_KEY}
            content = apply_to_file(original, serialize(merged))
            summary = MergeSummary.of(result)
        content = append_body(content, outcome.body)
        changed = content != original

        # ── WRITE ────────────────────────────────────────────
        if changed and not dry_run:
            try:
                self._vault.write(path, content)
            except (OSError, PathEscapesVaultError) as exc:
                return io_error(op, path, exc)

        templates = [item.path for item in loaded.chain.templates]
        logger.info("Applied %d template(s) to %s", len(templates), path)

        # ── NOTIFY ───────────────────────────────────────────
        if not dry_run:
            self._notify(
                "post_apply",
                warnings,
                path=path,
                templates=templates,
                conflicts=summary.conflicts,
                added=summary.added,
            )

        data: dict[str, Any] = {"path": path, "templates": templates, "changed": changed}
        if dry_run:
            data["content"] = content
        return ServiceResult.success(
            op,
            data,
            summary=summary,
            warnings=warnings,
            meta={"dry_run": dry_run},
        )

    def preview(self, path: str) -> ServiceResult:
        """Dry-run :meth:`apply_to_file`, returning the would-be content."""
        return self.apply_to_file(path, dry_run=True)

    def apply_to_folder(
        self,
        folder: str,
        *,
        recursive: bool = True,
        dry_run: bool = False,
    ) -> ServiceResult:
        """Apply templates to every document under *folder*.

        Each document is processed independently; one failure never stops
        the batch.  The result is an error when any document failed.
        """
        op = "apply_folder"
        warnings: list[str] = []

        try:
            if not self._vault.is_folder(folder):
                raise FileNotFoundError(folder)
            documents = self._vault.documents(folder, recursive=recursive, extensions=self._extensions)
        except (OSError, PathEscapesVaultError) as exc:
            return io_error(op, folder, exc)

        processed: list[str] = []
        skipped: list[str] = []
        failed: list[str] = []
        items: list[dict[str, Any]] = []

        for path in documents:
            result = self.apply_to_file(path, dry_run=dry_run)
            warnings.extend(f"{path}: {warning}" for warning in result.warnings)
            item: dict[str, Any] = {"path": path, "ok": result.ok}
            if result.ok:
                processed.append(path)
                item.update(result.summary.model_dump(), changed=result.data["changed"])
            elif result.error is not None and result.error.code == NO_TEMPLATE_CONFIGURED:
                skipped.append(path)
                item["code"] = result.error.code
            else:
                failed.append(path)
                if result.error is not None:
                    item["code"] = result.error.code
                    item["message"] = result.error.message
            items.append(item)

        data = {
            "folder": folder,
            "processed": processed,
            "skipped": skipped,
            "failed": failed,
            "items": items,
        }
        meta = {"dry_run": dry_run, "total": len(documents)}
        if failed:
            return ServiceResult.failure(
                op,
                "BATCH_FAILED",
                f"{len(failed)} of {len(documents)} document(s) failed",
                detail={"failed": failed},
                data=data,
                warnings=warnings,
                meta=meta,
            )
        return ServiceResult.success(op, data, warnings=warnings, meta=meta)
