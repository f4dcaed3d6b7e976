"""Template chain resolution and folding.

A document inherits one template from every ancestor folder that has a
mapping, ordered root to leaf.  Folding the loaded chain produces a
single frontmatter document and body for the document.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from fmchain.domain.blocks import join_frontmatter, split_frontmatter
from fmchain.domain.codec import parse, serialize
from fmchain.domain.delete_list import explicit_keys, process_with_delete_list, strip_deleted
from fmchain.domain.merge import merge_documents
from fmchain.domain.patterns import matches_exclusion_pattern
from fmchain.domain.values import FrontmatterDocument

logger = logging.getLogger(__name__)

ROOT_FOLDER = ""
ROOT_ALIAS = "/"


class MappingError(ValueError):
    """A folder mapping entry cannot be understood."""


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TemplateMapping:
    template_path: str
    exclude_patterns: tuple[str, ...] = ()


@dataclass(frozen=True)
class TemplateChainItem:
    path: str
    folder_path: str
    depth: int
    content: str | None = None


@dataclass(frozen=True)
class TemplateChain:
    templates: tuple[TemplateChainItem, ...] = ()

    @property
    def has_inheritance(self) -> bool:
        return len(self.templates) > 1

    def __len__(self) -> int:
        return len(self.templates)

    def __iter__(self):
        return iter(self.templates)


@dataclass(frozen=True)
class ChainOutcome:
    frontmatter: FrontmatterDocument = field(default_factory=dict)
    body: str = ""
    delete_list: tuple[str, ...] = ()

    @property
    def frontmatter_text(self) -> str:
        return serialize(self.frontmatter)

    @property
    def content(self) -> str:
        return join_frontmatter(self.frontmatter_text, self.body)


# ---------------------------------------------------------------------------
# Mappings
# ---------------------------------------------------------------------------


def _normalize_folder(folder: str) -> str:
    if folder == ROOT_ALIAS:
        return ROOT_FOLDER
    return folder.strip().strip("/")


def _coerce_mapping(folder: str, entry: Any) -> TemplateMapping:
    if isinstance(entry, TemplateMapping):
        return entry
    if isinstance(entry, str):
        return TemplateMapping(template_path=entry)
    if isinstance(entry, Mapping):
        template_path = entry.get("template_path", entry.get("templatePath"))
        patterns = entry.get("exclude_patterns", entry.get("excludePatterns", ()))
        if not isinstance(template_path, str) or not template_path:
            msg = f"Mapping for folder {folder!r} has no template path"
            raise MappingError(msg)
        if isinstance(patterns, str) or not all(isinstance(p, str) for p in patterns):
            msg = f"Exclude patterns for folder {folder!r} must be a list of strings"
            raise MappingError(msg)
        return TemplateMapping(template_path=template_path, exclude_patterns=tuple(patterns))
    msg = f"Mapping for folder {folder!r} must be a path or a table, got {type(entry).__name__}"
    raise MappingError(msg)


def normalize_mappings(raw: Mapping[str, Any]) -> dict[str, TemplateMapping]:
    """Normalize a raw ``{folder: path | {templatePath, excludePatterns}}`` table.

    ``"/"`` is folded into the root key ``""``; an explicit ``""`` entry
    takes precedence over the alias.
    """
    mappings: dict[str, TemplateMapping] = {}
    for folder, entry in raw.items():
        key = _normalize_folder(folder)
        mapping = _coerce_mapping(folder, entry)
        if key in mappings and folder == ROOT_ALIAS:
            continue
        mappings[key] = mapping
    return mappings


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def folder_hierarchy(folder_path: str) -> list[str]:
    """Folders from the vault root down to *folder_path*, root first."""
    folders = [ROOT_FOLDER]
    current = ""
    for part in folder_path.strip("/").split("/"):
        if not part:
            continue
        current = f"{current}/{part}" if current else part
        folders.append(current)
    return folders


def relative_to(document_path: str, folder: str) -> str:
    if not folder:
        return document_path
    prefix = folder + "/"
    return document_path[len(prefix) :] if document_path.startswith(prefix) else document_path


def get_template_chain(document_path: str, mappings: Mapping[str, TemplateMapping]) -> TemplateChain:
    """Resolve the unloaded chain for the document at *document_path*.

    *document_path* is vault-relative with ``/`` separators.  Exclusion is
    checked per folder, so an excluded level does not block the others.
    """
    document_path = document_path.strip("/")
    parent = document_path.rsplit("/", 1)[0] if "/" in document_path else ROOT_FOLDER

    items: list[TemplateChainItem] = []
    for depth, folder in enumerate(folder_hierarchy(parent)):
        mapping = mappings.get(folder)
        if mapping is None:
            continue
        if matches_exclusion_pattern(relative_to(document_path, folder), mapping.exclude_patterns):
            logger.debug("Excluded %s from template of %r", document_path, folder)
            continue
        items.append(TemplateChainItem(path=mapping.template_path, folder_path=folder, depth=depth))

    if not items:
        root = mappings.get(ROOT_FOLDER) or mappings.get(ROOT_ALIAS)
        if root is not None and not matches_exclusion_pattern(document_path, root.exclude_patterns):
            items.append(TemplateChainItem(path=root.template_path, folder_path=ROOT_FOLDER, depth=0))

    return TemplateChain(templates=tuple(items))


def with_content(item: TemplateChainItem, content: str) -> TemplateChainItem:
    return replace(item, content=content)


# ---------------------------------------------------------------------------
# Folding
# ---------------------------------------------------------------------------


def fold_chain(chain: TemplateChain) -> ChainOutcome:
    """Fold a loaded chain root to leaf into one frontmatter and body.

    Items without content are skipped.  Descendants win scalar
    conflicts, lists concatenate, and delete lists remove inherited keys
    that no later template redefines.
    """
    accumulated: FrontmatterDocument | None = None
    cumulative: tuple[str, ...] = ()
    bodies: list[str] = []

    for item in chain.templates:
        if item.content is None:
            continue
        block = split_frontmatter(item.content)
        document = parse(block.content)
        explicit = explicit_keys(document)

        outcome = process_with_delete_list(block.content, cumulative)
        processed = parse(outcome.processed_content)
        if accumulated is None:
            accumulated = processed
        else:
            accumulated = merge_documents(accumulated, processed).merged

        cumulative = tuple(key for key in outcome.new_delete_list if key not in explicit)
        accumulated = strip_deleted(accumulated, cumulative, explicit)

        body = block.body.strip()
        if body:
            bodies.append(body)

    return ChainOutcome(
        frontmatter=accumulated or {},
        body="\n\n".join(bodies),
        delete_list=cumulative,
    )
