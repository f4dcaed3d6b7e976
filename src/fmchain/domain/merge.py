"""Merge engine — combine two frontmatter documents under a fixed policy.

``base`` supplies defaults; ``incoming`` wins scalar conflicts.  When both
sides hold list-like values the lists are concatenated base-first and
de-duplicated by canonical form.  The same primitive serves both callers:

- chain folding (ancestor is base, descendant is incoming)
- applying templates to a file (template is base, file is incoming)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from fmchain.domain.blocks import split_frontmatter
from fmchain.domain.codec import parse, serialize
from fmchain.domain.values import (
    EMPTY,
    FrontmatterDocument,
    List,
    Value,
    canonical,
    is_array_like,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MergeResult:
    """Outcome of a merge: the document plus key bookkeeping."""

    merged: FrontmatterDocument
    conflicts: list[str] = field(default_factory=list)
    added: list[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return serialize(self.merged)


def _items(value: Value) -> tuple[Value, ...]:
    match value:
        case List(items):
            return items
        case _:
            return ()


def concat_unique(base: Value, incoming: Value) -> Value:
    """Concatenate two list-like values, first occurrence wins.

    Neither side being a ``List`` yields the empty marker, unless both
    sides are the same value.
    """
    if not isinstance(base, List) and not isinstance(incoming, List):
        return base if base == incoming else EMPTY

    seen: set[str] = set()
    combined: list[Value] = []
    for item in (*_items(base), *_items(incoming)):
        key = canonical(item)
        if key in seen:
            continue
        seen.add(key)
        combined.append(item)
    return List(tuple(combined))


def merge_documents(base: FrontmatterDocument, incoming: FrontmatterDocument) -> MergeResult:
    """Merge two parsed documents.

    Base-only keys keep their position; incoming-only keys are appended
    in incoming order and recorded in ``added``; keys on both sides are
    recorded in ``conflicts``.
    """
    merged: FrontmatterDocument = dict(base)
    conflicts: list[str] = []
    added: list[str] = []

    for key, value in incoming.items():
        if key not in base:
            merged[key] = value
            added.append(key)
            continue
        current = base[key]
        if is_array_like(current) and is_array_like(value):
            merged[key] = concat_unique(current, value)
        else:
            merged[key] = value
        conflicts.append(key)

    return MergeResult(merged=merged, conflicts=conflicts, added=added)


def merge_frontmatter(base: str, incoming: str) -> MergeResult:
    """Parse and merge two frontmatter texts (without delimiters)."""
    return merge_documents(parse(base), parse(incoming))


def merge_with_file(file_text: str, template_frontmatter: str) -> MergeResult:
    """Merge template frontmatter underneath a file's own frontmatter.

    The file's values always win.  ``conflicts`` lists keys both sides
    define; ``added`` lists keys the template filled in.
    """
    block = split_frontmatter(file_text)
    file_doc = parse(block.content) if block.exists else {}
    template_doc = parse(template_frontmatter)

    result = merge_documents(template_doc, file_doc)
    conflicts = [key for key in file_doc if key in template_doc]
    added = [key for key in template_doc if key not in file_doc]
    logger.debug("merge_with_file: %d conflicts, %d added", len(conflicts), len(added))
    return MergeResult(merged=result.merged, conflicts=conflicts, added=added)


def apply_to_file(file_text: str, merged_frontmatter: str) -> str:
    """Write *merged_frontmatter* into *file_text*'s block.

    The existing block is replaced, or a new one prepended.  Blank lines
    between the block and the body collapse to one line break.
    """
    if merged_frontmatter and not merged_frontmatter.endswith("\n"):
        merged_frontmatter += "\n"
    header = f"---\n{merged_frontmatter}---\n"

    block = split_frontmatter(file_text)
    if not block.exists:
        return header + file_text
    return header + block.body.lstrip("\r\n")


def validate_frontmatter(text: str) -> bool:
    """Whether *text* parses into a document.

    Parsing is total, so this only guards against non-string input.
    """
    if not isinstance(text, str):
        return False
    parse(text)
    return True
