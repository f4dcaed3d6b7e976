"""Standalone frontmatter merge, independent of any vault."""

from __future__ import annotations

from fmchain.domain.blocks import split_frontmatter
from fmchain.domain.merge import merge_frontmatter
from fmchain.domain.values import document_to_python
from fmchain.services.result import MergeSummary, ServiceResult


def frontmatter_of(text: str) -> str:
    """The frontmatter of a full document, or *text* itself when it has no block."""
    block = split_frontmatter(text)
    return block.content if block.exists else text


def merge_texts(base_text: str, incoming_text: str) -> ServiceResult:
    """Merge two frontmatter texts or documents; *incoming* wins scalars."""
    result = merge_frontmatter(frontmatter_of(base_text), frontmatter_of(incoming_text))
    return ServiceResult.success(
        "merge",
        {"text": result.text, "merged": document_to_python(result.merged)},
        summary=MergeSummary.of(result),
    )
