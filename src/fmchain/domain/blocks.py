"""Locate and splice the ``---`` delimited frontmatter block of a document."""

from __future__ import annotations

import re
from dataclasses import dataclass

FRONTMATTER_BLOCK = re.compile(
    r"\A---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL,
)


@dataclass(frozen=True)
class FrontmatterBlock:
    """Result of splitting a document into frontmatter and body.

    ``end`` is the offset just past the closing delimiter's line break,
    or 0 when the document has no block.
    """

    exists: bool
    content: str
    body: str
    end: int = 0


def split_frontmatter(text: str) -> FrontmatterBlock:
    match = FRONTMATTER_BLOCK.match(text)
    if match is None:
        return FrontmatterBlock(exists=False, content="", body=text)
    return FrontmatterBlock(
        exists=True,
        content=match.group(1) or "",
        body=text[match.end() :],
        end=match.end(),
    )


def join_frontmatter(frontmatter_text: str, body: str) -> str:
    """Wrap *frontmatter_text* in delimiters ahead of *body*.

    Empty frontmatter produces the body alone.
    """
    frontmatter_text = frontmatter_text.rstrip("\n")
    if not frontmatter_text.strip():
        return body
    return f"---\n{frontmatter_text}\n---\n{body}"
