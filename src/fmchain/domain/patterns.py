"""Exclusion patterns and template path validation.

Patterns follow a small gitignore-like glob dialect:

- ``*`` matches any run of characters except ``/``
- ``?`` matches a single character
- ``**`` matches any run, separators included
"""

from __future__ import annotations

import functools
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

_INVALID_PATH_CHARS = re.compile(r'[<>:"|?*]')


# ---------------------------------------------------------------------------
# Glob matching
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=512)
def glob_to_regex(glob: str) -> re.Pattern[str]:
    """Compile *glob* into an anchored regex (cached per pattern)."""
    parts: list[str] = []
    i = 0
    while i < len(glob):
        char = glob[i]
        if glob.startswith("**", i):
            parts.append(".*")
            i += 2
            continue
        if char == "*":
            parts.append("[^/]*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
        i += 1
    return re.compile("^" + "".join(parts) + "$")


def matches_exclusion_pattern(path: str, patterns: Iterable[str]) -> bool:
    """Whether *path* (relative to the mapped folder) is excluded.

    Each pattern is tried against the whole relative path and against
    the bare filename.  Blank patterns never match.
    """
    name = path.rsplit("/", 1)[-1]
    for pattern in patterns:
        if not pattern or not pattern.strip():
            continue
        if pattern in (path, name):
            return True
        regex = glob_to_regex(pattern)
        if regex.match(path) or regex.match(name):
            return True
    return False


# ---------------------------------------------------------------------------
# Pattern input
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PatternParseResult:
    patterns: list[str] = field(default_factory=list)
    is_valid: bool = True
    errors: list[str] = field(default_factory=list)


def normalize_pattern(pattern: str) -> str:
    pattern = pattern.strip()
    return pattern[1:] if pattern.startswith("/") else pattern


def process_exclusion_patterns(raw: str) -> PatternParseResult:
    """Turn newline-separated user input into normalized patterns.

    Empty lines are skipped; lines holding a NUL character are rejected
    with a line-numbered error.
    """
    if not raw or not raw.strip():
        return PatternParseResult()

    patterns: list[str] = []
    errors: list[str] = []
    for lineno, line in enumerate(raw.split("\n"), start=1):
        normalized = normalize_pattern(line)
        if not normalized:
            continue
        if "\0" in line:
            errors.append(f"Line {lineno}: Pattern contains invalid null character")
            continue
        patterns.append(normalized)
    return PatternParseResult(patterns=patterns, is_valid=not errors, errors=errors)


# ---------------------------------------------------------------------------
# Template paths
# ---------------------------------------------------------------------------


def is_valid_template_path(path: str) -> bool:
    """Whether *path* names a visible Markdown file inside the vault."""
    if not isinstance(path, str) or not path.strip():
        return False
    if _INVALID_PATH_CHARS.search(path):
        return False
    if path.endswith((".", " ")):
        return False
    if "//" in path:
        return False
    if any(part.startswith(".") and part != "." for part in path.split("/")):
        return False
    return path.endswith(".md")


def normalize_template_path(path: str) -> str:
    """Trim whitespace and surrounding slashes; collapse repeated slashes."""
    if not path:
        return ""
    normalized = path.strip().strip("/")
    return re.sub(r"/+", "/", normalized)
