"""Frontmatter codec — parse and serialize the YAML-like subset.

The grammar is deliberately small: one ``key: value`` per line, ``|``
literal blocks, dash lists and single-line inline arrays.  Anything else
is treated as a malformed line and skipped, never raised.

Serialization is canonical: dash notation for lists, ``|`` blocks for
multi-line strings, and double quotes only where the text needs them.
"""

from __future__ import annotations

import logging
import re
from enum import Enum, auto

from fmchain.domain.values import (
    EMPTY,
    NULL,
    Bool,
    EmptyMarker,
    FrontmatterDocument,
    List,
    Null,
    Number,
    String,
    Value,
    format_number,
)

logger = logging.getLogger(__name__)

_KEY_LINE = re.compile(r"^(\w+):\s*(.*)$", re.ASCII)
_LIST_ITEM = re.compile(r"^\s*-(?:\s+(.*?))?\s*$")
_NUMERIC = re.compile(r"^-?\d+(\.\d+)?$")
_NEEDS_QUOTES = re.compile(r"[:\[\]{},>|]")

_LITERAL_INDENT = "  "
_LITERAL_MARKER = "|"

# Inline arrays nested deeper than this stay raw strings.
MAX_INLINE_DEPTH = 64


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------


def _is_wrapped(text: str) -> bool:
    """Whether *text* is fully wrapped in one pair of matching quotes."""
    return len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'"


def _split_inline(inner: str) -> list[str]:
    """Split the inside of ``[...]`` on top-level commas.

    Commas inside quotes or nested brackets do not split.
    """
    parts: list[str] = []
    current: list[str] = []
    quote: str | None = None
    depth = 0
    escaped = False
    for char in inner:
        if escaped:
            current.append(char)
            escaped = False
            continue
        if quote is not None:
            if char == "\\" and quote == '"':
                escaped = True
            elif char == quote:
                quote = None
            current.append(char)
            continue
        if char in "\"'":
            quote = char
        elif char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
        elif char == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return parts


def parse_scalar(raw: str, depth: int = 0) -> Value:
    """Parse a single-line value.

    First match wins: quoted string, boolean, null, number, inline array,
    raw string.  An inline array nested more than ``MAX_INLINE_DEPTH``
    levels deep is kept as a raw string.
    """
    text = raw.strip()
    if _is_wrapped(text):
        inner = text[1:-1]
        if text[0] == '"':
            inner = inner.replace('\\"', '"')
        return String(inner)
    if text == "true":
        return Bool(True)
    if text == "false":
        return Bool(False)
    if text in ("null", "~"):
        return NULL
    if _NUMERIC.match(text):
        return Number(float(text))
    if text.startswith("[") and text.endswith("]") and depth < MAX_INLINE_DEPTH:
        elements = [part.strip() for part in _split_inline(text[1:-1])]
        return List(tuple(parse_scalar(part, depth + 1) for part in elements if part))
    return String(text)


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class _Mode(Enum):
    SCANNING = auto()
    LITERAL = auto()
    DEFERRED = auto()


class _Parser:
    """Line-driven state machine behind :func:`parse`."""

    def __init__(self) -> None:
        self.document: FrontmatterDocument = {}
        self._mode = _Mode.SCANNING
        self._key: str | None = None
        self._items: list[Value] = []
        self._literal: list[str] = []

    def feed(self, lineno: int, line: str) -> None:
        key_match = _KEY_LINE.match(line)
        if key_match:
            self.flush()
            self._start_key(key_match.group(1), key_match.group(2).strip())
            return

        if self._mode is _Mode.LITERAL:
            if line.startswith(_LITERAL_INDENT):
                self._literal.append(line[len(_LITERAL_INDENT) :])
                return
            if not line.strip():
                self._literal.append("")
                return
            # A dedented line closes the block.
            self.flush()

        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            return

        if self._mode is _Mode.DEFERRED:
            item_match = _LIST_ITEM.match(line)
            if item_match:
                self._items.append(parse_scalar(item_match.group(1) or ""))
                return

        logger.debug("Skipping malformed frontmatter line %d: %r", lineno, line)

    def flush(self) -> None:
        """Close the pending key, if any."""
        key = self._key
        if key is not None:
            if self._mode is _Mode.LITERAL:
                while self._literal and not self._literal[-1].strip():
                    self._literal.pop()
                if self._literal:
                    self.document[key] = String("\n".join(self._literal))
                else:
                    self.document[key] = EMPTY
            elif self._mode is _Mode.DEFERRED:
                self.document[key] = List(tuple(self._items)) if self._items else EMPTY
        self._key = None
        self._mode = _Mode.SCANNING
        self._items = []
        self._literal = []

    def _start_key(self, key: str, remainder: str) -> None:
        if remainder == _LITERAL_MARKER:
            self._key = key
            self._mode = _Mode.LITERAL
        elif remainder:
            self.document[key] = parse_scalar(remainder)
        else:
            self._key = key
            self._mode = _Mode.DEFERRED


def parse(text: str) -> FrontmatterDocument:
    """Parse frontmatter text (without ``---`` delimiters) into a document.

    Never raises: lines that match no rule are skipped.  A repeated key
    keeps its last value at the position of its first occurrence.
    """
    parser = _Parser()
    # Only "\n" ends a line; other Unicode line breaks are value text.
    for lineno, line in enumerate(text.split("\n"), start=1):
        parser.feed(lineno, line.removesuffix("\r"))
    parser.flush()
    return parser.document


# ---------------------------------------------------------------------------
# Serializer
# ---------------------------------------------------------------------------


def format_string(text: str) -> str:
    """Format a single-line string, quoting only when needed.

    Text already wrapped in matching quotes is emitted unchanged.
    """
    if _is_wrapped(text):
        return text
    if (
        not text
        or text != text.strip()
        or _NEEDS_QUOTES.search(text)
        or parse_scalar(text) != String(text)
    ):
        escaped = text.replace('"', '\\"')
        return f'"{escaped}"'
    return text


def format_item(value: Value) -> str:
    """Format a value as it appears after ``- `` or inside ``[...]``."""
    match value:
        case Null():
            return "null"
        case EmptyMarker():
            return ""
        case Bool(flag):
            return "true" if flag else "false"
        case Number(number):
            return format_number(number)
        case String(text):
            return format_string(text)
        case List(items):
            return "[" + ", ".join(format_item(item) for item in items) + "]"


def _render_entry(key: str, value: Value) -> list[str]:
    match value:
        case Null():
            return [f"{key}: null"]
        case EmptyMarker():
            return [f"{key}: "]
        case Bool() | Number():
            return [f"{key}: {format_item(value)}"]
        case List(items) if not items:
            return [f"{key}: []"]
        case List(items):
            return [f"{key}:", *(f"  - {format_item(item)}" for item in items)]
        case String(text) if "\n" in text:
            body = [f"{_LITERAL_INDENT}{line}" if line else "" for line in text.split("\n")]
            return [f"{key}: {_LITERAL_MARKER}", *body]
        case String(text):
            return [f"{key}: {format_string(text)}"]


def serialize(document: FrontmatterDocument) -> str:
    """Serialize *document* in key order with a trailing newline.

    An empty document serializes to the empty string.
    """
    lines: list[str] = []
    for key, value in document.items():
        lines.extend(_render_entry(key, value))
    if not lines:
        return ""
    return "\n".join(lines) + "\n"
