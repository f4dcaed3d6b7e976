"""Frontmatter value model — a closed tagged union.

Every frontmatter entry holds exactly one of six variants:

- :class:`Null` — ``key: null`` / ``key: ~``
- :class:`Bool` — ``true`` / ``false``
- :class:`Number` — integers and decimals, stored as ``float``
- :class:`String` — plain, quoted, or ``|`` literal text
- :class:`List` — dash or inline sequences (items may nest)
- :class:`EmptyMarker` — ``key:`` with nothing after the colon

``EmptyMarker`` is distinct from both ``Null`` and the empty list and
must round-trip as written.  Consumers ``match`` on the variants so that
every case is handled explicitly.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Null:
    """Explicit null."""


@dataclass(frozen=True)
class Bool:
    value: bool


@dataclass(frozen=True)
class Number:
    value: float


@dataclass(frozen=True)
class String:
    value: str


@dataclass(frozen=True)
class List:
    """Ordered sequence of values."""

    items: tuple[Value, ...] = ()


@dataclass(frozen=True)
class EmptyMarker:
    """A key written with no value."""


Value = Null | Bool | Number | String | List | EmptyMarker

# Ordered key -> value mapping (dicts preserve insertion order).
FrontmatterDocument = dict[str, Value]

NULL = Null()
EMPTY = EmptyMarker()


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def is_empty(value: Value) -> bool:
    """Whether *value* carries no content (null, empty marker, or ``""``)."""
    match value:
        case Null() | EmptyMarker():
            return True
        case String(text):
            return text == ""
        case Bool() | Number() | List():
            return False


def is_array_like(value: Value) -> bool:
    """Whether *value* takes part in list concatenation during a merge.

    Empty values count as an empty list for this purpose only.
    """
    match value:
        case List():
            return True
        case _:
            return is_empty(value)


# ---------------------------------------------------------------------------
# Conversions
# ---------------------------------------------------------------------------


def format_number(number: float) -> str:
    """Render a number the way it was most likely written.

    Integral values drop the fractional part (``3.0`` -> ``3``).
    """
    if number.is_integer():
        return str(int(number))
    return repr(number)


def canonical(value: Value) -> str:
    """Canonical string form used for structural equality of list items.

    Types are kept apart, so ``"1"`` and ``1`` are different items.
    """
    match value:
        case Null() | EmptyMarker():
            return "null"
        case Bool(flag):
            return "true" if flag else "false"
        case Number(number):
            return format_number(number)
        case String(text):
            return json.dumps(text, ensure_ascii=False)
        case List(items):
            return "[" + ",".join(canonical(item) for item in items) + "]"


def to_python(value: Value) -> Any:
    """Convert *value* to plain Python data (for JSON output and tests).

    ``EmptyMarker`` becomes ``""`` and integral numbers become ``int``.
    """
    match value:
        case Null():
            return None
        case EmptyMarker():
            return ""
        case Bool(flag):
            return flag
        case Number(number):
            return int(number) if number.is_integer() else number
        case String(text):
            return text
        case List(items):
            return [to_python(item) for item in items]


def document_to_python(document: FrontmatterDocument) -> dict[str, Any]:
    """Convert a whole document with :func:`to_python`."""
    return {key: to_python(value) for key, value in document.items()}
