"""Delete lists — let descendant templates remove inherited keys.

A template may carry ``delete: [key, ...]``.  Listed keys are removed
from what the chain has accumulated so far and stay removed for deeper
templates, unless a template explicitly defines the key again.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from fmchain.domain.codec import parse, serialize
from fmchain.domain.values import FrontmatterDocument, List, String

DELETE_KEY = "delete"


@dataclass(frozen=True)
class DeleteListOutcome:
    processed_content: str
    new_delete_list: tuple[str, ...]


def delete_entries(document: FrontmatterDocument) -> list[str] | None:
    """Read the string entries of *document*'s ``delete`` key.

    Returns None when the key is missing, is not a list, or holds no
    strings.
    """
    match document.get(DELETE_KEY):
        case List(items):
            names = [item.value for item in items if isinstance(item, String)]
            return names or None
        case _:
            return None


def extract_delete_list(text: str) -> list[str] | None:
    return delete_entries(parse(text))


def explicit_keys(document: FrontmatterDocument) -> frozenset[str]:
    """Keys a template defines itself (everything but ``delete``)."""
    return frozenset(key for key in document if key != DELETE_KEY)


def strip_deleted(
    document: FrontmatterDocument,
    delete_list: Iterable[str],
    explicitly_defined: Iterable[str] = (),
) -> FrontmatterDocument:
    """Drop ``delete`` and every listed key that is not explicitly defined."""
    doomed = set(delete_list) - set(explicitly_defined)
    return {key: value for key, value in document.items() if key != DELETE_KEY and key not in doomed}


def apply_delete_list(
    text: str,
    delete_list: Iterable[str],
    explicitly_defined: Iterable[str] | None = None,
) -> str:
    return serialize(strip_deleted(parse(text), delete_list, explicitly_defined or ()))


def extend_delete_list(
    cumulative: Iterable[str],
    own_entries: Iterable[str] | None,
    explicitly_defined: Iterable[str],
) -> tuple[str, ...]:
    """Append *own_entries* that are neither explicit nor already listed."""
    result = list(cumulative)
    explicit = set(explicitly_defined)
    for name in own_entries or ():
        if name not in explicit and name not in result:
            result.append(name)
    return tuple(result)


def process_with_delete_list(text: str, cumulative: Iterable[str]) -> DeleteListOutcome:
    """Apply the running delete list to one template and extend it.

    Keys the template defines are exempt from deletion and are never
    added to the list by the template's own ``delete`` entries.
    """
    cumulative = tuple(cumulative)
    document = parse(text)
    explicit = explicit_keys(document)
    processed = strip_deleted(document, cumulative, explicit)
    new_list = extend_delete_list(cumulative, delete_entries(document), explicit)
    return DeleteListOutcome(processed_content=serialize(processed), new_delete_list=new_list)
