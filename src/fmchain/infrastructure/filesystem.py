"""Filesystem operations for vault documents.

Paths handed to and from the domain layer are vault-relative strings
with ``/`` separators; this module converts them to real paths and
guards against escaping the vault root.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

# Directories never descended into while walking the vault.
_SKIP_DIRS = frozenset({".git", ".obsidian", ".trash", ".fmchain"})


class PathEscapesVaultError(ValueError):
    """A vault-relative path resolves outside the vault root."""


# ---------------------------------------------------------------------------
# Tree nodes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class File:
    path: str
    name: str

    @property
    def extension(self) -> str:
        return Path(self.name).suffix


@dataclass(frozen=True)
class Folder:
    path: str
    name: str


Node = File | Folder

# Visitor return value: False prunes a folder's subtree.
Visitor = Callable[[Node], bool | None]


# ---------------------------------------------------------------------------
# Path resolution
# ---------------------------------------------------------------------------


def to_relative(root: Path, path: Path) -> str:
    """Vault-relative ``/`` path for *path* (root itself is ``""``)."""
    relative = path.resolve().relative_to(root.resolve())
    posix = relative.as_posix()
    return "" if posix == "." else posix


def resolve_vault_path(root: Path, relative: str) -> Path:
    """Resolve a vault-relative path, refusing anything outside *root*."""
    result = root / relative.strip("/")
    root_resolved = root.resolve()
    if not result.resolve().is_relative_to(root_resolved):
        msg = f"Path escapes vault root: {relative}"
        raise PathEscapesVaultError(msg)
    return result


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------


def read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def write_text(path: Path, content: str) -> None:
    """Write *content*, creating parent directories if needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------


def walk(root: Path, start: str, visit: Visitor, *, recursive: bool = True) -> None:
    """Depth-first walk under *start*, calling *visit* for every node.

    Entries are visited in name order.  Returning ``False`` from the
    visitor for a :class:`Folder` skips its contents.
    """
    directory = resolve_vault_path(root, start)
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        relative = to_relative(root, entry)
        if entry.is_dir():
            if entry.name in _SKIP_DIRS:
                continue
            descend = visit(Folder(path=relative, name=entry.name))
            if recursive and descend is not False:
                walk(root, relative, visit, recursive=recursive)
        elif entry.is_file():
            visit(File(path=relative, name=entry.name))


def find_documents(
    root: Path,
    start: str = "",
    *,
    recursive: bool = True,
    extensions: tuple[str, ...] = (".md",),
) -> list[str]:
    """Collect vault-relative paths of documents under *start*."""
    found: list[str] = []

    def visit(node: Node) -> bool | None:
        match node:
            case File(path=path) if node.extension in extensions:
                found.append(path)
            case File() | Folder():
                pass
        return None

    walk(root, start, visit, recursive=recursive)
    return found
