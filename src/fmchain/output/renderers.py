"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from fmchain.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from fmchain.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} - {msg}"
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="fm.ok")
    op = Text(f"  {result.op}", style="fm.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="fm.key")
    if isinstance(value, list):
        value = ", ".join(str(v) for v in value) if value else "-"
    if key in ("path", "folder"):
        v = Text(str(value), style="fm.path")
    elif key == "conflicts":
        v = Text(str(value), style="fm.conflict")
    elif key == "added":
        v = Text(str(value), style="fm.added")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the meta block (verbose only)."""
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(Text(f"    {k}: {v}"))


def _render_content(console: Console, title: str, content: str) -> None:
    console.print(Panel(Text(content.rstrip("\n")), title=title, border_style="dim", expand=False))


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="fm.error")
    op = Text(f"  {result.op}", style="fm.op")
    console.print(label, op, Text(" - "), Text(msg))

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))

    if result.op == "apply_folder" and result.data.get("items"):
        console.print(_batch_table(result.data["items"]))


# ── Chain renderers ───────────────────────────────────────────────────


def _render_chain(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render resolve_chain / load_chain as a root-to-leaf table."""
    d = result.data
    _status_line(console, result)
    _field(console, "path", d.get("path", ""))
    _field(console, "has_inheritance", d.get("has_inheritance", False))

    rows: list[tuple[dict[str, Any], str]] = [(item, "loaded") for item in d.get("templates", [])]
    rows.extend((item, "missing") for item in d.get("missing", []))
    if not rows:
        console.print(Text("  no template configured", style="dim"))
        return

    show_status = result.op == "load_chain"
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Depth", justify="right")
    table.add_column("Folder", style="fm.path")
    table.add_column("Template", style="fm.template")
    if show_status:
        table.add_column("Status")
    for item, status in sorted(rows, key=lambda row: row[0].get("depth", 0)):
        row: list[Any] = [
            str(item.get("depth", "")),
            item.get("folder_path") or "/",
            str(item.get("path", "")),
        ]
        if show_status:
            row.append(Text(status, style="fm.missing" if status == "missing" else "fm.ok"))
        table.add_row(*row)
    console.print(table)
    if verbose:
        _render_meta(console, result)


def _render_templates(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the configured folder mappings."""
    items = result.data.get("items", [])
    if not items:
        _status_line(console, result)
        console.print(Text("  no mappings configured", style="dim"))
        _render_available(console, result)
        return
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Folder", style="fm.path")
    table.add_column("Template", style="fm.template")
    table.add_column("Exclude")
    table.add_column("Exists")
    for item in items:
        exists = bool(item.get("exists"))
        table.add_row(
            item.get("folder") or "/",
            str(item.get("template_path", "")),
            ", ".join(item.get("exclude_patterns", [])),
            Text("yes" if exists else "no", style="fm.ok" if exists else "fm.missing"),
        )
    console.print(table)
    console.print(f"\n{len(items)} mappings")
    _render_available(console, result)


def _render_available(console: Console, result: ServiceResult) -> None:
    available = result.data.get("available", [])
    if not available:
        return
    console.print()
    console.print(Text("  available templates:", style="fm.key"))
    for path in available:
        console.print(Text(f"    {path}", style="fm.template"))


# ── Apply renderers ───────────────────────────────────────────────────


def _render_apply(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    for key in ("path", "templates", "conflicts", "added", "changed"):
        if key in d:
            _field(console, key, d[key])
    if "content" in d:
        console.print()
        _render_content(console, str(d.get("path", "preview")), d["content"])
    if verbose:
        _render_meta(console, result)


def _batch_table(items: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Path", style="fm.path")
    table.add_column("Result")
    table.add_column("Conflicts")
    table.add_column("Added")
    for item in items:
        if item.get("ok"):
            status = Text("changed" if item.get("changed") else "unchanged", style="fm.ok")
        elif item.get("code") == "NO_TEMPLATE_CONFIGURED":
            status = Text("skipped", style="dim")
        else:
            status = Text(str(item.get("message", "failed")), style="fm.error")
        table.add_row(
            str(item.get("path", "")),
            status,
            ", ".join(item.get("conflicts", [])),
            ", ".join(item.get("added", [])),
        )
    return table


def _render_apply_folder(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "folder", d.get("folder") or "/")
    _field(console, "processed", len(d.get("processed", [])))
    _field(console, "skipped", len(d.get("skipped", [])))
    _field(console, "failed", len(d.get("failed", [])))
    items = d.get("items", [])
    if items and (verbose or len(items) <= 50):
        console.print()
        console.print(_batch_table(items))
    if verbose:
        _render_meta(console, result)


# ── Merge renderer ────────────────────────────────────────────────────


def _render_merge(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "conflicts", d.get("conflicts", []))
    _field(console, "added", d.get("added", []))
    console.print()
    _render_content(console, "merged", f"---\n{d.get('text', '')}---")


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, dict):
            value = json.dumps(value, separators=(",", ":"))
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "resolve_chain": _render_chain,
    "load_chain": _render_chain,
    "list_templates": _render_templates,
    "apply_template": _render_apply,
    "apply_folder": _render_apply_folder,
    "merge": _render_merge,
}
