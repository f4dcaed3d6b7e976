"""Tests for operation-specific Rich renderers."""

from __future__ import annotations

from fmchain.output.renderers import render_quiet, render_result
from fmchain.services.result import ServiceError, ServiceResult


def _flat(text: str) -> str:
    """Collapse whitespace runs so assertions ignore column padding."""
    return " ".join(text.split())


def _flat_render(result: ServiceResult, *, verbose: bool = False) -> str:
    return _flat(render_result(result, verbose=verbose))


CHAIN_DATA = {
    "path": "Projects/Web/site.md",
    "templates": [
        {"path": "Templates/root.md", "folder_path": "", "depth": 0},
        {"path": "Templates/project.md", "folder_path": "Projects", "depth": 1},
    ],
    "has_inheritance": True,
}


class TestRenderQuiet:
    def test_ok(self) -> None:
        assert render_quiet(ServiceResult(ok=True, op="merge")) == "OK: merge"

    def test_error_without_payload(self) -> None:
        assert render_quiet(ServiceResult(ok=False, op="merge")) == "ERROR: merge - Unknown error"


class TestChainRenderer:
    def test_resolve_chain_table(self) -> None:
        output = _flat_render(ServiceResult(ok=True, op="resolve_chain", data=CHAIN_DATA))
        assert output.startswith("OK")
        assert "resolve_chain" in output
        assert "Projects/Web/site.md" in output
        assert "Templates/root.md" in output
        assert "Templates/project.md" in output
        assert "Depth" in output
        assert "Status" not in output

    def test_load_chain_shows_missing(self) -> None:
        data = dict(
            CHAIN_DATA,
            missing=[{"path": "Templates/web.md", "folder_path": "Projects/Web", "depth": 2}],
            configured=3,
        )
        output = _flat_render(ServiceResult(ok=True, op="load_chain", data=data))
        assert "Status" in output
        assert "missing" in output
        assert "loaded" in output
        assert "Templates/web.md" in output

    def test_no_template(self) -> None:
        data = {"path": "a.md", "templates": [], "has_inheritance": False}
        output = _flat_render(ServiceResult(ok=True, op="resolve_chain", data=data))
        assert "no template configured" in output


class TestTemplatesRenderer:
    def test_table(self) -> None:
        data = {
            "items": [
                {"folder": "", "template_path": "T/root.md", "exclude_patterns": [], "exists": True},
                {"folder": "Web", "template_path": "T/web.md", "exclude_patterns": ["README.md"], "exists": False},
            ],
            "count": 2,
            "available": ["T/root.md"],
        }
        output = _flat_render(ServiceResult(ok=True, op="list_templates", data=data))
        assert "T/web.md" in output
        assert "README.md" in output
        assert "2 mappings" in output
        assert "available templates" in output

    def test_empty(self) -> None:
        data = {"items": [], "count": 0, "available": []}
        output = _flat_render(ServiceResult(ok=True, op="list_templates", data=data))
        assert "no mappings configured" in output


class TestApplyRenderers:
    def test_apply_template(self) -> None:
        data = {
            "path": "Projects/plan.md",
            "templates": ["Templates/root.md"],
            "conflicts": ["tags"],
            "added": [],
            "changed": True,
        }
        output = _flat_render(ServiceResult(ok=True, op="apply_template", data=data))
        assert "Projects/plan.md" in output
        assert "conflicts: tags" in output
        assert "added: -" in output
        assert "changed: True" in output

    def test_dry_run_content_panel(self) -> None:
        data = {
            "path": "a.md",
            "templates": [],
            "conflicts": [],
            "added": ["type"],
            "changed": True,
            "content": "---\ntype: note\n---\n",
        }
        output = _flat_render(ServiceResult(ok=True, op="apply_template", data=data, meta={"dry_run": True}))
        assert "type: note" in output

    def test_verbose_meta(self) -> None:
        data = {"path": "a.md", "templates": [], "conflicts": [], "added": [], "changed": False}
        result = ServiceResult(ok=True, op="apply_template", data=data, meta={"dry_run": False})
        assert "dry_run: False" in _flat_render(result, verbose=True)
        assert "dry_run" not in _flat_render(result)

    def test_apply_folder(self) -> None:
        data = {
            "folder": "Projects",
            "processed": ["Projects/a.md"],
            "skipped": ["Projects/b.md"],
            "failed": [],
            "items": [
                {"path": "Projects/a.md", "ok": True, "conflicts": [], "added": ["type"], "changed": True},
                {"path": "Projects/b.md", "ok": False, "code": "NO_TEMPLATE_CONFIGURED"},
            ],
        }
        output = _flat_render(ServiceResult(ok=True, op="apply_folder", data=data))
        assert "processed: 1" in output
        assert "skipped: 1" in output
        assert "changed" in output
        assert "skipped" in output

    def test_batch_failure_lists_items(self) -> None:
        data = {
            "folder": "Projects",
            "processed": [],
            "skipped": [],
            "failed": ["Projects/bad.md"],
            "items": [{"path": "Projects/bad.md", "ok": False, "code": "UNKNOWN", "message": "Failed to process"}],
        }
        result = ServiceResult(
            ok=False,
            op="apply_folder",
            data=data,
            error=ServiceError(code="BATCH_FAILED", message="1 of 1 document(s) failed"),
        )
        output = _flat_render(result)
        assert output.startswith("ERROR")
        assert "1 of 1 document(s) failed" in output
        assert "Projects/bad.md" in output


class TestMergeRenderer:
    def test_merge(self) -> None:
        data = {"text": "title: B\n", "merged": {"title": "B"}, "conflicts": ["title"], "added": []}
        output = _flat_render(ServiceResult(ok=True, op="merge", data=data))
        assert "conflicts: title" in output
        assert "title: B" in output


class TestErrorRenderer:
    def test_error_line(self) -> None:
        result = ServiceResult(
            ok=False,
            op="apply_template",
            error=ServiceError(code="FILE_NOT_FOUND", message="File not found: a.md", detail={"path": "a.md"}),
        )
        output = _flat_render(result)
        assert output == "ERROR apply_template - File not found: a.md"

    def test_verbose_detail(self) -> None:
        result = ServiceResult(
            ok=False,
            op="apply_template",
            error=ServiceError(code="FILE_NOT_FOUND", message="File not found: a.md", detail={"path": "a.md"}),
        )
        assert "path: a.md" in _flat_render(result, verbose=True)


class TestGenericRenderer:
    def test_unknown_op(self) -> None:
        output = _flat_render(ServiceResult(ok=True, op="custom", data={"count": 2, "nested": {"a": 1}}))
        assert "count: 2" in output
        assert 'nested: {"a":1}' in output
