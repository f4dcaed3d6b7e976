"""Tests for PluginManager — registration, hook relay, and notify."""

from __future__ import annotations

import logging

import pytest

from fmchain.plugins import PluginManager, hookimpl


class _DummyPlugin:
    """Minimal plugin for registration tests."""

    @hookimpl
    def post_apply(self, path: str) -> None:
        pass


class _Recorder:
    def __init__(self) -> None:
        self.calls: list[dict] = []

    @hookimpl
    def post_apply(self, path: str, templates: list[str], conflicts: list[str], added: list[str]) -> None:
        self.calls.append({"path": path, "templates": templates, "conflicts": conflicts, "added": added})


class _Failing:
    @hookimpl
    def template_missing(self, path: str, template: str) -> None:
        raise RuntimeError("plugin bug")


class TestPluginManager:
    """Tests for the PluginManager class."""

    @pytest.mark.parametrize("hook_name", ["post_apply", "template_missing"])
    def test_hookspecs_registered(self, hook_name: str) -> None:
        assert hasattr(PluginManager().hook, hook_name)

    def test_register_plugin(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_DummyPlugin(), name="dummy")
        assert "dummy" in pm.list_plugin_names()

    def test_register_plugin_default_name(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_DummyPlugin())
        assert "_DummyPlugin" in pm.list_plugin_names()

    def test_unregister_plugin(self) -> None:
        pm = PluginManager()
        plugin = _DummyPlugin()
        pm.register_plugin(plugin, name="dummy")
        pm.unregister(plugin)
        assert "dummy" not in pm.list_plugin_names()

    def test_is_loaded(self) -> None:
        pm = PluginManager()
        assert pm.is_loaded is False
        names = pm.discover_and_load()
        assert pm.is_loaded is True
        assert isinstance(names, list)


class TestNotify:
    def test_dispatches_kwargs(self) -> None:
        pm = PluginManager()
        recorder = _Recorder()
        pm.register_plugin(recorder)
        warnings: list[str] = []
        pm.notify("post_apply", warnings, path="a.md", templates=["T/r.md"], conflicts=[], added=["type"])
        assert recorder.calls == [{"path": "a.md", "templates": ["T/r.md"], "conflicts": [], "added": ["type"]}]
        assert warnings == []

    def test_no_plugins_is_noop(self) -> None:
        warnings: list[str] = []
        PluginManager().notify("template_missing", warnings, path="a.md", template="T/r.md")
        assert warnings == []

    def test_failure_becomes_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        pm = PluginManager()
        pm.register_plugin(_Failing())
        warnings: list[str] = []
        with caplog.at_level(logging.WARNING, logger="fmchain"):
            pm.notify("template_missing", warnings, path="a.md", template="T/r.md")
        assert warnings == ["Plugin hook template_missing failed"]
        assert "Plugin hook template_missing failed" in caplog.text
