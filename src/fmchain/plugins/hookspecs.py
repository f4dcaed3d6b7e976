"""Pluggy hook specifications for template application events.

Hooks are notifications only: their return values are ignored and a
failing plugin never changes the outcome of an application.
"""

from __future__ import annotations

import pluggy

PROJECT_NAME = "fmchain"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class FmchainHookSpec:
    """Hook specifications for the fmchain plugin system."""

    @hookspec
    def post_apply(
        self,
        path: str,
        templates: list[str],
        conflicts: list[str],
        added: list[str],
    ) -> None:
        """Called after a template chain was applied to a document."""

    @hookspec
    def template_missing(self, path: str, template: str) -> None:
        """Called when a chain item's template could not be loaded."""
