"""Shared pytest fixtures and test helpers for fmchain tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from fmchain.domain.chain import TemplateMapping, normalize_mappings
from fmchain.infrastructure.vault import Vault

ROOT_TEMPLATE = "---\ntype: note\ntags: [base]\n---\n"
PROJECT_TEMPLATE = "---\nstatus: active\ntags: [project]\n---\n## Tasks\n"
WEB_TEMPLATE = "---\ntags: [web]\ndelete: [status]\n---\n"

RAW_MAPPINGS: dict[str, Any] = {
    "": "Templates/root.md",
    "Projects": "Templates/project.md",
    "Projects/Web": {"template_path": "Templates/web.md", "exclude_patterns": ["README.md"]},
}

CONFIG_TOML = """\
[mappings]
"" = "Templates/root.md"
"Projects" = "Templates/project.md"
"Projects/Web" = { template_path = "Templates/web.md", exclude_patterns = ["README.md"] }
"""


def _write(root: Path, relative: str, content: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment out of config discovery."""
    monkeypatch.delenv("FMCHAIN_CONFIG", raising=False)


@pytest.fixture
def write_doc(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a vault-relative file under ``tmp_path``."""

    def write(relative: str, content: str) -> Path:
        return _write(tmp_path, relative, content)

    return write


@pytest.fixture
def vault_root(tmp_path: Path) -> Path:
    """Temporary vault with a three-level template set.

    - ``Templates/root.md``: ``type`` and ``tags: [base]``
    - ``Templates/project.md``: ``status``, ``tags: [project]`` and a body
    - ``Templates/web.md``: ``tags: [web]`` and ``delete: [status]``
    """
    _write(tmp_path, "Templates/root.md", ROOT_TEMPLATE)
    _write(tmp_path, "Templates/project.md", PROJECT_TEMPLATE)
    _write(tmp_path, "Templates/web.md", WEB_TEMPLATE)
    return tmp_path


@pytest.fixture
def vault(vault_root: Path) -> Vault:
    return Vault(vault_root)


@pytest.fixture
def mappings() -> dict[str, TemplateMapping]:
    return normalize_mappings(RAW_MAPPINGS)


@pytest.fixture
def configured_vault(vault_root: Path) -> Path:
    """Vault root with an ``fmchain.toml`` holding the standard mappings."""
    _write(vault_root, "fmchain.toml", CONFIG_TOML)
    return vault_root
