"""Tests for the templates command and configuration errors."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from fmchain.cli import cli


class TestTemplatesCommand:
    def test_json(self, cli_runner: CliRunner, configured_vault: Path) -> None:
        result = cli_runner.invoke(cli, ["--vault", str(configured_vault), "--json", "templates"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)["data"]
        assert data["count"] == 3
        assert [item["folder"] for item in data["items"]] == ["", "Projects", "Projects/Web"]
        assert all(item["exists"] for item in data["items"])
        assert len(data["available"]) == 3

    def test_table(self, cli_runner: CliRunner, configured_vault: Path) -> None:
        result = cli_runner.invoke(cli, ["--vault", str(configured_vault), "templates"])
        assert result.exit_code == 0
        assert "Templates/web.md" in result.stdout
        assert "3 mappings" in result.stdout

    def test_missing_template_warns(self, cli_runner: CliRunner, configured_vault: Path) -> None:
        (configured_vault / "Templates" / "web.md").unlink()
        result = cli_runner.invoke(cli, ["--vault", str(configured_vault), "templates"])
        assert result.exit_code == 0
        assert "WARNING: Template not found: Templates/web.md" in result.stderr

    def test_custom_templates_folder(self, cli_runner: CliRunner, configured_vault: Path) -> None:
        with (configured_vault / "fmchain.toml").open("a") as fh:
            fh.write('\n[templates]\nfolder = "Layouts"\n')
        result = cli_runner.invoke(cli, ["--vault", str(configured_vault), "--json", "templates"])
        assert json.loads(result.stdout)["data"]["available"] == []


class TestConfigErrors:
    def test_invalid_mapping(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "fmchain.toml").write_text('[mappings]\n"" = "Templates/root.txt"\n')
        result = cli_runner.invoke(cli, ["--vault", str(tmp_path), "templates"])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_invalid_toml(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "fmchain.toml").write_text("[mappings\n")
        result = cli_runner.invoke(cli, ["--vault", str(tmp_path), "templates"])
        assert result.exit_code == 1
        assert "Invalid TOML" in result.output

    def test_explicit_config_flag(self, cli_runner: CliRunner, vault_root: Path) -> None:
        config = vault_root / "custom.toml"
        config.write_text('[mappings]\n"" = "Templates/root.md"\n')
        result = cli_runner.invoke(
            cli, ["--vault", str(vault_root), "-c", str(config), "--json", "templates"]
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["data"]["count"] == 1
