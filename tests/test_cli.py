"""Integration tests for iconlink CLI."""

import json
from pathlib import Path

import yaml
from typer.testing import CliRunner

from iconlink.cli import app


runner = CliRunner()


def _write_cache(path: Path, icons: dict) -> None:
    path.write_text(json.dumps({"version": 1, "icons": icons}), encoding="utf-8")


class TestCLI:
    """Integration tests for CLI commands."""

    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "cache" in result.stdout
        assert "table" in result.stdout

    def test_table_list_files(self):
        result = runner.invoke(app, ["table", "list"])
        assert result.exit_code == 0
        assert "icon-js" in result.stdout

    def test_table_list_directories(self):
        result = runner.invoke(app, ["table", "list", "--directories"])
        assert result.exit_code == 0
        assert "icon-file-directory" in result.stdout
        assert "icon-js" not in result.stdout

    def test_table_list_invalid_table(self, tmp_path: Path):
        bad = tmp_path / "icons.yaml"
        bad.write_text("version: 3\n", encoding="utf-8")
        result = runner.invoke(app, ["table", "list", "--table", str(bad)])
        assert result.exit_code == 1
        assert "Invalid icon table" in result.stdout

    def test_cache_show_empty(self, tmp_path: Path):
        result = runner.invoke(app, ["cache", "show", "--cache", str(tmp_path / "cache.json")])
        assert result.exit_code == 0
        assert "empty" in result.stdout

    def test_cache_show_entries(self, tmp_path: Path):
        cache = tmp_path / "cache.json"
        _write_cache(cache, {"/a/b.js": [10, 0, "icon-js"]})
        result = runner.invoke(app, ["cache", "show", "--cache", str(cache)])
        assert result.exit_code == 0
        assert "/a/b.js" in result.stdout
        assert "icon-js" in result.stdout

    def test_cache_prune(self, tmp_path: Path):
        cache = tmp_path / "cache.json"
        _write_cache(cache, {"/a/b.js": [10, 0, "icon-js"], "/a/old.js": [10, 0, "gone-icon"]})

        dry = runner.invoke(app, ["cache", "prune", "--cache", str(cache), "--dry-run"])
        assert dry.exit_code == 0
        assert "/a/old.js" in dry.stdout
        assert "/a/old.js" in json.loads(cache.read_text(encoding="utf-8"))["icons"]

        result = runner.invoke(app, ["cache", "prune", "--cache", str(cache)])
        assert result.exit_code == 0
        assert "Pruned 1 entry" in result.stdout
        icons = json.loads(cache.read_text(encoding="utf-8"))["icons"]
        assert list(icons) == ["/a/b.js"]

    def test_cache_clear(self, tmp_path: Path):
        cache = tmp_path / "cache.json"
        _write_cache(cache, {"/a/b.js": [10, 0, "icon-js"]})
        result = runner.invoke(app, ["cache", "clear", "--cache", str(cache)])
        assert result.exit_code == 0
        assert json.loads(cache.read_text(encoding="utf-8"))["icons"] == {}

    def test_config_set_and_show(self, tmp_path: Path):
        options = tmp_path / "options.yaml"
        result = runner.invoke(app, ["config", "set-colour-mode", "dark", "--options", str(options)])
        assert result.exit_code == 0
        assert yaml.safe_load(options.read_text(encoding="utf-8"))["colour_mode"] == 1

        result = runner.invoke(app, ["config", "set-default-icon", "plain-file", "--options", str(options)])
        assert result.exit_code == 0

        shown = runner.invoke(app, ["config", "show", "--options", str(options)])
        assert shown.exit_code == 0
        assert "dark" in shown.stdout
        assert "plain-file" in shown.stdout

    def test_config_rejects_unknown_colour_mode(self, tmp_path: Path):
        options = tmp_path / "options.yaml"
        result = runner.invoke(app, ["config", "set-colour-mode", "neon", "--options", str(options)])
        assert result.exit_code == 1
        assert not options.exists()

    def test_verbose_flag(self, tmp_path: Path):
        result = runner.invoke(app, ["--verbose", "cache", "show", "--cache", str(tmp_path / "c.json")])
        assert result.exit_code == 0
