"""Tests for the colsieve CLI."""

import logging
from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from colsieve.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """validate reconfigures logging onto CliRunner's stderr; undo that."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


def _write_settings(tmp_path: Path, options: str, plugin: str = "remove_columns") -> Path:
    path = tmp_path / "settings.yaml"
    path.write_text(
        f"""\
input_schema:
  - "id: int"
  - "name: text"
  - "score: double"
logging:
  level: ERROR
filter:
  plugin: {plugin}
  options:
{options}
""",
        encoding="utf-8",
    )
    return path


class TestCLIBasics:
    def test_version_flag(self) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "colsieve version" in result.output

    def test_help_lists_commands(self) -> None:
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "validate" in result.output
        assert "plugins" in result.output


class TestValidateCommand:
    def test_prints_negotiated_schema(self, tmp_path: Path) -> None:
        settings = _write_settings(tmp_path, "    remove: [name]")

        result = runner.invoke(app, ["validate", "--settings", str(settings)])

        assert result.exit_code == 0, result.output
        document = yaml.safe_load(result.stdout)
        assert document == {
            "input_schema": ["id: long", "name: string", "score: double"],
            "output_schema": ["id: long", "score: double"],
        }

    def test_keep_with_unmatched_accepted(self, tmp_path: Path) -> None:
        settings = _write_settings(tmp_path, "    keep: [ghost]\n    accept_unmatched_columns: true")

        result = runner.invoke(app, ["validate", "-s", str(settings)])

        assert result.exit_code == 0, result.output
        assert yaml.safe_load(result.stdout)["output_schema"] == []

    def test_filter_option_from_environment(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        settings = _write_settings(tmp_path, "    remove: [name, ghost]")
        monkeypatch.setenv("COLSIEVE_FILTER__OPTIONS__ACCEPT_UNMATCHED_COLUMNS", "true")

        result = runner.invoke(app, ["validate", "-s", str(settings)])

        assert result.exit_code == 0, result.output
        assert yaml.safe_load(result.stdout)["output_schema"] == ["id: long", "score: double"]

    def test_unknown_column_fails(self, tmp_path: Path) -> None:
        settings = _write_settings(tmp_path, "    remove: [ghost]")

        result = runner.invoke(app, ["validate", "-s", str(settings)])

        assert result.exit_code == 1
        assert "Column 'ghost' doesn't exist in the schema" in result.output

    def test_both_lists_fail(self, tmp_path: Path) -> None:
        settings = _write_settings(tmp_path, "    remove: [name]\n    keep: [id]")

        result = runner.invoke(app, ["validate", "-s", str(settings)])

        assert result.exit_code == 1
        assert "multi-select" in result.output

    def test_unknown_plugin_fails(self, tmp_path: Path) -> None:
        settings = _write_settings(tmp_path, "    remove: [name]", plugin="rename_columns")

        result = runner.invoke(app, ["validate", "-s", str(settings)])

        assert result.exit_code == 1
        assert "Unknown filter plugin" in result.output

    def test_missing_settings_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["validate", "-s", str(tmp_path / "nope.yaml")])

        assert result.exit_code == 1
        assert "Settings file not found" in result.output

    def test_invalid_settings(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text('input_schema: ["id: uuid"]\nfilter:\n  plugin: remove_columns\n', encoding="utf-8")

        result = runner.invoke(app, ["validate", "-s", str(path)])

        assert result.exit_code == 1
        assert "Invalid settings" in result.output


class TestPluginsCommand:
    def test_lists_remove_columns(self) -> None:
        result = runner.invoke(app, ["plugins", "list"])

        assert result.exit_code == 0
        assert "FILTERS:" in result.output
        assert "remove_columns" in result.output
