# src/colsieve/cli.py
"""colsieve Command Line Interface.

Entry point for the colsieve CLI tool.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import typer
import yaml
from dynaconf.vendor.ruamel.yaml.parser import ParserError as YamlParserError
from dynaconf.vendor.ruamel.yaml.scanner import ScannerError as YamlScannerError
from pydantic import ValidationError

from colsieve import __version__
from colsieve.contracts.errors import ConfigurationError
from colsieve.core.config import ColsieveSettings, load_settings
from colsieve.core.logging import configure_logging
from colsieve.core.pages import BufferAllocator
from colsieve.engine.runner import negotiate

if TYPE_CHECKING:
    from colsieve.plugins.manager import PluginManager

__all__ = ["app"]

_plugin_manager_cache: PluginManager | None = None


def _get_plugin_manager() -> PluginManager:
    """Get initialized plugin manager (singleton)."""
    global _plugin_manager_cache

    from colsieve.plugins.manager import PluginManager

    if _plugin_manager_cache is None:
        manager = PluginManager()
        manager.register_builtin_plugins()
        _plugin_manager_cache = manager
    return _plugin_manager_cache


app = typer.Typer(
    name="colsieve",
    help="colsieve: streaming column projection for typed record pages.",
    no_args_is_help=True,
)

plugins_app = typer.Typer(help="Plugin management commands.")
app.add_typer(plugins_app, name="plugins")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"colsieve version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """colsieve: streaming column projection for typed record pages."""


def _fail(title: str, message: str) -> typer.Exit:
    typer.secho(f"Error: {title}", fg=typer.colors.RED, err=True)
    typer.echo(message, err=True)
    return typer.Exit(1)


def _load(settings_path: Path) -> ColsieveSettings:
    try:
        return load_settings(settings_path)
    except FileNotFoundError as e:
        raise _fail("Settings file not found", str(e)) from e
    except (YamlParserError, YamlScannerError) as e:
        raise _fail("YAML syntax error", str(e)) from e
    except ValidationError as e:
        details = "\n".join(f"  - {'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors())
        raise _fail("Invalid settings", details) from e


@app.command()
def validate(
    settings: str = typer.Option(
        ...,
        "--settings",
        "-s",
        help="Path to settings YAML file.",
    ),
) -> None:
    """Validate configuration and print the negotiated output schema."""
    config = _load(Path(settings).expanduser())
    configure_logging(json_output=config.logging.json_output, level=config.logging.level)

    manager = _get_plugin_manager()
    try:
        plugin = manager.create_filter(config.filter.plugin, allocator=BufferAllocator(config.page_size))
    except ValueError as e:
        raise _fail("Unknown filter plugin", str(e)) from e

    input_schema = config.build_input_schema()
    try:
        _task, output_schema = negotiate(plugin, dict(config.filter.options), input_schema)
    except ConfigurationError as e:
        raise _fail("Invalid filter configuration", str(e)) from e

    typer.echo(
        yaml.safe_dump(
            {"input_schema": input_schema.to_specs(), "output_schema": output_schema.to_specs()},
            sort_keys=False,
            default_flow_style=False,
        ),
        nl=False,
    )


@plugins_app.command("list")
def plugins_list() -> None:
    """List available filter plugins."""
    specs = _get_plugin_manager().get_plugin_specs()

    typer.echo("\nFILTERS:")
    if not specs:
        typer.echo("  (none available)")
    for spec in specs:
        typer.echo(f"  {spec.name:20} - {spec.description}")
    typer.echo()
