from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import typer

from keydiff.config import CompareConfig, load_config, parse_key_option
from keydiff.core.compare import compare
from keydiff.core.constants import DEFAULT_CONFIG_FILE, EXIT_DIFFERENCES, EXIT_INTERNAL_ERROR, EXIT_SUCCESS
from keydiff.core.errors import ConfigurationError
from keydiff.core.models import make_difference
from keydiff.core.registry import KeyProviderRegistry
from keydiff.plugins import load_plugin_providers
from keydiff.report import REPORT_FORMATS, render_report, write_report

logger = logging.getLogger(__name__)


def _version_callback(value: bool) -> None:
    if value:
        from keydiff import __version__

        typer.echo(f"keydiff {__version__}")
        raise typer.Exit()


app = typer.Typer(add_completion=False, help="Structural diff of nested records, collections, and mappings")


@app.callback(invoke_without_command=True)
def _main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Print version and exit."
    ),
) -> None:
    pass


def _load_document(path: Path) -> Any:
    if not path.exists():
        raise ValueError(f"Input file not found: {path}")
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in {".yaml", ".yml"}:
        import yaml

        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc


def _resolve_config(config_path: Path | None) -> CompareConfig:
    if config_path is not None:
        return load_config(config_path)
    default_path = Path(DEFAULT_CONFIG_FILE)
    if default_path.exists():
        logger.debug("using config file %s", default_path.resolve())
        return load_config(default_path)
    return CompareConfig()


def _build_registry(config: CompareConfig, key_options: list[str]) -> KeyProviderRegistry:
    registry = load_plugin_providers().merged(config.key_providers)
    for option in key_options:
        element_type, provider = parse_key_option(option)
        registry.register(element_type, provider)
    return registry


@app.command("compare")
def compare_command(
    expected: Path = typer.Argument(..., help="Expected document (JSON, or YAML by .yaml/.yml suffix)"),
    actual: Path = typer.Argument(..., help="Actual document (JSON, or YAML by .yaml/.yml suffix)"),
    config_path: Path | None = typer.Option(
        None, "--config", help=f"Config file (defaults to ./{DEFAULT_CONFIG_FILE} when present)"
    ),
    key: list[str] | None = typer.Option(None, "--key", help="Key provider as TYPE=FIELD[,FIELD...], e.g. dict=id"),
    fmt: str = typer.Option("text", "--format", help=f"Output format: {', '.join(REPORT_FORMATS)}"),
    output: Path | None = typer.Option(None, "--output", help="Write the report to a file instead of stdout"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """Compare two documents and report every difference by path."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    if fmt not in REPORT_FORMATS:
        typer.echo(f"ERROR: Unsupported format '{fmt}'. Choose one of: {', '.join(REPORT_FORMATS)}", err=True)
        raise typer.Exit(EXIT_INTERNAL_ERROR)

    try:
        registry = _build_registry(_resolve_config(config_path), list(key or []))
        expected_doc = _load_document(expected)
        actual_doc = _load_document(actual)
        differences = compare(expected_doc, actual_doc, registry, make_difference)
    except (ConfigurationError, OSError, ValueError) as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(EXIT_INTERNAL_ERROR) from exc

    title = f"{expected.name} vs {actual.name}"
    if output is not None:
        write_report(output, fmt, title, differences)
        typer.echo(f"Report written: {output}")
    else:
        typer.echo(render_report(fmt, title, differences), nl=False)

    raise typer.Exit(EXIT_DIFFERENCES if differences else EXIT_SUCCESS)


__all__ = ["app"]
