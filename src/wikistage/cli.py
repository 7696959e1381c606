"""CLI interface for Wikistage.

Command-line tool for serving the wiki and inspecting stored pages.
"""

import logging
import sys
from pathlib import Path
from typing import NoReturn

import click

from wikistage.config import Config
from wikistage.core.page import PageStore
from wikistage.core.paths import is_valid_title
from wikistage.core.templates import TemplateLoadError
from wikistage.core.types import Title

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover wikistage.toml)",
)

data_dir_option = click.option(
    "--data-dir",
    "-d",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Page data directory (overrides config)",
)


@click.group()
def cli() -> None:
    """Wikistage - a minimal wiki backed by plain text files."""


@cli.command()
@config_option
@data_dir_option
@click.option(
    "--templates-dir",
    "-t",
    type=click.Path(exists=True, path_type=Path, file_okay=False),
    default=None,
    help="Directory containing view.html and edit.html (overrides config)",
)
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging",
)
def serve(
    config_path: Path | None,
    data_dir: Path | None,
    templates_dir: Path | None,
    host: str | None,
    port: int | None,
    verbose: bool,
) -> None:
    """Start the wiki server."""
    from wikistage.server import run_server

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    config = _load_config(config_path).with_overrides(
        host=host,
        port=port,
        data_dir=data_dir,
        templates_dir=templates_dir,
    )
    config.wiki.data_dir.mkdir(parents=True, exist_ok=True)

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Data directory: {config.wiki.data_dir}")
    if config.wiki.templates_dir is not None:
        click.echo(f"Templates directory: {config.wiki.templates_dir}")

    try:
        run_server(config)
    except TemplateLoadError as e:
        _fail(str(e))


@cli.command()
@click.argument("title")
@config_option
@data_dir_option
def show(title: str, config_path: Path | None, data_dir: Path | None) -> None:
    """Print the body of a stored page."""
    if not is_valid_title(title):
        _fail(f"Invalid page title: {title!r} (letters and digits only)")

    store = _create_store(config_path, data_dir)
    try:
        page = store.load(Title(title))
    except OSError:
        _fail(f"Page not found: {title}")

    stdout = click.get_binary_stream("stdout")
    stdout.write(page.body)
    stdout.flush()


@cli.command(name="list")
@config_option
@data_dir_option
def list_pages(config_path: Path | None, data_dir: Path | None) -> None:
    """List stored page titles."""
    store = _create_store(config_path, data_dir)
    for title in store.titles():
        click.echo(title)


def _load_config(config_path: Path | None) -> Config:
    try:
        return Config.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))


def _create_store(config_path: Path | None, data_dir: Path | None) -> PageStore:
    config = _load_config(config_path).with_overrides(data_dir=data_dir)
    return PageStore(config.wiki.data_dir)


def _fail(message: str) -> NoReturn:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(1)
