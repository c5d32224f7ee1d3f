"""Typer CLI: create EPUBs from WWW pages."""

import os

os.environ.setdefault("LOGFIRE_IGNORE_NO_CONFIG", "1")

import asyncio
import time
from pathlib import Path
from typing import Optional

import typer

from content_to_reader import __version__
from content_to_reader.constants import DEFAULT_CONFIG_FILENAME
from content_to_reader.errors import ContentToReaderError
from content_to_reader.logging_config import setup_logfire
from content_to_reader.models.config_models import PageSpec
from content_to_reader.services.configuration import ConfigurationParser
from content_to_reader.services.example_config import generate_example_config_file
from content_to_reader.services.pipeline import create_reader_file

app = typer.Typer(
    name="content-to-reader",
    help="CLI utility for creating EPUBs from WWW pages.",
    no_args_is_help=True,
)


def _info(message: str) -> None:
    typer.echo(typer.style(message, fg=typer.colors.BLUE, bold=True))


def _error(message: str) -> None:
    typer.echo(typer.style(message, fg=typer.colors.RED, bold=True), err=True)


def _default_output() -> str:
    return f"./content-to-reader-{int(time.time() * 1000)}.epub"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def _main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version."
    ),
) -> None:
    """CLI utility for creating EPUBs from WWW pages."""
    setup_logfire()


@app.command()
def create(
    url: Optional[str] = typer.Argument(None, help="Website URL."),
    output: Optional[str] = typer.Option(None, "-o", "--output", help="Output location."),
    config: Optional[Path] = typer.Option(None, "-c", "--config", help="Config file path."),
) -> None:
    """Create EPUB from a single URL or pass a configuration file."""
    _info(f"Started content-to-reader version {__version__}...")
    try:
        if config is not None:
            _info("Parsing config...")
            configuration = asyncio.run(ConfigurationParser(config).get())
            pages = configuration.pages
            selected_output = configuration.output
            to_device = configuration.to_device
        else:
            pages = [PageSpec(url=url)] if url else []
            selected_output = output or _default_output()
            to_device = None

        result = asyncio.run(
            create_reader_file(
                pages,
                output=selected_output,
                to_device=to_device,
                on_progress=_info,
            )
        )
    except ContentToReaderError as e:
        _error(str(e))
        raise typer.Exit(1)

    if result.delivery_error:
        _error(result.delivery_error)
        raise typer.Exit(1)
    typer.echo(typer.style("Finished successfully!", fg=typer.colors.GREEN, bold=True))


@app.command("get-config")
def get_config(
    output_path: Optional[str] = typer.Argument(None, help="Output filename or path."),
) -> None:
    """Generate example configuration file used to create EPUBs."""
    _info("Generating config file...")
    try:
        destination = asyncio.run(
            generate_example_config_file(output_path or DEFAULT_CONFIG_FILENAME)
        )
    except OSError as e:
        _error(f"Can't write config file: {e.strerror or e}")
        raise typer.Exit(1)
    typer.echo(typer.style("Config file created!", fg=typer.colors.GREEN, bold=True))
    typer.echo(
        f"Open and edit config file then run 'content-to-reader create -c {destination}'"
    )


if __name__ == "__main__":
    app()
