# ABOUTME: CLI package for Librarium, built on Click.
# ABOUTME: Defines the root command group, logging setup, and registers subcommands.

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from librarium.cli.commands import (
    import_cmd,
    info_cmd,
    ls_cmd,
    progress_cmd,
    rm_cmd,
    search_cmd,
    watch_cmd,
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@click.group()
@click.version_option(package_name="librarium")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Show debug logging.")
def cli(verbose: bool) -> None:
    """Librarium - a self-hosted library that catalogs and deduplicates your books."""
    _configure_logging(verbose)


cli.add_command(import_cmd.import_command)
cli.add_command(info_cmd.info)
cli.add_command(ls_cmd.ls)
cli.add_command(progress_cmd.progress)
cli.add_command(rm_cmd.rm)
cli.add_command(search_cmd.search)
cli.add_command(watch_cmd.watch)
