# ABOUTME: The `librarium rm` command for deleting a book from the library.
# ABOUTME: Removes the catalog row, search entry, progress, stored file, and cover.

from contextlib import closing
from pathlib import Path

import click
from rich.console import Console

from librarium.cli.options import db_option
from librarium.core.removal import delete_book
from librarium.db.catalog import LibraryCatalog
from librarium.db.connection import DEFAULT_DB_PATH, open_library

console = Console()


@click.command("rm")
@click.argument("book_id")
@db_option
@click.option("-y", "--yes", is_flag=True, default=False, help="Do not ask for confirmation.")
def rm(book_id: str, db_path: Path | None, yes: bool) -> None:
    """Delete a book and its files by ID."""
    with closing(open_library(db_path or DEFAULT_DB_PATH)) as conn:
        catalog = LibraryCatalog(conn)
        record = catalog.get_by_id(book_id)
        if record is None:
            console.print(f"[red]Book {book_id} not found.[/red]")
            raise SystemExit(1)

        if not yes:
            click.confirm(f"Delete '{record.title}'?", abort=True)

        delete_book(catalog, book_id)

    console.print(f"[green]Deleted[/green] {record.title}")
