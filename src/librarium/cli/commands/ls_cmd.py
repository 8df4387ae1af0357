# ABOUTME: The `librarium ls` command for listing cataloged books.
# ABOUTME: Displays a Rich table of books, optionally limited to one collection.

from contextlib import closing
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from librarium.cli.options import db_option
from librarium.db.catalog import LibraryCatalog
from librarium.db.connection import DEFAULT_DB_PATH, open_library

console = Console()


@click.command("ls")
@db_option
@click.option(
    "-c", "--collection",
    "collection_id",
    default=None,
    help="Only list books in this collection.",
)
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Maximum rows to show.")
@click.option("--offset", type=click.IntRange(min=0), default=0, help="Rows to skip.")
def ls(db_path: Path | None, collection_id: str | None, limit: int | None, offset: int) -> None:
    """List books in the library catalog."""
    with closing(open_library(db_path or DEFAULT_DB_PATH)) as conn:
        catalog = LibraryCatalog(conn)
        if collection_id:
            records, total = catalog.list_by_collection(collection_id, limit=limit, offset=offset)
        else:
            records, total = catalog.list_all(limit=limit, offset=offset)

    if not records:
        console.print("[yellow]No books in the library.[/yellow]")
        return

    table = Table()
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("Author")
    table.add_column("Format", width=6)
    table.add_column("Collection")

    for record in records:
        table.add_row(
            record.id,
            record.title,
            record.author or "[dim]unknown[/dim]",
            record.format.value,
            record.collection_id,
        )

    console.print(table)
    console.print(f"\n[dim]{len(records)} of {total} book(s)[/dim]")
