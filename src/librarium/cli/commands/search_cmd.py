# ABOUTME: The `librarium search` command for full-text search of the catalog.
# ABOUTME: Searches title, author, description, tags, and series using SQLite FTS5.

import sqlite3
from contextlib import closing
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from librarium.cli.options import db_option
from librarium.db.catalog import LibraryCatalog
from librarium.db.connection import DEFAULT_DB_PATH, open_library

console = Console()


@click.command("search")
@click.argument("query")
@db_option
@click.option(
    "-c", "--collection",
    "collection_ids",
    multiple=True,
    help="Restrict results to a collection (repeatable).",
)
def search(query: str, db_path: Path | None, collection_ids: tuple[str, ...]) -> None:
    """Search the library catalog by title, author, description, tags, or series."""
    with closing(open_library(db_path or DEFAULT_DB_PATH)) as conn:
        catalog = LibraryCatalog(conn)
        try:
            results = catalog.search(query, list(collection_ids) or None)
        except sqlite3.OperationalError as exc:
            console.print(f"[red]Invalid search query:[/red] {exc}")
            raise SystemExit(1) from exc

    if not results:
        console.print("[yellow]No results found.[/yellow]")
        return

    table = Table()
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("Author")
    table.add_column("Format", width=6)

    for record in results:
        table.add_row(
            record.id,
            record.title,
            record.author or "[dim]unknown[/dim]",
            record.format.value,
        )

    console.print(table)
    console.print(f"\n[dim]{len(results)} result(s)[/dim]")
