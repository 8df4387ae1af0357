# ABOUTME: The `librarium info` command for displaying a single book's catalog entry.
# ABOUTME: Shows all stored fields for a book by ID.

from contextlib import closing
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from librarium.cli.options import db_option
from librarium.db.catalog import LibraryCatalog
from librarium.db.connection import DEFAULT_DB_PATH, open_library

console = Console()


@click.command("info")
@click.argument("book_id")
@db_option
def info(book_id: str, db_path: Path | None) -> None:
    """Show detailed metadata for a book by ID."""
    with closing(open_library(db_path or DEFAULT_DB_PATH)) as conn:
        record = LibraryCatalog(conn).get_by_id(book_id)

    if record is None:
        console.print(f"[red]Book {book_id} not found.[/red]")
        raise SystemExit(1)

    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Field", style="bold", width=14)
    table.add_column("Value", overflow="fold")

    table.add_row("ID", record.id)
    table.add_row("Title", record.title)
    table.add_row("Author", record.author or "unknown")
    table.add_row("Format", record.format.value)
    table.add_row("Collection", record.collection_id)
    if record.language:
        table.add_row("Language", record.language)
    if record.isbn:
        table.add_row("ISBN", record.isbn)
    if record.published_at:
        table.add_row("Published", record.published_at)
    if record.page_count is not None:
        table.add_row("Pages", str(record.page_count))
    if record.description:
        table.add_row("Description", record.description)
    if record.series:
        idx = record.series_index
        table.add_row("Series", f"{record.series} #{idx:g}" if idx is not None else record.series)
    if record.tags:
        table.add_row("Tags", ", ".join(record.tags))
    table.add_row("File", str(record.file_path))
    if record.file_size is not None:
        table.add_row("Size", f"{record.file_size} bytes")
    table.add_row("Cover", str(record.cover_path) if record.cover_path else "none")
    table.add_row("Hash", record.content_hash)
    table.add_row("Added", record.created_at)

    console.print(table)
