# ABOUTME: The `librarium progress` command for reading or saving a reading position.
# ABOUTME: Positions are stored verbatim (EPUB CFI or page number).

from contextlib import closing
from pathlib import Path

import click
from rich.console import Console

from librarium.cli.options import db_option
from librarium.db.connection import DEFAULT_DB_PATH, open_library
from librarium.db.progress import ReadingProgressStore

console = Console()


@click.command("progress")
@click.argument("book_id")
@click.argument("position", required=False)
@click.option("-u", "--user", "user_id", required=True, help="User whose position this is.")
@db_option
def progress(book_id: str, position: str | None, user_id: str, db_path: Path | None) -> None:
    """Show a user's position in a book, or save POSITION when given."""
    with closing(open_library(db_path or DEFAULT_DB_PATH)) as conn:
        store = ReadingProgressStore(conn)
        if position is None:
            record = store.get(user_id, book_id)
        else:
            try:
                record = store.save(user_id, book_id, position)
            except ValueError as exc:
                console.print(f"[red]{exc}[/red]")
                raise SystemExit(1) from exc

    if record is None:
        console.print(f"[yellow]No saved position for {user_id} in {book_id}.[/yellow]")
        return

    console.print(f"{record.position} [dim](updated {record.updated_at})[/dim]")
