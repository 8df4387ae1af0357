# ABOUTME: The `librarium import` command for cataloging local book files.
# ABOUTME: Stages each file, runs the import pipeline, and prints an added/skipped/error summary.

from contextlib import closing
from pathlib import Path

import click
from rich.console import Console

from librarium.cli.options import (
    build_config,
    collection_option,
    covers_root_option,
    db_option,
    storage_root_option,
)
from librarium.core.importer import BookImporter, find_book_files, import_paths
from librarium.db.catalog import LibraryCatalog
from librarium.db.connection import DEFAULT_DB_PATH, open_library

console = Console()


def _collect_files(paths: tuple[Path, ...]) -> list[Path]:
    files: list[Path] = []
    for path in paths:
        files.extend(find_book_files(path) if path.is_dir() else [path])
    return files


@click.command("import")
@click.argument(
    "paths",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, path_type=Path),
)
@collection_option
@db_option
@storage_root_option
@covers_root_option
def import_command(
    paths: tuple[Path, ...],
    collection_id: str,
    db_path: Path | None,
    storage_root: Path,
    covers_root: Path,
) -> None:
    """Import book files (or directories of them) into a collection.

    Originals are left in place; the library keeps its own copy.
    """
    config = build_config(storage_root, covers_root, collection_id)
    files = _collect_files(paths)

    if not files:
        console.print("[yellow]No book files found.[/yellow]")
        return

    console.print(f"Found [bold]{len(files)}[/bold] file(s)\n")

    with closing(open_library(db_path or DEFAULT_DB_PATH)) as conn:
        importer = BookImporter(LibraryCatalog(conn), config)
        summary = import_paths(importer, collection_id, files)

    parts = []
    if summary.added:
        parts.append(f"[green]{summary.added} added[/green]")
    if summary.skipped:
        parts.append(f"[yellow]{summary.skipped} skipped (duplicate)[/yellow]")
    if summary.errors:
        parts.append(f"[red]{summary.errors} error(s)[/red]")

    console.print(", ".join(parts))

    if summary.error_details:
        console.print(f"\n[yellow]{summary.errors} file(s) could not be imported:[/yellow]")
        for path, msg in summary.error_details:
            console.print(f"  [dim]{path.name}:[/dim] {msg}")

    if summary.errors and not (summary.added or summary.skipped):
        raise SystemExit(1)
