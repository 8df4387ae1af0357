# ABOUTME: The `librarium watch` command that imports files dropped into an inbox folder.
# ABOUTME: Runs the watchdog-based InboxWatcher until interrupted.

import time
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
from librarium.core.watcher import InboxWatcher
from librarium.db.connection import DEFAULT_DB_PATH

console = Console()


@click.command("watch")
@click.argument("inbox", type=click.Path(file_okay=False, path_type=Path))
@collection_option
@db_option
@storage_root_option
@covers_root_option
@click.option(
    "--stability",
    type=click.FloatRange(min=0.0),
    default=2.0,
    show_default=True,
    help="Seconds a file's size must stay unchanged before it is imported.",
)
def watch(
    inbox: Path,
    collection_id: str,
    db_path: Path | None,
    storage_root: Path,
    covers_root: Path,
    stability: float,
) -> None:
    """Import every book file that appears in INBOX, then remove it from INBOX."""
    config = build_config(storage_root, covers_root, collection_id)
    watcher = InboxWatcher(
        inbox,
        collection_id,
        db_path or DEFAULT_DB_PATH,
        config,
        stability_seconds=stability,
    )

    console.print(f"Watching [bold]{inbox}[/bold] (Ctrl+C to stop)")
    with watcher:
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            console.print("\nStopped.")
