# ABOUTME: Shared Click options for Librarium CLI commands.
# ABOUTME: Database and storage locations, each overridable through an environment variable.

from pathlib import Path

import click

from librarium.config import DEFAULT_COVERS_ROOT, DEFAULT_STORAGE_ROOT, LibraryConfig
from librarium.db.connection import DEFAULT_DB_PATH

db_option = click.option(
    "--db",
    "db_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    envvar="LIBRARIUM_DB",
    help=f"Path to library database (default: {DEFAULT_DB_PATH})",
)

storage_root_option = click.option(
    "--storage-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEFAULT_STORAGE_ROOT,
    envvar="LIBRARIUM_BOOKS_PATH",
    show_default=True,
    help="Directory where imported books are stored.",
)

covers_root_option = click.option(
    "--covers-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEFAULT_COVERS_ROOT,
    envvar="LIBRARIUM_COVERS_PATH",
    show_default=True,
    help="Directory where cover thumbnails are written.",
)

collection_option = click.option(
    "-c", "--collection",
    "collection_id",
    required=True,
    help="Collection the books are imported into.",
)


def build_config(storage_root: Path, covers_root: Path, collection_id: str) -> LibraryConfig:
    """Build the pipeline configuration, rejecting unusable collection ids early."""
    config = LibraryConfig(storage_root=storage_root, covers_root=covers_root)
    try:
        config.collection_dir(collection_id)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="'--collection'") from exc
    return config
