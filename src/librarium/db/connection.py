# ABOUTME: SQLite connection management for the Librarium catalog.
# ABOUTME: Opens or creates the database, applies schema and migrations, configures WAL.

import sqlite3
from pathlib import Path

from librarium.config import DEFAULT_DATA_DIR
from librarium.db.schema import MIGRATIONS, SCHEMA_V1

DEFAULT_DB_PATH = DEFAULT_DATA_DIR / "library.db"

# Seconds a writer waits on a locked database before giving up
_BUSY_TIMEOUT = 30.0


def _schema_exists(conn: sqlite3.Connection) -> bool:
    """Check if the schema has already been applied."""
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='schema_version'"
    )
    return cursor.fetchone() is not None


def _get_schema_version(conn: sqlite3.Connection) -> int:
    """Read the current schema version from the database."""
    cursor = conn.execute("SELECT MAX(version) FROM schema_version")
    row = cursor.fetchone()
    return row[0] if row and row[0] is not None else 0


def _apply_migrations(conn: sqlite3.Connection) -> None:
    """Apply every migration newer than the database's schema version, in order."""
    current = _get_schema_version(conn)
    for version, sql in MIGRATIONS:
        if version > current:
            conn.executescript(sql)


def open_library(path: Path | None = None) -> sqlite3.Connection:
    """Open or create the Librarium catalog database.

    Creates the file and parent directories if needed, applies the schema on
    first use and any pending migrations afterwards. Enables WAL so readers
    don't block the importer, and foreign keys so progress rows cascade.

    Each concurrent caller (request handler, watcher event) should open its
    own connection.

    Args:
        path: Database file. Defaults to ~/.librarium/library.db.

    Returns:
        A configured sqlite3.Connection with sqlite3.Row rows.
    """
    db_path = path or DEFAULT_DB_PATH
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path), timeout=_BUSY_TIMEOUT)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")

    if not _schema_exists(conn):
        conn.executescript(SCHEMA_V1)

    _apply_migrations(conn)

    return conn
