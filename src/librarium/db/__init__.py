# ABOUTME: Public API for the Librarium catalog database layer.
# ABOUTME: Exports connection management, catalog and progress repositories, and data types.

from librarium.db.catalog import (
    CatalogConflictError,
    DuplicateBookError,
    LibraryCatalog,
    new_book_id,
)
from librarium.db.connection import DEFAULT_DB_PATH, open_library
from librarium.db.hashing import compute_file_hash
from librarium.db.mapping import BookRecord, NewBook
from librarium.db.progress import ProgressRecord, ReadingProgressStore

__all__ = [
    "DEFAULT_DB_PATH",
    "BookRecord",
    "CatalogConflictError",
    "DuplicateBookError",
    "LibraryCatalog",
    "NewBook",
    "ProgressRecord",
    "ReadingProgressStore",
    "compute_file_hash",
    "new_book_id",
    "open_library",
]
