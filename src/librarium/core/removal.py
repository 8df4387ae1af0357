# ABOUTME: Deletes a cataloged book and, best-effort, its stored file and cover.
# ABOUTME: The row delete cascades to the search index and reading progress.

import logging

from librarium.core.storage import discard
from librarium.db.catalog import LibraryCatalog
from librarium.db.mapping import BookRecord

logger = logging.getLogger(__name__)


def delete_book(catalog: LibraryCatalog, book_id: str) -> BookRecord:
    """Remove a book from the catalog and from disk.

    The catalog row goes first so no row ever points at a missing file;
    leftover files after a failed unlink are only logged.

    Returns:
        The record that was deleted.

    Raises:
        ValueError: If the book does not exist.
    """
    record = catalog.get_by_id(book_id)
    if record is None:
        raise ValueError(f"Book with id {book_id} not found")

    catalog.delete_book(book_id)
    discard(record.file_path)
    discard(record.cover_path)

    logger.info("Deleted book %s (%s)", record.id, record.title)
    return record
