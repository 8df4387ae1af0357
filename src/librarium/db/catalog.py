# ABOUTME: Catalog repository for books: insert, lookup, listing, search and delete.
# ABOUTME: Enforces content-hash and file-path uniqueness and keeps the FTS index in the same transaction.

import sqlite3
import uuid
from collections.abc import Sequence

from librarium.db.mapping import BookRecord, NewBook, new_book_to_row, row_to_record


class CatalogConflictError(Exception):
    """Raised when an insert violates a uniqueness constraint of the catalog."""


class DuplicateBookError(CatalogConflictError):
    """Raised when attempting to add a book whose content_hash already exists."""

    def __init__(self, content_hash: str) -> None:
        super().__init__(f"Book with hash {content_hash} already exists")
        self.content_hash = content_hash


def new_book_id() -> str:
    """Generate an opaque, URL- and filename-safe book id."""
    return uuid.uuid4().hex


class LibraryCatalog:
    """Wraps a sqlite3 connection and provides typed access to the books table.

    Books are immutable once created: the only mutations are add_book and
    delete_book. The FTS5 shadow index is maintained by triggers, so it
    changes in the same transaction as the row it mirrors.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def add_book(self, book: NewBook, book_id: str | None = None) -> BookRecord:
        """Insert a book and its search-index entry as one atomic unit.

        Args:
            book: The row to insert.
            book_id: Id to use; generated when omitted. The importer passes
                the id it already used to name the stored file.

        Returns:
            The stored BookRecord, as read back from the database.

        Raises:
            DuplicateBookError: If a book with this content_hash already exists.
            CatalogConflictError: If another uniqueness constraint fails
                (e.g. the file_path is already cataloged).
        """
        row = new_book_to_row(book_id or new_book_id(), book)
        columns = ", ".join(row.keys())
        placeholders = ", ".join("?" for _ in row)

        try:
            with self._conn:
                self._conn.execute(
                    f"INSERT INTO books ({columns}) VALUES ({placeholders})",
                    list(row.values()),
                )
        except sqlite3.IntegrityError as exc:
            message = str(exc)
            if "books.content_hash" in message:
                raise DuplicateBookError(book.content_hash) from exc
            if "UNIQUE constraint failed" in message:
                raise CatalogConflictError(message) from exc
            raise

        record = self.get_by_id(row["id"])
        assert record is not None
        return record

    def get_by_id(self, book_id: str) -> BookRecord | None:
        """Retrieve a book by its id."""
        cursor = self._conn.execute("SELECT * FROM books WHERE id = ?", (book_id,))
        row = cursor.fetchone()
        return row_to_record(row) if row else None

    def get_by_hash(self, content_hash: str) -> BookRecord | None:
        """Retrieve a book by its content hash."""
        cursor = self._conn.execute(
            "SELECT * FROM books WHERE content_hash = ?", (content_hash,)
        )
        row = cursor.fetchone()
        return row_to_record(row) if row else None

    def count(self) -> int:
        """Total number of books in the catalog."""
        return self._conn.execute("SELECT COUNT(*) FROM books").fetchone()[0]

    def list_by_collection(
        self, collection_id: str, *, limit: int | None = None, offset: int = 0,
    ) -> tuple[list[BookRecord], int]:
        """Return one page of a collection's books ordered by title, plus the total."""
        return self.list_all([collection_id], limit=limit, offset=offset)

    def list_all(
        self,
        collection_ids: Sequence[str] | None = None,
        *,
        limit: int | None = None,
        offset: int = 0,
    ) -> tuple[list[BookRecord], int]:
        """Return one page of books ordered by title, plus the unpaged total.

        Args:
            collection_ids: Restrict to these collections. None means every
                collection; an empty sequence matches nothing.
            limit: Page size; None returns everything after offset.
            offset: Rows to skip.
        """
        if collection_ids is not None and len(collection_ids) == 0:
            return [], 0

        where = ""
        params: list[object] = []
        if collection_ids is not None:
            where = f" WHERE collection_id IN ({', '.join('?' for _ in collection_ids)})"
            params.extend(collection_ids)

        total = self._conn.execute(f"SELECT COUNT(*) FROM books{where}", params).fetchone()[0]

        cursor = self._conn.execute(
            f"SELECT * FROM books{where} ORDER BY title COLLATE NOCASE, id LIMIT ? OFFSET ?",
            [*params, -1 if limit is None else limit, offset],
        )
        return [row_to_record(row) for row in cursor.fetchall()], total

    def search(
        self, query: str, collection_ids: Sequence[str] | None = None,
    ) -> list[BookRecord]:
        """Full-text search across title, author, description, tags, and series.

        Uses FTS5 MATCH syntax. Results are ranked by relevance (FTS5 rank).

        Args:
            query: Search terms to match against indexed fields.
            collection_ids: Restrict results to these collections when given.

        Returns:
            List of matching BookRecords, best matches first.
        """
        if collection_ids is not None and len(collection_ids) == 0:
            return []

        sql = (
            "SELECT books.* FROM books "
            "JOIN books_fts ON books.rowid = books_fts.rowid "
            "WHERE books_fts MATCH ?"
        )
        params: list[object] = [query]
        if collection_ids is not None:
            sql += f" AND books.collection_id IN ({', '.join('?' for _ in collection_ids)})"
            params.extend(collection_ids)
        sql += " ORDER BY books_fts.rank"

        cursor = self._conn.execute(sql, params)
        return [row_to_record(row) for row in cursor.fetchall()]

    def delete_book(self, book_id: str) -> None:
        """Delete a book; its index entry and reading progress go with it.

        Raises:
            ValueError: If the book_id does not exist.
        """
        with self._conn:
            cursor = self._conn.execute("DELETE FROM books WHERE id = ?", (book_id,))

        if cursor.rowcount == 0:
            raise ValueError(f"Book with id {book_id} not found")
