# ABOUTME: Per-user reading position storage, one row per (user, book).
# ABOUTME: Positions are opaque strings: an EPUB CFI or a page number for PDFs and comics.

import sqlite3
from dataclasses import dataclass


@dataclass(frozen=True)
class ProgressRecord:
    """Where a user last stopped reading a book."""

    user_id: str
    book_id: str
    position: str
    updated_at: str


def _row_to_progress(row: sqlite3.Row) -> ProgressRecord:
    return ProgressRecord(
        user_id=row["user_id"],
        book_id=row["book_id"],
        position=row["position"],
        updated_at=row["updated_at"],
    )


class ReadingProgressStore:
    """Typed access to the reading_progress table."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def save(self, user_id: str, book_id: str, position: str) -> ProgressRecord:
        """Insert or replace a user's position in a book.

        On conflict both position and updated_at are refreshed.

        Raises:
            ValueError: If position is empty or the book does not exist.
        """
        if not position:
            raise ValueError("position must not be empty")

        try:
            with self._conn:
                self._conn.execute(
                    "INSERT INTO reading_progress (user_id, book_id, position, updated_at) "
                    "VALUES (?, ?, ?, strftime('%Y-%m-%dT%H:%M:%f', 'now')) "
                    "ON CONFLICT(user_id, book_id) DO UPDATE SET "
                    "position = excluded.position, "
                    "updated_at = excluded.updated_at",
                    (user_id, book_id, position),
                )
        except sqlite3.IntegrityError as exc:
            raise ValueError(f"Book with id {book_id} not found") from exc

        record = self.get(user_id, book_id)
        assert record is not None
        return record

    def get(self, user_id: str, book_id: str) -> ProgressRecord | None:
        """Return the saved position, or None if the user never opened the book."""
        cursor = self._conn.execute(
            "SELECT * FROM reading_progress WHERE user_id = ? AND book_id = ?",
            (user_id, book_id),
        )
        row = cursor.fetchone()
        return _row_to_progress(row) if row else None

    def list_for_user(self, user_id: str) -> list[ProgressRecord]:
        """All of a user's positions, most recently updated first."""
        cursor = self._conn.execute(
            "SELECT * FROM reading_progress WHERE user_id = ? ORDER BY updated_at DESC",
            (user_id,),
        )
        return [_row_to_progress(row) for row in cursor.fetchall()]
