# ABOUTME: Unit tests for NewBook to row and row to BookRecord mapping.
# ABOUTME: Validates tag JSON serialization, path conversion and null handling.

import json
from pathlib import Path

from librarium.db.mapping import NewBook, new_book_to_row, row_to_record
from librarium.formats import BookFormat


def _new_book(**overrides: object) -> NewBook:
    values: dict = {
        "collection_id": "fiction",
        "title": "Dune",
        "format": BookFormat.EPUB,
        "file_path": Path("/lib/fiction/abc.epub"),
        "content_hash": "h" * 64,
    }
    values.update(overrides)
    return NewBook(**values)


class TestNewBookToRow:
    """Tests for new_book_to_row."""

    def test_basic_fields(self) -> None:
        """Enum and path fields are stored as strings."""
        row = new_book_to_row("abc", _new_book())
        assert row["id"] == "abc"
        assert row["format"] == "epub"
        assert row["file_path"] == "/lib/fiction/abc.epub"
        assert row["cover_path"] is None

    def test_tags_deduplicated_in_order(self) -> None:
        """Tags are stripped, emptied ones dropped, repeats removed."""
        row = new_book_to_row("abc", _new_book(tags=["sf", " classic ", "sf", ""]))
        assert json.loads(row["tags"]) == ["sf", "classic"]

    def test_no_tags_stored_as_null(self) -> None:
        """No tags is NULL rather than an empty JSON list."""
        assert new_book_to_row("abc", _new_book())["tags"] is None


class TestRowToRecord:
    """Tests for row_to_record."""

    def test_round_trip_through_dict_row(self) -> None:
        """A stored row converts back to the same typed fields."""
        row = new_book_to_row(
            "abc",
            _new_book(cover_path=Path("/covers/abc.jpg"), tags=["sf"], page_count=412),
        )
        row["created_at"] = "2024-01-01T00:00:00"

        record = row_to_record(row)

        assert record.id == "abc"
        assert record.format is BookFormat.EPUB
        assert record.file_path == Path("/lib/fiction/abc.epub")
        assert record.cover_path == Path("/covers/abc.jpg")
        assert record.tags == ["sf"]
        assert record.page_count == 412

    def test_null_tags_become_empty_list(self) -> None:
        """NULL tags read back as an empty list."""
        row = new_book_to_row("abc", _new_book())
        row["created_at"] = "2024-01-01T00:00:00"
        assert row_to_record(row).tags == []
